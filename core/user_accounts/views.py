"""
API Views for authentication and the signed-in user's account.
"""
import logging

from django.contrib.auth import authenticate
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework_simplejwt.tokens import RefreshToken

from core.base.exceptions import NotFoundError
from erp_project.response_formatter import success_response, error_response
from .models import CustomUser
from .serializers import LoginSerializer, UserPermissionsSerializer, UserProfileSerializer

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """
    Public endpoint for user login.
    Authenticates user and returns JWT tokens.

    POST /auth/login/
    - Request body: { "email": "...", "password": "..." }
    - Returns: User profile and JWT tokens
    """
    serializer = LoginSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response(
            message="Please provide both email and password",
            data=serializer.errors,
            status_code=status.HTTP_400_BAD_REQUEST
        )

    user = authenticate(
        request,
        username=serializer.validated_data['email'],
        password=serializer.validated_data['password']
    )
    if user is None:
        logger.warning("Failed login for %s", serializer.validated_data['email'])
        return error_response(
            message="Invalid credentials",
            status_code=status.HTTP_401_UNAUTHORIZED
        )

    refresh = RefreshToken.for_user(user)
    return success_response(
        data={
            'user': UserProfileSerializer(user).data,
            'tokens': {
                'refresh': str(refresh),
                'access': str(refresh.access_token)
            }
        },
        message="Login successful"
    )


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def me(request):
    """
    Get or update the signed-in user's profile.

    GET   /accounts/me/
    PATCH /accounts/me/  { "name", "phone_number" }
    """
    if request.method == 'GET':
        return success_response(data=UserProfileSerializer(request.user).data)

    serializer = UserProfileSerializer(request.user, data=request.data, partial=True)
    if not serializer.is_valid():
        return error_response(
            message="Profile update failed",
            data=serializer.errors,
            status_code=status.HTTP_400_BAD_REQUEST
        )
    serializer.save()
    return success_response(data=serializer.data, message="Profile updated successfully")


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def user_permissions(request, user_id):
    """
    Admin endpoint for a user's role and stored permission map.

    GET   /accounts/users/<id>/permissions/
    PATCH /accounts/users/<id>/permissions/
    - Request body: { "role"?, "permissions"?: {"resources": {"vendors": {"view": true}}} }
    - Unknown resources or actions are rejected with 400
    """
    if not request.user.is_admin():
        return error_response(
            message="Admin privileges required",
            status_code=status.HTTP_403_FORBIDDEN
        )

    try:
        target_user = CustomUser.objects.get(pk=user_id)
    except CustomUser.DoesNotExist:
        raise NotFoundError('User', user_id)

    if request.method == 'GET':
        return success_response(data=UserPermissionsSerializer(target_user).data)

    serializer = UserPermissionsSerializer(target_user, data=request.data, partial=True)
    if not serializer.is_valid():
        return error_response(
            message="Permission update failed",
            data=serializer.errors,
            status_code=status.HTTP_400_BAD_REQUEST
        )
    serializer.save()
    logger.info(
        "User %s set role %s and permissions of user %s",
        request.user.pk, target_user.role, target_user.pk
    )
    return success_response(data=serializer.data, message="Permissions updated successfully")
