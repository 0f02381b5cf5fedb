from rest_framework import serializers

from core.permissions.core_config import Role, UnknownPermissionError
from core.permissions.services import (
    get_effective_permissions,
    merge_permissions,
    permissions_to_map,
)
from .models import CustomUser


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})


class UserProfileSerializer(serializers.ModelSerializer):
    """Profile of the signed-in user, including the effective permission map."""
    effective_permissions = serializers.SerializerMethodField()

    class Meta:
        model = CustomUser
        fields = [
            'id', 'email', 'name', 'phone_number', 'role',
            'effective_permissions', 'last_login', 'date_joined'
        ]
        read_only_fields = ['id', 'email', 'role', 'last_login', 'date_joined']

    def get_effective_permissions(self, obj):
        return permissions_to_map(get_effective_permissions(obj))


class UserPermissionsSerializer(serializers.ModelSerializer):
    """Admin-side update of a user's role and stored permission map."""
    effective_permissions = serializers.SerializerMethodField()

    class Meta:
        model = CustomUser
        fields = ['id', 'email', 'name', 'role', 'permissions', 'effective_permissions']
        read_only_fields = ['id', 'email', 'name']

    def get_effective_permissions(self, obj):
        return permissions_to_map(get_effective_permissions(obj))

    def validate_permissions(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("Permissions must be an object")
        try:
            merge_permissions(value)
        except UnknownPermissionError as exc:
            raise serializers.ValidationError(str(exc))
        return value

    def validate_role(self, value):
        user = self.instance
        if (
            user is not None and user.is_admin() and value != Role.ADMIN and
            not CustomUser.objects.filter(role=Role.ADMIN).exclude(pk=user.pk).exists()
        ):
            raise serializers.ValidationError("Cannot demote the last admin user")
        return value
