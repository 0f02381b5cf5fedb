"""
Permission decorators for function-based views.
"""
from functools import wraps

from rest_framework import status

from erp_project.response_formatter import error_response

from .core_config import Action, Permission
from .services import user_can_perform_action

METHOD_ACTIONS = {
    'GET': Action.VIEW,
    'HEAD': Action.VIEW,
    'OPTIONS': Action.VIEW,
    'POST': Action.CREATE,
    'PUT': Action.UPDATE,
    'PATCH': Action.UPDATE,
    'DELETE': Action.DELETE,
}


def require_permission(resource, action=None):
    """
    Decorator to check resource-action permissions for function-based views.

    Args:
        resource: a core_config.Resource member
        action: the Action to check. If None, derived from the HTTP method

    Usage:
        @api_view(['GET', 'POST'])
        @require_permission(Resource.VENDORS)
        def vendor_list(request):
            # GET = view, POST = create
            ...

        @api_view(['POST'])
        @require_permission(Resource.VENDORS, Action.UPDATE)
        def vendor_settle_payment(request, pk):
            ...

    The pair is validated when the decorator is applied, so a typo in a
    resource or action fails at import time.
    """
    if action is not None:
        Permission(resource, action)

    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if not request.user or not request.user.is_authenticated:
                return error_response(
                    message='Authentication required',
                    status_code=status.HTTP_401_UNAUTHORIZED
                )

            determined_action = action or METHOD_ACTIONS[request.method]
            allowed, reason = user_can_perform_action(request.user, resource, determined_action)

            if not allowed:
                return error_response(
                    message=f'Permission denied: {reason}',
                    data={
                        'required_permission': {
                            'resource': str(resource),
                            'action': str(determined_action)
                        }
                    },
                    status_code=status.HTTP_403_FORBIDDEN
                )

            return view_func(request, *args, **kwargs)

        wrapper.resource = resource
        wrapper.action = action
        return wrapper
    return decorator
