"""
Role decorators for function-based views.
"""
from functools import wraps
from rest_framework.response import Response
from rest_framework import status


def require_role(*roles, methods=None):
    """
    Restrict a view to users holding one of ``roles``.

    Args:
        roles: UserRole values allowed through
        methods: HTTP methods the check applies to. None means every method.

    Usage:
        # Anybody may read, only HR/Admin may write
        @api_view(['GET', 'POST'])
        @require_role(UserRole.HR, UserRole.ADMIN, methods=['POST'])
        def skill_list(request):
            ...
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if not request.user.is_authenticated:
                return Response(
                    {'error': 'Authentication required'},
                    status=status.HTTP_401_UNAUTHORIZED
                )

            if methods is not None and request.method not in methods:
                return view_func(request, *args, **kwargs)

            if request.user.role not in roles:
                return Response(
                    {
                        'error': 'Permission denied',
                        'detail': f'Requires role: {", ".join(str(r) for r in roles)}',
                    },
                    status=status.HTTP_403_FORBIDDEN
                )

            return view_func(request, *args, **kwargs)

        wrapper.required_roles = roles
        return wrapper
    return decorator
