"""
Capability-based permissions for operator endpoints
"""
from rest_framework.permissions import BasePermission

from apps.accounts.models import Capability
from apps.core.exceptions import PermissionException


def RequiresCapability(capability: Capability):
    """
    Build a permission class admitting authenticated users holding `capability`.

    Anonymous callers are refused so DRF answers 401; authenticated callers
    without the capability get a PermissionException (403).
    """

    class _RequiresCapability(BasePermission):

        def has_permission(self, request, view):
            user = request.user
            if not (user and user.is_authenticated):
                return False
            if not user.has_capability(capability):
                raise PermissionException()
            return True

    _RequiresCapability.__name__ = f"Requires{capability.name.title().replace('_', '')}"
    return _RequiresCapability
