from rest_framework.permissions import BasePermission

from ticketing.models import ManagerProfile


def _role(user) -> str | None:
    profile = getattr(user, "profile", None)
    return profile.role if profile is not None else None


class IsManager(BasePermission):
    """Managers and admins may use the back office."""

    message = "Manager access required."

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.is_superuser or _role(user) in (
            ManagerProfile.Role.MANAGER,
            ManagerProfile.Role.ADMIN,
        )


class IsAdmin(BasePermission):
    message = "Admin access required."

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.is_superuser or _role(user) == ManagerProfile.Role.ADMIN
