from rest_framework.permissions import BasePermission


def get_user_role(user):
    """
    Role used for access checks.
    Returns None for anonymous users; superusers count as admin.
    """
    if not user or not user.is_authenticated:
        return None
    return getattr(user, 'effective_role', None) or ('admin' if user.is_superuser else None)


def has_role(user, *roles):
    return get_user_role(user) in roles


class HasRole(BasePermission):
    """
    Allows access to authenticated users whose role is in ``allowed_roles``.

    Anonymous requests fail authentication (401); authenticated users with
    any other role are forbidden (403).
    """
    allowed_roles = ()
    message = 'You do not have permission to access this resource.'

    def has_permission(self, request, view):
        return has_role(request.user, *self.allowed_roles)


class IsAdminRole(HasRole):
    allowed_roles = ('admin',)
    message = 'Admin access required.'


class IsManagerOrAdmin(HasRole):
    allowed_roles = ('admin', 'manager')


class IsSponsorOrAdmin(HasRole):
    allowed_roles = ('admin', 'sponsor')
    message = 'Sponsor or admin access required.'


class IsAdminOrCreateOnly(IsAdminRole):
    """Anyone may POST; every other method needs the admin role"""

    def has_permission(self, request, view):
        if request.method == 'POST':
            return True
        return super().has_permission(request, view)
