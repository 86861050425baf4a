"""
Role-Based Permissions for the Vlaams Woordenboek.

Maps Profile.user_type to DRF permission classes.

Roles:
- normal: may browse, like, report and suggest words
- editor: may edit articles and drive the review workflow
- administrator: editor rights plus moderation (bans)

Usage:
    from apps.core.permissions import IsEditor, ForbidBannedUser

    class MyView(APIView):
        permission_classes = [IsAuthenticated, ForbidBannedUser, IsEditor]
"""

from rest_framework.permissions import BasePermission
import logging

logger = logging.getLogger(__name__)


def get_profile(user):
    """Return the user's Profile, or None for anonymous users or missing profiles."""
    if not user or not user.is_authenticated:
        return None

    from apps.core.models import Profile
    try:
        return Profile.objects.get(user=user)
    except Profile.DoesNotExist:
        return None


def get_user_type(user):
    """
    Helper function to get user's role.

    Returns: 'normal', 'editor' or 'administrator' (None when anonymous)
    """
    if not user or not user.is_authenticated:
        return None

    if user.is_superuser:
        return 'administrator'

    profile = get_profile(user)
    return profile.user_type if profile else 'normal'


def has_role(user, required_role):
    """
    Check if user has at least the required role level.

    Role hierarchy: administrator > editor > normal
    """
    role_levels = {
        'normal': 1,
        'editor': 2,
        'administrator': 3,
    }

    user_type = get_user_type(user)
    if not user_type:
        return False

    return role_levels.get(user_type, 0) >= role_levels.get(required_role, 0)


class RolePermission(BasePermission):
    """Base class for role-based permissions."""

    # Override in subclasses
    required_role = None

    def has_permission(self, request, view):
        """Check if user has required role."""
        if not request.user or not request.user.is_authenticated:
            return False
        return has_role(request.user, self.required_role)


class IsEditor(RolePermission):
    """
    Allow access to editors and administrators.

    Editors can:
    - Edit dictionary articles
    - Submit, release, archive and return articles to draft
    - Follow up on article reports
    """
    required_role = 'editor'
    message = "Redacteur rechten vereist."


class IsAdministrator(RolePermission):
    """Allow access to administrators only."""
    required_role = 'administrator'
    message = "Administrator rechten vereist."


class ForbidBannedUser(BasePermission):
    """
    Refuse requests from banned accounts.

    Anonymous requests pass; combine with IsAuthenticated where needed.
    """
    message = "Dit account is geblokkeerd."
    code = 'account_banned'

    def has_permission(self, request, view):
        profile = get_profile(request.user)
        if profile is not None and profile.is_banned:
            logger.info(f"Refused request from banned user {request.user.pk}")
            return False
        return True
