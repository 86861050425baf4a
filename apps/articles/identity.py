"""
Identity providers: who is performing an edit.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class IdentityProvider(ABC):
    """Supplies the identifier of the currently authenticated editor."""

    @abstractmethod
    def current_user_id(self) -> Optional[Any]:
        pass


class RequestIdentityProvider(IdentityProvider):
    """Reads the user from a Django/DRF request."""

    def __init__(self, request):
        self.request = request

    def current_user_id(self):
        user = getattr(self.request, 'user', None)
        if user is None or not user.is_authenticated:
            return None
        return user.pk


class StaticIdentityProvider(IdentityProvider):
    """Fixed identity, for management commands and tests."""

    def __init__(self, user_id=None):
        self.user_id = user_id

    def current_user_id(self):
        return self.user_id
