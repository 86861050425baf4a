"""
Rate Limiting / Throttling for the Vlaams Woordenboek.

Custom DRF throttle classes for different endpoint types.

Usage in views:
    from apps.core.throttling import SuggestionThrottle

    class SuggestionView(APIView):
        throttle_classes = [SuggestionThrottle]

Usage in settings:
    REST_FRAMEWORK = {
        'DEFAULT_THROTTLE_RATES': {
            'suggestion': '15/minute',
            'burst': '100/minute',
            'state_change': '30/minute',
        }
    }
"""

from django.core.exceptions import ImproperlyConfigured
from rest_framework.throttling import UserRateThrottle, SimpleRateThrottle
import logging

logger = logging.getLogger(__name__)


class SuggestionThrottle(SimpleRateThrottle):
    """
    Throttle for word suggestions, keyed on the client IP for every caller.

    Applies to:
    - POST /api/dictionary/suggestions/

    Default: 15 requests/minute
    """
    scope = 'suggestion'

    def get_rate(self):
        try:
            return super().get_rate()
        except ImproperlyConfigured:
            return '15/minute'

    def get_cache_key(self, request, view):
        return self.cache_format % {
            'scope': self.scope,
            'ident': self.get_ident(request),
        }

    def throttle_failure(self):
        logger.warning("Suggestion rate limit reached")
        return False


class BurstThrottle(UserRateThrottle):
    """
    Burst throttle to prevent rapid-fire requests.

    Default: 100 requests/minute
    """
    scope = 'burst'

    def get_rate(self):
        try:
            return super().get_rate()
        except ImproperlyConfigured:
            return '100/minute'


class StateChangeThrottle(UserRateThrottle):
    """
    Throttle for review workflow transitions and edits.

    Applies to:
    - POST /api/articles/{id}/transitions/{name}/
    - PATCH /api/articles/{id}/

    Default: 30 requests/minute
    """
    scope = 'state_change'

    def get_rate(self):
        try:
            return super().get_rate()
        except ImproperlyConfigured:
            return '30/minute'

