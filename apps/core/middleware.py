"""
Request middleware for the Vlaams Woordenboek.

RequestIDMiddleware generates and propagates unique request IDs for tracing:
- Accepts incoming X-Request-ID header (UUID format only)
- Generates a UUID-based request ID otherwise
- Adds request ID to response headers
- Injects request ID into thread-local logging context

LastSeenMiddleware records when an authenticated user was last active.

Usage:
    Add to MIDDLEWARE in settings:

    MIDDLEWARE = [
        ...
        'apps.core.middleware.RequestIDMiddleware',
        'apps.core.middleware.LastSeenMiddleware',
        ...
    ]

Access request ID in views:
    from apps.core.middleware import get_request_id

    def my_view(request):
        request_id = get_request_id()
        # or
        request_id = request.request_id
"""

import uuid
import threading
import logging
from datetime import timedelta

from django.utils import timezone
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)

# Thread-local storage for request context
_request_context = threading.local()

# Minimum interval between two last-seen writes for the same user
LAST_SEEN_INTERVAL = timedelta(minutes=5)


def get_request_id():
    """
    Get the current request ID from thread-local storage.

    Returns None if called outside of a request context.
    """
    return getattr(_request_context, 'request_id', None)


def clear_request_context():
    """Clear request context from thread-local storage."""
    _request_context.request_id = None
    _request_context.user_id = None
    _request_context.path = None


class RequestIDMiddleware(MiddlewareMixin):
    """
    Middleware to handle request IDs for tracing.

    Flow:
    1. Check for incoming X-Request-ID header
    2. Generate new UUID if not present or malformed
    3. Store in thread-local for access in views/logging
    4. Attach to request object as request.request_id
    5. Add to response headers
    """

    REQUEST_ID_HEADER = 'HTTP_X_REQUEST_ID'
    RESPONSE_HEADER = 'X-Request-ID'

    def process_request(self, request):
        """Extract or generate request ID."""
        request_id = request.META.get(self.REQUEST_ID_HEADER)

        if request_id:
            try:
                uuid.UUID(request_id)
            except (ValueError, TypeError):
                request_id = str(uuid.uuid4())
        else:
            request_id = str(uuid.uuid4())

        _request_context.request_id = request_id
        _request_context.path = request.path

        if hasattr(request, 'user') and request.user.is_authenticated:
            _request_context.user_id = str(request.user.id)
        else:
            _request_context.user_id = None

        request.request_id = request_id

        return None

    def process_response(self, request, response):
        """Add request ID to response headers."""
        request_id = getattr(request, 'request_id', None)

        if request_id:
            response[self.RESPONSE_HEADER] = request_id

        clear_request_context()

        return response


class LastSeenMiddleware(MiddlewareMixin):
    """
    Track Profile.last_seen_at for authenticated users.

    Writes at most once per LAST_SEEN_INTERVAL per user.
    Must run after AuthenticationMiddleware.
    """

    def process_request(self, request):
        user = getattr(request, 'user', None)
        if not user or not user.is_authenticated:
            return None

        from apps.core.models import Profile

        now = timezone.now()
        Profile.objects.filter(user=user).exclude(
            last_seen_at__gt=now - LAST_SEEN_INTERVAL,
        ).update(last_seen_at=now)
        return None


class RequestIDFilter(logging.Filter):
    """
    Logging filter that adds request_id to log records.

    Usage in LOGGING config:

    LOGGING = {
        'filters': {
            'request_id': {
                '()': 'apps.core.middleware.RequestIDFilter',
            },
        },
        'formatters': {
            'verbose': {
                'format': '[{request_id}] {levelname} {name} {message}',
                'style': '{',
            },
        },
    }
    """

    def filter(self, record):
        """Add request_id to log record."""
        record.request_id = get_request_id() or '-'
        return True
