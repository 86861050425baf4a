"""
Tests for request ID propagation and last-seen tracking.
"""

import logging
import uuid
from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.http import HttpResponse
from django.utils import timezone

from apps.core.middleware import (
    LastSeenMiddleware,
    RequestIDFilter,
    RequestIDMiddleware,
    get_request_id,
)
from apps.core.models import Profile


User = get_user_model()


def ok_response(request):
    return HttpResponse('ok')


class TestRequestIDMiddleware:

    def test_generates_request_id(self, rf):
        request = rf.get('/livez/')
        request.user = AnonymousUser()

        response = RequestIDMiddleware(ok_response)(request)

        uuid.UUID(response['X-Request-ID'])
        assert response['X-Request-ID'] == request.request_id

    def test_keeps_valid_incoming_id(self, rf):
        incoming = str(uuid.uuid4())
        request = rf.get('/livez/', HTTP_X_REQUEST_ID=incoming)
        request.user = AnonymousUser()

        response = RequestIDMiddleware(ok_response)(request)

        assert response['X-Request-ID'] == incoming

    def test_replaces_malformed_incoming_id(self, rf):
        request = rf.get('/livez/', HTTP_X_REQUEST_ID='<script>')
        request.user = AnonymousUser()

        response = RequestIDMiddleware(ok_response)(request)

        assert response['X-Request-ID'] != '<script>'
        uuid.UUID(response['X-Request-ID'])

    def test_context_cleared_after_response(self, rf):
        request = rf.get('/livez/')
        request.user = AnonymousUser()

        RequestIDMiddleware(ok_response)(request)

        assert get_request_id() is None

    def test_log_filter_outside_request(self):
        record = logging.LogRecord('apps', logging.INFO, __file__, 1, 'msg', None, None)

        assert RequestIDFilter().filter(record)
        assert record.request_id == '-'


class TestLastSeenMiddleware:

    @pytest.mark.django_db
    def test_records_activity(self, rf):
        user = User.objects.create_user(username='lezer', password='pass12345')
        request = rf.get('/api/dictionary/')
        request.user = user

        LastSeenMiddleware(ok_response)(request)

        assert Profile.objects.get(user=user).last_seen_at is not None

    @pytest.mark.django_db
    def test_recent_activity_not_rewritten(self, rf):
        user = User.objects.create_user(username='lezer', password='pass12345')
        recent = timezone.now() - timedelta(minutes=1)
        Profile.objects.filter(user=user).update(last_seen_at=recent)
        request = rf.get('/api/dictionary/')
        request.user = user

        LastSeenMiddleware(ok_response)(request)

        assert Profile.objects.get(user=user).last_seen_at == recent

    @pytest.mark.django_db
    def test_stale_activity_refreshed(self, rf):
        user = User.objects.create_user(username='lezer', password='pass12345')
        stale = timezone.now() - timedelta(hours=1)
        Profile.objects.filter(user=user).update(last_seen_at=stale)
        request = rf.get('/api/dictionary/')
        request.user = user

        LastSeenMiddleware(ok_response)(request)

        assert Profile.objects.get(user=user).last_seen_at > stale
