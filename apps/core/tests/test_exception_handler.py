"""
Tests for the standardized error envelope.

Tests cover:
- Custom exceptions
- Review workflow errors mapped to 409/503
- DRF exceptions (auth, throttling) and headers
- Unhandled exceptions
"""

import uuid

from rest_framework import exceptions as drf_exceptions

from apps.articles.state_machine import (
    ArticleState,
    ConcurrentModification,
    InvalidStateTransition,
    PersistenceFailure,
    StateMachineError,
    Transition,
)
from apps.core.exceptions import (
    ErrorCode,
    NotFoundError,
    SpamDetectedError,
    ValidationError,
    woordenboek_exception_handler,
)


def handle(exc):
    return woordenboek_exception_handler(exc, {'request': None})


class TestCustomExceptions:

    def test_spam_detected(self):
        response = handle(SpamDetectedError())

        assert response.status_code == 400
        assert response.data['error'] == {
            'code': 'SPAM_DETECTED',
            'message': 'Submission rejected',
        }
        uuid.UUID(response.data['request_id'])

    def test_validation_error_with_field(self):
        response = handle(ValidationError("Word is required", field='word'))

        assert response.status_code == 400
        assert response.data['error']['field'] == 'word'

    def test_not_found(self):
        response = handle(NotFoundError())
        assert response.status_code == 404
        assert response.data['error']['code'] == ErrorCode.NOT_FOUND.value


class TestWorkflowErrors:

    def test_invalid_transition(self):
        response = handle(InvalidStateTransition(ArticleState.PUBLISHED, Transition.TRANSITION_TO_ARCHIVED))

        assert response.status_code == 409
        assert response.data['error']['code'] == 'INVALID_STATE_TRANSITION'
        assert response.data['error']['details'] == {
            'current_state': 'published',
            'transition': 'transition_to_archived',
        }

    def test_concurrent_modification(self):
        article_id = uuid.uuid4()
        response = handle(ConcurrentModification(article_id, ArticleState.DRAFT))

        assert response.status_code == 409
        assert response.data['error']['code'] == 'CONCURRENT_MODIFICATION'
        assert response.data['error']['details']['article_id'] == str(article_id)

    def test_persistence_failure(self):
        response = handle(PersistenceFailure(uuid.uuid4(), RuntimeError('connection reset')))

        assert response.status_code == 503
        assert response.data['error']['code'] == 'PERSISTENCE_FAILURE'

    def test_subclass_maps_like_its_parent(self):
        class StaleRead(ConcurrentModification):
            pass

        response = handle(StaleRead(uuid.uuid4(), ArticleState.APPROVAL))

        assert response.status_code == 409
        assert response.data['error']['code'] == 'CONCURRENT_MODIFICATION'

    def test_matching_uses_class_not_name(self):
        class PersistenceFailure(StateMachineError):
            pass

        response = handle(PersistenceFailure('same name, different class'))

        assert response.status_code == 409
        assert response.data['error']['code'] == 'CONFLICT'

    def test_generic_workflow_error_is_conflict(self):
        response = handle(StateMachineError('workflow refused'))

        assert response.status_code == 409
        assert response.data['error']['code'] == 'CONFLICT'


class TestDrfExceptions:

    def test_not_authenticated(self):
        response = handle(drf_exceptions.NotAuthenticated())

        assert response.status_code == 401
        assert response.data['error']['code'] == 'AUTHENTICATION_REQUIRED'

    def test_throttled_keeps_retry_after(self):
        response = handle(drf_exceptions.Throttled(wait=12))

        assert response.status_code == 429
        assert response.data['error']['code'] == 'RATE_LIMITED'
        assert response['Retry-After'] == '12'

    def test_serializer_errors_become_details(self):
        response = handle(drf_exceptions.ValidationError({'word': ['This field is required.']}))

        assert response.status_code == 400
        assert response.data['error']['message'] == 'Validation failed'
        assert response.data['error']['details'] == {'word': ['This field is required.']}

    def test_banned_account(self):
        response = handle(drf_exceptions.PermissionDenied("Dit account is geblokkeerd.", code='account_banned'))

        assert response.status_code == 403
        assert response.data['error']['code'] == 'ACCOUNT_BANNED'


class TestUnhandled:

    def test_unexpected_exception(self):
        response = handle(KeyError('boom'))

        assert response.status_code == 500
        assert response.data['error'] == {
            'code': 'INTERNAL_ERROR',
            'message': 'An unexpected error occurred',
        }
