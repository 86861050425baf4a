"""
Tests for the ORM-backed article store.

Tests cover:
- Conditional state update
- Concurrent modification (stale read)
- Database errors surfacing as PersistenceFailure
"""

from unittest.mock import patch

import pytest
from django.contrib.auth import get_user_model
from django.db import OperationalError

from apps.articles.models import Article
from apps.articles.state_machine import (
    ArticleState,
    ArticleStateMachine,
    ConcurrentModification,
    PersistenceFailure,
)
from apps.articles.stores import DjangoArticleStore


User = get_user_model()


@pytest.fixture
def article(db):
    return Article.objects.create(
        word='goesting',
        description='Zin, trek in iets',
        state=ArticleState.APPROVAL.value,
    )


class TestDjangoArticleStore:

    @pytest.mark.django_db
    def test_updates_when_state_matches(self, article):
        DjangoArticleStore().update_state(article.pk, ArticleState.APPROVAL, ArticleState.PUBLISHED)

        article.refresh_from_db()
        assert article.state == ArticleState.PUBLISHED

    @pytest.mark.django_db
    def test_writes_extra_fields_with_state(self, article):
        editor = User.objects.create_user(username='redacteur', password='pass12345')

        DjangoArticleStore().update_state(
            article.pk,
            ArticleState.APPROVAL,
            ArticleState.DRAFT,
            {'editor_id': editor.pk, 'word': 'goesting hebben'},
        )

        article.refresh_from_db()
        assert article.state == ArticleState.DRAFT
        assert article.editor == editor
        assert article.word == 'goesting hebben'

    @pytest.mark.django_db
    def test_stale_expected_state_raises(self, article):
        with pytest.raises(ConcurrentModification):
            DjangoArticleStore().update_state(article.pk, ArticleState.DRAFT, ArticleState.APPROVAL)

        article.refresh_from_db()
        assert article.state == ArticleState.APPROVAL

    @pytest.mark.django_db
    def test_database_error_raises_persistence_failure(self, article):
        with patch('apps.articles.stores.Article.objects') as mock_objects:
            mock_objects.filter.return_value.update.side_effect = OperationalError('database is locked')

            with pytest.raises(PersistenceFailure) as exc_info:
                DjangoArticleStore().update_state(
                    article.pk, ArticleState.APPROVAL, ArticleState.PUBLISHED,
                )

        assert isinstance(exc_info.value.cause, OperationalError)
        article.refresh_from_db()
        assert article.state == ArticleState.APPROVAL


class TestConcurrentTransitions:

    @pytest.mark.django_db
    def test_second_writer_loses(self, article):
        """Two editors load the same article; the second transition is refused."""
        first = Article.objects.get(pk=article.pk)
        second = Article.objects.get(pk=article.pk)

        ArticleStateMachine(first).transition_to_released()

        with pytest.raises(ConcurrentModification):
            ArticleStateMachine(second).transition_to_archived()

        article.refresh_from_db()
        assert article.state == ArticleState.PUBLISHED

    @pytest.mark.django_db
    def test_reload_then_retry_uses_fresh_state(self, article):
        first = Article.objects.get(pk=article.pk)
        second = Article.objects.get(pk=article.pk)
        ArticleStateMachine(first).transition_to_editing()

        second.refresh_from_db()
        machine = ArticleStateMachine(second)
        assert machine.current_state is ArticleState.DRAFT
        assert machine.submit_for_approval() is ArticleState.APPROVAL

    @pytest.mark.django_db
    def test_persistence_failure_leaves_article_unchanged(self, article):
        with patch.object(DjangoArticleStore, 'update_state', side_effect=PersistenceFailure(article.pk)):
            with pytest.raises(PersistenceFailure):
                ArticleStateMachine(article).transition_to_released()

        assert article.state == ArticleState.APPROVAL
        article.refresh_from_db()
        assert article.state == ArticleState.APPROVAL
