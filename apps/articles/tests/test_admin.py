"""
Tests for the editorial admin panel.

Tests cover:
- Change form applies the edit-entry rule
- Refused writes reported without saving regions
- Bulk transition actions
"""

from unittest.mock import patch

import pytest
from django.contrib.auth import get_user_model

from apps.articles.models import Article, Region
from apps.articles.state_machine import ArticleState, ConcurrentModification
from apps.articles.stores import DjangoArticleStore


User = get_user_model()


@pytest.fixture
def make_article(db):
    def _make(state, **kwargs):
        defaults = {
            'word': 'plezant',
            'description': 'Aangenaam',
        }
        defaults.update(kwargs)
        return Article.objects.create(state=state.value, **defaults)
    return _make


def change_url(article):
    return f'/admin/articles/article/{article.pk}/change/'


def change_form(article, **overrides):
    data = {
        'word': article.word,
        'characteristics': article.characteristics,
        'description': article.description,
        'example': article.example,
        '_save': 'Opslaan',
    }
    data.update(overrides)
    return data


class TestChangeForm:

    @pytest.mark.django_db
    def test_saving_new_article_claims_it(self, admin_client, admin_user, make_article):
        article = make_article(ArticleState.NEW)

        response = admin_client.post(change_url(article), change_form(article, description='Fijn, aangenaam'))

        assert response.status_code == 302
        article.refresh_from_db()
        assert article.state == ArticleState.DRAFT
        assert article.editor_id == admin_user.pk
        assert article.description == 'Fijn, aangenaam'

    @pytest.mark.django_db
    def test_saving_draft_keeps_editor(self, admin_client, make_article):
        first_editor = User.objects.create_user(username='redacteur', password='pass12345')
        article = make_article(ArticleState.DRAFT, editor=first_editor)

        response = admin_client.post(change_url(article), change_form(article, description='Fijn'))

        assert response.status_code == 302
        article.refresh_from_db()
        assert article.state == ArticleState.DRAFT
        assert article.editor_id == first_editor.pk
        assert article.description == 'Fijn'

    @pytest.mark.django_db
    def test_refused_write_is_reported(self, admin_client, make_article):
        article = make_article(ArticleState.NEW)
        region = Region.objects.create(name='Antwerpen')

        with patch.object(
            DjangoArticleStore,
            'update_state',
            side_effect=ConcurrentModification(article.pk, ArticleState.NEW),
        ):
            response = admin_client.post(
                change_url(article),
                change_form(article, description='Fijn', regions=[str(region.pk)]),
            )

        assert response.status_code == 302
        assert response.url == change_url(article)
        article.refresh_from_db()
        assert article.state == ArticleState.NEW
        assert article.description == 'Aangenaam'
        assert article.regions.count() == 0

        followed = admin_client.get(response.url)
        messages = [str(m) for m in followed.context['messages']]
        assert any('no longer in state' in m for m in messages)


class TestBulkActions:

    @pytest.mark.django_db
    def test_illegal_action_leaves_state(self, admin_client, make_article):
        new = make_article(ArticleState.NEW, word='nieuw')
        pending = make_article(ArticleState.APPROVAL, word='wachtend')

        response = admin_client.post('/admin/articles/article/', {
            'action': 'transition_to_released',
            '_selected_action': [str(new.pk), str(pending.pk)],
        })

        assert response.status_code == 302
        new.refresh_from_db()
        pending.refresh_from_db()
        assert new.state == ArticleState.NEW
        assert pending.state == ArticleState.PUBLISHED

    @pytest.mark.django_db
    def test_submit_for_approval_action(self, admin_client, make_article):
        draft = make_article(ArticleState.DRAFT)

        admin_client.post('/admin/articles/article/', {
            'action': 'submit_for_approval',
            '_selected_action': [str(draft.pk)],
        })

        draft.refresh_from_db()
        assert draft.state == ArticleState.APPROVAL
