"""
Tests for the Article Review State Machine.

Tests cover:
- Transition table (every state x every transition)
- Unknown transition names
- Edit-entry rule
- ArticleStateMachine against an in-memory store
- Concurrent modification detection
"""

import itertools
from types import SimpleNamespace
import uuid

import pytest

from apps.articles.state_machine import (
    ArticleState,
    ArticleStateMachine,
    ConcurrentModification,
    InvalidStateTransition,
    PersistenceFailure,
    Transition,
    available_transitions,
    edit_entry_fields,
    transition,
)
from apps.articles.stores import ArticleStore


LEGAL = {
    (ArticleState.DRAFT, Transition.SUBMIT_FOR_APPROVAL): ArticleState.APPROVAL,
    (ArticleState.APPROVAL, Transition.TRANSITION_TO_EDITING): ArticleState.DRAFT,
    (ArticleState.APPROVAL, Transition.TRANSITION_TO_RELEASED): ArticleState.PUBLISHED,
    (ArticleState.APPROVAL, Transition.TRANSITION_TO_ARCHIVED): ArticleState.ARCHIVED,
}


class InMemoryArticleStore(ArticleStore):
    """Store keeping article states in a dict, with the same guard as the ORM store."""

    def __init__(self, states=None, fail=False):
        self.states = dict(states or {})
        self.fields = {}
        self.writes = 0
        self.fail = fail

    def update_state(self, article_id, expected_state, new_state, extra_fields=None):
        if self.fail:
            raise PersistenceFailure(article_id, RuntimeError('store offline'))
        if self.states.get(article_id) != expected_state:
            raise ConcurrentModification(article_id, expected_state)
        self.states[article_id] = new_state
        self.fields.setdefault(article_id, {}).update(extra_fields or {})
        self.writes += 1


def make_article(state):
    return SimpleNamespace(pk=uuid.uuid4(), state=int(state))


# ============================================================================
# Transition table
# ============================================================================

class TestTransitionTable:

    @pytest.mark.parametrize(
        'state,name',
        list(itertools.product(ArticleState, Transition)),
    )
    def test_every_pair_matches_table(self, state, name):
        """Every (state, transition) pair either resolves per the table or is refused."""
        expected = LEGAL.get((state, name))
        if expected is None:
            with pytest.raises(InvalidStateTransition):
                transition(state, name)
        else:
            assert transition(state, name) is expected

    def test_published_is_terminal(self):
        assert available_transitions(ArticleState.PUBLISHED) == frozenset()

    def test_new_has_no_named_transitions(self):
        """New leaves only through the edit-entry rule."""
        assert available_transitions(ArticleState.NEW) == frozenset()

    def test_approval_transitions(self):
        assert available_transitions(ArticleState.APPROVAL) == {
            Transition.TRANSITION_TO_EDITING,
            Transition.TRANSITION_TO_RELEASED,
            Transition.TRANSITION_TO_ARCHIVED,
        }

    def test_accepts_plain_strings(self):
        assert transition(2, 'transition_to_released') is ArticleState.PUBLISHED

    def test_unknown_name_raises(self):
        with pytest.raises(InvalidStateTransition) as exc_info:
            transition(ArticleState.APPROVAL, 'publish_now')

        assert exc_info.value.current_state is ArticleState.APPROVAL
        assert exc_info.value.transition == 'publish_now'

    def test_error_details(self):
        with pytest.raises(InvalidStateTransition) as exc_info:
            transition(ArticleState.NEW, Transition.TRANSITION_TO_RELEASED)

        assert exc_info.value.to_dict() == {
            'current_state': 'new',
            'transition': 'transition_to_released',
        }


class TestArticleState:

    def test_from_value_accepts_names_and_numbers(self):
        assert ArticleState.from_value('published') is ArticleState.PUBLISHED
        assert ArticleState.from_value('3') is ArticleState.PUBLISHED
        assert ArticleState.from_value(3) is ArticleState.PUBLISHED

    def test_from_value_rejects_unknown(self):
        with pytest.raises(ValueError):
            ArticleState.from_value(9)
        with pytest.raises(ValueError):
            ArticleState.from_value('deleted')

    def test_only_published_is_public(self):
        assert [s for s in ArticleState if s.is_public] == [ArticleState.PUBLISHED]

    def test_labels(self):
        assert ArticleState.NEW.label == 'suggestie'
        assert ArticleState.DRAFT.label == 'Klad versie'


# ============================================================================
# Edit-entry rule
# ============================================================================

class TestEditEntryFields:

    @pytest.mark.parametrize('state', [ArticleState.NEW, ArticleState.ARCHIVED])
    def test_claims_article(self, state):
        assert edit_entry_fields(state, 7) == {
            'state': ArticleState.DRAFT,
            'editor_id': 7,
        }

    @pytest.mark.parametrize(
        'state',
        [ArticleState.DRAFT, ArticleState.APPROVAL, ArticleState.PUBLISHED],
    )
    def test_other_states_unchanged(self, state):
        assert edit_entry_fields(state, 7) == {}

    def test_no_acting_user_is_refused(self):
        with pytest.raises(InvalidStateTransition):
            edit_entry_fields(ArticleState.NEW, None)

    def test_no_acting_user_is_fine_when_no_claim_needed(self):
        assert edit_entry_fields(ArticleState.DRAFT, None) == {}


# ============================================================================
# ArticleStateMachine
# ============================================================================

class TestArticleStateMachine:

    def test_full_review_path(self):
        article = make_article(ArticleState.DRAFT)
        store = InMemoryArticleStore({article.pk: ArticleState.DRAFT})
        machine = ArticleStateMachine(article, store=store)

        assert machine.submit_for_approval() is ArticleState.APPROVAL
        assert machine.transition_to_released() is ArticleState.PUBLISHED
        assert article.state == ArticleState.PUBLISHED
        assert store.states[article.pk] is ArticleState.PUBLISHED
        assert machine.available_transitions() == frozenset()

    def test_return_to_editing(self):
        article = make_article(ArticleState.APPROVAL)
        store = InMemoryArticleStore({article.pk: ArticleState.APPROVAL})

        assert ArticleStateMachine(article, store=store).transition_to_editing() is ArticleState.DRAFT

    def test_archive(self):
        article = make_article(ArticleState.APPROVAL)
        store = InMemoryArticleStore({article.pk: ArticleState.APPROVAL})

        assert ArticleStateMachine(article, store=store).transition_to_archived() is ArticleState.ARCHIVED

    def test_invalid_transition_leaves_state_and_store_untouched(self):
        article = make_article(ArticleState.NEW)
        store = InMemoryArticleStore({article.pk: ArticleState.NEW})
        machine = ArticleStateMachine(article, store=store)

        with pytest.raises(InvalidStateTransition):
            machine.transition_to_released()

        assert article.state == ArticleState.NEW
        assert store.writes == 0

    def test_can(self):
        article = make_article(ArticleState.APPROVAL)
        machine = ArticleStateMachine(article, store=InMemoryArticleStore())

        assert machine.can('transition_to_released')
        assert not machine.can('submit_for_approval')
        assert not machine.can('bogus')

    def test_concurrent_modification(self):
        """Two machines built from the same read: only the first write lands."""
        pk = uuid.uuid4()
        store = InMemoryArticleStore({pk: ArticleState.APPROVAL})
        first = SimpleNamespace(pk=pk, state=ArticleState.APPROVAL.value)
        second = SimpleNamespace(pk=pk, state=ArticleState.APPROVAL.value)

        ArticleStateMachine(first, store=store).transition_to_released()

        with pytest.raises(ConcurrentModification) as exc_info:
            ArticleStateMachine(second, store=store).transition_to_archived()

        assert exc_info.value.expected_state is ArticleState.APPROVAL
        assert store.states[pk] is ArticleState.PUBLISHED
        assert second.state == ArticleState.APPROVAL.value
        assert store.writes == 1

    def test_persistence_failure_keeps_in_memory_state(self):
        article = make_article(ArticleState.APPROVAL)
        store = InMemoryArticleStore({article.pk: ArticleState.APPROVAL}, fail=True)

        with pytest.raises(PersistenceFailure):
            ArticleStateMachine(article, store=store).transition_to_released()

        assert article.state == ArticleState.APPROVAL
