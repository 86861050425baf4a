"""
Article Review State Machine.

Governs the editorial lifecycle of a dictionary article:
- Closed set of review states stored on Article.state
- Lookup table of named transitions, legal only from specific states
- Edit-entry rule that claims New/Archived articles for the acting editor
- Optimistic concurrency: every write is conditioned on the state that was read

States:
    New ──(editing begins)──▶ Draft ──submit_for_approval──▶ Approval
                                ▲                               │
    Archived ─(editing begins)──┘◀──── transition_to_editing ───┤
        ▲                                                       │
        └───────────────── transition_to_archived ◀─────────────┤
                                                                │
    Published ◀──────────── transition_to_released ◀────────────┘

Usage:
    machine = ArticleStateMachine(article)
    machine.available_transitions()
    machine.invoke('transition_to_released')
"""

import logging
from enum import Enum, IntEnum
from typing import Any, Dict, FrozenSet, Optional, Union

logger = logging.getLogger(__name__)


class ArticleState(IntEnum):
    """Valid review states for a dictionary article."""
    NEW = 0
    DRAFT = 1
    APPROVAL = 2
    PUBLISHED = 3
    ARCHIVED = 4

    @classmethod
    def from_value(cls, value: Union[int, str, 'ArticleState']) -> 'ArticleState':
        """Convert a stored value (int, numeric string or name) to ArticleState."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and not value.isdigit():
            try:
                return cls[value.upper()]
            except KeyError:
                raise ValueError(f"Unknown state: {value}")
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            raise ValueError(f"Unknown state: {value}")

    @property
    def label(self) -> str:
        """Human-readable Dutch label."""
        return STATE_LABELS[self]

    @property
    def is_public(self) -> bool:
        """Only published articles are visible in the public dictionary."""
        return self is ArticleState.PUBLISHED


STATE_LABELS: Dict[ArticleState, str] = {
    ArticleState.NEW: 'suggestie',
    ArticleState.DRAFT: 'Klad versie',
    ArticleState.APPROVAL: 'In afwachting',
    ArticleState.PUBLISHED: 'Publicatie',
    ArticleState.ARCHIVED: 'Gearchiveerd',
}


class Transition(str, Enum):
    """Named review transitions."""
    SUBMIT_FOR_APPROVAL = 'submit_for_approval'
    TRANSITION_TO_EDITING = 'transition_to_editing'
    TRANSITION_TO_RELEASED = 'transition_to_released'
    TRANSITION_TO_ARCHIVED = 'transition_to_archived'


# Name used in errors when the edit-entry rule is refused
BEGIN_EDITING = 'begin_editing'

# Legal transitions per state. Published has no outgoing transitions.
TRANSITIONS: Dict[ArticleState, Dict[Transition, ArticleState]] = {
    ArticleState.NEW: {},
    ArticleState.DRAFT: {
        Transition.SUBMIT_FOR_APPROVAL: ArticleState.APPROVAL,
    },
    ArticleState.APPROVAL: {
        Transition.TRANSITION_TO_EDITING: ArticleState.DRAFT,
        Transition.TRANSITION_TO_RELEASED: ArticleState.PUBLISHED,
        Transition.TRANSITION_TO_ARCHIVED: ArticleState.ARCHIVED,
    },
    ArticleState.PUBLISHED: {},
    ArticleState.ARCHIVED: {},
}

# States from which starting an edit claims the article for the editor
EDIT_ENTRY_STATES: FrozenSet[ArticleState] = frozenset({ArticleState.NEW, ArticleState.ARCHIVED})


# =============================================================================
# Errors
# =============================================================================

class StateMachineError(Exception):
    """Base class for review workflow errors."""

    def to_dict(self) -> Dict[str, Any]:
        return {}


class InvalidStateTransition(StateMachineError):
    """Raised when a transition is not defined for the current state."""

    def __init__(self, current_state, transition):
        self.current_state = current_state
        self.transition = transition
        super().__init__(
            f"Transition '{_name_of(transition)}' is not allowed from state "
            f"'{_name_of(current_state)}'"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'current_state': _name_of(self.current_state),
            'transition': _name_of(self.transition),
        }


class ConcurrentModification(StateMachineError):
    """Raised when the persisted state changed between read and write."""

    def __init__(self, article_id, expected_state):
        self.article_id = article_id
        self.expected_state = expected_state
        super().__init__(
            f"Article {article_id} is no longer in state '{_name_of(expected_state)}'; "
            f"reload and try again"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'article_id': str(self.article_id),
            'expected_state': _name_of(self.expected_state),
        }


class PersistenceFailure(StateMachineError):
    """Raised when the store could not complete the write."""

    def __init__(self, article_id, cause: Optional[BaseException] = None):
        self.article_id = article_id
        self.cause = cause
        super().__init__(f"Could not persist article {article_id}: {cause}")

    def to_dict(self) -> Dict[str, Any]:
        return {'article_id': str(self.article_id)}


def _name_of(value) -> str:
    if isinstance(value, ArticleState):
        return value.name.lower()
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


# =============================================================================
# Pure transition rules
# =============================================================================

def available_transitions(state: ArticleState) -> FrozenSet[Transition]:
    """Transitions that are legal from the given state."""
    return frozenset(TRANSITIONS.get(ArticleState.from_value(state), {}))


def transition(current: ArticleState, name: Union[Transition, str]) -> ArticleState:
    """
    Resolve the target state for a transition.

    Raises:
        InvalidStateTransition: If the name is unknown or not legal from current.
    """
    current = ArticleState.from_value(current)
    try:
        name = Transition(name)
    except ValueError:
        raise InvalidStateTransition(current, name)

    try:
        return TRANSITIONS[current][name]
    except KeyError:
        raise InvalidStateTransition(current, name)


def edit_entry_fields(current: ArticleState, acting_user_id) -> Dict[str, Any]:
    """
    Field updates applied when an edit begins.

    New and Archived articles move to Draft and are claimed by the acting
    user. Any other state yields no changes.

    Raises:
        InvalidStateTransition: If a claim is needed but there is no acting user.
    """
    current = ArticleState.from_value(current)
    if current not in EDIT_ENTRY_STATES:
        return {}
    if acting_user_id is None:
        raise InvalidStateTransition(current, BEGIN_EDITING)
    return {'state': ArticleState.DRAFT, 'editor_id': acting_user_id}


# =============================================================================
# State machine bound to an article
# =============================================================================

class ArticleStateMachine:
    """
    Transient view over an article's persisted review state.

    Never persisted itself; build one whenever code needs to act on the
    article's current state.
    """

    def __init__(self, article, store=None):
        """
        Args:
            article: Article instance (anything with `pk` and `state`)
            store: ArticleStore; defaults to the ORM-backed store
        """
        if store is None:
            from apps.articles.stores import DjangoArticleStore
            store = DjangoArticleStore()

        self.article = article
        self.store = store

    @property
    def current_state(self) -> ArticleState:
        return ArticleState.from_value(self.article.state)

    def available_transitions(self) -> FrozenSet[Transition]:
        return available_transitions(self.current_state)

    def can(self, name: Union[Transition, str]) -> bool:
        try:
            transition(self.current_state, name)
        except InvalidStateTransition:
            return False
        return True

    def invoke(self, name: Union[Transition, str]) -> ArticleState:
        """
        Apply a named transition.

        Returns:
            The new state

        Raises:
            InvalidStateTransition: Transition not legal from the current state
            ConcurrentModification: Persisted state changed since it was read
            PersistenceFailure: Store could not complete the write
        """
        current = self.current_state

        try:
            target = transition(current, name)
        except InvalidStateTransition:
            logger.warning(
                f"Rejected transition '{_name_of(name)}' for article {self.article.pk} "
                f"in state {current.name}"
            )
            raise

        try:
            self.store.update_state(self.article.pk, current, target)
        except ConcurrentModification:
            logger.warning(
                f"Article {self.article.pk} changed concurrently; "
                f"{current.name} → {target.name} not applied"
            )
            raise

        self.article.state = target
        logger.info(f"Article {self.article.pk} transitioned: {current.name} → {target.name}")
        return target

    def submit_for_approval(self) -> ArticleState:
        """Hand a draft over for editorial review."""
        return self.invoke(Transition.SUBMIT_FOR_APPROVAL)

    def transition_to_editing(self) -> ArticleState:
        """Return an article under review to draft for more editing."""
        return self.invoke(Transition.TRANSITION_TO_EDITING)

    def transition_to_released(self) -> ArticleState:
        """Approve and publish. The only path to Published."""
        return self.invoke(Transition.TRANSITION_TO_RELEASED)

    def transition_to_archived(self) -> ArticleState:
        """Shelve an article under review. Archived articles can be edited again."""
        return self.invoke(Transition.TRANSITION_TO_ARCHIVED)
