"""
Article persistence ports for the review state machine.

ArticleStore is the contract the state machine writes through; the
DjangoArticleStore implementation issues a single conditional UPDATE:

    UPDATE articles SET state = <new>, ... WHERE id = <id> AND state = <expected>

Zero affected rows means someone else moved the article first.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from django.db import DatabaseError, transaction
from django.utils import timezone

from .models import Article
from .state_machine import ArticleState, ConcurrentModification, PersistenceFailure

logger = logging.getLogger(__name__)


class ArticleStore(ABC):
    """
    Abstract base class for article state persistence.
    """

    @abstractmethod
    def update_state(
        self,
        article_id,
        expected_state: ArticleState,
        new_state: ArticleState,
        extra_fields: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Persist a new state (and co-updated fields) atomically.

        Raises:
            ConcurrentModification: The stored state no longer equals expected_state
            PersistenceFailure: The write could not be completed
        """
        pass


class DjangoArticleStore(ArticleStore):
    """ORM-backed store using an optimistic conditional update."""

    def update_state(
        self,
        article_id,
        expected_state: ArticleState,
        new_state: ArticleState,
        extra_fields: Optional[Dict[str, Any]] = None,
    ) -> None:
        values = dict(extra_fields or {})
        values['state'] = int(new_state)
        values['updated_at'] = timezone.now()

        try:
            with transaction.atomic():
                rows = Article.objects.filter(
                    pk=article_id,
                    state=int(expected_state),
                ).update(**values)
        except DatabaseError as e:
            logger.error(f"Persisting article {article_id} failed: {e}")
            raise PersistenceFailure(article_id, e) from e

        if rows == 0:
            raise ConcurrentModification(article_id, expected_state)
