"""
Article services: editing, suggestions, likes and report follow-up.
"""

import logging
from typing import Any, Dict, Iterable, Optional

from django.core.cache import cache
from django.db import IntegrityError, transaction
from django.utils import timezone

from .models import Article, ArticleLike, ArticleReport
from .state_machine import (
    ArticleState,
    InvalidStateTransition,
    edit_entry_fields,
)
from .stores import ArticleStore, DjangoArticleStore

logger = logging.getLogger(__name__)

REPORT_COUNT_CACHE_KEY = 'report_count'
REPORT_COUNT_CACHE_TTL = 60


class ArticleEditor:
    """
    Save editorial changes to an article.

    Applies the edit-entry rule before the user's changes are persisted:
    an article in New or Archived moves to Draft and is claimed by the
    acting editor. Rule fields and user fields go out in one conditional
    update, guarded by the state that was read.
    """

    EDITABLE_FIELDS = ('word', 'characteristics', 'description', 'example')

    def __init__(self, store: Optional[ArticleStore] = None):
        self.store = store or DjangoArticleStore()

    def save(
        self,
        article: Article,
        changes: Dict[str, Any],
        acting_user_id,
        regions: Optional[Iterable] = None,
        labels: Optional[Iterable] = None,
    ) -> Article:
        """
        Persist changes to editable fields (and optionally regions/labels).

        Raises:
            InvalidStateTransition: A claim is needed but there is no acting user
            ConcurrentModification: The article changed state since it was loaded
            PersistenceFailure: The store could not complete the write
        """
        current = ArticleState.from_value(article.state)

        fields = {
            name: value for name, value in changes.items()
            if name in self.EDITABLE_FIELDS
        }
        fields.update(edit_entry_fields(current, acting_user_id))
        new_state = ArticleState.from_value(fields.pop('state', current))

        with transaction.atomic():
            self.store.update_state(article.pk, current, new_state, fields)
            if regions is not None:
                article.regions.set(regions)
            if labels is not None:
                article.labels.set(labels)

        for name, value in fields.items():
            setattr(article, name, value)
        article.state = new_state

        if new_state != current:
            logger.info(
                f"Article {article.pk} claimed by editor {acting_user_id}: "
                f"{current.name} → {new_state.name}"
            )
        else:
            logger.info(f"Article {article.pk} edited by {acting_user_id}")

        return article


def submit_suggestion(data: Dict[str, Any], author=None) -> Article:
    """
    Store a word suggested by a visitor as a New article.
    """
    regions = data.pop('regions', [])
    with transaction.atomic():
        article = Article.objects.create(
            word=data['word'],
            characteristics=data.get('characteristics', ''),
            description=data['description'],
            example=data.get('example', ''),
            state=ArticleState.NEW.value,
            author=author,
        )
        article.regions.set(regions)

    logger.info(f"Suggestion stored as article {article.pk} ({article.word})")
    return article


def like_article(user, article: Article) -> bool:
    """Like an article. Returns False if the user already liked it."""
    try:
        with transaction.atomic():
            ArticleLike.objects.create(user=user, article=article)
    except IntegrityError:
        return False
    return True


def unlike_article(user, article: Article) -> bool:
    """Remove a like. Returns False if there was none."""
    deleted, _ = ArticleLike.objects.filter(user=user, article=article).delete()
    return deleted > 0


def report_article(user, article: Article, description: str) -> ArticleReport:
    """File a report about a mistake in an article."""
    report = ArticleReport.objects.create(
        article=article,
        author=user,
        description=description,
    )
    cache.delete(REPORT_COUNT_CACHE_KEY)
    logger.info(f"Report {report.pk} filed on article {article.pk} by user {user.pk}")
    return report


def assign_report(report: ArticleReport, assignee) -> ArticleReport:
    """
    Take a report into follow-up.

    Raises:
        InvalidStateTransition: The report is already closed
    """
    with transaction.atomic():
        report = ArticleReport.objects.select_for_update().get(pk=report.pk)
        if report.is_closed:
            raise InvalidStateTransition(report.state, 'assign')

        report.assignee = assignee
        report.state = ArticleReport.STATE_IN_PROGRESS
        report.assigned_at = timezone.now()
        report.save(update_fields=['assignee', 'state', 'assigned_at', 'updated_at'])

    cache.delete(REPORT_COUNT_CACHE_KEY)
    logger.info(f"Report {report.pk} assigned to user {assignee.pk}")
    return report


def close_report(report: ArticleReport, closed_by, feedback: str = '') -> ArticleReport:
    """
    Close a report with editor feedback.

    Raises:
        InvalidStateTransition: The report is already closed
    """
    with transaction.atomic():
        report = ArticleReport.objects.select_for_update().get(pk=report.pk)
        if report.is_closed:
            raise InvalidStateTransition(report.state, 'close')

        if report.assignee_id is None:
            report.assignee = closed_by
            report.assigned_at = timezone.now()
        report.state = ArticleReport.STATE_CLOSED
        report.feedback = feedback
        report.closed_at = timezone.now()
        report.save()

    cache.delete(REPORT_COUNT_CACHE_KEY)
    logger.info(f"Report {report.pk} closed by user {closed_by.pk}")
    return report


def open_report_count() -> int:
    """Number of reports not yet closed, cached briefly."""
    return cache.get_or_set(
        REPORT_COUNT_CACHE_KEY,
        lambda: ArticleReport.objects.exclude(state=ArticleReport.STATE_CLOSED).count(),
        REPORT_COUNT_CACHE_TTL,
    )
