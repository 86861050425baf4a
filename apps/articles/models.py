"""
Article models for the Vlaams Woordenboek.
Dictionary articles, their classification, likes and user reports.
"""

from django.conf import settings
from django.db import models
from apps.core.models import BaseModel

from .state_machine import ArticleState


class Region(BaseModel):
    """
    A Flemish region a word is used in.
    """

    name = models.CharField(
        max_length=100,
        unique=True,
        verbose_name='Name',
        help_text='Region name'
    )

    class Meta:
        db_table = 'regions'
        ordering = ['name']
        verbose_name = 'Region'
        verbose_name_plural = 'Regions'

    def __str__(self):
        return self.name


class Label(BaseModel):
    """
    Label used to categorize dictionary articles.
    """

    name = models.CharField(
        max_length=255,
        unique=True,
        verbose_name='Name',
        help_text='Label name'
    )

    description = models.TextField(
        blank=True,
        verbose_name='Description',
        help_text='What the label covers (optional)'
    )

    class Meta:
        db_table = 'labels'
        ordering = ['name']
        verbose_name = 'Label'
        verbose_name_plural = 'Labels'

    def __str__(self):
        return self.name


class ArticleQuerySet(models.QuerySet):

    def published(self):
        return self.filter(state=ArticleState.PUBLISHED.value)

    def in_state(self, state):
        return self.filter(state=ArticleState.from_value(state).value)

    def with_likes_count(self):
        return self.annotate(likes_count=models.Count('likes', distinct=True))


class Article(BaseModel):
    """
    A dictionary entry undergoing (or done with) editorial review.
    """

    STATE_CHOICES = [(state.value, state.label) for state in ArticleState]

    word = models.CharField(
        max_length=255,
        db_index=True,
        verbose_name='Word',
        help_text='The Flemish word or expression'
    )

    characteristics = models.CharField(
        max_length=255,
        blank=True,
        verbose_name='Characteristics',
        help_text='Grammatical characteristics'
    )

    description = models.TextField(
        verbose_name='Description',
        help_text='Meaning of the word'
    )

    example = models.TextField(
        blank=True,
        verbose_name='Example',
        help_text='Example sentence using the word'
    )

    # Review lifecycle, only changed through the state machine
    state = models.PositiveSmallIntegerField(
        choices=STATE_CHOICES,
        default=ArticleState.NEW.value,
        db_index=True,
        verbose_name='State',
        help_text='Current review state'
    )

    editor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='edited_articles',
        verbose_name='Editor',
        help_text='User responsible for the current draft'
    )

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='authored_articles',
        verbose_name='Author',
        help_text='User who submitted the word (empty for guests)'
    )

    regions = models.ManyToManyField(
        Region,
        blank=True,
        related_name='articles',
        verbose_name='Regions',
    )

    labels = models.ManyToManyField(
        Label,
        blank=True,
        related_name='articles',
        verbose_name='Labels',
    )

    objects = ArticleQuerySet.as_manager()

    class Meta:
        db_table = 'articles'
        ordering = ['word']
        indexes = [
            models.Index(fields=['state', 'word'], name='articles_state_word_idx'),
        ]
        verbose_name = 'Article'
        verbose_name_plural = 'Articles'

    def __str__(self):
        return f"{self.word} ({self.review_state.label})"

    @property
    def review_state(self):
        """State as an ArticleState member."""
        return ArticleState.from_value(self.state)

    @property
    def clean_example(self):
        """Example text without stored paragraph tags."""
        if not self.example:
            return ''
        return self.example.replace('<p>', '').replace('</p>', '')


class ArticleLike(BaseModel):
    """
    A user liking an article. One like per user per article.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='article_likes',
        verbose_name='User',
    )

    article = models.ForeignKey(
        Article,
        on_delete=models.CASCADE,
        related_name='likes',
        verbose_name='Article',
    )

    class Meta:
        db_table = 'article_likes'
        constraints = [
            models.UniqueConstraint(fields=['user', 'article'], name='unique_article_like'),
        ]
        verbose_name = 'Article Like'
        verbose_name_plural = 'Article Likes'

    def __str__(self):
        return f"{self.user} ♥ {self.article.word}"


class ArticleReport(BaseModel):
    """
    A user report about a mistake in a dictionary article.
    """

    STATE_OPEN = 'open'
    STATE_IN_PROGRESS = 'in_progress'
    STATE_CLOSED = 'closed'

    STATE_CHOICES = [
        (STATE_OPEN, 'Open'),
        (STATE_IN_PROGRESS, 'In behandeling'),
        (STATE_CLOSED, 'Afgesloten'),
    ]

    article = models.ForeignKey(
        Article,
        on_delete=models.CASCADE,
        related_name='reports',
        verbose_name='Article',
    )

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='article_reports',
        verbose_name='Author',
        help_text='User who filed the report'
    )

    assignee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_reports',
        verbose_name='Assignee',
        help_text='Editor following up on the report'
    )

    state = models.CharField(
        max_length=20,
        choices=STATE_CHOICES,
        default=STATE_OPEN,
        db_index=True,
        verbose_name='State',
    )

    description = models.TextField(
        verbose_name='Description',
        help_text='What is wrong with the article'
    )

    feedback = models.TextField(
        blank=True,
        verbose_name='Feedback',
        help_text='Editor feedback when closing the report'
    )

    assigned_at = models.DateTimeField(null=True, blank=True, verbose_name='Assigned At')
    closed_at = models.DateTimeField(null=True, blank=True, verbose_name='Closed At')

    class Meta:
        db_table = 'article_reports'
        ordering = ['-created_at']
        verbose_name = 'Article Report'
        verbose_name_plural = 'Article Reports'

    def __str__(self):
        return f"Report on {self.article.word} ({self.state})"

    @property
    def is_closed(self):
        return self.state == self.STATE_CLOSED
