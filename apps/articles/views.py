"""
Dictionary, editorial and report API views.
"""

import logging

from django.db.models import Q
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from apps.core.exceptions import SpamDetectedError, ValidationError
from apps.core.permissions import ForbidBannedUser, IsEditor
from apps.core.throttling import BurstThrottle, StateChangeThrottle, SuggestionThrottle

from .identity import RequestIdentityProvider
from .models import Article, ArticleReport
from .serializers import (
    ArticleEditSerializer,
    ArticleReportSerializer,
    DictionaryArticleSerializer,
    EditorialArticleSerializer,
    ReportCloseSerializer,
    ReportCreateSerializer,
    StateFilterSerializer,
    SuggestionSerializer,
)
from .services import (
    ArticleEditor,
    assign_report,
    close_report,
    like_article,
    open_report_count,
    report_article,
    submit_suggestion,
    unlike_article,
)
from .state_machine import ArticleStateMachine

logger = logging.getLogger(__name__)

UUID_LOOKUP_REGEX = '[0-9a-f-]{36}'


class DictionaryViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Public dictionary.

    GET    /api/dictionary/                  - Published articles (?q=, ?region=, ?label=)
    GET    /api/dictionary/{id}/             - Published article
    POST   /api/dictionary/suggestions/      - Suggest a new word
    POST   /api/dictionary/{id}/like/        - Like
    DELETE /api/dictionary/{id}/like/        - Remove like
    POST   /api/dictionary/{id}/reports/     - Report a mistake
    """

    serializer_class = DictionaryArticleSerializer
    lookup_value_regex = UUID_LOOKUP_REGEX

    def get_permissions(self):
        if self.action in ('like', 'report'):
            return [IsAuthenticated(), ForbidBannedUser()]
        return [AllowAny(), ForbidBannedUser()]

    def get_throttles(self):
        if self.action == 'suggestions':
            return [SuggestionThrottle()]
        return super().get_throttles()

    def get_queryset(self):
        queryset = (
            Article.objects.published()
            .with_likes_count()
            .prefetch_related('regions', 'labels')
            .order_by('word')
        )

        q = self.request.query_params.get('q')
        if q:
            queryset = queryset.filter(Q(word__icontains=q) | Q(description__icontains=q))

        region = self.request.query_params.get('region')
        if region:
            queryset = queryset.filter(regions__name__iexact=region)

        label = self.request.query_params.get('label')
        if label:
            queryset = queryset.filter(labels__name__iexact=label)

        return queryset

    @action(detail=False, methods=['post'])
    def suggestions(self, request):
        """Store a suggested word as a New article."""
        serializer = SuggestionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        if data.pop('website', ''):
            logger.warning(f"Honeypot triggered on suggestion for '{data.get('word')}'")
            raise SpamDetectedError()

        author = request.user if request.user.is_authenticated else None
        article = submit_suggestion(data, author=author)
        return Response(
            {'id': str(article.pk), 'word': article.word, 'message': 'Bedankt voor je suggestie!'},
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=['post', 'delete'])
    def like(self, request, pk=None):
        article = self.get_object()
        if request.method == 'DELETE':
            changed = unlike_article(request.user, article)
        else:
            changed = like_article(request.user, article)

        return Response({
            'liked': request.method != 'DELETE',
            'changed': changed,
            'likes_count': article.likes.count(),
        })

    @action(detail=True, methods=['post'], url_path='reports')
    def report(self, request, pk=None):
        article = self.get_object()
        serializer = ReportCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        report = report_article(request.user, article, serializer.validated_data['description'])
        return Response(ArticleReportSerializer(report).data, status=status.HTTP_201_CREATED)


class EditorialArticleViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Editorial article management.

    GET   /api/articles/                          - All articles (?state=, ?q=, ?mine=true)
    GET   /api/articles/{id}/                     - Article with available transitions
    PATCH /api/articles/{id}/                     - Edit (claims New/Archived articles)
    GET   /api/articles/{id}/transitions/         - Available transitions
    POST  /api/articles/{id}/transitions/{name}/  - Apply a transition
    """

    permission_classes = [IsAuthenticated, ForbidBannedUser, IsEditor]
    throttle_classes = [BurstThrottle]
    serializer_class = EditorialArticleSerializer
    lookup_value_regex = UUID_LOOKUP_REGEX

    def get_throttles(self):
        if self.action in ('partial_update', 'invoke_transition'):
            return [StateChangeThrottle()]
        return super().get_throttles()

    def _base_queryset(self):
        return (
            Article.objects.select_related('editor', 'author')
            .prefetch_related('regions', 'labels')
            .order_by('-updated_at')
        )

    def get_queryset(self):
        queryset = self._base_queryset()

        filters = StateFilterSerializer(data=self.request.query_params)
        if not filters.is_valid():
            raise ValidationError("Invalid filter", details=filters.errors)
        state = filters.validated_data.get('state')
        if state:
            queryset = queryset.in_state(state)

        q = self.request.query_params.get('q')
        if q:
            queryset = queryset.filter(word__icontains=q)

        mine = self.request.query_params.get('mine')
        if mine is not None and mine.lower() in ('true', '1', 'yes'):
            queryset = queryset.filter(editor=self.request.user)

        return queryset

    def partial_update(self, request, pk=None):
        """Edit an article, applying the edit-entry rule."""
        article = self.get_object()
        serializer = ArticleEditSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        changes = dict(serializer.validated_data)
        regions = changes.pop('regions', None)
        labels = changes.pop('labels', None)

        acting_user_id = RequestIdentityProvider(request).current_user_id()
        ArticleEditor().save(article, changes, acting_user_id, regions=regions, labels=labels)

        # The edit may have moved the article out of the ?state= filter
        article = self._base_queryset().get(pk=article.pk)
        return Response(EditorialArticleSerializer(article).data)

    @action(detail=True, methods=['get'])
    def transitions(self, request, pk=None):
        article = self.get_object()
        machine = ArticleStateMachine(article)
        return Response({
            'state': machine.current_state.name.lower(),
            'available_transitions': sorted(t.value for t in machine.available_transitions()),
        })

    @action(
        detail=True,
        methods=['post'],
        url_path=r'transitions/(?P<transition_name>[a-z_]+)',
    )
    def invoke_transition(self, request, pk=None, transition_name=None):
        article = self.get_object()
        machine = ArticleStateMachine(article)
        previous = machine.current_state
        machine.invoke(transition_name)

        logger.info(
            f"User {request.user.pk} applied '{transition_name}' to article {article.pk}"
        )
        return Response({
            'id': str(article.pk),
            'previous_state': previous.name.lower(),
            'state': machine.current_state.name.lower(),
            'available_transitions': sorted(t.value for t in machine.available_transitions()),
        })


class ArticleReportViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Report follow-up for editors.

    GET  /api/reports/              - Reports (?state=open|in_progress|closed)
    GET  /api/reports/stats/        - Open report count (cached)
    POST /api/reports/{id}/assign/  - Take the report into follow-up
    POST /api/reports/{id}/close/   - Close with feedback
    """

    permission_classes = [IsAuthenticated, ForbidBannedUser, IsEditor]
    throttle_classes = [BurstThrottle]
    serializer_class = ArticleReportSerializer
    lookup_value_regex = UUID_LOOKUP_REGEX

    def get_queryset(self):
        queryset = ArticleReport.objects.select_related('article', 'author', 'assignee')

        state = self.request.query_params.get('state')
        if state:
            queryset = queryset.filter(state=state)

        return queryset

    @action(detail=False, methods=['get'])
    def stats(self, request):
        return Response({'open_count': open_report_count()})

    @action(detail=True, methods=['post'])
    def assign(self, request, pk=None):
        report = assign_report(self.get_object(), request.user)
        return Response(ArticleReportSerializer(report).data)

    @action(detail=True, methods=['post'])
    def close(self, request, pk=None):
        serializer = ReportCloseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        report = close_report(
            self.get_object(),
            request.user,
            feedback=serializer.validated_data.get('feedback', ''),
        )
        return Response(ArticleReportSerializer(report).data)
