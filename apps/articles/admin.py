"""
Admin interface for the editorial panel.
"""

from django.contrib import admin, messages
from django.db.models import Count
from django.http import HttpResponseRedirect
from django.utils.html import format_html

from .models import Article, ArticleReport, Label, Region
from .services import ArticleEditor
from .state_machine import (
    ArticleState,
    ArticleStateMachine,
    StateMachineError,
    Transition,
)


STATE_COLORS = {
    ArticleState.NEW: 'gray',
    ArticleState.DRAFT: 'orange',
    ArticleState.APPROVAL: 'royalblue',
    ArticleState.PUBLISHED: 'green',
    ArticleState.ARCHIVED: 'firebrick',
}


@admin.register(Article)
class ArticleAdmin(admin.ModelAdmin):
    """
    Admin interface for dictionary articles.

    State and editor are read-only: they change only through the
    transition actions below and the edit-entry rule on save.
    """

    list_display = [
        'word',
        'state_badge',
        'editor',
        'author',
        'regions_display',
        'updated_at',
    ]

    list_filter = [
        'state',
        'regions',
        'labels',
    ]

    search_fields = [
        'word',
        'description',
    ]

    readonly_fields = [
        'id',
        'state',
        'editor',
        'author',
        'created_at',
        'updated_at',
    ]

    filter_horizontal = ['regions', 'labels']

    fieldsets = (
        ('Algemene informatie', {
            'fields': (
                'word',
                'characteristics',
                'description',
                'example',
            )
        }),
        ('Regio & labels', {
            'fields': (
                'regions',
                'labels',
            )
        }),
        ('Redactie', {
            'fields': (
                'state',
                'editor',
                'author',
            )
        }),
        ('System Fields', {
            'fields': (
                'id',
                'created_at',
                'updated_at',
            ),
            'classes': ('collapse',),
        }),
    )

    ordering = ['-updated_at']

    def state_badge(self, obj):
        state = obj.review_state
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            STATE_COLORS.get(state, 'gray'),
            state.label,
        )
    state_badge.short_description = 'Status'
    state_badge.admin_order_field = 'state'

    def regions_display(self, obj):
        return ', '.join(region.name for region in obj.regions.all())
    regions_display.short_description = "Regio's"

    def save_model(self, request, obj, form, change):
        """New articles are created directly; edits go through ArticleEditor."""
        if not change:
            obj.author = request.user
            super().save_model(request, obj, form, change)
            return

        changes = {
            name: getattr(obj, name)
            for name in form.changed_data
            if name in ArticleEditor.EDITABLE_FIELDS
        }
        try:
            ArticleEditor().save(obj, changes, request.user.pk)
        except StateMachineError as e:
            obj._workflow_error = e
            self.message_user(request, f'{obj.word}: {e}', level=messages.ERROR)

    def save_related(self, request, form, formsets, change):
        # Regions and labels are not saved when the article write was refused
        if getattr(form.instance, '_workflow_error', None) is not None:
            return
        super().save_related(request, form, formsets, change)

    def response_change(self, request, obj):
        if getattr(obj, '_workflow_error', None) is not None:
            return HttpResponseRedirect(request.path)
        return super().response_change(request, obj)

    # Actions
    actions = [
        'submit_for_approval',
        'transition_to_editing',
        'transition_to_released',
        'transition_to_archived',
    ]

    def _apply_transition(self, request, queryset, name):
        applied = 0
        for article in queryset:
            try:
                ArticleStateMachine(article).invoke(name)
                applied += 1
            except StateMachineError as e:
                self.message_user(request, f'{article.word}: {e}', level=messages.ERROR)

        if applied:
            self.message_user(request, f'{applied} artikel(s) bijgewerkt.')

    def submit_for_approval(self, request, queryset):
        self._apply_transition(request, queryset, Transition.SUBMIT_FOR_APPROVAL)
    submit_for_approval.short_description = 'Indienen ter goedkeuring'

    def transition_to_editing(self, request, queryset):
        self._apply_transition(request, queryset, Transition.TRANSITION_TO_EDITING)
    transition_to_editing.short_description = 'Terug naar klad versie'

    def transition_to_released(self, request, queryset):
        self._apply_transition(request, queryset, Transition.TRANSITION_TO_RELEASED)
    transition_to_released.short_description = 'Publiceren'

    def transition_to_archived(self, request, queryset):
        self._apply_transition(request, queryset, Transition.TRANSITION_TO_ARCHIVED)
    transition_to_archived.short_description = 'Archiveren'

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('editor', 'author').prefetch_related('regions')


@admin.register(Region)
class RegionAdmin(admin.ModelAdmin):
    list_display = ['name', 'articles_count']
    search_fields = ['name']

    def articles_count(self, obj):
        return obj.articles_count
    articles_count.short_description = 'Aantal artikels'
    articles_count.admin_order_field = 'articles_count'

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(articles_count=Count('articles'))


@admin.register(Label)
class LabelAdmin(admin.ModelAdmin):
    list_display = ['name', 'articles_count', 'description', 'created_at']
    search_fields = ['name', 'description']

    def articles_count(self, obj):
        return obj.articles_count
    articles_count.short_description = 'Aantal koppelingen'
    articles_count.admin_order_field = 'articles_count'

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(articles_count=Count('articles'))


@admin.register(ArticleReport)
class ArticleReportAdmin(admin.ModelAdmin):
    list_display = ['article', 'author', 'assignee', 'state', 'created_at']
    list_filter = ['state']
    search_fields = ['article__word', 'description']
    raw_id_fields = ['article', 'author', 'assignee']
    readonly_fields = ['assigned_at', 'closed_at', 'created_at', 'updated_at']
