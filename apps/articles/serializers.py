"""
Dictionary and editorial serializers.
"""

from rest_framework import serializers
from .models import Article, ArticleReport, Label, Region
from .state_machine import ArticleState, available_transitions


# ============================================================================
# Public dictionary
# ============================================================================

class DictionaryArticleSerializer(serializers.ModelSerializer):
    """Published article as shown in the public dictionary."""

    example = serializers.CharField(source='clean_example', read_only=True)
    regions = serializers.SlugRelatedField(many=True, read_only=True, slug_field='name')
    labels = serializers.SlugRelatedField(many=True, read_only=True, slug_field='name')
    likes_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = Article
        fields = [
            'id',
            'word',
            'characteristics',
            'description',
            'example',
            'regions',
            'labels',
            'likes_count',
            'created_at',
        ]


class SuggestionSerializer(serializers.Serializer):
    """
    Word suggestion submitted from the public site.

    `website` is a honeypot: people leave it empty, bots fill it in.
    """

    word = serializers.CharField(max_length=255)
    characteristics = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField()
    example = serializers.CharField(max_length=255, required=False, allow_blank=True)
    regions = serializers.PrimaryKeyRelatedField(
        many=True,
        queryset=Region.objects.all(),
        allow_empty=False,
    )
    website = serializers.CharField(required=False, allow_blank=True, write_only=True)


class ReportCreateSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=5000)


# ============================================================================
# Editorial
# ============================================================================

class EditorialArticleSerializer(serializers.ModelSerializer):
    """Article with review workflow details for editors."""

    state = serializers.SerializerMethodField()
    state_label = serializers.SerializerMethodField()
    editor = serializers.SlugRelatedField(read_only=True, slug_field='username')
    author = serializers.SlugRelatedField(read_only=True, slug_field='username')
    regions = serializers.PrimaryKeyRelatedField(many=True, read_only=True)
    labels = serializers.PrimaryKeyRelatedField(many=True, read_only=True)
    available_transitions = serializers.SerializerMethodField()

    class Meta:
        model = Article
        fields = [
            'id',
            'word',
            'characteristics',
            'description',
            'example',
            'state',
            'state_label',
            'editor',
            'author',
            'regions',
            'labels',
            'available_transitions',
            'created_at',
            'updated_at',
        ]

    def get_state(self, obj):
        return obj.review_state.name.lower()

    def get_state_label(self, obj):
        return obj.review_state.label

    def get_available_transitions(self, obj):
        return sorted(t.value for t in available_transitions(obj.review_state))


class ArticleEditSerializer(serializers.Serializer):
    """
    Editable article fields. State and editor are never accepted from input.
    """

    word = serializers.CharField(max_length=255, required=False)
    characteristics = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False)
    example = serializers.CharField(required=False, allow_blank=True)
    regions = serializers.PrimaryKeyRelatedField(
        many=True,
        queryset=Region.objects.all(),
        required=False,
    )
    labels = serializers.PrimaryKeyRelatedField(
        many=True,
        queryset=Label.objects.all(),
        required=False,
    )


class ArticleReportSerializer(serializers.ModelSerializer):
    article_word = serializers.CharField(source='article.word', read_only=True)
    author = serializers.SlugRelatedField(read_only=True, slug_field='username')
    assignee = serializers.SlugRelatedField(read_only=True, slug_field='username')

    class Meta:
        model = ArticleReport
        fields = [
            'id',
            'article',
            'article_word',
            'author',
            'assignee',
            'state',
            'description',
            'feedback',
            'assigned_at',
            'closed_at',
            'created_at',
        ]
        read_only_fields = fields


class ReportCloseSerializer(serializers.Serializer):
    feedback = serializers.CharField(required=False, allow_blank=True, max_length=5000)


class StateFilterSerializer(serializers.Serializer):
    """Validates the ?state= filter on editorial lists."""

    state = serializers.ChoiceField(
        choices=[state.name.lower() for state in ArticleState],
        required=False,
    )
