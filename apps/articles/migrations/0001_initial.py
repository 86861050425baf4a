# Initial migration for dictionary articles, regions, labels, likes and reports

import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


STATE_CHOICES = [
    (0, 'suggestie'),
    (1, 'Klad versie'),
    (2, 'In afwachting'),
    (3, 'Publicatie'),
    (4, 'Gearchiveerd'),
]


def base_fields():
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier (UUID)', primary_key=True, serialize=False, verbose_name='ID')),
        ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False, help_text='Timestamp when record was created', verbose_name='Created At')),
        ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when record was last updated', verbose_name='Updated At')),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Region',
            fields=base_fields() + [
                ('name', models.CharField(help_text='Region name', max_length=100, unique=True, verbose_name='Name')),
            ],
            options={
                'verbose_name': 'Region',
                'verbose_name_plural': 'Regions',
                'db_table': 'regions',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Label',
            fields=base_fields() + [
                ('name', models.CharField(help_text='Label name', max_length=255, unique=True, verbose_name='Name')),
                ('description', models.TextField(blank=True, help_text='What the label covers (optional)', verbose_name='Description')),
            ],
            options={
                'verbose_name': 'Label',
                'verbose_name_plural': 'Labels',
                'db_table': 'labels',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Article',
            fields=base_fields() + [
                ('word', models.CharField(db_index=True, help_text='The Flemish word or expression', max_length=255, verbose_name='Word')),
                ('characteristics', models.CharField(blank=True, help_text='Grammatical characteristics', max_length=255, verbose_name='Characteristics')),
                ('description', models.TextField(help_text='Meaning of the word', verbose_name='Description')),
                ('example', models.TextField(blank=True, help_text='Example sentence using the word', verbose_name='Example')),
                ('state', models.PositiveSmallIntegerField(choices=STATE_CHOICES, db_index=True, default=0, help_text='Current review state', verbose_name='State')),
                ('author', models.ForeignKey(blank=True, help_text='User who submitted the word (empty for guests)', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='authored_articles', to=settings.AUTH_USER_MODEL, verbose_name='Author')),
                ('editor', models.ForeignKey(blank=True, help_text='User responsible for the current draft', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='edited_articles', to=settings.AUTH_USER_MODEL, verbose_name='Editor')),
                ('labels', models.ManyToManyField(blank=True, related_name='articles', to='articles.label', verbose_name='Labels')),
                ('regions', models.ManyToManyField(blank=True, related_name='articles', to='articles.region', verbose_name='Regions')),
            ],
            options={
                'verbose_name': 'Article',
                'verbose_name_plural': 'Articles',
                'db_table': 'articles',
                'ordering': ['word'],
                'indexes': [models.Index(fields=['state', 'word'], name='articles_state_word_idx')],
            },
        ),
        migrations.CreateModel(
            name='ArticleLike',
            fields=base_fields() + [
                ('article', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='likes', to='articles.article', verbose_name='Article')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='article_likes', to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'Article Like',
                'verbose_name_plural': 'Article Likes',
                'db_table': 'article_likes',
                'constraints': [models.UniqueConstraint(fields=('user', 'article'), name='unique_article_like')],
            },
        ),
        migrations.CreateModel(
            name='ArticleReport',
            fields=base_fields() + [
                ('state', models.CharField(choices=[('open', 'Open'), ('in_progress', 'In behandeling'), ('closed', 'Afgesloten')], db_index=True, default='open', max_length=20, verbose_name='State')),
                ('description', models.TextField(help_text='What is wrong with the article', verbose_name='Description')),
                ('feedback', models.TextField(blank=True, help_text='Editor feedback when closing the report', verbose_name='Feedback')),
                ('assigned_at', models.DateTimeField(blank=True, null=True, verbose_name='Assigned At')),
                ('closed_at', models.DateTimeField(blank=True, null=True, verbose_name='Closed At')),
                ('article', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reports', to='articles.article', verbose_name='Article')),
                ('assignee', models.ForeignKey(blank=True, help_text='Editor following up on the report', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assigned_reports', to=settings.AUTH_USER_MODEL, verbose_name='Assignee')),
                ('author', models.ForeignKey(help_text='User who filed the report', on_delete=django.db.models.deletion.CASCADE, related_name='article_reports', to=settings.AUTH_USER_MODEL, verbose_name='Author')),
            ],
            options={
                'verbose_name': 'Article Report',
                'verbose_name_plural': 'Article Reports',
                'db_table': 'article_reports',
                'ordering': ['-created_at'],
            },
        ),
    ]
