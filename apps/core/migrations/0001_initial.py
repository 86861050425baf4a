# Initial migration for account profiles

import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Profile',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier (UUID)', primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False, help_text='Timestamp when record was created', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when record was last updated', verbose_name='Updated At')),
                ('user_type', models.CharField(choices=[('normal', 'Gebruiker'), ('editor', 'Redacteur'), ('administrator', 'Administrator')], db_index=True, default='normal', help_text='Role group determining backend access', max_length=20, verbose_name='User Type')),
                ('banned_at', models.DateTimeField(blank=True, db_index=True, help_text='When the account was banned (empty when not banned)', null=True, verbose_name='Banned At')),
                ('ban_comment', models.TextField(blank=True, help_text='Reason given for the ban', verbose_name='Ban Comment')),
                ('last_seen_at', models.DateTimeField(blank=True, help_text='Timestamp of last activity', null=True, verbose_name='Last Seen')),
                ('user', models.OneToOneField(help_text='The associated Django user account', on_delete=django.db.models.deletion.CASCADE, related_name='profile', to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'Profile',
                'verbose_name_plural': 'Profiles',
                'db_table': 'profiles',
            },
        ),
    ]
