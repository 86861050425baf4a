"""
Core models for the Vlaams Woordenboek project.
Base classes and shared functionality.
"""

import uuid
from django.conf import settings
from django.db import models
from django.db.models.signals import post_save
from django.dispatch import receiver
from django.utils import timezone


class BaseModel(models.Model):
    """
    Abstract base model with common fields for all dictionary models.
    Provides UUID primary key and timestamp tracking.
    """
    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        verbose_name='ID',
        help_text='Unique identifier (UUID)'
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        editable=False,
        verbose_name='Created At',
        help_text='Timestamp when record was created'
    )

    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Updated At',
        help_text='Timestamp when record was last updated'
    )

    class Meta:
        abstract = True
        ordering = ['-created_at']

    def __str__(self):
        """
        Default string representation.
        Should be overridden in child classes.
        """
        return f"{self.__class__.__name__} ({self.id})"


class Profile(BaseModel):
    """
    Dictionary-specific account data.
    Linked 1:1 with the Django User model.
    """

    USER_TYPE_NORMAL = 'normal'
    USER_TYPE_EDITOR = 'editor'
    USER_TYPE_ADMINISTRATOR = 'administrator'

    USER_TYPE_CHOICES = [
        (USER_TYPE_NORMAL, 'Gebruiker'),
        (USER_TYPE_EDITOR, 'Redacteur'),
        (USER_TYPE_ADMINISTRATOR, 'Administrator'),
    ]

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='profile',
        verbose_name='User',
        help_text='The associated Django user account'
    )

    # Every account starts with normal privileges until upgraded by an administrator
    user_type = models.CharField(
        max_length=20,
        choices=USER_TYPE_CHOICES,
        default=USER_TYPE_NORMAL,
        db_index=True,
        verbose_name='User Type',
        help_text='Role group determining backend access'
    )

    banned_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        verbose_name='Banned At',
        help_text='When the account was banned (empty when not banned)'
    )

    ban_comment = models.TextField(
        blank=True,
        verbose_name='Ban Comment',
        help_text='Reason given for the ban'
    )

    last_seen_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name='Last Seen',
        help_text='Timestamp of last activity'
    )

    class Meta:
        db_table = 'profiles'
        verbose_name = 'Profile'
        verbose_name_plural = 'Profiles'

    def __str__(self):
        return f"{self.user.get_username()} ({self.user_type})"

    @property
    def is_banned(self):
        """Check if the account is currently banned."""
        return self.banned_at is not None

    @property
    def can_access_backend(self):
        """Editors and administrators may use the editorial backend."""
        return self.user_type in (self.USER_TYPE_EDITOR, self.USER_TYPE_ADMINISTRATOR)

    def ban(self, comment=''):
        """Ban the account."""
        self.banned_at = timezone.now()
        self.ban_comment = comment
        self.save(update_fields=['banned_at', 'ban_comment', 'updated_at'])

    def unban(self):
        """Lift an existing ban."""
        self.banned_at = None
        self.ban_comment = ''
        self.save(update_fields=['banned_at', 'ban_comment', 'updated_at'])


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_profile(sender, instance, created, **kwargs):
    """Auto-create Profile when a new User is created."""
    if created:
        Profile.objects.create(user=instance)
