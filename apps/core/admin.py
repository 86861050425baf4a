"""
Admin interface for account profiles and bans.
"""

from django.contrib import admin

from .models import Profile


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ['user', 'user_type', 'banned_at', 'last_seen_at']
    list_filter = ['user_type', ('banned_at', admin.EmptyFieldListFilter)]
    search_fields = ['user__username', 'user__email']
    readonly_fields = ['banned_at', 'last_seen_at', 'created_at', 'updated_at']
    raw_id_fields = ['user']

    actions = ['ban_users', 'unban_users']

    def ban_users(self, request, queryset):
        banned = 0
        for profile in queryset.exclude(user=request.user):
            profile.ban(comment=f'Geblokkeerd door {request.user.get_username()}')
            banned += 1
        self.message_user(request, f'{banned} account(s) geblokkeerd.')
    ban_users.short_description = 'Blokkeer geselecteerde accounts'

    def unban_users(self, request, queryset):
        for profile in queryset:
            profile.unban()
        self.message_user(request, f'{queryset.count()} account(s) gedeblokkeerd.')
    unban_users.short_description = 'Deblokkeer geselecteerde accounts'
