"""
Serializers for authentication and user profiles.
"""

from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .models import Profile

User = get_user_model()


class ProfileSerializer(serializers.ModelSerializer):
    """Serializer for Profile model."""

    is_banned = serializers.BooleanField(read_only=True)
    can_access_backend = serializers.BooleanField(read_only=True)

    class Meta:
        model = Profile
        fields = [
            'id',
            'user_type',
            'is_banned',
            'banned_at',
            'can_access_backend',
            'last_seen_at',
            'created_at',
        ]
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    """Serializer for User with nested profile."""

    profile = ProfileSerializer(read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'first_name',
            'last_name',
            'date_joined',
            'last_login',
            'profile',
        ]
        read_only_fields = ['id', 'date_joined', 'last_login']


class UserUpdateSerializer(serializers.ModelSerializer):
    """Serializer for updating user info."""

    class Meta:
        model = User
        fields = ['first_name', 'last_name', 'email']


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Custom token serializer that includes user info in response.
    """

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)

        token['username'] = user.username

        if hasattr(user, 'profile'):
            token['user_type'] = user.profile.user_type

        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        data['user'] = UserSerializer(self.user).data
        return data


class BanSerializer(serializers.Serializer):
    """Input for banning an account."""

    comment = serializers.CharField(required=False, allow_blank=True, max_length=1000)
