"""
URL patterns for core app probes, auth and account moderation endpoints.
"""

from django.urls import path
from .views import (
    LivenessView,
    ReadinessView,
    CustomTokenObtainPairView,
    CustomTokenRefreshView,
    CurrentUserView,
    LogoutView,
    UserBanView,
)

app_name = 'core'

urlpatterns = [
    path('livez/', LivenessView.as_view(), name='liveness'),
    path('readyz/', ReadinessView.as_view(), name='readiness'),
]

# Auth URLs - mounted at /api/auth/ in main urls.py
auth_urlpatterns = [
    path('login/', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('refresh/', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('me/', CurrentUserView.as_view(), name='current_user'),
    path('logout/', LogoutView.as_view(), name='logout'),
]

# Moderation URLs - mounted at /api/users/ in main urls.py
users_urlpatterns = [
    path('<int:pk>/ban/', UserBanView.as_view(), name='user_ban'),
]
