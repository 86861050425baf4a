"""
Health check, authentication and account moderation views.
"""

import logging

from django.contrib.auth import get_user_model
from django.db import connection, DatabaseError
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views import View
from django.views.decorators.csrf import csrf_exempt
from django.utils.decorators import method_decorator

from rest_framework import status
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework_simplejwt.tokens import RefreshToken

from apps.core.exceptions import ErrorCode, PermissionDeniedError, error_response
from apps.core.permissions import IsAdministrator
from apps.core.serializers import (
    BanSerializer,
    CustomTokenObtainPairSerializer,
    UserSerializer,
    UserUpdateSerializer,
)

logger = logging.getLogger(__name__)

User = get_user_model()


@method_decorator(csrf_exempt, name='dispatch')
class LivenessView(View):
    """
    Liveness probe endpoint.

    Returns 200 if the application is running.
    """

    def get(self, request):
        return JsonResponse({"status": "alive"})


@method_decorator(csrf_exempt, name='dispatch')
class ReadinessView(View):
    """
    Readiness probe endpoint.

    Returns 200 if the database answers.
    """

    def get(self, request):
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
        except DatabaseError as e:
            logger.error(f"Readiness check failed: {e}")
            return JsonResponse({
                "status": "not_ready",
                "reason": str(e),
            }, status=503)
        return JsonResponse({"status": "ready"})


# =============================================================================
# JWT Authentication Views
# =============================================================================

class CustomTokenObtainPairView(TokenObtainPairView):
    """
    Login endpoint that returns JWT tokens.

    POST /api/auth/login/
    Body: {"username": "...", "password": "..."}
    Returns: {"access": "...", "refresh": "...", "user": {...}}
    """
    serializer_class = CustomTokenObtainPairSerializer
    permission_classes = [AllowAny]


class CustomTokenRefreshView(TokenRefreshView):
    """
    Token refresh endpoint.

    POST /api/auth/refresh/
    Body: {"refresh": "..."}
    Returns: {"access": "..."}
    """
    permission_classes = [AllowAny]


class CurrentUserView(APIView):
    """
    Get or update the current authenticated user.

    GET /api/auth/me/ - Get current user info
    PATCH /api/auth/me/ - Update user info
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        serializer = UserSerializer(request.user)
        return Response(serializer.data)

    def patch(self, request):
        serializer = UserUpdateSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(UserSerializer(request.user).data)


class LogoutView(APIView):
    """
    Logout endpoint - blacklist refresh token.

    POST /api/auth/logout/
    Body: {"refresh": "..."}
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        refresh_token = request.data.get('refresh')
        if not refresh_token:
            return error_response(
                ErrorCode.MISSING_FIELD,
                "Refresh token required",
                field='refresh',
            )

        try:
            RefreshToken(refresh_token).blacklist()
        except TokenError as e:
            return error_response(ErrorCode.INVALID_VALUE, str(e), field='refresh')

        return Response({"message": "Successfully logged out"})


# =============================================================================
# Account moderation
# =============================================================================

class UserBanView(APIView):
    """
    Ban or unban an account.

    POST /api/users/{id}/ban/   - Ban the account (optional {"comment": "..."})
    DELETE /api/users/{id}/ban/ - Lift the ban
    """
    permission_classes = [IsAuthenticated, IsAdministrator]

    def post(self, request, pk):
        user = get_object_or_404(User, pk=pk)
        if user.pk == request.user.pk:
            raise PermissionDeniedError("Je kan jezelf niet blokkeren.")

        serializer = BanSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user.profile.ban(comment=serializer.validated_data.get('comment', ''))
        logger.info(f"User {user.pk} banned by {request.user.pk}")
        return Response(UserSerializer(user).data, status=status.HTTP_200_OK)

    def delete(self, request, pk):
        user = get_object_or_404(User, pk=pk)
        user.profile.unban()
        logger.info(f"User {user.pk} unbanned by {request.user.pk}")
        return Response(UserSerializer(user).data, status=status.HTTP_200_OK)
