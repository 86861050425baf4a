"""
URL configuration for the Vlaams Woordenboek project.
"""

from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

from apps.core.urls import auth_urlpatterns, users_urlpatterns
from apps.articles.urls import dictionary_urlpatterns, reports_urlpatterns

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('rest_framework.urls')),
    # Auth endpoints
    path('api/auth/', include((auth_urlpatterns, 'auth'))),
    # Account moderation
    path('api/users/', include((users_urlpatterns, 'users'))),
    # Public dictionary
    path('api/dictionary/', include((dictionary_urlpatterns, 'dictionary'))),
    # Editorial workflow
    path('api/articles/', include('apps.articles.urls')),
    # Report follow-up
    path('api/reports/', include((reports_urlpatterns, 'reports'))),
    # Probes
    path('', include('apps.core.urls')),
]

# Serve media files in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)

# Customize admin site
admin.site.site_header = "Vlaams Woordenboek Beheer"
admin.site.site_title = "Vlaams Woordenboek"
admin.site.index_title = "Redactie"
