"""
Dictionary, editorial and report API URLs.
"""

from django.urls import path, include
from config.routers import SafeDefaultRouter
from .views import (
    ArticleReportViewSet,
    DictionaryViewSet,
    EditorialArticleViewSet,
)

app_name = 'articles'

router = SafeDefaultRouter()
router.register(r'', EditorialArticleViewSet, basename='article')

urlpatterns = [
    path('', include(router.urls)),
]

# Public dictionary - mounted at /api/dictionary/ in main urls.py
dictionary_router = SafeDefaultRouter()
dictionary_router.register(r'', DictionaryViewSet, basename='dictionary')
dictionary_urlpatterns = [
    path('', include(dictionary_router.urls)),
]

# Report follow-up - mounted at /api/reports/ in main urls.py
reports_router = SafeDefaultRouter()
reports_router.register(r'', ArticleReportViewSet, basename='report')
reports_urlpatterns = [
    path('', include(reports_router.urls)),
]
