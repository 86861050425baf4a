"""
Custom DRF Router to avoid converter registration conflict.

DRF's DefaultRouter uses format_suffix_patterns which registers a custom
converter 'drf_format_suffix'. When multiple routers exist across apps,
this causes a ValueError: "Converter 'drf_format_suffix' is already registered."

Every viewset here is registered on an empty prefix under its own mount
point, so the API root view would shadow the list route; it is disabled.
"""

from rest_framework.routers import DefaultRouter


class SafeDefaultRouter(DefaultRouter):
    """
    DefaultRouter without format suffix patterns or API root view.
    """
    include_format_suffixes = False
    include_root_view = False
