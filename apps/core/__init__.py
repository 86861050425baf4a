"""
Core app for the Vlaams Woordenboek.

Provides shared models, permissions, error handling and request tracing.
"""
