"""
Articles app for the Vlaams Woordenboek.

Provides dictionary articles, their review workflow, likes and reports.
"""
