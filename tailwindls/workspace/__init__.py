"""Workspace management for tailwindls."""
from .cache import WorkspaceCache
from .vocabulary_cache import VocabularyCache

__all__ = ['WorkspaceCache', 'VocabularyCache']
