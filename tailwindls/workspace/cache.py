"""
Workspace Cache Manager for tailwindls

This module manages all workspace-derived state in memory. Today that is the
Tailwind CSS vocabulary built from the base vocabulary and the workspace's
configuration file.

Design Principles:
1. In-memory first (fast access on every keystroke)
2. Single writer per cache (reload routines), many readers
3. Updates driven by document events (save of the configuration file)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tailwindls.lsp.tailwind_language_server import TailwindLanguageServer
    from tailwindls.workspace.config_file import ConfigurationScanner


class CachedWorkspace(ABC):
    """Abstract base class for workspace caches."""

    def __init__(
        self,
        workspace_cache: WorkspaceCache,
        server: TailwindLanguageServer | None = None
    ) -> None:
        self.workspace_cache = workspace_cache
        self.server = server
        self.workspace_root = workspace_cache.workspace_root

    def register_hooks(self) -> None:
        """
        Register text sync and settings hooks to keep the cache up-to-date.

        Override in subclasses. Every hook registered here must be removed
        again in unregister_hooks().
        """
        pass

    def unregister_hooks(self) -> None:
        pass

    @abstractmethod
    async def initialize(self) -> bool:
        """Build the cache. Returns False if initialization failed."""
        pass


class WorkspaceCache:
    """
    Central cache for all workspace data.

    Usage:
        cache = WorkspaceCache(workspace_root, scanner, server=server)
        await cache.initialize()

        vocabulary = cache.caches["vocabulary"]
        model = vocabulary.model

        # When the server shuts down
        cache.dispose()
    """

    def __init__(
        self,
        workspace_root: Path,
        scanner: ConfigurationScanner | None = None,
        caches: dict[str, CachedWorkspace] | None = None,
        server: TailwindLanguageServer | None = None,
    ):
        from tailwindls.workspace.config_file import ConfigurationScanner
        from tailwindls.workspace.vocabulary_cache import VocabularyCache

        self.workspace_root = workspace_root
        self.server = server
        self.scanner = scanner or ConfigurationScanner(workspace_root)

        self.caches = caches if caches is not None else {
            "vocabulary": VocabularyCache(self, self.scanner),
        }

        self._initialized = False
        self._hooks_registered = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> bool:
        """
        Initialize all caches.

        Hooks are registered even when a cache fails to initialize, so a
        later save of the configuration file can repair it.
        """
        if self._initialized:
            return True

        if not self._hooks_registered:
            for cache in self.caches.values():
                cache.register_hooks()
            self._hooks_registered = True

        results = [await cache.initialize() for cache in self.caches.values()]

        self._initialized = all(results)
        return self._initialized

    def dispose(self) -> None:
        if not self._hooks_registered:
            return

        for cache in self.caches.values():
            cache.unregister_hooks()
        self._hooks_registered = False
