"""
LSP Capabilities Manager

This module manages LSP feature handlers (completion, hover) using a plugin
architecture similar to WorkspaceCache.

Completion is handled in two stages:
1. CompletionCapability plugins each produce a completion set (the host's
   lists).
2. CompletionAugmentCapability plugins rework those sets for the session,
   e.g. merging Tailwind CSS candidates into them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from lsprotocol.types import (
    CompletionList,
    CompletionParams,
    Hover,
    HoverParams,
)

from tailwindls.completion.composer import CompletionSet
from tailwindls.lsp.completion_broker import CompletionSession, TextSnapshot
from tailwindls.settings import TailwindSettings

if TYPE_CHECKING:
    from tailwindls.lsp.tailwind_language_server import TailwindLanguageServer


class Capability(ABC):
    """
    Base class for all LSP capability handlers.

    Each capability can handle one or more LSP features (completion, hover)
    and decides whether it can handle a specific request based on context.
    """

    def __init__(self, server: TailwindLanguageServer) -> None:
        self.server = server
        self.workspace_cache = server.workspace_cache

    def register(self) -> None:
        """
        Subscribe to server events.

        This is called once when the capability manager is set up. Anything
        subscribed here must be unsubscribed in dispose().
        """
        pass

    def dispose(self) -> None:
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this capability."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what this capability does."""
        pass


class CompletionCapability(Capability):
    """Base class for capabilities producing their own completion set."""

    @abstractmethod
    async def can_handle(self, params: CompletionParams) -> bool:
        """
        Check if this capability can handle the completion request.

        Returns True if this capability should provide completions
        for the current context.
        """
        pass

    @abstractmethod
    async def complete(self, params: CompletionParams) -> CompletionList:
        """
        Provide completion items.

        Only called if can_handle() returns True.
        """
        pass


class CompletionAugmentCapability(Capability):
    """Base class for capabilities that rework the sets of a session."""

    @abstractmethod
    async def augment_completion_session(
        self, session: CompletionSession, completion_sets: list[CompletionSet]
    ) -> None:
        """Modify `completion_sets` in place."""
        pass


class HoverCapability(Capability):
    """Base class for hover capabilities."""

    @abstractmethod
    async def can_handle(self, params: HoverParams) -> bool:
        """Check if this capability can handle the hover request."""
        pass

    @abstractmethod
    async def hover(self, params: HoverParams) -> Hover | None:
        """Provide hover information."""
        pass


class CapabilityManager:
    """
    Central manager for all LSP capabilities.

    Usage:
        # In server initialization
        manager = CapabilityManager(server)
        manager.register_all()

        # On shutdown
        manager.dispose()
    """

    def __init__(
        self,
        server: TailwindLanguageServer,
        capabilities: dict[str, Capability] | None = None,
    ):
        self.server = server

        # Default capabilities
        if capabilities is None:
            from tailwindls.lsp.capabilities.tailwind_capabilities import (
                DocumentClassesCompletionCapability,
                TailwindCompletionCapability,
                TailwindHoverCapability,
            )

            capabilities = {
                "document_classes": DocumentClassesCompletionCapability(server),
                "tailwind_completion": TailwindCompletionCapability(server),
                "tailwind_hover": TailwindHoverCapability(server),
            }

        self.capabilities = capabilities
        self._registered = False

    def register_all(self) -> None:
        """Register all capabilities with the server."""
        if self._registered:
            return

        for capability in self.capabilities.values():
            capability.register()

        self._registered = True

    def dispose(self) -> None:
        """Unsubscribe all capabilities from server events."""
        if not self._registered:
            return

        for capability in self.capabilities.values():
            capability.dispose()

        self._registered = False

    def get_capability(self, name: str) -> Capability | None:
        """Get a specific capability by name"""
        return self.capabilities.get(name)

    def get_capabilities_by_type(self, capability_type: type) -> list[Capability]:
        """Get all capabilities of a specific type (e.g., all CompletionCapability)."""
        return [
            cap
            for cap in self.capabilities.values()
            if isinstance(cap, capability_type)
        ]

    async def handle_completion(self, params: CompletionParams) -> CompletionList:
        """
        Handle a completion request as one completion session.

        1. Start a session on a snapshot of the document.
        2. Collect one set per capable CompletionCapability.
        3. Let augmenting capabilities rework the sets.
        4. Run the native (word) completion; subscribers may pull its items
           into the session.
        5. Return the session as a flat list, or nothing if a newer request
           superseded it meanwhile.
        """
        doc = self.server.workspace.get_text_document(params.text_document.uri)
        snapshot = TextSnapshot(uri=doc.uri, source=doc.source, version=doc.version)
        caret_offset = doc.offset_at_position(params.position)

        settings = (
            self.server.settings_provider.settings
            if self.server.settings_provider
            else TailwindSettings()
        )

        broker = self.server.completion_broker
        session = broker.start_session(
            snapshot,
            caret_offset,
            params.position,
            include_words=settings.include_document_words,
        )

        completion_sets: list[CompletionSet] = []
        for capability in self.get_capabilities_by_type(CompletionCapability):
            if await capability.can_handle(params):  # pyright: ignore
                result = await capability.complete(params)  # pyright: ignore
                if result.items:
                    completion_sets.append(
                        CompletionSet(
                            moniker=capability.name,
                            display_name=capability.description,
                            items=list(result.items),
                        )
                    )

        for capability in self.get_capabilities_by_type(CompletionAugmentCapability):
            await capability.augment_completion_session(  # pyright: ignore
                session, completion_sets
            )

        session.set_completion_sets(completion_sets)
        await broker.compute_native(session)

        if session.dismissed:
            return CompletionList(is_incomplete=True, items=[])

        return session.to_completion_list()

    async def handle_hover(self, params: HoverParams) -> Hover | None:
        """
        Handle hover requests by delegating to capable handlers.

        Returns the first non-None hover result
        """
        for capability in self.get_capabilities_by_type(HoverCapability):
            if await capability.can_handle(params):  # pyright: ignore
                result = await capability.hover(params)  # pyright: ignore
                if result:
                    return result

        return None
