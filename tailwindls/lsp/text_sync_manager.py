"""
Text Synchronization Manager

Manages LSP text sync events and provides hook extension points for caches
and capabilities to react to document saves and closes.

pygls keeps `server.workspace` in sync with the client on its own; this
manager only broadcasts the events the server reacts to.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Awaitable, Callable

from lsprotocol.types import (
    DidCloseTextDocumentParams,
    DidSaveTextDocumentParams,
    LogMessageParams,
    MessageType,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_SAVE,
)

if TYPE_CHECKING:
    from tailwindls.lsp.tailwind_language_server import TailwindLanguageServer


# Type aliases for hook signatures
OnSaveHook = Callable[[DidSaveTextDocumentParams], Awaitable[None]]
OnCloseHook = Callable[[DidCloseTextDocumentParams], Awaitable[None]]


class TextSyncManager:
    """
    Manages text document synchronization and hook broadcasting.

    Design Principles:
    - Text sync is infrastructure, NOT a capability
    - Errors are isolated (one hook failure doesn't affect others)
    - Hooks run in registration order
    - Whoever adds a hook removes it when disposed

    Usage:
        # During server initialization (before caches/capabilities)
        text_sync = TextSyncManager(server)
        text_sync.register_handlers()
        server.text_sync_manager = text_sync

        # The vocabulary cache reloads when the configuration file is saved
        class VocabularyCache(CachedWorkspace):
            def register_hooks(self):
                self.server.text_sync_manager.add_on_save_hook(self._on_file_saved)

            def unregister_hooks(self):
                self.server.text_sync_manager.remove_on_save_hook(self._on_file_saved)
    """

    def __init__(self, server: TailwindLanguageServer) -> None:
        self.server = server

        self._on_save_hooks: list[OnSaveHook] = []
        self._on_close_hooks: list[OnCloseHook] = []

    def add_on_save_hook(self, hook: OnSaveHook) -> None:
        """
        Register a hook for document save events.

        Example:
            async def on_save(params: DidSaveTextDocumentParams):
                if params.text_document.uri.endswith('tailwind.config.json'):
                    await self.reload()

            text_sync.add_on_save_hook(on_save)
        """
        self._on_save_hooks.append(hook)

    def remove_on_save_hook(self, hook: OnSaveHook) -> None:
        if hook in self._on_save_hooks:
            self._on_save_hooks.remove(hook)

    def add_on_close_hook(self, hook: OnCloseHook) -> None:
        """Register a hook for document close events."""
        self._on_close_hooks.append(hook)

    def remove_on_close_hook(self, hook: OnCloseHook) -> None:
        if hook in self._on_close_hooks:
            self._on_close_hooks.remove(hook)

    async def _broadcast(self, event: str, hooks: list, params) -> None:
        """
        Call every hook with `params`.

        Errors are caught and logged to prevent one hook from breaking others.
        Iterates over a copy so hooks may unregister themselves.
        """
        for hook in list(hooks):
            try:
                await hook(params)
            except Exception as e:
                self.server.window_log_message(
                    LogMessageParams(
                        type=MessageType.Error,
                        message=f"Error in {event} hook {hook.__name__}: "
                                f"{type(e).__name__}: {e}"
                    )
                )

    async def _broadcast_on_save(self, params: DidSaveTextDocumentParams) -> None:
        await self._broadcast("on_save", self._on_save_hooks, params)

    async def _broadcast_on_close(self, params: DidCloseTextDocumentParams) -> None:
        await self._broadcast("on_close", self._on_close_hooks, params)

    def register_handlers(self) -> None:
        """
        Register LSP text synchronization handlers with the server.

        This should be called once during server creation, BEFORE caches and
        capabilities add their hooks.
        """

        @self.server.feature(TEXT_DOCUMENT_DID_SAVE)
        async def did_save(
            ls: TailwindLanguageServer,
            params: DidSaveTextDocumentParams,
        ) -> None:
            ls.window_log_message(
                LogMessageParams(
                    type=MessageType.Log,
                    message=f"Document saved: {params.text_document.uri}"
                )
            )
            await self._broadcast_on_save(params)

        @self.server.feature(TEXT_DOCUMENT_DID_CLOSE)
        async def did_close(
            ls: TailwindLanguageServer,
            params: DidCloseTextDocumentParams,
        ) -> None:
            await self._broadcast_on_close(params)
