"""
VocabularyCache: the Tailwind CSS vocabulary of the workspace.

Keeps two models:
- the pristine model, built from the bundled base vocabulary, never changed;
- the live model, the result of merging the configuration file into the
  pristine model.

Every reload merges from the pristine model and replaces the live model
with a single assignment, so readers see either the old or the new model.
Readers should take `cache.model` once and use that reference for the rest
of their operation.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

from lsprotocol.types import (
    DidSaveTextDocumentParams,
    LogMessageParams,
    MessageType,
    ShowMessageParams,
)
from pygls.uris import to_fs_path

from tailwindls.completion.merger import merge
from tailwindls.completion.vocabulary import VocabularyModel, load_base_vocabulary
from tailwindls.workspace.cache import CachedWorkspace
from tailwindls.workspace.config_file import (
    ConfigurationParser,
    ConfigurationScanner,
    is_configuration_file,
)

if TYPE_CHECKING:
    from tailwindls.settings import TailwindSettings
    from tailwindls.workspace.cache import WorkspaceCache

LOAD_FAILED_MESSAGE = (
    "Tailwind CSS: Failed to load configuration file; "
    "check the output window for more details"
)


class VocabularyCache(CachedWorkspace):
    def __init__(
        self,
        workspace_cache: WorkspaceCache,
        scanner: ConfigurationScanner,
        parser: ConfigurationParser | None = None,
        base: VocabularyModel | None = None,
    ) -> None:
        super().__init__(workspace_cache, workspace_cache.server)
        self.scanner = scanner
        self.parser = parser or ConfigurationParser(scanner)

        self._pristine = base if base is not None else load_base_vocabulary()
        self._model = self._pristine
        self._lock = asyncio.Lock()

        self.version = 0
        self.initialized = False

    @property
    def model(self) -> VocabularyModel:
        return self._model

    @property
    def pristine(self) -> VocabularyModel:
        return self._pristine

    @property
    def has_configuration_file(self) -> bool:
        return self.scanner.has_configuration_file

    async def initialize(self, notify: bool = True) -> bool:
        """
        Scan for the configuration file and load it.

        Can be called again after a failure; each call rescans. Retries pass
        notify=False so the user is only told about a failure once.
        """
        self.scanner.scan()
        self.initialized = await self.reload(notify=notify)
        return self.initialized

    async def reload(self, notify: bool = True) -> bool:
        """
        Merge the configuration file into the pristine vocabulary.

        On failure the live model is left untouched, the error is logged and
        the user is notified (unless notify is False). Returns True if the
        new model was committed.
        """
        async with self._lock:
            path = self.scanner.configuration_file
            if path is None:
                self._log(MessageType.Info, "Tailwind CSS configuration file not found")
                return False

            self._log(MessageType.Info, f"Reloading Tailwind CSS configuration: {path}")

            try:
                config = await self.parser.get_configuration()
                model = merge(self._pristine, config)
            except Exception as e:
                self._log(
                    MessageType.Error,
                    f"Failed to load {path}: {type(e).__name__}: {e}",
                )
                if notify and self.server:
                    self.server.window_show_message(
                        ShowMessageParams(
                            type=MessageType.Error, message=LOAD_FAILED_MESSAGE
                        )
                    )
                return False

            self._model = model
            self.version += 1
            self.initialized = True

            self._log(
                MessageType.Info,
                f"Finished reloading Tailwind CSS configuration "
                f"({len(model.classes)} classes, {len(model.colors)} colors)",
            )
            return True

    # ===== Hooks =====

    def register_hooks(self) -> None:
        if not self.server:
            return

        text_sync = getattr(self.server, "text_sync_manager", None)
        if text_sync:
            text_sync.add_on_save_hook(self._on_file_saved)

        settings_provider = getattr(self.server, "settings_provider", None)
        if settings_provider:
            settings_provider.add_on_settings_changed_hook(self._on_settings_changed)

    def unregister_hooks(self) -> None:
        if not self.server:
            return

        text_sync = getattr(self.server, "text_sync_manager", None)
        if text_sync:
            text_sync.remove_on_save_hook(self._on_file_saved)

        settings_provider = getattr(self.server, "settings_provider", None)
        if settings_provider:
            settings_provider.remove_on_settings_changed_hook(self._on_settings_changed)

    async def _on_file_saved(self, params: DidSaveTextDocumentParams) -> None:
        """Reload when the configuration file is saved."""
        fs_path = to_fs_path(params.text_document.uri)
        if fs_path is None:
            return

        path = Path(fs_path)
        current = self.scanner.configuration_file

        if current is not None and _same_file(path, current):
            await self.reload()
        elif current is None and is_configuration_file(path):
            await self.initialize()

    async def _on_settings_changed(self, settings: TailwindSettings) -> None:
        """Rescan when the configured file path changes."""
        if settings.configuration_file == self.scanner.explicit_path:
            return

        self.scanner.explicit_path = settings.configuration_file
        await self.initialize()

    def _log(self, type: MessageType, message: str) -> None:
        if self.server:
            self.server.window_log_message(LogMessageParams(type=type, message=message))


def _same_file(a: Path, b: Path) -> bool:
    try:
        return a.resolve() == b.resolve()
    except OSError:
        return a == b
