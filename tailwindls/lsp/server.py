from pathlib import Path

from lsprotocol.types import (
    INITIALIZE,
    SHUTDOWN,
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_HOVER,
    WORKSPACE_DID_CHANGE_CONFIGURATION,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    DidChangeConfigurationParams,
    DidCloseTextDocumentParams,
    HoverParams,
    InitializeParams,
    LogMessageParams,
    MessageType,
)
from pygls.uris import to_fs_path

from tailwindls.lsp.capabilities.capabilities import CapabilityManager
from tailwindls.lsp.completion_broker import CompletionBroker
from tailwindls.lsp.tailwind_language_server import TailwindLanguageServer
from tailwindls.lsp.text_sync_manager import TextSyncManager
from tailwindls.settings import SettingsProvider
from tailwindls.workspace.cache import WorkspaceCache
from tailwindls.workspace.config_file import ConfigurationScanner

# Characters that start a new class token or follow a modifier.
TRIGGER_CHARACTERS = ['"', " ", ":", "-"]


def _workspace_root(params: InitializeParams) -> Path | None:
    if params.workspace_folders:
        fs_path = to_fs_path(params.workspace_folders[0].uri)
        if fs_path:
            return Path(fs_path)
    if params.root_uri:
        fs_path = to_fs_path(params.root_uri)
        if fs_path:
            return Path(fs_path)
    if params.root_path:
        return Path(params.root_path)
    return None


def create_server() -> TailwindLanguageServer:
    """
    Creates and returns a configured Language Server instance.

    The LanguageServer class from pygls handles:
    - JSON-RPC communication with clients (editors)
    - Request/response lifecycle
    - Keeping server.workspace in sync with open documents
    """
    server = TailwindLanguageServer("tailwindls", "0.1.0")

    # Infrastructure that must exist before the client connects, so its
    # handlers are advertised in the server capabilities.
    server.settings_provider = SettingsProvider(server)
    server.completion_broker = CompletionBroker(server)
    server.text_sync_manager = TextSyncManager(server)
    server.text_sync_manager.register_handlers()

    async def _dismiss_sessions(params: DidCloseTextDocumentParams) -> None:
        server.completion_broker.dismiss_sessions(params.text_document.uri)

    server.text_sync_manager.add_on_close_hook(_dismiss_sessions)

    @server.feature(INITIALIZE)
    async def initialize(ls: TailwindLanguageServer, params: InitializeParams):
        """
        Load settings, find the Tailwind configuration file and build the
        vocabulary.
        """
        settings = await ls.settings_provider.update(params.initialization_options)

        workspace_root = _workspace_root(params)
        if workspace_root is None:
            ls.window_log_message(
                LogMessageParams(MessageType.Info, "No workspace folder opened")
            )
            return

        scanner = ConfigurationScanner(workspace_root, settings.configuration_file)
        ls.workspace_cache = WorkspaceCache(workspace_root, scanner, server=ls)
        await ls.workspace_cache.initialize()

        vocabulary = ls.workspace_cache.caches["vocabulary"]
        count = sum(1 for _ in vocabulary.model.expand_classes())  # pyright: ignore
        ls.window_log_message(
            LogMessageParams(MessageType.Info, f"Loaded {count} Tailwind CSS classes")
        )

        ls.capability_manager = CapabilityManager(ls)
        ls.capability_manager.register_all()

    @server.feature(SHUTDOWN)
    def shutdown(ls: TailwindLanguageServer, params):
        """Remove every subscription made during initialization."""
        if ls.capability_manager:
            ls.capability_manager.dispose()
        if ls.workspace_cache:
            ls.workspace_cache.dispose()

    @server.feature(WORKSPACE_DID_CHANGE_CONFIGURATION)
    async def did_change_configuration(
        ls: TailwindLanguageServer, params: DidChangeConfigurationParams
    ):
        await ls.settings_provider.update(params.settings)

    @server.feature(
        TEXT_DOCUMENT_COMPLETION,
        CompletionOptions(trigger_characters=TRIGGER_CHARACTERS),
    )
    async def completion(ls: TailwindLanguageServer, params: CompletionParams):
        if ls.capability_manager:
            return await ls.capability_manager.handle_completion(params)
        return CompletionList(is_incomplete=False, items=[])

    @server.feature(TEXT_DOCUMENT_HOVER)
    async def hover(ls: TailwindLanguageServer, params: HoverParams):
        if ls.capability_manager:
            return await ls.capability_manager.handle_hover(params)
        return None

    return server
