from pygls.lsp.server import LanguageServer

from tailwindls.lsp.capabilities.capabilities import CapabilityManager
from tailwindls.lsp.completion_broker import CompletionBroker
from tailwindls.lsp.text_sync_manager import TextSyncManager
from tailwindls.settings import SettingsProvider
from tailwindls.workspace.cache import WorkspaceCache


class TailwindLanguageServer(LanguageServer):
    """
    Custom Language Server with Tailwind CSS specific attributes.

    Attributes:
        workspace_cache: Cache holding the Tailwind CSS vocabulary
        capability_manager: Completion and hover handlers
        text_sync_manager: Document save/close hooks
        settings_provider: Client settings and change notifications
        completion_broker: Active completion sessions per document
    """

    def __init__(self, name: str, version: str):
        super().__init__(name, version)

        self.workspace_cache: WorkspaceCache | None = None
        self.capability_manager: CapabilityManager | None = None
        self.text_sync_manager: TextSyncManager | None = None
        self.settings_provider: SettingsProvider | None = None
        self.completion_broker: CompletionBroker | None = None
