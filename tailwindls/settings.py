"""
Tailwind CSS settings.

Settings come from the client: first from `initializationOptions`, later
from `workspace/didChangeConfiguration`. Both may wrap the values in a
`tailwindcss` section.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from lsprotocol.types import LogMessageParams, MessageType

if TYPE_CHECKING:
    from tailwindls.lsp.tailwind_language_server import TailwindLanguageServer

SETTINGS_SECTION = "tailwindcss"

OnSettingsChangedHook = Callable[["TailwindSettings"], Awaitable[None]]


class EnabledState(Enum):
    """Cached state of the `enable_tailwind_css` setting."""

    UNKNOWN = "unknown"
    ENABLED = "enabled"
    DISABLED = "disabled"

    @classmethod
    def from_flag(cls, enabled: bool) -> EnabledState:
        return cls.ENABLED if enabled else cls.DISABLED


@dataclass(frozen=True)
class TailwindSettings:
    enable_tailwind_css: bool = True
    configuration_file: str | None = None
    include_document_words: bool = True


# Client-side (camelCase) names of the settings.
_SETTING_KEYS = {
    "enableTailwindCss": "enable_tailwind_css",
    "configurationFile": "configuration_file",
    "includeDocumentWords": "include_document_words",
}


def settings_from_options(
    options: Any, defaults: TailwindSettings | None = None
) -> TailwindSettings:
    """
    Build settings from client options, keeping `defaults` for missing keys.

    Unknown keys and values of the wrong type are ignored.
    """
    settings = defaults or TailwindSettings()
    if not isinstance(options, Mapping):
        return settings

    section = options.get(SETTINGS_SECTION, options)
    if not isinstance(section, Mapping):
        return settings

    changes: dict[str, Any] = {}
    for client_key, field_name in _SETTING_KEYS.items():
        value = section.get(client_key, section.get(field_name))
        if value is None:
            continue
        if field_name == "configuration_file":
            if isinstance(value, str):
                changes[field_name] = value or None
        elif isinstance(value, bool):
            changes[field_name] = value

    return replace(settings, **changes)


class SettingsProvider:
    """
    Holds the current settings and notifies subscribers when they change.

    Usage:
        provider = SettingsProvider(server, initialization_options)
        provider.add_on_settings_changed_hook(self._on_settings_changed)

        settings = await provider.get_settings()
    """

    def __init__(
        self,
        server: TailwindLanguageServer | None = None,
        options: Any = None,
    ) -> None:
        self.server = server
        self._settings = settings_from_options(options)
        self._on_changed_hooks: list[OnSettingsChangedHook] = []

    async def get_settings(self) -> TailwindSettings:
        return self._settings

    @property
    def settings(self) -> TailwindSettings:
        return self._settings

    def add_on_settings_changed_hook(self, hook: OnSettingsChangedHook) -> None:
        self._on_changed_hooks.append(hook)

    def remove_on_settings_changed_hook(self, hook: OnSettingsChangedHook) -> None:
        if hook in self._on_changed_hooks:
            self._on_changed_hooks.remove(hook)

    async def update(self, options: Any) -> TailwindSettings:
        """Apply options from `workspace/didChangeConfiguration`."""
        self._settings = settings_from_options(options, self._settings)

        for hook in list(self._on_changed_hooks):
            try:
                await hook(self._settings)
            except Exception as e:
                if self.server:
                    self.server.window_log_message(
                        LogMessageParams(
                            type=MessageType.Error,
                            message=f"Error in settings hook {hook.__name__}: "
                                    f"{type(e).__name__}: {e}"
                        )
                    )

        return self._settings
