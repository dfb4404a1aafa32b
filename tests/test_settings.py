from unittest.mock import Mock

import pytest
from lsprotocol.types import LogMessageParams, MessageType

from tailwindls.settings import (
    EnabledState,
    SettingsProvider,
    TailwindSettings,
    settings_from_options,
)


def test_defaults():
    settings = settings_from_options(None)

    assert settings == TailwindSettings(
        enable_tailwind_css=True,
        configuration_file=None,
        include_document_words=True,
    )


def test_camel_case_options_in_section():
    settings = settings_from_options({
        "tailwindcss": {
            "enableTailwindCss": False,
            "configurationFile": "web/tailwind.config.json",
            "includeDocumentWords": False,
        }
    })

    assert settings.enable_tailwind_css is False
    assert settings.configuration_file == "web/tailwind.config.json"
    assert settings.include_document_words is False


def test_top_level_snake_case_options():
    settings = settings_from_options({"enable_tailwind_css": False})

    assert settings.enable_tailwind_css is False


def test_invalid_values_are_ignored():
    defaults = TailwindSettings(configuration_file="a.json")

    settings = settings_from_options(
        {"enableTailwindCss": "no", "configurationFile": 5, "includeDocumentWords": None},
        defaults,
    )

    assert settings == defaults


def test_empty_configuration_file_clears_it():
    settings = settings_from_options(
        {"configurationFile": ""}, TailwindSettings(configuration_file="a.json")
    )

    assert settings.configuration_file is None


def test_partial_update_keeps_previous_values():
    previous = TailwindSettings(enable_tailwind_css=False, configuration_file="a.json")

    settings = settings_from_options({"includeDocumentWords": False}, previous)

    assert settings.enable_tailwind_css is False
    assert settings.configuration_file == "a.json"
    assert settings.include_document_words is False


def test_enabled_state_from_flag():
    assert EnabledState.from_flag(True) is EnabledState.ENABLED
    assert EnabledState.from_flag(False) is EnabledState.DISABLED


@pytest.mark.asyncio
async def test_update_notifies_hooks():
    provider = SettingsProvider(options={"enableTailwindCss": True})
    received = []

    async def on_changed(settings):
        received.append(settings)

    provider.add_on_settings_changed_hook(on_changed)
    await provider.update({"enableTailwindCss": False})

    assert received == [TailwindSettings(enable_tailwind_css=False)]
    assert (await provider.get_settings()).enable_tailwind_css is False


@pytest.mark.asyncio
async def test_removed_hook_is_not_called():
    provider = SettingsProvider()
    calls = []

    async def on_changed(settings):
        calls.append(settings)

    provider.add_on_settings_changed_hook(on_changed)
    provider.remove_on_settings_changed_hook(on_changed)
    await provider.update({"enableTailwindCss": False})

    assert calls == []


@pytest.mark.asyncio
async def test_hook_errors_are_logged():
    server = Mock()
    provider = SettingsProvider(server)
    called = False

    async def failing(settings):
        raise RuntimeError("boom")

    async def succeeding(settings):
        nonlocal called
        called = True

    provider.add_on_settings_changed_hook(failing)
    provider.add_on_settings_changed_hook(succeeding)
    await provider.update({})

    assert called
    log = server.window_log_message.call_args[0][0]
    assert isinstance(log, LogMessageParams)
    assert log.type == MessageType.Error
    assert "RuntimeError: boom" in log.message
