from pathlib import Path

import pytest

from tailwindls.workspace.config_file import (
    ConfigurationError,
    ConfigurationParser,
    ConfigurationScanner,
    find_configuration_file,
    is_configuration_file,
)


def test_finds_file_in_workspace_root(tmp_path: Path):
    config = tmp_path / "tailwind.config.json"
    config.write_text("{}")

    assert find_configuration_file(tmp_path) == config


def test_finds_file_in_subdirectory(tmp_path: Path):
    config = tmp_path / "src" / "web" / "tailwind.config.yml"
    config.parent.mkdir(parents=True)
    config.write_text("prefix: tw-")

    assert find_configuration_file(tmp_path) == config


def test_skips_excluded_directories(tmp_path: Path):
    config = tmp_path / "node_modules" / "pkg" / "tailwind.config.json"
    config.parent.mkdir(parents=True)
    config.write_text("{}")

    assert find_configuration_file(tmp_path) is None


def test_respects_max_depth(tmp_path: Path):
    config = tmp_path / "a" / "b" / "c" / "d" / "tailwind.config.json"
    config.parent.mkdir(parents=True)
    config.write_text("{}")

    assert find_configuration_file(tmp_path, max_depth=3) is None
    assert find_configuration_file(tmp_path, max_depth=4) == config


def test_is_configuration_file():
    assert is_configuration_file(Path("/x/tailwind.config.yaml"))
    assert not is_configuration_file(Path("/x/tailwind.config.js"))


def test_scanner_explicit_relative_path(tmp_path: Path):
    config = tmp_path / "config" / "tw.json"
    config.parent.mkdir()
    config.write_text("{}")
    (tmp_path / "tailwind.config.json").write_text("{}")

    scanner = ConfigurationScanner(tmp_path, "config/tw.json")

    assert scanner.scan() == config
    assert scanner.has_configuration_file


def test_scanner_missing_explicit_path(tmp_path: Path):
    (tmp_path / "tailwind.config.json").write_text("{}")

    scanner = ConfigurationScanner(tmp_path, "missing.json")

    assert scanner.scan() is None
    assert not scanner.has_configuration_file


@pytest.mark.asyncio
async def test_parser_reads_json(tmp_path: Path):
    (tmp_path / "tailwind.config.json").write_text(
        '{"prefix": "tw-", "theme": {"extend": {"spacing": {"18": "4.5rem"}}}}'
    )
    scanner = ConfigurationScanner(tmp_path)
    scanner.scan()

    config = await ConfigurationParser(scanner).get_configuration()

    assert config == {"prefix": "tw-", "theme": {"extend": {"spacing": {"18": "4.5rem"}}}}


@pytest.mark.asyncio
async def test_parser_reads_yaml(tmp_path: Path):
    (tmp_path / "tailwind.config.yml").write_text(
        "theme:\n  colors:\n    brand: '#1DA1F2'\n"
    )
    scanner = ConfigurationScanner(tmp_path)
    scanner.scan()

    config = await ConfigurationParser(scanner).get_configuration()

    assert config["theme"]["colors"]["brand"] == "#1DA1F2"


@pytest.mark.asyncio
async def test_parser_empty_file_is_empty_configuration(tmp_path: Path):
    (tmp_path / "tailwind.config.yml").write_text("")
    scanner = ConfigurationScanner(tmp_path)
    scanner.scan()

    assert await ConfigurationParser(scanner).get_configuration() == {}


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["{not json", "- a\n- b\n", "just a string"])
async def test_parser_rejects_invalid_files(tmp_path: Path, content):
    (tmp_path / "tailwind.config.json").write_text(content)
    scanner = ConfigurationScanner(tmp_path)
    scanner.scan()

    with pytest.raises(ConfigurationError):
        await ConfigurationParser(scanner).get_configuration()


@pytest.mark.asyncio
async def test_parser_without_file(tmp_path: Path):
    scanner = ConfigurationScanner(tmp_path)
    scanner.scan()

    with pytest.raises(ConfigurationError):
        await ConfigurationParser(scanner).get_configuration()
