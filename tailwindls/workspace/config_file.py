"""
Tailwind configuration file discovery and parsing.

Only data configuration files are read (JSON or YAML). JSON is a subset of
YAML, so both go through `yaml.safe_load`. JavaScript configuration files
are not evaluated.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

CONFIGURATION_FILE_NAMES = (
    "tailwind.config.json",
    "tailwind.config.yaml",
    "tailwind.config.yml",
)

EXCLUDED_DIRS = {"venv", "node_modules", ".git", "__pycache__", "vendor"}


class ConfigurationError(Exception):
    """The configuration file could not be read or parsed."""


def is_configuration_file(path: Path) -> bool:
    return path.name in CONFIGURATION_FILE_NAMES


def find_configuration_file(workspace_root: Path, max_depth: int = 3) -> Path | None:
    """
    Find the Tailwind configuration file within a workspace.

    Checks the workspace root first, then subdirectories up to `max_depth`.

    Args:
        workspace_root: The workspace root path
        max_depth: How deep to search below the root

    Returns:
        Path to the configuration file, or None if not found
    """
    found = _configuration_file_in(workspace_root)
    if found:
        return found

    for candidate in _search_subdirectories(workspace_root, max_depth=max_depth):
        found = _configuration_file_in(candidate)
        if found:
            return found

    return None


def _configuration_file_in(directory: Path) -> Path | None:
    for name in CONFIGURATION_FILE_NAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def _search_subdirectories(root: Path, max_depth: int = 3) -> list[Path]:
    """
    Recursively search subdirectories up to max_depth, breadth first.

    Returns list of candidate directories.
    """
    candidates = []
    level = [root]

    for _ in range(max_depth):
        next_level = []
        for path in level:
            try:
                children = sorted(path.iterdir())
            except (PermissionError, FileNotFoundError):
                continue
            for item in children:
                if (
                    item.is_dir()
                    and not item.name.startswith(".")
                    and item.name not in EXCLUDED_DIRS
                ):
                    candidates.append(item)
                    next_level.append(item)
        level = next_level

    return candidates


class ConfigurationScanner:
    """
    Locates the configuration file of a workspace.

    An explicit path (from settings) wins over discovery. Relative paths are
    resolved against the workspace root.
    """

    def __init__(self, workspace_root: Path, explicit_path: str | None = None) -> None:
        self.workspace_root = workspace_root
        self.explicit_path = explicit_path
        self.configuration_file: Path | None = None

    @property
    def has_configuration_file(self) -> bool:
        return self.configuration_file is not None

    def scan(self) -> Path | None:
        if self.explicit_path:
            path = Path(self.explicit_path)
            if not path.is_absolute():
                path = self.workspace_root / path
            self.configuration_file = path if path.is_file() else None
        else:
            self.configuration_file = find_configuration_file(self.workspace_root)

        return self.configuration_file


class ConfigurationParser:
    """Reads the scanner's configuration file into a raw configuration tree."""

    def __init__(self, scanner: ConfigurationScanner) -> None:
        self.scanner = scanner

    async def get_configuration(self) -> dict[str, Any]:
        """
        Parse the configuration file.

        An empty file is an empty configuration.

        Raises:
            ConfigurationError: if there is no file, it cannot be read, is not
                valid JSON/YAML, or its top level is not a mapping.
        """
        path = self.scanner.configuration_file
        if path is None:
            raise ConfigurationError("No Tailwind CSS configuration file found")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot read {path}: {e}") from e

        if data is None:
            return {}

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"{path}: expected a mapping at the top level, "
                f"got {type(data).__name__}"
            )

        return data
