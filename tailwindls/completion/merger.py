"""
Configuration merger.

Applies a parsed Tailwind configuration to a base vocabulary in three
phases, always in this order:

1. Global:   top-level settings (`prefix`).
2. Override: entries under `theme` replace base entries sharing their key;
             entries with a new key are inserted.
3. Extend:   entries under `theme.extend` are appended only when no entry
             with the same key exists.

The base model is never modified. Malformed entries are skipped; shape
errors on a whole category skip that category.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from tailwindls.completion.config_values import (
    ConfigShapeError,
    RawValue,
    as_mapping,
    as_sequence,
    as_text,
    normalize_hex,
)
from tailwindls.completion.vocabulary import UtilityClass, VocabularyModel

OVERRIDE_KEY = "theme"
EXTEND_KEY = "extend"
PREFIX_KEY = "prefix"
DEFAULT_COLOR_KEY = "DEFAULT"

# Receives (model, key, value, replace) and stores one normalized entry.
EntrySetter = Callable[[VocabularyModel, str, Any, bool], None]


def merge(base: VocabularyModel, config: Mapping[str, Any]) -> VocabularyModel:
    """
    Return a new vocabulary with `config` applied to `base`.

    Raises ConfigShapeError only when `config` itself is not a mapping.
    """
    config = as_mapping(config, "configuration")
    model = base.copy()

    _apply_global(model, config)

    theme = config.get(OVERRIDE_KEY)
    if theme is None:
        return model

    try:
        theme = as_mapping(theme, OVERRIDE_KEY)
    except ConfigShapeError:
        return model

    _apply_section(model, theme, replace=True)

    extend = theme.get(EXTEND_KEY)
    if extend is not None:
        try:
            _apply_section(model, as_mapping(extend, EXTEND_KEY), replace=False)
        except ConfigShapeError:
            pass

    return model


# ===== Phases =====


def _apply_global(model: VocabularyModel, config: Mapping[str, Any]) -> None:
    prefix = config.get(PREFIX_KEY)
    if prefix is None:
        return

    try:
        model.prefix = as_text(prefix, PREFIX_KEY) or None
    except ConfigShapeError:
        pass


def _apply_section(
    model: VocabularyModel, section: Mapping[str, Any], replace: bool
) -> None:
    _apply_classes(model, section.get("classes"), replace)
    _apply_modifiers(model, section.get("modifiers"))
    _apply_mapping(model, section.get("screens"), "screens", _set_screen, replace)
    _apply_mapping(model, section.get("colors"), "colors", _set_color, replace)
    _apply_mapping(model, section.get("spacing"), "spacing", _set_spacing, replace)


# ===== Categories =====


def _apply_mapping(
    model: VocabularyModel,
    value: RawValue,
    field: str,
    setter: EntrySetter,
    replace: bool,
) -> None:
    if value is None:
        return

    try:
        entries = as_mapping(value, field)
    except ConfigShapeError:
        return

    for key, entry in entries.items():
        try:
            setter(model, as_text(key, field), entry, replace)
        except ConfigShapeError:
            continue


def _apply_classes(model: VocabularyModel, value: RawValue, replace: bool) -> None:
    if value is None:
        return

    if isinstance(value, Mapping):
        entries = value.items()
    else:
        try:
            entries = [(name, None) for name in as_sequence(value, "classes")]
        except ConfigShapeError:
            return

    for name, category in entries:
        try:
            name = as_text(name, "classes")
            category = None if category is None else as_text(category, f"classes.{name}")
        except ConfigShapeError:
            continue

        if not name or (not replace and name in model.classes):
            continue
        model.classes[name] = UtilityClass(name=name, category=category)


def _apply_modifiers(model: VocabularyModel, value: RawValue) -> None:
    """Modifiers are a set; override and extend both add missing tokens."""
    if value is None:
        return

    try:
        modifiers = as_sequence(value, "modifiers")
    except ConfigShapeError:
        return

    for modifier in modifiers:
        try:
            modifier = as_text(modifier, "modifiers").rstrip(":")
        except ConfigShapeError:
            continue
        if modifier:
            model.add_modifier(modifier)


# ===== Entry setters =====


def _set_color(model: VocabularyModel, name: str, value: Any, replace: bool) -> None:
    """Colors are either a hex value or a mapping of shades."""
    if isinstance(value, Mapping):
        for shade, shade_value in value.items():
            try:
                shade = as_text(shade, f"colors.{name}")
                key = name if shade == DEFAULT_COLOR_KEY else f"{name}-{shade}"
                _set_color(model, key, shade_value, replace)
            except ConfigShapeError:
                continue
        return

    hex_value = normalize_hex(value)
    if hex_value is None:
        raise ConfigShapeError(f"colors.{name}", "a hex color", value)

    if replace or name not in model.colors:
        model.colors[name] = hex_value


def _set_spacing(model: VocabularyModel, name: str, value: Any, replace: bool) -> None:
    length = as_text(value, f"spacing.{name}")
    if replace or name not in model.spacing:
        model.spacing[name] = length


def _set_screen(model: VocabularyModel, name: str, value: Any, replace: bool) -> None:
    media = _screen_media(name, value)
    if replace or model.get_screen(name) is None:
        model.set_screen(name, media)


def _screen_media(name: str, value: Any) -> str:
    """
    Screens are a width, or a mapping using `min`/`max` or `raw`:

        tablet: 640px
        wide: {min: 1280px}
        portrait: {raw: "(orientation: portrait)"}
    """
    if not isinstance(value, Mapping):
        return as_text(value, f"screens.{name}")

    if "raw" in value:
        return as_text(value["raw"], f"screens.{name}.raw")

    parts = []
    if "min" in value:
        parts.append(f"(min-width: {as_text(value['min'], f'screens.{name}.min')})")
    if "max" in value:
        parts.append(f"(max-width: {as_text(value['max'], f'screens.{name}.max')})")

    if not parts:
        raise ConfigShapeError(f"screens.{name}", "min, max or raw", value)

    return " and ".join(parts)
