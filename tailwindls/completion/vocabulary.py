"""
Vocabulary of Tailwind CSS utility classes.

The vocabulary holds class name templates, modifiers, screen breakpoints,
colors and spacing values. Class names may contain placeholders that are
expanded against the other categories:

    "bg-{color}"   -> bg-red-500, bg-white, ...
    "p-{spacing}"  -> p-0, p-px, p-4, ...
    "max-w-screen-{screen}" -> max-w-screen-sm, ...
"""

from __future__ import annotations

import copy
from collections.abc import Iterator
from dataclasses import dataclass, field
from importlib import resources
from typing import Any

import yaml

COLOR_PLACEHOLDER = "{color}"
SPACING_PLACEHOLDER = "{spacing}"
SCREEN_PLACEHOLDER = "{screen}"

BASE_VOCABULARY_RESOURCE = "base_vocabulary.yml"


@dataclass
class UtilityClass:
    """A class name template with an optional category tag."""

    name: str
    category: str | None = None

    @property
    def is_template(self) -> bool:
        return (
            COLOR_PLACEHOLDER in self.name
            or SPACING_PLACEHOLDER in self.name
            or SCREEN_PLACEHOLDER in self.name
        )


@dataclass
class ScreenBreakpoint:
    name: str
    value: str


@dataclass
class ExpandedClass:
    """A concrete class name produced from a template."""

    name: str
    source: UtilityClass
    color: str | None = None
    spacing: str | None = None
    screen: str | None = None


@dataclass
class VocabularyModel:
    """
    Aggregate of everything completion candidates are generated from.

    `classes` and `colors`/`spacing` are keyed by name; dicts keep insertion
    order, so generated candidates come out in declaration order.
    """

    classes: dict[str, UtilityClass] = field(default_factory=dict)
    modifiers: list[str] = field(default_factory=list)
    screens: list[ScreenBreakpoint] = field(default_factory=list)
    colors: dict[str, str] = field(default_factory=dict)
    spacing: dict[str, str] = field(default_factory=dict)
    prefix: str | None = None

    def copy(self) -> VocabularyModel:
        return copy.deepcopy(self)

    # ===== Lookups =====

    def get_screen(self, name: str) -> ScreenBreakpoint | None:
        for screen in self.screens:
            if screen.name == name:
                return screen
        return None

    def add_modifier(self, modifier: str) -> None:
        if modifier not in self.modifiers:
            self.modifiers.append(modifier)

    def set_screen(self, name: str, value: str) -> None:
        """Replace the screen named `name` in place, or append it."""
        for index, screen in enumerate(self.screens):
            if screen.name == name:
                self.screens[index] = ScreenBreakpoint(name, value)
                return
        self.screens.append(ScreenBreakpoint(name, value))

    # ===== Expansion =====

    def expand_classes(self) -> Iterator[ExpandedClass]:
        """Yield every concrete class name, without the prefix."""
        for utility in self.classes.values():
            if not utility.is_template:
                yield ExpandedClass(name=utility.name, source=utility)
                continue

            if COLOR_PLACEHOLDER in utility.name:
                for color in self.colors:
                    yield ExpandedClass(
                        name=utility.name.replace(COLOR_PLACEHOLDER, color),
                        source=utility,
                        color=color,
                    )
            elif SPACING_PLACEHOLDER in utility.name:
                for spacing in self.spacing:
                    yield ExpandedClass(
                        name=utility.name.replace(SPACING_PLACEHOLDER, spacing),
                        source=utility,
                        spacing=spacing,
                    )
            else:
                for screen in self.screens:
                    yield ExpandedClass(
                        name=utility.name.replace(SCREEN_PLACEHOLDER, screen.name),
                        source=utility,
                        screen=screen.name,
                    )

    def prefixed(self, class_name: str) -> str:
        return f"{self.prefix or ''}{class_name}"

    def find_class(self, prefixed_name: str) -> ExpandedClass | None:
        """Find the expansion matching a (prefixed) class name."""
        prefix = self.prefix or ""
        if not prefixed_name.startswith(prefix):
            return None

        name = prefixed_name[len(prefix):]
        for expanded in self.expand_classes():
            if expanded.name == name:
                return expanded
        return None


def vocabulary_from_dict(data: dict[str, Any]) -> VocabularyModel:
    """Build a model from the bundled base vocabulary layout."""
    model = VocabularyModel()

    for name, category in (data.get("classes") or {}).items():
        model.classes[name] = UtilityClass(name=name, category=category)

    for modifier in data.get("modifiers") or []:
        model.add_modifier(modifier)

    for name, value in (data.get("screens") or {}).items():
        model.screens.append(ScreenBreakpoint(name=str(name), value=str(value)))

    model.colors = {str(k): str(v) for k, v in (data.get("colors") or {}).items()}
    model.spacing = {str(k): str(v) for k, v in (data.get("spacing") or {}).items()}
    model.prefix = data.get("prefix")

    return model


def load_base_vocabulary() -> VocabularyModel:
    """Load the bundled Tailwind CSS base vocabulary."""
    text = (
        resources.files("tailwindls.data")
        .joinpath(BASE_VOCABULARY_RESOURCE)
        .read_text(encoding="utf-8")
    )
    return vocabulary_from_dict(yaml.safe_load(text))
