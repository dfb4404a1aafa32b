"""
Completion set composition.

A completion session shows one or more completion sets (tabs in some
editors, a single flattened list in LSP clients). Tailwind candidates are
merged into the host's only set when there is exactly one, so the user sees
one list; otherwise they get their own "All" set.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from lsprotocol.types import CompletionItem, Range

ALL_SET_MONIKER = "All"


@dataclass
class CompletionSet:
    """
    A named list of completion items.

    Attributes:
        moniker: Stable identifier of the set.
        display_name: Name shown to the user.
        items: Completion items; labels are unique within the set.
        applicable_to: Range replaced by an accepted item, if known.
    """

    moniker: str
    display_name: str
    items: list[CompletionItem] = field(default_factory=list)
    applicable_to: Range | None = None

    def labels(self) -> set[str]:
        return {item.label for item in self.items}

    def add_completions(self, items: Iterable[CompletionItem]) -> int:
        """Append items whose label is not in the set yet. Returns the count added."""
        seen = self.labels()
        added = 0
        for item in items:
            if item.label in seen:
                continue
            seen.add(item.label)
            self.items.append(item)
            added += 1
        return added


@dataclass
class TailwindCompletionSet(CompletionSet):
    """A completion set that carries Tailwind CSS candidates."""


def compose(
    host_sets: Sequence[CompletionSet],
    generated: Sequence[CompletionItem],
    applicable_to: Range | None = None,
) -> list[CompletionSet]:
    """
    Merge generated candidates into the host's completion sets.

    With exactly one host set, its items and the generated ones are merged
    into a TailwindCompletionSet that keeps the host set's moniker and
    replaces it. Otherwise the host sets are kept as they are and an "All"
    set with only the generated items is added.
    """
    if len(host_sets) == 1:
        host_set = host_sets[0]
        merged = TailwindCompletionSet(
            moniker=host_set.moniker,
            display_name=host_set.display_name,
            applicable_to=applicable_to or host_set.applicable_to,
        )
        merged.add_completions(host_set.items)
        merged.add_completions(generated)
        return [merged]

    all_set = TailwindCompletionSet(
        moniker=ALL_SET_MONIKER,
        display_name=ALL_SET_MONIKER,
        applicable_to=applicable_to,
    )
    all_set.add_completions(generated)
    return [*host_sets, all_set]
