from lsprotocol.types import CompletionItem, Position, Range

from tailwindls.completion.composer import (
    ALL_SET_MONIKER,
    CompletionSet,
    TailwindCompletionSet,
    compose,
)


def _items(*labels):
    return [CompletionItem(label=label) for label in labels]


RANGE = Range(start=Position(line=0, character=12), end=Position(line=0, character=14))


def test_single_host_set_is_replaced_by_merged_set():
    host = CompletionSet(moniker="html", display_name="HTML", items=_items("card", "navbar"))

    result = compose([host], _items("flex", "p-4"), RANGE)

    assert len(result) == 1
    merged = result[0]
    assert isinstance(merged, TailwindCompletionSet)
    assert merged.moniker == "html"
    assert merged.display_name == "HTML"
    assert [item.label for item in merged.items] == ["card", "navbar", "flex", "p-4"]
    assert merged.applicable_to == RANGE


def test_single_host_set_is_not_modified():
    host = CompletionSet(moniker="html", display_name="HTML", items=_items("card"))

    compose([host], _items("flex"))

    assert [item.label for item in host.items] == ["card"]


def test_merged_set_has_no_duplicate_labels():
    host = CompletionSet(moniker="html", display_name="HTML", items=_items("tw-p-18", "card"))

    merged = compose([host], _items("tw-p-1", "tw-p-18"))[0]

    labels = [item.label for item in merged.items]
    assert labels.count("tw-p-18") == 1
    assert labels == ["tw-p-18", "card", "tw-p-1"]


def test_no_host_sets_adds_all_set():
    result = compose([], _items("flex"), RANGE)

    assert len(result) == 1
    assert isinstance(result[0], TailwindCompletionSet)
    assert result[0].moniker == ALL_SET_MONIKER
    assert result[0].applicable_to == RANGE


def test_several_host_sets_are_left_untouched():
    first = CompletionSet(moniker="a", display_name="A", items=_items("x"))
    second = CompletionSet(moniker="b", display_name="B", items=_items("y"))

    result = compose([first, second], _items("flex"))

    assert result[0] is first
    assert result[1] is second
    assert result[2].moniker == ALL_SET_MONIKER
    assert [item.label for item in result[2].items] == ["flex"]


def test_add_completions_skips_known_labels():
    completion_set = CompletionSet(moniker="a", display_name="A", items=_items("x"))

    added = completion_set.add_completions(_items("x", "y", "y"))

    assert added == 1
    assert [item.label for item in completion_set.items] == ["x", "y"]
