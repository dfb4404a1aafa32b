from unittest.mock import Mock

import pytest
from lsprotocol.types import (
    CompletionItem,
    CompletionItemKind,
    Position,
    Range,
    TextEdit,
)

from tailwindls.completion.composer import CompletionSet, TailwindCompletionSet
from tailwindls.lsp.completion_broker import (
    WORDS_SET_MONIKER,
    CompletionBroker,
    CompletionSession,
    ComputationFinished,
    NativeCompletionSession,
    TextSnapshot,
)

URI = "file:///project/index.html"
SOURCE = '<div class="flex items-center">\n<span class="tw-p'


@pytest.fixture
def broker():
    return CompletionBroker(Mock())


@pytest.fixture
def snapshot():
    return TextSnapshot(uri=URI, source=SOURCE, version=3)


def _position():
    return Position(line=1, character=len('<span class="tw-p'))


def test_snapshot_text_before():
    snapshot = TextSnapshot(uri=URI, source="abcdef")

    assert snapshot.text_before(3) == "abc"


def test_start_session_supersedes_older_sessions(broker, snapshot):
    first = broker.start_session(snapshot, len(SOURCE), _position())
    second = broker.start_session(snapshot, len(SOURCE), _position())

    assert first.dismissed
    assert first.native.dismissed
    assert not second.dismissed
    assert broker.get_sessions(URI) == [second]


def test_sessions_are_per_document(broker, snapshot):
    other = TextSnapshot(uri="file:///project/other.html", source="")

    session = broker.start_session(snapshot, 0, Position(line=0, character=0))
    broker.start_session(other, 0, Position(line=0, character=0))

    assert broker.get_sessions(URI) == [session]


def test_dismiss_sessions(broker, snapshot):
    session = broker.start_session(snapshot, 0, Position(line=0, character=0))

    broker.dismiss_sessions(URI)

    assert session.dismissed
    assert broker.get_sessions(URI) == []


def test_text_before_caret(broker, snapshot):
    session = broker.start_session(snapshot, len(SOURCE), _position())

    assert session.text_before_caret() == SOURCE


@pytest.mark.asyncio
async def test_native_computation_collects_unique_words(snapshot):
    native = NativeCompletionSession(snapshot)

    items = await native.compute()

    labels = [item.label for item in items]
    assert labels == ["div", "class", "flex", "items-center", "span", "tw-p"]
    assert all(item.kind == CompletionItemKind.Text for item in items)
    assert native.computed


@pytest.mark.asyncio
async def test_native_computation_disabled(snapshot):
    native = NativeCompletionSession(snapshot, enabled=False)

    assert await native.compute() == []
    assert native.computed


@pytest.mark.asyncio
async def test_compute_native_broadcasts_event(broker, snapshot):
    events = []

    async def on_finished(event: ComputationFinished):
        events.append(event)

    broker.add_on_computation_finished_hook(on_finished)
    session = broker.start_session(snapshot, len(SOURCE), _position())

    await broker.compute_native(session)

    assert len(events) == 1
    assert events[0].uri == URI
    assert events[0].native is session.native
    assert [item.label for item in events[0].items][0] == "div"


@pytest.mark.asyncio
async def test_compute_native_skips_superseded_session(broker, snapshot):
    events = []

    async def on_finished(event):
        events.append(event)

    broker.add_on_computation_finished_hook(on_finished)
    session = broker.start_session(snapshot, len(SOURCE), _position())
    broker.start_session(snapshot, len(SOURCE), _position())

    await broker.compute_native(session)

    assert events == []


@pytest.mark.asyncio
async def test_hook_errors_are_logged(broker, snapshot):
    async def failing(event):
        raise KeyError("x")

    broker.add_on_computation_finished_hook(failing)
    session = broker.start_session(snapshot, len(SOURCE), _position())

    await broker.compute_native(session)

    assert broker.server.window_log_message.called


@pytest.mark.asyncio
async def test_removed_hook_is_not_called(broker, snapshot):
    events = []

    async def on_finished(event):
        events.append(event)

    broker.add_on_computation_finished_hook(on_finished)
    broker.remove_on_computation_finished_hook(on_finished)

    await broker.compute_native(broker.start_session(snapshot, 0, _position()))

    assert events == []


def test_set_completion_sets_keeps_selection(broker, snapshot):
    session = broker.start_session(snapshot, 0, _position())
    host = CompletionSet(moniker="a", display_name="A")
    tailwind = TailwindCompletionSet(moniker="All", display_name="All")

    session.selected_completion_set = tailwind
    session.set_completion_sets([host, tailwind])
    assert session.selected_completion_set is tailwind

    session.set_completion_sets([host])
    assert session.selected_completion_set is host

    session.set_completion_sets([])
    assert session.selected_completion_set is None


def test_filter_removes_labels_shown_by_earlier_sets(broker, snapshot):
    session = broker.start_session(snapshot, 0, _position())
    first = CompletionSet("a", "A", items=[CompletionItem(label="x"), CompletionItem(label="y")])
    second = CompletionSet("b", "B", items=[CompletionItem(label="y"), CompletionItem(label="z")])
    session.set_completion_sets([first, second])

    session.filter()

    assert [item.label for item in second.items] == ["z"]


@pytest.mark.asyncio
async def test_to_completion_list(broker, snapshot):
    session = broker.start_session(snapshot, len(SOURCE), _position())
    applicable = Range(start=Position(line=1, character=13), end=_position())
    existing_edit = TextEdit(range=applicable, new_text="custom")
    tailwind = TailwindCompletionSet(
        "All",
        "All",
        items=[
            CompletionItem(label="tw-p-4", insert_text="tw-p-4"),
            CompletionItem(label="flex", text_edit=existing_edit),
        ],
        applicable_to=applicable,
    )
    session.set_completion_sets([tailwind])
    await session.native.compute()

    result = session.to_completion_list()

    assert result.is_incomplete
    by_label = {item.label: item for item in result.items}
    assert by_label["tw-p-4"].text_edit == TextEdit(range=applicable, new_text="tw-p-4")
    assert by_label["flex"].text_edit is existing_edit
    # Words not already offered are appended without edits.
    assert by_label["span"].text_edit is None
    assert [item.label for item in result.items].count("flex") == 1


@pytest.mark.asyncio
async def test_dismissed_native_session_is_not_shown(broker, snapshot):
    session = broker.start_session(snapshot, len(SOURCE), _position())
    await session.native.compute()
    session.native.dismiss()

    result = session.to_completion_list()

    assert result.items == []
    assert not result.is_incomplete


@pytest.mark.asyncio
async def test_words_only_list_is_complete(broker, snapshot):
    session = broker.start_session(snapshot, len(SOURCE), _position())
    await session.native.compute()

    result = session.to_completion_list()

    assert not result.is_incomplete
    assert "items-center" in [item.label for item in result.items]


def test_session_uri(snapshot):
    session = CompletionSession(snapshot, 0, Position(line=0, character=0), NativeCompletionSession(snapshot))

    assert session.uri == URI
    assert WORDS_SET_MONIKER == "Words"
