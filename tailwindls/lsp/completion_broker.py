"""
Completion Broker

Tracks the completion sessions of each document. A session is created for
every completion request and holds:

- a snapshot of the document text it was triggered on,
- the completion sets produced by the capabilities,
- the host's native completion (words of the document), computed
  asynchronously after the sets are composed.

When the native computation finishes, subscribers receive a
ComputationFinished event and may copy native items into the session's own
sets and dismiss the native session. A newer request for the same document
supersedes (dismisses) all older sessions of that document.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Awaitable, Callable

from lsprotocol.types import (
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    LogMessageParams,
    MessageType,
    Position,
    TextEdit,
)

from tailwindls.completion.composer import CompletionSet, TailwindCompletionSet

if TYPE_CHECKING:
    from tailwindls.lsp.tailwind_language_server import TailwindLanguageServer

WORDS_SET_MONIKER = "Words"

_WORD_PATTERN = re.compile(r"[A-Za-z_][\w\-:/.]*[\w]|[A-Za-z_]")


@dataclass(frozen=True)
class TextSnapshot:
    """Immutable document text. Offsets are only valid for the same snapshot."""

    uri: str
    source: str
    version: int | None = None

    def text_before(self, offset: int) -> str:
        return self.source[:offset]


class NativeCompletionSession:
    """The host's own completion for a session: words found in the document."""

    def __init__(self, snapshot: TextSnapshot, enabled: bool = True) -> None:
        self.snapshot = snapshot
        self.enabled = enabled
        self.items: list[CompletionItem] = []
        self.dismissed = False
        self.computed = False

    async def compute(self) -> list[CompletionItem]:
        if self.enabled:
            words = dict.fromkeys(_WORD_PATTERN.findall(self.snapshot.source))
            self.items = [
                CompletionItem(label=word, kind=CompletionItemKind.Text)
                for word in words
            ]
        self.computed = True
        return self.items

    def dismiss(self) -> None:
        self.dismissed = True


class CompletionSession:
    """
    One completion request.

    Attributes:
        snapshot: Document text the request was made on.
        caret_offset: Caret offset into `snapshot.source`.
        position: Caret position as sent by the client.
        completion_sets: Sets shown to the user.
        selected_completion_set: The set the user is looking at.
        native: The host's native completion for this request.
    """

    def __init__(
        self,
        snapshot: TextSnapshot,
        caret_offset: int,
        position: Position,
        native: NativeCompletionSession,
    ) -> None:
        self.snapshot = snapshot
        self.caret_offset = caret_offset
        self.position = position
        self.native = native

        self.completion_sets: list[CompletionSet] = []
        self.selected_completion_set: CompletionSet | None = None
        self.dismissed = False

    @property
    def uri(self) -> str:
        return self.snapshot.uri

    def text_before_caret(self) -> str:
        return self.snapshot.text_before(self.caret_offset)

    def set_completion_sets(self, completion_sets: list[CompletionSet]) -> None:
        """Replace the sets, keeping the selection if it is still among them."""
        self.completion_sets = completion_sets
        if not any(s is self.selected_completion_set for s in completion_sets):
            self.selected_completion_set = completion_sets[0] if completion_sets else None

    def filter(self) -> None:
        """
        Re-filter the visible items of every set.

        Drops items whose label is already shown by an earlier set, so each
        display text appears once per session.
        """
        seen: set[str] = set()
        for completion_set in self.completion_sets:
            visible = []
            for item in completion_set.items:
                if item.label in seen:
                    continue
                seen.add(item.label)
                visible.append(item)
            completion_set.items = visible

    def dismiss(self) -> None:
        self.dismissed = True
        self.native.dismiss()

    def to_completion_list(self) -> CompletionList:
        """
        Flatten the session into one LSP completion list.

        Items without an edit get one replacing their set's range. Lists with
        Tailwind candidates are incomplete so clients ask again while the user
        types.
        """
        sets = list(self.completion_sets)
        if self.native.computed and not self.native.dismissed and self.native.items:
            sets.append(
                CompletionSet(
                    moniker=WORDS_SET_MONIKER,
                    display_name=WORDS_SET_MONIKER,
                    items=self.native.items,
                )
            )

        items: list[CompletionItem] = []
        seen: set[str] = set()
        for completion_set in sets:
            for item in completion_set.items:
                if item.label in seen:
                    continue
                seen.add(item.label)
                if item.text_edit is None and completion_set.applicable_to is not None:
                    item.text_edit = TextEdit(
                        range=completion_set.applicable_to,
                        new_text=item.insert_text or item.label,
                    )
                items.append(item)

        return CompletionList(
            is_incomplete=any(isinstance(s, TailwindCompletionSet) for s in sets),
            items=items,
        )


@dataclass
class ComputationFinished:
    """The native completion of `native` has finished computing its items."""

    uri: str
    native: NativeCompletionSession
    items: list[CompletionItem] = field(default_factory=list)


OnComputationFinishedHook = Callable[[ComputationFinished], Awaitable[None]]


class CompletionBroker:
    """
    Registry of active completion sessions per document.

    Usage:
        session = broker.start_session(snapshot, caret_offset, position)
        session.set_completion_sets(sets)
        await broker.compute_native(session)
        return session.to_completion_list()
    """

    def __init__(self, server: TailwindLanguageServer | None = None) -> None:
        self.server = server
        self._sessions: dict[str, list[CompletionSession]] = {}
        self._on_computation_finished_hooks: list[OnComputationFinishedHook] = []

    def get_sessions(self, uri: str) -> list[CompletionSession]:
        """Active (not dismissed) sessions of a document."""
        return [s for s in self._sessions.get(uri, []) if not s.dismissed]

    def start_session(
        self,
        snapshot: TextSnapshot,
        caret_offset: int,
        position: Position,
        include_words: bool = True,
    ) -> CompletionSession:
        """Create a session, superseding older sessions of the document."""
        self.dismiss_sessions(snapshot.uri)

        session = CompletionSession(
            snapshot,
            caret_offset,
            position,
            NativeCompletionSession(snapshot, enabled=include_words),
        )
        self._sessions[snapshot.uri] = [session]
        return session

    def dismiss_sessions(self, uri: str) -> None:
        for session in self._sessions.pop(uri, []):
            session.dismiss()

    async def compute_native(self, session: CompletionSession) -> None:
        """
        Compute the session's native items and broadcast ComputationFinished.

        Nothing is broadcast if the session was superseded in the meantime.
        """
        native = session.native
        items = await asyncio.create_task(native.compute())

        if session.dismissed:
            return

        event = ComputationFinished(uri=session.uri, native=native, items=items)
        for hook in list(self._on_computation_finished_hooks):
            try:
                await hook(event)
            except Exception as e:
                if self.server:
                    self.server.window_log_message(
                        LogMessageParams(
                            type=MessageType.Error,
                            message=f"Error in computation finished hook "
                                    f"{hook.__name__}: {type(e).__name__}: {e}"
                        )
                    )

    def add_on_computation_finished_hook(self, hook: OnComputationFinishedHook) -> None:
        self._on_computation_finished_hooks.append(hook)

    def remove_on_computation_finished_hook(
        self, hook: OnComputationFinishedHook
    ) -> None:
        if hook in self._on_computation_finished_hooks:
            self._on_computation_finished_hooks.remove(hook)
