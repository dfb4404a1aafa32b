"""
Tailwind CSS LSP capabilities.

Provides completion of utility classes inside `class="..."` attributes and
hover information for the class under the cursor.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from lsprotocol.types import (
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionParams,
    Hover,
    HoverParams,
    MarkupContent,
    MarkupKind,
    Position,
    Range,
)

from tailwindls.completion.composer import (
    CompletionSet,
    TailwindCompletionSet,
    compose,
)
from tailwindls.completion.generator import generate_completions, split_modifiers
from tailwindls.completion.scope import (
    ReplacementSpan,
    compute_replacement_span,
    compute_token_span,
    current_class_token,
    detect_scope,
)
from tailwindls.lsp.completion_broker import ComputationFinished, CompletionSession
from tailwindls.lsp.capabilities.capabilities import (
    CompletionAugmentCapability,
    CompletionCapability,
    HoverCapability,
)
from tailwindls.settings import EnabledState, TailwindSettings
from tailwindls.workspace.vocabulary_cache import VocabularyCache

if TYPE_CHECKING:
    from tailwindls.lsp.tailwind_language_server import TailwindLanguageServer

# The value may not contain tag delimiters, so an unclosed attribute is not
# paired with the quote of the next attribute.
CLASS_ATTRIBUTE_PATTERN = re.compile(r'class="([^"<>]*)"', re.IGNORECASE)


def _utf16_length(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


def span_to_range(session: CompletionSession, span: ReplacementSpan) -> Range:
    """
    Convert a span ending at the caret to an LSP range.

    The span never crosses a line break, so only the character of the
    caret position moves.
    """
    typed = span.text(session.snapshot.source)
    start = Position(
        line=session.position.line,
        character=max(0, session.position.character - _utf16_length(typed)),
    )
    return Range(start=start, end=session.position)


class TailwindFeatureMixin:
    """
    Enabled flag and vocabulary lookup shared by the Tailwind capabilities.

    The flag starts UNKNOWN, is read from the settings provider on first use
    and then follows the settings change notifications.
    """

    server: TailwindLanguageServer
    _show_autocomplete: EnabledState

    def _subscribe_settings(self) -> None:
        settings_provider = self.server.settings_provider
        if settings_provider:
            settings_provider.add_on_settings_changed_hook(self._on_settings_changed)

    def _unsubscribe_settings(self) -> None:
        settings_provider = self.server.settings_provider
        if settings_provider:
            settings_provider.remove_on_settings_changed_hook(self._on_settings_changed)

    def _vocabulary(self) -> VocabularyCache | None:
        workspace_cache = self.server.workspace_cache
        if not workspace_cache:
            return None
        return workspace_cache.caches.get("vocabulary")  # pyright: ignore

    async def _is_enabled(self) -> bool:
        if self._show_autocomplete is EnabledState.UNKNOWN:
            settings = (
                await self.server.settings_provider.get_settings()
                if self.server.settings_provider
                else TailwindSettings()
            )
            self._show_autocomplete = EnabledState.from_flag(settings.enable_tailwind_css)

        return self._show_autocomplete is EnabledState.ENABLED

    async def _on_settings_changed(self, settings: TailwindSettings) -> None:
        self._show_autocomplete = EnabledState.from_flag(settings.enable_tailwind_css)


class TailwindCompletionCapability(TailwindFeatureMixin, CompletionAugmentCapability):
    """
    Adds Tailwind CSS classes to completion sessions inside class attributes.

    Also pulls matching items of the host's native (word) completion into
    the Tailwind set once they are computed, and dismisses the native
    session so there is only one list.
    """

    def __init__(self, server) -> None:
        super().__init__(server)
        self._show_autocomplete = EnabledState.UNKNOWN
        self._initialize_success = True

    @property
    def name(self) -> str:
        return "tailwind_completion"

    @property
    def description(self) -> str:
        return "Autocomplete Tailwind CSS classes in class attributes"

    def register(self) -> None:
        broker = self.server.completion_broker
        if broker:
            broker.add_on_computation_finished_hook(self._on_computation_finished)

        self._subscribe_settings()

    def dispose(self) -> None:
        broker = self.server.completion_broker
        if broker:
            broker.remove_on_computation_finished_hook(self._on_computation_finished)

        self._unsubscribe_settings()

    async def augment_completion_session(
        self, session: CompletionSession, completion_sets: list[CompletionSet]
    ) -> None:
        if not await self._is_enabled():
            return

        vocabulary = self._vocabulary()
        if vocabulary is None or not vocabulary.has_configuration_file:
            return

        if not vocabulary.initialized or not self._initialize_success:
            self._initialize_success = await vocabulary.initialize(notify=False)
            if not self._initialize_success:
                return

        scope = detect_scope(session.text_before_caret())
        if not scope.is_in_scope:
            return

        # One model reference for the whole request; reloads swap the reference.
        model = vocabulary.model
        token = current_class_token(scope.partial_text)
        completions = generate_completions(token, model)

        span = compute_replacement_span(session.snapshot.source, session.caret_offset)
        applicable_to = span_to_range(session, span)

        completion_sets[:] = compose(completion_sets, completions, applicable_to)
        session.selected_completion_set = next(
            s for s in completion_sets if isinstance(s, TailwindCompletionSet)
        )

    async def _on_computation_finished(self, event: ComputationFinished) -> None:
        """Inject native items matching the current token into the Tailwind set."""
        sessions = self.server.completion_broker.get_sessions(event.uri)
        tailwind_session = next(
            (
                s for s in sessions
                if isinstance(s.selected_completion_set, TailwindCompletionSet)
            ),
            None,
        )
        if tailwind_session is None:
            return

        scope = detect_scope(tailwind_session.text_before_caret())
        if not scope.is_in_scope:
            return

        token = current_class_token(scope.partial_text).lower()
        new_items = [
            CompletionItem(
                label=item.label,
                insert_text=item.insert_text or item.label,
                kind=item.kind or CompletionItemKind.Variable,
            )
            for item in event.items
            if item.label.lower().startswith(token)
        ]

        if tailwind_session.dismissed:
            return

        tailwind_session.selected_completion_set.add_completions(new_items)  # pyright: ignore
        event.native.dismiss()
        # Re-filter so the appended items show up like the initial ones.
        tailwind_session.filter()


class DocumentClassesCompletionCapability(CompletionCapability):
    """Offers class names already used in class attributes of open documents."""

    @property
    def name(self) -> str:
        return "document_classes"

    @property
    def description(self) -> str:
        return "Classes used in open documents"

    async def can_handle(self, params: CompletionParams) -> bool:
        doc = self.server.workspace.get_text_document(params.text_document.uri)
        offset = doc.offset_at_position(params.position)
        return detect_scope(doc.source[:offset]).is_in_scope

    async def complete(self, params: CompletionParams) -> CompletionList:
        names: dict[str, None] = {}
        for doc in list(self.server.workspace.text_documents.values()):
            for match in CLASS_ATTRIBUTE_PATTERN.finditer(doc.source):
                names.update(dict.fromkeys(match.group(1).split()))

        items = [
            CompletionItem(
                label=name,
                kind=CompletionItemKind.Reference,
                detail="Used in workspace",
                insert_text=name,
            )
            for name in names
        ]
        return CompletionList(is_incomplete=False, items=items)


class TailwindHoverCapability(TailwindFeatureMixin, HoverCapability):
    """Shows the value behind a Tailwind CSS class on hover."""

    def __init__(self, server) -> None:
        super().__init__(server)
        self._show_autocomplete = EnabledState.UNKNOWN

    @property
    def name(self) -> str:
        return "tailwind_hover"

    @property
    def description(self) -> str:
        return "Show color, spacing and screen values of Tailwind CSS classes"

    def register(self) -> None:
        self._subscribe_settings()

    def dispose(self) -> None:
        self._unsubscribe_settings()

    async def can_handle(self, params: HoverParams) -> bool:
        if not await self._is_enabled():
            return False

        vocabulary = self._vocabulary()
        if vocabulary is None or not vocabulary.has_configuration_file:
            return False

        doc = self.server.workspace.get_text_document(params.text_document.uri)
        offset = doc.offset_at_position(params.position)
        return detect_scope(doc.source[:offset]).is_in_scope

    async def hover(self, params: HoverParams) -> Hover | None:
        vocabulary = self._vocabulary()
        if vocabulary is None:
            return None

        doc = self.server.workspace.get_text_document(params.text_document.uri)
        offset = doc.offset_at_position(params.position)
        token = compute_token_span(doc.source, offset).text(doc.source)

        _, stem = split_modifiers(token)
        model = vocabulary.model
        expanded = model.find_class(stem)
        if expanded is None:
            return None

        content = f"**Tailwind CSS:** `{stem}`"
        if expanded.source.category:
            content += f"\n**Category:** {expanded.source.category}"
        if expanded.color is not None:
            content += f"\n**Color:** #{model.colors[expanded.color]}"
        if expanded.spacing is not None:
            content += f"\n**Spacing:** {model.spacing[expanded.spacing]}"
        if expanded.screen is not None:
            screen = model.get_screen(expanded.screen)
            if screen:
                content += f"\n**Screen:** {screen.value}"

        return Hover(contents=MarkupContent(kind=MarkupKind.Markdown, value=content))
