"""Completion candidates for the class token being typed."""

from __future__ import annotations

from lsprotocol.types import CompletionItem, CompletionItemKind

from tailwindls.completion.vocabulary import ExpandedClass, VocabularyModel

MODIFIER_SEPARATOR = ":"
IMPORTANT_MARKER = "!"


def split_modifiers(token: str) -> tuple[str, str]:
    """
    Split `hover:md:tw-p-4` into (`hover:md:`, `tw-p-4`).

    An important marker (`!tw-p-4`) stays with the modifiers so the stem is
    matched without it.
    """
    index = token.rfind(MODIFIER_SEPARATOR)
    modifiers, stem = token[: index + 1], token[index + 1 :]

    if stem.startswith(IMPORTANT_MARKER):
        modifiers, stem = modifiers + IMPORTANT_MARKER, stem[1:]

    return modifiers, stem


def generate_completions(token: str, model: VocabularyModel) -> list[CompletionItem]:
    """
    Build completion items for `token` from `model`.

    Candidates keep the modifiers already typed so that they can replace the
    whole token. Matching is a case-insensitive prefix match on the stem.
    """
    modifiers, stem = split_modifiers(token)
    stem_lower = stem.lower()

    items: list[CompletionItem] = []

    if not modifiers.endswith(IMPORTANT_MARKER):
        for name in _modifier_names(model):
            if name.lower().startswith(stem_lower):
                text = f"{modifiers}{name}{MODIFIER_SEPARATOR}"
                items.append(
                    CompletionItem(
                        label=text,
                        kind=CompletionItemKind.Keyword,
                        detail="Modifier",
                        insert_text=text,
                    )
                )

    for expanded in model.expand_classes():
        class_name = model.prefixed(expanded.name)
        if class_name.lower().startswith(stem_lower):
            items.append(_class_item(f"{modifiers}{class_name}", expanded, model))

    return items


def _modifier_names(model: VocabularyModel) -> list[str]:
    return model.modifiers + [
        screen.name for screen in model.screens if screen.name not in model.modifiers
    ]


def _class_item(
    text: str, expanded: ExpandedClass, model: VocabularyModel
) -> CompletionItem:
    if expanded.color is not None:
        return CompletionItem(
            label=text,
            kind=CompletionItemKind.Color,
            detail=expanded.source.category,
            documentation=f"#{model.colors[expanded.color]}",
            insert_text=text,
        )

    if expanded.spacing is not None:
        return CompletionItem(
            label=text,
            kind=CompletionItemKind.Constant,
            detail=model.spacing[expanded.spacing],
            documentation=expanded.source.category,
            insert_text=text,
        )

    if expanded.screen is not None:
        screen = model.get_screen(expanded.screen)
        return CompletionItem(
            label=text,
            kind=CompletionItemKind.Constant,
            detail=screen.value if screen else None,
            documentation=expanded.source.category,
            insert_text=text,
        )

    return CompletionItem(
        label=text,
        kind=CompletionItemKind.Constant,
        detail=expanded.source.category,
        insert_text=text,
    )
