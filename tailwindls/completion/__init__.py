"""Tailwind CSS completion core: scope detection, vocabulary and merging."""
from .composer import CompletionSet, TailwindCompletionSet, compose
from .merger import merge
from .scope import ReplacementSpan, ScopeMatch, compute_replacement_span, detect_scope
from .vocabulary import VocabularyModel, load_base_vocabulary

__all__ = [
    'CompletionSet',
    'ReplacementSpan',
    'ScopeMatch',
    'TailwindCompletionSet',
    'VocabularyModel',
    'compose',
    'compute_replacement_span',
    'detect_scope',
    'load_base_vocabulary',
    'merge',
]
