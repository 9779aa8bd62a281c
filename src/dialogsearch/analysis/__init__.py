"""Text analysis: tokenization, quote detection and dialogue payloads."""

from dialogsearch.analysis.analyzer import (
    Analyzer,
    AnalyzerBuilder,
    ComponentRegistry,
    default_registry,
    dialogue_analyzer,
    standard_analyzer,
)
from dialogsearch.analysis.dialogue import DialoguePayloadFilter
from dialogsearch.analysis.filters import (
    ENGLISH_STOP_WORDS,
    DebugTokenFilter,
    LowerCaseFilter,
    StopFilter,
)
from dialogsearch.analysis.quotation import QuotationFilter, split_quotes
from dialogsearch.analysis.stream import TokenFilter, TokenStream
from dialogsearch.analysis.token import QUOTE, DialoguePayload, Token, TokenType
from dialogsearch.analysis.tokenizer import (
    CharTokenizer,
    LetterTokenizer,
    QuotationTokenizer,
)

__all__ = [
    "ENGLISH_STOP_WORDS",
    "QUOTE",
    "Analyzer",
    "AnalyzerBuilder",
    "CharTokenizer",
    "ComponentRegistry",
    "DebugTokenFilter",
    "DialoguePayload",
    "DialoguePayloadFilter",
    "LetterTokenizer",
    "LowerCaseFilter",
    "QuotationFilter",
    "QuotationTokenizer",
    "StopFilter",
    "Token",
    "TokenFilter",
    "TokenStream",
    "TokenType",
    "default_registry",
    "dialogue_analyzer",
    "split_quotes",
    "standard_analyzer",
]
