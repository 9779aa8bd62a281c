"""Analyzers: named, reusable recipes for building token stream chains.

Components are registered by name in a ``ComponentRegistry`` so chains can
be assembled from configuration::

    analyzer = (
        AnalyzerBuilder()
        .with_tokenizer("quotation")
        .add_token_filter("quotation")
        .add_token_filter("lowercase")
        .add_token_filter("dialoguepayload")
        .build()
    )
    tokens = analyzer.analyze('He said "hello there" to her.')

Every call to ``Analyzer.token_stream`` builds a fresh chain, so one
analyzer can serve many threads, one document per chain.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TextIO

from dialogsearch.analysis.dialogue import DialoguePayloadFilter
from dialogsearch.analysis.filters import DebugTokenFilter, LowerCaseFilter, StopFilter
from dialogsearch.analysis.quotation import QuotationFilter
from dialogsearch.analysis.stream import TokenStream
from dialogsearch.analysis.token import Token
from dialogsearch.analysis.tokenizer import (
    CharTokenizer,
    LetterTokenizer,
    QuotationTokenizer,
)
from dialogsearch.config import DialogSearchSettings, get_logger, get_settings
from dialogsearch.exceptions import RegistryError

logger = get_logger(__name__)

TokenizerFactory = Callable[..., CharTokenizer]
FilterFactory = Callable[..., TokenStream]


class ComponentRegistry:
    """Catalog of tokenizer and filter factories keyed by name."""

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._tokenizers: dict[str, TokenizerFactory] = {}
        self._filters: dict[str, FilterFactory] = {}

    def register_tokenizer(self, name: str, factory: TokenizerFactory) -> None:
        """Register a tokenizer factory.

        Args:
            name: Lookup name, case-insensitive
            factory: Callable accepting keyword arguments, returning a tokenizer
        """
        key = name.lower()
        if key in self._tokenizers and self._tokenizers[key] is not factory:
            logger.warning("Overriding existing tokenizer", name=key)
        self._tokenizers[key] = factory

    def register_filter(self, name: str, factory: FilterFactory) -> None:
        """Register a token filter factory.

        Args:
            name: Lookup name, case-insensitive
            factory: Callable taking the upstream stream plus keyword arguments
        """
        key = name.lower()
        if key in self._filters and self._filters[key] is not factory:
            logger.warning("Overriding existing token filter", name=key)
        self._filters[key] = factory

    @property
    def tokenizer_names(self) -> list[str]:
        return sorted(self._tokenizers)

    @property
    def filter_names(self) -> list[str]:
        return sorted(self._filters)

    def tokenizer_factory(self, name: str) -> TokenizerFactory:
        """Look up a tokenizer factory.

        Raises:
            RegistryError: If no tokenizer is registered under ``name``
        """
        try:
            return self._tokenizers[name.lower()]
        except KeyError:
            raise RegistryError(
                f"Unknown tokenizer '{name}'",
                hint=f"Available tokenizers: {', '.join(self.tokenizer_names)}",
            ) from None

    def filter_factory(self, name: str) -> FilterFactory:
        """Look up a token filter factory.

        Raises:
            RegistryError: If no filter is registered under ``name``
        """
        try:
            return self._filters[name.lower()]
        except KeyError:
            raise RegistryError(
                f"Unknown token filter '{name}'",
                hint=f"Available filters: {', '.join(self.filter_names)}",
            ) from None


def default_registry() -> ComponentRegistry:
    """Return a registry holding every built-in component."""
    registry = ComponentRegistry()
    registry.register_tokenizer("quotation", QuotationTokenizer)
    registry.register_tokenizer("letter", LetterTokenizer)
    registry.register_filter("quotation", QuotationFilter)
    registry.register_filter("lowercase", LowerCaseFilter)
    registry.register_filter("stop", StopFilter)
    registry.register_filter("dialoguepayload", DialoguePayloadFilter)
    registry.register_filter("debug", DebugTokenFilter)
    return registry


@dataclass
class _Step:
    factory: Callable[..., Any]
    kwargs: dict[str, Any] = field(default_factory=dict)


class Analyzer:
    """Builds a new tokenizer plus filter chain for every input."""

    def __init__(self, tokenizer: _Step, filters: list[_Step]) -> None:
        self._tokenizer = tokenizer
        self._filters = list(filters)

    def token_stream(self, source: str | TextIO) -> TokenStream:
        """Create a chain over ``source``.

        The caller owns the returned stream: reset it, drain it, close it.
        """
        tokenizer = self._tokenizer.factory(**self._tokenizer.kwargs)
        tokenizer.set_reader(source)
        stream: TokenStream = tokenizer
        for step in self._filters:
            stream = step.factory(stream, **step.kwargs)
        return stream

    def analyze(self, source: str | TextIO) -> list[Token]:
        """Run ``source`` through a fresh chain and collect the tokens."""
        with self.token_stream(source) as stream:
            stream.reset()
            return list(stream)


class AnalyzerBuilder:
    """Fluent builder assembling an ``Analyzer`` from registered names."""

    def __init__(self, registry: ComponentRegistry | None = None) -> None:
        self.registry = registry or default_registry()
        self._tokenizer: _Step | None = None
        self._filters: list[_Step] = []

    def with_tokenizer(self, name: str, **kwargs: Any) -> AnalyzerBuilder:
        self._tokenizer = _Step(self.registry.tokenizer_factory(name), kwargs)
        return self

    def add_token_filter(self, name: str, **kwargs: Any) -> AnalyzerBuilder:
        self._filters.append(_Step(self.registry.filter_factory(name), kwargs))
        return self

    def build(self) -> Analyzer:
        """Create the analyzer.

        Raises:
            RegistryError: If no tokenizer was chosen
        """
        if self._tokenizer is None:
            raise RegistryError(
                "Analyzer has no tokenizer",
                hint="Call with_tokenizer() before build()",
            )
        return Analyzer(self._tokenizer, self._filters)


def dialogue_analyzer(settings: DialogSearchSettings | None = None) -> Analyzer:
    """Index-time analyzer that stamps dialogue payloads on every word."""
    settings = settings or get_settings()
    builder = (
        AnalyzerBuilder()
        .with_tokenizer(
            "quotation", max_token_length=settings.analysis_max_token_length
        )
        .add_token_filter("quotation")
    )
    if settings.analysis_lowercase:
        builder.add_token_filter("lowercase")
    if settings.analysis_stop_words:
        builder.add_token_filter("stop")
    builder.add_token_filter("dialoguepayload")
    if settings.analysis_debug_tokens:
        builder.add_token_filter("debug", name="after dialogue payload")
    return builder.build()


def standard_analyzer(settings: DialogSearchSettings | None = None) -> Analyzer:
    """Query-time analyzer: letter runs, normalised like the index terms."""
    settings = settings or get_settings()
    builder = AnalyzerBuilder().with_tokenizer(
        "letter", max_token_length=settings.analysis_max_token_length
    )
    if settings.analysis_lowercase:
        builder.add_token_filter("lowercase")
    if settings.analysis_stop_words:
        builder.add_token_filter("stop")
    return builder.build()
