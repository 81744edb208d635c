"""Analyzer utilities shared by indexing and query translation.

Text is first split into lowercase tokens on whitespace and hyphens. Indexed
terms and pipeline-processed query terms then run through a small filter
chain: a trimmer that strips leading and trailing punctuation, a stopword
filter, and a suffix stemmer. Query clauses that bypass the pipeline only see
the tokenizer output, which is what makes prefix and fuzzy matching operate
on the text the user actually typed.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
import re
from typing import Protocol


@dataclass
class Token:
    """Represents a token emitted by analyzers."""

    text: str
    position: int
    start_char: int
    end_char: int

    def copy_with(self, **updates: object) -> Token:
        data = {
            "text": self.text,
            "position": self.position,
            "start_char": self.start_char,
            "end_char": self.end_char,
        }
        data.update(updates)
        return Token(**data)  # type: ignore[arg-type]


class Tokenizer(Protocol):
    """Protocol implemented by tokenizers."""

    def __call__(self, text: str) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class TokenFilter(Protocol):
    """Protocol implemented by token filters."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class SeparatorTokenizer:
    """Split text on whitespace and hyphens, lowercasing every token."""

    def __init__(self, separator: str = r"[\s\-]+") -> None:
        self.separator = re.compile(separator, re.UNICODE)

    def __call__(self, text: str) -> Iterator[Token]:
        position = 0
        cursor = 0
        for match in self.separator.finditer(text):
            if match.start() > cursor:
                yield self._token(text, cursor, match.start(), position)
                position += 1
            cursor = match.end()
        if cursor < len(text):
            yield self._token(text, cursor, len(text), position)

    @staticmethod
    def _token(text: str, start: int, end: int, position: int) -> Token:
        return Token(text=text[start:end].lower(), position=position, start_char=start, end_char=end)


class TrimmerFilter:
    """Strip non-word characters from both ends of each token."""

    _LEADING = re.compile(r"^\W+", re.UNICODE)
    _TRAILING = re.compile(r"\W+$", re.UNICODE)

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            trimmed = self._TRAILING.sub("", self._LEADING.sub("", token.text))
            if not trimmed:
                continue
            if trimmed == token.text:
                yield token
            else:
                yield token.copy_with(text=trimmed)


DEFAULT_STOPWORDS = (
    "a",
    "an",
    "and",
    "are",
    "as",
    "at",
    "be",
    "but",
    "by",
    "for",
    "if",
    "in",
    "into",
    "is",
    "it",
    "no",
    "not",
    "of",
    "on",
    "or",
    "such",
    "that",
    "the",
    "their",
    "then",
    "there",
    "these",
    "they",
    "this",
    "to",
    "was",
    "will",
    "with",
)


class StopFilter:
    """Removes stopwords from the stream."""

    def __init__(self, stopwords: Sequence[str] | None = None) -> None:
        vocab = stopwords if stopwords is not None else DEFAULT_STOPWORDS
        self.stopwords = frozenset(word.lower() for word in vocab)

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if token.text not in self.stopwords:
                yield token


# Derivational suffixes, applied after inflectional endings are gone.
_DERIVATIONAL_RULES: tuple[tuple[str, str], ...] = (
    ("ization", "ize"),
    ("ational", "ate"),
    ("fulness", "ful"),
    ("ousness", "ous"),
    ("iveness", "ive"),
    ("tional", "tion"),
    ("biliti", "ble"),
    ("entli", "ent"),
    ("ousli", "ous"),
    ("alism", "al"),
    ("aliti", "al"),
    ("ation", "ate"),
    ("izer", "ize"),
    ("ator", "ate"),
    ("enci", "ence"),
    ("anci", "ance"),
    ("abli", "able"),
    ("alli", "al"),
    ("ness", ""),
    ("ment", ""),
)

_VOWELS = frozenset("aeiou")


def _has_vowel(stem: str) -> bool:
    return any(char in _VOWELS for char in stem)


def _strip_plural(word: str) -> str:
    if word.endswith("sses"):
        return word[:-2]
    if word.endswith("ies") and len(word) > 4:
        return word[:-2]
    if word.endswith(("ches", "shes", "xes")) and len(word) > 4:
        return word[:-2]
    if word.endswith("ss") or not word.endswith("s") or len(word) <= 3:
        return word
    return word[:-1]


def _strip_verb_ending(word: str) -> str:
    if word.endswith("eed"):
        return word[:-1] if len(word) > 4 else word
    for suffix in ("ingly", "edly", "ing", "ed"):
        if not word.endswith(suffix):
            continue
        stem = word[: -len(suffix)]
        if len(stem) < 2 or not _has_vowel(stem):
            return word
        if stem.endswith(("at", "bl", "iz")):
            return stem + "e"
        if len(stem) > 2 and stem[-1] == stem[-2] and stem[-1] not in "lsz" and stem[-1] not in _VOWELS:
            return stem[:-1]
        return stem
    return word


def _normalize_terminal_y(word: str) -> str:
    if word.endswith("y") and len(word) > 2 and _has_vowel(word[:-1]):
        return word[:-1] + "i"
    return word


def _strip_derivational(word: str) -> str:
    for suffix, replacement in _DERIVATIONAL_RULES:
        if word.endswith(suffix) and len(word) - len(suffix) >= 3:
            return word[: -len(suffix)] + replacement
    return word


def stem(word: str) -> str:
    """Reduce ``word`` to a stem so that morphological variants collide.

    >>> stem("searching")
    'search'
    >>> stem("queries") == stem("query")
    True
    """
    if len(word) <= 2:
        return word
    result = _strip_plural(word)
    result = _strip_verb_ending(result)
    result = _normalize_terminal_y(result)
    return _strip_derivational(result)


class StemFilter:
    """Applies :func:`stem` to every token."""

    def __init__(self, stemmer: Callable[[str], str] = stem) -> None:
        self._stem = stemmer

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            stemmed = self._stem(token.text)
            yield token if stemmed == token.text else token.copy_with(text=stemmed)


class SearchAnalyzer:
    """Tokenizer plus filter pipeline.

    ``tokenize`` only splits and lowercases; ``run_pipeline`` applies the
    filters; calling the analyzer does both.
    """

    def __init__(self, tokenizer: Tokenizer | None = None, filters: Sequence[TokenFilter] | None = None) -> None:
        self.tokenizer = tokenizer or SeparatorTokenizer()
        self.filters = list(filters or [])

    def tokenize(self, text: str) -> list[Token]:
        if not text:
            return []
        return list(self.tokenizer(text))

    def run_pipeline(self, tokens: Iterable[Token]) -> list[Token]:
        stream: Iterable[Token] = tokens
        for token_filter in self.filters:
            stream = token_filter(stream)
        processed = list(stream)
        for idx, token in enumerate(processed):  # normalize positions post-filtering
            token.position = idx
        return processed

    def process_term(self, term: str) -> list[str]:
        """Run a single already-tokenized term through the pipeline."""
        seed = Token(text=term, position=0, start_char=0, end_char=len(term))
        return [token.text for token in self.run_pipeline([seed])]

    def __call__(self, text: str) -> list[Token]:
        return self.run_pipeline(self.tokenize(text))


def _standard(*, apply_stemming: bool = True) -> SearchAnalyzer:
    filters: list[TokenFilter] = [TrimmerFilter(), StopFilter()]
    if apply_stemming:
        filters.append(StemFilter())
    return SearchAnalyzer(SeparatorTokenizer(), filters)


_ANALYZER_FACTORIES: dict[str, Callable[[], SearchAnalyzer]] = {
    "default": lambda: _standard(),
    "english": lambda: _standard(),
    "english-nostem": lambda: _standard(apply_stemming=False),
    "minimal": lambda: SearchAnalyzer(SeparatorTokenizer(), [TrimmerFilter()]),
}


def available_analyzers() -> list[str]:
    return sorted(_ANALYZER_FACTORIES)


def get_analyzer(name: str | None) -> SearchAnalyzer:
    """Return analyzer by name, defaulting to the standard analyzer."""

    if name is None:
        return _ANALYZER_FACTORIES["default"]()
    normalized = name.lower()
    if normalized not in _ANALYZER_FACTORIES:
        msg = f"Unknown analyzer '{name}'. Available: {available_analyzers()}"
        raise ValueError(msg)
    return _ANALYZER_FACTORIES[normalized]()
