"""Tag tokenization for markup navigation.

This module scans raw markup text for tag-like tokens with a single regular
pattern and classifies each one as opening, closing, self-closing or void.
Anything that does not match the pattern, such as a stray ``<``, is invisible
to the tokenizer and ends up in the surrounding text.
"""

import re
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Iterator, List, Optional

from markup_navigator.shared import TokenizerConfig, get_logger

# <, optional /, name, optional whitespace-led attribute text, optional /, >
TAG_PATTERN = re.compile(r"<\/?([a-zA-Z0-9-]+)(\s[^<>]*?)?(\/?)>")

logger = get_logger(__name__, component="markup_tokenizer")


class TagTokenKind(Enum):
    """Classification of a tag token."""

    OPENING = auto()        # <name ...>
    CLOSING = auto()        # </name>
    SELF_CLOSING = auto()   # <name ... />
    VOID = auto()           # <img ...> and other void elements


@dataclass(frozen=True)
class TagToken:
    """A single tag-like token found in the document text."""

    text: str
    name: str
    attribute_text: str
    self_closing: bool
    start: int
    kind: TagTokenKind
    attribute_start: int = -1

    @property
    def end(self) -> int:
        """Inclusive offset of the token's final ``>``."""
        return self.start + len(self.text) - 1

    @property
    def is_closing(self) -> bool:
        return self.kind is TagTokenKind.CLOSING

    @property
    def creates_leaf(self) -> bool:
        """Whether the token produces a self-closing tag node."""
        return self.kind in (TagTokenKind.SELF_CLOSING, TagTokenKind.VOID)


@dataclass
class TokenizationResult:
    """Result of a tokenization pass."""

    tokens: List[TagToken]
    character_count: int = 0
    processing_time_ms: float = 0.0
    kind_distribution: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Calculate the token kind distribution."""
        if self.tokens and not self.kind_distribution:
            for token in self.tokens:
                name = token.kind.name
                self.kind_distribution[name] = self.kind_distribution.get(name, 0) + 1

    @property
    def token_count(self) -> int:
        return len(self.tokens)


class MarkupTokenizer:
    """Tag tokenizer driven by :data:`TAG_PATTERN`.

    The tokenizer is stateless between calls: the same text always yields the
    same tokens.
    """

    def __init__(self, config: Optional[TokenizerConfig] = None) -> None:
        self.config = config or TokenizerConfig()

    def classify(self, text: str, name: str, self_closing: bool) -> TagTokenKind:
        """Classify a matched token.

        A leading ``</`` wins over everything else, an explicit ``/>`` wins
        over the void-element list.
        """
        if text.startswith("</"):
            return TagTokenKind.CLOSING
        if self_closing:
            return TagTokenKind.SELF_CLOSING
        if self.config.is_void(name):
            return TagTokenKind.VOID
        return TagTokenKind.OPENING

    def iter_tokens(self, text: str) -> Iterator[TagToken]:
        """Yield tag tokens in document order."""
        for match in TAG_PATTERN.finditer(text):
            full = match.group(0)
            name = match.group(1)
            attribute_text = match.group(2) or ""
            self_closing = match.group(3) == "/"
            yield TagToken(
                text=full,
                name=name,
                attribute_text=attribute_text,
                self_closing=self_closing,
                start=match.start(),
                kind=self.classify(full, name, self_closing),
                attribute_start=match.start(2) if attribute_text else -1,
            )

    def tokenize(self, text: str) -> TokenizationResult:
        """Tokenize ``text`` completely.

        Args:
            text: Raw markup text

        Returns:
            TokenizationResult with all tokens and timing information
        """
        start_time = time.perf_counter()
        tokens = list(self.iter_tokens(text))
        processing_time = (time.perf_counter() - start_time) * 1000

        result = TokenizationResult(
            tokens=tokens,
            character_count=len(text),
            processing_time_ms=processing_time,
        )

        if self.config.enable_metrics:
            logger.debug(
                "Tokenization completed",
                extra={
                    "token_count": result.token_count,
                    "character_count": result.character_count,
                    "processing_time_ms": processing_time,
                },
            )

        return result
