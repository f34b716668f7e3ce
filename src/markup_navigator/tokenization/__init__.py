"""Tag tokenization for markup navigation.

Key Components:
    MarkupTokenizer: Scans markup text for tag tokens
    TagToken: A single opening, closing, self-closing or void tag token
    TagTokenKind: Enumeration of token classifications
    TokenizationResult: Tokens plus timing and distribution metadata
"""

from .tokenizer import (
    TAG_PATTERN,
    MarkupTokenizer,
    TagToken,
    TagTokenKind,
    TokenizationResult,
)

__all__ = [
    "TAG_PATTERN",
    "MarkupTokenizer",
    "TagToken",
    "TagTokenKind",
    "TokenizationResult",
]
