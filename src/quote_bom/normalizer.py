#!/usr/bin/env python3
"""
Text normalizer for PDF-extracted quotation text.

PDF text runs split product codes, numbers, words and e-mail addresses at
arbitrary points. The rules below glue the known artifacts back together.
Rules run in a fixed order; later rules expect earlier ones to have already
collapsed spacing.
"""

import re
import logging
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)


VOCABULARY = [
    'Quotation', 'Company', 'Software', 'Support', 'Hardware', 'Commodity',
    'Customer', 'Partner', 'Prepared', 'Expires', 'Number', 'Description',
    'Discounted', 'Extended', 'Configuration', 'Subscription', 'Performance',
    'Capacity', 'Physical', 'Platform',
]

# A - B  ->  A-B
SPACED_HYPHEN = re.compile(r'(?<=[A-Za-z0-9])[ \t]*-[ \t]*(?=[A-Za-z0-9])')

# "January 30, 20 26"  ->  "January 30, 2026"
SPLIT_YEAR = re.compile(r'(\b\d{1,2},\s*)(\d{2})\s+(\d{2})\b')
# "113, 400.00"  ->  "113,400.00"
SPLIT_THOUSANDS_COMMA = re.compile(r'(\d),\s+(\d{3})\b')
# "15 180.00"  ->  "15180.00"
SPLIT_THOUSANDS_GROUP = re.compile(r'\b(\d{1,3})\s+(\d{3}[.,]\d)')
# "500 .00"  ->  "500.00"
SPLIT_DECIMAL = re.compile(r'(\d)\s*\.\s+(\d{2})\b|(\d)\s+\.(\d{2})\b')

SPLIT_EMAIL_AT = re.compile(r'([A-Za-z0-9._%+-])\s*@\s*([A-Za-z0-9-])')
SPLIT_EMAIL_DOT = re.compile(r'(@[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)*)(?:\s+\.\s*|\.\s+)([a-z]{2,})\b')
SPLIT_CURRENCY = re.compile(r'\$\s+(?=\d)')

WHITESPACE = re.compile(r'\s+')


def _vocabulary_pattern(word: str) -> re.Pattern:
    letters = [re.escape(ch) for ch in word]
    return re.compile(r'\b' + r'\s*'.join(letters) + r'\b', re.IGNORECASE)


def _join_match(match: re.Match) -> str:
    return WHITESPACE.sub('', match.group(0))


class TextNormalizer:
    """Repairs tokenization artifacts introduced by PDF text extraction."""

    def __init__(self, vocabulary: Optional[Iterable[str]] = None):
        words = list(vocabulary) if vocabulary is not None else VOCABULARY
        self.vocabulary_patterns: List[re.Pattern] = [_vocabulary_pattern(w) for w in words]

    def normalize(self, raw: str) -> str:
        """
        Normalize raw PDF text.

        Args:
            raw: Text as produced by the PDF decoder

        Returns:
            Text with artifacts repaired and whitespace collapsed to single spaces
        """
        if not raw:
            return ""

        text = self.join_hyphens(raw)
        text = self.merge_digit_runs(text)
        text = self.join_vocabulary(text)
        text = self.join_emails_and_currency(text)
        text = WHITESPACE.sub(' ', text).strip()

        logger.debug(f"Normalized {len(raw)} characters into {len(text)}")
        return text

    def join_hyphens(self, text: str) -> str:
        return SPACED_HYPHEN.sub('-', text)

    def merge_digit_runs(self, text: str) -> str:
        """
        Merge digit runs that PDF extraction split apart.

        This is a fixed-width heuristic and cannot tell a split number from two
        adjacent numbers, e.g. a quantity followed by a price with no "$".
        """
        text = SPLIT_YEAR.sub(r'\1\2\3', text)
        text = SPLIT_THOUSANDS_COMMA.sub(r'\1,\2', text)
        text = SPLIT_THOUSANDS_GROUP.sub(r'\1\2', text)
        text = SPLIT_DECIMAL.sub(lambda m: f"{m.group(1) or m.group(3)}.{m.group(2) or m.group(4)}", text)
        return text

    def join_vocabulary(self, text: str) -> str:
        for pattern in self.vocabulary_patterns:
            text = pattern.sub(_join_match, text)
        return text

    def join_emails_and_currency(self, text: str) -> str:
        text = SPLIT_EMAIL_AT.sub(r'\1@\2', text)
        text = SPLIT_EMAIL_DOT.sub(r'\1.\2', text)
        text = SPLIT_CURRENCY.sub('$', text)
        return text


_default_normalizer = TextNormalizer()


def normalize_text(raw: str) -> str:
    """Convenience function to normalize text with the default vocabulary."""
    return _default_normalizer.normalize(raw)
