"""
Cleaner - Regex and table driven text cleaning and normalization.

Handles:
- Escaped newline / carriage-return markers
- Unicode escape sequences
- URL removal (http(s):// and bare www. forms)
- Digit and special character removal
- Sentence punctuation stripping
- Contraction expansion (language tables)
- Lowercasing

All methods are pure: no I/O and no state between calls.
"""

import re

from .contractions import load_table

# Sentence-level punctuation removed by normalize()
NORMALIZE_PUNCTUATION = '.,!?:;()[]"„»«›‹–'


class Cleaner:
    """
    Stateless text cleaner.

    Usage:
        cleaner = Cleaner()
        text = cleaner.process(raw, contractions=True, language="EN")
    """

    def __init__(self):
        """Compile regex patterns once."""
        self._escaped_markers = ("\\n", "\\r")
        self._unicode_escape_pattern = re.compile(r"\\u[a-f0-9]{4}", re.IGNORECASE)

        # Requires a domain-like token of 2+ chars after the host; the URL
        # alternatives rely on '.' and '/' being present, so this runs before
        # character stripping.
        self._url_pattern = re.compile(
            r"https?://(?:www\.|(?!www))[a-zA-Z0-9][a-zA-Z0-9-]+[a-zA-Z0-9]\.[^\s]{2,}"
            r"|www\.[a-zA-Z0-9][a-zA-Z0-9-]+[a-zA-Z0-9]\.[^\s]{2,}"
            r"|https?://(?:www\.|(?!www))[a-zA-Z0-9]+\.[^\s]{2,}"
            r"|www\.[a-zA-Z0-9]+\.[^\s]{2,}"
        )
        self._digit_pattern = re.compile(r"\d")
        # \w is Unicode-aware, so umlauts and other extended Latin letters stay
        self._special_char_pattern = re.compile(r"[^\w\s.'´`äÄöÖüÜß]")
        self._multi_period_pattern = re.compile(r"\.{2,}")
        self._multi_space_pattern = re.compile(r" {2,}")

        self._punctuation_table = str.maketrans("", "", NORMALIZE_PUNCTUATION)

    def clean(self, text: str) -> str:
        """
        Strip markup remnants, URLs, digits and punctuation.

        Args:
            text: Raw extracted text

        Returns:
            Cleaned text with collapsed periods and spaces
        """
        # Stripping digits or symbols can expose a new URL, so repeat until
        # a pass changes nothing. Every pass that changes text shortens it.
        while True:
            cleaned = self._clean_pass(text)
            if cleaned == text:
                return cleaned
            text = cleaned

    def _clean_pass(self, text: str) -> str:
        text = self._remove_escaped_markers(text)
        text = self._unicode_escape_pattern.sub("", text)
        text = self._remove_urls(text)
        text = self._digit_pattern.sub("", text)
        text = self._special_char_pattern.sub("", text)
        text = self._multi_period_pattern.sub(" ", text)
        text = self._multi_space_pattern.sub(" ", text)
        return text

    def normalize(
        self,
        text: str,
        contractions: bool = False,
        language: str = "EN",
        lowercase: bool = False
    ) -> str:
        """
        Strip sentence punctuation, then optionally expand contractions and lowercase.

        Args:
            text: Input text (cleaned or raw)
            contractions: Expand contractions with the language's table
            language: Language code selecting the contraction table
            lowercase: Lowercase the final string

        Returns:
            Normalized text
        """
        text = text.translate(self._punctuation_table)

        if contractions:
            text = load_table(language).expand(text)

        if lowercase:
            text = text.lower()

        return text

    def process(
        self,
        text: str,
        contractions: bool = False,
        language: str = "EN",
        lowercase: bool = False
    ) -> str:
        """Clean, normalize and strip surrounding whitespace."""
        normalized = self.normalize(
            self.clean(text),
            contractions=contractions,
            language=language,
            lowercase=lowercase
        )
        return normalized.strip()

    def _remove_escaped_markers(self, text: str) -> str:
        """Remove literal backslash-n / backslash-r sequences left by serializers."""
        for marker in self._escaped_markers:
            text = text.replace(marker, "")
        return text

    def _remove_urls(self, text: str) -> str:
        """Remove HTTP/HTTPS URLs and www links."""
        return self._url_pattern.sub("", text)
