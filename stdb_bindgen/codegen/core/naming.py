"""
Naming utilities for safe code generation.

Handles case conversions, keyword conflicts and positional fallbacks
so that every domain name maps to a valid identifier in the target
language.
"""

import re
from typing import Iterable, List, Set
from enum import Enum


class NamingCase(Enum):
    """Different naming case styles."""

    SNAKE_CASE = "snake"  # user_name
    PASCAL_CASE = "pascal"  # UserName


# Word boundaries, applied in order
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_LOWER_UPPER_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_LETTER_DIGIT_BOUNDARY = re.compile(r"([A-Za-z])([0-9])")
_DIGIT_LETTER_BOUNDARY = re.compile(r"([0-9])([A-Za-z])")
_SEPARATORS = re.compile(r"[^A-Za-z0-9]+")


def split_words(name: str) -> List[str]:
    """
    Split a name into lowercase words.

    Separators are any non-alphanumeric characters, lower-to-upper
    transitions, the end of an acronym and letter/digit transitions.
    """
    name = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    name = _LOWER_UPPER_BOUNDARY.sub(r"\1_\2", name)
    name = _LETTER_DIGIT_BOUNDARY.sub(r"\1_\2", name)
    name = _DIGIT_LETTER_BOUNDARY.sub(r"\1_\2", name)
    return [word.lower() for word in _SEPARATORS.split(name) if word]


def to_snake_case(name: str) -> str:
    """Convert to snake_case."""
    return "_".join(split_words(name))


def to_pascal_case(name: str) -> str:
    """Convert to PascalCase."""
    return "".join(word.capitalize() for word in split_words(name))


def collect_case(segments: Iterable[str], case: NamingCase) -> str:
    """Convert each segment of a scoped name and join them."""
    if case == NamingCase.SNAKE_CASE:
        return "_".join(filter(None, (to_snake_case(s) for s in segments)))
    return "".join(to_pascal_case(s) for s in segments)


class NameSanitizer:
    """Handles name sanitization and case conversion."""

    def __init__(
        self,
        reserved_words: Set[str] = None,
        fallback_prefix: str = "Field",
        suffix_on_conflict: str = "_",
    ):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words (lowercase)
            fallback_prefix: Placeholder used for empty names and prepended
                to names that do not start with a letter
            suffix_on_conflict: Suffix appended to names hitting a keyword
        """
        self.reserved_words = {word.lower() for word in (reserved_words or set())}
        self.fallback_prefix = fallback_prefix
        self.suffix_on_conflict = suffix_on_conflict

    def sanitize_name(
        self,
        name: str,
        index: int = 0,
        target_case: NamingCase = NamingCase.PASCAL_CASE,
    ) -> str:
        """
        Sanitize a name for safe use in target language.

        The result depends only on the arguments, so repeated calls with the
        same name and index always agree.

        Args:
            name: Original name to sanitize
            index: Position of the name in its container, used when the name
                converts to nothing
            target_case: Desired case style

        Returns:
            Non-empty identifier starting with a letter and not a keyword
        """
        # Step 1: Convert to target case
        converted = self._convert_case(name, target_case)

        # Step 2: Positional placeholder for empty results
        if not converted:
            converted = f"{self.fallback_prefix}{index}"

        # Step 3: Identifiers must start with a letter
        converted = self.ensure_letter_start(converted)

        # Step 4: Keyword conflicts
        return self._resolve_conflicts(converted)

    def is_reserved(self, name: str) -> bool:
        return name.lower() in self.reserved_words

    def _convert_case(self, name: str, target_case: NamingCase) -> str:
        """Convert name to target case style."""
        if target_case == NamingCase.SNAKE_CASE:
            return to_snake_case(name)
        return to_pascal_case(name)

    def ensure_letter_start(self, name: str) -> str:
        """Prepend the fallback prefix unless the name starts with an ASCII letter."""
        if name and not (name[0].isascii() and name[0].isalpha()):
            return f"{self.fallback_prefix}{name}"
        return name

    def _resolve_conflicts(self, name: str) -> str:
        """Resolve naming conflicts with reserved words."""
        if self.is_reserved(name):
            return f"{name}{self.suffix_on_conflict}"
        return name
