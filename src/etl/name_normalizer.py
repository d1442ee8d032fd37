"""
Player name normalization and fuzzy comparison.

Spreadsheet names drift between sheets and seasons:
- "Cathal McLaughlin" vs "Cathal Mclaughlin" (casing)
- "Seán Ó Néill" vs "Sean O Neill" (accents)
- "Ryan  Doherty" vs "Ryan Doherty" (spacing)
"""

import re
import unicodedata
from typing import Tuple


def normalize_player_key(name: str) -> str:
    """Key used for position mapping lookups: trimmed and lowercased."""
    if not name:
        return ""
    return name.strip().lower()


class NameNormalizer:
    """Normalizes and compares player names."""

    def normalize_name(self, name: str) -> str:
        """
        Normalize a name for comparison.

        Steps:
        1. Lowercase
        2. Strip accents
        3. Collapse whitespace

        Args:
            name: Original name

        Returns:
            Normalized name
        """
        if not name:
            return ""

        name = name.lower().strip()
        name = self._remove_accents(name)
        name = re.sub(r'\s+', ' ', name)

        return name.strip()

    def _remove_accents(self, text: str) -> str:
        """Remove accents and diacritics."""
        nfd = unicodedata.normalize('NFD', text)
        return ''.join(char for char in nfd if unicodedata.category(char) != 'Mn')

    def split_name(self, full_name: str) -> Tuple[str, str]:
        """
        Split a full name into (first, last).

        The first token is the first name and the remainder the last name.
        A single token fills both.

        Example:
            split_name("Cathal Mc Laughlin")  # ("Cathal", "Mc Laughlin")
            split_name("Ciaran")              # ("Ciaran", "Ciaran")
        """
        parts = (full_name or "").split()

        if not parts:
            return ("", "")
        if len(parts) == 1:
            return (parts[0], parts[0])

        return (parts[0], ' '.join(parts[1:]))

    def levenshtein_distance(self, s1: str, s2: str) -> int:
        """
        Levenshtein distance between two strings.

        Args:
            s1: First string
            s2: Second string

        Returns:
            Edit distance
        """
        if len(s1) < len(s2):
            return self.levenshtein_distance(s2, s1)

        if len(s2) == 0:
            return len(s1)

        previous_row = range(len(s2) + 1)

        for i, c1 in enumerate(s1):
            current_row = [i + 1]
            for j, c2 in enumerate(s2):
                insertions = previous_row[j + 1] + 1
                deletions = current_row[j] + 1
                substitutions = previous_row[j] + (c1 != c2)
                current_row.append(min(insertions, deletions, substitutions))
            previous_row = current_row

        return previous_row[-1]

    def name_distance(self, name1: str, name2: str) -> int:
        """Levenshtein distance between the normalized forms of two names."""
        return self.levenshtein_distance(self.normalize_name(name1), self.normalize_name(name2))
