# ==============================================
# IdentifierNormalizer
# ==============================================
#
# PURPOSE:
#   Convert raw header names (and the input file stem) into the
#   identifier form used for SQLite column and table names.
#   The same raw name always maps to the same identifier, both
#   when the table is created and in every INSERT statement.
#
# CLASS: IdentifierNormalizer
# ---------------------------
#   Caches raw name → identifier results.
#
#   Methods:
#   --------
#   - normalize(name: str) -> str
#       Title-case every word, then strip whitespace and the
#       characters / ? - .
#
# RULES:
# ------
#   1. Each run of letters is a word: first letter upper, rest lower
#      ("first name" → "First Name", "hello-world" → "Hello-World")
#   2. Words written entirely in capitals are kept ("USA" → "USA")
#   3. Whitespace, "/", "?" and "-" are removed ("First Name" → "FirstName")
#
# ==============================================

import re
from typing import Dict


class IdentifierNormalizer:
    """
    Converts header names to the store's safe identifier form.
    Caches each raw name's identifier.
    """

    WORD_PATTERN = re.compile(r"[^\W\d_]+")
    STRIP_PATTERN = re.compile(r"[\s/?\-]+")

    def __init__(self):
        self._cache: Dict[str, str] = {}

    def normalize(self, name: str) -> str:
        """
        Convert a raw name to its identifier.

        Args:
            name: Raw header name (e.g., "first name", "zip-code", "Is active?")

        Returns:
            Identifier (e.g., "FirstName", "ZipCode", "IsActive")
        """
        if not name:
            return name

        if name in self._cache:
            return self._cache[name]

        identifier = self.STRIP_PATTERN.sub("", self._title_case(name))
        self._cache[name] = identifier
        return identifier

    def _title_case(self, name: str) -> str:
        def fix_word(match: re.Match) -> str:
            word = match.group(0)
            if word.isupper():
                return word
            return word[0].upper() + word[1:].lower()

        return self.WORD_PATTERN.sub(fix_word, name)
