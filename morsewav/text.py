from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence

from .errors import ValidationError
from .table import CodeTable, canonical_case

WORD_SPLIT_RE = re.compile(r"\s+")


@dataclass
class TranslatorConfig:
    invalid_replacement: str = "#"
    word_separator: str = "  "
    case_sensitive: bool = False
    # True: lower case is sent as-is and upper case gets `upper_modifier`.
    # False: upper case is sent as-is and lower case gets `lower_modifier`.
    upper_case_modifier: bool = True
    upper_modifier: str = "+"
    lower_modifier: str = "&"

    @property
    def active_modifier(self) -> str:
        return self.upper_modifier if self.upper_case_modifier else self.lower_modifier


class Translator:
    """
    Text <-> display morse ("... --- ...") translator.

    Characters inside a word are separated by one space and words by
    `word_separator`. With `case_sensitive` enabled, letters in the marked
    case are preceded by the modifier character's code, and a literal
    modifier character is sent as the modifier code twice.
    """

    def __init__(self, table: Optional[CodeTable] = None, config: Optional[TranslatorConfig] = None):
        self.table = table if table is not None else CodeTable()
        self.config = replace(config) if config is not None else TranslatorConfig()
        _require_non_empty(self.config.invalid_replacement, "Invalid character replacement")
        _require_non_empty(self.config.word_separator, "Word separator")

    def set_invalid_character_replacement(self, replacement: str) -> "Translator":
        _require_non_empty(replacement, "Invalid character replacement")
        self.config.invalid_replacement = replacement
        return self

    def set_word_separator(self, separator: str) -> "Translator":
        _require_non_empty(separator, "Word separator")
        self.config.word_separator = separator
        return self

    def set_case_sensitive(self, enabled: bool) -> "Translator":
        self.config.case_sensitive = bool(enabled)
        return self

    def set_upper_case_modifier(self, enabled: bool) -> "Translator":
        self.config.upper_case_modifier = bool(enabled)
        return self

    def to_morse(self, text: str) -> str:
        if text == "":
            return ""
        if not self.config.case_sensitive:
            text = "".join(canonical_case(ch) for ch in text)

        words = WORD_SPLIT_RE.split(text)
        return self.config.word_separator.join(self._word_to_morse(word) for word in words)

    def from_morse(self, morse: str) -> str:
        morse = morse.replace(self.config.invalid_replacement + " ", "")
        words = morse.split(self.config.word_separator)
        return " ".join(self._word_from_morse(word) for word in words)

    def _word_to_morse(self, word: str) -> str:
        # An empty word still yields one (invalid) character.
        chars = list(word) or [""]
        return " ".join(self._char_to_morse(ch) for ch in chars)

    def _char_to_morse(self, ch: str) -> str:
        if not self.config.case_sensitive:
            if ch not in self.table:
                return self._replacement()
            return self.table.to_display(ch)

        is_letter = ch.isalpha()
        is_lower = is_letter and ch.islower()
        key = canonical_case(ch)
        if key not in self.table:
            return self._replacement()

        # The modifier itself is escaped by sending it marked.
        if ch == self.config.active_modifier:
            unmarked = False
        else:
            unmarked = not is_letter or is_lower == self.config.upper_case_modifier
        if unmarked:
            return self.table.to_display(key)
        modifier = self.table.to_display(self.config.active_modifier)
        return f"{modifier} {self.table.to_display(key)}"

    def _replacement(self) -> str:
        replacement = self.config.invalid_replacement
        if replacement in self.table:
            return self.table.to_display(replacement)
        return replacement

    def _word_from_morse(self, word: str) -> str:
        decoded = [self.table.from_display(code) for code in word.split(" ")]
        if self.config.case_sensitive:
            return "".join(self._apply_case_modifiers(decoded))
        return "".join(ch for ch in decoded if ch is not None)

    def _apply_case_modifiers(self, decoded: Sequence[Optional[str]]) -> List[str]:
        modifier = self.config.active_modifier
        upper_default = not self.config.upper_case_modifier
        out: List[str] = []
        i = 0
        while i < len(decoded):
            ch = decoded[i]
            marked = ch == modifier
            if marked:
                i += 1
                ch = decoded[i] if i < len(decoded) else None
            i += 1
            if ch is None:
                continue
            to_upper = marked != upper_default
            out.append(canonical_case(ch) if to_upper else ch.lower())
        return out


def _require_non_empty(value: str, name: str) -> None:
    if not isinstance(value, str) or value == "":
        raise ValidationError(f"{name} must be a non-empty string")
