from __future__ import annotations

import logging
import re
from collections.abc import MutableMapping
from typing import Dict, FrozenSet, Iterator, List, Optional, Tuple

from .errors import (
    DuplicateCode,
    InvalidCharacter,
    InvalidCode,
    NotFound,
    PredefinedConflict,
    PredefinedImmutable,
    ValidationError,
)

logger = logging.getLogger(__name__)

DOT = "."

# International Morse, 0 = dit, 1 = dah.
PREDEFINED_CODES: Dict[str, str] = {
    "A": "01",
    "B": "1000",
    "C": "1010",
    "D": "100",
    "E": "0",
    "F": "0010",
    "G": "110",
    "H": "0000",
    "I": "00",
    "J": "0111",
    "K": "101",
    "L": "0100",
    "M": "11",
    "N": "10",
    "O": "111",
    "P": "0110",
    "Q": "1101",
    "R": "010",
    "S": "000",
    "T": "1",
    "U": "001",
    "V": "0001",
    "W": "011",
    "X": "1001",
    "Y": "1011",
    "Z": "1100",
    "0": "11111",
    "1": "01111",
    "2": "00111",
    "3": "00011",
    "4": "00001",
    "5": "00000",
    "6": "10000",
    "7": "11000",
    "8": "11100",
    "9": "11110",
    ".": "010101",
    ",": "110011",
    "?": "001100",
    "'": "011110",
    "!": "101011",
    "/": "10010",
    "(": "10110",
    ")": "101101",
    "&": "01000",  # wait; lower-case modifier
    ":": "111000",
    ";": "101010",
    "=": "10001",
    "+": "01010",  # end of message; upper-case modifier
    "-": "100001",
    "_": "001101",
    '"': "010010",
    "$": "0001001",
    "@": "011010",
    "|": "01001",
}

CODE_RE = re.compile(r"[01]+")


def canonical_case(ch: str) -> str:
    """Upper-case a single character, leaving it alone if that would expand it (e.g. 'ß')."""
    upper = ch.upper()
    return upper if len(upper) == len(ch) else ch


class CodeTable(MutableMapping):
    """
    Character -> 0/1 code table with a strict reverse index.

    The predefined alphabet is fixed at construction; callers may add custom
    characters but can never overwrite or remove an existing mapping.

    `table[ch]` and `get_code` raise `NotFound` for unknown characters;
    `lookup` returns None instead. The inherited `Mapping.get` keeps its
    usual default-returning behaviour.
    """

    def __init__(self, dash: str = "-"):
        if not isinstance(dash, str) or len(dash) != 1 or dash == DOT or dash.isspace():
            raise ValidationError(f"Dash symbol must be a single non-space character other than {DOT!r}")
        self.dash = dash
        self._codes: Dict[str, str] = dict(PREDEFINED_CODES)
        self._reverse: Dict[str, str] = {code: ch for ch, code in self._codes.items()}
        self._predefined: FrozenSet[str] = frozenset(self._codes)
        self._to_display = str.maketrans("01", DOT + dash)
        self._from_display = str.maketrans(DOT + dash, "01")

    def __getitem__(self, ch: str) -> str:
        try:
            return self._codes[ch]
        except KeyError:
            raise NotFound(f"No morse code for character {ch!r}") from None

    def __setitem__(self, ch: str, code: str) -> None:
        self.set(ch, code)

    def __delitem__(self, ch: str) -> None:
        self.unset(ch)

    def __iter__(self) -> Iterator[str]:
        return iter(self._codes)

    def __len__(self) -> int:
        return len(self._codes)

    def __contains__(self, ch: object) -> bool:
        return ch in self._codes

    def has(self, ch: str) -> bool:
        return ch in self._codes

    def get_code(self, ch: str) -> str:
        return self[ch]

    def lookup(self, ch: str) -> Optional[str]:
        return self._codes.get(ch)

    def is_predefined(self, ch: str) -> bool:
        return ch in self._predefined

    def custom_items(self) -> List[Tuple[str, str]]:
        return [(ch, code) for ch, code in self._codes.items() if ch not in self._predefined]

    def set(self, ch: str, code: str) -> None:
        if not isinstance(ch, str) or len(ch) != 1:
            raise InvalidCharacter(f"Key must be a single character, got {ch!r}")
        if ch in self._codes:
            if ch in self._predefined:
                raise PredefinedConflict("Can't override predefined character")
            raise PredefinedConflict(f"Character {ch!r} is already mapped")
        if not isinstance(code, str) or not CODE_RE.fullmatch(code):
            raise InvalidCode("Value must be a string of zeroes and ones (0/1)")
        if code in self._reverse:
            raise DuplicateCode(f"There is already a character with value {code}")

        self._codes[ch] = code
        self._reverse[code] = ch
        logger.debug("Added custom morse code %r -> %s", ch, code)

    def unset(self, ch: str) -> None:
        if ch in self._predefined:
            raise PredefinedImmutable("Can't unset a predefined morse code")
        if ch not in self._codes:
            raise NotFound(f"No custom morse code for character {ch!r}")
        code = self._codes.pop(ch)
        del self._reverse[code]
        logger.debug("Removed custom morse code %r", ch)

    def to_display(self, ch: str) -> str:
        return self[ch].translate(self._to_display)

    def from_display(self, display: str) -> Optional[str]:
        return self._reverse.get(display.translate(self._from_display))
