from __future__ import annotations


class MorseError(Exception):
    pass


class ValidationError(MorseError, ValueError):
    pass


class InvalidCode(ValidationError):
    pass


class InvalidCharacter(ValidationError):
    pass


class NotFound(MorseError, KeyError):
    def __str__(self) -> str:
        # KeyError repr()s its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""


class IntegrityError(MorseError):
    """Rejected mutation that would break the one-to-one character/code mapping."""


class PredefinedConflict(IntegrityError):
    pass


class DuplicateCode(IntegrityError):
    pass


class PredefinedImmutable(IntegrityError):
    pass
