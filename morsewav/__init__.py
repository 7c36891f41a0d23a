from .config import AppConfig, TableConfig, build_synthesizer, build_table, build_translator, load_config, save_config
from .errors import (
    DuplicateCode,
    IntegrityError,
    InvalidCharacter,
    InvalidCode,
    MorseError,
    NotFound,
    PredefinedConflict,
    PredefinedImmutable,
    ValidationError,
)
from .synth import Oscillator, SynthesizerConfig, ToneSynthesizer, to_wav_bytes
from .table import PREDEFINED_CODES, CodeTable, canonical_case
from .text import Translator, TranslatorConfig

__all__ = [
    "AppConfig",
    "TableConfig",
    "build_synthesizer",
    "build_table",
    "build_translator",
    "load_config",
    "save_config",
    "DuplicateCode",
    "IntegrityError",
    "InvalidCharacter",
    "InvalidCode",
    "MorseError",
    "NotFound",
    "PredefinedConflict",
    "PredefinedImmutable",
    "ValidationError",
    "Oscillator",
    "SynthesizerConfig",
    "ToneSynthesizer",
    "to_wav_bytes",
    "PREDEFINED_CODES",
    "CodeTable",
    "canonical_case",
    "Translator",
    "TranslatorConfig",
]
