from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict

import yaml

from .errors import MorseError, ValidationError
from .synth import SynthesizerConfig, ToneSynthesizer
from .table import CodeTable
from .text import Translator, TranslatorConfig

logger = logging.getLogger(__name__)


@dataclass
class TableConfig:
    dash: str = "-"
    custom_codes: Dict[str, str] = field(default_factory=dict)


@dataclass
class AppConfig:
    table: TableConfig = field(default_factory=TableConfig)
    translator: TranslatorConfig = field(default_factory=TranslatorConfig)
    synth: SynthesizerConfig = field(default_factory=SynthesizerConfig)


def load_config(path: str | Path) -> AppConfig:
    p = Path(path)
    if not p.exists():
        cfg = AppConfig()
        save_config(p, cfg)
        return cfg

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    cfg = AppConfig()

    table_raw = raw.get("table") or {}
    _apply_dataclass_updates(cfg.table, table_raw)
    cfg.table.dash = str(cfg.table.dash)
    cfg.table.custom_codes = {str(k): str(v) for k, v in (cfg.table.custom_codes or {}).items()}

    _apply_dataclass_updates(cfg.translator, raw.get("translator") or {})
    for name in ("case_sensitive", "upper_case_modifier"):
        setattr(cfg.translator, name, bool(getattr(cfg.translator, name)))
    defaults = TranslatorConfig()
    for name in ("invalid_replacement", "word_separator"):
        value = getattr(cfg.translator, name)
        if not isinstance(value, str) or value == "":
            logger.warning("Ignoring translator.%s=%r in %s: must be a non-empty string", name, value, p)
            setattr(cfg.translator, name, getattr(defaults, name))

    # Route synth values through the setters so bad YAML can't poison timing math.
    synth = ToneSynthesizer(config=cfg.synth)
    setters = {
        "cw_speed": synth.set_cw_speed,
        "sample_rate": synth.set_sample_rate,
        "frequency": synth.set_frequency,
    }
    for key, value in (raw.get("synth") or {}).items():
        setter = setters.get(key)
        if setter is None:
            continue
        try:
            setter(value)
        except ValidationError as exc:
            logger.warning("Ignoring synth.%s=%r in %s: %s", key, value, p, exc)
    cfg.synth = synth.config

    return cfg


def save_config(path: str | Path, config: AppConfig) -> None:
    payload = {
        "table": asdict(config.table),
        "translator": asdict(config.translator),
        "synth": asdict(config.synth),
    }
    p = Path(path)
    p.write_text(yaml.safe_dump(payload, sort_keys=False, allow_unicode=True), encoding="utf-8")


def build_table(config: AppConfig) -> CodeTable:
    table = CodeTable(dash=config.table.dash)
    for ch, code in config.table.custom_codes.items():
        try:
            table.set(ch, code)
        except MorseError as exc:
            logger.warning("Skipping custom code %r=%r: %s", ch, code, exc)
    return table


def build_translator(config: AppConfig, table: CodeTable | None = None) -> Translator:
    return Translator(table if table is not None else build_table(config), config.translator)


def build_synthesizer(config: AppConfig, table: CodeTable | None = None) -> ToneSynthesizer:
    return ToneSynthesizer(table if table is not None else build_table(config), config.synth)


def _apply_dataclass_updates(target: Any, updates: Dict[str, Any]) -> None:
    known = {f.name for f in fields(target)}
    for key, value in updates.items():
        if key in known:
            setattr(target, key, value)
