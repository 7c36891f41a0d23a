from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import AppConfig, build_table, load_config
from .errors import MorseError
from .synth import ToneSynthesizer
from .text import Translator


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Text <-> Morse translator and CW tone generator")
    p.add_argument("--config", default="morsewav.yaml", help="YAML config path.")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    p.add_argument("--dash", default=None, help="Dash symbol used in displayed morse.")
    p.add_argument("--case-sensitive", action="store_true", help="Preserve letter case with modifiers.")
    p.add_argument("--upper-default", action="store_true", help="Upper case is unmarked; '&' marks lower case.")
    p.add_argument("--replacement", default=None, help="Replacement for untranslatable characters.")
    p.add_argument("--word-separator", default=None, help="Separator placed between morse words.")

    sub = p.add_subparsers(dest="command", required=True)
    enc = sub.add_parser("encode", help="Translate text to morse.")
    enc.add_argument("text", nargs="?", default=None, help="Text (stdin if omitted).")
    dec = sub.add_parser("decode", help="Translate morse to text.")
    dec.add_argument("morse", nargs="?", default=None, help="Morse (stdin if omitted).")
    wav = sub.add_parser("wav", help="Render text as a CW WAV file.")
    wav.add_argument("text", help="Text to send.")
    wav.add_argument("--output", "-o", default="morse.wav", help="Output WAV path.")
    wav.add_argument("--wpm", type=float, default=None, help="CW speed.")
    wav.add_argument("--sample-rate", type=int, default=None, help="Samples per second.")
    wav.add_argument("--tone-hz", type=float, default=None, help="Tone frequency.")
    return p


def _apply_cli_overrides(cfg: AppConfig, args: argparse.Namespace) -> None:
    if args.dash:
        cfg.table.dash = args.dash
    if args.case_sensitive:
        cfg.translator.case_sensitive = True
    if args.upper_default:
        cfg.translator.upper_case_modifier = False
    if args.replacement is not None:
        cfg.translator.invalid_replacement = args.replacement
    if args.word_separator is not None:
        cfg.translator.word_separator = args.word_separator


def _read_arg_or_stdin(value: Optional[str]) -> str:
    if value is not None:
        return value
    return sys.stdin.read().rstrip("\n")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        cfg = load_config(Path(args.config))
        _apply_cli_overrides(cfg, args)
        table = build_table(cfg)

        if args.command == "encode":
            print(Translator(table, cfg.translator).to_morse(_read_arg_or_stdin(args.text)))
            return 0
        if args.command == "decode":
            print(Translator(table, cfg.translator).from_morse(_read_arg_or_stdin(args.morse)))
            return 0

        synth = ToneSynthesizer(table, cfg.synth)
        if args.wpm is not None:
            synth.set_cw_speed(args.wpm)
        if args.sample_rate is not None:
            synth.set_sample_rate(args.sample_rate)
        if args.tone_hz is not None:
            synth.set_frequency(args.tone_hz)
        synth.save(args.text, args.output)
        return 0
    except MorseError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
