from __future__ import annotations

import io
import logging
import math
import numbers
import wave
from dataclasses import dataclass, replace
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np

from .errors import ValidationError
from .table import CodeTable, canonical_case

logger = logging.getLogger(__name__)

TAU = 6.283185307
FARNSWORTH_WPM = 15.0
SILENCE_LEVEL = 128


@dataclass
class SynthesizerConfig:
    cw_speed: float = 30
    sample_rate: int = 11050
    frequency: float = 700

    @property
    def dit_seconds(self) -> float:
        # Below 15 WPM elements keep their 15 WPM length (Farnsworth timing).
        return 1.145 / max(float(self.cw_speed), FARNSWORTH_WPM)

    @property
    def char_gap_dits(self) -> float:
        if self.cw_speed < FARNSWORTH_WPM:
            return 122.5 / self.cw_speed - 31.0 / 6.0
        return 3.0

    @property
    def word_gap_dits(self) -> int:
        return int(math.floor(2 * self.char_gap_dits + 0.5))


class Oscillator:
    """Sine oscillator whose phase carries over between rendered buffers."""

    def __init__(self, frequency: float, sample_rate: float):
        tone_seconds = 1.0 / frequency
        self.step = TAU * (1.0 / sample_rate) / tone_seconds
        self.phase = 0.0

    def next(self) -> float:
        self.phase += self.step
        if self.phase >= TAU:
            self.phase -= TAU
        return math.sin(self.phase)


class ToneSynthesizer:
    """Renders text as an 8-bit mono PCM WAV of CW tones."""

    def __init__(self, table: Optional[CodeTable] = None, config: Optional[SynthesizerConfig] = None):
        self.table = table if table is not None else CodeTable()
        self.config = replace(config) if config is not None else SynthesizerConfig()

    def set_cw_speed(self, speed) -> "ToneSynthesizer":
        self.config.cw_speed = _coerce_number(speed, "Speed")
        return self

    def set_sample_rate(self, rate) -> "ToneSynthesizer":
        value = _coerce_number(rate, "Sample rate")
        if value < 1:
            raise ValidationError("Sample rate must be at least 1")
        self.config.sample_rate = int(round(value))
        return self

    def set_frequency(self, frequency) -> "ToneSynthesizer":
        self.config.frequency = _coerce_number(frequency, "Frequency")
        return self

    def render_elements(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return the (dit, dah, silence) sample buffers for the current config."""
        cfg = self.config
        dit_seconds = cfg.dit_seconds
        half = 0.5 * dit_seconds
        sample_dt = 1.0 / cfg.sample_rate
        osc = Oscillator(cfg.frequency, cfg.sample_rate)

        dit: List[float] = []
        dah: List[float] = []

        # Both elements rise during the first half dit; then the dit decays
        # while the dah holds.
        t = 0.0
        while t < dit_seconds:
            x = osc.next()
            if t < half:
                x *= _envelope(t, half)
                dit.append(x)
                dah.append(x)
            elif t > half:
                dah.append(x)
                dit.append(x * _envelope(dit_seconds - t, half))
            else:
                dit.append(x)
                dah.append(x)
            t += sample_dt
        silence = np.full(len(dit), SILENCE_LEVEL, dtype=np.uint8)

        t = 0.0
        while t < dit_seconds:
            dah.append(osc.next())
            t += sample_dt

        t = 0.0
        while t < dit_seconds:
            x = osc.next()
            if t > half:
                x *= _envelope(dit_seconds - t, half)
            dah.append(x)
            t += sample_dt

        return _quantize(dit), _quantize(dah), silence

    def render_samples(self, text: str) -> np.ndarray:
        cfg = self.config
        dit, dah, silence = self.render_elements()
        word_gap = cfg.word_gap_dits
        extra_char_gap = max(math.ceil(cfg.char_gap_dits) - 1, 0)

        chunks: List[np.ndarray] = []
        for ch in text:
            if ch.isspace():
                chunks.extend([silence] * word_gap)
                continue
            code = self.table.lookup(canonical_case(ch))
            if code is None:
                continue
            for element in code:
                chunks.append(dit if element == "0" else dah)
                chunks.append(silence)
            chunks.extend([silence] * extra_char_gap)

        if not chunks:
            return np.zeros(0, dtype=np.uint8)
        samples = np.concatenate(chunks)
        logger.debug(
            "Rendered %d samples at %s WPM (dit %.4fs, char gap %.3f, word gap %d)",
            samples.size,
            cfg.cw_speed,
            cfg.dit_seconds,
            cfg.char_gap_dits,
            word_gap,
        )
        return samples

    def generate(self, text: str) -> bytes:
        return to_wav_bytes(self.render_samples(text), self.config.sample_rate)

    def save(self, text: str, path: str | Path) -> Path:
        p = Path(path)
        p.write_bytes(self.generate(text))
        logger.info("Wrote %s", p)
        return p


def to_wav_bytes(samples: np.ndarray, sample_rate: int) -> bytes:
    """Wrap unsigned 8-bit mono samples in a canonical 44-byte-header WAV container."""
    data = np.asarray(samples, dtype=np.uint8)
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(1)
        wf.setframerate(int(sample_rate))
        wf.setnframes(int(data.size))
        wf.writeframes(data.tobytes())
    return buf.getvalue()


def _envelope(t: float, half: float) -> float:
    return math.sin((math.pi / 2.0) * t / half)


def _quantize(values: List[float]) -> np.ndarray:
    return np.floor(120.0 * np.asarray(values, dtype=np.float64) + 128.0).astype(np.uint8)


def _coerce_number(value, name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be numeric")
    if isinstance(value, numbers.Real):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise ValidationError(f"{name} must be numeric") from None
    else:
        raise ValidationError(f"{name} must be numeric")
    if not math.isfinite(number) or number <= 0.0:
        raise ValidationError(f"{name} must be a positive number")
    return number
