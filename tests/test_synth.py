from __future__ import annotations

import io
import struct
import wave

import numpy as np
import pytest

from morsewav.errors import ValidationError
from morsewav.synth import Oscillator, SynthesizerConfig, ToneSynthesizer, to_wav_bytes
from morsewav.table import CodeTable

LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit. "
    "Duis sed dignissim arcu. Etiam non euismod nulla. "
    "Cras non sagittis velit. Donec et imperdiet ipsum."
)


def _header(wav: bytes):
    return struct.unpack("<4sI4s4sIHHIIHH4sI", wav[:44])


def test_generate_single_dit_has_consistent_header():
    synth = ToneSynthesizer()
    wav = synth.generate("E")
    (riff, riff_size, wave_id, fmt, fmt_size, audio_fmt, channels,
     rate, byte_rate, block_align, bits, data_id, data_len) = _header(wav)

    assert (riff, wave_id, fmt, data_id) == (b"RIFF", b"WAVE", b"fmt ", b"data")
    assert fmt_size == 16
    assert (audio_fmt, channels, block_align, bits) == (1, 1, 1, 8)
    assert rate == byte_rate == 11050
    assert data_len == len(wav) - 44
    assert riff_size == 36 + data_len

    # One dit, its trailing silence and two more silences for the character gap.
    _, _, silence = synth.render_elements()
    assert data_len == 4 * silence.size


def test_wav_is_readable_by_wave_module():
    synth = ToneSynthesizer().set_sample_rate(8000).set_frequency(600)
    wav = synth.generate("Espen")
    with wave.open(io.BytesIO(wav), "rb") as wf:
        assert wf.getnchannels() == 1
        assert wf.getsampwidth() == 1
        assert wf.getframerate() == 8000
        assert wf.getnframes() == len(wav) - 44


def test_element_buffers_shape_and_levels():
    dit, dah, silence = ToneSynthesizer().render_elements()

    assert dit.dtype == np.uint8
    assert dit.size == silence.size
    assert abs(dah.size - 3 * dit.size) <= 2
    assert np.all(silence == 128)
    assert dit.min() >= 8 and dit.max() <= 248
    assert dah.min() >= 8 and dah.max() <= 248
    # Envelope starts at zero amplitude.
    assert dit[0] == 128 and dah[0] == 128


def test_dit_and_dah_share_the_rising_edge():
    dit, dah, _ = ToneSynthesizer().render_elements()
    rise = dit.size // 2 - 1
    assert np.array_equal(dit[:rise], dah[:rise])
    assert not np.array_equal(dit[-rise:], dah[dit.size - rise : dit.size])


def test_quantization_matches_oscillator():
    cfg = SynthesizerConfig(cw_speed=20, sample_rate=8000, frequency=500)
    dit, dah, _ = ToneSynthesizer(config=cfg).render_elements()
    n_dit = dit.size

    osc = Oscillator(cfg.frequency, cfg.sample_rate)
    expected = [int(np.floor(120.0 * osc.next() + 128.0)) for _ in range(n_dit + 5)]
    # Middle of the dah (second dit period) is unenveloped.
    assert list(dah[n_dit : n_dit + 5]) == expected[n_dit:]


def test_oscillator_phase_wraps():
    osc = Oscillator(frequency=1000.0, sample_rate=8000.0)
    for _ in range(100):
        osc.next()
        assert 0.0 <= osc.phase < 6.283185307


def test_word_gap_and_unknown_characters():
    synth = ToneSynthesizer()
    _, _, silence = synth.render_elements()
    assert synth.config.word_gap_dits == 6
    assert synth.render_samples(" ").size == 6 * silence.size
    assert synth.render_samples("\t").size == 6 * silence.size
    assert synth.render_samples("ø").size == 0
    assert synth.render_samples("e").size == synth.render_samples("E").size

    wav = synth.generate("ø")
    assert len(wav) == 44
    assert _header(wav)[-1] == 0


def test_custom_table_characters_are_sounded():
    table = CodeTable()
    table["%"] = "00000000"
    synth = ToneSynthesizer(table)
    dit, _, silence = synth.render_elements()
    assert synth.render_samples("%").size == 8 * (dit.size + silence.size) + 2 * silence.size


def test_standard_timing():
    cfg = SynthesizerConfig(cw_speed=20)
    assert cfg.dit_seconds == pytest.approx(1.145 / 20.0)
    assert cfg.char_gap_dits == 3.0
    assert cfg.word_gap_dits == 6


def test_farnsworth_timing_below_15_wpm():
    cfg = SynthesizerConfig(cw_speed=10)
    assert cfg.dit_seconds == pytest.approx(1.145 / 15.0)
    assert cfg.char_gap_dits == pytest.approx(122.5 / 10 - 31.0 / 6.0)
    assert cfg.word_gap_dits == 14

    synth = ToneSynthesizer(config=cfg)
    dit, _, silence = synth.render_elements()
    assert dit.size == ToneSynthesizer(config=SynthesizerConfig(cw_speed=15)).render_elements()[0].size
    # ceil(7.08) - 1 extra silences after the element's own.
    assert synth.render_samples("E").size == dit.size + silence.size + 7 * silence.size


def test_can_set_cw_speed_sample_rate_and_frequency():
    synth = ToneSynthesizer().set_cw_speed(10).set_sample_rate("8000").set_frequency(8000)
    assert synth.config.cw_speed == 10.0
    assert synth.config.sample_rate == 8000
    assert synth.config.frequency == 8000.0
    assert _header(synth.generate("Espen"))[7] == 8000


@pytest.mark.parametrize(
    "setter, message",
    [
        ("set_cw_speed", "Speed must be numeric"),
        ("set_sample_rate", "Sample rate must be numeric"),
        ("set_frequency", "Frequency must be numeric"),
    ],
)
def test_non_numeric_settings_are_rejected(setter, message):
    synth = ToneSynthesizer()
    before = SynthesizerConfig(**vars(synth.config))
    for bad in ("foo", None, True, [1]):
        with pytest.raises(ValidationError, match=message):
            getattr(synth, setter)(bad)
    assert synth.config == before


def test_non_positive_settings_are_rejected():
    synth = ToneSynthesizer()
    with pytest.raises(ValidationError):
        synth.set_cw_speed(0)
    with pytest.raises(ValidationError):
        synth.set_frequency(-700)
    with pytest.raises(ValidationError):
        synth.set_sample_rate(float("nan"))
    assert synth.config == SynthesizerConfig()


def test_longer_text_and_low_frequency():
    wav = ToneSynthesizer().set_frequency(100).generate(LOREM)
    data_len = _header(wav)[-1]
    assert data_len == len(wav) - 44
    assert data_len > 11050


def test_generate_is_repeatable():
    synth = ToneSynthesizer()
    assert synth.generate("SOS SOS") == synth.generate("SOS SOS")


def test_save_writes_wav_file(tmp_path):
    path = ToneSynthesizer().save("CQ", tmp_path / "cq.wav")
    assert path.read_bytes()[:4] == b"RIFF"


def test_to_wav_bytes_empty():
    wav = to_wav_bytes(np.zeros(0, dtype=np.uint8), 22050)
    assert len(wav) == 44
    assert _header(wav)[1] == 36


def test_synthesizers_do_not_share_config():
    cfg = SynthesizerConfig()
    first = ToneSynthesizer(config=cfg)
    second = ToneSynthesizer(config=cfg)

    first.set_cw_speed(12).set_sample_rate(8000)

    assert cfg == SynthesizerConfig()
    assert second.config == SynthesizerConfig()
