from __future__ import annotations

from pathlib import Path

from morsewav.cli import main


def test_encode(tmp_path: Path, capsys):
    rc = main(["--config", str(tmp_path / "cfg.yaml"), "encode", "SOS de LA1"])
    assert rc == 0
    assert capsys.readouterr().out == "... --- ...  -.. .  .-.. .- .----\n"


def test_decode_with_dash_override(tmp_path: Path, capsys):
    rc = main(["--config", str(tmp_path / "cfg.yaml"), "--dash", ":", "decode", "... ::: ..."])
    assert rc == 0
    assert capsys.readouterr().out == "SOS\n"


def test_case_sensitive_encode(tmp_path: Path, capsys):
    rc = main(["--config", str(tmp_path / "cfg.yaml"), "--case-sensitive", "encode", "Ok"])
    assert rc == 0
    assert capsys.readouterr().out == ".-.-. --- -.-\n"


def test_wav_command_writes_file(tmp_path: Path):
    out = tmp_path / "cq.wav"
    rc = main(["--config", str(tmp_path / "cfg.yaml"), "wav", "CQ", "-o", str(out), "--wpm", "12", "--sample-rate", "8000"])
    assert rc == 0
    data = out.read_bytes()
    assert data[:4] == b"RIFF"
    assert int.from_bytes(data[24:28], "little") == 8000


def test_invalid_dash_reports_error(tmp_path: Path, capsys):
    rc = main(["--config", str(tmp_path / "cfg.yaml"), "--dash", "..", "encode", "E"])
    assert rc == 2
    assert "error:" in capsys.readouterr().err
