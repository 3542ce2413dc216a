from __future__ import annotations

import importlib.util
import sys
from pathlib import Path

import pytest


def _load_dump_wire_module():
    repo_root = Path(__file__).resolve().parents[4]
    module_path = repo_root / "bin" / "dump-wire.py"
    spec = importlib.util.spec_from_file_location("dump_wire", module_path)
    assert spec is not None
    module = importlib.util.module_from_spec(spec)
    assert spec.loader is not None
    sys.modules[spec.name] = module
    spec.loader.exec_module(module)
    return module


@pytest.fixture(scope="module")
def dump_wire():
    return _load_dump_wire_module()


def test_dump_fields_lists_every_wire_type(dump_wire) -> None:
    data = bytes.fromhex(
        "08e707" + "1203010203" + "1d0000803f" + "21" + "00" * 8 + "2b" + "2c" + "30ffffffffffffffffff01",
    )

    assert dump_wire.dump_fields(data) == [
        "1 VARINT 999",
        "2 LENGTH_DELIMITED 3 bytes 010203",
        "3 THIRTY_TWO_BIT 0000803f",
        "4 SIXTY_FOUR_BIT 0000000000000000",
        "5 START_GROUP",
        "5 END_GROUP",
        "6 VARINT -1",
    ]


def test_main_prints_fields(dump_wire, capsys) -> None:
    assert dump_wire.main(["--hex", "0802"]) == 0
    assert capsys.readouterr().out == "1 VARINT 2\n"


def test_main_reads_file(dump_wire, tmp_path, capsys) -> None:
    payload = tmp_path / "payload.bin"
    payload.write_bytes(b"\x08\x03")

    assert dump_wire.main([str(payload)]) == 0
    assert capsys.readouterr().out == "1 VARINT 3\n"


def test_main_reports_decode_error(dump_wire, capsys) -> None:
    assert dump_wire.main(["--hex", "08e7"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "failed to decode payload" in captured.err


def test_main_rejects_bad_hex(dump_wire) -> None:
    with pytest.raises(SystemExit):
        dump_wire.main(["--hex", "zz"])


def test_main_rejects_missing_file(dump_wire, tmp_path, capsys) -> None:
    missing = tmp_path / "missing.bin"

    with pytest.raises(SystemExit) as exc_info:
        dump_wire.main([str(missing)])

    assert exc_info.value.code == 2
    assert "missing.bin" in capsys.readouterr().err
