import json
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any

import pytest

from escpos_encoder.exceptions import (
    ConfigurationError,
    InvalidArgumentError,
    InvalidArgumentTypeError,
    UnknownOpcodeError,
)
from escpos_encoder.opcodes import (
    DEFAULT_OPCODES,
    HW_INIT,
    PAPER_FULL_CUT,
    TXT_BOLD_ON,
    OpcodeTable,
    get_default_table,
    resolve_table,
)


class TestDefaultTable:
    def test_name(self) -> None:
        assert DEFAULT_OPCODES.name == "default"

    @pytest.mark.parametrize(
        "symbol,expected",
        [
            ("hw-init", b"\x1b@"),
            ("text-normal", b"\x1b!\x00"),
            ("text-quad", b"\x1b!\x30"),
            ("text-invert-on", b"\x1dB\x01"),
            ("align-right", b"\x1ba\x02"),
            ("color-red", b"\x1br\x01"),
            ("codepage-set", b"\x1bt"),
            ("codepage-wpc1252", b"\x10"),
            ("barcode-text-both", b"\x1dH\x03"),
            ("barcode-ean8", b"\x1dk\x03"),
            ("paper-partial-cut", b"\x1dV\x01"),
        ],
    )
    def test_lookup(self, symbol: str, expected: bytes) -> None:
        assert DEFAULT_OPCODES.lookup(symbol) == expected

    def test_constants_match_table(self) -> None:
        assert DEFAULT_OPCODES.lookup("hw-init") == HW_INIT
        assert DEFAULT_OPCODES.lookup("text-bold-on") == TXT_BOLD_ON
        assert DEFAULT_OPCODES.lookup("paper-full-cut") == PAPER_FULL_CUT

    def test_get_default_table(self) -> None:
        assert get_default_table() is DEFAULT_OPCODES
        assert resolve_table(None) is DEFAULT_OPCODES

    def test_resolve_table_passes_through(self) -> None:
        table = OpcodeTable({}, name="empty")
        assert resolve_table(table) is table


class TestLookup:
    def test_unknown_symbol(self) -> None:
        with pytest.raises(UnknownOpcodeError) as exc_info:
            DEFAULT_OPCODES.lookup("barcode-qr")
        err = exc_info.value
        assert err.symbol == "barcode-qr"
        assert err.dialect == "default"
        assert "text-normal" in err.available
        assert "barcode-qr" in str(err)

    def test_unknown_symbol_is_lookup_error(self) -> None:
        with pytest.raises(LookupError):
            DEFAULT_OPCODES.lookup("nope")

    def test_non_string_symbol(self) -> None:
        with pytest.raises(UnknownOpcodeError):
            DEFAULT_OPCODES.lookup(None)  # type: ignore[arg-type]

    def test_concurrent_reads(self) -> None:
        symbols = DEFAULT_OPCODES.symbols() * 50
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(DEFAULT_OPCODES.lookup, symbols))
        assert results == [DEFAULT_OPCODES[s] for s in symbols]


class TestImmutability:
    def test_item_assignment_rejected(self) -> None:
        with pytest.raises(TypeError):
            DEFAULT_OPCODES["text-normal"] = b"x"  # type: ignore[index]

    def test_source_mapping_copied(self) -> None:
        source = {"a": b"\x01"}
        table = OpcodeTable(source)
        source["a"] = b"\x02"
        assert table.lookup("a") == b"\x01"

    def test_with_overrides_leaves_original(self) -> None:
        derived = DEFAULT_OPCODES.with_overrides({"text-normal": b"N"}, name="derived")
        assert derived.lookup("text-normal") == b"N"
        assert DEFAULT_OPCODES.lookup("text-normal") == b"\x1b!\x00"
        assert derived.name == "derived"
        assert len(derived) == len(DEFAULT_OPCODES)

    def test_with_overrides_keeps_name_by_default(self) -> None:
        assert DEFAULT_OPCODES.with_overrides({}).name == "default"


class TestOpcodeValues:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (b"\x1b@", b"\x1b@"),
            (bytearray(b"\x1b@"), b"\x1b@"),
            ([27, 64], b"\x1b@"),
            ((27, 64), b"\x1b@"),
            ("1b 40", b"\x1b@"),
            ("1B40", b"\x1b@"),
        ],
    )
    def test_value_forms(self, value: Any, expected: bytes) -> None:
        assert OpcodeTable({"hw-init": value}).lookup("hw-init") == expected

    @pytest.mark.parametrize("value", ["zz", [256], [-1]])
    def test_bad_values(self, value: Any) -> None:
        with pytest.raises(InvalidArgumentError):
            OpcodeTable({"x": value})

    @pytest.mark.parametrize("value", [27, 1.5, None, [27, "a"], [True]])
    def test_bad_value_types(self, value: Any) -> None:
        with pytest.raises(InvalidArgumentTypeError):
            OpcodeTable({"x": value})

    @pytest.mark.parametrize("symbol", ["", 5])
    def test_bad_symbols(self, symbol: Any) -> None:
        with pytest.raises(InvalidArgumentTypeError):
            OpcodeTable({symbol: b"\x00"})


class TestMappingProtocol:
    def test_contains_len_iter(self) -> None:
        table = OpcodeTable({"b": b"\x02", "a": b"\x01"}, name="two")
        assert "a" in table
        assert "c" not in table
        assert len(table) == 2
        assert set(table) == {"a", "b"}
        assert table.symbols() == ["a", "b"]

    def test_equality_and_hash(self) -> None:
        t1 = OpcodeTable({"a": b"\x01"}, name="x")
        t2 = OpcodeTable({"a": [1]}, name="x")
        t3 = OpcodeTable({"a": b"\x01"}, name="y")
        assert t1 == t2
        assert hash(t1) == hash(t2)
        assert t1 != t3

    def test_repr(self) -> None:
        assert repr(OpcodeTable({"a": b"\x01"}, name="x")) == "OpcodeTable(name='x', symbols=1)"


class TestFromJson:
    def _write(self, path: Path, document: Any) -> Path:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(document, f)
        return path

    def test_extends_default(self, tmp_path: Path) -> None:
        path = self._write(
            tmp_path / "clone.json",
            {"name": "clone", "opcodes": {"codepage-pc866": "07", "color-blue": [27, 114, 2]}},
        )
        table = OpcodeTable.from_json(path)
        assert table.name == "clone"
        assert table.lookup("codepage-pc866") == b"\x07"
        assert table.lookup("color-blue") == b"\x1br\x02"
        assert table.lookup("text-normal") == DEFAULT_OPCODES.lookup("text-normal")

    def test_extends_null(self, tmp_path: Path) -> None:
        path = self._write(
            tmp_path / "bare.json", {"extends": None, "opcodes": {"paper-full-cut": "1b 69"}}
        )
        table = OpcodeTable.from_json(path)
        assert table.name == "bare"
        assert len(table) == 1

    def test_accepts_string_path(self, tmp_path: Path) -> None:
        path = self._write(tmp_path / "s.json", {"opcodes": {}})
        assert OpcodeTable.from_json(str(path)) == DEFAULT_OPCODES.with_overrides({}, name="s")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            OpcodeTable.from_json(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Cannot read"):
            OpcodeTable.from_json(tmp_path / "missing.json")

    @pytest.mark.parametrize("document", [[1, 2], {"name": "x"}, {"opcodes": [1]}])
    def test_wrong_shape(self, tmp_path: Path, document: Any) -> None:
        path = self._write(tmp_path / "shape.json", document)
        with pytest.raises(ConfigurationError, match="'opcodes' object"):
            OpcodeTable.from_json(path)

    def test_unsupported_extends(self, tmp_path: Path) -> None:
        path = self._write(tmp_path / "ext.json", {"extends": "star", "opcodes": {}})
        with pytest.raises(ConfigurationError, match="extends"):
            OpcodeTable.from_json(path)

    def test_bad_opcode_value(self, tmp_path: Path) -> None:
        path = self._write(tmp_path / "bad.json", {"opcodes": {"hw-init": "xyz"}})
        with pytest.raises(ConfigurationError, match="hex"):
            OpcodeTable.from_json(path)
