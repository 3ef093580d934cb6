"""
ESC/POS opcode table.

Maps symbolic command names to the raw bytes printer firmware expects. The
built-in table (DEFAULT_OPCODES) covers the standard Epson ESC/POS dialect
used by TM-series and compatible thermal receipt printers. Alternate dialects
(other firmware revisions, clones with different code page numbering) are
built from a mapping or loaded from a JSON file, without code changes.

Tables are immutable once constructed and safe to share between threads.

Dialect file format:
    {
        "name": "tm-t20-cyrillic",
        "extends": "default",
        "opcodes": {
            "codepage-pc866": "11",
            "color-blue": [27, 114, 2]
        }
    }

    Values are either hex strings (whitespace ignored) or lists of ints 0-255.
    "extends": "default" starts from DEFAULT_OPCODES, null starts empty.

Usage:
    >>> from escpos_encoder.opcodes import DEFAULT_OPCODES
    >>> DEFAULT_OPCODES.lookup("text-bold-on")
    b'\\x1bE\\x01'
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Final, Iterator, List, Mapping, Optional, Tuple, Union

from escpos_encoder.exceptions import (
    ConfigurationError,
    InvalidArgumentError,
    InvalidArgumentTypeError,
    UnknownOpcodeError,
)

__all__ = [
    "ESC",
    "GS",
    "HW_INIT",
    "TXT_NORMAL",
    "TXT_2HEIGHT",
    "TXT_2WIDTH",
    "TXT_4SQUARE",
    "TXT_UNDERL_ON",
    "TXT_UNDERL2_ON",
    "TXT_BOLD_ON",
    "TXT_INVERT_ON",
    "TXT_ALIGN_LT",
    "TXT_ALIGN_CT",
    "TXT_ALIGN_RT",
    "TXT_COLOR_BLACK",
    "TXT_COLOR_RED",
    "CP_SET",
    "BARCODE_HEIGHT",
    "BARCODE_WIDTH",
    "PAPER_FULL_CUT",
    "PAPER_PARTIAL_CUT",
    "OpcodeTable",
    "DEFAULT_OPCODES",
    "get_default_table",
    "resolve_table",
]

logger: Final = logging.getLogger(__name__)

OpcodeValue = Union[bytes, bytearray, List[int], Tuple[int, ...], str]

# =============================================================================
# CONTROL CHARACTERS
# =============================================================================

ESC: Final[bytes] = b"\x1b"
GS: Final[bytes] = b"\x1d"

# =============================================================================
# HARDWARE
# =============================================================================

HW_INIT: Final[bytes] = ESC + b"@"
"""
Initialize printer.

Command: ESC @
Hex: 1B 40
Effect: Clears the print buffer and resets all modes to power-on defaults
"""

# =============================================================================
# PRINT MODE (ESC !)
# =============================================================================

TXT_NORMAL: Final[bytes] = ESC + b"!\x00"
"""
Select normal print mode.

Command: ESC ! 0
Hex: 1B 21 00
Effect: Clears every bit of the print mode byte (font A, no emphasis,
        single height and width, no underline)
Note: Does NOT cancel white/black reverse printing (GS B)
"""

TXT_2HEIGHT: Final[bytes] = ESC + b"!\x10"
"""
Double-height mode.

Command: ESC ! 16
Hex: 1B 21 10
"""

TXT_2WIDTH: Final[bytes] = ESC + b"!\x20"
"""
Double-width mode.

Command: ESC ! 32
Hex: 1B 21 20
"""

TXT_4SQUARE: Final[bytes] = ESC + b"!\x30"
"""
Double-height and double-width ("quad") mode.

Command: ESC ! 48
Hex: 1B 21 30
"""

# =============================================================================
# EMPHASIS
# =============================================================================

TXT_UNDERL_ON: Final[bytes] = ESC + b"-\x01"
"""Underline, 1 dot thick. ESC - 1 (1B 2D 01)."""

TXT_UNDERL2_ON: Final[bytes] = ESC + b"-\x02"
"""Underline, 2 dots thick. ESC - 2 (1B 2D 02)."""

TXT_BOLD_ON: Final[bytes] = ESC + b"E\x01"
"""Emphasized mode on. ESC E 1 (1B 45 01)."""

TXT_INVERT_ON: Final[bytes] = GS + b"B\x01"
"""White/black reverse printing on. GS B 1 (1D 42 01)."""

# =============================================================================
# JUSTIFICATION (ESC a)
# =============================================================================

TXT_ALIGN_LT: Final[bytes] = ESC + b"a\x00"
TXT_ALIGN_CT: Final[bytes] = ESC + b"a\x01"
TXT_ALIGN_RT: Final[bytes] = ESC + b"a\x02"

# =============================================================================
# COLOR (ESC r), two-color printers only
# =============================================================================

TXT_COLOR_BLACK: Final[bytes] = ESC + b"r\x00"
TXT_COLOR_RED: Final[bytes] = ESC + b"r\x01"

# =============================================================================
# CODE PAGE (ESC t n)
# =============================================================================

CP_SET: Final[bytes] = ESC + b"t"
"""
Select character code table prefix.

Command: ESC t n
Hex: 1B 74 n
Note: n is appended separately (see "codepage-*" symbols)
"""

# =============================================================================
# BARCODE
# =============================================================================

BARCODE_HEIGHT: Final[bytes] = GS + b"h"
"""Set bar code height, followed by one byte n (1-255 dots). GS h n."""

BARCODE_WIDTH: Final[bytes] = GS + b"w"
"""Set bar code module width, followed by one byte n (2-6). GS w n."""

# =============================================================================
# PAPER
# =============================================================================

PAPER_FULL_CUT: Final[bytes] = GS + b"V\x00"
"""Full cut. GS V 0 (1D 56 00)."""

PAPER_PARTIAL_CUT: Final[bytes] = GS + b"V\x01"
"""Partial cut (one point left uncut). GS V 1 (1D 56 01)."""


_DEFAULT_SYMBOLS: Final[Dict[str, bytes]] = {
    "hw-init": HW_INIT,
    # Text style
    "text-normal": TXT_NORMAL,
    "text-double-height": TXT_2HEIGHT,
    "text-double-width": TXT_2WIDTH,
    "text-quad": TXT_4SQUARE,
    "text-underline-on": TXT_UNDERL_ON,
    "text-underline2-on": TXT_UNDERL2_ON,
    "text-bold-on": TXT_BOLD_ON,
    "text-invert-on": TXT_INVERT_ON,
    # Alignment
    "align-left": TXT_ALIGN_LT,
    "align-center": TXT_ALIGN_CT,
    "align-right": TXT_ALIGN_RT,
    # Color
    "color-black": TXT_COLOR_BLACK,
    "color-red": TXT_COLOR_RED,
    # Code pages
    "codepage-set": CP_SET,
    "codepage-pc437": b"\x00",
    "codepage-katakana": b"\x01",
    "codepage-pc850": b"\x02",
    "codepage-pc860": b"\x03",
    "codepage-pc863": b"\x04",
    "codepage-pc865": b"\x05",
    "codepage-wpc1252": b"\x10",
    "codepage-pc866": b"\x11",
    "codepage-pc852": b"\x12",
    "codepage-pc858": b"\x13",
    # Barcode HRI position (GS H n)
    "barcode-text-off": GS + b"H\x00",
    "barcode-text-above": GS + b"H\x01",
    "barcode-text-below": GS + b"H\x02",
    "barcode-text-both": GS + b"H\x03",
    "barcode-height": BARCODE_HEIGHT,
    "barcode-width": BARCODE_WIDTH,
    # Barcode symbology (GS k m)
    "barcode-upc-a": GS + b"k\x00",
    "barcode-upc-e": GS + b"k\x01",
    "barcode-ean13": GS + b"k\x02",
    "barcode-ean8": GS + b"k\x03",
    "barcode-code39": GS + b"k\x04",
    "barcode-itf": GS + b"k\x05",
    "barcode-codabar": GS + b"k\x06",
    # Paper
    "paper-full-cut": PAPER_FULL_CUT,
    "paper-partial-cut": PAPER_PARTIAL_CUT,
}


def _to_bytes(symbol: str, value: Any) -> bytes:
    """Normalize one opcode value (bytes, int list or hex string) to bytes."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)

    if isinstance(value, str):
        try:
            return bytes.fromhex(value)
        except ValueError:
            raise InvalidArgumentError(
                f"Opcode '{symbol}' is not a valid hex string: {value!r}",
                argument=symbol,
                value=value,
            ) from None

    if isinstance(value, (list, tuple)):
        if not all(isinstance(b, int) and not isinstance(b, bool) for b in value):
            raise InvalidArgumentTypeError(
                f"Opcode '{symbol}' must contain only ints",
                argument=symbol,
                value=value,
            )
        if not all(0 <= b <= 255 for b in value):
            raise InvalidArgumentError(
                f"Opcode '{symbol}' bytes must be 0-255, got {list(value)}",
                argument=symbol,
                value=value,
            )
        return bytes(value)

    raise InvalidArgumentTypeError(
        f"Opcode '{symbol}' must be bytes, a list of ints or a hex string, "
        f"got {type(value).__name__}",
        argument=symbol,
        value=value,
    )


# =============================================================================
# OPCODE TABLE
# =============================================================================


class OpcodeTable(Mapping[str, bytes]):
    """
    Immutable symbol -> bytes lookup for one protocol dialect.

    Attributes:
        name: Dialect name, reported in lookup errors.

    Example:
        >>> table = OpcodeTable({"text-bold-on": b"\\x1bE\\x01"}, name="mini")
        >>> table.lookup("text-bold-on")
        b'\\x1bE\\x01'
        >>> table.lookup("text-normal")
        Traceback (most recent call last):
        ...
        UnknownOpcodeError: Opcode 'text-normal' is not defined in dialect 'mini' ...
    """

    __slots__ = ("_name", "_opcodes")

    def __init__(self, opcodes: Mapping[str, OpcodeValue], name: str = "custom") -> None:
        frozen: Dict[str, bytes] = {}
        for symbol, value in opcodes.items():
            if not isinstance(symbol, str) or not symbol:
                raise InvalidArgumentTypeError(
                    f"Opcode symbols must be non-empty strings, got {symbol!r}",
                    argument="symbol",
                    value=symbol,
                )
            frozen[symbol] = _to_bytes(symbol, value)

        self._name = name
        self._opcodes: Mapping[str, bytes] = MappingProxyType(frozen)

    @property
    def name(self) -> str:
        return self._name

    def lookup(self, symbol: str) -> bytes:
        """
        Return the canonical byte encoding of a symbolic command.

        Raises:
            UnknownOpcodeError: If the symbol is not defined for this dialect.
        """
        try:
            return self._opcodes[symbol]
        except (KeyError, TypeError):
            raise UnknownOpcodeError(
                str(symbol), dialect=self._name, available=self._opcodes.keys()
            ) from None

    def symbols(self) -> list[str]:
        return sorted(self._opcodes)

    def with_overrides(
        self, overrides: Mapping[str, OpcodeValue], name: Optional[str] = None
    ) -> "OpcodeTable":
        """Derive a new table; this table is left untouched."""
        merged: Dict[str, OpcodeValue] = dict(self._opcodes)
        merged.update(overrides)
        return OpcodeTable(merged, name=name or self._name)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "OpcodeTable":
        """
        Load a dialect from a JSON file.

        Args:
            path: Path to the dialect file (see module docstring for format).

        Returns:
            A new OpcodeTable.

        Raises:
            ConfigurationError: If the file is unreadable, not valid JSON,
                has the wrong shape or contains invalid opcode values.
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in dialect file {path} at line {e.lineno}, column {e.colno}",
                context={"path": str(path)},
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read dialect file {path}: {e}",
                context={"path": str(path)},
            ) from e

        if not isinstance(document, dict) or not isinstance(document.get("opcodes"), dict):
            raise ConfigurationError(
                "Dialect file must be a JSON object with an 'opcodes' object",
                context={"path": str(path)},
            )

        name = document.get("name") or path.stem
        base = document.get("extends", "default")
        if base == "default":
            base_table = DEFAULT_OPCODES
        elif base is None:
            base_table = OpcodeTable({}, name=name)
        else:
            raise ConfigurationError(
                f"Unsupported 'extends' value: {base!r} (expected 'default' or null)",
                context={"path": str(path)},
            )

        try:
            table = base_table.with_overrides(document["opcodes"], name=name)
        except InvalidArgumentError as e:
            raise ConfigurationError(e.message, context={"path": str(path)}) from e

        logger.info(f"Loaded opcode dialect '{name}' from {path} ({len(table)} symbols)")
        return table

    def __getitem__(self, symbol: str) -> bytes:
        return self._opcodes[symbol]

    def __iter__(self) -> Iterator[str]:
        return iter(self._opcodes)

    def __len__(self) -> int:
        return len(self._opcodes)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._opcodes

    def __eq__(self, other: object) -> bool:
        if isinstance(other, OpcodeTable):
            return self._name == other._name and dict(self._opcodes) == dict(other._opcodes)
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._name, frozenset(self._opcodes.items())))

    def __repr__(self) -> str:
        return f"OpcodeTable(name={self._name!r}, symbols={len(self._opcodes)})"


DEFAULT_OPCODES: Final[OpcodeTable] = OpcodeTable(_DEFAULT_SYMBOLS, name="default")


def get_default_table() -> OpcodeTable:
    """Return the process-wide built-in ESC/POS table."""
    return DEFAULT_OPCODES


def resolve_table(opcodes: Optional[OpcodeTable]) -> OpcodeTable:
    """Return ``opcodes`` or the default table when None."""
    return DEFAULT_OPCODES if opcodes is None else opcodes
