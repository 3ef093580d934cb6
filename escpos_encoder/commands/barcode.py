"""
Barcode ESC/POS commands.

Builds the full barcode sequence in the order printer firmware expects:

    GS H n     HRI text position
    GS w n     module width (2-6)
    GS h n     bar height (1-255 dots)
    GS k m     symbology
    data

Width, height and HRI configuration must precede the symbology opcode; the
printer applies them to the next barcode it prints.

Reference: Epson ESC/POS Command Reference (GS H, GS w, GS h, GS k)
"""

from enum import Enum
from typing import Final, Optional, Union

from escpos_encoder.commands.charset import to_payload_bytes
from escpos_encoder.exceptions import InvalidArgumentError, InvalidArgumentTypeError
from escpos_encoder.opcodes import OpcodeTable, resolve_table

__all__ = [
    "BarcodeFormat",
    "BarcodeTextPosition",
    "BARCODE_HEIGHT_RANGE",
    "BARCODE_WIDTH_RANGE",
    "barcode",
]

BARCODE_HEIGHT_RANGE: Final[range] = range(1, 256)
BARCODE_WIDTH_RANGE: Final[range] = range(2, 7)

DEFAULT_BARCODE_HEIGHT: Final[int] = 50
DEFAULT_BARCODE_WIDTH: Final[int] = 3

# =============================================================================
# BARCODE TYPE CONSTANTS
# =============================================================================


class BarcodeFormat(str, Enum):
    """
    Barcode symbologies of GS k function A.

    The value is the opcode-table symbol; the table supplies m.
    """

    UPC_A = "barcode-upc-a"  # m = 0, 11-12 digits
    UPC_E = "barcode-upc-e"  # m = 1, 11-12 digits
    EAN13 = "barcode-ean13"  # m = 2, 12-13 digits
    EAN8 = "barcode-ean8"  # m = 3, 7-8 digits
    CODE39 = "barcode-code39"  # m = 4, 0-9 A-Z space $ % * + - . /
    ITF = "barcode-itf"  # m = 5, even number of digits
    CODABAR = "barcode-codabar"  # m = 6, NW-7


class BarcodeTextPosition(str, Enum):
    """
    Human Readable Interpretation (HRI) text position.

    Controls where barcode data text appears relative to the bars.
    """

    OFF = "off"
    """No HRI text printed (barcode only)."""

    ABOVE = "above"
    """HRI text printed above the bars."""

    BELOW = "below"
    """HRI text printed below the bars (most common)."""

    BOTH = "both"
    """HRI text printed above and below the bars."""

    @property
    def symbol(self) -> str:
        return f"barcode-text-{self.value}"


def _check_range(name: str, value: int, allowed: range) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentTypeError(
            f"Barcode {name} must be an int, got {type(value).__name__}",
            argument=name,
            value=value,
        )
    if value not in allowed:
        raise InvalidArgumentError(
            f"Barcode {name} must be {allowed.start}-{allowed.stop - 1}, got {value}",
            argument=name,
            value=value,
        )


# =============================================================================
# BARCODE PRINTING
# =============================================================================


def barcode(
    data: Union[str, bytes],
    format: Union[BarcodeFormat, str] = BarcodeFormat.EAN13,
    height: int = DEFAULT_BARCODE_HEIGHT,
    width: int = DEFAULT_BARCODE_WIDTH,
    text_position: Union[BarcodeTextPosition, str] = BarcodeTextPosition.OFF,
    *,
    opcodes: Optional[OpcodeTable] = None,
) -> bytes:
    """
    Generate the ESC/POS sequence that prints a barcode.

    Args:
        data: Barcode data. str must be ASCII; bytes are sent as-is.
              Content must be valid for the symbology (not checked here,
              the printer rejects invalid data).
        format: BarcodeFormat member or an opcode-table symbol. Checked only
                by table lookup, so dialects can add symbologies.
        height: Bar height in dots (1-255, default: 50).
        width: Module width (2-6, default: 3).
        text_position: HRI position (default: OFF).
        opcodes: Opcode table (default: built-in ESC/POS table).

    Returns:
        ESC/POS command bytes ready to send to the printer.

    Raises:
        InvalidArgumentError: data not text; height, width or text_position
                              out of range.
        EncodingError: str data is not ASCII.
        UnknownOpcodeError: format (or another symbol) missing from the table.

    Example:
        >>> barcode("4006381333931", height=80, width=2,
        ...         text_position=BarcodeTextPosition.BELOW)
        b'\\x1dH\\x02\\x1dw\\x02\\x1dhP\\x1dk\\x024006381333931'
    """
    payload = to_payload_bytes(data, "ascii", argument="data")
    _check_range("height", height, BARCODE_HEIGHT_RANGE)
    _check_range("width", width, BARCODE_WIDTH_RANGE)

    try:
        text_position = BarcodeTextPosition(text_position)
    except ValueError:
        raise InvalidArgumentError(
            f"Barcode text position must be off, above, below or both, got {text_position!r}",
            argument="text_position",
            value=text_position,
        ) from None

    table = resolve_table(opcodes)
    format_symbol = format.value if isinstance(format, BarcodeFormat) else str(format)

    return (
        table.lookup(text_position.symbol)
        + table.lookup("barcode-width")
        + bytes([width])
        + table.lookup("barcode-height")
        + bytes([height])
        + table.lookup(format_symbol)
        + payload
    )
