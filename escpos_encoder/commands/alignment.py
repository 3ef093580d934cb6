"""
Justification ESC/POS commands (ESC a n).

    [alignment opcode] + payload + [ESC a 0]

The sequence always returns the printer to left justification. An empty
payload is valid; ``center()`` alone still emits the opcode pair.
"""

from enum import Enum
from typing import Optional, Union

from escpos_encoder.commands.charset import DEFAULT_TEXT_ENCODING, CodePage, to_payload_bytes
from escpos_encoder.exceptions import InvalidArgumentError
from escpos_encoder.opcodes import OpcodeTable, resolve_table

__all__ = [
    "Alignment",
    "align_text",
    "left",
    "right",
    "center",
]


class Alignment(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"

    @property
    def symbol(self) -> str:
        return f"align-{self.value}"


def align_text(
    payload: Union[str, bytes],
    alignment: Union[Alignment, str],
    *,
    opcodes: Optional[OpcodeTable] = None,
    encoding: Union[str, CodePage] = DEFAULT_TEXT_ENCODING,
) -> bytes:
    """
    Justify a payload, then reset to left justification.

    Args:
        payload: Text to print (str or pre-encoded bytes), may be empty.
        alignment: Alignment member or "left" / "center" / "right".
        opcodes: Opcode table (default: built-in ESC/POS table).
        encoding: Codec for str payloads (default: cp437).

    Returns:
        ESC/POS command bytes.

    Raises:
        InvalidArgumentError: Payload is not text, or unknown alignment.

    Example:
        >>> align_text("Thank you!", Alignment.CENTER)
        b'\\x1ba\\x01Thank you!\\x1ba\\x00'
    """
    data = to_payload_bytes(payload, encoding)

    try:
        alignment = Alignment(alignment)
    except ValueError:
        raise InvalidArgumentError(
            f"Alignment must be left, center or right, got {alignment!r}",
            argument="alignment",
            value=alignment,
        ) from None

    table = resolve_table(opcodes)
    return table.lookup(alignment.symbol) + data + table.lookup(Alignment.LEFT.symbol)


def left(payload: Union[str, bytes] = "", **kwargs) -> bytes:
    return align_text(payload, Alignment.LEFT, **kwargs)


def right(payload: Union[str, bytes] = "", **kwargs) -> bytes:
    return align_text(payload, Alignment.RIGHT, **kwargs)


def center(payload: Union[str, bytes] = "", **kwargs) -> bytes:
    return align_text(payload, Alignment.CENTER, **kwargs)
