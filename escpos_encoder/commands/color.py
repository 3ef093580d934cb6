"""
Two-color printing ESC/POS commands (ESC r n).

    [color opcode] + payload + [ESC r 0]

Base ESC/POS defines black and red. A dialect that adds "color-<name>"
symbols to its opcode table makes those names valid here as well.
"""

from enum import Enum
from typing import Optional, Union

from escpos_encoder.commands.charset import DEFAULT_TEXT_ENCODING, CodePage, to_payload_bytes
from escpos_encoder.exceptions import InvalidArgumentError, InvalidArgumentTypeError
from escpos_encoder.opcodes import OpcodeTable, resolve_table

__all__ = [
    "TextColor",
    "color_text",
    "black",
    "red",
    # Aliases
    "default_color",
    "black_color",
    "color_black",
    "alt_color",
    "alternative_color",
    "red_color",
    "color_red",
]


class TextColor(str, Enum):
    BLACK = "black"
    RED = "red"

    @property
    def symbol(self) -> str:
        return f"color-{self.value}"


def _color_symbol(color: Union[TextColor, str], table: OpcodeTable) -> str:
    if isinstance(color, TextColor):
        return color.symbol
    if not isinstance(color, str):
        raise InvalidArgumentTypeError(
            f"Color must be a TextColor or name, got {type(color).__name__}",
            argument="color",
            value=color,
        )
    try:
        return TextColor(color).symbol
    except ValueError:
        # Dialect extension
        symbol = f"color-{color}"

    if symbol in table:
        return symbol

    raise InvalidArgumentError(
        f"Unknown color {color!r} for dialect '{table.name}'",
        argument="color",
        value=color,
    )


def color_text(
    payload: Union[str, bytes],
    color: Union[TextColor, str],
    *,
    opcodes: Optional[OpcodeTable] = None,
    encoding: Union[str, CodePage] = DEFAULT_TEXT_ENCODING,
) -> bytes:
    """
    Print a payload in the given color, then reset to black.

    Args:
        payload: Text to print (str or pre-encoded bytes).
        color: TextColor member, or a color name defined by the table.
        opcodes: Opcode table (default: built-in ESC/POS table).
        encoding: Codec for str payloads (default: cp437).

    Returns:
        ESC/POS command bytes.

    Raises:
        InvalidArgumentError: Payload is not text, or unknown color.

    Example:
        >>> color_text("VOID", TextColor.RED)
        b'\\x1br\\x01VOID\\x1br\\x00'
    """
    data = to_payload_bytes(payload, encoding)
    table = resolve_table(opcodes)
    symbol = _color_symbol(color, table)
    return table.lookup(symbol) + data + table.lookup(TextColor.BLACK.symbol)


def black(payload: Union[str, bytes], **kwargs) -> bytes:
    return color_text(payload, TextColor.BLACK, **kwargs)


def red(payload: Union[str, bytes], **kwargs) -> bytes:
    return color_text(payload, TextColor.RED, **kwargs)


default_color = black
black_color = black
color_black = black
alt_color = red
alternative_color = red
red_color = red
color_red = red
