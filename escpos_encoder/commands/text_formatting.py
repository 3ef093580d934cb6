"""
Text style ESC/POS commands.

Wraps a payload in a style opcode and the normal-mode reset:

    [style opcode] + payload + [ESC ! 0]

Each sequence is self-contained and does not rely on printer state left by
earlier writes.

Limitation: the trailing reset is always "text-normal", whatever style was
applied. Nesting calls (bold text inside underlined text) therefore ends ALL
styling at the inner reset; styles do not compose.

Reference: Epson ESC/POS Command Reference (ESC !, ESC -, ESC E, GS B)
"""

from enum import Enum
from typing import Optional, Union

from escpos_encoder.commands.charset import DEFAULT_TEXT_ENCODING, CodePage, to_payload_bytes
from escpos_encoder.exceptions import InvalidArgumentError
from escpos_encoder.opcodes import OpcodeTable, resolve_table

__all__ = [
    "TextStyle",
    "format_text",
    "text",
    "double_height",
    "double_width",
    "quad_text",
    "underline",
    "underline2",
    "bold",
    "inverted",
    # Aliases
    "big",
    "title",
    "header",
    "double_width_double_height",
    "double_height_double_width",
    "u",
    "u2",
    "b",
    "invert",
]


class TextStyle(str, Enum):
    """Print styles; each value is the opcode-table symbol that enables it."""

    NORMAL = "text-normal"
    DOUBLE_HEIGHT = "text-double-height"
    DOUBLE_WIDTH = "text-double-width"
    QUAD = "text-quad"
    """Double height and double width together."""
    UNDERLINE = "text-underline-on"
    UNDERLINE_HEAVY = "text-underline2-on"
    BOLD = "text-bold-on"
    INVERTED = "text-invert-on"


def format_text(
    payload: Union[str, bytes],
    style: Union[TextStyle, str],
    *,
    opcodes: Optional[OpcodeTable] = None,
    encoding: Union[str, CodePage] = DEFAULT_TEXT_ENCODING,
) -> bytes:
    """
    Wrap a payload in a style opcode and the normal-mode reset.

    Args:
        payload: Text to print. str is encoded with ``encoding``; bytes are
                 taken as already encoded.
        style: TextStyle member or its symbol value.
        opcodes: Opcode table (default: built-in ESC/POS table).
        encoding: Codec for str payloads (default: cp437).

    Returns:
        ESC/POS command bytes.

    Raises:
        InvalidArgumentError: If payload is not text (also a TypeError), or
                              style is not a TextStyle.
        EncodingError: If a str payload cannot be encoded.
        UnknownOpcodeError: If the table lacks the style or reset symbol.

    Example:
        >>> format_text("TOTAL", TextStyle.BOLD)
        b'\\x1bE\\x01TOTAL\\x1b!\\x00'
    """
    data = to_payload_bytes(payload, encoding)

    try:
        style = TextStyle(style)
    except ValueError:
        raise InvalidArgumentError(
            f"Unknown text style: {style!r}",
            argument="style",
            value=style,
        ) from None

    table = resolve_table(opcodes)
    return table.lookup(style.value) + data + table.lookup(TextStyle.NORMAL.value)


def text(payload: Union[str, bytes], **kwargs) -> bytes:
    return format_text(payload, TextStyle.NORMAL, **kwargs)


def double_height(payload: Union[str, bytes], **kwargs) -> bytes:
    return format_text(payload, TextStyle.DOUBLE_HEIGHT, **kwargs)


def double_width(payload: Union[str, bytes], **kwargs) -> bytes:
    return format_text(payload, TextStyle.DOUBLE_WIDTH, **kwargs)


def quad_text(payload: Union[str, bytes], **kwargs) -> bytes:
    """Double-height and double-width text, for receipt titles."""
    return format_text(payload, TextStyle.QUAD, **kwargs)


def underline(payload: Union[str, bytes], **kwargs) -> bytes:
    return format_text(payload, TextStyle.UNDERLINE, **kwargs)


def underline2(payload: Union[str, bytes], **kwargs) -> bytes:
    """Heavy (2-dot) underline."""
    return format_text(payload, TextStyle.UNDERLINE_HEAVY, **kwargs)


def bold(payload: Union[str, bytes], **kwargs) -> bytes:
    return format_text(payload, TextStyle.BOLD, **kwargs)


def inverted(payload: Union[str, bytes], **kwargs) -> bytes:
    """
    White on black.

    The trailing ESC ! 0 does not clear GS B on Epson firmware, so reverse
    printing stays on until the printer is reinitialized or the dialect maps
    "text-normal" to a sequence that also sends GS B 0.
    """
    return format_text(payload, TextStyle.INVERTED, **kwargs)


# =============================================================================
# ALIASES
# =============================================================================

big = quad_text
title = quad_text
header = quad_text
double_width_double_height = quad_text
double_height_double_width = quad_text
u = underline
u2 = underline2
b = bold
invert = inverted
