"""
ESC/POS command builders.

Every function here is pure: it returns a self-contained ``bytes`` sequence
built from its arguments and an opcode table, and never touches printer
state or I/O. Pass ``opcodes=`` to target a different dialect.

Module Structure:
    commands/
    ├── __init__.py          # This file (public API exports)
    ├── text_formatting.py   # Bold, underline, double size, inverted
    ├── alignment.py         # Left / center / right justification
    ├── color.py             # Black / red (two-color printers)
    ├── charset.py           # Code page selection, text re-encoding
    ├── barcode.py           # Barcode generation
    └── paper.py             # Full and partial cut

Usage:
    >>> from escpos_encoder.commands import bold, center, barcode, cut
    >>> receipt = center(bold("ACME STORE")) + b"\\n" + barcode("4006381333931") + cut()
"""

from escpos_encoder.commands.alignment import Alignment, align_text, center, left, right
from escpos_encoder.commands.barcode import BarcodeFormat, BarcodeTextPosition, barcode
from escpos_encoder.commands.charset import (
    CodePage,
    EncodingPolicy,
    encode,
    set_encoding,
    set_printer_encoding,
)
from escpos_encoder.commands.color import (
    TextColor,
    alt_color,
    alternative_color,
    black,
    black_color,
    color_black,
    color_red,
    color_text,
    default_color,
    red,
    red_color,
)
from escpos_encoder.commands.paper import cut, partial_cut
from escpos_encoder.commands.text_formatting import (
    TextStyle,
    b,
    big,
    bold,
    double_height,
    double_height_double_width,
    double_width,
    double_width_double_height,
    format_text,
    header,
    invert,
    inverted,
    quad_text,
    text,
    title,
    u,
    u2,
    underline,
    underline2,
)

__all__ = [
    # Text formatting
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
    "big",
    "title",
    "header",
    "double_width_double_height",
    "double_height_double_width",
    "u",
    "u2",
    "b",
    "invert",
    # Alignment
    "Alignment",
    "align_text",
    "left",
    "right",
    "center",
    # Color
    "TextColor",
    "color_text",
    "black",
    "red",
    "default_color",
    "black_color",
    "color_black",
    "alt_color",
    "alternative_color",
    "red_color",
    "color_red",
    # Charset
    "CodePage",
    "EncodingPolicy",
    "encode",
    "set_printer_encoding",
    "set_encoding",
    # Barcode
    "BarcodeFormat",
    "BarcodeTextPosition",
    "barcode",
    # Paper
    "cut",
    "partial_cut",
]
