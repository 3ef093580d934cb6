"""
Paper cut ESC/POS commands (GS V m).

Full and partial cut are distinct opcodes; a partial cut leaves one point
uncut so the receipt stays attached.
"""

from typing import Optional

from escpos_encoder.opcodes import OpcodeTable, resolve_table

__all__ = [
    "cut",
    "partial_cut",
]


def partial_cut(*, opcodes: Optional[OpcodeTable] = None) -> bytes:
    """GS V 1 (1D 56 01)."""
    return resolve_table(opcodes).lookup("paper-partial-cut")


def cut(*, opcodes: Optional[OpcodeTable] = None) -> bytes:
    """GS V 0 (1D 56 00)."""
    return resolve_table(opcodes).lookup("paper-full-cut")
