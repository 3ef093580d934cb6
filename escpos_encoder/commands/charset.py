"""
Character set and text encoding for ESC/POS printers.

Thermal printers render bytes 128-255 through the active code page, so text
must be re-encoded to the same code page the printer has selected. This module
holds both halves of that contract: the ESC t command that selects a code page
on the printer, and the host-side re-encoding of Python text.

Reference: Epson ESC/POS Command Reference, ESC t n
Default after power-on: PC437 (USA, Standard Europe)
"""

import codecs
from enum import Enum
from typing import Final, Optional, Union

from escpos_encoder.exceptions import (
    EncodingError,
    InvalidArgumentError,
    InvalidArgumentTypeError,
)
from escpos_encoder.opcodes import OpcodeTable, resolve_table

__all__ = [
    "CodePage",
    "EncodingPolicy",
    "DEFAULT_TEXT_ENCODING",
    "encode",
    "set_printer_encoding",
    "set_encoding",
    "to_payload_bytes",
    "resolve_codec",
]

DEFAULT_TEXT_ENCODING: Final[str] = "cp437"

# =============================================================================
# CODE PAGE CONSTANTS
# =============================================================================


class CodePage(str, Enum):
    """
    Character code tables selectable with ESC t n.

    The value is the opcode-table symbol suffix ("codepage-<value>"); the
    table supplies the numeric n, so dialects with different numbering only
    need a different table.
    """

    PC437 = "pc437"  # USA, Standard Europe (default)
    KATAKANA = "katakana"
    PC850 = "pc850"  # Multilingual
    PC860 = "pc860"  # Portuguese
    PC863 = "pc863"  # Canadian-French
    PC865 = "pc865"  # Nordic
    WPC1252 = "wpc1252"  # Windows Latin 1
    PC866 = "pc866"  # Cyrillic #2
    PC852 = "pc852"  # Latin 2
    PC858 = "pc858"  # Euro

    @property
    def symbol(self) -> str:
        return f"codepage-{self.value}"

    @property
    def codec(self) -> Optional[str]:
        """Python codec matching this code page, None if there is none."""
        mapping = {
            CodePage.PC437: "cp437",
            CodePage.PC850: "cp850",
            CodePage.PC860: "cp860",
            CodePage.PC863: "cp863",
            CodePage.PC865: "cp865",
            CodePage.WPC1252: "cp1252",
            CodePage.PC866: "cp866",
            CodePage.PC852: "cp852",
            CodePage.PC858: "cp858",
        }
        return mapping.get(self)


class EncodingPolicy(str, Enum):
    """What to do with characters the target code page cannot represent."""

    STRICT = "strict"
    """Raise EncodingError."""

    REPLACE = "replace"
    """Substitute a replacement string (default "?")."""

    IGNORE = "ignore"
    """Drop the character."""


# =============================================================================
# HOST-SIDE RE-ENCODING
# =============================================================================


def resolve_codec(target: Union[str, CodePage]) -> str:
    """
    Return the canonical name of the str-to-bytes codec for ``target``.

    Raises:
        EncodingError: Unknown codec, a CodePage without a host codec, or a
                       codec that is not a text encoding (rot13, base64, zlib).
        InvalidArgumentTypeError: target is neither str nor CodePage.
    """
    if isinstance(target, CodePage):
        codec = target.codec
        if codec is None:
            raise EncodingError(
                f"Code page {target.value} has no host codec",
                encoding=target.value,
            )
        return codec

    if not isinstance(target, str):
        raise InvalidArgumentTypeError(
            f"Encoding must be a codec name or CodePage, got {type(target).__name__}",
            argument="encoding",
            value=target,
        )

    try:
        name = codecs.lookup(target).name
    except LookupError:
        raise EncodingError(f"Unknown encoding: {target!r}", encoding=target) from None

    try:
        "".encode(name)
    except LookupError:
        raise EncodingError(f"Not a text encoding: {target!r}", encoding=name) from None
    return name


def _encode_replacing(text: str, codec: str, replacement: bytes) -> bytes:
    out = bytearray()
    rest = text
    while True:
        try:
            out += rest.encode(codec)
            return bytes(out)
        except UnicodeEncodeError as e:
            out += rest[: e.start].encode(codec)
            out += replacement * (e.end - e.start)
            rest = rest[e.end :]


def encode(
    text: str,
    encoding: Union[str, CodePage] = DEFAULT_TEXT_ENCODING,
    policy: Union[EncodingPolicy, str] = EncodingPolicy.STRICT,
    replacement: str = "?",
) -> bytes:
    """
    Re-encode text to the character set the printer expects.

    Args:
        text: Text to encode.
        encoding: Python codec name ("cp437", "cp866", ...) or CodePage.
        policy: Handling of unrepresentable characters (default: STRICT).
        replacement: Substitute used by EncodingPolicy.REPLACE, one copy per
                     unrepresentable character. Must itself be representable.

    Returns:
        Encoded bytes.

    Raises:
        InvalidArgumentError: If text or replacement is not a str, or policy
                              is unknown.
        EncodingError: If the codec is unknown, or a character cannot be
                       represented under STRICT.

    Example:
        >>> encode("Привет", CodePage.PC866)
        b'\\x8f\\xe0\\xa8\\xa2\\xa5\\xe2'
        >>> encode("5 €", "cp437", EncodingPolicy.REPLACE)
        b'5 ?'
    """
    if not isinstance(text, str):
        raise InvalidArgumentTypeError(
            f"Text must be a str, got {type(text).__name__}",
            argument="text",
            value=text,
        )

    try:
        policy = EncodingPolicy(policy)
    except ValueError:
        raise InvalidArgumentError(
            f"Unknown encoding policy: {policy!r}",
            argument="policy",
            value=policy,
        ) from None

    if not isinstance(replacement, str):
        raise InvalidArgumentTypeError(
            f"Replacement must be a str, got {type(replacement).__name__}",
            argument="replacement",
            value=replacement,
        )

    codec = resolve_codec(encoding)

    try:
        if policy is EncodingPolicy.REPLACE:
            return _encode_replacing(text, codec, replacement.encode(codec))
        return text.encode(codec, errors=policy.value)
    except UnicodeEncodeError as e:
        raise EncodingError(
            f"Character {e.object[e.start:e.end]!r} cannot be encoded to {codec}",
            encoding=codec,
            position=e.start,
        ) from e


def to_payload_bytes(
    payload: Union[str, bytes],
    encoding: Union[str, CodePage] = DEFAULT_TEXT_ENCODING,
    argument: str = "payload",
) -> bytes:
    """
    Turn a text payload into bytes for a command sequence.

    bytes pass through unchanged (already encoded by the caller); str is
    encoded strictly. Anything else is rejected.
    """
    if isinstance(payload, bytes):
        return payload
    if isinstance(payload, str):
        return encode(payload, encoding)
    raise InvalidArgumentTypeError(
        f"{argument.capitalize()} must be text (str or bytes), got {type(payload).__name__}",
        argument=argument,
        value=payload,
    )


# =============================================================================
# PRINTER-SIDE CODE PAGE SELECTION
# =============================================================================


def set_printer_encoding(
    code_page: Union[CodePage, str, int],
    *,
    opcodes: Optional[OpcodeTable] = None,
) -> bytes:
    """
    Select the printer's character code table.

    Command: ESC t n
    Hex: 1B 74 n

    Args:
        code_page: CodePage member, its name ("pc866"), or a raw table
                   number n for pages the opcode table does not name.
        opcodes: Opcode table (default: built-in ESC/POS table).

    Returns:
        ESC/POS command bytes.

    Raises:
        UnknownOpcodeError: If the code page name is not in the table.
        InvalidArgumentError: If a raw number does not fit in one byte.

    Note:
        Whether the printer actually has the selected table is not checked;
        an unsupported n is a printer-side failure.

    Example:
        >>> set_printer_encoding(CodePage.PC866)
        b'\\x1bt\\x11'
    """
    table = resolve_table(opcodes)
    prefix = table.lookup("codepage-set")

    if isinstance(code_page, CodePage):
        return prefix + table.lookup(code_page.symbol)

    if isinstance(code_page, bool):
        raise InvalidArgumentTypeError(
            "Code page must be a CodePage, name or int, got bool",
            argument="code_page",
            value=code_page,
        )

    if isinstance(code_page, int):
        if not 0 <= code_page <= 255:
            raise InvalidArgumentError(
                f"Code page number must be 0-255, got {code_page}",
                argument="code_page",
                value=code_page,
            )
        return prefix + bytes([code_page])

    if isinstance(code_page, str):
        return prefix + table.lookup(f"codepage-{code_page.lower()}")

    raise InvalidArgumentTypeError(
        f"Code page must be a CodePage, name or int, got {type(code_page).__name__}",
        argument="code_page",
        value=code_page,
    )


set_encoding = set_printer_encoding
