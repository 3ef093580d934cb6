"""
Accumulating ESC/POS output buffer.

CommandBuffer collects command sequences into one byte string that starts
with printer initialization (ESC @). It only concatenates; sending the
result to a printer is the caller's job.

Example:
    >>> from escpos_encoder import CommandBuffer
    >>> from escpos_encoder.commands import bold, center
    >>> buf = CommandBuffer()
    >>> buf << center(bold("ACME STORE")) << "\\n"
    >>> buf.cut()
    >>> socket.sendall(buf.to_escpos())
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Dict, Final, Mapping, Optional, Union

from escpos_encoder.commands.charset import (
    DEFAULT_TEXT_ENCODING,
    CodePage,
    EncodingPolicy,
    encode,
    resolve_codec,
    set_printer_encoding,
)
from escpos_encoder.commands.paper import cut as _cut
from escpos_encoder.commands.paper import partial_cut as _partial_cut
from escpos_encoder.exceptions import (
    ConfigurationError,
    EncodingError,
    InvalidArgumentError,
    InvalidArgumentTypeError,
)
from escpos_encoder.opcodes import DEFAULT_OPCODES, OpcodeTable, resolve_table

__all__ = ["CommandBuffer", "load_opcodes"]

logger: Final = logging.getLogger(__name__)


def load_opcodes(config: Mapping[str, Any]) -> OpcodeTable:
    """
    Resolve the opcode table named by a configuration dictionary.

    Args:
        config: Dictionary from load_config(). Key "opcode_dialect" holds a
                path to a dialect JSON file, or None for the built-in table.

    Returns:
        The loaded table, or DEFAULT_OPCODES.

    Raises:
        ConfigurationError: If the dialect file is missing or malformed.
    """
    dialect = config.get("opcode_dialect")
    if not dialect:
        return DEFAULT_OPCODES
    return OpcodeTable.from_json(dialect)


class CommandBuffer:
    """
    Byte buffer of ESC/POS commands, initialized with ESC @.

    Attributes:
        opcodes: Table used for the init and cut opcodes.
        encoding: Codec applied to str written to the buffer.
        policy: EncodingPolicy applied to str written to the buffer.

    Raises:
        InvalidArgumentError: Unknown policy.
        EncodingError: encoding is not a known text codec.
    """

    def __init__(
        self,
        opcodes: Optional[OpcodeTable] = None,
        encoding: Union[str, CodePage] = DEFAULT_TEXT_ENCODING,
        policy: Union[EncodingPolicy, str] = EncodingPolicy.STRICT,
    ) -> None:
        try:
            self.policy = EncodingPolicy(policy)
        except ValueError:
            raise InvalidArgumentError(
                f"Unknown encoding policy: {policy!r}",
                argument="policy",
                value=policy,
            ) from None
        resolve_codec(encoding)

        self.opcodes = resolve_table(opcodes)
        self.encoding = encoding
        self._data = bytearray(self.opcodes.lookup("hw-init"))

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> CommandBuffer:
        """
        Build a buffer from a load_config() dictionary.

        The buffer starts with ESC @ followed by the ESC t selection of
        "default_codepage" (skipped when that key is None).
        """
        try:
            policy = EncodingPolicy(config.get("encoding_policy", EncodingPolicy.STRICT))
        except ValueError:
            raise ConfigurationError(
                f"Invalid encoding_policy: {config.get('encoding_policy')!r}",
                context={"key": "encoding_policy"},
            ) from None

        encoding = config.get("text_encoding", DEFAULT_TEXT_ENCODING)
        try:
            resolve_codec(encoding)
        except (EncodingError, InvalidArgumentError) as e:
            raise ConfigurationError(
                f"Invalid text_encoding: {encoding!r}",
                context={"key": "text_encoding"},
            ) from e

        buffer = cls(opcodes=load_opcodes(config), encoding=encoding, policy=policy)
        code_page = config.get("default_codepage")
        if code_page is not None:
            buffer.write(set_printer_encoding(code_page, opcodes=buffer.opcodes))
        logger.debug(
            f"CommandBuffer created: dialect={buffer.opcodes.name}, "
            f"encoding={buffer.encoding}, policy={buffer.policy.value}"
        )
        return buffer

    def write(self, data: Union[bytes, bytearray, str]) -> CommandBuffer:
        """Append bytes, or text encoded with the buffer's encoding and policy."""
        if isinstance(data, (bytes, bytearray)):
            self._data += data
        elif isinstance(data, str):
            self._data += encode(data, self.encoding, self.policy)
        else:
            raise InvalidArgumentTypeError(
                f"Can only write bytes or str, got {type(data).__name__}",
                argument="data",
                value=data,
            )
        return self

    __lshift__ = write

    def partial_cut(self) -> CommandBuffer:
        return self.write(_partial_cut(opcodes=self.opcodes))

    def cut(self) -> CommandBuffer:
        return self.write(_cut(opcodes=self.opcodes))

    def to_escpos(self) -> bytes:
        return bytes(self._data)

    def to_base64(self) -> str:
        """Strict base64 (no line breaks), for JSON or HTTP transports."""
        return base64.b64encode(self._data).decode("ascii")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dialect": self.opcodes.name,
            "size": len(self._data),
            "data": self.to_base64(),
        }

    def __bytes__(self) -> bytes:
        return self.to_escpos()

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return (
            f"CommandBuffer(dialect={self.opcodes.name!r}, "
            f"size={len(self._data)}, encoding={self.encoding!r})"
        )
