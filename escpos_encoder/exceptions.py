"""
Exceptions raised by the ESC/POS command encoder.

Hierarchy:
    EscposError (base)
    ├── InvalidArgumentError          (also ValueError)
    │   └── InvalidArgumentTypeError  (also TypeError)
    ├── UnknownOpcodeError            (also LookupError)
    ├── EncodingError                 (also UnicodeError)
    └── ConfigurationError

Every command function raises before returning, so a caller never receives a
partially built sequence.

Example:
    >>> from escpos_encoder.exceptions import EscposError
    >>> try:
    ...     payload = barcode("4006381333931", height=300)
    ... except EscposError as e:
    ...     logger.error(f"Cannot encode barcode: {e}")
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

__all__: list[str] = [
    "EscposError",
    "InvalidArgumentError",
    "InvalidArgumentTypeError",
    "UnknownOpcodeError",
    "EncodingError",
    "ConfigurationError",
]


# ==============================================================================
# BASE EXCEPTION
# ==============================================================================


class EscposError(Exception):
    """
    Base exception for every encoder error.

    Attributes:
        message: Human readable description
        symbol: Opcode symbol involved in the failure (optional)
        context: Extra details for debugging (optional)
    """

    def __init__(
        self,
        message: str,
        *,
        symbol: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.symbol = symbol
        self.context = context or {}

    def __str__(self) -> str:
        """
        Format the message with symbol and context.

        Example:
            >>> str(UnknownOpcodeError("barcode-qr", dialect="default"))
            "UnknownOpcodeError: Opcode 'barcode-qr' is not defined ... [symbol=barcode-qr] (dialect=default)"
        """
        parts = [self.__class__.__name__, ": ", self.message]

        if self.symbol:
            parts.append(f" [symbol={self.symbol}]")

        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f" ({ctx_str})")

        return "".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"symbol={self.symbol!r}, "
            f"context={self.context!r})"
        )


# ==============================================================================
# ARGUMENT ERRORS
# ==============================================================================


class InvalidArgumentError(EscposError, ValueError):
    """
    A numeric or enumerated argument lies outside its permitted set.

    Raised for barcode height/width bounds, unknown alignment, color,
    style or barcode text position.

    Example:
        >>> barcode("123", width=7)
        InvalidArgumentError: Barcode width must be 2-6, got 7 (argument=width)
    """

    def __init__(
        self,
        message: str,
        *,
        argument: Optional[str] = None,
        value: Any = None,
    ) -> None:
        context: Dict[str, Any] = {}
        if argument is not None:
            context["argument"] = argument
        super().__init__(message, context=context)
        self.argument = argument
        self.value = value


class InvalidArgumentTypeError(InvalidArgumentError, TypeError):
    """
    An argument has the wrong type (e.g. a number where text is expected).

    Catchable both as InvalidArgumentError and as the builtin TypeError.
    """

    pass


# ==============================================================================
# OPCODE TABLE ERRORS
# ==============================================================================


class UnknownOpcodeError(EscposError, LookupError):
    """
    Symbol is not defined in the active opcode table.

    This is a configuration/dialect mismatch, not a caller input error.

    Attributes:
        dialect: Name of the table the lookup ran against
        available: Symbols defined by that table
    """

    def __init__(
        self,
        symbol: str,
        *,
        dialect: Optional[str] = None,
        available: Optional[Iterable[str]] = None,
    ) -> None:
        available_list = sorted(available) if available is not None else []
        message = f"Opcode '{symbol}' is not defined"
        if dialect:
            message += f" in dialect '{dialect}'"

        super().__init__(
            message,
            symbol=symbol,
            context={"dialect": dialect} if dialect else None,
        )
        self.dialect = dialect
        self.available = available_list


# ==============================================================================
# TEXT ENCODING ERRORS
# ==============================================================================


class EncodingError(EscposError, UnicodeError):
    """
    Text cannot be represented in the target character set.

    Attributes:
        encoding: Codec name the text was encoded to
        position: Index of the first offending character, if known
    """

    def __init__(
        self,
        message: str,
        *,
        encoding: Optional[str] = None,
        position: Optional[int] = None,
    ) -> None:
        context: Dict[str, Any] = {}
        if encoding is not None:
            context["encoding"] = encoding
        if position is not None:
            context["position"] = position
        super().__init__(message, context=context)
        self.encoding = encoding
        self.position = position


# ==============================================================================
# CONFIGURATION ERRORS
# ==============================================================================


class ConfigurationError(EscposError):
    """Malformed configuration or opcode dialect file."""

    pass
