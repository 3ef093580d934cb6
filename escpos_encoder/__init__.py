"""
ESC/POS Command Encoder
=======================

Byte-exact ESC/POS command generation for thermal receipt printers.

This package provides:
    - Text styles (bold, underline, double size, inverted)
    - Justification and two-color printing
    - Code page selection and host-side text re-encoding
    - Barcode commands (UPC, EAN, CODE39, ITF, CODABAR)
    - Full and partial paper cut
    - Swappable opcode tables for printer dialects
    - An accumulating command buffer

It never opens a connection to a printer; every function returns ``bytes``
for the caller to send over whatever transport it uses.

Basic usage:
    >>> from escpos_encoder import CommandBuffer, get_logger
    >>> from escpos_encoder.commands import bold, center, barcode
    >>>
    >>> logger = get_logger(__name__)
    >>> buf = CommandBuffer()
    >>> buf << center(bold("ACME STORE")) << "\\n"
    >>> buf << barcode("4006381333931", height=80)
    >>> buf.cut()
    >>> logger.info(f"Generated {len(buf)} bytes of ESC/POS commands")

Configuration management:
    >>> import os
    >>> os.environ['ESCPOS_LOG_LEVEL'] = 'DEBUG'
    >>>
    >>> from escpos_encoder import load_config, CommandBuffer
    >>>
    >>> config = load_config()
    >>> buf = CommandBuffer.from_config(config)

License: MIT
Python: 3.9+
"""

import json
import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# =============================================================================
# VERSION METADATA
# =============================================================================

__version__ = "0.1.0"
__author__ = "ESC/POS Encoder Development Team"
__description__ = "Byte-exact ESC/POS command encoder for thermal receipt printers"
__license__ = "MIT"
__python_requires__ = ">=3.9"

VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0

if sys.version_info < (3, 9):
    raise RuntimeError(
        f"escpos_encoder requires Python 3.9 or newer. "
        f"Current version: {sys.version_info.major}."
        f"{sys.version_info.minor}.{sys.version_info.micro}"
    )

# =============================================================================
# LOGGING
# =============================================================================

_ROOT_LOGGER_NAME = "escpos_encoder"

_LOG_LEVELS: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _is_package_handler(handler: logging.Handler) -> bool:
    name = handler.get_name()
    return bool(name) and name.startswith(f"{_ROOT_LOGGER_NAME}.")


def _setup_logging() -> None:
    """
    Initialize package-wide logging.

    Configures the package logger with:
    - A console handler (stderr) for WARNING and above
    - A rotating file handler, only when ESCPOS_LOG_DIR is set
    - Format: [timestamp] LEVEL [module.function:line] message

    The level comes from the ESCPOS_LOG_LEVEL environment variable
    (DEBUG, INFO, WARNING, ERROR, CRITICAL; default INFO).

    Idempotent: does nothing if the package logger already carries its own
    handlers. Handlers attached by other code (test harnesses, applications)
    are left alone and do not count.
    """
    log_level_str = os.environ.get("ESCPOS_LOG_LEVEL", "INFO").upper()
    log_level = _LOG_LEVELS.get(log_level_str, logging.INFO)

    root_logger = logging.getLogger(_ROOT_LOGGER_NAME)
    if any(_is_package_handler(h) for h in root_logger.handlers):
        return

    root_logger.setLevel(log_level)

    formatter = logging.Formatter(
        fmt=("[%(asctime)s] %(levelname)-8s " "[%(name)s.%(funcName)s:%(lineno)d] %(message)s"),
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(formatter)
    console_handler.set_name(f"{_ROOT_LOGGER_NAME}.console")
    root_logger.addHandler(console_handler)

    log_dir_str = os.environ.get("ESCPOS_LOG_DIR")
    if log_dir_str:
        try:
            log_dir = Path(log_dir_str)
            log_dir.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                filename=log_dir / "escpos_encoder.log",
                maxBytes=10 * 1024 * 1024,  # 10 MB
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            file_handler.set_name(f"{_ROOT_LOGGER_NAME}.file")
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.warning(
                f"Could not initialize file logging in {log_dir_str}: {e}. "
                f"Logging to console only."
            )

    root_logger.propagate = False


def get_logger(module_name: str) -> logging.Logger:
    """
    Return a logger in the escpos_encoder namespace.

    Args:
        module_name: Name of the requesting module, usually ``__name__``.

    Returns:
        A logging.Logger named 'escpos_encoder.<module_name>'.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Receipt generated")
        >>> get_logger("__main__").name
        'escpos_encoder.main'
    """
    if not module_name.startswith(_ROOT_LOGGER_NAME):
        if module_name == "__main__":
            full_name = f"{_ROOT_LOGGER_NAME}.main"
        else:
            clean_name = module_name.lstrip(".")
            full_name = f"{_ROOT_LOGGER_NAME}.{clean_name}"
    else:
        full_name = module_name

    return logging.getLogger(full_name)


_setup_logging()

# =============================================================================
# CONFIGURATION
# =============================================================================

_DEFAULT_CONFIG: Dict[str, Any] = {
    "default_codepage": "pc437",
    "text_encoding": "cp437",
    "encoding_policy": "strict",
    "opcode_dialect": None,
    "log_level": "INFO",
}


def _apply_log_level(level_name: Any) -> None:
    """Set the package logger level from a configuration value."""
    root_logger = logging.getLogger(_ROOT_LOGGER_NAME)
    level = _LOG_LEVELS.get(str(level_name).upper())
    if level is None:
        root_logger.warning(f"Unknown log_level {level_name!r} in configuration, ignored")
        return
    root_logger.setLevel(level)


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load encoder configuration from a JSON file, or use the defaults.

    Configuration keys:
        - default_codepage: str - Printer code page name (e.g. "pc866")
        - text_encoding: str - Python codec for text written to a buffer
        - encoding_policy: str - "strict", "replace" or "ignore"
        - opcode_dialect: str | None - Path to a dialect JSON file
        - log_level: str - Package logging level, applied when the file sets
          it and ESCPOS_LOG_LEVEL is not set (the environment wins)

    Args:
        config_path: Optional path to the configuration file.
                     Defaults to 'escpos_config.json' in the current directory.

    Returns:
        Dictionary with every default key, user values taking precedence.
        Invalid or unreadable files log a warning and yield the defaults.

    Example:
        >>> config = load_config()
        >>> config['text_encoding']
        'cp437'
        >>> custom = load_config(Path("/etc/escpos/tm-t20.json"))
    """
    logger = get_logger(__name__)

    if config_path is None:
        config_path = Path("escpos_config.json")

    config = _DEFAULT_CONFIG.copy()

    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                user_config = json.load(f)

            if not isinstance(user_config, dict):
                raise ValueError(
                    f"Configuration file must contain a JSON object, "
                    f"got {type(user_config).__name__}"
                )

            config.update(user_config)

            logger.info(f"Configuration loaded from {config_path}")
            if "log_level" in user_config and "ESCPOS_LOG_LEVEL" not in os.environ:
                _apply_log_level(user_config["log_level"])
            logger.debug(f"Configuration: {config}")

        except json.JSONDecodeError as e:
            logger.warning(
                f"Could not parse {config_path}: invalid JSON "
                f"at line {e.lineno}, column {e.colno}. "
                f"Using default configuration."
            )
        except OSError as e:
            logger.warning(f"Could not read {config_path}: {e}. Using default configuration.")
        except ValueError as e:
            logger.warning(f"Invalid configuration format: {e}. Using default configuration.")
    else:
        logger.info(f"Configuration file {config_path} not found. Using default configuration.")

    return config


# =============================================================================
# PUBLIC API
# =============================================================================

from escpos_encoder.buffer import CommandBuffer, load_opcodes  # noqa: E402
from escpos_encoder.exceptions import (  # noqa: E402
    ConfigurationError,
    EncodingError,
    EscposError,
    InvalidArgumentError,
    InvalidArgumentTypeError,
    UnknownOpcodeError,
)
from escpos_encoder.opcodes import DEFAULT_OPCODES, OpcodeTable, get_default_table  # noqa: E402

__all__ = [
    "__version__",
    "__author__",
    "get_logger",
    "load_config",
    "load_opcodes",
    "CommandBuffer",
    "OpcodeTable",
    "DEFAULT_OPCODES",
    "get_default_table",
    "EscposError",
    "InvalidArgumentError",
    "InvalidArgumentTypeError",
    "UnknownOpcodeError",
    "EncodingError",
    "ConfigurationError",
]
