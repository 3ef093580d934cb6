"""
Unit tests for escpos_encoder/__init__.py
Covers package metadata, configuration loading, logging setup and the public API.
"""

import json
import logging
import logging.handlers
import os
import re
import tempfile
from importlib import reload
from pathlib import Path
from typing import Iterator
from unittest import mock

import pytest

import escpos_encoder


@pytest.fixture
def fresh_root_logger() -> Iterator[logging.Logger]:
    """Detach the package's own handlers for a reload, then restore them."""
    root_logger = logging.getLogger("escpos_encoder")
    saved_handlers = [h for h in root_logger.handlers if escpos_encoder._is_package_handler(h)]
    saved_level = root_logger.level
    for handler in saved_handlers:
        root_logger.removeHandler(handler)

    yield root_logger

    for handler in root_logger.handlers[:]:
        if escpos_encoder._is_package_handler(handler) and handler not in saved_handlers:
            root_logger.removeHandler(handler)
            handler.close()
    for handler in saved_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(saved_level)


class TestVersionMetadata:
    """Version metadata and constants."""

    def test_version_format(self) -> None:
        assert re.match(r"^\d+\.\d+\.\d+$", escpos_encoder.__version__)

    def test_version_components(self) -> None:
        expected_version = (
            f"{escpos_encoder.VERSION_MAJOR}."
            f"{escpos_encoder.VERSION_MINOR}."
            f"{escpos_encoder.VERSION_PATCH}"
        )
        assert escpos_encoder.__version__ == expected_version

    def test_metadata_attributes(self) -> None:
        for attr in ("__author__", "__description__", "__license__", "__python_requires__"):
            value = getattr(escpos_encoder, attr)
            assert isinstance(value, str) and value, f"{attr} must be a non-empty string"


class TestPublicAPI:
    """Names exported by the package."""

    def test_all_exports_exist(self) -> None:
        for name in escpos_encoder.__all__:
            assert hasattr(escpos_encoder, name), f"'{name}' from __all__ is missing"

    def test_no_duplicate_exports(self) -> None:
        assert len(escpos_encoder.__all__) == len(set(escpos_encoder.__all__))

    @pytest.mark.parametrize(
        "name",
        ["get_logger", "load_config", "load_opcodes", "CommandBuffer", "OpcodeTable", "EscposError"],
    )
    def test_core_names_exported(self, name: str) -> None:
        assert name in escpos_encoder.__all__

    def test_top_level_end_to_end(self) -> None:
        from escpos_encoder.commands import bold, center

        buf = escpos_encoder.CommandBuffer()
        buf << center(bold("ACME"))
        buf.cut()
        assert buf.to_escpos() == (
            b"\x1b@" + b"\x1ba\x01" + b"\x1bE\x01ACME\x1b!\x00" + b"\x1ba\x00" + b"\x1dV\x00"
        )


class TestLogging:
    """Package logging setup."""

    def test_get_logger_name_format(self) -> None:
        logger = escpos_encoder.get_logger("test_module")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "escpos_encoder.test_module"

    def test_get_logger_with_qualified_name(self) -> None:
        assert escpos_encoder.get_logger("escpos_encoder.opcodes").name == "escpos_encoder.opcodes"

    def test_get_logger_with_main(self) -> None:
        assert escpos_encoder.get_logger("__main__").name == "escpos_encoder.main"

    def test_get_logger_with_dots(self) -> None:
        logger = escpos_encoder.get_logger("commands.barcode")
        assert logger.name == "escpos_encoder.commands.barcode"

    def test_logger_is_configured(self) -> None:
        root_logger = logging.getLogger("escpos_encoder")
        assert len(root_logger.handlers) >= 1
        assert root_logger.propagate is False

    def test_log_level_from_environment(self, fresh_root_logger: logging.Logger) -> None:
        with mock.patch.dict("os.environ", {"ESCPOS_LOG_LEVEL": "DEBUG"}):
            reload(escpos_encoder)
        assert fresh_root_logger.level == logging.DEBUG

    def test_unknown_log_level_falls_back_to_info(self, fresh_root_logger: logging.Logger) -> None:
        with mock.patch.dict("os.environ", {"ESCPOS_LOG_LEVEL": "CHATTY"}):
            reload(escpos_encoder)
        assert fresh_root_logger.level == logging.INFO

    def test_log_dir_adds_file_handler(
        self, fresh_root_logger: logging.Logger, tmp_path: Path
    ) -> None:
        log_dir = tmp_path / "logs"
        with mock.patch.dict("os.environ", {"ESCPOS_LOG_DIR": str(log_dir)}):
            reload(escpos_encoder)

        file_handlers = [
            h
            for h in fresh_root_logger.handlers
            if isinstance(h, logging.handlers.RotatingFileHandler)
        ]
        assert len(file_handlers) == 1
        assert log_dir.is_dir()

    def test_foreign_handler_does_not_block_setup(
        self, fresh_root_logger: logging.Logger
    ) -> None:
        foreign = logging.NullHandler()
        fresh_root_logger.addHandler(foreign)
        try:
            with mock.patch.dict("os.environ", {"ESCPOS_LOG_LEVEL": "ERROR"}):
                reload(escpos_encoder)

            names = [h.get_name() for h in fresh_root_logger.handlers]
            assert "escpos_encoder.console" in names
            assert fresh_root_logger.level == logging.ERROR
        finally:
            fresh_root_logger.removeHandler(foreign)

    def test_setup_is_idempotent(self) -> None:
        root_logger = logging.getLogger("escpos_encoder")
        before = len(root_logger.handlers)
        escpos_encoder._setup_logging()
        assert len(root_logger.handlers) == before


class TestConfiguration:
    """load_config() behaviour."""

    def test_load_config_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = escpos_encoder.load_config(Path(tmpdir) / "nonexistent_config.json")

        assert config == {
            "default_codepage": "pc437",
            "text_encoding": "cp437",
            "encoding_policy": "strict",
            "opcode_dialect": None,
            "log_level": "INFO",
        }

    def test_defaults_not_shared(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = escpos_encoder.load_config(Path(tmpdir) / "missing.json")
            config["text_encoding"] = "cp866"
            again = escpos_encoder.load_config(Path(tmpdir) / "missing.json")
        assert again["text_encoding"] == "cp437"

    def test_load_config_from_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "test_config.json"
            with open(config_path, "w", encoding="utf-8") as f:
                json.dump({"default_codepage": "pc866", "custom_key": "custom_value"}, f)

            config = escpos_encoder.load_config(config_path)

        assert config["default_codepage"] == "pc866"
        assert config["custom_key"] == "custom_value"
        assert config["text_encoding"] == "cp437"

    def test_load_config_invalid_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "invalid_config.json"
            config_path.write_text("{invalid json content", encoding="utf-8")

            config = escpos_encoder.load_config(config_path)

        assert config["encoding_policy"] == "strict"

    def test_load_config_non_dict_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "list_config.json"
            with open(config_path, "w", encoding="utf-8") as f:
                json.dump(["not", "a", "dict"], f)

            config = escpos_encoder.load_config(config_path)

        assert config["default_codepage"] == "pc437"

    def test_config_feeds_buffer(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "cyrillic.json"
            with open(config_path, "w", encoding="utf-8") as f:
                json.dump({"default_codepage": "pc866", "text_encoding": "cp866"}, f)

            buf = escpos_encoder.CommandBuffer.from_config(escpos_encoder.load_config(config_path))

        buf.write("Чек")
        assert buf.to_escpos() == b"\x1b@\x1bt\x11" + "Чек".encode("cp866")


class TestConfigLogLevel:
    """log_level from the configuration file."""

    def _write(self, tmp_path: Path, level: str) -> Path:
        config_path = tmp_path / "logging.json"
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump({"log_level": level}, f)
        return config_path

    def test_applied_to_package_logger(
        self, fresh_root_logger: logging.Logger, tmp_path: Path
    ) -> None:
        fresh_root_logger.setLevel(logging.INFO)
        with mock.patch.dict("os.environ"):
            os.environ.pop("ESCPOS_LOG_LEVEL", None)
            escpos_encoder.load_config(self._write(tmp_path, "debug"))
        assert fresh_root_logger.level == logging.DEBUG

    def test_environment_wins(self, fresh_root_logger: logging.Logger, tmp_path: Path) -> None:
        fresh_root_logger.setLevel(logging.WARNING)
        with mock.patch.dict("os.environ", {"ESCPOS_LOG_LEVEL": "WARNING"}):
            escpos_encoder.load_config(self._write(tmp_path, "DEBUG"))
        assert fresh_root_logger.level == logging.WARNING

    def test_unknown_level_ignored(
        self, fresh_root_logger: logging.Logger, tmp_path: Path
    ) -> None:
        fresh_root_logger.setLevel(logging.INFO)
        with mock.patch.dict("os.environ"):
            os.environ.pop("ESCPOS_LOG_LEVEL", None)
            config = escpos_encoder.load_config(self._write(tmp_path, "CHATTY"))
        assert fresh_root_logger.level == logging.INFO
        assert config["log_level"] == "CHATTY"

    def test_default_file_leaves_level_alone(
        self, fresh_root_logger: logging.Logger, tmp_path: Path
    ) -> None:
        fresh_root_logger.setLevel(logging.ERROR)
        escpos_encoder.load_config(tmp_path / "missing.json")
        assert fresh_root_logger.level == logging.ERROR


class TestDocumentation:
    def test_module_has_docstring(self) -> None:
        assert escpos_encoder.__doc__ is not None
        assert len(escpos_encoder.__doc__) > 100

    def test_get_logger_has_docstring(self) -> None:
        doc = escpos_encoder.get_logger.__doc__
        assert doc is not None
        assert "Args:" in doc and "Returns:" in doc and "Example:" in doc


# Run with: pytest tests/unit/test_init.py -v --cov=escpos_encoder --cov-report=term-missing
