"""
Tests for Logging Configuration

File handler setup, temporary level changes and exception logging.
"""

import logging
import logging.handlers

import pytest

from logging_config import (
    ColoredFormatter,
    LogContext,
    TRADE_ANALYSIS_MODULES,
    configure_module_logger,
    get_logger,
    log_exception,
    setup_development_logging,
    setup_logging,
    setup_preset,
    setup_production_logging,
    setup_testing_logging,
    setup_trade_analysis_logging,
)


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def isolated_root_logger():
    """Remove handlers installed by setup functions and restore levels"""
    root = logging.getLogger()
    original_level = root.level
    module_levels = {name: logging.getLogger(name).level for name in TRADE_ANALYSIS_MODULES}

    yield root

    for handler in list(root.handlers):
        if (isinstance(handler, logging.handlers.RotatingFileHandler)
                or isinstance(handler.formatter, ColoredFormatter)):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(original_level)
    for name, level in module_levels.items():
        logging.getLogger(name).setLevel(level)


# ============================================================================
# TESTS
# ============================================================================

class TestSetupLogging:
    """Root logger configuration"""

    def test_creates_log_files(self, isolated_root_logger, tmp_path):
        setup_logging(level="DEBUG", log_dir=str(tmp_path), enable_console=False)

        logging.getLogger("trade_analysis.test").error("boom")
        for handler in isolated_root_logger.handlers:
            handler.flush()

        assert {p.name for p in tmp_path.iterdir()} == {
            "trade_analysis.log", "trade_analysis_debug.log", "trade_analysis_error.log",
        }
        assert "boom" in (tmp_path / "trade_analysis_error.log").read_text(encoding="utf-8")

    def test_repeat_setup_does_not_duplicate_handlers(self, isolated_root_logger, tmp_path):
        setup_logging(log_dir=str(tmp_path), enable_console=True)
        setup_logging(log_dir=str(tmp_path), enable_console=True)

        assert len(isolated_root_logger.handlers) == 4

    def test_console_only(self, isolated_root_logger, tmp_path):
        setup_logging(level="warning", log_dir=str(tmp_path / "logs"), enable_file=False)

        assert isolated_root_logger.level == logging.WARNING
        assert not (tmp_path / "logs").exists()

    def test_invalid_level(self, isolated_root_logger):
        with pytest.raises(ValueError):
            setup_logging(level="LOUD", enable_file=False)

    def test_trade_analysis_modules(self, isolated_root_logger):
        setup_trade_analysis_logging(level="DEBUG")

        assert logging.getLogger("trade_analysis.trade_evaluator").level == logging.DEBUG


class TestHelpers:
    """Module loggers, contexts and formatters"""

    def test_log_context_restores_level(self):
        logger = logging.getLogger("trade_analysis.test_context")
        logger.setLevel(logging.WARNING)

        with LogContext(logger, "DEBUG") as active:
            assert active.level == logging.DEBUG

        assert logger.level == logging.WARNING

    def test_configure_module_logger(self):
        logger = configure_module_logger("trade_analysis.test_module", level="ERROR", propagate=False)

        assert logger.level == logging.ERROR
        assert logger.propagate is False
        logger.propagate = True

    def test_log_exception_includes_context(self, caplog):
        logger = logging.getLogger("trade_analysis.test_exception")

        with caplog.at_level(logging.WARNING, logger="trade_analysis.test_exception"):
            try:
                raise KeyError("missing")
            except KeyError as e:
                log_exception(logger, e, context={"team_id": 7}, level="WARNING")

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert "[team_id=7]" in record.getMessage()
        assert record.exc_info is not None

    def test_colored_formatter_leaves_record_intact(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)

        output = ColoredFormatter("%(levelname)s %(message)s").format(record)

        assert "\033[32m" in output
        assert record.levelname == "INFO"

    def test_log_context_by_name(self):
        logger = logging.getLogger("trade_analysis.test_named_context")
        logger.setLevel(logging.NOTSET)

        with LogContext("trade_analysis.test_named_context", "error"):
            assert logger.level == logging.ERROR

        assert logger.level == logging.NOTSET


class TestPresets:
    """Named logging presets"""

    def test_testing_preset_console_only(self, isolated_root_logger, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        setup_testing_logging()

        assert isolated_root_logger.level == logging.WARNING
        assert not (tmp_path / "logs").exists()

    def test_production_preset_writes_files(self, isolated_root_logger, tmp_path):
        setup_production_logging(log_dir=str(tmp_path))

        assert isolated_root_logger.level == logging.INFO
        assert (tmp_path / "trade_analysis.log").exists()
        assert not any(isinstance(h.formatter, ColoredFormatter)
                       for h in isolated_root_logger.handlers)

    def test_unknown_preset(self, isolated_root_logger):
        with pytest.raises(ValueError):
            setup_preset("verbose")

    def test_development_preset_debugs_engine(self, isolated_root_logger, tmp_path):
        setup_development_logging(log_dir=str(tmp_path))

        assert isolated_root_logger.level == logging.DEBUG
        assert (tmp_path / "trade_analysis_debug.log").exists()
        assert logging.getLogger("trade_analysis.service").level == logging.DEBUG

    def test_get_logger_is_module_logger(self):
        assert get_logger("trade_analysis.service") is logging.getLogger("trade_analysis.service")
