"""
Logging Configuration for the Trade Analysis Engine

Engine modules only create module loggers (logging.getLogger(__name__)) and never
install handlers. Whatever embeds the engine (the CLI script, HTTP glue, tests)
configures logging once at startup through this module.

Usage Example:
    from logging_config import setup_logging, get_logger

    setup_logging(level="INFO", log_dir="logs")
    logger = get_logger(__name__)

Log files (each rotates at 10MB, 5 backups):
- logs/trade_analysis.log          INFO and above
- logs/trade_analysis_debug.log    DEBUG and above, includes evaluation state transitions
- logs/trade_analysis_error.log    ERROR and above
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union


# Log format templates
DETAILED_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "[%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"
)

SIMPLE_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

CONSOLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_PREFIX = "trade_analysis"

# Log file suffix → minimum level written to it
LOG_FILE_LEVELS: Dict[str, int] = {
    "": logging.INFO,
    "_debug": logging.DEBUG,
    "_error": logging.ERROR,
}

# Engine loggers tuned by setup_trade_analysis_logging
TRADE_ANALYSIS_MODULES = (
    "trade_analysis",
    "trade_analysis.trade_evaluator",
    "trade_analysis.sliding_scale_adjuster",
    "trade_analysis.suggestion_finder",
    "trade_analysis.service",
)

# Named setup_logging() argument sets
LOGGING_PRESETS: Dict[str, Dict[str, Any]] = {
    "production": {"level": "INFO", "enable_console": False, "enable_file": True,
                   "format_style": "simple"},
    "development": {"level": "DEBUG", "enable_console": True, "enable_file": True,
                    "format_style": "detailed"},
    "testing": {"level": "WARNING", "enable_console": True, "enable_file": False,
                "format_style": "simple"},
}


class ColoredFormatter(logging.Formatter):
    """Console formatter that wraps the level name in an ANSI color."""

    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',      # cyan
        logging.INFO: '\033[32m',       # green
        logging.WARNING: '\033[33m',    # yellow
        logging.ERROR: '\033[31m',      # red
        logging.CRITICAL: '\033[35m',   # magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)

        # Other handlers share the record, so put the plain name back afterwards
        plain = record.levelname
        record.levelname = f"{color}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


def _level(level: Union[str, int]) -> int:
    """Resolve a level name ("debug", "INFO") or number to its logging constant."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def _rotating_handler(
    log_dir: Path,
    suffix: str,
    level: int,
    log_format: str,
    max_bytes: int,
    backup_count: int
) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=str(log_dir / f"{LOG_FILE_PREFIX}{suffix}.log"),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(log_format, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: str = "INFO",
    log_dir: str = "logs",
    enable_console: bool = True,
    enable_file: bool = True,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    format_style: str = "detailed"
) -> None:
    """
    Configure the root logger for an application embedding the engine.

    Handlers already on the root logger are removed and closed first, so a
    second call replaces the configuration instead of duplicating output.

    Args:
        level: Root level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for the rotating log files (created if missing)
        enable_console: Add a colored stderr handler
        enable_file: Add the main, debug and error rotating files
        max_bytes: Rotation size per file
        backup_count: Rotated files kept per log
        format_style: "detailed" or "simple" layout for the main log file

    Raises:
        ValueError: If level is not a known log level
    """
    root_level = _level(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    if enable_console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(root_level)
        console_handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(console_handler)

    if enable_file:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        main_format = DETAILED_FORMAT if format_style == "detailed" else SIMPLE_FORMAT

        for suffix, file_level in LOG_FILE_LEVELS.items():
            # Debug and error logs always carry file/line detail
            log_format = main_format if suffix == "" else DETAILED_FORMAT
            root_logger.addHandler(_rotating_handler(
                directory, suffix, file_level, log_format, max_bytes, backup_count
            ))

    root_logger.info(
        f"Logging initialized - Level: {level}, "
        f"Console: {enable_console}, File: {enable_file}"
    )


def get_logger(name: str) -> logging.Logger:
    """Module logger, for callers that prefer not to import logging directly."""
    return logging.getLogger(name)


def _format_context(context: Optional[Mapping[str, Any]]) -> str:
    if not context:
        return ""
    pairs = ", ".join(f"{key}={value}" for key, value in context.items())
    return f" [{pairs}]"


def log_exception(
    logger: logging.Logger,
    exception: BaseException,
    context: Optional[Mapping[str, Any]] = None,
    level: str = "ERROR"
) -> None:
    """
    Log an exception with its traceback and request context.

    Call it from inside the except block so the active traceback is attached.
    The service boundary logs structural trade errors at WARNING with the
    evaluation state they stopped at:

        >>> try:
        ...     evaluator.evaluate(proposal, roster, other_roster)
        ... except TradeEvaluationError as e:
        ...     log_exception(logger, e, context={"team_id": 1, "state": e.state},
        ...                   level="WARNING")
        ...     raise
    """
    logger.log(
        _level(level),
        f"Exception occurred{_format_context(context)}: "
        f"{type(exception).__name__}: {exception}",
        exc_info=True
    )


def configure_module_logger(
    module_name: str,
    level: Optional[str] = None,
    propagate: bool = True
) -> logging.Logger:
    """
    Set the level and propagation of one named logger.

    Args:
        module_name: Logger name, e.g. "trade_analysis.trade_evaluator"
        level: Level name, or None to inherit from the parent logger
        propagate: Pass records on to parent handlers
    """
    logger = logging.getLogger(module_name)
    if level:
        logger.setLevel(_level(level))
    logger.propagate = propagate
    return logger


class LogContext:
    """
    Temporarily change a logger's level.

    Accepts a Logger or a logger name:

        >>> with LogContext("trade_analysis.trade_evaluator", "DEBUG"):
        ...     evaluator.evaluate(proposal, roster, other_roster)
    """

    def __init__(self, logger: Union[logging.Logger, str], level: str):
        self.logger = logging.getLogger(logger) if isinstance(logger, str) else logger
        self.new_level = _level(level)
        self.original_level = self.logger.level

    def __enter__(self) -> logging.Logger:
        self.logger.setLevel(self.new_level)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.setLevel(self.original_level)


def setup_trade_analysis_logging(level: str = "INFO") -> None:
    """
    Set the level of every engine logger.

    DEBUG shows each evaluation state transition and sliding scale adjustment;
    INFO shows one summary line per evaluation and suggestion search.
    """
    for module_name in TRADE_ANALYSIS_MODULES:
        configure_module_logger(module_name, level=level)


def setup_preset(name: str, log_dir: str = "logs") -> None:
    """
    Apply one of LOGGING_PRESETS.

    Raises:
        ValueError: If the preset name is unknown
    """
    if name not in LOGGING_PRESETS:
        raise ValueError(f"Unknown logging preset {name!r}, expected one of {sorted(LOGGING_PRESETS)}")

    options = dict(LOGGING_PRESETS[name])
    if options["enable_file"]:
        options["log_dir"] = log_dir
    setup_logging(**options)

    if name == "development":
        setup_trade_analysis_logging(level="DEBUG")


def setup_production_logging(log_dir: str = "logs") -> None:
    """INFO to files only, simple format."""
    setup_preset("production", log_dir)


def setup_development_logging(log_dir: str = "logs") -> None:
    """DEBUG to colored console and files, engine loggers at DEBUG."""
    setup_preset("development", log_dir)


def setup_testing_logging() -> None:
    """WARNING to the console, no files."""
    setup_preset("testing")
