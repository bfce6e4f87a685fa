"""
proctree - Class-Based Logging Configuration

Centralized logging configuration for proctree.
Provides file-based logging with rotation, formatting, and component identification.
"""

import logging
import logging.handlers
import os
import sys
from collections.abc import MutableMapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional


@dataclass
class ProctreeLoggerConfig:
  """Logger settings."""

  log_dir: str
  log_level: str
  log_file: str

  def __post_init__(self) -> None:
    """Initialize from environment variables after dataclass creation."""
    self.log_dir = os.getenv("PROCTREE_LOG_DIR", self.log_dir)
    self.log_level = os.getenv("PROCTREE_LOG_LEVEL", self.log_level)


class ComponentLoggerAdapter(logging.LoggerAdapter):
  """
  Logger adapter that adds component information to log records.

  This allows us to identify which part of the system generated each log message.
  """

  def __init__(self, logger: logging.Logger, component: str) -> None:
    """
    Initialize the adapter with a component name.

    Args:
        logger: The underlying logger instance
        component: Component identifier (e.g., 'procfs', 'signals', 'reaper')
    """
    super().__init__(logger, {"component": component})
    self.component = component

  def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
    """Process the log record to include component information."""
    if "extra" not in kwargs:
      kwargs["extra"] = {}
    kwargs["extra"]["component"] = self.component
    return msg, kwargs


class ProctreeLogger:
  """
  Centralized logging manager for proctree.

  Handles setup, configuration, and creation of component-aware loggers.
  """

  DEFAULT_LOG_DIR = "~/.local/state/proctree"
  DEFAULT_LOG_FILE = "proctree.log"
  DEFAULT_LOG_LEVEL = "INFO"
  DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
  DEFAULT_BACKUP_COUNT = 5

  LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(component)s] - [%(filename)s:%(lineno)d] - %(message)s"
  DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

  def __init__(
    self,
    log_file: Optional[str] = None,
    console_output: bool = False,
  ):
    """
    Initialize the logging manager.

    Args:
        log_file: File name for log files (default: proctree.log)
        console_output: Whether to also output to stderr
    """
    config = ProctreeLoggerConfig(
      log_dir=self.DEFAULT_LOG_DIR,
      log_level=self.DEFAULT_LOG_LEVEL,
      log_file=log_file or self.DEFAULT_LOG_FILE,
    )
    self.log_level = config.log_level.upper()
    self.log_dir = str(Path(config.log_dir).expanduser())
    self.log_file = config.log_file
    self.console_output = console_output
    self._base_logger: Optional[logging.Logger] = None
    self._logger_cache: dict[str, ComponentLoggerAdapter] = {}

    self._setup_logging()

  def _resolve_level(self, log_level: str) -> int:
    level = logging.getLevelName(log_level.upper())
    return level if isinstance(level, int) else logging.INFO

  def _setup_logging(self) -> None:
    """Set up the base logging configuration."""
    level = self._resolve_level(self.log_level)
    formatter = logging.Formatter(self.LOG_FORMAT, self.DATE_FORMAT)

    self._base_logger = logging.getLogger("proctree")
    self._base_logger.setLevel(level)

    # Clear existing handlers to avoid duplicates
    for handler in list(self._base_logger.handlers):
      self._base_logger.removeHandler(handler)
      handler.close()

    try:
      Path(self.log_dir).mkdir(parents=True, exist_ok=True, mode=0o755)

      file_handler = logging.handlers.RotatingFileHandler(
        self.log_file_path,
        maxBytes=self.DEFAULT_MAX_BYTES,
        backupCount=self.DEFAULT_BACKUP_COUNT,
        mode="a",
      )
      file_handler.setLevel(level)
      file_handler.setFormatter(formatter)
      self._base_logger.addHandler(file_handler)
    except OSError as e:
      print(f"Error setting up file logging: {e}", file=sys.stderr)
      # Fall back to console only
      self.console_output = True

    if self.console_output:
      console_handler = logging.StreamHandler(sys.stderr)
      console_handler.setLevel(level)
      console_handler.setFormatter(formatter)
      self._base_logger.addHandler(console_handler)

    # Prevent propagation to root logger
    self._base_logger.propagate = False

  def get_logger(self, name: Optional[str] = None, component: Optional[str] = None) -> ComponentLoggerAdapter:
    """
    Get a logger instance with the specified name and component.

    Args:
        name: Logger name (will be prefixed with proctree if not already)
        component: Component identifier (default: 'system')

    Returns:
        ComponentLoggerAdapter instance
    """
    if not name:
      name = "proctree"
    if not component:
      component = "system"

    cache_key = f"{name}:{component}"
    if cache_key in self._logger_cache:
      return self._logger_cache[cache_key]

    logger_name = name if name == "proctree" or name.startswith("proctree.") else f"proctree.{name}"
    component_logger = ComponentLoggerAdapter(logging.getLogger(logger_name), component)

    self._logger_cache[cache_key] = component_logger
    return component_logger

  def set_log_level(self, log_level: str) -> None:
    """
    Change the log level for all handlers.

    Args:
        log_level: New log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    level = self._resolve_level(log_level)

    if self._base_logger:
      self._base_logger.setLevel(level)
      for handler in self._base_logger.handlers:
        handler.setLevel(level)

    self.log_level = logging.getLevelName(level)

  def add_console_output(self) -> None:
    """Add stderr output to the logger if not already present."""
    if not self.console_output and self._base_logger:
      console_handler = logging.StreamHandler(sys.stderr)
      console_handler.setFormatter(logging.Formatter(self.LOG_FORMAT, self.DATE_FORMAT))
      console_handler.setLevel(self._base_logger.level)
      self._base_logger.addHandler(console_handler)
      self.console_output = True

  @property
  def log_file_path(self) -> Path:
    """Get the current log file path."""
    return Path(self.log_dir) / self.log_file

  @property
  def is_debug_enabled(self) -> bool:
    """Check if debug logging is enabled."""
    return self._base_logger is not None and self._base_logger.level <= logging.DEBUG
