import os
from dataclasses import dataclass
from pathlib import Path

from ..core.ancestry import DEFAULT_MAX_DEPTH
from ..core.common_utils import CommonUtils, UtilsError
from .signal_manager import DEFAULT_DELAY, DEFAULT_RETRIES


class ConfigError(Exception):
  """Configuration related errors."""

  pass


@dataclass
class ProctreeConfig:
  """Common configuration settings."""

  proc_dir: str = "/proc"
  signal_retries: int = DEFAULT_RETRIES
  signal_delay: float = DEFAULT_DELAY
  max_depth: int = DEFAULT_MAX_DEPTH

  def __post_init__(self) -> None:
    """Initialize from environment variables after dataclass creation."""
    self.proc_dir = os.getenv("PROCTREE_PROC_DIR", self.proc_dir)
    self.signal_retries = self._parse_int("PROCTREE_SIGNAL_RETRIES", self.signal_retries)
    self.max_depth = self._parse_int("PROCTREE_MAX_DEPTH", self.max_depth)

    delay = os.getenv("PROCTREE_SIGNAL_DELAY", "").strip()
    if delay:
      try:
        self.signal_delay = CommonUtils.parse_duration(delay)
      except UtilsError as e:
        raise ConfigError(f"Invalid PROCTREE_SIGNAL_DELAY: {e}") from None

  @staticmethod
  def _parse_int(env_variable: str, default: int) -> int:
    val = os.getenv(env_variable, "").strip()
    if not val:
      return default
    try:
      parsed = int(val)
    except ValueError:
      raise ConfigError(f"{env_variable} must be an integer, got '{val}'") from None
    if parsed < 1:
      raise ConfigError(f"{env_variable} must be at least 1, got {parsed}")
    return parsed

  def get_proc_dir(self) -> Path:
    """
    Get the proc filesystem path.
    Returns:
        Path: proc directory path
    """
    return Path(self.proc_dir)
