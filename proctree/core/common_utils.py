import re


class UtilsError(Exception):
  """Value parsing related errors."""

  pass


class CommonUtils:
  """
  Utility class for parsing configuration values.

  Provides methods to parse durations and pids with error handling.
  """

  _MULTIPLIERS = {"": 1.0, "ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}

  @staticmethod
  def parse_duration(duration_str: str) -> float:
    """
    Parse duration string to seconds.

    Args:
        duration_str: Duration string like "10ms", "5m", "1h", "30s" or "0.5"

    Returns:
        float: Duration in seconds

    Raises:
        UtilsError: If duration format is invalid
    """
    if not duration_str or not isinstance(duration_str, str):
      raise UtilsError(f"Invalid duration format: {duration_str}")

    duration_str = duration_str.strip().lower()
    match = re.match(r"^(\d+(?:\.\d+)?)(ms|s|m|h)?$", duration_str)

    if not match:
      raise UtilsError(f"Invalid duration format: {duration_str}")

    number, unit = match.groups()
    return float(number) * CommonUtils._MULTIPLIERS[unit or ""]

  @staticmethod
  def parse_pid(value: str) -> int:
    """Parse a positive process id."""
    try:
      pid = int(str(value).strip())
    except ValueError:
      raise UtilsError(f"Invalid pid: {value!r}") from None
    if pid <= 0:
      raise UtilsError(f"Pid must be positive: {pid}")
    return pid
