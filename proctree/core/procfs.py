"""
proctree - Process Table Access

Reads per-process metadata from a /proc style filesystem, enumerates the
currently visible pids and delivers signals.

Every observation is a best-effort snapshot of state owned by the kernel:
a process listed by pids() may already be gone when read() is called.
"""

import os
import signal
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..managers.log_manager import ProctreeLogger

ZOMBIE_STATE = "Z"


class ProcStatError(Exception):
  """Malformed /proc/<pid>/stat record."""

  pass


@dataclass(frozen=True)
class ProcessRecord:
  """
  One observation of a process.

  Attributes:
      pid: Process identifier
      ppid: Parent process identifier (0 for pid 1 and kernel threads)
      state: One character run-state code ('R', 'S', 'T', 'Z', ...)
      comm: Executable name as reported by the kernel
  """

  pid: int
  ppid: int
  state: str
  comm: str = ""

  @property
  def is_zombie(self) -> bool:
    return self.state == ZOMBIE_STATE


def parse_stat_line(line: str) -> ProcessRecord:
  """
  Parse the content of /proc/<pid>/stat.

  Format is: pid (comm) state ppid ...
  comm may contain spaces and parentheses, so it spans from the first '('
  to the LAST ')'; state and ppid are the first two fields after it.

  Raises:
      ProcStatError: If the record does not follow the expected layout
  """
  open_paren = line.find("(")
  close_paren = line.rfind(")")
  if open_paren == -1 or close_paren < open_paren:
    raise ProcStatError(f"Missing comm field in stat record: {line[:64]!r}")

  fields = line[close_paren + 1 :].split()
  if len(fields) < 2:
    raise ProcStatError(f"Truncated stat record: {line[:64]!r}")

  state = fields[0]
  if len(state) != 1:
    raise ProcStatError(f"Invalid state field {state!r}")

  try:
    pid = int(line[:open_paren].strip())
    ppid = int(fields[1])
  except ValueError:
    raise ProcStatError(f"Invalid pid/ppid in stat record: {line[:64]!r}") from None

  return ProcessRecord(pid=pid, ppid=ppid, state=state, comm=line[open_paren + 1 : close_paren])


class ProcessTable(ABC):
  """
  Abstract view of the system process table.

  Implementations must treat a vanished process as "not found" rather than
  an error: read() returns None and send_signal() raises ProcessLookupError.
  """

  @abstractmethod
  def read(self, pid: int) -> Optional[ProcessRecord]:
    """Return the current record for pid, or None if it does not exist."""
    raise NotImplementedError("This method should be implemented in subclasses to read a process.")

  @abstractmethod
  def pids(self) -> Iterator[int]:
    """Lazily yield every currently visible pid, in no particular order."""
    raise NotImplementedError("This method should be implemented in subclasses to list processes.")

  @abstractmethod
  def send_signal(self, pid: int, sig: signal.Signals) -> None:
    """
    Deliver sig to pid.

    Raises:
        ProcessLookupError: If the process does not exist
        PermissionError: If the caller may not signal the process
    """
    raise NotImplementedError("This method should be implemented in subclasses to deliver signals.")


class ProcfsTable(ProcessTable):
  """Process table backed by the kernel /proc filesystem and os.kill()."""

  def __init__(self, log_manager: ProctreeLogger, proc_dir: Union[str, Path] = "/proc") -> None:
    self.logger = log_manager.get_logger(name="procfs", component="procfs")
    self.proc_dir = Path(proc_dir)

  def read(self, pid: int) -> Optional[ProcessRecord]:
    stat_path = self.proc_dir / str(pid) / "stat"
    try:
      with open(stat_path, encoding="utf-8", errors="replace") as f:
        content = f.read()
    except (FileNotFoundError, ProcessLookupError, NotADirectoryError):
      # The process exited before we could read it
      return None
    except PermissionError as e:
      self.logger.debug(f"Cannot read {stat_path}: {e}")
      return None

    try:
      return parse_stat_line(content)
    except ProcStatError as e:
      self.logger.warning(f"Ignoring pid {pid}: {e}")
      return None

  def pids(self) -> Iterator[int]:
    try:
      entries = os.scandir(self.proc_dir)
    except OSError as e:
      self.logger.error(f"Cannot list {self.proc_dir}: {e}")
      return

    with entries:
      for entry in entries:
        if entry.name.isdigit():
          yield int(entry.name)

  def send_signal(self, pid: int, sig: signal.Signals) -> None:
    os.kill(pid, sig)
