"""
proctree - In-Memory Process Table

A process table held in a dictionary. It mirrors how the kernel reacts to
the signals proctree sends, which makes it suitable for exercising the
tree algorithms without touching real processes.
"""

import signal
from collections.abc import Iterable, Iterator
from dataclasses import replace
from typing import Callable, Optional

from .procfs import ProcessRecord, ProcessTable

INIT_PID = 1

SignalHook = Callable[["MemoryProcessTable", int, signal.Signals], None]


class MemoryProcessTable(ProcessTable):
  """
  Process table backed by a pid -> ProcessRecord mapping.

  Signal semantics:
      SIGKILL/SIGTERM: the process exits; its live children are reparented
                       to init and its zombie children are reaped.
      SIGSTOP: state becomes 'T'.
      SIGCONT: a stopped process goes back to 'S'.
      Zombies accept any signal without effect.

  Every delivered signal is appended to `signals` as (pid, signal).
  """

  def __init__(
    self,
    records: Optional[Iterable[ProcessRecord]] = None,
    on_signal: Optional[SignalHook] = None,
  ) -> None:
    self._records: dict[int, ProcessRecord] = {}
    self.signals: list[tuple[int, signal.Signals]] = []
    self.on_signal = on_signal
    for record in records or []:
      self._records[record.pid] = record

  def __contains__(self, pid: object) -> bool:
    return pid in self._records

  def __len__(self) -> int:
    return len(self._records)

  def read(self, pid: int) -> Optional[ProcessRecord]:
    return self._records.get(pid)

  def pids(self) -> Iterator[int]:
    # Iterate over a copy, callers may signal (and so mutate) while scanning
    yield from list(self._records)

  def spawn(self, pid: int, ppid: int, state: str = "S", comm: str = "") -> ProcessRecord:
    """Add a process to the table."""
    record = ProcessRecord(pid=pid, ppid=ppid, state=state, comm=comm or f"proc{pid}")
    self._records[pid] = record
    return record

  def exit(self, pid: int) -> None:
    """Remove pid as if it had exited and been reaped."""
    if self._records.pop(pid, None) is None:
      return

    for child in list(self._records.values()):
      if child.ppid != pid:
        continue
      if child.is_zombie:
        # init reaps orphaned zombies straight away
        del self._records[child.pid]
      else:
        self._records[child.pid] = replace(child, ppid=INIT_PID)

  def send_signal(self, pid: int, sig: signal.Signals) -> None:
    record = self._records.get(pid)
    if record is None:
      raise ProcessLookupError(f"No such process: {pid}")

    self.signals.append((pid, sig))

    if not record.is_zombie:
      if sig in (signal.SIGKILL, signal.SIGTERM):
        self.exit(pid)
      elif sig == signal.SIGSTOP:
        self._records[pid] = replace(record, state="T")
      elif sig == signal.SIGCONT and record.state == "T":
        self._records[pid] = replace(record, state="S")

    if self.on_signal is not None:
      self.on_signal(self, pid, sig)

  def signals_to(self, pid: int) -> list[signal.Signals]:
    """Signals delivered to pid, in delivery order."""
    return [sig for target, sig in self.signals if target == pid]
