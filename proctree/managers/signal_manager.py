"""
proctree - Subtree Signalling

Delivers a signal to every descendant of a root process. The process table
keeps changing while we work (children get spawned, orphans get reparented),
so delivery is repeated on fresh snapshots until a pass signals nothing or
the retry budget runs out.
"""

import signal
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..core.ancestry import AncestryResolver
from ..core.procfs import ProcessTable
from .log_manager import ProctreeLogger

DEFAULT_RETRIES = 10
DEFAULT_DELAY = 0.01


class SignalKind(Enum):
  """Signals proctree sends to a subtree."""

  TERMINATE = signal.SIGKILL
  STOP = signal.SIGSTOP
  CONTINUE = signal.SIGCONT

  @property
  def signal_name(self) -> str:
    return self.value.name


@dataclass
class SignalResult:
  """Outcome of delivering one signal to one process."""

  pid: int
  signal: signal.Signals
  delivered: bool
  error: Optional[str] = None


@dataclass
class SignalReport:
  """Outcome of a signal_descendants() run."""

  root: int
  kind: SignalKind
  iterations: int = 0
  converged: bool = False
  results: list[SignalResult] = field(default_factory=list)
  root_result: Optional[SignalResult] = None

  @property
  def delivered(self) -> list[SignalResult]:
    return [result for result in self.results if result.delivered]

  @property
  def failed(self) -> list[SignalResult]:
    return [result for result in self.results if not result.delivered]

  @property
  def signalled_pids(self) -> list[int]:
    """Distinct descendants that received the signal at least once."""
    seen: dict[int, None] = {}
    for result in self.delivered:
      seen.setdefault(result.pid, None)
    return list(seen)


class SignalManager:
  """Signal delivery for single processes and whole subtrees."""

  def __init__(
    self,
    log_manager: ProctreeLogger,
    table: ProcessTable,
    resolver: AncestryResolver,
    retries: int = DEFAULT_RETRIES,
    delay: float = DEFAULT_DELAY,
  ) -> None:
    self.logger = log_manager.get_logger(name="signal_manager", component="signals")
    self.table = table
    self.resolver = resolver
    self.retries = retries
    self.delay = delay

  def send(self, pid: int, sig: signal.Signals) -> SignalResult:
    """Deliver sig to pid, recording (not raising) delivery failures."""
    try:
      self.table.send_signal(pid, sig)
    except ProcessLookupError:
      self.logger.info(f"Process {pid} already gone, {sig.name} not delivered")
      return SignalResult(pid=pid, signal=sig, delivered=False, error="No such process")
    except OSError as e:
      self.logger.warning(f"Failed to send {sig.name} to {pid}: {e}")
      return SignalResult(pid=pid, signal=sig, delivered=False, error=e.strerror or str(e))

    self.logger.debug(f"Sent {sig.name} to {pid}")
    return SignalResult(pid=pid, signal=sig, delivered=True)

  def kill_process(self, pid: int) -> SignalResult:
    """Terminate a single process."""
    result = self.send(pid, SignalKind.TERMINATE.value)
    if result.delivered:
      self.logger.info(f"Process {pid} killed")
    return result

  def signal_descendants(self, root: int, kind: SignalKind) -> SignalReport:
    """
    Deliver kind to every descendant of root until the subtree is quiet.

    Each iteration takes a fresh snapshot and signals every current
    descendant. The loop ends after an iteration that delivered nothing or
    after `retries` iterations. On TERMINATE the root is signalled last.

    Args:
        root: Root of the subtree
        kind: Signal to deliver

    Returns:
        SignalReport: Per-process results of every iteration
    """
    sig = kind.value
    report = SignalReport(root=root, kind=kind)
    self.logger.info(f"Sending {sig.name} to descendants of {root}")

    while report.iterations < self.retries:
      report.iterations += 1
      delivered = 0
      for candidate in self.table.pids():
        if candidate == root or not self.resolver.is_descendant(root, candidate):
          continue
        result = self.send(candidate, sig)
        report.results.append(result)
        if result.delivered:
          delivered += 1

      self.logger.debug(f"Iteration {report.iterations}: {delivered} process(es) signalled")
      time.sleep(self.delay)

      if delivered == 0:
        report.converged = True
        break
    else:
      self.logger.warning(f"Subtree of {root} still changing after {self.retries} iterations, giving up")

    if kind is SignalKind.TERMINATE:
      report.root_result = self.send(root, sig)

    self.logger.info(
      f"{sig.name} delivered to {len(report.signalled_pids)} descendant(s) of {root} "
      f"in {report.iterations} iteration(s)"
    )
    return report
