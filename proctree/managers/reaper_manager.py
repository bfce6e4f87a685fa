"""
proctree - Zombie Reaper

A zombie stays in the process table until its parent collects it. Killing
the parent hands the zombie over to init, which reaps it.
"""

from dataclasses import dataclass
from typing import Optional

from .log_manager import ProctreeLogger
from .query_manager import QueryManager
from .signal_manager import SignalKind, SignalManager, SignalResult


@dataclass
class ReapResult:
  """What was done for one zombie descendant."""

  zombie: int
  parent: int
  result: Optional[SignalResult] = None
  skipped: bool = False

  @property
  def killed(self) -> bool:
    return self.result is not None and self.result.delivered


class ReaperManager:
  """Kills the parents of zombie descendants."""

  def __init__(self, log_manager: ProctreeLogger, queries: QueryManager, signals: SignalManager) -> None:
    self.logger = log_manager.get_logger(name="reaper_manager", component="reaper")
    self.queries = queries
    self.signals = signals

  def kill_zombie_parents(self, root: int) -> list[ReapResult]:
    """
    Terminate the parent of every zombie below root.

    A parent with several zombie children is signalled once; the other
    zombies are reported with skipped=True. Zombies themselves are never
    signalled.

    Args:
        root: Root of the subtree to scan

    Returns:
        list[ReapResult]: One entry per zombie found
    """
    results: list[ReapResult] = []
    handled: set[int] = set()

    for zombie in self.queries.descendants(root, zombie_only=True):
      parent = self.queries.resolver.parent_of(zombie)
      if parent is None:
        # Already reaped between the scan and now
        continue

      if parent in handled:
        results.append(ReapResult(zombie=zombie, parent=parent, skipped=True))
        continue

      handled.add(parent)
      self.logger.info(f"Killing parent {parent} of defunct process {zombie}")
      result = self.signals.send(parent, SignalKind.TERMINATE.value)
      results.append(ReapResult(zombie=zombie, parent=parent, result=result))

    if not results:
      self.logger.info(f"No defunct descendants of {root}")
    return results
