"""
proctree - Ancestry Resolution

Decides whether one process descends from another by following parent links
upward through the process table.
"""

from typing import Optional

from ..managers.log_manager import ProctreeLogger
from .procfs import ProcessTable

INIT_PID = 1
DEFAULT_MAX_DEPTH = 4096


class AncestryResolver:
  """Walks parent links of a ProcessTable."""

  def __init__(self, log_manager: ProctreeLogger, table: ProcessTable, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
    self.logger = log_manager.get_logger(name="ancestry", component="ancestry")
    self.table = table
    self.max_depth = max_depth

  def parent_of(self, pid: int) -> Optional[int]:
    """Return the ppid of pid, or None if the process does not exist."""
    record = self.table.read(pid)
    return record.ppid if record is not None else None

  def is_descendant(self, root: int, pid: int) -> bool:
    """
    Check whether pid lies in the subtree rooted at root.

    The walk stops with False when a record disappears mid-walk, when init
    (or the kernel's pid 0) is reached without meeting root, or when the
    parent chain repeats itself or exceeds max_depth.

    Args:
        root: Root of the subtree
        pid: Candidate process

    Returns:
        bool: True if root is a proper ancestor of pid
    """
    if pid == root:
      return False

    visited = {pid}
    current = pid
    for _ in range(self.max_depth):
      record = self.table.read(current)
      if record is None:
        return False

      ppid = record.ppid
      if ppid == root:
        return True
      if ppid <= INIT_PID:
        return False
      if ppid in visited:
        self.logger.warning(f"Parent cycle detected at pid {ppid} while resolving {pid}")
        return False

      visited.add(ppid)
      current = ppid

    self.logger.warning(f"Ancestry walk for pid {pid} exceeded {self.max_depth} levels")
    return False
