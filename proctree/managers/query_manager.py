"""
proctree - Relationship Queries

Answers "who is related to whom" questions by scanning the whole process
table and filtering each candidate. Candidates that vanish mid-scan are
silently dropped.
"""

from typing import Optional

from ..core.ancestry import AncestryResolver
from ..core.procfs import ProcessTable
from .log_manager import ProctreeLogger


class QueryManager:
  """Relationship queries over a ProcessTable."""

  def __init__(self, log_manager: ProctreeLogger, table: ProcessTable, resolver: AncestryResolver) -> None:
    self.logger = log_manager.get_logger(name="query_manager", component="queries")
    self.table = table
    self.resolver = resolver

  def immediate_children(self, pid: int) -> list[int]:
    """Processes whose parent is pid."""
    children = []
    for candidate in self.table.pids():
      record = self.table.read(candidate)
      if record is not None and record.ppid == pid:
        children.append(candidate)

    self.logger.debug(f"Immediate children of {pid}: {children}")
    return children

  def descendants(self, root: int, zombie_only: bool = False) -> list[int]:
    """
    All processes in the subtree below root.

    Args:
        root: Root of the subtree (not included in the result)
        zombie_only: Only report defunct processes

    Returns:
        list[int]: Matching pids in scan order
    """
    found = []
    for candidate in self.table.pids():
      if not self.resolver.is_descendant(root, candidate):
        continue
      if zombie_only and not self.zombie_status(candidate):
        continue
      found.append(candidate)

    self.logger.debug(f"Descendants of {root} (zombie_only={zombie_only}): {found}")
    return found

  def non_direct_descendants(self, pid: int) -> list[int]:
    """Descendants of pid that are not its immediate children."""
    found = []
    for candidate in self.table.pids():
      if not self.resolver.is_descendant(pid, candidate):
        continue
      record = self.table.read(candidate)
      if record is not None and record.ppid != pid:
        found.append(candidate)

    self.logger.debug(f"Non-direct descendants of {pid}: {found}")
    return found

  def siblings(self, pid: int, zombie_only: bool = False) -> list[int]:
    """
    Other processes sharing pid's parent.

    Returns an empty list if pid itself no longer exists.
    """
    parent = self.resolver.parent_of(pid)
    if parent is None:
      self.logger.warning(f"Cannot list siblings, process {pid} not found")
      return []

    found = []
    for candidate in self.table.pids():
      if candidate == pid:
        continue
      record = self.table.read(candidate)
      if record is None or record.ppid != parent:
        continue
      if zombie_only and not record.is_zombie:
        continue
      found.append(candidate)

    self.logger.debug(f"Siblings of {pid} (zombie_only={zombie_only}): {found}")
    return found

  def grandchildren(self, pid: int) -> list[int]:
    """Children of every immediate child of pid."""
    found = []
    for child in self.immediate_children(pid):
      found.extend(self.immediate_children(child))
    return found

  def zombie_status(self, pid: int) -> Optional[bool]:
    """
    Check whether pid is defunct.

    Returns:
        Optional[bool]: True if defunct, False if alive, None if the process does not exist
    """
    record = self.table.read(pid)
    if record is None:
      return None
    return record.is_zombie
