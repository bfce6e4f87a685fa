from typing import Optional

from ..core.ancestry import AncestryResolver
from ..core.procfs import ProcessTable, ProcfsTable
from .common_config import ProctreeConfig
from .log_manager import ComponentLoggerAdapter, ProctreeLogger
from .query_manager import QueryManager
from .reaper_manager import ReaperManager
from .signal_manager import SignalManager


class AppManager:
  def __init__(
    self,
    log_file: Optional[str] = None,
    table: Optional[ProcessTable] = None,
    config: Optional[ProctreeConfig] = None,
  ) -> None:
    """
    A service locator for managing and providing access to core components.

    Components are built on first use and share one process table, so a
    test can swap the whole system onto a MemoryProcessTable.

    Args:
      log_file: Optional log file name for the session.
      table: Process table to use instead of /proc.
      config: Settings to use instead of reading the environment.
    """
    self._log_manager = ProctreeLogger(log_file=log_file)
    self._config = config

    # Lazy Load
    self._table = table
    self._resolver: Optional[AncestryResolver] = None
    self._queries: Optional[QueryManager] = None
    self._signals: Optional[SignalManager] = None
    self._reaper: Optional[ReaperManager] = None

  @property
  def log_manager(self) -> ProctreeLogger:
    return self._log_manager

  @property
  def config(self) -> ProctreeConfig:
    """Get settings, read from the environment on first access."""
    if self._config is None:
      self._config = ProctreeConfig()
    return self._config

  @property
  def table(self) -> ProcessTable:
    """Get the process table (defaults to the configured /proc)."""
    if self._table is None:
      self._table = ProcfsTable(self._log_manager, self.config.get_proc_dir())
    return self._table

  @property
  def resolver(self) -> AncestryResolver:
    """Get fully configured AncestryResolver instance."""
    if self._resolver is None:
      self._resolver = AncestryResolver(self._log_manager, self.table, max_depth=self.config.max_depth)
    return self._resolver

  @property
  def queries(self) -> QueryManager:
    """Get fully configured QueryManager instance."""
    if self._queries is None:
      self._queries = QueryManager(self._log_manager, self.table, self.resolver)
    return self._queries

  @property
  def signals(self) -> SignalManager:
    """Get fully configured SignalManager instance."""
    if self._signals is None:
      self._signals = SignalManager(
        self._log_manager,
        self.table,
        self.resolver,
        retries=self.config.signal_retries,
        delay=self.config.signal_delay,
      )
    return self._signals

  @property
  def reaper(self) -> ReaperManager:
    """Get fully configured ReaperManager instance."""
    if self._reaper is None:
      self._reaper = ReaperManager(self._log_manager, self.queries, self.signals)
    return self._reaper

  def get_logger(
    self,
    name: Optional[str] = None,
    component: Optional[str] = None,
  ) -> ComponentLoggerAdapter:
    """
    Get fully configured logger instance.
    Args:
        name: Optional logger name
        component: Optional component name for logging
    Returns:
        ComponentLoggerAdapter: Configured logger instance
    """
    return self._log_manager.get_logger(
      name=name,
      component=component,
    )
