"""
proctree - Core Module

Process table access and ancestry resolution.
"""

from .ancestry import AncestryResolver
from .memory_table import MemoryProcessTable
from .procfs import ProcessRecord, ProcessTable, ProcfsTable, ProcStatError, parse_stat_line

__all__ = [
  "AncestryResolver",
  "MemoryProcessTable",
  "ProcessRecord",
  "ProcessTable",
  "ProcfsTable",
  "ProcStatError",
  "parse_stat_line",
]
