"""
Unit tests for the in-memory process table.
"""

import signal
from unittest import TestCase

import pytest

from proctree.core.memory_table import MemoryProcessTable
from proctree.core.procfs import ProcessRecord


class TestMemoryProcessTable(TestCase):
  """Test cases for MemoryProcessTable."""

  def setUp(self) -> None:
    """Build a small tree: 1 -> 10 -> {11, 12(Z)}, 11 -> 13."""
    self.table = MemoryProcessTable()
    self.table.spawn(1, 0, comm="init")
    self.table.spawn(10, 1)
    self.table.spawn(11, 10)
    self.table.spawn(12, 10, state="Z")
    self.table.spawn(13, 11)

  def test_read_and_contains(self) -> None:
    """Test record lookup."""
    self.assertEqual(self.table.read(11), ProcessRecord(pid=11, ppid=10, state="S", comm="proc11"))
    self.assertIsNone(self.table.read(99))
    self.assertIn(13, self.table)
    self.assertEqual(len(self.table), 5)

  def test_records_constructor(self) -> None:
    """Test building a table from records."""
    table = MemoryProcessTable([ProcessRecord(pid=5, ppid=1, state="R")])

    self.assertEqual(list(table.pids()), [5])

  def test_pids_survive_mutation_during_scan(self) -> None:
    """Test that the table can change while pids() is being consumed."""
    seen = []
    for pid in self.table.pids():
      seen.append(pid)
      if pid == 10:
        self.table.exit(13)
        self.table.spawn(50, 1)

    self.assertEqual(seen, [1, 10, 11, 12, 13])
    self.assertIn(50, self.table)

  def test_exit_reparents_and_reaps(self) -> None:
    """Test that exit() reparents live children to init and reaps zombies."""
    self.table.exit(10)

    self.assertNotIn(10, self.table)
    self.assertNotIn(12, self.table)
    record = self.table.read(11)
    assert record is not None
    self.assertEqual(record.ppid, 1)

  def test_exit_unknown_pid(self) -> None:
    """Test that exiting a missing pid is a no-op."""
    self.table.exit(999)

    self.assertEqual(len(self.table), 5)

  def test_kill_signal(self) -> None:
    """Test SIGKILL removes the process and logs the delivery."""
    self.table.send_signal(13, signal.SIGKILL)

    self.assertNotIn(13, self.table)
    self.assertEqual(self.table.signals, [(13, signal.SIGKILL)])

  def test_stop_and_continue(self) -> None:
    """Test SIGSTOP / SIGCONT state transitions."""
    self.table.send_signal(11, signal.SIGSTOP)
    self.assertEqual(self.table.read(11).state, "T")  # type: ignore[union-attr]

    self.table.send_signal(11, signal.SIGCONT)
    self.assertEqual(self.table.read(11).state, "S")  # type: ignore[union-attr]
    self.assertEqual(self.table.signals_to(11), [signal.SIGSTOP, signal.SIGCONT])

  def test_zombie_ignores_signals(self) -> None:
    """Test that a zombie stays put whatever it receives."""
    self.table.send_signal(12, signal.SIGKILL)

    self.assertIn(12, self.table)
    self.assertEqual(self.table.signals_to(12), [signal.SIGKILL])

  def test_signal_missing_process(self) -> None:
    """Test that signalling a missing pid raises ProcessLookupError."""
    with pytest.raises(ProcessLookupError):
      self.table.send_signal(404, signal.SIGKILL)
    self.assertEqual(self.table.signals, [])

  def test_on_signal_hook(self) -> None:
    """Test that the hook sees every delivered signal."""
    calls = []
    self.table.on_signal = lambda table, pid, sig: calls.append((pid, sig))

    self.table.send_signal(11, signal.SIGCONT)

    self.assertEqual(calls, [(11, signal.SIGCONT)])
