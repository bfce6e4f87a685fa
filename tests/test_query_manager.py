"""
Unit tests for relationship queries.
"""

from unittest import TestCase
from unittest.mock import Mock

from proctree.core.ancestry import AncestryResolver
from proctree.core.memory_table import MemoryProcessTable
from proctree.managers.log_manager import ProctreeLogger
from proctree.managers.query_manager import QueryManager

ROOT, C1, C2, G1 = 100, 101, 102, 103


class TestQueryManager(TestCase):
  """
  Test cases for QueryManager.

  Tree under test:
      1 -> 100 (R) -> 101 (C1) -> 103 (G1)
                   -> 102 (C2, zombie)
      1 -> 200 -> 201, 202(Z)
  """

  def setUp(self) -> None:
    self.table = MemoryProcessTable()
    self.table.spawn(1, 0)
    self.table.spawn(ROOT, 1)
    self.table.spawn(C1, ROOT)
    self.table.spawn(C2, ROOT, state="Z")
    self.table.spawn(G1, C1)
    self.table.spawn(200, 1)
    self.table.spawn(201, 200)
    self.table.spawn(202, 200, state="Z")
    self.mock_log_manager = Mock(spec=ProctreeLogger)
    self.mock_log_manager.get_logger.return_value = Mock()
    resolver = AncestryResolver(self.mock_log_manager, self.table)
    self.queries = QueryManager(self.mock_log_manager, self.table, resolver)

  def test_descendants(self) -> None:
    """Test listing every descendant."""
    self.assertEqual(set(self.queries.descendants(ROOT)), {C1, C2, G1})

  def test_zombie_descendants(self) -> None:
    """Test listing defunct descendants only."""
    self.assertEqual(self.queries.descendants(ROOT, zombie_only=True), [C2])

  def test_immediate_children(self) -> None:
    """Test listing direct children."""
    self.assertEqual(set(self.queries.immediate_children(ROOT)), {C1, C2})
    self.assertEqual(self.queries.immediate_children(G1), [])

  def test_non_direct_descendants(self) -> None:
    """Test listing descendants that are not direct children."""
    self.assertEqual(self.queries.non_direct_descendants(ROOT), [G1])

  def test_children_and_non_direct_partition_descendants(self) -> None:
    """Test immediate children plus non-direct descendants equals all descendants."""
    for pid in [1, ROOT, C1, 200]:
      with self.subTest(pid=pid):
        descendants = set(self.queries.descendants(pid))
        children = set(self.queries.immediate_children(pid))
        non_direct = set(self.queries.non_direct_descendants(pid))
        self.assertTrue(children <= descendants)
        self.assertEqual(descendants - children, non_direct)

  def test_grandchildren(self) -> None:
    """Test listing grandchildren."""
    self.assertEqual(self.queries.grandchildren(ROOT), [G1])
    self.assertEqual(set(self.queries.grandchildren(1)), {C1, C2, 201, 202})
    self.assertEqual(self.queries.grandchildren(C2), [])

  def test_siblings(self) -> None:
    """Test listing siblings."""
    self.assertEqual(self.queries.siblings(C1), [C2])
    self.assertEqual(self.queries.siblings(C1, zombie_only=True), [C2])
    self.assertEqual(self.queries.siblings(C2, zombie_only=True), [])
    self.assertEqual(self.queries.siblings(G1), [])

  def test_siblings_exclude_self_and_are_symmetric(self) -> None:
    """Test the sibling relation never contains p and is symmetric."""
    for pid in self.table.pids():
      siblings = self.queries.siblings(pid)
      with self.subTest(pid=pid):
        self.assertNotIn(pid, siblings)
        for sibling in siblings:
          self.assertIn(pid, self.queries.siblings(sibling))

  def test_siblings_of_missing_process(self) -> None:
    """Test that siblings of a vanished process are empty."""
    self.assertEqual(self.queries.siblings(999), [])

  def test_zombie_status(self) -> None:
    """Test zombie status for zombie, live and missing processes."""
    self.assertTrue(self.queries.zombie_status(C2))
    self.assertFalse(self.queries.zombie_status(C1))
    self.assertIsNone(self.queries.zombie_status(999))

  def test_queries_drop_processes_that_exit_mid_scan(self) -> None:
    """Test that a candidate disappearing during a scan is filtered out."""

    class VanishingTable(MemoryProcessTable):
      def read(self, pid: int):  # type: ignore[no-untyped-def]
        if pid == G1:
          return None
        return super().read(pid)

    table = VanishingTable(self.table.read(pid) for pid in self.table.pids())  # type: ignore[misc]
    queries = QueryManager(self.mock_log_manager, table, AncestryResolver(self.mock_log_manager, table))

    self.assertEqual(set(queries.descendants(ROOT)), {C1, C2})
    self.assertEqual(queries.grandchildren(ROOT), [])
