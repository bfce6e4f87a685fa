"""
proctree - CLI Interface

Main CLI entry point for the proctree command.

  proctree [OPTION] root_pid target_pid

The target must be a descendant of root_pid; every option then
acts on the target (queries, -rp, -kz) or on the root's subtree (-dx, -dt, -dc).
"""

import argparse
import sys
from typing import Callable, Optional

from .core.common_utils import CommonUtils, UtilsError
from .managers.app_manager import AppManager
from .managers.common_config import ConfigError
from .managers.signal_manager import SignalKind

NOT_IN_TREE = "The process {target} does not belong to the tree rooted at {root}"

# mode -> (line per match, line when nothing matched)
LIST_MESSAGES = {
  "ds": ("Descendant PID: {pid}", "No descendants found"),
  "nd": ("Non-direct descendant PID: {pid}", "No non-direct descendants found"),
  "dd": ("Immediate descendant PID: {pid}", "No direct descendants"),
  "sb": ("Sibling PID: {pid}", "No siblings found"),
  "bz": ("Defunct sibling PID: {pid}", "No defunct sibling processes"),
  "zd": ("Defunct descendant PID: {pid}", "No descendant zombie process/es"),
  "gc": ("Grandchild PID: {pid}", "No grandchildren found"),
}

SIGNAL_MODES = {
  "dx": SignalKind.TERMINATE,
  "dt": SignalKind.STOP,
  "dc": SignalKind.CONTINUE,
}

Handler = Callable[[AppManager, argparse.Namespace], None]


def _print_pids(mode: str, pids: list[int]) -> None:
  found_line, empty_line = LIST_MESSAGES[mode]
  for pid in pids:
    print(found_line.format(pid=pid))
  if not pids:
    print(empty_line)


def handle_show_ids(app: AppManager, args: argparse.Namespace) -> None:
  """Print the pid and parent pid of the target."""
  record = app.table.read(args.target_pid)
  if record is None:
    print(f"Process {args.target_pid} not found")
    return
  print(f"PID: {record.pid}, PPID: {record.ppid}")


def handle_signal_descendants(app: AppManager, args: argparse.Namespace) -> None:
  """Send SIGKILL/SIGSTOP/SIGCONT to every descendant of the root."""
  kind = SIGNAL_MODES[args.mode]
  report = app.signals.signal_descendants(args.root_pid, kind)

  print(f"Sent {kind.signal_name} to {len(report.signalled_pids)} descendant process(es) of {args.root_pid}")
  if report.root_result is not None:
    if report.root_result.delivered:
      print(f"Sent {kind.signal_name} to root process {args.root_pid}")
    else:
      print(f"Failed to send {kind.signal_name} to root process {args.root_pid}: {report.root_result.error}")


def handle_kill_process(app: AppManager, args: argparse.Namespace) -> None:
  """Kill the target process."""
  result = app.signals.kill_process(args.target_pid)
  if result.delivered:
    print(f"Process {args.target_pid} killed")
  else:
    print(f"Failed to kill process {args.target_pid}: {result.error}", file=sys.stderr)


def handle_list(app: AppManager, args: argparse.Namespace) -> None:
  """Run one of the relationship queries on the target."""
  queries = app.queries
  target = args.target_pid
  lookups: dict[str, Callable[[], list[int]]] = {
    "ds": lambda: queries.descendants(target),
    "nd": lambda: queries.non_direct_descendants(target),
    "dd": lambda: queries.immediate_children(target),
    "sb": lambda: queries.siblings(target),
    "bz": lambda: queries.siblings(target, zombie_only=True),
    "zd": lambda: queries.descendants(target, zombie_only=True),
    "gc": lambda: queries.grandchildren(target),
  }
  _print_pids(args.mode, lookups[args.mode]())


def handle_zombie_status(app: AppManager, args: argparse.Namespace) -> None:
  """Print whether the target is defunct."""
  status = app.queries.zombie_status(args.target_pid)
  if status is None:
    print(f"Process {args.target_pid} status unknown (not found)")
  elif status:
    print(f"Process {args.target_pid} is defunct")
  else:
    print(f"Process {args.target_pid} is not defunct")


def handle_kill_zombie_parents(app: AppManager, args: argparse.Namespace) -> None:
  """Kill the parents of every zombie below the target."""
  results = app.reaper.kill_zombie_parents(args.target_pid)
  if not results:
    print("No defunct descendant processes found")
    return

  for reap in results:
    if reap.skipped:
      continue
    if reap.killed:
      print(f"Killed parent {reap.parent} of defunct process {reap.zombie}")
    else:
      error = reap.result.error if reap.result else "unknown error"
      print(f"Failed to kill parent {reap.parent} of defunct process {reap.zombie}: {error}", file=sys.stderr)


HANDLERS: dict[Optional[str], Handler] = {
  None: handle_show_ids,
  "dx": handle_signal_descendants,
  "dt": handle_signal_descendants,
  "dc": handle_signal_descendants,
  "rp": handle_kill_process,
  "sz": handle_zombie_status,
  "kz": handle_kill_zombie_parents,
  **{mode: handle_list for mode in LIST_MESSAGES},
}


def _pid_arg(value: str) -> int:
  try:
    return CommonUtils.parse_pid(value)
  except UtilsError as e:
    raise argparse.ArgumentTypeError(str(e)) from None


def build_parser() -> argparse.ArgumentParser:
  """Create the argument parser."""
  parser = argparse.ArgumentParser(
    prog="proctree",
    description="Inspect and signal the process tree rooted at a given process",
  )

  # Global options
  parser.add_argument("--debug", action="store_true", help="Enable debug logging on stderr")
  parser.add_argument(
    "--log-level",
    choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    help="Set log level",
  )

  modes = parser.add_mutually_exclusive_group()
  options = [
    ("dx", "Kill every descendant of root_pid, then root_pid itself"),
    ("dt", "Stop (SIGSTOP) every descendant of root_pid"),
    ("dc", "Continue (SIGCONT) every descendant of root_pid"),
    ("rp", "Kill target_pid"),
    ("ds", "List all descendants of target_pid"),
    ("nd", "List non-direct descendants of target_pid"),
    ("dd", "List immediate descendants of target_pid"),
    ("sb", "List siblings of target_pid"),
    ("bz", "List defunct siblings of target_pid"),
    ("zd", "List defunct descendants of target_pid"),
    ("gc", "List grandchildren of target_pid"),
    ("sz", "Print whether target_pid is defunct"),
    ("kz", "Kill the parents of defunct descendants of target_pid"),
  ]
  for mode, help_text in options:
    modes.add_argument(f"-{mode}", dest="mode", action="store_const", const=mode, help=help_text)

  parser.add_argument("root_pid", type=_pid_arg, help="Root of the process tree")
  parser.add_argument("target_pid", type=_pid_arg, help="Process to operate on")
  parser.set_defaults(mode=None)
  return parser


def main(argv: Optional[list[str]] = None, app: Optional[AppManager] = None) -> None:
  """Main CLI entry point."""
  parser = build_parser()
  args = parser.parse_args(argv)

  if app is None:
    app = AppManager(log_file="proctree.log")

  if args.debug:
    app.log_manager.add_console_output()
    app.log_manager.set_log_level("DEBUG")
  elif args.log_level:
    app.log_manager.set_log_level(args.log_level)

  logger = app.get_logger("cli", "cli")

  try:
    if not app.resolver.is_descendant(args.root_pid, args.target_pid):
      print(NOT_IN_TREE.format(target=args.target_pid, root=args.root_pid))
      logger.info(f"Process {args.target_pid} is outside the tree of {args.root_pid}")
      return

    logger.debug(f"Running mode {args.mode or 'ids'} on root={args.root_pid} target={args.target_pid}")
    HANDLERS[args.mode](app, args)

  except ConfigError as e:
    logger.error(f"Configuration error: {e}")
    print(f"Configuration error: {e}", file=sys.stderr)
    sys.exit(1)


if __name__ == "__main__":
  main()
