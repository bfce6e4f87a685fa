"""
proctree - Python Package

Inspect and signal a live Linux process tree through /proc: relationship
queries, zombie detection and subtree-wide signal delivery.
"""

__version__ = "1.0.0"
__author__ = "proctree Team"
__description__ = "Process tree inspection and signalling through /proc"

# Core imports for external use
from .cli import main as cli_main

__all__ = [
  "cli_main",
  "__version__",
]
