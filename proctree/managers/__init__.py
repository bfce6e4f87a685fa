"""
proctree - Managers

Configuration, logging, service wiring and the tree operations built on
top of the core process table.
"""
