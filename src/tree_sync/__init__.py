"""tree-sync: additive bidirectional reconciliation of two directory trees."""

__version__ = "0.1.0"
