"""printplan - auto-scheduling of print jobs onto a printer farm."""

__version__ = "0.1.0"
