"""conflux - git conflict resolution and branch sync."""

__version__ = "0.1.0"
