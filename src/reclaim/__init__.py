"""reclaim - find and remove reclaimable disk clutter safely."""

__version__ = "0.1.0"
