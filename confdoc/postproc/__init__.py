"""Post-processing of target documents."""

from .markers import END_MARKER, START_MARKER, MarkerPatcher, PatchOutcome

__all__ = ["END_MARKER", "MarkerPatcher", "PatchOutcome", "START_MARKER"]
