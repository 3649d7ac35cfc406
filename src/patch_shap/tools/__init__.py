"""
Tools Module
============

Small helpers shared by the explainer and the command line:

- **Timing Utility**:
  Context-managed block timer for profiling sampling runs.
"""

from .timer import Timer

__all__ = ["Timer"]
