"""
Timing Utility for Code Execution
=================================

Overview
--------

This module provides a lightweight utility class `Timer` for measuring the execution time
of a block of Python code using a context manager (`with` block). The attribution
explainer uses it silently to report how long a sampling run took.

Features
^^^^^^^^

- **Context Manager Interface**:
  Use `with Timer("label"):` to automatically time a code block.

- **Silent Mode**:
  Set `verbose=False` to suppress output and read `.elapsed` manually.
"""

import logging
import time

logger = logging.getLogger(__name__)


class Timer:
    r"""
    Timing context manager for profiling code execution.

    Measures wall-clock time (in seconds) for any code block wrapped in a `with` statement.
    It logs the elapsed time with a label, or stores it for later access via the `.elapsed` attribute.

    Example
    -------
    .. code-block:: python

        with Timer("Sampling masks") as t:
            run()
        print(t.elapsed)

    :param str label: Optional label to describe the timed block.
    :param bool verbose: If True, logs elapsed time at INFO level on exit.

    :ivar float elapsed: Time in seconds between context entry and exit.
    """
    def __init__(self, label: str = "", verbose: bool = True):
        self.label = label
        self.verbose = verbose
        self._start = None
        self.elapsed = None

    def __enter__(self):
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.perf_counter() - self._start
        if self.verbose:
            logger.info("[Timer] %s took %.4f seconds", self.label, self.elapsed)
        return False
