r"""
Patch SHAP Base Interface
=========================

Overview
--------

This module defines the abstract base class for the image attribution explainers
in this package. It fixes a common API so explainers can be swapped in drivers,
benchmarks and tests.

Any explainer that inherits from `BaseExplainer` must implement `explain`, which
returns an attribution result for one image, and `shap_values`, which returns just
the per-region attribution vector. `__call__` aliases `explain` to mirror the
`shap.Explainer` calling convention.

Key Concepts
^^^^^^^^^^^^

- **Model-agnostic**:
  The wrapped model is a classifier collaborator exposing `predict(image)`. The
  explainer never looks inside it.

- **Expected Value Access**:
  The `expected_value` property exposes the baseline score of the explained class
  once a run has completed.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

import numpy as np

__all__ = ["BaseExplainer"]


class BaseExplainer(ABC):
    r"""
    BaseExplainer: Abstract Interface for SHAP-style Image Explainers

    .. math::
        \phi_i = \mathbb{E}_{S \subseteq N \setminus \{i\}} \left[ f(x_{S \cup \{i\}}) - f(x_S) \right]

    :param Any model: The classifier to explain, exposing ``predict(image)``.
    """
    def __init__(self, model: Any):
        self.model = model

    @abstractmethod
    def explain(self, image: Any, target: Optional[Any] = None, **kwargs) -> Any:
        r"""
        Compute the attribution result for one image.

        :param image: Image to explain.
        :param target: Class to explain; explainer-specific default when None.
        :param kwargs: Additional arguments for explainer-specific control.
        :return: Explainer-specific result object.
        """

    @abstractmethod
    def shap_values(self, image: Any, target: Optional[Any] = None, **kwargs) -> np.ndarray:
        r"""
        Compute the per-region attribution vector for one image.

        :param image: Image to explain.
        :param target: Class to explain.
        :return: One attribution value per region.
        :rtype: np.ndarray
        """

    def __call__(self, image, target=None, **kwargs):
        r"""
        Callable interface for explainers.

        Enables usage like `explainer(image)` similar to `shap.Explainer`.
        """
        return self.explain(image, target=target, **kwargs)

    @property
    def expected_value(self):
        r"""
        Baseline score of the explained class from the last run, or None before any run.

        :rtype: float or None
        """
        return getattr(self, "_expected_value", None)
