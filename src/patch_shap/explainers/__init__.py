"""
Image Explainers
================

Overview
--------

SHAP-style explainers that attribute an image classifier's confidence to spatial
regions of the input. Each implements the `BaseExplainer` interface.

Modules
-------

- **patch_kernel_explainer**: Monte-Carlo KernelSHAP over a fixed grid of patches,
  with random Bernoulli(0.5) patch masks and constant-colour fill.

Usage
-----

.. code-block:: python

    from patch_shap.explainers import PatchKernelSHAPExplainer
"""

from .patch_kernel_explainer import AttributionResult, PatchKernelSHAPExplainer

__all__ = [
    "AttributionResult",
    "PatchKernelSHAPExplainer",
]
