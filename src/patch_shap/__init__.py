"""
Patch SHAP
==========

This package approximates how much each spatial patch of an image contributes to an
image classifier's confidence in a target class, using a simplified KernelSHAP
perturbation-sampling scheme.

Core Modules
------------

- **algorithms**:

  Patch grid partitioning, seedable mask sampling and constant-colour perturbation.

- **explainers**:

  `PatchKernelSHAPExplainer`, which runs the sampling loop (sequentially or on a
  thread pool) and returns an `AttributionResult`.

- **classifiers**:

  The classifier protocol plus adapters for plain functions and PyTorch models.

- **config**:
  `AttributionConfig`, the explicit run settings (patch size, sample count, fill colour,
  seed, workers), loadable from YAML, JSON or TOML.

Usage
-----

Example:

.. code-block:: python

  import cv2
  import torch
  from patch_shap import AttributionConfig, PatchKernelSHAPExplainer, TorchImageClassifier

  image = cv2.cvtColor(cv2.imread("portrait.png"), cv2.COLOR_BGR2RGB)
  classifier = TorchImageClassifier(torch.jit.load("resnet50.pt"))
  explainer = PatchKernelSHAPExplainer(classifier, AttributionConfig(patch_size=32, n_samples=200, seed=0))
  result = explainer.explain(image)
  print(result.target_class, result.values)
"""

from . import algorithms, explainers, tools
from .base_explainer import BaseExplainer
from .classifiers import CallableClassifier, Classifier, TorchImageClassifier
from .config import AttributionConfig
from .errors import (
    ClassifierFailure,
    DimensionMismatch,
    EstimationCancelled,
    InvalidConfiguration,
    PatchShapError,
)
from .explainers import AttributionResult, PatchKernelSHAPExplainer
from ._version import __version__

__all__ = [
    "algorithms",
    "explainers",
    "tools",
    "BaseExplainer",
    "Classifier",
    "CallableClassifier",
    "TorchImageClassifier",
    "AttributionConfig",
    "AttributionResult",
    "PatchKernelSHAPExplainer",
    "PatchShapError",
    "InvalidConfiguration",
    "DimensionMismatch",
    "ClassifierFailure",
    "EstimationCancelled",
    "__version__",
]
