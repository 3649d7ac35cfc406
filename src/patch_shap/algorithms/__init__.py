"""
Patch SHAP Algorithms
=====================

Building blocks of the patch attribution estimator.

Core Components:
- patch_grid: Row-major partition of an image into clipped square patches
- mask_sampling: Seedable Bernoulli(0.5) patch-inclusion masks
- perturbation: Constant-colour fill of excluded patches
"""

from .mask_sampling import *
from .patch_grid import *
from .perturbation import *
