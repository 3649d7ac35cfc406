"""
Test Package
============

Tests for the patch_shap library.

Test modules cover:
- Patch grid partitioning, mask sampling and perturbation
- The patch KernelSHAP explainer, sequential and threaded
- Classifier adapters, configuration loading and the command line
- Edge cases

Usage:
    Run all tests: pytest tests/
    Run specific test: pytest tests/test_explainer.py
"""

__all__ = []
