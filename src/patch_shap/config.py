"""
Attribution Configuration
=========================

The three tunables of a run (patch size, sample count, fill colour) plus the
reproducibility and parallelism knobs, as one explicit value passed to the
explainer. Nothing here is process-wide state.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping, Optional

import numpy as np

from patch_shap.algorithms.perturbation import FillValue
from patch_shap.errors import InvalidConfiguration
from patch_shap.utils.config_loader import load_config

__all__ = ["AttributionConfig"]


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool) and value >= 1


@dataclass
class AttributionConfig:
    """Settings for one attribution run.

    :param int patch_size: Side length of the square grid patches, in pixels.
    :param int n_samples: Number of random masks to evaluate.
    :param mask_color: Fill value for excluded patches; scalar or one value per channel.
    :param Optional[int] seed: Seed for mask sampling; None draws fresh entropy.
    :param int n_workers: Number of threads evaluating trials concurrently.
    :param bool channels_first: Whether images are laid out ``(C, H, W)``.
    """
    patch_size: int = 32
    n_samples: int = 200
    mask_color: FillValue = 0
    seed: Optional[int] = None
    n_workers: int = 1
    channels_first: bool = False

    def validate(self) -> "AttributionConfig":
        """Raise :class:`InvalidConfiguration` on any out-of-range setting."""
        for name in ("patch_size", "n_samples", "n_workers"):
            value = getattr(self, name)
            if not _is_positive_int(value):
                raise InvalidConfiguration(f"{name} must be a positive integer, got {value!r}")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, (int, np.integer))
                                      or self.seed < 0):
            raise InvalidConfiguration(f"seed must be a non-negative integer or None, got {self.seed!r}")
        color = np.asarray(self.mask_color)
        if color.ndim > 1 or color.size == 0 or not np.issubdtype(color.dtype, np.number):
            raise InvalidConfiguration(f"mask_color must be a number or a list of numbers, got {self.mask_color!r}")
        return self

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AttributionConfig":
        """Build a config from a flat mapping or one nested under ``attribution``.

        Unknown keys are rejected so that typos do not silently fall back to defaults.
        """
        if "attribution" in data and isinstance(data["attribution"], Mapping):
            data = data["attribution"]
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise InvalidConfiguration(f"unknown configuration keys: {sorted(unknown)}")
        values = dict(data)
        if isinstance(values.get("mask_color"), list):
            values["mask_color"] = tuple(values["mask_color"])
        return cls(**values).validate()

    @classmethod
    def from_file(cls, path: str) -> "AttributionConfig":
        """Load a YAML, JSON or TOML file, see :func:`patch_shap.utils.config_loader.load_config`."""
        return cls.from_dict(load_config(path))

    def replace(self, **overrides: Any) -> "AttributionConfig":
        """Copy with the non-None ``overrides`` applied."""
        values = asdict(self)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return type(self)(**values).validate()
