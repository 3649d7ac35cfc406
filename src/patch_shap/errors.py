"""Exception hierarchy for patch attribution runs."""

__all__ = [
    "PatchShapError",
    "InvalidConfiguration",
    "DimensionMismatch",
    "ClassifierFailure",
    "EstimationCancelled",
]


class PatchShapError(Exception):
    """Base class for every error raised by this package."""


class InvalidConfiguration(PatchShapError, ValueError):
    """A tunable (patch size, sample count, fill value, ...) is out of range.

    Raised eagerly, before any sampling begins.
    """


class DimensionMismatch(PatchShapError, ValueError):
    """Mask, patch and attribution lengths disagree, or a patch lies outside the image.

    This signals a programming error and is never recovered from.
    """


class ClassifierFailure(PatchShapError, RuntimeError):
    """The classifier could not score an image; the whole run is aborted."""


class EstimationCancelled(PatchShapError):
    """The caller's deadline or stop signal fired between two trials."""
