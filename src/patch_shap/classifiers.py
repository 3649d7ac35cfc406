"""
Classifier Collaborators
========================

Overview
--------

The attribution estimator only needs a stateless scoring function::

    predict(image) -> [(label, probability), ...]   # highest probability first

This module defines that protocol and two adapters:

- :class:`CallableClassifier` wraps any Python function returning a score vector
  or a ready-made classification.
- :class:`TorchImageClassifier` wraps a ``torch.nn.Module`` (or TorchScript module)
  that maps a ``(N, C, H, W)`` float batch to class logits.

It also provides helpers to turn raw scores into a sorted classification, to resolve
the target class once from the baseline prediction, and to read the target score
from later predictions.
"""

from typing import Any, Callable, Hashable, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np
import torch
import torch.nn.functional as F

from patch_shap.errors import ClassifierFailure, DimensionMismatch

__all__ = [
    "Classification",
    "Classifier",
    "CallableClassifier",
    "TorchImageClassifier",
    "to_classification",
    "resolve_target",
    "score_for",
]

Classification = List[Tuple[Hashable, float]]


@runtime_checkable
class Classifier(Protocol):
    """Anything with ``predict(image) -> Classification``."""

    def predict(self, image: Any) -> Classification:
        ...


def to_classification(scores: Any, labels: Optional[Sequence[Hashable]] = None) -> Classification:
    """Turn a 1-D score vector into ``(label, score)`` pairs sorted by descending score.

    :param scores: Array, tensor or list of per-class scores.
    :param Optional[Sequence] labels: Class names; integer indices are used when None.
    :return Classification: Sorted classification.
    """
    if isinstance(scores, torch.Tensor):
        scores = scores.detach().cpu().numpy()
    scores = np.asarray(scores, dtype=np.float64).reshape(-1)
    if scores.size == 0:
        raise DimensionMismatch("classifier returned no scores")
    if labels is None:
        labels = list(range(scores.size))
    elif len(labels) != scores.size:
        raise DimensionMismatch(f"{len(labels)} labels for {scores.size} class scores")
    # stable sort keeps label order among ties
    order = np.argsort(-scores, kind="stable")
    return [(labels[i], float(scores[i])) for i in order]


def resolve_target(classification: Classification, target: Optional[Hashable] = None) -> Hashable:
    """Fix the class whose score is tracked for the whole run.

    ``None`` selects the top-ranked label. An ``int`` that is not itself one of the
    labels is read as a rank. Anything else must be a label present in
    ``classification``.

    :param Classification classification: Baseline prediction.
    :param target: Label, rank or None.
    :return: The resolved label.
    """
    if not classification:
        raise ClassifierFailure("baseline classification is empty")
    if target is None:
        return classification[0][0]
    labels = [label for label, _ in classification]
    if target in labels:
        return target
    if isinstance(target, (int, np.integer)) and not isinstance(target, bool):
        if 0 <= target < len(classification):
            return classification[target][0]
        raise ClassifierFailure(f"rank {target} is out of range for {len(classification)} classes")
    raise ClassifierFailure(f"target class {target!r} is not among the classifier's labels")


def score_for(classification: Classification, label: Hashable) -> float:
    """Score of ``label`` in ``classification``.

    :raises ClassifierFailure: If the label is missing.
    """
    for candidate, score in classification:
        if candidate == label:
            return float(score)
    raise ClassifierFailure(f"classification has no score for target class {label!r}")


class CallableClassifier:
    """Adapt a plain function to the :class:`Classifier` protocol.

    :param Callable fn: ``fn(image)`` returning a score vector or a Classification.
    :param Optional[Sequence] labels: Labels for score vectors.
    """

    def __init__(self, fn: Callable[[Any], Any], labels: Optional[Sequence[Hashable]] = None):
        self.fn = fn
        self.labels = labels

    def predict(self, image: Any) -> Classification:
        result = self.fn(image)
        if isinstance(result, list) and result and isinstance(result[0], tuple):
            return sorted(result, key=lambda item: -item[1])
        return to_classification(result, self.labels)


class TorchImageClassifier:
    """Run a PyTorch image model on a single image.

    The image is converted to a ``(1, C, H, W)`` float32 tensor, divided by
    ``scale``, passed through ``transform`` if given, then through the model in eval
    mode under ``torch.no_grad()``. Softmax turns logits into probabilities unless
    ``apply_softmax`` is False.

    Inference holds no per-call state, so one instance can serve several worker
    threads.

    :param torch.nn.Module model: Model mapping a batch to ``(N, num_classes)`` logits.
    :param Optional[Sequence] labels: Class names, index-aligned with the logits.
    :param device: Device to run on; defaults to the model's device or CPU.
    :param bool channels_first: Whether input images are already ``(C, H, W)``.
    :param float scale: Divisor applied to pixel values (255 for uint8 images).
    :param Optional[Callable] transform: Extra tensor transform, e.g. normalization.
    :param bool apply_softmax: Apply softmax to the model output.
    """

    def __init__(self, model: torch.nn.Module, labels: Optional[Sequence[Hashable]] = None,
                 device: Optional[torch.device] = None, channels_first: bool = False,
                 scale: float = 255.0, transform: Optional[Callable[[torch.Tensor], torch.Tensor]] = None,
                 apply_softmax: bool = True):
        if device is None:
            try:
                device = next(model.parameters()).device
            except (StopIteration, AttributeError):
                device = torch.device("cpu")
        self.device = torch.device(device)
        self.model = model.to(self.device).eval()
        self.labels = labels
        self.channels_first = channels_first
        self.scale = scale
        self.transform = transform
        self.apply_softmax = apply_softmax

    def _to_batch(self, image: Any) -> torch.Tensor:
        x = torch.as_tensor(np.asarray(image) if not isinstance(image, torch.Tensor) else image)
        x = x.to(self.device, dtype=torch.float32)
        if x.ndim == 2:
            x = x.unsqueeze(0 if self.channels_first else -1)
        if x.ndim != 3:
            raise DimensionMismatch(f"expected a single image, got shape {tuple(x.shape)}")
        if not self.channels_first:
            x = x.permute(2, 0, 1)
        x = x / self.scale
        if self.transform is not None:
            x = self.transform(x)
        return x.unsqueeze(0)

    def predict(self, image: Any) -> Classification:
        with torch.no_grad():
            logits = self.model(self._to_batch(image))
        if logits.ndim == 2:
            logits = logits[0]
        scores = F.softmax(logits, dim=-1) if self.apply_softmax else logits
        return to_classification(scores, self.labels)
