r"""
Patch KernelSHAP Explainer
==========================

Theoretical Explanation
-----------------------

A simplified, Monte-Carlo KernelSHAP estimator over image patches. The image is cut
into a grid of patches (the players); every trial draws a random coalition in which
each patch is kept with probability 1/2, fills the excluded patches with a constant
colour, and scores the perturbed image for one fixed target class.

Each patch accumulates ``+score`` when it was kept and ``-score`` when it was
excluded. After :math:`N` trials the sum is divided by :math:`N`:

.. math::

    \phi_i = \frac{1}{N} \sum_{t=1}^{N} s_t \cdot (2\,m_{t,i} - 1)

where :math:`s_t` is the target score of trial :math:`t` and :math:`m_{t,i} \in \{0, 1\}`
the mask entry of patch :math:`i`. This contrasts the expected score with the patch
present against the expected score with it absent. It is a crude surrogate for exact
Shapley values: no kernel weighting over coalition sizes is applied, so more samples
lower the variance but not the bias.

Algorithm
---------

1. **Setup**:
   Build the patch grid once and classify the untouched image (the baseline). The
   target class is resolved from the baseline, top-ranked by default, and kept fixed.

2. **Trials** (independent of each other):
   Draw a mask, perturb, classify, read the target score, add ``+score`` / ``-score``
   into the accumulator.

3. **Normalization**:
   Divide by the number of trials; the result is returned read-only.

Trials can run on a thread pool. Each worker owns an independent mask stream and a
private partial sum; partial sums are reduced in worker order, so a fixed seed and
worker count reproduce the same vector bit for bit.

Any classifier error aborts the run, and a caller-supplied stop callback or deadline
is checked between trials. No partial result is ever returned.
"""

import logging
import threading
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, List, Optional, Sequence, Tuple

import numpy as np

from patch_shap.algorithms.mask_sampling import MaskSampler
from patch_shap.algorithms.patch_grid import Patch, build_patch_grid, patch_values_to_map
from patch_shap.algorithms.perturbation import ImagePerturber, image_size
from patch_shap.base_explainer import BaseExplainer
from patch_shap.classifiers import Classification, resolve_target, score_for
from patch_shap.config import AttributionConfig
from patch_shap.errors import (
    ClassifierFailure,
    DimensionMismatch,
    EstimationCancelled,
    InvalidConfiguration,
    PatchShapError,
)
from patch_shap.tools.timer import Timer

__all__ = ["AttributionResult", "PatchKernelSHAPExplainer"]


class _Aborted(Exception):
    """Another worker failed; stop quietly so its error can surface."""


@dataclass(frozen=True, eq=False)
class AttributionResult:
    """Attribution vector paired with the patches that produced it.

    :ivar Tuple[Patch, ...] patches: Patch grid, row-major.
    :ivar np.ndarray values: One read-only float64 value per patch.
    :ivar target_class: Label whose score was tracked.
    :ivar Classification baseline: Prediction on the unperturbed image.
    :ivar int n_samples: Number of trials.
    :ivar Tuple[int, int] image_size: ``(width, height)`` of the explained image.
    """
    patches: Tuple[Patch, ...]
    values: np.ndarray
    target_class: Hashable
    baseline: Classification
    n_samples: int
    image_size: Tuple[int, int]

    def to_map(self) -> np.ndarray:
        """Per-pixel map of shape ``(height, width)``."""
        width, height = self.image_size
        return patch_values_to_map(self.patches, self.values, width, height)

    def top_patches(self, k: int = 5) -> List[Tuple[Patch, float]]:
        """The ``k`` patches with the largest attribution, largest first."""
        order = np.argsort(-self.values, kind="stable")[:k]
        return [(self.patches[i], float(self.values[i])) for i in order]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target_class": self.target_class,
            "n_samples": self.n_samples,
            "image_size": list(self.image_size),
            "baseline": [[label, prob] for label, prob in self.baseline],
            "patches": [
                {"x": p.x, "y": p.y, "width": p.width, "height": p.height, "value": float(v)}
                for p, v in zip(self.patches, self.values)
            ],
        }


class PatchKernelSHAPExplainer(BaseExplainer):
    r"""
    Patch-level Monte-Carlo KernelSHAP for image classifiers.

    :param model: Classifier collaborator exposing ``predict(image) -> Classification``.
        Must be thread-safe when ``config.n_workers > 1``.
    :param Optional[AttributionConfig] config: Run settings; defaults apply when None.
    :param Optional[logging.Logger] logger: Logger to report progress to.
    """

    def __init__(self, model: Any, config: Optional[AttributionConfig] = None,
                 logger: Optional[logging.Logger] = None):
        super().__init__(model)
        self.config = (config if config is not None else AttributionConfig()).validate()
        self.perturber = ImagePerturber(self.config.mask_color, self.config.channels_first)
        self.logger = logger or logging.getLogger(__name__)

    def _classify(self, image: Any) -> Classification:
        try:
            classification = self.model.predict(image)
        except PatchShapError:
            raise
        except Exception as exc:
            raise ClassifierFailure(f"classifier failed on a {getattr(image, 'shape', '?')} image: {exc}") from exc
        if not classification:
            raise ClassifierFailure("classifier returned an empty classification")
        return classification

    def _run_trials(self, image: Any, patches: Sequence[Patch], target_class: Hashable,
                    n_trials: int, sampler: Any, gate: Callable[[], None]) -> np.ndarray:
        acc = np.zeros(len(patches), dtype=np.float64)
        for trial in range(n_trials):
            gate()
            mask = np.asarray(sampler.sample(len(patches)), dtype=bool)
            if mask.shape != (len(patches),):
                raise DimensionMismatch(f"sampler returned a mask of shape {mask.shape} for {len(patches)} patches")
            perturbed = self.perturber.apply(image, patches, mask)
            score = score_for(self._classify(perturbed), target_class)
            acc += np.where(mask, score, -score)
            self.logger.debug("trial %d/%d: %d/%d patches kept, score=%.4f",
                              trial + 1, n_trials, int(mask.sum()), len(patches), score)
        return acc

    def _run_parallel(self, image: Any, patches: Sequence[Patch], target_class: Hashable,
                      n_samples: int, n_workers: int, sampler: Any,
                      gate: Callable[[], None]) -> np.ndarray:
        spawn = getattr(sampler, "spawn", None)
        if spawn is None:
            raise InvalidConfiguration("parallel estimation needs a sampler with spawn(k)")
        children = spawn(n_workers)
        base, extra = divmod(n_samples, n_workers)
        counts = [base + (1 if w < extra else 0) for w in range(n_workers)]

        abort = threading.Event()

        def worker_gate():
            if abort.is_set():
                raise _Aborted()
            gate()

        with ThreadPoolExecutor(max_workers=n_workers, thread_name_prefix="patch-shap") as pool:
            futures = [
                pool.submit(self._run_trials, image, patches, target_class, count, child, worker_gate)
                for count, child in zip(counts, children)
            ]
            done, _ = wait(futures, return_when=FIRST_EXCEPTION)
            if any(f.exception() is not None for f in done):
                abort.set()

        errors = [f.exception() for f in futures
                  if f.exception() is not None and not isinstance(f.exception(), _Aborted)]
        if errors:
            raise errors[0]

        # fixed reduction order keeps results reproducible
        acc = np.zeros(len(patches), dtype=np.float64)
        for future in futures:
            acc += future.result()
        return acc

    def estimate(self, image: Any, patches: Sequence[Patch], target_class: Hashable,
                 n_samples: Optional[int] = None, sampler: Optional[Any] = None,
                 n_workers: Optional[int] = None,
                 should_stop: Optional[Callable[[], bool]] = None,
                 deadline: Optional[float] = None) -> np.ndarray:
        r"""
        Estimate one attribution value per patch for a fixed target class.

        :param image: Base image; never modified.
        :param Sequence[Patch] patches: Patch grid of ``image``.
        :param target_class: Label whose score is read from every prediction.
        :param Optional[int] n_samples: Number of trials; ``config.n_samples`` when None.
        :param sampler: Object with ``sample(n)`` (and ``spawn(k)`` for parallel runs);
            a :class:`MaskSampler` seeded with ``config.seed`` when None.
        :param Optional[int] n_workers: Worker threads; ``config.n_workers`` when None.
        :param should_stop: Callback polled between trials; True cancels the run.
        :param Optional[float] deadline: ``time.monotonic()`` value after which the run is cancelled.
        :return np.ndarray: Read-only float64 vector, ``len(patches)`` long.
        :raises InvalidConfiguration: On a non-positive sample or worker count,
            or a fill colour the image cannot hold.
        :raises ClassifierFailure: If any prediction fails or lacks the target class.
        :raises EstimationCancelled: If ``should_stop`` or ``deadline`` fires.
        """
        n_samples = self.config.n_samples if n_samples is None else n_samples
        n_workers = self.config.n_workers if n_workers is None else n_workers
        for name, value in (("n_samples", n_samples), ("n_workers", n_workers)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 1:
                raise InvalidConfiguration(f"{name} must be a positive integer, got {value!r}")
        patches = list(patches)
        if not patches:
            raise DimensionMismatch("cannot estimate attributions over an empty patch grid")
        self.perturber.check(image)
        if sampler is None:
            sampler = MaskSampler(self.config.seed)

        def gate():
            if deadline is not None and time.monotonic() >= deadline:
                raise EstimationCancelled("deadline passed before all trials completed")
            if should_stop is not None and should_stop():
                raise EstimationCancelled("stopped by caller before all trials completed")

        n_workers = min(int(n_workers), int(n_samples))
        if n_workers == 1:
            acc = self._run_trials(image, patches, target_class, n_samples, sampler, gate)
        else:
            acc = self._run_parallel(image, patches, target_class, n_samples, n_workers, sampler, gate)

        values = acc / n_samples
        values.flags.writeable = False
        return values

    def explain(self, image: Any, target: Optional[Hashable] = None, **kwargs) -> AttributionResult:
        r"""
        Explain the classifier's prediction for ``image``.

        Builds the patch grid, classifies the untouched image, resolves ``target``
        against that baseline (top class when None, a rank for an int that is not a
        label, a label otherwise), then runs :meth:`estimate`.

        :param image: Image to explain.
        :param target: Label or rank of the class to explain.
        :param kwargs: Forwarded to :meth:`estimate` (``sampler``, ``should_stop``, ...).
        :return AttributionResult: Values paired with their patches.
        """
        width, height = image_size(image, self.config.channels_first)
        patches = build_patch_grid(width, height, self.config.patch_size)
        self.logger.info("Explaining %dx%d image with %d patches of size %d",
                         width, height, len(patches), self.config.patch_size)

        self.perturber.check(image)
        baseline = self._classify(image)
        target_class = resolve_target(baseline, target)
        self._expected_value = score_for(baseline, target_class)
        self.logger.info("Baseline prediction: %s; explaining class %r (score %.4f)",
                         baseline[:5], target_class, self._expected_value)

        n_samples = kwargs.pop("n_samples", self.config.n_samples)
        with Timer("patch sampling", verbose=False) as timer:
            values = self.estimate(image, patches, target_class, n_samples=n_samples, **kwargs)
        self.logger.info("Evaluated %d perturbations in %.2fs", n_samples, timer.elapsed)

        return AttributionResult(
            patches=tuple(patches),
            values=values,
            target_class=target_class,
            baseline=baseline,
            n_samples=n_samples,
            image_size=(width, height),
        )

    def shap_values(self, image: Any, target: Optional[Hashable] = None, **kwargs) -> np.ndarray:
        r"""
        Attribution vector only, see :meth:`explain`.

        :return np.ndarray: One value per patch, row-major.
        """
        return self.explain(image, target=target, **kwargs).values
