"""
Patch Mask Sampling
===================

Draws random patch-inclusion masks. Every entry is an independent fair coin
(Bernoulli(0.5)): ``True`` keeps the patch visible, ``False`` replaces it with the
fill colour.

Randomness comes from an explicit :class:`numpy.random.Generator` owned by the
sampler, never from process-wide state, so runs are reproducible given a seed.
Parallel workers get their own independent streams through :meth:`MaskSampler.spawn`.
"""

from typing import List, Union

import numpy as np

from patch_shap.errors import InvalidConfiguration

__all__ = ["MaskSampler", "RandomState"]

RandomState = Union[None, int, np.random.SeedSequence, np.random.Generator]


class MaskSampler:
    """Bernoulli(0.5) mask generator over a fixed number of patches.

    :param random_state: ``None`` for fresh OS entropy, an ``int`` seed, a
        :class:`numpy.random.SeedSequence`, or an existing ``Generator`` to draw from.
    """

    def __init__(self, random_state: RandomState = None):
        if isinstance(random_state, np.random.Generator):
            self.rng = random_state
            self._seed_seq = None
        else:
            if not isinstance(random_state, np.random.SeedSequence):
                random_state = np.random.SeedSequence(random_state)
            self._seed_seq = random_state
            self.rng = np.random.default_rng(random_state)

    def sample(self, n: int) -> np.ndarray:
        """Draw one mask.

        :param int n: Number of patches.
        :return np.ndarray: Boolean array of length ``n``.
        """
        if n < 0:
            raise InvalidConfiguration(f"mask length must be non-negative, got {n}")
        return self.rng.integers(0, 2, size=n, dtype=np.int8).astype(bool)

    def spawn(self, k: int) -> List["MaskSampler"]:
        """Create ``k`` samplers with statistically independent streams.

        :param int k: Number of children, typically one per worker.
        :return List[MaskSampler]: Child samplers.
        """
        if k < 1:
            raise InvalidConfiguration(f"cannot spawn {k} samplers")
        if self._seed_seq is not None:
            return [MaskSampler(child) for child in self._seed_seq.spawn(k)]
        # A bare Generator carries no SeedSequence we can reach portably, so
        # children are seeded from its own stream.
        return [MaskSampler(np.random.SeedSequence(int(s)))
                for s in self.rng.integers(0, 2**63 - 1, size=k)]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(rng={self.rng!r})"
