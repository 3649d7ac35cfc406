"""Set random seed for reproducible model inference."""

import random

import numpy as np
import torch


def set_global_seed(seed: int) -> None:
    """Seed Python, NumPy and torch, and make cuDNN deterministic.

    Mask sampling does not depend on this: it uses its own generator. This only
    pins down the model side (dropout left on by mistake, nondeterministic kernels).

    :param int seed: Random seed to set.
    """
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)
    torch.cuda.manual_seed_all(seed)
    torch.backends.cudnn.deterministic = True
    torch.backends.cudnn.benchmark = False
