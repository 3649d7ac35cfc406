"""
Command-line driver: explain one image with a TorchScript classifier.

    patch-shap portrait.png --model resnet50.pt --labels imagenet.txt --n-samples 200

Prints the baseline prediction and one attribution value per patch, and optionally
writes the full result as JSON.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import cv2
import numpy as np
import torch

from patch_shap.classifiers import TorchImageClassifier
from patch_shap.config import AttributionConfig
from patch_shap.errors import InvalidConfiguration, PatchShapError
from patch_shap.explainers import PatchKernelSHAPExplainer
from patch_shap.utils.logging import get_logger
from patch_shap.utils.seed import set_global_seed


def _parse_color(text: str):
    try:
        parts = [float(p) if "." in p else int(p) for p in text.split(",")]
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid mask color {text!r}") from None
    return parts[0] if len(parts) == 1 else tuple(parts)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="patch-shap",
        description="Estimate per-patch attributions for an image classifier's prediction.",
    )
    parser.add_argument("image", type=Path, help="Image file to explain")
    parser.add_argument("--model", type=Path, required=True, help="TorchScript classifier (.pt)")
    parser.add_argument("--labels", type=Path, default=None, help="Class names, one per line")
    parser.add_argument("--config", type=Path, default=None, help="YAML, JSON or TOML settings")
    parser.add_argument("--target", default=None, help="Class label to explain (default: top prediction)")
    parser.add_argument("--patch-size", type=int, default=None)
    parser.add_argument("--n-samples", type=int, default=None)
    parser.add_argument("--mask-color", type=_parse_color, default=None, help="e.g. 0 or 127,127,127")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--workers", type=int, default=None)
    parser.add_argument("--device", default="cpu")
    parser.add_argument("--output", type=Path, default=None, help="Write the result as JSON")
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def load_image(path: Path) -> np.ndarray:
    """Read an image file as an ``(H, W, 3)`` uint8 RGB array."""
    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None:
        raise InvalidConfiguration(f"could not read image {path}")
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


def load_labels(path: Optional[Path]) -> Optional[List[str]]:
    if path is None:
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return [line.strip() for line in f if line.strip()]
    except (OSError, UnicodeDecodeError) as exc:
        raise InvalidConfiguration(f"could not read labels {path}: {exc}") from exc


def load_model(path: Path, device: str) -> torch.nn.Module:
    """Load a TorchScript classifier onto ``device``."""
    try:
        return torch.jit.load(str(path), map_location=device)
    except (OSError, RuntimeError, ValueError) as exc:
        raise InvalidConfiguration(f"could not load model {path}: {exc}") from exc


def resolve_config(args: argparse.Namespace, logger: Optional[logging.Logger] = None) -> AttributionConfig:
    config = AttributionConfig.from_file(str(args.config)) if args.config else AttributionConfig()
    if config.channels_first:
        # load_image always yields (H, W, C)
        if logger is not None:
            logger.warning("Ignoring channels_first from %s: images are read as (H, W, C)", args.config)
        config = config.replace(channels_first=False)
    return config.replace(
        patch_size=args.patch_size,
        n_samples=args.n_samples,
        mask_color=args.mask_color,
        seed=args.seed,
        n_workers=args.workers,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = get_logger("patch_shap", log_to_file=args.log_file,
                        level=logging.DEBUG if args.verbose else logging.INFO)
    try:
        config = resolve_config(args, logger)
        if config.seed is not None:
            set_global_seed(config.seed)
        image = load_image(args.image)
        labels = load_labels(args.labels)
        model = load_model(args.model, args.device)
        classifier = TorchImageClassifier(model, labels=labels, device=torch.device(args.device))

        target = args.target
        if target is not None and labels is None and target.isdigit():
            target = int(target)
        result = PatchKernelSHAPExplainer(classifier, config, logger=logger).explain(image, target=target)
    except PatchShapError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        return 2

    print(f"Baseline Prediction: {result.baseline[:5]}")
    print(f"Target class: {result.target_class}")
    print(f"SHAP Values: {np.array2string(result.values, precision=4, separator=', ')}")
    if args.output is not None:
        args.output.write_text(json.dumps(result.to_dict(), indent=2))
        logger.info("Wrote %s", args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
