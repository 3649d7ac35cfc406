import unittest

import numpy as np
import torch
import torch.nn as nn

from patch_shap.classifiers import (
    CallableClassifier,
    Classifier,
    TorchImageClassifier,
    resolve_target,
    score_for,
    to_classification,
)
from patch_shap.errors import ClassifierFailure, DimensionMismatch


class MeanBrightnessNet(nn.Module):
    """Two classes: logit of class 1 grows with mean brightness."""

    def forward(self, x):
        mean = x.mean(dim=(1, 2, 3))
        return torch.stack([torch.zeros_like(mean), 10.0 * (mean - 0.5)], dim=1)


class TestClassificationHelpers(unittest.TestCase):
    def test_to_classification_sorts_descending(self):
        result = to_classification([0.1, 0.7, 0.2], labels=["a", "b", "c"])
        self.assertEqual([label for label, _ in result], ["b", "c", "a"])
        self.assertAlmostEqual(result[0][1], 0.7)

    def test_to_classification_default_labels(self):
        result = to_classification(torch.tensor([0.2, 0.8]))
        self.assertEqual(result[0][0], 1)

    def test_to_classification_label_mismatch(self):
        with self.assertRaises(DimensionMismatch):
            to_classification([0.5, 0.5], labels=["only"])

    def test_resolve_target(self):
        classification = [("cat", 0.6), ("dog", 0.3), ("fox", 0.1)]
        self.assertEqual(resolve_target(classification), "cat")
        self.assertEqual(resolve_target(classification, "dog"), "dog")
        self.assertEqual(resolve_target(classification, 2), "fox")
        with self.assertRaises(ClassifierFailure):
            resolve_target(classification, "owl")
        with self.assertRaises(ClassifierFailure):
            resolve_target(classification, 5)

    def test_resolve_target_prefers_integer_labels(self):
        classification = [(3, 0.9), (0, 0.1)]
        self.assertEqual(resolve_target(classification, 0), 0)

    def test_score_for(self):
        classification = [("cat", 0.6), ("dog", 0.4)]
        self.assertEqual(score_for(classification, "dog"), 0.4)
        with self.assertRaises(ClassifierFailure):
            score_for(classification, "owl")


class TestCallableClassifier(unittest.TestCase):
    def test_wraps_score_vector(self):
        clf = CallableClassifier(lambda img: np.array([0.3, 0.7]), labels=["no", "yes"])
        self.assertIsInstance(clf, Classifier)
        self.assertEqual(clf.predict(None)[0], ("yes", 0.7))

    def test_passes_through_classification(self):
        clf = CallableClassifier(lambda img: [("a", 0.2), ("b", 0.8)])
        self.assertEqual(clf.predict(None), [("b", 0.8), ("a", 0.2)])


class TestTorchImageClassifier(unittest.TestCase):
    def test_brightness_model(self):
        clf = TorchImageClassifier(MeanBrightnessNet(), labels=["dark", "bright"])
        bright = np.full((8, 8, 3), 255, dtype=np.uint8)
        dark = np.zeros((8, 8, 3), dtype=np.uint8)
        self.assertEqual(clf.predict(bright)[0][0], "bright")
        self.assertEqual(clf.predict(dark)[0][0], "dark")
        probs = [p for _, p in clf.predict(bright)]
        self.assertAlmostEqual(sum(probs), 1.0, places=5)

    def test_channels_first_tensor(self):
        clf = TorchImageClassifier(MeanBrightnessNet(), channels_first=True, scale=1.0)
        result = clf.predict(torch.ones(3, 4, 4))
        self.assertEqual(result[0][0], 1)

    def test_transform_applied(self):
        calls = []

        def transform(x):
            calls.append(tuple(x.shape))
            return x

        clf = TorchImageClassifier(MeanBrightnessNet(), transform=transform)
        clf.predict(np.zeros((5, 6, 3), dtype=np.uint8))
        self.assertEqual(calls, [(3, 5, 6)])

    def test_rejects_batches(self):
        clf = TorchImageClassifier(MeanBrightnessNet())
        with self.assertRaises(DimensionMismatch):
            clf.predict(np.zeros((2, 4, 4, 3)))


if __name__ == "__main__":
    unittest.main()
