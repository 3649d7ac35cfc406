import unittest
from unittest.mock import Mock

import numpy as np

from patch_shap.base_explainer import BaseExplainer


class MockExplainer(BaseExplainer):
    def explain(self, image, target=None, **kwargs):
        return {"target": target, "values": self.shap_values(image, target)}

    def shap_values(self, image, target=None, **kwargs):
        # Simple mock implementation that returns zeros
        return np.zeros(4)


class TestBaseExplainer(unittest.TestCase):
    def test_base_explainer_init(self):
        model = Mock()
        explainer = MockExplainer(model)
        self.assertIs(explainer.model, model)

    def test_abstract_class_cannot_instantiate(self):
        with self.assertRaises(TypeError):
            BaseExplainer(Mock())

    def test_subclass_must_implement_both_methods(self):
        class IncompleteExplainer(BaseExplainer):
            def explain(self, image, target=None, **kwargs):
                return None

        with self.assertRaises(TypeError):
            IncompleteExplainer(Mock())

    def test_base_explainer_call(self):
        explainer = MockExplainer(Mock())
        result = explainer(np.zeros((8, 8, 3)), target="cat")
        self.assertEqual(result["target"], "cat")
        self.assertTrue(np.array_equal(result["values"], np.zeros(4)))

    def test_expected_value_default(self):
        self.assertIsNone(MockExplainer(Mock()).expected_value)

    def test_expected_value_with_attribute(self):
        explainer = MockExplainer(Mock())
        explainer._expected_value = 0.5
        self.assertEqual(explainer.expected_value, 0.5)


if __name__ == "__main__":
    unittest.main()
