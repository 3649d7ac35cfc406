import os
import runpy
import unittest

import patch_shap
from patch_shap import BaseExplainer, explainers, tools


class TestInit(unittest.TestCase):
    def test_package_import(self):
        self.assertIsNotNone(patch_shap)

    def test_version_exists(self):
        self.assertTrue(hasattr(patch_shap, '__version__'))
        self.assertEqual(patch_shap.__version__, "0.1.0")

    def test_base_explainer_import(self):
        self.assertIsNotNone(BaseExplainer)

    def test_explainers_import(self):
        self.assertTrue(hasattr(explainers, "PatchKernelSHAPExplainer"))
        self.assertTrue(issubclass(explainers.PatchKernelSHAPExplainer, BaseExplainer))

    def test_tools_import(self):
        self.assertTrue(hasattr(tools, "Timer"))

    def test_all_exports_resolve(self):
        for name in patch_shap.__all__:
            with self.subTest(name=name):
                self.assertTrue(hasattr(patch_shap, name))

    def test_error_hierarchy(self):
        self.assertTrue(issubclass(patch_shap.InvalidConfiguration, ValueError))
        self.assertTrue(issubclass(patch_shap.ClassifierFailure, patch_shap.PatchShapError))
        self.assertTrue(issubclass(patch_shap.DimensionMismatch, patch_shap.PatchShapError))
        self.assertTrue(issubclass(patch_shap.EstimationCancelled, patch_shap.PatchShapError))


class TestDocsConfig(unittest.TestCase):
    def test_intersphinx_mapping_has_its_extension(self):
        conf_path = os.path.join(os.path.dirname(__file__), os.pardir, 'docs', 'source', 'conf.py')
        conf = runpy.run_path(conf_path)
        self.assertTrue(conf['intersphinx_mapping'])
        self.assertIn('sphinx.ext.intersphinx', conf['extensions'])


if __name__ == '__main__':
    unittest.main()
