import unittest

import numpy as np

from patch_shap.algorithms.patch_grid import Patch, build_patch_grid, grid_shape, patch_values_to_map
from patch_shap.errors import DimensionMismatch, InvalidConfiguration


class TestBuildPatchGrid(unittest.TestCase):
    def assert_partition(self, width, height, patch_size):
        patches = build_patch_grid(width, height, patch_size)
        coverage = np.zeros((height, width), dtype=np.int32)
        for p in patches:
            self.assertGreaterEqual(p.width, 1)
            self.assertGreaterEqual(p.height, 1)
            coverage[p.slices] += 1
        # every pixel covered exactly once
        self.assertTrue(np.all(coverage == 1), f"{width}x{height} / {patch_size}")
        self.assertEqual(sum(p.area for p in patches), width * height)

    def test_partition_property(self):
        for width, height, size in [(1, 1, 1), (64, 64, 32), (33, 33, 32), (7, 13, 3),
                                    (100, 1, 9), (5, 5, 10), (31, 17, 4), (2, 3, 1)]:
            with self.subTest(width=width, height=height, size=size):
                self.assert_partition(width, height, size)

    def test_concrete_scenario_64x64(self):
        patches = build_patch_grid(64, 64, 32)
        self.assertEqual(patches, [
            Patch(0, 0, 32, 32), Patch(32, 0, 32, 32),
            Patch(0, 32, 32, 32), Patch(32, 32, 32, 32),
        ])

    def test_edge_scenario_33x33_clips_border_patches(self):
        patches = build_patch_grid(33, 33, 32)
        self.assertEqual(len(patches), 4)
        self.assertEqual(patches[1], Patch(32, 0, 1, 32))
        self.assertEqual(patches[2], Patch(0, 32, 32, 1))
        self.assertEqual(patches[3], Patch(32, 32, 1, 1))

    def test_patch_larger_than_image_yields_single_patch(self):
        self.assertEqual(build_patch_grid(10, 20, 50), [Patch(0, 0, 10, 20)])

    def test_row_major_order_is_deterministic(self):
        first = build_patch_grid(50, 30, 16)
        second = build_patch_grid(50, 30, 16)
        self.assertEqual(first, second)
        origins = [(p.y, p.x) for p in first]
        self.assertEqual(origins, sorted(origins))

    def test_rejects_non_positive_arguments(self):
        for args in [(0, 10, 4), (10, 0, 4), (10, 10, 0), (10, 10, -3), (10, 10, 2.5), (10, 10, True)]:
            with self.subTest(args=args):
                with self.assertRaises(InvalidConfiguration):
                    build_patch_grid(*args)

    def test_patch_is_immutable(self):
        patch = Patch(0, 0, 2, 2)
        with self.assertRaises(Exception):
            patch.x = 5

    def test_contains(self):
        patch = Patch(4, 2, 3, 2)
        self.assertTrue(patch.contains(4, 2))
        self.assertTrue(patch.contains(6, 3))
        self.assertFalse(patch.contains(7, 3))
        self.assertFalse(patch.contains(4, 4))


class TestGridHelpers(unittest.TestCase):
    def test_grid_shape_matches_grid(self):
        cols, rows = grid_shape(33, 70, 32)
        self.assertEqual((cols, rows), (2, 3))
        self.assertEqual(len(build_patch_grid(33, 70, 32)), cols * rows)

    def test_values_to_map(self):
        patches = build_patch_grid(4, 2, 2)
        heatmap = patch_values_to_map(patches, [1.0, -1.0], 4, 2)
        np.testing.assert_array_equal(heatmap, [[1, 1, -1, -1], [1, 1, -1, -1]])

    def test_values_to_map_length_mismatch(self):
        patches = build_patch_grid(4, 2, 2)
        with self.assertRaises(DimensionMismatch):
            patch_values_to_map(patches, [1.0], 4, 2)


if __name__ == "__main__":
    unittest.main()
