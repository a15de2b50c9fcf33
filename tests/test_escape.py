import math
import unittest

import numpy as np

from mandelbrot_ppm.complex64 import Complex64
from mandelbrot_ppm.escape import evaluate, evaluate_grid


class EvaluateTests(unittest.TestCase):
    def test_origin_never_escapes(self):
        self.assertEqual(evaluate(Complex64(0.0, 0.0)), 0)

    def test_far_point_escapes_quickly(self):
        # z1 = 2+2i already has squared magnitude 8.
        self.assertEqual(evaluate(Complex64(2.0, 2.0)), 2)

    def test_period_two_cycle_stays_inside(self):
        self.assertEqual(evaluate(Complex64(-1.0, 0.0)), 0)

    def test_threshold_comparison_is_strict(self):
        # The orbit of -2 settles on 2, whose squared magnitude equals the threshold.
        self.assertEqual(evaluate(Complex64(-2.0, 0.0)), 0)

    def test_escape_iteration_outside_the_set(self):
        self.assertEqual(evaluate(Complex64(0.5, 0.5)), 6)

    def test_intensity_is_bounded_by_max_iterations(self):
        self.assertEqual(evaluate(Complex64(2.0, 2.0), max_iterations=1), 0)
        self.assertEqual(evaluate(Complex64(0.0, 0.0), escape_threshold=-1.0), 1)
        for re in np.linspace(-2.0, 1.0, 7):
            value = evaluate(Complex64(float(re), 0.3))
            self.assertTrue(0 <= value <= 254)

    def test_nan_point_reports_inside(self):
        self.assertEqual(evaluate(Complex64(math.nan, 0.0)), 0)


class EvaluateGridTests(unittest.TestCase):
    def test_grid_matches_scalar_on_known_points(self):
        re = np.array([-2.0, -1.0, 0.0, 0.5, 2.0])
        im = np.array([0.0, 0.5, 2.0])
        counts = evaluate_grid(re, im)
        self.assertEqual(counts.shape, (3, 5))
        self.assertEqual(counts.dtype, np.int32)
        for row, y in enumerate(im):
            for column, x in enumerate(re):
                self.assertEqual(
                    counts[row, column],
                    evaluate(Complex64(float(x), float(y))),
                    msg=f"mismatch at ({x}, {y})",
                )

    def test_grid_respects_iteration_bound(self):
        counts = evaluate_grid(np.array([2.0]), np.array([2.0]), max_iterations=1)
        self.assertEqual(counts.tolist(), [[0]])

    def test_empty_grid(self):
        counts = evaluate_grid(np.array([], dtype=np.float64), np.array([0.0]))
        self.assertEqual(counts.shape, (1, 0))


if __name__ == "__main__":
    unittest.main()
