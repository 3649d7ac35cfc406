import logging
import time
import unittest

from patch_shap.tools.timer import Timer
from patch_shap.utils.logging import get_logger


class TestTimer(unittest.TestCase):
    def test_silent_timer_records_elapsed(self):
        with Timer("sleep", verbose=False) as t:
            time.sleep(0.01)
        self.assertGreaterEqual(t.elapsed, 0.005)

    def test_verbose_timer_logs(self):
        with self.assertLogs("patch_shap.tools.timer", level="INFO") as logs:
            with Timer("block"):
                pass
        self.assertIn("block took", logs.output[0])

    def test_elapsed_recorded_on_exception(self):
        timer = Timer(verbose=False)
        with self.assertRaises(KeyError):
            with timer:
                raise KeyError("x")
        self.assertIsNotNone(timer.elapsed)


class TestGetLogger(unittest.TestCase):
    def test_handlers_not_duplicated(self):
        get_logger("patch_shap.test_logger")
        logger = get_logger("patch_shap.test_logger", level=logging.DEBUG)
        self.assertEqual(len(logger.handlers), 1)
        self.assertEqual(logger.level, logging.DEBUG)

    def test_silent_logger(self):
        logger = get_logger("patch_shap.silent", log_to_console=False)
        self.assertIsInstance(logger.handlers[0], logging.NullHandler)


if __name__ == "__main__":
    unittest.main()
