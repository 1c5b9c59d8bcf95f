import logging
import unittest

from gradepoint.config.logger import HANDLER_NAME, PACKAGE_LOGGER, get_logger


class LoggerTests(unittest.TestCase):
    def test_children_hang_off_package_logger(self):
        self.assertEqual(get_logger("gpa").name, "gradepoint.gpa")
        self.assertIs(get_logger(), logging.getLogger(PACKAGE_LOGGER))

    def test_handler_installed_once(self):
        get_logger("gpa")
        get_logger("validation")
        root = logging.getLogger(PACKAGE_LOGGER)
        named = [h for h in root.handlers if h.get_name() == HANDLER_NAME]
        self.assertEqual(len(named), 1)


if __name__ == "__main__":
    unittest.main()
