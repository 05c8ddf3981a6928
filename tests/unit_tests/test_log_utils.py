"""
Unit tests for logging utilities.
"""

import logging
import unittest

from log_utils import setup_logging


class TestLogUtils(unittest.TestCase):
    """Test logging utilities."""

    def test_setup_logging_default(self):
        """Test default logging setup quiets HTTP libraries."""
        logger = setup_logging(log_file=None)
        self.assertIsInstance(logger, logging.Logger)
        self.assertEqual(logging.getLogger("urllib3").level, logging.WARNING)

    def test_setup_logging_verbose(self):
        """Test verbose logging lets HTTP library debug output through."""
        logger = setup_logging(verbose=True, log_file=None)
        self.assertIsInstance(logger, logging.Logger)
        self.assertEqual(logging.getLogger("urllib3").level, logging.DEBUG)


if __name__ == "__main__":
    unittest.main()
