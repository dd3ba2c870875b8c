#!/usr/bin/env python3
"""Run the signal_story test suite: ``python tests/run_tests.py [pattern]``."""
import unittest
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

if __name__ == '__main__':
    # e.g. "test_cl*.py" to run only the clustering tests
    pattern = sys.argv[1] if len(sys.argv) > 1 else 'test_*.py'
    suite = unittest.defaultTestLoader.discover(start_dir=os.path.dirname(__file__), pattern=pattern)

    result = unittest.TextTestRunner(verbosity=2).run(suite)
    sys.exit(0 if result.wasSuccessful() else 1)
