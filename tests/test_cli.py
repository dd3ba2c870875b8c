import unittest
from unittest.mock import patch
import io
import json
import os
import sys
from contextlib import redirect_stderr, redirect_stdout
from datetime import datetime, timezone

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from signal_story.__main__ import main
from signal_story.models import EventState, RunSummary

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _summary(success=True):
    return RunSummary(job_name="design-week", started_at=NOW, detected=1).finalize(success, NOW)


class TestCli(unittest.TestCase):

    def test_list(self):
        out = io.StringIO()
        with redirect_stdout(out):
            self.assertEqual(main(["--list"]), 0)
        self.assertIn("nuisance-watch", out.getvalue())
        self.assertIn("art-fairs", out.getvalue())

    @patch("signal_story.__main__.build_job")
    def test_runs_job_with_options(self, build_job):
        build_job.return_value.run.return_value = _summary()
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(["design-week", "--sample", "--state", "preview", "--days", "3", "--target", "brera"])

        self.assertEqual(code, 0)
        build_job.assert_called_once_with("design-week")
        options = build_job.return_value.run.call_args[0][0]
        self.assertTrue(options.sample)
        self.assertEqual(options.sample_state, EventState.PREVIEW)
        self.assertEqual(options.days, 3)
        self.assertEqual(options.target, "brera")
        self.assertEqual(json.loads(out.getvalue())["detected"], 1)

    @patch("signal_story.__main__.build_job")
    def test_failed_run_exit_code(self, build_job):
        build_job.return_value.run.return_value = _summary(success=False)
        with redirect_stdout(io.StringIO()):
            self.assertEqual(main(["nuisance-watch"]), 1)

    @patch("signal_story.__main__.build_job")
    def test_usage_errors(self, build_job):
        for argv in ([], ["nuisance-watch", "--days", "0"], ["weather-watch"]):
            with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit):
                main(argv)
        build_job.assert_not_called()


if __name__ == '__main__':
    unittest.main()
