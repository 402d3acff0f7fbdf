"""Tests for the shared prompt, display and error-mapping helpers."""

import time
import unittest
from unittest.mock import patch

import click

from git_wizard import ui
from git_wizard.config.loader import ConfigError
from git_wizard.errors import EmptySelection, NoStagedFiles, UserCancelled
from git_wizard.vcs.git_client import FileStatus, GitError


class TestParseSelection(unittest.TestCase):
    def test_numbers_and_ranges(self) -> None:
        self.assertEqual(ui.parse_selection("1, 3", 4), [0, 2])
        self.assertEqual(ui.parse_selection("2-4", 4), [1, 2, 3])
        self.assertEqual(ui.parse_selection("3 1 3", 4), [2, 0])

    def test_everything(self) -> None:
        self.assertEqual(ui.parse_selection("all", 3), [0, 1, 2])
        self.assertEqual(ui.parse_selection("*", 2), [0, 1])

    def test_empty(self) -> None:
        self.assertEqual(ui.parse_selection("  ", 3), [])

    def test_invalid(self) -> None:
        for raw in ("0", "5", "x", "3-1", "1-9"):
            with self.subTest(raw=raw):
                with self.assertRaises(ValueError):
                    ui.parse_selection(raw, 4)


class TestDisplayUtilities(unittest.TestCase):
    @patch("git_wizard.ui.click.echo")
    def test_print_error_goes_to_stderr(self, mock_echo) -> None:
        ui.print_error("boom")
        self.assertIn("boom", str(mock_echo.call_args))
        self.assertTrue(mock_echo.call_args[1]["err"])

    @patch("git_wizard.ui.click.echo")
    def test_message_box_wraps_long_lines(self, mock_echo) -> None:
        ui.print_message_box("feat: Add page\n\n" + "y" * 60)
        lines = [click.unstyle(call[0][0]) for call in mock_echo.call_args_list]
        # top, header, blank, two chunks of the long line, bottom
        self.assertEqual(len(lines), 6)
        self.assertTrue(lines[0].startswith("╭"))
        self.assertTrue(lines[-1].startswith("╰"))
        self.assertEqual(len({len(line) for line in lines}), 1)

    def test_status_label(self) -> None:
        self.assertEqual(click.unstyle(ui.status_label(FileStatus.UNTRACKED)), "[Untracked]")


class TestSpinner(unittest.TestCase):
    @patch("git_wizard.ui.click.echo")
    def test_spinner_animates_and_stops(self, mock_echo) -> None:
        spinner = ui.Spinner("Pushing", interval=0.01)
        with spinner:
            time.sleep(0.05)
        self.assertGreaterEqual(spinner.frames_drawn, 1)
        self.assertFalse(spinner._thread.is_alive())
        frames_after_exit = spinner.frames_drawn
        time.sleep(0.03)
        self.assertEqual(spinner.frames_drawn, frames_after_exit)

    @patch("git_wizard.ui.click.echo")
    def test_spinner_stops_when_work_fails(self, mock_echo) -> None:
        spinner = ui.Spinner("Pushing", interval=0.01)
        with self.assertRaises(RuntimeError):
            with spinner:
                raise RuntimeError("push crashed")
        self.assertFalse(spinner._thread.is_alive())


class TestRunWizard(unittest.TestCase):
    def exit_code_for(self, flow) -> int:
        with patch("git_wizard.ui.click.echo"):
            with self.assertRaises(click.exceptions.Exit) as ctx:
                ui.run_wizard(flow, "Canceled")
        return ctx.exception.exit_code

    def test_normal_completion(self) -> None:
        self.assertEqual(self.exit_code_for(lambda: 0), 0)

    def test_wizard_errors(self) -> None:
        for exc in (EmptySelection("x"), NoStagedFiles("x"), UserCancelled("x")):
            with self.subTest(exc=exc):
                def flow(exc=exc):
                    raise exc
                self.assertEqual(self.exit_code_for(flow), 1)

    def test_abort_git_and_config_errors(self) -> None:
        for exc in (click.Abort(), GitError("bad"), ConfigError("bad")):
            with self.subTest(exc=exc):
                def flow(exc=exc):
                    raise exc
                self.assertEqual(self.exit_code_for(flow), 1)

    def test_unexpected_error_is_logged(self) -> None:
        def flow():
            raise KeyError("surprise")

        with patch("git_wizard.ui.logging.exception") as mock_log:
            self.assertEqual(self.exit_code_for(flow), 1)
        mock_log.assert_called_once()


if __name__ == "__main__":
    unittest.main()
