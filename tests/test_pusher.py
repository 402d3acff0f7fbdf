import unittest
from pathlib import Path
from unittest.mock import patch

import click
from click.testing import CliRunner

import git_wizard.pusher as pusher
from git_wizard.config.loader import DEFAULT_CONFIG
from git_wizard.errors import PushFailed
from git_wizard.pusher import PushLineKind, PushPlan
from git_wizard.ui import NullRenderer
from git_wizard.vcs.git_client import GitResult, OutstandingCommits


PUSH_OUTPUT = (
    "Enumerating objects: 5, done.\n"
    "Counting objects: 100% (5/5), done.\n"
    "\n"
    "Writing objects: 100% (3/3), 300 bytes | 300.00 KiB/s, done.\n"
    "Total 3 (delta 1), reused 0 (delta 0)\n"
    "remote: Resolving deltas: 100% (1/1)\n"
    "To github.com:me/site.git\n"
    "   1a2b3c4..5d6e7f8  main -> main\n"
)


class DummyGitClient:
    def __init__(self, branch="main", remotes=None, outstanding=None, push_result=None):
        self.repo_root = Path("/repo")
        self.branch = branch
        self._remotes = remotes if remotes is not None else ["origin"]
        self.outstanding = outstanding or OutstandingCommits(commits=["abc123 Add page"])
        self.push_result = push_result or GitResult(0, PUSH_OUTPUT)
        self.push_called = []
        self.outstanding_queries = []

    def get_current_branch(self):
        return self.branch

    def remotes(self):
        return self._remotes

    def unpushed_commits(self, remote, remote_branch, local_branch):
        self.outstanding_queries.append((remote, remote_branch, local_branch))
        return self.outstanding

    def push(self, remote, local_branch, remote_branch, force=False):
        self.push_called.append((remote, local_branch, remote_branch, force))
        return self.push_result


class RecordingRenderer:
    def __init__(self):
        self.entered = 0
        self.exited = 0

    def __enter__(self):
        self.entered += 1
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.exited += 1
        return False


class TestPushHelpers(unittest.TestCase):
    def test_default_remote(self) -> None:
        self.assertEqual(pusher.default_remote(["upstream", "origin"]), "origin")
        self.assertEqual(pusher.default_remote(["upstream", "fork"]), "upstream")
        self.assertEqual(pusher.default_remote(["fork", "github"], preferred="github"), "github")

    def test_command_line(self) -> None:
        plan = PushPlan("origin", "main", "release", force=True)
        self.assertEqual(plan.command_line(), "git push --force origin main:release")
        self.assertEqual(PushPlan("origin", "main", "main").command_line(), "git push origin main:main")

    def test_classify_push_line(self) -> None:
        cases = [
            ("Enumerating objects: 5, done.", PushLineKind.ENUMERATING),
            ("Counting objects: 100% (5/5), done.", PushLineKind.COUNTING),
            ("Compressing objects: 100% (2/2), done.", PushLineKind.COMPRESSING),
            ("Writing objects: 100% (3/3)", PushLineKind.WRITING),
            ("Total 3 (delta 1), reused 0 (delta 0)", PushLineKind.TOTAL),
            ("remote: Create a pull request", PushLineKind.REMOTE),
            ("   1a2b3c4..5d6e7f8  main -> main", PushLineKind.REF_UPDATE),
            ("To github.com:me/site.git", PushLineKind.OTHER),
            (" * [new branch]      topic -> topic", PushLineKind.OTHER),
        ]
        for line, kind in cases:
            with self.subTest(line=line):
                self.assertEqual(pusher.classify_push_line(line), kind)

    def test_format_push_output_drops_blank_lines(self) -> None:
        formatted = click.unstyle(pusher.format_push_output(PUSH_OUTPUT))
        lines = formatted.split("\n")
        self.assertEqual(len(lines), 7)
        self.assertIn("   1a2b3c4..5d6e7f8  main -> main", lines)
        self.assertNotIn("", lines)

    def test_format_push_output_keeps_last_progress_frame(self) -> None:
        formatted = pusher.format_push_output("Writing objects:  50%\rWriting objects: 100%, done.\n")
        self.assertEqual(click.unstyle(formatted), "Writing objects: 100%, done.")

    def test_execute_push_stops_renderer_on_failure(self) -> None:
        client = DummyGitClient(push_result=GitResult(1, "! [rejected] main -> main (fetch first)\n"))
        renderer = RecordingRenderer()
        with self.assertRaises(PushFailed) as ctx:
            pusher.execute_push(client, PushPlan("origin", "main", "main"), renderer)
        self.assertEqual((renderer.entered, renderer.exited), (1, 1))
        self.assertIn("rejected", ctx.exception.output)

    def test_execute_push_success_returns_output(self) -> None:
        client = DummyGitClient()
        renderer = RecordingRenderer()
        output = pusher.execute_push(client, PushPlan("origin", "main", "main"), renderer)
        self.assertEqual(output, PUSH_OUTPUT)
        self.assertEqual((renderer.entered, renderer.exited), (1, 1))
        self.assertEqual(len(client.push_called), 1)

    def test_show_outstanding_truncates(self) -> None:
        runner = CliRunner()

        @click.command()
        def show():
            pusher.show_outstanding(
                OutstandingCommits(commits=[f"c{i} Commit {i}" for i in range(8)]), limit=5
            )

        result = runner.invoke(show)
        self.assertIn("c4 Commit 4", result.output)
        self.assertNotIn("c5 Commit 5", result.output)
        self.assertIn("... and 3 more commits", result.output)


class TestPusherCLI(unittest.TestCase):
    def invoke(self, dummy, user_input, config=None):
        runner = CliRunner()
        with patch.object(pusher.GitClient, "discover", return_value=dummy):
            with patch.object(pusher, "load_config", return_value=config or dict(DEFAULT_CONFIG)):
                with patch.object(pusher, "make_renderer", return_value=NullRenderer()):
                    return runner.invoke(pusher.main, [], input=user_input)

    def test_push_with_defaults(self) -> None:
        dummy = DummyGitClient(remotes=["upstream", "origin"])
        result = self.invoke(dummy, "\n\n\ny\n")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(dummy.push_called, [("origin", "main", "main", False)])
        self.assertEqual(dummy.outstanding_queries, [("origin", "main", "main")])
        self.assertIn("abc123 Add page", result.output)
        self.assertIn("git push origin main:main", result.output)
        self.assertIn("Changes pushed successfully", result.output)

    def test_force_push_with_remapped_branch(self) -> None:
        dummy = DummyGitClient(remotes=["origin"])
        result = self.invoke(dummy, "1\nrelease\ny\ny\n")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("(FORCE PUSH)", result.output)
        self.assertEqual(dummy.push_called, [("origin", "main", "release", True)])
        self.assertEqual(dummy.outstanding_queries, [("origin", "release", "main")])

    def test_configured_default_remote(self) -> None:
        config = dict(DEFAULT_CONFIG, default_remote="fork")
        dummy = DummyGitClient(remotes=["origin", "fork"])
        result = self.invoke(dummy, "\n\n\ny\n", config=config)
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(dummy.push_called[0][0], "fork")

    def test_new_branch_skips_no_commit_confirmation(self) -> None:
        dummy = DummyGitClient(outstanding=OutstandingCommits(new_branch=True))
        result = self.invoke(dummy, "\n\n\ny\n")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("new branch on the remote", result.output)
        self.assertNotIn("Continue with push anyway", result.output)
        self.assertEqual(len(dummy.push_called), 1)

    def test_nothing_to_push_declined_is_not_an_error(self) -> None:
        dummy = DummyGitClient(outstanding=OutstandingCommits(commits=[]))
        result = self.invoke(dummy, "\n\n\nn\n")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("No unpushed commits detected", result.output)
        self.assertEqual(dummy.push_called, [])

    def test_nothing_to_push_confirmed(self) -> None:
        dummy = DummyGitClient(outstanding=OutstandingCommits(commits=[]))
        result = self.invoke(dummy, "\n\n\ny\ny\n")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(len(dummy.push_called), 1)

    def test_declining_final_confirmation(self) -> None:
        dummy = DummyGitClient()
        result = self.invoke(dummy, "\n\n\nn\n")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Push canceled", result.output)
        self.assertEqual(dummy.push_called, [])

    def test_push_failure_dumps_output(self) -> None:
        dummy = DummyGitClient(
            push_result=GitResult(1, "! [rejected]        main -> main (non-fast-forward)\n")
        )
        result = self.invoke(dummy, "\n\n\ny\n")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("non-fast-forward", result.output)
        self.assertIn("Push failed!", result.output)
        self.assertEqual(len(dummy.push_called), 1)

    def test_detached_head(self) -> None:
        dummy = DummyGitClient(branch="")
        result = self.invoke(dummy, "")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("detached HEAD", result.output)

    def test_no_remotes(self) -> None:
        dummy = DummyGitClient(remotes=[])
        result = self.invoke(dummy, "")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("No remotes configured", result.output)

    def test_abort_at_prompt(self) -> None:
        dummy = DummyGitClient()
        with patch.object(pusher.ui, "prompt_select", side_effect=click.Abort()):
            result = self.invoke(dummy, "")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Push canceled", result.output)
        self.assertEqual(dummy.push_called, [])


if __name__ == "__main__":
    unittest.main()
