"""Tests for the git wrappers."""

from __future__ import annotations

import unittest
from pathlib import Path

from gwt.exceptions import GitCommandError
from gwt.git import Git, parse_worktree_porcelain
from gwt.models import WorktreeEntry
from tests.fakes import FakeRunner, fail, ok

PORCELAIN = """\
worktree /work/proj/.bare
bare

worktree /work/proj/main
HEAD 1111111111111111111111111111111111111111
branch refs/heads/main

worktree /work/proj/detached
HEAD 2222222222222222222222222222222222222222
detached

worktree /work/proj/team-alice-spike
HEAD 3333333333333333333333333333333333333333
branch refs/heads/team/alice/spike
locked
"""


class ParseWorktreePorcelainTests(unittest.TestCase):
    def test_parses_entries(self) -> None:
        entries = parse_worktree_porcelain(PORCELAIN)

        self.assertEqual(
            entries,
            [
                WorktreeEntry(path=Path("/work/proj/.bare"), is_bare=True),
                WorktreeEntry(path=Path("/work/proj/main"), branch="main", head="1" * 40),
                WorktreeEntry(path=Path("/work/proj/detached"), branch=None, head="2" * 40),
                WorktreeEntry(
                    path=Path("/work/proj/team-alice-spike"),
                    branch="team/alice/spike",
                    head="3" * 40,
                ),
            ],
        )

    def test_empty_output(self) -> None:
        self.assertEqual(parse_worktree_porcelain(""), [])


class GitTests(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = FakeRunner()
        self.git = Git(self.runner)
        self.cwd = Path("/work/proj")

    def test_run_raises_with_stderr(self) -> None:
        self.runner.on(["git", "rev-parse", "--git-dir"], fail("fatal: nope"))

        with self.assertRaises(GitCommandError) as caught:
            self.git.git_dir(self.cwd)

        self.assertEqual(caught.exception.returncode, 128)
        self.assertEqual(caught.exception.stderr, "fatal: nope")
        self.assertIn("git rev-parse --git-dir", str(caught.exception))

    def test_stream_raises_on_failure(self) -> None:
        self.runner.on_stream(["git", "worktree", "add", "feat", "feat"], 255)

        with self.assertRaises(GitCommandError) as caught:
            self.git.worktree_add(self.cwd, ["feat", "feat"])

        self.assertEqual(caught.exception.returncode, 255)

    def test_worktree_passthrough_returns_code(self) -> None:
        self.runner.on_stream(["git", "worktree", "prune", "-n"], 3)

        self.assertEqual(self.git.worktree(self.cwd, ["prune", "-n"]), 3)
        self.assertEqual(self.runner.calls[-1], ("stream", ("git", "worktree", "prune", "-n"), self.cwd))

    def test_config_get_missing_key(self) -> None:
        self.runner.on(["git", "config", "remote.origin.fetch"], fail("", returncode=1))

        self.assertIsNone(self.git.config_get(self.cwd, "remote.origin.fetch"))

    def test_symbolic_head(self) -> None:
        self.runner.on(["git", "symbolic-ref", "--short", "HEAD"], ok("develop\n"))

        self.assertEqual(self.git.symbolic_head(self.cwd), "develop")

    def test_clone_runs_from_parent(self) -> None:
        target = Path("/work/proj/.bare")

        self.git.clone_bare("git@example.com:me/proj.git", target)

        self.assertEqual(
            self.runner.calls[-1],
            ("stream", ("git", "clone", "--bare", "git@example.com:me/proj.git", str(target)), Path("/work/proj")),
        )


if __name__ == "__main__":
    unittest.main()
