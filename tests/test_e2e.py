"""End-to-end tests against a real git binary."""

from __future__ import annotations

import io
import os
import shutil
import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from rich.console import Console

from gwt.runner import Environment
from gwt.worktrees import InitOptions, WorktreeService

GIT = shutil.which("git")
HAS_BASH = os.path.exists("/bin/bash")

ISOLATED_ENV = {
    "GIT_CONFIG_NOSYSTEM": "1",
    "GIT_AUTHOR_NAME": "gwt tests",
    "GIT_AUTHOR_EMAIL": "gwt@example.com",
    "GIT_COMMITTER_NAME": "gwt tests",
    "GIT_COMMITTER_EMAIL": "gwt@example.com",
}
LEAKY_VARS = ("GIT_DIR", "GIT_WORK_TREE", "GIT_INDEX_FILE", "GIT_COMMON_DIR", "GWT_CD_FILE")


@unittest.skipUnless(GIT and HAS_BASH, "requires git and bash")
class BareWorkflowTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.tmp = Path(os.path.realpath(self._tmp.name))

        env = dict(ISOLATED_ENV, HOME=str(self.tmp), XDG_CONFIG_HOME=str(self.tmp / ".config"))
        patcher = mock.patch.dict(os.environ, env)
        patcher.start()
        self.addCleanup(patcher.stop)
        for name in LEAKY_VARS:
            os.environ.pop(name, None)

        self.origin = self.tmp / "origin"
        self.origin.mkdir()
        self._git(self.origin, "init", "-q")
        self._git(self.origin, "symbolic-ref", "HEAD", "refs/heads/main")
        (self.origin / "README.md").write_text("hello\n")
        self._git(self.origin, "add", "README.md")
        self._git(self.origin, "commit", "-q", "-m", "initial")
        self._git(self.origin, "branch", "feature/login")

        self.cd_file = self.tmp / "cd"
        self.output = io.StringIO()

    def _git(self, cwd: Path, *args: str) -> str:
        proc = subprocess.run(["git", *args], cwd=cwd, capture_output=True, text=True, check=True)
        return proc.stdout

    def _service(self, cwd: Path) -> WorktreeService:
        env = Environment(cwd=cwd, environ={"GWT_CD_FILE": str(self.cd_file)})
        return WorktreeService(env=env, console=Console(file=self.output, width=200))

    def _clone(self) -> Path:
        main = self._service(self.tmp).clone(str(self.origin), "proj")
        (main / ".env").write_text("TOKEN=abc\n")
        (main / ".env.local").write_text("DEBUG=1\n")
        return main

    def test_clone_creates_bare_layout(self) -> None:
        main = self._clone()
        root = self.tmp / "proj"

        self.assertEqual(main, root / "main")
        self.assertTrue((root / ".bare").is_dir())
        self.assertEqual((root / ".git").read_text(), "gitdir: ./.bare\n")
        self.assertTrue((main / "README.md").is_file())
        self.assertEqual(self._git(root, "config", "remote.origin.fetch").strip(), "+refs/heads/*:refs/remotes/origin/*")
        self.assertEqual(self.cd_file.read_text(), str(main))

    def test_hook_copies_files_into_new_worktree(self) -> None:
        self._clone()
        root = self.tmp / "proj"
        service = self._service(root)

        result = service.init(InitOptions(copy_files=[".env", ".env.local"]))
        path = service.add(["feature/login"])

        self.assertEqual(result.hook_path, root / ".bare" / "hooks" / "post-checkout")
        self.assertEqual(path, root / "feature-login")
        self.assertEqual((path / ".env").read_text(), "TOKEN=abc\n")
        self.assertEqual((path / ".env.local").read_text(), "DEBUG=1\n")
        self.assertEqual(self._git(path, "rev-parse", "--abbrev-ref", "HEAD").strip(), "feature/login")
        self.assertEqual(self.cd_file.read_text(), str(path))

    def test_add_from_inside_worktree_without_hook(self) -> None:
        main = self._clone()
        root = self.tmp / "proj"
        self._service(root).init(InitOptions(copy_files=[".env"], install_hook=False))

        path = self._service(main).add(["-b", "fix/typo", "main"])

        self.assertEqual(path, root / "fix-typo")
        self.assertEqual((path / ".env").read_text(), "TOKEN=abc\n")
        self.assertFalse((path / ".env.local").exists())
        self.assertEqual(self._git(path, "rev-parse", "--abbrev-ref", "HEAD").strip(), "fix/typo")


if __name__ == "__main__":
    unittest.main()
