"""Tests for container state classification and the runtime wrapper."""

from __future__ import annotations

import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from dev_container.docker import ContainerRuntime, is_debian_base
from dev_container.exceptions import ContainerCommandError
from dev_container.fs import resolve_identity
from dev_container.models import ContainerState, Credentials, Mount, RepoContext, Settings
from dev_container.state import ContainerAction, TeardownAction, attach_action, classify, teardown_action


def _completed(cmd, returncode: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(cmd, returncode, stdout, stderr)


class ClassificationTests(unittest.TestCase):
    def test_classify_inspect_output(self) -> None:
        self.assertIs(classify(None), ContainerState.ABSENT)
        self.assertIs(classify("true\n"), ContainerState.RUNNING)
        self.assertIs(classify("false\n"), ContainerState.STOPPED)

    def test_attach_actions(self) -> None:
        self.assertIs(attach_action(ContainerState.ABSENT), ContainerAction.PROVISION)
        self.assertIs(attach_action(ContainerState.STOPPED), ContainerAction.START)
        self.assertIs(attach_action(ContainerState.RUNNING), ContainerAction.NONE)

    def test_teardown_actions(self) -> None:
        self.assertIs(teardown_action(ContainerState.RUNNING), TeardownAction.STOP_AND_REMOVE)
        self.assertIs(teardown_action(ContainerState.STOPPED), TeardownAction.REMOVE)
        self.assertIs(teardown_action(ContainerState.ABSENT), TeardownAction.SKIP)


class DebianBaseTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dockerfile = Path(self._tmp.name) / "Dockerfile.dev"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _check(self, content: str) -> bool:
        self.dockerfile.write_text(content)
        return is_debian_base(self.dockerfile)

    def test_detects_debian_images(self) -> None:
        self.assertTrue(self._check("FROM debian:bookworm\n"))
        self.assertTrue(self._check("# comment\nFROM debian\nFROM ubuntu\n"))
        self.assertTrue(self._check("FROM docker.io/library/debian:12-slim AS base\n"))

    def test_other_images(self) -> None:
        self.assertFalse(self._check("FROM ubuntu:24.04\n"))
        self.assertFalse(self._check("FROM python:3.12-slim-bookworm\n"))
        self.assertFalse(self._check("RUN true\n"))

    def test_missing_file(self) -> None:
        self.assertFalse(is_debian_base(self.dockerfile))


class ContainerRuntimeTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        tmp = Path(self._tmp.name)
        (tmp / "home" / ".claude" / "projects").mkdir(parents=True)
        self.settings = Settings(
            home=tmp / "home",
            mounts=(
                Mount(tmp / "home" / ".claude" / "projects", "/home/dev/.claude/projects"),
                Mount(tmp / "home" / ".claude" / "history.jsonl", "/home/dev/.claude/history.jsonl"),
            ),
        )
        self.runtime = ContainerRuntime(self.settings)
        self.repo = RepoContext(root=tmp / "shop")
        self.identity = resolve_identity(self.repo, "alpha", 9000)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    @mock.patch("dev_container.docker.subprocess.run")
    def test_inspect_maps_runtime_answers(self, run) -> None:
        run.side_effect = [
            _completed([], stdout="true\n"),
            _completed([], stdout="false\n"),
            _completed([], returncode=1, stderr="Error: No such object: shop-alpha"),
        ]
        states = [self.runtime.inspect("shop-alpha") for _ in range(3)]
        self.assertEqual(states, [ContainerState.RUNNING, ContainerState.STOPPED, ContainerState.ABSENT])
        self.assertEqual(run.call_args.args[0], ["docker", "inspect", "--type", "container", "-f", "{{.State.Running}}", "shop-alpha"])

    @mock.patch("dev_container.docker.subprocess.run")
    def test_failed_command_raises(self, run) -> None:
        run.return_value = _completed([], returncode=1, stderr="boom")
        with self.assertRaises(ContainerCommandError) as ctx:
            self.runtime.stop("shop-alpha")
        self.assertIn("boom", str(ctx.exception))

    def test_run_args_map_port_and_skip_missing_mounts(self) -> None:
        args = self.runtime.run_args(self.repo.root, self.identity, Credentials(claude_json="{}"))
        self.assertIn(f"9000:{self.settings.container_port}", args)
        self.assertIn("CLAUDE_JSON={}", args)
        self.assertIn(f"{self.settings.mounts[0].source}:/home/dev/.claude/projects:rw", args)
        self.assertFalse(any("history.jsonl" in arg for arg in args))
        self.assertEqual(args[-6:], ["-w", str(self.identity.worktree_path), "shop-dev", "tail", "-f", "/dev/null"])

    @mock.patch("dev_container.docker.subprocess.run")
    def test_build_passes_token_as_secret_and_deletes_it(self, run) -> None:
        seen: dict[str, str] = {}

        def fake_run(cmd, **kwargs):
            secret = cmd[cmd.index("--secret") + 1]
            path = secret.split("src=", 1)[1]
            seen["path"] = path
            seen["content"] = Path(path).read_text()
            return _completed(cmd)

        run.side_effect = fake_run
        image = self.runtime.build(self.repo.root, self.identity, Credentials(github_token="s3cret"))

        self.assertEqual(image, "shop-dev")
        self.assertEqual(seen["content"], "s3cret")
        self.assertFalse(Path(seen["path"]).exists())
        cmd = run.call_args.args[0]
        self.assertIn(f"HOST_PROJECT_PATH={self.identity.worktree_path}", cmd)
        self.assertEqual(cmd[-3:], ["-t", "shop-dev", str(self.repo.root)])

    @mock.patch("dev_container.docker.subprocess.run")
    def test_build_without_token_has_no_secret(self, run) -> None:
        run.return_value = _completed([])
        self.runtime.build(self.repo.root, self.identity, Credentials())
        self.assertNotIn("--secret", run.call_args.args[0])


if __name__ == "__main__":
    unittest.main()
