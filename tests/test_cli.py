import logging
import unittest
from datetime import date
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

import gitrelease.cli as cli
from gitrelease.release.models import ReleaseSummary
from gitrelease.release.locator import LocatorError
from gitrelease.config.loader import ConfigError, ReleaseConfig
from gitrelease.vcs.base import AccessError


def summary() -> ReleaseSummary:
    return ReleaseSummary(
        new_version="0.1.2",
        date=date(2026, 10, 19),
        repo_url="https://github.com/example/project",
        compare_link="https://github.com/example/project/compare/abc...HEAD",
        changed_files=("src/app.py",),
    )


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = CliRunner()
        patcher = patch.object(cli.GitClient, "find_repo_root", return_value=Path("/repo"))
        self.addCleanup(patcher.stop)
        patcher.start()
        root = logging.getLogger()
        self.addCleanup(setattr, root, "handlers", list(root.handlers))
        self.addCleanup(root.setLevel, root.level)

    def invoke(self, *args):
        return self.runner.invoke(cli.main, list(args))

    def test_success_prints_summary(self) -> None:
        with patch.object(cli, "build_summary", return_value=summary()) as mock_build:
            with patch.object(cli, "load_config", return_value=ReleaseConfig(repo_root=Path("/repo"), repo_url="https://github.com/example/project")):
                result = self.invoke()
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        self.assertIn("### 0.1.2 / 2026-10-19", result.output)
        self.assertIn("src/app.py", result.output)
        self.assertEqual(mock_build.call_args[0][2], "https://github.com/example/project")

    def test_options_are_passed_to_config(self) -> None:
        with patch.object(cli, "build_summary", return_value=summary()):
            with patch.object(cli, "load_config", return_value=ReleaseConfig(repo_root=Path("/repo"), repo_url="https://x/y")) as mock_load:
                result = self.invoke("--subdir", "secret_manager", "--submodule", "secret_manager", "--repo-url", "https://x/y")
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        mock_load.assert_called_once_with(
            Path("/repo"), subdir="secret_manager", submodule="secret_manager", repo_url="https://x/y"
        )

    def test_remote_url_is_used(self) -> None:
        with patch.object(cli, "load_config", return_value=ReleaseConfig(repo_root=Path("/repo"))):
            with patch.object(cli.GitClient, "get_remote_url", return_value="git@github.com:example/project.git"):
                with patch.object(cli, "build_summary", return_value=summary()) as mock_build:
                    result = self.invoke()
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        self.assertEqual(mock_build.call_args[0][2], "https://github.com/example/project")

    def test_missing_remote(self) -> None:
        with patch.object(cli, "load_config", return_value=ReleaseConfig(repo_root=Path("/repo"))):
            with patch.object(cli.GitClient, "get_remote_url", return_value=None):
                result = self.invoke()
        self.assertEqual(result.exit_code, cli.EXIT_CONFIG_ERROR)
        self.assertNotIn("###", result.output)

    def test_no_repository(self) -> None:
        with patch.object(cli.GitClient, "find_repo_root", return_value=None):
            result = self.invoke()
        self.assertEqual(result.exit_code, cli.EXIT_NO_REPO)

    def test_config_error(self) -> None:
        with patch.object(cli, "load_config", side_effect=ConfigError("bad subdir")):
            result = self.invoke("--subdir", "/abs")
        self.assertEqual(result.exit_code, cli.EXIT_CONFIG_ERROR)
        self.assertIn("bad subdir", result.output)

    def test_error_exit_codes(self) -> None:
        config = ReleaseConfig(repo_root=Path("/repo"), repo_url="https://x/y")
        cases = [
            (LocatorError("Tag 'v1.2' does not contain a valid semantic version"), cli.EXIT_LOCATOR_ERROR),
            (AccessError("fatal: bad object"), cli.EXIT_VCS_FAILURE),
            (AccessError("fatal: ambiguous argument 'x'\nUse '--' to separate paths"), cli.EXIT_VCS_FAILURE),
            (RuntimeError("boom"), cli.EXIT_GENERIC_ERROR),
        ]
        for error, code in cases:
            with self.subTest(error=error):
                with patch.object(cli, "load_config", return_value=config):
                    with patch.object(cli, "build_summary", side_effect=error):
                        result = self.invoke()
                self.assertEqual(result.exit_code, code)
                self.assertNotIn("###", result.output)
                self.assertEqual(len(result.stderr.strip().splitlines()), 1, result.stderr)
                self.assertNotIn("Traceback", result.stderr)

    def test_verbose_logs_to_stderr(self) -> None:
        with patch.object(cli, "build_summary", return_value=summary()):
            with patch.object(cli, "load_config", return_value=ReleaseConfig(repo_root=Path("/repo"), repo_url="https://x/y")):
                quiet = self.invoke()
                loud = self.invoke("--verbose")
        self.assertEqual(loud.exit_code, cli.EXIT_SUCCESS, loud.output)
        self.assertNotIn("DEBUG", quiet.stderr)
        self.assertIn("DEBUG: Repository root:", loud.stderr)
        self.assertNotIn("DEBUG", loud.stdout)
        self.assertEqual(loud.stdout, quiet.stdout)

    def test_version(self) -> None:
        result = self.invoke("--version")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("gitrelease", result.output)


if __name__ == "__main__":
    unittest.main()
