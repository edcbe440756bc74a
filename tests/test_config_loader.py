import json
import tempfile
import unittest
from pathlib import Path

from gitrelease.config.loader import (
    CONFIG_FILE_NAME,
    ConfigError,
    ReleaseConfig,
    load_config,
    normalize_subdir,
    validate_submodule,
)
from gitrelease.release.renderer import DEFAULT_BANNER


class TestConfigLoader(unittest.TestCase):
    """Tests for the configuration loader."""

    def test_defaults_without_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config = load_config(Path(tmp))
            self.assertEqual(config, ReleaseConfig(repo_root=Path(tmp)))
            self.assertEqual(config.banner, DEFAULT_BANNER)
            self.assertTrue(config.skip_release_commits)
            self.assertIsNone(config.scope)

    def test_file_values(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            data = {
                "repo_url": "https://github.com/example/project/",
                "subdir": "./secret_manager/",
                "banner": "Release notes",
                "skip_release_commits": False,
                "unknown": 1,
            }
            (root / CONFIG_FILE_NAME).write_text(json.dumps(data))
            config = load_config(root)
            self.assertEqual(config.repo_url, "https://github.com/example/project")
            self.assertEqual(config.subdir, "secret_manager")
            self.assertEqual(config.scope, "secret_manager")
            self.assertEqual(config.banner, "Release notes")
            self.assertFalse(config.skip_release_commits)

    def test_command_line_overrides_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / CONFIG_FILE_NAME).write_text(json.dumps({"submodule": "storage", "repo_url": "https://a/b"}))
            config = load_config(root, submodule="secret_manager", repo_url="https://c/d")
            self.assertEqual(config.submodule, "secret_manager")
            self.assertEqual(config.repo_url, "https://c/d")
            self.assertEqual(config.scope, "secret_manager")

    def test_invalid_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / CONFIG_FILE_NAME).write_text("{invalid}")
            with self.assertRaises(ConfigError):
                load_config(Path(tmp))

    def test_not_an_object(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / CONFIG_FILE_NAME).write_text("[1, 2]")
            with self.assertRaises(ConfigError):
                load_config(Path(tmp))

    def test_wrong_types(self) -> None:
        for data in ({"repo_url": 1}, {"subdir": ["a"]}, {"skip_release_commits": "yes"}, {"banner": None}):
            with self.subTest(data=data):
                with tempfile.TemporaryDirectory() as tmp:
                    (Path(tmp) / CONFIG_FILE_NAME).write_text(json.dumps(data))
                    with self.assertRaises(ConfigError):
                        load_config(Path(tmp))


class TestValidation(unittest.TestCase):
    def test_normalize_subdir(self) -> None:
        self.assertIsNone(normalize_subdir(None))
        self.assertIsNone(normalize_subdir("./"))
        self.assertEqual(normalize_subdir("a/b/"), "a/b")
        self.assertEqual(normalize_subdir("./a//b"), "a/b")
        self.assertEqual(normalize_subdir("a\\b"), "a/b")
        with self.assertRaises(ConfigError):
            normalize_subdir("/abs/path")
        with self.assertRaises(ConfigError):
            normalize_subdir("a/../../b")

    def test_validate_submodule(self) -> None:
        self.assertEqual(validate_submodule(" secret_manager "), "secret_manager")
        self.assertIsNone(validate_submodule(None))
        for name in ["", "   ", "a b", "a/b", "a*", "a?b", "[a]"]:
            with self.subTest(name=name):
                with self.assertRaises(ConfigError):
                    validate_submodule(name)


if __name__ == "__main__":
    unittest.main()
