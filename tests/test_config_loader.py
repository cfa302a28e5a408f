import json
import tempfile
import unittest
from pathlib import Path

from phab_changelog.config.loader import CONFIG_FILE_NAME, ConfigError, load_config


class TestConfigLoader(unittest.TestCase):
    """Tests for the configuration loader."""

    def test_defaults_without_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config = load_config(Path(tmp))
        self.assertEqual(config, {"output_file": "CHANGELOG.md", "template_dir": None})

    def test_load_config_success(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / CONFIG_FILE_NAME).write_text(
                json.dumps({"output_file": "docs/CHANGES.md", "template_dir": "changelog-templates"})
            )
            config = load_config(root)
            self.assertEqual(config["output_file"], str(root / "docs" / "CHANGES.md"))
            self.assertEqual(config["template_dir"], str(root / "changelog-templates"))

    def test_absolute_output_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            absolute = str(root / "out" / "CHANGES.md")
            (root / CONFIG_FILE_NAME).write_text(json.dumps({"output_file": absolute}))
            self.assertEqual(load_config(root)["output_file"], absolute)

    def test_absolute_template_dir(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            absolute = str(root / "tpl")
            (root / CONFIG_FILE_NAME).write_text(json.dumps({"template_dir": absolute}))
            self.assertEqual(load_config(root)["template_dir"], absolute)

    def test_invalid_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / CONFIG_FILE_NAME).write_text("{invalid}")
            with self.assertRaises(ConfigError):
                load_config(Path(tmp))

    def test_not_an_object(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / CONFIG_FILE_NAME).write_text("[]")
            with self.assertRaises(ConfigError):
                load_config(Path(tmp))

    def test_unknown_keys(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / CONFIG_FILE_NAME).write_text(json.dumps({"outptu_file": "x"}))
            with self.assertRaises(ConfigError):
                load_config(Path(tmp))

    def test_wrong_types(self) -> None:
        for data in ({"output_file": 3}, {"output_file": ""}, {"template_dir": ["a"]}):
            with self.subTest(data=data):
                with tempfile.TemporaryDirectory() as tmp:
                    (Path(tmp) / CONFIG_FILE_NAME).write_text(json.dumps(data))
                    with self.assertRaises(ConfigError):
                        load_config(Path(tmp))

    def test_defaults_to_cwd(self) -> None:
        # The test runs from an empty temporary directory.
        self.assertEqual(load_config()["output_file"], "CHANGELOG.md")


if __name__ == "__main__":
    unittest.main()
