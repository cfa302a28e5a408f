import tempfile
import unittest
from pathlib import Path

from phab_changelog.config.loader import ConfigError
from phab_changelog.grouping.classifier import commit_sort_key, is_release_commit, note_sort_key, transform_commit
from phab_changelog.writer.options import Templates, WriterOptions
from phab_changelog.writer.templates import TEMPLATE_FILES, TemplateError, load_templates


class TestLoadTemplates(unittest.TestCase):
    def test_bundled_templates(self) -> None:
        templates = load_templates()
        self.assertIn('include "header"', templates.main)
        self.assertIn('include "commit"', templates.main)
        self.assertIn('include "footer"', templates.main)
        self.assertIn("root.commit", templates.commit)

    def test_custom_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            for name, filename in TEMPLATE_FILES.items():
                (Path(tmp) / filename).write_text(f"{name} ✓", encoding="utf-8")
            templates = load_templates(Path(tmp))
            self.assertEqual(templates.main, "main ✓")
            self.assertEqual(templates.footer, "footer ✓")

    def test_missing_template(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / "main.md.j2").write_text("x", encoding="utf-8")
            with self.assertRaises(TemplateError):
                load_templates(Path(tmp))


class TestWriterOptions(unittest.TestCase):
    def make(self, **overrides) -> WriterOptions:
        kwargs = dict(
            templates=Templates(main="", header="", commit="", footer=""),
            transform=transform_commit,
            generate_on=is_release_commit,
            commits_sort=commit_sort_key,
            notes_sort=note_sort_key,
        )
        kwargs.update(overrides)
        return WriterOptions(**kwargs)

    def test_defaults(self) -> None:
        options = self.make()
        self.assertEqual(options.group_by, "type")
        self.assertEqual(options.commit_groups_sort({"title": "Features"}), "Features")

    def test_unknown_group_attribute(self) -> None:
        with self.assertRaises(ConfigError):
            self.make(group_by="colour")

    def test_non_callable_transform(self) -> None:
        with self.assertRaises(ConfigError):
            self.make(transform="feat")

    def test_templates_type_checked(self) -> None:
        with self.assertRaises(ConfigError):
            self.make(templates={"main": ""})


if __name__ == "__main__":
    unittest.main()
