import unittest

from phab_changelog.grouping.classifier import (
    commit_sort_key,
    extract_tag_version,
    format_date,
    is_release_commit,
    note_sort_key,
    transform_commit,
)
from phab_changelog.grouping.commit_model import Commit, Note


class TestExtractTagVersion(unittest.TestCase):
    def test_version_from_v_tag(self) -> None:
        commit = extract_tag_version(Commit(git_tags="(HEAD -> master, tag: v1.2.3)"))
        self.assertEqual(commit.version, "1.2.3")

    def test_version_from_equals_tag(self) -> None:
        commit = extract_tag_version(Commit(git_tags="(tag:=1.2.3, origin/master)"))
        self.assertEqual(commit.version, "1.2.3")

    def test_first_tag_wins(self) -> None:
        commit = extract_tag_version(Commit(git_tags="(tag: v2.0.0, tag: v2.0.0-rc.1)"))
        self.assertEqual(commit.version, "2.0.0")

    def test_no_tag(self) -> None:
        commit = extract_tag_version(Commit(git_tags="(HEAD -> master, origin/master)"))
        self.assertIsNone(commit.version)

    def test_missing_tags_and_date(self) -> None:
        commit = extract_tag_version(Commit(type="feat"))
        self.assertIsNone(commit.version)
        self.assertIsNone(commit.committer_date)

    def test_consecutive_calls_are_independent(self) -> None:
        first = extract_tag_version(Commit(git_tags="(tag: v1.0.0)"))
        second = extract_tag_version(Commit(git_tags="(HEAD -> master)"))
        third = extract_tag_version(Commit(git_tags="(tag: v3.1.4)"))
        self.assertEqual(first.version, "1.0.0")
        self.assertIsNone(second.version)
        self.assertEqual(third.version, "3.1.4")

    def test_date_is_normalised_to_utc(self) -> None:
        commit = extract_tag_version(Commit(committer_date="2020-01-02 23:30:00 -0300"))
        self.assertEqual(commit.committer_date, "2020-01-03")

    def test_format_date(self) -> None:
        self.assertEqual(format_date("2021-06-30 08:00:00 +0200"), "2021-06-30")
        self.assertEqual(format_date("2021-06-30 01:00:00 +0200"), "2021-06-29")
        self.assertEqual(format_date("2021-06-30 10:00:00"), "2021-06-30")
        self.assertEqual(format_date("not a date"), "not a date")


class TestTransformCommit(unittest.TestCase):
    def test_type_titles(self) -> None:
        cases = [
            ("feat", "Features"),
            ("fix", "Bug Fixes"),
            ("perf", "Performance Improvements"),
            ("revert", "Reverts"),
        ]
        for commit_type, expected in cases:
            with self.subTest(type=commit_type):
                commit = transform_commit(Commit(type=commit_type, subject="x"))
                self.assertIsNotNone(commit)
                self.assertEqual(commit.type, expected)

    def test_other_types_are_dropped(self) -> None:
        for commit_type in ["chore", "docs", "style", "refactor", "test", "build", "ci", "Feat", "", None]:
            with self.subTest(type=commit_type):
                self.assertIsNone(transform_commit(Commit(type=commit_type, subject="x")))

    def test_hash_truncated(self) -> None:
        commit = transform_commit(Commit(type="feat", hash="0123456789abcdef"))
        self.assertEqual(commit.hash, "0123456")

    def test_short_hash_unchanged(self) -> None:
        commit = transform_commit(Commit(type="feat", hash="abc"))
        self.assertEqual(commit.hash, "abc")

    def test_subject_truncated(self) -> None:
        commit = transform_commit(Commit(type="fix", subject="a" * 100))
        self.assertEqual(commit.subject, "a" * 80)

    def test_short_subject_unchanged(self) -> None:
        commit = transform_commit(Commit(type="fix", subject="short subject"))
        self.assertEqual(commit.subject, "short subject")

    def test_breaking_change_notes_relabelled(self) -> None:
        notes = [
            Note(title="BREAKING CHANGE", text="one"),
            Note(title="DEPRECATED", text="two"),
            Note(title="BREAKING CHANGE", text="three"),
        ]
        commit = transform_commit(Commit(type="feat", notes=notes))
        self.assertEqual(
            [(n.title, n.text) for n in commit.notes],
            [("BREAKING CHANGES", "one"), ("DEPRECATED", "two"), ("BREAKING CHANGES", "three")],
        )


class TestReleaseBoundary(unittest.TestCase):
    def test_valid_versions(self) -> None:
        for version in ["2.0.0", "0.1.0", "v1.2.3", "1.0.0-beta.1", "1.0.0+build.5"]:
            with self.subTest(version=version):
                self.assertTrue(is_release_commit(Commit(version=version)))

    def test_invalid_versions(self) -> None:
        for version in [None, "", "1.2", "release-1", "01.2.3", "1.2.3.4"]:
            with self.subTest(version=version):
                self.assertFalse(is_release_commit(Commit(version=version)))


class TestSortKeys(unittest.TestCase):
    def test_commits_sorted_by_scope_then_subject(self) -> None:
        commits = [
            Commit(scope="ui", subject="b"),
            Commit(scope="api", subject="z"),
            Commit(scope=None, subject="m"),
            Commit(scope="api", subject="a"),
        ]
        ordered = sorted(commits, key=commit_sort_key)
        self.assertEqual(
            [(c.scope, c.subject) for c in ordered],
            [(None, "m"), ("api", "a"), ("api", "z"), ("ui", "b")],
        )

    def test_notes_sorted_by_text(self) -> None:
        entries = [
            {"title": "BREAKING CHANGES", "text": "b", "commit": Commit()},
            {"title": "BREAKING CHANGES", "text": "a", "commit": Commit()},
        ]
        ordered = sorted(entries, key=note_sort_key)
        self.assertEqual([e["text"] for e in ordered], ["a", "b"])


if __name__ == "__main__":
    unittest.main()
