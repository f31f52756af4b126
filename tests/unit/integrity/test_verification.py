"""Unit tests for fingerprint verification."""

from __future__ import annotations

import os
from dataclasses import replace

from integrity.fingerprint import compute_fingerprint
from integrity.verification import verify_fingerprint
from tests.fixture_trees import write_tree

_FILES = {
    "README.md": "hello\n",
    "src/app.py": "print('hi')\n",
    "src/util.py": "X = 1\n",
}


def _baseline(tmp_path):
    root = write_tree(tmp_path / "repo", _FILES)
    expected = compute_fingerprint(root, source_url="https://example.com/demo", revision_id="rev-1")
    return root, expected


def test_verify_round_trip_is_full_match(tmp_path) -> None:
    """Verifying a tree against its own fingerprint reports zero issues."""
    root, expected = _baseline(tmp_path)

    report = verify_fingerprint(root, expected, current_revision="rev-1")

    assert report.matched and report.issue_count == 0 and report.verified_count == len(_FILES)


def test_verify_reports_exactly_one_changed_file(tmp_path) -> None:
    """A one-byte edit is reported as one changed entry."""
    root, expected = _baseline(tmp_path)
    (root / "src/util.py").write_text("X = 2\n", encoding="utf-8")

    report = verify_fingerprint(root, expected, current_revision="rev-1")

    assert report.changed_paths == ("src/util.py",) and report.issue_count == 1
    assert not report.matched


def test_verify_reports_exactly_one_unexpected_file(tmp_path) -> None:
    """An untracked addition is one unexpected entry; other files still verify."""
    root, expected = _baseline(tmp_path)
    (root / "src/new.py").write_text("Y = 1\n", encoding="utf-8")

    report = verify_fingerprint(root, expected, current_revision="rev-1")

    assert report.unexpected_paths == ("src/new.py",)
    assert report.changed_paths == () and report.verified_count == len(_FILES)


def test_verify_reports_exactly_one_missing_file(tmp_path) -> None:
    """A removed tracked file is one missing entry."""
    root, expected = _baseline(tmp_path)
    (root / "README.md").unlink()

    report = verify_fingerprint(root, expected, current_revision="rev-1")

    assert report.missing_paths == ("README.md",) and report.issue_count == 1


def test_revision_drift_alone_does_not_fail_verification(tmp_path) -> None:
    """A different revision with identical content is only flagged as drift."""
    root, expected = _baseline(tmp_path)

    report = verify_fingerprint(root, expected, current_revision="rev-2")

    assert report.matched and report.revision_drift


def test_unknown_current_revision_is_not_drift(tmp_path, monkeypatch) -> None:
    """When the current revision cannot be read no drift is reported."""
    root, expected = _baseline(tmp_path)
    monkeypatch.setattr("integrity.verification.read_revision_id", lambda path: None)

    report = verify_fingerprint(root, replace(expected, revision_id="rev-9"))

    assert report.current_revision is None and not report.revision_drift


def test_added_symlink_is_reported_as_unexpected(tmp_path) -> None:
    """A link planted after fingerprinting fails verification."""
    root, expected = _baseline(tmp_path)
    write_tree(tmp_path / "outside", {"payload.sh": "rm -rf /\n"})
    os.symlink("../outside/payload.sh", root / "build.sh")

    report = verify_fingerprint(root, expected, current_revision="rev-1")

    assert report.unexpected_paths == ("build.sh",) and not report.matched


def test_retargeted_symlink_is_reported_as_changed(tmp_path) -> None:
    """Repointing a recorded link is a content change."""
    root = write_tree(tmp_path / "repo", _FILES)
    os.symlink("src/app.py", root / "entry.py")
    expected = compute_fingerprint(root, source_url="https://example.com/demo", revision_id="rev-1")
    os.remove(root / "entry.py")
    os.symlink("src/util.py", root / "entry.py")

    report = verify_fingerprint(root, expected, current_revision="rev-1")

    assert report.changed_paths == ("entry.py",) and not report.matched
