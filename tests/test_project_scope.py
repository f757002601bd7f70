"""Unit tests for git root discovery and roadmap path resolution."""

from __future__ import annotations

from seslog.config.project_scope import git_root_for, resolve_roadmap_path


def test_git_root_for_finds_nearest_repo(tmp_path):
    (tmp_path / ".git").mkdir()
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    assert git_root_for(nested) == tmp_path.resolve()


def test_explicit_file_path_is_kept(tmp_path):
    target = tmp_path / "PLAN.md"
    assert resolve_roadmap_path(target, filename="ROADMAP.md") == target.resolve()


def test_directory_resolves_to_filename(tmp_path):
    assert (
        resolve_roadmap_path(str(tmp_path), filename="ROADMAP.md")
        == (tmp_path / "ROADMAP.md").resolve()
    )


def test_default_uses_git_root(tmp_path):
    (tmp_path / ".git").mkdir()
    nested = tmp_path / "src"
    nested.mkdir()
    resolved = resolve_roadmap_path(None, filename="ROADMAP.md", repo_path=nested)
    assert resolved == (tmp_path / "ROADMAP.md").resolve()


def test_default_without_repo_uses_given_dir(tmp_path):
    resolved = resolve_roadmap_path("", filename="R.md", repo_path=tmp_path)
    assert resolved.parent == tmp_path.resolve()
