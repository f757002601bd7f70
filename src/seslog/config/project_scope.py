"""Project root discovery and roadmap file resolution."""

from __future__ import annotations

from pathlib import Path


def git_root_for(path: Path | None = None) -> Path | None:
    """Return the nearest directory that contains ``.git`` starting from ``path``."""
    start = (path or Path.cwd()).resolve()
    current = start
    while True:
        if (current / ".git").exists():
            return current
        if current.parent == current:
            return None
        current = current.parent


def resolve_roadmap_path(
    raw: str | Path | None,
    *,
    filename: str,
    repo_path: Path | None = None,
) -> Path:
    """Resolve an explicit path, a directory, or the project default roadmap file.

    A directory argument resolves to ``<dir>/<filename>``. With no argument the
    roadmap lives at the git root of ``repo_path`` (or ``repo_path`` itself when
    it is not inside a repository).
    """
    if raw not in (None, ""):
        candidate = Path(str(raw)).expanduser()
        if candidate.is_dir():
            return (candidate / filename).resolve()
        return candidate.resolve()
    base = repo_path or Path.cwd()
    root = git_root_for(base) or base
    return (root / filename).resolve()


if __name__ == "__main__":
    """Run a real-path smoke test for roadmap path resolution."""
    cwd = Path.cwd()
    resolved = resolve_roadmap_path(None, filename="ROADMAP.md", repo_path=cwd)
    assert resolved.name == "ROADMAP.md"
    assert resolve_roadmap_path(cwd, filename="X.md").parent == cwd.resolve()
