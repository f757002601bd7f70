"""Central config loading from layered TOML files.

Layers (low to high priority):
1. seslog/config/default.toml
2. ~/.seslog/config.toml
3. <repo>/.seslog/config.toml
4. SESLOG_CONFIG env path (optional explicit override)
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from seslog.config.project_scope import git_root_for

PACKAGE_DIR = Path(__file__).parent
DEFAULT_CONFIG_PATH = PACKAGE_DIR / "default.toml"
USER_CONFIG_PATH = Path.home() / ".seslog" / "config.toml"

_LAST_CONFIG_SOURCES: list[dict[str, str]] = []


def load_toml_file(path: Path | None) -> dict[str, Any]:
    """Load TOML file into a dict; return empty dict on failures."""
    if not path or not path.exists():
        return {}
    try:
        with path.open("rb") as handle:
            payload = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError):
        return {}
    return payload if isinstance(payload, dict) else {}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge dict values with override precedence."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _to_non_empty_string(value: Any) -> str:
    """Convert value to stripped string, defaulting to empty string."""
    if value is None:
        return ""
    return str(value).strip()


def _to_int(value: Any, default: int, minimum: int = 1) -> int:
    """Convert value to bounded integer with fallback default."""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        parsed = default
    return max(minimum, parsed)


def _to_bool(value: Any, default: bool) -> bool:
    """Convert TOML bool or common truthy strings to bool."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
    return default


def get_user_config_path() -> Path:
    """Return canonical user config path."""
    return USER_CONFIG_PATH


def _load_layers() -> tuple[dict[str, Any], list[dict[str, str]]]:
    """Load and merge all configuration layers in precedence order."""
    merged: dict[str, Any] = {}
    sources: list[dict[str, str]] = []

    layers: list[tuple[str, Path]] = [
        ("package_default", DEFAULT_CONFIG_PATH),
        ("user", USER_CONFIG_PATH),
    ]

    project_root = git_root_for(Path.cwd())
    if project_root:
        layers.append(("project", project_root / ".seslog" / "config.toml"))

    explicit = os.getenv("SESLOG_CONFIG")
    if explicit:
        layers.append(("explicit", Path(explicit).expanduser()))

    for source_name, path in layers:
        payload = load_toml_file(path)
        if payload:
            merged = _deep_merge(merged, payload)
            sources.append({"source": source_name, "path": str(path)})

    return merged, sources


def get_config_sources() -> list[dict[str, str]]:
    """Return last-computed config source list."""
    return [dict(item) for item in _LAST_CONFIG_SOURCES]


@dataclass(frozen=True)
class Config:
    """Effective runtime configuration from TOML layers and environment."""

    roadmap_filename: str
    indent_width: int
    show_ids: bool
    no_phase_label: str

    server_host: str
    server_port: int

    def public_dict(self) -> dict[str, Any]:
        """Return serialized config for CLI/dashboard visibility."""
        return {
            "roadmap_filename": self.roadmap_filename,
            "indent_width": self.indent_width,
            "show_ids": self.show_ids,
            "no_phase_label": self.no_phase_label,
            "server_host": self.server_host,
            "server_port": self.server_port,
        }


def _section(toml_data: dict[str, Any], name: str) -> dict[str, Any]:
    """Return one TOML table, or an empty dict when absent or malformed."""
    value = toml_data.get(name, {})
    return value if isinstance(value, dict) else {}


@lru_cache(maxsize=1)
def load_config() -> Config:
    """Load effective config from TOML layers."""
    load_dotenv()
    toml_data, sources = _load_layers()

    global _LAST_CONFIG_SOURCES
    _LAST_CONFIG_SOURCES = sources

    roadmap = _section(toml_data, "roadmap")
    server = _section(toml_data, "server")

    port = _to_int(server.get("port"), 8766, minimum=1)
    if port > 65535:
        port = 8766

    no_phase_label = roadmap.get("no_phase_label", "")
    return Config(
        roadmap_filename=_to_non_empty_string(roadmap.get("filename")) or "ROADMAP.md",
        indent_width=min(_to_int(roadmap.get("indent_width"), 2, minimum=1), 8),
        show_ids=_to_bool(roadmap.get("show_ids"), True),
        no_phase_label=_to_non_empty_string(no_phase_label),
        server_host=_to_non_empty_string(server.get("host")) or "127.0.0.1",
        server_port=port,
    )


def get_config() -> Config:
    """Return cached effective configuration."""
    return load_config()


def reload_config() -> Config:
    """Clear config cache and return reloaded configuration."""
    load_config.cache_clear()
    return load_config()


if __name__ == "__main__":
    """Run a real-path config smoke test."""
    cfg = load_config()
    assert cfg.roadmap_filename
    assert cfg.indent_width >= 1
    assert isinstance(cfg.show_ids, bool)
    payload = cfg.public_dict()
    assert "roadmap_filename" in payload
    print(
        f"""\
Config loaded: \
roadmap={cfg.roadmap_filename}, \
server={cfg.server_host}:{cfg.server_port}"""
    )
