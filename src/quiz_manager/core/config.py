"""TOML plumbing behind ``quiz.toml``.

``quiz init`` writes the commented template through
:func:`write_toml_template`; ``quiz shell`` reads it with :func:`load_toml` and
layers it over the built-in section table with :func:`with_defaults`. Errors
are raised as :class:`TomlConfigError` and rewrapped by the quizzer config.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Mapping, MutableMapping

try:  # Python >= 3.11 ships ``tomllib`` in the stdlib.
    import tomllib
except ModuleNotFoundError as exc:  # pragma: no cover
    raise RuntimeError(
        "Python 3.11+ is required for tomllib support."
    ) from exc

__all__ = [
    "TomlConfigError",
    "load_toml",
    "merge_defaults",
    "with_defaults",
    "write_toml_template",
]


class TomlConfigError(RuntimeError):
    """A ``quiz.toml`` could not be loaded or written."""


def load_toml(path: Path) -> Mapping[str, Any]:
    """Parse the quiz config at ``path`` into plain tables.

    Missing files, unreadable files and bad syntax raise
    :class:`TomlConfigError`; the message names the file or the parse error.
    """

    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except FileNotFoundError as exc:
        raise TomlConfigError(f"Config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise TomlConfigError(f"Failed to parse config TOML: {exc}") from exc
    except OSError as exc:
        raise TomlConfigError(f"Unable to read config {path}: {exc}") from exc
    return data


def merge_defaults(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
) -> None:
    """Fold ``override`` into ``base`` in place.

    Keys must already exist in ``base`` (``storage.data_file``,
    ``prompt.label`` and so on); a stray key or a scalar where a section is
    expected raises :class:`TomlConfigError` naming the dotted path.
    """

    for key, value in override.items():
        dotted = f"{path}{key}"
        if key not in base:
            raise TomlConfigError(f"Unknown configuration key '{dotted}'.")
        current = base[key]
        if isinstance(current, MutableMapping):
            if not isinstance(value, Mapping):
                raise TomlConfigError(
                    "Expected table for '{0}', found {1}.".format(
                        dotted,
                        type(value).__name__,
                    )
                )
            merge_defaults(current, value, path=f"{dotted}.")
            continue
        base[key] = value


def with_defaults(
    defaults: Mapping[str, Any],
    override: Mapping[str, Any] | None,
) -> MutableMapping[str, Any]:
    """Merged copy of ``defaults``; the caller's table is left untouched."""

    tree: MutableMapping[str, Any] = copy.deepcopy(dict(defaults))
    if override:
        merge_defaults(tree, override)
    return tree


def write_toml_template(
    path: Path,
    *,
    template: str,
    overwrite: bool = False,
    mode: int = 0o600,
) -> Path:
    """Create the config file, owner-readable only.

    An existing file is kept unless ``overwrite`` is set.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists() and not overwrite:
        raise TomlConfigError(f"Config already exists: {path}")
    path.write_text(template, encoding="utf-8")
    try:
        path.chmod(mode)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
    return path
