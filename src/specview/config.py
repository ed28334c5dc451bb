"""Where specview finds the document to browse and how deep to render schemas.

Three settings exist (:class:`~specview.models.ViewerConfig`):
``default_spec`` (file path or URL), ``max_depth`` (schema nesting rendered
before truncation) and ``output.format``.  They come from, highest first:

1. CLI flags (``--spec``, ``--max-depth``, ``--json``/``--plain``)
2. ``SPECVIEW_SPEC`` and ``SPECVIEW_MAX_DEPTH``
3. ``./specview.json`` in the working directory (``default_spec`` and
   ``max_depth`` only)
4. the user config file in :func:`get_config_dir`
5. model defaults

The user config is the only file specview writes.  It is replaced
atomically by :func:`save_global_config`.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from specview.exceptions import ConfigError
from specview.models import ViewerConfig

_APP_NAME = "specview"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "specview.json"

ENV_SPEC = "SPECVIEW_SPEC"
ENV_MAX_DEPTH = "SPECVIEW_MAX_DEPTH"


# --- Directories ---


def _is_xdg_platform() -> bool:
    """True on Linux and the BSDs, where XDG base directories apply."""
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def _xdg_home(env_var: str, *fallback: str) -> Path:
    return Path(os.environ.get(env_var) or Path.home().joinpath(*fallback))


def get_config_dir() -> Path:
    """Directory holding the user config file, created on first use.

    ``$XDG_CONFIG_HOME/specview`` (``~/.config/specview``) on XDG platforms,
    ``~/.specview`` elsewhere.
    """
    if _is_xdg_platform():
        return _ensure_dir(_xdg_home("XDG_CONFIG_HOME", ".config") / _APP_NAME)
    return _ensure_dir(Path.home() / f".{_APP_NAME}")


def get_data_dir() -> Path:
    """Directory for crash logs, created on first use.

    ``$XDG_DATA_HOME/specview`` (``~/.local/share/specview``) on XDG
    platforms, ``~/.specview/logs`` elsewhere.
    """
    if _is_xdg_platform():
        return _ensure_dir(_xdg_home("XDG_DATA_HOME", ".local", "share") / _APP_NAME)
    return _ensure_dir(Path.home() / f".{_APP_NAME}" / "logs")


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* in one rename.

    The temporary file lives next to *path* so :func:`os.replace` stays on
    one filesystem.  It is removed again if anything fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = tempfile.NamedTemporaryFile(
        mode="w",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
        encoding="utf-8",
    )
    try:
        with tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp.name, path)
    except BaseException:
        Path(tmp.name).unlink(missing_ok=True)
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> ViewerConfig:
    """Read the user config file, or return defaults when there is none.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return ViewerConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ViewerConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: ViewerConfig) -> None:
    """Write *config* as the user config file."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./specview.json``.

    A repository can pin the document it describes by committing this file
    with a ``default_spec`` entry.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_spec: Optional[str] = None,
    cli_max_depth: Optional[int] = None,
    cli_format: Optional[str] = None,
) -> ViewerConfig:
    """Merge every configuration layer into the effective settings.

    Layers are applied lowest first (see the module docstring), so a later
    layer overwrites the keys it sets.  Empty environment variables are
    ignored.

    Raises:
        ConfigError: If any layer holds an invalid value.
    """
    merged = load_global_config().model_dump()

    project = load_project_config()
    if project is not None:
        for key in ("default_spec", "max_depth"):
            if key in project:
                merged[key] = project[key]

    env_spec = os.environ.get(ENV_SPEC)
    if env_spec:
        merged["default_spec"] = env_spec
    env_depth = os.environ.get(ENV_MAX_DEPTH)
    if env_depth:
        merged["max_depth"] = env_depth

    if cli_spec is not None:
        merged["default_spec"] = cli_spec
    if cli_max_depth is not None:
        merged["max_depth"] = cli_max_depth
    if cli_format is not None:
        merged["output"]["format"] = cli_format

    try:
        return ViewerConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
