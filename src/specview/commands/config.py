"""Config commands -- view and modify the user configuration.

Provides the ``specview config`` sub-command group for reading and
updating the user's global configuration file
(:class:`~specview.models.ViewerConfig`).  Settings are persisted in the
specview config directory and supply the lowest-precedence defaults: the
document to browse, the schema depth limit, and the output format.
"""

from __future__ import annotations

import typer
from pydantic import ValidationError

from specview.exit_codes import EXIT_INVALID_USAGE
from specview.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the user configuration and the effective one.

    Example::

        specview config show
        specview --json config show
    """
    from specview.config import get_config_dir, load_global_config

    info(f"Config directory: {get_config_dir()}")
    format_response({
        "user": load_global_config().model_dump(mode="json"),
        "effective": ctx.obj["config"].model_dump(mode="json"),
    })


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'output.format')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys.  Integer fields are coerced from
    the string value.  The updated config is validated against
    :class:`~specview.models.ViewerConfig` before saving.

    Args:
        key: Dot-separated config key path (e.g. ``output.format``).
        value: String value to set.

    Raises:
        typer.Exit: With code 2 if the key path is invalid, the value
            cannot be coerced, or validation fails.

    Example::

        specview config set default_spec ./openapi.yaml
        specview config set max_depth 8
        specview config set output.format plain
    """
    from specview.config import load_global_config, save_global_config
    from specview.models import ViewerConfig

    config = load_global_config()
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    coerced: object = value
    if isinstance(target[final_key], int):
        try:
            coerced = int(value)
        except ValueError:
            error(f"Expected integer for {key}, got: {value}")
            raise typer.Exit(code=EXIT_INVALID_USAGE) from None
    target[final_key] = coerced

    try:
        new_config = ViewerConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")
