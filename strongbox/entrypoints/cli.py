"""Strongbox CLI entrypoint.

Command-line interface over the local storage adapter.
"""

from __future__ import annotations

import functools
import logging
import sys
from dataclasses import replace
from datetime import UTC, datetime
from pathlib import Path

import click

from strongbox.adapters.config.toml_config_provider import TomlConfigProvider
from strongbox.adapters.fs.local import LocalAdapter
from strongbox.core.errors import StrongboxCliError, not_found_error, operation_failed_error
from strongbox.domain.config import WriteConfig
from strongbox.domain.entities import LinkPolicy, Metadata, Visibility
from strongbox.domain.exceptions import StrongboxDomainError
from strongbox.ports.config import ConfigProvider
from strongbox.ports.storage import StorageAdapter
from strongbox.shared.config_io import CONFIG_FILENAME, save_config
from strongbox.version import __version__

VISIBILITY_CHOICE = click.Choice([v.value for v in Visibility])


def handle_cli_errors(command_name: str):
    """Decorator to handle common CLI errors.

    Domain errors become StrongboxCliError with their hint; anything
    unexpected is reported with a hint to rerun in verbose mode.

    Args:
        command_name: Name of the command for error messages.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except (StrongboxCliError, click.exceptions.Exit, click.Abort):
                raise
            except StrongboxDomainError as e:
                raise StrongboxCliError(e.message, hint=e.hint) from e
            except Exception as e:
                ctx = click.get_current_context()
                if ctx.obj.get("verbose", False):
                    import traceback

                    traceback.print_exc()
                raise StrongboxCliError(
                    f"Unexpected error in {command_name}: {e}",
                    hint="Run with --verbose for more details",
                ) from e

        return wrapper

    return decorator


def _configure_logging(verbose: bool, quiet: bool) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _get_adapter(ctx: click.Context) -> StorageAdapter:
    """Build the adapter lazily so commands like --help never touch the disk."""
    if "adapter" not in ctx.obj:
        ctx.obj["adapter"] = LocalAdapter.from_config(ctx.obj["config"])
    return ctx.obj["adapter"]


def _format_metadata(metadata: Metadata) -> str:
    modified = datetime.fromtimestamp(metadata.timestamp, UTC).strftime("%Y-%m-%d %H:%M:%S")
    size = "-" if metadata.size is None else str(metadata.size)
    name = f"{metadata.path}/" if metadata.is_dir else metadata.path
    return f"{metadata.kind.value:<4} {size:>10}  {modified}  {name}"


@click.group()
@click.version_option(version=__version__, prog_name="strongbox")
@click.option(
    "--root",
    "-r",
    type=click.Path(file_okay=False, path_type=Path),
    help="Storage root directory (overrides config).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=CONFIG_FILENAME,
    show_default=True,
    help="Project config file.",
)
@click.option(
    "--skip-links",
    is_flag=True,
    help="Leave symbolic links out instead of failing on them.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress non-essential output.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    root: Path | None,
    config_path: Path,
    skip_links: bool,
    verbose: bool,
    quiet: bool,
) -> None:
    """Strongbox - Local directory storage adapter.

    Read, write, list and manage files under a single storage root.
    """
    _configure_logging(verbose, quiet)
    provider: ConfigProvider = TomlConfigProvider()
    config = provider.load(config_path)
    if root is not None:
        config = replace(config, root=str(root))
    if skip_links:
        config = replace(config, link_policy=LinkPolicy.SKIP_LINKS)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path


@cli.command("init-config")
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
@click.pass_context
@handle_cli_errors("init-config")
def init_config(ctx: click.Context, force: bool) -> None:
    """Write the effective configuration to the project config file."""
    path: Path = ctx.obj["config_path"]
    if path.exists() and not force:
        raise StrongboxCliError(
            f"Config file {path} already exists",
            hint="Use --force to overwrite it",
        )
    save_config(path, ctx.obj["config"])
    if not ctx.obj["quiet"]:
        click.echo(f"Wrote {path}")


@cli.command("ls")
@click.argument("directory", default="")
@click.option("--recursive", "-R", is_flag=True, help="List the whole subtree.")
@click.pass_context
@handle_cli_errors("ls")
def ls(ctx: click.Context, directory: str, recursive: bool) -> None:
    """List the contents of DIRECTORY (default: the root)."""
    listing = _get_adapter(ctx).list_contents(directory, recursive)
    if listing is None:
        operation_failed_error("list", directory or "/")
    for metadata in listing:
        click.echo(_format_metadata(metadata))


@cli.command("cat")
@click.argument("path")
@click.pass_context
@handle_cli_errors("cat")
def cat(ctx: click.Context, path: str) -> None:
    """Write the contents of PATH to standard output."""
    result = _get_adapter(ctx).read(path)
    if result is None:
        operation_failed_error("read", path)
    click.get_binary_stream("stdout").write(result.contents)


@cli.command("put")
@click.argument("path")
@click.argument("source", type=click.File("rb"), default="-")
@click.option("--visibility", type=VISIBILITY_CHOICE, help="Visibility to apply.")
@click.option("--update", "overwrite", is_flag=True, help="Overwrite and report the MIME type.")
@click.pass_context
@handle_cli_errors("put")
def put(ctx: click.Context, path: str, source, visibility: str | None, overwrite: bool) -> None:
    """Store SOURCE (default: standard input) at PATH."""
    adapter = _get_adapter(ctx)
    config = WriteConfig(visibility=visibility)
    if overwrite:
        result = adapter.update(path, source.read(), config)
    else:
        result = adapter.write_stream(path, source, config)
    if result is None:
        operation_failed_error("write", path)
    if not ctx.obj["quiet"]:
        details = f" ({result.mimetype})" if result.mimetype else ""
        click.echo(f"Stored {path}{details}")


@cli.command("rm")
@click.argument("path")
@click.pass_context
@handle_cli_errors("rm")
def rm(ctx: click.Context, path: str) -> None:
    """Delete the file at PATH."""
    if not _get_adapter(ctx).delete(path):
        operation_failed_error("delete", path)


@cli.command("mkdir")
@click.argument("dirname")
@click.option("--visibility", type=VISIBILITY_CHOICE, default="public", show_default=True)
@click.pass_context
@handle_cli_errors("mkdir")
def mkdir(ctx: click.Context, dirname: str, visibility: str) -> None:
    """Create DIRNAME and any missing parents."""
    if _get_adapter(ctx).create_dir(dirname, WriteConfig(visibility=visibility)) is None:
        operation_failed_error("create directory", dirname)


@cli.command("rmdir")
@click.argument("dirname")
@click.pass_context
@handle_cli_errors("rmdir")
def rmdir(ctx: click.Context, dirname: str) -> None:
    """Delete DIRNAME and everything below it."""
    if not _get_adapter(ctx).delete_dir(dirname):
        operation_failed_error("delete directory", dirname)


@cli.command("mv")
@click.argument("path")
@click.argument("new_path")
@click.pass_context
@handle_cli_errors("mv")
def mv(ctx: click.Context, path: str, new_path: str) -> None:
    """Move PATH to NEW_PATH."""
    if not _get_adapter(ctx).rename(path, new_path):
        operation_failed_error("move", path)


@cli.command("cp")
@click.argument("path")
@click.argument("new_path")
@click.pass_context
@handle_cli_errors("cp")
def cp(ctx: click.Context, path: str, new_path: str) -> None:
    """Copy the file PATH to NEW_PATH."""
    if not _get_adapter(ctx).copy(path, new_path):
        operation_failed_error("copy", path)


@cli.command("stat")
@click.argument("path")
@click.pass_context
@handle_cli_errors("stat")
def stat_cmd(ctx: click.Context, path: str) -> None:
    """Show metadata and visibility for PATH."""
    adapter = _get_adapter(ctx)
    metadata = adapter.get_metadata(path)
    if metadata is None:
        not_found_error(path)
    click.echo(_format_metadata(metadata))
    visibility = adapter.get_visibility(path)
    if visibility is not None:
        click.echo(f"visibility: {visibility.visibility.value}")


@cli.command("visibility")
@click.argument("path")
@click.argument("value", type=VISIBILITY_CHOICE, required=False)
@click.pass_context
@handle_cli_errors("visibility")
def visibility_cmd(ctx: click.Context, path: str, value: str | None) -> None:
    """Show the visibility of PATH, or set it to VALUE."""
    adapter = _get_adapter(ctx)
    if value is None:
        result = adapter.get_visibility(path)
    else:
        result = adapter.set_visibility(path, value)
    if result is None:
        operation_failed_error("change visibility of" if value else "inspect", path)
    click.echo(result.visibility.value)


@cli.command("mimetype")
@click.argument("path")
@click.pass_context
@handle_cli_errors("mimetype")
def mimetype(ctx: click.Context, path: str) -> None:
    """Detect the MIME type of PATH."""
    result = _get_adapter(ctx).get_mimetype(path)
    if result is None:
        operation_failed_error("read", path)
    click.echo(result.mimetype)


def main() -> int:
    """Main entrypoint for the CLI."""
    try:
        cli(obj={})
        return 0
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
