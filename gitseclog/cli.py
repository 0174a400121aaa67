"""CLI entrypoint for gitseclog."""

import os
import sys
from pathlib import Path

import click

from . import __version__
from .config import resolve_config_path


@click.group(invoke_without_command=True)
@click.version_option(__version__, prog_name="gitseclog")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file (defaults to $GITSECLOG_CONFIG or /etc/gitseclog/gitseclog.yaml)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None) -> None:
    """gitseclog - security audit log for git pushes.

    Link this command as hooks/post-receive in a bare repository. Git
    writes one "<old_rev> <new_rev> <ref_name>" line per updated ref to
    stdin; every branch created or deleted and every file added, modified
    or deleted is logged with the pushing user, client address and
    repository.

    The default record fields are TIME,USER,CLIENT_IP,REPO,COMMIT,AUTHOR,ACTION,FILE.
    Records go to syslog and, when `logfile` is configured, to a file.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = resolve_config_path(config_path)

    if ctx.invoked_subcommand is not None:
        return

    if not os.environ.get("GIT_DIR"):
        raise click.UsageError(
            "GIT_DIR is not set. gitseclog runs as a git post-receive hook, not from the command line.",
            ctx=ctx,
        )

    from .commands.hook_cmd import run_post_receive

    stdin = click.get_text_stream("stdin")
    sys.exit(run_post_receive(ctx.obj["config_path"], stdin))


@cli.command("config")
@click.option("--write", is_flag=True, help="Write the effective config as YAML to the config path")
@click.option("--force", is_flag=True, help="Overwrite an existing config file with --write")
@click.pass_context
def config_cmd(ctx: click.Context, write: bool, force: bool) -> None:
    """Show the effective configuration.

    Examples:

        gitseclog config

        gitseclog --config /var/git/gitseclog.yaml config --write
    """
    from .commands.config_cmd import run_config

    sys.exit(run_config(ctx.obj["config_path"], write=write, force=force))


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
