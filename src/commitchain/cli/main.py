"""Main CLI interface for commitchain."""

import json
import re
import time
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from commitchain.config import ChainSettings
from commitchain.core.repository import Repository
from commitchain.exceptions import CommitChainError
from commitchain.log import configure_logging

console = Console()

# NAME+MESSAGE and NAME<OTHER split at the first '+' or '<';
# NAME-ID splits at the last '-', so names may contain '-'.
_COMMIT_OR_SYNC = re.compile(r"[+<]")


class Operation(NamedTuple):
    repo: str
    op: str
    arg: str


def _parse_operation(text: str) -> Operation:
    """Parse a single replay operation."""
    match = _COMMIT_OR_SYNC.search(text)
    if match is not None:
        operation = Operation(text[: match.start()], match.group(), text[match.end() :])
    else:
        operation = Operation(*text.rpartition("-"))

    if not operation.repo or not operation.op:
        raise click.BadParameter(
            f"'{text}' is not NAME+MESSAGE, NAME-ID or NAME<OTHER",
            param_hint="OPS",
        )
    if operation.op in "-<" and not operation.arg:
        raise click.BadParameter(f"'{text}' is missing its target", param_hint="OPS")
    return operation


def _get_repo(
    repos: Dict[str, Repository], name: str, settings: ChainSettings
) -> Repository:
    if name not in repos:
        repos[name] = Repository(
            name, tz=settings.tzinfo(), date_format=settings.date_format
        )
    return repos[name]


def _apply(
    operation: Operation, repos: Dict[str, Repository], settings: ChainSettings
) -> None:
    repo = _get_repo(repos, operation.repo, settings)

    if operation.op == "+":
        repo.commit(operation.arg)
        # Keep consecutive commits on distinct timestamps
        if settings.commit_spacing_ms:
            time.sleep(settings.commit_spacing_ms / 1000)
    elif operation.op == "-":
        if not repo.drop(operation.arg):
            console.print(
                f"[yellow]No commit {escape(operation.arg)} in {escape(repo.name)}[/yellow]"
            )
    else:
        repo.synchronize(_get_repo(repos, operation.arg, settings))


def _render_table(repo: Repository, limit: int, settings: ChainSettings) -> Table:
    table = Table(title=escape(f"{repo.name} ({repo.size} commits)"))
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Date", style="magenta")
    table.add_column("Message", style="green")

    tz = settings.tzinfo()
    for commit in repo.log(limit):
        if tz is None:
            moment = commit.created_at
        else:
            moment = commit.created_at.astimezone(tz)
        table.add_row(
            commit.id, moment.strftime(settings.date_format), escape(commit.message)
        )
    return table


@click.group()
@click.version_option(package_name="commitchain")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON settings file",
)
@click.option("--debug", is_flag=True, help="Log repository operations")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[Path], debug: bool):
    """commitchain - in-memory commit chains and chronological merges."""
    try:
        settings = ChainSettings.load(config_path)
    except ValueError as e:
        console.print(f"[red]Invalid settings: {escape(str(e))}[/red]")
        raise click.Abort() from e

    configure_logging("DEBUG" if debug else settings.log_level)
    ctx.obj = settings


@main.command()
@click.argument("ops", nargs=-1, required=True)
@click.option(
    "--limit",
    default=10,
    type=click.IntRange(min=1),
    help="Commits to show per repository",
)
@click.option("--plain", is_flag=True, help="Print raw history text instead of tables")
@click.pass_obj
def replay(settings: ChainSettings, ops: List[str], limit: int, plain: bool):
    """Run operations against named repositories and show their history.

    \b
    OPS are applied in order:
      NAME+MESSAGE   commit MESSAGE into NAME
      NAME-ID        drop commit ID from NAME
      NAME<OTHER     synchronize OTHER into NAME

    NAME may contain "-"; a drop splits at the last one.
    """
    operations = [_parse_operation(text) for text in ops]
    repos: Dict[str, Repository] = {}

    try:
        for operation in operations:
            _apply(operation, repos, settings)
    except (CommitChainError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise click.Abort() from e

    for repo in repos.values():
        if plain:
            click.echo(str(repo))
            if repo.size:
                click.echo(repo.history(limit))
            continue
        if repo.size:
            console.print(_render_table(repo, limit, settings))
        else:
            console.print(f"[yellow]{escape(str(repo))}[/yellow]")


@main.command("config")
@click.pass_obj
def show_config(settings: ChainSettings):
    """Show the effective settings."""
    click.echo(json.dumps(settings.model_dump(mode="json"), indent=2))


if __name__ == "__main__":
    main()
