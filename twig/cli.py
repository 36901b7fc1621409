"""
Command-line interface for twig.

A thin adapter: each command parses its arguments, calls one Repository
operation and prints the result. Any TwigError is printed as its one-line
message and the process exits with status 1.
"""

import functools
import sys
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

import click

from twig import __version__
from twig.config import Config
from twig.logging import get_twig_logger, initialize_logging
from twig.repository import Repository, TwigError, UserInputError, format_log_entry

log = get_twig_logger("cli")


def handle_errors(func: Callable) -> Callable:
    """Turn TwigError into a printed message and exit status 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except TwigError as e:
            log.debug("Command failed", error=str(e), error_type=type(e).__name__)
            click.echo(str(e))
            sys.exit(1)

    return wrapper


class CheckoutCommand(click.Command):
    """Records where ``--`` appeared, since click consumes it while parsing."""

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        ctx.meta["twig.separator_at"] = args.index("--") if "--" in args else None
        return super().parse_args(ctx, args)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "-C",
    "--directory",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    help="Run as if started in this directory",
)
@click.option(
    "--log-level",
    type=click.Choice(["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Override TWIG_LOG_LEVEL",
)
@click.pass_context
def cli(ctx: click.Context, directory: Path, log_level: Optional[str]) -> None:
    """twig: a small local version-control system."""
    config = Config.from_env()
    if log_level:
        config = config.model_copy(
            update={"logging": config.logging.model_copy(update={"level": log_level})}
        )
    initialize_logging(config.logging)
    ctx.obj = Repository(directory, config.repository)


@cli.command()
@click.pass_obj
@handle_errors
def init(repo: Repository) -> None:
    """Create a new repository in the current directory."""
    repo.initialize()
    click.echo(f"Initialized empty twig repository in {repo.layout.base_dir}")


@cli.command()
@click.argument("filename")
@click.pass_obj
@handle_errors
def add(repo: Repository, filename: str) -> None:
    """Stage a file for the next commit."""
    repo.add(filename)


@cli.command()
@click.argument("message", required=False, default="")
@click.pass_obj
@handle_errors
def commit(repo: Repository, message: str) -> None:
    """Record staged changes."""
    repo.commit(message)


@cli.command()
@click.argument("filename")
@click.pass_obj
@handle_errors
def rm(repo: Repository, filename: str) -> None:
    """Unstage a file, or stage its removal and delete it."""
    repo.rm(filename)


@cli.command("log")
@click.pass_obj
@handle_errors
def show_log(repo: Repository) -> None:
    """Show first-parent history of HEAD."""
    click.echo("\n".join(format_log_entry(c) for c in repo.log()))


@cli.command("global-log")
@click.pass_obj
@handle_errors
def global_log(repo: Repository) -> None:
    """Show every commit ever made."""
    click.echo("\n".join(format_log_entry(c) for c in repo.global_log()))


@cli.command()
@click.argument("message")
@click.pass_obj
@handle_errors
def find(repo: Repository, message: str) -> None:
    """Print ids of commits with exactly this message."""
    for commit_id in repo.find(message):
        click.echo(commit_id)


@cli.command()
@click.pass_obj
@handle_errors
def status(repo: Repository) -> None:
    """Show branches, staged changes and working-tree changes."""
    click.echo(repo.status().format())


@cli.command(cls=CheckoutCommand)
@click.argument("operands", nargs=-1, required=True)
@click.option("--detach", is_flag=True, help="Check out a commit with a detached HEAD")
@click.pass_context
@handle_errors
def checkout(ctx: click.Context, operands: Tuple[str, ...], detach: bool) -> None:
    """Restore a file or switch branches.

    \b
    twig checkout BRANCH
    twig checkout -- FILE
    twig checkout COMMIT -- FILE
    twig checkout --detach COMMIT
    """
    repo: Repository = ctx.obj
    separator_at = ctx.meta.get("twig.separator_at")

    if detach:
        if separator_at is not None or len(operands) != 1:
            raise UserInputError("Incorrect operands.")
        repo.checkout_commit(operands[0])
    elif separator_at is None and len(operands) == 1:
        repo.checkout_branch(operands[0])
    elif separator_at is not None and len(operands) == 1:
        repo.checkout_file(operands[0])
    elif separator_at is not None and len(operands) == 2 and separator_at > 0:
        repo.checkout_file_at(operands[0], operands[1])
    else:
        raise UserInputError("Incorrect operands.")


@cli.command()
@click.argument("name")
@click.pass_obj
@handle_errors
def branch(repo: Repository, name: str) -> None:
    """Create a branch at HEAD."""
    repo.branch(name)


@cli.command("rm-branch")
@click.argument("name")
@click.pass_obj
@handle_errors
def rm_branch(repo: Repository, name: str) -> None:
    """Delete a branch pointer."""
    repo.rm_branch(name)


@cli.command()
@click.argument("commit_id")
@click.pass_obj
@handle_errors
def reset(repo: Repository, commit_id: str) -> None:
    """Move the current branch and working tree to a commit."""
    repo.reset(commit_id)


@cli.command()
@click.argument("branch_name")
@click.pass_obj
@handle_errors
def merge(repo: Repository, branch_name: str) -> None:
    """Merge a branch into the current branch."""
    result = repo.merge(branch_name)
    for message in result.messages:
        click.echo(message)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
