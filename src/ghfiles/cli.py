"""CLI for reading and pushing GitHub files."""

import asyncio
import logging
from pathlib import Path, PurePosixPath

import click
from dotenv import load_dotenv

from .errors import GitHubFilesError
from .files import GitHubFilesClient
from .models import FilePath

logger = logging.getLogger(__name__)


def setup_logging(verbose: int) -> None:
    """Setup logging."""
    level = logging.DEBUG if verbose >= 2 else logging.INFO if verbose == 1 else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def parse_file_spec(spec: str) -> FilePath:
    """
    Parse `repo/path=local/path`, or a relative local path pushed under
    the same repository path.
    """
    if "=" in spec:
        path, filepath = spec.split("=", 1)
        path = path.strip().lstrip("/")
    else:
        filepath = spec
        if Path(filepath).is_absolute():
            raise click.BadParameter(
                f"absolute path {spec!r} needs an explicit repo path (repo/path={spec})"
            )
        path = Path(filepath).as_posix()

    parts = [part for part in PurePosixPath(path).parts if part != "."]
    if ".." in parts:
        raise click.BadParameter(f"repo path may not contain '..': {spec!r}")
    if not parts or not filepath:
        raise click.BadParameter(f"invalid file spec: {spec!r}")
    return FilePath(path="/".join(parts), filepath=filepath)


def run(coro):
    """Run a client coroutine, turning API errors into a clean exit."""
    try:
        return asyncio.run(coro)
    except GitHubFilesError as e:
        click.echo(f"Error [{e.kind.value}]: {e}", err=True)
        raise SystemExit(1) from e


# ============ CLI Group ============

@click.group()
@click.option("--token", envvar="GITHUB_TOKEN", help="GitHub token")
@click.option("--base-url", envvar="GITHUB_API_URL", help="API root (GitHub Enterprise)")
@click.option("--use-gh-cli", is_flag=True, help="Use gh cli credentials")
@click.option("-v", "--verbose", count=True, help="Verbosity (-v, -vv)")
@click.pass_context
def cli(
    ctx: click.Context,
    token: str | None,
    base_url: str | None,
    use_gh_cli: bool,
    verbose: int,
) -> None:
    """Read, write and push files in a GitHub repository."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    if "client" not in ctx.obj:
        ctx.obj["client"] = GitHubFilesClient(
            token=token, base_url=base_url, use_gh_cli=use_gh_cli
        )


# ============ Commands ============

@cli.command()
@click.argument("owner")
@click.argument("repo")
@click.argument("path", default="")
@click.option("-b", "--branch", help="Branch, tag or commit")
@click.pass_context
def get(ctx, owner, repo, path, branch):
    """Print a file, or list a directory."""
    client: GitHubFilesClient = ctx.obj["client"]
    result = run(client.get_file_contents(owner, repo, path, branch))
    if isinstance(result, list):
        for entry in result:
            click.echo(f"{entry.type}\t{entry.path}")
    else:
        click.echo(result.content, nl=False)


@cli.command()
@click.argument("owner")
@click.argument("repo")
@click.argument("path")
@click.option("-m", "--message", required=True, help="Commit message")
@click.option("-b", "--branch", required=True, help="Target branch")
@click.option("--file", "local_file", type=click.Path(exists=True, dir_okay=False), help="Local file to upload")
@click.option("--content", help="Text to upload")
@click.option("--sha", help="Current blob sha of the file being replaced")
@click.pass_context
def put(ctx, owner, repo, path, message, branch, local_file, content, sha):
    """Create or update a single file."""
    if (local_file is None) == (content is None):
        raise click.UsageError("Give exactly one of --file or --content")
    if local_file is not None:
        content = Path(local_file).read_text(encoding="utf-8")

    client: GitHubFilesClient = ctx.obj["client"]
    result = run(
        client.create_or_update_file(owner, repo, path, content, message, branch, sha)
    )
    click.echo(result.commit.sha)


@cli.command()
@click.argument("owner")
@click.argument("repo")
@click.argument("files", nargs=-1, required=True)
@click.option("-m", "--message", required=True, help="Commit message")
@click.option("-b", "--branch", required=True, help="Target branch")
@click.pass_context
def push(ctx, owner, repo, files, message, branch):
    """
    Push local files as one commit.

    Each FILES entry is `repo/path=local/path`, or a local path pushed
    under the same relative path.
    """
    specs = [parse_file_spec(spec) for spec in files]
    client: GitHubFilesClient = ctx.obj["client"]
    ref = run(client.push_files_from_path(owner, repo, branch, specs, message))
    click.echo(f"{ref.ref} {ref.object.sha}")


def main() -> None:
    load_dotenv()
    cli()


if __name__ == "__main__":
    main()
