"""
Command-line interface for the Git provider API.
"""
import sys

import click
import requests
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import print as rprint

from git_api.config import get_settings
from git_api.core import (
    GitHost,
    GitHeader,
    GitEvent,
    FileDescriptor,
    CreatePullRequestOptions,
    MergePullRequestOptions,
    CreateWebhookOptions,
    GitApiError,
    WebhookAlreadyExists,
    UnsupportedWebhookEvent,
)
from git_api.adapters import AdapterFactory
from git_api.utils import get_logger, LoggerSetup

console = Console()
logger = get_logger(__name__)


def _fail(message: str) -> None:
    rprint(f"[red]Error: {message}[/red]")
    sys.exit(1)


class _AdapterErrors:
    """Turns adapter and HTTP failures into a red message and exit code 1."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc is None:
            return False
        if isinstance(exc, requests.HTTPError):
            status = exc.response.status_code if exc.response is not None else "?"
            logger.debug(f"HTTP error: {exc}")
            _fail(f"HTTP {status}: {exc}")
        if isinstance(exc, (GitApiError, requests.RequestException, ValueError)):
            _fail(str(exc))
        return False


@click.group()
@click.version_option(version="0.1.0")
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True), help='Path to configuration file')
@click.option('--url', help='Repository url, overrides GIT_URL')
@click.option('--host-type', type=click.Choice([h.value for h in GitHost]), help='Git host type')
@click.option('--username', '-u', help='Git user name, overrides GIT_USERNAME')
@click.option('--token', '-t', help='Password or token, overrides GIT_TOKEN')
@click.option('--branch', '-b', help='Branch to operate on')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug output')
@click.pass_context
def main(ctx, config_path, url, host_type, username, token, branch, verbose):
    """Work with GitHub, GitLab and Bitbucket repositories through one API."""
    settings = get_settings(config_path, reload=config_path is not None)

    overrides = {
        "url": url,
        "host_type": host_type,
        "username": username,
        "token": token,
        "branch": branch,
    }
    for key, value in overrides.items():
        if value:
            setattr(settings.git, key, value)

    if verbose:
        LoggerSetup.set_verbose(True)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


def _adapter(ctx):
    if "adapter" not in ctx.obj:
        with _AdapterErrors():
            ctx.obj["adapter"] = AdapterFactory.create_from_settings()
    return ctx.obj["adapter"]


@main.command()
@click.option('--validate', is_flag=True, help='Validate configuration')
@click.pass_context
def config(ctx, validate: bool):
    """Show and validate configuration."""
    settings = ctx.obj["settings"]

    if validate:
        errors = settings.validate()
        if errors:
            rprint("[red]Configuration validation failed:[/red]")
            for error in errors:
                rprint(f"  • {error}")
            sys.exit(1)
        rprint("[green]Configuration is valid![/green]")
        return

    rprint(Panel.fit(
        "[bold blue]Git Provider API Configuration[/bold blue]",
        border_style="blue"
    ))

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Setting", style="cyan", width=40)
    table.add_column("Value", style="green")

    for section_name, section_data in settings.to_dict().items():
        for key, value in section_data.items():
            table.add_row(f"{section_name}.{key}", str(value))

    console.print(table)


@main.command("default-branch")
@click.pass_context
def default_branch(ctx):
    """Print the repository's default branch."""
    adapter = _adapter(ctx)

    with _AdapterErrors():
        branch = adapter.get_default_branch()

    if branch is None:
        _fail("Repository has no default branch")
    click.echo(branch)


@main.command("list-files")
@click.pass_context
def list_files(ctx):
    """List the files at the root of the branch."""
    adapter = _adapter(ctx)

    with _AdapterErrors():
        files = adapter.list_files()

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Path", style="cyan")
    table.add_column("Url", style="dim")
    for descriptor in files:
        table.add_row(descriptor.path, descriptor.url or "")

    console.print(table)
    rprint(f"[dim]{len(files)} file(s)[/dim]")


@main.command("cat")
@click.argument('path')
@click.pass_context
def cat(ctx, path):
    """Print the contents of a file."""
    adapter = _adapter(ctx)

    with _AdapterErrors():
        contents = adapter.get_file_contents(FileDescriptor(path=path))

    click.echo(contents.decode("utf-8", errors="replace"), nl=False)


@main.command("create-webhook")
@click.option('--webhook-url', help='Url the hook posts to')
@click.option('--jenkins-url', help='Jenkins url the hook url is derived from')
@click.option('--jenkins-user', help='Jenkins user embedded in the hook url')
@click.option('--jenkins-password', help='Jenkins password embedded in the hook url')
@click.option('--job-name', help='Jenkins job name')
@click.pass_context
def create_webhook(ctx, webhook_url, jenkins_url, jenkins_user, jenkins_password, job_name):
    """Register a push webhook on the repository."""
    if not webhook_url and not jenkins_url:
        _fail("Either --webhook-url or --jenkins-url is required")

    adapter = _adapter(ctx)
    options = CreateWebhookOptions(
        webhook_url=webhook_url,
        jenkins_url=jenkins_url,
        jenkins_user=jenkins_user,
        jenkins_password=jenkins_password,
        job_name=job_name,
    )

    with _AdapterErrors():
        try:
            hook_id = adapter.create_webhook(options)
        except WebhookAlreadyExists:
            rprint("[yellow]Webhook already exists on repository[/yellow]")
            return

    rprint(f"[green]Created webhook {hook_id}[/green]")


@main.command("webhook-paths")
@click.pass_context
def webhook_paths(ctx):
    """Show where ref, revision and repository live in webhook payloads."""
    adapter = _adapter(ctx)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("header.event", adapter.get_header(GitHeader.EVENT))
    for event in GitEvent:
        try:
            table.add_row(f"event.{event.value}", adapter.get_event_name(event))
        except UnsupportedWebhookEvent:
            table.add_row(f"event.{event.value}", "[dim]not supported[/dim]")
    table.add_row("path.ref", adapter.get_ref_path())
    table.add_row("path.revision", adapter.get_revision_path())
    table.add_row("path.repository_url", adapter.get_repository_url_path())
    table.add_row("path.repository_name", adapter.get_repository_name_path())

    with _AdapterErrors():
        table.add_row("ref", adapter.get_ref())

    console.print(table)


@main.group()
def pr():
    """Pull request operations."""


@pr.command("get")
@click.argument('number', type=int)
@click.pass_context
def pr_get(ctx, number):
    """Show a pull request."""
    adapter = _adapter(ctx)

    with _AdapterErrors():
        pull_request = adapter.get_pull_request(number)

    rprint(
        f"#{pull_request.pull_number}: "
        f"[cyan]{pull_request.source_branch}[/cyan] -> "
        f"[cyan]{pull_request.target_branch}[/cyan]"
    )


@pr.command("create")
@click.option('--title', required=True, help='Pull request title')
@click.option('--source', 'source_branch', required=True, help='Branch with the changes')
@click.option('--target', 'target_branch', help='Branch to merge into, defaults to the default branch')
@click.option('--draft', is_flag=True, help='Open as draft')
@click.option('--maintainer-can-modify', is_flag=True, help='Allow maintainers to push to the branch')
@click.pass_context
def pr_create(ctx, title, source_branch, target_branch, draft, maintainer_can_modify):
    """Open a pull request."""
    adapter = _adapter(ctx)

    with _AdapterErrors():
        if not target_branch:
            target_branch = adapter.get_default_branch()
        pull_request = adapter.create_pull_request(CreatePullRequestOptions(
            title=title,
            source_branch=source_branch,
            target_branch=target_branch,
            maintainer_can_modify=maintainer_can_modify,
            draft=draft,
        ))

    rprint(f"[green]Created pull request #{pull_request.pull_number}[/green]")


@pr.command("merge")
@click.argument('number', type=int)
@click.option('--title', help='Commit title')
@click.option('--message', help='Commit message')
@click.option('--method', type=click.Choice(['merge', 'squash', 'rebase']), default='merge')
@click.pass_context
def pr_merge(ctx, number, title, message, method):
    """Merge a pull request."""
    adapter = _adapter(ctx)

    with _AdapterErrors():
        result = adapter.merge_pull_request(MergePullRequestOptions(
            pull_number=number,
            title=title,
            message=message,
            method=method,
        ))

    rprint(f"[green]{result}[/green]")


@pr.command("update-branch")
@click.argument('number', type=int)
@click.pass_context
def pr_update_branch(ctx, number):
    """Update a pull request branch with its base."""
    adapter = _adapter(ctx)

    with _AdapterErrors():
        result = adapter.update_pull_request_branch(number)

    rprint(f"[green]{result}[/green]")


if __name__ == "__main__":
    main()
