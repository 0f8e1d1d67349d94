"""Command-line interface for the tracker clients."""

import re
from typing import Optional, Tuple

import click
import requests

from .api.aha_fields import FieldAction
from .api.factory import APIClientFactory
from .config.settings import SystemConfig
from .exceptions import TrackerClientError
from .utils.logging import setup_logging, get_logger


logger = get_logger(__name__)

ISSUE_REF = re.compile(r"^([^/\s]+)/([^#\s]+)#(\d+)$")

CLIENT_ERRORS = (TrackerClientError, requests.RequestException)


def parse_issue_ref(value: str) -> Tuple[str, str, int]:
    """Split ``org/repo#123``."""
    match = ISSUE_REF.match(value.strip())
    if not match:
        raise click.BadParameter(f"expected ORG/REPO#NUMBER, got {value!r}")
    return match.group(1), match.group(2), int(match.group(3))


def _client(ctx, name: str):
    factory: APIClientFactory = ctx.obj['factory']
    client = getattr(factory, f"create_{name}_client")()
    if client is None:
        click.echo(f"❌ {name} client is not configured")
        raise click.Abort()
    return client


@click.group()
@click.option('--config', 'config_path', type=click.Path(), help='JSON configuration file')
@click.option('--log-level', help='Override the configured log level')
@click.pass_context
def cli(ctx, config_path: Optional[str], log_level: Optional[str]):
    """Aha, GitHub and ZenHub tracker tools."""
    config = SystemConfig.from_file(config_path) if config_path else SystemConfig.from_env()
    if log_level:
        config.logging.level = log_level

    if not config.validate():
        click.echo("❌ Invalid configuration")
        raise click.Abort()

    setup_logging(config.logging)

    ctx.ensure_object(dict)
    ctx.obj['config'] = config
    ctx.obj['factory'] = APIClientFactory(config)


@cli.command()
@click.pass_context
def check(ctx):
    """Test the connection of every configured client."""
    clients = ctx.obj['factory'].create_all_clients()
    if not clients:
        click.echo("❌ No clients configured")
        raise click.Abort()

    failed = False
    for name, client in clients.items():
        if client.test_connection():
            click.echo(f"✅ {name}")
        else:
            click.echo(f"❌ {name}")
            failed = True

    if failed:
        raise click.Abort()


@cli.command('aha-field')
@click.argument('product_id')
@click.argument('feature_id')
@click.argument('field_name')
@click.argument('action', type=click.Choice([a.value for a in FieldAction], case_sensitive=False))
@click.argument('value', required=False, default="")
@click.pass_context
def aha_field(ctx, product_id: str, feature_id: str, field_name: str, action: str, value: str):
    """Get, set, compare or remove a custom field of an Aha feature."""
    aha = _client(ctx, 'aha')
    try:
        product = aha.get_product(product_id)
        feature = aha.get_feature(product, feature_id)
        result = aha.custom_field(feature, field_name, action, value)
    except CLIENT_ERRORS as e:
        click.echo(f"❌ {action.upper()} {field_name!r} failed: {e}")
        raise click.Abort()

    if action.upper() in (FieldAction.GET.value, FieldAction.COMPARE.value):
        click.echo(result)
    else:
        click.echo(f"✅ {feature.reference_num} {field_name!r} updated")


@cli.group('issue-data')
def issue_data():
    """Read and edit the data block of a GitHub issue."""
    pass


@issue_data.command('show')
@click.argument('issue_ref')
@click.pass_context
def issue_data_show(ctx, issue_ref: str):
    """Print the entries of ORG/REPO#NUMBER."""
    org, repo, num = parse_issue_ref(issue_ref)
    github = _client(ctx, 'github')
    try:
        issue = github.get_issue_by_number(org, repo, num)
    except CLIENT_ERRORS as e:
        click.echo(f"❌ Failed to load {issue_ref}: {e}")
        raise click.Abort()

    for label, value in github.get_issue_data(issue).entries:
        click.echo(f"{label}: {value}")


@issue_data.command('set')
@click.argument('issue_ref')
@click.argument('label')
@click.argument('value')
@click.option('--add', is_flag=True, help='Add the value instead of replacing every value of the label')
@click.pass_context
def issue_data_set(ctx, issue_ref: str, label: str, value: str, add: bool):
    """Set LABEL to VALUE on ORG/REPO#NUMBER."""
    org, repo, num = parse_issue_ref(issue_ref)
    github = _client(ctx, 'github')
    try:
        issue = github.get_issue_by_number(org, repo, num)
        if add:
            github.add_data(issue, label, value)
        else:
            github.set_data(issue, label, value)
    except CLIENT_ERRORS as e:
        click.echo(f"❌ Failed to update {issue_ref}: {e}")
        raise click.Abort()

    click.echo(f"✅ {issue_ref} {label}: {value}")


@issue_data.command('delete')
@click.argument('issue_ref')
@click.argument('label')
@click.argument('value', required=False, default="")
@click.pass_context
def issue_data_delete(ctx, issue_ref: str, label: str, value: str):
    """Delete LABEL (or just VALUE of it) from ORG/REPO#NUMBER."""
    org, repo, num = parse_issue_ref(issue_ref)
    github = _client(ctx, 'github')
    try:
        issue = github.get_issue_by_number(org, repo, num)
        github.delete_data(issue, label, value)
    except CLIENT_ERRORS as e:
        click.echo(f"❌ Failed to update {issue_ref}: {e}")
        raise click.Abort()

    click.echo(f"✅ {issue_ref} {label} deleted")


@cli.command('zenhub-move')
@click.argument('repo_id', type=int)
@click.argument('issue_number', type=int)
@click.argument('workspace')
@click.argument('pipeline')
@click.pass_context
def zenhub_move(ctx, repo_id: int, issue_number: int, workspace: str, pipeline: str):
    """Move an issue to a pipeline of a ZenHub workspace."""
    zenhub = _client(ctx, 'zenhub')
    try:
        zenhub.set_issue_pipeline_by_name(repo_id, workspace, issue_number, pipeline)
    except CLIENT_ERRORS as e:
        click.echo(f"❌ Move failed: {e}")
        raise click.Abort()

    click.echo(f"✅ Moved #{issue_number} to {pipeline!r}")


@cli.command('serve-webhooks')
@click.option('--host', help='Host to bind to')
@click.option('--port', type=int, help='Port to listen on')
@click.pass_context
def serve_webhooks(ctx, host: Optional[str], port: Optional[int]):
    """Run the webhook receiver."""
    config: SystemConfig = ctx.obj['config']
    if host:
        config.webhooks.host = host
    if port:
        config.webhooks.port = port

    receiver = ctx.obj['factory'].create_webhook_receiver()
    if not config.webhooks.github_secret:
        logger.warning("No GitHub webhook secret configured, signatures are not checked")
    receiver.start()


if __name__ == '__main__':
    cli()
