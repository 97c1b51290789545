"""CLI Adapter - Command-line interface for the WAF Web ACL manager."""
import functools
import json
import sys
from typing import Any, Callable

import click

from webacl_manager import __version__
from webacl_manager.adapters.outbound import CloudWatchLogger, ConsoleLogger
from webacl_manager.application.web_acl_service import create_web_acl_service
from webacl_manager.config import LOG_FORMATS, Settings
from webacl_manager.domain.entities import ResourceData
from webacl_manager.domain.exceptions import ConfigurationError, WebACLError
from webacl_manager.domain.value_objects import RuleType
from webacl_manager.ports.outbound import LoggerPort


@click.group()
@click.version_option(version=__version__, prog_name="webacl-manager")
def cli() -> None:
    """
    WAF Web ACL Manager - Manage AWS WAF Classic Web ACLs from JSON definitions.

    A definition is a JSON object with name, metric_name, default_action and
    rules. Every change is applied with a fresh change token and retried when
    WAF reports the token as stale.
    """
    pass


def common_options(command: Callable) -> Callable:
    """Options shared by every command that talks to AWS."""

    @click.option(
        "--scope", "-s",
        default=None,
        help='WAF scope: "global" (CloudFront) or a region for waf-regional. Env: WAF_SCOPE.',
    )
    @click.option(
        "--role-arn",
        default=None,
        help="IAM role ARN to assume for cross-account management.",
    )
    @click.option(
        "--log-format",
        type=click.Choice(LOG_FORMATS, case_sensitive=False),
        default=None,
        help="Log output format. Env: LOG_FORMAT.",
    )
    @click.option(
        "--verbose", "-v",
        is_flag=True,
        help="Enable verbose output (DEBUG level logging).",
    )
    @click.option(
        "--quiet", "-q",
        is_flag=True,
        help="Suppress all output except errors and results.",
    )
    @functools.wraps(command)
    def wrapper(
        scope: str | None,
        role_arn: str | None,
        log_format: str | None,
        verbose: bool,
        quiet: bool,
        **kwargs: Any,
    ) -> None:
        try:
            settings = Settings.from_env().with_overrides(
                scope=scope,
                log_format=log_format.lower() if log_format else None,
            )
        except ConfigurationError as e:
            raise click.UsageError(str(e)) from e

        if verbose:
            settings = settings.with_overrides(log_level="DEBUG")
        elif quiet:
            settings = settings.with_overrides(log_level="ERROR")

        logger = _make_logger(settings)
        if isinstance(logger, CloudWatchLogger):
            logger.set_context(scope=settings.scope, command=click.get_current_context().info_name)

        try:
            service = create_web_acl_service(logger=logger, settings=settings, role_arn=role_arn)
            command(service=service, logger=logger, **kwargs)
        except WebACLError as e:
            logger.error(f"Command failed: {e}", exception=e)
            sys.exit(1)

    return wrapper


@cli.command()
@click.argument("definition", type=click.Path(exists=True, dir_okay=False))
@common_options
def create(service, logger: LoggerPort, definition: str) -> None:
    """
    Create a Web ACL from a JSON DEFINITION file.

    Examples:

        # Create a global (CloudFront) Web ACL
        webacl-manager create acl.json

        # Create a regional Web ACL
        webacl-manager create acl.json --scope eu-west-1
    """
    data = ResourceData(attributes=_load_definition(definition))
    service.create(data)
    _echo_state(data)


@cli.command()
@click.argument("web_acl_id")
@common_options
def show(service, logger: LoggerPort, web_acl_id: str) -> None:
    """
    Show the current definition of a Web ACL.
    """
    data = service.load(web_acl_id)
    if data.is_absent():
        raise _absent(web_acl_id)
    _echo_state(data)


@cli.command()
@click.argument("web_acl_id")
@click.argument("definition", type=click.Path(exists=True, dir_okay=False))
@common_options
def update(service, logger: LoggerPort, web_acl_id: str, definition: str) -> None:
    """
    Apply a JSON DEFINITION file to an existing Web ACL.

    Every declared rule is sent again as an INSERT; the default action is
    sent only when it differs from the current one.
    """
    data = service.load(web_acl_id)
    if data.is_absent():
        raise _absent(web_acl_id)
    data.apply_config(_load_definition(definition))
    service.update(data)
    _echo_state(data)


@cli.command()
@click.argument("web_acl_id")
@common_options
def delete(service, logger: LoggerPort, web_acl_id: str) -> None:
    """
    Remove all rules from a Web ACL, then delete it.

    A Web ACL that no longer exists is reported and treated as deleted.
    """
    data = service.load(web_acl_id)
    if data.is_absent():
        logger.warning(f"WAF Web ACL {web_acl_id} does not exist, nothing to delete")
        return
    service.delete(data)
    click.echo(f"Deleted WAF Web ACL {web_acl_id}")


@cli.command(name="list")
@common_options
def list_web_acls(service, logger: LoggerPort) -> None:
    """
    List the Web ACLs in a scope.
    """
    web_acls = service.list_web_acls()
    if not web_acls:
        click.echo(f"No WAF Web ACLs found in scope {service.scope}")
        return
    for web_acl in web_acls:
        click.echo(f"{web_acl.id}\t{web_acl.name}")


@cli.command()
@click.option(
    "--role-arn",
    default=None,
    help="IAM role ARN to assume (test assumed role identity).",
)
def whoami(role_arn: str | None) -> None:
    """
    Show the current AWS identity.

    Useful for verifying credentials before making changes.
    """
    logger = ConsoleLogger(level="INFO")

    try:
        from webacl_manager.adapters.outbound import Boto3WafClient

        waf_client = Boto3WafClient(logger=logger)

        if role_arn:
            waf_client = waf_client.assume_role(
                role_arn=role_arn,
                session_name="webacl-manager-test",
            )

        identity = waf_client.get_caller_identity()

        click.echo(f"Account: {identity['account']}")
        click.echo(f"ARN: {identity['arn']}")
        click.echo(f"User ID: {identity['user_id']}")

    except Exception as e:
        logger.error(f"Failed to get identity: {e}", exception=e)
        sys.exit(1)


@cli.command()
def list_rule_types() -> None:
    """
    List the rule types a Web ACL can bind.
    """
    click.echo("Supported rule types:\n")
    for rule_type in RuleType:
        payload = "override_action" if rule_type.uses_override_action else "action"
        click.echo(f"  {rule_type.value}")
        click.echo(f"    Display name: {rule_type.display_name}")
        click.echo(f"    Requires: {payload}")
        click.echo()


def _make_logger(settings: Settings) -> LoggerPort:
    if settings.log_format == "json":
        return CloudWatchLogger(level=settings.log_level, stream=sys.stderr)
    return ConsoleLogger(level=settings.log_level, stream=sys.stderr)


def _load_definition(path: str) -> dict[str, Any]:
    """Read a Web ACL definition from a JSON file."""
    try:
        with open(path) as f:
            definition = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(definition, dict):
        raise ConfigurationError(f"{path} must contain a JSON object")
    return definition


def _absent(web_acl_id: str) -> WebACLError:
    return WebACLError(f"WAF Web ACL {web_acl_id} does not exist")


def _echo_state(data: ResourceData) -> None:
    click.echo(json.dumps(data.to_dict(), indent=2))


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
