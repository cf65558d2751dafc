#!/usr/bin/env python3
"""
IAM role copy CLI

Copies an IAM role (trust policy, inline policies and attached managed
policies) to a new role, optionally in another account reached by assuming
a role there.

Usage:
    iam-copy-role SOURCE_ROLE_NAME TARGET_ROLE_NAME [ROLE_TO_ASSUME_ARN]
    python -m iam_copy_role SOURCE_ROLE_NAME TARGET_ROLE_NAME [ROLE_TO_ASSUME_ARN]

Module: cli
"""

import sys
from typing import Optional, Tuple

import click
from dotenv import load_dotenv

from .config import get_config
from .copier import CopyResult, copy_role
from .errors import UsageError
from .logging_config import configure_logging
from .models import Arguments
from .version import __version__

FAILURE_BANNER = r"""
  _____       _ _          _
 |  ___|_ _  (_) |___   __| |
 | |_ / _` | | | / _ \ / _` |
 |  _| (_| | | |  __/| (_| |
 |_|  \__,_| |_|_\___| \__,_|
"""


def handle_error(error: Exception, verbose: bool = False) -> None:
    """Handle and format errors"""
    if verbose:
        click.echo(f"Error: {type(error).__name__}: {error}", err=True)
        import traceback

        traceback.print_exc()
    else:
        click.echo(f"Error: {error}", err=True)
    sys.exit(1)


def report(result: CopyResult) -> None:
    """Print the outcome of a copy run."""
    if result.succeeded:
        click.echo(
            f"Copied {result.arguments.source_role_name} to {result.arguments.target_role_name} "
            f"({result.inline_policy_count} inline, {result.managed_policy_count} managed policies)"
        )
        click.echo("\nDone!")
        return

    click.echo(FAILURE_BANNER, err=True)
    click.echo(result.error.format(), err=True)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("role_args", nargs=-1, metavar="SOURCE_ROLE_NAME TARGET_ROLE_NAME [ROLE_TO_ASSUME_ARN]")
@click.option("--region", "-r", default=None, help="AWS region for STS and IAM clients (default: $AWS_REGION)")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging and verbose error output")
@click.version_option(version=__version__, prog_name="iam-copy-role")
def cli(role_args: Tuple[str, ...], region: Optional[str], verbose: bool):
    """
    Copy an IAM role and its policies to a new role

    The source role is read with the default AWS credentials. When
    ROLE_TO_ASSUME_ARN is given, the new role is created with temporary
    credentials of that role, e.g. in another account.

    Role names starting with "-" go after "--" so they are not read as
    options.

    Examples:
        iam-copy-role app-role app-role-copy
        iam-copy-role app-role app-role arn:aws:iam::123456789012:role/Admin
        iam-copy-role --region eu-west-1 -- -legacy-role legacy-role-copy
    """
    try:
        arguments = Arguments.from_argv(list(role_args))
    except UsageError as e:
        raise click.UsageError(e.message)

    try:
        load_dotenv()
        config = get_config(aws_region=region, log_level="DEBUG" if verbose else None)
        configure_logging(config.log_level, config.use_json_logs)

        click.echo(
            f"Source role name: {arguments.source_role_name}, target role name: {arguments.target_role_name}, "
            f"role to assume: {arguments.role_to_assume_arn or '-'}"
        )

        result = copy_role(arguments, config=config)
    except Exception as e:
        handle_error(e, verbose)

    report(result)
    if not result.succeeded:
        sys.exit(result.exit_code)


def main():
    cli()


if __name__ == "__main__":
    main()
