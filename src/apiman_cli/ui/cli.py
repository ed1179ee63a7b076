from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from apiman_cli.adapters.declaration import parse_properties
from apiman_cli.app import (
    add_api_policy,
    apply_declaration_file,
    create_api,
    list_apis,
    publish_api,
)
from apiman_cli.config import (
    ConfigurationError,
    configure_logging,
    get_server_config,
    parse_server_version,
)
from apiman_cli.domain.model import ServerVersion

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from apiman_cli.config import ServerConfig

log = logging.getLogger(__name__)


def _server_options() -> argparse.ArgumentParser:
    """Options shared by every command that talks to the management API."""

    options = argparse.ArgumentParser(add_help=False)
    # SUPPRESS keeps a subcommand from resetting a --debug given before it
    options.add_argument(
        "--debug",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Log debug output, including requests to the server",
    )
    options.add_argument(
        "--server",
        type=str,
        help="Management API address (defaults to $APIMAN_SERVER or the local default)",
    )
    options.add_argument(
        "--server-username",
        "--serverUsername",
        type=str,
        help="Management API username (defaults to $APIMAN_SERVER_USERNAME)",
    )
    options.add_argument(
        "--server-password",
        "--serverPassword",
        type=str,
        help="Management API password (defaults to $APIMAN_SERVER_PASSWORD)",
    )
    options.add_argument(
        "--server-version",
        "--serverVersion",
        "-sv",
        type=str,
        choices=[version.value for version in ServerVersion],
        help="Management API server version (defaults to $APIMAN_SERVER_VERSION or v12x)",
    )
    options.add_argument(
        "--server-rate-limit",
        type=str,
        metavar="CALLS[/SECONDS]",
        help="Throttle requests to the server (defaults to $APIMAN_SERVER_RATE_LIMIT)",
    )
    return options


def _add_org_name(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--org-name", "--orgName", required=True, help="Organization name")


def _add_api_version(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--name", required=True, help="API name")
    parser.add_argument("--version", required=True, help="API version")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage an apiman server")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log debug output, including the parsed declaration",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    server_options = _server_options()

    apply = subparsers.add_parser(
        "apply", parents=[server_options], help="Apply a declaration to the server"
    )
    apply.add_argument(
        "-f",
        "--declaration-file",
        "--declarationFile",
        type=Path,
        required=True,
        help="Declaration file (.json for JSON, anything else is read as YAML)",
    )
    apply.add_argument(
        "-P",
        "--property",
        dest="properties",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Set a property used to resolve ${KEY} placeholders (repeatable)",
    )

    api = subparsers.add_parser("api", help="Work with the APIs of one organization")
    api_commands = api.add_subparsers(dest="api_command", required=True)

    create = api_commands.add_parser("create", parents=[server_options], help="Create an API")
    _add_org_name(create)
    create.add_argument("--name", required=True, help="API name")
    create.add_argument(
        "--initial-version", "--initialVersion", required=True, help="First API version"
    )
    create.add_argument("--endpoint", help="Backend endpoint the API proxies to")
    create.add_argument("--description", help="API description")
    create.add_argument("--public", action="store_true", help="Expose the API publicly")

    publish = api_commands.add_parser(
        "publish", parents=[server_options], help="Publish an API version"
    )
    _add_org_name(publish)
    _add_api_version(publish)

    listing = api_commands.add_parser(
        "list", parents=[server_options], help="List the APIs of an organization"
    )
    _add_org_name(listing)

    policy = api_commands.add_parser("policy", help="Work with the policies of an API")
    policy_commands = policy.add_subparsers(dest="policy_command", required=True)
    add_policy = policy_commands.add_parser(
        "add", parents=[server_options], help="Add a policy to an API version"
    )
    _add_org_name(add_policy)
    _add_api_version(add_policy)
    add_policy.add_argument(
        "--policy-name", "--policyName", required=True, help="Policy definition id"
    )
    add_policy.add_argument(
        "--config-file",
        "--configFile",
        type=Path,
        help="JSON file holding the policy configuration (defaults to an empty object)",
    )

    return parser.parse_args(list(argv))


def _command_path(parsed_args: argparse.Namespace) -> tuple[str, ...]:
    path = [parsed_args.command]
    for attribute in ("api_command", "policy_command"):
        if value := getattr(parsed_args, attribute, None):
            path.append(value)
    return tuple(path)


def _run_command(
    parsed_args: argparse.Namespace,
    properties: dict[str, str],
    server_config: ServerConfig,
) -> None:
    match _command_path(parsed_args):
        case ("apply",):
            apply_declaration_file(
                parsed_args.declaration_file,
                properties=properties,
                server_config=server_config,
            )
        case ("api", "create"):
            create_api(
                parsed_args.org_name,
                name=parsed_args.name,
                initial_version=parsed_args.initial_version,
                endpoint=parsed_args.endpoint,
                public=parsed_args.public,
                description=parsed_args.description,
                server_config=server_config,
            )
        case ("api", "publish"):
            if not publish_api(
                parsed_args.org_name,
                parsed_args.name,
                parsed_args.version,
                server_config=server_config,
            ):
                log.info("API %s %s was not published", parsed_args.name, parsed_args.version)
        case ("api", "list"):
            for api in list_apis(parsed_args.org_name, server_config=server_config):
                print(api.name)  # noqa: T201
        case ("api", "policy", "add"):
            add_api_policy(
                parsed_args.org_name,
                parsed_args.name,
                parsed_args.version,
                policy_name=parsed_args.policy_name,
                config_file=parsed_args.config_file,
                server_config=server_config,
            )
        case path:
            raise ValueError(f"Unsupported command: {' '.join(path)}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.debug:
            configure_logging(level=logging.DEBUG, force=True)
        properties = parse_properties(getattr(parsed_args, "properties", []))
        server_config = get_server_config(
            address=parsed_args.server,
            username=parsed_args.server_username,
            password=parsed_args.server_password,
            version=(
                parse_server_version(parsed_args.server_version)
                if parsed_args.server_version
                else None
            ),
            rate_limit=parsed_args.server_rate_limit,
        )
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        _run_command(parsed_args, properties, server_config)
    except Exception:
        if parsed_args.command == "apply":
            log.exception("Error applying declaration")
        else:
            log.exception("Error running command: %s", " ".join(_command_path(parsed_args)))
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
