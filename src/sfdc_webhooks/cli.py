"""Command-line entrypoint for creating and deleting webhooks.

Usage:
    sfdc-webhooks create new -u https://example.com/hook -s Account -o webhook.json
    sfdc-webhooks create updated -u https://example.com/hook -s Lead --fields Email Phone
    sfdc-webhooks delete -w webhook.json
    sfdc-webhooks list-sobjects deleted --verbose
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from sfdc_webhooks import __version__
from sfdc_webhooks.client import SalesforceClient
from sfdc_webhooks.domain.models import EVENT_TYPES
from sfdc_webhooks.errors import WebhookError
from sfdc_webhooks.logging_utils import configure_logging
from sfdc_webhooks.utils.serialization import dumps

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., SalesforceClient]


def build_parser() -> argparse.ArgumentParser:
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument("--auth-token", help="Salesforce API token (SALESFORCE_AUTH_TOKEN)")
    parent_parser.add_argument("--instance", help="Salesforce instance, e.g. na139 (SALESFORCE_INSTANCE)")
    parent_parser.add_argument("--api-version", help="Salesforce API version (SALESFORCE_API_VERSION)")
    parent_parser.add_argument("--log-level", help="Logging level name (LOG_LEVEL)")

    parser = argparse.ArgumentParser(
        prog="sfdc-webhooks",
        description="Create and delete webhooks in a Salesforce organization",
    )
    parser.add_argument("--version", action="version", version=f"sfdc-webhooks {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create", help="Create a new webhook", parents=[parent_parser])
    create.add_argument("event", choices=EVENT_TYPES, help="SObject event to listen to")
    create.add_argument("-u", "--endpoint-url", required=True, help="URL the webhook will call")
    create.add_argument("-s", "--sobject-type", required=True, help="SObject type (e.g. Account, Lead)")
    create.add_argument("--fields", nargs="+", default=None, help="Fields to check (updated events)")
    create.add_argument("--fields-mode", choices=("any", "all"), default=None)
    create.add_argument("--secret-token", help="Sent by the webhook in the X-Webhook-Token header")
    create.add_argument("--skip-validation", action="store_true")
    create.add_argument("-o", "--output-file", help="Save the webhook data in a file")

    delete = subparsers.add_parser("delete", help="Delete an existing webhook", parents=[parent_parser])
    delete.add_argument(
        "-w",
        "--webhook-data-file",
        required=True,
        help="Webhook data file written by the create command",
    )

    list_sobjects = subparsers.add_parser(
        "list-sobjects",
        help="List the SObject types supported for an event",
        parents=[parent_parser],
    )
    list_sobjects.add_argument("event", choices=EVENT_TYPES)
    list_sobjects.add_argument("--verbose", action="store_true", help="Include display labels")

    return parser


def _client_kwargs(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "api_version": args.api_version,
        "auth_token": args.auth_token,
        "instance": args.instance,
    }


def _write_output(payload: object, output_file: str | None) -> None:
    text = dumps(payload)
    if output_file:
        logger.info("Writing webhook data to %s", output_file)
        Path(output_file).write_text(text + "\n", encoding="utf-8")
    else:
        sys.stdout.write(text + "\n")


async def _create(args: argparse.Namespace, client_factory: ClientFactory) -> None:
    opts: dict[str, Any] = {
        "event": args.event,
        "endpointUrl": args.endpoint_url,
        "sObjectType": args.sobject_type,
        "secretToken": args.secret_token,
        "skipValidation": args.skip_validation,
    }
    if args.fields is not None:
        opts["fieldsToCheck"] = args.fields
    if args.fields_mode is not None:
        opts["fieldsToCheckMode"] = args.fields_mode

    async with client_factory(**_client_kwargs(args)) as client:
        result = await client.create_webhook(opts)
    _write_output(result.to_json_dict(), args.output_file)


async def _delete(args: argparse.Namespace, client_factory: ClientFactory) -> None:
    path = Path(args.webhook_data_file)
    try:
        webhook_data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise WebhookError(f"Could not read webhook data from {path}: {exc}", "invalid_argument") from exc

    async with client_factory(**_client_kwargs(args)) as client:
        await client.delete_webhook(webhook_data)
    logger.info("Webhook deleted")


def _list_sobjects(args: argparse.Namespace) -> None:
    _write_output(SalesforceClient.get_allowed_sobjects(args.event, args.verbose), None)


def run(
    argv: Sequence[str] | None = None,
    client_factory: ClientFactory = SalesforceClient,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(args.log_level)
        if args.command == "create":
            asyncio.run(_create(args, client_factory))
        elif args.command == "delete":
            asyncio.run(_delete(args, client_factory))
        else:
            _list_sobjects(args)
    except WebhookError as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":  # pragma: no cover
    main()
