"""Main CLI entry point."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable

from copper_pack.errors import CopperPackError

RECORD_TYPE_CHOICES = ["opportunity", "company", "person"]
SYNC_TABLES = {"opportunities": "opportunity", "companies": "company", "people": "person"}


def main() -> None:
    """Parse args and dispatch to subcommands."""
    parser = argparse.ArgumentParser(prog="copper-pack", description="Copper CRM records, sync and actions")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to settings YAML (default: COPPER_API_KEY / COPPER_EMAIL from the environment)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log requests and pages")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # sync
    sync_parser = subparsers.add_parser("sync", help="Sync a table of enriched records")
    sync_parser.add_argument("table", choices=sorted(SYNC_TABLES), help="Table to sync")
    sync_parser.add_argument("--page", type=int, default=1, help="Page number to fetch (default: 1)")
    sync_parser.add_argument(
        "--all",
        action="store_true",
        help="Follow continuations until the last page",
    )
    sync_parser.add_argument("--max-pages", type=int, default=None, help="Stop --all after N pages")
    sync_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write JSON to file (default: stdout)",
    )

    # get
    get_parser = subparsers.add_parser("get", help="Get one enriched record by URL or ID")
    get_parser.add_argument("record_type", choices=RECORD_TYPE_CHOICES)
    get_parser.add_argument("url_or_id", help="Copper record URL or ID")

    # actions
    status_parser = subparsers.add_parser("status", help="Change an opportunity's status")
    status_parser.add_argument("url_or_id")
    status_parser.add_argument("new_status", help="Open, Won, Lost or Abandoned")
    status_parser.add_argument("--loss-reason", default=None, help="Reason, when changing to Lost")

    stage_parser = subparsers.add_parser("stage", help="Move an opportunity to another stage")
    stage_parser.add_argument("url_or_id")
    stage_parser.add_argument("stage")

    rename_parser = subparsers.add_parser("rename", help="Rename an opportunity")
    rename_parser.add_argument("url_or_id")
    rename_parser.add_argument("new_name")

    assign_parser = subparsers.add_parser("assign", help="Assign a record to a Copper user")
    assign_parser.add_argument("record_type", choices=RECORD_TYPE_CHOICES)
    assign_parser.add_argument("url_or_id")
    assign_parser.add_argument("assignee_email")

    for name, help_text in (("tag", "Add a tag to a record"), ("untag", "Remove a tag from a record")):
        tag_parser = subparsers.add_parser(name, help=help_text)
        tag_parser.add_argument("record_type", choices=RECORD_TYPE_CHOICES)
        tag_parser.add_argument("url_or_id")
        tag_parser.add_argument("tag")

    field_parser = subparsers.add_parser("set-field", help="Update a custom field on a record")
    field_parser.add_argument("record_type", choices=RECORD_TYPE_CHOICES)
    field_parser.add_argument("url_or_id")
    field_parser.add_argument("field_name")
    field_parser.add_argument("new_value", nargs="?", default="", help="Empty clears the field")

    # options (autocomplete sources)
    options_parser = subparsers.add_parser("options", help="List valid values for action arguments")
    options_parser.add_argument(
        "kind",
        choices=["loss-reasons", "users", "stages", "fields"],
    )
    options_parser.add_argument(
        "--record-type",
        choices=RECORD_TYPE_CHOICES,
        default="opportunity",
        help="Record type for 'fields'",
    )
    options_parser.add_argument("--opportunity", default=None, help="Opportunity URL or ID for 'stages'")

    subparsers.add_parser("account", help="Show the connected Copper account name")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handlers: dict[str, Callable[[Any, argparse.Namespace], Awaitable[Any]]] = {
        "sync": _run_sync,
        "get": _run_get,
        "status": _run_status,
        "stage": _run_stage,
        "rename": _run_rename,
        "assign": _run_assign,
        "tag": _run_tag,
        "untag": _run_tag,
        "set-field": _run_set_field,
        "options": _run_options,
        "account": _run_account,
    }

    try:
        result = asyncio.run(_with_client(args, handlers[args.command]))
    except CopperPackError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)

    if result is not None:
        _emit(result, getattr(args, "output", None))


async def _with_client(args: argparse.Namespace, handler) -> Any:
    """Build settings and client, run one handler, close the client."""
    from copper_pack.client import CopperClient
    from copper_pack.config import load_settings

    settings = load_settings(args.config)
    async with CopperClient(settings) as client:
        return await handler(client, args)


def _emit(result: Any, output: Path | None) -> None:
    text = json.dumps(result, indent=2, default=str)
    if output:
        output.write_text(text, encoding="utf-8")
        count = len(result) if isinstance(result, list) else 1
        print(f"Wrote {count} records to {output}")
    else:
        print(text)


async def _run_sync(client, args: argparse.Namespace) -> Any:
    """Run sync command. Without --all, prints one page and its continuation."""
    from copper_pack.sync import Continuation, iterate_records, sync_records

    record_type = SYNC_TABLES[args.table]
    if args.all:
        return [r async for r in iterate_records(client, record_type, max_pages=args.max_pages)]

    page = await sync_records(client, record_type, Continuation(page_number=args.page))
    if page.continuation:
        print(f"More records: next page is {page.continuation.page_number}", file=sys.stderr)
    return page.result


async def _run_get(client, args: argparse.Namespace) -> Any:
    from copper_pack.formulas import get_record

    return await get_record(client, args.record_type, args.url_or_id)


async def _run_status(client, args: argparse.Namespace) -> Any:
    from copper_pack.actions import update_opportunity_status

    return await update_opportunity_status(client, args.url_or_id, args.new_status, args.loss_reason)


async def _run_stage(client, args: argparse.Namespace) -> Any:
    from copper_pack.actions import update_opportunity_stage

    return await update_opportunity_stage(client, args.url_or_id, args.stage)


async def _run_rename(client, args: argparse.Namespace) -> Any:
    from copper_pack.actions import rename_opportunity

    return await rename_opportunity(client, args.url_or_id, args.new_name)


async def _run_assign(client, args: argparse.Namespace) -> Any:
    from copper_pack.actions import assign_record

    return await assign_record(client, args.record_type, args.url_or_id, args.assignee_email)


async def _run_tag(client, args: argparse.Namespace) -> Any:
    from copper_pack.actions import add_or_remove_tag

    return await add_or_remove_tag(
        client,
        args.record_type,
        args.url_or_id,
        args.tag,
        remove=args.command == "untag",
    )


async def _run_set_field(client, args: argparse.Namespace) -> Any:
    from copper_pack.actions import update_custom_field

    return await update_custom_field(
        client, args.record_type, args.url_or_id, args.field_name, args.new_value
    )


async def _run_options(client, args: argparse.Namespace) -> Any:
    """Run options command."""
    from copper_pack import formulas

    if args.kind == "loss-reasons":
        return await formulas.loss_reason_names(client)
    if args.kind == "users":
        return await formulas.user_emails(client)
    if args.kind == "stages":
        if not args.opportunity:
            raise SystemExit("options stages requires --opportunity")
        return await formulas.pipeline_stage_names(client, args.opportunity)
    return await formulas.custom_field_names(client, args.record_type)


async def _run_account(client, args: argparse.Namespace) -> Any:
    from copper_pack.formulas import get_account_name

    return await get_account_name(client)


if __name__ == "__main__":
    main()
