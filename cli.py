"""
Menu commands for Scryfall Sheets.

    scryfall-sheets setup            configure + install the edit trigger
    scryfall-sheets configure        run the configuration wizard only
    scryfall-sheets show-config      display the current configuration
    scryfall-sheets remove-trigger   stop downloading pasted URLs
    scryfall-sheets search QUERY     print (or write) a Scryfall search table
    scryfall-sheets serve            run the MCP + edit hook server
"""
from __future__ import annotations

import argparse
import csv
import sys
from typing import List

from config import DEFAULT_FIELDS, DEFAULT_NUM_RESULTS, DEFAULT_ORDER, DEFAULT_DIRECTION, DEFAULT_UNIQUE
from handlers.setup.prompter import ConsolePrompter


def _spreadsheet_id(args: argparse.Namespace) -> str | None:
    if args.spreadsheet:
        from lib.sheet_utils import extract_spreadsheet_id
        return extract_spreadsheet_id(args.spreadsheet) or args.spreadsheet
    from env_loader import get_spreadsheet_id
    return get_spreadsheet_id()


def _setup_handler(args: argparse.Namespace, prompter: ConsolePrompter):
    from sheets_client import get_sheets_client
    from handlers.setup import SetupHandler
    return SetupHandler(get_sheets_client(), prompter=prompter, spreadsheet_id=_spreadsheet_id(args))


def _run_search(args: argparse.Namespace, prompter: ConsolePrompter) -> dict:
    from handlers.search import CardSearchHandler

    search_args = dict(
        query=args.query,
        fields=args.fields,
        num_results=args.num_results,
        order=args.order,
        direction=args.dir,
        unique=args.unique,
    )
    if args.sheet:
        from sheets_client import get_sheets_client
        handler = CardSearchHandler(get_sheets_client(), spreadsheet_id=_spreadsheet_id(args))
        result = handler.populate(args.sheet, args.anchor, include_header=not args.no_header, **search_args)
        if result["ok"]:
            prompter.alert(f"Wrote {result['data']['count']} rows to {result['data']['range']}")
    else:
        handler = CardSearchHandler()
        result = handler.search(include_header=not args.no_header, **search_args)
        if result["ok"]:
            csv.writer(sys.stdout).writerows(result["data"]["rows"])
    if not result["ok"]:
        prompter.alert(f"Error: {result['error']['message']}")
    return result


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser("scryfall-sheets", description="Scryfall search and image downloads for Google Sheets")
    ap.add_argument("--spreadsheet", default="", help="Spreadsheet ID or URL (overrides SPREADSHEET_ID)")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("setup", help="Configure and install the edit trigger")
    sub.add_parser("configure", help="Run the configuration wizard")
    sub.add_parser("show-config", help="Show the current configuration")
    sub.add_parser("remove-trigger", help="Remove the edit trigger")

    sp = sub.add_parser("search", help="Run a Scryfall search")
    sp.add_argument("query", help='Scryfall search syntax, e.g. "t:dragon cmc<=4"')
    sp.add_argument("--fields", default=DEFAULT_FIELDS, help='Fields, e.g. "name type price"')
    sp.add_argument("--num-results", type=int, default=DEFAULT_NUM_RESULTS, help="Max rows (at most 700)")
    sp.add_argument("--order", default=DEFAULT_ORDER)
    sp.add_argument("--dir", default=DEFAULT_DIRECTION, choices=["auto", "asc", "desc"])
    sp.add_argument("--unique", default=DEFAULT_UNIQUE, choices=["cards", "art", "prints"])
    sp.add_argument("--sheet", default="", help="Write into this sheet instead of printing CSV")
    sp.add_argument("--anchor", default="A1", help="Top-left cell when writing to a sheet")
    sp.add_argument("--no-header", action="store_true", help="Omit the header row")

    srv = sub.add_parser("serve", help="Run the MCP and edit hook server")
    srv.add_argument("--port", type=int, default=None)
    return ap


def main(argv: List[str] = None, prompter: ConsolePrompter | None = None) -> int:
    args = build_parser().parse_args(argv)
    # search writes CSV to stdout, so its messages go to stderr
    prompter = prompter or ConsolePrompter(output=sys.stderr if args.command == "search" else None)

    if args.command == "serve":
        from server import serve
        serve(args.port)
        return 0

    try:
        if args.command == "search":
            result = _run_search(args, prompter)
        else:
            handler = _setup_handler(args, prompter)
            result = {
                "setup": handler.setup,
                "configure": handler.configure,
                "show-config": handler.show_config,
                "remove-trigger": handler.remove_trigger,
            }[args.command]()
    except RuntimeError as e:
        # Missing credentials and similar environment problems
        prompter.alert(f"Error: {e}")
        return 1
    return 0 if result.get("ok") else 1


if __name__ == "__main__":
    raise SystemExit(main())
