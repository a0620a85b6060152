"""
Scryfall Sheets server

- MCP tools: search Scryfall and write the results into Google Sheets
- /hooks/edit: receives sheet edit events and downloads pasted image URLs to Drive
"""
import hashlib
import hmac
import json
import time
from typing import Any

import httpx

from mcp.server.fastmcp import FastMCP
from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from sheets_client import get_sheets_client
from drive_client import get_drive_client
from env_loader import get_spreadsheet_id, get_hmac_secret, is_hmac_required, get_port
from handlers.search import CardSearchHandler
from handlers.downloader import EditTriggerHandler
from handlers.setup import SetupHandler, QUESTIONS, validate_answer
from core.settings import Config, save_config
from lib.common import ok, log
from lib.input_parser import coerce_str, coerce_bool
from lib.sheet_utils import extract_spreadsheet_id
from lib.errors import bad_request

mcp = FastMCP("scryfall-sheets")

# Per-request timeout for image downloads triggered by edits
IMAGE_FETCH_TIMEOUT = 60.0


class _SilentPrompter:
    """Tools run unattended; alerts go to the log."""

    def prompt(self, title: str, message: str, default: str = "") -> str | None:
        return None

    def alert(self, message: str) -> None:
        log(message)


def _resolve_spreadsheet_id(value: Any) -> str | None:
    """Accept a raw ID or a full spreadsheet URL; fall back to SPREADSHEET_ID."""
    sid = coerce_str(value, ("spreadsheet_id", "id"))
    if not sid:
        return get_spreadsheet_id()
    return extract_spreadsheet_id(sid) or sid


def _setup_handler(spreadsheet_id: Any = None) -> SetupHandler:
    sid = _resolve_spreadsheet_id(spreadsheet_id)
    return SetupHandler(get_sheets_client(), prompter=_SilentPrompter(), spreadsheet_id=sid)


# ===== Search Tools =====

@mcp.tool()
async def cards_search(
    query: Any,
    fields: Any = "name",
    num_results: Any = 150,
    order: str | None = "name",
    direction: str | None = "auto",
    unique: str | None = "cards",
    include_header: bool | None = False,
) -> dict:
    """Search Scryfall and return one row per card.

    Args:
    - query: Scryfall search syntax (required). e.g. "t:dragon cmc<=4"
    - fields: field names separated by spaces or commas (default "name").
      Shortcuts: color/colors, flavor, mana, o/oracle, price, type, uri/url.
      Dotted paths work: "prices.eur", "legalities.modern". "image" gives an =IMAGE() formula.
    - num_results: max rows (default 150, at most 700)
    - order: name, set, released, cmc, usd/price, eur, ...
    - direction: auto / asc / desc
    - unique: cards / art / prints
    - include_header: put the resolved field names in the first row

    Returns (example):
    { ok:true, op:"cards.search", data:{ fields:["name","type_line"], rows:[["Shivan Dragon","Creature — Dragon"]], count:1 } }
    """
    q = coerce_str(query, ("query", "q"))
    if not q:
        return bad_request("cards.search", "query is required")

    handler = CardSearchHandler()
    return await run_in_threadpool(
        handler.search, q, fields, num_results, order, direction, unique, bool(coerce_bool(include_header))
    )


@mcp.tool()
async def cards_populate(
    sheet_name: str,
    query: Any,
    anchor: str = "A1",
    fields: Any = "name",
    num_results: Any = 150,
    order: str | None = "name",
    direction: str | None = "auto",
    unique: str | None = "cards",
    include_header: bool | None = True,
    spreadsheet_id: str | None = None,
) -> dict:
    """Search Scryfall and write the table into a sheet, starting at `anchor`.

    Same search arguments as cards_search. Formulas such as the "image"
    field are entered as if typed, so images render in the sheet.

    Returns (example):
    { ok:true, op:"cards.populate", data:{ range:"Cards!A1:C41", count:40, fields:[…] } }
    """
    q = coerce_str(query, ("query", "q"))
    if not q:
        return bad_request("cards.populate", "query is required")

    handler = CardSearchHandler(
        get_sheets_client(),
        spreadsheet_id=_resolve_spreadsheet_id(spreadsheet_id),
    )
    return await run_in_threadpool(
        handler.populate,
        sheet_name,
        anchor,
        q,
        fields,
        num_results,
        order,
        direction,
        unique,
        coerce_bool(include_header) is not False,
    )


# ===== Configuration Tools =====

@mcp.tool()
async def config_get(spreadsheet_id: str | None = None) -> dict:
    """Show the image downloader configuration and whether the edit trigger is installed."""
    return await run_in_threadpool(_setup_handler(spreadsheet_id).get_config)


@mcp.tool()
async def config_set(
    watched_sheet_name: str,
    url_column: Any,
    folder_id: str,
    header_rows: Any = 1,
    name_column: Any = 0,
    spreadsheet_id: str | None = None,
) -> dict:
    """Save the image downloader configuration without prompts.

    Args:
    - watched_sheet_name: sheet whose URL column is watched
    - url_column: column number of the URL column (A=1)
    - folder_id: Drive folder ID for saved images
    - header_rows: rows at the top that never trigger downloads
    - name_column: column number to name files by (0 = use the URL)
    """
    op = "config.set"
    raw = [watched_sheet_name, url_column, folder_id, header_rows, name_column]
    values = []
    for question, value in zip(QUESTIONS, raw):
        parsed, error = validate_answer(question, "" if value is None else str(value))
        if error:
            return bad_request(op, f"{question.key}: {error}")
        values.append(parsed)

    handler = _setup_handler(spreadsheet_id)
    config = Config(*values)
    try:
        await run_in_threadpool(save_config, handler.store, config)
    except Exception as e:
        return handler._from_exception(op, e)
    return ok(op, {"config": config.to_dict()})


@mcp.tool()
async def trigger_status(spreadsheet_id: str | None = None) -> dict:
    """Whether pasted URLs are currently being downloaded for this spreadsheet."""
    return await run_in_threadpool(_setup_handler(spreadsheet_id).trigger_status)


@mcp.tool()
async def tools_help() -> dict:
    """List the available tools."""
    tools = [
        {"name": "cards_search", "desc": "Scryfall search as a table", "args": {"query": "string", "fields": "string"}},
        {"name": "cards_populate", "desc": "Scryfall search written into a sheet", "args": {"sheet_name": "string", "query": "string", "anchor": "string"}},
        {"name": "config_get", "desc": "Show downloader configuration", "args": {}},
        {"name": "config_set", "desc": "Save downloader configuration", "args": {"watched_sheet_name": "string", "url_column": "int", "folder_id": "string"}},
        {"name": "trigger_status", "desc": "Edit trigger state", "args": {}},
    ]
    return {"ok": True, "op": "tools.help", "data": {"tools": tools}}


# ===== Edit Hook =====

def verify_signature(headers: Any, body: bytes) -> tuple[bool, str | None]:
    """Optional HMAC verification for inbound edit hooks.

    Expected headers (if a secret is configured):
      - X-Hook-TS: unix epoch seconds
      - X-Hook-Sign: hex(HMAC_SHA256(secret, f"{ts}." + body))
    """
    secret = get_hmac_secret()
    if not secret:
        return True, None
    ts_raw = headers.get("x-hook-ts")
    sig = headers.get("x-hook-sign")
    if not ts_raw or not sig:
        if is_hmac_required():
            return False, "missing headers"
        return True, None
    try:
        ts = int(ts_raw)
    except ValueError:
        return False, "bad timestamp"
    if abs(int(time.time()) - ts) > 300:
        return False, "timestamp skew"
    mac = hmac.new(secret.encode("utf-8"), f"{ts}.".encode("utf-8") + body, hashlib.sha256)
    if not hmac.compare_digest(mac.hexdigest(), sig):
        return False, "bad signature"
    return True, None


async def edit_hook(request: Request) -> JSONResponse:
    body = await request.body()
    valid, reason = verify_signature(request.headers, body)
    if not valid:
        log(f"hooks.edit rejected: {reason}")
        return JSONResponse({"ok": False, "op": "hooks.edit", "error": {"code": "UNAUTHORIZED", "message": reason}}, status_code=401)

    try:
        payload = json.loads(body or b"null")
    except ValueError:
        return JSONResponse(bad_request("hooks.edit", "body must be JSON"), status_code=400)

    sid = coerce_str(payload, ("spreadsheet_id", "spreadsheetId")) or get_spreadsheet_id()
    if not sid:
        return JSONResponse(bad_request("hooks.edit", "spreadsheet_id is required"), status_code=400)

    sheets = get_sheets_client()
    setup = SetupHandler(sheets, prompter=_SilentPrompter(), spreadsheet_id=sid)
    status = await run_in_threadpool(setup.trigger_status)
    if not status["ok"]:
        return JSONResponse(status)
    if not status["data"]["installed"]:
        return JSONResponse(ok("hooks.edit", {"status": "ignored", "reason": "no edit trigger installed"}))

    with httpx.Client(timeout=IMAGE_FETCH_TIMEOUT) as http:
        handler = EditTriggerHandler(sheets, get_drive_client(), spreadsheet_id=sid, store=setup.store, http=http)
        result = await run_in_threadpool(handler.handle, payload)
    return JSONResponse(result)


async def healthz(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


async def root(request: Request) -> JSONResponse:
    return JSONResponse(
        {"error": "Use /mcp for MCP, /hooks/edit for edit events or /healthz for health check"},
        status_code=406,
    )


def create_app(include_mcp: bool = True):
    """Build the ASGI app: Starlette routes plus the MCP app under /mcp."""
    from contextlib import asynccontextmanager

    lifespan = None
    if include_mcp:
        @asynccontextmanager
        async def lifespan(app):
            async with mcp.session_manager.run():
                yield

    starlette_app = Starlette(
        routes=[
            Route("/", root),
            Route("/healthz", healthz),
            Route("/hooks/edit", edit_hook, methods=["POST"]),
        ],
        lifespan=lifespan,
    )
    if not include_mcp:
        return starlette_app

    mcp_app = mcp.streamable_http_app()

    # Combined ASGI app - MCP app handles /mcp path internally
    async def combined_app(scope, receive, send):
        path = scope.get("path", "/")
        if path.startswith("/mcp"):
            await mcp_app(scope, receive, send)
        else:
            await starlette_app(scope, receive, send)

    return combined_app


def serve(port: int | None = None) -> None:
    import uvicorn

    port = port or get_port()
    log(f"Starting server on port {port}")
    uvicorn.run(create_app(), host="0.0.0.0", port=port, lifespan="on")


# ===== Server Entry Point =====

if __name__ == "__main__":
    serve()
