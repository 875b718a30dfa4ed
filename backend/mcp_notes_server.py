"""Standalone runner for the public notes Model Context Protocol server."""

from __future__ import annotations

import argparse
import asyncio
import logging

from websockets.asyncio.server import serve

from notes_backend.config import ConfigError, load_config
from notes_backend.mcp.notes import (
    NOTES_MCP_SERVER_NAME,
    NotesService,
    create_notes_fastmcp_app,
    create_notes_mcp,
)
from notes_backend.notes.service import NoteStore, create_store

log = logging.getLogger(__name__)


async def _serve_websocket(service: NotesService, host: str, port: int) -> None:
    handler = create_notes_mcp(service=service)
    async with serve(handler, host, port, subprotocols=["mcp"]):
        log.info("%s MCP server listening on %s:%s", NOTES_MCP_SERVER_NAME, host, port)
        await asyncio.Future()


def main(argv: list[str] | None = None, *, store: NoteStore | None = None) -> None:
    try:
        config = load_config()
    except ConfigError as exc:
        raise SystemExit(f"Configuration error: {exc}") from exc

    parser = argparse.ArgumentParser(description="Run the public notes MCP server.")
    parser.add_argument(
        "--host",
        default=config.notes_mcp_host,
        help=f"Host interface to bind (default: {config.notes_mcp_host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config.notes_mcp_port,
        help=f"TCP port to bind (default: {config.notes_mcp_port})",
    )
    parser.add_argument(
        "--transport",
        choices=("websocket", "stdio"),
        default="websocket",
        help="Transport to use for MCP (default: websocket)",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(level=config.log_level, format="[%(levelname)s] %(message)s")

    if store is None:
        store = create_store(seed=config.seed_notes)
    service = NotesService(store=store)

    try:
        if args.transport == "stdio":
            app = create_notes_fastmcp_app(service=service)
            log.info("Starting %s MCP server over stdio", NOTES_MCP_SERVER_NAME)
            app.run(transport="stdio")
        else:
            asyncio.run(_serve_websocket(service, args.host, args.port))
    except KeyboardInterrupt:  # pragma: no cover - graceful shutdown
        log.info("Shutting down %s MCP server", NOTES_MCP_SERVER_NAME)


if __name__ == "__main__":  # pragma: no cover - direct invocation guard
    main()
