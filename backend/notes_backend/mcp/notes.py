"""Model Context Protocol implementation for the public notes resource."""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from mcp.server.fastmcp import FastMCP
from websockets.asyncio.server import ServerConnection
from websockets.exceptions import ConnectionClosed

from ..notes.service import (
    Note,
    NoteNotFoundError,
    NoteStore,
    NoteStoreError,
    create_store,
    serialize_note,
)

log = logging.getLogger(__name__)

NOTES_MCP_SERVER_NAME = "public-notes"
NOTES_MCP_VERSION = "1.0.0"
NOTES_MCP_PROTOCOL_VERSION = "2024-11-05"

NOTE_RESOURCE_SCHEME = "notes://"
NOTE_RESOURCE_TEMPLATE = NOTE_RESOURCE_SCHEME + "{note_id}"
NOTE_MIME_TYPE = "application/json"

ERROR_INVALID_PARAMS = -32602
ERROR_INTERNAL = -32603
ERROR_NOT_FOUND = -32004
ERROR_STORE = -32010

_AUTHOR_FILTER_SCHEMA = {"type": "string", "description": "Filter notes by author ID"}

_NOTES_TOOL_DESCRIPTIONS: tuple[dict[str, Any], ...] = (
    {
        "name": "notes.get",
        "description": "Get a note by ID (public access).",
        "inputSchema": {
            "type": "object",
            "additionalProperties": False,
            "required": ["id"],
            "properties": {
                "id": {"type": "string", "description": "Note identifier"},
            },
        },
    },
    {
        "name": "notes.list",
        "description": "List all notes (public access) or filter by authorId.",
        "inputSchema": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "authorId": _AUTHOR_FILTER_SCHEMA,
            },
        },
    },
    {
        "name": "notes.create",
        "description": "Create a new note (public access).",
        "inputSchema": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "title": {"type": "string", "description": "Note title"},
                "content": {"type": "string", "description": "Note content"},
                "authorId": {"type": "string", "description": "Author ID (optional)"},
            },
        },
    },
    {
        "name": "notes.delete",
        "description": "Delete a note by ID (public access).",
        "inputSchema": {
            "type": "object",
            "additionalProperties": False,
            "required": ["id"],
            "properties": {
                "id": {"type": "string", "description": "Note identifier"},
            },
        },
    },
    {
        "name": "notes.search",
        "description": "Search notes by title or content (public access), optionally filtered by authorId.",
        "inputSchema": {
            "type": "object",
            "additionalProperties": False,
            "required": ["query"],
            "properties": {
                "query": {"type": "string", "description": "Search query"},
                "authorId": _AUTHOR_FILTER_SCHEMA,
            },
        },
    },
)

_NOTE_RESOURCE_TEMPLATE_DESCRIPTION: dict[str, Any] = {
    "uriTemplate": NOTE_RESOURCE_TEMPLATE,
    "name": "note",
    "description": "A single public note, addressed by its ID.",
    "mimeType": NOTE_MIME_TYPE,
}


def list_notes_tools() -> list[dict[str, Any]]:
    """Return copies of the supported notes MCP tools."""

    return copy.deepcopy(list(_NOTES_TOOL_DESCRIPTIONS))


def note_resource_uri(note_id: str) -> str:
    return f"{NOTE_RESOURCE_SCHEME}{note_id}"


@dataclass
class NotesService:
    """Adapter exposing the in-memory note store to MCP sessions."""

    store: NoteStore = field(default_factory=create_store)

    def get(self, note_id: str) -> Note | None:
        return self.store.get(note_id)

    def list(self, author_id: str | None = None) -> list[Note]:
        return self.store.list(author_id)

    def create(
        self,
        *,
        title: str | None = None,
        content: str | None = None,
        author_id: str | None = None,
    ) -> Note:
        return self.store.create(title=title, content=content, author_id=author_id)

    def delete(self, note_id: str) -> bool:
        return self.store.delete(note_id)

    def search(self, query: str, author_id: str | None = None) -> list[Note]:
        return self.store.search(query, author_id)

    @staticmethod
    def serialize(note: Note) -> dict[str, Any]:
        return serialize_note(note)


class NotesMCPHandler:
    """Per-connection JSON-RPC handler for notes MCP sessions."""

    def __init__(self, *, service: NotesService | None = None) -> None:
        self._service = service or NotesService()
        self._initialized = False

    async def handle_connection(self, websocket: ServerConnection) -> None:
        try:
            async for raw in websocket:
                response = self.handle_message(raw)
                if response is not None:
                    await websocket.send(response)
        except ConnectionClosed:
            return

    def handle_message(self, raw: Any) -> str | None:
        try:
            if isinstance(raw, (bytes, bytearray)):
                raw = raw.decode("utf-8")
            payload = json.loads(raw)
        except (UnicodeDecodeError, ValueError) as exc:
            log.debug("Failed to decode MCP payload: %s", exc)
            return json.dumps({
                "jsonrpc": "2.0",
                "id": None,
                "error": {
                    "code": ERROR_INTERNAL,
                    "message": "Invalid MCP payload",
                },
            })

        if not isinstance(payload, dict):
            return None

        method = payload.get("method")
        if not method:
            return None

        request_id = payload.get("id")
        params = payload.get("params")

        try:
            if method == "initialize":
                result = self._handle_initialize()
                self._initialized = True
                return self._build_result(request_id, result)
            if method in ("initialized", "notifications/initialized"):
                return None
            if method == "ping":
                return self._build_result(request_id, {"message": "pong"})
            if method == "tools/list":
                return self._build_result(request_id, {"tools": list_notes_tools()})
            if method == "tools/call":
                if request_id is None:
                    return None
                result = self._handle_tool_call(params)
                return self._build_result(request_id, result)
            if method == "resources/list":
                return self._build_result(request_id, self._handle_resources_list())
            if method == "resources/templates/list":
                return self._build_result(
                    request_id,
                    {"resourceTemplates": [dict(_NOTE_RESOURCE_TEMPLATE_DESCRIPTION)]},
                )
            if method == "resources/read":
                return self._build_result(request_id, self._handle_resource_read(params))

            return self._build_error(request_id, ERROR_INVALID_PARAMS, f"Unknown method: {method}")
        except NoteNotFoundError as exc:
            return self._build_error(request_id, ERROR_NOT_FOUND, str(exc) or "Note not found")
        except NoteStoreError as exc:
            return self._build_error(request_id, ERROR_STORE, str(exc) or "Notes storage unavailable")
        except ValueError as exc:
            return self._build_error(request_id, ERROR_INVALID_PARAMS, str(exc) or "Invalid parameters")
        except Exception as exc:
            log.exception("Unexpected MCP error: %s", exc)
            return self._build_error(request_id, ERROR_INTERNAL, "Internal MCP error")

    def _build_result(self, request_id: Any, result: Any) -> str:
        return json.dumps({"jsonrpc": "2.0", "id": request_id, "result": result})

    def _build_error(self, request_id: Any, code: int, message: str) -> str:
        return json.dumps({
            "jsonrpc": "2.0",
            "id": request_id,
            "error": {"code": code, "message": message},
        })

    def _handle_initialize(self) -> dict[str, Any]:
        return {
            "protocolVersion": NOTES_MCP_PROTOCOL_VERSION,
            "serverInfo": {"name": NOTES_MCP_SERVER_NAME, "version": NOTES_MCP_VERSION},
            "capabilities": {
                "tools": {"listChanged": False},
                "resources": {"subscribe": False, "listChanged": False},
            },
        }

    def _handle_tool_call(self, params: Any) -> dict[str, Any]:
        if not isinstance(params, dict):
            raise ValueError("tools/call params must be an object")

        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("Tool name is required")

        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise ValueError("Tool arguments must be an object")

        if name == "notes.get":
            payload = self._handle_get(arguments)
        elif name == "notes.list":
            payload = self._handle_list(arguments)
        elif name == "notes.create":
            payload = self._handle_create(arguments)
        elif name == "notes.delete":
            payload = self._handle_delete(arguments)
        elif name == "notes.search":
            payload = self._handle_search(arguments)
        else:
            raise ValueError(f"Unknown tool: {name}")

        return {
            "content": [
                {
                    "type": "text",
                    "text": json.dumps(payload),
                }
            ]
        }

    def _handle_get(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        note_id = _require_note_id(arguments)
        note = self._service.get(note_id)
        return {
            "action": "get",
            "status": "success" if note is not None else "not_found",
            "note": self._service.serialize(note) if note is not None else None,
        }

    def _handle_list(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        author_id = _optional_author_id(arguments)
        serialized = [self._service.serialize(note) for note in self._service.list(author_id)]
        return {
            "action": "list",
            "status": "success",
            "results": serialized,
            "count": len(serialized),
        }

    def _handle_create(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        created = self._service.create(
            title=_optional_string(arguments, "title"),
            content=_optional_string(arguments, "content"),
            author_id=_optional_author_id(arguments),
        )
        return {
            "action": "create",
            "status": "success",
            "note": self._service.serialize(created),
        }

    def _handle_delete(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        note_id = _require_note_id(arguments)
        deleted = self._service.delete(note_id)
        return {
            "action": "delete",
            "status": "success" if deleted else "not_found",
            "success": deleted,
            "note_id": note_id,
        }

    def _handle_search(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        query = _require_string(arguments, "query", allow_empty=True)
        author_id = _optional_author_id(arguments)
        serialized = [
            self._service.serialize(note) for note in self._service.search(query, author_id)
        ]
        return {
            "action": "search",
            "status": "success",
            "results": serialized,
            "count": len(serialized),
        }

    def _handle_resources_list(self) -> dict[str, Any]:
        resources = [
            {
                "uri": note_resource_uri(note.id),
                "name": note.title,
                "mimeType": NOTE_MIME_TYPE,
            }
            for note in self._service.list()
        ]
        return {"resources": resources}

    def _handle_resource_read(self, params: Any) -> dict[str, Any]:
        if not isinstance(params, dict):
            raise ValueError("resources/read params must be an object")

        uri = _require_string(params, "uri")
        if not uri.startswith(NOTE_RESOURCE_SCHEME) or uri == NOTE_RESOURCE_SCHEME:
            raise ValueError(f"Unsupported resource URI: {uri}")

        note_id = uri[len(NOTE_RESOURCE_SCHEME):]
        return {
            "contents": [
                {
                    "uri": uri,
                    "mimeType": NOTE_MIME_TYPE,
                    "text": self.read_note_text(note_id),
                }
            ]
        }

    def read_note_text(self, note_id: str) -> str:
        note = self._service.get(note_id)
        if note is None:
            raise NoteNotFoundError(f"Note '{note_id}' was not found")
        return json.dumps(self._service.serialize(note))


class NotesMCPServer:
    """Convenience wrapper suitable for websockets.serve."""

    def __init__(self, *, service: NotesService | None = None) -> None:
        self._service = service or NotesService()

    async def __call__(self, websocket: ServerConnection) -> None:
        handler = NotesMCPHandler(service=self._service)
        await handler.handle_connection(websocket)


def create_notes_mcp(*, service: NotesService | None = None) -> NotesMCPServer:
    """Return a websocket handler for the notes MCP server."""

    return NotesMCPServer(service=service)


def create_notes_fastmcp_app(*, service: NotesService | None = None) -> FastMCP:
    """Create a FastMCP app exposing the notes tools over stdio."""

    handler = NotesMCPHandler(service=service)
    mcp_app = FastMCP(NOTES_MCP_SERVER_NAME)

    def _dump(payload: Mapping[str, Any]) -> str:
        return json.dumps(payload)

    @mcp_app.tool(name="notes.get")
    async def notes_get_tool(note_id: str) -> str:
        """Get a note by ID."""

        return _dump(handler._handle_get({"id": note_id}))

    @mcp_app.tool(name="notes.list")
    async def notes_list_tool(author_id: str | None = None) -> str:
        """List all notes, optionally only those by one author."""

        arguments: dict[str, Any] = {}
        if author_id is not None:
            arguments["authorId"] = author_id
        return _dump(handler._handle_list(arguments))

    @mcp_app.tool(name="notes.create")
    async def notes_create_tool(
        title: str | None = None,
        content: str | None = None,
        author_id: str | None = None,
    ) -> str:
        """Create a new public note."""

        arguments: dict[str, Any] = {}
        if title is not None:
            arguments["title"] = title
        if content is not None:
            arguments["content"] = content
        if author_id is not None:
            arguments["authorId"] = author_id
        return _dump(handler._handle_create(arguments))

    @mcp_app.tool(name="notes.delete")
    async def notes_delete_tool(note_id: str) -> str:
        """Delete a note by ID."""

        return _dump(handler._handle_delete({"id": note_id}))

    @mcp_app.tool(name="notes.search")
    async def notes_search_tool(query: str, author_id: str | None = None) -> str:
        """Search note titles and content, case-insensitively."""

        arguments: dict[str, Any] = {"query": query}
        if author_id is not None:
            arguments["authorId"] = author_id
        return _dump(handler._handle_search(arguments))

    @mcp_app.resource(
        NOTE_RESOURCE_TEMPLATE,
        name="note",
        description=_NOTE_RESOURCE_TEMPLATE_DESCRIPTION["description"],
        mime_type=NOTE_MIME_TYPE,
    )
    def note_resource(note_id: str) -> str:
        return handler.read_note_text(note_id)

    return mcp_app


__all__ = [
    "NOTES_MCP_SERVER_NAME",
    "NOTES_MCP_VERSION",
    "NOTES_MCP_PROTOCOL_VERSION",
    "NOTE_RESOURCE_TEMPLATE",
    "NotesMCPHandler",
    "NotesMCPServer",
    "NotesService",
    "create_notes_mcp",
    "create_notes_fastmcp_app",
    "list_notes_tools",
    "note_resource_uri",
]


def _require_string(container: Mapping[str, Any], key: str, *, allow_empty: bool = False) -> str:
    value = container.get(key)
    if not isinstance(value, str):
        raise ValueError(f"{key} is required")
    if not allow_empty and not value.strip():
        raise ValueError(f"{key} is required")
    return value if allow_empty else value.strip()


def _require_note_id(container: Mapping[str, Any]) -> str:
    key = "note_id" if "id" not in container and "note_id" in container else "id"
    value = container.get(key)
    if not isinstance(value, str):
        raise ValueError(f"{key} is required")
    return value


def _optional_string(container: Mapping[str, Any], key: str) -> str | None:
    if key not in container:
        return None
    value = container.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value


def _optional_author_id(container: Mapping[str, Any]) -> str | None:
    author_id = _optional_string(container, "authorId")
    if author_id is None:
        author_id = _optional_string(container, "author_id")
    return author_id
