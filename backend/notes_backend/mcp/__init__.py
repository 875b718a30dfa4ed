"""Model Context Protocol helpers for the public notes backend."""

from .notes import (  # noqa: F401
	NOTE_RESOURCE_TEMPLATE,
	NOTES_MCP_PROTOCOL_VERSION,
	NOTES_MCP_SERVER_NAME,
	NOTES_MCP_VERSION,
	NotesMCPHandler,
	NotesMCPServer,
	NotesService,
	create_notes_mcp,
	create_notes_fastmcp_app,
	list_notes_tools,
	note_resource_uri,
)

__all__ = [
	"NOTE_RESOURCE_TEMPLATE",
	"NOTES_MCP_PROTOCOL_VERSION",
	"NOTES_MCP_SERVER_NAME",
	"NOTES_MCP_VERSION",
	"NotesMCPHandler",
	"NotesMCPServer",
	"NotesService",
	"create_notes_mcp",
	"create_notes_fastmcp_app",
	"list_notes_tools",
	"note_resource_uri",
]
