from __future__ import annotations

from http import HTTPStatus
from typing import Any

from flask import Blueprint, current_app, jsonify, request

from .service import Note, NoteStore, serialize_note

notes_bp = Blueprint("notes", __name__, url_prefix="/notes")

NOTE_STORE_EXTENSION = "note_store"


def get_store() -> NoteStore:
    return current_app.extensions[NOTE_STORE_EXTENSION]


def _parse_json_body() -> dict[str, Any]:
    if request.is_json:
        payload = request.get_json(silent=True)
        if isinstance(payload, dict):
            return payload
    return {}


def _validation_error(message: str):
    return (
        jsonify({"error": "validation_error", "message": message}),
        HTTPStatus.BAD_REQUEST,
    )


def _serialize_many(notes: list[Note]) -> list[dict[str, Any]]:
    return [serialize_note(note) for note in notes]


@notes_bp.get("")
def list_public_notes() -> tuple[Any, int]:
    author_id = request.args.get("authorId")
    notes = get_store().list(author_id)
    return jsonify({"items": _serialize_many(notes)}), HTTPStatus.OK


@notes_bp.post("")
def create_public_note() -> tuple[Any, int]:
    payload = _parse_json_body()

    fields: dict[str, str | None] = {}
    for key in ("title", "content", "authorId"):
        value = payload.get(key)
        if value is not None and not isinstance(value, str):
            return _validation_error(f"{key} must be a string.")
        fields[key] = value

    note = get_store().create(
        title=fields["title"],
        content=fields["content"],
        author_id=fields["authorId"],
    )
    return jsonify(serialize_note(note)), HTTPStatus.CREATED


@notes_bp.get("/<note_id>")
def get_public_note(note_id: str) -> tuple[Any, int]:
    note = get_store().get(note_id)
    if note is None:
        return (
            jsonify({"error": "not_found", "message": f"Note '{note_id}' was not found"}),
            HTTPStatus.NOT_FOUND,
        )
    return jsonify(serialize_note(note)), HTTPStatus.OK


@notes_bp.delete("/<note_id>")
def delete_public_note(note_id: str) -> tuple[Any, int]:
    deleted = get_store().delete(note_id)
    return jsonify({"success": deleted}), HTTPStatus.OK


@notes_bp.get("/search")
def search_public_notes() -> tuple[Any, int]:
    query_text = request.args.get("q")
    if query_text is None:
        return _validation_error("q query parameter is required.")

    author_id = request.args.get("authorId")
    notes = get_store().search(query_text, author_id)
    return jsonify({"items": _serialize_many(notes)}), HTTPStatus.OK
