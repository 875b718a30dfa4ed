from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from .config import AppConfig, ConfigError, load_config
from .mcp.routes import mcp_bp
from .notes import NOTE_STORE_EXTENSION, notes_bp
from .notes.service import NoteStore, create_store


def create_app(config: AppConfig | None = None, *, store: NoteStore | None = None) -> Flask:
    """Application factory for the public notes backend."""
    if config is None:
        try:
            config = load_config()
        except ConfigError as exc:
            raise RuntimeError(f"Configuration error: {exc}") from exc

    if store is None:
        store = create_store(seed=config.seed_notes)

    app = Flask(__name__)

    app.config.update(
        PORT=config.port,
        NOTES_MCP_HOST=config.notes_mcp_host,
        NOTES_MCP_PORT=config.notes_mcp_port,
    )
    app.extensions[NOTE_STORE_EXTENSION] = store

    CORS(app,
         resources={r"/*": {
             "origins": list(config.cors_origins),
             "methods": ["GET", "POST", "DELETE", "OPTIONS"],
             "allow_headers": ["Content-Type"],
             "expose_headers": ["Content-Type"],
             "max_age": 3600
         }})

    app.register_blueprint(notes_bp)
    app.register_blueprint(mcp_bp)

    @app.get("/health")
    def health_check() -> dict[str, str]:
        return {"status": "ok"}

    return app
