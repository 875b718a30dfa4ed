from notes_backend import create_app
from notes_backend.config import load_config
from notes_backend.notes.service import create_store
from threading import Thread
import mcp_notes_server
from dotenv import load_dotenv
import logging

# Load environment variables from .env file
load_dotenv()

config = load_config()
logging.basicConfig(level=config.log_level, format="[%(levelname)s] %(message)s")

# One store shared by the HTTP routes and the MCP websocket server
store = create_store(seed=config.seed_notes)
app = create_app(config, store=store)


def start_mcp_server():
    """Start the MCP notes server in a background thread."""
    thread = Thread(
        target=mcp_notes_server.main,
        args=[["--transport", "websocket", "--host", config.notes_mcp_host]],
        kwargs={"store": store},
    )
    thread.daemon = True
    thread.start()


def main() -> None:
    start_mcp_server()
    app.run(host="0.0.0.0", port=app.config.get("PORT", 5000), debug=False)


if __name__ == "__main__":
    main()
