# backend/start.py
import os
import sys
import uvicorn
import socket

# SET DATABASE_URL BEFORE importing app modules!
# This ensures db.py uses SQLite instead of defaulting to PostgreSQL
if not os.getenv("DATABASE_URL"):
    if getattr(sys, 'frozen', False):
        # Running as compiled executable
        base_dir = os.path.dirname(sys.executable)
    else:
        base_dir = os.path.dirname(os.path.abspath(__file__))

    db_path = os.path.join(base_dir, "missions.db")
    # SQLite URL format: sqlite:///absolute/path/to/file.db (3 slashes for absolute)
    os.environ["DATABASE_URL"] = f"sqlite:///{db_path}"
    print(f"[INFO] Using SQLite database at: {db_path}")

# Now import the FastAPI app (db.py will read the DATABASE_URL we just set)
from app.main import app as fastapi_app  # noqa: E402
from app.db import DATABASE_URL, Base, SessionLocal, engine  # noqa: E402
from app.services.action_types import seed_system_action_types  # noqa: E402
import app.models  # noqa: E402,F401


def bootstrap_sqlite() -> None:
    """Local SQLite runs skip Alembic: create the tables and seed system action types."""
    if not DATABASE_URL.startswith("sqlite"):
        return
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as s:
        added = seed_system_action_types(s)
    if added:
        print(f"[INFO] Seeded {added} system action types")


def find_free_port(start_port=8000, max_attempts=10):
    """Find a free port starting from start_port"""
    for port in range(start_port, start_port + max_attempts):
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
                s.bind(('127.0.0.1', port))
                return port
        except OSError:
            continue
    raise RuntimeError(f"Could not find a free port in range {start_port}-{start_port + max_attempts}")


if __name__ == "__main__":
    bootstrap_sqlite()

    try:
        port = find_free_port(8000)
        if port != 8000:
            print(f"[WARN] Port 8000 in use, using port {port} instead")
    except RuntimeError:
        print("[ERROR] No free ports available")
        sys.exit(1)

    uvicorn.run(fastapi_app, host="127.0.0.1", port=port, reload=False)
