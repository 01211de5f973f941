"""
Development server launcher.

Loads .env file and runs the user-accounts API with uvicorn.  Log level
and auto-reload follow LOG_LEVEL and DEBUG from the settings.

Usage:
    python scripts/run_dev.py [--host HOST] [--port PORT]
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Load .env file
from dotenv import load_dotenv

load_dotenv()

import uvicorn
from sqlalchemy.engine import make_url

from app.core.config import settings


def server_options(host: str = "127.0.0.1", port: int = 8000) -> dict:
    """uvicorn keyword arguments derived from the current settings."""
    return {
        "host": host,
        "port": port,
        "reload": settings.DEBUG,
        "log_level": settings.LOG_LEVEL.lower(),
    }


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Run the user-accounts API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args(argv)

    options = server_options(args.host, args.port)
    # Password is masked in the rendered URL
    database = make_url(settings.DATABASE_URL).render_as_string(hide_password=True)

    print("=" * 60)
    print(f"{settings.PROJECT_NAME} {settings.VERSION}")
    print("=" * 60)
    print(f"Database: {database}")
    print(f"API:      http://{args.host}:{args.port}/api/v1/users")
    print(f"Docs:     http://{args.host}:{args.port}/docs")
    print(f"Reload:   {'on' if options['reload'] else 'off'}")
    print("=" * 60)

    uvicorn.run("app.main:app", **options)


if __name__ == "__main__":
    main()
