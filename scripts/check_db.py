"""
Check the database connection and schema.

Usage:
    python scripts/check_db.py
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Load .env file
from dotenv import load_dotenv

load_dotenv()

from sqlalchemy import inspect
from sqlmodel import create_engine

from app.core.config import settings

REQUIRED_TABLES = ("users", "tokens")

print("=" * 60)
print("Checking database")
print("=" * 60)
print(f"Database: {settings.DATABASE_URL.rsplit('@', 1)[-1]}")  # Hide credentials
print()

try:
    engine = create_engine(settings.DATABASE_URL)
    existing = set(inspect(engine).get_table_names())
except Exception as e:
    print(f"✗ Connection failed: {e}")
    sys.exit(1)

print("✓ Connection successful!")
missing = [table for table in REQUIRED_TABLES if table not in existing]
for table in REQUIRED_TABLES:
    mark = "✗" if table in missing else "✓"
    print(f"{mark} '{table}' table")

if missing:
    print("Run 'alembic upgrade head' to create missing tables")
    sys.exit(1)

print("=" * 60)
