#!/usr/bin/env python3
# backend/init_db.py
"""
Database initialization script.

Creates the saved-portfolio tables. This script can be run from any directory:
    python backend/init_db.py
    cd backend && python init_db.py
"""
import sys
from pathlib import Path

# Add the backend directory to Python path so 'stockledger' is importable
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))

from stockledger.config import settings
from stockledger.database import init_db


if __name__ == "__main__":
    print(f"Creating tables in {settings.database_url}...")
    init_db()
    print("Tables created successfully!")
