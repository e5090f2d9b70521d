#!/usr/bin/env python3
"""
seed.py — run Alembic migrations and load the default catalog for local dev
"""
import argparse, os, subprocess
from pathlib import Path

def run_alembic(repo_root: Path):
    print(">>> Running Alembic migrations")
    subprocess.run(["alembic", "upgrade", "head"], cwd=repo_root, check=True)

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--database-url", default=None, help="Overrides DATABASE_URL")
    ap.add_argument("--skip-migrations", action="store_true", help="Only seed the catalog")
    args = ap.parse_args()

    if args.database_url:
        os.environ["DATABASE_URL"] = args.database_url

    # settings are read at import time, so import after DATABASE_URL is final
    from sqlalchemy.orm import Session
    from storefront.core.config import settings
    from storefront.db.bootstrap import ensure_sqlite_dir, seed_catalog
    from storefront.db.session import engine

    print(f"Using DATABASE_URL = {settings.DATABASE_URL}")
    ensure_sqlite_dir(engine)
    repo_root = Path(__file__).resolve().parents[1]
    if not args.skip_migrations:
        run_alembic(repo_root)

    with Session(engine) as db, db.begin():
        added = seed_catalog(db)
    print(f"Seeded {added} products." if added else "Catalog already populated.")
    print("Done.")

if __name__ == "__main__":
    main()
