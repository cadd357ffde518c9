from sqlalchemy import create_engine
from sqlalchemy.engine import URL
from sqlalchemy.orm import sessionmaker
from portfolio_assistant.common.db.models.knowledge.portfolio_knowledge import PortfolioKnowledge

from dotenv import load_dotenv
import argparse
import json
import os
from pathlib import Path

# import creation and deletion scripts
from scripts.db.create_tables import create_all_tables
from scripts.db.delete_tables import delete_all_tables

SEED_COLUMNS = ("project", "type", "title", "content", "tags")

def seed_rows(engine, seed_path: Path) -> int:
    """
    Insert knowledge rows from a JSON file: a list of objects with project/type/title/content/tags keys.
    Rows without content are skipped, they can never be useful to the assistant.
    """
    rows = json.loads(seed_path.read_text(encoding="utf-8"))
    if not isinstance(rows, list):
        raise ValueError(f"Seed file {seed_path} must contain a JSON list of rows")

    session_maker = sessionmaker(engine)
    inserted = 0
    with session_maker() as session:
        for row in rows:
            if not isinstance(row, dict) or not row.get("content"):
                print(f"Skipping seed row without content: {row}")
                continue
            session.add(PortfolioKnowledge(**{column: row.get(column) for column in SEED_COLUMNS}))
            inserted += 1
        session.commit()
    return inserted

# NOTE: trouble shooting: if script imports do not work, use PYTHONPATH=. to explicitly include root of project
# NOTE: needs a role with write access, not the read-only role the service runs with
if __name__ == "__main__":
    # one-off script to reset the knowledge db, by deleting then creating all tables, optionally seeding rows
    parser = argparse.ArgumentParser(description="Reset the portfolio knowledge table.")
    parser.add_argument("--seed", type=Path, default=None, help="Optional JSON file of rows to insert after the reset.")
    args = parser.parse_args()

    # load in the proper .env file, defaulted to .env.dev
    APP_ENV = os.getenv("APP_ENV", "dev")
    # This file is in scripts/db/, so we go up two levels to project root
    SERVICE_ROOT = Path(__file__).resolve().parents[2]
    env_file_path = SERVICE_ROOT / f".env.{APP_ENV}"

    # Load the .env file manually
    print(f"Loading env file from: {env_file_path}")
    load_dotenv(dotenv_path=env_file_path)

    KNOWLEDGE_DB_USER = os.getenv("KNOWLEDGE_DB_ADMIN_USER") or os.getenv("KNOWLEDGE_DB_USER")
    KNOWLEDGE_DB_PW = os.getenv("KNOWLEDGE_DB_ADMIN_PW") or os.getenv("KNOWLEDGE_DB_PW")
    KNOWLEDGE_DB_HOST = os.getenv("KNOWLEDGE_DB_HOST")
    KNOWLEDGE_DB_PORT = os.getenv("KNOWLEDGE_DB_PORT")
    KNOWLEDGE_DB_NAME = os.getenv("KNOWLEDGE_DB_NAME")

    assert all([KNOWLEDGE_DB_USER, KNOWLEDGE_DB_PW, KNOWLEDGE_DB_HOST, KNOWLEDGE_DB_PORT, KNOWLEDGE_DB_NAME]), \
        "KNOWLEDGE_DB_* settings are not fully set"

    KNOWLEDGE_DB_URL = URL.create(
        drivername="postgresql+psycopg2",
        username=KNOWLEDGE_DB_USER,
        password=KNOWLEDGE_DB_PW,
        host=KNOWLEDGE_DB_HOST,
        port=int(KNOWLEDGE_DB_PORT), # type: ignore[arg-type]
        database=KNOWLEDGE_DB_NAME,
        query={"sslmode": "require"},
    )

    try:
        engine = create_engine(KNOWLEDGE_DB_URL)
    except Exception as e:
        print(f"Error connecting to database: {e}")
        exit(1)

    # NOTE: this is the actual logic to reset: edit as needed
    delete_all_tables(engine)
    create_all_tables(engine)
    print("All tables reset successfully!")

    if args.seed is not None:
        count = seed_rows(engine, args.seed)
        print(f"Seeded {count} knowledge rows from {args.seed}")
