"""
AgentHub - CLI Entry Point.

Usage:
    python main.py serve [--host HOST] [--port PORT] [--reload]
    python main.py init-db
    python main.py seed
"""

import argparse
import sys

from dotenv import load_dotenv

load_dotenv()

from agenthub.db.base import get_session_factory, init_db  # noqa: E402
from agenthub.db.seed import seed  # noqa: E402


def serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("agenthub.api.app:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def create_tables(args: argparse.Namespace) -> int:
    try:
        init_db()
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    print("Tables created")
    return 0


def load_demo_data(args: argparse.Namespace) -> int:
    try:
        init_db()
        db = get_session_factory()()
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    try:
        created = seed(db)
    finally:
        db.close()

    print("Database seeded:")
    for table, count in created.items():
        print(f"  {table}: {count} created")
    return 0


def main() -> int:
    """Run the AgentHub CLI."""
    parser = argparse.ArgumentParser(prog="agenthub", description="AgentHub backend")
    commands = parser.add_subparsers(dest="command", required=True)

    serve_cmd = commands.add_parser("serve", help="Run the API server")
    serve_cmd.add_argument("--host", default="127.0.0.1")
    serve_cmd.add_argument("--port", type=int, default=8000)
    serve_cmd.add_argument("--reload", action="store_true")
    serve_cmd.set_defaults(handler=serve)

    commands.add_parser("init-db", help="Create database tables").set_defaults(handler=create_tables)
    commands.add_parser("seed", help="Load demo opportunities and users").set_defaults(handler=load_demo_data)

    args = parser.parse_args()
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
