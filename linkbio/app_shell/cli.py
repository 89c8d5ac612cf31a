import argparse
import logging
import sys
from pathlib import Path

import uvicorn

from linkbio.adapters.sqlite.migrator import SQLiteMigrator
from linkbio.api.deps import Settings
from linkbio.app_shell.config import validate_ops_rules
from linkbio.rules.loader import load_rules

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")


def handle_check_rules(settings: Settings) -> None:
    try:
        rules = load_rules(Path(settings.rules_path))
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        sys.exit(1)
    validate_ops_rules(rules, settings.data_dir)
    print(f"Rules OK: {settings.rules_path} (version {rules.project.rules_version})")


def handle_migrate(settings: Settings, args: argparse.Namespace) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    migrator = SQLiteMigrator(args.db or settings.db_path, args.migrations or settings.migrations_dir)
    applied = migrator.run_migrations()
    if applied:
        print(f"Applied {len(applied)} migration(s): {', '.join(applied)}")
    else:
        print("Database is up to date.")


def handle_serve(args: argparse.Namespace) -> None:
    uvicorn.run("linkbio.api.main:app", host=args.host, port=args.port, reload=args.reload)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="linkbio CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    migrate_parser = subparsers.add_parser("migrate", help="Apply pending SQL migrations")
    migrate_parser.add_argument("--db", help="SQLite file (default: $LINKBIO_DATA_DIR/linkbio.db)")
    migrate_parser.add_argument("--migrations", help="Migrations directory")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true")

    # check-rules
    subparsers.add_parser("check-rules", help="Load and validate rules.yaml")

    args = parser.parse_args(argv)
    settings = Settings()

    if args.command == "migrate":
        handle_migrate(settings, args)
    elif args.command == "serve":
        handle_serve(args)
    elif args.command == "check-rules":
        handle_check_rules(settings)


if __name__ == "__main__":
    main()
