"""
Command line maintenance for the document store: export, import, sync, clear.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tracker.dependencies import get_document_store

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Document store maintenance")
    sub = parser.add_subparsers(dest="command", required=True)

    export_cmd = sub.add_parser("export", help="Write every collection to a JSON file")
    export_cmd.add_argument("path", type=Path, help="Destination file")

    import_cmd = sub.add_parser("import", help="Load collections from a JSON export")
    import_cmd.add_argument("path", type=Path, help="Export file to read")

    sub.add_parser("sync", help="Push local documents to Firestore")
    clear_cmd = sub.add_parser("clear", help="Delete every collection and settings")
    clear_cmd.add_argument(
        "--yes",
        action="store_true",
        help="Skip the confirmation prompt",
    )
    sub.add_parser("status", help="Show connectivity and storage usage")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )

    store = get_document_store()

    if args.command == "export":
        data = store.export_all()
        args.path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
        logger.info("Exported document data to %s", args.path)
    elif args.command == "import":
        data = json.loads(args.path.read_text(encoding="utf-8"))
        try:
            store.import_data(data)
        except ValueError as exc:
            logger.error("Refusing to import %s: %s", args.path, exc)
            return 1
        logger.info("Imported document data from %s", args.path)
    elif args.command == "sync":
        if store.remote is None:
            logger.error("No Firestore project configured; nothing to sync to")
            return 1
        report = store.sync_local_to_remote()
        print(json.dumps(report.as_dict()))
        return 1 if report.failed else 0
    elif args.command == "clear":
        if not args.yes:
            answer = input("Delete all document data? [y/N] ")
            if answer.strip().lower() != "y":
                logger.info("Aborted")
                return 1
        store.clear_all()
        logger.info("Cleared all document data")
    elif args.command == "status":
        status = {**store.connection_status(), "info": store.storage_info()}
        print(json.dumps(status, indent=2, default=str))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
