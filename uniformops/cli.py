"""Batch import of a free-text order list.

    uniformops-import parse lista_faltas.txt --output parsed_orders.json --stage
"""
import argparse
import json
import logging
import sys
from typing import List, Optional

from .config import configure_logging, get_settings
from .errors import BackendError
from .metrics import ORDERS_PARSED, PARSE_LATENCY
from .parsing import parse_orders

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="uniformops-import", description=__doc__.strip().splitlines()[0])
    sub = parser.add_subparsers(dest="command", required=True)
    p = sub.add_parser("parse", help="parse a text file into staging orders")
    p.add_argument("file", help="UTF-8 text file, one order block per school header")
    p.add_argument("--output", "-o", help="write the parsed orders as JSON here (default: stdout)")
    p.add_argument("--stage", action="store_true", help="insert the parsed orders into imported_orders")
    p.add_argument("--encoding", default="utf-8")
    return parser


def main(argv: Optional[List[str]] = None, backend=None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        with open(args.file, encoding=args.encoding) as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        print(f"ERROR: cannot read {args.file}: {e}", file=sys.stderr)
        return 2

    with PARSE_LATENCY.time():
        orders = parse_orders(content, area_code=settings.default_area_code, fallback_school=settings.fallback_school)
    ORDERS_PARSED.inc(len(orders))
    logger.info("Parsed %s orders from %s", len(orders), args.file)

    payload = json.dumps([o.model_dump(mode="json") for o in orders], ensure_ascii=False, indent=2)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(payload + "\n")
    else:
        sys.stdout.write(payload + "\n")

    if args.stage:
        from .staging import StagingStore

        if backend is None:
            from .db import Base, engine, get_backend
            Base.metadata.create_all(bind=engine)
            backend = get_backend()
        store = StagingStore(backend, chunk_size=settings.import_chunk_size)
        try:
            rows = store.insert_batch(orders)
        except BackendError as e:
            print(f"Staging failed: {e}", file=sys.stderr)
            return 1
        logger.info("Staged %s orders for review", len(rows))
    return 0


if __name__ == "__main__":
    sys.exit(main())
