import argparse
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from openpyxl.utils.exceptions import InvalidFileException

from resale_ledger.core.errors import ConfigurationError, QueryError
from resale_ledger.core.logging import setup_logging
from resale_ledger.database import get_engine, get_session_factory, init_schema
from resale_ledger.services.ingestion_service import import_products_workbook


def parse_args():
    parser = argparse.ArgumentParser(
        description="Import purchased items from an Excel workbook."
    )
    parser.add_argument("--path", required=True, help="Path to .xlsx workbook.")
    parser.add_argument(
        "--store",
        default=None,
        help="Store name for rows without a store column (created if missing).",
    )
    parser.add_argument("--dry-run", action="store_true", help="Validate without saving.")
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()
    try:
        init_schema(get_engine())
        db = get_session_factory()()
        try:
            counts = import_products_workbook(
                args.path,
                db,
                default_store=args.store,
                dry_run=args.dry_run,
            )
        finally:
            db.close()
    except (OSError, ValueError, InvalidFileException, ConfigurationError, QueryError) as exc:
        raise SystemExit(f"Import failed: {exc}") from exc

    print(
        f"{counts['inserted']} inserted, {counts['skipped']} skipped, "
        f"{counts['stores_created']} stores created"
    )
    for error in counts["errors"]:
        print(f"  {error}")

    if args.dry_run:
        print("Dry run complete, no changes committed.")
    else:
        print("Import complete.")


if __name__ == "__main__":
    main()
