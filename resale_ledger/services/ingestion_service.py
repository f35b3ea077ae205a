import logging
from datetime import date, datetime
from pathlib import Path

from openpyxl import load_workbook
from sqlalchemy.orm import Session

from resale_ledger.database.session import guarded
from resale_ledger.services.product_service import create_product
from resale_ledger.services.store_service import create_store, find_store_by_name

logger = logging.getLogger(__name__)

_ALIAS_SPECS = (
    (("product", "name"), "name"),
    (("item", "name"), "name"),
    (("item",), "name"),
    (("product",), "name"),
    (("store", "name"), "store"),
    (("shop",), "store"),
    (("bought", "from"), "store"),
    (("purchase", "price"), "purchase_price"),
    (("purchased", "price"), "purchase_price"),
    (("cost",), "purchase_price"),
    (("price", "paid"), "purchase_price"),
    (("purchase", "date"), "purchase_date"),
    (("purchased", "on"), "purchase_date"),
    (("bought", "on"), "purchase_date"),
    (("sale", "price"), "sale_price"),
    (("sold", "price"), "sale_price"),
    (("sold", "for"), "sale_price"),
    (("sale", "date"), "sale_date"),
    (("sold", "on"), "sale_date"),
    (("sold", "at"), "sold_at"),
    (("platform",), "sold_at"),
    (("channel",), "sold_at"),
    (("product", "url"), "product_url"),
    (("url",), "product_url"),
    (("link",), "product_url"),
)

HEADER_ALIASES = {"".join(parts): target for parts, target in _ALIAS_SPECS}

REQUIRED_COLUMNS = {"name", "purchase_price", "purchase_date"}

_PLACEHOLDER_VALUES = {"none", "[none]", "null", "[null]", "na", "n/a", "nan", "-", "--"}


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _clean_text(value):
    if _is_blank(value):
        return None
    text = str(value).strip()
    if text.lower() in _PLACEHOLDER_VALUES:
        return None
    return text


def normalize_header(value):
    if value is None:
        return ""
    value_text = str(value).strip().lower()
    if not value_text:
        return ""
    for char in (" ", "-", ".", "/"):
        value_text = value_text.replace(char, "_")
    value_text = "_".join(part for part in value_text.split("_") if part)
    alias = HEADER_ALIASES.get(value_text)
    if alias:
        return alias
    alias = HEADER_ALIASES.get(value_text.replace("_", ""))
    if alias:
        return alias
    return value_text


def to_str(value, field, required=True):
    text = _clean_text(value)
    if text is None and required:
        raise ValueError(f"{field} is required")
    return text


def to_price(value, field, required=True):
    if _clean_text(value) is None:
        if required:
            raise ValueError(f"{field} is required")
        return None
    if isinstance(value, bool):
        raise ValueError(f"{field} must be a number")
    if isinstance(value, str):
        value = value.replace(",", "").replace("$", "").strip()
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field} must be a number") from None


def to_date(value, field, required=True):
    if _clean_text(value) is None:
        if required:
            raise ValueError(f"{field} is required")
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        value_text = value.strip()
        try:
            return date.fromisoformat(value_text)
        except ValueError:
            pass
        for fmt in ("%Y/%m/%d", "%m/%d/%Y", "%d/%m/%Y"):
            try:
                return datetime.strptime(value_text, fmt).date()
            except ValueError:
                continue
    raise ValueError(f"{field} must be a date (YYYY-MM-DD)")


def load_sheet_rows(worksheet):
    rows_iter = worksheet.iter_rows(values_only=True)
    headers = next(rows_iter, None)
    if not headers:
        return [], set()
    header_keys = [normalize_header(header) for header in headers]
    indices = [(idx, key) for idx, key in enumerate(header_keys) if key]
    columns = {key for key in header_keys if key}

    rows = []
    for row_number, row in enumerate(rows_iter, start=2):
        if row is None or all(_is_blank(value) for value in row):
            continue
        record = {key: row[idx] if idx < len(row) else None for idx, key in indices}
        record["_row"] = row_number
        rows.append(record)
    return rows, columns


def validate_columns(columns, *, default_store=None):
    required = set(REQUIRED_COLUMNS)
    if not default_store:
        required.add("store")
    missing = sorted(required - columns)
    if missing:
        raise ValueError(f"Workbook missing columns: {', '.join(missing)}")


def build_product_values(row):
    return {
        "name": to_str(row.get("name"), "name"),
        "purchase_price": to_price(row.get("purchase_price"), "purchase_price"),
        "purchase_date": to_date(row.get("purchase_date"), "purchase_date"),
        "sale_price": to_price(row.get("sale_price"), "sale_price", required=False),
        "sale_date": to_date(row.get("sale_date"), "sale_date", required=False),
        "sold_at": to_str(row.get("sold_at"), "sold_at", required=False),
        "product_url": to_str(row.get("product_url"), "product_url", required=False),
    }


def resolve_store_id(db: Session, store_name, store_cache, counts):
    key = store_name.strip().lower()
    if key in store_cache:
        return store_cache[key]
    store = find_store_by_name(db, store_name)
    if store is None:
        store = create_store(db, store_name, commit=False)
        counts["stores_created"] += 1
        logger.info("Creating store %r for imported products", store_name)
    store_cache[key] = store.id
    return store.id


def import_rows(db: Session, rows, *, default_store=None):
    counts = {"inserted": 0, "skipped": 0, "stores_created": 0, "errors": []}
    store_cache = {}
    for row in rows:
        row_number = row.get("_row")
        try:
            values = build_product_values(row)
            store_name = to_str(row.get("store"), "store", required=False) or default_store
            if not store_name:
                raise ValueError("store is required")
        except ValueError as exc:
            counts["skipped"] += 1
            counts["errors"].append(f"row {row_number}: {exc}")
            logger.warning("Skipping workbook row %s: %s", row_number, exc)
            continue
        values["store_id"] = resolve_store_id(db, store_name, store_cache, counts)
        create_product(db, values, commit=False)
        counts["inserted"] += 1
    return counts


def import_products_workbook(workbook_path, db: Session, *, default_store=None, dry_run=False):
    workbook_path = Path(workbook_path)
    if not workbook_path.exists():
        raise FileNotFoundError(f"File not found: {workbook_path}")
    if workbook_path.suffix.lower() != ".xlsx":
        raise ValueError("Only .xlsx files are supported.")

    workbook = load_workbook(workbook_path, data_only=True)
    worksheet = workbook.worksheets[0]
    rows, columns = load_sheet_rows(worksheet)
    validate_columns(columns, default_store=default_store)

    counts = import_rows(db, rows, default_store=default_store)
    with guarded(db, "import products"):
        if dry_run:
            db.rollback()
        else:
            db.commit()

    logger.info(
        "Imported %s products from %s (%s skipped, %s stores created)%s",
        counts["inserted"],
        workbook_path.name,
        counts["skipped"],
        counts["stores_created"],
        " [dry run]" if dry_run else "",
    )
    return counts


__all__ = [
    "import_products_workbook",
    "import_rows",
    "load_sheet_rows",
    "normalize_header",
    "validate_columns",
]
