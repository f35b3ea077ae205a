import argparse
import sys
from datetime import date, timedelta
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from sqlalchemy import delete, select

from resale_ledger.core.logging import setup_logging
from resale_ledger.database import get_engine, get_session_factory, init_schema
from resale_ledger.models.product import Product
from resale_ledger.models.store import Store


def parse_args():
    parser = argparse.ArgumentParser(description="Seed sample purchase and sale records.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing data before seeding.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    init_schema(get_engine())

    db = get_session_factory()()
    try:
        if args.reset:
            db.execute(delete(Product))
            db.execute(delete(Store))
            db.commit()

        has_store = db.execute(select(Store.id).limit(1)).first()
        if has_store:
            print("Seed skipped: stores already exist.")
            return

        real_real = Store(name="The Real Real")
        thrift = Store(name="Goodwill Downtown")
        db.add_all([real_real, thrift])
        db.flush()

        today = date.today()
        db.add_all(
            [
                Product(
                    name="Off-White x Nike Utility Jacket",
                    store_id=real_real.id,
                    purchase_price=212.00,
                    purchase_date=today - timedelta(days=40),
                    sale_price=340.00,
                    sale_date=today - timedelta(days=3),
                    sold_at="Grailed",
                ),
                Product(
                    name="Off-White 2020 Straight-Leg Jeans",
                    store_id=real_real.id,
                    purchase_price=382.50,
                    purchase_date=today - timedelta(days=40),
                ),
                Product(
                    name="Vintage Wool Overcoat",
                    store_id=thrift.id,
                    purchase_price=30.00,
                    purchase_date=today - timedelta(days=90),
                    sale_price=20.00,
                    sale_date=today - timedelta(days=10),
                    sold_at="eBay",
                ),
            ]
        )
        db.commit()
        print("Seeded 2 stores and 3 products.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
