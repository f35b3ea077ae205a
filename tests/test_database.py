import unittest

from resale_ledger.core.errors import ConfigurationError
from resale_ledger.database import create_db_engine, ensure_sqlite_schema
from resale_ledger.database.engine import database_configured


class EngineConfigTest(unittest.TestCase):
    def test_unconfigured_urls(self):
        for url in (None, "", "   ", "https://placeholder.supabase.co"):
            with self.subTest(url=url):
                self.assertFalse(database_configured(url))
                with self.assertRaises(ConfigurationError):
                    create_db_engine(url)

    def test_malformed_url(self):
        with self.assertRaises(ConfigurationError):
            create_db_engine("not a database url")

    def test_sqlite_foreign_keys_enabled(self):
        engine = create_db_engine("sqlite:///:memory:")
        with engine.connect() as conn:
            value = conn.exec_driver_sql("PRAGMA foreign_keys").scalar()
        engine.dispose()
        self.assertEqual(value, 1)


class SqliteSchemaUpgradeTest(unittest.TestCase):
    def test_adds_missing_product_columns(self):
        engine = create_db_engine("sqlite:///:memory:")
        with engine.begin() as conn:
            # noinspection SqlNoDataSourceInspection
            conn.exec_driver_sql(
                "CREATE TABLE products ("
                "id INTEGER PRIMARY KEY, name TEXT NOT NULL, store_id INTEGER NOT NULL, "
                "purchase_price REAL NOT NULL, purchase_date DATE NOT NULL, "
                "sale_price REAL, sale_date DATE, created_at DATETIME NOT NULL)"
            )
            conn.exec_driver_sql(
                "INSERT INTO products (name, store_id, purchase_price, purchase_date, created_at) "
                "VALUES ('Coat', 1, 30, '2026-01-14', '2026-01-14 10:00:00')"
            )

        added = ensure_sqlite_schema(engine)

        self.assertEqual(
            sorted(added),
            [("products", "product_url"), ("products", "sold_at"), ("products", "updated_at")],
        )
        with engine.connect() as conn:
            updated_at = conn.exec_driver_sql("SELECT updated_at FROM products").scalar()
        self.assertEqual(updated_at, "2026-01-14 10:00:00")
        self.assertEqual(ensure_sqlite_schema(engine), [])
        engine.dispose()


if __name__ == "__main__":
    unittest.main()
