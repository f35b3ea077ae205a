import unittest
from datetime import date

from fastapi.testclient import TestClient

from resale_ledger.core.errors import ConfigurationError, QueryError
from resale_ledger.database import build_session_factory, create_db_engine, get_db, init_schema
from resale_ledger.dependencies import get_analytics_engine
from resale_ledger.main import app
from resale_ledger.services.analytics_service import AnalyticsEngine


class ApiTestCase(unittest.TestCase):
    def setUp(self):
        self.engine = create_db_engine("sqlite:///:memory:")
        init_schema(self.engine)
        self.session_factory = build_session_factory(self.engine)

        def override_get_db():
            db = self.session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.engine.dispose()

    def create_store(self, name):
        response = self.client.post("/api/stores", json={"name": name})
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def create_product(self, store_id, name, purchase, sale=None, sale_date=None, **extra):
        body = {
            "name": name,
            "store_id": store_id,
            "purchase_price": purchase,
            "purchase_date": "2026-01-13",
            "sale_price": sale,
            "sale_date": sale_date,
        }
        body.update(extra)
        response = self.client.post("/api/products", json=body)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()


class StoreApiTest(ApiTestCase):
    def test_create_and_list_sorted_by_name(self):
        self.create_store("Thrift Town")
        self.create_store("Goodwill")

        response = self.client.get("/api/stores")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([store["name"] for store in response.json()], ["Goodwill", "Thrift Town"])

    def test_blank_name_rejected(self):
        response = self.client.post("/api/stores", json={"name": "  "})
        self.assertEqual(response.status_code, 400)
        response = self.client.post("/api/stores", json={})
        self.assertEqual(response.status_code, 400)

    def test_delete_store_removes_its_products(self):
        store = self.create_store("Goodwill")
        self.create_product(store["id"], "Coat", 30)

        response = self.client.delete(f"/api/stores/{store['id']}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True})
        self.assertEqual(self.client.get("/api/products").json(), [])

    def test_delete_missing_store(self):
        self.assertEqual(self.client.delete("/api/stores/404").status_code, 404)


class ProductApiTest(ApiTestCase):
    def test_create_returns_joined_store(self):
        store = self.create_store("The Real Real")
        product = self.create_product(store["id"], "Off-White Nylon Jacket", 126.0)

        self.assertEqual(product["store"]["name"], "The Real Real")
        self.assertIsNone(product["sale_price"])
        self.assertEqual(
            product["resolved_url"],
            "https://www.therealreal.com/products/men/clothing/jackets/off-white-nylon-jacket",
        )

    def test_list_newest_first(self):
        store = self.create_store("Goodwill")
        self.create_product(store["id"], "First", 10)
        self.create_product(store["id"], "Second", 20)

        names = [product["name"] for product in self.client.get("/api/products").json()]
        self.assertEqual(names, ["Second", "First"])

    def test_patch_marks_as_sold(self):
        store = self.create_store("Goodwill")
        product = self.create_product(store["id"], "Coat", 30)

        response = self.client.patch(
            f"/api/products/{product['id']}",
            json={"sale_price": 75.0, "sale_date": "2026-02-01", "sold_at": "eBay"},
        )
        self.assertEqual(response.status_code, 200, response.text)
        updated = response.json()
        self.assertEqual(updated["sale_price"], 75.0)
        self.assertEqual(updated["sold_at"], "eBay")
        self.assertEqual(updated["name"], "Coat")
        self.assertEqual(updated["purchase_price"], 30.0)

    def test_patch_cannot_clear_required_fields(self):
        store = self.create_store("Goodwill")
        product = self.create_product(store["id"], "Coat", 30)

        for field in ("name", "store_id", "purchase_price", "purchase_date"):
            response = self.client.patch(f"/api/products/{product['id']}", json={field: None})
            self.assertEqual(response.status_code, 422, field)

        unchanged = self.client.get(f"/api/products/{product['id']}").json()
        self.assertEqual(unchanged["name"], "Coat")
        self.assertEqual(unchanged["purchase_price"], 30.0)

        response = self.client.patch(f"/api/products/{product['id']}", json={"sale_price": None})
        self.assertEqual(response.status_code, 200, response.text)

    def test_put_replaces_fields(self):
        store = self.create_store("Goodwill")
        product = self.create_product(store["id"], "Coat", 30, sale=50, sale_date="2026-02-01")

        response = self.client.put(
            f"/api/products/{product['id']}",
            json={
                "name": "Wool Coat",
                "store_id": store["id"],
                "purchase_price": 35.0,
                "purchase_date": "2026-01-10",
            },
        )
        self.assertEqual(response.status_code, 200, response.text)
        updated = response.json()
        self.assertEqual(updated["name"], "Wool Coat")
        self.assertIsNone(updated["sale_price"])
        self.assertIsNone(updated["sale_date"])

    def test_get_and_delete(self):
        store = self.create_store("Goodwill")
        product = self.create_product(store["id"], "Coat", 30)

        self.assertEqual(self.client.get(f"/api/products/{product['id']}").status_code, 200)
        self.assertEqual(self.client.delete(f"/api/products/{product['id']}").json(), {"success": True})
        self.assertEqual(self.client.get(f"/api/products/{product['id']}").status_code, 404)
        self.assertEqual(self.client.delete(f"/api/products/{product['id']}").status_code, 404)

    def test_missing_required_fields(self):
        response = self.client.post("/api/products", json={"name": "Coat"})
        self.assertEqual(response.status_code, 422)

    def test_unknown_store_is_a_query_error(self):
        response = self.client.post(
            "/api/products",
            json={
                "name": "Coat",
                "store_id": 12345,
                "purchase_price": 10,
                "purchase_date": "2026-01-13",
            },
        )
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Failed to create product", "configError": False})


class AnalyticsApiTest(ApiTestCase):
    def setUp(self):
        super().setUp()
        store_a = self.create_store("Store A")
        store_b = self.create_store("Store B")
        self.create_product(store_a["id"], "Jacket", 100, sale=150, sale_date="2026-03-10")
        self.create_product(store_a["id"], "Jeans", 50)
        self.create_product(store_b["id"], "Coat", 30, sale=20, sale_date="2026-03-12")

    def test_overall_stats(self):
        response = self.client.get("/api/analytics/stats")
        self.assertEqual(response.status_code, 200)
        stats = response.json()
        self.assertEqual(stats["totalItems"], 3)
        self.assertEqual(stats["soldItems"], 2)
        self.assertEqual(stats["unsoldItems"], 1)
        self.assertAlmostEqual(stats["totalCost"], 180.0)
        self.assertAlmostEqual(stats["totalRevenue"], 170.0)
        self.assertAlmostEqual(stats["totalProfit"], 40.0)
        self.assertAlmostEqual(stats["profitMargin"], 23.529, places=2)

    def test_range_stats(self):
        response = self.client.get(
            "/api/analytics/range",
            params={"start": "2026-03-10", "end": "2026-03-10"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {"profit": 50.0, "revenue": 150.0, "cost": 100.0, "itemsSold": 1},
        )

    def test_range_accepts_timestamps(self):
        response = self.client.get(
            "/api/analytics/range",
            params={"start": "2026-03-01T00:00:00.000Z", "end": "2026-03-31T23:59:59.999Z"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["itemsSold"], 2)

    def test_range_requires_both_bounds(self):
        response = self.client.get("/api/analytics/range", params={"start": "2026-03-01"})
        self.assertEqual(response.status_code, 400)
        response = self.client.get(
            "/api/analytics/range",
            params={"start": "yesterday", "end": "2026-03-01"},
        )
        self.assertEqual(response.status_code, 400)

    def test_periods(self):
        response = self.client.get("/api/analytics/periods", params={"today": "2026-03-11"})
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["week"]["start"], "2026-03-08")
        self.assertEqual(body["week"]["end"], "2026-03-14")
        self.assertEqual(body["week"]["itemsSold"], 2)
        self.assertAlmostEqual(body["week"]["avgProfit"], 20.0)
        self.assertEqual(body["year"]["start"], "2026-01-01")
        self.assertEqual(body["year"]["itemsSold"], 2)

    def test_most_profitable(self):
        response = self.client.get("/api/analytics/profitable", params={"limit": 1})
        self.assertEqual(response.status_code, 200)
        ranked = response.json()
        self.assertEqual(len(ranked), 1)
        self.assertEqual(ranked[0]["product_name"], "Jacket")
        self.assertEqual(ranked[0]["store_name"], "Store A")
        self.assertAlmostEqual(ranked[0]["profit"], 50.0)
        self.assertIn("profitMargin", ranked[0])

        everything = self.client.get("/api/analytics/profitable").json()
        self.assertEqual([entry["product_name"] for entry in everything], ["Jacket", "Coat"])

    def test_store_stats(self):
        response = self.client.get("/api/analytics/stores")
        self.assertEqual(response.status_code, 200)
        stats = response.json()
        self.assertEqual([entry["store"]["name"] for entry in stats], ["Store A", "Store B"])
        self.assertEqual(stats[0]["items"], 2)
        self.assertAlmostEqual(stats[0]["profit"], 50.0)
        self.assertEqual(stats[1]["items"], 1)
        self.assertAlmostEqual(stats[1]["profit"], -10.0)


class ErrorResponseTest(ApiTestCase):
    def test_configuration_error(self):
        def unconfigured_db():
            raise ConfigurationError("DATABASE_URL is not set")
            yield  # pragma: no cover

        app.dependency_overrides[get_db] = unconfigured_db
        response = self.client.get("/api/analytics/stats")

        self.assertEqual(response.status_code, 500)
        body = response.json()
        self.assertTrue(body["configError"])
        self.assertIn("DATABASE_URL", body["error"])

    def test_query_error(self):
        class BrokenStore:
            def list_products(self):
                raise QueryError("fetch products", "timeout")

            list_sold_products = list_products
            list_products_sold_between = list_products

        app.dependency_overrides[get_analytics_engine] = lambda: AnalyticsEngine(BrokenStore())
        response = self.client.get("/api/analytics/stores")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Failed to fetch products", "configError": False})

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")


if __name__ == "__main__":
    unittest.main()
