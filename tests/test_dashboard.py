from pymongo.errors import ServerSelectionTimeoutError

from storeadmin.services.dashboard import DashboardView, total_revenue


class DownStore:
    def list(self, collection):
        raise ServerSelectionTimeoutError("no servers available")


def test_revenue_sums_price_times_quantity():
    orders = [
        {"items": [{"price": 100, "quantity": 2}]},
        {"items": [{"price": 50, "quantity": 1}]},
    ]
    assert total_revenue(orders) == 250


def test_revenue_ignores_orders_without_items():
    orders = [
        {"status": "Pending"},
        {"items": None},
        {"items": [{"price": 10, "quantity": 3}, {"price": 99}]},
    ]
    assert total_revenue(orders) == 30


def test_revenue_keeps_fractional_quantities():
    assert total_revenue([{"items": [{"price": 10, "quantity": 1.5}]}]) == 15
    assert total_revenue([{"items": [{"price": "10", "quantity": "2.5"}]}]) == 25


def test_revenue_skips_unreadable_items():
    orders = [{"items": [
        {"price": "ten", "quantity": 1},
        {"price": 20, "quantity": [2]},
        "not-an-item",
        {"price": 5, "quantity": 2},
    ]}]
    assert total_revenue(orders) == 10


def test_revenue_counts_rejected_orders():
    orders = [{"status": "Rejected", "items": [{"price": 40, "quantity": 1}]}]
    assert total_revenue(orders) == 40


def test_failed_read_leaves_dashboard_loading():
    view = DashboardView(DownStore()).load()
    assert view.loading is True
    assert view.stats is None


def test_stats_endpoint(client, store, auth_headers):
    store.create("orders", {"items": [{"price": 100, "quantity": 2}]})
    store.create("orders", {"items": [{"price": 50, "quantity": 1}]})
    store.create("products", {"name": "Ball"})
    store.create("users", {"name": "Asha"})
    store.create("users", {"name": "Ravi"})

    res = client.get("/api/admin/stats", headers=auth_headers)
    assert res.status_code == 200
    assert res.json() == {
        "loading": False,
        "stats": {"total_orders": 2, "total_products": 1, "total_users": 2, "total_revenue": 250},
    }


def test_stats_require_sign_in(client):
    assert client.get("/api/admin/stats").status_code == 401


def test_stats_with_text_quantity(client, store, auth_headers):
    store.create("orders", {"items": [{"price": 10, "quantity": "2.5"}, {"price": 7, "quantity": "lots"}]})
    res = client.get("/api/admin/stats", headers=auth_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["loading"] is False
    assert body["stats"]["total_revenue"] == 25
