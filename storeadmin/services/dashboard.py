import logging
from typing import Iterable, Optional

from pymongo.errors import PyMongoError

from storeadmin.db.mongo import DocumentStore
from storeadmin.models.schemas import DashboardStats

logger = logging.getLogger(__name__)


def total_revenue(orders: Iterable[dict]) -> float:
    """Sum of price * quantity over every line item of every order.

    Status is not looked at, so rejected orders count too.
    """
    revenue = 0
    for order in orders:
        items = order.get("items")
        if not isinstance(items, list):
            continue
        for item in items:
            if not isinstance(item, dict):
                continue
            price = item.get("price")
            quantity = item.get("quantity")
            if not price or not quantity:
                continue
            try:
                revenue += float(price) * float(quantity)
            except (TypeError, ValueError):
                logger.warning("Skipping line item with bad price or quantity: %r", item)
    return revenue


class DashboardView:
    """Full scan of orders, products and users on every load.

    Starts out loading. A failed read is logged and the view stays loading.
    """

    def __init__(self, store: DocumentStore):
        self.store = store
        self.loading = True
        self.stats: Optional[DashboardStats] = None

    def load(self) -> "DashboardView":
        self.loading = True
        try:
            orders = self.store.list("orders")
            products = self.store.list("products")
            users = self.store.list("users")
        except PyMongoError as e:
            logger.error("Error fetching dashboard data: %s", e)
            return self
        self.stats = DashboardStats(
            total_orders=len(orders),
            total_products=len(products),
            total_users=len(users),
            total_revenue=total_revenue(orders),
        )
        self.loading = False
        return self
