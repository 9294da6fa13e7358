import logging
from typing import Iterable, List

from storeadmin.core.errors import InvalidTransition, StoreAdminError
from storeadmin.db.mongo import DocumentStore
from storeadmin.models.schemas import DEFAULT_ORDER_STATUS, Order, OrderDetail, OrderItem

logger = logging.getLogger(__name__)

ORDERS = "orders"


def filter_orders(orders: Iterable[Order], tab: str = "all") -> List[Order]:
    """Orders shown under a status tab. Matching ignores case; "all" keeps everything."""
    if tab.lower() == "all":
        return list(orders)
    wanted = tab.lower()
    return [o for o in orders if (o.status or DEFAULT_ORDER_STATUS).lower() == wanted]


def item_total(item: OrderItem) -> float:
    if not item.price or not item.quantity:
        return 0
    return item.price * item.quantity


def order_subtotal(order: Order) -> float:
    return sum(item_total(it) for it in order.items)


def list_orders(store: DocumentStore, tab: str = "all") -> List[Order]:
    orders = [Order(**d) for d in store.list(ORDERS)]
    return filter_orders(orders, tab)


def get_order(store: DocumentStore, order_id: str) -> OrderDetail:
    order = OrderDetail(**store.require(ORDERS, order_id))
    order.subtotal = order_subtotal(order)
    return order


def _require_pending(order: Order):
    if order.status.lower() != DEFAULT_ORDER_STATUS.lower():
        raise InvalidTransition(f"Order is already {order.status}.")


def accept_order(store: DocumentStore, order_id: str) -> OrderDetail:
    order = get_order(store, order_id)
    _require_pending(order)
    store.update(ORDERS, order_id, {"status": "Accepted"})
    logger.info("Order %s accepted", order_id)
    order.status = "Accepted"
    return order


def reject_order(store: DocumentStore, order_id: str, reason: str) -> OrderDetail:
    reason = (reason or "").strip()
    if not reason:
        raise StoreAdminError("Please provide a reason for rejection.")
    order = get_order(store, order_id)
    _require_pending(order)
    store.update(ORDERS, order_id, {"status": "Rejected", "rejectionReason": reason})
    logger.info("Order %s rejected: %s", order_id, reason)
    order.status = "Rejected"
    order.rejection_reason = reason
    return order
