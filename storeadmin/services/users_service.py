import asyncio
import logging
from typing import List, Optional

from fastapi.concurrency import run_in_threadpool

from storeadmin.db.mongo import DocumentStore
from storeadmin.models.schemas import UNKNOWN_ORDER_STATUS, Order, User, UserDetail

logger = logging.getLogger(__name__)

USERS = "users"


def _contains(value: Optional[str], term: str) -> bool:
    return bool(value) and term in value.lower()


def search_users(users: List[User], term: str = "") -> List[User]:
    """Case-insensitive match on name, email and location; phone as typed."""
    if not term:
        return list(users)
    needle = term.lower()
    return [
        u for u in users
        if _contains(u.name, needle)
        or _contains(u.full_name, needle)
        or _contains(u.email, needle)
        or (u.phone and term in u.phone)
        or _contains(u.location, needle)
    ]


def list_users(store: DocumentStore, term: str = "") -> List[User]:
    users = [User(**d) for d in store.list(USERS)]
    return search_users(users, term)


async def fetch_order(store: DocumentStore, order_id: str) -> Order:
    doc = await run_in_threadpool(store.get, "orders", order_id)
    if doc is None:
        logger.warning("User references missing order %s", order_id)
        return Order(id=order_id, status=UNKNOWN_ORDER_STATUS)
    return Order(**doc)


async def fetch_orders(store: DocumentStore, order_ids: List[str]) -> List[Order]:
    # one lookup per id, all in flight at once; gather keeps the input order
    return list(await asyncio.gather(*(fetch_order(store, oid) for oid in order_ids)))


async def get_user_detail(store: DocumentStore, user_id: str) -> UserDetail:
    doc = await run_in_threadpool(store.require, USERS, user_id)
    user = User(**doc)
    orders = await fetch_orders(store, user.orders) if user.orders else []
    return UserDetail(user=user, orders=orders)
