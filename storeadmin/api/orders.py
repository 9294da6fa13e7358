from typing import List

from fastapi import APIRouter, Depends
from pymongo.errors import PyMongoError

from storeadmin.api.deps import require_user, to_http
from storeadmin.core.errors import StoreAdminError
from storeadmin.db.mongo import DocumentStore, get_store
from storeadmin.models.schemas import AuthState, Order, OrderDetail, OrderTab, RejectRequest
from storeadmin.services import orders_service

router = APIRouter()


@router.get("", response_model=List[Order])
def list_orders(tab: OrderTab = "all", store: DocumentStore = Depends(get_store)):
    try:
        return orders_service.list_orders(store, tab)
    except PyMongoError as e:
        raise to_http(e, "Order")


@router.get("/{order_id}", response_model=OrderDetail)
def get_order(order_id: str, store: DocumentStore = Depends(get_store)):
    try:
        return orders_service.get_order(store, order_id)
    except (StoreAdminError, PyMongoError) as e:
        raise to_http(e, "Order")


@router.post("/{order_id}/accept", response_model=OrderDetail)
def accept(order_id: str, auth: AuthState = Depends(require_user), store: DocumentStore = Depends(get_store)):
    try:
        return orders_service.accept_order(store, order_id)
    except (StoreAdminError, PyMongoError) as e:
        raise to_http(e, "Order")


@router.post("/{order_id}/reject", response_model=OrderDetail)
def reject(
    order_id: str,
    payload: RejectRequest,
    auth: AuthState = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    try:
        return orders_service.reject_order(store, order_id, payload.reason)
    except (StoreAdminError, PyMongoError) as e:
        raise to_http(e, "Order")
