from fastapi import APIRouter, Depends
from pymongo.errors import PyMongoError

from storeadmin.api.deps import to_http
from storeadmin.core.errors import StoreAdminError
from storeadmin.db.mongo import DocumentStore, get_store
from storeadmin.models.schemas import UserDetail, UserList
from storeadmin.services import users_service

router = APIRouter()


@router.get("", response_model=UserList)
def list_users(search: str = "", store: DocumentStore = Depends(get_store)):
    try:
        users = users_service.list_users(store, search)
    except PyMongoError as e:
        raise to_http(e, "User")
    return UserList(count=len(users), users=users)


@router.get("/{user_id}", response_model=UserDetail)
async def get_user(user_id: str, store: DocumentStore = Depends(get_store)):
    try:
        return await users_service.get_user_detail(store, user_id)
    except (StoreAdminError, PyMongoError) as e:
        raise to_http(e, "User")
