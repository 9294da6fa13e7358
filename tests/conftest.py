import httpx
import mongomock
import pytest
from fastapi.testclient import TestClient

from storeadmin.api.deps import get_uploader
from storeadmin.core.security import create_token, hash_password
from storeadmin.db.mongo import DocumentStore, get_store
from storeadmin.main import app
from storeadmin.services.uploads import UploadClient

ADMIN_EMAIL = "admin@sportsync.test"
ADMIN_PASSWORD = "s3cret!"


class FakeUploadService:
    """Stands in for the image upload service behind httpx.MockTransport."""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.body = {"success": True, "imageUrl": "https://cdn.sportsync.test/shoe.jpg"}
        self.unreachable = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(self.status_code, json=self.body)

    def client(self) -> UploadClient:
        return UploadClient(base_url="http://upload.test", transport=httpx.MockTransport(self.handler))


@pytest.fixture
def store():
    return DocumentStore(mongomock.MongoClient()["storeadmin_test"])


@pytest.fixture
def upload_service():
    return FakeUploadService()


@pytest.fixture
def client(store, upload_service):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_uploader] = upload_service.client
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin(store):
    admin_id = store.create("admins", {
        "email": ADMIN_EMAIL,
        "password": hash_password(ADMIN_PASSWORD),
        "fullName": "Store Admin",
    })
    return {"id": admin_id, "email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}


@pytest.fixture
def auth_headers(admin):
    return {"Authorization": f"Bearer {create_token(admin['id'], email=admin['email'])}"}


@pytest.fixture
def product_id(store):
    return store.create("products", {
        "name": "Trail Runner",
        "price": 2499.0,
        "category": "Footwear",
        "stock": 12,
        "sizes": ["7", "8", "9"],
        "description": "Grippy outsole.",
        "imageUrl": "https://cdn.sportsync.test/old.jpg",
    })
