import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi.concurrency import run_in_threadpool
from pymongo.errors import PyMongoError

from storeadmin.core.config import PRODUCT_CATEGORIES
from storeadmin.core.errors import InvalidTransition, StoreAdminError, UploadError
from storeadmin.db.mongo import DocumentStore
from storeadmin.models.schemas import Product
from storeadmin.services.uploads import ImageFile, UploadClient

logger = logging.getLogger(__name__)

PRODUCTS = "products"
EDITABLE_FIELDS = ("name", "price", "stock", "category", "description", "sizes")


# --- Listing ---

def search_products(products: List[Product], term: str = "") -> List[Product]:
    if not term:
        return list(products)
    needle = term.lower()
    return [
        p for p in products
        if (p.name and needle in p.name.lower()) or (p.category and needle in p.category.lower())
    ]


def sort_products(products: List[Product], sort_by: str = "name") -> List[Product]:
    if sort_by == "price":
        return sorted(products, key=lambda p: p.price or 0)
    if sort_by == "stock":
        return sorted(products, key=lambda p: p.stock or 0)
    return sorted(products, key=lambda p: (p.name or "").casefold())


def list_products(store: DocumentStore, term: str = "", sort_by: str = "name") -> List[Product]:
    products = [Product(**d) for d in store.list(PRODUCTS)]
    return sort_products(search_products(products, term), sort_by)


def get_product(store: DocumentStore, product_id: str) -> Product:
    return Product(**store.require(PRODUCTS, product_id))


def delete_product(store: DocumentStore, product_id: str):
    store.delete(PRODUCTS, product_id)
    logger.info("Product %s deleted", product_id)


# --- Per-field editing ---

def _split_sizes(value) -> List[str]:
    if isinstance(value, (list, tuple)):
        return [str(s).strip() for s in value if str(s).strip()]
    return [s.strip() for s in str(value).split(",") if s.strip()]


def coerce_field(field: str, value: Any) -> Any:
    """Turns an edited value into what gets stored for that field."""
    if field == "price":
        try:
            price = float(value)
        except (TypeError, ValueError):
            raise StoreAdminError("Price must be a number.")
        if price < 0:
            raise StoreAdminError("Price cannot be negative.")
        return price
    if field == "stock":
        try:
            stock = int(value)
        except (TypeError, ValueError):
            raise StoreAdminError("Stock must be a whole number.")
        if stock < 0:
            raise StoreAdminError("Stock cannot be negative.")
        return stock
    if field == "category":
        if value not in PRODUCT_CATEGORIES:
            raise StoreAdminError(f"Unknown category: {value}")
        return value
    if field == "sizes":
        return _split_sizes(value)
    if value is None:
        value = ""
    value = str(value)
    if field == "name" and not value.strip():
        raise StoreAdminError("Product name cannot be empty.")
    return value


class FieldState(str, Enum):
    VIEWING = "viewing"
    EDITING = "editing"
    SAVING = "saving"


class FieldEditor:
    """Click-to-edit, click-to-save for one product field.

    VIEWING -> EDITING -> SAVING -> VIEWING on success, back to EDITING on
    failure. Each save is exactly one partial update of the product.
    """

    def __init__(self, store: DocumentStore, product_id: str, field: str):
        if field not in EDITABLE_FIELDS:
            raise StoreAdminError(f"{field} cannot be edited.")
        self.store = store
        self.product_id = product_id
        self.field = field
        self.state = FieldState.VIEWING
        self.value: Any = None
        self.message: Optional[str] = None

    def begin_edit(self, current: Any = None):
        if self.state != FieldState.VIEWING:
            raise InvalidTransition(f"Cannot edit {self.field} while {self.state.value}.")
        self.state = FieldState.EDITING
        self.value = current
        self.message = None

    def cancel(self):
        if self.state != FieldState.EDITING:
            raise InvalidTransition(f"Cannot cancel {self.field} while {self.state.value}.")
        self.state = FieldState.VIEWING

    def save(self, value: Any) -> Any:
        if self.state != FieldState.EDITING:
            raise InvalidTransition(f"Cannot save {self.field} while {self.state.value}.")
        self.value = value
        self.state = FieldState.SAVING
        try:
            stored = coerce_field(self.field, value)
            self.store.update(PRODUCTS, self.product_id, {self.field: stored})
        except (StoreAdminError, PyMongoError) as e:
            logger.error("Error updating %s of product %s: %s", self.field, self.product_id, e)
            self.state = FieldState.EDITING
            self.message = f"Failed to update {self.field}."
            raise
        self.state = FieldState.VIEWING
        self.value = stored
        self.message = f"{self.field} updated successfully!"
        return stored


# --- Image replacement ---

def image_update_fields(product: Product) -> Dict[str, str]:
    """Non-empty current fields sent along with a new image."""
    fields = {}
    for name in ("name", "price", "stock", "category", "description"):
        value = getattr(product, name)
        if value:
            fields[name] = str(value)
    if product.sizes:
        fields["sizes"] = ",".join(_split_sizes(product.sizes))
    return fields


async def replace_image(store: DocumentStore, uploader: UploadClient, product_id: str, image: ImageFile) -> str:
    product = Product(**await run_in_threadpool(store.require, PRODUCTS, product_id))
    try:
        result = await uploader.update_product(product_id, image_update_fields(product), image)
    except UploadError as e:
        logger.error("Error uploading image for product %s: %s", product_id, e.message)
        raise UploadError("Failed to upload image.", status_code=e.status_code)
    if not result.image_url:
        raise UploadError("Failed to upload image.")
    logger.info("Product %s image replaced", product_id)
    return result.image_url
