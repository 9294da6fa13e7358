from datetime import datetime
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

ORDER_STATUSES = ("Pending", "Accepted", "Rejected")
DEFAULT_ORDER_STATUS = "Pending"
UNKNOWN_ORDER_STATUS = "Unknown order"

OrderTab = Literal["all", "Pending", "Accepted", "Rejected"]
ProductSort = Literal["name", "price", "stock"]


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


def _number_or_none(v):
    v = _blank_to_none(v)
    if isinstance(v, str):
        try:
            return float(v)
        except ValueError:
            return None
    return v


class Document(BaseModel):
    """A stored record; camelCase keys as the documents carry them."""
    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    id: str
    created_at: Optional[datetime] = Field(None, alias="createdAt")


# --- Products ---

class Product(Document):
    name: Optional[str] = None
    price: Optional[float] = None
    category: Optional[str] = None
    stock: Optional[int] = None
    # free text ("S,M,L") or a list, depending on which client wrote it
    sizes: Optional[Union[List[str], str]] = None
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")
    added_by: Optional[str] = Field(None, alias="addedBy")

    @field_validator("price", "stock", mode="before")
    @classmethod
    def blank_numbers(cls, v):
        return _blank_to_none(v)


class ProductDraft(BaseModel):
    """Text fields of the add-product form, kept as entered."""
    name: str = ""
    price: str = ""
    category: str = ""
    stock: str = ""
    sizes: str = ""
    description: str = ""


class WizardStepRequest(BaseModel):
    step: int = Field(..., ge=1, le=3)
    draft: ProductDraft


class WizardStepResponse(BaseModel):
    step: int


class ProductCreated(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    image_url: Optional[str] = Field(None, alias="imageUrl")
    draft: ProductDraft


class FieldUpdate(BaseModel):
    value: Any


class FieldUpdated(BaseModel):
    field: str
    value: Any
    message: str


class ImageUpdated(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(..., alias="imageUrl")
    message: str


class UploadResult(BaseModel):
    """Body returned by the upload service for POST /upload and PUT /update."""
    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    success: bool = False
    image_url: Optional[str] = Field(None, alias="imageUrl")
    message: Optional[str] = None
    error: Optional[str] = None


# --- Orders ---

class OrderItem(BaseModel):
    """Snapshot of a product at the time the order was placed."""
    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    id: Optional[str] = None
    name: Optional[str] = None
    price: Optional[float] = None
    # some clients store fractional or text quantities
    quantity: Optional[float] = None
    size: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")

    @field_validator("price", "quantity", mode="before")
    @classmethod
    def loose_numbers(cls, v):
        return _number_or_none(v)


class Order(Document):
    # missing status is Pending
    status: str = DEFAULT_ORDER_STATUS
    items: List[OrderItem] = Field(default_factory=list)
    full_name: Optional[str] = Field(None, alias="fullName")
    phone: Optional[str] = None
    address: Optional[str] = None
    total_amount: Optional[float] = Field(None, alias="totalAmount")
    transaction_id: Optional[str] = Field(None, alias="transactionId")
    rejection_reason: Optional[str] = Field(None, alias="rejectionReason")

    @field_validator("total_amount", mode="before")
    @classmethod
    def loose_total(cls, v):
        return _number_or_none(v)

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v):
        return v or DEFAULT_ORDER_STATUS

    @field_validator("items", mode="before")
    @classmethod
    def default_items(cls, v):
        if not isinstance(v, list):
            return []
        return [it for it in v if isinstance(it, (dict, OrderItem))]


class OrderDetail(Order):
    subtotal: float = 0


class RejectRequest(BaseModel):
    reason: str = ""


# --- Users ---

class User(Document):
    name: Optional[str] = None
    full_name: Optional[str] = Field(None, alias="fullName")
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    location: Optional[str] = None
    orders: List[str] = Field(default_factory=list)

    @field_validator("orders", mode="before")
    @classmethod
    def default_orders(cls, v):
        if not isinstance(v, list):
            return []
        return [str(o) for o in v]


class UserList(BaseModel):
    count: int
    users: List[User]


class UserDetail(BaseModel):
    user: User
    orders: List[Order]


# --- Dashboard ---

class DashboardStats(BaseModel):
    total_orders: int = 0
    total_products: int = 0
    total_users: int = 0
    total_revenue: float = 0


class DashboardResponse(BaseModel):
    loading: bool
    stats: Optional[DashboardStats] = None


# --- Auth ---

class AuthState(BaseModel):
    """Who is signed in for the current request; user is None when nobody is."""
    user: Optional[str] = None
    email: Optional[str] = None
    token_id: Optional[str] = None


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class AdminCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: Optional[str] = None


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class AdminInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    full_name: Optional[str] = Field(None, alias="fullName")


class LoginResponse(BaseModel):
    token: Token
    user: AdminInfo
