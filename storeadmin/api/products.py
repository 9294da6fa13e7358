from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pymongo.errors import PyMongoError

from storeadmin.api.deps import get_uploader, require_user, to_http
from storeadmin.core.config import PRODUCT_CATEGORIES
from storeadmin.core.errors import StoreAdminError
from storeadmin.db.mongo import DocumentStore, get_store
from storeadmin.models.schemas import (
    AuthState, FieldUpdate, FieldUpdated, ImageUpdated, Product, ProductCreated, ProductDraft,
    ProductSort, WizardStepRequest, WizardStepResponse,
)
from storeadmin.services import products_service
from storeadmin.services.uploads import ImageFile, UploadClient
from storeadmin.services.wizard import ProductWizard

router = APIRouter()


async def read_image(image: Optional[UploadFile]) -> Optional[ImageFile]:
    if image is None or not image.filename:
        return None
    return ImageFile(
        filename=image.filename,
        content=await image.read(),
        content_type=image.content_type or "application/octet-stream",
    )


@router.get("", response_model=List[Product])
def list_products(search: str = "", sort_by: ProductSort = "name", store: DocumentStore = Depends(get_store)):
    try:
        return products_service.list_products(store, search, sort_by)
    except PyMongoError as e:
        raise to_http(e, "Product")


@router.get("/categories", response_model=List[str])
def categories():
    return PRODUCT_CATEGORIES


@router.post("/wizard/validate", response_model=WizardStepResponse)
def validate_step(payload: WizardStepRequest):
    """Checks the gate for leaving `step` and answers the step the form moves to."""
    wizard = ProductWizard(payload.draft)
    wizard.step = payload.step
    try:
        return WizardStepResponse(step=wizard.next_step())
    except StoreAdminError as e:
        raise to_http(e)


@router.post("", status_code=201, response_model=ProductCreated)
async def create_product(
    name: str = Form(""),
    price: str = Form(""),
    category: str = Form(""),
    stock: str = Form(""),
    sizes: str = Form(""),
    description: str = Form(""),
    image: Optional[UploadFile] = File(None),
    auth: AuthState = Depends(require_user),
    uploader: UploadClient = Depends(get_uploader),
):
    wizard = ProductWizard(ProductDraft(
        name=name, price=price, category=category, stock=stock, sizes=sizes, description=description,
    ))
    try:
        wizard.next_step()
        wizard.next_step()
        image_file = await read_image(image)
        if image_file is not None:
            wizard.attach_image(image_file)
        await wizard.submit(uploader, auth.user)
    except StoreAdminError as e:
        raise to_http(e, "Product")
    return ProductCreated(message=wizard.message, image_url=wizard.image_url, draft=wizard.draft)


@router.get("/{product_id}", response_model=Product)
def get_product(product_id: str, store: DocumentStore = Depends(get_store)):
    try:
        return products_service.get_product(store, product_id)
    except (StoreAdminError, PyMongoError) as e:
        raise to_http(e, "Product")


@router.patch("/{product_id}/fields/{field}", response_model=FieldUpdated)
def update_field(
    product_id: str,
    field: str,
    payload: FieldUpdate,
    auth: AuthState = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    try:
        editor = products_service.FieldEditor(store, product_id, field)
        editor.begin_edit()
        value = editor.save(payload.value)
    except (StoreAdminError, PyMongoError) as e:
        raise to_http(e, "Product")
    return FieldUpdated(field=field, value=value, message=editor.message)


@router.put("/{product_id}/image", response_model=ImageUpdated)
async def update_image(
    product_id: str,
    image: Optional[UploadFile] = File(None),
    auth: AuthState = Depends(require_user),
    store: DocumentStore = Depends(get_store),
    uploader: UploadClient = Depends(get_uploader),
):
    image_file = await read_image(image)
    if image_file is None:
        raise HTTPException(status_code=422, detail="Please select an image first.")
    try:
        image_url = await products_service.replace_image(store, uploader, product_id, image_file)
    except (StoreAdminError, PyMongoError) as e:
        raise to_http(e, "Product")
    return ImageUpdated(image_url=image_url, message="Image updated successfully!")


@router.delete("/{product_id}")
def delete_product(
    product_id: str,
    auth: AuthState = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    try:
        products_service.delete_product(store, product_id)
    except (StoreAdminError, PyMongoError) as e:
        raise to_http(e, "Product")
    return {"deleted": True, "message": "Product deleted successfully!"}
