import logging
from typing import Dict, List, Optional

from storeadmin.core.config import PRODUCT_CATEGORIES
from storeadmin.core.errors import UploadError, WizardError
from storeadmin.models.schemas import ProductDraft, UploadResult
from storeadmin.services.uploads import ImageFile, UploadClient

logger = logging.getLogger(__name__)

BASIC_INFO, DETAILS, IMAGE = 1, 2, 3
REQUIRED_BASIC_FIELDS = ("name", "price", "category")


class ProductWizard:
    """Three-step add-product form: basic info, details, image.

    Steps only move forward through next_step(), which gates step 1 on
    name, price and category. submit() needs an attached image. A failed
    upload keeps everything that was entered.
    """

    def __init__(self, draft: Optional[ProductDraft] = None):
        self.step = BASIC_INFO
        self.draft = draft or ProductDraft()
        self.image: Optional[ImageFile] = None
        self.image_url: Optional[str] = None
        self.uploading = False
        self.message: Optional[str] = None

    def missing_basic_info(self) -> List[str]:
        return [f for f in REQUIRED_BASIC_FIELDS if not getattr(self.draft, f).strip()]

    def _check_basic_info(self):
        if self.missing_basic_info():
            raise WizardError(BASIC_INFO, "Please fill all required fields before proceeding.")
        try:
            price = float(self.draft.price)
        except ValueError:
            raise WizardError(BASIC_INFO, "Price must be a number.")
        if price < 0:
            raise WizardError(BASIC_INFO, "Price cannot be negative.")
        if self.draft.category not in PRODUCT_CATEGORIES:
            raise WizardError(BASIC_INFO, f"Unknown category: {self.draft.category}")

    def next_step(self) -> int:
        if self.step == BASIC_INFO:
            self._check_basic_info()
        if self.step < IMAGE:
            self.step += 1
        return self.step

    def prev_step(self) -> int:
        if self.step > BASIC_INFO:
            self.step -= 1
        return self.step

    def attach_image(self, image: ImageFile):
        self.image = image

    def form_fields(self, added_by: str) -> Dict[str, str]:
        fields = self.draft.model_dump()
        fields["addedBy"] = added_by
        return fields

    def reset(self, image_url: Optional[str] = None):
        self.draft = ProductDraft()
        self.image = None
        self.image_url = image_url
        self.step = BASIC_INFO

    async def submit(self, uploader: UploadClient, added_by: Optional[str]) -> UploadResult:
        if not added_by:
            raise WizardError(self.step, "You must be logged in to add a product.")
        if self.image is None:
            raise WizardError(IMAGE, "Please select an image.")
        if self.step != IMAGE:
            raise WizardError(self.step, "Please complete the previous steps first.")

        self.uploading = True
        self.message = None
        try:
            result = await uploader.upload_product(self.form_fields(added_by), self.image)
        except UploadError as e:
            logger.error("Error uploading product %r: %s", self.draft.name, e.message)
            self.message = e.message
            raise
        finally:
            self.uploading = False

        logger.info("Product %r added by %s", self.draft.name, added_by)
        self.reset(image_url=result.image_url)
        self.message = "Product added successfully!"
        return result
