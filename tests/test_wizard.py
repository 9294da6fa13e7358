import asyncio

import pytest

from storeadmin.core.errors import UploadError, WizardError
from storeadmin.models.schemas import ProductDraft
from storeadmin.services.uploads import ImageFile
from storeadmin.services.wizard import ProductWizard

SHOE = ImageFile(filename="shoe.jpg", content=b"\xff\xd8jpeg", content_type="image/jpeg")


def filled_draft(**overrides):
    fields = dict(name="Trail Runner", price="2499", category="Footwear", stock="12",
                  sizes="7,8,9", description="Grippy outsole.")
    fields.update(overrides)
    return ProductDraft(**fields)


def ready_wizard(**overrides):
    wizard = ProductWizard(filled_draft(**overrides))
    wizard.next_step()
    wizard.next_step()
    return wizard


@pytest.mark.parametrize("missing", ["name", "price", "category"])
def test_step_one_needs_name_price_and_category(missing):
    wizard = ProductWizard(filled_draft(**{missing: ""}))
    with pytest.raises(WizardError) as exc:
        wizard.next_step()
    assert exc.value.message == "Please fill all required fields before proceeding."
    assert wizard.step == 1


def test_whitespace_does_not_count_as_filled():
    wizard = ProductWizard(filled_draft(name="   "))
    with pytest.raises(WizardError):
        wizard.next_step()


def test_step_two_has_no_gate():
    wizard = ProductWizard(filled_draft(stock="", sizes="", description=""))
    assert wizard.next_step() == 2
    assert wizard.next_step() == 3
    assert wizard.next_step() == 3
    assert wizard.prev_step() == 2


def test_step_one_rejects_non_numeric_price():
    with pytest.raises(WizardError):
        ProductWizard(filled_draft(price="cheap")).next_step()


def test_submit_without_image_is_refused(upload_service):
    wizard = ready_wizard()
    with pytest.raises(WizardError) as exc:
        asyncio.run(wizard.submit(upload_service.client(), "admin-1"))
    assert exc.value.message == "Please select an image."
    assert upload_service.requests == []


def test_submit_requires_a_signed_in_admin(upload_service):
    wizard = ready_wizard()
    wizard.attach_image(SHOE)
    with pytest.raises(WizardError):
        asyncio.run(wizard.submit(upload_service.client(), None))
    assert upload_service.requests == []


def test_successful_submit_resets_text_fields(upload_service):
    upload_service.body = {"success": True, "imageUrl": "X"}
    wizard = ready_wizard()
    wizard.attach_image(SHOE)

    result = asyncio.run(wizard.submit(upload_service.client(), "admin-1"))

    assert result.image_url == "X"
    assert wizard.image_url == "X"
    assert wizard.draft == ProductDraft()
    assert wizard.image is None
    assert wizard.step == 1
    assert wizard.message == "Product added successfully!"


def test_submit_sends_one_multipart_request(upload_service):
    wizard = ready_wizard()
    wizard.attach_image(SHOE)
    asyncio.run(wizard.submit(upload_service.client(), "admin-1"))

    assert len(upload_service.requests) == 1
    request = upload_service.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/upload"
    assert request.headers["content-type"].startswith("multipart/form-data")
    body = request.content
    assert b'name="image"; filename="shoe.jpg"' in body
    assert b'name="addedBy"' in body and b"admin-1" in body
    assert b'name="category"' in body and b"Footwear" in body


@pytest.mark.parametrize("status_code, body, message", [
    (200, {"success": False}, "Failed to add product."),
    (200, {"success": False, "message": "Duplicate product"}, "Failed to add product."),
    (500, {"message": "Cloud storage full"}, "Cloud storage full"),
    (500, {}, "Server error"),
])
def test_failed_submit_keeps_entered_data(upload_service, status_code, body, message):
    upload_service.status_code = status_code
    upload_service.body = body
    wizard = ready_wizard()
    wizard.attach_image(SHOE)

    with pytest.raises(UploadError):
        asyncio.run(wizard.submit(upload_service.client(), "admin-1"))

    assert wizard.message == message
    assert wizard.draft == filled_draft()
    assert wizard.image is SHOE
    assert wizard.step == 3
    assert wizard.uploading is False


def test_unreachable_upload_service_keeps_entered_data(upload_service):
    upload_service.unreachable = True
    wizard = ready_wizard()
    wizard.attach_image(SHOE)

    with pytest.raises(UploadError):
        asyncio.run(wizard.submit(upload_service.client(), "admin-1"))

    assert wizard.message == "No response from server. Please check your connection."
    assert wizard.draft.name == "Trail Runner"
