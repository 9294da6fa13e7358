import logging
from typing import Dict, Optional

import httpx
from pydantic import BaseModel

from storeadmin.core.config import UPLOAD_API_URL, UPLOAD_TIMEOUT
from storeadmin.core.errors import UploadError
from storeadmin.models.schemas import UploadResult

logger = logging.getLogger(__name__)

NO_RESPONSE = "No response from server. Please check your connection."


class ImageFile(BaseModel):
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    def as_part(self):
        return (self.filename, self.content, self.content_type)


class UploadClient:
    """Talks to the image upload service.

    POST /upload creates a product from an image plus form fields;
    PUT /update/{product_id} replaces a product's image. Both answer
    {success, imageUrl?, message?|error?}.
    """

    def __init__(self, base_url: str = UPLOAD_API_URL, timeout: float = UPLOAD_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    async def _send(self, method: str, path: str, fields: Dict[str, str], image: ImageFile,
                    failure_message: str) -> UploadResult:
        async with self._client() as client:
            try:
                r = await client.request(method, path, data=fields, files={"image": image.as_part()})
            except httpx.RequestError as e:
                logger.error("Upload service unreachable (%s %s): %s", method, path, e)
                raise UploadError(NO_RESPONSE)

        body = _json_or_empty(r)
        if r.is_error:
            logger.error("Upload service answered %s for %s %s: %s", r.status_code, method, path, body)
            raise UploadError(body.get("message") or body.get("error") or "Server error", status_code=r.status_code)

        result = UploadResult(**body)
        if not result.success:
            logger.error("Upload service refused %s %s: %s", method, path, body)
            raise UploadError(failure_message, status_code=r.status_code)
        return result

    async def upload_product(self, fields: Dict[str, str], image: ImageFile) -> UploadResult:
        return await self._send("POST", "/upload", fields, image, "Failed to add product.")

    async def update_product(self, product_id: str, fields: Dict[str, str], image: ImageFile) -> UploadResult:
        return await self._send("PUT", f"/update/{product_id}", fields, image, "Failed to upload image")


def _json_or_empty(r: httpx.Response) -> dict:
    try:
        body = r.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
