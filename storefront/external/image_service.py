"""Image hosting integration using the Cloudinary upload API.

Uploads go through a circuit breaker so a provider outage fails fast instead
of tying up request handlers.
"""

import asyncio
import hashlib
import time
from collections.abc import Sequence
from typing import Any

import httpx
from pybreaker import CircuitBreakerError

from storefront.domain.exceptions import InternalError, ValidationError
from storefront.external.interfaces import IImageStorage
from storefront.infrastructure.config import Settings
from storefront.infrastructure.logging.config import get_logger
from storefront.infrastructure.patterns.circuit_breaker import CircuitBreakerService


logger = get_logger(__name__)

BREAKER_NAME = "image_storage"


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    """Compute a Cloudinary request signature.

    Parameters are sorted by name, joined as ``key=value`` pairs with ``&``,
    suffixed with the API secret and hashed with SHA-1.
    """
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode()).hexdigest()  # noqa: S324


class CloudinaryImageStorage(IImageStorage):
    """Uploads product images to Cloudinary.

    Images already hosted under this account's delivery URL are kept as-is,
    so resubmitting a product's current image list uploads nothing.

    Args:
        circuit_breaker: Circuit breaker registry
        settings: Application settings with Cloudinary credentials
        transport: Optional httpx transport (tests use ``httpx.MockTransport``)
    """

    def __init__(
        self,
        circuit_breaker: CircuitBreakerService,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._circuit_breaker = circuit_breaker
        self._settings = settings
        self._transport = transport
        self._upload_url = (
            f"{settings.cloudinary_base_url}/{settings.cloudinary_cloud_name}/image/upload"
        )
        self._delivery_prefix = f"https://res.cloudinary.com/{settings.cloudinary_cloud_name}/"
        circuit_breaker.get_breaker(BREAKER_NAME, exclude=[ValidationError])

    def is_hosted(self, image: str) -> bool:
        return image.startswith(self._delivery_prefix)

    async def upload_many(self, images: Sequence[str]) -> list[str]:
        pending = [image for image in images if not self.is_hosted(image)]
        if not pending:
            return list(images)

        if not self._settings.cloudinary_api_key or not self._settings.cloudinary_api_secret:
            logger.error("image_storage_not_configured")
            raise InternalError("Image upload service unavailable", status_code=503)

        async with httpx.AsyncClient(
            transport=self._transport, timeout=self._settings.image_upload_timeout
        ) as client:
            uploaded = await asyncio.gather(*(self._upload(client, image) for image in pending))

        urls = iter(uploaded)
        return [image if self.is_hosted(image) else next(urls) for image in images]

    async def _upload(self, client: httpx.AsyncClient, image: str) -> str:
        try:
            return await self._circuit_breaker.call_with_breaker(
                BREAKER_NAME, self._upload_internal, client, image
            )
        except CircuitBreakerError as e:
            logger.warning("image_upload_circuit_open", error=str(e))
            raise InternalError("Image upload service unavailable", status_code=503) from e
        except httpx.HTTPError as e:
            logger.error("image_upload_transport_error", error=str(e), error_type=type(e).__name__)
            raise InternalError("Image upload service unavailable", status_code=503) from e

    async def _upload_internal(self, client: httpx.AsyncClient, image: str) -> str:
        params: dict[str, Any] = {
            "folder": self._settings.cloudinary_folder,
            "timestamp": int(time.time()),
        }
        data = {
            **params,
            "file": image,
            "api_key": self._settings.cloudinary_api_key,
            "signature": sign_params(params, self._settings.cloudinary_api_secret),
        }

        response = await client.post(self._upload_url, data=data)

        if response.status_code == httpx.codes.BAD_REQUEST:
            logger.info("image_rejected", status_code=response.status_code)
            raise ValidationError("Invalid image format or size")
        if response.status_code == httpx.codes.UNAUTHORIZED:
            raise InternalError("Image upload service unavailable", status_code=503)
        if response.is_error:
            raise InternalError("Image upload failed")

        secure_url = response.json().get("secure_url")
        if not secure_url:
            raise InternalError("Image upload failed")

        logger.info("image_uploaded", url=secure_url)
        return str(secure_url)
