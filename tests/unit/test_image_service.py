"""Tests for Cloudinary image uploads.

Test Organization:
- TestSignParams: Request signing
- TestCloudinaryImageStorage: Upload flow against httpx.MockTransport
"""

from urllib.parse import parse_qs

import httpx
import pytest

from storefront.domain.exceptions import InternalError, ValidationError
from storefront.external.image_service import CloudinaryImageStorage, sign_params
from storefront.infrastructure.config import Settings
from storefront.infrastructure.patterns.circuit_breaker import CircuitBreakerService


HOSTED = "https://res.cloudinary.com/test/image/upload/v1/storefront/existing.png"


def make_storage(settings: Settings, handler) -> CloudinaryImageStorage:  # type: ignore[no-untyped-def]
    return CloudinaryImageStorage(
        circuit_breaker=CircuitBreakerService(),
        settings=settings,
        transport=httpx.MockTransport(handler),
    )


class TestSignParams:
    """Test sign_params."""

    def test_signature_is_order_independent(self) -> None:
        """Test parameters are sorted before hashing."""
        a = sign_params({"timestamp": 1, "folder": "x"}, "secret")
        b = sign_params({"folder": "x", "timestamp": 1}, "secret")

        assert a == b
        assert len(a) == 40

    def test_signature_depends_on_secret(self) -> None:
        assert sign_params({"folder": "x"}, "one") != sign_params({"folder": "x"}, "two")


class TestCloudinaryImageStorage:
    """Test CloudinaryImageStorage.upload_many."""

    async def test_uploads_and_preserves_order(self, test_settings: Settings) -> None:
        """Test new images are uploaded and hosted ones are kept in place.

        Arrange: Mock upload endpoint echoing the file name
        Act: Upload [new, hosted, new]
        Assert: Returned URLs keep the input order; hosted URL untouched
        """
        # Arrange
        seen: list[dict[str, list[str]]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            form = parse_qs(request.content.decode())
            seen.append(form)
            name = form["file"][0].rsplit(",", 1)[-1]
            return httpx.Response(200, json={"secure_url": f"https://cdn.test/{name}.png"})

        storage = make_storage(test_settings, handler)

        # Act
        urls = await storage.upload_many(["data:image/png;base64,AAA", HOSTED, "data:,BBB"])

        # Assert
        assert urls == ["https://cdn.test/AAA.png", HOSTED, "https://cdn.test/BBB.png"]
        assert len(seen) == 2
        assert all(form["api_key"] == ["test-key"] for form in seen)
        assert all(form["folder"] == ["storefront"] for form in seen)
        assert all("signature" in form for form in seen)

    async def test_only_hosted_images_skip_network(self, test_settings: Settings) -> None:
        """Test no request is made when every image is already hosted."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no upload expected")

        storage = make_storage(test_settings, handler)

        assert await storage.upload_many([HOSTED]) == [HOSTED]

    async def test_rejected_image_is_validation_error(self, test_settings: Settings) -> None:
        """Test a 400 from the provider is reported as a client mistake."""
        storage = make_storage(
            test_settings, lambda request: httpx.Response(400, json={"error": "bad"})
        )

        with pytest.raises(ValidationError, match="Invalid image format or size"):
            await storage.upload_many(["data:,x"])

    async def test_provider_error_is_internal(self, test_settings: Settings) -> None:
        """Test provider 5xx responses become an internal error."""
        storage = make_storage(test_settings, lambda request: httpx.Response(502))

        with pytest.raises(InternalError, match="Image upload failed"):
            await storage.upload_many(["data:,x"])

    async def test_network_failure_is_unavailable(self, test_settings: Settings) -> None:
        """Test transport errors surface as 503."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        storage = make_storage(test_settings, handler)

        with pytest.raises(InternalError) as info:
            await storage.upload_many(["data:,x"])
        assert info.value.status_code == 503

    async def test_missing_credentials_is_unavailable(self, test_settings: Settings) -> None:
        """Test uploads are refused when no API credentials are configured."""
        settings = test_settings.model_copy(
            update={"cloudinary_api_key": "", "cloudinary_api_secret": ""}
        )
        storage = make_storage(settings, lambda request: httpx.Response(200))

        with pytest.raises(InternalError, match="Image upload service unavailable"):
            await storage.upload_many(["data:,x"])
