"""External service interface definitions.

Abstract interfaces for third-party services, so use cases can be tested
against fakes.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence


class IImageStorage(ABC):
    """Abstract interface for image hosting providers."""

    @abstractmethod
    async def upload_many(self, images: Sequence[str]) -> list[str]:
        """Store images and return their public URLs in the same order.

        Args:
            images: Data URIs, base64 payloads or remote URLs

        Returns:
            Hosted HTTPS URLs

        Raises:
            ValidationError: If the provider rejects an image
            InternalError: If the provider is unreachable or misconfigured
        """
