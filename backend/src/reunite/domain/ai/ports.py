"""Image Embedding Provider Port - Abstract interface for vision embedding models.

Hexagonal Architecture: infrastructure adapters (CLIP, hosted vision APIs)
implement this port. The provider is created once at startup and passed to
whatever needs embeddings; nothing in the matching core loads a model itself.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List


@dataclass
class ImageEmbeddingResult:
    """Result from an image embedding call.

    Attributes:
        embedding: L2-normalised vector (list of floats)
        model: Model name (e.g., 'ViT-B-32')
        dimension: Embedding dimension (e.g., 512)
    """
    embedding: List[float]
    model: str
    dimension: int


class ImageEmbeddingProviderPort(ABC):
    """Abstract interface for image embedding providers.

    Implementations must:
    - Load their model once and reuse it across calls
    - Return vectors of a fixed dimension for a given model
    - Translate provider failures into ImageEmbeddingError subclasses

    Example Usage:
        provider = ClipImageEmbeddingAdapter()
        result = provider.embed_image(photo_bytes)
        # result.embedding is list[float] of length 512
    """

    @abstractmethod
    def embed_image(self, image_bytes: bytes) -> ImageEmbeddingResult:
        """Generate an embedding vector for one image.

        Args:
            image_bytes: Encoded image (JPEG, PNG, WebP)

        Returns:
            ImageEmbeddingResult with vector and metadata

        Raises:
            InvalidImageError: Bytes are empty or not a decodable image
            ImageEmbeddingServiceError: Model failed while encoding
        """
        pass


class ImageEmbeddingError(Exception):
    """Base exception for image embedding operations"""
    pass


class InvalidImageError(ImageEmbeddingError):
    """Image bytes are empty or cannot be decoded"""
    pass


class ImageEmbeddingServiceError(ImageEmbeddingError):
    """Model unavailable or failed while encoding"""
    pass
