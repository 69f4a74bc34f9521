"""AI domain layer - Ports for image embedding providers"""

from .ports import (
    ImageEmbeddingProviderPort,
    ImageEmbeddingResult,
    ImageEmbeddingError,
    InvalidImageError,
    ImageEmbeddingServiceError,
)

__all__ = [
    "ImageEmbeddingProviderPort",
    "ImageEmbeddingResult",
    "ImageEmbeddingError",
    "InvalidImageError",
    "ImageEmbeddingServiceError",
]
