"""Embedding Services - Image embedding generation for item reports."""

from .image_embedding import attach_image_embedding, build_image_embedding_provider

__all__ = [
    "attach_image_embedding",
    "build_image_embedding_provider",
]
