"""Image embedding service - attaches visual embeddings to item reports.

Runs at report-submission time. A failing or missing provider never blocks
item creation; the item just keeps no embedding and scores 0 on the image
signal.
"""

import logging
from typing import Optional

from ...config import Settings
from ...domain.ai.ports import ImageEmbeddingError, ImageEmbeddingProviderPort
from ...models.item import Item

logger = logging.getLogger(__name__)


def build_image_embedding_provider(settings: Settings) -> Optional[ImageEmbeddingProviderPort]:
    """Create the configured provider, or None when embeddings are disabled.

    Call once at startup and keep the result; CLIP loads its weights here.
    """
    provider_name = (settings.IMAGE_EMBEDDING_PROVIDER or "none").lower()

    if provider_name == "none":
        return None

    if provider_name == "clip":
        # Imported here so torch is only needed when the vision extra is in use
        from ...infrastructure.ai.clip_image_embeddings import ClipImageEmbeddingAdapter

        return ClipImageEmbeddingAdapter(
            model_name=settings.CLIP_MODEL_NAME,
            pretrained=settings.CLIP_PRETRAINED,
        )

    raise ValueError(f"Unknown IMAGE_EMBEDDING_PROVIDER: {settings.IMAGE_EMBEDDING_PROVIDER}")


def attach_image_embedding(
    item: Item,
    provider: Optional[ImageEmbeddingProviderPort],
    image_bytes: Optional[bytes],
) -> bool:
    """Compute and store an embedding on the item (not committed).

    Args:
        item: Item ORM instance to update
        provider: Embedding provider, or None when disabled
        image_bytes: Uploaded photo, or None

    Returns:
        True if an embedding was stored, False otherwise
    """
    if provider is None or not image_bytes:
        return False

    try:
        result = provider.embed_image(image_bytes)
    except ImageEmbeddingError as e:
        logger.warning(
            f"Image embedding failed, item saved without embedding: {e}",
            extra={"item_id": str(item.id) if item.id else None},
        )
        return False

    item.image_embedding = result.embedding
    logger.debug(
        "Image embedding attached",
        extra={"item_id": str(item.id) if item.id else None, "model": result.model, "dimension": result.dimension},
    )
    return True
