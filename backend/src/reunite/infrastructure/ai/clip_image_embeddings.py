"""CLIP Image Embedding Adapter - ImageEmbeddingProviderPort on open_clip.

Requires the `vision` extra (open_clip_torch, torch, Pillow).

Architecture: Hexagonal - Infrastructure adapter implementing domain port
"""

import logging
from io import BytesIO
from typing import Optional

import open_clip
import torch
from PIL import Image, UnidentifiedImageError

from ...domain.ai.ports import (
    ImageEmbeddingProviderPort,
    ImageEmbeddingResult,
    ImageEmbeddingServiceError,
    InvalidImageError,
)

logger = logging.getLogger(__name__)


class ClipImageEmbeddingAdapter(ImageEmbeddingProviderPort):
    """open_clip implementation of ImageEmbeddingProviderPort.

    The model and preprocessing transform are loaded once in the constructor;
    create one adapter per process and share it.

    Example Usage:
        adapter = ClipImageEmbeddingAdapter(model_name="ViT-B-32", pretrained="openai")
        result = adapter.embed_image(open("phone.jpg", "rb").read())
        # result.embedding is list[float] of length 512, unit norm
    """

    def __init__(
        self,
        model_name: str = "ViT-B-32",
        pretrained: Optional[str] = "openai",
        device: Optional[str] = None,
    ):
        self.model_name = model_name
        self.device = device or ("cuda" if torch.cuda.is_available() else "cpu")

        logger.info(
            "Loading CLIP model",
            extra={"model": model_name, "pretrained": pretrained, "device": self.device},
        )
        model, _, preprocess = open_clip.create_model_and_transforms(model_name, pretrained=pretrained)
        self.model = model.to(self.device)
        self.model.eval()
        self.preprocess = preprocess

    def embed_image(self, image_bytes: bytes) -> ImageEmbeddingResult:
        if not image_bytes:
            raise InvalidImageError("Image bytes cannot be empty")

        try:
            image = Image.open(BytesIO(image_bytes)).convert("RGB")
        except (UnidentifiedImageError, OSError) as e:
            raise InvalidImageError(f"Cannot decode image: {e}") from e

        try:
            image_input = self.preprocess(image).unsqueeze(0).to(self.device)
            with torch.no_grad():
                embedding = self.model.encode_image(image_input)
            embedding = embedding / embedding.norm(dim=-1, keepdim=True)
        except RuntimeError as e:
            raise ImageEmbeddingServiceError(f"CLIP encoding failed: {e}") from e

        vector = embedding[0].cpu().tolist()
        return ImageEmbeddingResult(
            embedding=vector,
            model=self.model_name,
            dimension=len(vector),
        )
