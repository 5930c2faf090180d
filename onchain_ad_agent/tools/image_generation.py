import logging
from typing import Optional

from openai import OpenAI
from pydantic import BaseModel, Field

from ..constants import DEFAULT_IMAGE_MODEL
from .base import ToolDescriptor

logger = logging.getLogger(__name__)


class ImageGenerationInput(BaseModel):
    prompt: str = Field(description="A detailed description of the ad visual. e.g. 'A neon-lit sneaker on a rainy street'")


class ImageGenerator:
    """Generates a single image with the OpenAI Images API and returns its URL."""

    def __init__(self, api_key: str, model: str = DEFAULT_IMAGE_MODEL, size: str = "1024x1024", client: Optional[OpenAI] = None):
        self.model = model
        self.size = size
        self.client = client or OpenAI(api_key=api_key)

    def generate(self, prompt: str) -> str:
        response = self.client.images.generate(model=self.model, prompt=prompt, n=1, size=self.size)
        url = response.data[0].url
        logger.info(f"Generated image with {self.model}")
        return url


def create_image_generation_tool(generator: ImageGenerator) -> ToolDescriptor:
    def generate_image(params: ImageGenerationInput) -> str:
        return generator.generate(params.prompt)

    return ToolDescriptor(
        name="generate_image",
        description=(
            "Generates an ad image from a text prompt and returns a temporary image URL. "
            "Upload the result with upload_to_s3 before using it in an ad."
        ),
        args_schema=ImageGenerationInput,
        handler=generate_image,
    )
