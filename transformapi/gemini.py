"""
Gemini / Imagen calls behind three request shapes:

  - transform_image: image + instruction -> image
  - describe_image: image + instruction -> text
  - generate_image_from_text: prompt -> image

The genai.Client is passed in by the caller so tests can substitute a fake.
"""

import logging
from dataclasses import dataclass

from google import genai
from google.genai import types as genai_types

from transformapi.errors import NoOutputProducedError, classify_error
from transformapi.prompts import IMAGE_EDIT_MODEL, TEXT_MODEL, TEXT_TO_IMAGE_MODEL

log = logging.getLogger("transformapi")


@dataclass(frozen=True)
class ImagePayload:
    data: bytes
    mime_type: str


class GeminiAdapter:
    def __init__(
        self,
        client: genai.Client,
        image_model: str = IMAGE_EDIT_MODEL,
        text_model: str = TEXT_MODEL,
        text_to_image_model: str = TEXT_TO_IMAGE_MODEL,
    ):
        self.client = client
        self.image_model = image_model
        self.text_model = text_model
        self.text_to_image_model = text_to_image_model

    async def transform_image(
        self, image: bytes, mime_type: str, prompt: str, model: str | None = None
    ) -> ImagePayload:
        """
        Send image + instruction to the Gemini image model.
        Returns the first inline image of the response.
        """
        model = model or self.image_model
        log.info("transform_image model=%s mime=%s image_size=%d", model, mime_type, len(image))

        try:
            response = await self.client.aio.models.generate_content(
                model=model,
                contents=[
                    genai_types.Part.from_bytes(data=image, mime_type=mime_type),
                    prompt,
                ],
                config=genai_types.GenerateContentConfig(
                    response_modalities=["IMAGE", "TEXT"],
                ),
            )

            for part in response.parts or []:
                if part.inline_data is not None and part.inline_data.data:
                    return ImagePayload(
                        data=part.inline_data.data,
                        mime_type=part.inline_data.mime_type or "image/png",
                    )

            raise NoOutputProducedError(
                "No image was generated. The model might have responded with text only."
            )
        except Exception as e:
            log.exception("Error during transforming the image (model=%s)", model)
            raise classify_error(e, "transforming the image") from e

    async def describe_image(
        self, image: bytes, mime_type: str, prompt: str, model: str | None = None
    ) -> str:
        """Send image + instruction to the Gemini text model. Returns its text."""
        model = model or self.text_model
        log.info("describe_image model=%s mime=%s image_size=%d", model, mime_type, len(image))

        try:
            response = await self.client.aio.models.generate_content(
                model=model,
                contents=[
                    genai_types.Part.from_bytes(data=image, mime_type=mime_type),
                    prompt,
                ],
            )

            text = response.text.strip() if response.text else ""
            if not text:
                raise NoOutputProducedError("The model did not return any text. Please try again.")
            return text
        except Exception as e:
            log.exception("Error during generating the text description (model=%s)", model)
            raise classify_error(e, "generating the text description") from e

    async def generate_image_from_text(self, prompt: str, model: str | None = None) -> ImagePayload:
        """Generate a single square PNG from a text prompt with Imagen."""
        model = model or self.text_to_image_model
        log.info("generate_image_from_text model=%s prompt_len=%d", model, len(prompt))

        try:
            response = await self.client.aio.models.generate_images(
                model=model,
                prompt=prompt,
                config=genai_types.GenerateImagesConfig(
                    number_of_images=1,
                    output_mime_type="image/png",
                    aspect_ratio="1:1",
                ),
            )

            images = response.generated_images or []
            if not images or images[0].image is None or not images[0].image.image_bytes:
                raise NoOutputProducedError(
                    "No image was generated. The model did not return any image for the prompt."
                )
            return ImagePayload(data=images[0].image.image_bytes, mime_type="image/png")
        except Exception as e:
            log.exception("Error during generating the image from your prompt (model=%s)", model)
            raise classify_error(e, "generating the image from your prompt") from e
