"""
Routes a transformation request to the right prompt and remote call.
"""

import logging
from dataclasses import dataclass, field

from transformapi.errors import ValidationError
from transformapi.gemini import GeminiAdapter, ImagePayload
from transformapi.images import to_data_url
from transformapi.prompts import (
    MAX_INTENSITY,
    MIN_INTENSITY,
    TEXT_TO_IMAGE_MODEL,
    VARIATION_DESCRIBE_PROMPT,
    TransformationKind,
    available_models,
    build_prompt,
    default_model,
    is_text_kind,
    variation_prompt_from_description,
)

log = logging.getLogger("transformapi")


@dataclass(frozen=True)
class TransformationRequest:
    kind: TransformationKind
    image: bytes | None = None
    mime_type: str | None = None
    prompt: str | None = None
    intensity: int | None = None
    model: str | None = None

    @property
    def selected_model(self) -> str:
        return self.model or default_model(self.kind)


@dataclass(frozen=True)
class TransformationResult:
    """Either an image (bytes + MIME type) or a text string, never both."""

    result_type: str
    model: str
    image: bytes | None = None
    mime_type: str | None = None
    text: str | None = None
    prompts: list[str] = field(default_factory=list)

    @classmethod
    def from_image(cls, payload: ImagePayload, model: str, prompts: list[str]) -> "TransformationResult":
        return cls(result_type="image", model=model, image=payload.data, mime_type=payload.mime_type, prompts=prompts)

    @classmethod
    def from_text(cls, text: str, model: str, prompts: list[str]) -> "TransformationResult":
        return cls(result_type="text", model=model, text=text, prompts=prompts)

    @property
    def is_image(self) -> bool:
        return self.result_type == "image"

    @property
    def data_url(self) -> str | None:
        if self.image is None or self.mime_type is None:
            return None
        return to_data_url(self.image, self.mime_type)


def validate_request(request: TransformationRequest) -> None:
    """Raise ValidationError if the request is missing what its kind needs."""
    kind = request.kind

    if kind is TransformationKind.TEXT_TO_IMAGE:
        if not request.prompt:
            raise ValidationError("Please enter a prompt.")
    elif not request.image:
        raise ValidationError("Please upload an image first.")
    elif not request.mime_type:
        raise ValidationError("The uploaded image has no MIME type.")

    if request.model is not None and request.model not in available_models(kind):
        raise ValidationError(
            f"Model '{request.model}' is not available for {kind.value}. "
            f"Available models: {available_models(kind)}"
        )

    if request.intensity is not None and not MIN_INTENSITY <= request.intensity <= MAX_INTENSITY:
        raise ValidationError(
            f"Intensity must be between {MIN_INTENSITY} and {MAX_INTENSITY}, got {request.intensity}."
        )


class Dispatcher:
    def __init__(self, adapter: GeminiAdapter):
        self.adapter = adapter

    async def execute(self, request: TransformationRequest) -> TransformationResult:
        """
        Validate the request, then issue the remote call(s) for its kind.

        Every kind is a single remote call except VARIATION on the Imagen
        model, which first describes the source image and then generates a
        new image from that description. Errors propagate; nothing is retried.
        """
        validate_request(request)

        kind = request.kind
        model = request.selected_model
        log.info(
            "execute kind=%s model=%s image_size=%d",
            kind.value,
            model,
            len(request.image or b""),
        )

        if kind is TransformationKind.TEXT_TO_IMAGE:
            prompt = request.prompt
            payload = await self.adapter.generate_image_from_text(prompt, model=model)
            return TransformationResult.from_image(payload, model, [prompt])

        image, mime_type = request.image, request.mime_type

        if kind is TransformationKind.VARIATION and model == TEXT_TO_IMAGE_MODEL:
            # image -> text -> image
            description = await self.adapter.describe_image(image, mime_type, VARIATION_DESCRIBE_PROMPT)
            variation_prompt = variation_prompt_from_description(description)
            payload = await self.adapter.generate_image_from_text(variation_prompt, model=model)
            return TransformationResult.from_image(
                payload, model, [VARIATION_DESCRIBE_PROMPT, variation_prompt]
            )

        prompt = build_prompt(kind, request.intensity)

        if is_text_kind(kind):
            text = await self.adapter.describe_image(image, mime_type, prompt, model=model)
            return TransformationResult.from_text(text, model, [prompt])

        payload = await self.adapter.transform_image(image, mime_type, prompt, model=model)
        return TransformationResult.from_image(payload, model, [prompt])
