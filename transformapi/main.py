"""
TransformAPI — FastAPI server for the AI image transformer.

Stateless: image or prompt in -> AI transform -> image or text out.

Run with:
    uvicorn transformapi.main:create_app --factory --port 8000
"""

import logging

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from google import genai
from pydantic import BaseModel

from transformapi.config import DEFAULT_MAX_UPLOAD_BYTES, Settings, configure_logging, get_settings
from transformapi.dispatcher import Dispatcher, TransformationRequest
from transformapi.errors import TransformError, ValidationError
from transformapi.gemini import GeminiAdapter
from transformapi.images import encode_image_b64, sniff_mime_type
from transformapi.prompts import (
    KIND_LABELS,
    TransformationKind,
    available_models,
    default_model,
    is_text_kind,
    supports_intensity,
)

log = logging.getLogger("transformapi")


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class TransformationInfo(BaseModel):
    kind: str
    label: str
    default_model: str
    models: list[str]
    produces_text: bool
    supports_intensity: bool
    requires_image: bool


class TransformResponse(BaseModel):
    status: str = "ok"
    kind: str
    model: str
    result_type: str
    mime_type: str = ""
    image_b64: str = ""
    data_url: str = ""
    text: str = ""
    prompts: list[str] = []


class ErrorResponse(BaseModel):
    status: str = "error"
    error: str
    detail: str


def transformation_catalog() -> list[TransformationInfo]:
    return [
        TransformationInfo(
            kind=kind.value,
            label=KIND_LABELS[kind],
            default_model=default_model(kind),
            models=available_models(kind),
            produces_text=is_text_kind(kind),
            supports_intensity=supports_intensity(kind),
            requires_image=kind is not TransformationKind.TEXT_TO_IMAGE,
        )
        for kind in TransformationKind
    ]


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------


def create_app(
    client: genai.Client | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """
    Build the application around a genai client.

    Without an injected client the API key must be configured; a missing key
    raises ConfigError here, at startup, rather than on the first request.
    """
    if client is None:
        settings = settings or get_settings()
        configure_logging(settings.log_level)
        client = genai.Client(api_key=settings.api_key)
    max_upload_bytes = settings.max_upload_bytes if settings else DEFAULT_MAX_UPLOAD_BYTES

    app = FastAPI(
        title="TransformAPI",
        description="AI image transformations: line art, relief maps, variations and more",
        version="0.1.0",
    )
    app.state.dispatcher = Dispatcher(GeminiAdapter(client))

    @app.exception_handler(TransformError)
    async def handle_transform_error(request: Request, exc: TransformError):
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=exc.category, detail=exc.message).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        fields = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'] if part != 'body')}: {err['msg']}"
            for err in exc.errors()
        )
        return JSONResponse(
            status_code=ValidationError.status_code,
            content=ErrorResponse(error=ValidationError.category, detail=f"Invalid request: {fields}").model_dump(),
        )

    @app.get("/health")
    async def health():
        """Liveness check."""
        return {"status": "ok"}

    @app.get("/transformations", response_model=list[TransformationInfo])
    async def get_transformations():
        """Return every transformation with its models for the front end to consume."""
        return transformation_catalog()

    @app.post("/transform", response_model=TransformResponse)
    async def transform(
        kind: str = Form(..., description="Transformation to apply"),
        image: UploadFile | None = File(None, description="Source image to transform"),
        prompt: str | None = Form(None, description="Prompt for TEXT_TO_IMAGE"),
        intensity: int | None = Form(None, description="Strength, 1-10"),
        model: str | None = Form(None, description="Model override"),
    ):
        """
        Apply a transformation to the uploaded image, or generate an image
        from the prompt for TEXT_TO_IMAGE.
        """
        try:
            selected = TransformationKind.parse(kind)
        except ValueError:
            raise ValidationError(
                f"Unknown transformation '{kind}'. "
                f"Valid transformations: {[k.value for k in TransformationKind]}"
            ) from None

        image_bytes: bytes | None = None
        mime_type: str | None = None

        if selected is not TransformationKind.TEXT_TO_IMAGE and image is not None:
            image_bytes = await image.read()
            if len(image_bytes) > max_upload_bytes:
                raise ValidationError(
                    f"Uploaded image is too large ({len(image_bytes)} bytes, "
                    f"limit {max_upload_bytes})."
                )
            if image_bytes:
                try:
                    sniffed = sniff_mime_type(image_bytes)
                except ValueError as e:
                    raise ValidationError(str(e)) from e
                declared = image.content_type or ""
                mime_type = declared if declared.startswith("image/") else sniffed
            else:
                image_bytes = None

        log.info("transform kind=%s mime=%s upload_size=%d", selected.value, mime_type, len(image_bytes or b""))

        request = TransformationRequest(
            kind=selected,
            image=image_bytes,
            mime_type=mime_type,
            prompt=prompt,
            intensity=intensity,
            model=model or None,
        )

        result = await app.state.dispatcher.execute(request)

        if result.is_image:
            return TransformResponse(
                kind=selected.value,
                model=result.model,
                result_type="image",
                mime_type=result.mime_type,
                image_b64=encode_image_b64(result.image),
                data_url=result.data_url,
                prompts=result.prompts,
            )
        return TransformResponse(
            kind=selected.value,
            model=result.model,
            result_type="text",
            text=result.text,
            prompts=result.prompts,
        )

    return app
