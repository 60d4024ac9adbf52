import io
from types import SimpleNamespace

import pytest
from PIL import Image

GENERATED_PNG = b"\x89PNG\r\n\x1a\nGENERATED"


def image_response(data: bytes = GENERATED_PNG, mime_type: str = "image/png"):
    part = SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type), text=None)
    return SimpleNamespace(parts=[part], text=None)


def text_response(text: str):
    part = SimpleNamespace(inline_data=None, text=text)
    return SimpleNamespace(parts=[part], text=text)


def images_response(data: bytes | None = GENERATED_PNG):
    if data is None:
        return SimpleNamespace(generated_images=[])
    return SimpleNamespace(generated_images=[SimpleNamespace(image=SimpleNamespace(image_bytes=data))])


class FakeModels:
    """Stands in for client.aio.models and records every call."""

    def __init__(self):
        self.calls: list[tuple[str, dict]] = []
        self.description = "A red square on a plain background."
        self.content_response = None
        self.images_response = None
        self.error: Exception | None = None

    async def generate_content(self, **kwargs):
        self.calls.append(("generate_content", kwargs))
        if self.error is not None:
            raise self.error
        if self.content_response is not None:
            return self.content_response
        config = kwargs.get("config")
        if config is not None and getattr(config, "response_modalities", None):
            return image_response()
        return text_response(self.description)

    async def generate_images(self, **kwargs):
        self.calls.append(("generate_images", kwargs))
        if self.error is not None:
            raise self.error
        if self.images_response is not None:
            return self.images_response
        return images_response()

    def prompts(self) -> list[str]:
        out = []
        for method, kwargs in self.calls:
            if method == "generate_images":
                out.append(kwargs["prompt"])
            else:
                out.append(kwargs["contents"][-1])
        return out


class FakeClient:
    def __init__(self):
        self.models = FakeModels()
        self.aio = SimpleNamespace(models=self.models)


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def red_png() -> bytes:
    img = Image.new("RGB", (10, 10), "red")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
