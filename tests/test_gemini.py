import httpx
import pytest

from conftest import image_response, text_response
from transformapi.errors import InvalidCredentialError, NetworkError, NoOutputProducedError, UnknownError
from transformapi.gemini import GeminiAdapter


@pytest.fixture
def adapter(fake_client):
    return GeminiAdapter(fake_client)


@pytest.mark.asyncio
async def test_transform_image_returns_first_inline_image(adapter, fake_client, red_png):
    fake_client.models.content_response = image_response(b"JPEGDATA", "image/jpeg")

    payload = await adapter.transform_image(red_png, "image/png", "Make it blue")

    assert payload.data == b"JPEGDATA"
    assert payload.mime_type == "image/jpeg"
    [(_, kwargs)] = fake_client.models.calls
    part = kwargs["contents"][0]
    assert part.inline_data.data == red_png
    assert part.inline_data.mime_type == "image/png"
    assert kwargs["contents"][1] == "Make it blue"


@pytest.mark.asyncio
async def test_transform_image_text_only(adapter, fake_client, red_png):
    fake_client.models.content_response = text_response("Here is a description instead.")

    with pytest.raises(NoOutputProducedError) as exc_info:
        await adapter.transform_image(red_png, "image/png", "Make it blue")
    assert "did not return an image" in exc_info.value.message


@pytest.mark.asyncio
async def test_describe_image_empty_text(adapter, fake_client, red_png):
    fake_client.models.content_response = text_response("")

    with pytest.raises(NoOutputProducedError):
        await adapter.describe_image(red_png, "image/png", "Describe")


@pytest.mark.asyncio
async def test_generate_image_from_text_config(adapter, fake_client):
    payload = await adapter.generate_image_from_text("A fox")

    assert payload.mime_type == "image/png"
    [(_, kwargs)] = fake_client.models.calls
    config = kwargs["config"]
    assert config.number_of_images == 1
    assert config.output_mime_type == "image/png"
    assert config.aspect_ratio == "1:1"


@pytest.mark.asyncio
async def test_provider_errors_are_classified(adapter, fake_client, red_png):
    fake_client.models.error = RuntimeError("400 API key not valid. Please pass a valid API key.")
    with pytest.raises(InvalidCredentialError):
        await adapter.describe_image(red_png, "image/png", "Describe")

    fake_client.models.error = httpx.ConnectTimeout("timed out")
    with pytest.raises(NetworkError):
        await adapter.generate_image_from_text("A fox")

    fake_client.models.error = RuntimeError("500 INTERNAL")
    with pytest.raises(UnknownError) as exc_info:
        await adapter.transform_image(red_png, "image/png", "x")
    assert "transforming the image" in exc_info.value.message
