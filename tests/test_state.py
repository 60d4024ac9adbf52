from transformapi.dispatcher import TransformationResult
from transformapi.prompts import DEFAULT_INTENSITY, TEXT_TO_IMAGE_MODEL, TransformationKind, default_model
from transformapi.state import (
    GenerationFailed,
    GenerationSucceeded,
    SelectKind,
    SelectModel,
    SetIntensity,
    SetPrompt,
    StartGeneration,
    UIState,
    UploadImage,
    reduce,
    to_request,
)

RESULT = TransformationResult(result_type="text", model="gemini-2.5-flash", text="Stripes.")


def ready_state() -> UIState:
    state = reduce(UIState(), SelectKind(TransformationKind.DESCRIPTION))
    return reduce(state, UploadImage(b"png", "image/png"))


def test_initial_state():
    state = UIState()
    assert state.kind is TransformationKind.TEXT_TO_IMAGE
    assert state.model == default_model(TransformationKind.TEXT_TO_IMAGE)
    assert not state.busy
    assert not state.can_generate


def test_select_kind_resets_selection():
    state = reduce(UIState(), SelectKind(TransformationKind.VARIATION))
    state = reduce(state, SelectModel(TEXT_TO_IMAGE_MODEL))
    state = reduce(state, SetIntensity(9))

    state = reduce(state, SelectKind(TransformationKind.GEOMETRIZE))

    assert state.model == default_model(TransformationKind.GEOMETRIZE)
    assert state.intensity == DEFAULT_INTENSITY
    assert state.result is None
    assert state.error is None


def test_select_model_ignores_unlisted_model():
    state = reduce(UIState(), SelectKind(TransformationKind.LINE_ART))
    assert reduce(state, SelectModel(TEXT_TO_IMAGE_MODEL)) == state


def test_intensity_clamped():
    assert reduce(UIState(), SetIntensity(42)).intensity == 10
    assert reduce(UIState(), SetIntensity(0)).intensity == 1


def test_start_without_input_sets_error():
    state = reduce(UIState(), StartGeneration())
    assert not state.busy
    assert state.error == "Please enter a prompt."

    state = reduce(state, SelectKind(TransformationKind.LINE_ART))
    state = reduce(state, StartGeneration())
    assert state.error == "Please upload an image first."


def test_generation_lifecycle():
    state = reduce(ready_state(), StartGeneration())
    assert state.busy
    request_id = state.pending_request

    state = reduce(state, GenerationSucceeded(request_id, RESULT))
    assert not state.busy
    assert state.result == RESULT


def test_start_while_busy_is_ignored():
    busy = reduce(ready_state(), StartGeneration())
    assert reduce(busy, StartGeneration()) is busy


def test_failure_sets_error():
    state = reduce(ready_state(), StartGeneration())
    state = reduce(state, GenerationFailed(state.pending_request, "A network error occurred."))
    assert not state.busy
    assert state.result is None
    assert state.error == "A network error occurred."


def test_superseded_result_dropped():
    state = reduce(ready_state(), StartGeneration())
    stale_id = state.pending_request

    state = reduce(state, UploadImage(b"other", "image/jpeg"))
    assert not state.busy
    state = reduce(state, StartGeneration())
    assert state.pending_request != stale_id

    after_stale = reduce(state, GenerationSucceeded(stale_id, RESULT))
    assert after_stale is state
    assert reduce(state, GenerationFailed(stale_id, "late")) is state


def test_to_request_text_to_image_drops_image():
    state = reduce(UIState(), UploadImage(b"png", "image/png"))
    state = reduce(state, SelectKind(TransformationKind.TEXT_TO_IMAGE))
    state = reduce(state, SetPrompt("A fox"))

    request = to_request(state)

    assert request.image is None
    assert request.prompt == "A fox"
    assert request.model == TEXT_TO_IMAGE_MODEL


def test_to_request_image_kind():
    request = to_request(reduce(ready_state(), SetPrompt("unused")))
    assert request.kind is TransformationKind.DESCRIPTION
    assert request.image == b"png"
    assert request.mime_type == "image/png"
    assert request.prompt is None
