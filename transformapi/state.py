"""
Front-end state as an immutable value, advanced by a pure reducer.

    state = reduce(state, SelectKind(TransformationKind.GEOMETRIZE))

At most one generation is in flight. Starting one while busy is a no-op,
and a completion for any request other than the pending one is dropped.
Changing the kind or the source image discards the pending request, so a
late result for it is never shown.
"""

from dataclasses import dataclass, replace

from transformapi.dispatcher import TransformationRequest, TransformationResult
from transformapi.prompts import (
    DEFAULT_INTENSITY,
    MAX_INTENSITY,
    MIN_INTENSITY,
    TransformationKind,
    available_models,
    default_model,
)


@dataclass(frozen=True)
class UIState:
    kind: TransformationKind = TransformationKind.TEXT_TO_IMAGE
    model: str = default_model(TransformationKind.TEXT_TO_IMAGE)
    intensity: int = DEFAULT_INTENSITY
    prompt: str = ""
    image: bytes | None = None
    mime_type: str | None = None
    pending_request: int | None = None
    last_request: int = 0
    result: TransformationResult | None = None
    error: str | None = None

    @property
    def busy(self) -> bool:
        return self.pending_request is not None

    @property
    def can_generate(self) -> bool:
        if self.busy:
            return False
        if self.kind is TransformationKind.TEXT_TO_IMAGE:
            return bool(self.prompt)
        return self.image is not None


# -- Actions ------------------------------------------------------------------


@dataclass(frozen=True)
class SelectKind:
    kind: TransformationKind


@dataclass(frozen=True)
class SelectModel:
    model: str


@dataclass(frozen=True)
class SetIntensity:
    value: int


@dataclass(frozen=True)
class SetPrompt:
    prompt: str


@dataclass(frozen=True)
class UploadImage:
    image: bytes
    mime_type: str


@dataclass(frozen=True)
class StartGeneration:
    pass


@dataclass(frozen=True)
class GenerationSucceeded:
    request_id: int
    result: TransformationResult


@dataclass(frozen=True)
class GenerationFailed:
    request_id: int
    message: str


def _cleared(state: UIState, **changes) -> UIState:
    return replace(state, **{"pending_request": None, "result": None, "error": None, **changes})


def reduce(state: UIState, action) -> UIState:
    if isinstance(action, SelectKind):
        return _cleared(
            state,
            kind=action.kind,
            model=default_model(action.kind),
            intensity=DEFAULT_INTENSITY,
        )

    if isinstance(action, SelectModel):
        if action.model not in available_models(state.kind):
            return state
        return replace(state, model=action.model)

    if isinstance(action, SetIntensity):
        value = min(max(action.value, MIN_INTENSITY), MAX_INTENSITY)
        return replace(state, intensity=value)

    if isinstance(action, SetPrompt):
        return replace(state, prompt=action.prompt)

    if isinstance(action, UploadImage):
        return _cleared(state, image=action.image, mime_type=action.mime_type)

    if isinstance(action, StartGeneration):
        if state.busy:
            return state
        if not state.can_generate:
            if state.kind is TransformationKind.TEXT_TO_IMAGE:
                return replace(state, error="Please enter a prompt.")
            return replace(state, error="Please upload an image first.")
        request_id = state.last_request + 1
        return _cleared(state, pending_request=request_id, last_request=request_id)

    if isinstance(action, GenerationSucceeded):
        if action.request_id != state.pending_request:
            return state
        return replace(state, pending_request=None, result=action.result, error=None)

    if isinstance(action, GenerationFailed):
        if action.request_id != state.pending_request:
            return state
        return replace(state, pending_request=None, result=None, error=action.message)

    raise TypeError(f"Unknown action: {action!r}")


def to_request(state: UIState) -> TransformationRequest:
    """Build the request for the current selection."""
    is_text_to_image = state.kind is TransformationKind.TEXT_TO_IMAGE
    return TransformationRequest(
        kind=state.kind,
        image=None if is_text_to_image else state.image,
        mime_type=None if is_text_to_image else state.mime_type,
        prompt=state.prompt if is_text_to_image else None,
        intensity=state.intensity,
        model=state.model,
    )
