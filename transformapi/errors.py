"""
User-facing error categories and the provider error classifier.
"""

import httpx


class ConfigError(RuntimeError):
    """Raised at startup when required configuration is missing."""


class TransformError(Exception):
    category = "unknown"
    status_code = 502

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TransformError):
    category = "validation"
    status_code = 400


class InvalidCredentialError(TransformError):
    category = "invalid_credential"
    status_code = 401


class SafetyBlockedError(TransformError):
    category = "safety_blocked"
    status_code = 422


class NetworkError(TransformError):
    category = "network"
    status_code = 503


class NoOutputProducedError(TransformError):
    category = "no_output"
    status_code = 502


class RequestRefusedError(TransformError):
    category = "refused"
    status_code = 422


class UnknownError(TransformError):
    pass


# The provider's error vocabulary is not a stable contract: these are
# best-effort substring matches on the lower-cased error text, checked in order.
_RULES: list[tuple[tuple[str, ...], type[TransformError], str]] = [
    (
        ("api key not valid",),
        InvalidCredentialError,
        "API key is not valid. Please check your configuration.",
    ),
    (
        ("safety settings", "blocked"),
        SafetyBlockedError,
        "Your request was blocked due to safety settings. "
        "Please modify your prompt or image and try again.",
    ),
    (
        ("network", "fetch"),
        NetworkError,
        "A network error occurred. Please check your connection and try again.",
    ),
    (
        ("no image was generated",),
        NoOutputProducedError,
        "The model did not return an image. It might have responded with text. "
        "Please adjust your prompt.",
    ),
    (
        ("refused the request",),
        RequestRefusedError,
        "The model refused to process the request, which can happen with prompts "
        "that violate safety policies.",
    ),
]

NETWORK_MESSAGE = _RULES[2][2]


def classify_error(error: BaseException, context: str) -> TransformError:
    """Turn any failure raised while *context* into a categorized TransformError.

    Already-categorized errors are returned unchanged, apart from raw
    "no image was generated" failures which get the friendlier message.
    """
    lowered = str(error).lower()

    if isinstance(error, TransformError) and not isinstance(error, NoOutputProducedError):
        return error

    for needles, error_cls, message in _RULES:
        if any(needle in lowered for needle in needles):
            return error_cls(message)

    if isinstance(error, NoOutputProducedError):
        return error
    if isinstance(error, httpx.TransportError):
        return NetworkError(NETWORK_MESSAGE)
    return UnknownError(f"An unexpected error occurred while {context}. Please try again.")
