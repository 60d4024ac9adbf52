import httpx
import pytest

from transformapi.errors import (
    InvalidCredentialError,
    NetworkError,
    NoOutputProducedError,
    RequestRefusedError,
    SafetyBlockedError,
    UnknownError,
    ValidationError,
    classify_error,
)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("400 INVALID_ARGUMENT. API key not valid. Please pass a valid API key.", InvalidCredentialError),
        ("Response was blocked by safety settings", SafetyBlockedError),
        ("Prompt BLOCKED", SafetyBlockedError),
        ("Network is unreachable", NetworkError),
        ("Failed to fetch", NetworkError),
        ("No image was generated. The model might have responded with text only.", NoOutputProducedError),
        ("The model refused the request", RequestRefusedError),
        ("500 INTERNAL", UnknownError),
    ],
)
def test_classify_by_message(text, expected):
    assert isinstance(classify_error(RuntimeError(text), "transforming the image"), expected)


def test_rules_checked_in_order():
    # credential rule wins over the safety rule
    error = classify_error(RuntimeError("API key not valid, request blocked"), "x")
    assert isinstance(error, InvalidCredentialError)


def test_unknown_message_names_context():
    error = classify_error(RuntimeError("boom"), "generating the text description")
    assert error.message == (
        "An unexpected error occurred while generating the text description. Please try again."
    )


def test_classified_errors_pass_through():
    original = ValidationError("Please enter a prompt.")
    assert classify_error(original, "x") is original


def test_no_output_gets_friendly_message():
    error = classify_error(NoOutputProducedError("No image was generated."), "x")
    assert isinstance(error, NoOutputProducedError)
    assert "did not return an image" in error.message


def test_transport_error_is_network():
    error = classify_error(httpx.ConnectError("[Errno 111] Connection refused"), "x")
    assert isinstance(error, NetworkError)


def test_status_codes():
    assert ValidationError("x").status_code == 400
    assert InvalidCredentialError("x").status_code == 401
    assert NetworkError("x").status_code == 503
