import pytest

from recogate.core.classification import classify_error, classify_response, is_retryable_status
from recogate.domain.errors import HttpStatusError, MalformedResponseError, NoResponseError
from recogate.domain.interfaces.transport import TransportResponse
from recogate.domain.models.common import ResponseBody
from recogate.domain.models.outcome import FatalFailure, RetryableFailure, Success


@pytest.mark.parametrize("status_code, expected", [
    (500, True), (502, True), (503, True), (504, True), (599, True),
    (429, True),
    (400, False), (401, False), (403, False), (404, False), (409, False), (499, False),
])
def test_is_retryable_status(status_code, expected):
    assert is_retryable_status(status_code) is expected


def test_no_response_is_retryable():
    outcome = classify_error(NoResponseError("connection refused"))
    assert isinstance(outcome, RetryableFailure)
    assert outcome.status_code is None
    assert "NoResponseError" in outcome.description


def test_http_status_error_keeps_status_and_body():
    outcome = classify_error(HttpStatusError(404, '{"error": "unknown user"}'))
    assert isinstance(outcome, FatalFailure)
    assert outcome.status_code == 404
    assert outcome.body == '{"error": "unknown user"}'
    assert outcome.description == 'HTTP 404 - {"error": "unknown user"}'


def test_429_and_5xx_classified_identically():
    assert type(classify_error(HttpStatusError(429))) is type(classify_error(HttpStatusError(503)))


def test_success_body_is_parsed():
    body = ResponseBody('{"recommendations": [{"productId": "sku-1", "score": 1}]}')
    outcome = classify_response(TransportResponse(status_code=200, body=body))
    assert isinstance(outcome, Success)
    assert outcome.result[0].product_id == "sku-1"
    assert outcome.result[0].score == 1.0


def test_corrupt_success_body_is_fatal():
    outcome = classify_response(TransportResponse(status_code=200, body=ResponseBody("not json")))
    assert isinstance(outcome, FatalFailure)
    assert isinstance(outcome.cause, MalformedResponseError)
    assert outcome.body == "not json"


def test_unexpected_transport_error_is_retryable():
    outcome = classify_error(RuntimeError("socket closed"))
    assert isinstance(outcome, RetryableFailure)
    assert outcome.status_code is None
    assert isinstance(outcome.cause, RuntimeError)


def test_out_of_range_score_is_fatal():
    body = ResponseBody('{"recommendations": [{"productId": "p", "score": 1' + "0" * 400 + "}]}")
    outcome = classify_response(TransportResponse(status_code=200, body=body))
    assert isinstance(outcome, FatalFailure)
    assert isinstance(outcome.cause, MalformedResponseError)
