import dataclasses

import pytest

from recogate.domain.errors import HttpStatusError, InvalidRequestError
from recogate.domain.models.common import RetryPolicy
from recogate.domain.models.outcome import FatalFailure, RetryableFailure
from recogate.domain.models.recommendation import Recommendation, RecommendationRequest, SubjectKind


def test_retry_policy_defaults():
    policy = RetryPolicy()
    assert (policy.max_attempts, policy.initial_delay, policy.multiplier) == (3, 1.0, 2.0)


def test_retry_policy_delays_grow_exponentially():
    policy = RetryPolicy(max_attempts=5, initial_delay=0.5, multiplier=3.0)
    assert [policy.delay_after(n) for n in range(1, 5)] == [0.5, 1.5, 4.5, 13.5]


def test_retry_policy_attempts_left():
    policy = RetryPolicy(max_attempts=2)
    assert policy.has_attempts_left(1)
    assert not policy.has_attempts_left(2)


@pytest.mark.parametrize("kwargs", [
    {"max_attempts": 0},
    {"max_attempts": 2.5},
    {"max_attempts": True},
    {"initial_delay": -1},
    {"multiplier": 0.5},
])
def test_retry_policy_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        RetryPolicy(**kwargs)


def test_retry_policy_is_immutable():
    policy = RetryPolicy()
    with pytest.raises(dataclasses.FrozenInstanceError):
        policy.max_attempts = 10


def test_delay_after_rejects_attempt_zero():
    with pytest.raises(ValueError):
        RetryPolicy().delay_after(0)


def test_request_factories():
    assert RecommendationRequest.for_user("u", 1).kind is SubjectKind.USER
    assert RecommendationRequest.for_product("p", 1).kind is SubjectKind.PRODUCT


def test_recommendations_compare_by_value():
    assert Recommendation("sku-1", 0.5, {"a": 1}) == Recommendation("sku-1", 0.5, {"a": 1})
    assert hash(Recommendation("sku-1", 0.5, {"a": 1})) == hash(Recommendation("sku-1", 0.5, {"b": 2}))


def test_invalid_request_error_is_a_value_error():
    assert issubclass(InvalidRequestError, ValueError)


def test_failure_descriptions():
    assert RetryableFailure(cause=HttpStatusError(503, ""), status_code=503).description == "HTTP 503 - <empty body>"
    assert FatalFailure(cause=KeyError("x")).description == "KeyError: 'x'"
