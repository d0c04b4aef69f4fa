"""Wire format of the recommendation API.

Maps a request to its endpoint and JSON body, and decodes the
`{"recommendations": [...]}` response into domain objects.
"""

import json
import logging
from numbers import Real
from typing import Any, Dict, List

from recogate.domain.errors import MalformedResponseError
from recogate.domain.models.common import Endpoint
from recogate.domain.models.recommendation import (
    Recommendation,
    RecommendationRequest,
    RecommendationResult,
    SubjectKind,
)

logger = logging.getLogger(__name__)

ENDPOINTS: Dict[SubjectKind, Endpoint] = {
    SubjectKind.USER: Endpoint("/recommendations/user"),
    SubjectKind.PRODUCT: Endpoint("/recommendations/product"),
}

# Name of the JSON field carrying the subject id for each kind
SUBJECT_FIELDS: Dict[SubjectKind, str] = {
    SubjectKind.USER: "userId",
    SubjectKind.PRODUCT: "productId",
}

RECOMMENDATIONS_FIELD = "recommendations"
PRODUCT_ID_FIELD = "productId"
SCORE_FIELD = "score"


def endpoint_for(request: RecommendationRequest) -> Endpoint:
    return ENDPOINTS[request.kind]


def build_payload(request: RecommendationRequest) -> Dict[str, Any]:
    """Builds the outbound JSON body, e.g. {'userId': 'u1', 'limit': 5}."""
    return {SUBJECT_FIELDS[request.kind]: request.subject_id, "limit": request.limit}


def _parse_item(index: int, item: Any, body: str) -> Recommendation:
    if not isinstance(item, dict):
        raise MalformedResponseError(f"Recommendation #{index} is not an object", body=body)

    product_id = item.get(PRODUCT_ID_FIELD)
    if not isinstance(product_id, str) or not product_id:
        raise MalformedResponseError(
            f"Recommendation #{index} has no valid '{PRODUCT_ID_FIELD}'", body=body
        )

    score = item.get(SCORE_FIELD)
    # bool is a Real subclass; a boolean score is not a score.
    if score is not None and (isinstance(score, bool) or not isinstance(score, Real)):
        raise MalformedResponseError(
            f"Recommendation #{index} has a non-numeric '{SCORE_FIELD}': {score!r}", body=body
        )

    if score is not None:
        try:
            score = float(score)
        except OverflowError as e:
            raise MalformedResponseError(
                f"Recommendation #{index} has an out-of-range '{SCORE_FIELD}'", body=body
            ) from e

    metadata = {k: v for k, v in item.items() if k not in (PRODUCT_ID_FIELD, SCORE_FIELD)}
    return Recommendation(product_id=product_id, score=score, metadata=metadata)


def parse_recommendations(body: str) -> RecommendationResult:
    """Decodes a success body into an ordered tuple of recommendations.

    Args:
        body: Raw response text.

    Returns:
        The recommendations in the order the service sent them. A
        `"recommendations": null` field decodes to an empty result.

    Raises:
        MalformedResponseError: If the body is not valid JSON or does not
            have the expected shape.
    """
    try:
        document = json.loads(body)
    except (TypeError, ValueError, RecursionError) as e:
        # RecursionError: nesting deeper than the decoder can follow.
        raise MalformedResponseError(f"Response body is not valid JSON: {e}", body=body) from e

    if not isinstance(document, dict):
        raise MalformedResponseError("Response body is not a JSON object", body=body)
    if RECOMMENDATIONS_FIELD not in document:
        raise MalformedResponseError(
            f"Response body has no '{RECOMMENDATIONS_FIELD}' field", body=body
        )

    items = document[RECOMMENDATIONS_FIELD]
    if items is None:
        logger.debug("Response carried a null recommendations list, treating as empty.")
        return ()
    if not isinstance(items, list):
        raise MalformedResponseError(f"'{RECOMMENDATIONS_FIELD}' is not a list", body=body)

    parsed: List[Recommendation] = [_parse_item(i, item, body) for i, item in enumerate(items)]
    return tuple(parsed)
