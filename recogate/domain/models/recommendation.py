"""Value objects describing what is asked of the recommendation API and what it returns."""

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from recogate.domain.models.common import SubjectId


class SubjectKind(str, enum.Enum):
    """What a recommendation request is anchored on."""

    USER = "user"
    PRODUCT = "product"


@dataclass(frozen=True)
class RecommendationRequest:
    """A single request for recommendations.

    Built per call and discarded once the call returns. Validation against the
    configured maximum limit happens in the gateway, which knows that bound.
    """

    kind: SubjectKind
    subject_id: SubjectId
    limit: int

    @classmethod
    def for_user(cls, user_id: str, limit: int) -> "RecommendationRequest":
        return cls(kind=SubjectKind.USER, subject_id=SubjectId(user_id), limit=limit)

    @classmethod
    def for_product(cls, product_id: str, limit: int) -> "RecommendationRequest":
        return cls(kind=SubjectKind.PRODUCT, subject_id=SubjectId(product_id), limit=limit)


@dataclass(frozen=True)
class Recommendation:
    """One recommended product as returned by the remote service.

    The gateway passes these through untouched.
    """

    product_id: str
    score: Optional[float] = None
    # Excluded from hashing since dicts are unhashable; still compared by __eq__.
    metadata: Dict[str, Any] = field(default_factory=dict, hash=False)


# Ordered, possibly empty. A tuple so repeated results compare equal and
# cannot be mutated by callers.
RecommendationResult = Tuple[Recommendation, ...]

EMPTY_RESULT: RecommendationResult = ()

# Largest limit a request may ask for unless configured otherwise.
DEFAULT_MAX_LIMIT = 100
