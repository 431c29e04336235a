"""
Embedding vector validation and normalisation.

Shared by the embedding provider (validating API responses) and the
vector store (validating caller-supplied embeddings on save and search).

Dependencies: math (stdlib), rag_backend.core.exceptions
System role: Vector input contracts
"""

import logging
import math
from collections.abc import Sequence
from typing import Any, Literal

from rag_backend.core.exceptions import EmptyVectorError, ValidationError

logger = logging.getLogger(__name__)

InvalidElementPolicy = Literal["coerce", "reject"]


def require_vector(values: Any, field: str = "embedding") -> Sequence[Any]:
    """
    Check that ``values`` is a non-empty sequence.

    Raises:
        EmptyVectorError: If ``values`` is None, not a list/tuple, or empty
    """
    if values is None or not isinstance(values, (list, tuple)) or len(values) == 0:
        raise EmptyVectorError(field=field)
    return values


def _to_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return float(value)
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


def coerce_vector(
    values: Any,
    policy: InvalidElementPolicy = "reject",
    field: str = "embedding",
) -> list[float]:
    """
    Validate ``values`` and convert every element to float.

    Args:
        values: Candidate vector
        policy: "reject" raises on a non-numeric or non-finite element,
                "coerce" replaces it with 0.0
        field: Field name reported in errors

    Returns:
        list[float]: Normalised vector

    Raises:
        EmptyVectorError: If the vector is missing or empty
        ValidationError: If an element is not numeric and policy is "reject"
    """
    vector = require_vector(values, field=field)

    result: list[float] = []
    for index, value in enumerate(vector):
        number = _to_float(value)
        if number is None:
            if policy == "reject":
                raise ValidationError(
                    f"Non-numeric or non-finite value in {field} at index {index}",
                    field=field,
                    details={"index": index, "value": repr(value)[:50]},
                )
            logger.warning(
                f"Non-numeric or non-finite value in {field} at index {index}, replacing with 0",
                extra={"index": index, "value": repr(value)[:50]},
            )
            number = 0.0
        result.append(number)
    return result


def format_pgvector(vector: Sequence[float]) -> str:
    """Render a vector in pgvector's text input format, e.g. ``[0.1,0.2]``."""
    return "[" + ",".join(repr(float(v)) for v in vector) + "]"
