"""
Builds the envelopes that Litmos write endpoints expect around their records.

A two-element request path such as ``("Users", "User")`` produces the
multi-record envelope, serialized as::

    <Users>
      <User>...</User>
      <User>...</User>
    </Users>

A one-element request path such as ``("User",)`` produces a single record::

    <User>...</User>
"""

from typing import Any, Dict, Sequence

from .exceptions import ConfigurationError


def build_body(data: Any, request_path: Sequence[str]) -> Dict[str, Any]:
    """
    Wraps raw record data in the envelope selected by `request_path`.

    Args:
        data: A single record or a list of records.
        request_path: The element names that label the data in the body.

    Returns:
        The structured envelope, ready for XML encoding.

    Raises:
        ConfigurationError: If `request_path` does not have 1 or 2 elements.
    """

    records = data if isinstance(data, list) else [data]

    if len(request_path) == 1:
        return {request_path[0]: records[0] if records else None}

    if len(request_path) == 2:
        outer, inner = request_path
        return {outer: [{inner: record} for record in records]}

    raise ConfigurationError(
        f"Request path must have 1 or 2 elements, got {list(request_path)}"
    )
