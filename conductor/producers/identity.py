"""Producer identity assignment."""

from __future__ import annotations

import uuid

from conductor.domain.models import Registration


def assign_producer_id(registration: Registration) -> str:
    """
    Return the registration's custom id, or a fresh UUID4 string.

    The custom id must already have passed validation. Uniqueness is enforced
    by the catalog, not here.
    """
    if registration.custom_id is not None:
        return registration.custom_id
    return str(uuid.uuid4())


__all__ = ["assign_producer_id"]
