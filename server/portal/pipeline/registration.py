"""
Vehicle registration number allocation.

The next number is read-then-written with no transaction: two concurrent
registrations can read the same maximum and both store max + 1. The portal
accepts that window; callers must not assume uniqueness.
"""

import logging
from typing import Optional

from portal.config import portal_settings
from portal.constants import Collections
from portal.core.logging_config import log_structured
from portal.store.base import OrderBy, RecordStore

logger = logging.getLogger(__name__)


async def next_registration_number(store: RecordStore, seed: Optional[int] = None) -> int:
    """Seed for an empty collection, otherwise the highest stored number + 1."""
    if seed is None:
        seed = portal_settings.PORTAL_REGISTRATION_SEED

    latest = await store.get_filtered(
        Collections.VEHICLES,
        order_by=OrderBy("registrationNumber", "desc"),
        limit=1,
    )
    if not latest or latest[0].get("registrationNumber") is None:
        return seed

    try:
        current_max = int(latest[0]["registrationNumber"])
    except (TypeError, ValueError):
        log_structured(
            logger,
            "warning",
            "registration_number_unparseable",
            value=latest[0].get("registrationNumber"),
        )
        return seed
    return current_max + 1
