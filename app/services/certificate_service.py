"""Certificate issuance on course completion.

Issuance is best effort.  The enrollment's COMPLETED status is the source
of truth; if the insert fails the error is logged and counted, and the
request carries on.
"""

from __future__ import annotations

import logging
import secrets
from datetime import UTC, datetime

from app.core.metrics import CERTIFICATES_ISSUED
from app.models.certificate import Certificate
from app.repos.registry import Repos

logger = logging.getLogger(__name__)


def generate_certificate_number(now: datetime) -> str:
    """CERT-<UTC timestamp to the second>-<8 random hex digits>."""
    return f"CERT-{now.astimezone(UTC):%Y%m%d%H%M%S}-{secrets.token_hex(4).upper()}"


async def issue_certificate_if_needed(
    repos: Repos,
    user_id: int,
    course_id: int,
    is_now_completed: bool,
    *,
    now: datetime | None = None,
) -> Certificate | None:
    """Issue the course certificate on the transition to COMPLETED.

    Returns the new certificate, or None when nothing was issued: not a
    transition, the user already holds one (completed, reopened and
    completed again), or the insert failed.
    """
    if not is_now_completed:
        return None

    now = now or datetime.now(UTC)
    try:
        if await repos.certificates.get_for(user_id, course_id) is not None:
            CERTIFICATES_ISSUED.labels(result="existing").inc()
            logger.info(
                "Certificate already held  user=%d course=%d", user_id, course_id
            )
            return None
        stored = await repos.certificates.add(
            Certificate.new(
                user_id=user_id,
                course_id=course_id,
                certificate_number=generate_certificate_number(now),
                issued_at=now,
            )
        )
    except Exception:
        CERTIFICATES_ISSUED.labels(result="failed").inc()
        logger.exception(
            "Certificate issuance failed  user=%d course=%d", user_id, course_id
        )
        return None

    CERTIFICATES_ISSUED.labels(result="issued").inc()
    logger.info(
        "Certificate issued  user=%d course=%d number=%s",
        user_id,
        course_id,
        stored.certificate_number,
    )
    return stored
