"""
Rehab integration: active health conditions -> session rehab buckets.

Protocols are placed by their exercises' placement tag:

    warmup       done before the main work
    active_wait  offered while equipment is occupied
    cooldown     done after the main work
    rest_day     not part of a training session (rest-day routine only)

Protocols are authored once per zone pair, so a condition on the side
without its own protocol falls back to the mirrored zone.
"""

import logging
from typing import Final, Sequence

from .config import MAX_ACTIVE_WAIT, MAX_COOLDOWN_REHAB, MAX_WARMUP_REHAB
from .models import (
    BodyZone,
    HealthCondition,
    IntegratedRehab,
    ProgramSession,
    RehabExercise,
    RehabExerciseInfo,
    RehabProtocol,
)

logger = logging.getLogger(__name__)

_MIRRORED_JOINTS: Final[tuple[str, ...]] = (
    "shoulder",
    "elbow",
    "wrist",
    "hip",
    "knee",
    "ankle",
    "foot",
)

MIRROR_ZONES: Final[dict[str, str]] = {
    **{f"{j}_left": f"{j}_right" for j in _MIRRORED_JOINTS},
    **{f"{j}_right": f"{j}_left" for j in _MIRRORED_JOINTS},
}


def mirror_zone(zone: BodyZone) -> BodyZone | None:
    """Left/right counterpart of a joint zone; None for midline zones."""
    return MIRROR_ZONES.get(zone)  # type: ignore[return-value]


def match_protocol(
    zone: BodyZone,
    protocols: Sequence[RehabProtocol],
) -> RehabProtocol | None:
    """First protocol for the zone, else the first for its mirror, else None."""
    for protocol in protocols:
        if protocol.target_zone == zone:
            return protocol
    mirror = mirror_zone(zone)
    if mirror is None:
        return None
    for protocol in protocols:
        if protocol.target_zone == mirror:
            return protocol
    return None


def _to_info(exercise: RehabExercise, protocol: RehabProtocol) -> RehabExerciseInfo:
    return RehabExerciseInfo(
        exercise_name=exercise.exercise_name,
        sets=exercise.sets,
        reps=exercise.reps,
        intensity=exercise.intensity,
        notes=exercise.notes,
        protocol_name=protocol.condition_name,
        priority=protocol.priority,
    )


def integrate_rehab(
    session: ProgramSession,
    conditions: Sequence[HealthCondition],
    protocols: Sequence[RehabProtocol] | None = None,
) -> IntegratedRehab:
    """
    Select rehab exercises for a session from the user's active conditions.

    The main session is not modified; it is accepted so callers can pass the
    whole session context.

    Args:
        session: The program session being trained
        conditions: All health conditions; inactive ones are ignored
        protocols: Protocol catalog (defaults to the bundled catalog)

    Returns:
        IntegratedRehab with warmup (<= 8), active-wait (<= 8) and
        cooldown (<= 5) buckets, each ordered by protocol priority.  An
        exercise name appears at most once across all three buckets.
    """
    active = [c for c in conditions if c.is_active]
    if not active:
        return IntegratedRehab()

    if protocols is None:
        from .protocols import get_protocol_catalog

        protocols = get_protocol_catalog()

    matched: list[RehabProtocol] = []
    for condition in active:
        protocol = match_protocol(condition.body_zone, protocols)
        if protocol is None:
            logger.debug("no rehab protocol for zone %s", condition.body_zone)
            continue
        if protocol not in matched:
            matched.append(protocol)

    matched.sort(key=lambda p: p.priority)

    buckets: dict[str, list[RehabExerciseInfo]] = {
        "warmup": [],
        "active_wait": [],
        "cooldown": [],
    }
    added: set[str] = set()

    for protocol in matched:
        for exercise in protocol.exercises:
            if exercise.placement == "rest_day":
                continue
            if exercise.exercise_name in added:
                continue
            added.add(exercise.exercise_name)
            buckets[exercise.placement].append(_to_info(exercise, protocol))

    # list.sort is stable: catalog order is kept within a priority
    for bucket in buckets.values():
        bucket.sort(key=lambda info: info.priority)

    logger.debug(
        "rehab for %r: %d protocols, %d exercises",
        session.name,
        len(matched),
        len(added),
    )

    return IntegratedRehab(
        warmup_rehab=buckets["warmup"][:MAX_WARMUP_REHAB],
        active_wait_pool=buckets["active_wait"][:MAX_ACTIVE_WAIT],
        cooldown_rehab=buckets["cooldown"][:MAX_COOLDOWN_REHAB],
    )
