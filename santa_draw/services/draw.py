from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence

from loguru import logger

from santa_draw.services.constraints import Participant, is_permitted, permission_graph

DEFAULT_MAX_ATTEMPTS = 1000
MIN_CLOSE_PROBABILITY = 0.5
MAX_CLOSE_PROBABILITY = 0.85
CLOSE_PROBABILITY_STEP = 0.05


def resolve_rng(rng: Optional[random.Random] = None, seed: Optional[int] = None) -> random.Random:
    return rng if rng is not None else random.Random(seed)


def _ring_assignments(ring: Sequence[Participant]) -> Optional[Dict[str, str]]:
    assignments: Dict[str, str] = {}
    for index, giver in enumerate(ring):
        receiver = ring[(index + 1) % len(ring)]
        if not is_permitted(giver, receiver):
            return None
        assignments[giver.id] = receiver.id
    return assignments


def perform_circular_draw(
    participants: Sequence[Participant],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
) -> Optional[Dict[str, str]]:
    """Find a single gift ring covering everyone.

    Each attempt shuffles the whole group and accepts the ring only if every
    giver may give to their successor; a bad ring is thrown away, never patched.
    Returns ``None`` once ``max_attempts`` shuffles have failed.
    """
    if len(participants) < 2:
        return None

    rng = resolve_rng(rng, seed)
    ring = list(participants)
    for attempt in range(max_attempts):
        rng.shuffle(ring)
        assignments = _ring_assignments(ring)
        if assignments is not None:
            logger.bind(participants=len(ring), attempt=attempt + 1).debug("Circular draw found")
            return assignments

    logger.bind(participants=len(ring), attempts=max_attempts).debug("Circular draw exhausted")
    return None


def close_probability(cycle_length: int) -> float:
    grown = MIN_CLOSE_PROBABILITY + CLOSE_PROBABILITY_STEP * (cycle_length - 2)
    return min(MAX_CLOSE_PROBABILITY, max(MIN_CLOSE_PROBABILITY, grown))


def _grow_cycle(
    start: str,
    remaining: List[str],
    allowed: Dict[str, set],
    rng: random.Random,
) -> Optional[List[str]]:
    cycle = [start]
    members = {start}
    while True:
        tail = cycle[-1]
        can_close = len(cycle) >= 2 and start in allowed[tail]
        if len(cycle) == len(remaining):
            return cycle if can_close else None

        candidates = [pid for pid in remaining if pid not in members and pid in allowed[tail]]
        if not candidates:
            return cycle if can_close else None
        if can_close and rng.random() < close_probability(len(cycle)):
            return cycle

        chosen = rng.choice(candidates)
        cycle.append(chosen)
        members.add(chosen)


def _partition_into_cycles(
    participant_ids: Sequence[str],
    allowed: Dict[str, set],
    rng: random.Random,
) -> Optional[Dict[str, str]]:
    assignments: Dict[str, str] = {}
    remaining = list(participant_ids)
    while remaining:
        start = rng.choice(remaining)
        cycle = _grow_cycle(start, remaining, allowed, rng)
        if cycle is None:
            return None
        for index, giver in enumerate(cycle):
            assignments[giver] = cycle[(index + 1) % len(cycle)]
        closed = set(cycle)
        remaining = [pid for pid in remaining if pid not in closed]
    return assignments


def perform_multi_cycle_draw(
    participants: Sequence[Participant],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
) -> Optional[Dict[str, str]]:
    """Relaxed draw: split the group into several closed gift circles.

    Every participant still gives exactly once and receives exactly once, and
    every circle has at least two members. Only full coverage counts as success.
    """
    if len(participants) < 2:
        return None

    rng = resolve_rng(rng, seed)
    allowed = permission_graph(participants)
    participant_ids = [participant.id for participant in participants]
    for attempt in range(max_attempts):
        assignments = _partition_into_cycles(participant_ids, allowed, rng)
        if assignments is not None:
            logger.bind(participants=len(participant_ids), attempt=attempt + 1).debug(
                "Multi-cycle draw found"
            )
            return assignments

    logger.bind(participants=len(participant_ids), attempts=max_attempts).debug(
        "Multi-cycle draw exhausted"
    )
    return None
