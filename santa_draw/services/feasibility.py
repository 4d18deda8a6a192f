from __future__ import annotations

import enum
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set

from loguru import logger

from santa_draw.services.constraints import Participant, exclusions_for, permission_graph
from santa_draw.services.draw import perform_circular_draw, resolve_rng

MIN_PARTICIPANTS = 3
DEFAULT_PROBE_ATTEMPTS = 100


class Infeasibility(str, enum.Enum):
    TOO_FEW = "too_few"
    CANNOT_GIVE = "cannot_give"
    CANNOT_RECEIVE = "cannot_receive"
    MUTUAL_DEADLOCK = "mutual_deadlock"
    ISOLATED_CLUSTERS = "isolated_clusters"
    NO_CIRCLE = "no_circle"


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    reason: Optional[str] = None
    can_relax: bool = False
    kind: Optional[Infeasibility] = None


VALID = ValidationResult(is_valid=True)


def _invalid(kind: Infeasibility, reason: str, can_relax: bool = False) -> ValidationResult:
    return ValidationResult(is_valid=False, reason=reason, can_relax=can_relax, kind=kind)


def _check_cannot_give(participants: Sequence[Participant]) -> Optional[ValidationResult]:
    ids = {participant.id for participant in participants}
    for participant in participants:
        excluded = exclusions_for(participant) & (ids - {participant.id})
        if len(excluded) >= len(participants) - 1:
            return _invalid(
                Infeasibility.CANNOT_GIVE,
                f"{participant.name} has excluded everyone else and cannot give a gift to anyone.",
            )
    return None


def _check_cannot_receive(participants: Sequence[Participant]) -> Optional[ValidationResult]:
    for receiver in participants:
        others = [giver for giver in participants if giver.id != receiver.id]
        if others and all(receiver.id in exclusions_for(giver) for giver in others):
            return _invalid(
                Infeasibility.CANNOT_RECEIVE,
                f"Everyone has excluded {receiver.name}, so nobody can give them a gift.",
            )
    return None


def _check_mutual_deadlock(
    participants: Sequence[Participant],
    allowed: Dict[str, Set[str]],
) -> Optional[ValidationResult]:
    by_id = {participant.id: participant for participant in participants}
    for first in participants:
        options = allowed[first.id]
        if len(options) != 1:
            continue
        (second_id,) = options
        second = by_id[second_id]
        if allowed[second.id] == {first.id} and first.id not in exclusions_for(second):
            return _invalid(
                Infeasibility.MUTUAL_DEADLOCK,
                f"{first.name} and {second.name} can only give to each other, "
                "so they cannot be part of a single gift circle. "
                "Review their exclusions or allow separate circles.",
                can_relax=True,
            )
    return None


def reachability_clusters(
    participants: Sequence[Participant],
    allowed: Dict[str, Set[str]],
) -> List[List[str]]:
    """Reachable sets that cover more than one but not all participants."""
    visited: Set[str] = set()
    clusters: List[List[str]] = []
    for participant in participants:
        if participant.id in visited:
            continue
        reachable = {participant.id}
        stack = [participant.id]
        while stack:
            current = stack.pop()
            for receiver in allowed[current]:
                if receiver not in reachable:
                    reachable.add(receiver)
                    stack.append(receiver)
        visited |= reachable
        if 1 < len(reachable) < len(participants):
            clusters.append([p.id for p in participants if p.id in reachable])
    return clusters


def _format_clusters(participants: Sequence[Participant], clusters: List[List[str]]) -> str:
    names = {participant.id: participant.name for participant in participants}
    return "; ".join("[" + ", ".join(names[pid] for pid in cluster) + "]" for cluster in clusters)


def validate(
    participants: Sequence[Participant],
    probe_attempts: int = DEFAULT_PROBE_ATTEMPTS,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
) -> ValidationResult:
    """Decide whether a single gift circle is possible and explain why not.

    Structural checks run first and name the participants at fault. If they
    pass, a short circular draw probes the group; a failed probe is diagnosed
    as isolated clusters when the permitted relation splits the group.
    """
    if len(participants) < MIN_PARTICIPANTS:
        return _invalid(
            Infeasibility.TOO_FEW,
            f"At least {MIN_PARTICIPANTS} participants are required for the draw.",
        )

    result = _check_cannot_give(participants) or _check_cannot_receive(participants)
    if result:
        return result

    allowed = permission_graph(participants)
    result = _check_mutual_deadlock(participants, allowed)
    if result:
        return result

    if perform_circular_draw(participants, max_attempts=probe_attempts, rng=resolve_rng(rng, seed)):
        return VALID

    logger.bind(participants=len(participants), attempts=probe_attempts).debug(
        "Validation probe failed, diagnosing"
    )
    clusters = reachability_clusters(participants, allowed)
    if clusters:
        return _invalid(
            Infeasibility.ISOLATED_CLUSTERS,
            "The exclusions split the group into separate clusters that cannot "
            f"be joined into one gift circle: {_format_clusters(participants, clusters)}.",
            can_relax=True,
        )
    return _invalid(
        Infeasibility.NO_CIRCLE,
        "No single gift circle could be found with the current exclusions. "
        "Try again, loosen some exclusions, or allow separate circles.",
        can_relax=True,
    )
