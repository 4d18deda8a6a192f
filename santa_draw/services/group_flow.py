from __future__ import annotations

import datetime
import enum
import random
import secrets
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from loguru import logger

from santa_draw.core.config import Settings
from santa_draw.services.constraints import Participant, exclusions_for
from santa_draw.services.cycles import extract_cycles
from santa_draw.services.draw import (
    DEFAULT_MAX_ATTEMPTS,
    perform_circular_draw,
    perform_multi_cycle_draw,
)
from santa_draw.services.feasibility import DEFAULT_PROBE_ATTEMPTS, Infeasibility, validate


class GroupError(RuntimeError):
    pass


class DuplicateParticipantError(GroupError):
    pass


class DrawError(GroupError):
    def __init__(self, message: str, kind: Optional[Infeasibility] = None) -> None:
        super().__init__(message)
        self.kind = kind


class DrawMode(str, enum.Enum):
    CIRCULAR = "circular"
    MULTI_CYCLE = "multi_cycle"


def new_token() -> str:
    return secrets.token_hex(8)


@dataclass
class Group:
    participants: List[Participant] = field(default_factory=list)
    draw_results: Dict[str, str] = field(default_factory=dict)
    group_id: str = field(default_factory=new_token)
    draw_mode: Optional[DrawMode] = None
    seed: Optional[int] = None
    drawn_at: Optional[datetime.datetime] = None

    @property
    def is_drawn(self) -> bool:
        return bool(self.draw_results)


@dataclass(frozen=True)
class DrawOutcome:
    assignments: Dict[str, str]
    mode: DrawMode
    group_id: str
    seed: int
    cycles: List[List[str]]


def create_group() -> Group:
    return Group()


def participant_by_id(group: Group, participant_id: str) -> Optional[Participant]:
    for participant in group.participants:
        if participant.id == participant_id:
            return participant
    return None


def _require_participant(group: Group, participant_id: str) -> Participant:
    participant = participant_by_id(group, participant_id)
    if participant is None:
        raise GroupError(f"Unknown participant: {participant_id}")
    return participant


def _invalidate(group: Group) -> None:
    group.draw_results = {}
    group.draw_mode = None
    group.seed = None
    group.drawn_at = None


def add_participant(group: Group, name: str, phone: Optional[str] = None) -> Participant:
    name = (name or "").strip()
    if not name:
        raise GroupError("Participant name must not be empty.")
    if any(existing.name.lower() == name.lower() for existing in group.participants):
        raise DuplicateParticipantError(f"A participant named {name} already exists.")

    participant = Participant(id=new_token(), name=name, phone=(phone or "").strip() or None)
    group.participants.append(participant)
    _invalidate(group)
    return participant


def remove_participant(group: Group, participant_id: str) -> None:
    _require_participant(group, participant_id)
    group.participants = [
        participant.with_blacklist(exclusions_for(participant) - {participant_id})
        for participant in group.participants
        if participant.id != participant_id
    ]
    _invalidate(group)


def set_blacklist(group: Group, participant_id: str, excluded_ids: Iterable[str]) -> Participant:
    participant = _require_participant(group, participant_id)
    excluded = set(excluded_ids)
    if participant_id in excluded:
        raise GroupError(f"{participant.name} cannot exclude themselves.")
    for excluded_id in excluded:
        _require_participant(group, excluded_id)

    updated = participant.with_blacklist(excluded)
    group.participants = [updated if p.id == participant_id else p for p in group.participants]
    _invalidate(group)
    return updated


def _relaxed_draw(
    group: Group,
    settings: Optional[Settings],
    rng: random.Random,
) -> Optional[Dict[str, str]]:
    max_attempts = settings.relaxed_max_attempts if settings else DEFAULT_MAX_ATTEMPTS
    return perform_multi_cycle_draw(group.participants, max_attempts=max_attempts, rng=rng)


def run_draw(
    group: Group,
    settings: Optional[Settings] = None,
    allow_relaxed: bool = True,
    seed: Optional[int] = None,
) -> DrawOutcome:
    if seed is None:
        seed = random.randint(1, 2**31 - 1)
    rng = random.Random(seed)
    log = logger.bind(group_id=group.group_id, participants=len(group.participants), seed=seed)

    probe_attempts = settings.probe_attempts if settings else DEFAULT_PROBE_ATTEMPTS
    validation = validate(group.participants, probe_attempts=probe_attempts, rng=rng)

    assignments: Optional[Dict[str, str]] = None
    mode = DrawMode.CIRCULAR
    if validation.is_valid:
        max_attempts = settings.draw_max_attempts if settings else DEFAULT_MAX_ATTEMPTS
        assignments = perform_circular_draw(group.participants, max_attempts=max_attempts, rng=rng)
        if assignments is None and not allow_relaxed:
            raise DrawError(
                "The draw did not find a gift circle this time. Please try again.",
                Infeasibility.NO_CIRCLE,
            )
    elif not (validation.can_relax and allow_relaxed):
        log.info("Draw rejected: {reason}", reason=validation.reason)
        raise DrawError(validation.reason or "The draw is not possible.", validation.kind)

    if assignments is None:
        log.info("Falling back to separate gift circles")
        mode = DrawMode.MULTI_CYCLE
        assignments = _relaxed_draw(group, settings, rng)
        if assignments is None:
            raise DrawError(
                "Not everyone can be assigned a recipient with the current exclusions, "
                "even with separate gift circles.",
                validation.kind or Infeasibility.NO_CIRCLE,
            )

    group.draw_results = assignments
    group.draw_mode = mode
    group.seed = seed
    group.group_id = new_token()
    group.drawn_at = datetime.datetime.now(datetime.timezone.utc)

    cycles = extract_cycles(assignments, [participant.id for participant in group.participants])
    log.bind(new_group_id=group.group_id, mode=mode.value, cycles=len(cycles)).info(
        "Draw completed"
    )
    return DrawOutcome(
        assignments=dict(assignments),
        mode=mode,
        group_id=group.group_id,
        seed=seed,
        cycles=cycles,
    )


def redraw(
    group: Group,
    settings: Optional[Settings] = None,
    allow_relaxed: bool = True,
    seed: Optional[int] = None,
) -> DrawOutcome:
    return run_draw(group, settings=settings, allow_relaxed=allow_relaxed, seed=seed)


def receiver_of(group: Group, giver_id: str) -> Optional[Participant]:
    receiver_id = group.draw_results.get(giver_id)
    return participant_by_id(group, receiver_id) if receiver_id else None


def named_cycles(group: Group) -> List[List[str]]:
    names = {participant.id: participant.name for participant in group.participants}
    participant_ids = [participant.id for participant in group.participants]
    cycles = extract_cycles(group.draw_results, participant_ids)
    return [[names[pid] for pid in cycle] for cycle in cycles]
