from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set


@dataclass(frozen=True)
class Participant:
    id: str
    name: str
    phone: Optional[str] = None
    blacklist: FrozenSet[str] = field(default_factory=frozenset)

    def with_blacklist(self, excluded_ids: Iterable[str]) -> "Participant":
        return Participant(
            id=self.id,
            name=self.name,
            phone=self.phone,
            blacklist=frozenset(excluded_ids),
        )


def exclusions_for(participant: Participant) -> FrozenSet[str]:
    return frozenset(participant.blacklist or ())


def is_permitted(giver: Participant, receiver: Participant) -> bool:
    return receiver.id != giver.id and receiver.id not in exclusions_for(giver)


def permitted_receivers(
    giver: Participant,
    participants: Sequence[Participant],
) -> List[Participant]:
    return [receiver for receiver in participants if is_permitted(giver, receiver)]


def permission_graph(participants: Sequence[Participant]) -> Dict[str, Set[str]]:
    """Adjacency of the "may give to" relation, keyed by giver id."""
    return {
        giver.id: {receiver.id for receiver in permitted_receivers(giver, participants)}
        for giver in participants
    }
