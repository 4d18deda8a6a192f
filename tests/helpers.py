from typing import Dict, Iterable, List, Optional

from santa_draw.services.constraints import Participant


def make_participants(
    names: Iterable[str],
    blacklists: Optional[Dict[str, Iterable[str]]] = None,
) -> List[Participant]:
    """Participants whose ids are their names, handy for readable assertions."""
    blacklists = blacklists or {}
    return [
        Participant(id=name, name=name, blacklist=frozenset(blacklists.get(name, ())))
        for name in names
    ]


def assert_permitted(participants: List[Participant], mapping: Dict[str, str]) -> None:
    by_id = {participant.id: participant for participant in participants}
    for giver, receiver in mapping.items():
        assert giver != receiver
        assert receiver not in by_id[giver].blacklist


def assert_single_cycle(participant_ids: List[str], mapping: Dict[str, str]) -> None:
    start = participant_ids[0]
    seen = []
    current = start
    for _ in participant_ids:
        seen.append(current)
        current = mapping[current]
    assert current == start
    assert sorted(seen) == sorted(participant_ids)
