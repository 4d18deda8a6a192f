from __future__ import annotations

from typing import List, Mapping, Sequence, Set


def extract_cycles(mapping: Mapping[str, str], participant_ids: Sequence[str]) -> List[List[str]]:
    """Split a giver -> receiver mapping into its disjoint gift circles.

    Circles come out in discovery order following ``participant_ids``; each one
    lists members in gift order without repeating the first member at the end.
    A walk stops early at an id that has no receiver; such ids never appear.
    """
    visited: Set[str] = set()
    cycles: List[List[str]] = []
    for start in participant_ids:
        if start in visited or start not in mapping:
            continue
        cycle: List[str] = []
        seen: Set[str] = set()
        current = start
        while current in mapping and current not in seen and current not in visited:
            cycle.append(current)
            seen.add(current)
            current = mapping[current]
        visited.update(seen)
        cycles.append(cycle)
    return cycles


def is_single_cycle(mapping: Mapping[str, str], participant_ids: Sequence[str]) -> bool:
    cycles = extract_cycles(mapping, participant_ids)
    return len(cycles) == 1 and len(cycles[0]) == len(participant_ids)
