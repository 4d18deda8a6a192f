from __future__ import annotations

import datetime
from typing import List, Optional

from santa_draw.services.group_flow import DrawMode, Group, named_cycles, receiver_of

TITLE = "Secret Santa"


def format_cycle(names: List[str]) -> str:
    return " > ".join(names + names[:1])


def format_report(group: Group, drawn_on: Optional[datetime.date] = None) -> str:
    """Plain-text summary of a finished draw: circles first, then who gives to whom."""
    if drawn_on is None:
        drawn_on = group.drawn_at.date() if group.drawn_at else datetime.date.today()

    lines = [
        TITLE,
        f"Draw date: {drawn_on.isoformat()}",
        f"Group: {group.group_id}",
        f"Total participants: {len(group.participants)}",
    ]
    if group.draw_mode == DrawMode.MULTI_CYCLE:
        lines.append("Mode: separate gift circles")
    lines.append("")

    cycles = named_cycles(group)
    lines.append("Gift circle:" if len(cycles) == 1 else "Gift circles:")
    lines.extend(f"  {format_cycle(cycle)}" for cycle in cycles)
    lines.append("")

    width = max([len("Participant")] + [len(p.name) for p in group.participants])
    lines.append(f"{'Participant'.ljust(width)} | Gives to")
    lines.append(f"{'-' * width}-+-{'-' * width}")
    for participant in group.participants:
        receiver = receiver_of(group, participant.id)
        lines.append(f"{participant.name.ljust(width)} | {receiver.name if receiver else ''}")
    return "\n".join(lines)
