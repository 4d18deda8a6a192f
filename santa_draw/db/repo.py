from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select

from santa_draw.db.models import (
    DrawResultRecord,
    ExclusionRecord,
    GroupRecord,
    ParticipantRecord,
)
from santa_draw.services.constraints import Participant
from santa_draw.services.group_flow import DrawMode, Group


def get_group_record(session, token: str) -> Optional[GroupRecord]:
    return session.scalar(select(GroupRecord).where(GroupRecord.token == token))


def save_group(session, group: Group) -> GroupRecord:
    existing = get_group_record(session, group.group_id)
    if existing:
        session.delete(existing)
        session.flush()

    record = GroupRecord(
        token=group.group_id,
        draw_mode=group.draw_mode.value if group.draw_mode else None,
        seed=group.seed,
        drawn_at=group.drawn_at,
    )
    record.participants = [
        ParticipantRecord(
            token=participant.id,
            name=participant.name,
            phone=participant.phone,
            position=position,
        )
        for position, participant in enumerate(group.participants)
    ]
    record.exclusions = [
        ExclusionRecord(giver_token=participant.id, receiver_token=excluded_id)
        for participant in group.participants
        for excluded_id in sorted(participant.blacklist)
    ]
    record.draw_results = [
        DrawResultRecord(giver_token=giver_id, receiver_token=receiver_id)
        for giver_id, receiver_id in group.draw_results.items()
    ]
    session.add(record)
    session.flush()
    return record


def load_group(session, token: str) -> Optional[Group]:
    record = get_group_record(session, token)
    if not record:
        return None

    blacklists = {}
    for exclusion in record.exclusions:
        blacklists.setdefault(exclusion.giver_token, set()).add(exclusion.receiver_token)

    participants = [
        Participant(
            id=row.token,
            name=row.name,
            phone=row.phone,
            blacklist=frozenset(blacklists.get(row.token, ())),
        )
        for row in record.participants
    ]
    draw_results = {row.giver_token: row.receiver_token for row in record.draw_results}
    return Group(
        participants=participants,
        draw_results=draw_results,
        group_id=record.token,
        draw_mode=DrawMode(record.draw_mode) if record.draw_mode else None,
        seed=record.seed,
        drawn_at=record.drawn_at,
    )


def delete_group(session, token: str) -> bool:
    record = get_group_record(session, token)
    if not record:
        return False
    session.delete(record)
    return True


def list_group_tokens(session) -> List[str]:
    return list(
        session.scalars(
            select(GroupRecord.token).order_by(GroupRecord.created_at, GroupRecord.id)
        ).all()
    )
