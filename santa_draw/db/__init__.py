from santa_draw.db.models import (
    Base,
    DrawResultRecord,
    ExclusionRecord,
    GroupRecord,
    ParticipantRecord,
)
from santa_draw.db.session import SessionLocal, get_session, init_engine

__all__ = [
    "Base",
    "DrawResultRecord",
    "ExclusionRecord",
    "GroupRecord",
    "ParticipantRecord",
    "SessionLocal",
    "get_session",
    "init_engine",
]
