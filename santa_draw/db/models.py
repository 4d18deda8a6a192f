from __future__ import annotations

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class GroupRecord(Base):
    __tablename__ = "groups"

    id = Column(Integer, primary_key=True)
    token = Column(String, unique=True, nullable=False, index=True)
    draw_mode = Column(String(16), nullable=True)
    seed = Column(Integer, nullable=True)
    drawn_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    participants = relationship(
        "ParticipantRecord",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="ParticipantRecord.position",
    )
    exclusions = relationship(
        "ExclusionRecord", back_populates="group", cascade="all, delete-orphan"
    )
    draw_results = relationship(
        "DrawResultRecord", back_populates="group", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<GroupRecord(id={self.id}, token={self.token}, draw_mode={self.draw_mode})>"


class ParticipantRecord(Base):
    __tablename__ = "participants"

    id = Column(Integer, primary_key=True)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)
    token = Column(String, nullable=False)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    position = Column(Integer, nullable=False)

    group = relationship("GroupRecord", back_populates="participants")

    __table_args__ = (
        UniqueConstraint("group_id", "token", name="uq_participants_group_token"),
    )

    def __repr__(self) -> str:
        return f"<ParticipantRecord(id={self.id}, token={self.token}, name={self.name})>"


class ExclusionRecord(Base):
    __tablename__ = "exclusions"

    id = Column(Integer, primary_key=True)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)
    giver_token = Column(String, nullable=False)
    receiver_token = Column(String, nullable=False)

    group = relationship("GroupRecord", back_populates="exclusions")

    __table_args__ = (
        UniqueConstraint("group_id", "giver_token", "receiver_token", name="uq_exclusions_pair"),
    )


class DrawResultRecord(Base):
    __tablename__ = "draw_results"

    id = Column(Integer, primary_key=True)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)
    giver_token = Column(String, nullable=False)
    receiver_token = Column(String, nullable=False)

    group = relationship("GroupRecord", back_populates="draw_results")

    __table_args__ = (
        UniqueConstraint("group_id", "giver_token", name="uq_draw_results_group_giver"),
    )
