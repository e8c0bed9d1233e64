import enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import relationship
from app.database import Base


class QuestStatus(str, enum.Enum):
    not_started = "notStarted"
    in_progress = "inProgress"
    complete = "complete"
    filed = "filed"


# Accepted on input, normalized before storage
STATUS_ALIASES = {"active": QuestStatus.in_progress}


class UserQuest(Base):
    __tablename__ = "user_quests"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    quest_id = Column(Integer, ForeignKey("quests.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String, nullable=False, default=QuestStatus.not_started.value)
    completion_time = Column(DateTime(timezone=True), nullable=True)  # set iff status == complete
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="user_quests")
    quest = relationship("Quest", back_populates="user_quests")

    __table_args__ = (UniqueConstraint("user_id", "quest_id", name="_user_quest_uc"),)
