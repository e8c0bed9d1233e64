from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func
from app.database import Base
from sqlalchemy.orm import relationship

class Quest(Base):
    __tablename__ = "quests"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)        # free-form, "core" unlocks the filed status
    jurisdiction = Column(String, nullable=False)                # e.g. "MA"
    creation_user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    deletion_time = Column(DateTime(timezone=True), nullable=True)  # soft delete marker
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user_quests = relationship("UserQuest", back_populates="quest", cascade="all, delete-orphan")

    @property
    def is_deleted(self) -> bool:
        return self.deletion_time is not None
