# services/quests.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import PermissionDeniedError, QuestNotFoundError
from app.models.quests import Quest
from app.models.user import User

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_quest(db: Session, user: User, title: str, category: str, jurisdiction: str) -> Quest:
    quest = Quest(
        title=title.strip(),
        category=category.strip(),
        jurisdiction=jurisdiction.strip(),
        creation_user_id=user.id,
    )
    db.add(quest)
    db.commit()
    db.refresh(quest)
    logger.info("User %s created quest %s (%s)", user.id, quest.id, quest.category)
    return quest


def list_quests(
    db: Session, category: Optional[str] = None, jurisdiction: Optional[str] = None
) -> List[Quest]:
    stmt = select(Quest).where(Quest.deletion_time.is_(None))
    if category:
        stmt = stmt.where(Quest.category == category)
    if jurisdiction:
        stmt = stmt.where(Quest.jurisdiction == jurisdiction)
    return list(db.execute(stmt.order_by(Quest.id)).scalars())


def get_quest(db: Session, quest_id: int, include_deleted: bool = False) -> Quest:
    quest = db.get(Quest, quest_id)
    if quest is None or (quest.is_deleted and not include_deleted):
        raise QuestNotFoundError(quest_id)
    return quest


def _owned(db: Session, user: User, quest_id: int) -> Quest:
    quest = get_quest(db, quest_id, include_deleted=True)
    if quest.creation_user_id != user.id:
        raise PermissionDeniedError("Only the quest creator can change this quest")
    return quest


def soft_delete(db: Session, user: User, quest_id: int) -> Quest:
    quest = _owned(db, user, quest_id)
    if quest.deletion_time is None:
        quest.deletion_time = _utcnow()
        db.commit()
        db.refresh(quest)
        logger.info("User %s soft-deleted quest %s", user.id, quest.id)
    return quest


def restore(db: Session, user: User, quest_id: int) -> Quest:
    quest = _owned(db, user, quest_id)
    if quest.deletion_time is not None:
        quest.deletion_time = None
        db.commit()
        db.refresh(quest)
        logger.info("User %s restored quest %s", user.id, quest.id)
    return quest
