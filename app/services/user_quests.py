# services/user_quests.py
"""
Per-user quest progress.

Every read joins through to the quest template and drops soft-deleted
quests, so a quest removed by its owner disappears from all users' lists
without touching their progress rows.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import (
    InvalidStatusError,
    QuestNotFoundError,
    ReservedStatusError,
    UserQuestExistsError,
    UserQuestNotFoundError,
)
from app.models.quests import Quest
from app.models.user import User
from app.models.user_quest import STATUS_ALIASES, QuestStatus, UserQuest
from app.schemas.user_quest_schema import UserQuestOut

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_out(user_quest: UserQuest, quest: Quest) -> UserQuestOut:
    return UserQuestOut(
        id=user_quest.id,
        user_id=user_quest.user_id,
        quest_id=user_quest.quest_id,
        status=user_quest.status,
        completion_time=user_quest.completion_time,
        created_at=user_quest.created_at,
        title=quest.title,
        category=quest.category,
        jurisdiction=quest.jurisdiction,
    )


def _live_rows(user: User):
    return (
        select(UserQuest, Quest)
        .join(Quest, UserQuest.quest_id == Quest.id)
        .where(UserQuest.user_id == user.id, Quest.deletion_time.is_(None))
    )


def _get_live_quest(db: Session, quest_id: int) -> Quest:
    quest = db.get(Quest, quest_id)
    if quest is None or quest.is_deleted:
        raise QuestNotFoundError(quest_id)
    return quest


def _find_row(db: Session, user: User, quest_id: int) -> Optional[tuple[UserQuest, Quest]]:
    row = db.execute(_live_rows(user).where(UserQuest.quest_id == quest_id)).first()
    return tuple(row) if row else None


def parse_status(value: str) -> QuestStatus:
    """Map a client supplied status string onto the stored vocabulary."""
    if value in STATUS_ALIASES:
        return STATUS_ALIASES[value]
    try:
        return QuestStatus(value)
    except ValueError:
        raise InvalidStatusError(value)


# =======================
# Queries
# =======================

def get_all(db: Session, user: User) -> List[UserQuestOut]:
    rows = db.execute(_live_rows(user).order_by(UserQuest.created_at, UserQuest.id)).all()
    return [_to_out(uq, quest) for uq, quest in rows]


def count(db: Session, user: User) -> int:
    stmt = (
        select(func.count(UserQuest.id))
        .join(Quest, UserQuest.quest_id == Quest.id)
        .where(UserQuest.user_id == user.id, Quest.deletion_time.is_(None))
    )
    return db.execute(stmt).scalar_one()


def get_by_quest_id(db: Session, user: User, quest_id: int) -> Optional[UserQuestOut]:
    row = _find_row(db, user, quest_id)
    if row is None:
        return None
    return _to_out(*row)


def get_status(db: Session, user: User, quest_id: int) -> Optional[str]:
    row = _find_row(db, user, quest_id)
    return row[0].status if row else None


def _group_by(db: Session, user: User, key: str) -> Dict[str, List[UserQuestOut]]:
    groups: Dict[str, List[UserQuestOut]] = defaultdict(list)
    for item in get_all(db, user):
        groups[getattr(item, key)].append(item)
    return dict(groups)


def get_by_category(db: Session, user: User) -> Dict[str, List[UserQuestOut]]:
    return _group_by(db, user, "category")


def get_by_status(db: Session, user: User) -> Dict[str, List[UserQuestOut]]:
    return _group_by(db, user, "status")


# =======================
# Mutations
# =======================

def create(db: Session, user: User, quest_id: int) -> UserQuestOut:
    quest = _get_live_quest(db, quest_id)

    existing = db.execute(
        select(UserQuest).where(UserQuest.user_id == user.id, UserQuest.quest_id == quest_id)
    ).scalar_one_or_none()
    if existing:
        raise UserQuestExistsError(quest_id)

    user_quest = UserQuest(user_id=user.id, quest_id=quest.id, status=QuestStatus.not_started.value)
    db.add(user_quest)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise UserQuestExistsError(quest_id)
    db.refresh(user_quest)

    logger.info("User %s started quest %s", user.id, quest.id)
    return _to_out(user_quest, quest)


def set_status(db: Session, user: User, quest_id: int, value: str) -> UserQuestOut:
    new_status = parse_status(value)
    quest = _get_live_quest(db, quest_id)

    if new_status is QuestStatus.filed and quest.category != settings.CORE_CATEGORY:
        raise ReservedStatusError()

    row = _find_row(db, user, quest_id)
    if row is None:
        raise UserQuestNotFoundError(quest_id)
    user_quest = row[0]

    if new_status is QuestStatus.complete:
        if user_quest.status != QuestStatus.complete.value or user_quest.completion_time is None:
            user_quest.completion_time = _utcnow()
    else:
        user_quest.completion_time = None
    user_quest.status = new_status.value

    db.commit()
    db.refresh(user_quest)

    logger.info("User %s set quest %s to %s", user.id, quest.id, user_quest.status)
    return _to_out(user_quest, quest)


def delete_forever(db: Session, user: User, quest_id: int) -> None:
    user_quest = db.execute(
        select(UserQuest).where(UserQuest.user_id == user.id, UserQuest.quest_id == quest_id)
    ).scalar_one_or_none()
    if user_quest is None:
        raise UserQuestNotFoundError(quest_id)

    db.delete(user_quest)
    db.commit()
    logger.info("User %s permanently removed quest %s", user.id, quest_id)
