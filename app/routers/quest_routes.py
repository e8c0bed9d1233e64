# routers/quest_routes.py

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.auth.token import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.quest_schema import QuestCreate, QuestOut
from app.services import quests as quest_service


router = APIRouter(prefix="/api/quests", tags=["Quests"])


@router.post("/", response_model=QuestOut, status_code=201)
def create_quest(quest: QuestCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    # Manual empty check
    required_fields = ["title", "category", "jurisdiction"]
    empty_fields = [field for field in required_fields if not getattr(quest, field).strip()]
    if empty_fields:
        raise HTTPException(status_code=400, detail=f"You cannot leave these fields empty: {', '.join(empty_fields)}")

    return quest_service.create_quest(db, user, quest.title, quest.category, quest.jurisdiction)


@router.get("/", response_model=List[QuestOut])
def get_all_quests(
    category: Optional[str] = None,
    jurisdiction: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return quest_service.list_quests(db, category=category, jurisdiction=jurisdiction)


@router.get("/{quest_id}", response_model=QuestOut)
def get_quest_by_id(quest_id: int, db: Session = Depends(get_db)):
    return quest_service.get_quest(db, quest_id)


@router.delete("/{quest_id}", response_model=QuestOut)
def delete_quest(quest_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return quest_service.soft_delete(db, user, quest_id)


@router.post("/{quest_id}/restore", response_model=QuestOut)
def restore_quest(quest_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return quest_service.restore(db, user, quest_id)
