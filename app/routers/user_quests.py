# routers/user_quests.py

from typing import List, Optional
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.auth.token import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.user_quest_schema import (
    CountOut,
    StatusOut,
    StatusUpdate,
    UserQuestCreate,
    UserQuestGroups,
    UserQuestOut,
)
from app.services import user_quests as service

router = APIRouter(prefix="/api/user-quests", tags=["User Quests"])


# Static paths come before /{quest_id} so they are not parsed as ids

@router.get("/", response_model=List[UserQuestOut])
def get_all(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return service.get_all(db, user)


@router.get("/count", response_model=CountOut)
def count(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return CountOut(count=service.count(db, user))


@router.get("/by-category", response_model=UserQuestGroups)
def get_by_category(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return service.get_by_category(db, user)


@router.get("/by-status", response_model=UserQuestGroups)
def get_by_status(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return service.get_by_status(db, user)


@router.post("/", response_model=UserQuestOut, status_code=status.HTTP_201_CREATED)
def create(payload: UserQuestCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return service.create(db, user, payload.quest_id)


@router.get("/{quest_id}", response_model=Optional[UserQuestOut])
def get_by_quest_id(quest_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return service.get_by_quest_id(db, user, quest_id)


@router.get("/{quest_id}/status", response_model=StatusOut)
def get_status(quest_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return StatusOut(status=service.get_status(db, user, quest_id))


@router.patch("/{quest_id}/status", response_model=UserQuestOut)
def set_status(
    quest_id: int,
    payload: StatusUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return service.set_status(db, user, quest_id, payload.status)


@router.delete("/{quest_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_forever(quest_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    service.delete_forever(db, user, quest_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
