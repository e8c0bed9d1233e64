import logging

from fastapi import APIRouter, HTTPException, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.auth.token import create_access_token, get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.user_schema import UserCreate, UserCreated, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["User"])


def _find_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()


@router.post("/users", response_model=UserCreated, status_code=status.HTTP_201_CREATED)
def create_profile(user_data: UserCreate, db: Session = Depends(get_db)):
    email = user_data.email.strip().lower()
    if not email or "@" not in email:
        raise HTTPException(status_code=400, detail="A valid email is required")

    if _find_user_by_email(db, email):
        raise HTTPException(status_code=400, detail="User already exists")

    user = User(email=email, role=(user_data.role or "user").strip() or "user")
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email
        db.rollback()
        logger.warning("Duplicate signup for %s", email)
        raise HTTPException(status_code=400, detail="User already exists")
    db.refresh(user)
    logger.info("Created user %s", user.id)

    token = create_access_token(data={"sub": str(user.id)})

    return UserCreated(
        message="User profile successfully created",
        access_token=token,
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
def get_my_user_info(current_user: User = Depends(get_current_user)):
    return current_user
