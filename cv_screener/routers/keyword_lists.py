from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from cv_screener.database import get_db
from cv_screener.models.keyword_list import KeywordList
from cv_screener.models.profile import Profile
from cv_screener.routers.auth_deps import require_caller
from cv_screener.schemas.keyword_list import KeywordListCreate, KeywordListResponse, ProfileResponse

router = APIRouter()


@router.post("/keyword-lists", response_model=KeywordListResponse, status_code=status.HTTP_201_CREATED)
def create_keyword_list(
    keyword_list_in: KeywordListCreate,
    db: Session = Depends(get_db),
    caller: Profile = Depends(require_caller),
):
    """Save a named keyword set that can be reused as keyword_list_id."""
    keyword_list = KeywordList(
        user_id=caller.id,
        name=keyword_list_in.name,
        keywords=keyword_list_in.keywords,
    )
    db.add(keyword_list)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(keyword_list)
    return keyword_list


@router.get("/keyword-lists", response_model=List[KeywordListResponse])
def list_keyword_lists(
    db: Session = Depends(get_db),
    caller: Profile = Depends(require_caller),
):
    return db.query(KeywordList).filter(
        KeywordList.user_id == caller.id
    ).order_by(KeywordList.id).all()


@router.get("/profile", response_model=ProfileResponse)
def get_profile(caller: Profile = Depends(require_caller)):
    return caller
