"""
Favorite API Routes
A user's saved spaces
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from flexispace.database import get_db
from flexispace.dependencies.auth import get_current_active_user
from flexispace.models.space import Space
from flexispace.models.user import User
from flexispace.routes.space import get_space_or_404
from flexispace.schemas.space import SpaceResponse

router = APIRouter(prefix="/favorites", tags=["Favorites"])


def favorite_spaces(db: Session, user: User) -> List[Space]:
    """Favorited spaces that are still active"""
    ids = []
    for value in user.favorite_ids or []:
        try:
            ids.append(UUID(value))
        except ValueError:
            continue
    if not ids:
        return []
    return db.query(Space).filter(Space.id.in_(ids), Space.is_active.is_(True)).all()


@router.get("/", response_model=List[SpaceResponse])
def list_favorites(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return favorite_spaces(db, current_user)


@router.post("/{space_id}")
def add_favorite(
    space_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Add a space to the current user's favorites"""
    space = get_space_or_404(db, space_id)

    favorites = list(current_user.favorite_ids or [])
    if str(space.id) not in favorites:
        # Reassign so the JSON column is flagged as changed
        current_user.favorite_ids = favorites + [str(space.id)]
        db.commit()

    return {"favorite_ids": current_user.favorite_ids}


@router.delete("/{space_id}")
def remove_favorite(
    space_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Remove a space from the current user's favorites"""
    favorites = list(current_user.favorite_ids or [])
    if str(space_id) in favorites:
        current_user.favorite_ids = [value for value in favorites if value != str(space_id)]
        db.commit()

    return {"favorite_ids": current_user.favorite_ids}
