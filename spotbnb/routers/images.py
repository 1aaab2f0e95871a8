from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from spotbnb.core.deps import get_current_user
from spotbnb.db import crud
from spotbnb.db.session import get_db
from spotbnb.models.users import User
from spotbnb.schemas.base import MessageResponse
from spotbnb.services.authorization import require_author, require_found, require_owner

router = APIRouter(prefix="/api", tags=["images"])


@router.delete("/spot-images/{image_id}", response_model=MessageResponse)
def delete_spot_image(
    image_id: int,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    image = require_found(crud.get_spot_image(db, image_id), "Spot Image")
    require_owner(image.spot, current)
    crud.delete_spot_image(db, image)
    return MessageResponse(message="Successfully deleted", status_code=200)


@router.delete("/review-images/{image_id}", response_model=MessageResponse)
def delete_review_image(
    image_id: int,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    image = require_found(crud.get_review_image(db, image_id), "Review Image")
    require_author(image.review, current)
    crud.delete_review_image(db, image)
    return MessageResponse(message="Successfully deleted", status_code=200)
