from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from pydantic import BaseModel
from typing import Optional

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.services import categories as category_service
from app.api.serializers import serialize_category

router = APIRouter(prefix="/api/categories", tags=["categories"])


class CategoryCreate(BaseModel):
    name: Optional[str] = None


@router.get("")
def get_categories(db: Session = Depends(get_db)):
    return [serialize_category(c) for c in category_service.list_categories(db)]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_category(
    data: CategoryCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return serialize_category(category_service.create_category(db, data.name))
