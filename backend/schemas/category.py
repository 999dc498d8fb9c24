from datetime import datetime
from pydantic import BaseModel


class CategoryCreate(BaseModel):
    # Required fields are checked by the route so a missing one is a 400, not a 422.
    name: str | None = None
    description: str | None = None
    color: str | None = None
    icon: str | None = None
    type: str | None = None


class CategoryUpdate(CategoryCreate):
    id: str | None = None


class CategoryRead(BaseModel):
    id: str
    name: str
    description: str | None
    color: str
    icon: str
    type: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class CategoryList(BaseModel):
    categories: list[CategoryRead]
