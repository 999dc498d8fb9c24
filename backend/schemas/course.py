from datetime import datetime
from pydantic import BaseModel


class CourseRead(BaseModel):
    id: str
    title: str
    description: str | None
    category: str | None
    level: str
    is_published: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class CourseList(BaseModel):
    courses: list[CourseRead]


class CourseCategoryList(BaseModel):
    categories: list[str]
