import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.course import Course
from schemas.course import CourseRead, CourseList, CourseCategoryList

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/courses", tags=["courses"])


def unique_categories(values) -> list[str]:
    """Drop null and blank labels, trim, dedupe and sort."""
    return sorted({v.strip() for v in values if isinstance(v, str) and v.strip()})


@router.get("", response_model=CourseList)
async def list_courses(category: str | None = None, db: AsyncSession = Depends(get_db)):
    query = select(Course).where(Course.is_published.is_(True))
    if category:
        query = query.where(Course.category == category)
    try:
        result = await db.execute(query.order_by(Course.created_at.desc()))
    except SQLAlchemyError as e:
        logger.error("Error fetching courses: %s", e)
        return JSONResponse(status_code=500, content={"error": "Failed to fetch courses"})
    return CourseList(courses=[CourseRead.model_validate(c) for c in result.scalars().all()])


@router.get("/categories", response_model=CourseCategoryList)
async def list_course_categories(db: AsyncSession = Depends(get_db)):
    try:
        result = await db.execute(select(Course.category).distinct())
    except SQLAlchemyError as e:
        logger.error("Error fetching course categories: %s", e)
        return JSONResponse(status_code=500, content={"error": "Failed to fetch categories"})
    return CourseCategoryList(categories=unique_categories(result.scalars().all()))
