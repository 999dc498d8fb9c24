"""Admin category management. Deleting a category deactivates it."""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.category import Category, DEFAULT_COLOR, DEFAULT_ICON
from schemas.category import CategoryCreate, CategoryUpdate, CategoryRead, CategoryList
from services.auth import AuthenticatedUser, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/categories", tags=["admin"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("", response_model=CategoryList)
async def list_categories(
    include_inactive: bool = False,
    db: AsyncSession = Depends(get_db),
    _admin: AuthenticatedUser = Depends(require_admin),
):
    query = select(Category).order_by(Category.name)
    if not include_inactive:
        query = query.where(Category.is_active.is_(True))
    try:
        result = await db.execute(query)
    except SQLAlchemyError as e:
        logger.error("Error fetching categories: %s", e)
        return _error(500, "Internal server error")
    return CategoryList(categories=[CategoryRead.model_validate(c) for c in result.scalars().all()])


@router.post("", status_code=201)
async def create_category(
    data: CategoryCreate,
    db: AsyncSession = Depends(get_db),
    admin: AuthenticatedUser = Depends(require_admin),
):
    if not (data.name and data.name.strip()) or not data.type:
        return _error(400, "Missing required fields")

    category = Category(
        name=data.name.strip(),
        description=data.description or None,
        color=data.color or DEFAULT_COLOR,
        icon=data.icon or DEFAULT_ICON,
        type=data.type,
        is_active=True,
    )
    try:
        db.add(category)
        await db.commit()
        await db.refresh(category)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error creating category: %s", e)
        return _error(500, "Internal server error")

    logger.info("Category %s created by %s", category.id, admin.email)
    return {"category": CategoryRead.model_validate(category)}


@router.put("")
async def update_category(
    data: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
    _admin: AuthenticatedUser = Depends(require_admin),
):
    if not data.id or not (data.name and data.name.strip()) or not data.type:
        return _error(400, "Missing required fields")

    try:
        category = await db.get(Category, data.id)
        if not category:
            return _error(404, "Category not found")
        category.name = data.name.strip()
        category.description = data.description or None
        category.color = data.color or DEFAULT_COLOR
        category.icon = data.icon or DEFAULT_ICON
        category.type = data.type
        await db.commit()
        await db.refresh(category)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error updating category %s: %s", data.id, e)
        return _error(500, "Internal server error")

    return {"category": CategoryRead.model_validate(category)}


@router.delete("")
async def delete_category(
    id: str | None = None,
    db: AsyncSession = Depends(get_db),
    _admin: AuthenticatedUser = Depends(require_admin),
):
    if not id:
        return _error(400, "Category ID is required")

    try:
        category = await db.get(Category, id)
        if not category:
            return _error(404, "Category not found")
        category.is_active = False
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error deleting category %s: %s", id, e)
        return _error(500, "Internal server error")

    return {"success": True}
