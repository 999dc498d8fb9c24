import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from database import Base

DEFAULT_COLOR = "#6366f1"
DEFAULT_ICON = "folder"


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    color: Mapped[str] = mapped_column(String, nullable=False, default=DEFAULT_COLOR)
    icon: Mapped[str] = mapped_column(String, nullable=False, default=DEFAULT_ICON)
    type: Mapped[str] = mapped_column(String, nullable=False)  # "course", "quiz", ...
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc)
    )
