"""Seed default categories.

By default this is non-destructive and safe to run on app startup.
Use CLI flags for maintenance operations.
"""
import argparse
import asyncio
import logging

from sqlalchemy import select

from database import init_db, async_session
from models.category import Category
from models.user import User
from services.auth import create_access_token, determine_role

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"name": "Grammar", "description": "English grammar rules and structures", "color": "#10b981", "icon": "type"},
    {"name": "Vocabulary", "description": "Word learning and usage", "color": "#f59e0b", "icon": "book"},
    {"name": "Pronunciation", "description": "Speech and pronunciation practice", "color": "#ef4444", "icon": "mic"},
    {"name": "Speaking", "description": "Conversational English skills", "color": "#8b5cf6", "icon": "message-circle"},
    {"name": "Writing", "description": "Written communication skills", "color": "#06b6d4", "icon": "pen-tool"},
    {"name": "Business English", "description": "Professional workplace English", "color": "#84cc16", "icon": "briefcase"},
    {"name": "Literature", "description": "English literature and analysis", "color": "#ec4899", "icon": "book-open"},
    {"name": "Test Preparation", "description": "IELTS, TOEFL, and other exam prep", "color": "#64748b", "icon": "award"},
]


async def seed(session_factory=async_session, *, category_type: str = "course") -> int:
    """Insert any default category that does not exist yet. Returns the number added."""
    added = 0
    async with session_factory() as session:
        existing = set((await session.execute(select(Category.name))).scalars().all())
        for entry in DEFAULT_CATEGORIES:
            if entry["name"] in existing:
                continue
            session.add(Category(type=category_type, **entry))
            added += 1
        await session.commit()
    logger.info("Seeded %d default categories", added)
    return added


async def issue_token(email: str, name: str = "") -> str:
    """Create (or reuse) a user and return a signed access token for it."""
    async with async_session() as session:
        user = (await session.execute(select(User).where(User.email == email))).scalar_one_or_none()
        if user is None:
            user = User(email=email, name=name or email.split("@")[0], role=determine_role(email))
            session.add(user)
            await session.commit()
            await session.refresh(user)
        return create_access_token({"id": user.id, "email": user.email})


async def main(args):
    await init_db()
    added = await seed()
    print(f"Seeding complete. Added categories: {added}")
    if args.issue_token:
        token = await issue_token(args.issue_token)
        print(f"Access token for {args.issue_token}:\n{token}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed default categories.")
    parser.add_argument(
        "--issue-token",
        metavar="EMAIL",
        help="Create the user if needed and print an access token for it.",
    )
    asyncio.run(main(parser.parse_args()))
