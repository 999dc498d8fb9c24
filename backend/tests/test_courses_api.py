from sqlalchemy.exc import OperationalError

from database import get_db
from main import app
from models.course import Course
from routers.courses import unique_categories


def test_unique_categories():
    assert unique_categories(["Science", None, "", "  ", "Math", "Science", " Art "]) == ["Art", "Math", "Science"]
    assert unique_categories([]) == []


async def test_course_categories_are_clean_and_sorted(client, db):
    for index, category in enumerate(["Science", None, "", "  ", "Math", "Science", " Art "]):
        db.add(Course(title=f"Course {index}", category=category, is_published=True))
    await db.commit()

    response = await client.get("/api/courses/categories")
    assert response.status_code == 200
    assert response.json() == {"categories": ["Art", "Math", "Science"]}


async def test_course_categories_empty(client):
    response = await client.get("/api/courses/categories")
    assert response.json() == {"categories": []}


async def test_course_categories_store_failure(client):
    class BrokenSession:
        async def execute(self, *args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("database is locked"))

    async def broken_db():
        yield BrokenSession()

    app.dependency_overrides[get_db] = broken_db
    response = await client.get("/api/courses/categories")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch categories"}


async def test_list_published_courses(client, db):
    db.add_all([
        Course(title="Algebra", category="Math", is_published=True),
        Course(title="Draft", category="Math", is_published=False),
        Course(title="Cells", category="Science", is_published=True),
    ])
    await db.commit()

    response = await client.get("/api/courses")
    assert sorted(c["title"] for c in response.json()["courses"]) == ["Algebra", "Cells"]

    response = await client.get("/api/courses", params={"category": "Math"})
    assert [c["title"] for c in response.json()["courses"]] == ["Algebra"]
