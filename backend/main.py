import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from database import init_db
from seed import seed
from routers import (
    auth, courses, categories, quiz_generation, quiz_validation, admin_quizzes, quizzes, quiz_attempts,
)
from services.auth import AuthError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    await seed()
    yield


app = FastAPI(title="Course Platform API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError):
    logger.warning("Auth failed for %s: %s", request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "code": "AUTH_REQUIRED"},
    )


app.include_router(auth.router)
app.include_router(courses.router)
app.include_router(categories.router)
app.include_router(quiz_generation.router)
app.include_router(quiz_validation.router)
app.include_router(admin_quizzes.router)
app.include_router(quizzes.router)
app.include_router(quiz_attempts.router)


@app.get("/api/health")
async def health():
    return {"status": "ok"}
