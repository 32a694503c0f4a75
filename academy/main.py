from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

# --- ADMIN ROUTES ---
from academy.api.v1.admin import courses as admin_courses
from academy.api.v1.admin import messages as admin_messages
from academy.api.v1.admin import promocodes as admin_promocodes
from academy.api.v1.admin import quizzes as admin_quizzes
from academy.api.v1.admin import subscriptions as admin_subscriptions
from academy.api.v1.admin import users as admin_users

# ===== IMPORT ROUTERS =====
from academy.api.v1 import auth

# --- PARENT ROUTES ---
from academy.api.v1.parent import children

# --- SHARED ROUTES ---
from academy.api.v1.shares import certificates, timetables

# --- TEACHER ROUTES ---
from academy.api.v1.teacher import chapter
from academy.api.v1.teacher import courses as teacher_courses
from academy.api.v1.teacher import homework as teacher_homework
from academy.api.v1.teacher import livestreams as teacher_livestreams
from academy.api.v1.teacher import quizzes as teacher_quizzes
from academy.api.v1.teacher import students as teacher_students

# --- USER ROUTES ---
from academy.api.v1.user import balance, dashboard, learning
from academy.api.v1.user import courses as user_courses
from academy.api.v1.user import homework as user_homework
from academy.api.v1.user import livestreams as user_livestreams
from academy.api.v1.user import quiz as user_quiz
from academy.api.v1.user import subscriptions as user_subscriptions
from academy.core.scheduler import scheduler, start_scheduler
from academy.core.settings import settings

# --- MIDDLEWARE ---
from academy.middleware.request_context import RequestContextMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):

    # ================================
    # 1) GLOBAL HTTP CLIENT
    # ================================
    app.state.http = httpx.AsyncClient(timeout=30)
    logger.info("🌐 HTTP client started")

    # ================================
    # 2) START APSCHEDULER
    # ================================
    start_scheduler()
    logger.info("⏱ Scheduler started")

    try:
        yield
    finally:
        # ================================
        # 3) CLOSE HTTP CLIENT
        # ================================
        await app.state.http.aclose()
        logger.info("🌐 HTTP client closed")

        # ================================
        # 4) STOP SCHEDULER
        # ================================
        try:
            scheduler.shutdown(wait=False)
            logger.info("🛑 Scheduler stopped")
        except Exception as e:
            logger.warning(f"⚠ Scheduler shutdown error: {e}")


# ===== APP CONFIG =====
app = FastAPI(
    title="Academy API",
    description="Courses, quizzes, live streams and subscriptions for students, parents and teachers",
    version="0.1.0",
    lifespan=lifespan,
)

# --- CORS ---
origins = [
    settings.FRONTEND_URL,
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


app.add_middleware(RequestContextMiddleware)
prefix = "/api/v1"

# ===== REGISTER ROUTERS =====

# --- Share ---
app.include_router(auth.router, prefix=prefix)
app.include_router(timetables.router, prefix=prefix)
app.include_router(certificates.router, prefix=prefix)

# --- USER ROUTES ---
app.include_router(user_courses.router, prefix=prefix)
app.include_router(learning.router, prefix=prefix)
app.include_router(user_homework.router, prefix=prefix)
app.include_router(user_quiz.router, prefix=prefix)
app.include_router(user_livestreams.router, prefix=prefix)
app.include_router(user_subscriptions.router, prefix=prefix)
app.include_router(balance.router, prefix=prefix)
app.include_router(dashboard.router, prefix=prefix)

# --- PARENT ROUTES ---
app.include_router(children.router, prefix=prefix)

# --- TEACHER ROUTES ---
app.include_router(teacher_courses.router, prefix=prefix)
app.include_router(chapter.router, prefix=prefix)
app.include_router(teacher_quizzes.router, prefix=prefix)
app.include_router(teacher_livestreams.router, prefix=prefix)
app.include_router(teacher_students.router, prefix=prefix)
app.include_router(teacher_homework.router, prefix=prefix)

# --- ADMIN ROUTES ---
app.include_router(admin_users.router, prefix=prefix)
app.include_router(admin_courses.router, prefix=prefix)
app.include_router(admin_quizzes.router, prefix=prefix)
app.include_router(admin_subscriptions.router, prefix=prefix)
app.include_router(admin_promocodes.router, prefix=prefix)
app.include_router(admin_messages.router, prefix=prefix)


# ===== ROOT =====
@app.get("/")
async def hello_world():
    return {"message": "Academy API is running"}


if __name__ == "__main__":
    uvicorn.run("academy.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
