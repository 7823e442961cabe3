"""
Main FastAPI application
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config import settings
from src.database.connection import dispose_database, init_database
from src.routes import admin, assessments, health, profiles, questionnaire


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await dispose_database()


# Create FastAPI app
app = FastAPI(
    title="ASD Screening Backend API",
    description="Backend API for the autism risk screening questionnaire",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)

# Initialize database
init_database()

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(questionnaire.router, tags=["Questionnaire"])
app.include_router(assessments.router, tags=["Assessments"])
app.include_router(profiles.router, tags=["Profiles"])
app.include_router(admin.router, tags=["Admin"])
