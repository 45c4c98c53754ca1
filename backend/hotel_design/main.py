import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

# Load environment variables
load_dotenv()

from hotel_design.api.routes import chat, pipeline, projects, settings
from hotel_design.core.config import settings as app_settings
from hotel_design.db.database import connect_db, disconnect_db
from hotel_design.services.pipeline_runtime import start_pipeline, stop_pipeline

logging.basicConfig(
    level=app_settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Hotel Design API",
    version="1.0.0",
    description="Guided hotel setup, design editing and the compliance/cost pipeline"
)

# Attach the chat limiter to app state
app.state.limiter = chat.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(chat.router, prefix="/api")
app.include_router(projects.router, prefix="/api")
app.include_router(settings.router, prefix="/api")
app.include_router(pipeline.router)


@app.get("/")
async def root():
    return {
        "name": "Hotel Design API",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
async def health():
    return {"status": "healthy"}


@app.on_event("startup")
async def startup():
    """Connect to database and start the pipeline worker."""
    await connect_db()
    await start_pipeline()


@app.on_event("shutdown")
async def shutdown():
    """Stop the pipeline worker and disconnect from database."""
    await stop_pipeline()
    await disconnect_db()
