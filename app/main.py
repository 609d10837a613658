"""
FastAPI app

- Preceptor evaluation tracking: profile, students, session evaluations
- Progress views derived from the stored evaluations
- Export/import and Google Drive sync of the whole document
- CORS configured for local front-end development
- Basic health check
"""
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file before reading config
# Project root is the parent of app/
load_dotenv(dotenv_path=Path(__file__).parent.parent / '.env')

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import router
from app.core.config import CORS_ORIGINS
from app.api.middleware import TimingMiddleware

app = FastAPI(title="Preceptor Evaluations")

# Logs request duration for all requests
app.add_middleware(TimingMiddleware)

# CORS middleware configuration
# Uses CORS_ORIGINS from config (env var); Authorization header carries the Drive token
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)

app.include_router(router, prefix="/api/v1")


@app.get("/")
async def root():
    """
    Basic health check
    """
    return {"status": "ok"}
