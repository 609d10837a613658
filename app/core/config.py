"""
Basic configuration

- CORS origins for development and production
- Local document storage location and key
- Cloud sync defaults
- Supports environment variables for deployment overrides
"""
import os

# Default localhost origins for development
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:8081",
]

# Get additional CORS origins from environment variable
ADDITIONAL_CORS_ORIGINS = os.getenv("CORS_ORIGINS", "").split(",") if os.getenv("CORS_ORIGINS") else []

# Filter out empty strings from split
ADDITIONAL_CORS_ORIGINS = [origin.strip() for origin in ADDITIONAL_CORS_ORIGINS if origin.strip()]

# Combine default and additional origins
CORS_ORIGINS = DEFAULT_CORS_ORIGINS + ADDITIONAL_CORS_ORIGINS

# Directory holding the key-value slots (one JSON file per key)
DATA_DIR = os.getenv("DATA_DIR", "data")

# Fixed key of the slot holding the whole application document
STORAGE_KEY = os.getenv("STORAGE_KEY", "preceptor_eval_data")

# Version stamped on freshly created documents
DOCUMENT_VERSION = os.getenv("DOCUMENT_VERSION", "1.0.0")

# Remote file name used by the cloud sync adapter
DRIVE_FILE_NAME = os.getenv("DRIVE_FILE_NAME", "preceptor_evaluations.json")

# Timeout for cloud sync requests (seconds)
DRIVE_TIMEOUT_SECONDS = float(os.getenv("DRIVE_TIMEOUT_SECONDS", "15"))
