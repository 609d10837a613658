"""
Database module

Contains both data models (schemas) and storage operations.
"""

# Export schemas
from app.database.schemas import (
    AppData,
    PreceptorProfile,
    StudentProfile,
    ClinicalSkillScore,
    EvaluationScores,
    TeachingTopicEntry,
    SessionEvaluation,
)

# Export storage functions for convenience
from app.database.storage import (
    read_json,
    write_json,
    default_document,
    EvaluationStore,
    ImportParseError,
    DuplicateRecordError,
    get_store,
    set_store,
)

# Also export as 'storage' module
from app.database import storage

__all__ = [
    # Schemas
    "AppData",
    "PreceptorProfile",
    "StudentProfile",
    "ClinicalSkillScore",
    "EvaluationScores",
    "TeachingTopicEntry",
    "SessionEvaluation",
    # Storage
    "read_json",
    "write_json",
    "default_document",
    "EvaluationStore",
    "ImportParseError",
    "DuplicateRecordError",
    "get_store",
    "set_store",
    # Storage module
    "storage",
]
