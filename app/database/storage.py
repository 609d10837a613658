"""
Simple JSON file storage

- The whole application state is one JSON document (AppData)
- The document lives in a single key-value slot: {data_dir}/{storage_key}.json
- Every mutation reads the full document, changes one collection, writes it back
- Corrupt or missing data is treated as an empty document, never an error
- A lock serialises read-modify-write within the process; across processes
  the last writer wins
"""
import json
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional
from pydantic import ValidationError

from app.core.config import DATA_DIR, STORAGE_KEY, DOCUMENT_VERSION
from app.database.schemas import AppData, PreceptorProfile, StudentProfile, SessionEvaluation
from app.services.reference import phase_for_week
from app.services.utils import utc_now


class ImportParseError(ValueError):
    """Raised when import text is not a valid document"""


class DuplicateRecordError(ValueError):
    """Raised when adding a record whose id already exists in its collection"""


def read_json(filepath: str) -> Optional[Any]:
    """
    Read JSON file, return None if not found, not UTF-8 or unparsable
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError, UnicodeDecodeError):
        return None


def write_json(filepath: str, data: Any):
    """
    Write data to JSON file
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def default_document() -> AppData:
    """
    Empty document used on first run and whenever stored data is unusable
    """
    return AppData(version=DOCUMENT_VERSION)


def document_to_json(data: AppData) -> Dict[str, Any]:
    """
    Convert document to its JSON form (camelCase keys, ISO timestamps)
    """
    return data.model_dump(mode="json", by_alias=True)


class EvaluationStore:
    """
    Owns the persisted AppData document

    All mutating operations persist synchronously and return the new document.
    Updates and deletes by unknown id are no-ops.
    """

    def __init__(self, data_dir: str = DATA_DIR, storage_key: str = STORAGE_KEY):
        self.data_dir = Path(data_dir)
        self.storage_key = storage_key
        self._lock = Lock()

    @property
    def path(self) -> Path:
        return self.data_dir / f"{self.storage_key}.json"

    def load(self) -> AppData:
        """
        Load stored document, or an empty default if absent or corrupt
        """
        raw = read_json(str(self.path))
        if raw is None:
            return default_document()
        try:
            return AppData.model_validate(raw)
        except ValidationError as e:
            print(f"[Storage] WARNING: stored document at {self.path} is not valid ({e.error_count()} errors). Using empty document.")
            return default_document()

    def save(self, data: AppData) -> AppData:
        """
        Write the whole document to the slot
        """
        write_json(str(self.path), document_to_json(data))
        return data

    def replace_preceptor(self, profile: PreceptorProfile) -> AppData:
        with self._lock:
            data = self.load()
            data.preceptor = profile
            return self.save(data)

    def add_student(self, student: StudentProfile) -> AppData:
        with self._lock:
            data = self.load()
            if any(s.id == student.id for s in data.students):
                raise DuplicateRecordError(f"Student {student.id} already exists")
            data.students.append(student)
            return self.save(data)

    def update_student(self, student: StudentProfile) -> AppData:
        """
        Replace student by id (no-op if id not found)
        """
        with self._lock:
            data = self.load()
            for index, existing in enumerate(data.students):
                if existing.id == student.id:
                    data.students[index] = student
                    break
            return self.save(data)

    def delete_student(self, student_id: str) -> AppData:
        """
        Delete student and every evaluation referencing it
        """
        with self._lock:
            data = self.load()
            data.students = [s for s in data.students if s.id != student_id]
            data.evaluations = [e for e in data.evaluations if e.student_id != student_id]
            return self.save(data)

    def add_evaluation(self, evaluation: SessionEvaluation) -> AppData:
        with self._lock:
            data = self.load()
            if any(e.id == evaluation.id for e in data.evaluations):
                raise DuplicateRecordError(f"Evaluation {evaluation.id} already exists")
            data.evaluations.append(_stamp_evaluation(evaluation))
            return self.save(data)

    def update_evaluation(self, evaluation: SessionEvaluation) -> AppData:
        """
        Replace evaluation by id (no-op if id not found, never inserts)
        """
        with self._lock:
            data = self.load()
            for index, existing in enumerate(data.evaluations):
                if existing.id == evaluation.id:
                    data.evaluations[index] = _stamp_evaluation(evaluation)
                    break
            return self.save(data)

    def delete_evaluation(self, evaluation_id: str) -> AppData:
        with self._lock:
            data = self.load()
            data.evaluations = [e for e in data.evaluations if e.id != evaluation_id]
            return self.save(data)

    def export_snapshot(self) -> str:
        """
        Serialize the full document as pretty-printed JSON text
        """
        data = self.load()
        return json.dumps(document_to_json(data), indent=2, ensure_ascii=False)

    def import_snapshot(self, text: str) -> AppData:
        """
        Replace stored state with the document parsed from text

        Raises:
            ImportParseError: If text is not JSON or not a valid document.
                Stored state is left untouched in that case.
        """
        try:
            data = AppData.model_validate_json(text)
        except ValidationError as e:
            raise ImportParseError(_describe_import_error(e)) from e
        with self._lock:
            return self.save(data)

    def clear(self) -> AppData:
        """
        Reset the slot to an empty document
        """
        with self._lock:
            return self.save(default_document())


def _stamp_evaluation(evaluation: SessionEvaluation) -> SessionEvaluation:
    """
    Recompute phase from week number and refresh updated_at
    """
    return evaluation.model_copy(update={
        "phase": phase_for_week(evaluation.week_number),
        "updated_at": utc_now(),
    })


def _describe_import_error(error: ValidationError) -> str:
    first = error.errors()[0] if error.errors() else {}
    if first.get("type") == "json_invalid":
        return f"Import text is not valid JSON: {first.get('msg', '')}"
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"Import text is not a valid document ({error.error_count()} errors, first at '{location}': {first.get('msg', '')})"


_store: Optional[EvaluationStore] = None


def get_store() -> EvaluationStore:
    """
    Process-wide store using the configured data directory and storage key
    """
    global _store
    if _store is None:
        _store = EvaluationStore()
    return _store


def set_store(store: Optional[EvaluationStore]):
    """
    Swap the process-wide store (used by tests and alternative deployments)
    """
    global _store
    _store = store
