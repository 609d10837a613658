"""
Shared fixtures - every test gets its own data directory
"""
import shutil
import tempfile
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.database import storage


@pytest.fixture
def temp_data_dir():
    """Create temporary data directory and point the process-wide store at it"""
    temp_dir = tempfile.mkdtemp()
    storage.set_store(storage.EvaluationStore(data_dir=temp_dir))

    yield temp_dir

    storage.set_store(None)
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def store(temp_data_dir):
    """Store backed by the temporary data directory"""
    return storage.get_store()


@pytest.fixture
def client(temp_data_dir):
    """Test client"""
    return TestClient(app)


@pytest.fixture
def evaluation_payload():
    """Factory for evaluation bodies as the front-end sends them (camelCase keys)"""
    def _make(**overrides):
        payload = {
            "studentId": "student-1",
            "date": "2024-01-10",
            "weekNumber": 1,
            "sessionType": "Clinic Day",
            "patientEncounters": 4,
            "scores": {
                "clinicalKnowledge": 3,
                "clinicalReasoning": 3,
                "patientCommunication": 3,
                "professionalBehavior": 3,
                "technicalSkills": 3,
                "documentation": 3,
                "teamwork": 3,
                "initiative": 3,
            },
            "strengths": "Thorough histories",
            "areasForImprovement": "Concise presentations",
            "actionPlan": "Practice SOAP notes",
            "preceptorNotes": "",
            "overallRating": 3,
        }
        payload.update(overrides)
        return payload
    return _make
