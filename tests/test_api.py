"""
API route tests - verifies endpoints and the persisted data file
"""
import json
import httpx
import pytest

from app.api import sync as sync_api
from app.services.sync import drive


def create_student(client, name="Alex Kim", **fields):
    payload = {"name": name, "program": "MD", "yearLevel": "MS3", "startDate": "2024-01-02"}
    payload.update(fields)
    response = client.post("/api/v1/students", json=payload)
    assert response.status_code == 200
    return response.json()


def create_evaluation(client, payload):
    response = client.post("/api/v1/evaluations", json=payload)
    assert response.status_code == 200
    return response.json()


def test_root(client):
    """Test root endpoint"""
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_timing_header(client):
    """Test every response carries the processing time header"""
    response = client.get("/api/v1/students")
    assert response.status_code == 200
    assert "X-Process-Time-Ms" in response.headers


def test_preceptor_profile(client, store):
    """Test preceptor profile starts empty and is replaced wholesale"""
    response = client.get("/api/v1/preceptor")
    assert response.status_code == 200
    assert response.json()["name"] == ""

    response = client.put("/api/v1/preceptor", json={"name": "Dr. Lee", "specialty": "Internal Medicine"})
    assert response.status_code == 200
    assert response.json()["specialty"] == "Internal Medicine"

    response = client.put("/api/v1/preceptor", json={"name": "Dr. Park"})
    assert response.json()["specialty"] == ""
    assert store.load().preceptor.name == "Dr. Park"


def test_create_student(client, store):
    """Test creating a student and verify the data file is created"""
    student = create_student(client)

    assert student["id"]
    assert student["yearLevel"] == "MS3"
    assert student["clinicalSkillScores"] == []

    assert store.path.exists()
    with open(store.path, "r", encoding="utf-8") as f:
        saved = json.load(f)
    assert saved["students"][0]["id"] == student["id"]
    assert saved["students"][0]["name"] == "Alex Kim"


def test_create_student_requires_name(client):
    """Test validation errors return 422"""
    response = client.post("/api/v1/students", json={"program": "MD"})
    assert response.status_code == 422


def test_create_student_duplicate_id(client):
    """Test a client-supplied id that already exists is rejected"""
    create_student(client, id="fixed-id")
    response = client.post("/api/v1/students", json={"id": "fixed-id", "name": "Someone Else"})
    assert response.status_code == 409


def test_get_and_list_students(client):
    """Test students are listed in insertion order"""
    first = create_student(client, name="Alex Kim")
    second = create_student(client, name="Sam Ortiz")

    response = client.get("/api/v1/students")
    assert [s["id"] for s in response.json()] == [first["id"], second["id"]]

    response = client.get(f"/api/v1/students/{second['id']}")
    assert response.status_code == 200
    assert response.json()["name"] == "Sam Ortiz"

    response = client.get("/api/v1/students/nonexistent")
    assert response.status_code == 404


def test_update_student(client):
    """Test replacing a student, including clinical skill ratings"""
    student = create_student(client)
    payload = dict(student, name="Alex Kim-Lee", clinicalSkillScores=[
        {"skillId": "prof-min-a", "rating": "demonstrating", "date": "2024-02-01"},
    ])

    response = client.put(f"/api/v1/students/{student['id']}", json=payload)
    assert response.status_code == 200
    assert response.json()["name"] == "Alex Kim-Lee"
    assert response.json()["clinicalSkillScores"][0]["rating"] == "demonstrating"


def test_update_unknown_student_not_inserted(client):
    """Test updating a missing student returns 404 and adds nothing"""
    response = client.put("/api/v1/students/ghost", json={"name": "Ghost"})
    assert response.status_code == 404
    assert client.get("/api/v1/students").json() == []


def test_delete_student_cascades(client, evaluation_payload):
    """Test deleting a student deletes only their evaluations"""
    alex = create_student(client, name="Alex Kim")
    sam = create_student(client, name="Sam Ortiz")
    create_evaluation(client, evaluation_payload(studentId=alex["id"]))
    create_evaluation(client, evaluation_payload(studentId=alex["id"], weekNumber=14))
    kept = create_evaluation(client, evaluation_payload(studentId=sam["id"]))

    response = client.delete(f"/api/v1/students/{alex['id']}")
    assert response.status_code == 200
    assert response.json()["evaluations_deleted"] == 2

    remaining = client.get("/api/v1/evaluations").json()
    assert [e["id"] for e in remaining] == [kept["id"]]

    response = client.delete(f"/api/v1/students/{alex['id']}")
    assert response.status_code == 404


def test_create_evaluation_derives_phase(client, evaluation_payload):
    """Test phase is recomputed from week number and client phase is ignored"""
    evaluation = create_evaluation(client, evaluation_payload(weekNumber=20, phase="early"))

    assert evaluation["id"]
    assert evaluation["phase"] == "middle"
    assert evaluation["weekNumber"] == 20
    assert evaluation["createdAt"]
    assert evaluation["scores"]["clinicalKnowledge"] == 3


@pytest.mark.parametrize("overrides", [
    {"weekNumber": 0},
    {"weekNumber": 53},
    {"overallRating": 6},
    {"date": "01/10/2024"},
    {"scores": {"clinicalKnowledge": 0}},
])
def test_create_evaluation_validation(client, evaluation_payload, overrides):
    """Test out-of-range values are rejected"""
    response = client.post("/api/v1/evaluations", json=evaluation_payload(**overrides))
    assert response.status_code == 422


def test_get_evaluation(client, evaluation_payload):
    """Test fetching one evaluation by id"""
    evaluation = create_evaluation(client, evaluation_payload(objectivesAchieved=[1, "2-final-a"]))

    response = client.get(f"/api/v1/evaluations/{evaluation['id']}")
    assert response.status_code == 200
    assert response.json()["objectivesAchieved"] == [1, "2-final-a"]

    response = client.get("/api/v1/evaluations/nonexistent")
    assert response.status_code == 404


def test_update_evaluation(client, evaluation_payload):
    """Test replacing an evaluation keeps created_at and recomputes phase"""
    evaluation = create_evaluation(client, evaluation_payload(weekNumber=5))
    payload = dict(evaluation, weekNumber=40, strengths="Excellent presentations")

    response = client.put(f"/api/v1/evaluations/{evaluation['id']}", json=payload)
    assert response.status_code == 200
    updated = response.json()
    assert updated["phase"] == "final"
    assert updated["strengths"] == "Excellent presentations"
    assert updated["createdAt"] == evaluation["createdAt"]


def test_update_unknown_evaluation_not_inserted(client, evaluation_payload):
    """Test updating a missing evaluation returns 404 and adds nothing"""
    response = client.put("/api/v1/evaluations/ghost", json=evaluation_payload())
    assert response.status_code == 404
    assert client.get("/api/v1/evaluations").json() == []


def test_delete_evaluation(client, evaluation_payload):
    """Test deleting an evaluation"""
    evaluation = create_evaluation(client, evaluation_payload())

    response = client.delete(f"/api/v1/evaluations/{evaluation['id']}")
    assert response.status_code == 200
    assert client.get("/api/v1/evaluations").json() == []

    response = client.delete(f"/api/v1/evaluations/{evaluation['id']}")
    assert response.status_code == 404


def test_list_evaluations_filters_and_sorts(client, evaluation_payload):
    """Test student/phase filters and the sort options"""
    early = create_evaluation(client, evaluation_payload(date="2024-01-10", weekNumber=2, overallRating=2))
    middle = create_evaluation(client, evaluation_payload(date="2024-04-01", weekNumber=15, overallRating=5))
    other = create_evaluation(client, evaluation_payload(studentId="student-2", date="2024-09-01", weekNumber=35, overallRating=4))

    response = client.get("/api/v1/evaluations")
    assert [e["id"] for e in response.json()] == [other["id"], middle["id"], early["id"]]

    response = client.get("/api/v1/evaluations", params={"student_id": "student-1"})
    assert [e["id"] for e in response.json()] == [middle["id"], early["id"]]

    response = client.get("/api/v1/evaluations", params={"phase": "middle"})
    assert [e["id"] for e in response.json()] == [middle["id"]]

    response = client.get("/api/v1/evaluations", params={"sort_by": "rating"})
    assert [e["id"] for e in response.json()] == [middle["id"], other["id"], early["id"]]

    response = client.get("/api/v1/evaluations", params={"sort_by": "week"})
    assert [e["id"] for e in response.json()] == [other["id"], middle["id"], early["id"]]

    response = client.get("/api/v1/evaluations", params={"phase": "late"})
    assert response.status_code == 422


def test_dashboard(client, evaluation_payload):
    """Test headline statistics across all evaluations"""
    empty = client.get("/api/v1/dashboard").json()
    assert empty["evaluationCount"] == 0
    assert empty["averageOverall"] == 0.0
    assert empty["conditions"]["total"] == 56
    assert empty["objectives"]["total"] == 34

    create_student(client)
    create_evaluation(client, evaluation_payload(weekNumber=1, overallRating=2, conditionsSeen=["Asthma"]))
    create_evaluation(client, evaluation_payload(
        weekNumber=14, overallRating=4,
        objectivesAchieved=["1-middle-a"],
        teachingTopics=[{"category": "Cardiovascular", "topics": ["Syncope"]}],
    ))

    response = client.get("/api/v1/dashboard")
    assert response.status_code == 200
    summary = response.json()
    assert summary["studentCount"] == 1
    assert summary["evaluationCount"] == 2
    assert summary["averageOverall"] == 3.0
    assert summary["weeksLogged"] == 2
    assert summary["phaseCounts"] == {"early": 1, "middle": 1, "final": 0}
    assert summary["conditions"]["matched"] == ["Asthma"]
    assert summary["objectives"]["achieved"] == ["1-middle-a"]
    assert [t["category"] for t in summary["topics"]] == ["Cardiovascular"]
    assert len(summary["recentEvaluations"]) == 2


def test_student_progress(client, evaluation_payload):
    """Test per-student progress view"""
    student = create_student(client)
    low = {key: 2 for key in evaluation_payload()["scores"]}
    high = {key: 4 for key in evaluation_payload()["scores"]}
    create_evaluation(client, evaluation_payload(studentId=student["id"], weekNumber=20, scores=high, date="2024-05-01"))
    create_evaluation(client, evaluation_payload(studentId=student["id"], weekNumber=1, scores=low, date="2024-01-10"))

    response = client.get(f"/api/v1/progress/{student['id']}")
    assert response.status_code == 200
    progress = response.json()
    assert progress["sessionCount"] == 2
    assert progress["trend"] == {"firstMean": 2.0, "lastMean": 4.0, "delta": 2.0, "sessionCount": 2}
    assert [entry["weekNumber"] for entry in progress["timeline"]] == [1, 20]
    assert [p["sessionCount"] for p in progress["phases"]] == [1, 1, 0]
    assert len(progress["clinicalSkills"]) == 3

    response = client.get("/api/v1/progress/nonexistent")
    assert response.status_code == 404


def test_reference_tables(client):
    """Test the static taxonomies are served"""
    response = client.get("/api/v1/reference")
    assert response.status_code == 200
    tables = response.json()
    assert len(tables["scoreCategories"]) == 8
    assert tables["totalObjectiveExpectations"] == 34
    assert tables["phases"]["middle"]["label"] == "Middle Phase"


def test_export_import_round_trip(client, evaluation_payload):
    """Test an exported file re-imports to the same document"""
    create_student(client, id="student-1")
    create_evaluation(client, evaluation_payload(customConditions=["Sarcoidosis"]))

    response = client.get("/api/v1/export")
    assert response.status_code == 200
    assert "attachment" in response.headers["content-disposition"]
    exported = response.text

    client.delete("/api/v1/data")
    assert client.get("/api/v1/students").json() == []

    response = client.post("/api/v1/import", content=exported, headers={"Content-Type": "application/json"})
    assert response.status_code == 200
    assert client.get("/api/v1/export").text == exported


def test_import_file_upload(client):
    """Test importing an uploaded JSON file"""
    document = {"students": [{"id": "s1", "name": "Jordan Fox"}]}
    response = client.post(
        "/api/v1/import/file",
        files={"file": ("backup.json", json.dumps(document).encode("utf-8"), "application/json")},
    )
    assert response.status_code == 200
    assert client.get("/api/v1/students/s1").json()["name"] == "Jordan Fox"


def test_import_invalid_leaves_data_untouched(client):
    """Test a malformed import returns 422 and changes nothing"""
    create_student(client, id="student-1")

    response = client.post("/api/v1/import", content="not json at all")
    assert response.status_code == 422

    response = client.post("/api/v1/import", content=b"\xff\xfe\x00")
    assert response.status_code == 422

    assert [s["id"] for s in client.get("/api/v1/students").json()] == ["student-1"]


def test_clear_data(client, evaluation_payload):
    """Test deleting all data"""
    create_student(client)
    create_evaluation(client, evaluation_payload())

    response = client.delete("/api/v1/data")
    assert response.status_code == 200
    assert response.json()["students"] == []
    assert client.get("/api/v1/evaluations").json() == []


class FakeConnector:
    """Stands in for GoogleDriveConnector; keeps files in memory"""

    def __init__(self, files=None, error=None):
        self.files = files if files is not None else {}
        self.error = error

    async def save(self, text, file_name):
        if self.error:
            raise self.error
        self.files[file_name] = text
        return "file-123"

    async def load(self, file_name):
        if self.error:
            raise self.error
        return self.files.get(file_name)


@pytest.fixture
def fake_drive(monkeypatch):
    connector = FakeConnector()
    monkeypatch.setattr(sync_api.drive, "get_drive_connector", lambda token: connector)
    return connector


def test_sync_requires_token(client, fake_drive):
    """Test sync endpoints reject requests without a bearer token"""
    assert client.post("/api/v1/sync/drive/save").status_code == 401
    assert client.post("/api/v1/sync/drive/load", headers={"Authorization": "Basic abc"}).status_code == 401


def test_sync_save_and_load(client, fake_drive):
    """Test saving to Drive and loading it back replaces local data"""
    auth = {"Authorization": "Bearer token-abc"}
    create_student(client, id="student-1")

    response = client.post("/api/v1/sync/drive/save", headers=auth)
    assert response.status_code == 200
    assert response.json()["status"] == "saved"
    assert response.json()["file_id"] == "file-123"
    saved_text = fake_drive.files["preceptor_evaluations.json"]
    assert json.loads(saved_text)["students"][0]["id"] == "student-1"

    client.delete("/api/v1/data")

    response = client.post("/api/v1/sync/drive/load", headers=auth)
    assert response.status_code == 200
    assert response.json()["status"] == "loaded"
    assert [s["id"] for s in client.get("/api/v1/students").json()] == ["student-1"]


def test_sync_custom_file_name(client, fake_drive):
    """Test the Drive file name can be overridden"""
    auth = {"Authorization": "Bearer token-abc"}
    response = client.post("/api/v1/sync/drive/save", headers=auth, json={"file_name": "backup.json"})
    assert response.status_code == 200
    assert "backup.json" in fake_drive.files


def test_sync_load_not_found(client, fake_drive):
    """Test loading when no Drive file exists changes nothing"""
    create_student(client, id="student-1")

    response = client.post("/api/v1/sync/drive/load", headers={"Authorization": "Bearer token-abc"})
    assert response.status_code == 200
    assert response.json()["status"] == "not_found"
    assert len(client.get("/api/v1/students").json()) == 1


def test_sync_load_invalid_document(client, fake_drive):
    """Test a corrupt Drive file is rejected without touching local data"""
    fake_drive.files["preceptor_evaluations.json"] = "{broken"
    create_student(client, id="student-1")

    response = client.post("/api/v1/sync/drive/load", headers={"Authorization": "Bearer token-abc"})
    assert response.status_code == 422
    assert len(client.get("/api/v1/students").json()) == 1


@pytest.mark.parametrize("error,expected_status", [
    (drive.TransportError("rejected", status_code=401), 401),
    (drive.TransportError("rejected", status_code=403), 401),
    (drive.TransportError("unreachable"), 502),
    (drive.TransportError("server error", status_code=500), 502),
])
def test_sync_transport_errors(client, fake_drive, error, expected_status):
    """Test remote failures map to HTTP errors"""
    fake_drive.error = error
    response = client.post("/api/v1/sync/drive/save", headers={"Authorization": "Bearer token-abc"})
    assert response.status_code == expected_status


def test_sync_unreadable_drive_response(client, monkeypatch):
    """Test a non-JSON reply from Drive becomes a 502 with a message"""
    transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"<html>captive portal</html>"))
    monkeypatch.setattr(
        sync_api.drive, "get_drive_connector",
        lambda token: drive.GoogleDriveConnector(token, transport=transport),
    )

    for path in ("/api/v1/sync/drive/save", "/api/v1/sync/drive/load"):
        response = client.post(path, headers={"Authorization": "Bearer token-abc"})
        assert response.status_code == 502
        assert "unreadable" in response.json()["detail"]
