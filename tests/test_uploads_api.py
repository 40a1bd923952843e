# tests/test_uploads_api.py
from http import HTTPStatus

from tests.samples import JAN_NOWAK_REPORT, JSON_RESPONSE, SIMPLE_REPORT


def _file(text: str, name: str = "report.csv", content_type: str = "text/csv"):
    return ("files", (name, text.encode("utf-8"), content_type))


def test_upload_single_report(client, clean_db):
    """
    A valid sectioned report creates a summary and returns its table.
    """
    response = client.post("/uploads", files=[_file(JAN_NOWAK_REPORT)])

    assert response.status_code == HTTPStatus.OK
    data = response.json()
    assert isinstance(data["summary_id"], int)
    assert "j.nowak@gmail.com" in data["html_table"]
    assert "Meeting with Jan Nowak (2025-11-26)" in data["html_table"]


def test_upload_batch_of_both_dialects(client, clean_db):
    response = client.post(
        "/uploads",
        files=[_file(JAN_NOWAK_REPORT, "a.csv"), _file(SIMPLE_REPORT, "b.csv")],
    )

    assert response.status_code == HTTPStatus.OK
    summary_id = response.json()["summary_id"]

    detail = client.get(f"/summaries/{summary_id}").json()
    assert [m["title"] for m in detail["meetings"]] == ["Meeting with Jan Nowak", "Team Meeting"]


def test_upload_without_files(client, clean_db):
    response = client.post("/uploads")

    assert response.status_code == HTTPStatus.BAD_REQUEST
    data = response.json()
    assert data["error_code"] == "NO_FILES"
    assert data["error"] == "No files uploaded"
    assert data["hint"] == "Please select at least one CSV file to upload."


def test_upload_json_disguised_as_csv(client, clean_db):
    response = client.post("/uploads", files=[_file(JSON_RESPONSE, "response.csv")])

    assert response.status_code == HTTPStatus.BAD_REQUEST
    data = response.json()
    assert data["error_code"] == "TYPE_MISMATCH"
    assert data["detected_type"] == "application/json"
    assert data["original_extension"] == ".csv"
    assert data["file_name"] == "response.csv"
    assert "extension does not match" in data["hint"]


def test_upload_rejects_disallowed_content_type(client, clean_db):
    response = client.post(
        "/uploads",
        files=[_file(SIMPLE_REPORT, "report.pdf", content_type="application/pdf")],
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    data = response.json()
    assert data["error_code"] == "TYPE_MISMATCH"
    assert data["detected_type"] == "application/pdf"


def test_upload_invalid_email_reports_file(client, clean_db):
    bad = SIMPLE_REPORT + "Bad Row,not-an-email,10\n"

    response = client.post("/uploads", files=[_file(SIMPLE_REPORT, "ok.csv"), _file(bad, "bad.csv")])

    assert response.status_code == HTTPStatus.BAD_REQUEST
    data = response.json()
    assert data["error_code"] == "INVALID_EMAIL_FORMAT"
    assert data["file_name"] == "bad.csv"
    assert data["error"].startswith("bad.csv: ")

    listing = client.get("/summaries").json()
    assert listing["total_count"] == 0


def test_upload_empty_file(client, clean_db):
    response = client.post("/uploads", files=[("files", ("empty.csv", b"", "text/csv"))])

    assert response.status_code == HTTPStatus.BAD_REQUEST
    data = response.json()
    assert data["error_code"] == "EMPTY_FILE"
    assert "empty" in data["hint"]
