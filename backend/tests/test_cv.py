import re

import pytest

from app.models import CV
from conftest import MAX_CV_SIZE, auth_header

PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def upload(client, headers, content=b"%PDF-1.4 resume", filename="resume.pdf", mime=PDF):
    return client.post("/api/cv/upload", files={"cv": (filename, content, mime)}, headers=headers)


def stored_files(upload_dir):
    return sorted(upload_dir.iterdir()) if upload_dir.exists() else []


def test_first_upload_creates_record(client, db, user, user_headers, upload_dir):
    response = upload(client, user_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["originalName"] == "resume.pdf"
    assert body["fileSize"] == len(b"%PDF-1.4 resume")
    assert body["mimeType"] == PDF
    assert body["isApproved"] is False
    assert "filePath" not in body
    assert re.fullmatch(r"cv-\d+-\d+\.pdf", body["fileName"])

    files = stored_files(upload_dir)
    assert [f.name for f in files] == [body["fileName"]]
    assert files[0].read_bytes() == b"%PDF-1.4 resume"
    assert db.query(CV).filter(CV.user_id == user.id).count() == 1


def test_second_upload_replaces_file_and_resets_approval(client, db, user, user_headers, admin_headers, upload_dir):
    first = upload(client, user_headers).json()
    client.put(f"/api/cv/{first['id']}/approve", json={"isApproved": True}, headers=admin_headers)

    response = upload(client, user_headers, content=b"new docx bytes", filename="cv.docx", mime=DOCX)

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == first["id"]
    assert body["isApproved"] is False
    assert body["originalName"] == "cv.docx"
    assert body["fileName"].endswith(".docx")

    assert db.query(CV).filter(CV.user_id == user.id).count() == 1
    files = stored_files(upload_dir)
    assert [f.name for f in files] == [body["fileName"]]
    assert files[0].read_bytes() == b"new docx bytes"


def test_users_keep_separate_cvs(client, db, user_headers, other_user, upload_dir):
    upload(client, user_headers)
    upload(client, auth_header(other_user))

    assert db.query(CV).count() == 2
    assert len(stored_files(upload_dir)) == 2


@pytest.mark.parametrize("filename,mime", [
    ("notes.txt", "text/plain"),
    ("photo.png", "image/png"),
    ("resume.pdf", "application/octet-stream"),
])
def test_rejects_disallowed_types(client, db, user_headers, upload_dir, filename, mime):
    response = upload(client, user_headers, filename=filename, mime=mime)

    assert response.status_code == 400
    assert "Invalid file type" in response.json()["message"]
    assert db.query(CV).count() == 0
    assert stored_files(upload_dir) == []


def test_rejected_replacement_keeps_existing_cv(client, db, user_headers, upload_dir):
    first = upload(client, user_headers).json()

    response = upload(client, user_headers, filename="evil.exe", mime="application/x-msdownload")

    assert response.status_code == 400
    assert [f.name for f in stored_files(upload_dir)] == [first["fileName"]]
    assert db.query(CV).one().file_name == first["fileName"]


def test_rejects_oversized_file(client, db, user_headers, upload_dir):
    response = upload(client, user_headers, content=b"x" * (MAX_CV_SIZE + 1))

    assert response.status_code == 400
    assert "too large" in response.json()["message"]
    assert db.query(CV).count() == 0
    assert stored_files(upload_dir) == []


def test_accepts_file_at_size_limit(client, user_headers):
    response = upload(client, user_headers, content=b"x" * MAX_CV_SIZE)

    assert response.status_code == 201


def test_upload_without_file(client, user_headers):
    response = client.post("/api/cv/upload", headers=user_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Please upload a file"


def test_upload_requires_auth(client, upload_dir):
    response = upload(client, {})

    assert response.status_code == 401
    assert stored_files(upload_dir) == []


def test_my_cv(client, user_headers):
    assert client.get("/api/cv/my-cv", headers=user_headers).status_code == 404

    created = upload(client, user_headers).json()
    response = client.get("/api/cv/my-cv", headers=user_headers)

    assert response.status_code == 200
    assert response.json()["id"] == created["id"]


def test_admin_downloads_with_original_name(client, user_headers, admin_headers):
    cv_id = upload(client, user_headers, filename="Alice CV.pdf").json()["id"]

    response = client.get(f"/api/cv/download/{cv_id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.content == b"%PDF-1.4 resume"
    assert response.headers["content-type"] == PDF
    disposition = response.headers["content-disposition"]
    assert "Alice%20CV.pdf" in disposition or "Alice CV.pdf" in disposition


def test_download_missing_file(client, db, user_headers, admin_headers, upload_dir):
    cv_id = upload(client, user_headers).json()["id"]
    for path in stored_files(upload_dir):
        path.unlink()

    response = client.get(f"/api/cv/download/{cv_id}", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "File not found"


def test_download_unknown_cv(client, admin_headers):
    response = client.get("/api/cv/download/42", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "CV not found"


def test_admin_lists_all_cvs_with_identity(client, user, user_headers, admin_headers):
    upload(client, user_headers)

    response = client.get("/api/cv/all", headers=admin_headers)

    assert response.status_code == 200
    [cv] = response.json()
    assert cv["user"] == {"id": user.id, "name": user.name, "email": user.email}


def test_approve_and_reject_cv(client, user_headers, admin_headers):
    cv_id = upload(client, user_headers).json()["id"]

    approved = client.put(f"/api/cv/{cv_id}/approve", json={"isApproved": True}, headers=admin_headers)
    assert approved.json()["isApproved"] is True

    rejected = client.put(f"/api/cv/{cv_id}/approve", json={"isApproved": False}, headers=admin_headers)
    assert rejected.json()["isApproved"] is False

    missing = client.put("/api/cv/999/approve", json={"isApproved": True}, headers=admin_headers)
    assert missing.status_code == 404


def test_delete_removes_record_and_file(client, db, user_headers, admin_headers, upload_dir):
    cv_id = upload(client, user_headers).json()["id"]

    response = client.delete(f"/api/cv/{cv_id}", headers=admin_headers)

    assert response.status_code == 200
    assert db.query(CV).count() == 0
    assert stored_files(upload_dir) == []
    assert client.get("/api/cv/my-cv", headers=user_headers).status_code == 404


def test_delete_proceeds_when_file_already_missing(client, db, user_headers, admin_headers, upload_dir):
    cv_id = upload(client, user_headers).json()["id"]
    for path in stored_files(upload_dir):
        path.unlink()

    response = client.delete(f"/api/cv/{cv_id}", headers=admin_headers)

    assert response.status_code == 200
    assert db.query(CV).count() == 0


def test_delete_unknown_cv(client, admin_headers):
    assert client.delete("/api/cv/5", headers=admin_headers).status_code == 404


@pytest.mark.parametrize("method,path,json", [
    ("get", "/api/cv/all", None),
    ("get", "/api/cv/download/1", None),
    ("put", "/api/cv/1/approve", {"isApproved": True}),
    ("delete", "/api/cv/1", None),
])
def test_admin_endpoints_forbid_regular_users(client, user_headers, method, path, json):
    kwargs = {"headers": user_headers}
    if json is not None:
        kwargs["json"] = json

    response = getattr(client, method)(path, **kwargs)

    assert response.status_code == 403
