from datetime import date
from pathlib import Path

import pytest

from trackmyjob.exceptions import StorageError
from trackmyjob.services.files import FileService
from trackmyjob.tests.factories import ALICE, ALICE_ID, BOB, CAROL, CAROL_ID, PDF_BYTES, PNG_BYTES, create_application


class TestCreateApplication:
    async def test_defaults(self, client):
        data = await create_application(client, ALICE)

        assert data["user_id"] == ALICE_ID
        assert data["status"] == "applied"
        assert data["applied_date"] == date.today().isoformat()
        assert data["resume_url"] is None
        assert data["notes"] is None

    async def test_long_external_user_id(self, client):
        data = await create_application(client, CAROL, company_name="Initech")

        assert data["user_id"] == CAROL_ID
        listed = await client.get("/api/applications", headers=CAROL)
        assert [a["id"] for a in listed.json()["applications"]] == [data["id"]]
        assert (await client.get("/api/applications", headers=ALICE)).json()["total"] == 0

    async def test_all_fields(self, client):
        data = await create_application(
            client,
            ALICE,
            company_name="Globex",
            position="Data Engineer",
            status="interviewing",
            applied_date="2026-09-01",
            job_url="https://globex.example.com/jobs/42",
            location="Remote",
            salary_range="120k-140k",
            notes="Referred by Sam",
        )

        assert data["status"] == "interviewing"
        assert data["applied_date"] == "2026-09-01"
        assert data["job_url"] == "https://globex.example.com/jobs/42"
        assert data["notes"] == "Referred by Sam"

    @pytest.mark.parametrize("payload", [
        {"position": "Engineer"},
        {"company_name": "Acme"},
        {"company_name": "   ", "position": "Engineer"},
        {"company_name": "Acme", "position": "Engineer", "status": "ghosted"},
        {"company_name": "Acme", "position": "Engineer", "job_url": "ftp://acme"},
    ])
    async def test_invalid_payloads(self, client, payload):
        response = await client.post("/api/applications", json=payload, headers=ALICE)

        assert response.status_code == 422


class TestListApplications:
    async def test_only_own_rows(self, client):
        await create_application(client, ALICE, company_name="Acme")
        await create_application(client, BOB, company_name="Initech")

        response = await client.get("/api/applications", headers=ALICE)

        data = response.json()
        assert data["total"] == 1
        assert [a["company_name"] for a in data["applications"]] == ["Acme"]

    async def test_ordered_by_applied_date_desc(self, client):
        await create_application(client, ALICE, company_name="Old", applied_date="2026-01-10")
        await create_application(client, ALICE, company_name="New", applied_date="2026-03-10")
        await create_application(client, ALICE, company_name="Mid", applied_date="2026-02-10")

        response = await client.get("/api/applications", headers=ALICE)

        assert [a["company_name"] for a in response.json()["applications"]] == ["New", "Mid", "Old"]

    async def test_status_filter(self, client):
        await create_application(client, ALICE, company_name="A", status="applied")
        await create_application(client, ALICE, company_name="B", status="offered")
        await create_application(client, ALICE, company_name="C", status="rejected")

        response = await client.get(
            "/api/applications",
            params=[("status", "offered"), ("status", "rejected")],
            headers=ALICE,
        )

        assert sorted(a["company_name"] for a in response.json()["applications"]) == ["B", "C"]

    async def test_search(self, client):
        await create_application(client, ALICE, company_name="Acme", position="Backend Engineer")
        await create_application(client, ALICE, company_name="Globex", position="Designer")

        by_company = await client.get("/api/applications", params={"q": "acm"}, headers=ALICE)
        by_position = await client.get("/api/applications", params={"q": "DESIGN"}, headers=ALICE)

        assert [a["company_name"] for a in by_company.json()["applications"]] == ["Acme"]
        assert [a["company_name"] for a in by_position.json()["applications"]] == ["Globex"]

    @pytest.mark.parametrize("q", ["%", "_", "\\", "a%e"])
    async def test_search_wildcards_match_literally(self, client, q):
        await create_application(client, ALICE, company_name="Acme", position="Backend Engineer")

        response = await client.get("/api/applications", params={"q": q}, headers=ALICE)

        assert response.json()["total"] == 0

    async def test_search_matches_literal_percent(self, client):
        await create_application(client, ALICE, company_name="100% Remote Ltd")
        await create_application(client, ALICE, company_name="1000 Remote Ltd")

        response = await client.get("/api/applications", params={"q": "100%"}, headers=ALICE)

        assert [a["company_name"] for a in response.json()["applications"]] == ["100% Remote Ltd"]

    async def test_pagination(self, client):
        for i in range(5):
            await create_application(client, ALICE, company_name=f"Company {i}", applied_date=f"2026-01-0{i + 1}")

        response = await client.get("/api/applications", params={"page": 2, "page_size": 2}, headers=ALICE)

        data = response.json()
        assert data["total"] == 5
        assert data["total_pages"] == 3
        assert data["page"] == 2
        assert [a["company_name"] for a in data["applications"]] == ["Company 2", "Company 1"]

    async def test_page_size_limit(self, client):
        response = await client.get("/api/applications", params={"page_size": 500}, headers=ALICE)

        assert response.status_code == 422


class TestSingleApplication:
    async def test_get(self, client):
        created = await create_application(client, ALICE)

        response = await client.get(f"/api/applications/{created['id']}", headers=ALICE)

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]

    async def test_other_users_row_is_not_found(self, client):
        created = await create_application(client, ALICE)
        path = f"/api/applications/{created['id']}"

        assert (await client.get(path, headers=BOB)).status_code == 404
        assert (await client.put(path, json={"notes": "mine"}, headers=BOB)).status_code == 404
        assert (await client.patch(f"{path}/status", json={"status": "rejected"}, headers=BOB)).status_code == 404
        assert (await client.delete(path, headers=BOB)).status_code == 404

        unchanged = await client.get(path, headers=ALICE)
        assert unchanged.json()["status"] == "applied"
        assert unchanged.json()["notes"] is None

    async def test_update(self, client):
        created = await create_application(client, ALICE, notes="first call")

        response = await client.put(
            f"/api/applications/{created['id']}",
            json={"position": "Staff Engineer", "notes": None, "status": "offered"},
            headers=ALICE,
        )

        data = response.json()
        assert data["position"] == "Staff Engineer"
        assert data["notes"] is None
        assert data["status"] == "offered"
        assert data["company_name"] == "Acme"

    async def test_update_ignores_null_required_fields(self, client):
        created = await create_application(client, ALICE)

        response = await client.put(
            f"/api/applications/{created['id']}",
            json={"company_name": None, "status": None},
            headers=ALICE,
        )

        assert response.status_code == 200
        assert response.json()["company_name"] == "Acme"
        assert response.json()["status"] == "applied"

    async def test_status_change_only_touches_status(self, client):
        created = await create_application(client, ALICE, notes="keep me")

        response = await client.patch(
            f"/api/applications/{created['id']}/status",
            json={"status": "interviewing"},
            headers=ALICE,
        )

        data = response.json()
        assert data["status"] == "interviewing"
        assert data["notes"] == "keep me"
        assert data["company_name"] == created["company_name"]

    @pytest.mark.parametrize("first,second", [("rejected", "applied"), ("accepted", "withdrawn")])
    async def test_any_transition_is_allowed(self, client, first, second):
        created = await create_application(client, ALICE)
        path = f"/api/applications/{created['id']}/status"

        await client.patch(path, json={"status": first}, headers=ALICE)
        response = await client.patch(path, json={"status": second}, headers=ALICE)

        assert response.json()["status"] == second

    async def test_invalid_status(self, client):
        created = await create_application(client, ALICE)

        response = await client.patch(
            f"/api/applications/{created['id']}/status",
            json={"status": "ghosted"},
            headers=ALICE,
        )

        assert response.status_code == 422

    async def test_delete(self, client):
        created = await create_application(client, ALICE)

        response = await client.delete(f"/api/applications/{created['id']}", headers=ALICE)

        assert response.status_code == 204
        assert (await client.get(f"/api/applications/{created['id']}", headers=ALICE)).status_code == 404


class TestApplicationResume:
    async def upload(self, client, application_id, content=PDF_BYTES, content_type="application/pdf", name="cv.pdf"):
        return await client.post(
            f"/api/applications/{application_id}/resume",
            files={"file": (name, content, content_type)},
            headers=ALICE,
        )

    async def stored_path(self, client, temp_storage_dir, file_id) -> Path:
        metadata = await client.get(f"/api/files/{file_id}", headers=ALICE)
        return Path(temp_storage_dir) / metadata.json()["storage_path"]

    async def test_upload_resume(self, client, temp_storage_dir):
        created = await create_application(client, ALICE)

        response = await self.upload(client, created["id"])

        assert response.status_code == 200
        data = response.json()
        assert data["resume_file_id"]
        assert data["resume_url"] == f"/api/files/{data['resume_file_id']}/download"
        stored = await self.stored_path(client, temp_storage_dir, data["resume_file_id"])
        assert stored.relative_to(temp_storage_dir).parts[:2] == ("resume", ALICE_ID)
        assert stored.read_bytes() == PDF_BYTES

    async def test_resume_url_requires_auth(self, client):
        created = await create_application(client, ALICE)
        resume_url = (await self.upload(client, created["id"])).json()["resume_url"]

        anonymous = await client.get(resume_url)
        other_user = await client.get(resume_url, headers=BOB)
        owner = await client.get(resume_url, headers=ALICE)

        assert anonymous.status_code == 401
        assert other_user.status_code == 404
        assert owner.status_code == 200
        assert owner.content == PDF_BYTES

    async def test_rejects_wrong_type(self, client, temp_storage_dir):
        created = await create_application(client, ALICE)

        response = await self.upload(client, created["id"], PNG_BYTES, "image/png", "photo.png")

        assert response.status_code == 400
        assert not any(Path(temp_storage_dir).rglob("*.png"))

    async def test_rejects_empty_file(self, client):
        created = await create_application(client, ALICE)

        response = await self.upload(client, created["id"], b"")

        assert response.status_code == 400

    async def test_rejects_oversized_file(self, client, monkeypatch):
        from trackmyjob.config import settings

        monkeypatch.setattr(settings, "max_upload_size_mb", 0)
        created = await create_application(client, ALICE)

        response = await self.upload(client, created["id"])

        assert response.status_code == 413

    async def test_replacing_resume_removes_previous(self, client, temp_storage_dir):
        created = await create_application(client, ALICE)
        first = (await self.upload(client, created["id"])).json()
        old = await self.stored_path(client, temp_storage_dir, first["resume_file_id"])

        second = (await self.upload(client, created["id"], name="cv-v2.pdf")).json()

        assert first["resume_file_id"] != second["resume_file_id"]
        assert not old.exists()
        assert (await self.stored_path(client, temp_storage_dir, second["resume_file_id"])).exists()

    async def test_failed_replacement_keeps_previous_resume(self, client, temp_storage_dir, monkeypatch):
        created = await create_application(client, ALICE)
        first = (await self.upload(client, created["id"])).json()
        old = await self.stored_path(client, temp_storage_dir, first["resume_file_id"])

        async def failing_remove(self, db, user_file):
            raise StorageError("disk unavailable")

        monkeypatch.setattr(FileService, "remove", failing_remove)
        response = await self.upload(client, created["id"], name="cv-v2.pdf")

        assert response.status_code == 500
        assert old.read_bytes() == PDF_BYTES
        assert [p for p in Path(temp_storage_dir).rglob("*") if p.is_file()] == [old]
        unchanged = await client.get(f"/api/applications/{created['id']}", headers=ALICE)
        assert unchanged.json()["resume_file_id"] == first["resume_file_id"]
        assert (await client.get("/api/files", headers=ALICE)).json()["total"] == 1

    async def test_delete_resume(self, client, temp_storage_dir):
        created = await create_application(client, ALICE)
        uploaded = (await self.upload(client, created["id"])).json()
        stored = await self.stored_path(client, temp_storage_dir, uploaded["resume_file_id"])

        response = await client.delete(f"/api/applications/{created['id']}/resume", headers=ALICE)

        assert response.status_code == 200
        assert response.json()["resume_url"] is None
        assert not stored.exists()

    async def test_delete_missing_resume(self, client):
        created = await create_application(client, ALICE)

        response = await client.delete(f"/api/applications/{created['id']}/resume", headers=ALICE)

        assert response.status_code == 404

    async def test_deleting_application_removes_resume(self, client, temp_storage_dir):
        created = await create_application(client, ALICE)
        uploaded = (await self.upload(client, created["id"])).json()
        stored = await self.stored_path(client, temp_storage_dir, uploaded["resume_file_id"])

        await client.delete(f"/api/applications/{created['id']}", headers=ALICE)

        assert not stored.exists()
        files = await client.get("/api/files", headers=ALICE)
        assert files.json()["total"] == 0
