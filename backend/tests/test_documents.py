import pytest
from sqlalchemy.exc import IntegrityError

from onboarding_hub.models.document import ClientDocument
from onboarding_hub.services.document_service import upload_with_record
from onboarding_hub.services.storage_service import StorageService


class TestClientDocuments:
    def _create_client(self, client, name="Acme Corp"):
        return client.post("/api/v1/clients", json={"name": name}).json()["id"]

    def _upload(self, client, client_id, name="sow.pdf", content=b"fake pdf content"):
        return client.post(
            f"/api/v1/clients/{client_id}/documents",
            files={"file": (name, content, "application/pdf")},
        )

    def test_upload_sow(self, client, tmp_data):
        cid = self._create_client(client)
        r = self._upload(client, cid, "Acme SOW.pdf")
        assert r.status_code == 201
        data = r.json()
        assert data["document_type"] == "sow"
        assert data["file_name"] == "Acme SOW.pdf"
        assert data["file_size"] == len(b"fake pdf content")
        assert data["document_path"].startswith(f"{cid}/")
        assert data["document_path"].endswith("-Acme_SOW.pdf")
        assert "/api/v1/storage/sow-documents/" in data["url"]
        assert (tmp_data / "storage" / "sow-documents" / data["document_path"]).read_bytes() == b"fake pdf content"

    def test_upload_to_unknown_client(self, client):
        r = self._upload(client, "no-such-client")
        assert r.status_code == 404

    def test_empty_upload_rejected(self, client):
        cid = self._create_client(client)
        r = self._upload(client, cid, content=b"")
        assert r.status_code == 400

    def test_oversized_upload_rejected(self, client, monkeypatch):
        from onboarding_hub.config import settings
        monkeypatch.setattr(settings, "max_upload_bytes", 10)
        cid = self._create_client(client)
        r = self._upload(client, cid, content=b"x" * 11)
        assert r.status_code == 413

    def test_list_documents(self, client):
        cid = self._create_client(client)
        other = self._create_client(client, "Globex")
        self._upload(client, cid, "one.pdf")
        self._upload(client, cid, "two.pdf")
        self._upload(client, other, "theirs.pdf")

        r = client.get(f"/api/v1/clients/{cid}/documents")
        assert r.status_code == 200
        assert {d["file_name"] for d in r.json()} == {"one.pdf", "two.pdf"}

        r = client.get(f"/api/v1/clients/{cid}/documents", params={"document_type": "kickoff_material"})
        assert r.json() == []

    def test_delete_document(self, client, tmp_data):
        cid = self._create_client(client)
        doc = self._upload(client, cid).json()

        r = client.delete(f"/api/v1/clients/{cid}/documents/{doc['id']}")
        assert r.status_code == 200
        assert client.get(f"/api/v1/clients/{cid}/documents").json() == []
        assert not (tmp_data / "storage" / "sow-documents" / doc["document_path"]).exists()

    def test_delete_document_when_file_already_gone(self, client, tmp_data):
        cid = self._create_client(client)
        doc = self._upload(client, cid).json()
        (tmp_data / "storage" / "sow-documents" / doc["document_path"]).unlink()

        r = client.delete(f"/api/v1/clients/{cid}/documents/{doc['id']}")
        assert r.status_code == 200
        assert client.get(f"/api/v1/clients/{cid}/documents").json() == []

    def test_delete_document_of_other_client(self, client):
        cid = self._create_client(client)
        other = self._create_client(client, "Globex")
        doc = self._upload(client, cid).json()

        r = client.delete(f"/api/v1/clients/{other}/documents/{doc['id']}")
        assert r.status_code == 404


class TestUploadCompensation:
    def test_failed_insert_removes_uploaded_object(self, test_db, tmp_data):
        storage = StorageService(root=tmp_data / "storage", public_base_url="http://test")
        db = test_db()
        row = ClientDocument(
            id="doc-1",
            client_id="missing-client",
            document_path="missing-client/1-sow.pdf",
            document_type="sow",
            file_name="sow.pdf",
            file_size=3,
            file_type="application/pdf",
            created_at="2024-01-01T00:00:00Z",
        )
        try:
            with pytest.raises(IntegrityError):
                upload_with_record(db, storage, "sow-documents", row.document_path, b"abc", row)
        finally:
            db.close()

        assert not storage.exists("sow-documents", "missing-client/1-sow.pdf")

    def test_successful_insert_keeps_object(self, test_db, tmp_data, client):
        cid = client.post("/api/v1/clients", json={"name": "Acme Corp"}).json()["id"]
        storage = StorageService(root=tmp_data / "storage", public_base_url="http://test")
        db = test_db()
        row = ClientDocument(
            id="doc-2",
            client_id=cid,
            document_path=f"{cid}/1-sow.pdf",
            document_type="sow",
            file_name="sow.pdf",
            file_size=3,
            file_type="application/pdf",
            created_at="2024-01-01T00:00:00Z",
        )
        try:
            upload_with_record(db, storage, "sow-documents", row.document_path, b"abc", row)
        finally:
            db.close()

        assert storage.download("sow-documents", f"{cid}/1-sow.pdf") == b"abc"
