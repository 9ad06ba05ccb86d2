from io import BytesIO

from fastapi.testclient import TestClient

from src.constants import Messages
from src.services.extraction import ExtractionError
from tests.conftest import SAMPLE_TRANSCRIPT, FakeExtractor, make_test_image


def _select(client: TestClient, session_id: str, filename: str = "page.jpg") -> dict:
    response = client.put(
        f"/sessions/{session_id}/image",
        files={"file": (filename, make_test_image(), "image/jpeg")},
    )
    assert response.status_code == 200
    return response.json()


class TestSessionPost:
    def test_create_session(self, client: TestClient, fake_extractor: FakeExtractor) -> None:
        response = client.post("/sessions")

        assert response.status_code == 201
        data = response.json()
        assert data["sessionId"].startswith("sess_")
        assert len(data["sessionId"]) == 13  # "sess_" + 8 chars
        assert data["status"] == "idle"
        assert data["imageName"] is None
        assert data["lines"] == []
        assert data["copied"] is False
        assert data["message"] == Messages.NO_RESULTS
        assert "createdAt" in data


class TestSessionGet:
    def test_read_session(self, client: TestClient, session_id: str) -> None:
        response = client.get(f"/sessions/{session_id}")

        assert response.status_code == 200
        assert response.json()["sessionId"] == session_id

    def test_read_nonexistent_session(self, client: TestClient) -> None:
        response = client.get("/sessions/sess_00000000")

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "SESSION_NOT_FOUND"

    def test_invalid_session_id(self, client: TestClient) -> None:
        response = client.get("/sessions/sess_ZZZZZZZZ")

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INVALID_SESSION_ID"


class TestSelectImage:
    def test_select_image(self, client: TestClient, session_id: str) -> None:
        data = _select(client, session_id)

        assert data["status"] == "idle"
        assert data["imageName"] == "page.jpg"

    def test_any_bytes_accepted(self, client: TestClient, session_id: str) -> None:
        response = client.put(
            f"/sessions/{session_id}/image",
            files={"file": ("notes.txt", BytesIO(b"not an image"), "text/plain")},
        )

        assert response.status_code == 200

    def test_select_discards_previous_result(
        self, client: TestClient, session_id: str
    ) -> None:
        _select(client, session_id)
        client.post(f"/sessions/{session_id}/extract")

        data = _select(client, session_id, filename="next.jpg")

        assert data["status"] == "idle"
        assert data["imageName"] == "next.jpg"
        assert data["rawText"] is None
        assert data["lines"] == []

    def test_only_first_file_used(self, client: TestClient, session_id: str) -> None:
        response = client.put(
            f"/sessions/{session_id}/image",
            files=[
                ("file", ("first.png", BytesIO(b"FIRST"), "image/png")),
                ("file", ("second.jpg", BytesIO(b"SECOND"), "image/jpeg")),
            ],
        )

        assert response.status_code == 200
        assert response.json()["imageName"] == "first.png"

    def test_select_unknown_session(self, client: TestClient) -> None:
        response = client.put(
            "/sessions/sess_00000000/image",
            files={"file": ("page.jpg", make_test_image(), "image/jpeg")},
        )

        assert response.status_code == 404


class TestTriggerExtract:
    def test_without_image(
        self, client: TestClient, session_id: str, fake_extractor: FakeExtractor
    ) -> None:
        response = client.post(f"/sessions/{session_id}/extract")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "idle"
        assert data["message"] == Messages.NO_IMAGE
        assert fake_extractor.calls == []

    def test_success(self, client: TestClient, session_id: str) -> None:
        _select(client, session_id)

        response = client.post(f"/sessions/{session_id}/extract")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "succeeded"
        assert data["rawText"] == SAMPLE_TRANSCRIPT
        assert data["message"] is None
        assert [line["marker"] for line in data["lines"]] == ["#", "$", "&", None]

    def test_result_visible_on_get(self, client: TestClient, session_id: str) -> None:
        _select(client, session_id)
        client.post(f"/sessions/{session_id}/extract")

        data = client.get(f"/sessions/{session_id}").json()

        assert data["status"] == "succeeded"
        assert len(data["lines"]) == 4

    def test_empty_transcript_shows_placeholder(
        self, client: TestClient, session_id: str, fake_extractor: FakeExtractor
    ) -> None:
        fake_extractor.text = ""
        _select(client, session_id)

        data = client.post(f"/sessions/{session_id}/extract").json()

        assert data["status"] == "succeeded"
        assert data["lines"] == []
        assert data["message"] == Messages.NO_RESULTS

    def test_failure(
        self, client: TestClient, session_id: str, fake_extractor: FakeExtractor
    ) -> None:
        fake_extractor.error = ExtractionError("upstream 500: internal detail")
        _select(client, session_id)

        response = client.post(f"/sessions/{session_id}/extract")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "failed"
        assert data["message"] == Messages.EXTRACTION_FAILED
        assert data["rawText"] is None
        assert data["lines"] == []
        assert "internal detail" not in response.text


class TestCopy:
    def test_copy(self, client: TestClient, session_id: str) -> None:
        _select(client, session_id)
        client.post(f"/sessions/{session_id}/extract")

        response = client.post(f"/sessions/{session_id}/copy")

        assert response.status_code == 200
        assert response.json() == {"text": SAMPLE_TRANSCRIPT, "copied": True}

    def test_copy_without_result(self, client: TestClient, session_id: str) -> None:
        response = client.post(f"/sessions/{session_id}/copy")

        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "NOTHING_TO_COPY"


class TestSessionDelete:
    def test_delete_session(self, client: TestClient, session_id: str) -> None:
        response = client.delete(f"/sessions/{session_id}")

        assert response.status_code == 204
        assert client.get(f"/sessions/{session_id}").status_code == 404

    def test_delete_nonexistent_session(self, client: TestClient) -> None:
        response = client.delete("/sessions/sess_00000000")

        assert response.status_code == 404
