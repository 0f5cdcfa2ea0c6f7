import asyncio
from types import SimpleNamespace

import pytest

from onboarding_hub.config import settings
from onboarding_hub.services.content_service import (
    AIServiceNotConfigured,
    ContentGenerationError,
    ContentGenerator,
    parse_generated_content,
)

VALID = '{"welcomeMessage": "Hello Acme", "nextSteps": [{"title": "Kickoff", "description": "Meet"}]}'


class TestParseGeneratedContent:
    def test_plain_json(self):
        content = parse_generated_content(VALID)
        assert content.welcome_message == "Hello Acme"
        assert [s.title for s in content.next_steps] == ["Kickoff"]

    def test_control_characters_stripped(self):
        content = parse_generated_content(VALID.replace("Hello", "Hel\x07lo"))
        assert content.welcome_message == "Hello Acme"

    def test_code_fence_recovered(self):
        content = parse_generated_content(f"```json\n{VALID}\n```")
        assert content.welcome_message == "Hello Acme"

    def test_surrounding_prose_recovered(self):
        content = parse_generated_content(f"Here is the content you asked for:\n{VALID}\nThanks!")
        assert len(content.next_steps) == 1

    def test_no_json_object(self):
        with pytest.raises(ContentGenerationError):
            parse_generated_content("I cannot help with that.")

    def test_unparseable_after_reformat(self):
        with pytest.raises(ContentGenerationError):
            parse_generated_content('{"welcomeMessage": "Hi", "nextSteps": [}')

    def test_wrong_shape(self):
        with pytest.raises(ContentGenerationError):
            parse_generated_content('{"welcomeMessage": "Hi"}')

    def test_blank_step_title(self):
        with pytest.raises(ContentGenerationError):
            parse_generated_content('{"welcomeMessage": "Hi", "nextSteps": [{"title": " ", "description": "x"}]}')


class TestContentGenerator:
    def _fake_openai(self, content):
        async def create(**kwargs):
            return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])
        return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))

    def test_not_configured(self, monkeypatch):
        monkeypatch.setattr(settings, "openai_api_key", None)
        generator = ContentGenerator()
        assert generator.configured is False
        with pytest.raises(AIServiceNotConfigured):
            asyncio.run(generator.generate_welcome_content("sow"))

    def test_generate_with_client(self):
        generator = ContentGenerator(client=self._fake_openai(VALID))
        content = asyncio.run(generator.generate_welcome_content("Build a portal"))
        assert content.welcome_message == "Hello Acme"

    def test_empty_model_response(self):
        generator = ContentGenerator(client=self._fake_openai(""))
        with pytest.raises(ContentGenerationError):
            asyncio.run(generator.generate_welcome_content("Build a portal"))


class TestWelcomeContentAPI:
    def _setup(self, client, sow_text=b"Statement of work: build a client portal."):
        cid = client.post("/api/v1/clients", json={"name": "Acme Corp"}).json()["id"]
        doc = client.post(
            f"/api/v1/clients/{cid}/documents",
            files={"file": ("sow.txt", sow_text, "text/plain")},
        ).json()
        return cid, doc

    def test_generates_and_replaces_steps(self, client, fake_generator):
        cid, doc = self._setup(client)
        client.post(f"/api/v1/clients/{cid}/onboarding-steps", json={"title": "Old step"})

        r = client.post(f"/api/v1/clients/{cid}/welcome-content", json={"document_id": doc["id"]})
        assert r.status_code == 200
        data = r.json()
        assert data["welcome_message"] == "Welcome to the project."
        assert [s["order_index"] for s in data["next_steps"]] == [0, 1]
        assert fake_generator.sow_texts == ["Statement of work: build a client portal."]

        steps = client.get(f"/api/v1/clients/{cid}/onboarding-steps").json()
        assert [s["title"] for s in steps] == ["Kickoff call", "Access setup"]
        assert all(s["status"] == "not_started" and s["client_visible"] for s in steps)

    def test_generation_failure_keeps_steps(self, client, fake_generator):
        cid, doc = self._setup(client)
        client.post(f"/api/v1/clients/{cid}/onboarding-steps", json={"title": "Old step"})
        fake_generator.error = "Failed to parse model response as valid JSON"

        r = client.post(f"/api/v1/clients/{cid}/welcome-content", json={"document_id": doc["id"]})
        assert r.status_code == 502
        steps = client.get(f"/api/v1/clients/{cid}/onboarding-steps").json()
        assert [s["title"] for s in steps] == ["Old step"]

    def test_not_configured(self, client, fake_generator):
        cid, doc = self._setup(client)
        fake_generator.configured = False
        r = client.post(f"/api/v1/clients/{cid}/welcome-content", json={"document_id": doc["id"]})
        assert r.status_code == 503

    def test_unknown_document(self, client):
        cid, _ = self._setup(client)
        r = client.post(f"/api/v1/clients/{cid}/welcome-content", json={"document_id": "missing"})
        assert r.status_code == 404
