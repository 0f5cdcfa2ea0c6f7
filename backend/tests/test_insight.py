import asyncio

from conftest import FakeStream
from onboarding_hub.services.insight_service import collect_stream, iter_text


class TestStreamHelpers:
    def test_iter_text_closes_stream(self):
        stream = FakeStream(["a", None, "b"])

        async def run():
            return [chunk async for chunk in iter_text(stream)]

        assert asyncio.run(run()) == ["a", "b"]
        assert stream.closed is True

    def test_iter_text_closes_on_early_stop(self):
        stream = FakeStream(["first", "second", "third"])

        async def run():
            chunks = iter_text(stream)
            first = await chunks.__anext__()
            await chunks.aclose()
            return first

        assert asyncio.run(run()) == "first"
        assert stream.closed is True

    def test_collect_stream_publishes_each_state(self):
        updates = []

        async def chunks():
            for part in ["The ", "answer", "."]:
                yield part

        result = asyncio.run(collect_stream(chunks(), updates.append))
        assert result == "The answer."
        assert updates == ["The ", "The answer", "The answer."]


class TestInsightAPI:
    def _create_client(self, client):
        cid = client.post("/api/v1/clients", json={"name": "Acme Corp"}).json()["id"]
        client.post(f"/api/v1/clients/{cid}/risks", json={"title": "Vendor delay", "severity": "high"})
        client.post(f"/api/v1/clients/{cid}/onboarding-steps", json={"title": "Kickoff"})
        return cid

    def test_streams_answer(self, client, fake_generator):
        cid = self._create_client(client)
        r = client.post(f"/api/v1/clients/{cid}/insight", json={"user_query": "Are we on track?"})
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/plain")
        assert r.text == "The project is on track."
        assert fake_generator.last_stream.closed is True

        data = fake_generator.last_project_data
        assert data["client"]["name"] == "Acme Corp"
        assert [x["title"] for x in data["risks"]] == ["Vendor delay"]
        assert [x["title"] for x in data["onboarding_steps"]] == ["Kickoff"]
        assert data["engagement"] is None

    def test_collected_answer(self, client):
        cid = self._create_client(client)
        r = client.post(
            f"/api/v1/clients/{cid}/insight",
            params={"stream": "false"},
            json={"user_query": "Summarise"},
        )
        assert r.status_code == 200
        assert r.json() == {"answer": "The project is on track."}

    def test_not_configured(self, client, fake_generator):
        cid = self._create_client(client)
        fake_generator.configured = False
        r = client.post(f"/api/v1/clients/{cid}/insight", json={"user_query": "Status?"})
        assert r.status_code == 503

    def test_upstream_failure(self, client, fake_generator):
        cid = self._create_client(client)
        fake_generator.error = "Failed to start project insight stream"
        r = client.post(f"/api/v1/clients/{cid}/insight", json={"user_query": "Status?"})
        assert r.status_code == 502

    def test_blank_question(self, client):
        cid = self._create_client(client)
        r = client.post(f"/api/v1/clients/{cid}/insight", json={"user_query": "  "})
        assert r.status_code == 400

    def test_unknown_client(self, client):
        r = client.post("/api/v1/clients/missing/insight", json={"user_query": "Status?"})
        assert r.status_code == 404
