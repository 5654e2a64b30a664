import json

import pytest
from fastapi.testclient import TestClient

from director_studio.api.routes import create_app
from director_studio.models.song_dna import create_blank_song_dna
from director_studio.services.local_storage import MemoryLocalStorage

AI_ANALYSIS = {
    "sections": [
        {"type": "verse", "line_count": 4, "rhyme_scheme": "ABAB"},
        {"type": "chorus", "line_count": 4, "rhyme_scheme": "AABA"},
    ],
    "overall_pattern": ["verse", "chorus"],
    "themes": ["loneliness"],
    "primary_emotion": "yearning",
    "energy_level": 6,
}


@pytest.fixture
def client():
    return TestClient(create_app(MemoryLocalStorage()))


def saved_dna_payload(dna_id="dna_1"):
    dna = create_blank_song_dna()
    dna.id = dna_id
    dna.reference_song.title = "Neon Night"
    dna.reference_song.artist = "Sarah Chen"
    dna.reference_song.lyrics = "I walk alone beneath the night"
    dna.lyrical.syllables_per_line.average = 8
    return json.loads(dna.model_dump_json())


class TestGeneral:
    def test_health(self, client):
        """Test the health check."""
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_export(self, client):
        """Test shot export with camelCase payloads both ways."""
        response = client.post(
            "/api/export",
            json={
                "shots": [
                    {"id": "s1", "description": "@artist walks in", "shotNumber": 1},
                    {"id": "s2", "description": "Wide shot of the city"},
                ],
                "config": {"format": "numbered", "prefix": "cinematic,", "separator": "\n"},
                "variables": {"artistName": "Sarah Chen"},
            },
        )
        assert response.status_code == 200
        body = response.json()
        assert body["totalShots"] == 2
        assert body["formattedText"] == (
            "1. cinematic, Sarah Chen walks in\n2. cinematic, Wide shot of the city"
        )
        assert body["config"]["format"] == "numbered"

    def test_export_rejects_bad_format(self, client):
        """Test request validation."""
        response = client.post(
            "/api/export", json={"shots": [], "config": {"format": "pdf"}}
        )
        assert response.status_code == 422

    def test_prompts(self, client):
        """Test that the prompt library is seeded on first request."""
        body = client.get("/api/prompts").json()
        assert len(body["prompts"]) == 9
        assert len(body["quickPrompts"]) == 5
        assert "categoryId" in body["prompts"][0]
        assert len(client.get("/api/prompts").json()["prompts"]) == 9


class TestLyricsRoutes:
    def test_rhyme_scheme(self, client, sample_lyrics):
        """Test per-section rhyme patterns and the flow summary."""
        body = client.post("/api/lyrics/rhyme-scheme", json={"lyrics": sample_lyrics}).json()
        assert [s["lines"] for s in body["sections"]] == [4, 4]
        assert body["sections"][1]["pattern"].startswith("AA")
        assert body["flow_type"]
        assert body["average_syllables"] > 0

    def test_quick(self, client, sample_lyrics):
        """Test the model-free DNA summary."""
        body = client.post("/api/song-dna/quick", json={"lyrics": sample_lyrics}).json()
        assert body["structure"]["pattern"] == ["verse", "chorus"]
        assert body["lyrical"]["rhyme_schemes"]["chorus"] == "AABA"

    def test_analyze_without_key(self, client, no_api_key, sample_lyrics):
        """Test that a missing API key maps to 503."""
        response = client.post("/api/song-dna/analyze", json={"lyrics": sample_lyrics})
        assert response.status_code == 503

    def test_analyze(self, client, fake_llm, sample_lyrics):
        """Test the structured analysis through the API."""
        fake_llm(json.dumps(AI_ANALYSIS))
        response = client.post(
            "/api/song-dna/analyze", json={"lyrics": sample_lyrics, "title": "Neon Night"}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["confidence_scores"]["overall"] == 0.8
        assert body["song_dna"]["reference_song"]["title"] == "Neon Night"

    def test_generate_invalid_dna(self, client, fake_llm):
        """Test that an unusable DNA maps to 400."""
        fake_llm()
        payload = {
            "dna": json.loads(create_blank_song_dna().model_dump_json()),
            "options": {"theme": "rain"},
        }
        response = client.post("/api/song-dna/generate", json=payload)
        assert response.status_code == 400
        assert "Invalid Song DNA" in response.json()["detail"]

    def test_generate_upstream_failure(self, client, fake_llm):
        """Test that a failed model call maps to 502."""
        fake_llm(RuntimeError("down"))
        payload = {"dna": saved_dna_payload(), "options": {"theme": "rain", "count": 1}}
        response = client.post("/api/song-dna/generate", json=payload)
        assert response.status_code == 502

    def test_insights(self, client):
        """Test the DNA insight summary."""
        dna = saved_dna_payload()
        dna["structure"]["pattern"] = ["verse", "chorus"]
        body = client.post("/api/song-dna/insights", json=dna).json()
        assert "Structure: verse-chorus" in body["insights"]


class TestArtistRoutes:
    def test_crud(self, client):
        """Test create, read, list and delete of artists."""
        created = client.post(
            "/api/artists", json={"artist_id": "art_1", "artist_name": "Sarah Chen"}
        ).json()
        assert created["meta"]["created_at"]
        assert client.get("/api/artists/art_1").json()["artist_name"] == "Sarah Chen"
        assert [a["artist_id"] for a in client.get("/api/artists").json()] == ["art_1"]

        assert client.delete("/api/artists/art_1").status_code == 200
        assert client.get("/api/artists/art_1").status_code == 404
        assert client.delete("/api/artists/art_1").status_code == 404

    def test_active_artist(self, client):
        """Test selecting and clearing the active artist."""
        client.post("/api/artists", json={"artist_id": "art_1", "artist_name": "Sarah"})
        assert client.get("/api/artists/active").json() is None

        response = client.put("/api/artists/active", json={"artist_id": "art_1"})
        assert response.json()["artist_id"] == "art_1"
        assert client.get("/api/artists/active").json()["artist_name"] == "Sarah"

        assert client.put("/api/artists/active", json={"artist_id": "nope"}).status_code == 404
        client.put("/api/artists/active", json={"artist_id": None})
        assert client.get("/api/artists/active").json() is None

    def test_export_import(self, client):
        """Test moving the artist bank between servers."""
        client.post("/api/artists", json={"artist_id": "art_1", "artist_name": "Sarah"})
        exported = client.get("/api/artists/export").json()

        other = TestClient(create_app(MemoryLocalStorage()))
        response = other.post("/api/artists/import", json=exported)
        assert response.status_code == 200
        assert [a["artist_id"] for a in other.get("/api/artists").json()] == ["art_1"]
        assert other.post("/api/artists/import", json="just a string").status_code == 400


class TestDnaRoutes:
    def test_crud(self, client):
        """Test save, list, fetch and delete of DNA records."""
        response = client.post("/api/dna", json={"dna": saved_dna_payload(), "tags": ["pop"]})
        assert response.json() == {"id": "dna_1"}

        stored = client.get("/api/dna/dna_1").json()
        assert stored["metadata"]["title"] == "Neon Night"
        assert [r["id"] for r in client.get("/api/dna", params={"tag": "pop"}).json()] == ["dna_1"]
        assert client.get("/api/dna", params={"artist": "Nobody"}).json() == []

        assert client.delete("/api/dna/dna_1").status_code == 200
        assert client.get("/api/dna/dna_1").status_code == 404
        assert client.delete("/api/dna/dna_1").status_code == 404

    def test_export_import(self, client):
        """Test that an exported DNA imports into another server."""
        client.post("/api/dna", json={"dna": saved_dna_payload()})
        exported = client.get("/api/dna/dna_1/export").json()
        assert exported["version"] == "2.0"

        other = TestClient(create_app(MemoryLocalStorage()))
        assert other.post("/api/dna/import", json=exported).json() == {"id": "dna_1"}
        assert other.get("/api/dna/dna_1").status_code == 200

    def test_import_invalid(self, client):
        """Test that a document without DNA maps to 400."""
        response = client.post("/api/dna/import", json={"version": "2.0"})
        assert response.status_code == 400

    def test_import_with_string_source(self, client):
        """Test that a plain-string source still imports."""
        payload = {"version": "2.0", "dna": saved_dna_payload("dna_7"), "source": "song-dna-replicator"}
        response = client.post("/api/dna/import", json=payload)
        assert response.status_code == 200
        assert response.json() == {"id": "dna_7"}
        assert client.get("/api/dna/dna_7").json()["metadata"]["title"] == "Neon Night"

    def test_export_unknown(self, client):
        """Test 404 for exporting a missing DNA."""
        assert client.get("/api/dna/missing/export").status_code == 404
