"""Integration tests for scan workflows across restarts and the HTTP layer."""

import json
from datetime import date

import pytest

from event_tracker.config.environment import EnvironmentConfig
from event_tracker.config.models import AppConfig, StorageConfig
from event_tracker.domain.models import EventDraft
from event_tracker.persistence import build_repositories
from event_tracker.pipeline import ScanPipeline, ScanStatus
from event_tracker.web import create_app
from tests.helpers.fake_client import FakeLLMClient, RecordingFactory

REFERENCE_DATE = date(2025, 4, 20)


@pytest.fixture
def storage(tmp_path):
    return StorageConfig(data_dir=str(tmp_path / "data"))


def run_scan(storage, extract_reply):
    """Run one scan with freshly built repositories, as a restarted process would."""
    events, metadata = build_repositories(storage)
    pipeline = ScanPipeline(
        app_config=AppConfig(),
        env_config=EnvironmentConfig(anthropic_api_key="sk-test"),
        event_repo=events,
        meta_repo=metadata,
        client_factory=RecordingFactory(FakeLLMClient(extract_reply=extract_reply)),
    )
    return pipeline.run_scan(REFERENCE_DATE)


class TestScanAcrossRestarts:
    """Test state carried between separate runs via the data files."""

    def test_second_run_only_adds_new_events(self, storage):
        """Test scan → restart → scan with overlapping findings."""
        first = run_scan(storage, json.dumps([
            {"name": "AI Day", "date": "2025-05-01"},
            {"name": "RAG Workshop", "date": "2025-05-03", "type": "workshop"},
        ]))
        second = run_scan(storage, json.dumps([
            {"name": "rag workshop", "date": "2025-05-03"},
            {"name": "LLM Night", "date": "2025-05-09"},
        ]))

        assert first.added == 2
        assert second.added == 1
        assert second.duplicates == 1

        events, metadata = build_repositories(storage)
        assert [(e.id, e.name) for e in events.list_events()] == [
            (1, "AI Day"),
            (2, "RAG Workshop"),
            (3, "LLM Night"),
        ]
        meta = metadata.get()
        assert meta.total_scans == 2
        assert meta.last_added == 1
        assert meta.highest_id == 3

    def test_manual_edits_survive_scan(self, storage):
        """Test a scan never rewrites events edited by hand."""
        events, _ = build_repositories(storage)
        manual = events.add(EventDraft(name="Hand-made", date="2025-05-01", venue="Jayanagar"))
        events.update(manual.id, {"desc": "edited"})
        before = events.list_events()[0].to_record()

        result = run_scan(storage, json.dumps([
            {"name": "Hand-made", "date": "2025-05-01", "venue": "Elsewhere"},
            {"name": "New", "date": "2025-05-02"},
        ]))

        assert result.status == ScanStatus.COMPLETED
        after = build_repositories(storage)[0].list_events()
        assert after[0].to_record() == before
        assert after[1].id == 2
        assert after[1].ai_found is True

    def test_ids_stay_unique_after_delete_and_scan(self, storage):
        run_scan(storage, json.dumps([
            {"name": "A", "date": "2025-05-01"},
            {"name": "B", "date": "2025-05-02"},
        ]))
        events, _ = build_repositories(storage)
        events.delete(2)

        run_scan(storage, json.dumps([{"name": "C", "date": "2025-05-03"}]))

        ids = [event.id for event in build_repositories(storage)[0].list_events()]
        assert ids == [1, 3]


class TestHttpWorkflow:
    """Test the HTTP surface over a real store."""

    def test_scan_then_list_then_edit(self, storage, tmp_path):
        events, metadata = build_repositories(storage)
        env_config = EnvironmentConfig(anthropic_api_key="sk-test")
        pipeline = ScanPipeline(
            app_config=AppConfig(),
            env_config=env_config,
            event_repo=events,
            meta_repo=metadata,
            client_factory=RecordingFactory(
                FakeLLMClient(extract_reply='[{"name": "AI Day", "date": "2099-05-01"}]')
            ),
        )
        client = create_app(
            pipeline, events, metadata, env_config, static_dir=str(tmp_path / "public")
        ).test_client()

        stream = client.get("/api/scan").get_data(as_text=True)
        assert stream.endswith("data: done\n\n")

        listing = client.get("/api/events").get_json()
        assert [event["name"] for event in listing["events"]] == ["AI Day"]
        assert listing["meta"]["totalScans"] == 1

        event_id = listing["events"][0]["id"]
        updated = client.put(f"/api/events/{event_id}", json={"reg": "closed"}).get_json()
        assert updated["reg"] == "closed"
        assert updated["aiFound"] is True

        assert client.delete(f"/api/events/{event_id}").get_json() == {"ok": True}
        assert client.get("/api/events").get_json()["events"] == []
        assert client.get("/api/status").get_json()["highestId"] == 1
