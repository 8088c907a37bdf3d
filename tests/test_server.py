from __future__ import annotations

import json

from asana_ingest import __version__
from asana_ingest.config import AsanaIngestSettings
from asana_ingest.server import build_status, create_server
from asana_ingest.tools import ToolHandles

from fakes import FakeAsana


def test_create_server_attaches_handles() -> None:
    settings = AsanaIngestSettings(_env_file=None, ASANA_ACCESS_TOKEN="pat")

    server = create_server(settings, client=FakeAsana())

    handles = getattr(server, "tool_handles")
    assert isinstance(handles, ToolHandles)
    assert handles.last_run == {}
    assert getattr(server, "ingest_settings") is settings


def test_build_status_reports_configuration_and_last_run() -> None:
    settings = AsanaIngestSettings(_env_file=None, ASANA_ACCESS_TOKEN="pat")
    handles = ToolHandles(
        ingest_task=None,
        resolve_task_reference=None,
        last_run={"status": "completed", "task_gid": "10"},
    )

    payload = build_status(settings, handles)

    assert payload["server_version"] == __version__
    assert payload["asana"]["token_configured"] is True
    assert payload["asana"]["story_limit"] == 100
    assert payload["last_run"] == {"status": "completed", "task_gid": "10"}
    assert "pat" not in json.dumps(payload)


def test_build_status_without_runs() -> None:
    settings = AsanaIngestSettings(_env_file=None)
    handles = ToolHandles(ingest_task=None, resolve_task_reference=None, last_run={})

    assert build_status(settings, handles)["last_run"] is None
