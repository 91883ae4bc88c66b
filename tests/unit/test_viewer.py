"""Tests for ViewerSession, the stateful session over an API client."""

import random
from unittest.mock import MagicMock, patch

import requests

from ontology_cards.api import ApiError, OntologyApi
from ontology_cards.core.session import state as st
from ontology_cards.core.session.viewer import ViewerSession
from ontology_cards.protocols import OntologyApiProtocol
from tests.unit.conftest import FILE
from tests.unit.fakes import FakeOntologyApi, make_class


def _session(fake_api: FakeOntologyApi) -> ViewerSession:
    session = ViewerSession(fake_api, rng=random.Random(0))
    session.load(FILE)
    return session


def test_fake_api_satisfies_protocol(fake_api: FakeOntologyApi) -> None:
    assert isinstance(fake_api, OntologyApiProtocol)


def test_load_files_opens_first_file(fake_api: FakeOntologyApi) -> None:
    session = ViewerSession(fake_api)
    files = session.load_files()
    assert [f.filename for f in files] == [FILE]
    assert session.state.file == FILE
    assert len(session.state.visible) == 7


def test_load_files_failure_sets_error(fake_api: FakeOntologyApi) -> None:
    fake_api.failures["list_files"] = ApiError("server down")
    session = ViewerSession(fake_api)
    assert session.load_files() == []
    assert session.state.error == "Failed to load ontology files: server down"


def test_load_failure_sets_error(fake_api: FakeOntologyApi) -> None:
    session = ViewerSession(fake_api)
    session.load("missing.owl")
    assert session.state.error == "Failed to load ontology classes: File 'missing.owl' not found"
    assert session.state.classes == ()
    assert not session.state.loading


def test_network_error_is_caught(fake_api: FakeOntologyApi) -> None:
    fake_api.failures["list_classes"] = requests.ConnectionError("refused")
    session = ViewerSession(fake_api)
    session.load(FILE)
    assert session.state.error is not None
    assert "refused" in session.state.error


def test_select_empty_file_clears(fake_api: FakeOntologyApi) -> None:
    session = _session(fake_api)
    session.select_file("")
    assert session.state.file == ""
    assert session.current is None


def test_dispatch_and_key(fake_api: FakeOntologyApi) -> None:
    session = _session(fake_api)
    session.dispatch(st.jump_to, 2)
    assert session.current is not None
    assert session.current.id == "headache"
    result = session.key("ArrowDown")
    assert result.handled
    assert session.current.id == "cough"


def test_save_new_node_reloads(fake_api: FakeOntologyApi) -> None:
    session = _session(fake_api)
    result = session.save_node({"label": "Rash", "id": "rash"})
    assert result["success"] is True
    assert fake_api.call_names()[-2:] == ["create_node", "list_classes"]
    assert any(c.id == "rash" for c in session.state.classes)


def test_update_node_reloads(fake_api: FakeOntologyApi) -> None:
    session = _session(fake_api)
    session.save_node({"label": "Pyrexia"}, node_id="fever")
    assert any(c.label == "Pyrexia" for c in session.state.classes)
    assert session.state.error is None


def test_failed_write_keeps_state_and_sets_error(fake_api: FakeOntologyApi) -> None:
    session = _session(fake_api)
    session.dispatch(st.jump_to, 3)
    before = session.state.classes
    fake_api.failures["update_node"] = ApiError("Label already exists")

    result = session.save_node({"label": "Cough"}, node_id="fever")

    assert result["success"] is False
    assert session.state.error == "Failed to save node: Label already exists"
    assert session.state.classes == before
    assert session.state.current_index == 3
    assert fake_api.call_names()[-1] == "update_node"


def test_write_without_file_is_rejected(fake_api: FakeOntologyApi) -> None:
    session = ViewerSession(fake_api)
    result = session.save_node({"label": "Rash"})
    assert result["success"] is False
    assert session.state.error == "Please select an ontology file first"
    assert fake_api.calls == []


def test_delete_last_card_clamps_index(fake_api: FakeOntologyApi) -> None:
    session = _session(fake_api)
    session.dispatch(st.jump_to, 6)
    assert session.current is not None
    assert session.current.id == "symptom"

    result = session.delete_node("symptom")

    assert result["success"] is True
    assert len(session.state.visible) == 6
    assert session.state.current_index == 5


def test_delete_failure_sets_error(fake_api: FakeOntologyApi) -> None:
    session = _session(fake_api)
    fake_api.failures["delete_node"] = ApiError("Node has children")
    result = session.delete_node("symptom")
    assert result["success"] is False
    assert session.state.error == "Failed to delete node: Node has children"
    assert len(session.state.visible) == 7


def test_create_relationship_reloads(fake_api: FakeOntologyApi) -> None:
    session = _session(fake_api)
    result = session.create_relationship({"source": "nurse", "target": "role"})
    assert result["success"] is True
    assert fake_api.call_names()[-2:] == ["create_relationship", "list_classes"]


def test_refresh_keeps_file(fake_api: FakeOntologyApi) -> None:
    session = _session(fake_api)
    fake_api.classes[FILE].append(make_class("rash", "Rash"))
    session.refresh()
    assert len(session.state.visible) == 8


def test_malformed_payload_becomes_load_error() -> None:
    with patch("ontology_cards.api.requests.Session") as mock_session_cls:
        api = OntologyApi("http://api.test/api", timeout=5)
    response = MagicMock(ok=True, status_code=200, content=b"{}")
    response.json.return_value = {"classes": [{"label": "No id here"}]}
    mock_session_cls.return_value.request.return_value = response

    session = ViewerSession(api)
    session.load("f.owl")

    assert not session.state.loading
    assert session.state.error is not None
    assert session.state.error.startswith("Failed to load ontology classes: Malformed")
    assert session.state.classes == ()
