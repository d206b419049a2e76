"""
Unit Tests for Persistence Adapters
===================================
"""

from services.persistence import (
    InMemoryPersistence,
    JsonFilePersistence,
    SessionStatePersistence,
    build_port,
)


class TestJsonFilePersistence:
    """File-backed slot."""

    def test_missing_file_loads_none(self, tmp_path):
        assert JsonFilePersistence(tmp_path / "state.json").load() is None

    def test_save_creates_parents_and_round_trips(self, tmp_path):
        port = JsonFilePersistence(tmp_path / "nested" / "dir" / "state.json")
        port.save('{"location": "Montréal"}')

        assert port.load() == '{"location": "Montréal"}'
        assert [p.name for p in port.path.parent.iterdir()] == ["state.json"]

    def test_save_overwrites(self, tmp_path):
        port = JsonFilePersistence(tmp_path / "state.json")
        port.save("first")
        port.save("second")
        assert port.load() == "second"

    def test_clear_is_idempotent(self, tmp_path):
        port = JsonFilePersistence(tmp_path / "state.json")
        port.save("x")
        port.clear()
        port.clear()
        assert port.load() is None


class TestSessionStatePersistence:
    """Slot inside Streamlit session state."""

    def test_round_trip(self, mock_session_state):
        port = SessionStatePersistence("qc-funding-calc")
        assert port.load() is None

        port.save("{}")
        assert mock_session_state["qc-funding-calc"] == "{}"
        assert port.load() == "{}"

        port.clear()
        assert "qc-funding-calc" not in mock_session_state

    def test_non_string_value_ignored(self, mock_session_state):
        mock_session_state["qc-funding-calc"] = {"not": "text"}
        assert SessionStatePersistence("qc-funding-calc").load() is None


class TestBuildPort:
    """Backend selection."""

    def test_file_backend(self, tmp_path):
        port = build_port("file", "qc-funding-result", tmp_path)
        assert isinstance(port, JsonFilePersistence)
        assert port.path == tmp_path / "qc-funding-result.json"

    def test_file_backend_scoped_per_session(self, tmp_path):
        """Two browser sessions never share a file slot."""
        alice = build_port("file", "qc-funding-calc", tmp_path, scope="aaa")
        bob = build_port("file", "qc-funding-calc", tmp_path, scope="bbb")
        alice.save('{"email": "alice@example.com"}')

        assert alice.path == tmp_path / "qc-funding-calc-aaa.json"
        assert bob.load() is None

    def test_session_backend(self):
        assert isinstance(build_port("session", "k", "unused"), SessionStatePersistence)

    def test_unknown_backend_falls_back_to_file(self, tmp_path, caplog):
        port = build_port("redis", "k", tmp_path)
        assert isinstance(port, JsonFilePersistence)
        assert "Unknown storage backend" in caplog.text

    def test_in_memory_counts_saves(self):
        port = InMemoryPersistence()
        port.save("a")
        port.save("b")
        assert port.saves == 2
        assert port.load() == "b"
