"""Tests for envbind.source: snapshots of os.environ, .env files and streams."""

import io
from pathlib import Path

import pytest

from envbind.errors import MalformedIndexError
from envbind.source import EnvSnapshot, snapshot


class TestEnvSnapshot:
    def test_is_read_only(self):
        snap = EnvSnapshot({"A": "1"})
        with pytest.raises(TypeError):
            snap["A"] = "2"

    def test_copies_its_source(self):
        source = {"A": "1"}
        snap = EnvSnapshot(source)
        source["A"] = "2"
        source["B"] = "3"
        assert dict(snap) == {"A": "1"}

    def test_lookup(self):
        snap = EnvSnapshot({"USER": "xor-gate", "EMPTY": ""})
        assert snap.lookup("USER") == ("xor-gate", True)
        assert snap.lookup("EMPTY") == ("", True)
        assert snap.lookup("MISSING") == ("", False)

    def test_from_environ(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ENVBIND_TEST_VAR", "value")
        snap = EnvSnapshot.from_environ()
        monkeypatch.setenv("ENVBIND_TEST_VAR", "changed")
        assert snap["ENVBIND_TEST_VAR"] == "value"

    def test_snapshot_passes_through_existing(self):
        snap = EnvSnapshot({"A": "1"})
        assert snapshot(snap) is snap
        assert dict(snapshot({"B": "2"})) == {"B": "2"}


class TestReaders:
    def test_from_stream(self):
        snap = EnvSnapshot.from_stream(io.StringIO("USER=xor-gate"))
        assert snap.lookup("USER") == ("xor-gate", True)

    def test_from_stream_multiple_lines(self):
        text = "# comment\nA=1\nB=two words\nEMPTY=\nBARE\nexport C=3\n"
        snap = EnvSnapshot.from_stream(io.StringIO(text))
        assert dict(snap) == {"A": "1", "B": "two words", "EMPTY": "", "C": "3"}

    def test_from_dotenv_path(self, tmp_path: Path):
        path = tmp_path / "app.env"
        path.write_text('APP_PORT=8080\nAPP_NAME="quoted value"\n')
        snap = EnvSnapshot.from_dotenv(path)
        assert snap["APP_PORT"] == "8080"
        assert snap["APP_NAME"] == "quoted value"

    def test_from_dotenv_search(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        (tmp_path / ".env").write_text("FOUND=yes\n")
        sub = tmp_path / "a" / "b"
        sub.mkdir(parents=True)
        monkeypatch.chdir(sub)
        assert EnvSnapshot.from_dotenv()["FOUND"] == "yes"


class TestIndices:
    def test_collects_distinct_indices(self):
        snap = EnvSnapshot(
            {
                "P_0_A": "",
                "P_0_B": "",
                "P_2": "",
                "P_10_X_Y": "",
                "P_NAME": "",
                "Q_1_A": "",
                "P": "",
            }
        )
        assert snap.indices("P") == {0, 2, 10}

    def test_malformed_index(self):
        with pytest.raises(MalformedIndexError) as exc:
            EnvSnapshot({"P_1X": ""}).indices("P")
        assert exc.value.key == "P_1X"

    def test_no_matches(self):
        assert EnvSnapshot({"OTHER_0": ""}).indices("P") == set()


class TestValuesAreLiteral:
    def test_unset_reference_is_kept(self):
        snap = EnvSnapshot.from_stream(io.StringIO("APP_PASSWORD=x${ENVBIND_NOT_SET}y\n"))
        assert snap["APP_PASSWORD"] == "x${ENVBIND_NOT_SET}y"

    def test_process_environment_does_not_leak(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ENVBIND_SECRET", "leaked")
        snap = EnvSnapshot.from_stream(io.StringIO("APP_PASSWORD=pa${ENVBIND_SECRET}ss\n"))
        assert snap["APP_PASSWORD"] == "pa${ENVBIND_SECRET}ss"

    def test_dotenv_file_is_read_literally(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ENVBIND_SECRET", "leaked")
        path = tmp_path / ".env"
        path.write_text("A=$ENVBIND_SECRET\nB=${ENVBIND_SECRET}\n")
        assert dict(EnvSnapshot.from_dotenv(path)) == {"A": "$ENVBIND_SECRET", "B": "${ENVBIND_SECRET}"}
