"""Unit tests for the codechunk command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from codechunk.cli import main as cli_main
from tests.conftest import JAVA_FOO, make_event, make_input_file


@pytest.fixture(autouse=True)
def _quiet_cli(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)  # no config/config.yaml, no .env
    monkeypatch.delenv("TRANSFORMATION_BUCKET", raising=False)
    monkeypatch.setattr(cli_main, "configure_logging", lambda **_: None)


def _stdout_lines(capsys: pytest.CaptureFixture[str]) -> list[str]:
    return [line for line in capsys.readouterr().out.splitlines() if line.strip()]


class TestChunkCommand:
    def test_prints_one_json_line_per_chunk(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        source = tmp_path / "Foo.java"
        source.write_text(JAVA_FOO, encoding="utf-8")

        exit_code = cli_main.main(
            ["chunk", str(source), "--as-path", "github/acme/widgets/src/Foo.java"]
        )

        assert exit_code == 0
        entries = [json.loads(line) for line in _stdout_lines(capsys)]
        assert [e["contentMetadata"]["name"] for e in entries] == ["Foo", "bar"]
        assert all(e["contentMetadata"]["gitRepository"] == "widgets" for e in entries)
        assert all(e["contentType"] == "TEXT" for e in entries)

    def test_max_chunk_size_override(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        source = tmp_path / "notes.md"
        source.write_text("aaaaaaaaaa\n\nbbbbbbbbbb\n", encoding="utf-8")

        assert cli_main.main(["chunk", str(source), "--max-chunk-size", "12"]) == 0
        bodies = [json.loads(line)["contentBody"] for line in _stdout_lines(capsys)]
        assert bodies == ["aaaaaaaaaa", "bbbbbbbbbb"]

    @pytest.mark.parametrize("size", ["0", "-5", "ten"])
    def test_max_chunk_size_must_be_positive(
        self, tmp_path: Path, size: str, capsys: pytest.CaptureFixture[str]
    ) -> None:
        source = tmp_path / "notes.md"
        source.write_text("hello\n", encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            cli_main.main(["chunk", str(source), "--max-chunk-size", size])
        assert exc_info.value.code == 2
        assert "--max-chunk-size" in capsys.readouterr().err

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli_main.main(["chunk", str(tmp_path / "nope.ts")]) == 1
        assert "cannot read" in capsys.readouterr().err


class TestTransformCommand:
    def test_runs_job_against_local_store(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        root = tmp_path / "objects"
        batch = root / "src-bucket" / "batches" / "foo.json"
        batch.parent.mkdir(parents=True)
        batch.write_text(
            json.dumps({"fileContents": [{"contentBody": JAVA_FOO, "contentType": "TEXT"}]}),
            encoding="utf-8",
        )
        event_path = tmp_path / "event.json"
        event_path.write_text(
            json.dumps(
                make_event(
                    [make_input_file("s3://src-bucket/github/acme/widgets/Foo.java", ["batches/foo.json"])]
                )
            ),
            encoding="utf-8",
        )

        exit_code = cli_main.main(
            ["transform", str(event_path), "--storage-root", str(root), "--output-bucket", "out"]
        )

        assert exit_code == 0
        captured = capsys.readouterr()
        response = json.loads(captured.out)
        key = "transformations/job-1/github/acme/widgets/Foo.java.json"
        assert response["outputFiles"][0]["contentBatches"] == [{"key": key}]
        written = json.loads((root / "out" / key).read_text(encoding="utf-8"))
        assert len(written["fileContents"]) == 2
        assert "2 chunk(s)" in captured.err

    def test_missing_output_bucket_fails(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        event_path = tmp_path / "event.json"
        event_path.write_text(json.dumps(make_event([])), encoding="utf-8")

        assert cli_main.main(["transform", str(event_path), "--storage-root", str(tmp_path)]) == 1
        assert "TRANSFORMATION_BUCKET" in capsys.readouterr().err


class TestMisc:
    def test_languages(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli_main.main(["languages"]) == 0
        out = capsys.readouterr().out
        assert "java" in out
        assert "csharp" in out

    def test_no_command_prints_help(self) -> None:
        assert cli_main.main([]) == 1
