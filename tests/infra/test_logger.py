"""Tests for infra/logger.py"""

import json

from infra.logger import TutorLogger, create_logger, null_logger


class TestTutorLogger:
    def test_no_file_until_first_record(self, log_dir):
        logger = create_logger("s1", "session", log_dir=log_dir)
        assert not log_dir.exists()

        logger.info("hello")
        logger.close()

        assert (log_dir / "session.jsonl").exists()

    def test_json_record_has_context_fields(self, log_dir):
        with create_logger("s1", "annotations", log_dir=log_dir, level="DEBUG") as logger:
            logger.debug("Dropped annotation", sentence_index=2, kept=3, dropped=1, ignored_field="x")

        [line] = (log_dir / "annotations.jsonl").read_text().splitlines()
        record = json.loads(line)
        assert record["message"] == "Dropped annotation"
        assert record["level"] == "DEBUG"
        assert record["session_id"] == "s1"
        assert record["component"] == "annotations"
        assert (record["sentence_index"], record["kept"], record["dropped"]) == (2, 3, 1)
        assert "ignored_field" not in record

    def test_level_filters(self, log_dir):
        with create_logger("s1", "model", log_dir=log_dir, level="INFO") as logger:
            logger.debug("hidden")
            logger.warning("shown", error="boom")

        records = [json.loads(l) for l in (log_dir / "model.jsonl").read_text().splitlines()]
        assert [r["message"] for r in records] == ["shown"]
        assert records[0]["error"] == "boom"

    def test_appends_across_instances(self, log_dir):
        for i in range(2):
            with create_logger(f"s{i}", "web", log_dir=log_dir) as logger:
                logger.info(f"run {i}")

        assert len((log_dir / "web.jsonl").read_text().splitlines()) == 2

    def test_child_shares_directory(self, log_dir):
        parent = create_logger("s1", "cli", log_dir=log_dir)
        child = parent.child("history")
        child.error("write failed", entry_id="abc")
        child.close()

        record = json.loads((log_dir / "history.jsonl").read_text())
        assert record["component"] == "history"
        assert record["entry_id"] == "abc"

    def test_console_output(self, capsys):
        logger = TutorLogger("s1", "capture", console_output=True)
        logger.warning("queue full", error="x")
        logger.close()

        err = capsys.readouterr().err
        assert "WARNING [capture] queue full (x)" in err

    def test_null_logger_writes_nothing(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        logger = null_logger("llm")
        logger.info("nothing", model="m")
        logger.close()
        assert list(tmp_path.iterdir()) == []
