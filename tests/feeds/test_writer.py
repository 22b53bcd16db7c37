"""Tests for shopfeeds/feeds/writer.py"""

import logging

from shopfeeds.feeds.writer import FeedWriter


class TestFeedWriter:
    def test_writes_canonical_and_dated_copy(self, tmp_path, generated_at):
        writer = FeedWriter(tmp_path)

        paths = writer.write("bestprice-gr", "<store/>\n", generated_at)

        assert [p.name for p in paths] == ["bestprice-gr.xml", "bestprice-gr-2026-02-05.xml"]
        for path in paths:
            assert path.read_text(encoding="utf-8") == "<store/>\n"

    def test_creates_output_directory(self, tmp_path, generated_at):
        writer = FeedWriter(tmp_path / "nested" / "feeds")
        paths = writer.write("meta-gr", "<rss/>", generated_at)
        assert paths[0].exists()

    def test_overwrites_previous_run(self, tmp_path, generated_at):
        writer = FeedWriter(tmp_path)
        writer.write("glami-gr", "<SHOP>old</SHOP>", generated_at)
        writer.write("glami-gr", "<SHOP>new</SHOP>", generated_at)
        assert writer.canonical_path("glami-gr").read_text(encoding="utf-8") == "<SHOP>new</SHOP>"

    def test_removes_replacement_characters(self, tmp_path, generated_at, caplog):
        writer = FeedWriter(tmp_path)

        with caplog.at_level(logging.WARNING):
            paths = writer.write("glami-gr", "<NAME>Ασ\ufffdήμι</NAME>", generated_at)

        assert paths[0].read_text(encoding="utf-8") == "<NAME>Ασήμι</NAME>"
        assert "Removed 1 corrupted characters" in caplog.text

    def test_utf8_bytes(self, tmp_path, generated_at):
        writer = FeedWriter(tmp_path)
        path = writer.write("bestprice-gr", "Δαχτυλίδι", generated_at)[0]
        assert path.read_bytes() == "Δαχτυλίδι".encode("utf-8")
