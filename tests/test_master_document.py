# tests/test_master_document.py
"""
Tests for master_document.py - the combined HTML for PDF export
"""
import logging
from pathlib import Path

import pytest

from lessontree.errors import ContentRootError, OutputWriteError
from lessontree.master_document import (
    build_master_html,
    escape_html,
    heading_level,
    render_card,
    render_tree,
    write_master_html,
)


class TestEscapeHtml:
    def test_script_tag(self):
        assert escape_html("<script>") == "&lt;script&gt;"

    def test_ampersand_first(self):
        """Existing entities are escaped again, not left alone"""
        assert escape_html("&lt; & >") == "&amp;lt; &amp; &gt;"

    def test_quotes_untouched(self):
        assert escape_html('"q" \'s\'') == '"q" \'s\''


class TestHeadingLevel:
    @pytest.mark.parametrize("depth,expected", [(1, 1), (2, 2), (4, 4), (5, 4), (7, 4)])
    def test_clamped(self, depth, expected):
        assert heading_level(depth) == expected


class TestRenderCard:
    """Tests for render_card"""

    def test_card_layout(self, memory_fs):
        memory_fs.add_file("usii/u/first_winter/writing", "Cold & hungry")
        memory_fs.add_file("usii/u/first_winter/map.png")
        memory_fs.add_file("usii/u/first_winter/clip.mov")
        memory_fs.add_file("usii/u/first_winter/notes.txt")
        memory_fs.add_file("usii/u/first_winter/photo.WEBP")

        html = render_card(memory_fs, Path("usii/u/first_winter"), ("u", "first_winter"))

        assert html == (
            "<h5>Card: first winter</h5>\n"
            "<p>Cold &amp; hungry</p>\n"
            '<img src="u/first_winter/map.png" style="max-width: 100%; margin: 10px 0;"><br>\n'
            '<img src="u/first_winter/photo.WEBP" style="max-width: 100%; margin: 10px 0;"><br>\n'
            "<p>[Video: clip.mov]</p>\n"
        )

    def test_writing_markup_escaped(self, memory_fs):
        memory_fs.add_file("c/writing", "<script>alert(1)</script>")
        html = render_card(memory_fs, Path("c"), ("c",))
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
        assert "<script>" not in html

    def test_unreadable_writing_renders_empty(self, memory_fs, caplog):
        memory_fs.add_dir("c/writing")
        with caplog.at_level(logging.WARNING):
            html = render_card(memory_fs, Path("c"), ("c",))
        assert "<p></p>\n" in html
        assert "Could not read" in caplog.text

    def test_all_video_types(self, memory_fs):
        memory_fs.add_file("c/writing")
        for name in ("a.mp4", "b.MOV", "c.webm", "d.avi"):
            memory_fs.add_file(f"c/{name}")
        html = render_card(memory_fs, Path("c"), ("c",))
        assert "[Video: a.mp4]" in html
        assert "[Video: b.MOV]" in html
        assert "[Video: c.webm]" in html
        assert "d.avi" not in html


class TestRenderTree:
    """Tests for the depth-first walk"""

    def test_branch_headings_by_depth(self, memory_fs):
        memory_fs.add_file("root/unit_one/lesson_a/card_x/writing", "x")
        html = render_tree(Path("root"), fs=memory_fs)
        assert html.startswith("<h1>unit one</h1>\n<h2>lesson a</h2>\n<h5>Card: card x</h5>\n")

    def test_depth_clamped_at_four(self, memory_fs):
        memory_fs.add_dir("root/a/b/c/d/e/f/g")
        html = render_tree(Path("root"), fs=memory_fs)
        assert html == (
            "<h1>a</h1>\n<h2>b</h2>\n<h3>c</h3>\n<h4>d</h4>\n"
            "<h4>e</h4>\n<h4>f</h4>\n<h4>g</h4>\n"
        )

    def test_card_not_recursed(self, memory_fs):
        memory_fs.add_file("root/card/writing", "w")
        memory_fs.add_dir("root/card/inner")
        html = render_tree(Path("root"), fs=memory_fs)
        assert "inner" not in html

    def test_branch_files_ignored(self, memory_fs):
        memory_fs.add_file("root/unit/photo.png")
        memory_fs.add_file("root/unit/readme.txt")
        assert render_tree(Path("root"), fs=memory_fs) == "<h1>unit</h1>\n"

    def test_pre_order_siblings(self, memory_fs):
        memory_fs.add_file("root/a/card1/writing", "1")
        memory_fs.add_file("root/b/card2/writing", "2")
        html = render_tree(Path("root"), fs=memory_fs)
        assert html.index("<h1>a</h1>") < html.index("card1") < html.index("<h1>b</h1>") < html.index("card2")

    def test_listing_order_without_sort(self, memory_fs):
        memory_fs.add_dir("root/zeta").add_dir("root/alpha")
        assert render_tree(Path("root"), fs=memory_fs, sort_entries=False) == "<h1>zeta</h1>\n<h1>alpha</h1>\n"
        assert render_tree(Path("root"), fs=memory_fs) == "<h1>alpha</h1>\n<h1>zeta</h1>\n"

    def test_image_paths_relative_to_root(self, sample_tree):
        html = render_tree(sample_tree)
        assert 'src="01_colonial_america/02_jamestown/overview/first_winter/map.png"' in html
        assert 'src="01_colonial_america/02_jamestown/overview/first_winter/bgimage.png"' in html
        assert "[Video: reenactment.mp4]" in html
        assert "<h4>starving time</h4>" in html


class TestBuildAndWrite:
    """Document wrapper and file output"""

    def test_header_and_footer(self, memory_fs):
        memory_fs.add_dir("root")
        html = build_master_html(Path("root"), fs=memory_fs, title="US II & more")
        assert "<!DOCTYPE html>" in html
        assert "<title>US II &amp; more</title>" in html
        assert "<style>" in html
        assert html.rstrip().endswith("</html>")

    def test_default_title(self, memory_fs):
        memory_fs.add_dir("root")
        assert "<title>US II - Master Document</title>" in build_master_html(Path("root"), fs=memory_fs)

    def test_write_creates_file(self, sample_tree, tmp_path):
        out = tmp_path / "exports" / "master.html"
        written = write_master_html(sample_tree, out, title="Review")
        text = out.read_text(encoding="utf-8")
        assert written == out
        assert "<title>Review</title>" in text
        assert "The colonists arrived in 1607 &amp; struggled." in text

    def test_written_every_time(self, sample_tree, tmp_path, touch):
        out = touch(tmp_path / "master.html", "stale")
        write_master_html(sample_tree, out)
        assert out.read_text(encoding="utf-8") != "stale"

    def test_missing_root(self, tmp_path):
        with pytest.raises(ContentRootError):
            write_master_html(tmp_path / "missing", tmp_path / "master.html")

    def test_unwritable_output(self, sample_tree, tmp_path, touch):
        blocker = touch(tmp_path / "blocker")
        with pytest.raises(OutputWriteError):
            write_master_html(sample_tree, blocker / "master.html")
