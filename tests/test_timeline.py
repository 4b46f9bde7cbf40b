"""Tests for the static storyline HTML page."""

from pathlib import Path

from storylines.engine import generate_storylines
from storylines.timeline import render_storylines_html

from helpers import make_anecdote


class TestRenderStorylinesHtml:
    def test_writes_file(self, tmp_path, scene_anecdotes):
        out = render_storylines_html(generate_storylines(scene_anecdotes), tmp_path / "out" / "page.html")
        page = Path(out).read_text()
        assert page.startswith("<!DOCTYPE html>")
        assert "Nightlife Pulse" in page
        assert 'id="chronicle"' in page
        assert "50 Cent Cut" in page

    def test_debug_table_only_when_requested(self, tmp_path, scene_anecdotes):
        storylines = generate_storylines(scene_anecdotes)
        plain = Path(render_storylines_html(storylines, tmp_path / "plain.html")).read_text()
        debug = Path(render_storylines_html(storylines, tmp_path / "debug.html", show_debug=True)).read_text()
        assert '<table class="debug">' not in plain
        assert '<table class="debug">' in debug

    def test_escapes_user_text(self, tmp_path):
        anecdotes = [
            make_anecdote(f"e{i}", f"200{i}-01-01", title=f"<b>Night {i}</b>", tags=["dj"])
            for i in range(3)
        ]
        page = Path(render_storylines_html(generate_storylines(anecdotes), tmp_path / "p.html")).read_text()
        assert "<b>Night" not in page
        assert "&lt;b&gt;Night" in page

    def test_empty(self, tmp_path):
        page = Path(render_storylines_html([], tmp_path / "empty.html")).read_text()
        assert "No storylines yet" in page
