"""Generate a self-contained HTML page from generated storylines."""

from datetime import datetime
from html import escape
from pathlib import Path

from storylines.models import ScoreBreakdown, Storyline, StorylineBeat, StorylineStyle

STYLE_LABELS: dict[StorylineStyle, str] = {
    StorylineStyle.FIFTY_CENT: "50 Cent Cut",
    StorylineStyle.JESSE: "Jesse Washington Cut",
    StorylineStyle.COOGLER: "Ryan Coogler Cut",
    StorylineStyle.HYBRID: "Hybrid Cut",
}

STYLE_COLORS: dict[StorylineStyle, str] = {
    StorylineStyle.FIFTY_CENT: "#fcd34d",
    StorylineStyle.JESSE: "#7dd3fc",
    StorylineStyle.COOGLER: "#fda4af",
    StorylineStyle.HYBRID: "#d0ff59",
}

_BREAKDOWN_ROWS = [
    ("shared tags", "shared_tag_score"),
    ("storyteller", "storyteller_score"),
    ("location", "location_score"),
    ("chronology", "chronology_score"),
    ("recency", "recency_score"),
    ("theme", "theme_score"),
    ("usage penalty", "usage_penalty"),
    ("mode penalty", "mode_penalty"),
]


def render_storylines_html(
    storylines: list[Storyline],
    output_path: str | Path,
    show_debug: bool = False,
) -> str:
    """Write the storyline page to output_path and return the path."""
    html = _render_html(
        storylines=storylines,
        show_debug=show_debug,
        generated_at=datetime.now().strftime("%Y-%m-%d %H:%M"),
    )
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html)
    return str(path)


def _render_breakdown(debug: ScoreBreakdown) -> str:
    rows = "".join(
        f'<tr><td>{label}</td><td>{getattr(debug, attr):.2f}</td></tr>'
        for label, attr in _BREAKDOWN_ROWS
    )
    shared = ", ".join(escape(t) for t in debug.shared_tags) or "none"
    return (
        f'<table class="debug"><tr><th>total</th><th>{debug.total:.2f}</th></tr>{rows}'
        f'<tr><td>streak</td><td>{debug.storyteller_streak}</td></tr>'
        f'<tr><td>shared</td><td>{shared}</td></tr></table>'
    )


def _render_beat(beat: StorylineBeat, show_debug: bool) -> str:
    a = beat.anecdote
    chip = ""
    if beat.connection:
        chip = f'<span class="chip chip-{beat.connection.type.value}">{escape(beat.connection.label)}</span>'
    debug = _render_breakdown(beat.debug) if show_debug and beat.debug else ""
    dots = "&#9679;" * beat.intensity
    location = f" &middot; {escape(a.location)}" if a.location else ""
    return f"""<li class="beat">
      {chip}
      <div class="beat-head"><span class="beat-year">{a.year}</span> {escape(a.title)}
        <span class="intensity">{dots}</span></div>
      <div class="beat-meta">{escape(a.storyteller)}{location}</div>
      <p class="voiceover">{escape(beat.voiceover)}</p>
      {debug}
    </li>"""


def _render_storyline(line: Storyline, show_debug: bool) -> str:
    color = STYLE_COLORS[line.style]
    years = line.timeframe.years
    span = f"{years[0]} to {years[-1]}" if years else ""
    beats = "".join(_render_beat(b, show_debug) for b in line.beats)
    tags = " ".join(f"#{escape(t)}" for t in line.tags)
    return f"""<section class="storyline" id="{escape(line.id)}">
  <div class="badge" style="background:{color}">{STYLE_LABELS[line.style]}</div>
  <h2>{escape(line.title)}</h2>
  <p class="subtitle">{escape(line.description)} &middot; {span}</p>
  <p class="tone">{escape(line.tone)}</p>
  <p class="line">{escape(line.opening_line)}</p>
  <ol class="beats">{beats}</ol>
  <p class="line">{escape(line.closing_line)}</p>
  <p class="tags">{tags}</p>
</section>"""


def _render_html(
    *,
    storylines: list[Storyline],
    show_debug: bool,
    generated_at: str,
) -> str:
    body = "".join(_render_storyline(line, show_debug) for line in storylines)
    if not body:
        body = '<p class="empty">No storylines yet. Add a few anecdotes first.</p>'

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Storylines</title>
<style>
  * {{ margin: 0; padding: 0; box-sizing: border-box; }}
  body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
         background: #0d1117; color: #c9d1d9; padding: 20px; }}
  h1 {{ color: #58a6ff; margin-bottom: 4px; }}
  h2 {{ color: #e6edf3; margin: 8px 0 4px; }}
  .subtitle {{ color: #8b949e; margin-bottom: 12px; font-size: 14px; }}
  .storyline {{ background: #161b22; border: 1px solid #30363d; border-radius: 6px;
                padding: 16px 20px; margin-bottom: 24px; }}
  .badge {{ display: inline-block; color: #000; font-size: 11px; font-weight: 700;
            border-radius: 3px; padding: 2px 8px; }}
  .tone {{ font-style: italic; color: #8b949e; font-size: 13px; margin-bottom: 8px; }}
  .line {{ font-size: 15px; margin: 8px 0; color: #e6edf3; }}
  .beats {{ list-style: none; border-left: 2px solid #30363d; margin-left: 6px; padding-left: 16px; }}
  .beat {{ padding: 8px 0; border-bottom: 1px solid #21262d; }}
  .beat-head {{ font-weight: 600; }}
  .beat-year {{ color: #58a6ff; }}
  .beat-meta {{ font-size: 12px; color: #8b949e; }}
  .intensity {{ color: #f0883e; font-size: 10px; margin-left: 8px; }}
  .voiceover {{ font-size: 13px; margin-top: 4px; }}
  .chip {{ font-size: 11px; border-radius: 3px; padding: 1px 6px; font-weight: 600; }}
  .chip-tag {{ background: #1f6feb33; color: #58a6ff; }}
  .chip-storyteller {{ background: #238636aa; color: #3fb950; }}
  .chip-location {{ background: #f0883e33; color: #f0883e; }}
  .chip-chronology {{ background: #8b949e33; color: #8b949e; }}
  .tags {{ font-size: 12px; color: #bc8cff; }}
  .debug {{ font-size: 11px; color: #8b949e; margin-top: 6px; border-collapse: collapse; }}
  .debug td, .debug th {{ padding: 1px 8px 1px 0; text-align: left; }}
  .empty {{ color: #8b949e; }}
</style>
</head>
<body>

<h1>Storylines</h1>
<p class="subtitle">Generated {generated_at} &middot; {len(storylines)} cuts</p>

{body}

</body>
</html>"""
