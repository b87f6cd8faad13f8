"""Self-contained HTML rendering of a report view model."""

import html
import json
import logging
from datetime import datetime
from pathlib import Path
from string import Template
from typing import Optional, Union

import plotly.graph_objects as go

from siterisk import __version__
from siterisk.services.report import DISPLAY_COLUMNS, ViewModel, site_record

logger = logging.getLogger(__name__)


# -- Color palette (muted, accessible) --

COLORS = {
    "text": "#2c3e50",
    "text_muted": "#7f8c8d",
    "border": "#bdc3c7",
    "surface": "#f8f9fa",
}


def risk_badge(name: str, color: str, score: Optional[int] = None) -> str:
    """HTML badge with category name and optional score."""
    text = html.escape(name if score is None else f"{score} {name}")
    return (
        f'<span class="badge" style="background:{color}22;color:{color};'
        f'border:1px solid {color}66;">{text}</span>'
    )


def create_category_chart(view_model: ViewModel) -> go.Figure:
    """Bar chart of site counts per risk category."""
    categories = list(view_model.categories)
    counts = view_model.statistics.category_counts
    fig = go.Figure(
        go.Bar(
            x=[c.name for c in categories],
            y=[counts.get(c.name, 0) for c in categories],
            marker_color=[c.color for c in categories],
            text=[counts.get(c.name, 0) for c in categories],
            textposition="outside",
            hovertemplate="<b>%{x}</b><br>Sites: %{y}<extra></extra>",
        )
    )
    fig.update_layout(
        title="Sites by Risk Level",
        showlegend=False,
        height=320,
        yaxis_title="Sites",
        margin=dict(l=20, r=20, t=50, b=20),
    )
    return fig


def create_score_histogram(view_model: ViewModel) -> go.Figure:
    """Histogram of site scores, one bin per score value."""
    fig = go.Figure(
        go.Histogram(
            x=[s.score for s in view_model.sites],
            xbins=dict(size=1),
            marker_color=COLORS["text"],
            hovertemplate="Score %{x}<br>Sites: %{y}<extra></extra>",
        )
    )
    fig.update_layout(
        title="Score Distribution",
        height=320,
        xaxis_title="Risk Score",
        yaxis_title="Sites",
        bargap=0.1,
        margin=dict(l=20, r=20, t=50, b=20),
    )
    return fig


PAGE_TEMPLATE = Template(
    """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>$title</title>
<style>
    body { font-family: -apple-system, 'Segoe UI', Roboto, sans-serif; color: #2c3e50; margin: 0; background: #f8f9fa; }
    .container { max-width: 1280px; margin: 0 auto; padding: 24px; }
    h1 { margin-bottom: 0; }
    .muted { color: #7f8c8d; margin-top: 4px; }
    .cards { display: flex; flex-wrap: wrap; gap: 12px; margin: 24px 0; }
    .card { background: #fff; border: 1px solid #ecf0f1; border-radius: 4px; padding: 12px 18px; min-width: 150px; }
    .card .value { font-family: 'SF Mono', 'Fira Code', Consolas, monospace; font-size: 1.8em; font-weight: 600; }
    .card .label { color: #7f8c8d; font-size: 0.85em; }
    .charts { display: grid; grid-template-columns: 1fr 1fr; gap: 12px; }
    .chart { background: #fff; border: 1px solid #ecf0f1; border-radius: 4px; }
    table { border-collapse: collapse; width: 100%; background: #fff; font-size: 0.9em; }
    th, td { border-bottom: 1px solid #ecf0f1; padding: 6px 8px; text-align: left; vertical-align: top; }
    th { background: #f8f9fa; position: sticky; top: 0; }
    td.num { text-align: right; font-family: monospace; }
    .badge { display: inline-block; padding: 2px 8px; border-radius: 3px; font-weight: 600; font-size: 0.9em; white-space: nowrap; }
    .config td, .config th { font-family: monospace; }
</style>
</head>
<body>
<div class="container">
<h1>$title</h1>
<p class="muted">Generated $generated by siterisk $version</p>
<div class="cards">
$cards
</div>
<div class="charts">
<div class="chart">$category_chart</div>
<div class="chart">$score_chart</div>
</div>
<h2>Sites</h2>
<table id="sites">
<thead><tr>$header</tr></thead>
<tbody>
$rows
</tbody>
</table>
<h2>Scoring Configuration</h2>
<table class="config">
<thead><tr><th>Setting</th><th>Value</th></tr></thead>
<tbody>
$config_rows
</tbody>
</table>
<h2>Risk Levels</h2>
<table class="config">
<thead><tr><th>Level</th><th>Score Range</th></tr></thead>
<tbody>
$category_rows
</tbody>
</table>
</div>
<script type="application/json" id="site-data">$data</script>
</body>
</html>
"""
)

_NUMERIC_COLUMNS = {"Score", "Users", "Anyone Links", "EEEU", "Everyone"}


def _card(value, label: str) -> str:
    return (
        f'<div class="card"><div class="value">{html.escape(str(value))}</div>'
        f'<div class="label">{html.escape(label)}</div></div>'
    )


def _site_row(site) -> str:
    record = site_record(site)
    cells = []
    for column in DISPLAY_COLUMNS:
        value = record[column]
        if column == "Risk Level":
            cells.append(f"<td>{risk_badge(site.category.name, site.category.color)}</td>")
        elif column == "URL" and str(value).lower().startswith(("http://", "https://")):
            url = html.escape(str(value), quote=True)
            cells.append(f'<td><a href="{url}" target="_blank" rel="noopener">{url}</a></td>')
        elif column in _NUMERIC_COLUMNS:
            cells.append(f'<td class="num">{html.escape(str(value))}</td>')
        else:
            cells.append(f"<td>{html.escape(str(value))}</td>")
    return "<tr>" + "".join(cells) + "</tr>"


def render_html(view_model: ViewModel, title: str = "Site Oversharing Risk Report") -> str:
    """
    Render the full report page.

    The page embeds plotly.js and the record-oriented JSON, so it has no
    external dependencies.
    """
    stats = view_model.statistics
    cards = [
        _card(stats.total_sites, "Total sites"),
        _card(stats.high_risk_sites, "High risk (score 7+)"),
        _card(stats.public_sites, "Public sites"),
        _card(stats.sites_with_anyone_links, "Sites with anyone links"),
        _card(f"{stats.average_score:.1f}", "Average score"),
        _card(stats.max_score, "Highest score"),
    ]

    category_chart = create_category_chart(view_model).to_html(full_html=False, include_plotlyjs=True)
    score_chart = create_score_histogram(view_model).to_html(full_html=False, include_plotlyjs=False)

    config_rows = "\n".join(
        f"<tr><td>{html.escape(key)}</td><td>{value}</td></tr>"
        for key, value in view_model.scoring_config.to_dict().items()
    )
    category_rows = "\n".join(
        f"<tr><td>{risk_badge(c.name, c.color)}</td><td>{html.escape(c.label)}</td></tr>"
        for c in view_model.categories
    )

    # Keep "</script>" inside the data from closing the tag
    data = json.dumps(view_model.to_records(), ensure_ascii=False).replace("</", "<\\/")

    return PAGE_TEMPLATE.substitute(
        title=html.escape(title),
        generated=datetime.now().strftime("%Y-%m-%d %H:%M"),
        version=__version__,
        cards="\n".join(cards),
        category_chart=category_chart,
        score_chart=score_chart,
        header="".join(f"<th>{html.escape(c)}</th>" for c in DISPLAY_COLUMNS),
        rows="\n".join(_site_row(s) for s in view_model.sites),
        config_rows=config_rows,
        category_rows=category_rows,
        data=data,
    )


def write_html(view_model: ViewModel, path: Union[str, Path], title: str = "Site Oversharing Risk Report") -> Path:
    """Render the report and write it to disk."""
    path = Path(path)
    path.write_text(render_html(view_model, title=title), encoding="utf-8")
    logger.info(f"Wrote HTML report to {path}")
    return path
