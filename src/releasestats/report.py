"""HTML dashboard generation with Plotly charts."""

import json
from datetime import UTC, datetime
from html import escape
from pathlib import Path

from releasestats.models import ChartDataset, ChartPayload


def _script_json(value) -> str:
    """Serialize to JSON that is safe inside an inline <script> block."""
    return json.dumps(value).replace("</", "<\\/")


def _trace(chart: ChartPayload, dataset: ChartDataset) -> dict:
    """Translate one dataset into a Plotly trace."""
    if chart.type == "pie":
        return {
            "type": "pie",
            "labels": chart.labels,
            "values": dataset.data,
            "name": dataset.label,
            "marker": {"colors": dataset.backgroundColor},
        }

    trace = {
        "x": chart.labels,
        "y": dataset.data,
        "name": dataset.label,
    }
    if chart.type == "line":
        trace.update(
            {
                "type": "scatter",
                "mode": "lines+markers",
                "line": {"color": dataset.borderColor, "shape": "spline"},
            }
        )
    else:
        trace.update({"type": "bar", "marker": {"color": dataset.backgroundColor}})
    return trace


def _build_charts(charts: list[ChartPayload]) -> tuple[str, str]:
    """Build chart HTML containers and JavaScript.

    Args:
        charts: Chart payloads to render, in display order.

    Returns:
        Tuple of (charts_html, charts_js).
    """
    charts_html = ""
    charts_js = ""

    for chart in charts:
        safe_id = chart.id.replace("-", "_")
        charts_html += f"""
        <div class="chart-section">
            <h2 class="chart-title">{escape(chart.title)}</h2>
            <p class="description">{escape(chart.description)}</p>
            <div class="chart-container">
                <div id="chart-{safe_id}" class="chart"></div>
            </div>
            <p class="insight">{escape(chart.insight)}</p>
        </div>
        """

        traces = [_trace(chart, dataset) for dataset in chart.datasets]
        layout = {
            "margin": {"t": 20, "r": 20},
            "showlegend": chart.type == "pie",
        }
        charts_js += f"""
        Plotly.newPlot('chart-{safe_id}', {_script_json(traces)}, {_script_json(layout)});
        """

    return charts_html, charts_js


def generate_dashboard(charts: list[ChartPayload], output_path: str | Path) -> None:
    """Generate a static HTML dashboard from chart payloads.

    Args:
        charts: Chart payloads as served by the dashboard API.
        output_path: Path to write HTML file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    charts_html, charts_js = _build_charts(charts)

    html = f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Release Stats Dashboard</title>
    <script src="https://cdn.plot.ly/plotly-2.27.0.min.js"></script>
    <style>
        * {{ box-sizing: border-box; }}
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            margin: 0;
            padding: 20px;
            background: #f5f5f5;
        }}
        .header {{
            text-align: center;
            margin-bottom: 30px;
        }}
        .header h1 {{
            color: #333;
            margin-bottom: 5px;
        }}
        .header p, .description, .insight {{
            color: #666;
            font-size: 14px;
        }}
        .chart-section {{
            margin-bottom: 40px;
        }}
        .chart-title {{
            color: #333;
            border-bottom: 2px solid #ddd;
            padding-bottom: 8px;
        }}
        .chart-container {{
            background: white;
            border-radius: 8px;
            padding: 15px;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
        }}
        .chart {{
            width: 100%;
            height: 360px;
        }}
    </style>
</head>
<body>
    <div class="header">
        <h1>Release Stats Dashboard</h1>
        <p>Generated: {datetime.now(UTC).strftime("%Y-%m-%d %H:%M UTC")}</p>
    </div>

    {charts_html}

    <script>
        {charts_js}
    </script>
</body>
</html>
"""

    output_path.write_text(html)
