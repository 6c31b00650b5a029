from html import escape
from typing import Dict, Any, List, Optional

import pandas as pd
import matplotlib.pyplot as plt

from .engine import PERTScheduler
from .reporting import format_critical_path, format_number
from .visualizations import create_network_diagram, create_gantt_chart, fig_to_base64


def _cell(value: object) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return "-"
    if isinstance(value, float):
        return format_number(value)
    return escape(str(value))


def critical_path_html(path: Optional[List[str]]) -> str:
    """HTML-escaped arrow chain, or "(none)" when there is no path."""
    return escape(format_critical_path(path)) if path else "(none)"


def build_report_html(scheduler: PERTScheduler, theme: Dict[str, Any]) -> str:
    """
    Build a standalone HTML report for a calculated project.
    """
    scheduler_data = scheduler.to_dict()
    net_fig = create_network_diagram(scheduler_data, theme)
    gantt_fig = create_gantt_chart(scheduler_data, theme)

    net_b64 = fig_to_base64(net_fig)
    gantt_b64 = fig_to_base64(gantt_fig)

    plt.close(net_fig)
    plt.close(gantt_fig)

    results_df = scheduler.get_results_dataframe()
    rows_html = ""
    for _, row in results_df.iterrows():
        style = f"background-color: {theme['critical_soft']}; font-weight: bold;" if row["Critical"] == "Yes" else ""
        cells = "".join(
            f"<td>{_cell(row[col])}</td>"
            for col in ("ID", "Duration", "ES", "EF", "LS", "LF", "Slack", "Predecessors", "Critical")
        )
        rows_html += f'<tr style="{style}">{cells}</tr>\n'

    path = scheduler.get_critical_path()
    path_html = critical_path_html(path)

    html = f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="UTF-8">
        <title>CPM Project Report</title>
        <style>
            body {{ font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; color: {theme['ink']}; background: {theme['bg']}; line-height: 1.6; }}
            .container {{ max-width: 1000px; margin: 0 auto; padding: 40px; background: white; }}
            h1 {{ color: {theme['accent']}; border-bottom: 2px solid {theme['accent']}; padding-bottom: 10px; }}
            h2 {{ color: {theme['accent2']}; margin-top: 30px; }}
            table {{ width: 100%; border-collapse: collapse; margin: 20px 0; }}
            th, td {{ padding: 8px; border: 1px solid {theme['border']}; text-align: left; }}
            .img-container img {{ max-width: 100%; height: auto; }}
            .summary-value {{ font-size: 24px; font-weight: bold; color: {theme['accent']}; }}
        </style>
    </head>
    <body>
        <div class="container">
            <h1>Project Schedule Report</h1>
            <p>Duration: <span class="summary-value">{format_number(scheduler.get_project_duration())}</span>
               &bull; Activities: <span class="summary-value">{len(scheduler.activities)}</span></p>

            <h2>Schedule Table</h2>
            <table>
                <thead>
                    <tr><th>ID</th><th>Dur</th><th>ES</th><th>EF</th><th>LS</th><th>LF</th><th>Slack</th><th>Preds</th><th>Crit</th></tr>
                </thead>
                <tbody>{rows_html}</tbody>
            </table>

            <h2>Critical Path</h2>
            <p>{path_html}</p>

            <h2>Gantt Chart</h2>
            <div class="img-container"><img src="data:image/png;base64,{gantt_b64}" alt="Gantt Chart"></div>

            <h2>Network Diagram</h2>
            <div class="img-container"><img src="data:image/png;base64,{net_b64}" alt="Network Diagram"></div>

            <p style="font-size: 12px; color: {theme['muted']}; text-align: center;">
                Generated {pd.Timestamp.now().strftime('%Y-%m-%d %H:%M')}
            </p>
        </div>
    </body>
    </html>
    """
    return html
