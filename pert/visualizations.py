import io
import base64
from typing import Dict, Any, Tuple

import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
import networkx as nx
import numpy as np
import plotly.graph_objects as go

import streamlit as st
from .engine import PERTScheduler
from .reporting import format_number


def build_network_graph(scheduler: PERTScheduler) -> nx.DiGraph:
    """
    Activity-on-node graph with an edge from each predecessor to its dependent.

    Predecessor ids that are not registered are left out, so the graph can be
    drawn before the network has been validated.
    """
    G = nx.DiGraph()
    for act_id, act in scheduler.activities.items():
        G.add_node(act_id, duration=act.duration, critical=act.is_critical)
    for act_id, act in scheduler.activities.items():
        for pred_id in act.predecessors:
            if pred_id in scheduler.activities:
                G.add_edge(pred_id, act_id)
    return G


def _layered_positions(G: nx.DiGraph, scheduler: PERTScheduler) -> Dict[str, Tuple[float, float]]:
    if not nx.is_directed_acyclic_graph(G):
        return nx.spring_layout(G, k=3, iterations=50, seed=42)

    pos = {}
    for layer, nodes in enumerate(nx.topological_generations(G)):
        for row, node in enumerate(sorted(nodes, key=list(scheduler.activities).index)):
            x = scheduler.activities[node].es if scheduler.is_calculated else layer
            pos[node] = (x, -row)
    return pos


@st.cache_resource(show_spinner="Generating Network Diagram...")
def create_network_diagram(scheduler_data: Dict[str, Any], theme: Dict[str, Any]) -> plt.Figure:
    """
    Create a network diagram visualization using NetworkX and Matplotlib.
    Expects scheduler_data from scheduler.to_dict() for caching compatibility.
    """
    scheduler = PERTScheduler.from_dict(scheduler_data)

    if not scheduler.activities:
        fig, ax = plt.subplots(figsize=(10, 6))
        ax.text(0.5, 0.5, 'No activities to display', ha='center', va='center', fontsize=14)
        ax.axis('off')
        return fig

    G = build_network_graph(scheduler)
    num_nodes = G.number_of_nodes()
    fig, ax = plt.subplots(figsize=(max(12, int(num_nodes * 0.8)), max(8, int(num_nodes * 0.4))))
    pos = _layered_positions(G, scheduler)

    critical_path = scheduler.critical_path
    critical_edges = set(zip(critical_path, critical_path[1:]))
    other_edges = [e for e in G.edges() if e not in critical_edges]

    nx.draw_networkx_edges(G, pos, edgelist=other_edges, edge_color=theme["edge"],
                           arrows=True, arrowsize=18, ax=ax, width=1.5)
    nx.draw_networkx_edges(G, pos, edgelist=list(critical_edges), edge_color=theme["critical"],
                           arrows=True, arrowsize=20, ax=ax, width=3)

    critical_nodes = [n for n in G.nodes() if scheduler.activities[n].is_critical]
    non_critical_nodes = [n for n in G.nodes() if not scheduler.activities[n].is_critical]

    nx.draw_networkx_nodes(G, pos, nodelist=non_critical_nodes,
                           node_color=theme["node_noncrit"], node_size=2600,
                           node_shape='s', ax=ax)
    nx.draw_networkx_nodes(G, pos, nodelist=critical_nodes,
                           node_color=theme["node_crit"], node_size=2600,
                           node_shape='s', ax=ax, edgecolors=theme["critical"], linewidths=3)

    labels = {}
    for node in G.nodes():
        act = scheduler.activities[node]
        if scheduler.is_calculated:
            labels[node] = (
                f"{node}\nD:{format_number(act.duration)}\n"
                f"ES:{format_number(act.es)} EF:{format_number(act.ef)}\n"
                f"LS:{format_number(act.ls)} LF:{format_number(act.lf)}\n"
                f"S:{format_number(act.slack)}"
            )
        else:
            labels[node] = f"{node}\nD:{format_number(act.duration)}"
    nx.draw_networkx_labels(G, pos, labels, font_size=7, ax=ax)

    legend_elements = [
        mpatches.Patch(facecolor=theme["node_crit"], edgecolor=theme["critical"], linewidth=2, label='Critical Activity'),
        mpatches.Patch(color=theme["node_noncrit"], label='Non-Critical Activity'),
        plt.Line2D([0], [0], color=theme["critical"], linewidth=3, label='Critical Path'),
    ]
    ax.legend(handles=legend_elements, loc='upper left', bbox_to_anchor=(1.02, 1), fontsize=8)
    ax.set_title('Project Network Diagram (Activity on Node)', fontsize=14, fontweight='bold')
    ax.axis('off')
    plt.tight_layout()
    return fig


@st.cache_resource(show_spinner="Generating Gantt Chart...")
def create_gantt_chart(scheduler_data: Dict[str, Any], theme: Dict[str, Any]) -> plt.Figure:
    """
    Create a Gantt chart visualization using Matplotlib.
    """
    scheduler = PERTScheduler.from_dict(scheduler_data)
    if not scheduler.is_calculated:
        fig, ax = plt.subplots(figsize=(12, 6))
        ax.text(0.5, 0.5, 'No calculated schedule to display', ha='center', va='center', fontsize=14)
        ax.axis('off')
        return fig

    # Earliest activity on top
    ordered = [scheduler.activities[a] for a in reversed(scheduler.topological_order)]

    fig, ax = plt.subplots(figsize=(14, max(6, len(ordered) * 0.5)))

    for i, act in enumerate(ordered):
        color = theme["critical"] if act.is_critical else theme["noncritical"]
        ax.barh(i, act.duration, left=act.es, height=0.6, color=color, edgecolor=color, linewidth=2)
        ax.text(act.es + act.duration / 2, i, f"{act.id} ({format_number(act.duration)})",
                ha='center', va='center', color='white', fontweight='bold', fontsize=9)

        if act.slack > 0:
            ax.barh(i, act.slack, left=act.ef, height=0.3,
                    color=theme["slack"], edgecolor='gray', linewidth=1, alpha=0.7)
            ax.text(act.ef + act.slack / 2, i, f'S:{format_number(act.slack)}',
                    ha='center', va='center', fontsize=7, color='gray')

    ax.set_yticks(range(len(ordered)))
    ax.set_yticklabels([act.id for act in ordered])
    ax.set_xlabel('Time', fontsize=12)
    ax.set_ylabel('Activities', fontsize=12)
    ax.set_title('Project Gantt Chart', fontsize=14, fontweight='bold')

    duration = scheduler.project_duration
    step = max(1, int(np.ceil(duration / 20)))
    ax.set_xticks(np.arange(0, duration + step, step))
    ax.set_xlim(-0.5, duration + 1)
    ax.grid(axis='x', linestyle='--', alpha=0.7)
    ax.set_axisbelow(True)

    legend_elements = [
        mpatches.Patch(color=theme["critical"], label='Critical Activity'),
        mpatches.Patch(color=theme["noncritical"], label='Non-Critical Activity'),
        mpatches.Patch(color=theme["slack"], label='Slack'),
    ]
    ax.legend(handles=legend_elements, loc='upper right')
    ax.axvline(x=duration, color=theme["critical"], linestyle='--', linewidth=2)
    ax.text(duration, -0.8, f'End {format_number(duration)}', ha='center', va='top',
            color=theme["critical"], fontweight='bold')

    plt.tight_layout()
    return fig


@st.cache_data(show_spinner="Generating Interactive Gantt...")
def create_plotly_gantt(scheduler_data: Dict[str, Any], theme: Dict[str, Any]) -> go.Figure:
    """
    Create an interactive Gantt chart using Plotly on a numeric time axis.
    """
    scheduler = PERTScheduler.from_dict(scheduler_data)
    if not scheduler.is_calculated:
        fig = go.Figure()
        fig.add_annotation(text="No calculated activities to display", x=0.5, y=0.5, showarrow=False)
        fig.update_layout(height=400)
        return fig

    acts = [scheduler.activities[a] for a in scheduler.topological_order]
    fig = go.Figure()
    for critical, name, color in ((True, "Critical", theme["critical"]), (False, "Non-critical", theme["noncritical"])):
        group = [a for a in acts if a.is_critical == critical]
        if not group:
            continue
        fig.add_trace(go.Bar(
            y=[a.id for a in group],
            x=[a.duration for a in group],
            base=[a.es for a in group],
            orientation="h",
            name=name,
            marker_color=color,
            customdata=[[a.es, a.ef, a.ls, a.lf, a.slack] for a in group],
            hovertemplate=(
                "%{y}<br>Duration: %{x}<br>ES/EF: %{customdata[0]}/%{customdata[1]}"
                "<br>LS/LF: %{customdata[2]}/%{customdata[3]}<br>Slack: %{customdata[4]}<extra></extra>"
            ),
        ))

    fig.update_yaxes(autorange="reversed", categoryorder="array", categoryarray=[a.id for a in acts])
    fig.update_layout(
        height=max(450, len(acts) * 32),
        margin=dict(l=10, r=10, t=30, b=10),
        title="Interactive Gantt Timeline",
        xaxis_title="Time",
        yaxis_title="Activities",
        template="plotly_white",
        paper_bgcolor=theme["surface"],
        plot_bgcolor=theme["surface"],
        font=dict(color=theme["ink"]),
    )
    fig.update_xaxes(gridcolor=theme["border"])
    return fig


def fig_to_base64(fig: plt.Figure) -> str:
    buffer = io.BytesIO()
    fig.savefig(buffer, format="png", dpi=150, bbox_inches="tight")
    buffer.seek(0)
    encoded = base64.b64encode(buffer.read()).decode("utf-8")
    buffer.close()
    return encoded
