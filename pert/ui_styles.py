from typing import Dict, Any

DEFAULT_THEME = "Graphite"

THEMES = {
    "Graphite": {
        "bg": "#f4f5f7",
        "surface": "#ffffff",
        "ink": "#1f2328",
        "muted": "#5f6c7b",
        "accent": "#d9480f",
        "accent2": "#1c7ed6",
        "border": "#dee2e6",
        "critical": "#d9480f",
        "critical_soft": "#ffe8cc",
        "noncritical": "#1c7ed6",
        "node_crit": "#ffd8a8",
        "node_noncrit": "#d0ebff",
        "edge": "#495057",
        "slack": "#ced4da",
    },
    "Paper": {
        "bg": "#fbfaf7",
        "surface": "#ffffff",
        "ink": "#222222",
        "muted": "#6b6b6b",
        "accent": "#c92a2a",
        "accent2": "#2b8a3e",
        "border": "#e2ded7",
        "critical": "#c92a2a",
        "critical_soft": "#ffe3e3",
        "noncritical": "#2b8a3e",
        "node_crit": "#ffc9c9",
        "node_noncrit": "#d3f9d8",
        "edge": "#868e96",
        "slack": "#e9ecef",
    },
}


def get_active_theme(theme_name: str) -> Dict[str, Any]:
    return THEMES.get(theme_name, THEMES[DEFAULT_THEME])


APP_CSS = """
<style>
.stApp { background: __PERT_BG__; color: __PERT_INK__; }
h1, h2, h3 { color: __PERT_ACCENT__; }
[data-testid="stMetricValue"] { color: __PERT_ACCENT2__; }
.pert-critical-path {
    padding: 0.6rem 1rem;
    border-left: 4px solid __PERT_CRITICAL__;
    background: __PERT_CRITICAL_SOFT__;
    font-weight: 600;
}
</style>
"""


def get_theme_css(theme: Dict[str, Any]) -> str:
    replacements = {
        "__PERT_BG__": theme["bg"],
        "__PERT_INK__": theme["ink"],
        "__PERT_ACCENT__": theme["accent"],
        "__PERT_ACCENT2__": theme["accent2"],
        "__PERT_CRITICAL__": theme["critical"],
        "__PERT_CRITICAL_SOFT__": theme["critical_soft"],
    }
    css = APP_CSS
    for key, value in replacements.items():
        css = css.replace(key, value)
    return css
