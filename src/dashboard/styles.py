"""
Textual CSS for the Bandix dashboard, built from a ColorTheme.

Each screen gets its own block so the app can concatenate them into
its CSS class attribute.
"""

from .models import ColorTheme, THEME


def _panel(theme: ColorTheme) -> str:
    """Rules shared by every bordered panel."""
    return f"background: {theme.surface}; border: round {theme.border};"


def get_splash_css(theme: ColorTheme = THEME) -> str:
    """CSS for the connecting screen shown before the first poll."""
    return f"""
SplashScreen {{ align: center middle; background: {theme.background}; }}
SplashScreen Center {{ width: 100%; }}

#connect-box {{
    width: 52; height: auto;
    padding: 2 4;
    border: heavy {theme.primary_dark};
    background: {theme.surface};
}}
#connect-box > Static {{ width: 100%; content-align: center top; }}
.connect-banner {{ color: {theme.download}; text-style: bold; }}
.connect-tagline {{ color: {theme.text_dim}; padding-bottom: 1; }}
#connect-spinner {{ width: 44; height: 1; margin: 1 2; }}
#connect-message {{ color: {theme.warning}; }}
"""


def get_css(theme: ColorTheme = THEME) -> str:
    """CSS for the live dashboard screen."""
    panel = _panel(theme)
    return f"""
DashboardScreen {{ background: {theme.background}; }}

#dashboard-container {{ height: 1fr; padding: 0 1; }}
#header-status {{
    height: 1; padding: 0 1;
    color: {theme.text}; background: {theme.surface_light};
}}

#stat-cards, StatCard {{ height: 5; }}
#stat-cards {{ margin-top: 1; }}
StatCard {{ width: 1fr; margin-right: 1; padding: 0 1; {panel} }}

#chart-panel {{ height: auto; padding: 0 1; {panel} }}
#chart-legend {{ height: 1; }}
#bandwidth-chart {{ width: 100%; height: auto; }}

#main-grid {{ height: 1fr; margin-top: 1; }}
#clients-table {{ width: 3fr; height: 1fr; {panel} }}
#sidebar {{ width: 1fr; min-width: 30; height: 1fr; padding: 0 1; {panel} }}
#sidebar .sidebar-title {{ color: {theme.primary}; text-style: bold; padding-top: 1; }}
#service-status, #service-buttons {{ height: auto; }}
#service-status {{ color: {theme.text}; }}
#service-buttons Button {{ min-width: 9; margin-right: 1; }}

#clients-table > .datatable--header {{
    color: {theme.text_dim}; background: {theme.surface_light}; text-style: bold;
}}
#clients-table > .datatable--cursor {{ background: {theme.primary_dark}; }}
"""


def get_modal_css(theme: ColorTheme = THEME) -> str:
    """CSS for the speed limit dialog."""
    return f"""
LimitScreen {{ align: center middle; background: {theme.background} 70%; }}

#limit-dialog {{
    width: 60; height: auto;
    padding: 1 2;
    border: thick {theme.warning};
    background: {theme.surface};
}}
#limit-title {{ color: {theme.warning}; text-style: bold; }}
#limit-device {{ color: {theme.text_dim}; padding-bottom: 1; }}
.limit-label {{ color: {theme.text}; padding-top: 1; }}
.limit-hint {{ color: {theme.text_muted}; }}

#limit-presets, #limit-actions {{ height: auto; padding-top: 1; }}
#limit-presets Button {{ min-width: 10; margin-right: 1; }}
#limit-actions {{ align: right middle; }}
#limit-actions Button {{ margin-left: 1; }}
"""
