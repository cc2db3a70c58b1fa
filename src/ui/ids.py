"""Widget ID constants for the TUI.

Using constants prevents typos and makes refactoring easier.
"""


def css(widget_id: str) -> str:
    """Return a CSS selector for a widget ID.

    Usage:
        from ui.ids import css, STATUS_BAR
        self.query_one(css(STATUS_BAR), Static)
    """
    return f"#{widget_id}"

# Header
HEADER_CONTAINER = "header-container"
HEADER_TITLE = "header-title"
CLASS_BAR = "class-bar"

# Controls area
CONTROLS_HEADING = "controls-heading"
CONTROLS_PANEL = "controls-panel"

# Footer
STATUS_BAR = "status-bar"
