"""Rich panel used to display diagnostics."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from rich.panel import Panel


def ArgmatchPanel(message: Any, title: str = "Error", style: str = "red") -> "Panel":  # noqa: N802
    """Create a :class:`~rich.panel.Panel` with a consistent style.

    .. code-block:: text

        ╭─ Error ──────────────────────────────────╮
        │ Unknown option: "--verbse".              │
        ╰──────────────────────────────────────────╯

    Parameters
    ----------
    message: Any
        Body of the panel; stringified.
    title: str
        Title in the top-left corner.
    style: str
        Rich style for the panel border.
    """
    from rich import box
    from rich.panel import Panel
    from rich.text import Text

    return Panel(
        Text(str(message), "default"),
        title=title,
        style=style,
        box=box.ROUNDED,
        expand=True,
        title_align="left",
    )
