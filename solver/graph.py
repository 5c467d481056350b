"""
Phasor diagram builder for Complex Calc.

Draws every component of a solved system's solution vector as an arrow from
the origin of the complex plane and returns a matplotlib Figure.
"""

from matplotlib.figure import Figure

from solver.logging_config import get_logger

logger = get_logger(__name__)

# ── palettes ───────────────────────────────────────────────────────────────
_DARK_GRAPH = dict(
    C_BG="#0f0f10",
    C_AX="#1f1f20",
    C_GRID="#333333",
    C_TICK="#888888",
    C_SPINE="#3a3a3a",
    C_TEXT="#ffffff",
    C_LEGEND="#191919",
    C_ARROWS=("#60a5fa", "#f59e0b", "#34d399", "#f472b6", "#a78bfa"),
)

_LIGHT_GRAPH = dict(
    C_BG="#f7f7f8",
    C_AX="#ffffff",
    C_GRID="#dddddd",
    C_TICK="#555555",
    C_SPINE="#cccccc",
    C_TEXT="#222222",
    C_LEGEND="#ffffff",
    C_ARROWS=("#3b82f6", "#d97706", "#059669", "#db2777", "#7c3aed"),
)

_PINK_GRAPH = dict(
    C_BG="#FFE4F0",
    C_AX="#FFF0F5",
    C_GRID="#FFB6D9",
    C_TICK="#8B4789",
    C_SPINE="#FFB6D9",
    C_TEXT="#8B4789",
    C_LEGEND="#FFFFFF",
    C_ARROWS=("#FF1493", "#8B4789", "#FF69B4", "#C71585", "#DB7093"),
)

_GRAPH_THEMES = {"dark": _DARK_GRAPH, "light": _LIGHT_GRAPH, "pink": _PINK_GRAPH}

C_BG = _DARK_GRAPH["C_BG"]
C_AX = _DARK_GRAPH["C_AX"]
C_GRID = _DARK_GRAPH["C_GRID"]
C_TICK = _DARK_GRAPH["C_TICK"]
C_SPINE = _DARK_GRAPH["C_SPINE"]
C_TEXT = _DARK_GRAPH["C_TEXT"]
C_LEGEND = _DARK_GRAPH["C_LEGEND"]
C_ARROWS = _DARK_GRAPH["C_ARROWS"]


def set_theme(theme: str) -> None:
    """Switch the module-level graph colours; unknown names fall back to dark."""
    global C_BG, C_AX, C_GRID, C_TICK, C_SPINE, C_TEXT, C_LEGEND, C_ARROWS
    pal = _GRAPH_THEMES.get(theme, _DARK_GRAPH)
    C_BG = pal["C_BG"]
    C_AX = pal["C_AX"]
    C_GRID = pal["C_GRID"]
    C_TICK = pal["C_TICK"]
    C_SPINE = pal["C_SPINE"]
    C_TEXT = pal["C_TEXT"]
    C_LEGEND = pal["C_LEGEND"]
    C_ARROWS = pal["C_ARROWS"]


def _style_axes(ax, fig):
    fig.patch.set_facecolor(C_BG)
    ax.set_facecolor(C_AX)
    ax.tick_params(colors=C_TICK, labelsize=9)
    ax.xaxis.label.set_color(C_TEXT)
    ax.yaxis.label.set_color(C_TEXT)
    ax.title.set_color(C_TEXT)
    for spine in ax.spines.values():
        spine.set_edgecolor(C_SPINE)
    ax.grid(True, color=C_GRID, linewidth=0.8, linestyle="--", alpha=0.7)
    ax.axhline(0, color=C_SPINE, linewidth=0.8)
    ax.axvline(0, color=C_SPINE, linewidth=0.8)


def build_figure(result: dict):
    """
    Build the phasor diagram for a result from
    :func:`solver.engine.solve_complex_system`.
    Returns None when *result* carries no solution.
    """
    solution = result.get("solution") or {}
    values = solution.get("values") or []
    if not values:
        return None
    labels = solution.get("polar") or [""] * len(values)

    fig = Figure(figsize=(5, 5), dpi=100)
    ax = fig.add_subplot(111)
    _style_axes(ax, fig)

    reach = max(max(abs(re), abs(im)) for re, im in values) or 1.0
    for k, ((re, im), label) in enumerate(zip(values, labels), 1):
        color = C_ARROWS[(k - 1) % len(C_ARROWS)]
        if re or im:
            ax.annotate(
                "", xy=(re, im), xytext=(0, 0),
                arrowprops=dict(arrowstyle="-|>", color=color, linewidth=2),
            )
        ax.scatter([re], [im], color=color, s=20, zorder=5, label=f"x{k} = {label}")

    limit = reach * 1.15
    ax.set_xlim(-limit, limit)
    ax.set_ylim(-limit, limit)
    ax.set_aspect("equal", adjustable="box")
    ax.set_xlabel("Re", color=C_TEXT)
    ax.set_ylabel("Im", color=C_TEXT)
    ax.set_title("Solution phasors", color=C_TEXT, fontsize=10)
    ax.legend(fontsize=8, facecolor=C_LEGEND, edgecolor=C_SPINE, labelcolor=C_TEXT)
    fig.tight_layout(pad=1.2)
    logger.debug("built phasor diagram with %d arrows", len(values))
    return fig


def save_figure(result: dict, target, theme: str | None = None) -> bool:
    """
    Render the phasor diagram for *result* as PNG into *target* (a path or a
    binary file object), optionally switching to *theme* first.
    Returns False when there is nothing to draw.
    """
    if theme is not None:
        set_theme(theme)
    fig = build_figure(result)
    if fig is None:
        return False
    fig.savefig(target, format="png", dpi=150, bbox_inches="tight",
                facecolor=fig.get_facecolor(), edgecolor="none")
    return True
