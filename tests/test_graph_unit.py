from matplotlib.figure import Figure

from solver import engine, graph


def _result() -> dict:
    return engine.solve_complex_system(*engine.example_system(3))


def test_set_theme_and_style_axes() -> None:
    graph.set_theme("pink")
    assert graph.C_BG == graph._PINK_GRAPH["C_BG"]

    graph.set_theme("light")
    assert graph.C_BG == graph._LIGHT_GRAPH["C_BG"]

    fig = Figure(figsize=(4, 2))
    ax = fig.add_subplot(111)
    graph._style_axes(ax, fig)
    assert ax.get_xlabel() == ""

    graph.set_theme("no-such-theme")
    assert graph.C_BG == graph._DARK_GRAPH["C_BG"]


def test_build_figure_draws_one_marker_per_unknown() -> None:
    fig = graph.build_figure(_result())
    assert isinstance(fig, Figure)

    ax = fig.axes[0]
    labels = [text.get_text() for text in ax.get_legend().get_texts()]
    assert len(labels) == 3
    assert labels[0].startswith("x1 = ")
    assert ax.get_xlabel() == "Re"


def test_build_figure_without_solution_returns_none() -> None:
    assert graph.build_figure({}) is None
    assert graph.build_figure({"solution": {"values": []}}) is None


def test_build_figure_handles_zero_solution() -> None:
    result = engine.solve_complex_system([["1"]], ["0"])
    assert isinstance(graph.build_figure(result), Figure)


def test_save_figure_writes_png_with_theme(tmp_path) -> None:
    target = tmp_path / "diagram.png"
    try:
        assert graph.save_figure(_result(), str(target), theme="light") is True
        assert graph.C_BG == graph._LIGHT_GRAPH["C_BG"]
    finally:
        graph.set_theme("dark")
    assert target.read_bytes().startswith(b"\x89PNG")

    assert graph.save_figure({}, str(tmp_path / "empty.png")) is False
    assert not (tmp_path / "empty.png").exists()
