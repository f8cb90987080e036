import pytest

import ellipse_construct.__main__ as cli
from ellipse_construct import Method


def test_main_lists_methods(capsys):
    cli.main(["--list-methods"])

    out = capsys.readouterr().out.split()
    assert out == [method.value for method in Method]


def test_main_writes_tikz_document(tmp_path, capsys):
    tikz_path = tmp_path / "out" / "triangle.tex"

    cli.main(["arc-circle-triangle", "--list-steps", "--tikz-output-path", str(tikz_path)])

    out = capsys.readouterr().out
    assert "Method: arc-circle-triangle" in out
    assert "  1. Construct horizontal line AB of 100mm" in out
    assert "  C: (210.438, 156.915)" in out
    assert "Notes:\n  (none)" in out
    assert tikz_path.read_text(encoding="utf-8").startswith("\\documentclass")


def test_main_passes_step_to_draw_plan(tmp_path, monkeypatch):
    rendered = []

    def _generate_document(draw_plan, **kwargs):
        rendered.append((draw_plan.step_index, draw_plan.reveal_all, len(kwargs["step_labels"])))
        return "tikz document"

    monkeypatch.setattr(cli, "generate_tikz_document", _generate_document)
    tikz_path = tmp_path / "diagram.tex"

    cli.main(["focus-directrix", "--step", "99", "--tikz-output-path", str(tikz_path)])

    assert tikz_path.read_text(encoding="utf-8") == "tikz document"
    assert rendered == [(6, False, 7)]


def test_main_writes_png_preview(tmp_path, monkeypatch):
    saved = []

    def _save_figure(draw_plan, path):
        saved.append((draw_plan.title, path))
        return path

    monkeypatch.setattr("ellipse_construct.render.save_figure", _save_figure)

    cli.main(["arc-circle-axes", "--png-output-path", str(tmp_path / "axes.png")])

    assert saved == [("Arc of Circle Method (from axes)", str(tmp_path / "axes.png"))]


def test_main_rejects_invalid_eccentricity():
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["focus-directrix", "--eccentricity", "1.5"])

    assert excinfo.value.code == 2


def test_main_rejects_unknown_method():
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["trammel"])

    assert excinfo.value.code == 2


def test_main_requires_a_method():
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])

    assert excinfo.value.code == 2


@pytest.mark.parametrize(
    "flags, expected",
    [([], (6, False)), (["--all"], (6, True)), (["--step", "2"], (2, False))],
)
def test_main_reveal_mode(tmp_path, monkeypatch, flags, expected):
    rendered = []

    def _generate_document(draw_plan, **kwargs):
        rendered.append((draw_plan.step_index, draw_plan.reveal_all))
        return "tikz document"

    monkeypatch.setattr(cli, "generate_tikz_document", _generate_document)

    cli.main(["focus-directrix", *flags, "--tikz-output-path", str(tmp_path / "out.tex")])

    assert rendered == [expected]


def test_main_rejects_step_with_all():
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["focus-directrix", "--step", "1", "--all"])

    assert excinfo.value.code == 2


def test_main_runs_pipeline_once(monkeypatch):
    import ellipse_construct.engine as engine

    calls = []
    run_pipeline = engine.run_pipeline

    def _counting_pipeline(plan, config=None):
        calls.append(plan.method)
        return run_pipeline(plan, config)

    monkeypatch.setattr(cli, "run_pipeline", _counting_pipeline)
    monkeypatch.setattr(engine, "run_pipeline", _counting_pipeline)

    cli.main(["arc-circle-mirrored"])

    assert calls == [Method.ARC_CIRCLE_MIRRORED]
