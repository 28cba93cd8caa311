"""Tests for the stencil command line."""

import logging

from stencil.cli import main


def test_render_template_with_context(tmp_path, capsys):
    template = tmp_path / "greeting.txt"
    template.write_text("Hello {{ name }}!", encoding="utf-8")
    context = tmp_path / "context.yaml"
    context.write_text("name: World\n", encoding="utf-8")

    assert main([str(template), str(context)]) == 0
    assert capsys.readouterr().out == "Hello World!"


def test_render_to_output_file(tmp_path):
    template = tmp_path / "t.txt"
    template.write_text("{{ items }}", encoding="utf-8")
    context = tmp_path / "c.json"
    context.write_text('{"items": [1, 2]}', encoding="utf-8")
    out = tmp_path / "out.txt"

    assert main([str(template), str(context), "-o", str(out)]) == 0
    assert out.read_text(encoding="utf-8") == "[1,2]"


def test_plain_text_with_must_have_expression(tmp_path, capsys):
    template = tmp_path / "plain.txt"
    template.write_text("static", encoding="utf-8")

    assert main([str(template), "--must-have-expression"]) == 2
    assert capsys.readouterr().out == "static"


def test_render_failure_exits_1(tmp_path, caplog):
    template = tmp_path / "t.txt"
    template.write_text("{{ link }}", encoding="utf-8")
    context = tmp_path / "c.yaml"
    context.write_text("link: 'javascript:void(0)'\n", encoding="utf-8")

    with caplog.at_level(logging.ERROR):
        assert main([str(template), str(context), "-t", "url"]) == 1
    assert "Can't interpolate" in caplog.text


def test_custom_delimiters_from_config(tmp_path, capsys):
    config = tmp_path / "stencil.yaml"
    config.write_text("delimiters:\n  primary_start: '<%'\n  primary_end: '%>'\n", encoding="utf-8")
    template = tmp_path / "t.txt"
    template.write_text("<% 6 * 7 %> {{ kept }}", encoding="utf-8")

    assert main([str(template), "-c", str(config)]) == 0
    assert capsys.readouterr().out == "42 {{ kept }}"
