import pytest
from jinja2 import TemplateNotFound

from rough.protocols import TemplateRenderer
from rough.templates import TemplateEngine


def test_render_does_not_autoescape(tmp_path):
    (tmp_path / "project.html").write_text("<main>{{ content }}</main>", encoding="utf-8")
    engine = TemplateEngine(tmp_path)
    assert engine.render("project.html", {"content": "<p>hi</p>"}) == "<main><p>hi</p></main>"


def test_render_supports_inheritance(tmp_path):
    (tmp_path / "base.html").write_text("[{% block body %}{% endblock %}]", encoding="utf-8")
    (tmp_path / "index.html").write_text(
        '{% extends "base.html" %}{% block body %}{{ projects | length }}{% endblock %}',
        encoding="utf-8",
    )
    engine = TemplateEngine(tmp_path)
    assert engine.render("index.html", {"projects": [{}, {}]}) == "[2]"


def test_render_to_creates_parents(tmp_path):
    (tmp_path / "index.html").write_text("{{ meta.title }}", encoding="utf-8")
    engine = TemplateEngine(tmp_path)
    target = tmp_path / "out" / "deep" / "page.html"
    engine.render_to("index.html", target, {"meta": {"title": "Hi"}})
    assert target.read_text(encoding="utf-8") == "Hi"


def test_missing_template(tmp_path):
    engine = TemplateEngine(tmp_path)
    with pytest.raises(TemplateNotFound):
        engine.render("nope.html", {})


def test_engine_is_a_template_renderer(tmp_path):
    assert isinstance(TemplateEngine(tmp_path), TemplateRenderer)
