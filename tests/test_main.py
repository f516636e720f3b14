import io
import json
import sys

import pytest

import main
from config import config


@pytest.fixture(autouse=True)
def no_output_override(monkeypatch):
    monkeypatch.setattr(config, "FEEDS_OUTPUT_DIR", None)


def make_context(root, **preprocessor):
    return {
        "root": str(root),
        "config": {
            "book": {"title": "Test Book", "src": "src"},
            "output": {"html": {"site-url": "https://docs.example.org/"}},
            "preprocessor": {"rss-feed": preprocessor},
        },
        "renderer": "html",
    }


def run_with_stdin(monkeypatch, text, argv=None):
    monkeypatch.setattr(sys, "stdin", io.StringIO(text))
    with pytest.raises(SystemExit) as excinfo:
        main.main(argv or [])
    return excinfo.value.code


def test_supports_any_renderer(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main.main(["supports", "html"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out == ""


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main.main(["--version"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out.strip() == "mdbook-feeds 1.0.0"


def test_preprocess_writes_feeds_and_echoes_book(tmp_path, monkeypatch, capsys):
    src = tmp_path / "src"
    src.mkdir()
    (src / "intro.md").write_text('---\ntitle: "Intro"\ndate: "2025-01-01"\n---\nWelcome.\n', encoding="utf-8")
    book = {"sections": [{"Chapter": {"name": "Intro"}}], "__non_exhaustive": None}

    code = run_with_stdin(monkeypatch, json.dumps([make_context(tmp_path, **{"json-feed": True}), book]))

    assert code == 0
    assert json.loads(capsys.readouterr().out) == book
    assert (src / "rss.xml").exists()
    feed = json.loads((src / "feed.json").read_text(encoding="utf-8"))
    assert feed["title"] == "Test Book"
    assert feed["items"][0]["url"] == "https://docs.example.org/intro.html"


def test_output_dir_override(tmp_path, monkeypatch, capsys):
    (tmp_path / "src").mkdir()
    out_dir = tmp_path / "public"
    monkeypatch.setattr(config, "FEEDS_OUTPUT_DIR", str(out_dir))

    code = run_with_stdin(monkeypatch, json.dumps([make_context(tmp_path), {}]))

    assert code == 0
    assert (out_dir / "rss.xml").exists()
    assert not (tmp_path / "src" / "rss.xml").exists()


@pytest.mark.parametrize("payload", ["not json", "{}", "[{}]", "[]"])
def test_bad_host_input_exits_with_error(monkeypatch, capsys, payload):
    assert run_with_stdin(monkeypatch, payload) == 1
    assert capsys.readouterr().out == ""


def test_missing_source_tree_exits_with_error(tmp_path, monkeypatch, capsys):
    code = run_with_stdin(monkeypatch, json.dumps([make_context(tmp_path), {}]))

    assert code == 1
    assert capsys.readouterr().out == ""
