import json

import pytest
import requests

from ai_readiness.cli import CONFIG_TEMPLATE, build_parser, main
from ai_readiness.config import load_config

from conftest import FakeResponse, FakeSession, sitemapindex, urlset

BASE = "https://example.com"


@pytest.fixture
def fake_network(monkeypatch):
    routes = {
        f"{BASE}/sitemap.xml": FakeResponse(
            urlset(f"{BASE}/", f"{BASE}/about-us", f"{BASE}/docs/intro")
        ),
    }
    monkeypatch.setattr(requests, "Session", lambda: FakeSession(routes))
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    return routes


def test_init_writes_loadable_config(tmp_path, capsys):
    target = tmp_path / "ai-readiness.config.yml"
    assert main(["init", "-p", str(target)]) == 0
    assert target.read_text(encoding="utf-8") == CONFIG_TEMPLATE
    assert load_config(target).fetch.sitemap_timeout == 10
    assert "[OK]" in capsys.readouterr().out


def test_init_refuses_to_overwrite(tmp_path):
    target = tmp_path / "config.yml"
    target.write_text("server:\n  port: 1234\n", encoding="utf-8")
    assert main(["init", "-p", str(target)]) == 1
    assert "1234" in target.read_text(encoding="utf-8")
    assert main(["init", "-p", str(target), "--force"]) == 0


def test_generate_writes_file(tmp_path, fake_network):
    output = tmp_path / "llms.txt"
    assert main(["generate", "example.com", "-o", str(output), "--no-llm"]) == 0
    content = output.read_text(encoding="utf-8")
    assert content.startswith("# example.com")
    assert "- [About Us](https://example.com/about-us): about-us page" in content


def test_generate_json(capsys, fake_network):
    assert main(["generate", BASE, "--json", "--no-llm"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["stats"]["totalUrls"] == 3
    assert data["level1Urls"] == [f"{BASE}/about-us"]


def test_generate_json_keeps_warnings_off_stdout(capsys, monkeypatch):
    routes = {
        f"{BASE}/sitemap.xml": FakeResponse(
            sitemapindex(f"{BASE}/a.xml", f"{BASE}/broken.xml")
        ),
        f"{BASE}/a.xml": FakeResponse(urlset(f"{BASE}/pricing", f"{BASE}/blog/post")),
    }
    monkeypatch.setattr(requests, "Session", lambda: FakeSession(routes))

    assert main(["generate", "example.com", "--json", "--no-llm"]) == 0
    captured = capsys.readouterr()
    data = json.loads(captured.out)
    assert data["level1Urls"] == [f"{BASE}/pricing"]
    assert "[WARNING]" in captured.err
    assert "broken.xml" in captured.err


def test_generate_reports_errors(capsys, monkeypatch):
    monkeypatch.setattr(requests, "Session", lambda: FakeSession({}))
    assert main(["generate", BASE, "--no-llm"]) == 1
    err = capsys.readouterr().err
    assert "[ERROR]" in err
    assert "sitemap.xml" in err


def test_generate_missing_config(tmp_path, capsys):
    assert main(["generate", BASE, "-c", str(tmp_path / "missing.yml")]) == 1
    assert "Config file not found" in capsys.readouterr().err


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
