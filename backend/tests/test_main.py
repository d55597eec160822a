import json
import sys

import main


def run_cli(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["main.py", *args])
    return main.main()


def test_cli_writes_resolved_template(monkeypatch, tmp_path):
    template = tmp_path / "page.tsx"
    template.write_text("<h1>[HERO_TITLE]</h1><p>[CONTACT_PHONE]</p>", encoding="utf-8")
    final_json = tmp_path / "final.json"
    final_json.write_text(json.dumps({"contact": {"phone": "081-555-0000"}}), encoding="utf-8")
    output = tmp_path / "out" / "page.tsx"
    output.parent.mkdir()

    code = run_cli(monkeypatch, "--template", str(template), "--industry", "cafe",
                   "--final-json", str(final_json), "--output", str(output), "--fallback")

    assert code == 0
    assert output.read_text(encoding="utf-8") == "<h1>Artisan Coffee Experience</h1><p>081-555-0000</p>"


def test_cli_prints_to_stdout(monkeypatch, tmp_path, capsys):
    template = tmp_path / "page.tsx"
    template.write_text("[HERO_TITLE]", encoding="utf-8")

    code = run_cli(monkeypatch, "--template", str(template), "--industry", "blog", "--fallback")

    assert code == 0
    assert capsys.readouterr().out == "Thoughts & Stories"


def test_cli_missing_template(monkeypatch, tmp_path):
    assert run_cli(monkeypatch, "--template", str(tmp_path / "missing.tsx"), "--fallback") == 1


def test_cli_invalid_final_json(monkeypatch, tmp_path):
    template = tmp_path / "page.tsx"
    template.write_text("[HERO_TITLE]", encoding="utf-8")
    final_json = tmp_path / "final.json"
    final_json.write_text("{not json", encoding="utf-8")

    code = run_cli(monkeypatch, "--template", str(template), "--final-json", str(final_json), "--fallback")

    assert code == 1
