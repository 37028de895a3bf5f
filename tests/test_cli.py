import csv
import json

import pandas as pd
import pytest

from design_consensus.cli import main, read_input
from design_consensus.io.models import PageTokensError


def _page(url: str, colors: list[str], spacing: list[str]) -> dict:
    def evidence(selector: str) -> list[dict]:
        return [{"pageUrl": url, "selector": selector, "timestamp": "2024-01-01T00:00:00Z"}]

    return {
        "colors": [{"value": value, "evidence": evidence("a")} for value in colors],
        "spacing": [{"value": value, "context": "padding", "evidence": evidence("div")} for value in spacing],
    }


def _write_payload(path):
    payload = {
        "https://example.com/": _page("https://example.com/", ["#1a73e8", "#ff0000"], ["8px"]),
        "https://example.com/a": _page("https://example.com/a", ["#1a74e8"], ["16px"]),
        "https://example.com/b": _page("https://example.com/b", ["#1a73e8"], ["1.5rem"]),
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    return payload


def test_main_writes_outputs(tmp_path, capsys):
    input_path = tmp_path / "pages.json"
    _write_payload(input_path)
    out_dir = tmp_path / "out"

    assert main(["--input", str(input_path), "--out", str(out_dir), "--debug-clusters", "5"]) == 0

    for name in ("normalized.json", "tokens.dtcg.json", "metrics.json", "standards.csv", "tokens.parquet"):
        assert (out_dir / name).exists(), name

    normalized = json.loads((out_dir / "normalized.json").read_text(encoding="utf-8"))
    blue = normalized["colors"]["all"][0]
    assert blue["token"]["canonical"] == "#1a73e8"
    assert blue["page_urls"] == ["https://example.com/", "https://example.com/a", "https://example.com/b"]
    assert blue["is_standard"] is True

    metrics = json.loads((out_dir / "metrics.json").read_text(encoding="utf-8"))
    assert metrics["total_pages"] == 3
    assert metrics["colors"] == {"observed": 2, "standards": 1}
    assert metrics["spacing_base_unit"] == 8

    with (out_dir / "standards.csv").open(newline="", encoding="utf-8") as handle:
        rows = list(csv.DictReader(handle))
    assert [(row["category"], row["value"]) for row in rows] == [("colors", "#1a73e8")]

    table = pd.read_parquet(out_dir / "tokens.parquet")
    assert len(table) == 5
    assert set(table["category"]) == {"colors", "spacing"}

    dtcg = json.loads((out_dir / "tokens.dtcg.json").read_text(encoding="utf-8"))
    assert dtcg["colors"]["color-1"]["$value"] == "#1a73e8"

    output = capsys.readouterr().out
    assert "[pages] loaded 3 pages" in output
    assert "Colors: 1 standards of 2 observed" in output
    assert "#1a73e8 x3" in output


@pytest.mark.parametrize("length", ["auto", "1" * 400 + "px"])
def test_main_reports_bad_length(tmp_path, capsys, length):
    input_path = tmp_path / "pages.json"
    payload = {"https://a": _page("https://a", [], [length])}
    input_path.write_text(json.dumps(payload), encoding="utf-8")

    assert main(["--input", str(input_path), "--out", str(tmp_path / "out")]) == 1
    assert "[error] normalization failed" in capsys.readouterr().out


def test_main_reports_missing_input(tmp_path, capsys):
    assert main(["--input", str(tmp_path / "missing.json"), "--out", str(tmp_path / "out")]) == 1
    assert "[error]" in capsys.readouterr().out


def test_read_input_from_directory(tmp_path):
    for index, url in enumerate(["https://b", "https://a"]):
        page_file = tmp_path / f"page-{index}.json"
        page_file.write_text(json.dumps({"url": url, "tokens": _page(url, ["#000000"], [])}), encoding="utf-8")

    pages = read_input(tmp_path)
    assert list(pages) == ["https://b", "https://a"]
    assert pages["https://a"].colors[0].value == "#000000"


def test_read_input_rejects_duplicate_urls(tmp_path):
    for name in ("page-a.json", "page-b.json"):
        payload = {"url": "https://a", "tokens": _page("https://a", ["#000000"], [])}
        (tmp_path / name).write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(PageTokensError, match="duplicate page url"):
        read_input(tmp_path)


def test_main_reports_duplicate_urls(tmp_path, capsys):
    pages_dir = tmp_path / "pages"
    pages_dir.mkdir()
    for name in ("one.json", "two.json"):
        payload = {"url": "https://a", "tokens": {}}
        (pages_dir / name).write_text(json.dumps(payload), encoding="utf-8")

    assert main(["--input", str(pages_dir), "--out", str(tmp_path / "out")]) == 1
    assert "[error]" in capsys.readouterr().out
