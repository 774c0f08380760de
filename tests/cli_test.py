"""CLI: reading route JSON from disk and printing scores."""

import json

import pytest

from cli import main


def _write(tmp_path, data, name="route.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_prints_breakdown_for_wrapped_route(tmp_path, capsys, sample_route):
    main([_write(tmp_path, {"route": sample_route})])
    out = capsys.readouterr().out

    assert "=== Score: 6.6 / 10 (good) ===" in out
    assert "Park / boulevard" in out
    assert "1 sharp" in out
    assert "Sharply left: 1" in out


def test_json_output_for_bare_route(tmp_path, capsys, sample_route):
    main([_write(tmp_path, sample_route), "--json"])
    data = json.loads(capsys.readouterr().out)
    assert data["score"] == 6.6
    assert data["breakdown"]["total_meters"] == 1155


def test_first_route_of_routing_response_by_default(tmp_path, capsys, routing_response):
    main([_write(tmp_path, routing_response), "--json"])
    data = json.loads(capsys.readouterr().out)
    # result[0] is the stairway route
    assert data["breakdown"]["total_distance_m"] == 800


def test_all_ranks_every_route(tmp_path, capsys, routing_response):
    main([_write(tmp_path, routing_response), "--all", "--json"])
    ranked = json.loads(capsys.readouterr().out)
    assert [r["index"] for r in ranked] == [1, 0]


def test_all_text_output_marks_recommended(tmp_path, capsys, routing_response):
    main([_write(tmp_path, routing_response), "--all"])
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("* #1")
    assert lines[1].startswith("  #0")


def test_missing_file_exits(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main([str(tmp_path / "nope.json")])
    assert exc_info.value.code == 1
    assert "file not found" in capsys.readouterr().err


def test_invalid_json_exits(tmp_path, capsys):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SystemExit) as exc_info:
        main([str(path)])
    assert exc_info.value.code == 1
    assert "invalid JSON" in capsys.readouterr().err


def test_payload_without_route_exits(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main([_write(tmp_path, {"result": []})])
    assert exc_info.value.code == 1
    assert "no route found" in capsys.readouterr().err
