import json

from soustack_lite.cli import main


def test_cli_prints_document(tmp_path, capsys):
    source = tmp_path / "eggs.txt"
    source.write_text("Best Eggs\nIngredients:\n- 2 eggs\nSteps:\n1. Cook", encoding="utf-8")

    assert main([str(source)]) == 0

    out = capsys.readouterr().out
    assert json.loads(out)["name"] == "Best Eggs"


def test_cli_writes_into_directory(tmp_path, capsys):
    source = tmp_path / "eggs.txt"
    source.write_text("Best Eggs\nIngredients:\n- 2 eggs\nSteps:\n1. Cook", encoding="utf-8")

    assert main([str(source), "-o", str(tmp_path), "--checks"]) == 0

    written = tmp_path / "best-eggs.soustack.json"
    assert json.loads(written.read_text(encoding="utf-8"))["ingredients"] == ["2 eggs"]


def test_cli_empty_input(tmp_path):
    source = tmp_path / "empty.txt"
    source.write_text("  \n", encoding="utf-8")

    assert main([str(source)]) == 1
