import json

from click.testing import CliRunner

from circuit_challenge import config
from circuit_challenge.cli import main


def _summary(output_dir):
    [path] = list(output_dir.glob("generation_summary_*.json"))
    return json.loads(path.read_text(encoding="utf-8"))


def test_generate_with_summary(tmp_path):
    runner = CliRunner()
    result = runner.invoke(main, ["--level", "5", "--count", "2", "--seed", "42",
                                  "--output-dir", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert "Successfully generated 2/2 puzzles" in result.output
    assert "FINISH" in result.output

    summary = _summary(tmp_path)
    assert summary["total_generated"] == 2
    assert summary["difficulty"]["name"] == "Times Tables"
    assert summary["generator_config"]["seed"] == 42
    assert len(summary["puzzles"]) == 2
    assert summary["puzzles"][0]["solution"][0] == [0, 0]


def test_visualize_and_sheet(tmp_path):
    runner = CliRunner()
    result = runner.invoke(main, ["--level", "5", "--seed", "3", "--visualize", "--create-sheet",
                                  "--show-solution", "--output-dir", str(tmp_path)])

    assert result.exit_code == 0, result.output
    images = list((tmp_path / config.VISUALIZATIONS_SUBDIR).glob("*.png"))
    assert len(images) == 2


def test_config_file_and_grid_override(tmp_path):
    config_path = tmp_path / "difficulty.yaml"
    config_path.write_text("name: Small sums\naddition_enabled: true\nsubtraction_enabled: false\n"
                           "multiplication_enabled: false\ndivision_enabled: false\n")
    runner = CliRunner()
    result = runner.invoke(main, ["--config", str(config_path), "--rows", "3", "--cols", "4",
                                  "--seed", "5", "--output-dir", str(tmp_path / "out")])

    assert result.exit_code == 0, result.output
    summary = _summary(tmp_path / "out")
    assert summary["difficulty"]["name"] == "Small sums"
    assert summary["difficulty"]["grid_rows"] == 3
    assert summary["puzzles"][0]["statistics"]["operations"] == {"+": 11}


def test_invalid_settings_rejected(tmp_path):
    runner = CliRunner()
    result = runner.invoke(main, ["--rows", "2", "--output-dir", str(tmp_path)])

    assert result.exit_code == 1
    assert "Grid must have at least 3 rows" in result.output
    assert not list(tmp_path.glob("generation_summary_*.json"))


def test_generation_failure_exit_code(tmp_path):
    config_path = tmp_path / "tight.yaml"
    config_path.write_text("level: 5\nconnector_min: 1\nconnector_max: 2\n")
    runner = CliRunner()
    result = runner.invoke(main, ["--config", str(config_path), "--max-attempts", "2",
                                  "--seed", "0", "--output-dir", str(tmp_path / "out")])

    assert result.exit_code == 1
    assert "Successfully generated 0/1 puzzles" in result.output
    assert _summary(tmp_path / "out")["failures"]
