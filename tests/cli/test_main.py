"""Tests for the clipstat command line."""

import json

import numpy as np
import pytest
from click.testing import CliRunner

import cli.main as cli_mod


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def triangular_file(tmp_path, triangular_sample):
    path = tmp_path / "triangular.txt"
    np.savetxt(path, triangular_sample)
    return path


def test_summary_from_stdin(runner, column_text):
    r = runner.invoke(cli_mod.cli, ["summary"], input=column_text)
    assert r.exit_code == 0, r.output
    payload = json.loads(r.output)
    assert payload["number"] == 6
    assert payload["median"] == pytest.approx(3.5)
    assert payload["maximum"] == 100.0


def test_summary_with_blank_from_env(runner, column_text):
    r = runner.invoke(
        cli_mod.cli, ["summary"], input=column_text, env={"CLIPSTAT_BLANK": "100"}
    )
    assert r.exit_code == 0, r.output
    payload = json.loads(r.output)
    assert payload["number"] == 5
    assert payload["median"] == pytest.approx(3.0)


def test_summary_of_second_column(runner, tmp_path):
    path = tmp_path / "table.txt"
    path.write_text("1 10\n2 20\nnan 30\n")
    r = runner.invoke(cli_mod.cli, ["summary", str(path), "--column", "1"])
    assert r.exit_code == 0, r.output
    assert json.loads(r.output)["median"] == pytest.approx(20.0)

    r = runner.invoke(cli_mod.cli, ["summary", str(path)])
    assert json.loads(r.output)["number"] == 2


def test_summary_rejects_missing_column(runner, column_text):
    r = runner.invoke(cli_mod.cli, ["summary", "--column", "3"], input=column_text)
    assert r.exit_code == 2
    assert "Could not read column 3" in r.output


def test_clip_mad_single_round(runner, column_text):
    r = runner.invoke(
        cli_mod.cli,
        ["clip", "--method", "mad", "--param", "1", "--extra", "mean"],
        input=column_text,
    )
    assert r.exit_code == 0, r.output
    payload = json.loads(r.output)
    assert payload["method"] == "mad"
    assert payload["rounds"] == 1
    assert payload["number_used"] == 5
    assert payload["median"] == pytest.approx(3.5)
    assert payload["mad"] == pytest.approx(1.5)
    assert payload["mean"] == pytest.approx(115 / 6)
    assert payload["std"] is None
    assert len(payload["history"]) == 1


def test_clip_rejects_bad_multiplier(runner, column_text):
    r = runner.invoke(cli_mod.cli, ["clip", "--multiplier", "0"], input=column_text)
    assert r.exit_code == 2
    assert "multiplier" in r.output


def test_clip_writes_output_file(runner, column_text, tmp_path):
    output = tmp_path / "out" / "clip.json"
    r = runner.invoke(cli_mod.cli, ["clip", "--output", str(output)], input=column_text)
    assert r.exit_code == 0, r.output
    assert "Wrote result to" in r.output
    assert json.loads(output.read_text())["method"] == "sigma"


def test_mode_with_mirror_plot(runner, triangular_file, tmp_path):
    plot_path = tmp_path / "plots" / "mirror.png"
    r = runner.invoke(
        cli_mod.cli, ["mode", str(triangular_file), "--mirror-plot", str(plot_path)]
    )
    assert r.exit_code == 0, r.output
    payload = json.loads(r.output)
    assert payload["mode"] == pytest.approx(0.0, abs=0.1)
    assert payload["symmetricity"] > 0.2
    assert plot_path.exists()


def test_mode_rejects_bad_mirrordist(runner, column_text):
    r = runner.invoke(cli_mod.cli, ["mode", "--mirrordist", "-1"], input=column_text)
    assert r.exit_code == 2


def test_histogram_with_cfp_and_plot(runner, column_text, tmp_path):
    plot_path = tmp_path / "hist.png"
    r = runner.invoke(
        cli_mod.cli,
        ["histogram", "--numbins", "2", "--cfp", "--plot", str(plot_path)],
        input=column_text,
    )
    assert r.exit_code == 0, r.output
    payload = json.loads(r.output)
    assert payload["binwidth"] == pytest.approx(49.5)
    assert payload["count"] == [5.0, 1.0]
    assert payload["cfp"] == [5.0, 6.0]
    assert payload["scale"] == "count"
    assert plot_path.exists()


def test_histogram_with_range_and_normalize(runner, column_text):
    r = runner.invoke(
        cli_mod.cli,
        ["histogram", "--numbins", "5", "--min", "0", "--max", "5", "--normalize"],
        input=column_text,
    )
    assert r.exit_code == 0, r.output
    payload = json.loads(r.output)
    assert payload["bin_center"] == pytest.approx([0.5, 1.5, 2.5, 3.5, 4.5])
    assert sum(payload["count"]) == pytest.approx(1.0)
    assert "cfp" not in payload


def test_histogram_rejects_conflicting_scales(runner, column_text):
    r = runner.invoke(
        cli_mod.cli, ["histogram", "--normalize", "--maxone"], input=column_text
    )
    assert r.exit_code == 2


def test_histogram_without_usable_values(runner):
    r = runner.invoke(cli_mod.cli, ["histogram"], input="nan\nnan\n")
    assert r.exit_code == 1
    assert "no usable values" in r.output


def test_outlier_bydistance(runner):
    values = list(range(20)) + [v + 100 for v in range(20)]
    r = runner.invoke(
        cli_mod.cli, ["outlier"], input="\n".join(str(v) for v in values) + "\n"
    )
    assert r.exit_code == 0, r.output
    payload = json.loads(r.output)
    assert payload == {"method": "bydistance", "outlier": {"index": 19, "value": 19.0}}


def test_outlier_flat_cfp_without_outlier(runner):
    values = "\n".join(str(v) for v in range(30)) + "\n"
    r = runner.invoke(cli_mod.cli, ["outlier", "--method", "flat-cfp"], input=values)
    assert r.exit_code == 0, r.output
    assert json.loads(r.output) == {"method": "flat-cfp", "outlier": None}


def test_invalid_log_level(runner, column_text):
    r = runner.invoke(cli_mod.cli, ["--log-level", "loud", "summary"], input=column_text)
    assert r.exit_code == 2
