import io
import math
import random

import pytest

from sharpeopt.cli import (
    efficient_frontier,
    load_returns_csv,
    main,
    save_frontier,
    save_portfolio_details,
    save_weights,
)
from sharpeopt.matrix import Matrix
from sharpeopt.portfolio import Portfolio

ROWS = [
    (0.010, -0.004, 0.002),
    (-0.006, 0.008, 0.001),
    (0.004, 0.003, -0.002),
    (0.012, -0.010, 0.003),
    (-0.002, 0.006, 0.000),
    (0.007, 0.001, 0.004),
    (-0.009, 0.011, -0.001),
    (0.005, -0.002, 0.002),
]

SMALL = ["--population-size", "20", "--generations", "4", "--frontier-points", "3"]


def _csv_text():
    lines = ["Date,A,B,C"]
    lines += [f"2020-01-{i + 1:02d}," + ",".join(str(v) for v in row) for i, row in enumerate(ROWS)]
    return "\n".join(lines) + "\n"


@pytest.fixture
def portfolio():
    return Portfolio(Matrix(ROWS))


@pytest.fixture
def data_dir(tmp_path):
    directory = tmp_path / "Data"
    directory.mkdir()
    (directory / "Daily Returns.csv").write_text(_csv_text(), encoding="utf-8")
    return directory


def test_load_skips_header_and_date_column(tmp_path):
    path = tmp_path / "r.csv"
    path.write_text("Date,A,B\n2020,0.1,0.2\n2021,0.3,0.4\n", encoding="utf-8")
    assert load_returns_csv(path) == Matrix([[0.1, 0.2], [0.3, 0.4]])


def test_load_full_fixture(data_dir):
    matrix = load_returns_csv(data_dir / "Daily Returns.csv")
    assert matrix.to_lists() == [list(row) for row in ROWS]


def test_load_bad_cell_becomes_zero(tmp_path):
    path = tmp_path / "r.csv"
    path.write_text("Date,A,B\nd1,abc,0.5\nd2,,0.25\n", encoding="utf-8")
    assert load_returns_csv(path).to_lists() == [[0.0, 0.5], [0.0, 0.25]]


def test_load_reads_numeric_prefix_and_strips(tmp_path):
    path = tmp_path / "r.csv"
    path.write_text("Date,A\r\nd1, 1.5abc \r\nd2,0.25\r\n", encoding="utf-8")
    assert load_returns_csv(path).to_lists() == [[1.5], [0.25]]


def test_load_drops_trailing_empty_cell(tmp_path):
    path = tmp_path / "r.csv"
    path.write_text("Date,A,B\nd1,0.5,0.25,\nd2,0.75,0.125\n", encoding="utf-8")
    assert load_returns_csv(path).to_lists() == [[0.5, 0.25], [0.75, 0.125]]


def test_load_drops_rows_of_other_width(tmp_path):
    path = tmp_path / "r.csv"
    path.write_text("Date,A,B\nd1,0.5,0.25\nd2,0.75\nd3,0.5,0.5,0.5\nd4,1,2\n", encoding="utf-8")
    assert load_returns_csv(path).to_lists() == [[0.5, 0.25], [1.0, 2.0]]


def test_load_without_data_raises(tmp_path):
    path = tmp_path / "r.csv"
    path.write_text("Date,A,B\nonly-a-date\n", encoding="utf-8")
    with pytest.raises(ValueError, match="No valid data"):
        load_returns_csv(path)


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_returns_csv(tmp_path / "absent.csv")


def test_save_weights_round_trip(tmp_path):
    weights = [0.25, 0.125, 0.625]
    path = tmp_path / "w.txt"
    save_weights(weights, path)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert [float(line) for line in lines] == weights
    assert all(len(line.split(".")[1]) == 8 for line in lines)


def test_save_frontier_header_and_rows(tmp_path):
    points = [(0.1, 0.05), (0.2, 0.125)]
    path = tmp_path / "f.csv"
    save_frontier(points, path)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "Risk,Return"
    parsed = [tuple(float(v) for v in line.split(",")) for line in lines[1:]]
    assert parsed == points


def test_save_portfolio_details_layout(tmp_path):
    path = tmp_path / "d.csv"
    save_portfolio_details([0.5, 0.25, 0.25], path, 0.125, 0.5, 1.5)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "Metric,Value"
    metrics = dict(line.split(",", 1) for line in lines[1:])
    assert float(metrics["Expected Return"]) == 0.125
    assert float(metrics["Portfolio Std Dev"]) == 0.5
    assert float(metrics["Sharpe Ratio"]) == 1.5
    assert [float(w) for w in metrics["Optimal Weights"].split(";")] == [0.5, 0.25, 0.25]


def test_efficient_frontier_shape(portfolio):
    result = efficient_frontier(
        portfolio, points=4, population_size=20, generations=5, rng=random.Random(3)
    )
    assert len(result.points) == 4
    assert result.points == sorted(result.points)
    assert all(risk >= 0.0 for risk, _ in result.points)
    assert math.isclose(sum(result.best_weights), 1.0, abs_tol=1e-9)
    assert len(result.best_weights) == portfolio.num_assets


def test_efficient_frontier_best_sharpe_matches_weights(portfolio):
    rf = 0.0001
    result = efficient_frontier(
        portfolio, points=3, population_size=20, generations=5,
        risk_free_rate=rf, rng=random.Random(11),
    )
    expected = portfolio.sharpe_ratio(result.best_weights, rf) * math.sqrt(252.0)
    assert math.isclose(result.best_sharpe, expected)


def test_efficient_frontier_is_deterministic_with_seed(portfolio):
    first = efficient_frontier(
        portfolio, points=3, population_size=20, generations=4, rng=random.Random(7)
    )
    second = efficient_frontier(
        portfolio, points=3, population_size=20, generations=4, rng=random.Random(7)
    )
    assert first == second


def test_efficient_frontier_without_points_is_empty(portfolio):
    result = efficient_frontier(portfolio, points=0, rng=random.Random(1))
    assert result.points == []
    assert result.best_weights == []
    assert result.best_sharpe == -math.inf


def test_main_writes_results(data_dir, tmp_path, capsys):
    results = tmp_path / "Results"
    status = main(
        ["--data-dir", str(data_dir), "--results-dir", str(results),
         "--target", "0.1", "--seed", "5", *SMALL]
    )
    assert status == 0
    out = capsys.readouterr().out
    assert "Optimization complete" in out
    for name in (
        "User Weights.txt",
        "User Portfolio.csv",
        "Efficient Frontier.csv",
        "Best Sharpe Weights.txt",
        "Best Sharpe Portfolio.csv",
    ):
        assert (results / name).is_file()
    frontier_lines = (results / "Efficient Frontier.csv").read_text(encoding="utf-8").splitlines()
    assert frontier_lines[0] == "Risk,Return"
    assert len(frontier_lines) == 4
    weights = [float(x) for x in (results / "User Weights.txt").read_text(encoding="utf-8").split()]
    assert len(weights) == 3
    assert math.isclose(sum(weights), 1.0, abs_tol=1e-6)


def test_main_prompts_until_valid(data_dir, tmp_path, capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("abc\n-5\n0.1\n"))
    status = main(
        ["--data-dir", str(data_dir), "--results-dir", str(tmp_path / "R"), "--seed", "2", *SMALL]
    )
    assert status == 0
    out = capsys.readouterr().out
    assert out.count("Invalid input. Enter a value (e.g., 0.05): ") == 2


def test_main_fails_when_input_ends(data_dir, tmp_path, capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("oops\n"))
    status = main(["--data-dir", str(data_dir), "--results-dir", str(tmp_path / "R"), *SMALL])
    assert status == 1
    assert "Error:" in capsys.readouterr().err


def test_main_fails_without_returns_file(tmp_path, capsys):
    status = main(
        ["--data-dir", str(tmp_path / "missing"), "--results-dir", str(tmp_path / "R"),
         "--target", "0.1", *SMALL]
    )
    assert status == 1
    assert "Error:" in capsys.readouterr().err


def test_main_rejects_target_below_minus_one(data_dir, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["--data-dir", str(data_dir), "--results-dir", str(tmp_path / "R"), "--target", "-2"])
    assert excinfo.value.code == 2