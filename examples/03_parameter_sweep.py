"""Parallel parameter sweep over grid density and profit target.

Uses multiprocessing to evaluate all parameter combinations in parallel,
then prints the top results ranked by net profit.
"""

from pathlib import Path

from gridbt import CSVProvider, GridConfig, ParameterSweep

DATA = Path(__file__).resolve().parent.parent / "tests" / "fixtures" / "sample_1d.csv"


def main():
    sweep = ParameterSweep(
        data=CSVProvider(str(DATA), symbol_name="TEST"),
        base_config=GridConfig(upper_price=112.0, lower_price=88.0),
        param_grid={
            "levels": [4, 6, 8, 12],
            "profit_percent": [0.5, 1.0, 2.0],
        },
        n_workers=4,
    )

    results = sweep.run()
    print(results.summary(top_n=5))


if __name__ == "__main__":
    main()
