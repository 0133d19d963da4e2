"""Compare the standard, conservative and aggressive presets.

Bounds are derived from the series itself, then every preset is
backtested and the results ranked side by side.
"""

from pathlib import Path

from gridbt import CSVProvider, ResultComparison, dynamic_presets, run_backtest

DATA = Path(__file__).resolve().parent.parent / "tests" / "fixtures" / "sample_1d.csv"


def main():
    bars = list(CSVProvider(str(DATA), symbol_name="TEST"))

    results = []
    for name, config in dynamic_presets(bars).items():
        result = run_backtest(bars, config)
        print(f"{name:<14s} net ${result.net_profit:+,.2f} "
              f"({result.total_trades} trades, {result.annualized_return:.1f}% annualized)")
        results.append(result)

    print(ResultComparison(results).summary())


if __name__ == "__main__":
    main()
