"""Basic grid backtest.

Runs a four-level grid between 90 and 110 over the bundled daily
fixture and prints the summary and the trade ledger.
"""

import logging
from pathlib import Path

from gridbt import CSVProvider, GridBacktestEngine, GridConfig

DATA = Path(__file__).resolve().parent.parent / "tests" / "fixtures" / "sample_1d.csv"


def main():
    logging.basicConfig(level=logging.INFO)

    config = GridConfig(
        upper_price=110.0,
        lower_price=90.0,
        levels=4,
        profit_percent=2.0,
        investment_amount=1000.0,
    )
    engine = GridBacktestEngine(
        data=CSVProvider(str(DATA), symbol_name="TEST"),
        config=config,
    )
    result = engine.run()
    print(result.summary())
    print(result.to_dataframe().to_string(index=False))


if __name__ == "__main__":
    main()
