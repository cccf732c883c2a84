from __future__ import annotations

import json

from trends.utils.favorites_cli import main


def test_add_list_update_remove(tmp_path, capsys):
    base = ["--dir", str(tmp_path), "--key", "favorites"]

    assert main(base + ["add", "aapl", "--start", "2024-01-01", "--end", "2024-01-02", "--timeframe", "day"]) == 0
    assert main(base + ["add", "MSFT", "--symbol2", "nvda", "--start", "2024-02-01", "--end", "2024-02-02", "--timeframe", "5min"]) == 0
    capsys.readouterr()

    main(base + ["list", "--json"])
    records = json.loads(capsys.readouterr().out)
    assert records == [
        {"stockSymbol1": "AAPL", "startDate": "2024-01-01", "endDate": "2024-01-02", "timeframe": "day"},
        {"stockSymbol1": "MSFT", "stockSymbol2": "NVDA", "startDate": "2024-02-01", "endDate": "2024-02-02", "timeframe": "5min"},
    ]

    main(base + ["update", "0", "TSLA", "--start", "2024-03-01", "--end", "2024-03-02", "--timeframe", "15min"])
    main(base + ["remove", "7"])
    assert "nothing removed" in capsys.readouterr().out

    main(base + ["remove", "1"])
    capsys.readouterr()
    main(base + ["list"])
    out = capsys.readouterr().out
    assert "[0] TSLA  2024-03-01 -> 2024-03-02  15min" in out
    assert "MSFT" not in out


def test_update_with_identical_record_reports_update(tmp_path, capsys):
    base = ["--dir", str(tmp_path)]
    fav = ["AAPL", "--start", "2024-01-01", "--end", "2024-01-02", "--timeframe", "day"]
    main(base + ["add"] + fav)
    capsys.readouterr()

    main(base + ["update", "0"] + fav)
    assert capsys.readouterr().out.strip() == "Updated [0]."

    main(base + ["update", "-1"] + fav)
    assert "nothing updated" in capsys.readouterr().out
