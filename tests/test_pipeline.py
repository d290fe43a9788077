from datetime import date

import pytest

from cashback.pipeline import BatchProcessor, bucket_date, process_batch, week_start
from cashback.rules import Category, Platform, UnsupportedRuleSetError


def _row(day, game, bet, won):
    return {"Data": day, "Jogo": game, "Valor Apostado": bet, "Valor Ganho": won}


def test_same_day_live_casino_rows_aggregate():
    rows = [
        _row("15/01/2024", "Roleta ao Vivo", 200, 150),
        _row("15/01/2024", "Roleta ao Vivo", 100, 50),
    ]
    report = process_batch(rows, Platform.SEVEN_K)
    assert report["summary"] == [
        {"date": "15/01/2024", "mode": "weekly", "loss": 100, "cashback": 1.00, "percent": 0.01}
    ]
    assert report["totalCashback"] == 1.00
    assert report["detailsByMode"] == {"weekly": 1.00, "daily": 0.0, "sports": 0.0, "aviator": 0.0}


def test_weekly_rows_bucket_on_monday():
    # 17/01/2024 is a Wednesday, 21/01/2024 a Sunday
    rows = [
        _row("17/01/2024", "Roleta ao Vivo", 300, 0),
        _row("21/01/2024", "Blackjack Live", 300, 0),
    ]
    report = process_batch(rows, "7K")
    assert len(report["summary"]) == 1
    entry = report["summary"][0]
    assert entry["date"] == "15/01/2024"
    assert entry["loss"] == 600
    assert entry["cashback"] == 12.00


def test_daily_rows_keep_their_date():
    rows = [
        _row("17/01/2024", "Sweet Bonanza", 100, 0),
        _row("18/01/2024", "Sweet Bonanza", 100, 0),
    ]
    report = process_batch(rows, Platform.SEVEN_K)
    assert [e["date"] for e in report["summary"]] == ["17/01/2024", "18/01/2024"]
    assert all(e["mode"] == "daily" and e["cashback"] == 2.00 for e in report["summary"])


def test_sports_bucket_weekly_on_7k_only():
    rows = [_row("2024-01-18", "Apostas Esportivas", 1000, 0)]
    report = process_batch(rows, Platform.SEVEN_K)
    assert report["summary"] == [
        {"date": "15/01/2024", "mode": "sports", "loss": 1000, "cashback": 30.00, "percent": 0.03}
    ]
    assert process_batch(rows, Platform.CASSINO)["summary"] == []


def test_aviator_on_cassino():
    rows = [_row("18/01/2024", "Aviator", 100, 0)]
    report = process_batch(rows, Platform.CASSINO)
    assert report["summary"][0]["mode"] == "aviator"
    assert report["summary"][0]["date"] == "18/01/2024"
    assert report["detailsByMode"]["aviator"] == 2.00


def test_zero_and_negative_aggregates_are_dropped():
    rows = [
        _row("15/01/2024", "Roleta ao Vivo", 40, 0),     # below the 0.50 floor
        _row("16/01/2024", "Sweet Bonanza", 50, 80),     # player won
    ]
    report = process_batch(rows, Platform.SEVEN_K)
    assert report["summary"] == []
    assert report["totalCashback"] == 0


def test_categories_on_same_day_are_separate():
    rows = [
        _row("15/01/2024", "Roleta ao Vivo", 100, 0),
        _row("15/01/2024", "Sweet Bonanza", 100, 0),
    ]
    report = process_batch(rows, Platform.SEVEN_K)
    assert [e["mode"] for e in report["summary"]] == ["weekly", "daily"]


def test_entries_sorted_by_calendar_date():
    rows = [
        _row("02/02/2024", "Sweet Bonanza", 100, 0),
        _row("10/01/2024", "Sweet Bonanza", 100, 0),
        _row("2023-12-31", "Sweet Bonanza", 100, 0),
    ]
    report = process_batch(rows, Platform.SEVEN_K)
    assert [e["date"] for e in report["summary"]] == ["31/12/2023", "10/01/2024", "02/02/2024"]


def test_serial_dates_and_ggr_rows():
    rows = [
        {"Date": 45292, "Game": "Sweet Bonanza", "GGR": -100},
        {"Date": 45292, "Game": "Sweet Bonanza", "GGR": "-50,00"},
    ]
    report = process_batch(rows, Platform.SEVEN_K)
    assert report["summary"] == [
        {"date": "01/01/2024", "mode": "daily", "loss": 150, "cashback": 3.00, "percent": 0.02}
    ]


def test_malformed_rows_are_skipped():
    rows = [
        {"Jogo": "Roleta ao Vivo", "GGR": -100},
        {"Data": "15/01/2024", "GGR": -100},
        {"Data": "ontem", "Jogo": "Sweet Bonanza", "GGR": -100},
        "not a row",
        _row("15/01/2024", "Mines", 100, 0),
        _row("15/01/2024", "Sweet Bonanza", 100, 0),
    ]
    processor = BatchProcessor()
    report = processor.process(rows, Platform.SEVEN_K)
    assert len(report["summary"]) == 1
    assert processor.last_stats == {"total_rows": 6, "skipped_rows": 4, "excluded_rows": 1, "entries": 1}


def test_totals_match_entries():
    rows = [
        _row("15/01/2024", "Roleta ao Vivo", 777.77, 0),
        _row("16/01/2024", "Sweet Bonanza", 333.33, 0),
        _row("17/01/2024", "Sweet Bonanza", 1234.56, 0),
        _row("18/01/2024", "Apostas Esportivas", 2500, 0),
        _row("22/01/2024", "Crazy Time", 5000, 0),
    ]
    report = process_batch(rows, Platform.SEVEN_K)
    assert report["totalCashback"] == pytest.approx(sum(e["cashback"] for e in report["summary"]))
    for mode, total in report["detailsByMode"].items():
        assert total == pytest.approx(sum(e["cashback"] for e in report["summary"] if e["mode"] == mode))
    assert all(e["cashback"] > 0 for e in report["summary"])


def test_processing_is_idempotent():
    rows = [
        _row("15/01/2024", "Roleta ao Vivo", 777.77, 0),
        _row("16/01/2024", "Sweet Bonanza", 333.33, 10),
    ]
    assert process_batch(rows, Platform.VERA) == process_batch(rows, Platform.VERA)


def test_unknown_platform_raises():
    with pytest.raises(UnsupportedRuleSetError):
        process_batch([], "Betano")


def test_week_start():
    assert week_start(date(2024, 1, 15)) == date(2024, 1, 15)
    assert week_start(date(2024, 1, 17)) == date(2024, 1, 15)
    assert week_start(date(2024, 1, 21)) == date(2024, 1, 15)
    assert week_start(date(2024, 1, 1)) == date(2024, 1, 1)
    assert week_start(date(2023, 12, 31)) == date(2023, 12, 25)


def test_bucket_date():
    wednesday = date(2024, 1, 17)
    assert bucket_date(wednesday, Category.SPORTS) == date(2024, 1, 15)
    assert bucket_date(wednesday, Category.AVIATOR) == wednesday


def test_cent_valued_rows_sum_exactly():
    # Float addition of these lands just off 499.99
    losses = ["-68.44", "-58.78", "-156.52", "-38.93", "-64.92", "-54.23", "-58.17"]
    rows = [{"Data": "15/01/2024", "Jogo": "Roleta ao Vivo", "GGR": float(v)} for v in losses]
    report = process_batch(rows, Platform.SEVEN_K)
    assert report["summary"] == [
        {"date": "15/01/2024", "mode": "weekly", "loss": 499.99, "cashback": 4.99, "percent": 0.01}
    ]


def test_wagered_minus_won_has_no_float_noise():
    report = process_batch([_row("15/01/2024", "Sweet Bonanza", 100.3, 0.1)], Platform.SEVEN_K)
    assert report["summary"][0]["loss"] == 100.2
