from datetime import date, datetime

import pytest

from cashback.transform import RowTransformer, parse_bucket_date


@pytest.fixture
def transformer():
    return RowTransformer()


def test_exact_header_beats_substring(transformer):
    row = {"Data de Criação": "01/01/2024", "Date": "2024-02-01"}
    assert transformer.resolve_column(row, ["Data", "Date", "Dia"]) == "Date"


def test_substring_header_fallback(transformer):
    row = {"Valor Apostado (R$)": 100}
    assert transformer.resolve_column(row, ["Valor Apostado", "Bet", "Aposta"]) == "Valor Apostado (R$)"


def test_header_match_is_case_insensitive(transformer):
    row = {"  DATA ": "01/01/2024"}
    assert transformer.find_value(row, ["Data"]) == "01/01/2024"


def test_blank_cells_are_not_candidates(transformer):
    row = {"Data": None, "Dia": float("nan"), "Date": "2024-03-05"}
    assert transformer.find_value(row, ["Data", "Date", "Dia"]) == "2024-03-05"


def test_unresolved_column(transformer):
    assert transformer.find_value({"Foo": 1}, ["GGR"]) is None


@pytest.mark.parametrize("raw, expected", [
    (45292, "01/01/2024"),
    (45292.75, "01/01/2024"),
    ("2024-03-05", "05/03/2024"),
    ("2024-03-05 10:30:00", "05/03/2024"),
    ("2024-03-05T10:30:00", "05/03/2024"),
    ("2024-03-05T10:30:00.123", "05/03/2024"),
    ("15/03/2024 10:30", "15/03/2024"),
    ("15/03/2024 9:05:59", "15/03/2024"),
    ("15/03/2024", "15/03/2024"),
    (" 15/03/2024 ", "15/03/2024"),
    (datetime(2024, 3, 5, 10, 30), "05/03/2024"),
    (date(2024, 12, 31), "31/12/2024"),
    ("ontem", "ontem"),
])
def test_normalize_date(transformer, raw, expected):
    assert transformer.normalize_date(raw) == expected


@pytest.mark.parametrize("raw, expected", [
    (42, 42.0),
    (10.5, 10.5),
    ("R$ 100,50", 100.5),
    ("100.50", 100.5),
    ("-20", -20.0),
    ("1,234.50", 1.0),
    ("12abc", 12.0),
    ("", 0.0),
    ("   ", 0.0),
    ("abc", 0.0),
    (None, 0.0),
    (True, 0.0),
    (float("nan"), 0.0),
])
def test_parse_number(transformer, raw, expected):
    assert transformer.parse_number(raw) == expected


def test_loss_from_wagered_and_won(transformer):
    row = {"Valor Apostado": 200, "Valor Ganho": "150,00", "GGR": -999}
    assert transformer.derive_loss(row) == 50


def test_loss_from_negative_ggr_without_wagered(transformer):
    assert transformer.derive_loss({"GGR (R$)": -20}) == 20


def test_loss_from_positive_ggr_kept(transformer):
    assert transformer.derive_loss({"GGR": 35}) == 35


def test_negative_ggr_kept_when_wagered_present(transformer):
    # wagered without won does not qualify for wagered - won
    assert transformer.derive_loss({"Bet": 100, "GGR": -20}) == -20


def test_win_loss_header(transformer):
    assert transformer.derive_loss({"Win/Loss": "-15,5"}) == 15.5


def test_loss_without_financial_columns(transformer):
    assert transformer.derive_loss({"Data": "01/01/2024"}) == 0


def test_transform_row(transformer):
    row = {"Data": "2024-01-15", "Jogo": "Roleta ao Vivo", "Valor Apostado": 200, "Valor Ganho": 150}
    assert transformer.transform(row) == {"date": "15/01/2024", "game": "Roleta ao Vivo", "loss": 50}


def test_transform_skips_rows_without_date_or_game(transformer):
    assert transformer.transform({"Jogo": "Roleta", "GGR": -10}) is None
    assert transformer.transform({"Data": "15/01/2024", "GGR": -10}) is None
    assert transformer.transform({"Data": "", "Jogo": "Roleta"}) is None


def test_parse_bucket_date():
    assert parse_bucket_date("15/01/2024") == date(2024, 1, 15)
    assert parse_bucket_date("5/1/2024") == date(2024, 1, 5)
    assert parse_bucket_date("2024/01/15") is None
    assert parse_bucket_date("ontem") is None
