from datetime import date, datetime

from moneywise.periods import (
    by_category,
    by_date_range,
    by_search,
    by_type,
    calendar_month_range,
    custom_range,
    format_amount,
    month_key,
    parse_date,
    period_range,
    since,
    transaction_moment,
)

from factories import make_cat, make_tx

NOW = datetime(2024, 3, 15, 14, 30)


def test_parse_plain_date():
    assert parse_date("2024-01-05") == datetime(2024, 1, 5)


def test_parse_timestamp_is_naive():
    parsed = parse_date("2024-01-05T10:00:00.000Z")
    assert parsed.tzinfo is None
    assert parse_date("2024-01-05T10:00:00") == datetime(2024, 1, 5, 10, 0)


def test_today_range():
    rng = period_range("today", NOW)
    assert rng.start == datetime(2024, 3, 15)
    assert rng.end.date() == date(2024, 3, 15)
    assert datetime(2024, 3, 15, 23, 0) in rng
    assert datetime(2024, 3, 14, 23, 59) not in rng


def test_week_range_is_rolling_seven_days():
    rng = period_range("week", NOW)
    assert rng.start == datetime(2024, 3, 8, 14, 30)
    assert datetime(2024, 3, 8, 14, 30) in rng
    assert datetime(2024, 3, 8) not in rng


def test_month_and_year_ranges():
    assert period_range("month", NOW).start == datetime(2024, 3, 1)
    assert period_range("year", NOW).start == datetime(2024, 1, 1)


def test_unknown_period_falls_back_to_month():
    assert period_range("decade", NOW) == period_range("month", NOW)


def test_custom_range_inclusive():
    rng = custom_range(date(2024, 1, 1), date(2024, 1, 31))
    assert datetime(2024, 1, 1) in rng
    assert datetime(2024, 1, 31, 23, 59, 59) in rng
    assert datetime(2024, 2, 1) not in rng


def test_calendar_month_range_covers_whole_month():
    rng = calendar_month_range(datetime(2024, 2, 3))
    assert rng.start == datetime(2024, 2, 1)
    assert rng.end.date() == date(2024, 2, 29)


def test_predicates():
    food = make_tx("t1", 250, "expense", "5", "2024-03-10", "Pizza night")
    salary = make_tx("t2", 1000, "income", "1", "2024-02-01")
    cats = (make_cat("5", "Food & Dining"), make_cat("1", "Salary", type="income"))

    assert list(filter(by_category("5"), [food, salary])) == [food]
    assert list(filter(by_type("income"), [food, salary])) == [salary]
    assert list(filter(by_type("all"), [food, salary])) == [food, salary]
    assert list(filter(by_date_range(period_range("month", NOW)), [food, salary])) == [food]

    assert list(filter(by_search("pizza", cats), [food, salary])) == [food]
    assert list(filter(by_search("SALARY", cats), [food, salary])) == [salary]
    assert list(filter(by_search("25", cats), [food, salary])) == [food]
    assert list(filter(by_search("", cats), [food, salary])) == [food, salary]


def test_format_amount():
    assert format_amount(1000) == "1000"
    assert format_amount(1000.0) == "1000"
    assert format_amount(12.5) == "12.5"


def test_unreadable_dates_are_outside_every_range():
    undated = [
        make_tx("t1", 10, "expense", "5", "05/01/2024"),
        make_tx("t2", 10, "expense", "5", None),
        make_tx("t3", 10, "expense", "5", ""),
    ]
    for t in undated:
        assert transaction_moment(t) is None
        assert month_key(t) is None
        assert not by_date_range(period_range("year", NOW))(t)
        assert not since(datetime(2000, 1, 1))(t)
