import time as time_module
from datetime import date, datetime, time

import pytest

from salon_api.scheduling.dates import (
    add_days,
    coerce_date,
    days_in_month,
    format_date_str,
    parse_date_str,
    parse_time_str,
)


@pytest.fixture
def process_timezone(monkeypatch: pytest.MonkeyPatch):
    def _set(zone: str) -> None:
        monkeypatch.setenv('TZ', zone)
        time_module.tzset()

    yield _set

    monkeypatch.undo()
    time_module.tzset()


def test_parse_date_str_returns_calendar_date() -> None:
    assert parse_date_str('2024-03-10') == date(2024, 3, 10)


@pytest.mark.parametrize(
    'value',
    ['2024-3-10', '2024-03-1', '10/03/2024', '20240310', '', ' 2024-03-10', '2024-02-30', '2023-02-29', '0000-01-01'],
)
def test_parse_date_str_rejects_non_canonical_or_impossible_dates(value: str) -> None:
    with pytest.raises(ValueError):
        parse_date_str(value)


@pytest.mark.skipif(not hasattr(time_module, 'tzset'), reason='time.tzset is only available on POSIX')
@pytest.mark.parametrize(
    'zone',
    ['UTC', 'America/Sao_Paulo', 'America/Los_Angeles', 'Pacific/Kiritimati', 'Pacific/Pago_Pago', 'Asia/Kolkata'],
)
def test_parse_date_str_does_not_depend_on_process_timezone(process_timezone, zone: str) -> None:
    process_timezone(zone)

    parsed = parse_date_str('2024-03-10')

    assert (parsed.year, parsed.month, parsed.day) == (2024, 3, 10)
    assert format_date_str(parsed) == '2024-03-10'


def test_format_date_str_zero_pads() -> None:
    assert format_date_str(date(2024, 1, 5)) == '2024-01-05'


def test_parse_time_str_accepts_24_hour_values() -> None:
    assert parse_time_str('09:05') == time(9, 5)
    assert parse_time_str('23:59') == time(23, 59)


@pytest.mark.parametrize('value', ['9:05', '24:00', '12:60', '12h30', '', '12:30:00'])
def test_parse_time_str_rejects_invalid_values(value: str) -> None:
    with pytest.raises(ValueError):
        parse_time_str(value)


@pytest.mark.parametrize(
    ('year', 'month', 'expected'),
    [
        (2024, 2, 29),
        (2023, 2, 28),
        (1900, 2, 28),
        (2000, 2, 29),
        (2024, 4, 30),
        (2024, 1, 31),
        (2024, 12, 31),
    ],
)
def test_days_in_month_handles_month_lengths_and_leap_years(year: int, month: int, expected: int) -> None:
    assert days_in_month(year, month) == expected


def test_coerce_date_accepts_dates_datetimes_and_strings() -> None:
    assert coerce_date(date(2024, 1, 7)) == date(2024, 1, 7)
    assert coerce_date(datetime(2024, 1, 7, 23, 59)) == date(2024, 1, 7)
    assert coerce_date('2024-01-07') == date(2024, 1, 7)


def test_coerce_date_rejects_other_types() -> None:
    with pytest.raises(TypeError):
        coerce_date(20240107)


def test_add_days_crosses_month_and_year_boundaries() -> None:
    assert add_days(date(2024, 2, 28), 1) == date(2024, 2, 29)
    assert add_days(date(2024, 12, 31), 1) == date(2025, 1, 1)
    assert add_days(date(2024, 3, 1), -1) == date(2024, 2, 29)
