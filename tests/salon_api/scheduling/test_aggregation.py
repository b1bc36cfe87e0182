import time as time_module
from datetime import date
from decimal import Decimal

import pytest

from salon_api.scheduling.aggregation import (
    Granularity,
    aggregate_revenue,
    period_bounds,
    summarize_day,
    summarize_revenue,
)


@pytest.fixture
def records(make_appointment):
    return [
        make_appointment('jan', '2024-01-31', '10:00', price='100'),
        make_appointment('feb-1', '2024-02-01', '08:00', price='50'),
        make_appointment('feb-14', '2024-02-14', '10:30', price='45.50'),
        make_appointment('feb-14b', '2024-02-14', '19:00', price='30'),
        make_appointment('feb-29', '2024-02-29', '18:00', price='70'),
        make_appointment('mar-1', '2024-03-01', '09:00', price='20'),
        make_appointment('last-year', '2023-02-14', '10:00', price='999'),
    ]


def _direct_sum(records, predicate):
    return sum((record.price for record in records if predicate(record.date_str)), Decimal('0'))


def test_monthly_buckets_cover_every_day_of_a_leap_february(records) -> None:
    buckets = aggregate_revenue(records, Granularity.MONTHLY, date(2024, 2, 1))

    assert len(buckets) == 29
    assert [bucket.label for bucket in buckets[:3]] == ['1', '2', '3']
    assert buckets[-1].label == '29'
    assert buckets[13].total == Decimal('75.50')
    assert buckets[28].total == Decimal('70')
    assert buckets[1].total == Decimal('0')


@pytest.mark.parametrize(
    ('reference', 'expected'),
    [(date(2023, 2, 10), 28), (date(2024, 4, 30), 30), (date(2024, 12, 1), 31), (date(1900, 2, 1), 28)],
)
def test_monthly_bucket_count_matches_month_length(reference: date, expected: int) -> None:
    assert len(aggregate_revenue([], Granularity.MONTHLY, reference)) == expected


def test_monthly_total_matches_yearly_bucket_and_direct_sum(records) -> None:
    monthly = aggregate_revenue(records, Granularity.MONTHLY, date(2024, 2, 1))
    yearly = aggregate_revenue(records, Granularity.YEARLY, date(2024, 1, 1))

    monthly_total = sum((bucket.total for bucket in monthly), Decimal('0'))
    direct_total = _direct_sum(records, lambda date_str: date_str.startswith('2024-02-'))

    assert yearly[1].label == 'Feb'
    assert monthly_total == yearly[1].total == direct_total == Decimal('195.50')


def test_yearly_buckets_exclude_other_years(records) -> None:
    yearly = aggregate_revenue(records, Granularity.YEARLY, '2024-06-15')

    assert len(yearly) == 12
    assert [bucket.label for bucket in yearly][:3] == ['Jan', 'Feb', 'Mar']
    assert yearly[0].total == Decimal('100')
    assert yearly[2].total == Decimal('20')
    assert sum((bucket.total for bucket in yearly), Decimal('0')) == _direct_sum(
        records, lambda date_str: date_str.startswith('2024-')
    )


def test_daily_buckets_use_fixed_hour_labels(records) -> None:
    buckets = aggregate_revenue(records, Granularity.DAILY, date(2024, 2, 14))

    assert [bucket.label for bucket in buckets] == ['08:00', '10:00', '12:00', '14:00', '16:00', '18:00', '20:00']
    assert buckets[1].total == Decimal('45.50')
    assert buckets[5].total == Decimal('30')


def test_daily_buckets_keep_every_record_of_the_day(make_appointment) -> None:
    day_records = [
        make_appointment('early', '2024-02-14', '07:15', price='10'),
        make_appointment('odd-hour', '2024-02-14', '09:00', price='20'),
        make_appointment('late', '2024-02-14', '21:45', price='30'),
        make_appointment('next-day', '2024-02-15', '09:00', price='40'),
    ]

    buckets = aggregate_revenue(day_records, Granularity.DAILY, date(2024, 2, 14))
    totals = {bucket.label: bucket.total for bucket in buckets}

    assert totals['08:00'] == Decimal('30')
    assert totals['20:00'] == Decimal('30')
    assert sum(totals.values(), Decimal('0')) == Decimal('60')


def test_weekly_buckets_follow_monday_first_week(records) -> None:
    buckets = aggregate_revenue(records, Granularity.WEEKLY, date(2024, 2, 14))

    assert [bucket.label for bucket in buckets] == ['MON', 'TUE', 'WED', 'THU', 'FRI', 'SAT', 'SUN']
    assert buckets[2].total == Decimal('75.50')
    assert sum((bucket.total for bucket in buckets), Decimal('0')) == Decimal('75.50')


def test_aggregation_does_not_depend_on_record_order(records) -> None:
    forward = aggregate_revenue(records, Granularity.MONTHLY, date(2024, 2, 1))
    backward = aggregate_revenue(list(reversed(records)), Granularity.MONTHLY, date(2024, 2, 1))

    assert forward == backward


def test_aggregation_accepts_granularity_names(records) -> None:
    assert aggregate_revenue(records, 'yearly', date(2024, 1, 1)) == aggregate_revenue(
        records, Granularity.YEARLY, date(2024, 1, 1)
    )


def test_unknown_granularity_is_rejected(records) -> None:
    with pytest.raises(ValueError):
        aggregate_revenue(records, 'hourly', date(2024, 1, 1))


@pytest.mark.skipif(not hasattr(time_module, 'tzset'), reason='time.tzset is only available on POSIX')
@pytest.mark.parametrize('zone', ['UTC', 'America/Sao_Paulo', 'Pacific/Pago_Pago', 'Pacific/Kiritimati'])
def test_buckets_do_not_shift_with_process_timezone(zone: str, make_appointment, monkeypatch) -> None:
    monkeypatch.setenv('TZ', zone)
    time_module.tzset()
    try:
        buckets = aggregate_revenue(
            [make_appointment('dst', '2024-03-10', '02:30', price='25')],
            Granularity.MONTHLY,
            date(2024, 3, 1),
        )
    finally:
        monkeypatch.undo()
        time_module.tzset()

    assert [bucket.label for bucket in buckets if bucket.total] == ['10']


def test_summarize_revenue_reports_period_and_totals(records) -> None:
    report = summarize_revenue(records, Granularity.MONTHLY, '2024-02-14')

    assert report.period_start == '2024-02-01'
    assert report.period_end == '2024-02-29'
    assert report.reference_date == '2024-02-14'
    assert report.total == Decimal('195.50')
    assert report.appointment_count == 4
    assert len(report.buckets) == 29


@pytest.mark.parametrize(
    ('granularity', 'expected'),
    [
        (Granularity.DAILY, (date(2024, 2, 14), date(2024, 2, 14))),
        (Granularity.WEEKLY, (date(2024, 2, 12), date(2024, 2, 18))),
        (Granularity.MONTHLY, (date(2024, 2, 1), date(2024, 2, 29))),
        (Granularity.YEARLY, (date(2024, 1, 1), date(2024, 12, 31))),
    ],
)
def test_period_bounds(granularity: Granularity, expected) -> None:
    assert period_bounds(granularity, date(2024, 2, 14)) == expected


def test_summarize_day_counts_revenue_and_next_client(records) -> None:
    summary = summarize_day(records, date(2024, 2, 14), now_time='11:00')

    assert summary.date == '2024-02-14'
    assert summary.appointment_count == 2
    assert summary.revenue == Decimal('75.50')
    assert summary.next_appointment.id == 'feb-14b'


def test_summarize_day_without_upcoming_appointments(records) -> None:
    summary = summarize_day(records, date(2024, 2, 14), now_time='20:00')

    assert summary.next_appointment is None
    assert summary.appointment_count == 2
