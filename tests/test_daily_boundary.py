from datetime import date, datetime, timezone

from magic_ball.domain.daily_boundary import kyiv_day, kyiv_now_label, start_of_kyiv_day


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_winter_midnight_is_at_plus_two():
    assert start_of_kyiv_day(utc(2024, 1, 15, 12, 0)) == utc(2024, 1, 14, 22, 0)


def test_summer_midnight_is_at_plus_three():
    assert start_of_kyiv_day(utc(2024, 7, 1, 12, 0)) == utc(2024, 6, 30, 21, 0)


def test_spring_shift_night_keeps_one_kyiv_day():
    # 01:30 and 02:30 Kyiv on 31 March 2024, both before the 03:00 shift
    first = start_of_kyiv_day(utc(2024, 3, 30, 23, 30))
    second = start_of_kyiv_day(utc(2024, 3, 31, 0, 30))
    assert first == utc(2024, 3, 30, 22, 0)
    assert second == utc(2024, 3, 30, 22, 0)


def test_boundaries_on_either_side_of_kyiv_midnight_differ():
    before = start_of_kyiv_day(utc(2024, 3, 30, 21, 30))  # 23:30 Kyiv, 30 March
    after = start_of_kyiv_day(utc(2024, 3, 30, 22, 30))  # 00:30 Kyiv, 31 March
    assert before == utc(2024, 3, 29, 22, 0)
    assert after == utc(2024, 3, 30, 22, 0)
    assert before != after


def test_offset_is_taken_at_midnight_not_at_now():
    # Afternoon of the shift day runs at +03:00 but its midnight was at +02:00.
    assert start_of_kyiv_day(utc(2024, 3, 31, 12, 0)) == utc(2024, 3, 30, 22, 0)
    # Next day midnight is at +03:00.
    assert start_of_kyiv_day(utc(2024, 4, 1, 12, 0)) == utc(2024, 3, 31, 21, 0)


def test_autumn_shift_day_uses_summer_midnight():
    assert start_of_kyiv_day(utc(2024, 10, 27, 12, 0)) == utc(2024, 10, 26, 21, 0)
    assert start_of_kyiv_day(utc(2024, 10, 28, 12, 0)) == utc(2024, 10, 27, 22, 0)


def test_naive_datetime_is_treated_as_utc():
    assert start_of_kyiv_day(datetime(2024, 1, 15, 12, 0)) == utc(2024, 1, 14, 22, 0)


def test_kyiv_day_rolls_over_before_utc_midnight():
    assert kyiv_day(utc(2024, 6, 10, 20, 59)) == date(2024, 6, 10)
    assert kyiv_day(utc(2024, 6, 10, 21, 0)) == date(2024, 6, 11)


def test_kyiv_now_label():
    assert kyiv_now_label(utc(2024, 6, 10, 5, 0)) == "10.06.2024, 08:00:00"
