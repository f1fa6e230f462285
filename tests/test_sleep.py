from datetime import datetime, timedelta

import pytest

from floatbot.sleep import (
    SleepDB,
    evening_reply,
    is_evening,
    is_morning,
    morning_reply,
    time_duration,
)


@pytest.fixture
def db(tmp_path):
    with SleepDB(tmp_path / "manage.db") as database:
        yield database


def test_first_sleep_has_no_duration(db):
    position, awake = db.sleep(1, 10, datetime(2022, 10, 1, 22, 0))
    assert position == 1
    assert awake == timedelta(0)


def test_positions_increase_within_group(db):
    db.sleep(1, 10, datetime(2022, 10, 1, 22, 0))
    position, _ = db.sleep(1, 11, datetime(2022, 10, 1, 22, 30))
    assert position == 2
    other, _ = db.sleep(2, 12, datetime(2022, 10, 1, 22, 45))
    assert other == 1


def test_repeated_sleep_reports_elapsed(db):
    first = datetime(2022, 10, 1, 22, 0)
    second = datetime(2022, 10, 2, 23, 15, 30)
    db.sleep(1, 10, first)
    position, awake = db.sleep(1, 10, second)
    assert awake == second - first
    assert position == 1


def test_early_morning_window_includes_previous_night(db):
    db.sleep(1, 10, datetime(2022, 10, 1, 23, 0))
    position, _ = db.sleep(1, 11, datetime(2022, 10, 2, 2, 0))
    assert position == 2


def test_evening_window_excludes_earlier_time(db):
    db.sleep(1, 10, datetime(2022, 10, 1, 20, 0))
    position, _ = db.sleep(1, 11, datetime(2022, 10, 1, 23, 0))
    assert position == 1


def test_get_up_reports_sleep_time(db):
    night = datetime(2022, 10, 1, 23, 0)
    morning = datetime(2022, 10, 2, 7, 30)
    db.sleep(1, 10, night)
    position, asleep = db.get_up(1, 10, morning)
    assert position == 1
    assert asleep == morning - night


def test_get_up_counts_only_after_six(db):
    db.get_up(1, 10, datetime(2022, 10, 2, 6, 30))
    position, _ = db.get_up(1, 11, datetime(2022, 10, 2, 7, 0))
    assert position == 2
    db.sleep(1, 12, datetime(2022, 10, 2, 5, 0))
    position, _ = db.get_up(1, 13, datetime(2022, 10, 2, 8, 0))
    assert position == 3


def test_time_duration_splits():
    assert time_duration(timedelta(hours=1, minutes=2, seconds=3, microseconds=9)) == (1, 2, 3)


def test_time_duration_accepts_seconds():
    assert time_duration(3 * 3600 + 4 * 60 + 5) == (3, 4, 5)


@pytest.mark.parametrize("hour,expected", [(5, False), (6, True), (12, True), (13, False)])
def test_is_morning(hour, expected):
    assert is_morning(hour) is expected


@pytest.mark.parametrize("hour,expected", [(3, True), (4, False), (20, False), (21, True)])
def test_is_evening(hour, expected):
    assert is_evening(hour) is expected


def test_morning_reply_without_duration():
    assert morning_reply(1, timedelta(0)) == "早安成功！你是今天第1个起床的"


def test_morning_reply_with_duration():
    text = morning_reply(2, timedelta(hours=7, minutes=5, seconds=1))
    assert text == "早安成功！你的睡眠时长为7时5分1秒,你是今天第2个起床的"


def test_evening_reply_ignores_long_duration():
    assert evening_reply(3, timedelta(hours=30)) == "晚安成功！你是今天第3个睡觉的"


def test_evening_reply_with_duration():
    text = evening_reply(1, timedelta(hours=15))
    assert text == "晚安成功！你的清醒时长为15时0分0秒,你是今天第1个睡觉的"