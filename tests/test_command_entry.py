# tests/test_command_entry.py
import math

import pytest

from alman.core.command_entry import (
    DAY,
    HOUR,
    INT32_MAX,
    WEEK,
    CommandEntry,
    recency_multiplier,
    saturate,
    score,
)

NOW = 1_700_000_000


@pytest.mark.parametrize("age, mult", [
    (0, 4.0),
    (HOUR, 4.0),
    (HOUR + 1, 2.0),
    (DAY, 2.0),
    (DAY + 1, 0.5),
    (WEEK, 0.5),
    (WEEK + 1, 0.25),
])
def test_recency_table(age, mult):
    assert recency_multiplier(age) == mult


def test_score_formula():
    e = CommandEntry("git status", length=9, number_of_words=2, frequency=3, last_access_time=NOW)
    assert score(e, NOW) == math.floor(4.0 * 9 ** 0.6 * 3)
    assert score(e, NOW + 2 * DAY) == math.floor(0.5 * 9 ** 0.6 * 3)


def test_recent_entry_scores_at_least_older_one():
    half_hour = CommandEntry("make test", 8, 2, 2, NOW - 1800)
    two_hours = CommandEntry("make build", 8, 2, 2, NOW - 7200)
    assert score(half_hour, NOW) >= score(two_hours, NOW)
    assert score(half_hour, NOW) == math.floor(4.0 * 8 ** 0.6 * 2)
    assert score(two_hours, NOW) == math.floor(2.0 * 8 ** 0.6 * 2)


def test_new_entry_counts_word_characters():
    e = CommandEntry.new("git  add .", NOW)
    assert e.length == 7
    assert e.number_of_words == 3
    assert e.frequency == 1
    assert e.last_access_time == NOW
    assert e.score == score(e, NOW)


def test_touched_bumps_frequency_and_time():
    e = CommandEntry.new("cargo build", NOW)
    t = e.touched(NOW + 10)
    assert t.frequency == 2
    assert t.last_access_time == NOW + 10
    assert t.score == score(t, NOW + 10)
    # the old entry is unchanged
    assert e.frequency == 1


@pytest.mark.parametrize("freq, expected", [(5, 1), (4, 0), (15, 2), (20, 2), (25, 3)])
def test_decay_rounds_half_up(freq, expected):
    e = CommandEntry("cargo build", 10, 2, freq, NOW)
    assert e.decayed(0.1, NOW).frequency == expected


def test_saturate_clamps():
    assert saturate(10 ** 12) == INT32_MAX
    assert saturate(-3) == 0
    assert saturate(float("nan")) == 0
    assert saturate(41.9) == 41


def test_dict_round_trip_and_legacy_field():
    e = CommandEntry.new("docker ps", NOW)
    assert CommandEntry.from_dict(e.to_dict()) == e

    legacy = e.to_dict()
    legacy["command_text"] = legacy.pop("text")
    assert CommandEntry.from_dict(legacy) == e


def test_from_dict_requires_text():
    with pytest.raises(ValueError):
        CommandEntry.from_dict({"length": 1, "number_of_words": 1, "frequency": 1,
                                "last_access_time": NOW, "score": 1})


def test_sort_key_orders_by_score_then_text():
    a = CommandEntry("aaa bbb", 6, 2, 1, NOW, score=10)
    b = CommandEntry("bbb aaa", 6, 2, 1, NOW, score=10)
    c = CommandEntry("zzz", 3, 1, 1, NOW, score=50)
    assert sorted([b, a, c], key=lambda e: e.sort_key) == [c, a, b]
