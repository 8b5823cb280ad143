"""
Tests for the synthetic corpus, weather codes and mood scale.
"""

from datetime import date, timedelta

import numpy as np
import pandas as pd
import pytest


class TestWeatherCodes:
    """Weather-code interpretation."""

    def test_clear_sky_is_positive(self):
        from moodflow.data.weather_codes import interpret_weather_code

        assert interpret_weather_code(0).modifier == 0.6
        assert interpret_weather_code(0).label == "Clear sky"

    def test_thunderstorm_is_most_negative(self):
        from moodflow.data.weather_codes import WEATHER_CODES, interpret_weather_code

        assert interpret_weather_code(95).modifier == -0.6
        assert min(c.modifier for c in WEATHER_CODES.values()) == -0.6

    @pytest.mark.parametrize("code", [999, -1, None, "abc", 4.0])
    def test_unknown_codes_are_neutral(self, code):
        from moodflow.data.weather_codes import interpret_weather_code

        condition = interpret_weather_code(code)
        assert condition.modifier == 0.0
        assert condition.label == "Unknown"

    def test_grouped_codes_share_condition(self):
        from moodflow.data.weather_codes import interpret_weather_code

        assert interpret_weather_code(61) is interpret_weather_code(82)
        assert interpret_weather_code(1) is interpret_weather_code(2)

    def test_to_dict(self):
        from moodflow.data.weather_codes import interpret_weather_code

        data = interpret_weather_code(3).to_dict()
        assert set(data) == {"label", "icon", "modifier", "tooltip"}


class TestMoodLevels:
    """Mood scale helpers."""

    def test_clamp(self):
        from moodflow.data.mood_levels import clamp_mood

        assert clamp_mood(0.2) == 1.0
        assert clamp_mood(7) == 5.0
        assert clamp_mood(3.3) == 3.3

    def test_level_rounds_and_clamps(self):
        from moodflow.data.mood_levels import mood_level

        assert mood_level(3.6).value == 4
        assert mood_level(-2).value == 1
        assert mood_level(9).label == "Very happy"

    @pytest.mark.parametrize("average,expected", [
        (1.0, "sad"),
        (2.5, "sad"),
        (2.51, "neutral"),
        (3.99, "neutral"),
        (4.0, "happy"),
    ])
    def test_category_thresholds(self, average, expected):
        from moodflow.data.mood_levels import mood_category

        assert mood_category(average) == expected


class TestCalendar:
    """Calendar helpers."""

    def test_calendar_position_is_zero_based(self):
        from moodflow.data.corpus import calendar_position

        # 2024-01-01 is a Monday
        assert calendar_position(date(2024, 1, 1)) == (0, 0, 0)
        assert calendar_position(date(2024, 12, 31)) == (1, 11, 365)

    def test_season_factor_peaks_in_june(self):
        from moodflow.data.corpus import season_factor

        assert season_factor(171) == pytest.approx(1.0, abs=1e-3)
        assert season_factor(80) == pytest.approx(0.0)
        assert -1.0 <= season_factor(355) <= -0.99

    def test_seasonal_amplitude(self):
        from moodflow.data.corpus import seasonal_amplitude

        assert seasonal_amplitude(0) == pytest.approx(-1.0)
        assert seasonal_amplitude(6) == pytest.approx(1.0)

    def test_observation_for_day_uses_weather_table(self):
        from moodflow.data.corpus import observation_for_day

        obs = observation_for_day(date(2024, 7, 20), 61, 18.0, 11.0)
        assert obs.weekday == 5
        assert obs.month == 6
        assert obs.weather_modifier == -0.4
        assert obs.mood is None


class TestWeatherSampling:
    """Season-dependent weather draws."""

    def test_summer_draws_only_summer_codes(self, rng):
        from moodflow.data.corpus import SUMMER_WEATHER, sample_weather_code

        allowed = {code for code, _ in SUMMER_WEATHER}
        codes = {sample_weather_code(6, rng) for _ in range(500)}
        assert codes <= allowed
        assert 71 not in codes

    def test_band_probabilities_sum_to_one(self):
        from moodflow.data.corpus import SHOULDER_WEATHER, SUMMER_WEATHER, WINTER_WEATHER

        for bands in (SUMMER_WEATHER, WINTER_WEATHER, SHOULDER_WEATHER):
            assert sum(p for _, p in bands) == pytest.approx(1.0)

    def test_winter_snows_sometimes(self):
        from moodflow.data.corpus import sample_weather_code

        rng = np.random.default_rng(0)
        codes = [sample_weather_code(0, rng) for _ in range(1000)]
        assert 71 in codes
        assert 95 not in codes


class TestGenerateCorpus:
    """Synthetic corpus generation."""

    def test_length_and_order(self, today, rng):
        from moodflow.data.corpus import generate_corpus

        corpus = generate_corpus(today=today, days=500, rng=rng)

        assert len(corpus) == 501
        assert corpus[0].date == today - timedelta(days=500)
        assert corpus[-1].date == today
        dates = [obs.date for obs in corpus]
        assert dates == sorted(dates)
        assert len(set(dates)) == len(dates)

    def test_value_ranges(self, today, rng):
        from moodflow.data.corpus import generate_corpus

        for obs in generate_corpus(today=today, days=500, rng=rng):
            assert 1 <= obs.mood <= 5
            assert 0 <= obs.weekday <= 6
            assert 0 <= obs.month <= 11
            assert 0 <= obs.day_of_year <= 365
            assert obs.temp_min < obs.temp_max
            assert round(obs.mood, 2) == obs.mood

    def test_seeded_generation_is_reproducible(self, today):
        from moodflow.data.corpus import generate_corpus

        a = generate_corpus(today=today, days=60, rng=np.random.default_rng(7))
        b = generate_corpus(today=today, days=60, rng=np.random.default_rng(7))
        assert a == b

    def test_different_seeds_differ(self, today):
        from moodflow.data.corpus import generate_corpus

        a = generate_corpus(today=today, days=60, rng=np.random.default_rng(1))
        b = generate_corpus(today=today, days=60, rng=np.random.default_rng(2))
        assert [o.mood for o in a] != [o.mood for o in b]

    def test_summer_is_warmer_than_winter(self, today, rng):
        from moodflow.data.corpus import corpus_to_frame, generate_corpus

        frame = corpus_to_frame(generate_corpus(today=today, days=500, rng=rng))
        by_month = frame.groupby("month")["temp_max"].mean()
        assert by_month[6] > by_month[0] + 10

    def test_clear_days_are_happier(self, today, rng):
        from moodflow.data.corpus import corpus_to_frame, generate_corpus

        frame = corpus_to_frame(generate_corpus(today=today, days=500, rng=rng))
        clear = frame.loc[frame["weather_code"] == 0, "mood"].mean()
        rainy = frame.loc[frame["weather_code"] == 61, "mood"].mean()
        assert clear > rainy

    def test_corpus_to_frame(self, today, rng):
        from moodflow.data.corpus import corpus_to_frame, generate_corpus

        frame = corpus_to_frame(generate_corpus(today=today, days=10, rng=rng))
        assert isinstance(frame.index, pd.DatetimeIndex)
        assert len(frame) == 11
        assert "mood" in frame.columns

    def test_to_dict_serializes_date(self, today, rng):
        from moodflow.data.corpus import generate_corpus

        data = generate_corpus(today=today, days=0, rng=rng)[0].to_dict()
        assert data["date"] == "2024-07-15"
