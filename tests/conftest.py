"""Pytest fixtures for the projection calculator tests."""

from __future__ import annotations

from datetime import date

import pytest

from calculator import ProjectionCalculator
from models import (
    ActivityLevel,
    ByDate,
    ByRate,
    Gender,
    GoalType,
    MacroSplitType,
    UserParameters,
)


@pytest.fixture
def calc():
    return ProjectionCalculator()


@pytest.fixture
def today():
    return date(2026, 1, 1)


@pytest.fixture
def male_cut():
    """80 kg / 180 cm / 30 y man losing 5 kg at 0.5 kg a week."""
    return UserParameters(
        gender=Gender.MALE,
        age=30,
        weight=80.0,
        height=180.0,
        activity=ActivityLevel.SEDENTARY,
        goal_type=GoalType.LOSE,
        target_change_kg=5.0,
        method=ByRate(change_per_week_kg=0.5),
        macro_split=MacroSplitType.BALANCED,
    )


@pytest.fixture
def female_crash_cut():
    """60 kg woman trying to lose 5 kg in 4 weeks."""
    return UserParameters(
        gender=Gender.FEMALE,
        age=30,
        weight=60.0,
        height=165.0,
        activity=ActivityLevel.SEDENTARY,
        goal_type=GoalType.LOSE,
        target_change_kg=5.0,
        method=ByDate(weeks_to_goal=4),
    )


@pytest.fixture
def male_bulk():
    return UserParameters(
        gender=Gender.MALE,
        age=30,
        weight=80.0,
        height=180.0,
        activity=ActivityLevel.SEDENTARY,
        goal_type=GoalType.GAIN,
        target_change_kg=2.0,
        method=ByRate(change_per_week_kg=0.25),
        macro_split=MacroSplitType.HIGH_PROTEIN,
    )


@pytest.fixture
def form_data():
    """Complete form post for the male cut."""
    return {
        "sex": "male",
        "age": "30",
        "weight": "80",
        "weight_unit": "kg",
        "height": "180",
        "height_unit": "cm",
        "activity": "sedentary",
        "goal": "lose",
        "target_change": "5",
        "target_method": "by_rate",
        "change_per_week": "0.5",
        "weeks_to_goal": "",
        "body_fat": "",
        "preference": "balanced",
    }
