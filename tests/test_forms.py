"""Tests for the form validation gate."""

from __future__ import annotations

import pytest

from forms import FormError, FormInput, parse_parameters
from models import ActivityLevel, ByDate, ByRate, Gender, GoalType, MacroSplitType


def make_form(form_data, **overrides) -> FormInput:
    return FormInput(**{**form_data, **overrides})


def test_complete_form(form_data):
    params = parse_parameters(make_form(form_data))

    assert params.gender == Gender.MALE
    assert params.age == 30
    assert params.weight == 80
    assert params.height == 180
    assert params.activity == ActivityLevel.SEDENTARY
    assert params.goal_type == GoalType.LOSE
    assert params.target_change_kg == 5
    assert params.method == ByRate(change_per_week_kg=0.5)
    assert params.macro_split == MacroSplitType.BALANCED
    assert params.body_fat_percent is None


@pytest.mark.parametrize(
    "field, attribute",
    [
        ("age", "age"),
        ("weight", "weight"),
        ("height", "height"),
        ("target_change", "target_change_kg"),
    ],
)
def test_blank_required_field_is_none(form_data, field, attribute):
    params = parse_parameters(make_form(form_data, **{field: "  "}))
    assert getattr(params, attribute) is None


def test_imperial_units(form_data):
    params = parse_parameters(
        make_form(form_data, weight="176", weight_unit="lb", height="70", height_unit="in",
                  target_change="10", change_per_week="1")
    )
    assert params.weight == pytest.approx(79.832, abs=1e-3)
    assert params.height == pytest.approx(177.8)
    assert params.target_change_kg == pytest.approx(4.536, abs=1e-3)
    assert params.method.change_per_week_kg == pytest.approx(0.4536, abs=1e-4)


def test_by_date(form_data):
    params = parse_parameters(make_form(form_data, target_method="by_date", weeks_to_goal="12"))
    assert params.method == ByDate(weeks_to_goal=12)


def test_by_date_without_weeks_uses_rate(form_data):
    params = parse_parameters(make_form(form_data, target_method="by_date", weeks_to_goal=""))
    assert params.method == ByRate(change_per_week_kg=0.5)


def test_blank_rate_defaults(form_data):
    params = parse_parameters(make_form(form_data, change_per_week=""))
    assert params.method == ByRate(change_per_week_kg=0.5)


def test_activity_multiplier_snaps(form_data):
    params = parse_parameters(make_form(form_data, activity="1.5"))
    assert params.activity == ActivityLevel.MODERATELY_ACTIVE


def test_body_fat(form_data):
    params = parse_parameters(make_form(form_data, body_fat="18.5"))
    assert params.body_fat_percent == 18.5


@pytest.mark.parametrize(
    "overrides",
    [
        {"weight": "heavy"},
        {"weight": "-80"},
        {"height": "0"},
        {"age": "30.5"},
        {"age": "nan"},
        {"body_fat": "120"},
        {"weeks_to_goal": "2.5", "target_method": "by_date"},
        {"sex": "other"},
        {"goal": "maintain"},
        {"activity": "couch"},
        {"preference": "carnivore"},
        {"target_method": "by_magic"},
        {"weight_unit": "stone"},
    ],
)
def test_bad_values_raise(form_data, overrides):
    with pytest.raises(FormError):
        parse_parameters(make_form(form_data, **overrides))


def test_by_date_up_to_a_year(form_data):
    params = parse_parameters(make_form(form_data, target_method="by_date", weeks_to_goal="52"))
    assert params.method == ByDate(weeks_to_goal=52)


@pytest.mark.parametrize("weeks", ["53", "500"])
def test_by_date_beyond_a_year_raises(form_data, weeks):
    with pytest.raises(FormError):
        parse_parameters(make_form(form_data, target_method="by_date", weeks_to_goal=weeks))


@pytest.mark.parametrize("weeks", ["0", "-3", "abc", "500"])
def test_by_rate_ignores_weeks_field(form_data, weeks):
    params = parse_parameters(make_form(form_data, target_method="by_rate", weeks_to_goal=weeks))
    assert params.method == ByRate(change_per_week_kg=0.5)


@pytest.mark.parametrize("activity", ["nan", "inf", "-inf"])
def test_non_finite_activity_raises(form_data, activity):
    with pytest.raises(FormError):
        parse_parameters(make_form(form_data, activity=activity))
