import math
from dataclasses import dataclass
from typing import Optional

from calculator import MAX_PROJECTION_WEEKS
from models import (
    ActivityLevel,
    ByDate,
    ByRate,
    Gender,
    GoalType,
    MacroSplitType,
    UserParameters,
)

LB_TO_KG = 0.45359237
IN_TO_CM = 2.54

DEFAULT_CHANGE_PER_WEEK_KG = 0.5


class FormError(ValueError):
    """Form input the calculator cannot accept."""


@dataclass
class FormInput:
    """Form fields exactly as posted, blanks included."""

    sex: str
    age: str
    weight: str
    weight_unit: str
    height: str
    height_unit: str
    activity: str              # sedentary, lightly_active, ... or a multiplier
    goal: str                  # lose, gain
    target_change: str
    target_method: str         # by_rate, by_date
    change_per_week: str = ""
    weeks_to_goal: str = ""
    body_fat: str = ""
    preference: str = "balanced"


def _number(name: str, raw: str) -> Optional[float]:
    raw = (raw or "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise FormError(f"{name} must be a number.")
    if not math.isfinite(value):
        raise FormError(f"{name} must be a number.")
    return value


def _positive(name: str, raw: str) -> Optional[float]:
    value = _number(name, raw)
    if value is not None and value <= 0:
        raise FormError(f"{name} must be greater than zero.")
    return value


def _weight_kg(weight: Optional[float], unit: str, name: str = "Weight") -> Optional[float]:
    if weight is None or unit == "kg":
        return weight
    if unit == "lb":
        return weight * LB_TO_KG
    raise FormError(f"{name} unit must be kg or lb.")


def _height_cm(height: Optional[float], unit: str) -> Optional[float]:
    if height is None or unit == "cm":
        return height
    if unit == "in":
        return height * IN_TO_CM
    raise FormError("Height unit must be cm or in.")


def _activity(raw: str) -> ActivityLevel:
    raw = (raw or "").strip()
    try:
        return ActivityLevel[raw.upper()]
    except KeyError:
        pass
    # A bare multiplier, e.g. from the activity advisor
    try:
        value = float(raw)
    except ValueError:
        raise FormError(f"Unknown activity level: {raw!r}.")
    if not math.isfinite(value):
        raise FormError(f"Unknown activity level: {raw!r}.")
    return ActivityLevel.nearest(value)


def _enum(enum_cls, name: str, raw: str):
    try:
        return enum_cls((raw or "").strip().lower())
    except ValueError:
        raise FormError(f"Unknown {name}: {raw!r}.")


def parse_parameters(form: FormInput) -> UserParameters:
    """
    Validation gate between the form and the calculator.
    Blank required fields are passed on as None, bad values raise FormError.
    """
    gender = _enum(Gender, "sex", form.sex)
    goal_type = _enum(GoalType, "goal", form.goal)
    macro_split = _enum(MacroSplitType, "macro split", form.preference)
    activity = _activity(form.activity)

    age = _number("Age", form.age)
    if age is not None:
        if age < 0 or age != int(age):
            raise FormError("Age must be a whole number of years.")
        age = int(age)

    weight = _weight_kg(_positive("Weight", form.weight), form.weight_unit)
    height = _height_cm(_positive("Height", form.height), form.height_unit)
    target_change = _weight_kg(
        _positive("Target change", form.target_change), form.weight_unit, "Target change"
    )

    body_fat = _number("Body fat", form.body_fat)
    if body_fat is not None and not 0 <= body_fat < 100:
        raise FormError("Body fat must be between 0 and 100%.")

    method_name = (form.target_method or "").strip().lower()
    if method_name not in ("by_rate", "by_date"):
        raise FormError(f"Unknown target method: {form.target_method!r}.")

    # weeks_to_goal is left over from the form when by_rate is picked
    weeks = None
    if method_name == "by_date":
        weeks = _positive("Weeks to goal", form.weeks_to_goal)
    if weeks is not None:
        if weeks != int(weeks):
            raise FormError("Weeks to goal must be a whole number.")
        if weeks > MAX_PROJECTION_WEEKS:
            raise FormError(f"Weeks to goal can be at most {MAX_PROJECTION_WEEKS}.")
        method = ByDate(weeks_to_goal=int(weeks))
    else:
        # by_date without a week count behaves as by_rate
        rate = _positive("Change per week", form.change_per_week)
        if rate is None:
            rate = DEFAULT_CHANGE_PER_WEEK_KG
        method = ByRate(change_per_week_kg=_weight_kg(rate, form.weight_unit, "Change per week"))

    return UserParameters(
        gender=gender,
        age=age,
        weight=weight,
        height=height,
        activity=activity,
        goal_type=goal_type,
        target_change_kg=target_change,
        method=method,
        macro_split=macro_split,
        body_fat_percent=body_fat,
    )
