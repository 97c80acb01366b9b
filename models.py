from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Union


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class ActivityLevel(Enum):
    """
    The five permitted activity multipliers.
    Anything coming from outside (form, AI suggestion) is snapped onto one of these.
    """

    SEDENTARY = (1.2, "Sedentary", "Desk job, little/no exercise.")
    LIGHTLY_ACTIVE = (1.375, "Light", "Exercise 1-3 days/week.")
    MODERATELY_ACTIVE = (1.55, "Moderate", "Sports 3-5 days/week.")
    VERY_ACTIVE = (1.725, "Very Active", "Sports 6-7 days/week.")
    EXTRA_ACTIVE = (1.9, "Extra Active", "Physical job or 2x training.")

    def __init__(self, multiplier: float, label: str, description: str):
        self.multiplier = multiplier
        self.label = label
        self.description = description

    @classmethod
    def nearest(cls, value: float) -> "ActivityLevel":
        # min() keeps the first of equal distances -> lower multiplier wins ties
        return min(cls, key=lambda level: abs(level.multiplier - value))


class GoalType(str, Enum):
    LOSE = "lose"
    GAIN = "gain"


@dataclass(frozen=True)
class ByRate:
    change_per_week_kg: float


@dataclass(frozen=True)
class ByDate:
    weeks_to_goal: int


TargetMethod = Union[ByRate, ByDate]


class MacroSplitType(str, Enum):
    BALANCED = "balanced"
    HIGH_PROTEIN = "high_protein"
    HIGH_CARB = "high_carb"
    LOW_CARB = "low_carb"
    KETO = "keto"


@dataclass(frozen=True)
class MacroSplit:
    label: str
    protein: int   # percent of calories
    fats: int
    carbs: int
    description: str


@dataclass(frozen=True)
class UserParameters:
    """
    Snapshot of one calculation request, weight in kg and height in cm.
    weight/height/age/target_change_kg are None while the user has left them blank.
    """

    gender: Gender
    age: Optional[int]
    weight: Optional[float]
    height: Optional[float]
    activity: ActivityLevel
    goal_type: GoalType
    target_change_kg: Optional[float]   # magnitude only
    method: TargetMethod
    macro_split: MacroSplitType = MacroSplitType.BALANCED
    body_fat_percent: Optional[float] = None


@dataclass
class TargetResolution:
    tdee: float
    daily_delta: float
    target_calories: float
    warning: Optional[str] = None


@dataclass
class MacroGrams:
    protein_g: float
    fat_g: float
    carb_g: float


@dataclass
class GraphPoint:
    week: int
    weight: float
    secondary_metric: float   # body fat % when losing, lean mass kg when gaining


@dataclass
class CalculationResult:
    bmr: float
    tdee: float
    target_calories: float
    daily_delta: float

    protein_g: float
    fat_g: float
    carb_g: float

    weeks_until_goal: int
    projected_date: date
    warning: Optional[str] = None
    graph_data: List[GraphPoint] = field(default_factory=list)
