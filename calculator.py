import logging
import math
from datetime import date, timedelta
from typing import Dict, List, NamedTuple, Optional

from models import (
    ByDate,
    ByRate,
    CalculationResult,
    Gender,
    GoalType,
    GraphPoint,
    MacroGrams,
    MacroSplit,
    MacroSplitType,
    TargetMethod,
    TargetResolution,
    UserParameters,
)

logger = logging.getLogger(__name__)


KCAL_PER_KG = 7700          # ~1 kg of body mass, used for loss and gain alike
MAX_PROJECTION_WEEKS = 52

MIN_CALORIES = {
    Gender.MALE: 1500,
    Gender.FEMALE: 1200,
}

DEFAULT_BODY_FAT = {
    Gender.MALE: 20.0,
    Gender.FEMALE: 30.0,
}

# Adaptive thermogenesis while dieting: -1% maintenance per week, 10% at most
ADAPTATION_PER_WEEK = 0.01
ADAPTATION_FLOOR = 0.90

FAT_SHARE_OF_LOSS = 0.80
LEAN_SHARE_OF_GAIN = 0.50

MACRO_SPLITS: Dict[MacroSplitType, MacroSplit] = {
    MacroSplitType.BALANCED: MacroSplit("Balanced", 30, 35, 35, "Sustainable balance."),
    MacroSplitType.HIGH_PROTEIN: MacroSplit("High Protein", 40, 30, 30, "Best for retention/growth."),
    MacroSplitType.HIGH_CARB: MacroSplit("High Carb", 25, 20, 55, "Endurance focused."),
    MacroSplitType.LOW_CARB: MacroSplit("Low Carb", 40, 40, 20, "Insulin control."),
    MacroSplitType.KETO: MacroSplit("Keto", 25, 70, 5, "Ketosis state."),
}


class _WeekState(NamedTuple):
    weight: float
    body_fat: float
    lean_mass: float


class ProjectionCalculator:
    """
    Core logic:
    - Compute BMR (Katch-McArdle with body fat, Mifflin-St Jeor without)
    - Apply activity factor -> TDEE
    - Turn the goal (rate or deadline) into a fixed daily calorie delta
    - Simulate the weeks ahead against a maintenance level that drifts
      with weight and, when dieting, with metabolic adaptation
    - Split the target calories into macros
    """

    def _mifflin_st_jeor(self, gender: Gender, age: float, weight: float, height: float) -> float:
        base = 10 * weight + 6.25 * height - 5 * age
        if gender == Gender.MALE:
            return base + 5
        return base - 161

    def estimate_bmr(
        self,
        weight: float,
        height: float,
        age: float,
        gender: Gender,
        body_fat_percent: Optional[float] = None,
    ) -> float:
        if body_fat_percent is not None and body_fat_percent > 0:
            lean_body_mass = weight * (1 - body_fat_percent / 100)
            logger.debug("BMR via Katch-McArdle, lean mass %.1f kg", lean_body_mass)
            return 370 + 21.6 * lean_body_mass

        logger.debug("BMR via Mifflin-St Jeor")
        return self._mifflin_st_jeor(gender, age, weight, height)

    def resolve_target(
        self,
        bmr: float,
        activity_multiplier: float,
        gender: Gender,
        goal_type: GoalType,
        target_change_kg: float,
        method: TargetMethod,
    ) -> TargetResolution:
        tdee = bmr * activity_multiplier

        if isinstance(method, ByDate):
            daily_change = (target_change_kg * KCAL_PER_KG) / (method.weeks_to_goal * 7)
        elif isinstance(method, ByRate):
            daily_change = (method.change_per_week_kg * KCAL_PER_KG) / 7
        else:
            raise TypeError(f"Unknown target method: {method!r}")

        daily_delta = -daily_change if goal_type == GoalType.LOSE else daily_change
        target_calories = tdee + daily_delta

        # Advisory only, the target is not clamped
        warning = None
        min_calories = MIN_CALORIES[gender]
        if goal_type == GoalType.LOSE and target_calories < min_calories:
            warning = (
                f"Calories ({round(target_calories)}) are below the "
                f"recommended safety minimum ({min_calories})."
            )
            logger.warning("Target %.0f kcal below floor %d", target_calories, min_calories)

        return TargetResolution(
            tdee=tdee,
            daily_delta=daily_delta,
            target_calories=target_calories,
            warning=warning,
        )

    def horizon_weeks(self, target_change_kg: float, daily_delta: float, method: TargetMethod) -> int:
        if isinstance(method, ByDate):
            return method.weeks_to_goal

        weekly_change = abs(daily_delta) * 7 / KCAL_PER_KG
        if weekly_change == 0:
            return MAX_PROJECTION_WEEKS
        # round() first so 10.000000000001 weeks stays 10
        weeks = math.ceil(round(target_change_kg / weekly_change, 9))
        return min(weeks, MAX_PROJECTION_WEEKS)

    def adaptation_factor(self, goal_type: GoalType, week: int) -> float:
        if goal_type == GoalType.GAIN:
            return 1.0
        return max(ADAPTATION_FLOOR, round(1 - ADAPTATION_PER_WEEK * week, 10))

    def _point(self, week: int, state: _WeekState, goal_type: GoalType) -> GraphPoint:
        secondary = state.body_fat if goal_type == GoalType.LOSE else state.lean_mass
        return GraphPoint(
            week=week,
            weight=round(state.weight, 2),
            secondary_metric=round(secondary, 1),
        )

    def _advance(
        self,
        state: _WeekState,
        week: int,
        height: float,
        age: float,
        gender: Gender,
        activity_multiplier: float,
        target_calories: float,
        goal_type: GoalType,
    ) -> _WeekState:
        # Mifflin-St Jeor on the current weight even when body fat is known
        dynamic_bmr = self._mifflin_st_jeor(gender, age, state.weight, height)
        dynamic_tdee = dynamic_bmr * activity_multiplier * self.adaptation_factor(goal_type, week)

        actual_daily_delta = target_calories - dynamic_tdee
        weekly_change = (actual_daily_delta * 7) / KCAL_PER_KG
        weight = state.weight + weekly_change

        if goal_type == GoalType.LOSE:
            fat_mass = state.weight * (state.body_fat / 100) - FAT_SHARE_OF_LOSS * abs(weekly_change)
            return _WeekState(weight, fat_mass / weight * 100, state.lean_mass)

        lean_mass = state.weight * (1 - state.body_fat / 100) + LEAN_SHARE_OF_GAIN * weekly_change
        return _WeekState(weight, state.body_fat, lean_mass)

    def simulate(
        self,
        start_weight: float,
        start_body_fat: float,
        height: float,
        age: float,
        gender: Gender,
        activity_multiplier: float,
        target_calories: float,
        goal_type: GoalType,
        weeks: int,
    ) -> List[GraphPoint]:
        """
        Week-by-week projection under a fixed calorie target.
        Returns weeks + 1 points, week 0 being the starting state.
        """
        state = _WeekState(
            weight=start_weight,
            body_fat=start_body_fat,
            lean_mass=start_weight * (1 - start_body_fat / 100),
        )
        points = [self._point(0, state, goal_type)]

        for week in range(1, weeks + 1):
            state = self._advance(
                state, week, height, age, gender,
                activity_multiplier, target_calories, goal_type,
            )
            points.append(self._point(week, state, goal_type))

        return points

    def allocate_macros(self, target_calories: float, split_type: MacroSplitType) -> MacroGrams:
        split = MACRO_SPLITS[split_type]
        return MacroGrams(
            protein_g=target_calories * split.protein / 100 / 4,
            fat_g=target_calories * split.fats / 100 / 9,
            carb_g=target_calories * split.carbs / 100 / 4,
        )

    def compute_projection(
        self, params: UserParameters, today: Optional[date] = None
    ) -> Optional[CalculationResult]:
        """
        Full calculation for one parameter snapshot.
        Returns None while any of weight, height, age or target change is missing.
        """
        if (
            params.weight is None
            or params.height is None
            or params.age is None
            or params.target_change_kg is None
        ):
            return None

        multiplier = params.activity.multiplier

        bmr = self.estimate_bmr(
            params.weight, params.height, params.age, params.gender, params.body_fat_percent
        )
        target = self.resolve_target(
            bmr,
            multiplier,
            params.gender,
            params.goal_type,
            params.target_change_kg,
            params.method,
        )

        weeks = self.horizon_weeks(params.target_change_kg, target.daily_delta, params.method)
        logger.debug("Projecting %d weeks at %.0f kcal/day", weeks, target.target_calories)

        if params.body_fat_percent:
            start_body_fat = params.body_fat_percent
        else:
            start_body_fat = DEFAULT_BODY_FAT[params.gender]

        graph_data = self.simulate(
            params.weight,
            start_body_fat,
            params.height,
            params.age,
            params.gender,
            multiplier,
            target.target_calories,
            params.goal_type,
            weeks,
        )

        macros = self.allocate_macros(target.target_calories, params.macro_split)

        today = today or date.today()

        return CalculationResult(
            bmr=bmr,
            tdee=target.tdee,
            target_calories=target.target_calories,
            daily_delta=target.daily_delta,
            protein_g=macros.protein_g,
            fat_g=macros.fat_g,
            carb_g=macros.carb_g,
            weeks_until_goal=weeks,
            projected_date=today + timedelta(weeks=weeks),
            warning=target.warning,
            graph_data=graph_data,
        )
