from fastapi import APIRouter, Form

from .classifier import classify_activity

router = APIRouter()


@router.post("/activity/suggest")
def suggest_activity(description: str = Form("")):
    """
    Map a free-text activity description onto one of the five activity levels.
    The form keeps its current selection when value comes back null.
    """
    level = classify_activity(description)
    if level is None:
        return {"value": None, "name": None, "label": None}

    return {
        "value": level.multiplier,
        "name": level.name.lower(),
        "label": level.label,
    }
