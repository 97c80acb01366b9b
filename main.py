import logging
from dataclasses import asdict
from io import BytesIO
from pathlib import Path

from fastapi import Depends, FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, StreamingResponse
from fastapi.templating import Jinja2Templates

from activity_advisor.config import LOG_LEVEL
from activity_advisor.router import router as activity_router
from calculator import MACRO_SPLITS, ProjectionCalculator
from forms import FormError, FormInput, parse_parameters
from models import ActivityLevel, GoalType

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI()
templates = Jinja2Templates(directory=Path(__file__).parent / "templates")
templates.env.globals["activity_levels"] = list(ActivityLevel)
templates.env.globals["macro_splits"] = MACRO_SPLITS

app.include_router(activity_router)
calculator = ProjectionCalculator()


def form_input(
    sex: str = Form(...),
    age: str = Form(""),
    weight: str = Form(""),
    weight_unit: str = Form("kg"),
    height: str = Form(""),
    height_unit: str = Form("cm"),
    activity: str = Form("sedentary"),
    goal: str = Form(...),
    target_change: str = Form(""),
    target_method: str = Form("by_rate"),
    change_per_week: str = Form(""),
    weeks_to_goal: str = Form(""),
    body_fat: str = Form(""),
    preference: str = Form("balanced"),
) -> FormInput:
    return FormInput(
        sex=sex,
        age=age,
        weight=weight,
        weight_unit=weight_unit,
        height=height,
        height_unit=height_unit,
        activity=activity,
        goal=goal,
        target_change=target_change,
        target_method=target_method,
        change_per_week=change_per_week,
        weeks_to_goal=weeks_to_goal,
        body_fat=body_fat,
        preference=preference,
    )


def _form_page(request: Request, form: FormInput = None, error: str = None,
               notice: str = None, status_code: int = 200):
    return templates.TemplateResponse(
        request,
        "form.html",
        {"form": form, "error": error, "notice": notice},
        status_code=status_code,
    )


def _secondary_label(goal_type: GoalType) -> str:
    if goal_type == GoalType.LOSE:
        return "Body fat (%)"
    return "Lean mass (kg)"


@app.get("/", response_class=HTMLResponse)
async def home(request: Request):
    return _form_page(request)


@app.post("/calculate", response_class=HTMLResponse)
async def calculate_view(request: Request, form: FormInput = Depends(form_input)):
    try:
        params = parse_parameters(form)
    except FormError as e:
        return _form_page(request, form, error=str(e), status_code=400)

    result = calculator.compute_projection(params)
    if result is None:
        # Not an error, the user simply hasn't filled everything in yet
        return _form_page(
            request, form,
            notice="Fill in age, weight, height and target change to see your plan.",
        )

    return templates.TemplateResponse(
        request,
        "results.html",
        {
            "form_fields": asdict(form),
            "params": params,
            "plan": result,
            "split": MACRO_SPLITS[params.macro_split],
            "secondary_label": _secondary_label(params.goal_type),
        },
    )


@app.post("/api/projection")
def projection_api(form: FormInput = Depends(form_input)):
    try:
        params = parse_parameters(form)
    except FormError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result = calculator.compute_projection(params)
    if result is None:
        return {"result": None}

    data = asdict(result)
    data["projected_date"] = result.projected_date.isoformat()
    return {"result": data}


@app.post("/report")
def report_pdf(form: FormInput = Depends(form_input)):
    try:
        params = parse_parameters(form)
    except FormError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result = calculator.compute_projection(params)
    if result is None:
        raise HTTPException(status_code=400, detail="Incomplete input, nothing to report.")

    # WeasyPrint pulls in Pango at import time, only load it when a PDF is asked for
    from weasyprint import HTML

    template = templates.get_template("pdf_report.html")
    html_content = template.render(
        params=params,
        plan=result,
        split=MACRO_SPLITS[params.macro_split],
        secondary_label=_secondary_label(params.goal_type),
    )

    pdf_io = BytesIO()
    HTML(string=html_content).write_pdf(pdf_io)
    pdf_io.seek(0)
    logger.info("Rendered %d-week projection report", result.weeks_until_goal)

    return StreamingResponse(
        pdf_io,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="projection_report.pdf"'},
    )
