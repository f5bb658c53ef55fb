from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Depends, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware

from mealgrid.api.auth import get_current_user_id, require_plan_role
from mealgrid.events.web_observers import start as start_event_observers, get_events as get_web_events
from mealgrid.infra.Meal_Repository import MealRepository
from mealgrid.infra.MealPlan_Repository import MealPlanRepository
from mealgrid.infra.User_Repository import UserRepository, UserNotFoundError
from mealgrid.infra.pdf_utils import generate_pdf_for_plan
from mealgrid.logic.sharing.access import can_read
from mealgrid.utilities.config import CORS_ORIGINS

# Routers
from mealgrid.api.routes import auth_google, meal_plans, meals

# Logging
logger = logging.getLogger("mealgrid_app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Register event bus subscribers for the activity feed when the app starts."""
    start_event_observers()
    logger.info("Web observers for meal events started")
    yield


# Initialize FastAPI app
app = FastAPI(title="Meal Grid API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_google.router)
app.include_router(meal_plans.router)
app.include_router(meals.router)


# -------------------- Health --------------------
@app.get("/api/health")
def health():
    return {"status": "ok", "message": "Meal grid API is running"}


# -------------------- Current user --------------------
@app.get("/api/me")
def me(user_id: str = Depends(get_current_user_id)):
    try:
        return UserRepository().get(user_id).to_dict()
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")


# -------------------- Export --------------------
@app.get("/api/meal-plans/{plan_id}/export.pdf")
def export_plan_pdf(plan_id: str, user_id: str = Depends(get_current_user_id)):
    plan, _ = require_plan_role(MealPlanRepository(), user_id, plan_id, can_read)
    pdf_bytes = generate_pdf_for_plan(plan, MealRepository().list_for_plan(plan_id))
    filename = f"meal_plan_{plan_id}.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# -------------------- Activity (event polling) --------------------
@app.get("/api/meal-plans/{plan_id}/activity")
def plan_activity(plan_id: str,
                  since: Optional[int] = Query(default=None, ge=0),
                  user_id: str = Depends(get_current_user_id)):
    """Recent meal events of a plan; poll with since=<next_cursor> for newer ones."""
    require_plan_role(MealPlanRepository(), user_id, plan_id, can_read)
    return get_web_events(meal_plan_id=plan_id, since=since)
