# co2survey/main.py
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
import logging

from .calculation import RawSurveyAnswers
from .config import EMISSION_FILE, SURVEY_FILE, setup_logging
from .database import engine, Base, SessionLocal, get_db
from .models import Role
from . import crud, importer, partials, schemas, stats

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # Create DB tables
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        crud.ensure_initial_admin(db)
    finally:
        db.close()
    yield


app = FastAPI(title="CO2 Survey API", lifespan=lifespan)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

bearer = HTTPBearer(auto_error=False)


def optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    db: Session = Depends(get_db),
):
    if credentials is None:
        return None
    return crud.get_user_by_token(db, credentials.credentials)


def require_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    db: Session = Depends(get_db),
):
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    user = crud.get_user_by_token(db, credentials.credentials)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid token")
    return user


def require_role(*allowed):
    def dependency(user=Depends(require_user)):
        if user.role not in allowed:
            raise HTTPException(status_code=403, detail="Insufficient role")
        return user
    return dependency


def visible_surveys(db: Session, user):
    # employees only ever see their own rows
    if user.role == Role.EMPLOYEE:
        return crud.get_surveys(db, user.id)
    return crud.get_surveys(db)


def token_out(user):
    return {"token": user.token, "role": user.role, "id": user.id, "email": user.email}


# -----------------
# Auth endpoints
# -----------------
@app.post("/auth/register", response_model=schemas.TokenOut)
def register(payload: schemas.RegisterIn, db: Session = Depends(get_db)):
    if not payload.password:
        raise HTTPException(status_code=400, detail="Email and password required")
    if crud.get_user_by_email(db, payload.email):
        raise HTTPException(status_code=400, detail="Email already registered")
    user = crud.create_user(db, payload.email, payload.password, payload.name)
    user = crud.issue_token(db, user)
    logger.info("registered %s as %s", user.email, user.role)
    return token_out(user)


@app.post("/auth/login", response_model=schemas.TokenOut)
def login(payload: schemas.LoginIn, db: Session = Depends(get_db)):
    user = crud.authenticate_user(db, payload.email, payload.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    logger.info("login %s", user.email)
    return token_out(user)


@app.get("/auth/me", response_model=schemas.UserOut)
def me(user=Depends(require_user)):
    return user


# -----------------
# Surveys
# -----------------
@app.post("/surveys", response_model=schemas.SurveyCreatedOut)
def submit_survey(payload: schemas.SurveyAnswersIn, user=Depends(require_user), db: Session = Depends(get_db)):
    raw = RawSurveyAnswers.from_mapping(payload.model_dump())
    survey, breakdown = crud.create_survey(db, user.id, raw)
    return {
        "survey": survey,
        "breakdown": {
            "commute_kg": breakdown.commute_kg,
            "flight_kg": breakdown.flight_kg,
            "warm_water_kg": breakdown.warm_water_kg,
            "total_kg": breakdown.total_kg,
        },
    }


@app.post("/surveys/recompute", response_model=schemas.RecomputeOut)
def recompute(user=Depends(require_role(*Role.ADMINS)), db: Session = Depends(get_db)):
    return {"updated": crud.recompute_totals(db)}


@app.post("/import", response_model=schemas.ImportOut)
def run_import(user=Depends(require_role(*Role.ADMINS)), db: Session = Depends(get_db)):
    try:
        factors, surveys = importer.run_import(db, EMISSION_FILE, SURVEY_FILE)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    logger.info("import by %s: %d factors, %d surveys", user.email, factors, surveys)
    return {"factors": factors, "surveys": surveys}


# -----------------
# Stats
# -----------------
@app.get("/stats/public", response_model=List[schemas.SurveySummaryOut])
def public_surveys(db: Session = Depends(get_db)):
    return crud.get_surveys(db)


@app.get("/stats", response_model=List[schemas.SurveyWithOwnerOut])
def user_surveys(user=Depends(require_user), db: Session = Depends(get_db)):
    if user.role == Role.HR:
        raise HTTPException(status_code=403, detail="HR role can access only aggregated data")
    return visible_surveys(db, user)


@app.get("/stats/me", response_model=List[schemas.SurveyOut])
def my_surveys(user=Depends(require_role(Role.EMPLOYEE)), db: Session = Depends(get_db)):
    return crud.get_surveys(db, user.id)


@app.get("/stats/emission-factors", response_model=List[schemas.EmissionFactorOut])
def emission_factors(db: Session = Depends(get_db)):
    return crud.list_factors(db)


@app.get("/stats/aggregations", response_model=schemas.PublicAggregationsOut)
def public_aggregations(db: Session = Depends(get_db)):
    return stats.public_aggregations(crud.get_surveys(db))


@app.get("/stats/hr/aggregations", response_model=schemas.HrAggregationsOut)
def hr_aggregations(user=Depends(require_role(Role.HR, *Role.ADMINS)), db: Session = Depends(get_db)):
    return stats.hr_aggregations(crud.get_surveys(db))


# -----------------
# HTML partials
# -----------------
@app.get("/partials/summary/public", response_class=HTMLResponse)
def summary_public(db: Session = Depends(get_db)):
    return partials.summary_cards(crud.get_surveys(db))


@app.get("/partials/surveys/public", response_class=HTMLResponse)
def surveys_public(db: Session = Depends(get_db)):
    return partials.survey_rows(crud.get_surveys(db))


@app.get("/partials/summary/private", response_class=HTMLResponse)
def summary_private(user=Depends(optional_user), db: Session = Depends(get_db)):
    if user is None:
        return HTMLResponse(partials.message("Nicht angemeldet."), status_code=401)
    return partials.summary_cards(visible_surveys(db, user), partials.PRIVATE_CARDS)


@app.get("/partials/surveys/private", response_class=HTMLResponse)
def surveys_private(user=Depends(optional_user), db: Session = Depends(get_db)):
    if user is None:
        return HTMLResponse(partials.message("Nicht angemeldet."), status_code=401)
    return partials.survey_rows(visible_surveys(db, user), hover="purple", accent="purple")
