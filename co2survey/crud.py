# co2survey/crud.py
from . import models
from .calculation import ParsedSurveyInputs, RawSurveyAnswers, compute_breakdown, normalize_and_map
from .config import SUPER_ADMIN_EMAIL, SUPER_ADMIN_PASSWORD, IMPORT_USER_EMAIL
from .mappings import UNKNOWN
from sqlalchemy.orm import Session, joinedload
from passlib.context import CryptContext
import logging
import uuid, json

logger = logging.getLogger(__name__)

pwd_ctx = CryptContext(schemes=["bcrypt"], deprecated="auto")


# Auth
def create_user(db: Session, email, password, name=None, role=None):
    if role is None:
        role = models.Role.SUPER_ADMIN if email == SUPER_ADMIN_EMAIL else models.Role.EMPLOYEE
    user = models.User(email=email, password_hash=pwd_ctx.hash(password), name=name, role=role)
    db.add(user); db.commit(); db.refresh(user)
    return user


def issue_token(db: Session, user):
    user.token = uuid.uuid4().hex
    db.add(user); db.commit(); db.refresh(user)
    return user


def authenticate_user(db: Session, email, password):
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not pwd_ctx.verify(password, user.password_hash):
        return None
    return issue_token(db, user)


def get_user_by_token(db: Session, token):
    if not token:
        return None
    return db.query(models.User).filter(models.User.token == token).first()


def get_user_by_email(db: Session, email):
    return db.query(models.User).filter(models.User.email == email).first()


def ensure_initial_admin(db: Session):
    """Make sure at least one ADMIN / SUPER_ADMIN can log in."""
    admins = db.query(models.User).filter(models.User.role.in_(models.Role.ADMINS)).count()
    if admins:
        return None
    user = get_user_by_email(db, SUPER_ADMIN_EMAIL)
    if user:
        user.role = models.Role.SUPER_ADMIN
        if not user.password_hash.startswith("$2"):
            user.password_hash = pwd_ctx.hash(SUPER_ADMIN_PASSWORD)
        db.add(user); db.commit(); db.refresh(user)
    else:
        user = create_user(db, SUPER_ADMIN_EMAIL, SUPER_ADMIN_PASSWORD, name="Bootstrap Admin",
                           role=models.Role.SUPER_ADMIN)
    logger.info("bootstrap admin ensured: %s", user.email)
    return user


def ensure_import_user(db: Session):
    """Owner of imported survey rows; a dedicated account so re-imports never touch user submissions."""
    existing = get_user_by_email(db, IMPORT_USER_EMAIL)
    if existing:
        return existing
    return create_user(db, IMPORT_USER_EMAIL, uuid.uuid4().hex, name="Import")


# Emission factors
def list_factors(db: Session):
    return db.query(models.EmissionFactor).order_by(models.EmissionFactor.created_at, models.EmissionFactor.id).all()


def replace_emission_factors(db: Session, factors):
    """Swap the whole factor table: delete everything, insert the new batch, one commit."""
    db.query(models.EmissionFactor).delete()
    for f in factors:
        db.add(models.EmissionFactor(category=f.category, label=f.label, value=f.value, unit=f.unit or ""))
    db.commit()
    return len(factors)


# Surveys
def apply_inputs(survey, inputs: ParsedSurveyInputs, factors):
    survey.office_days_per_week = inputs.office_days
    survey.transport_main = inputs.main_transport or UNKNOWN
    survey.alternative_transport = inputs.alternative_transport
    survey.alternative_transport_freq = inputs.alternative_frequency
    survey.distance_km = inputs.distance_km
    survey.car_type = inputs.car_type
    survey.flights_per_year = inputs.flights_per_year
    survey.flight_distance_label = inputs.flight_distance_label
    survey.flight_distance_km = inputs.flight_distance_km
    survey.heating_type = inputs.heating_type or UNKNOWN
    survey.warm_water_type = inputs.warm_water_type or UNKNOWN
    survey.uses_green_electricity = inputs.uses_green_electricity
    survey.smart_electricity_usage = inputs.smart_electricity_usage
    survey.fireworks_per_year = inputs.fireworks_per_year
    survey.co2_importance = inputs.co2_importance
    breakdown = compute_breakdown(inputs, factors)
    survey.total_co2_kg = breakdown.total_kg
    return breakdown


def inputs_from_survey(survey) -> ParsedSurveyInputs:
    def known(label):
        return None if label in (None, UNKNOWN) else label

    return ParsedSurveyInputs(
        office_days=survey.office_days_per_week or 0,
        distance_km=survey.distance_km or 0,
        main_transport=known(survey.transport_main),
        alternative_transport=survey.alternative_transport,
        alternative_frequency=survey.alternative_transport_freq,
        car_type=survey.car_type,
        flights_per_year=survey.flights_per_year,
        flight_distance_label=survey.flight_distance_label,
        flight_distance_km=survey.flight_distance_km,
        heating_type=known(survey.heating_type),
        warm_water_type=known(survey.warm_water_type),
        uses_green_electricity=survey.uses_green_electricity,
        smart_electricity_usage=survey.smart_electricity_usage,
        fireworks_per_year=survey.fireworks_per_year,
        co2_importance=survey.co2_importance,
    )


def build_survey(user_id, raw: RawSurveyAnswers, factors):
    survey = models.Survey(user_id=user_id, raw_answers=json.dumps(raw.to_dict(), ensure_ascii=False, default=str))
    breakdown = apply_inputs(survey, normalize_and_map(raw), factors)
    return survey, breakdown


def create_survey(db: Session, user_id, raw: RawSurveyAnswers, factors=None):
    if factors is None:
        factors = list_factors(db)
    survey, breakdown = build_survey(user_id, raw, factors)
    db.add(survey); db.commit(); db.refresh(survey)
    return survey, breakdown


def get_surveys(db: Session, user_id=None):
    q = db.query(models.Survey).options(joinedload(models.Survey.user))
    if user_id is not None:
        q = q.filter(models.Survey.user_id == user_id)
    return q.order_by(models.Survey.created_at.desc()).all()


def recompute_totals(db: Session):
    """Re-derive every stored total from its survey fields and the current factor table."""
    factors = list_factors(db)
    surveys = db.query(models.Survey).all()
    for s in surveys:
        s.total_co2_kg = compute_breakdown(inputs_from_survey(s), factors).total_kg
    db.commit()
    logger.info("recomputed %d survey totals against %d factors", len(surveys), len(factors))
    return len(surveys)
