# co2survey/schemas.py
from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional, Dict, List, Union
from datetime import datetime


class RegisterIn(BaseModel):
    email: EmailStr
    password: str
    name: Optional[str] = None


class LoginIn(BaseModel):
    email: EmailStr
    password: str


class TokenOut(BaseModel):
    token: str
    role: str
    id: str
    email: EmailStr


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None


class SurveyAnswersIn(BaseModel):
    # one answer per survey question; text, or a number for numeric questions
    office_days: Optional[Union[str, float]] = None
    transport_main: Optional[str] = None
    alternative_transport_freq: Optional[str] = None
    alternative_transport: Optional[str] = None
    distance: Optional[Union[str, float]] = None
    car_type: Optional[str] = None
    flights_per_year: Optional[Union[str, float]] = None
    flight_distance: Optional[str] = None
    heating_type: Optional[str] = None
    warm_water_type: Optional[str] = None
    uses_green_electricity: Optional[str] = None
    smart_electricity_usage: Optional[str] = None
    fireworks_per_year: Optional[Union[str, float]] = None
    co2_importance: Optional[Union[str, float]] = None


class SurveySummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: Optional[datetime] = None
    office_days_per_week: Optional[int] = None
    transport_main: Optional[str] = None
    distance_km: Optional[float] = None
    flights_per_year: Optional[int] = None
    total_co2_kg: Optional[float] = None


class OwnerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    email: str
    name: Optional[str] = None


class SurveyWithOwnerOut(SurveySummaryOut):
    user: Optional[OwnerOut] = None


class SurveyOut(SurveySummaryOut):
    user_id: str
    alternative_transport: Optional[str] = None
    alternative_transport_freq: Optional[float] = None
    car_type: Optional[str] = None
    flight_distance_label: Optional[str] = None
    flight_distance_km: Optional[int] = None
    heating_type: Optional[str] = None
    warm_water_type: Optional[str] = None
    uses_green_electricity: Optional[str] = None
    smart_electricity_usage: Optional[float] = None
    fireworks_per_year: Optional[float] = None
    co2_importance: Optional[float] = None


class BreakdownOut(BaseModel):
    commute_kg: float
    flight_kg: float
    warm_water_kg: float
    total_kg: float


class SurveyCreatedOut(BaseModel):
    survey: SurveyOut
    breakdown: BreakdownOut


class EmissionFactorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category: str
    label: str
    value: Optional[float] = None
    unit: Optional[str] = None
    created_at: Optional[datetime] = None


class PublicAggregationsOut(BaseModel):
    count: int
    avg_co2_kg: float
    by_transport: Dict[str, int]
    flights: Dict[str, int]
    months: List[str]
    avg_co2_by_month: List[float]


class HrAggregationsOut(BaseModel):
    count: int
    avg_co2_kg: float
    by_transport: Dict[str, int]


class ImportOut(BaseModel):
    factors: int
    surveys: int


class RecomputeOut(BaseModel):
    updated: int
