# co2survey/models.py
from sqlalchemy import Column, String, Integer, Float, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base
import uuid


def gen_id(prefix):
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


class Role:
    EMPLOYEE = "EMPLOYEE"
    HR = "HR"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"

    ADMINS = (ADMIN, SUPER_ADMIN)


class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True, default=lambda: gen_id("user"))
    email = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=True)
    role = Column(String, nullable=False, default=Role.EMPLOYEE)
    token = Column(String, nullable=True, index=True)  # opaque session token
    created_at = Column(DateTime, default=datetime.utcnow)

    surveys = relationship("Survey", back_populates="user")


class EmissionFactor(Base):
    __tablename__ = "emission_factors"
    id = Column(Integer, primary_key=True, autoincrement=True)
    category = Column(String, nullable=False)  # transport | flight | heating
    label = Column(String, nullable=False)  # canonical label, lookup key
    value = Column(Float, nullable=True)  # CO2 per unit; NULL when unparseable
    unit = Column(String, default="")
    created_at = Column(DateTime, default=datetime.utcnow)


class Survey(Base):
    __tablename__ = "surveys"
    id = Column(String, primary_key=True, default=lambda: gen_id("survey"))
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    office_days_per_week = Column(Integer, default=0)
    transport_main = Column(String, default="UNKNOWN")
    alternative_transport = Column(String, nullable=True)
    alternative_transport_freq = Column(Float, nullable=True)
    distance_km = Column(Float, default=0.0)
    car_type = Column(String, nullable=True)
    flights_per_year = Column(Integer, nullable=True)
    flight_distance_label = Column(String, nullable=True)
    flight_distance_km = Column(Integer, nullable=True)  # 750 | 2500 | 5000, display only
    heating_type = Column(String, default="UNKNOWN")
    warm_water_type = Column(String, default="UNKNOWN")
    uses_green_electricity = Column(String, nullable=True)
    smart_electricity_usage = Column(Float, nullable=True)
    fireworks_per_year = Column(Float, nullable=True)
    co2_importance = Column(Float, nullable=True)
    raw_answers = Column(Text)  # JSON string of the submitted answers
    total_co2_kg = Column(Float, nullable=True)

    user = relationship("User", back_populates="surveys")
