# co2survey/stats.py
# Aggregations over stored surveys for the public and HR dashboards.
from collections import defaultdict

from .mappings import UNKNOWN


def flight_bucket(flights):
    v = -1 if flights is None else flights
    if v <= 0:
        return "0"
    if v <= 2:
        return "1-2"
    if v <= 5:
        return "2-5"
    return ">5"


def average_co2(surveys):
    if not surveys:
        return 0.0
    total = sum((s.total_co2_kg or 0.0) for s in surveys)
    return round(total / len(surveys), 2)


def count_by_transport(surveys):
    counts = defaultdict(int)
    for s in surveys:
        counts[s.transport_main or UNKNOWN] += 1
    return dict(counts)


def public_aggregations(surveys):
    flights = defaultdict(int)
    by_month = defaultdict(lambda: [0.0, 0])
    for s in surveys:
        flights[flight_bucket(s.flights_per_year)] += 1
        if s.created_at is not None:
            bucket = by_month[s.created_at.strftime("%Y-%m")]
            bucket[0] += s.total_co2_kg or 0.0
            bucket[1] += 1
    months = sorted(by_month)
    return {
        "count": len(surveys),
        "avg_co2_kg": average_co2(surveys),
        "by_transport": count_by_transport(surveys),
        "flights": dict(flights),
        "months": months,
        "avg_co2_by_month": [round(by_month[m][0] / by_month[m][1], 2) for m in months],
    }


def hr_aggregations(surveys):
    return {
        "count": len(surveys),
        "avg_co2_kg": average_co2(surveys),
        "by_transport": count_by_transport(surveys),
    }
