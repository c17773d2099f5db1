# co2survey/partials.py
"""HTML fragments swapped into the dashboard page (summary cards, table rows)."""
from html import escape

from .stats import average_co2

EMPTY_ROW = '<tr><td colspan="7" class="px-3 py-4 text-center text-slate-500">Keine Daten</td></tr>'

_CARD = """
<div class="rounded-xl border border-slate-200 bg-gradient-to-br from-{color}-50 to-{color}-100 p-4">
  <div class="text-xs uppercase tracking-wide text-slate-600">{title}</div>
  <div class="mt-2 {size} font-bold text-{color}-700">{value}</div>
</div>"""

PUBLIC_CARDS = (("red", "Einträge gesamt"), ("green", "Ø CO2 (kg)"), ("blue", "Letzter Eintrag"))
PRIVATE_CARDS = (("purple", "Meine Einträge"), ("orange", "Mein Ø CO2 (kg)"), ("cyan", "Letzter Eintrag"))


def _dash(value):
    if value in (None, 0, ""):
        return "—"
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def latest_date(surveys):
    dates = [s.created_at for s in surveys if s.created_at is not None]
    if not dates:
        return "—"
    return max(dates).strftime("%d.%m.%Y")


def summary_cards(surveys, cards=PUBLIC_CARDS):
    values = (len(surveys), average_co2(surveys), latest_date(surveys))
    sizes = ("text-3xl", "text-3xl", "text-lg")
    return "".join(
        _CARD.format(color=color, title=title, size=size, value=escape(str(value)))
        for (color, title), size, value in zip(cards, sizes, values)
    )


def survey_rows(surveys, hover="slate", accent="red"):
    if not surveys:
        return EMPTY_ROW
    rows = []
    for s in surveys:
        transport = (s.transport_main or "—").replace("_", " ")
        rows.append(
            f'<tr class="border-b border-slate-200 hover:bg-{hover}-50">'
            f'<td class="px-3 py-2">{escape(str(s.id)[-8:])}</td>'
            f'<td class="px-3 py-2">{s.created_at.strftime("%d.%m.%Y") if s.created_at else "—"}</td>'
            f'<td class="px-3 py-2">{_dash(s.office_days_per_week)}</td>'
            f'<td class="px-3 py-2">{_dash(s.distance_km)}</td>'
            f'<td class="px-3 py-2">{escape(transport)}</td>'
            f'<td class="px-3 py-2">{_dash(s.flights_per_year)}</td>'
            f'<td class="px-3 py-2 font-semibold text-{accent}-600">{(s.total_co2_kg or 0):.2f}</td>'
            "</tr>"
        )
    return "\n".join(rows)


def message(text, color="red"):
    return f'<div class="text-sm text-{color}-700">{escape(text)}</div>'
