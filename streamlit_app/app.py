# streamlit_app/app.py
import streamlit as st
import requests, os
import matplotlib.pyplot as plt
import pandas as pd

API_BASE = os.environ.get("API_BASE", "http://localhost:8000")

st.set_page_config(page_title="CO2 Umfrage", layout="wide", initial_sidebar_state="expanded")

# Answer options as they appear in the questionnaire
OFFICE_DAYS = ["0 Tage", "1 Tag", "2 Tage", "3 Tage", "4 Tage", "5 Tage"]
TRANSPORT = ["PKW Benzin", "PKW Diesel", "Hybrid", "Plugin Hybrid", "E-Auto", "Bus", "Zug / Bahn",
             "Straßenbahn / Tram", "Fahrrad", "E-Bike", "Zu Fuß", "Firmenwagen"]
ALT_FREQ = ["nie", "manchmal", "selten", "oft"]
DISTANCE = ["<10 km", "10-20 km", "20-30 km", "30-40 km", "40-50 km", "50-60 km", ">60 km"]
CAR_TYPE = ["", "Benzin", "Diesel", "Hybrid", "Plugin Hybrid", "Elektro"]
FLIGHTS = ["0", "1-2", "2-5", "5-10"]
FLIGHT_DISTANCE = ["", "Kurzstrecke", "Mittelstrecke", "Langstrecke"]
HEATING = ["Erdgas", "Heizöl", "Pellets", "Stückholz", "Fernwärme", "Wärmepumpe", "Solar", "Strom"]
WARM_WATER = ["Erdgas", "Heizöl", "Strom", "Wärmepumpe", "Solar"]


# -------------------------------
# Helpers
# -------------------------------
def auth_headers():
    token = st.session_state.get("token")
    return {"Authorization": f"Bearer {token}"} if token else {}


def post_json(path: str, payload: dict = None):
    url = API_BASE.rstrip("/") + path
    resp = requests.post(url, json=payload or {}, headers=auth_headers(), timeout=30)
    resp.raise_for_status()
    return resp.json()


def get_json(path: str, params: dict = None):
    url = API_BASE.rstrip("/") + path
    resp = requests.get(url, params=params or {}, headers=auth_headers(), timeout=30)
    resp.raise_for_status()
    return resp.json()


def bar_chart(counts: dict, title=""):
    fig, ax = plt.subplots()
    ax.bar(list(counts.keys()), list(counts.values()))
    ax.set_title(title)
    ax.set_ylabel("Anzahl")
    plt.setp(ax.get_xticklabels(), rotation=30, ha="right")
    st.pyplot(fig)


# -------------------------------
# Sidebar: Auth (Register / Login)
# -------------------------------
if "token" not in st.session_state:
    st.session_state["token"] = None
if "user_info" not in st.session_state:
    st.session_state["user_info"] = None

st.sidebar.title("Konto")
mode = st.sidebar.radio("Aktion", ["Login", "Registrieren", "Profil"])

if mode in ("Login", "Registrieren"):
    with st.sidebar.form("auth_form"):
        name = st.text_input("Name") if mode == "Registrieren" else None
        email = st.text_input("Email")
        pwd = st.text_input("Passwort", type="password")
        submitted = st.form_submit_button(mode)
        if submitted:
            path = "/auth/register" if mode == "Registrieren" else "/auth/login"
            payload = {"email": email, "password": pwd}
            if name:
                payload["name"] = name
            try:
                data = post_json(path, payload)
                st.session_state["token"] = data.get("token")
                st.session_state["user_info"] = {"id": data.get("id"), "email": data.get("email"), "role": data.get("role")}
                st.success(f"Angemeldet ({data.get('role')})")
            except requests.HTTPError as e:
                st.error(f"{mode} fehlgeschlagen: {e.response.text}")
            except requests.RequestException as e:
                st.error(f"{mode} fehlgeschlagen: {e}")
else:
    if st.session_state["user_info"]:
        st.sidebar.write("Angemeldet als", st.session_state["user_info"]["email"])
        st.sidebar.write("Rolle:", st.session_state["user_info"]["role"])
        if st.sidebar.button("Logout"):
            st.session_state["token"] = None
            st.session_state["user_info"] = None
            st.rerun()
    else:
        st.sidebar.info("Bitte anmelden oder registrieren")

# -------------------------------
# Public overview (no login needed)
# -------------------------------
st.title("CO2 Fußabdruck Umfrage")

try:
    agg = get_json("/stats/aggregations")
except requests.RequestException as e:
    st.error("Daten konnten nicht geladen werden: " + str(e))
    agg = None

if agg:
    c1, c2 = st.columns(2)
    c1.metric("Einträge gesamt", agg["count"])
    c2.metric("Ø CO2 (kg / Jahr)", agg["avg_co2_kg"])

if not st.session_state["token"]:
    st.info("Für eigene Einträge bitte anmelden.")
    st.stop()

role = st.session_state["user_info"]["role"]
tabs = st.tabs(["Übersicht", "Umfrage", "Meine Einträge", "HR Auswertung", "Emissionsfaktoren"])
tab_overview, tab_survey, tab_mine, tab_hr, tab_factors = tabs

# -------------------------------
# Overview charts
# -------------------------------
with tab_overview:
    st.header("Übersicht")
    if not agg or agg["count"] == 0:
        st.info("Noch keine Umfrageantworten vorhanden.")
    else:
        col_a, col_b = st.columns(2)
        with col_a:
            bar_chart(agg["by_transport"], "Hauptverkehrsmittel")
        with col_b:
            bar_chart(agg["flights"], "Flüge pro Jahr")
        if agg["months"]:
            fig, ax = plt.subplots(figsize=(8, 3))
            ax.plot(pd.to_datetime(agg["months"]), agg["avg_co2_by_month"], marker="o")
            ax.set_title("Ø CO2 pro Monat")
            ax.set_ylabel("kg CO2")
            ax.grid(alpha=0.2)
            st.pyplot(fig)

# -------------------------------
# Survey form
# -------------------------------
with tab_survey:
    st.header("Umfrage ausfüllen")
    with st.form("survey_form"):
        answers = {
            "office_days": st.selectbox("Wie oft sind Sie pro Woche im Büro?", OFFICE_DAYS),
            "transport_main": st.selectbox("Mit welchem Verkehrsmittel kommen Sie in der Regel zur Arbeit?", TRANSPORT),
            "car_type": st.selectbox("Falls Sie ein Auto benutzen: Welchen Antrieb hat Ihr Auto?", CAR_TYPE),
            "distance": st.selectbox("Wie weit ist Ihr Arbeitsplatz von zuhause entfernt?", DISTANCE),
            "alternative_transport_freq": st.selectbox("Nutzen Sie auch alternative Verkehrsmittel an manchen Tagen?", ALT_FREQ),
            "alternative_transport": st.selectbox("Wenn ja, welche alternativen Verkehrsmittel?", [""] + TRANSPORT),
            "flights_per_year": st.selectbox("Wie oft fliegen Sie im Jahr?", FLIGHTS),
            "flight_distance": st.selectbox("Wenn Sie fliegen, welche Strecken fliegen Sie eher?", FLIGHT_DISTANCE),
            "heating_type": st.selectbox("Wie heizen Sie zu Hause?", HEATING),
            "warm_water_type": st.selectbox("Wie wird Ihr Warmwasser zu Hause erzeugt?", WARM_WATER),
            "uses_green_electricity": st.selectbox("Nutzen Sie zu Hause Ökostrom?", ["", "Ja", "Nein", "Weiß nicht"]),
            "smart_electricity_usage": st.selectbox(
                "Nutzen Sie Strom bewusst zu Zeiten, in denen viel erneuerbare Energie verfügbar ist "
                "(z. B. mittags bei PV-Strom)?", [""] + ALT_FREQ),
            "fireworks_per_year": st.number_input("Wie oft verwenden Sie Feuerwerk? (pro Jahr)", min_value=0, step=1),
            "co2_importance": st.slider("Wie wichtig ist Ihnen das Thema CO2-Einsparung? (1 sehr wichtig - 6 gar nicht wichtig)", 1, 6, 3),
        }
        submitted = st.form_submit_button("Absenden")
        if submitted:
            payload = {k: v for k, v in answers.items() if v not in ("", None)}
            try:
                res = post_json("/surveys", payload)
                br = res["breakdown"]
                st.success("Antwort gespeichert")
                st.metric("CO2 gesamt (kg / Jahr)", round(br["total_kg"], 2))
                st.table(pd.DataFrame([{
                    "Pendeln": round(br["commute_kg"], 2),
                    "Flüge": round(br["flight_kg"], 2),
                    "Warmwasser": round(br["warm_water_kg"], 2),
                }]))
            except requests.RequestException as e:
                st.error("Speichern fehlgeschlagen: " + str(e))

# -------------------------------
# Own entries
# -------------------------------
with tab_mine:
    st.header("Meine Einträge")
    path = "/stats/me" if role == "EMPLOYEE" else "/stats"
    if role == "HR":
        st.info("Die HR-Rolle sieht nur aggregierte Daten.")
        rows = []
    else:
        try:
            rows = get_json(path)
        except requests.RequestException as e:
            st.error("Einträge konnten nicht geladen werden: " + str(e))
            rows = []
    if rows:
        df = pd.DataFrame(rows)
        df["created_at"] = pd.to_datetime(df["created_at"])
        df = df.sort_values("created_at", ascending=False)
        cols = ["created_at", "office_days_per_week", "transport_main", "distance_km", "flights_per_year", "total_co2_kg"]
        st.dataframe(df[cols].reset_index(drop=True))
    elif role != "HR":
        st.info("Noch keine Einträge")

# -------------------------------
# HR aggregations
# -------------------------------
with tab_hr:
    st.header("HR Auswertung")
    if role == "EMPLOYEE":
        st.info("Nur für HR und Administratoren.")
    else:
        try:
            hr = get_json("/stats/hr/aggregations")
            st.metric("Ø CO2 (kg / Jahr)", hr["avg_co2_kg"])
            if hr["by_transport"]:
                bar_chart(hr["by_transport"], "Verkehrsmittel (alle Mitarbeitenden)")
        except requests.RequestException as e:
            st.error("Auswertung konnte nicht geladen werden: " + str(e))

# -------------------------------
# Emission factors
# -------------------------------
with tab_factors:
    st.header("Emissionsfaktoren")
    try:
        factors = get_json("/stats/emission-factors")
    except requests.RequestException as e:
        st.error("Faktoren konnten nicht geladen werden: " + str(e))
        factors = []
    if factors:
        st.dataframe(pd.DataFrame(factors)[["category", "label", "value", "unit"]])
    else:
        st.info("Keine Emissionsfaktoren importiert")
    if role in ("ADMIN", "SUPER_ADMIN") and st.button("Import starten"):
        try:
            res = post_json("/import")
            st.success(f"{res['factors']} Faktoren, {res['surveys']} Antworten importiert")
        except requests.RequestException as e:
            st.error("Import fehlgeschlagen: " + str(e))
