# content/labels.py
"""
Libellés d'affichage (nl / en) pour les zones, niveaux de confiance,
états jour / semaine et maturité des données.

Le front reçoit les valeurs brutes (enums) ET le libellé dans la langue
demandée, pour ne pas dupliquer les traductions côté client.
"""
from typing import Optional

from app.shared.enums import (
    PulseZone,
    ConfidenceLevel,
    DayState,
    WeekState,
    DataMaturity,
    Language,
)

ZONE_LABELS = {
    "nl": {
        "under_pressure":  "Onder druk",
        "mixed_signals":   "Gemengde signalen",
        "steady_state":    "Stabiel",
        "high_confidence": "Sterk",
        None:              "Geen data",
    },
    "en": {
        "under_pressure":  "Under pressure",
        "mixed_signals":   "Mixed signals",
        "steady_state":    "Steady state",
        "high_confidence": "High confidence",
        None:              "No data",
    },
}

CONFIDENCE_LABELS = {
    "nl": {"low": "Beperkte data", "moderate": "Voldoende data", "high": "Betrouwbaar"},
    "en": {"low": "Limited data", "moderate": "Sufficient data", "high": "Reliable"},
}

DAY_STATE_LABELS = {
    "nl": {
        "day_forming":     "Dag start...",
        "signal_emerging": "Signaal vormt...",
        "day_complete":    "Dag compleet",
    },
    "en": {
        "day_forming":     "Day forming...",
        "signal_emerging": "Signal emerging...",
        "day_complete":    "Day complete",
    },
}

WEEK_STATE_LABELS = {
    "nl": {
        "week_building":  "Week bouwt op...",
        "signal_forming": "Patroon vormt...",
        "week_complete":  "Week compleet",
    },
    "en": {
        "week_building":  "Week building...",
        "signal_forming": "Pattern forming...",
        "week_complete":  "Week complete",
    },
}

MATURITY_LABELS = {
    "nl": {
        "calibrating":           "Kalibreren",
        "establishing_baseline": "Baseline vormen",
        "pattern_forming":       "Patroon vormt",
        "reliable_signal":       "Betrouwbaar signaal",
    },
    "en": {
        "calibrating":           "Calibrating",
        "establishing_baseline": "Establishing baseline",
        "pattern_forming":       "Pattern forming",
        "reliable_signal":       "Reliable signal",
    },
}

# {days} est remplacé par le nombre de jours de données
MATURITY_DESCRIPTIONS = {
    "nl": {
        "calibrating":           "Dag {days} van 7 - systeem kalibreert",
        "establishing_baseline": "Dag {days} - baseline vormt zich",
        "pattern_forming":       "{days} dagen data - patronen zichtbaar",
        "reliable_signal":       "{days} dagen consistente data",
    },
    "en": {
        "calibrating":           "Day {days} of 7 - system calibrating",
        "establishing_baseline": "Day {days} - establishing baseline",
        "pattern_forming":       "{days} days of data - patterns emerging",
        "reliable_signal":       "{days} days of consistent data",
    },
}


def _key(value):
    return value.value if hasattr(value, "value") else value


def zone_label(zone: Optional[PulseZone], lang: Language = Language.EN) -> str:
    return ZONE_LABELS[_key(lang)][_key(zone)]


def confidence_label(confidence: ConfidenceLevel, lang: Language = Language.EN) -> str:
    return CONFIDENCE_LABELS[_key(lang)][_key(confidence)]


def day_state_label(state: DayState, lang: Language = Language.EN) -> str:
    return DAY_STATE_LABELS[_key(lang)][_key(state)]


def week_state_label(state: WeekState, lang: Language = Language.EN) -> str:
    return WEEK_STATE_LABELS[_key(lang)][_key(state)]


def maturity_label(maturity: DataMaturity, lang: Language = Language.EN) -> str:
    return MATURITY_LABELS[_key(lang)][_key(maturity)]


def maturity_description(maturity: DataMaturity, days_of_data: int, lang: Language = Language.EN) -> str:
    return MATURITY_DESCRIPTIONS[_key(lang)][_key(maturity)].format(days=days_of_data)
