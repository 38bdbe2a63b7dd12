"""
CurveForge - Feature Flags
==========================

Feature Flags schalten Verhaltensänderungen gegenüber dem Standard-Verhalten
explizit ein. Neue Auswertungs-Pfade werden mit Flag=False eingeführt, damit
nachgelagerte Konsumenten die Änderung bewusst aktivieren.
"""

from typing import Dict

# Feature Flag Registry
# =====================
# HINWEIS: NURBS wird standardmäßig wie B-Spline ausgewertet (Gewichte werden
# angenommen, aber nicht angewendet). "rational_nurbs" aktiviert die echte
# rationale Gewichtung - das ändert die Geometrie für Gewichte != 1.

FEATURE_FLAGS: Dict[str, bool] = {
    # Auswertung
    "rational_nurbs": False,  # Σ w_i N_i P_i / Σ w_i N_i statt Σ N_i P_i
    "basis_cache": False,  # LRU-Cache für rekursive Basisfunktionen

    # Debug-Modi
    "evaluation_debug": False,  # Sample-/Grid-Zusammenfassungen ins Log
}


def is_enabled(flag: str) -> bool:
    """
    Prüft ob ein Feature-Flag aktiviert ist.

    Args:
        flag: Name des Feature-Flags

    Returns:
        True wenn aktiviert, False wenn nicht aktiviert oder unbekannt
    """
    return FEATURE_FLAGS.get(flag, False)


def set_flag(flag: str, value: bool) -> None:
    """
    Setzt ein Feature-Flag zur Laufzeit.
    Nützlich für Tests und Debugging.

    Args:
        flag: Name des Feature-Flags
        value: Neuer Wert
    """
    FEATURE_FLAGS[flag] = value


def get_all_flags() -> Dict[str, bool]:
    """Gibt alle Feature-Flags zurück."""
    return FEATURE_FLAGS.copy()
