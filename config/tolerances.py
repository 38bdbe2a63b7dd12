"""
CurveForge - Zentralisierte Toleranz-Konfiguration
==================================================

Alle numerischen Konstanten der Auswertung an einem Ort.

Toleranz-Philosophie:
- Knotenvektor: 0.001 Rampe - verhindert Knoten-Spans der Länge 0
- Frame-Schätzung: 1e-4 - Schrittweite für finite Differenzen
- Sampling: 0.01 - Standard-Auflösung für Kurven und Flächen
- Vergleiche: 1e-6 - Punkt-Gleichheit in Tests

Verwendung:
    from config.tolerances import Tolerances

    # Direkt als Klassenvariablen
    step = Tolerances.FRAME_STEP

    # Oder via Convenience-Funktionen
    from config.tolerances import default_resolution
    resolution = default_resolution()
"""


class Tolerances:
    """
    Zentrale Toleranz-Konstanten für CurveForge.

    Kategorien:
    - KNOT_*: Knotenvektor-Synthese
    - FRAME_*: Tangenten-Frame Schätzung
    - DEFAULT_*: Standardwerte für Kurven und Flächen
    - EPSILON_*: Numerische Stabilität
    - COMPARE_*: Vergleichs-Toleranzen
    """

    # =========================================================================
    # Knotenvektor
    # =========================================================================

    # Schrittweite der Rampe am Anfang/Ende des Knotenvektors
    KNOT_INCREMENT = 0.001

    # =========================================================================
    # Frame-Schätzung (Tangente per finiter Differenz)
    # =========================================================================

    FRAME_STEP = 1e-4

    # =========================================================================
    # Standardwerte
    # =========================================================================

    # Sampling-Schrittweite im Parameterraum, gültig in (0, 1]
    DEFAULT_RESOLUTION = 0.01

    # Kubisch
    DEFAULT_DEGREE = 3

    # Kontrollpunkte in U-Richtung bei Flächen
    DEFAULT_COUNT_U = 5

    # =========================================================================
    # Mathematische Epsilon-Werte (Numerische Stabilität)
    # =========================================================================

    # Vermeidet Division durch Null
    EPSILON_MATH = 1e-9

    # =========================================================================
    # Vergleichs-Toleranzen
    # =========================================================================

    # Punkt-Vergleich (sind zwei Punkte "gleich"?)
    COMPARE_POINT = 1e-6


# =============================================================================
# Convenience-Funktionen
# =============================================================================

def knot_increment() -> float:
    """Gibt die Rampen-Schrittweite des Knotenvektors zurück."""
    return Tolerances.KNOT_INCREMENT


def frame_step() -> float:
    """Gibt die Schrittweite der Tangenten-Schätzung zurück."""
    return Tolerances.FRAME_STEP


def default_resolution() -> float:
    """Gibt die Standard-Sampling-Auflösung zurück."""
    return Tolerances.DEFAULT_RESOLUTION


# =============================================================================
# Toleranz-Validierung (für Debugging)
# =============================================================================

def validate_tolerances():
    """
    Validiert dass alle Toleranzen sinnvolle Werte haben.
    Nützlich für Tests und Debugging.
    """
    issues = []

    # Rampe muss klein gegenüber dem Parameterraum [0, 1] bleiben
    if not (0.0 < Tolerances.KNOT_INCREMENT <= 0.01):
        issues.append(f"KNOT_INCREMENT außerhalb sinnvoller Grenzen: {Tolerances.KNOT_INCREMENT}")

    # Frame-Schritt kleiner als die Knoten-Rampe, sonst springt die Differenz über Spans
    if Tolerances.FRAME_STEP >= Tolerances.KNOT_INCREMENT:
        issues.append(f"FRAME_STEP ({Tolerances.FRAME_STEP}) nicht kleiner als KNOT_INCREMENT ({Tolerances.KNOT_INCREMENT})")

    if not (0.0 < Tolerances.DEFAULT_RESOLUTION <= 1.0):
        issues.append(f"DEFAULT_RESOLUTION außerhalb von (0, 1]: {Tolerances.DEFAULT_RESOLUTION}")

    if Tolerances.DEFAULT_DEGREE < 0:
        issues.append(f"DEFAULT_DEGREE negativ: {Tolerances.DEFAULT_DEGREE}")

    return issues


# Automatische Validierung beim Import (nur Warnung, kein Fehler)
_validation_issues = validate_tolerances()
if _validation_issues:
    from loguru import logger
    for issue in _validation_issues:
        logger.warning(f"Toleranz-Validierung: {issue}")
