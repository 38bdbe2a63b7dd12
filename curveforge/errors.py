"""
CurveForge - Fehlerklassen
==========================

Parameter- und Konfigurationsfehler werden beim Aufbau des Knotenvektors
oder zu Beginn einer Auswertung erkannt und an den Aufrufer gemeldet.

Numerische Randfälle (Knoten-Spans der Breite 0, Parameter außerhalb der
Domäne) sind KEINE Fehler: Spans liefern den Beitrag 0, Parameter werden
geklemmt.
"""


class InvalidParameterError(ValueError):
    """Raised when degree, resolution, grid size or knot vector are inconsistent"""
    pass
