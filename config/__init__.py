"""
CurveForge - Configuration Module
=================================

Zentrale Konfiguration für alle globalen Einstellungen.
"""

from .tolerances import Tolerances, knot_increment, frame_step, default_resolution
from .feature_flags import is_enabled, set_flag, get_all_flags, FEATURE_FLAGS
