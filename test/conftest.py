import pytest

from config.feature_flags import set_flag
from curveforge.basis import clear_basis_cache


# Global Feature Flag Defaults - Single Source of Truth for Test Isolation
# ========================================================================
# WICHTIG: Jeder Test muss mit sauberen Feature-Flags starten.
# Diese Defaults müssen mit config/feature_flags.py synchron gehalten werden.
FEATURE_FLAG_DEFAULTS = {
    "rational_nurbs": False,
    "basis_cache": False,
    "evaluation_debug": False,
}


@pytest.fixture(autouse=True)
def _global_feature_flag_isolation():
    """
    Stellt sicher, dass jeder Test mit sauberen, deterministischen
    Feature-Flags startet und der Basis-Cache leer ist.
    """
    for key, value in FEATURE_FLAG_DEFAULTS.items():
        set_flag(key, value)
    clear_basis_cache()

    yield

    for key, value in FEATURE_FLAG_DEFAULTS.items():
        set_flag(key, value)
    clear_basis_cache()


@pytest.fixture
def log_messages():
    """Sammelt loguru-Ausgaben eines Tests als Liste von Strings."""
    from loguru import logger

    messages = []
    handler_id = logger.add(lambda msg: messages.append(str(msg)), level="DEBUG", format="{level} | {message}")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def quadratic_points():
    return [(0.0, 0.0, 0.0), (1.0, 2.0, 0.0), (2.0, 0.0, 0.0)]


@pytest.fixture
def cubic_points():
    return [
        (0.0, 0.0, 0.0),
        (1.0, 2.0, 0.0),
        (2.0, -1.0, 1.0),
        (3.0, 1.0, 0.0),
        (4.0, 0.0, 2.0),
        (5.0, 2.0, 0.0),
    ]


@pytest.fixture
def wave_grid():
    """4 x 5 Grid, zeilenweise, mit Höhenprofil."""
    points = []
    for i in range(4):
        for j in range(5):
            points.append((float(i), float(j), float((i + j) % 3) * 0.5))
    return points
