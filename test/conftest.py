import pytest
from loguru import logger

from config.feature_flags import set_flag


# Feature Flag Defaults - Test-Isolation
# ======================================
# WICHTIG: Jeder Test muss mit sauberen Feature-Flags starten.
# Diese Defaults müssen mit config/feature_flags.py synchron gehalten werden.
FEATURE_FLAG_DEFAULTS = {
    # Debug-Modi
    "solver_debug": False,
    "profile_debug": False,
    "positioning_debug": False,
}


@pytest.fixture(autouse=True)
def _global_feature_flag_isolation():
    """
    Globale Feature-Flag-Isolation.

    Stellt sicher, dass jeder Test mit deterministischen Feature-Flags
    startet. Verhindert Leakage von Flag-Mutationen zwischen Tests.
    """
    # Pre-Test: Alle Flags auf Defaults zurücksetzen
    for key, value in FEATURE_FLAG_DEFAULTS.items():
        set_flag(key, value)

    yield

    # Post-Test: cleanup
    for key, value in FEATURE_FLAG_DEFAULTS.items():
        set_flag(key, value)


@pytest.fixture
def log_messages():
    """
    Sammelt loguru-Meldungen als (Level, Text)-Tupel.

    loguru schreibt nicht in das stdlib-logging, daher greift caplog nicht.
    """
    records = []
    handler_id = logger.add(
        lambda message: records.append((message.record["level"].name, message.record["message"])),
        level="DEBUG",
    )
    yield records
    logger.remove(handler_id)
