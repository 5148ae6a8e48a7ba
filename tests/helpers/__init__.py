"""Test helpers for Numu integration tests.

    from tests.helpers import SetupResult, local_time, setup_from_yaml, setup_scenario

See setup.py for the scenario format.
"""

from tests.helpers.setup import (
    SetupResult,
    local_time,
    setup_from_yaml,
    setup_scenario,
)

__all__ = [
    "SetupResult",
    "local_time",
    "setup_from_yaml",
    "setup_scenario",
]
