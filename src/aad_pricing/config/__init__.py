"""
Configuration: frozen settings and centralized tolerances.
"""

from aad_pricing.config.settings import (
    SETTINGS,
    GradientCheckConfig,
    ReferenceScenarioConfig,
    Settings,
    SimulationConfig,
)

__all__ = [
    "SETTINGS",
    "GradientCheckConfig",
    "ReferenceScenarioConfig",
    "Settings",
    "SimulationConfig",
]
