from moevo.engine.config import EvolutionConfig, EvolutionConfigBuilder
from moevo.engine.control import SLOTS, Control

__all__ = ["Control", "SLOTS", "EvolutionConfig", "EvolutionConfigBuilder"]
