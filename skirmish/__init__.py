"""
Skirmish: a tabletop RPG creature statistics and combat resolution engine.

Subpackages:
    core: constants, logging, errors, legality, lifespans and derived values.
    dice: the dice algebra, its parser and the seedable random source.
    stats: stat blocks, health, conditions, damage handling, checks and saves.
    combat: initiative, turns, movement, attacks and the arena.
"""

from .core.logging import setup_logging

__version__ = "0.1.0"

__all__ = ["setup_logging", "__version__"]
