"""Core engine components - lazy imports to keep worker start-up light"""

# Core types can be imported directly
from .types import (
    ManaColor, CardType, LandSubtype, CounterType, Phase
)

# Other imports are lazy
def __getattr__(name):
    """Lazy import for engine components."""
    if name == 'GameRng':
        from .rng import GameRng
        return GameRng
    elif name == 'ManaCost':
        from .objects import ManaCost
        return ManaCost
    elif name == 'Card':
        from .objects import Card
        return Card
    elif name == 'Permanent':
        from .objects import Permanent
        return Permanent
    elif name == 'GameState':
        from .state import GameState
        return GameState
    elif name == 'ManaPool':
        from .mana import ManaPool
        return ManaPool
    elif name == 'can_afford_cost':
        from .mana import can_afford_cost
        return can_afford_cost
    elif name == 'tap_lands_for_cost':
        from .mana import tap_lands_for_cost
        return tap_lands_for_cost
    elif name == 'CardResolver':
        from .resolution import CardResolver
        return CardResolver
    elif name == 'CombatManager':
        from .combat import CombatManager
        return CombatManager
    elif name == 'TurnManager':
        from .turns import TurnManager
        return TurnManager
    elif name == 'resolve_mulligans':
        from .mulligan import resolve_mulligans
        return resolve_mulligans
    elif name == 'GameConfig':
        from .game import GameConfig
        return GameConfig
    elif name == 'GameResult':
        from .game import GameResult
        return GameResult
    elif name == 'run_game':
        from .game import run_game
        return run_game
    elif name == 'BatchRunner':
        from .match import BatchRunner
        return BatchRunner
    elif name == 'BatchResult':
        from .match import BatchResult
        return BatchResult
    elif name == 'analyze_turn4':
        from .analysis import analyze_turn4
        return analyze_turn4
    raise AttributeError(f"module 'goldfish.engine' has no attribute {name!r}")
