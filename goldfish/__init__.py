"""Goldfish - Deterministic Reanimator Combo Simulator"""
from .engine.game import GameConfig, GameResult, run_game
from .engine.match import BatchResult, BatchRunner
from .cards.parser import Deck, DecklistParser, load_deck
from .cards.database import CardDatabase, get_database

__version__ = "1.0.0"
__all__ = ["GameConfig", "GameResult", "run_game", "BatchResult", "BatchRunner",
           "Deck", "DecklistParser", "load_deck", "CardDatabase", "get_database"]
