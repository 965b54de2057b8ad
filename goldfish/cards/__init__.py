"""Card catalog and deck list loading"""
from .database import CardDatabase, CardDatabaseError, CardNotFoundError, CardDataError, get_database
from .parser import Decklist, DecklistParser, Deck, DeckEntry, DeckParseError, load_deck
