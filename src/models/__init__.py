"""ORM models."""

from models.ai import AI
from models.alias import Alias
from models.ally_team import AllyTeam
from models.base import Base
from models.demo import Demo
from models.map import Map
from models.player import Player
from models.spectator import Spectator
from models.user import User

__all__ = [
    "AI",
    "Alias",
    "AllyTeam",
    "Base",
    "Demo",
    "Map",
    "Player",
    "Spectator",
    "User",
]
