"""Game constants and utilities"""

from typing import Dict, List

SUITS = ['Spades', 'Hearts', 'Clubs', 'Diamonds']
JOKER_SUIT = 'Joker'
STANDARD_RANKS = ['2', '3', '4', '5', '6', '7', '8', '9', '10', 'J', 'Q', 'K', 'A']
JOKER_RANKS = ['Red', 'Black']

# Later clients label the jokers Big/Small; both are members of Sevens either way
JOKER_ALIASES: Dict[str, str] = {'Big': 'Red', 'Small': 'Black'}

LOW_RANKS = ['A', '2', '3', '4', '5', '6']
HIGH_RANKS = ['8', '9', '10', 'J', 'Q', 'K']
SEVEN_RANK = '7'

SEVENS = 'Sevens'
ALL_SETS: List[str] = (
    [f"Low {suit}" for suit in SUITS]
    + [f"High {suit}" for suit in SUITS]
    + [SEVENS]
)
SET_SIZE = 6
DECK_SIZE = 54

# Room status
STATUS_LOBBY = 'LOBBY'
STATUS_IN_GAME = 'IN_GAME'
STATUS_GAME_OVER = 'GAME_OVER'

# Turn sub-state
TURN_NORMAL = 'NORMAL'
TURN_PASSING = 'PASSING_TURN'

TEAM_A = 'A'
TEAM_B = 'B'
DISCARDED = 'Discarded'
DRAW = 'DRAW'

ROOM_CODE_MIN = 100000
ROOM_CODE_MAX = 999999


def opposing_team(team: str) -> str:
    return TEAM_B if team == TEAM_A else TEAM_A


def format_card(suit: str, rank: str) -> str:
    if suit == JOKER_SUIT:
        return f"{rank} Joker"
    return f"{rank} of {suit}"
