"""
对局状态

状态总是由走法历史重新推导，不单独保存。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .types import Color


class GameState(Enum):
    IN_PROGRESS = "in-progress"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"   # 无子可动但未被将军
    DRAW = "draw"


@dataclass(frozen=True)
class GameStatus:
    """
    对局状态

    color 的含义随状态而定：
    - CHECK: 被将军的一方
    - CHECKMATE: 获胜方
    - STALEMATE: 无子可动的一方
    - 其他: None
    """
    state: GameState
    color: Optional[Color] = None
    reason: str = ""

    @classmethod
    def in_progress(cls) -> 'GameStatus':
        return cls(GameState.IN_PROGRESS)

    @classmethod
    def check(cls, color: Color) -> 'GameStatus':
        return cls(GameState.CHECK, color, "将军")

    @classmethod
    def checkmate(cls, winner: Color) -> 'GameStatus':
        return cls(GameState.CHECKMATE, winner, "将死")

    @classmethod
    def stalemate(cls, color: Color) -> 'GameStatus':
        return cls(GameState.STALEMATE, color, "困毙")

    @classmethod
    def draw(cls, reason: str) -> 'GameStatus':
        return cls(GameState.DRAW, None, reason)

    @property
    def is_over(self) -> bool:
        return self.state in (GameState.CHECKMATE, GameState.STALEMATE, GameState.DRAW)

    @property
    def winner(self) -> Optional[Color]:
        return self.color if self.state is GameState.CHECKMATE else None

    def to_dict(self) -> dict:
        return {
            'state': self.state.value,
            'color': self.color.name.lower() if self.color is not None else None,
            'reason': self.reason,
            'is_over': self.is_over,
        }

    def __str__(self) -> str:
        if self.color is None:
            return self.state.value
        return f"{self.state.value}({self.color.name.lower()})"
