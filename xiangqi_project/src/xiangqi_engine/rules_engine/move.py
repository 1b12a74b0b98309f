"""
象棋走法数据结构

定义走法的表示。合法性总是由棋盘状态重新推导，
piece/captured 只用于记法输出与审计。
"""

from dataclasses import dataclass, field
from typing import Optional

from .types import PieceKind, Square


@dataclass(frozen=True)
class Move:
    """
    象棋走法类

    相等性只比较起点与终点。
    """
    origin: Square
    destination: Square
    piece: Optional[PieceKind] = field(default=None, compare=False)     # 移动的棋子种类
    captured: Optional[PieceKind] = field(default=None, compare=False)  # 被吃掉的棋子种类

    @property
    def file_delta(self) -> int:
        return self.destination.file - self.origin.file

    @property
    def rank_delta(self) -> int:
        return self.destination.rank - self.origin.rank

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    def with_pieces(self, piece: Optional[PieceKind],
                    captured: Optional[PieceKind] = None) -> 'Move':
        """附带棋子信息的副本"""
        return Move(self.origin, self.destination, piece, captured)

    def __str__(self) -> str:
        return f"{self.origin.name}{self.destination.name}"

    def to_dict(self) -> dict:
        """转换为字典"""
        return {
            'move': str(self),
            'origin': self.origin.name,
            'destination': self.destination.name,
            'piece': self.piece.name.lower() if self.piece else None,
            'captured': self.captured.name.lower() if self.captured else None,
        }
