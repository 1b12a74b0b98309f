"""
棋盘基础类型

定义颜色、棋子种类、棋子与棋盘坐标。

坐标约定: 路(file) 0-8 对应 a-i，线(rank) 0-9，0线为红方底线。
棋盘格子中保存带符号整数 kind * color，0 表示空位。
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


NUM_FILES = 9
NUM_RANKS = 10
FILE_LETTERS = 'abcdefghi'

PALACE_FILES = (3, 4, 5)


class Color(IntEnum):
    """走棋方"""
    RED = 1
    BLACK = -1

    @property
    def opponent(self) -> 'Color':
        return Color(-self.value)

    @property
    def forward(self) -> int:
        """兵/卒前进方向上线号的增量"""
        return 1 if self is Color.RED else -1

    @property
    def chinese_name(self) -> str:
        return '红方' if self is Color.RED else '黑方'


class PieceKind(IntEnum):
    """棋子种类"""
    GENERAL = 1   # 帅/将
    ADVISOR = 2   # 仕/士
    ELEPHANT = 3  # 相/象
    HORSE = 4     # 马
    CHARIOT = 5   # 车
    CANNON = 6    # 炮
    SOLDIER = 7   # 兵/卒


# 每方各种棋子的初始数量
STARTING_COUNTS = {
    PieceKind.GENERAL: 1,
    PieceKind.ADVISOR: 2,
    PieceKind.ELEPHANT: 2,
    PieceKind.HORSE: 2,
    PieceKind.CHARIOT: 2,
    PieceKind.CANNON: 2,
    PieceKind.SOLDIER: 5,
}

# FEN记法中的棋子符号（红方大写）
FEN_LETTERS = {
    PieceKind.GENERAL: 'k',
    PieceKind.ADVISOR: 'a',
    PieceKind.ELEPHANT: 'b',
    PieceKind.HORSE: 'n',
    PieceKind.CHARIOT: 'r',
    PieceKind.CANNON: 'c',
    PieceKind.SOLDIER: 'p',
}

# 兼容的别名写法
FEN_ALIASES = {'e': PieceKind.ELEPHANT, 'h': PieceKind.HORSE}

CHINESE_NAMES = {
    (PieceKind.GENERAL, 1): '帅', (PieceKind.GENERAL, -1): '将',
    (PieceKind.ADVISOR, 1): '仕', (PieceKind.ADVISOR, -1): '士',
    (PieceKind.ELEPHANT, 1): '相', (PieceKind.ELEPHANT, -1): '象',
    (PieceKind.HORSE, 1): '马', (PieceKind.HORSE, -1): '马',
    (PieceKind.CHARIOT, 1): '车', (PieceKind.CHARIOT, -1): '车',
    (PieceKind.CANNON, 1): '炮', (PieceKind.CANNON, -1): '炮',
    (PieceKind.SOLDIER, 1): '兵', (PieceKind.SOLDIER, -1): '卒',
}


@dataclass(frozen=True)
class Piece:
    """棋子：种类 + 颜色"""
    kind: PieceKind
    color: Color

    @property
    def code(self) -> int:
        """棋盘格子中使用的带符号编码"""
        return int(self.kind) * int(self.color)

    @classmethod
    def from_code(cls, code: int) -> Optional['Piece']:
        if code == 0:
            return None
        color = Color.RED if code > 0 else Color.BLACK
        return cls(PieceKind(abs(int(code))), color)

    @property
    def fen_letter(self) -> str:
        letter = FEN_LETTERS[self.kind]
        return letter.upper() if self.color is Color.RED else letter

    @classmethod
    def from_fen_letter(cls, letter: str) -> 'Piece':
        lower = letter.lower()
        kind = FEN_ALIASES.get(lower)
        if kind is None:
            for candidate, fen_letter in FEN_LETTERS.items():
                if fen_letter == lower:
                    kind = candidate
                    break
        if kind is None:
            raise ValueError(f"未知的FEN棋子符号: {letter}")
        return cls(kind, Color.RED if letter.isupper() else Color.BLACK)

    @property
    def chinese_name(self) -> str:
        return CHINESE_NAMES[(self.kind, int(self.color))]

    def __str__(self) -> str:
        return self.chinese_name


@dataclass(frozen=True)
class Square:
    """棋盘上的一个交叉点 (路, 线)"""
    file: int
    rank: int

    def __post_init__(self):
        if not (0 <= self.file < NUM_FILES and 0 <= self.rank < NUM_RANKS):
            raise ValueError(f"无效的位置坐标: ({self.file}, {self.rank})")

    @staticmethod
    def is_valid(file: int, rank: int) -> bool:
        return 0 <= file < NUM_FILES and 0 <= rank < NUM_RANKS

    def offset(self, df: int, dr: int) -> Optional['Square']:
        """平移后的位置，越界返回None"""
        file, rank = self.file + df, self.rank + dr
        if Square.is_valid(file, rank):
            return Square(file, rank)
        return None

    def in_palace(self, color: Color) -> bool:
        if self.file not in PALACE_FILES:
            return False
        if color is Color.RED:
            return 0 <= self.rank <= 2
        return 7 <= self.rank <= 9

    def on_own_side(self, color: Color) -> bool:
        """是否位于该方一侧（未过河）"""
        if color is Color.RED:
            return self.rank <= 4
        return self.rank >= 5

    @property
    def name(self) -> str:
        return f"{FILE_LETTERS[self.file]}{self.rank}"

    def __str__(self) -> str:
        return self.name
