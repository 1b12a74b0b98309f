"""
象棋棋盘数据结构

定义棋盘的表示、FEN转换与不可变的走子操作。
"""

from typing import Dict, List, Optional, Tuple

import numpy as np

from .move import Move
from .types import (
    NUM_FILES, NUM_RANKS, Color, Piece, PieceKind, Square,
)
from ..utils.exceptions import BoardSetupError


INITIAL_FEN = "rnbakabnr/9/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C5C1/9/RNBAKABNR w - - 0 1"


class ChessBoard:
    """
    象棋棋盘类

    grid[rank, file] 保存带符号的棋子编码，0线为红方底线。
    棋盘对象在走子后不会被修改，apply 总是返回新的棋盘。
    """

    def __init__(self):
        """创建初始局面"""
        self.grid = np.zeros((NUM_RANKS, NUM_FILES), dtype=np.int8)

        # 轮到走棋的一方
        self.side_to_move = Color.RED

        # 已走步数(ply)
        self.ply = 0

        # 连续无吃子步数
        self.no_capture_plies = 0

        self._setup_initial_position()

    def _setup_initial_position(self):
        """设置象棋初始局面"""
        back_rank = [5, 4, 3, 2, 1, 2, 3, 4, 5]          # 车马相仕帅仕相马车
        self.grid[0] = back_rank
        self.grid[2] = [0, 6, 0, 0, 0, 0, 0, 6, 0]       # 炮
        self.grid[3] = [7, 0, 7, 0, 7, 0, 7, 0, 7]       # 兵

        self.grid[6] = [-7, 0, -7, 0, -7, 0, -7, 0, -7]  # 卒
        self.grid[7] = [0, -6, 0, 0, 0, 0, 0, -6, 0]     # 炮
        self.grid[9] = [-p for p in back_rank]           # 车马象士将士象马车

    @classmethod
    def empty(cls, side_to_move: Color = Color.RED) -> 'ChessBoard':
        """创建没有棋子的棋盘"""
        board = cls()
        board.grid.fill(0)
        board.side_to_move = side_to_move
        return board

    # ==================== FEN 转换 ====================

    @classmethod
    def from_fen(cls, fen: str, validate: bool = True) -> 'ChessBoard':
        """
        从FEN格式创建棋盘

        Args:
            fen: FEN格式字符串，棋盘部分从9线(黑方底线)写到0线
            validate: 是否校验棋盘不变量

        Returns:
            ChessBoard: 棋盘对象

        Raises:
            BoardSetupError: FEN格式无效或局面不合法
        """
        parts = fen.split()
        if len(parts) < 2:
            raise BoardSetupError(fen, "FEN至少需要棋盘和走棋方两部分")

        rows = parts[0].split('/')
        if len(rows) != NUM_RANKS:
            raise BoardSetupError(fen, f"FEN应包含{NUM_RANKS}行，实际为{len(rows)}")

        board = cls.empty()
        for index, row in enumerate(rows):
            rank = NUM_RANKS - 1 - index
            file = 0
            for char in row:
                if char.isdigit():
                    file += int(char)
                    continue
                if file >= NUM_FILES:
                    raise BoardSetupError(fen, f"第{rank}线列数超出范围")
                try:
                    piece = Piece.from_fen_letter(char)
                except ValueError as e:
                    raise BoardSetupError(fen, str(e)) from e
                board.grid[rank, file] = piece.code
                file += 1
            if file != NUM_FILES:
                raise BoardSetupError(fen, f"第{rank}线应有{NUM_FILES}列，实际为{file}")

        side = parts[1].lower()
        if side in ('w', 'r'):
            board.side_to_move = Color.RED
        elif side == 'b':
            board.side_to_move = Color.BLACK
        else:
            raise BoardSetupError(fen, f"未知的走棋方: {parts[1]}")

        try:
            if len(parts) >= 5:
                board.no_capture_plies = int(parts[4])
            if len(parts) >= 6:
                fullmove = max(int(parts[5]), 1)
                board.ply = (fullmove - 1) * 2 + (1 if board.side_to_move is Color.BLACK else 0)
        except ValueError as e:
            raise BoardSetupError(fen, "步数计数必须是整数") from e

        if validate:
            from .board_validator import BoardValidator
            is_valid, errors = BoardValidator().full_validation(board)
            if not is_valid:
                raise BoardSetupError(fen, "; ".join(errors))

        return board

    def to_fen(self) -> str:
        """
        转换为FEN格式

        Returns:
            str: FEN格式字符串
        """
        fen_rows = []
        for rank in range(NUM_RANKS - 1, -1, -1):
            fen_row = ""
            empty_count = 0
            for file in range(NUM_FILES):
                piece = Piece.from_code(self.grid[rank, file])
                if piece is None:
                    empty_count += 1
                    continue
                if empty_count > 0:
                    fen_row += str(empty_count)
                    empty_count = 0
                fen_row += piece.fen_letter
            if empty_count > 0:
                fen_row += str(empty_count)
            fen_rows.append(fen_row)

        side = 'w' if self.side_to_move is Color.RED else 'b'
        fullmove = self.ply // 2 + 1
        return f"{'/'.join(fen_rows)} {side} - - {self.no_capture_plies} {fullmove}"

    # ==================== 查询 ====================

    def code_at(self, file: int, rank: int) -> int:
        """指定坐标的棋子编码，越界视为空"""
        if 0 <= file < NUM_FILES and 0 <= rank < NUM_RANKS:
            return int(self.grid[rank, file])
        return 0

    def piece_at(self, square: Square) -> Optional[Piece]:
        """获取指定位置的棋子"""
        return Piece.from_code(self.grid[square.rank, square.file])

    def is_empty(self, square: Square) -> bool:
        return self.grid[square.rank, square.file] == 0

    def find_general(self, color: Color) -> Optional[Square]:
        """
        找到指定一方帅/将的位置

        Returns:
            Optional[Square]: 位置，找不到返回None
        """
        positions = np.argwhere(self.grid == int(PieceKind.GENERAL) * int(color))
        if len(positions) == 0:
            return None
        rank, file = positions[0]
        return Square(int(file), int(rank))

    def pieces(self, color: Optional[Color] = None) -> List[Tuple[Square, Piece]]:
        """
        获取棋子的位置和种类

        Args:
            color: 指定一方，None表示双方

        Returns:
            List[Tuple[Square, Piece]]: [(位置, 棋子), ...]
        """
        if color is None:
            mask = self.grid != 0
        elif color is Color.RED:
            mask = self.grid > 0
        else:
            mask = self.grid < 0

        result = []
        for rank, file in np.argwhere(mask):
            result.append((Square(int(file), int(rank)),
                           Piece.from_code(self.grid[rank, file])))
        return result

    def count_pieces(self, color: Color) -> Dict[PieceKind, int]:
        """统计某一方各种棋子的数量"""
        return {
            kind: int(np.count_nonzero(self.grid == int(kind) * int(color)))
            for kind in PieceKind
        }

    def generals_facing(self) -> bool:
        """帅将是否在同一路上直接照面"""
        red = self.find_general(Color.RED)
        black = self.find_general(Color.BLACK)
        if red is None or black is None or red.file != black.file:
            return False
        low, high = sorted((red.rank, black.rank))
        return not np.any(self.grid[low + 1:high, red.file])

    def position_key(self) -> Tuple[bytes, int]:
        """用于重复局面统计的局面键"""
        return self.grid.tobytes(), int(self.side_to_move)

    # ==================== 走子 ====================

    def apply(self, move: Move) -> 'ChessBoard':
        """
        执行走法，返回新的棋盘状态

        不检查合法性，由 RuleEngine 负责。

        Args:
            move: 要执行的走法

        Returns:
            ChessBoard: 新的棋盘状态
        """
        new_board = self.copy()
        origin, destination = move.origin, move.destination

        captured = new_board.grid[destination.rank, destination.file]
        new_board.grid[destination.rank, destination.file] = new_board.grid[origin.rank, origin.file]
        new_board.grid[origin.rank, origin.file] = 0

        new_board.no_capture_plies = 0 if captured != 0 else self.no_capture_plies + 1
        new_board.ply = self.ply + 1
        new_board.side_to_move = self.side_to_move.opponent
        return new_board

    # ==================== 实用工具方法 ====================

    def copy(self) -> 'ChessBoard':
        """创建棋盘的副本"""
        new_board = ChessBoard.__new__(ChessBoard)
        new_board.grid = self.grid.copy()
        new_board.side_to_move = self.side_to_move
        new_board.ply = self.ply
        new_board.no_capture_plies = self.no_capture_plies
        return new_board

    def to_matrix(self) -> np.ndarray:
        """转换为矩阵格式 (线 x 路)"""
        return self.grid.copy()

    def to_visual_string(self) -> str:
        """
        转换为可视化字符串，红方在下

        Returns:
            str: 可视化的棋盘字符串
        """
        lines = ["  a b c d e f g h i"]
        for rank in range(NUM_RANKS - 1, -1, -1):
            cells = []
            for file in range(NUM_FILES):
                piece = Piece.from_code(self.grid[rank, file])
                cells.append(piece.chinese_name if piece else "．")
            lines.append(f"{rank} " + "".join(cells))
            if rank == 5:
                lines.append("  ～～～～～～～～～")
        lines.append(f"当前走棋: {self.side_to_move.chinese_name}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.to_visual_string()

    def __repr__(self) -> str:
        return f"ChessBoard({self.to_fen()!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, ChessBoard):
            return False
        return (np.array_equal(self.grid, other.grid) and
                self.side_to_move == other.side_to_move)

    def __hash__(self) -> int:
        return hash(self.position_key())
