"""
棋子走法规则表

每种棋子对应一条走法规则：
- targets: 给定棋盘与位置，生成候选目标点（尚未排除己方棋子和送将）
- diagnose: 给定走法，说明它为何不符合该棋子的走法，符合时返回None

两者必须一致: diagnose(board, move) 为 None 当且仅当 move.destination 在 targets 中。
"""

from typing import TYPE_CHECKING, Callable, Dict, Iterator, NamedTuple, Optional, Tuple

from .move import Move
from .types import Piece, PieceKind, Square
from ..utils.exceptions import PatternViolation

if TYPE_CHECKING:
    from .chess_board import ChessBoard


ORTHOGONAL = ((0, 1), (0, -1), (1, 0), (-1, 0))
DIAGONAL = ((1, 1), (1, -1), (-1, 1), (-1, -1))

# 马：日字 (路增量, 线增量) 及对应马腿
HORSE_JUMPS = (
    ((1, 2), (0, 1)), ((-1, 2), (0, 1)),
    ((1, -2), (0, -1)), ((-1, -2), (0, -1)),
    ((2, 1), (1, 0)), ((2, -1), (1, 0)),
    ((-2, 1), (-1, 0)), ((-2, -1), (-1, 0)),
)

Diagnosis = Optional[Tuple[PatternViolation, str]]


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _pieces_between(board: 'ChessBoard', origin: Square, destination: Square) -> int:
    """同一线或同一路上两点之间（不含端点）的棋子数"""
    df, dr = _sign(destination.file - origin.file), _sign(destination.rank - origin.rank)
    count = 0
    file, rank = origin.file + df, origin.rank + dr
    while (file, rank) != (destination.file, destination.rank):
        if board.code_at(file, rank) != 0:
            count += 1
        file, rank = file + df, rank + dr
    return count


def _is_straight(move: Move) -> bool:
    return (move.file_delta == 0) != (move.rank_delta == 0)


# ==================== 帅/将 ====================

def _general_targets(board, square: Square, piece: Piece) -> Iterator[Square]:
    for df, dr in ORTHOGONAL:
        target = square.offset(df, dr)
        if target is not None and target.in_palace(piece.color):
            yield target


def _general_diagnose(board, move: Move, piece: Piece) -> Diagnosis:
    if abs(move.file_delta) + abs(move.rank_delta) != 1:
        return PatternViolation.INVALID_SHAPE, "帅/将每次只能横竖走一步"
    if not move.destination.in_palace(piece.color):
        return PatternViolation.PALACE_EXIT, "帅/将不能离开九宫"
    return None


# ==================== 仕/士 ====================

def _advisor_targets(board, square: Square, piece: Piece) -> Iterator[Square]:
    for df, dr in DIAGONAL:
        target = square.offset(df, dr)
        if target is not None and target.in_palace(piece.color):
            yield target


def _advisor_diagnose(board, move: Move, piece: Piece) -> Diagnosis:
    if abs(move.file_delta) != 1 or abs(move.rank_delta) != 1:
        return PatternViolation.INVALID_SHAPE, "仕/士每次只能斜走一步"
    if not move.destination.in_palace(piece.color):
        return PatternViolation.PALACE_EXIT, "仕/士不能离开九宫"
    return None


# ==================== 相/象 ====================

def _elephant_targets(board, square: Square, piece: Piece) -> Iterator[Square]:
    for df, dr in DIAGONAL:
        target = square.offset(2 * df, 2 * dr)
        if target is None or not target.on_own_side(piece.color):
            continue
        if board.code_at(square.file + df, square.rank + dr) != 0:  # 塞象眼
            continue
        yield target


def _elephant_diagnose(board, move: Move, piece: Piece) -> Diagnosis:
    if abs(move.file_delta) != 2 or abs(move.rank_delta) != 2:
        return PatternViolation.INVALID_SHAPE, "相/象必须走田字"
    if not move.destination.on_own_side(piece.color):
        return PatternViolation.RIVER_CROSSING, "相/象不能过河"
    eye_file = move.origin.file + _sign(move.file_delta)
    eye_rank = move.origin.rank + _sign(move.rank_delta)
    if board.code_at(eye_file, eye_rank) != 0:
        return PatternViolation.ELEPHANT_EYE_BLOCKED, f"象眼 {Square(eye_file, eye_rank)} 被塞"
    return None


# ==================== 马 ====================

def _horse_targets(board, square: Square, piece: Piece) -> Iterator[Square]:
    for (df, dr), (leg_df, leg_dr) in HORSE_JUMPS:
        target = square.offset(df, dr)
        if target is None:
            continue
        if board.code_at(square.file + leg_df, square.rank + leg_dr) != 0:  # 蹩马腿
            continue
        yield target


def _horse_diagnose(board, move: Move, piece: Piece) -> Diagnosis:
    shape = (abs(move.file_delta), abs(move.rank_delta))
    if shape not in ((1, 2), (2, 1)):
        return PatternViolation.INVALID_SHAPE, "马必须走日字"
    if shape == (1, 2):
        leg = (move.origin.file, move.origin.rank + _sign(move.rank_delta))
    else:
        leg = (move.origin.file + _sign(move.file_delta), move.origin.rank)
    if board.code_at(*leg) != 0:
        return PatternViolation.HOBBLED_HORSE, f"马腿 {Square(*leg)} 被绊"
    return None


# ==================== 车 ====================

def _chariot_targets(board, square: Square, piece: Piece) -> Iterator[Square]:
    for df, dr in ORTHOGONAL:
        target = square.offset(df, dr)
        while target is not None:
            yield target
            if board.code_at(target.file, target.rank) != 0:
                break
            target = target.offset(df, dr)


def _chariot_diagnose(board, move: Move, piece: Piece) -> Diagnosis:
    if not _is_straight(move):
        return PatternViolation.INVALID_SHAPE, "车只能直线行走"
    if _pieces_between(board, move.origin, move.destination) > 0:
        return PatternViolation.BLOCKED_PATH, "车的路线被阻挡"
    return None


# ==================== 炮 ====================

def _cannon_targets(board, square: Square, piece: Piece) -> Iterator[Square]:
    for df, dr in ORTHOGONAL:
        target = square.offset(df, dr)
        # 炮架之前只能走到空位
        while target is not None and board.code_at(target.file, target.rank) == 0:
            yield target
            target = target.offset(df, dr)
        if target is None:
            continue
        # 越过炮架后的第一个棋子可以被吃
        target = target.offset(df, dr)
        while target is not None:
            if board.code_at(target.file, target.rank) != 0:
                yield target
                break
            target = target.offset(df, dr)


def _cannon_diagnose(board, move: Move, piece: Piece) -> Diagnosis:
    if not _is_straight(move):
        return PatternViolation.INVALID_SHAPE, "炮只能直线行走"
    between = _pieces_between(board, move.origin, move.destination)
    if board.is_empty(move.destination):
        if between > 0:
            return PatternViolation.BLOCKED_PATH, "炮不吃子时路线必须畅通"
        return None
    if between != 1:
        return PatternViolation.MISSING_OR_EXTRA_SCREEN, f"炮吃子需要恰好一个炮架，实际为{between}个"
    return None


# ==================== 兵/卒 ====================

def _soldier_targets(board, square: Square, piece: Piece) -> Iterator[Square]:
    forward = square.offset(0, piece.color.forward)
    if forward is not None:
        yield forward
    if not square.on_own_side(piece.color):
        for df in (-1, 1):
            side = square.offset(df, 0)
            if side is not None:
                yield side


def _soldier_diagnose(board, move: Move, piece: Piece) -> Diagnosis:
    df, dr = move.file_delta, move.rank_delta
    if df == 0 and dr == piece.color.forward:
        return None
    if dr == 0 and abs(df) == 1:
        if move.origin.on_own_side(piece.color):
            return PatternViolation.INVALID_SHAPE, "兵/卒过河前不能横走"
        return None
    if df == 0 and dr * piece.color.forward < 0:
        return PatternViolation.INVALID_SHAPE, "兵/卒不能后退"
    return PatternViolation.INVALID_SHAPE, "兵/卒每次只能走一步，不能斜走"


class PiecePattern(NamedTuple):
    """一种棋子的走法规则"""
    targets: Callable[['ChessBoard', Square, Piece], Iterator[Square]]
    diagnose: Callable[['ChessBoard', Move, Piece], Diagnosis]


PIECE_PATTERNS: Dict[PieceKind, PiecePattern] = {
    PieceKind.GENERAL: PiecePattern(_general_targets, _general_diagnose),
    PieceKind.ADVISOR: PiecePattern(_advisor_targets, _advisor_diagnose),
    PieceKind.ELEPHANT: PiecePattern(_elephant_targets, _elephant_diagnose),
    PieceKind.HORSE: PiecePattern(_horse_targets, _horse_diagnose),
    PieceKind.CHARIOT: PiecePattern(_chariot_targets, _chariot_diagnose),
    PieceKind.CANNON: PiecePattern(_cannon_targets, _cannon_diagnose),
    PieceKind.SOLDIER: PiecePattern(_soldier_targets, _soldier_diagnose),
}


def attack_pattern(kind: PieceKind) -> PiecePattern:
    """
    获取棋子种类对应的走法规则

    Raises:
        KeyError: 未登记的棋子种类
    """
    return PIECE_PATTERNS[kind]


def candidate_squares(board: 'ChessBoard', square: Square) -> Iterator[Square]:
    """指定位置棋子的候选目标点，空位返回空序列"""
    piece = board.piece_at(square)
    if piece is None:
        return iter(())
    return attack_pattern(piece.kind).targets(board, square, piece)


def diagnose_move(board: 'ChessBoard', move: Move) -> Diagnosis:
    """检查走法是否符合起点棋子的走法规则，起点必须有棋子"""
    piece = board.piece_at(move.origin)
    if move.origin == move.destination:
        return PatternViolation.INVALID_SHAPE, "起点与终点相同"
    return attack_pattern(piece.kind).diagnose(board, move, piece)
