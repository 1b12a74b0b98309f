"""
走法记法编解码

坐标记法为4个ASCII字符 [a-i][0-9][a-i][0-9]，依次为起点、终点，
例如 "c3c4"。解析只做语法检查，不查看棋盘。

另提供中文纵线记法（如 "炮二平五"）用于展示与棋谱审计。
"""

from typing import TYPE_CHECKING

from .move import Move
from .types import FILE_LETTERS, NUM_FILES, NUM_RANKS, Color, Piece, PieceKind, Square
from ..utils.exceptions import NotationErrorReason, ParseError

if TYPE_CHECKING:
    from .chess_board import ChessBoard


NOTATION_LENGTH = 4

RED_NUMERALS = ['', '一', '二', '三', '四', '五', '六', '七', '八', '九']
BLACK_NUMERALS = ['', '１', '２', '３', '４', '５', '６', '７', '８', '９']

# 斜行棋子的纵线记法记录目标路数而非步数
DIAGONAL_KINDS = (PieceKind.ADVISOR, PieceKind.ELEPHANT, PieceKind.HORSE)


def _parse_square(notation: str, text: str) -> Square:
    letter, digit = text[0], text[1]
    if not digit.isascii() or not digit.isdigit():
        raise ParseError(notation, NotationErrorReason.MALFORMED, f"线号必须是数字: {digit!r}")
    if not letter.isascii() or not letter.isalpha() or not letter.islower():
        raise ParseError(notation, NotationErrorReason.MALFORMED, f"路号必须是小写字母: {letter!r}")

    file = FILE_LETTERS.find(letter)
    rank = int(digit)
    if file < 0 or not (0 <= rank < NUM_RANKS):
        raise ParseError(notation, NotationErrorReason.OUT_OF_RANGE, f"坐标越界: {text}")
    return Square(file, rank)


def parse_move(notation: str) -> Move:
    """
    解析坐标记法

    Args:
        notation: 坐标记法字符串，如 "c3c4"

    Returns:
        Move: 不含棋子信息的走法

    Raises:
        ParseError: 长度、字符或坐标范围不合法
    """
    if not isinstance(notation, str):
        raise ParseError(notation, NotationErrorReason.MALFORMED, "走法必须是字符串")
    if len(notation) != NOTATION_LENGTH:
        raise ParseError(notation, NotationErrorReason.MALFORMED,
                         f"长度应为{NOTATION_LENGTH}，实际为{len(notation)}")

    origin = _parse_square(notation, notation[0:2])
    destination = _parse_square(notation, notation[2:4])
    return Move(origin, destination)


def format_move(move: Move) -> str:
    """转换为坐标记法"""
    return f"{move.origin.name}{move.destination.name}"


def _file_number(file: int, color: Color) -> int:
    """各方从己方右手边起算的路数 (1-9)"""
    if color is Color.RED:
        return NUM_FILES - file
    return file + 1


def _numeral(value: int, color: Color) -> str:
    return (RED_NUMERALS if color is Color.RED else BLACK_NUMERALS)[value]


def _tandem_prefix(board: 'ChessBoard', piece: Piece, origin: Square) -> str:
    """同一路上有多个同类棋子时的前/后标记，没有则返回空串"""
    same_file = [
        rank for rank in range(NUM_RANKS)
        if board.piece_at(Square(origin.file, rank)) == piece
    ]
    if len(same_file) < 2:
        return ''

    # 按离对方底线由近到远排序
    same_file.sort(reverse=piece.color is Color.RED)
    index = same_file.index(origin.rank)
    if len(same_file) == 2:
        return ('前', '后')[index]
    if len(same_file) == 3:
        return ('前', '中', '后')[index]
    return _numeral(index + 1, piece.color)


def format_chinese(move: Move, board: 'ChessBoard') -> str:
    """
    转换为中文纵线记法

    Args:
        move: 走法
        board: 走子之前的棋盘

    Returns:
        str: 中文记法字符串，如 "炮二平五"、"马２进３"
    """
    piece = board.piece_at(move.origin)
    if piece is None:
        raise ValueError(f"起点没有棋子: {move.origin}")

    color = piece.color
    prefix = _tandem_prefix(board, piece, move.origin)
    if prefix:
        head = f"{prefix}{piece.chinese_name}"
    else:
        head = f"{piece.chinese_name}{_numeral(_file_number(move.origin.file, color), color)}"

    advance = move.rank_delta * color.forward
    to_file = _numeral(_file_number(move.destination.file, color), color)

    if advance == 0:
        return f"{head}平{to_file}"

    direction = '进' if advance > 0 else '退'
    if piece.kind in DIAGONAL_KINDS:
        return f"{head}{direction}{to_file}"
    return f"{head}{direction}{_numeral(abs(advance), color)}"
