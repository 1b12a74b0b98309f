"""
象棋规则引擎模块

包含棋局表示、记法编解码、走法生成、将军/将死判定和对局重放。
"""

from .types import Color, PieceKind, Piece, Square
from .move import Move
from .notation import parse_move, format_move, format_chinese
from .chess_board import ChessBoard, INITIAL_FEN
from .board_validator import BoardValidator
from .pieces import attack_pattern, PIECE_PATTERNS
from .rule_engine import RuleEngine
from .status import GameState, GameStatus
from .replay import (
    GameReplayEngine, MoveOutcome, ReplayResult,
    apply_move, status_of, side_to_move,
)

__all__ = [
    'Color', 'PieceKind', 'Piece', 'Square', 'Move',
    'parse_move', 'format_move', 'format_chinese',
    'ChessBoard', 'INITIAL_FEN', 'BoardValidator',
    'attack_pattern', 'PIECE_PATTERNS', 'RuleEngine',
    'GameState', 'GameStatus',
    'GameReplayEngine', 'MoveOutcome', 'ReplayResult',
    'apply_move', 'status_of', 'side_to_move',
]
