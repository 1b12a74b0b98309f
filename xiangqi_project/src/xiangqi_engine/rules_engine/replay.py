"""
对局重放引擎

把走法历史从初始局面依次重放得到当前棋盘，并在此基础上判定新的一步。
引擎不保存任何跨调用的状态：同样的历史与走法总是得到同样的结果。

同一对局的并发提交需要由调用方串行化（读取历史、apply_move、保存新历史）。
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .board_validator import BoardValidator
from .chess_board import ChessBoard
from .move import Move
from .notation import format_chinese, format_move, parse_move
from .rule_engine import RuleEngine
from .status import GameStatus
from .types import Color
from ..config.engine_config import RulesConfig
from ..utils.exceptions import (
    BoardSetupError, CorruptHistoryError, ParseError, XiangqiError,
)
from ..utils.logger import LoggerMixin


History = Tuple[str, ...]


@dataclass(frozen=True)
class ReplayResult:
    """重放结果"""
    board: ChessBoard
    moves: Tuple[Move, ...]
    boards: Tuple[ChessBoard, ...]                   # boards[i] 为第i步之前的局面
    repetition_counts: Dict[tuple, int] = field(default_factory=dict)

    @property
    def repetition_count(self) -> int:
        """当前局面在对局中出现的次数"""
        return self.repetition_counts.get(self.board.position_key(), 1)


@dataclass(frozen=True)
class MoveOutcome:
    """
    提交一步走法的结果

    被拒绝时 history 与提交前相同，error 说明原因。
    """
    accepted: bool
    history: History
    status: GameStatus
    move: Optional[Move] = None
    error: Optional[XiangqiError] = None

    def unwrap(self) -> 'MoveOutcome':
        """被拒绝时抛出携带的异常，否则返回自身"""
        if self.error is not None:
            raise self.error
        return self

    def to_dict(self) -> dict:
        return {
            'accepted': self.accepted,
            'history': list(self.history),
            'status': self.status.to_dict(),
            'move': self.move.to_dict() if self.move else None,
            'error': str(self.error) if self.error else None,
        }


class GameReplayEngine(LoggerMixin):
    """
    对局重放引擎

    每次调用都从头重放整个历史，并逐步校验，损坏的历史不会被信任。
    """

    def __init__(self, config: Optional[RulesConfig] = None):
        self.config = config or RulesConfig()
        self.config.validate()
        self.rule_engine = RuleEngine(self.config)
        self.validator = BoardValidator()

    def _initial_board(self, initial_fen: Optional[str]) -> ChessBoard:
        if initial_fen is None:
            return ChessBoard()
        return ChessBoard.from_fen(initial_fen)

    def replay(self, history: Sequence[str], initial_fen: Optional[str] = None) -> ReplayResult:
        """
        重放走法历史

        Args:
            history: 坐标记法字符串序列
            initial_fen: 初始局面，None表示标准开局

        Returns:
            ReplayResult: 重放结果

        Raises:
            CorruptHistoryError: 某一步无法解析或不合法
            BoardSetupError: 初始局面无效
        """
        if isinstance(history, str):
            raise TypeError("history 必须是走法字符串的序列，而不是单个字符串")

        if len(history) > self.config.max_history_length:
            cause = XiangqiError(
                f"走法历史长度{len(history)}超过上限{self.config.max_history_length}",
                "HISTORY_TOO_LONG",
            )
            self.log_warning(f"拒绝过长的走法历史: {len(history)}")
            raise CorruptHistoryError(self.config.max_history_length, cause)

        board = self._initial_board(initial_fen)
        counts = Counter({board.position_key(): 1})
        moves: List[Move] = []
        boards: List[ChessBoard] = []

        for ply, notation in enumerate(history):
            try:
                move = parse_move(notation)
            except ParseError as e:
                self.log_warning(f"走法历史第{ply}步无法解析: {notation!r}")
                raise CorruptHistoryError(ply, e) from e

            error = self.rule_engine.check_move(board, move)
            if error is not None:
                self.log_warning(f"走法历史第{ply}步不合法: {error}")
                raise CorruptHistoryError(ply, error)

            move = self.rule_engine.annotate(board, move)
            boards.append(board)
            moves.append(move)
            board = board.apply(move)
            counts[board.position_key()] += 1

            if self.config.validate_invariants:
                is_valid, errors = self.validator.full_validation(board)
                if not is_valid:
                    cause = BoardSetupError(f"第{ply}步后的局面", "; ".join(errors))
                    self.log_warning(f"走法历史第{ply}步后局面不合法: {errors}")
                    raise CorruptHistoryError(ply, cause)

        self.log_debug(f"重放完成: {len(moves)}步, FEN: {board.to_fen()}")
        return ReplayResult(board, tuple(moves), tuple(boards), dict(counts))

    def _status(self, result: ReplayResult) -> GameStatus:
        return self.rule_engine.get_game_status(result.board, result.repetition_count)

    def apply_move(self, history: Sequence[str], notation: str,
                   initial_fen: Optional[str] = None) -> MoveOutcome:
        """
        在已有历史后追加一步走法

        对提交的走法不抛出异常：无法解析或不合法时返回 accepted=False 的结果。
        已有历史损坏时抛出 CorruptHistoryError。

        Args:
            history: 已接受的走法历史
            notation: 新提交的走法
            initial_fen: 初始局面，None表示标准开局

        Returns:
            MoveOutcome: 新历史与对局状态
        """
        result = self.replay(history, initial_fen)
        prior_history = tuple(history)

        try:
            move = parse_move(notation)
        except ParseError as e:
            self.log_info(f"拒绝无法解析的走法: {notation!r}")
            return MoveOutcome(False, prior_history, self._status(result), error=e)

        error = self.rule_engine.check_move(result.board, move)
        if error is not None:
            self.log_info(f"拒绝非法走法: {error}")
            return MoveOutcome(False, prior_history, self._status(result), error=error)

        limit = self.config.max_history_length
        if len(prior_history) + 1 > limit:
            error = XiangqiError(f"走法历史已达上限{limit}，不能再追加走法", "HISTORY_TOO_LONG")
            self.log_info(f"拒绝走法 {notation}: {error}")
            return MoveOutcome(False, prior_history, self._status(result), error=error)

        move = self.rule_engine.annotate(result.board, move)
        if move.is_capture:
            self.log_debug(f"{move} 吃子: {move.captured.name.lower()}")
        new_board = result.board.apply(move)
        counts = Counter(result.repetition_counts)
        counts[new_board.position_key()] += 1

        status = self.rule_engine.get_game_status(new_board, counts[new_board.position_key()])
        new_history = prior_history + (format_move(move),)
        self.log_debug(f"接受走法 {move}, 状态: {status}")
        return MoveOutcome(True, new_history, status, move=move)

    def status_of(self, history: Sequence[str], initial_fen: Optional[str] = None) -> GameStatus:
        """重新计算对局状态，不追加走法"""
        return self._status(self.replay(history, initial_fen))

    def side_to_move(self, history: Sequence[str], initial_fen: Optional[str] = None) -> Color:
        """由历史长度的奇偶推导走棋方，不重放"""
        first = Color.RED
        if initial_fen is not None:
            first = ChessBoard.from_fen(initial_fen, validate=False).side_to_move
        return first if len(history) % 2 == 0 else first.opponent

    def legal_moves(self, history: Sequence[str], initial_fen: Optional[str] = None) -> List[str]:
        """当前走棋方的所有合法走法，按记法排序"""
        board = self.replay(history, initial_fen).board
        return sorted(format_move(move) for move in self.rule_engine.generate_legal_moves(board))

    def board_of(self, history: Sequence[str], initial_fen: Optional[str] = None) -> ChessBoard:
        """重放后的当前棋盘"""
        return self.replay(history, initial_fen).board

    def chinese_record(self, history: Sequence[str], initial_fen: Optional[str] = None) -> List[str]:
        """把走法历史转换为中文纵线记法棋谱"""
        result = self.replay(history, initial_fen)
        return [format_chinese(move, board) for move, board in zip(result.moves, result.boards)]


_default_engine = GameReplayEngine()


def apply_move(history: Sequence[str], notation: str) -> MoveOutcome:
    """使用默认配置在标准开局的历史后追加一步走法"""
    return _default_engine.apply_move(history, notation)


def status_of(history: Sequence[str]) -> GameStatus:
    """使用默认配置计算对局状态"""
    return _default_engine.status_of(history)


def side_to_move(history: Sequence[str]) -> Color:
    """标准开局下的走棋方，偶数步时红方走棋"""
    return _default_engine.side_to_move(history)
