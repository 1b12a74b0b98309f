"""
象棋规则引擎

实现走法生成、将军与将死检测、走法合法性判定和对局状态推导。
"""

from typing import List, Optional, Tuple

from .chess_board import ChessBoard
from .move import Move
from .pieces import candidate_squares, diagnose_move
from .status import GameStatus
from .types import Color, PieceKind, Square
from ..config.engine_config import RulesConfig
from ..utils.exceptions import IllegalMoveError, IllegalMoveReason, PatternViolation


class RuleEngine:
    """
    象棋规则引擎

    无内部可变状态，所有方法只依赖传入的棋盘。
    """

    def __init__(self, config: Optional[RulesConfig] = None):
        """
        初始化规则引擎

        Args:
            config: 规则配置，决定和棋判定的阈值
        """
        self.config = config or RulesConfig()

    # ==================== 走法生成 ====================

    def generate_piece_moves(self, board: ChessBoard, square: Square) -> List[Move]:
        """
        生成指定位置棋子的伪合法走法（不考虑送将）

        Args:
            board: 当前棋盘状态
            square: 棋子位置

        Returns:
            List[Move]: 走法列表，附带棋子与被吃棋子种类
        """
        piece = board.piece_at(square)
        if piece is None:
            return []

        moves = []
        for target in candidate_squares(board, square):
            target_piece = board.piece_at(target)
            # 不能吃己方棋子
            if target_piece is not None and target_piece.color is piece.color:
                continue
            captured = target_piece.kind if target_piece is not None else None
            moves.append(Move(square, target, piece.kind, captured))
        return moves

    def pseudo_legal_moves(self, board: ChessBoard, color: Optional[Color] = None) -> List[Move]:
        """
        生成指定一方的所有伪合法走法

        Args:
            board: 当前棋盘状态
            color: 走棋方，None表示当前走棋方
        """
        if color is None:
            color = board.side_to_move

        moves = []
        for square, _ in board.pieces(color):
            moves.extend(self.generate_piece_moves(board, square))
        return moves

    def generate_legal_moves(self, board: ChessBoard, color: Optional[Color] = None) -> List[Move]:
        """
        生成指定一方的所有合法走法

        在伪合法走法的基础上排除吃帅/将、帅将照面以及走后被将军的走法。

        Args:
            board: 当前棋盘状态
            color: 走棋方，None表示当前走棋方

        Returns:
            List[Move]: 合法走法列表
        """
        if color is None:
            color = board.side_to_move

        return [
            move for move in self.pseudo_legal_moves(board, color)
            if self._exposure_reason(board, move, color) is None
        ]

    def has_legal_move(self, board: ChessBoard, color: Optional[Color] = None) -> bool:
        """是否存在至少一个合法走法，找到即返回"""
        if color is None:
            color = board.side_to_move

        for move in self.pseudo_legal_moves(board, color):
            if self._exposure_reason(board, move, color) is None:
                return True
        return False

    def _exposure_reason(self, board: ChessBoard, move: Move, color: Color) -> Optional[IllegalMoveReason]:
        """
        检查走法执行后是否暴露己方帅/将

        Returns:
            Optional[IllegalMoveReason]: 不合法的原因，合法返回None
        """
        if move.captured is PieceKind.GENERAL:
            return IllegalMoveReason.GENERAL_CAPTURE

        new_board = board.apply(move)
        if new_board.generals_facing():
            return IllegalMoveReason.GENERALS_FACING
        if self.is_in_check(new_board, color):
            return IllegalMoveReason.SELF_CHECK
        return None

    # ==================== 将军检测 ====================

    def attackers_of(self, board: ChessBoard, square: Square, color: Color) -> List[Square]:
        """
        获取能攻击到指定位置的某一方棋子

        Args:
            board: 棋盘状态
            square: 目标位置
            color: 攻击方

        Returns:
            List[Square]: 攻击者位置列表
        """
        return [
            origin for origin, _ in board.pieces(color)
            if any(target == square for target in candidate_squares(board, origin))
        ]

    def is_in_check(self, board: ChessBoard, color: Color) -> bool:
        """
        检查指定一方是否被将军

        Args:
            board: 棋盘状态
            color: 被检查的一方

        Returns:
            bool: 是否被将军
        """
        general = board.find_general(color)
        if general is None:
            return False

        for origin, _ in board.pieces(color.opponent):
            for target in candidate_squares(board, origin):
                if target == general:
                    return True
        return False

    def is_checkmate(self, board: ChessBoard, color: Color) -> bool:
        """被将军且没有任何合法走法"""
        return self.is_in_check(board, color) and not self.has_legal_move(board, color)

    def is_stalemate(self, board: ChessBoard, color: Color) -> bool:
        """
        检查指定一方是否被困毙

        没有被将军，但没有合法走法。是否判负由调用方决定。
        """
        return not self.is_in_check(board, color) and not self.has_legal_move(board, color)

    # ==================== 走法判定 ====================

    def diagnose_pattern(self, board: ChessBoard, move: Move) -> Optional[Tuple[PatternViolation, str]]:
        """
        说明走法为何不符合起点棋子的走法规则

        Returns:
            (违例类型, 说明)，符合规则或起点为空时返回None
        """
        if board.piece_at(move.origin) is None:
            return None
        return diagnose_move(board, move)

    def check_move(self, board: ChessBoard, move: Move) -> Optional[IllegalMoveError]:
        """
        判定走法在当前局面下是否合法

        不抛出异常，非法时返回说明原因的 IllegalMoveError。

        Args:
            board: 当前棋盘状态
            move: 要判定的走法

        Returns:
            Optional[IllegalMoveError]: 合法返回None
        """
        notation = str(move)
        piece = board.piece_at(move.origin)

        if piece is None:
            return IllegalMoveError(notation, IllegalMoveReason.EMPTY_ORIGIN,
                                    detail=f"起点 {move.origin} 没有棋子")

        if piece.color is not board.side_to_move:
            return IllegalMoveError(notation, IllegalMoveReason.WRONG_TURN,
                                    detail=f"轮到{board.side_to_move.chinese_name}走棋")

        target = board.piece_at(move.destination)
        # 原地不动由走法规则判为 INVALID_SHAPE
        if move.origin != move.destination and target is not None and target.color is piece.color:
            return IllegalMoveError(notation, IllegalMoveReason.OWN_PIECE_AT_DESTINATION,
                                    detail=f"终点 {move.destination} 是己方的{target}")

        diagnosis = self.diagnose_pattern(board, move)
        if diagnosis is not None:
            violation, detail = diagnosis
            return IllegalMoveError(notation, IllegalMoveReason.PATTERN_VIOLATION,
                                    violation=violation, detail=detail)

        annotated = move.with_pieces(piece.kind, target.kind if target is not None else None)
        reason = self._exposure_reason(board, annotated, piece.color)
        if reason is IllegalMoveReason.GENERAL_CAPTURE:
            return IllegalMoveError(notation, reason, detail="帅/将不能被吃，对局应以将死结束")
        if reason is IllegalMoveReason.GENERALS_FACING:
            return IllegalMoveError(notation, reason, detail="走后帅将照面")
        if reason is IllegalMoveReason.SELF_CHECK:
            return IllegalMoveError(notation, reason, detail="走后己方被将军")

        return None

    def annotate(self, board: ChessBoard, move: Move) -> Move:
        """补全走法的棋子与被吃棋子种类"""
        piece = board.piece_at(move.origin)
        target = board.piece_at(move.destination)
        return move.with_pieces(piece.kind if piece else None,
                                target.kind if target else None)

    # ==================== 对局状态 ====================

    def get_game_status(self, board: ChessBoard, repetition_count: int = 1) -> GameStatus:
        """
        推导当前走棋方视角的对局状态

        优先级: 将死 > 困毙 > 和棋 > 将军 > 进行中

        Args:
            board: 棋盘状态
            repetition_count: 当前局面在对局中出现的次数（含本次）

        Returns:
            GameStatus: 对局状态
        """
        color = board.side_to_move
        in_check = self.is_in_check(board, color)

        if not self.has_legal_move(board, color):
            if in_check:
                return GameStatus.checkmate(color.opponent)
            return GameStatus.stalemate(color)

        repetition_limit = self.config.repetition_limit
        if repetition_limit and repetition_count >= repetition_limit:
            return GameStatus.draw(f"同一局面重复{repetition_count}次")

        no_capture_limit = self.config.no_capture_ply_limit
        if no_capture_limit and board.no_capture_plies >= no_capture_limit:
            return GameStatus.draw(f"连续{board.no_capture_plies}步无吃子")

        if in_check:
            return GameStatus.check(color)
        return GameStatus.in_progress()
