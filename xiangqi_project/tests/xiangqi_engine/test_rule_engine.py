"""
测试象棋规则引擎
"""

import pytest

from xiangqi_project.src.xiangqi_engine.config import RulesConfig
from xiangqi_project.src.xiangqi_engine.rules_engine import (
    ChessBoard, Color, GameState, PieceKind, RuleEngine, Square, parse_move,
)
from xiangqi_project.src.xiangqi_engine.utils.exceptions import (
    IllegalMoveReason, PatternViolation,
)


# 红车b1沉底前：黑将e9，红车a8控制8线，红帅d0
MATE_IN_ONE_FEN = "4k4/R8/9/9/9/9/9/9/1R7/3K5 w - - 0 1"
# 黑将e9无子可走但未被将军
STALEMATE_FEN = "4k4/R8/6N2/9/9/9/9/9/9/3K5 b - - 0 1"
# 红马e1挡住黑车e5
PINNED_HORSE_FEN = "3k5/9/9/9/4r4/9/9/9/4N4/4K4 w - - 0 1"
# 红马e5挡在帅将之间
SCREENING_HORSE_FEN = "4k4/9/9/9/4N4/9/9/9/9/4K4 w - - 0 1"


def perft(engine: RuleEngine, board: ChessBoard, depth: int) -> int:
    if depth == 0:
        return 1
    return sum(perft(engine, board.apply(move), depth - 1)
               for move in engine.generate_legal_moves(board))


class TestMoveGeneration:
    """走法生成测试"""

    def setup_method(self):
        self.engine = RuleEngine()
        self.board = ChessBoard()

    def test_initial_move_count(self):
        """初始局面红方有44种走法"""
        moves = self.engine.generate_legal_moves(self.board)
        assert len(moves) == 44
        assert len(set(moves)) == 44
        assert all(self.board.piece_at(move.origin).color is Color.RED for move in moves)

    def test_perft_depth_two(self):
        assert perft(self.engine, self.board, 2) == 1920

    def test_black_moves_mirror_red(self):
        moves = self.engine.generate_legal_moves(self.board, Color.BLACK)
        assert len(moves) == 44

    def test_generated_moves_carry_pieces(self):
        moves = self.engine.generate_piece_moves(self.board, Square(7, 2))
        capture = [move for move in moves if move.destination == Square(7, 9)]
        assert len(capture) == 1
        assert capture[0].piece is PieceKind.CANNON
        assert capture[0].captured is PieceKind.HORSE
        assert capture[0].is_capture

    def test_no_moves_from_empty_square(self):
        assert self.engine.generate_piece_moves(self.board, Square(4, 4)) == []

    @pytest.mark.parametrize("fen", [
        PINNED_HORSE_FEN, SCREENING_HORSE_FEN, MATE_IN_ONE_FEN,
        "r1bakab1r/9/1cn3nc1/p1p1p1p1p/9/2P6/P3P1P1P/1C2C1N2/9/RNBAKAB1R w - - 4 3",
    ])
    def test_legal_moves_never_expose_general(self, fen):
        """合法走法执行后己方不被将军，帅将不照面"""
        board = ChessBoard.from_fen(fen)
        mover = board.side_to_move
        for move in self.engine.generate_legal_moves(board):
            after = board.apply(move)
            assert not self.engine.is_in_check(after, mover), str(move)
            assert not after.generals_facing(), str(move)
            assert move.captured is not PieceKind.GENERAL

    def test_legal_moves_match_check_move(self):
        board = ChessBoard.from_fen(PINNED_HORSE_FEN)
        legal = set(self.engine.generate_legal_moves(board))
        for move in self.engine.pseudo_legal_moves(board):
            assert (move in legal) == (self.engine.check_move(board, move) is None)

    def test_pinned_horse_cannot_move(self):
        board = ChessBoard.from_fen(PINNED_HORSE_FEN)
        legal = self.engine.generate_legal_moves(board)
        assert all(move.origin != Square(4, 1) for move in legal)
        assert self.engine.has_legal_move(board)


class TestCheckDetection:
    """将军检测测试"""

    def setup_method(self):
        self.engine = RuleEngine()

    def test_initial_position_not_in_check(self):
        board = ChessBoard()
        assert not self.engine.is_in_check(board, Color.RED)
        assert not self.engine.is_in_check(board, Color.BLACK)

    def test_chariot_check(self):
        board = ChessBoard.from_fen(MATE_IN_ONE_FEN).apply(parse_move("b1b9"))
        assert self.engine.is_in_check(board, Color.BLACK)
        assert self.engine.attackers_of(board, Square(4, 9), Color.RED) == [Square(1, 9)]

    def test_cannon_check_needs_screen(self):
        """炮需要炮架才能将军"""
        board = ChessBoard.from_fen("4k4/9/9/9/9/4C4/9/9/9/3K5 b - - 0 1")
        assert not self.engine.is_in_check(board, Color.BLACK)
        screened = ChessBoard.from_fen("4k4/9/9/4p4/9/4C4/9/9/9/3K5 b - - 0 1")
        assert self.engine.is_in_check(screened, Color.BLACK)

    def test_horse_check_respects_leg(self):
        board = ChessBoard.from_fen("4k4/9/5N3/9/9/9/9/9/9/3K5 b - - 0 1")
        assert self.engine.is_in_check(board, Color.BLACK)
        hobbled = ChessBoard.from_fen("4k4/5n3/5N3/9/9/9/9/9/9/3K5 b - - 0 1")
        assert not self.engine.is_in_check(hobbled, Color.BLACK)

    def test_checkmate(self):
        board = ChessBoard.from_fen(MATE_IN_ONE_FEN).apply(parse_move("b1b9"))
        assert self.engine.is_checkmate(board, Color.BLACK)
        assert not self.engine.is_stalemate(board, Color.BLACK)
        assert self.engine.generate_legal_moves(board) == []

    def test_stalemate(self):
        """困毙：未被将军但无子可走"""
        board = ChessBoard.from_fen(STALEMATE_FEN)
        assert not self.engine.is_in_check(board, Color.BLACK)
        assert self.engine.is_stalemate(board, Color.BLACK)
        assert not self.engine.is_checkmate(board, Color.BLACK)


class TestCheckMove:
    """走法判定测试"""

    def setup_method(self):
        self.engine = RuleEngine()
        self.board = ChessBoard()

    def _reason(self, notation, board=None):
        error = self.engine.check_move(board or self.board, parse_move(notation))
        return error.reason if error else None

    def test_legal_move(self):
        assert self.engine.check_move(self.board, parse_move("c3c4")) is None
        assert self.engine.check_move(self.board, parse_move("h2e2")) is None

    def test_empty_origin(self):
        assert self._reason("e4e5") is IllegalMoveReason.EMPTY_ORIGIN

    def test_wrong_turn(self):
        assert self._reason("c6c5") is IllegalMoveReason.WRONG_TURN

    def test_own_piece_at_destination(self):
        assert self._reason("a0a3") is IllegalMoveReason.OWN_PIECE_AT_DESTINATION

    def test_same_square_is_invalid_shape(self):
        """原地不动属于走法规则违例，而不是终点有己方棋子"""
        error = self.engine.check_move(self.board, parse_move("e0e0"))
        assert error.reason is IllegalMoveReason.PATTERN_VIOLATION
        assert error.violation is PatternViolation.INVALID_SHAPE

    def test_pattern_violation_carries_detail(self):
        error = self.engine.check_move(self.board, parse_move("b0d1"))
        assert error.reason is IllegalMoveReason.PATTERN_VIOLATION
        assert error.violation is PatternViolation.HOBBLED_HORSE
        assert error.error_code == "INVALID_MOVE"
        assert "b0d1" in str(error)

    def test_self_check(self):
        """被牵制的马走开后己方被将军"""
        board = ChessBoard.from_fen(PINNED_HORSE_FEN)
        assert self._reason("e1c2", board) is IllegalMoveReason.SELF_CHECK

    def test_generals_facing_after_screen_moves(self):
        board = ChessBoard.from_fen(SCREENING_HORSE_FEN)
        assert self._reason("e5c6", board) is IllegalMoveReason.GENERALS_FACING

    def test_general_steps_onto_open_file(self):
        board = ChessBoard.from_fen("4k4/9/9/9/9/9/9/9/9/3K5 w - - 0 1")
        assert self._reason("d0e0", board) is IllegalMoveReason.GENERALS_FACING
        assert self._reason("d0d1", board) is None

    def test_general_capture_is_rejected(self):
        board = ChessBoard.from_fen("4k4/9/9/9/4R4/9/9/9/9/3K5 w - - 0 1")
        assert self._reason("e5e9", board) is IllegalMoveReason.GENERAL_CAPTURE

    def test_check_order_prefers_turn_over_pattern(self):
        """先判走棋方，再判走法规则"""
        assert self._reason("b9d8") is IllegalMoveReason.WRONG_TURN

    def test_diagnose_pattern(self):
        violation, detail = self.engine.diagnose_pattern(self.board, parse_move("b0d1"))
        assert violation is PatternViolation.HOBBLED_HORSE
        assert "c0" in detail
        assert self.engine.diagnose_pattern(self.board, parse_move("b0c2")) is None
        assert self.engine.diagnose_pattern(self.board, parse_move("e4e5")) is None

    def test_annotate(self):
        move = self.engine.annotate(self.board, parse_move("h2h9"))
        assert move.piece is PieceKind.CANNON
        assert move.captured is PieceKind.HORSE


class TestGameStatus:
    """对局状态推导测试"""

    def setup_method(self):
        self.engine = RuleEngine()

    def test_in_progress(self):
        status = self.engine.get_game_status(ChessBoard())
        assert status.state is GameState.IN_PROGRESS
        assert not status.is_over

    def test_check(self):
        board = ChessBoard.from_fen("4k4/9/9/9/9/9/9/9/1R7/3K5 w - - 0 1").apply(parse_move("b1b9"))
        status = self.engine.get_game_status(board)
        assert status.state is GameState.CHECK
        assert status.color is Color.BLACK

    def test_checkmate(self):
        board = ChessBoard.from_fen(MATE_IN_ONE_FEN).apply(parse_move("b1b9"))
        status = self.engine.get_game_status(board)
        assert status.state is GameState.CHECKMATE
        assert status.winner is Color.RED
        assert status.is_over
        assert str(status) == "checkmate(red)"

    def test_stalemate(self):
        status = self.engine.get_game_status(ChessBoard.from_fen(STALEMATE_FEN))
        assert status.state is GameState.STALEMATE
        assert status.color is Color.BLACK
        assert status.winner is None

    def test_repetition_draw(self):
        status = self.engine.get_game_status(ChessBoard(), repetition_count=3)
        assert status.state is GameState.DRAW
        assert status.is_over

    def test_repetition_disabled(self):
        engine = RuleEngine(RulesConfig(repetition_limit=0))
        status = engine.get_game_status(ChessBoard(), repetition_count=50)
        assert status.state is GameState.IN_PROGRESS

    def test_no_capture_draw(self):
        board = ChessBoard.from_fen("3k5/9/9/9/9/9/9/9/9/4K4 w - - 120 80")
        status = self.engine.get_game_status(board)
        assert status.state is GameState.DRAW
        assert "120" in status.reason

    def test_checkmate_takes_precedence_over_draw(self):
        board = ChessBoard.from_fen(MATE_IN_ONE_FEN).apply(parse_move("b1b9"))
        status = self.engine.get_game_status(board, repetition_count=5)
        assert status.state is GameState.CHECKMATE

    def test_status_to_dict(self):
        board = ChessBoard.from_fen(MATE_IN_ONE_FEN).apply(parse_move("b1b9"))
        assert self.engine.get_game_status(board).to_dict() == {
            'state': 'checkmate', 'color': 'red', 'reason': '将死', 'is_over': True,
        }
