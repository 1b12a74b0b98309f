"""
测试棋盘表示模块
"""

import numpy as np
import pytest

from xiangqi_project.src.xiangqi_engine.rules_engine import (
    INITIAL_FEN, ChessBoard, Color, Piece, PieceKind, Square, parse_move,
)
from xiangqi_project.src.xiangqi_engine.utils.exceptions import BoardSetupError


class TestChessBoard:
    """棋盘测试类"""

    def setup_method(self):
        """测试前的设置"""
        self.board = ChessBoard()

    def test_initial_position(self):
        """测试初始局面设置"""
        assert self.board.grid.shape == (10, 9)
        assert self.board.side_to_move is Color.RED
        assert self.board.ply == 0

        assert self.board.piece_at(Square(4, 0)) == Piece(PieceKind.GENERAL, Color.RED)
        assert self.board.piece_at(Square(4, 9)) == Piece(PieceKind.GENERAL, Color.BLACK)
        assert self.board.piece_at(Square(1, 2)) == Piece(PieceKind.CANNON, Color.RED)
        assert self.board.piece_at(Square(7, 7)) == Piece(PieceKind.CANNON, Color.BLACK)
        for file in (0, 2, 4, 6, 8):
            assert self.board.piece_at(Square(file, 3)) == Piece(PieceKind.SOLDIER, Color.RED)
            assert self.board.piece_at(Square(file, 6)) == Piece(PieceKind.SOLDIER, Color.BLACK)

    def test_initial_piece_counts(self):
        """每方16个棋子"""
        assert len(self.board.pieces(Color.RED)) == 16
        assert len(self.board.pieces(Color.BLACK)) == 16
        assert len(self.board.pieces()) == 32
        counts = self.board.count_pieces(Color.BLACK)
        assert counts[PieceKind.SOLDIER] == 5
        assert counts[PieceKind.GENERAL] == 1

    def test_grid_is_mirror_symmetric(self):
        """初始局面红黑对称"""
        assert np.array_equal(self.board.grid, -self.board.grid[::-1])

    def test_initial_fen(self):
        """测试初始局面FEN"""
        assert self.board.to_fen() == INITIAL_FEN
        assert ChessBoard.from_fen(INITIAL_FEN) == self.board

    def test_fen_round_trip_after_moves(self):
        board = self.board.apply(parse_move("h2e2")).apply(parse_move("h9g7"))
        restored = ChessBoard.from_fen(board.to_fen())
        assert restored == board
        assert restored.ply == board.ply
        assert restored.no_capture_plies == 2

    def test_fen_accepts_aliases(self):
        """兼容 e/h 写法"""
        fen = INITIAL_FEN.replace('n', 'h').replace('b', 'e', 2)
        assert ChessBoard.from_fen(fen) == self.board

    def test_fen_black_to_move(self):
        board = ChessBoard.from_fen("3k5/9/9/9/9/9/9/9/9/4K4 b - - 3 10")
        assert board.side_to_move is Color.BLACK
        assert board.no_capture_plies == 3
        assert board.ply == 19

    @pytest.mark.parametrize("fen", [
        "",
        "rnbakabnr/9/1c5c1 w",
        "3k5/9/9/9/9/9/9/9/9/4K4 x",
        "3k5/9/9/9/9/9/9/9/9/4K5 w",
        "3k5/9/9/9/9/9/9/9/9/4X4 w",
        "3k5/9/9/9/9/9/9/9/9/4K4 w - - a 1",
    ])
    def test_invalid_fen(self, fen):
        """测试格式错误的FEN"""
        with pytest.raises(BoardSetupError):
            ChessBoard.from_fen(fen)

    def test_fen_rejects_facing_generals(self):
        with pytest.raises(BoardSetupError):
            ChessBoard.from_fen("4k4/9/9/9/9/9/9/9/9/4K4 w - - 0 1")

    def test_fen_without_validation(self):
        board = ChessBoard.from_fen("4k4/9/9/9/9/9/9/9/9/4K4 w - - 0 1", validate=False)
        assert board.generals_facing()

    def test_apply_returns_new_board(self):
        """走子不修改原棋盘"""
        before = self.board.copy()
        after = self.board.apply(parse_move("c3c4"))

        assert self.board == before
        assert after.piece_at(Square(2, 4)) == Piece(PieceKind.SOLDIER, Color.RED)
        assert after.is_empty(Square(2, 3))
        assert after.side_to_move is Color.BLACK
        assert after.ply == 1
        assert after.no_capture_plies == 1

    def test_capture_resets_counter(self):
        board = self.board.apply(parse_move("a0a1"))
        assert board.no_capture_plies == 1
        board = board.apply(parse_move("a9a8")).apply(parse_move("h2h9"))
        assert board.no_capture_plies == 0
        assert board.piece_at(Square(7, 9)) == Piece(PieceKind.CANNON, Color.RED)

    def test_find_general(self):
        assert self.board.find_general(Color.RED) == Square(4, 0)
        assert self.board.find_general(Color.BLACK) == Square(4, 9)
        assert ChessBoard.empty().find_general(Color.RED) is None

    def test_generals_facing(self):
        """帅将照面检测"""
        assert not self.board.generals_facing()
        board = ChessBoard.from_fen("4k4/9/9/9/4N4/9/9/9/9/4K4 w - - 0 1")
        assert not board.generals_facing()
        facing = board.apply(parse_move("e5c6"))
        assert facing.generals_facing()

    def test_code_at_out_of_range(self):
        assert self.board.code_at(-1, 0) == 0
        assert self.board.code_at(9, 0) == 0
        assert self.board.code_at(4, 0) == 1

    def test_position_key_includes_side(self):
        empty_red = ChessBoard.empty(Color.RED)
        empty_black = ChessBoard.empty(Color.BLACK)
        assert empty_red.position_key() != empty_black.position_key()
        assert empty_red != empty_black

    def test_to_matrix_is_copy(self):
        matrix = self.board.to_matrix()
        matrix[0, 0] = 0
        assert self.board.code_at(0, 0) == 5

    def test_visual_string(self):
        """测试可视化输出"""
        text = self.board.to_visual_string()
        lines = text.split("\n")
        assert lines[1].startswith("9 车马象士将")
        assert "当前走棋: 红方" in text
        assert "～" in text
