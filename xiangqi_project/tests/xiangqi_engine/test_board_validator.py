"""
测试棋局合法性验证器
"""

from xiangqi_project.src.xiangqi_engine.rules_engine import (
    BoardValidator, ChessBoard, Color, PieceKind,
)


def _place(board: ChessBoard, file: int, rank: int, kind: PieceKind, color: Color):
    board.grid[rank, file] = int(kind) * int(color)


class TestBoardValidator:
    """验证器测试类"""

    def setup_method(self):
        self.validator = BoardValidator()
        self.board = ChessBoard()

    def test_initial_position_is_valid(self):
        """初始局面合法"""
        is_valid, errors = self.validator.full_validation(self.board)
        assert is_valid
        assert errors == []

    def test_missing_general(self):
        self.board.grid[0, 4] = 0
        is_valid, errors = self.validator.validate_piece_counts(self.board)
        assert not is_valid
        assert any("帅/将数量错误" in error for error in errors)

    def test_too_many_chariots(self):
        """车数量超限"""
        _place(self.board, 0, 1, PieceKind.CHARIOT, Color.RED)
        is_valid, errors = self.validator.validate_piece_counts(self.board)
        assert not is_valid
        assert "CHARIOT" in errors[0]

    def test_general_outside_palace(self):
        board = ChessBoard.empty()
        _place(board, 3, 3, PieceKind.GENERAL, Color.RED)
        _place(board, 4, 9, PieceKind.GENERAL, Color.BLACK)
        is_valid, errors = self.validator.validate_piece_positions(board)
        assert not is_valid
        assert "九宫" in errors[0]

    def test_elephant_across_river(self):
        """象不能过河"""
        _place(self.board, 4, 5, PieceKind.ELEPHANT, Color.RED)
        self.board.grid[0, 2] = 0
        is_valid, _ = self.validator.validate_piece_positions(self.board)
        assert not is_valid

    def test_black_elephant_points_are_mirrored(self):
        board = ChessBoard.empty()
        _place(board, 4, 0, PieceKind.GENERAL, Color.RED)
        _place(board, 3, 9, PieceKind.GENERAL, Color.BLACK)
        _place(board, 2, 5, PieceKind.ELEPHANT, Color.BLACK)
        _place(board, 4, 7, PieceKind.ELEPHANT, Color.BLACK)
        is_valid, errors = self.validator.full_validation(board)
        assert is_valid, errors

    def test_advisor_off_diagonal(self):
        self.board.grid[0, 3] = 0
        _place(self.board, 4, 1, PieceKind.GENERAL, Color.RED)
        _place(self.board, 4, 0, PieceKind.ADVISOR, Color.RED)
        is_valid, errors = self.validator.validate_piece_positions(self.board)
        assert not is_valid
        assert len(errors) == 1

    def test_soldier_moved_backwards(self):
        """未过河的兵不能出现在初始线之后"""
        self.board.grid[3, 0] = 0
        _place(self.board, 0, 2, PieceKind.SOLDIER, Color.RED)
        is_valid, _ = self.validator.validate_piece_positions(self.board)
        assert not is_valid

    def test_crossed_soldier_may_be_anywhere_forward(self):
        self.board.grid[3, 0] = 0
        _place(self.board, 1, 7, PieceKind.SOLDIER, Color.RED)
        is_valid, _ = self.validator.validate_piece_positions(self.board)
        assert is_valid

    def test_generals_facing(self):
        board = ChessBoard.empty()
        _place(board, 4, 0, PieceKind.GENERAL, Color.RED)
        _place(board, 4, 9, PieceKind.GENERAL, Color.BLACK)
        is_valid, errors = self.validator.validate_generals_facing(board)
        assert not is_valid
        assert errors == ["帅将照面，中间无棋子阻挡"]

    def test_validation_report(self):
        """测试验证报告"""
        report = self.validator.get_validation_report(self.board)
        assert report['overall_valid']
        assert report['total_errors'] == 0
        assert set(report['validations']) == {
            'structure', 'piece_counts', 'piece_positions', 'generals_facing',
        }

        self.board.grid[9, 4] = 0
        report = self.validator.get_validation_report(self.board)
        assert not report['overall_valid']
        assert report['total_errors'] >= 1
        assert report['validations']['piece_counts']['valid'] is False

