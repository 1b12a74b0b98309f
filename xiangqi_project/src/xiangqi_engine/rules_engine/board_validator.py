"""
棋局合法性验证器

检查一个局面是否满足棋盘不变量。用于校验FEN输入，
以及重放走法历史时逐步审计。
"""

from typing import Any, Dict, List, Tuple

from .chess_board import ChessBoard
from .types import (
    NUM_FILES, NUM_RANKS, STARTING_COUNTS, Color, PieceKind,
)


# 红方仕、相可能到达的位置 (路, 线)，黑方按线号镜像
RED_ADVISOR_POINTS = {(3, 0), (5, 0), (4, 1), (3, 2), (5, 2)}
RED_ELEPHANT_POINTS = {(2, 0), (6, 0), (0, 2), (4, 2), (8, 2), (2, 4), (6, 4)}


def _points_for(points, color: Color):
    if color is Color.RED:
        return points
    return {(file, NUM_RANKS - 1 - rank) for file, rank in points}


class BoardValidator:
    """
    棋局合法性验证器

    每项检查返回 (是否合法, 错误信息列表)。
    """

    def validate_board_structure(self, board: ChessBoard) -> Tuple[bool, List[str]]:
        """验证棋盘基本结构"""
        errors = []

        if board.grid.shape != (NUM_RANKS, NUM_FILES):
            errors.append(f"棋盘尺寸错误: {board.grid.shape}, 应为({NUM_RANKS}, {NUM_FILES})")

        if not isinstance(board.side_to_move, Color):
            errors.append(f"走棋方错误: {board.side_to_move!r}")

        if board.ply < 0 or board.no_capture_plies < 0:
            errors.append("步数计数不能为负")

        return len(errors) == 0, errors

    def validate_piece_counts(self, board: ChessBoard) -> Tuple[bool, List[str]]:
        """验证每方各种棋子数量不超过初始数量，且帅/将恰好一个"""
        errors = []

        for color in Color:
            counts = board.count_pieces(color)
            for kind, limit in STARTING_COUNTS.items():
                count = counts[kind]
                if count > limit:
                    errors.append(f"{color.chinese_name}{kind.name}数量超限: {count} > {limit}")
            if counts[PieceKind.GENERAL] != 1:
                errors.append(f"{color.chinese_name}帅/将数量错误: {counts[PieceKind.GENERAL]}, 应为1")

        return len(errors) == 0, errors

    def validate_piece_positions(self, board: ChessBoard) -> Tuple[bool, List[str]]:
        """验证棋子位置是否可能出现"""
        errors = []

        for square, piece in board.pieces():
            color = piece.color
            point = (square.file, square.rank)

            if piece.kind is PieceKind.GENERAL:
                if not square.in_palace(color):
                    errors.append(f"{piece}位置错误: {square}, 应在九宫内")

            elif piece.kind is PieceKind.ADVISOR:
                if point not in _points_for(RED_ADVISOR_POINTS, color):
                    errors.append(f"{piece}位置错误: {square}, 应在九宫斜线上")

            elif piece.kind is PieceKind.ELEPHANT:
                if point not in _points_for(RED_ELEPHANT_POINTS, color):
                    errors.append(f"{piece}位置错误: {square}")

            elif piece.kind is PieceKind.SOLDIER:
                if square.on_own_side(color):
                    # 未过河的兵只能在初始路上前进
                    home_ranks = (3, 4) if color is Color.RED else (5, 6)
                    if square.rank not in home_ranks or square.file % 2 != 0:
                        errors.append(f"{piece}位置错误: {square}, 兵/卒不能后退或在河前横走")

        return len(errors) == 0, errors

    def validate_generals_facing(self, board: ChessBoard) -> Tuple[bool, List[str]]:
        """验证帅将是否照面"""
        if board.generals_facing():
            return False, ["帅将照面，中间无棋子阻挡"]
        return True, []

    def full_validation(self, board: ChessBoard) -> Tuple[bool, List[str]]:
        """
        完整的棋局验证

        Returns:
            Tuple[bool, List[str]]: (是否合法, 所有错误信息列表)
        """
        all_errors = []

        validations = [
            self.validate_board_structure,
            self.validate_piece_counts,
            self.validate_piece_positions,
            self.validate_generals_facing,
        ]

        for validation_func in validations:
            _, errors = validation_func(board)
            all_errors.extend(errors)

        return len(all_errors) == 0, all_errors

    def get_validation_report(self, board: ChessBoard) -> Dict[str, Any]:
        """
        获取详细的验证报告

        Returns:
            Dict[str, Any]: 验证报告
        """
        report = {
            'overall_valid': True,
            'total_errors': 0,
            'validations': {}
        }

        validation_tests = {
            'structure': self.validate_board_structure,
            'piece_counts': self.validate_piece_counts,
            'piece_positions': self.validate_piece_positions,
            'generals_facing': self.validate_generals_facing,
        }

        for test_name, test_func in validation_tests.items():
            is_valid, errors = test_func(board)
            report['validations'][test_name] = {
                'valid': is_valid,
                'errors': errors,
                'error_count': len(errors)
            }

            if not is_valid:
                report['overall_valid'] = False
                report['total_errors'] += len(errors)

        return report
