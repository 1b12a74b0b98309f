"""
异常定义

定义象棋规则引擎的各种异常类型。

走法相关的异常既可以被抛出，也可以作为返回值交给调用方
（见 GameReplayEngine.apply_move 与 RuleEngine.check_move）。
"""

from enum import Enum
from typing import Optional


class NotationErrorReason(Enum):
    """记法解析失败原因"""
    MALFORMED = "malformed"          # 长度或字符不合法
    OUT_OF_RANGE = "out-of-range"    # 坐标越界


class IllegalMoveReason(Enum):
    """非法走法原因"""
    EMPTY_ORIGIN = "empty-origin"
    WRONG_TURN = "wrong-turn"
    OWN_PIECE_AT_DESTINATION = "own-piece-at-destination"
    PATTERN_VIOLATION = "pattern-violation"
    GENERAL_CAPTURE = "general-capture"
    GENERALS_FACING = "generals-facing"
    SELF_CHECK = "self-check"


class PatternViolation(Enum):
    """棋子走法规则违例的具体类型"""
    INVALID_SHAPE = "invalid-shape"
    BLOCKED_PATH = "blocked-path"
    HOBBLED_HORSE = "hobbled-horse"
    MISSING_OR_EXTRA_SCREEN = "missing-or-extra-screen"
    RIVER_CROSSING = "river-crossing"
    PALACE_EXIT = "palace-exit"
    ELEPHANT_EYE_BLOCKED = "elephant-eye-blocked"


class XiangqiError(Exception):
    """
    象棋规则引擎基础异常

    所有规则引擎相关异常的基类。
    """

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__

    def __str__(self):
        return f"[{self.error_code}] {self.message}"


class ParseError(XiangqiError, ValueError):
    """
    记法解析异常

    当走法字符串不符合 [a-i][0-9][a-i][0-9] 格式时抛出。
    """

    def __init__(self, notation, reason: NotationErrorReason = NotationErrorReason.MALFORMED,
                 detail: str = ""):
        message = f"无法解析的走法记法: {notation!r}"
        if detail:
            message += f" - {detail}"
        super().__init__(message, "PARSE_ERROR")
        self.notation = notation
        self.reason = reason
        self.detail = detail


class IllegalMoveError(XiangqiError):
    """
    非法走法异常

    格式正确但违反象棋规则的走法。
    """

    def __init__(self, move_str: str, reason: IllegalMoveReason,
                 violation: Optional[PatternViolation] = None, detail: str = ""):
        message = f"非法走法: {move_str} ({reason.value}"
        if violation is not None:
            message += f": {violation.value}"
        message += ")"
        if detail:
            message += f" - {detail}"
        super().__init__(message, "INVALID_MOVE")
        self.move_str = move_str
        self.reason = reason
        self.violation = violation
        self.detail = detail


class CorruptHistoryError(XiangqiError):
    """
    走法历史损坏异常

    已保存的走法历史在重放时某一步失败，说明上游存在缺陷或数据被篡改。
    """

    def __init__(self, ply: int, cause: XiangqiError):
        message = f"走法历史在第{ply}步无效: {cause.message}"
        super().__init__(message, "CORRUPT_HISTORY")
        self.ply = ply
        self.cause = cause


class BoardSetupError(XiangqiError):
    """
    局面设置异常

    当FEN无效或局面违反棋盘不变量时抛出。
    """

    def __init__(self, state_description: str, reason: str = ""):
        message = f"局面设置错误: {state_description}"
        if reason:
            message += f" - {reason}"
        super().__init__(message, "BOARD_SETUP_ERROR")
        self.state_description = state_description
        self.reason = reason


class ConfigurationError(XiangqiError):
    """
    配置错误异常

    当配置参数无效时抛出。
    """

    def __init__(self, config_name: str, reason: str = ""):
        message = f"配置错误 - {config_name}"
        if reason:
            message += f": {reason}"
        super().__init__(message, "CONFIG_ERROR")
        self.config_name = config_name
        self.reason = reason
