"""
工具模块

包含日志、异常处理等通用工具。
"""

from .logger import setup_logger, get_logger, LoggerMixin
from .exceptions import (
    XiangqiError, ParseError, IllegalMoveError, CorruptHistoryError,
    BoardSetupError, ConfigurationError,
    NotationErrorReason, IllegalMoveReason, PatternViolation,
)

__all__ = [
    'setup_logger', 'get_logger', 'LoggerMixin',
    'XiangqiError', 'ParseError', 'IllegalMoveError', 'CorruptHistoryError',
    'BoardSetupError', 'ConfigurationError',
    'NotationErrorReason', 'IllegalMoveReason', 'PatternViolation',
]
