"""
中国象棋规则引擎

为异步对弈服务判定走法合法性、推导局面以及将军/将死/困毙状态。
引擎只依赖走法历史，不负责HTTP、持久化和邮件通知。
"""

__version__ = "0.1.0"
__author__ = "Xiangqi Mail Team"

from .rules_engine import (
    ChessBoard, Move, RuleEngine, GameReplayEngine, GameStatus, GameState, Color,
    apply_move, status_of, side_to_move,
)
from .config import ConfigManager, RulesConfig, LoggingConfig
from .utils import setup_logger, get_logger, XiangqiError

__all__ = [
    "__version__", "__author__",
    "ChessBoard", "Move", "RuleEngine", "GameReplayEngine", "GameStatus", "GameState", "Color",
    "apply_move", "status_of", "side_to_move",
    "ConfigManager", "RulesConfig", "LoggingConfig",
    "setup_logger", "get_logger", "XiangqiError",
]
