"""
中国象棋邮件对弈 (Xiangqi by Mail)

双方通过异步HTTP走子的中国象棋对弈系统的规则引擎部分。
"""

__version__ = "0.1.0"
__author__ = "Xiangqi Mail Team"
__description__ = "中国象棋规则引擎 - 走法合法性判定、局面重放与将死检测"

from xiangqi_project.src import xiangqi_engine

__all__ = [
    "xiangqi_engine",
    "__version__",
    "__author__",
    "__description__",
]
