"""
Xiangqi by Mail 源代码模块

- xiangqi_engine: 象棋规则引擎
"""

from . import xiangqi_engine

__all__ = [
    "xiangqi_engine",
]
