"""
配置管理模块

包含规则配置与日志配置。
"""

from .config_manager import ConfigManager
from .engine_config import RulesConfig, LoggingConfig

__all__ = ['ConfigManager', 'RulesConfig', 'LoggingConfig']
