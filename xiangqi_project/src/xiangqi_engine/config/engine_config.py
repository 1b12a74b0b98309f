"""
引擎配置数据结构

定义规则配置、日志配置及默认参数。
"""

from dataclasses import dataclass
from typing import Optional

from ..utils.exceptions import ConfigurationError


def _check_types(config_type: str, config, expected: dict):
    """YAML 中写错类型的值（如 "three"）在比较前报出"""
    for name, value_type in expected.items():
        value = getattr(config, name)
        # bool 是 int 的子类，整数字段不接受 true/false
        if not isinstance(value, value_type) or (value_type is int and isinstance(value, bool)):
            raise ConfigurationError(
                config_type, f"{name} 应为 {value_type.__name__} 类型: {value!r}")


@dataclass
class RulesConfig:
    """规则引擎配置"""
    repetition_limit: int = 3           # 同一局面出现次数达到该值判和，0表示关闭
    no_capture_ply_limit: int = 120     # 连续无吃子步数达到该值判和(60回合)，0表示关闭
    validate_invariants: bool = True    # 重放时每步后校验棋盘不变量
    max_history_length: int = 1000      # 允许的最大走法历史长度

    def validate(self):
        """检查配置取值，无效时抛出 ConfigurationError"""
        _check_types('rules', self, {
            'repetition_limit': int,
            'no_capture_ply_limit': int,
            'validate_invariants': bool,
            'max_history_length': int,
        })
        if self.repetition_limit < 0:
            raise ConfigurationError('rules', f"repetition_limit 不能为负: {self.repetition_limit}")
        if self.repetition_limit == 1:
            raise ConfigurationError('rules', "repetition_limit 为1时任何局面都会立即判和")
        if self.no_capture_ply_limit < 0:
            raise ConfigurationError('rules', f"no_capture_ply_limit 不能为负: {self.no_capture_ply_limit}")
        if self.max_history_length <= 0:
            raise ConfigurationError('rules', f"max_history_length 必须为正: {self.max_history_length}")


@dataclass
class LoggingConfig:
    """日志配置"""
    level: str = 'INFO'
    log_file: Optional[str] = None
    log_dir: str = 'logs'
    max_size: int = 10                  # MB
    backup_count: int = 5
    console_output: bool = True

    def validate(self):
        _check_types('logging', self, {
            'level': str,
            'log_dir': str,
            'max_size': int,
            'backup_count': int,
            'console_output': bool,
        })
        if self.log_file is not None and not isinstance(self.log_file, str):
            raise ConfigurationError('logging', f"log_file 应为 str 类型: {self.log_file!r}")
        if self.level.upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ConfigurationError('logging', f"未知的日志级别: {self.level}")
        if self.max_size <= 0 or self.backup_count < 0:
            raise ConfigurationError('logging', "日志文件大小和备份数量无效")


# 默认配置实例
DEFAULT_RULES_CONFIG = RulesConfig()
DEFAULT_LOGGING_CONFIG = LoggingConfig()
