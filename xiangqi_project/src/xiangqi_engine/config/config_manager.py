"""
配置管理器

负责加载、保存和管理规则配置与日志配置。
"""

import json
import logging
from dataclasses import asdict, fields, replace
from pathlib import Path
from typing import Any, Dict, Type, TypeVar

import yaml

from .engine_config import (
    RulesConfig, LoggingConfig,
    DEFAULT_RULES_CONFIG, DEFAULT_LOGGING_CONFIG,
)
from ..utils.exceptions import ConfigurationError

T = TypeVar('T')

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    配置管理器

    每种配置对应配置目录下的一个YAML文件；文件缺失或损坏时回退到默认配置。
    """

    def __init__(self, config_dir: str = "configs/xiangqi_engine"):
        """
        初始化配置管理器

        Args:
            config_dir: 配置文件目录
        """
        self.config_dir = Path(config_dir)

        self.config_files = {
            'rules': self.config_dir / 'rules_config.yaml',
            'logging': self.config_dir / 'logging_config.yaml',
        }

        self.default_configs = {
            'rules': DEFAULT_RULES_CONFIG,
            'logging': DEFAULT_LOGGING_CONFIG,
        }

        self.config_types = {
            'rules': RulesConfig,
            'logging': LoggingConfig,
        }

    def initialize_default_configs(self):
        """为缺失的配置文件写入默认配置"""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        for config_name, config_obj in self.default_configs.items():
            config_file = self.config_files[config_name]
            if not config_file.exists():
                self.save_config(config_name, config_obj)
                logger.info(f"创建默认配置文件: {config_file}")

    def load_config(self, config_name: str, config_class: Type[T]) -> T:
        """
        加载配置

        Args:
            config_name: 配置名称
            config_class: 配置类

        Returns:
            配置对象
        """
        config_file = self.config_files.get(config_name)
        if config_file is None:
            raise ConfigurationError(config_name, "未知的配置名称")

        default = replace(self.default_configs[config_name])
        if not config_file.exists():
            logger.debug(f"配置文件不存在: {config_file}，使用默认配置")
            return default

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                if config_file.suffix == '.yaml':
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            logger.warning(f"加载配置文件失败: {config_file}, 错误: {e}，使用默认配置")
            return default

        if not isinstance(data, dict):
            logger.warning(f"配置文件内容不是映射: {config_file}，使用默认配置")
            return default

        config = self._dict_to_dataclass(data, config_class)
        logger.info(f"成功加载配置: {config_file}")
        return config

    def save_config(self, config_name: str, config_obj: Any):
        """
        保存配置

        Args:
            config_name: 配置名称
            config_obj: 配置对象
        """
        config_file = self.config_files.get(config_name)
        if not config_file:
            raise ValueError(f"未知的配置名称: {config_name}")

        self.config_dir.mkdir(parents=True, exist_ok=True)
        data = asdict(config_obj)

        with open(config_file, 'w', encoding='utf-8') as f:
            if config_file.suffix == '.yaml':
                yaml.dump(data, f, default_flow_style=False,
                          allow_unicode=True, indent=2)
            else:
                json.dump(data, f, ensure_ascii=False, indent=2)

        logger.info(f"成功保存配置: {config_file}")

    def get_rules_config(self) -> RulesConfig:
        """获取规则配置"""
        return self.load_config('rules', RulesConfig)

    def get_logging_config(self) -> LoggingConfig:
        """获取日志配置"""
        return self.load_config('logging', LoggingConfig)

    def update_config(self, config_name: str, **kwargs):
        """
        更新配置

        Args:
            config_name: 配置名称
            **kwargs: 要更新的配置项
        """
        config_class = self.config_types[config_name]
        config = self.load_config(config_name, config_class)

        for key, value in kwargs.items():
            if hasattr(config, key):
                setattr(config, key, value)
            else:
                logger.warning(f"配置项不存在: {key}")

        config.validate()
        self.save_config(config_name, config)

    def reset_config(self, config_name: str):
        """重置配置为默认值"""
        self.save_config(config_name, self.default_configs[config_name])
        logger.info(f"配置已重置为默认值: {config_name}")

    def validate_config(self, config_name: str) -> bool:
        """
        验证配置的有效性

        Returns:
            bool: 配置是否有效
        """
        config_class = self.config_types[config_name]
        config = self.load_config(config_name, config_class)
        try:
            config.validate()
        except ConfigurationError as e:
            logger.error(f"配置验证失败: {e}")
            return False
        return True

    def get_all_configs(self) -> Dict[str, Any]:
        """获取所有配置"""
        return {
            name: self.load_config(name, config_class)
            for name, config_class in self.config_types.items()
        }

    def _dict_to_dataclass(self, data: Dict[str, Any], dataclass_type: Type[T]) -> T:
        """
        将字典转换为数据类对象，忽略未知字段

        Args:
            data: 字典数据
            dataclass_type: 数据类类型

        Returns:
            数据类对象
        """
        field_names = {f.name for f in fields(dataclass_type)}
        unknown = set(data) - field_names
        if unknown:
            logger.warning(f"忽略未知配置项: {sorted(unknown)}")

        filtered_data = {k: v for k, v in data.items() if k in field_names}
        return dataclass_type(**filtered_data)
