"""
基础测试模块

测试项目的基本功能和导入。
"""

from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent.parent


def test_project_import():
    """测试项目主模块是否可以正常导入"""
    try:
        import xiangqi_project
        assert xiangqi_project.__version__ == "0.1.0"
        assert xiangqi_project.__author__ == "Xiangqi Mail Team"
    except ImportError as e:
        pytest.fail(f"无法导入xiangqi_project模块: {e}")


def test_submodules_import():
    """测试子模块是否可以正常导入"""
    try:
        from xiangqi_project.src import xiangqi_engine
        assert xiangqi_engine.__version__ == "0.1.0"
        assert xiangqi_engine.GameReplayEngine is not None
    except ImportError as e:
        pytest.fail(f"无法导入子模块: {e}")


def test_config_files_exist():
    """测试默认配置文件是否存在"""
    config_dir = project_root / "configs" / "xiangqi_engine"
    assert (config_dir / "rules_config.yaml").exists(), "默认规则配置文件不存在"
    assert (config_dir / "logging_config.yaml").exists(), "默认日志配置文件不存在"


def test_main_entry_point():
    """测试主入口文件是否存在"""
    assert (project_root / "xiangqi_project" / "src" / "xiangqi_engine" / "main.py").exists()
