#!/usr/bin/env python3
"""
中国象棋规则引擎命令行入口

走法历史以JSON数组传入，例如 '["h2e2", "h9g7"]'。
"""

import json
import sys
from typing import List, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .config import ConfigManager
from .rules_engine import GameReplayEngine, GameState, GameStatus, format_chinese, parse_move
from .utils import XiangqiError, setup_logger

console = Console()

STATE_STYLES = {
    GameState.IN_PROGRESS: "green",
    GameState.CHECK: "yellow",
    GameState.CHECKMATE: "bold red",
    GameState.STALEMATE: "bold magenta",
    GameState.DRAW: "cyan",
}


def _parse_history(history_json: str) -> List[str]:
    try:
        history = json.loads(history_json)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"不是有效的JSON: {e}", param_hint="HISTORY_JSON")
    if not isinstance(history, list):
        raise click.BadParameter("走法历史必须是JSON数组", param_hint="HISTORY_JSON")
    return history


def _format_status(status: GameStatus) -> str:
    style = STATE_STYLES[status.state]
    return f"[{style}]{status}[/{style}] {status.reason}".rstrip()


def _run(action):
    """执行命令，把引擎异常转换为错误输出和退出码"""
    try:
        return action()
    except XiangqiError as e:
        console.print(f"[red]{escape(str(e))}[/red]", soft_wrap=True)
        sys.exit(2)


@click.group()
@click.version_option(version=__version__, prog_name="xiangqi")
@click.option('--debug', is_flag=True, help='启用调试日志')
@click.option('--config-dir', type=click.Path(file_okay=False), default=None,
              help='配置文件目录')
@click.option('--fen', type=str, default=None, help='初始局面(FEN)，默认标准开局')
@click.pass_context
def cli(ctx: click.Context, debug: bool, config_dir: Optional[str], fen: Optional[str]):
    """中国象棋规则引擎 - 走法判定与局面重放"""
    manager = ConfigManager(config_dir) if config_dir else ConfigManager()
    ctx.obj = {'manager': manager, 'fen': fen}
    # 配置文件损坏时仍要能重置
    if ctx.invoked_subcommand == 'reset-config':
        return

    rules_config = manager.get_rules_config()
    logging_config = manager.get_logging_config()
    _run(logging_config.validate)

    setup_logger(
        level='DEBUG' if debug else logging_config.level,
        log_file=logging_config.log_file,
        log_dir=logging_config.log_dir,
        max_size=logging_config.max_size,
        backup_count=logging_config.backup_count,
        console_output=logging_config.console_output,
    )

    ctx.obj['engine'] = _run(lambda: GameReplayEngine(rules_config))


@cli.command()
@click.argument('history_json')
@click.argument('move')
@click.pass_obj
def move(obj: dict, history_json: str, move: str):
    """在走法历史后追加一步 MOVE"""
    engine: GameReplayEngine = obj['engine']
    history = _parse_history(history_json)

    outcome = _run(lambda: engine.apply_move(history, move, initial_fen=obj['fen']))
    if not outcome.accepted:
        console.print(f"[red]走法被拒绝:[/red] {escape(str(outcome.error))}", soft_wrap=True)
        sys.exit(1)

    console.print(json.dumps(list(outcome.history)), markup=False, soft_wrap=True)
    console.print(f"状态: {_format_status(outcome.status)}")


@cli.command()
@click.argument('history_json')
@click.pass_obj
def status(obj: dict, history_json: str):
    """显示对局状态与走棋方"""
    engine: GameReplayEngine = obj['engine']
    history = _parse_history(history_json)

    game_status = _run(lambda: engine.status_of(history, initial_fen=obj['fen']))
    side = engine.side_to_move(history, initial_fen=obj['fen'])
    console.print(f"状态: {_format_status(game_status)}")
    console.print(f"走棋方: {side.chinese_name}")


@cli.command()
@click.argument('history_json')
@click.pass_obj
def board(obj: dict, history_json: str):
    """显示当前局面"""
    engine: GameReplayEngine = obj['engine']
    history = _parse_history(history_json)

    current = _run(lambda: engine.board_of(history, initial_fen=obj['fen']))
    record = _run(lambda: engine.chinese_record(history, initial_fen=obj['fen']))
    console.print(Panel(current.to_visual_string(), title="中国象棋", border_style="blue"))
    console.print(f"FEN: {current.to_fen()}", markup=False, soft_wrap=True)
    if record:
        console.print("棋谱: " + " ".join(record), soft_wrap=True)


@cli.command()
@click.argument('history_json')
@click.pass_obj
def moves(obj: dict, history_json: str):
    """列出当前走棋方的所有合法走法"""
    engine: GameReplayEngine = obj['engine']
    history = _parse_history(history_json)

    legal = _run(lambda: engine.legal_moves(history, initial_fen=obj['fen']))
    console.print(f"合法走法: {len(legal)}")
    if not legal:
        return

    table = Table()
    table.add_column("走法")
    table.add_column("中文记法")
    current = _run(lambda: engine.board_of(history, initial_fen=obj['fen']))
    for notation in legal:
        table.add_row(notation, format_chinese(parse_move(notation), current))
    console.print(table)


@cli.command('reset-config')
@click.argument('config_name', type=click.Choice(['rules', 'logging', 'all']), default='all')
@click.pass_obj
def reset_config(obj: dict, config_name: str):
    """把配置文件重置为默认值"""
    manager: ConfigManager = obj['manager']
    names = list(manager.config_types) if config_name == 'all' else [config_name]
    for name in names:
        manager.reset_config(name)
        console.print(f"已重置: {manager.config_files[name]}", markup=False, soft_wrap=True)


def main():
    cli()


if __name__ == "__main__":
    main()
