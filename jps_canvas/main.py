#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
程序入口：jps-canvas

    jps-canvas [--config PATH] [--width W] [--height H] [--diagonal | --no-diagonal]
               [--log-level LEVEL] [--headless OUT.png]
"""

import argparse
from pathlib import Path
from typing import List, Optional

import cv2
import yaml
from loguru import logger

from jps_canvas.common.exceptions import ConfigurationError, OracleUnavailableError
from jps_canvas.config import CanvasConfig, load_config
from jps_canvas.service.canvas_session import CanvasSession
from jps_canvas.utils.global_path import GetConfigPath, GetLogDir
from jps_canvas.utils.logger import SetupLogger


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="JPS Canvas - 栅格寻路交互画布")
    parser.add_argument("--config", type=str, default=None,
                        help="配置文件路径（默认 config/jps_canvas.yaml）")
    parser.add_argument("--width", type=float, default=None, help="初始栅格宽度")
    parser.add_argument("--height", type=float, default=None, help="初始栅格高度")
    parser.add_argument("--diagonal", action=argparse.BooleanOptionalAction, default=None,
                        help="是否允许斜向移动")
    parser.add_argument("--log-level", type=str, default=None, help="日志级别")
    parser.add_argument("--headless", type=str, default=None, metavar="OUT.png",
                        help="不打开窗口，把初始状态渲染为 PNG 后退出")
    return parser


def _load(config_arg: Optional[str]) -> CanvasConfig:
    if config_arg is not None:
        return load_config(Path(config_arg))

    default_path = GetConfigPath()
    if default_path.exists():
        return load_config(default_path)

    logger.warning(f"默认配置文件不存在，使用内置默认值: {default_path}")
    config = CanvasConfig()
    config.log.directory = str(GetLogDir())
    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        config = _load(args.config)
    except (FileNotFoundError, yaml.YAMLError, ConfigurationError) as e:
        logger.error(f"配置加载失败: {e}")
        return 2

    level = (args.log_level or config.log.level).upper()
    SetupLogger(log_dir=config.log.directory, level=level)

    if args.diagonal is not None:
        config.path_planning.allow_diagonal = args.diagonal

    try:
        session = CanvasSession(config)
    except OracleUnavailableError as e:
        logger.critical(f"寻路引擎不可用，程序退出: {e}")
        return 3

    if args.width is not None or args.height is not None:
        model = session.model
        session.set_grid_size(
            args.width if args.width is not None else model.width,
            args.height if args.height is not None else model.height,
        )

    if args.headless:
        frame = session.last_frame
        if not cv2.imwrite(args.headless, frame.image):
            logger.error(f"写入图像失败: {args.headless}")
            return 1
        logger.info(f"已输出 {frame.raster_size[0]}x{frame.raster_size[1]} 图像: {args.headless}, "
                    f"路径跳点 {len(session.path)} 个")
        return 0

    # 延迟导入，headless 模式不依赖图形环境
    from jps_canvas.ui.dpg_canvas_view import DpgCanvasView

    try:
        view = DpgCanvasView(
            session,
            title=config.ui.title,
            window_size=config.ui.window_size,
            panel_width=config.ui.panel_width,
        )
        view.run()
        return 0
    except Exception as e:
        logger.exception(f"Main program error: {e}")
        return -1


if __name__ == "__main__":
    raise SystemExit(main())
