#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
配置加载器

从YAML文件加载配置并使用Pydantic验证。
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger
from pydantic import ValidationError

from jps_canvas.common.exceptions import ConfigurationError
from jps_canvas.config.models import CanvasConfig


def load_config(config_path: Path, base_dir: Optional[Path] = None) -> CanvasConfig:
    """
    从YAML文件加载配置

    Args:
        config_path: 配置文件路径
        base_dir: 用于解析相对路径的目录，默认取配置文件所在目录
                  （若该目录名为 config 则取其上一级）

    Returns:
        验证后的CanvasConfig对象

    Raises:
        FileNotFoundError: 配置文件不存在
        yaml.YAMLError: YAML格式错误
        ConfigurationError: 配置为空或验证失败
    """
    config_path = Path(config_path)
    if base_dir is None:
        default_base = config_path.resolve().parent
        if default_base.name.lower() == "config":
            default_base = default_base.parent
        base_dir = default_base
    else:
        base_dir = Path(base_dir).resolve()

    # 检查文件是否存在
    if not config_path.exists():
        error_msg = f"配置文件不存在: {config_path}"
        logger.error(error_msg)
        raise FileNotFoundError(error_msg)

    # 加载YAML文件
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        error_msg = f"YAML格式错误: {e}"
        logger.error(error_msg)
        raise yaml.YAMLError(error_msg) from e

    if raw_config is None:
        error_msg = "配置文件为空"
        logger.error(error_msg)
        raise ConfigurationError(error_msg)

    if not isinstance(raw_config, dict):
        error_msg = f"配置文件顶层必须是映射: {type(raw_config).__name__}"
        logger.error(error_msg)
        raise ConfigurationError(error_msg)

    # 解析相对路径
    _apply_relative_paths(raw_config, base_dir)

    # 使用Pydantic验证配置
    try:
        config = CanvasConfig(**raw_config)
    except ValidationError as e:
        logger.error(f"配置验证失败: {config_path}")
        # 输出详细的验证错误信息
        for error in e.errors():
            field_path = " -> ".join(str(loc) for loc in error['loc'])
            logger.error(f"  {field_path}: {error['msg']}")
        raise ConfigurationError(f"配置验证失败:\n{e}") from e

    logger.info(f"配置加载成功: {config_path}")
    return config


def _resolve_path(value: Optional[str], base_dir: Path) -> Optional[str]:
    """解析相对路径为绝对路径"""
    if value is None:
        return None
    path = Path(value)
    if not path.is_absolute():
        path = base_dir / path
    return str(path.resolve())


def _apply_relative_paths(raw_config: Dict[str, Any], base_dir: Path) -> None:
    """将配置中的相对路径字段转换为绝对路径"""
    log_cfg = raw_config.get('log')
    if isinstance(log_cfg, dict) and log_cfg.get('directory'):
        log_cfg['directory'] = _resolve_path(log_cfg['directory'], base_dir)
