"""
解析器配置
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .versioning import LATEST_VERSION, MIN_VERSION


@dataclass
class ParserConfig:
    """解析/输出配置"""
    # Beatmap.default() 未指定版本时使用
    default_version: int = LATEST_VERSION

    # 输出换行符
    newline: str = "\n"

    # 新建谱面时分段之间的空行数
    section_spacing: int = 1

    # 日志级别
    log_level: str = "WARNING"

    def __post_init__(self):
        if not MIN_VERSION <= self.default_version <= LATEST_VERSION:
            raise ValueError(f"default_version 必须在 {MIN_VERSION}-{LATEST_VERSION} 之间: {self.default_version}")
        if self.newline not in ("\n", "\r\n"):
            raise ValueError(f"newline 只能是 \\n 或 \\r\\n: {self.newline!r}")
        if self.section_spacing < 0:
            raise ValueError(f"section_spacing 不能为负数: {self.section_spacing}")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'ParserConfig':
        """从字典创建，缺省的键使用默认值"""
        data = data or {}
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"未知的配置项: {', '.join(sorted(unknown))}")
        return cls(**data)


def load_config(path: Union[str, Path]) -> ParserConfig:
    """从 yaml 文件加载配置"""
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    # 允许把配置放在 parser 节点下
    if isinstance(data, dict) and 'parser' in data:
        data = data['parser']
    return ParserConfig.from_dict(data)


def configure_logging(config: Optional[ParserConfig] = None):
    """配置日志输出"""
    config = config or ParserConfig()
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.WARNING),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )
