"""
.osu 谱面文件

osu file format v<N>
[General] / [Editor] / [Metadata] / [Difficulty] / [Events] / [TimingPoints] / [Colours] / [HitObjects]

解析错误的行号相对于整个文本（0 起始），显示时加 1
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..storyboard.events import Events
from ..storyboard.osb import Osb
from ..utils.config import ParserConfig
from ..utils.errors import ErrorKind, ParseError
from ..utils.lines import BOM, is_blank, render_section, split_lines, split_sections
from ..utils.numbers import parse_int
from ..utils.versioning import LATEST_VERSION, MIN_VERSION, check_version
from .colours import Colours
from .difficulty import Difficulty
from .editor import Editor
from .general import General
from .hit_objects import HitObjects
from .metadata import Metadata
from .timing_points import TimingPoints

logger = logging.getLogger(__name__)

VERSION_BANNER = "osu file format v"

# 分段名 -> (属性名, 类型)，顺序即默认输出顺序
SECTIONS: Dict[str, Tuple[str, type]] = {
    'General': ('general', General),
    'Editor': ('editor', Editor),
    'Metadata': ('metadata', Metadata),
    'Difficulty': ('difficulty', Difficulty),
    'Events': ('events', Events),
    'TimingPoints': ('timing_points', TimingPoints),
    'Colours': ('colours', Colours),
    'HitObjects': ('hit_objects', HitObjects),
}


@dataclass
class Beatmap:
    """谱面，None 表示分段不存在"""
    version: int = LATEST_VERSION
    general: Optional[General] = None
    editor: Optional[Editor] = None
    metadata: Optional[Metadata] = None
    difficulty: Optional[Difficulty] = None
    events: Optional[Events] = None
    timing_points: Optional[TimingPoints] = None
    colours: Optional[Colours] = None
    hit_objects: Optional[HitObjects] = None

    # append_osb 合并进来的 .osb，其事件同时存在于 events 中
    osb: Optional[Osb] = field(default=None, compare=False, repr=False)
    # 版本行之后的空行数
    banner_spacing: int = field(default=0, compare=False, repr=False)
    # 分段名 -> 分段之后的空行数，同时记录分段顺序
    section_spacing: Dict[str, int] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def parse(cls, text: str) -> 'Beatmap':
        """
        解析 .osu 文本

        Raises:
            ParseError: 第一个出错的位置，line_index 相对于整个文本
        """
        lines = split_lines(text.replace(BOM, ''))
        banner_index, version = cls._parse_banner(lines)
        leading_blank, sections = split_sections(lines, banner_index + 1)

        beatmap = cls(version=version, banner_spacing=leading_blank)
        for section in sections:
            if section.name in beatmap.section_spacing:
                raise ParseError(ErrorKind.DUPLICATE_SECTIONS, section.name, section.header_index)
            if section.name not in SECTIONS:
                raise ParseError(ErrorKind.UNKNOWN_SECTION_NAME, section.name, section.header_index)
            beatmap.section_spacing[section.name] = section.trailing_blank

            attr, section_cls = SECTIONS[section.name]
            try:
                value = section_cls.parse(section.text, version)
            except ParseError as e:
                raise e.shifted(section.body_start)

            if value is None:
                logger.warning(f"v{version} 不支持 [{section.name}] 分段，已忽略")
                continue
            setattr(beatmap, attr, value)
            logger.debug(f"解析分段 [{section.name}]，{len(section.body)} 行")

        return beatmap

    @staticmethod
    def _parse_banner(lines: List[str]) -> Tuple[int, int]:
        """返回版本行的行号和版本号"""
        for index, line in enumerate(lines):
            if is_blank(line):
                continue
            stripped = line.strip()
            if not stripped.startswith(VERSION_BANNER):
                raise ParseError(ErrorKind.NO_FILE_VERSION, stripped, index)
            try:
                version = parse_int(stripped[len(VERSION_BANNER):], ErrorKind.INVALID_FILE_VERSION,
                                    minimum=MIN_VERSION, maximum=LATEST_VERSION)
            except ParseError as e:
                raise e.shifted(index)
            return index, version
        raise ParseError(ErrorKind.NO_FILE_VERSION)

    @classmethod
    def default(cls, version: Optional[int] = None, config: Optional[ParserConfig] = None) -> 'Beatmap':
        """各分段使用该版本的默认值"""
        config = config or ParserConfig()
        version = check_version(config.default_version if version is None else version)

        beatmap = cls(version=version, banner_spacing=config.section_spacing)
        for name, (attr, section_cls) in SECTIONS.items():
            value = section_cls.default(version)
            if value is None:
                continue
            setattr(beatmap, attr, value)
            beatmap.section_spacing[name] = config.section_spacing
        return beatmap

    def _section_order(self) -> List[str]:
        order = list(self.section_spacing)
        order += [name for name in SECTIONS if name not in self.section_spacing]
        return order

    def _without_osb_events(self) -> List:
        osb_events = {id(event) for event in self.osb.events.events}
        return [event for event in self.events.events if id(event) not in osb_events]

    def _osu_events(self) -> Optional[Events]:
        """去掉由 .osb 合并进来的事件；原文没有 [Events] 且只剩 .osb 事件时返回 None"""
        if self.events is None or self.osb is None:
            return self.events
        events = Events(self._without_osb_events())
        if not events.events and 'Events' not in self.section_spacing:
            return None
        return events

    def render(self, config: Optional[ParserConfig] = None) -> str:
        """输出 .osu 文本"""
        config = config or ParserConfig()
        lines = [f"{VERSION_BANNER}{self.version}"] + [""] * self.banner_spacing

        for name in self._section_order():
            attr, _ = SECTIONS[name]
            value = self._osu_events() if attr == 'events' else getattr(self, attr)
            if value is None:
                continue
            body = value.render(self.version)
            if body is None:
                logger.warning(f"v{self.version} 不支持 [{name}] 分段，已省略")
                continue
            lines.extend(render_section(name, body, self.section_spacing.get(name, config.section_spacing)))

        return config.newline.join(lines)

    def append_osb(self, text: str):
        """
        合并 .osb 文件的事件

        变量在解析时已替换到事件行中；v14 之前不支持 .osb，会被忽略。
        再次调用时替换掉上一次合并的事件
        """
        osb = Osb.parse(text, self.version)
        if osb is None:
            return
        if self.osb is not None and self.events is not None:
            self.events.events = self._without_osb_events()
        self.osb = osb
        if self.events is None:
            self.events = Events()
        self.events.events.extend(osb.events.events)
        logger.debug(f"合并了 {len(osb.events.events)} 个 .osb 事件")

    def render_osb(self, config: Optional[ParserConfig] = None) -> Optional[str]:
        """输出 .osb 文本，v14 之前返回 None"""
        config = config or ParserConfig()
        osb = self.osb if self.osb is not None else Osb.default(self.version)
        if osb is None:
            return None
        return osb.render(self.version, config.newline)


def parse_beatmap(text: str) -> Beatmap:
    """便捷函数：解析 .osu 文本"""
    return Beatmap.parse(text)


def render_beatmap(beatmap: Beatmap, config: Optional[ParserConfig] = None) -> str:
    """便捷函数：输出 .osu 文本"""
    return beatmap.render(config)


if __name__ == "__main__":
    # 测试解析器
    test_beatmap = """osu file format v14

[General]
AudioFilename: audio.mp3
Mode: 0

[Metadata]
Title:Test Song
Version:Normal

[Events]
0,0,"bg.jpg",0,0
Sprite,Pass,Centre,"a.png",320,240
 F,0,-28,,1
 L,500,10
  M,3,100,120,140,180,200,200

[TimingPoints]
350,333.333333333333,4,2,1,60,1,0

[HitObjects]
221,350,9780,1,0,0:0:0:0:
256,192,33598,12,0,431279,0:0:0:0:
"""
    beatmap = parse_beatmap(test_beatmap)
    print(f"Version: {beatmap.version}")
    print(f"Title: {beatmap.metadata.title}")
    print(f"Events: {len(beatmap.events.events)}")
    print(f"Hit objects: {len(beatmap.hit_objects.hit_objects)}")
    print(render_beatmap(beatmap))
