"""
.osb 故事板文件
只包含 [Variables] 和 [Events] 两个分段，v14 之前不支持
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..utils.errors import ErrorKind, ParseError
from ..utils.lines import BOM, render_section, split_lines, split_sections
from ..utils.versioning import LATEST_VERSION
from .events import Events
from .variables import Variables

logger = logging.getLogger(__name__)

OSB_MIN_VERSION = 14
VARIABLES_SECTION = "Variables"
EVENTS_SECTION = "Events"
OSB_SECTIONS = (VARIABLES_SECTION, EVENTS_SECTION)


@dataclass
class Osb:
    """.osb 文件内容"""
    variables: Optional[Variables] = None
    events: Events = field(default_factory=Events)
    # 第一个分段之前的空行数
    leading_blank: int = field(default=0, compare=False, repr=False)
    # 分段名 -> 分段之后的空行数，同时记录分段顺序
    section_spacing: Dict[str, int] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def parse(cls, text: str, version: int = LATEST_VERSION) -> Optional['Osb']:
        """解析 .osb 文本，错误行号相对于整个文本"""
        if version < OSB_MIN_VERSION:
            logger.warning(f"v{version} 不支持 .osb 文件，已忽略")
            return None

        lines = split_lines(text.replace(BOM, ''))
        leading_blank, sections = split_sections(lines)

        blocks = {}
        for section in sections:
            if section.name in blocks:
                raise ParseError(ErrorKind.DUPLICATE_SECTIONS, section.name, section.header_index)
            if section.name not in OSB_SECTIONS:
                raise ParseError(ErrorKind.UNKNOWN_SECTION_NAME, section.name, section.header_index)
            blocks[section.name] = section

        osb = cls(leading_blank=leading_blank,
                  section_spacing={s.name: s.trailing_blank for s in sections})

        # 变量要先于事件解析
        if VARIABLES_SECTION in blocks:
            block = blocks[VARIABLES_SECTION]
            try:
                osb.variables = Variables.parse(block.text, version)
            except ParseError as e:
                raise e.shifted(block.body_start)

        if EVENTS_SECTION in blocks:
            block = blocks[EVENTS_SECTION]
            try:
                osb.events = Events.parse(block.text, version, osb.variables)
            except ParseError as e:
                raise e.shifted(block.body_start)

        return osb

    def render(self, version: int = LATEST_VERSION, newline: str = "\n") -> Optional[str]:
        if version < OSB_MIN_VERSION:
            return None

        order: List[str] = list(self.section_spacing) or [
            name for name in OSB_SECTIONS if name != VARIABLES_SECTION or self.variables is not None
        ]
        lines = [""] * self.leading_blank
        for name in order:
            if name == VARIABLES_SECTION:
                body = self.variables.render(version) if self.variables is not None else ""
            else:
                body = self.events.render(version, self.variables)
            lines.extend(render_section(name, body, self.section_spacing.get(name, 1)))
        return newline.join(lines)

    @classmethod
    def default(cls, version: int = LATEST_VERSION) -> Optional['Osb']:
        if version < OSB_MIN_VERSION:
            return None
        return cls()
