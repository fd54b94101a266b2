"""
故事板对象（Sprite / Animation）及其命令树
"""

import os
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Union

from ..utils.types import FilePath, Position
from ..utils.errors import ErrorKind, ParseError
from ..utils.lines import FieldReader
from ..utils.numbers import format_decimal
from ..utils.versioning import LATEST_VERSION
from .commands import Command
from .types import Layer, LoopType, Origin

INDENT_CHARS = " _"


def indentation_of(line: str) -> int:
    """行首空格或下划线的数量"""
    return len(line) - len(line.lstrip(INDENT_CHARS))


@dataclass
class Sprite:
    filepath: FilePath

    HEADER = "Sprite"


@dataclass
class Animation:
    filepath: FilePath
    frame_count: int = 1
    frame_delay: Decimal = Decimal(0)
    # None 表示原文没有写，按 LoopForever 处理
    loop_type: Optional[LoopType] = None

    HEADER = "Animation"

    def frame_file_names(self) -> List[str]:
        """每一帧的文件名：name0.png, name1.png, ..."""
        base, ext = os.path.splitext(self.filepath.path)
        return [f"{base}{i}{ext}" for i in range(self.frame_count)]

    def effective_loop_type(self) -> LoopType:
        return self.loop_type or LoopType.default()


ObjectType = Union[Sprite, Animation]

OBJECT_HEADERS = (Sprite.HEADER, Animation.HEADER)


class CommandTree:
    """可以挂载命令的事件，子类需提供 commands 列表"""

    commands: List[Command]

    def push_cmd(self, cmd: Command, indent: int):
        """
        按缩进把命令挂到命令树上

        indent 为 1 时作为顶层命令；更深的缩进逐层进入最后一个 Loop/Trigger 的子命令
        """
        if indent < 1:
            raise ParseError(ErrorKind.INVALID_INDENTATION, f"expected 1, got {indent}")

        commands = self.commands
        for depth in range(1, indent):
            if not commands or not commands[-1].is_block():
                raise ParseError(ErrorKind.INVALID_INDENTATION, f"expected {depth}, got {indent}")
            commands = commands[-1].commands
        commands.append(cmd)

    def render_command_lines(self, version: int = LATEST_VERSION) -> List[str]:
        """按深度缩进的命令行"""
        lines: List[str] = []
        _render_commands(self.commands, 1, version, lines)
        return lines


@dataclass
class StoryboardObject(CommandTree):
    """故事板对象，commands 为顶层命令"""
    layer: Layer
    origin: Origin
    position: Position
    object_type: ObjectType
    commands: List[Command] = field(default_factory=list)

    @classmethod
    def parse(cls, line: str, version: int = LATEST_VERSION) -> 'StoryboardObject':
        """解析对象头，命令由 push_cmd 追加"""
        reader = FieldReader(line)
        header = reader.next(ErrorKind.UNKNOWN_EVENT_TYPE).strip()
        if header not in OBJECT_HEADERS:
            raise ParseError(ErrorKind.UNKNOWN_EVENT_TYPE, header)

        layer = Layer.parse(reader.next(ErrorKind.MISSING_LAYER), version, kind=ErrorKind.INVALID_LAYER)
        origin = Origin.parse(reader.next(ErrorKind.MISSING_ORIGIN), version, kind=ErrorKind.INVALID_ORIGIN)
        filepath = FilePath.parse(reader.next(ErrorKind.MISSING_FILE_NAME))
        position = Position(
            reader.next_decimal(ErrorKind.MISSING_X, ErrorKind.INVALID_X),
            reader.next_decimal(ErrorKind.MISSING_Y, ErrorKind.INVALID_Y),
        )

        if header == Sprite.HEADER:
            return cls(layer, origin, position, Sprite(filepath))

        frame_count = reader.next_int(ErrorKind.MISSING_FRAME_COUNT, ErrorKind.INVALID_FRAME_COUNT, minimum=0)
        frame_delay = reader.next_decimal(ErrorKind.MISSING_FRAME_DELAY, ErrorKind.INVALID_FRAME_DELAY)
        loop_type = None
        if reader.has_more():
            loop_type = LoopType.parse(reader.rest(ErrorKind.INVALID_LOOP_TYPE), version,
                                       kind=ErrorKind.INVALID_LOOP_TYPE)
        return cls(layer, origin, position, Animation(filepath, frame_count, frame_delay, loop_type))

    def render_header(self, version: int = LATEST_VERSION) -> str:
        obj = self.object_type
        fields = [obj.HEADER, self.layer.render(version), self.origin.render(version),
                  obj.filepath.render(), self.position.render()]
        if isinstance(obj, Animation):
            fields += [str(obj.frame_count), format_decimal(obj.frame_delay)]
            if obj.loop_type is not None:
                fields.append(obj.loop_type.render(version))
        return ','.join(fields)

    def render_lines(self, version: int = LATEST_VERSION) -> List[str]:
        """对象头以及按深度缩进的命令行"""
        return [self.render_header(version)] + self.render_command_lines(version)

    def render(self, version: int = LATEST_VERSION) -> Optional[str]:
        return '\n'.join(self.render_lines(version))


def _render_commands(commands: List[Command], depth: int, version: int, lines: List[str]):
    for cmd in commands:
        lines.append(' ' * depth + cmd.render(version))
        if cmd.commands:
            _render_commands(cmd.commands, depth + 1, version, lines)


def parse_command_line(line: str, version: int = LATEST_VERSION) -> Command:
    """便捷函数：解析带缩进的命令行"""
    return Command.parse(line[indentation_of(line):], version)

