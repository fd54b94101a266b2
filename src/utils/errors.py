"""
错误定义
所有解析错误都使用 ParseError 抛出，携带错误类型和 0 起始的行号
"""

from enum import Enum
from typing import Optional


class ErrorCategory(Enum):
    """错误分类"""
    STRUCTURAL = "structural"
    SYNTACTIC = "syntactic"
    LEXICAL = "lexical"
    VERSION = "version"
    STORYBOARD = "storyboard"


class ErrorKind(Enum):
    """错误类型，值为错误信息"""
    # 文件结构
    NO_FILE_VERSION = "No file version defined, expected `osu file format v..` at the first line"
    INVALID_FILE_VERSION = "Invalid file version, expected a version between 3 and 14"
    DUPLICATE_SECTIONS = "There are multiple sections defined as the same name"
    UNKNOWN_SECTION_NAME = "There is an unknown section name"
    SECTION_NAME_NO_CLOSE_BRACKET = "The closing bracket of the section is missing"
    DUPLICATE_FIELD = "The field is defined more than once"
    INVALID_KEY = "Unknown key"
    MISSING_COLON = "Missing the `:` separator between the key and the value"

    # 语法
    UNKNOWN_VARIANT = "Unknown variant"
    UNKNOWN_OBJ_TYPE = "Unknown hitobject type"
    UNKNOWN_EVENT_TYPE = "Unknown event type"
    UNKNOWN_COMMAND_TYPE = "Unknown command type"
    UNKNOWN_COLOUR_TYPE = "Unknown colour type"
    UNKNOWN_TRIGGER_TYPE = "Unknown trigger type"
    UNKNOWN_HIT_SOUND_TYPE = "Unknown hitsound type in the trigger type"
    TOO_MANY_HIT_SOUND_FIELDS = "Too many hitsound fields in the trigger type"
    MISSING_VARIABLE_HEADER = "Missing the header `$`"
    MISSING_EQUALS = "Missing `=` for assignment"
    INVALID_COMBO_COUNT = "Invalid combo count"

    # 数值
    INVALID_INTEGER = "Tried parsing a str as an integer"
    INVALID_DECIMAL = "Tried parsing a str as a decimal"
    INVALID_BOOL = "Invalid boolean, expected `0` or `1`"

    # 颜色
    MISSING_RED = "Missing the red field"
    INVALID_RED = "Invalid red value"
    MISSING_GREEN = "Missing the green field"
    INVALID_GREEN = "Invalid green value"
    MISSING_BLUE = "Missing the blue field"
    INVALID_BLUE = "Invalid blue value"

    # 物件与时间点
    MISSING_X = "Missing the x field"
    INVALID_X = "Invalid x value"
    MISSING_Y = "Missing the y field"
    INVALID_Y = "Invalid y value"
    MISSING_TIME = "Missing the time field"
    INVALID_TIME = "Invalid time value"
    MISSING_OBJ_TYPE = "Missing the object type field"
    INVALID_OBJ_TYPE = "Invalid object type value"
    MISSING_HITSOUND = "Missing the hitsound field"
    INVALID_HITSOUND = "Invalid hitsound value"
    INVALID_HIT_SAMPLE = "Invalid hitsample"
    INVALID_COMBO_SKIP_COUNT = "Combo skip count must fit in 3 bits"
    MISSING_CURVE_TYPE = "Missing the curve type field"
    INVALID_CURVE_TYPE = "Invalid curve type"
    INVALID_CURVE_POINT = "Invalid curve point"
    MISSING_SLIDES_COUNT = "Missing the slides count field"
    INVALID_SLIDES_COUNT = "Invalid slides count"
    MISSING_LENGTH = "Missing the length field"
    INVALID_LENGTH = "Invalid length"
    INVALID_EDGE_SOUND = "Invalid edge sound"
    INVALID_EDGE_SET = "Invalid edge set"
    MISSING_BEAT_LENGTH = "Missing the beat length field"
    INVALID_METER = "Invalid meter value"
    INVALID_SAMPLE_SET = "Invalid sample set"
    INVALID_SAMPLE_INDEX = "Invalid sample index"
    INVALID_VOLUME = "Invalid volume"
    INVALID_UNINHERITED = "Invalid uninherited value"
    INVALID_EFFECTS = "Invalid effects value"

    # 事件
    EVENT_NOT_IN_VERSION = "The event doesn't exist in this version"
    MISSING_START_TIME = "Missing the StartTime field"
    INVALID_START_TIME = "Invalid start time"
    MISSING_END_TIME = "Missing the EndTime field"
    INVALID_END_TIME = "Invalid end time"
    MISSING_FILE_NAME = "Missing the file name field"
    MISSING_LAYER = "Missing the layer field"
    INVALID_LAYER = "Invalid layer"
    MISSING_ORIGIN = "Missing the origin field"
    INVALID_ORIGIN = "Invalid origin"
    MISSING_FRAME_COUNT = "Missing the frame count field"
    INVALID_FRAME_COUNT = "Invalid frame count"
    MISSING_FRAME_DELAY = "Missing the frame delay field"
    INVALID_FRAME_DELAY = "Invalid frame delay"
    INVALID_LOOP_TYPE = "Invalid loop type"

    # 故事板命令
    MISSING_EASING = "Missing the Easing field"
    INVALID_EASING = "Invalid easing"
    MISSING_COMMAND_FIELDS = "Missing command fields"
    INVALID_COMMAND_FIELD = "Invalid command field"
    INVALID_CONTINUING_FIELDS = "Invalid continuing fields"
    INVALID_SECOND_FIELD_OPTION = "Only the last continuing field can omit its second value"
    INVALID_COLOUR_FIELD_OPTION = "Only the last continuing colour can omit its green or blue value"
    MISSING_LOOP_COUNT = "Missing the loop count field"
    INVALID_LOOP_COUNT = "Invalid loop count"
    MISSING_TRIGGER_TYPE = "Missing the trigger type field"
    INVALID_GROUP_NUMBER = "Invalid group number"
    STORYBOARD_CMD_WITH_NO_SPRITE = "Storyboard command found without a storyboard object"
    INVALID_INDENTATION = "Invalid indentation"

    @property
    def category(self) -> ErrorCategory:
        """错误所属分类"""
        if self in _STRUCTURAL:
            return ErrorCategory.STRUCTURAL
        if self in _STORYBOARD:
            return ErrorCategory.STORYBOARD
        if self is ErrorKind.EVENT_NOT_IN_VERSION or self is ErrorKind.INVALID_FILE_VERSION:
            return ErrorCategory.VERSION
        if self is ErrorKind.INVALID_KEY:
            return ErrorCategory.SYNTACTIC
        if self.name.startswith("INVALID_"):
            return ErrorCategory.LEXICAL
        return ErrorCategory.SYNTACTIC


_STRUCTURAL = frozenset({
    ErrorKind.NO_FILE_VERSION,
    ErrorKind.DUPLICATE_SECTIONS,
    ErrorKind.UNKNOWN_SECTION_NAME,
    ErrorKind.SECTION_NAME_NO_CLOSE_BRACKET,
    ErrorKind.DUPLICATE_FIELD,
})

_STORYBOARD = frozenset({
    ErrorKind.STORYBOARD_CMD_WITH_NO_SPRITE,
    ErrorKind.INVALID_INDENTATION,
})


class ParseError(ValueError):
    """解析错误"""

    def __init__(self, kind: ErrorKind, detail: Optional[str] = None, line_index: int = 0):
        self.kind = kind
        self.detail = detail
        self.line_index = line_index
        super().__init__(str(self))

    @property
    def message(self) -> str:
        if self.detail:
            return f"{self.kind.value}: {self.detail}"
        return self.kind.value

    def shifted(self, offset: int) -> 'ParseError':
        """行号加上外层的起始行"""
        self.line_index += offset
        self.args = (str(self),)
        return self

    def display_with_line(self, text: str) -> str:
        """带出错行内容的错误信息"""
        return f"Line {self.line_index + 1}: {self._source_line(text)}, {self.message}"

    def caret(self, text: str) -> str:
        """出错行及其下方的 ^ 标记"""
        line = self._source_line(text)
        indent = len(line) - len(line.lstrip(" _"))
        return f"{line}\n{' ' * indent}^"

    def _source_line(self, text: str) -> str:
        lines = text.splitlines()
        if 0 <= self.line_index < len(lines):
            return lines[self.line_index]
        return ""

    def __str__(self) -> str:
        return f"Line {self.line_index + 1}, {self.message}"

    def __repr__(self) -> str:
        return f"ParseError({self.kind.name}, detail={self.detail!r}, line_index={self.line_index})"
