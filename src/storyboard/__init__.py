"""
故事板模块
事件、故事板对象、命令树以及 .osb 文件
"""

from .types import (
    Layer,
    Origin,
    LoopType,
    Easing,
    Parameter,
    TriggerSampleSet,
    Addition,
    TriggerKind,
    TriggerType,
)
from .commands import (
    ContinuingFields,
    ContinuingColours,
    Fade,
    Move,
    MoveX,
    MoveY,
    Scale,
    VectorScale,
    Rotate,
    Colour,
    ParameterCommand,
    Loop,
    Trigger,
    Command,
    CommandParser,
)
from .objects import Sprite, Animation, StoryboardObject, indentation_of, parse_command_line
from .events import (
    Comment,
    Background,
    Video,
    Break,
    ColourTransformation,
    AudioSample,
    LegacyEvent,
    Events,
    parse_event,
)
from .variables import Variable, Variables
from .osb import Osb

__all__ = [
    'Layer',
    'Origin',
    'LoopType',
    'Easing',
    'Parameter',
    'TriggerSampleSet',
    'Addition',
    'TriggerKind',
    'TriggerType',
    'ContinuingFields',
    'ContinuingColours',
    'Fade',
    'Move',
    'MoveX',
    'MoveY',
    'Scale',
    'VectorScale',
    'Rotate',
    'Colour',
    'ParameterCommand',
    'Loop',
    'Trigger',
    'Command',
    'CommandParser',
    'Sprite',
    'Animation',
    'StoryboardObject',
    'indentation_of',
    'parse_command_line',
    'Comment',
    'Background',
    'Video',
    'Break',
    'ColourTransformation',
    'AudioSample',
    'LegacyEvent',
    'Events',
    'parse_event',
    'Variable',
    'Variables',
    'Osb',
]
