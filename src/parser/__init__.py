"""
.osu 解析器模块
"""

from .sections import KeyValueSection, FieldSpec
from .general import General, Countdown, SampleSet, Mode, OverlayPosition
from .editor import Editor
from .metadata import Metadata
from .difficulty import Difficulty
from .colours import Colours, Colour, ColourType
from .timing_points import TimingPoints, TimingPoint, TimingSampleSet, Effects
from .hit_objects import (
    HitObjects,
    HitObject,
    HitObjectType,
    HitObjectParser,
    HitObjectRenderer,
    HitSound,
    HitSample,
    HitSampleSet,
    HitCircle,
    Slider,
    Spinner,
    OsuManiaHold,
    CurveType,
    EdgeSet,
)
from .beatmap import Beatmap, parse_beatmap, render_beatmap

__all__ = [
    'KeyValueSection',
    'FieldSpec',
    'General',
    'Countdown',
    'SampleSet',
    'Mode',
    'OverlayPosition',
    'Editor',
    'Metadata',
    'Difficulty',
    'Colours',
    'Colour',
    'ColourType',
    'TimingPoints',
    'TimingPoint',
    'TimingSampleSet',
    'Effects',
    'HitObjects',
    'HitObject',
    'HitObjectType',
    'HitObjectParser',
    'HitObjectRenderer',
    'HitSound',
    'HitSample',
    'HitSampleSet',
    'HitCircle',
    'Slider',
    'Spinner',
    'OsuManiaHold',
    'CurveType',
    'EdgeSet',
    'Beatmap',
    'parse_beatmap',
    'render_beatmap',
]
