"""
[General] 分段
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Optional

from ..utils.versioning import LATEST_VERSION, VersionedEnum
from .sections import (
    KeyValueSection, bool_field, decimal_field, enum_field, int_field, string_field
)


class Countdown(VersionedEnum):
    """开场倒数速度，v4 及以前不存在"""
    NO_COUNTDOWN = 0
    NORMAL = 1
    HALF = 2
    DOUBLE = 3

    @classmethod
    def parse(cls, text: str, version: int = LATEST_VERSION, **kwargs):
        if version <= 4:
            return None
        return super().parse(text, version, **kwargs)

    def render(self, version: int = LATEST_VERSION) -> Optional[str]:
        if version <= 4:
            return None
        return str(self.value)

    @classmethod
    def default(cls, version: int = LATEST_VERSION):
        if version <= 4:
            return None
        return cls.NORMAL


class SampleSet(VersionedEnum):
    """谱面默认音效组，v3 不存在"""
    NORMAL = "Normal"
    SOFT = "Soft"
    DRUM = "Drum"
    NONE = "None"

    @classmethod
    def parse(cls, text: str, version: int = LATEST_VERSION, **kwargs):
        if version == 3:
            return None
        return super().parse(text, version, **kwargs)

    def render(self, version: int = LATEST_VERSION) -> Optional[str]:
        if version == 3:
            return None
        return self.value

    @classmethod
    def default(cls, version: int = LATEST_VERSION):
        if version == 3:
            return None
        return cls.NORMAL


class Mode(VersionedEnum):
    """游戏模式"""
    OSU = 0
    TAIKO = 1
    CATCH = 2
    MANIA = 3

    @classmethod
    def default(cls, version: int = LATEST_VERSION):
        return cls.OSU


class OverlayPosition(VersionedEnum):
    """物件覆盖层位置，v14 才有"""
    NO_CHANGE = "NoChange"
    BELOW = "Below"
    ABOVE = "Above"

    @classmethod
    def parse(cls, text: str, version: int = LATEST_VERSION, **kwargs):
        if version <= 13:
            return None
        return super().parse(text, version, **kwargs)

    def render(self, version: int = LATEST_VERSION) -> Optional[str]:
        if version <= 13:
            return None
        return self.value

    @classmethod
    def default(cls, version: int = LATEST_VERSION):
        if version <= 13:
            return None
        return cls.NO_CHANGE


@dataclass
class General(KeyValueSection):
    """谱面基本信息"""
    audio_filename: Optional[str] = None
    audio_lead_in: Optional[int] = None
    audio_hash: Optional[str] = None
    preview_time: Optional[int] = None
    countdown: Optional[Countdown] = None
    sample_set: Optional[SampleSet] = None
    stack_leniency: Optional[Decimal] = None
    mode: Optional[Mode] = None
    letterbox_in_breaks: Optional[bool] = None
    story_fire_in_front: Optional[bool] = None
    use_skin_sprites: Optional[bool] = None
    always_show_playfield: Optional[bool] = None
    overlay_position: Optional[OverlayPosition] = None
    skin_preference: Optional[str] = None
    epilepsy_warning: Optional[bool] = None
    countdown_offset: Optional[int] = None
    special_style: Optional[bool] = None
    widescreen_storyboard: Optional[bool] = None
    samples_match_playback_rate: Optional[bool] = None
    # 每个键冒号后的原始空白
    spacing: Dict[str, str] = field(default_factory=dict, compare=False, repr=False)

    FIELDS = [
        string_field("AudioFilename", "audio_filename", ""),
        int_field("AudioLeadIn", "audio_lead_in", 0),
        # AudioHash 在 v14 中已废弃
        string_field("AudioHash", "audio_hash", "", max_version=13),
        int_field("PreviewTime", "preview_time", -1),
        enum_field("Countdown", "countdown", Countdown),
        enum_field("SampleSet", "sample_set", SampleSet),
        decimal_field("StackLeniency", "stack_leniency", "0.7"),
        enum_field("Mode", "mode", Mode),
        bool_field("LetterboxInBreaks", "letterbox_in_breaks", False),
        bool_field("StoryFireInFront", "story_fire_in_front", True),
        bool_field("UseSkinSprites", "use_skin_sprites", False),
        bool_field("AlwaysShowPlayfield", "always_show_playfield", False),
        enum_field("OverlayPosition", "overlay_position", OverlayPosition),
        string_field("SkinPreference", "skin_preference", ""),
        bool_field("EpilepsyWarning", "epilepsy_warning", False),
        int_field("CountdownOffset", "countdown_offset", 0),
        bool_field("SpecialStyle", "special_style", False),
        bool_field("WidescreenStoryboard", "widescreen_storyboard", False),
        bool_field("SamplesMatchPlaybackRate", "samples_match_playback_rate", False),
    ]
