"""
[Difficulty] 分段
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Optional

from .sections import KeyValueSection, decimal_field


@dataclass
class Difficulty(KeyValueSection):
    """难度参数"""
    hp_drain_rate: Optional[Decimal] = None
    circle_size: Optional[Decimal] = None
    overall_difficulty: Optional[Decimal] = None
    approach_rate: Optional[Decimal] = None
    slider_multiplier: Optional[Decimal] = None
    slider_tick_rate: Optional[Decimal] = None
    spacing: Dict[str, str] = field(default_factory=dict, compare=False, repr=False)

    DEFAULT_SPACING = ""

    FIELDS = [
        decimal_field("HPDrainRate", "hp_drain_rate", "5"),
        decimal_field("CircleSize", "circle_size", "5"),
        decimal_field("OverallDifficulty", "overall_difficulty", "5"),
        decimal_field("ApproachRate", "approach_rate", "5"),
        decimal_field("SliderMultiplier", "slider_multiplier", "1.4"),
        decimal_field("SliderTickRate", "slider_tick_rate", "1"),
    ]
