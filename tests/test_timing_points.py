"""
单元测试 - 时间点
"""

from decimal import Decimal

import pytest
import sys
sys.path.insert(0, '..')

from src.parser import TimingPoints, TimingPoint, TimingSampleSet, Effects
from src.utils import ErrorKind, ParseError


class TestTimingPoint:
    """测试时间点解析"""

    def test_parse_v14(self):
        """完整的 v14 时间点"""
        line = "350,333.333333333333,4,2,1,60,1,0"
        point = TimingPoint.parse(line, 14)

        assert point.time == Decimal(350)
        assert point.beat_length == Decimal("333.333333333333")
        assert point.meter == 4
        assert point.sample_set == TimingSampleSet.SOFT
        assert point.sample_index == 1
        assert point.volume == 60
        assert point.uninherited is True
        assert point.effects == Effects(0)
        assert point.render(14) == line

    def test_inherited_kiai(self):
        """绿线的滑条速度与 kiai"""
        point = TimingPoint.parse("12000,-25,4,3,0,100,0,1", 14)

        assert point.uninherited is False
        assert point.calc_slider_velocity_multiplier() == Decimal(4)
        assert point.calc_bpm() is None
        assert point.effects.kiai_time_enabled
        assert not point.effects.no_first_barline_in_taiko_mania

    def test_bpm(self):
        point = TimingPoint.parse("0,500,4,1,0,100,1,0", 14)
        assert point.calc_bpm() == Decimal(120)
        assert point.calc_slider_velocity_multiplier() is None

    def test_missing_fields_use_defaults(self):
        """缺失的字段使用默认值"""
        point = TimingPoint.parse("100,500", 14)
        assert point.meter == 4
        assert point.sample_set == TimingSampleSet.NORMAL
        assert point.sample_index == 1
        assert point.volume == 100
        assert point.uninherited is True
        assert point.effects.bits == 0

    def test_old_versions(self):
        """v3/v4 的字段和时间偏移"""
        v3 = TimingPoint.parse("100,500", 3)
        assert v3.time == Decimal(124)
        assert v3.render(3) == "100,500"

        v4 = TimingPoint.parse("100,500,4,2,0", 4)
        assert v4.sample_set == TimingSampleSet.SOFT
        assert v4.render(4) == "100,500,4,2,0"

        v5 = TimingPoint.parse("100,500,4,2,0,70", 5)
        assert v5.time == Decimal(100)
        assert v5.render(5) == "100,500,4,2,0,70"

    def test_non_numeric_beat_length(self):
        """beatLength 不是数字时原样保留"""
        point = TimingPoint.parse("100,NaN,4,1,0,100,1,0", 14)
        assert point.beat_length == "NaN"
        assert point.calc_bpm() is None
        assert point.render(14) == "100,NaN,4,1,0,100,1,0"

    def test_unknown_sample_set_kept(self):
        point = TimingPoint.parse("0,500,4,7,0,100,1,0", 14)
        assert point.sample_set == 7
        assert point.render(14) == "0,500,4,7,0,100,1,0"

    def test_invalid_volume(self):
        with pytest.raises(ParseError) as exc:
            TimingPoint.parse("0,500,4,1,0,101,1,0", 14)
        assert exc.value.kind == ErrorKind.INVALID_VOLUME

    def test_invalid_uninherited(self):
        with pytest.raises(ParseError) as exc:
            TimingPoint.parse("0,500,4,1,0,100,2,0", 14)
        assert exc.value.kind == ErrorKind.INVALID_UNINHERITED

    def test_new_inherited(self):
        point = TimingPoint.new_inherited(Decimal(0), Decimal(2))
        assert point.beat_length == Decimal(-50)
        assert point.calc_slider_velocity_multiplier() == Decimal(2)


class TestEffects:
    """测试效果位"""

    def test_setters(self):
        effects = Effects()
        effects.kiai_time_enabled = True
        effects.no_first_barline_in_taiko_mania = True
        assert effects.bits == 0b1001
        effects.kiai_time_enabled = False
        assert effects.bits == 0b1000

    def test_clear_unused_bits(self):
        effects = Effects(0b1111)
        effects.clear_unused_bits()
        assert effects.bits == 0b1001


class TestTimingPoints:
    """测试 [TimingPoints]"""

    def test_error_line_index(self):
        with pytest.raises(ParseError) as exc:
            TimingPoints.parse("350,333.333333333333,4,2,1,60,1,0\nfoobar", 14)
        assert exc.value.kind == ErrorKind.INVALID_TIME
        assert exc.value.line_index == 1

    def test_render(self):
        text = "0,500,4,1,0,100,1,0\n1000,-50,4,1,0,100,0,1"
        assert TimingPoints.parse(text, 14).render(14) == text
