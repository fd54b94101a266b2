"""
单元测试 - 打击物件
"""

from decimal import Decimal

import pytest
import sys
sys.path.insert(0, '..')

from src.parser import (
    HitObjects, HitObject, HitObjectType, HitSound, HitSample, HitSampleSet,
    HitCircle, Slider, Spinner, OsuManiaHold, CurveType, EdgeSet,
)
from src.utils import ErrorKind, ParseError, Position


class TestHitObjectParse:
    """测试物件解析"""

    def test_hitcircle(self):
        """圆圈"""
        line = "221,350,9780,1,0,0:0:0:0:"
        obj = HitObject.parse(line, 14)

        assert obj == HitObject(
            position=Position(221, 350),
            time=9780,
            obj_params=HitCircle(),
            new_combo=False,
            combo_skip_count=0,
            hitsound=HitSound(0),
            hitsample=HitSample(),
        )
        assert obj.render(14) == line

    def test_slider(self):
        """滑条"""
        line = "31,85,3049,2,0,B|129:55|123:136|228:86,1,172.51,2|0,3:2|0:2,0:2:0:0:"
        obj = HitObject.parse(line, 14)
        slider = obj.obj_params

        assert isinstance(slider, Slider)
        assert slider.curve_type == CurveType.BEZIER
        assert slider.curve_points == [Position(129, 55), Position(123, 136), Position(228, 86)]
        assert slider.slides == 1
        assert slider.length == Decimal("172.51")
        assert slider.edge_sounds == [HitSound(2), HitSound(0)]
        assert slider.edge_sets == [
            EdgeSet(HitSampleSet.DRUM_SET, HitSampleSet.SOFT_SET),
            EdgeSet(HitSampleSet.NO_CUSTOM_SAMPLE_SET, HitSampleSet.SOFT_SET),
        ]
        assert obj.hitsample.addition_set == HitSampleSet.SOFT_SET
        assert obj.render(14) == line

    def test_slider_without_tail(self):
        """省略 edgeSounds / edgeSets / hitSample"""
        line = "31,85,3049,2,0,L|129:55,1,100"
        obj = HitObject.parse(line, 14)
        assert obj.obj_params.edge_sounds is None
        assert obj.obj_params.edge_sets is None
        assert obj.hitsample is None
        assert obj.render(14) == line

    def test_spinner(self):
        """转盘带新连击"""
        line = "256,192,33598,12,0,431279,0:0:0:0:"
        obj = HitObject.parse(line, 14)

        assert obj.obj_params == Spinner(431279)
        assert obj.new_combo is True
        assert obj.object_type == HitObjectType.SPINNER
        assert obj.render(14) == line

    def test_mania_hold(self):
        """mania 长条，结束时间与 hitSample 用冒号连接"""
        line = "51,192,350,128,2,849:0:0:0:0:"
        obj = HitObject.parse(line, 14)

        assert obj.obj_params == OsuManiaHold(849)
        assert obj.hitsound.whistle
        assert obj.render(14) == line

    def test_combo_skip(self):
        """type 的 bit4-6 是跳过的连击色数"""
        obj = HitObject.parse("0,0,0,117,0", 14)
        assert obj.new_combo is True
        assert obj.combo_skip_count == 7
        assert obj.type_byte() == 117

    def test_type_byte_drops_unused_bits(self):
        """未使用的位在输出时丢弃"""
        obj = HitObject.parse("0,0,0,3,0", 14)
        assert isinstance(obj.obj_params, HitCircle)
        assert obj.type_byte() == 1

    def test_hitsample_with_colon_in_filename(self):
        sample = HitSample.parse("1:2:3:40:a:b.wav", 14)
        assert sample.normal_set == HitSampleSet.NORMAL_SET
        assert sample.volume == 40
        assert sample.filename == "a:b.wav"

    def test_hitsample_versions(self):
        """旧版本 hitSample 字段更少"""
        sample = HitSample(HitSampleSet.SOFT_SET, HitSampleSet.DRUM_SET, 2, 50, "x.wav")
        assert sample.render(9) is None
        assert sample.render(10) == "2:3:2"
        assert sample.render(12) == "2:3:2:50:x.wav"
        assert HitSample.default(9) is None

    @pytest.mark.parametrize("line,version", [
        ("221,350,9780,1,0,1:2:3:40:hit.wav", 11),
        ("221,350,9780,1,0,0:0:0:0:", 9),
        ("221,350,9780,1,0,1:2:3", 14),
    ])
    def test_hitsample_keeps_parsed_fields(self, line, version):
        """解析到的字段数原样输出，不按版本截断"""
        obj = HitObject.parse(line, version)
        assert obj.hitsample is not None
        assert obj.render(version) == line


class TestHitSound:
    """测试打击音效位"""

    def test_normal_when_empty(self):
        """没有任何位时视为 normal，但输出仍为 0"""
        sound = HitSound(0)
        assert sound.normal
        assert not sound.whistle
        assert sound.render() == "0"

    def test_flags(self):
        sound = HitSound.parse("10")
        assert not sound.normal
        assert sound.whistle
        assert sound.clap
        sound.finish = True
        assert sound.render() == "14"


class TestHitObjectErrors:
    """测试物件错误"""

    @pytest.mark.parametrize("line,kind", [
        ("", ErrorKind.INVALID_X),
        ("1", ErrorKind.MISSING_Y),
        ("1,2", ErrorKind.MISSING_TIME),
        ("1,2,3", ErrorKind.MISSING_OBJ_TYPE),
        ("1,2,3,1", ErrorKind.MISSING_HITSOUND),
        ("1,2,3,0,0", ErrorKind.UNKNOWN_OBJ_TYPE),
        ("1,2,3,2,0", ErrorKind.MISSING_CURVE_TYPE),
        ("1,2,3,2,0,X|1:1,1,1", ErrorKind.INVALID_CURVE_TYPE),
        ("1,2,3,2,0,B|1:1", ErrorKind.MISSING_SLIDES_COUNT),
        ("1,2,3,2,0,B|1:1,1", ErrorKind.MISSING_LENGTH),
        ("1,2,3,8,0", ErrorKind.MISSING_END_TIME),
        ("1,2,3,1,0,9:0:0:0:", ErrorKind.INVALID_HIT_SAMPLE),
    ])
    def test_errors(self, line, kind):
        with pytest.raises(ParseError) as exc:
            HitObject.parse(line, 14)
        assert exc.value.kind == kind

    def test_combo_skip_range(self):
        with pytest.raises(ParseError):
            HitObject(combo_skip_count=8)

    def test_error_line_index(self):
        with pytest.raises(ParseError) as exc:
            HitObjects.parse("51,192,350,128,2,849:0:0:0:0:\nfoobar", 14)
        assert exc.value.kind == ErrorKind.INVALID_X
        assert exc.value.line_index == 1


class TestHitObjectDefaults:
    """测试默认物件"""

    def test_defaults_render(self):
        assert HitObject.hitcircle_default().render(14) == "256,192,0,1,0,0:0:0:0:"
        assert HitObject.spinner_default().render(14) == "256,192,0,8,0,0,0:0:0:0:"
        assert HitObject.osu_mania_hold_default().render(14) == "256,192,0,128,0,0:0:0:0:0:"
        assert HitObject.slider_default().render(14) == "256,192,0,2,0,B,1,0,,,0:0:0:0:"

    def test_defaults_round_trip(self):
        for obj in (HitObject.hitcircle_default(), HitObject.slider_default(),
                    HitObject.spinner_default(), HitObject.osu_mania_hold_default()):
            assert HitObject.parse(obj.render(14), 14) == obj
