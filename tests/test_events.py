"""
单元测试 - 事件与变量
"""

import logging
from decimal import Decimal

import pytest
import sys
sys.path.insert(0, '..')

from src.storyboard import (
    AudioSample, Background, Break, ColourTransformation, Comment, Events, Layer, LegacyEvent, Osb,
    StoryboardObject, Variable, Variables, Video, parse_event,
)
from src.utils import ErrorKind, FilePath, ParseError, Position, Rgb


EVENTS_V14 = """//Background and Video events
0,0,"bg.jpg",0,0
Video,-200,"intro.avi"
//Break Periods
2,12000,15000
Break,30000,32500
//Storyboard Layer 0 (Background)
Sprite,Background,TopLeft,"sb/bg.png",0,0
 F,0,0,1000,0,1
//Storyboard Sound Samples
Sample,5000,3,"hit.wav",70
Sample,6000,0,"drum.wav\""""


class TestEventParse:
    """测试单行事件"""

    def test_background(self):
        """背景的两种写法"""
        short = parse_event('0,0,"bg.jpg",0,0', 14)
        assert short == Background(0, FilePath("bg.jpg", True), Position(Decimal(0), Decimal(0)))
        assert short.render(14) == '0,0,"bg.jpg",0,0'

        long = parse_event("Background,0,bg.jpg", 14)
        assert long.position is None
        assert long.short_form is False
        assert long.render(14) == "Background,0,bg.jpg"

    def test_video(self):
        video = parse_event('1,-200,"intro.avi",10,20', 14)
        assert isinstance(video, Video)
        assert video.start_time == -200
        assert video.position == Position(Decimal(10), Decimal(20))
        assert video.render(14) == '1,-200,"intro.avi",10,20'

    def test_break(self):
        brk = parse_event("2,12000,15000", 14)
        assert brk == Break(12000, 15000)
        assert parse_event("Break,1,2", 14).render(14) == "Break,1,2"

    def test_old_version_offset(self):
        """v3/v4 的视频、休息段和颜色变化时间加 24ms，背景不变"""
        assert parse_event("0,100,bg.jpg", 3).start_time == 100
        assert parse_event("1,100,v.avi", 3).start_time == 124

        brk = parse_event("2,100,200", 4)
        assert (brk.start_time, brk.end_time) == (124, 224)
        assert brk.render(4) == "2,100,200"

        colour = parse_event("3,100,255,0,0", 3)
        assert colour == ColourTransformation(124, Rgb(255, 0, 0))
        assert colour.render(3) == "3,100,255,0,0"

    def test_colour_transformation_removed_in_v14(self):
        """v14 不再支持颜色变化事件"""
        assert parse_event("3,100,255,0,0", 13).render(13) == "3,100,255,0,0"
        with pytest.raises(ParseError) as exc:
            parse_event("3,100,255,0,0", 14)
        assert exc.value.kind == ErrorKind.EVENT_NOT_IN_VERSION
        assert ColourTransformation(0, Rgb(0, 0, 0)).render(14) is None

    def test_sample(self):
        """音效事件的图层用整数表示，音量可省略"""
        sample = parse_event('Sample,5000,3,"hit.wav",70', 14)
        assert sample == AudioSample(5000, Layer.FOREGROUND, FilePath("hit.wav", True), 70)
        assert sample.render(14) == 'Sample,5000,3,"hit.wav",70'

        quiet = parse_event("Sample,0,1,drum.wav", 14)
        assert quiet.volume is None
        assert quiet.layer == Layer.FAIL
        assert quiet.render(14) == "Sample,0,1,drum.wav"

    @pytest.mark.parametrize("line,kind", [
        ("Sample,0,1,a.wav,0", ErrorKind.INVALID_VOLUME),
        ("Sample,0,9,a.wav", ErrorKind.INVALID_LAYER),
        ("Sample,0", ErrorKind.MISSING_LAYER),
        ("0,foo,bg.jpg", ErrorKind.INVALID_START_TIME),
        ("0,0", ErrorKind.MISSING_FILE_NAME),
        ("2,0", ErrorKind.MISSING_END_TIME),
        ("0,0,bg.jpg,1,a", ErrorKind.INVALID_Y),
        ("foobar", ErrorKind.UNKNOWN_EVENT_TYPE),
    ])
    def test_errors(self, line, kind):
        with pytest.raises(ParseError) as exc:
            parse_event(line, 14)
        assert exc.value.kind == kind

    def test_legacy_event_verbatim(self):
        """旧式事件原样保留"""
        line = '4,0,1,"Text\\Play2-HaveFunH.png",320,240'
        event = parse_event(line, 14)
        assert event == LegacyEvent(line)
        assert event.render(14) == line

    def test_comment(self):
        assert parse_event("//hello", 14) == Comment("hello")


class TestEvents:
    """测试 [Events] 分段"""

    def test_round_trip(self):
        events = Events.parse(EVENTS_V14, 14)
        assert len(events.events) == 11
        assert len(events.storyboard_objects()) == 1
        assert events.render(14) == EVENTS_V14

    def test_blank_lines_skipped(self):
        events = Events.parse("2,0,1\n\n2,5,6", 14)
        assert events.events == [Break(0, 1), Break(5, 6)]

    def test_background_with_commands(self):
        """背景也可以带命令"""
        text = "0,0,bg.jpg\n F,0,0,500,1,0"
        events = Events.parse(text, 14)
        assert len(events.events[0].commands) == 1
        assert events.render(14) == text

    def test_unsupported_event_dropped_on_render(self, caplog):
        events = Events([ColourTransformation(0, Rgb(1, 2, 3)), Break(0, 1)])
        with caplog.at_level(logging.WARNING):
            assert events.render(14) == "2,0,1"
        assert "ColourTransformation" in caplog.text

    def test_error_line_index(self):
        with pytest.raises(ParseError) as exc:
            Events.parse('0,0,"bg.jpg",0,0\nfoobar', 14)
        assert exc.value.kind == ErrorKind.UNKNOWN_EVENT_TYPE
        assert exc.value.line_index == 1


class TestVariables:
    """测试变量"""

    def setup_method(self):
        self.variables = Variables([
            Variable("star", '"sb/star.png"'),
            Variable("s", "Sprite"),
            Variable("pos", "320,240"),
        ])

    def test_parse(self):
        variables = Variables.parse('$star="sb/star.png"\n$pos=320,240', 14)
        assert variables.variables == [Variable("star", '"sb/star.png"'), Variable("pos", "320,240")]
        assert variables.render(14) == '$star="sb/star.png"\n$pos=320,240'

    @pytest.mark.parametrize("line,kind", [
        ("star=1", ErrorKind.MISSING_VARIABLE_HEADER),
        ("$star", ErrorKind.MISSING_EQUALS),
    ])
    def test_errors(self, line, kind):
        with pytest.raises(ParseError) as exc:
            Variables.parse(f"$a=1\n{line}", 14)
        assert exc.value.kind == kind
        assert exc.value.line_index == 1

    def test_substitute_longest_first(self):
        """$star 不会被 $s 抢先匹配"""
        line = "$s,Pass,Centre,$star,$pos"
        assert self.variables.substitute(line) == 'Sprite,Pass,Centre,"sb/star.png",320,240'

    def test_restore_keeps_header(self):
        """第一个字段不做反向替换"""
        line = 'Sprite,Pass,Centre,"sb/star.png",320,240'
        assert self.variables.restore(line) == "Sprite,Pass,Centre,$star,$pos"

    def test_events_with_variables(self):
        """解析时替换，输出时还原"""
        text = "Sprite,Pass,Centre,$star,$pos\n M,0,0,100,$pos,0,0\n//$pos stays"
        events = Events.parse(text, 14, self.variables)

        sprite = events.events[0]
        assert isinstance(sprite, StoryboardObject)
        assert sprite.object_type.filepath == FilePath("sb/star.png", True)
        assert sprite.position == Position(Decimal(320), Decimal(240))
        assert events.events[1] == Comment("$pos stays")
        assert events.render(14, self.variables) == text

    def test_empty_variables(self):
        assert Variables().substitute("$a,1") == "$a,1"
        assert Variables().restore("a,1") == "a,1"

    def test_restore_whole_fields_only(self):
        """值只在占满整个字段时还原，不改动包含它的数字"""
        variables = Variables([Variable("v", "1"), Variable("v0", "2")])
        assert variables.restore(" F,0,100,,1") == " F,0,100,,$v"
        assert variables.restore("Sprite,Pass,Centre,a.png,320,240") == "Sprite,Pass,Centre,a.png,320,240"

    def test_restore_keeps_line_when_ambiguous(self):
        """代入后不能得到原行时保留原行"""
        variables = Variables([Variable("a", "1"), Variable("ab", "2")])
        assert variables.restore("Sprite,Pass,Centre,$ab,1") == "Sprite,Pass,Centre,$ab,1"

    def test_osb_round_trip_with_short_values(self):
        text = ("[Variables]\n$v=1\n$v0=2\n\n"
                "[Events]\nSprite,Pass,Centre,a.png,320,240\n F,0,100,,1")
        osb = Osb.parse(text, 14)
        rendered = osb.render(14)

        assert rendered.endswith("Sprite,Pass,Centre,a.png,320,240\n F,0,100,,$v")
        assert Osb.parse(rendered, 14).events == osb.events
