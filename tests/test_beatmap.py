"""
单元测试 - 谱面文件与规范化
"""

import logging

import pytest
import sys
sys.path.insert(0, '..')

from src.parser import Beatmap, Mode, parse_beatmap, render_beatmap
from src.storyboard import StoryboardObject
from src.utils import ErrorKind, ParseError, ParserConfig, MIN_VERSION, LATEST_VERSION
from src.utils.normalise import assert_equivalent, canonicalise, equivalent


OSU_V14 = """osu file format v14

[General]
AudioFilename: audio.mp3
AudioLeadIn: 0
PreviewTime: 5000
Countdown: 0
SampleSet: Soft
StackLeniency: 0.7
Mode: 0
LetterboxInBreaks: 0
WidescreenStoryboard: 1

[Editor]
Bookmarks: 1000,2000
DistanceSpacing: 1.2
BeatDivisor: 4
GridSize: 32
TimelineZoom: 1.5

[Metadata]
Title:Test Song
TitleUnicode:Test Song
Artist:Someone
ArtistUnicode:Someone
Creator:Mapper
Version:Hard
Source:
Tags:test tags
BeatmapID:0
BeatmapSetID:-1

[Difficulty]
HPDrainRate:5
CircleSize:4
OverallDifficulty:7
ApproachRate:8
SliderMultiplier:1.4
SliderTickRate:1

[Events]
//Background and Video events
0,0,"bg.jpg",0,0
//Break Periods
2,12000,15000
//Storyboard Layer 0 (Background)
Sprite,Background,Centre,"sb/a.png",320,240
 F,0,-28,,1
 L,500,10
  M,3,100,120,140,180,200,200

[TimingPoints]
350,333.333333333333,4,2,1,60,1,0
12000,-25,4,3,0,100,0,1


[Colours]
Combo1 : 255,128,255
SliderBorder : 120,130,140

[HitObjects]
221,350,9780,1,0,0:0:0:0:
31,85,3049,2,0,B|129:55|123:136|228:86,1,172.51,2|0,3:2|0:2,0:2:0:0:
256,192,33598,12,0,431279,0:0:0:0:
"""

OSB_V14 = """[Variables]
$star="sb/star.png"

[Events]
Sprite,Foreground,Centre,$star,320,240
 F,0,0,100,0,1
"""

BANNER = "osu file format v14\n\n\n\n"


class TestBeatmapParse:
    """测试谱面解析"""

    def test_sections(self):
        beatmap = parse_beatmap(OSU_V14)

        assert beatmap.version == 14
        assert beatmap.general.audio_filename == "audio.mp3"
        assert beatmap.general.mode == Mode.OSU
        assert beatmap.editor.bookmarks == [1000, 2000]
        assert beatmap.metadata.tags == ["test", "tags"]
        assert len(beatmap.events.events) == 6
        assert len(beatmap.timing_points.timing_points) == 2
        assert len(beatmap.colours.colours) == 2
        assert len(beatmap.hit_objects.hit_objects) == 3

    def test_render_exact(self):
        """空行和冒号后的空白都原样输出"""
        assert render_beatmap(parse_beatmap(OSU_V14)) == OSU_V14

    def test_render_equivalent(self):
        assert_equivalent(parse_beatmap(OSU_V14).render(), OSU_V14)

    def test_deterministic(self):
        assert parse_beatmap(OSU_V14) == parse_beatmap(OSU_V14)

    def test_bom_and_crlf(self):
        """BOM 被忽略，\\r\\n 按行处理"""
        text = "\ufeffosu file format v14\r\n\r\n[General]\r\nMode: 1\r\n"
        beatmap = parse_beatmap(text)
        assert beatmap.general.mode == Mode.TAIKO
        assert beatmap.render(ParserConfig(newline="\r\n")) == text[1:]

    def test_missing_sections_are_none(self):
        beatmap = parse_beatmap("osu file format v14\n\n[General]\nMode: 3")
        assert beatmap.editor is None
        assert beatmap.hit_objects is None
        assert beatmap.render() == "osu file format v14\n\n[General]\nMode: 3"

    def test_colours_dropped_in_v4(self, caplog):
        """v4 的 [Colours] 被忽略"""
        text = "osu file format v4\n\n[Colours]\nCombo1 : 255,128,255\n"
        with caplog.at_level(logging.WARNING):
            beatmap = parse_beatmap(text)
        assert beatmap.colours is None
        assert "Colours" in caplog.text
        assert "[Colours]" not in beatmap.render()


class TestBeatmapErrors:
    """测试谱面错误的行号"""

    @pytest.mark.parametrize("section,body", [
        ("General", "AudioFilename: audio.mp3\nfoobar"),
        ("Editor", "DistanceSpacing: 1\nfoobar"),
        ("Metadata", "Title:foo\nfoobar"),
        ("Difficulty", "HPDrainRate:5\nfoobar"),
        ("Events", "2,0,1\nfoobar"),
        ("TimingPoints", "350,333.333333333333,4,2,1,60,1,0\nfoobar"),
        ("Colours", "Combo1 : 255,128,255\nfoobar"),
        ("HitObjects", "221,350,9780,1,0,0:0:0:0:\nfoobar"),
    ])
    def test_line_index_in_file(self, section, body):
        """行号相对于整个文件"""
        with pytest.raises(ParseError) as exc:
            parse_beatmap(f"{BANNER}[{section}]\n{body}")
        assert exc.value.line_index == 6
        assert str(exc.value).startswith("Line 7,")

    def test_invalid_key_in_file(self):
        with pytest.raises(ParseError) as exc:
            parse_beatmap(f"{BANNER}[General]\nAudioFilename: audio.mp3\nfoo: bar")
        assert exc.value.kind == ErrorKind.INVALID_KEY
        assert exc.value.line_index == 6

    def test_inserted_line(self):
        """在第 k 行插入错误行，报告的行号就是 k"""
        lines = OSU_V14.split('\n')
        k = lines.index("[HitObjects]") + 2
        lines.insert(k, "foobar")
        with pytest.raises(ParseError) as exc:
            parse_beatmap('\n'.join(lines))
        assert exc.value.line_index == k

    def test_no_file_version(self):
        with pytest.raises(ParseError) as exc:
            parse_beatmap("[General]\nMode: 0")
        assert exc.value.kind == ErrorKind.NO_FILE_VERSION
        assert exc.value.line_index == 0

        with pytest.raises(ParseError) as exc:
            parse_beatmap("")
        assert exc.value.kind == ErrorKind.NO_FILE_VERSION

    @pytest.mark.parametrize("banner", ["osu file format v15", "osu file format v2", "osu file format vx"])
    def test_invalid_file_version(self, banner):
        with pytest.raises(ParseError) as exc:
            parse_beatmap(f"\n{banner}\n")
        assert exc.value.kind == ErrorKind.INVALID_FILE_VERSION
        assert exc.value.line_index == 1

    def test_duplicate_sections(self):
        with pytest.raises(ParseError) as exc:
            parse_beatmap("osu file format v14\n[General]\nMode: 0\n[General]\nMode: 1")
        assert exc.value.kind == ErrorKind.DUPLICATE_SECTIONS
        assert exc.value.line_index == 3

    def test_unknown_section(self):
        with pytest.raises(ParseError) as exc:
            parse_beatmap("osu file format v14\n\n[Foo]\nbar")
        assert exc.value.kind == ErrorKind.UNKNOWN_SECTION_NAME
        assert exc.value.line_index == 2

    def test_caret(self):
        text = f"{BANNER}[Events]\nSprite,Pass,Centre,a.png,0,0\n L,0"
        with pytest.raises(ParseError) as exc:
            parse_beatmap(text)
        assert exc.value.kind == ErrorKind.MISSING_LOOP_COUNT
        assert exc.value.caret(text) == " L,0\n ^"


class TestBeatmapDefault:
    """测试默认谱面"""

    @pytest.mark.parametrize("version", range(MIN_VERSION, LATEST_VERSION + 1))
    def test_round_trip(self, version):
        """默认谱面输出后能解析回相同的值"""
        beatmap = Beatmap.default(version)
        assert parse_beatmap(beatmap.render()) == beatmap

    def test_version_gates(self):
        assert Beatmap.default(4).colours is None
        assert Beatmap.default(5).colours is not None

    def test_config(self):
        """默认版本和分段空行来自配置"""
        config = ParserConfig(default_version=9, section_spacing=2)
        beatmap = Beatmap.default(config=config)
        assert beatmap.version == 9
        assert beatmap.render(config).startswith("osu file format v9\n\n\n[General]")

    def test_invalid_version(self):
        with pytest.raises(ParseError):
            Beatmap.default(15)


class TestOsb:
    """测试 .osb 合并与输出"""

    def test_append_osb(self):
        beatmap = parse_beatmap(OSU_V14)
        beatmap.append_osb(OSB_V14)

        assert len(beatmap.events.events) == 7
        sprite = beatmap.events.events[-1]
        assert isinstance(sprite, StoryboardObject)
        assert sprite.object_type.filepath.path == "sb/star.png"

        assert beatmap.render() == OSU_V14
        assert beatmap.render_osb() == OSB_V14

    def test_append_osb_twice(self):
        """第二次合并替换第一次的事件，.osu 中不残留"""
        beatmap = parse_beatmap(OSU_V14)
        beatmap.append_osb("[Events]\nSprite,Pass,Centre,a.png,0,0")
        beatmap.append_osb(OSB_V14)

        assert len(beatmap.events.events) == 7
        assert beatmap.render() == OSU_V14
        assert beatmap.render_osb() == OSB_V14

    def test_append_osb_without_events_section(self):
        """原文没有 [Events] 时输出也不带"""
        text = "osu file format v14\n\n[General]\nMode: 0"
        beatmap = parse_beatmap(text)
        beatmap.append_osb(OSB_V14)

        assert len(beatmap.events.events) == 1
        assert beatmap.render() == text
        assert beatmap.render_osb() == OSB_V14

    def test_osb_before_v14(self, caplog):
        beatmap = parse_beatmap(OSU_V14.replace("v14", "v13", 1))
        with caplog.at_level(logging.WARNING):
            beatmap.append_osb(OSB_V14)
        assert beatmap.osb is None
        assert len(beatmap.events.events) == 6
        assert beatmap.render_osb() is None

    def test_default_osb(self):
        beatmap = parse_beatmap("osu file format v14\n")
        assert beatmap.render_osb().startswith("[Events]")

    def test_osb_error_line(self):
        with pytest.raises(ParseError) as exc:
            parse_beatmap(OSU_V14).append_osb("[Variables]\n$a=1\n\n[Events]\nfoobar")
        assert exc.value.kind == ErrorKind.UNKNOWN_EVENT_TYPE
        assert exc.value.line_index == 4


class TestNormalise:
    """测试文本规范化"""

    def test_ignores_blank_lines_and_order(self):
        """空行、key 的顺序和冒号两侧空白不影响比较"""
        a = "osu file format v14\n\n[General]\nMode: 0\nAudioFilename: a.mp3\n"
        b = "\ufeffosu file format v14\n[General]\nAudioFilename:a.mp3\r\nMode:0"
        assert equivalent(a, b)

    def test_event_indentation_matters(self):
        a = "[Events]\nSprite,Pass,Centre,a.png,0,0\n F,0,0,0,1"
        b = "[Events]\nSprite,Pass,Centre,a.png,0,0\n  F,0,0,0,1"
        assert not equivalent(a, b)

    def test_hit_object_order_matters(self):
        a = "[HitObjects]\n0,0,0,1,0\n1,1,1,1,0"
        b = "[HitObjects]\n1,1,1,1,0\n0,0,0,1,0"
        assert not equivalent(a, b)

    def test_canonicalise(self):
        assert canonicalise("[Metadata]\nTitle: b\nArtist: a\n\n") == "[Metadata]\nArtist:a\nTitle:b"

    def test_assert_equivalent_diff(self):
        with pytest.raises(AssertionError) as exc:
            assert_equivalent("[General]\nMode: 0", "[General]\nMode: 1")
        assert "Mode:1" in str(exc.value)
