"""
[Metadata] 分段
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .sections import FieldSpec, KeyValueSection, int_field, string_field


@dataclass
class Metadata(KeyValueSection):
    """曲目与谱面信息"""
    title: Optional[str] = None
    title_unicode: Optional[str] = None
    artist: Optional[str] = None
    artist_unicode: Optional[str] = None
    creator: Optional[str] = None
    version: Optional[str] = None
    source: Optional[str] = None
    tags: Optional[List[str]] = None
    beatmap_id: Optional[int] = None
    beatmap_set_id: Optional[int] = None
    spacing: Dict[str, str] = field(default_factory=dict, compare=False, repr=False)

    DEFAULT_SPACING = ""

    FIELDS = [
        string_field("Title", "title", ""),
        string_field("TitleUnicode", "title_unicode", ""),
        string_field("Artist", "artist", ""),
        string_field("ArtistUnicode", "artist_unicode", ""),
        string_field("Creator", "creator", ""),
        string_field("Version", "version", ""),
        string_field("Source", "source", ""),
        # 空格分隔的搜索标签
        FieldSpec("Tags", "tags", lambda s, v: s.split(), lambda value, v: ' '.join(value),
                  lambda v: []),
        int_field("BeatmapID", "beatmap_id"),
        int_field("BeatmapSetID", "beatmap_set_id"),
    ]
