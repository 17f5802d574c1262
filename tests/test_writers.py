# tests/test_writers.py
import json
from datetime import datetime, timezone

import pytest

from captionline.captions import CaptionEntry
from captionline.subtitles import (
    CaptionStyle,
    captions_to_ass,
    captions_to_json,
    captions_to_srt,
    captions_to_vtt,
)
from captionline.subtitles.ass_writer import ass_style_line, escape_ass_text
from captionline.subtitles.json_writer import captions_to_payload
from captionline.subtitles.style import ass_alpha, ass_color, rgba_string


@pytest.fixture
def hi():
    return [CaptionEntry(start=1.5, end=3.25, text="Hi", id="hi")]


def test_srt_single_entry(hi):
    assert captions_to_srt(hi) == "1\n00:00:01,500 --> 00:00:03,250\nHi"


def test_srt_numbers_consecutively_and_skips_blank_text():
    entries = [
        CaptionEntry(start=4, end=5, text="third"),
        CaptionEntry(start=0, end=1, text="first"),
        CaptionEntry(start=2, end=3, text="   "),
        CaptionEntry(start=2.5, end=3.5, text="second\nline"),
    ]
    assert captions_to_srt(entries) == (
        "1\n00:00:00,000 --> 00:00:01,000\nfirst\n\n"
        "2\n00:00:02,500 --> 00:00:03,500\nsecond\nline\n\n"
        "3\n00:00:04,000 --> 00:00:05,000\nthird"
    )


def test_srt_drops_blank_lines_inside_text():
    entries = [CaptionEntry(start=0, end=1, text="top\n\n\r\nbottom")]
    assert captions_to_srt(entries) == "1\n00:00:00,000 --> 00:00:01,000\ntop\nbottom"


def test_srt_escapes_entities():
    entries = [CaptionEntry(start=0, end=1, text="<b>Tom & Jerry</b>")]
    assert captions_to_srt(entries).endswith("&lt;b&gt;Tom &amp; Jerry&lt;/b&gt;")


def test_srt_empty_input():
    assert captions_to_srt([]) == ""


def test_vtt_plain(hi):
    assert captions_to_vtt(hi) == "WEBVTT\n\n1\n00:00:01.500 --> 00:00:03.250\nHi"


def test_vtt_empty_input_keeps_header():
    assert captions_to_vtt([]) == "WEBVTT"


def test_vtt_styled(hi):
    expected = (
        "WEBVTT\n\n"
        "STYLE\n"
        "::cue(.styled) {\n"
        "    font-family: Arial, sans-serif;\n"
        "    font-size: 24px;\n"
        "    font-weight: normal;\n"
        "    color: #ffffff;\n"
        "    background-color: rgba(0, 0, 0, 0.8);\n"
        "}\n\n"
        "1\n00:00:01.500 --> 00:00:03.250 line:90%\n<c.styled>Hi</c>"
    )
    assert captions_to_vtt(hi, style=CaptionStyle()) == expected


def test_vtt_style_effects_and_position(hi):
    style = CaptionStyle(position="top", text_outline=True, text_shadow=True)
    output = captions_to_vtt(hi, style=style)
    assert "text-shadow: -1px -1px 0 #000" in output
    assert "2px 2px 4px rgba(0,0,0,0.5);" in output
    assert " line:10%\n" in output
    assert output.count("STYLE") == 1


def test_ass_document(hi):
    output = captions_to_ass(hi)
    lines = output.split("\n")

    assert lines[0] == "[Script Info]"
    assert "ScriptType: v4.00+" in lines
    assert "PlayResX: 1920" in lines
    assert "PlayResY: 1080" in lines
    assert lines.index("[V4+ Styles]") < lines.index("[Events]")
    assert (
        "Style: Default,Arial,24,&H00FFFFFF,&H000000FF,&H00000000,&H33000000,"
        "0,0,0,0,100,100,0,0,1,0,0,2,10,10,10,1"
    ) in lines
    assert "Dialogue: 0,0:00:01.50,0:00:03.25,Default,,0,0,0,,Hi" in lines
    assert output.endswith("\n")


def test_ass_style_line_reflects_style():
    style = CaptionStyle(
        font_family="Helvetica Neue, Arial",
        font_size=32,
        font_weight="bold",
        text_color="#ff8000",
        background_color="#102030",
        background_opacity=100,
        position="top",
        text_outline=True,
        text_shadow=True,
    )
    fields = ass_style_line(style)[len("Style: "):].split(",")
    assert fields[:8] == [
        "Default",
        "Helvetica Neue",
        "32",
        "&H000080FF",
        "&H000000FF",
        "&H00000000",
        "&H00302010",
        "-1",
    ]
    assert fields[16:19] == ["2", "2", "8"]


def test_ass_text_escaping():
    assert escape_ass_text("a{b}\\c\nd") == "a\\{b\\}\\\\c\\Nd"


def test_ass_skips_blank_entries():
    entries = [
        CaptionEntry(start=0, end=1, text=""),
        CaptionEntry(start=1, end=2, text="x"),
    ]
    assert captions_to_ass(entries).count("Dialogue:") == 1


@pytest.mark.parametrize(
    "opacity, expected",
    [(100, 0), (80, 0x33), (50, 0x80), (25, 0xBF), (20, 0xCC), (0, 0xFF), (150, 0), (-10, 0xFF)],
)
def test_ass_alpha(opacity, expected):
    assert ass_alpha(opacity) == expected


def test_color_helpers():
    assert ass_color("#ffffff") == "&H00FFFFFF"
    assert ass_color("#123456", alpha=0x33) == "&H33563412"
    assert ass_color("not-a-color", fallback="#000000") == "&H00000000"
    assert rgba_string("#ff0000", 0.5) == "rgba(255, 0, 0, 0.5)"


def test_json_payload():
    entries = [
        CaptionEntry(start=2, end=3.5, text="b", id="b", confidence=0.75),
        CaptionEntry(start=0, end=1.25, text="", id="a", language="fr-FR"),
    ]
    exported_at = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    payload = captions_to_payload(entries, exported_at=exported_at)

    assert payload["metadata"] == {
        "title": "Video Captions",
        "generator": "captionline",
        "version": "1.0",
        "exportDate": "2024-01-02T03:04:05+00:00",
        "totalCaptions": 2,
        "duration": 3.5,
    }
    assert payload["styling"] is None
    first, second = payload["captions"]
    assert first == {
        "index": 1,
        "id": "a",
        "text": "",
        "start": 0.0,
        "end": 1.25,
        "duration": 1.25,
        "startFormatted": "00:00:00,000",
        "endFormatted": "00:00:01,250",
        "language": "fr-FR",
        "confidence": None,
    }
    assert second["language"] == "en-US"
    assert second["confidence"] == 0.75


def test_json_text_includes_styling_and_keeps_unicode():
    entries = [CaptionEntry(start=0, end=1, text="你好")]
    output = captions_to_json(entries, style=CaptionStyle(position="middle"))
    assert "你好" in output
    data = json.loads(output)
    assert data["styling"]["position"] == "middle"
    assert data["styling"]["background_opacity"] == 80


def test_json_empty_input():
    payload = captions_to_payload([])
    assert payload["metadata"]["totalCaptions"] == 0
    assert payload["metadata"]["duration"] == 0.0
    assert payload["captions"] == []
