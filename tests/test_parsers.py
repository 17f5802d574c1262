# tests/test_parsers.py
import json

import pytest

from captionline.captions import CaptionEntry
from captionline.errors import InvalidFormat
from captionline.subtitles import (
    CaptionStyle,
    captions_to_json,
    captions_to_srt,
    captions_to_vtt,
    parse_json,
    parse_srt,
    parse_vtt,
)


SRT_SAMPLE = """1
00:00:01,000 --> 00:00:02,500
Hello &amp; welcome

2
this line is not a timing line
ignored text

3
00:00:03,000 --> 00:00:04,000

4
00:00:05,000 --> 00:00:07,250
Two
lines
"""


def test_parse_srt_skips_malformed_blocks():
    entries = parse_srt(SRT_SAMPLE)
    assert [(e.start, e.end, e.text) for e in entries] == [
        (1.0, 2.5, "Hello & welcome"),
        (5.0, 7.25, "Two\nlines"),
    ]
    assert all(e.language == "en-US" for e in entries)
    assert len({e.id for e in entries}) == 2


def test_parse_srt_handles_crlf_and_bom():
    content = "\ufeff1\r\n00:00:00,500 --> 00:00:01,000\r\nHi\r\n\r\n"
    entries = parse_srt(content, language="de-DE")
    assert len(entries) == 1
    assert entries[0].text == "Hi"
    assert entries[0].language == "de-DE"


def test_parse_srt_rejects_dot_separator():
    assert parse_srt("1\n00:00:00.500 --> 00:00:01.000\nHi") == []


def test_parse_srt_empty():
    assert parse_srt("") == []
    assert parse_srt("\n\n  \n") == []


VTT_SAMPLE = """WEBVTT
Kind: captions

NOTE this comment has no timing

STYLE
::cue { color: red; }

intro
00:00:01.000 --> 00:00:02.000 line:90%
First

00:01.500 --> 00:03.000
Short &lt;form&gt;

00:00:04.000 --> 00:00:05.000

3
00:00:06.000 --> 00:00:07.000
Multi
line
"""


def test_parse_vtt_skips_header_and_empty_cues():
    entries = parse_vtt(VTT_SAMPLE)
    assert [(e.start, e.end, e.text) for e in entries] == [
        (1.0, 2.0, "First"),
        (1.5, 3.0, "Short <form>"),
        (6.0, 7.0, "Multi\nline"),
    ]


def test_parse_vtt_strips_styled_wrapper():
    content = captions_to_vtt(
        [CaptionEntry(start=0, end=1, text="a < b")],
        style=CaptionStyle(),
    )
    entries = parse_vtt(content)
    assert len(entries) == 1
    assert entries[0].text == "a < b"


def test_parse_vtt_without_cues():
    assert parse_vtt("WEBVTT\n\n") == []


def test_parse_json_accepts_aliases_and_time_codes():
    content = json.dumps(
        {
            "captions": [
                {"text": "a", "startTime": 1, "endTime": 2, "id": "x"},
                {"text": "b", "start": "00:00:03,500", "end": "00:00:04.000"},
                {"text": "c", "start": 5, "end": 6, "confidence": 0.5, "language": "ja-JP"},
                {"text": "missing end", "start": 7},
                {"start": 8, "end": 9},
                {"text": "bad start", "start": True, "end": 9},
                "not an object",
            ]
        }
    )
    entries = parse_json(content)
    assert [(e.text, e.start, e.end) for e in entries] == [
        ("a", 1.0, 2.0),
        ("b", 3.5, 4.0),
        ("c", 5.0, 6.0),
    ]
    assert entries[0].id == "x"
    assert entries[1].id.startswith("cap_")
    assert entries[1].language == "en-US"
    assert entries[2].confidence == 0.5
    assert entries[2].language == "ja-JP"


@pytest.mark.parametrize(
    "content",
    ["{not json", "[]", json.dumps({"items": []}), json.dumps({"captions": {}})],
)
def test_parse_json_invalid_document(content):
    with pytest.raises(InvalidFormat):
        parse_json(content)


def test_invalid_format_is_value_error():
    with pytest.raises(ValueError):
        parse_json("")


@pytest.fixture
def sample_entries():
    return [
        CaptionEntry(start=0.0, end=1.5, text="Line one", id="one"),
        CaptionEntry(start=2.0, end=4.25, text="Tom & Jerry <3", id="two"),
        CaptionEntry(start=65.123, end=3725.5, text="multi\nline text", id="three"),
    ]


@pytest.mark.parametrize(
    "encode, decode",
    [(captions_to_srt, parse_srt), (captions_to_vtt, parse_vtt)],
)
def test_text_formats_round_trip(sample_entries, encode, decode):
    parsed = decode(encode(sample_entries))
    assert [e.text for e in parsed] == [e.text for e in sample_entries]
    for got, want in zip(parsed, sample_entries):
        assert got.start == pytest.approx(want.start, abs=0.001)
        assert got.end == pytest.approx(want.end, abs=0.001)


def test_styled_vtt_round_trip(sample_entries):
    parsed = parse_vtt(captions_to_vtt(sample_entries, style=CaptionStyle(position="top")))
    assert [e.text for e in parsed] == [e.text for e in sample_entries]


def test_json_round_trip_keeps_ids_and_metadata(sample_entries):
    entries = sample_entries + [CaptionEntry(start=5000, end=5001, text="", id="blank", confidence=0.9)]
    parsed = parse_json(captions_to_json(entries))
    assert [e.id for e in parsed] == ["one", "two", "three", "blank"]
    assert parsed[-1].text == ""
    assert parsed[-1].confidence == 0.9
    assert [(e.start, e.end) for e in parsed] == [(e.start, e.end) for e in entries]


@pytest.mark.parametrize(
    "encode, decode",
    [(captions_to_srt, parse_srt), (captions_to_vtt, parse_vtt)],
)
def test_blank_lines_inside_text_do_not_split_blocks(encode, decode):
    entries = [
        CaptionEntry(start=0, end=1, text="para one\n\n  \npara two", id="p"),
        CaptionEntry(start=2, end=3, text="next", id="n"),
    ]
    parsed = decode(encode(entries))
    assert [e.text for e in parsed] == ["para one\npara two", "next"]
    assert [(e.start, e.end) for e in parsed] == [(0.0, 1.0), (2.0, 3.0)]


def test_json_huge_numbers_are_ignored():
    content = json.dumps(
        {
            "captions": [
                {"text": "too big", "start": 10**400, "end": 10**401},
                {"text": "ok", "start": 1, "end": 2, "confidence": 10**400},
                {"text": "flag", "start": True, "end": 2},
            ]
        }
    )
    parsed = parse_json(content)
    assert [e.text for e in parsed] == ["ok"]
    assert parsed[0].confidence is None
