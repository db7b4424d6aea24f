"""Tests for the properties file codec."""

import io

import pytest

from scriptmap import properties
from scriptmap.properties import PropertiesError


def _entry_lines(text):
    return [line for line in text.splitlines() if not line.startswith("#")]


def test_dumps_writes_comment_then_timestamp():
    text = properties.dumps({"a": "1"}, comment="Autogenerated.  Do not edit.")
    lines = text.splitlines()
    assert lines[0] == "# Autogenerated.  Do not edit."
    assert lines[1].startswith("# ")
    assert lines[2] == "a=1"


def test_dumps_sorts_keys():
    text = properties.dumps({"b": "2", "a": "1", "c": "3"})
    assert _entry_lines(text) == ["a=1", "b=2", "c=3"]


def test_dumps_escapes_separators_and_comment_markers():
    text = properties.dumps({"a=b:c": "#x!y=z"})
    assert _entry_lines(text) == ["a\\=b\\:c=\\#x\\!y\\=z"]


def test_dumps_escapes_key_spaces_and_leading_value_space():
    text = properties.dumps({"my key": " two words"})
    assert _entry_lines(text) == ["my\\ key=\\ two words"]


def test_dumps_escapes_backslashes_and_control_chars():
    text = properties.dumps({"k": "C:\\dir\\\n\t"})
    assert _entry_lines(text) == ["k=C\\:\\\\dir\\\\\\n\\t"]


def test_dumps_output_is_ascii():
    text = properties.dumps({"Caf\u00e9": "/tmp/\u00fcber/\u65e5\u672c.gradle"})
    assert text.isascii()
    assert "Caf\\u00E9=" in text
    assert "\\u65E5\\u672C" in text


def test_dumps_astral_characters_as_surrogate_pairs():
    text = properties.dumps({"k": "\U0001F600"})
    assert _entry_lines(text) == ["k=\\uD83D\\uDE00"]


def test_round_trip_preserves_awkward_strings():
    entries = {
        "build_3f2a1c": "/home/user/my project/build.gradle",
        "Caf\u00e9 Script": "/tmp/\u00fcber/\u65e5\u672c.gradle",
        "emoji": "/tmp/\U0001F600.gradle",
        "trailing": "C:\\dir\\",
        "=:#!": " leading and trailing ",
        "": "empty key",
        "empty value": "",
    }
    assert properties.loads(properties.dumps(entries, comment="header")) == entries


def test_dump_and_load_file_objects():
    buf = io.StringIO()
    properties.dump({"Foo": "/tmp/foo.gradle"}, buf, comment="header")
    buf.seek(0)
    assert properties.load(buf) == {"Foo": "/tmp/foo.gradle"}


def test_loads_skips_comments_and_blank_lines():
    text = "# hash comment\n! bang comment\n\n   \n  # indented comment\nkey=value\n"
    assert properties.loads(text) == {"key": "value"}


def test_loads_accepts_all_separator_styles():
    text = "a=1\nb:2\nc 3\nd = 4\ne\t:\t5\nf\n"
    assert properties.loads(text) == {
        "a": "1", "b": "2", "c": "3", "d": "4", "e": "5", "f": "",
    }


def test_loads_keeps_separator_chars_inside_value():
    assert properties.loads("url=http://host:8080/a=b\n") == {"url": "http://host:8080/a=b"}


def test_loads_handles_continuation_lines():
    text = "paths = /a,\\\n    /b,\\\n\t/c\nnext=1\n"
    assert properties.loads(text) == {"paths": "/a,/b,/c", "next": "1"}


def test_loads_even_trailing_backslashes_do_not_continue():
    text = "k=C\\:\\\\dir\\\\\nnext=1\n"
    assert properties.loads(text) == {"k": "C:\\dir\\", "next": "1"}


def test_loads_handles_crlf_and_cr_newlines():
    assert properties.loads("a=1\r\nb=2\rc=3") == {"a": "1", "b": "2", "c": "3"}


def test_loads_unknown_escape_drops_backslash():
    assert properties.loads("k=\\q\\/\n") == {"k": "q/"}


def test_loads_later_duplicate_wins():
    assert properties.loads("k=first\nk=second\n") == {"k": "second"}


def test_loads_reads_raw_latin1_characters():
    assert properties.loads("caf\u00e9=\u00fc\n") == {"caf\u00e9": "\u00fc"}


@pytest.mark.parametrize("bad", ["k=\\u00G1\n", "k=\\u12\n", "k=\\u\n"])
def test_loads_rejects_malformed_unicode_escape(bad):
    with pytest.raises(PropertiesError):
        properties.loads(bad)


def test_properties_error_is_value_error():
    assert issubclass(PropertiesError, ValueError)


def test_loads_keeps_lone_surrogate():
    assert properties.loads("k=\\uD800\n") == {"k": "\ud800"}


def test_loads_keeps_reversed_surrogate_pair():
    assert properties.loads("k=\\uDE00\\uD83D\n") == {"k": "\ude00\ud83d"}


@pytest.mark.parametrize("value", ["\ud800", "x\udce9y", "\ude00\ud83d", "\udc80\ud800"])
def test_round_trip_unpaired_surrogates(value):
    text = properties.dumps({"k": value, value: "key"})
    assert text.isascii()
    assert properties.loads(text) == {"k": value, value: "key"}
