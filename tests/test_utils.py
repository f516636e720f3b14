import stat

from utils import atomic_write, char_prefix, sanitize_xml_string, split_lines


def test_split_lines():
    assert split_lines("a\nb\n") == ["a", "b"]
    assert split_lines("a\r\nb") == ["a", "b"]
    assert split_lines("a\n\n") == ["a", ""]
    assert split_lines("") == []


def test_char_prefix_counts_code_points():
    assert char_prefix("héllo", 2) == "hé"
    assert char_prefix("😀😀😀", 2) == "😀😀"
    assert char_prefix("abc", 0) == ""
    assert char_prefix("abc", 10) == "abc"


def test_sanitize_xml_string():
    assert sanitize_xml_string("a\x00b\x0bc\x7fd") == "abcd"
    assert sanitize_xml_string("keep\ttab\nnewline") == "keep\ttab\nnewline"
    assert sanitize_xml_string("x\ufffey") == "xy"
    assert sanitize_xml_string("") == ""


def test_atomic_write(tmp_path):
    target = tmp_path / "nested" / "rss.xml"

    size = atomic_write(target, b"<rss/>")

    assert size == 6
    assert target.read_bytes() == b"<rss/>"
    assert stat.S_IMODE(target.stat().st_mode) == 0o644
    assert [p.name for p in target.parent.iterdir()] == ["rss.xml"]


def test_atomic_write_replaces_existing(tmp_path):
    target = tmp_path / "feed.json"
    target.write_bytes(b"old")

    atomic_write(target, b"new")

    assert target.read_bytes() == b"new"
