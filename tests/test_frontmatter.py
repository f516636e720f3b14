from datetime import date, datetime, timezone

from frontmatter import (
    parse_date,
    parse_document_text,
    resolve_front_matter,
    split_front_matter,
)

FALLBACK = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def test_split_header_and_body():
    header, body = split_front_matter("---\ntitle: A\n---\nBody\n")
    assert header == "title: A\n"
    assert body == "Body\n"


def test_split_without_header_keeps_everything_as_body():
    header, body = split_front_matter("Hello")
    assert header is None
    assert body == "Hello\n"


def test_unterminated_header_is_body():
    header, body = split_front_matter("---\ntitle: A\nBody")
    assert header is None
    assert body == "---\ntitle: A\nBody\n"


def test_delimiter_must_be_first_line():
    header, body = split_front_matter("Intro\n---\ntitle: A\n---\n")
    assert header is None
    assert body.startswith("Intro\n")


def test_split_handles_crlf_and_bom():
    header, body = split_front_matter("\ufeff---\r\ntitle: A\r\n---\r\nBody\r\n")
    assert header == "title: A\n"
    assert body == "Body\n"


def test_parse_date_calendar_date_is_midnight_utc():
    assert parse_date("2025-01-01") == datetime(2025, 1, 1, tzinfo=timezone.utc)


def test_parse_date_rfc3339_normalized_to_utc():
    assert parse_date("2025-01-01T10:00:00+02:00") == datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc)
    assert parse_date("2025-01-01T10:00:00Z") == datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc)


def test_parse_date_rejects_garbage_and_naive_timestamps():
    assert parse_date("not a date") is None
    assert parse_date("2025-01-01T10:00:00") is None
    assert parse_date(datetime(2025, 1, 1, 10, 0)) is None
    assert parse_date(12345) is None
    assert parse_date(None) is None


def test_parse_date_accepts_yaml_date_objects():
    assert parse_date(date(2025, 3, 4)) == datetime(2025, 3, 4, tzinfo=timezone.utc)


def test_resolve_full_header():
    header = 'title: "Post A"\ndate: "2025-01-01"\nauthor: "Jane"\ndescription: "Custom summary."\n'
    meta = resolve_front_matter(header, "Body\n", "post-a", FALLBACK)
    assert meta.title == "Post A"
    assert meta.date == datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert meta.author == "Jane"
    assert meta.summary == "Custom summary."


def test_description_wins_over_summary():
    meta = resolve_front_matter("description: first\nsummary: second\n", "", "x", FALLBACK)
    assert meta.summary == "first"


def test_summary_key_used_when_no_description():
    meta = resolve_front_matter("summary: second\n", "", "x", FALLBACK)
    assert meta.summary == "second"


def test_bad_date_falls_back_to_file_time_only():
    meta = resolve_front_matter("title: Kept\ndate: nonsense\n", "Body\n", "stem", FALLBACK)
    assert meta.title == "Kept"
    assert meta.date == FALLBACK


def test_missing_title_uses_stem():
    meta = resolve_front_matter('date: "2025-02-02"\n', "Body\n", "my-post", FALLBACK)
    assert meta.title == "my-post"
    assert meta.date == datetime(2025, 2, 2, tzinfo=timezone.utc)


def test_unquoted_yaml_date():
    meta = resolve_front_matter("title: T\ndate: 2025-03-04\n", "", "t", FALLBACK)
    assert meta.date == datetime(2025, 3, 4, tzinfo=timezone.utc)


def test_invalid_yaml_gives_synthetic_record():
    meta = resolve_front_matter("title: [unclosed\n", "Body text\n", "stem", FALLBACK)
    assert meta.title == "stem"
    assert meta.date == FALLBACK
    assert meta.author is None
    assert meta.summary == "Body text\n"


def test_non_mapping_header_gives_synthetic_record():
    meta = resolve_front_matter("- a\n- b\n", "Body\n", "stem", FALLBACK)
    assert meta.title == "stem"
    assert meta.summary == "Body\n"


def test_no_header_uses_stem_and_fallback_date():
    meta, body = parse_document_text("Short body", "notes", FALLBACK)
    assert body == "Short body\n"
    assert meta.title == "notes"
    assert meta.date == FALLBACK
    assert meta.summary == "Short body\n"


def test_out_of_range_unquoted_date_only_replaces_date():
    meta = resolve_front_matter("title: Kept\ndate: 2025-13-45\nauthor: Jane\n", "Body\n", "stem", FALLBACK)
    assert meta.title == "Kept"
    assert meta.author == "Jane"
    assert meta.date == FALLBACK


def test_unquoted_timestamp_with_offset():
    meta = resolve_front_matter("date: 2025-01-01T10:00:00+02:00\n", "", "t", FALLBACK)
    assert meta.date == datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc)
