import io
from pathlib import Path

import pytest

from linescribe.core.errors import ScriptResourceNotFound
from linescribe.grammar.patterns import compile_pattern
from linescribe.scanning.cursor import ConfigScanner
from linescribe.scanning.ingest import LineIngestor, ingest_text, read_source


def texts(lines):
    return [line.text for line in lines]


def test_comment_only_input_is_empty():
    """
    EMPTINESS TEST: blank and comment-only input leaves nothing to scan.
    """
    scanner = ConfigScanner()
    scanner.open_source("# header\n\n// slashes\n-- dashes\n   \n\t\n")

    assert scanner.has_next_line() is False
    assert scanner.get_command_count() == 0


def test_clean_input_round_trips():
    """
    ROUND-TRIP TEST: without comments or blanks, joining the Line Store gives
    back the trimmed/compressed original.
    """
    raw = "alpha beta\n  gamma   delta  \nepsilon"
    lines = ingest_text(raw)

    assert "\n".join(texts(lines)) == "alpha beta\ngamma delta\nepsilon"


def test_original_line_numbers_survive():
    lines = ingest_text("first\n\n# skipped\nsecond\n// skipped too\nthird")

    assert [(l.line_no, l.text) for l in lines] == [(1, "first"), (4, "second"), (6, "third")]


@pytest.mark.parametrize("raw, expected", [
    ("print a # trailing note", "print a"),
    ("yaml --read x // trailing", "yaml --read x"),
    ("useAsInput http://host/path", "useAsInput http:"),
    ('useAsInput "http://host/path"', 'useAsInput "http://host/path"'),
    ('say "a # not a comment"', 'say "a # not a comment"'),
    ("say 'keep // this'", "say 'keep // this'"),
    ("value-with--dashes -- stays", "value-with--dashes -- stays"),
    ("issue#42 stays", "issue"),
    ("print don't panic # note", "print don't panic"),
    ("setProperty msg=it's # note", "setProperty msg=it's"),
    ("say 'half // open", "say 'half"),
])
def test_trailing_comments(raw, expected):
    """
    COMMENT TEST: any '#' or '//' outside a closed quote pair cuts the line;
    a lone apostrophe protects nothing; '--' only counts at the start of a line.
    """
    assert texts(ingest_text(raw)) == [expected]


def test_line_that_becomes_blank_is_dropped():
    assert ingest_text("   # only a comment after spaces\nreal")[0].text == "real"


def test_trim_and_compress_flags():
    assert texts(ingest_text("  indented   value", trim=False, compress=False)) == ["  indented   value"]
    assert texts(ingest_text("  indented   value", trim=False, compress=True)) == [" indented value"]
    assert texts(ingest_text("  indented   value", trim=True, compress=False)) == ["indented   value"]


def test_bom_and_crlf_are_cleaned():
    assert texts(ingest_text("\ufeffa\r\nb\r\n")) == ["a", "b"]


def test_extra_delimiter_splits_records():
    lines = LineIngestor(delimiter=compile_pattern(";")).ingest("a=1; b=2;;\nc=3")

    assert [(l.line_no, l.text) for l in lines] == [(1, "a=1"), (1, "b=2"), (2, "c=3")]


def test_read_source_kinds(workdir):
    (workdir / "script.txt").write_text("from file\n", encoding="utf-8")

    assert read_source("@script.txt") == ("@script.txt", "from file\n")
    assert read_source(Path("script.txt"))[1] == "from file\n"
    assert read_source("inline text") == ("inline text", "inline text")
    assert read_source(b"raw bytes")[1] == "raw bytes"
    assert read_source(io.StringIO("streamed"))[1] == "streamed"
    assert read_source(io.BytesIO(b"\xef\xbb\xbfbinary"))[1] == "binary"


def test_object_references_use_resolver():
    objects = {"cfg": "from memory"}

    assert read_source("!cfg", objects.get) == ("!cfg", "from memory")
    with pytest.raises(ScriptResourceNotFound):
        read_source("!absent", objects.get)
    with pytest.raises(ScriptResourceNotFound):
        read_source("!cfg")


def test_missing_file_is_a_file_not_found(workdir):
    with pytest.raises(FileNotFoundError) as exc:
        read_source("@nowhere.txt")

    assert isinstance(exc.value, ScriptResourceNotFound)
    assert exc.value.reference == "@nowhere.txt"


def test_unsupported_source_type():
    with pytest.raises(TypeError):
        read_source(42)
