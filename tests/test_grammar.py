import pytest

from linescribe.core.models import CommandType
from linescribe.grammar.classifier import BatchGrammar

ACCESSORS = [
    "get_property_kv", "get_print_expr", "get_save_to", "get_use_as_input",
    "get_make_new_root", "get_sub_batch_file", "get_sleep_duration", "get_command",
]


def classify(line):
    grammar = BatchGrammar()
    grammar.open_source(line)
    grammar.next_line()
    return grammar


@pytest.mark.parametrize("line, cmd_type, accessor, expected", [
    ("makeNewRoot root", CommandType.MAKE_NEW_ROOT, "get_make_new_root", "root"),
    ("batch @sub-batch.txt", CommandType.BATCH, "get_sub_batch_file", "@sub-batch.txt"),
    ("batch ?sub.txt", CommandType.BATCH, "get_sub_batch_file", "?sub.txt"),
    ("properties P=@x.props", CommandType.PROPERTIES, "get_property_kv", ("P", "@x.props")),
    ("setProperty ?X=1", CommandType.SET_PROPERTY, "get_property_kv", ("?X", "1")),
    ("print hello world", CommandType.PRINT, "get_print_expr", "hello world"),
    ("print -", CommandType.PRINT, "get_print_expr", "-"),
    ("print ${x}", CommandType.PRINT, "get_print_expr", "${x}"),
    ("saveTo !result", CommandType.SAVE_TO, "get_save_to", "!result"),
    ("saveTo ?@out.yaml", CommandType.SAVE_TO, "get_save_to", "?@out.yaml"),
    ("useAsInput @in.yaml", CommandType.USE_AS_INPUT, "get_use_as_input", "@in.yaml"),
    ("useAsInput {a: 1}", CommandType.USE_AS_INPUT, "get_use_as_input", "{a: 1}"),
    ("sleep 3", CommandType.SLEEP, "get_sleep_duration", 3000),
    ("yaml --read spec.kind", CommandType.ORDINARY, "get_command", "yaml"),
    ("include @other.txt", CommandType.ORDINARY, "get_command", "include"),
])
def test_classification_table(line, cmd_type, accessor, expected):
    """
    GRAMMAR TEST: each line gets exactly one type, and only the matching
    accessor carries a payload.
    """
    grammar = classify(line)

    assert grammar.get_cmd_type() is cmd_type
    assert getattr(grammar, accessor)() == expected
    for other in ACCESSORS:
        if other != accessor:
            assert getattr(grammar, other)() is None, other
    assert grammar.is_foreach_line() is False
    assert grammar.is_end_line() is False


@pytest.mark.parametrize("line", ["foreach", "FOREACH", "  ForEach  "])
def test_foreach_keyword(line):
    grammar = classify(line)

    assert grammar.is_foreach_line() is True
    assert grammar.get_cmd_type() is CommandType.FOREACH
    assert grammar.get_command() is None


@pytest.mark.parametrize("line", ["end", "END"])
def test_end_keyword(line):
    assert classify(line).is_end_line() is True


def test_keywords_must_stand_alone():
    assert classify("foreach item").get_cmd_type() is CommandType.ORDINARY
    assert classify("endless loop").get_cmd_type() is CommandType.ORDINARY


def test_echo_prefix_is_stripped_and_flagged():
    grammar = classify("echo makeNewRoot r")

    assert grammar.get_cmd_type() is CommandType.MAKE_NEW_ROOT
    assert grammar.is_line_echoed() is True
    assert grammar.current_line() == "makeNewRoot r"


def test_flags_never_leak_to_next_line():
    grammar = BatchGrammar()
    grammar.open_source("echo sleep 5\nplain command")

    grammar.next_line()
    assert grammar.get_sleep_duration() == 5000
    grammar.next_line()
    assert grammar.get_sleep_duration() is None
    assert grammar.is_line_echoed() is False
    assert grammar.get_command() == "plain"


def test_walks_a_loop_body():
    grammar = BatchGrammar()
    grammar.open_source("# loop\nforeach\n  print ${item}\\n\nyaml --read x\nend\n")

    kinds = []
    while grammar.has_next_line():
        grammar.next_line()
        kinds.append(grammar.get_cmd_type())

    assert kinds == [CommandType.FOREACH, CommandType.PRINT, CommandType.ORDINARY, CommandType.END]
    assert grammar.get_orig_line_num() == 5
