"""Tests for pyyini.parser: comments, literals and the line parser."""

import pytest

from pyyini import parse
from pyyini.model import Section, Value
from pyyini.parser import (
    FormatError,
    YiniParser,
    count_markers,
    parse_literal,
    strip_comments,
    strip_line_comment,
)


# ---------------------------------------------------------------------------
# comments
# ---------------------------------------------------------------------------

class TestComments:
    def test_line_comment(self):
        assert strip_line_comment("a = 1 // note") == "a = 1 "
        assert strip_line_comment("a = 1") == "a = 1"

    def test_block_and_line(self):
        text = "k = 1 // trailing\n/* block\nspanning */ m = 2"
        assert strip_comments(text) == "k = 1 \n m = 2"

    def test_several_blocks(self):
        assert strip_comments("/* a */x/* b */y") == "xy"

    def test_unclosed_block_truncates(self):
        with pytest.warns(UserWarning):
            assert strip_comments("a = 1\n/* open\nb = 2") == "a = 1\n"

    def test_naive_scan_cuts_quoted_text(self):
        # `//` inside quotes still starts a comment, leaving `'http:`.
        with pytest.raises(FormatError):
            parse("url = 'http://x'")
        assert parse("url = http://x")["url"] == Value("http:")

    def test_parse_strips_comments(self):
        root = parse("k = 1 // trailing\n/* block\nspanning */ m = 2")
        assert root.to_dict() == {"k": 1, "m": 2}

    def test_multiline_comments_example(self):
        root = parse(
            "/* This is a header comment\n"
            "   explaining the configuration format */\n"
            "name = 'test'\n"
            "/*\n   Nested configuration section\n*/\n"
            "^ section\n"
            "    /* Inline comment */ value = 42\n"
            "    /* Comment before key */ another = 'test'\n"
            "/* Final comment */\n"
        )
        assert root["name"] == Value("test")
        assert root.get_section("section")["value"] == Value(42)
        assert root.get_section("section")["another"] == Value("test")


# ---------------------------------------------------------------------------
# literals
# ---------------------------------------------------------------------------

class TestParseLiteral:
    def test_quoted(self):
        assert parse_literal("'hello'") == Value("hello")
        assert parse_literal('"hello world"') == Value("hello world")
        assert parse_literal("''") == Value("")

    def test_quoted_keeps_keywords_as_text(self):
        assert parse_literal("'true'") == Value("true")
        assert parse_literal("'42'") == Value("42")

    def test_array(self):
        v = parse_literal("[1, 'two', true]")
        assert v.as_array() == [Value(1), Value("two"), Value(True)]

    def test_empty_array(self):
        assert parse_literal("[]") == Value([])
        assert parse_literal("[ , ]") == Value([])

    def test_array_skips_empty_items(self):
        assert parse_literal("[1, , 2,]") == Value([1, 2])

    def test_nested_array(self):
        v = parse_literal("[[1, 2], [3], 'x']")
        assert v == Value([[1, 2], [3], "x"])

    def test_array_comma_in_quotes(self):
        assert parse_literal("['a, b', c]") == Value(["a, b", "c"])

    def test_array_apostrophe_inside_item(self):
        assert parse_literal("[it's, ok]") == Value(["it's", "ok"])

    @pytest.mark.parametrize("text", ["true", "TRUE", "Yes", "on"])
    def test_true_words(self, text):
        assert parse_literal(text) == Value(True)

    @pytest.mark.parametrize("text", ["false", "No", "OFF"])
    def test_false_words(self, text):
        assert parse_literal(text) == Value(False)

    def test_numbers(self):
        assert parse_literal("42") == Value(42)
        assert parse_literal("-7") == Value(-7)
        assert parse_literal("3.14") == Value(3.14)
        assert parse_literal("30.") == Value(30.0)

    @pytest.mark.parametrize("n", [0, 1, -1, 2**31 - 1, -2**31, 2**63])
    def test_integers_read_back(self, n):
        assert parse_literal(str(n)).as_int() == n

    def test_digits_stay_int(self):
        # `1`/`0` only mean bools when coercing text.
        assert parse_literal("1") == Value(1)

    def test_fallback_text(self):
        assert parse_literal("hello world") == Value("hello world")
        assert parse_literal("1.2.3") == Value("1.2.3")
        assert parse_literal("12abc") == Value("12abc")
        assert parse_literal("1e5") == Value("1e5")

    def test_empty(self):
        assert parse_literal("") == Value("")

    def test_unterminated_string(self):
        with pytest.raises(FormatError):
            parse_literal("'abc")
        with pytest.raises(FormatError):
            parse_literal("'")

    def test_unterminated_array(self):
        with pytest.raises(FormatError):
            parse_literal("[1, 2")
        with pytest.raises(FormatError):
            parse_literal("[[1, 2]")


# ---------------------------------------------------------------------------
# line parser
# ---------------------------------------------------------------------------

class TestCountMarkers:
    def test_count(self):
        assert count_markers("^^^ a") == 3
        assert count_markers("a = 1") == 0


class TestLineParser:
    def test_basic(self):
        root = parse(
            "host = 'localhost'\n"
            "port = 8080\n"
            "enabled = true\n"
            "timeout = 30.5\n"
        )
        assert root["host"].as_string() == "localhost"
        assert root["port"].as_int() == 8080
        assert root["enabled"].as_bool() is True
        assert root["timeout"].as_float() == 30.5

    def test_nesting(self):
        root = parse("^ a\nx = 1\n^^ b\ny = 2")
        assert len(root) == 0
        a = root.get_section("a")
        assert a.to_dict() == {"x": 1, "b": {"y": 2}}
        assert a.get_section("b")["y"] == Value(2)

    def test_nested_example(self):
        root = parse(
            "^ server\n"
            "    ^^ connection\n"
            "    host = 'localhost'\n"
            "    port = 8080\n"
            "\n"
            "    ^^ auth\n"
            "    enabled = true\n"
            "        ^^^ credentials\n"
            "        username = 'admin'\n"
            "        password = 'secret'\n"
        )
        server = root.get_section("server")
        assert server.get_section("connection")["port"] == Value(8080)
        auth = server.get_section("auth")
        assert auth["enabled"] == Value(True)
        assert auth.get_section("credentials")["username"] == Value("admin")
        assert len(server) == 0

    def test_sibling_resets_depth(self):
        root = parse("^ a\n^^ b\n^ c\nx = 1")
        assert root.get_section("c")["x"] == Value(1)
        assert not root.get_section("a").get_section("b").has_value("x")

    def test_depth_jump_nests_under_open_section(self):
        root = parse("^ a\n^^^ c\nx = 1")
        assert root.get_section("a").get_section("c")["x"] == Value(1)

    def test_strict_depth(self):
        with pytest.raises(FormatError) as e:
            parse("^ a\n^^^ c\nx = 1", strict_depth=True)
        assert e.value.lineno == 2

    def test_empty_section_kept(self):
        root = parse("^ empty\n^ full\nx = 1")
        assert root.has_section("empty")

    def test_reopen_section(self):
        root = parse("^ s\na = 1\n^ t\n^ s\nb = 2")
        assert root.get_section("s").to_dict() == {"a": 1, "b": 2}

    def test_last_value_wins(self):
        assert parse("a = 1\na = 2")["a"] == Value(2)

    def test_value_may_hold_equals(self):
        assert parse("expr = a=b")["expr"] == Value("a=b")

    def test_crlf(self):
        assert parse("a = 1\r\nb = 'x'\r\n").to_dict() == {"a": 1, "b": "x"}

    def test_arrays(self):
        root = parse(
            "numbers = [1, 2, 3, 4, 5]\n"
            "names = ['alice', 'bob', 'charlie']\n"
            "mixed = [1, 'test', true, 3.14]\n"
        )
        assert len(root["numbers"].as_array()) == 5
        assert root["names"].as_array()[2] == Value("charlie")
        assert root["mixed"] == Value([1, "test", True, 3.14])


class TestFormatErrors:
    def test_missing_equals(self):
        with pytest.raises(FormatError) as e:
            parse("no_equals_sign_here")
        assert e.value.lineno == 1
        assert e.value.line == "no_equals_sign_here"
        assert "line 1" in str(e.value)

    def test_empty_key(self):
        with pytest.raises(FormatError) as e:
            parse("a = 1\n = 5")
        assert e.value.lineno == 2
        assert e.value.reason == "Empty key"

    def test_empty_section_name(self):
        with pytest.raises(FormatError):
            parse("^^  ")

    def test_bad_literal_gets_line_number(self):
        with pytest.raises(FormatError) as e:
            parse("a = 1\nb = 'oops")
        assert e.value.lineno == 2

    def test_line_number_counts_block_comments(self):
        with pytest.raises(FormatError) as e:
            parse("/* a\nb\n*/\nbad line")
        assert e.value.lineno == 4

    def test_line_number_after_comment_closing_mid_line(self):
        with pytest.raises(FormatError) as e:
            parse("a = 1\n/* c\n*/ bad")
        assert e.value.lineno == 3

    def test_line_number_after_comment_behind_text(self):
        # the line starts before the comment opens.
        with pytest.raises(FormatError) as e:
            parse("bad /* c\n*/ line\nok = 1")
        assert e.value.lineno == 1

    def test_line_keeps_comment_text(self):
        with pytest.raises(FormatError) as e:
            parse("a = 1\n  bad line // note\r\n")
        assert e.value.lineno == 2
        assert e.value.line == "  bad line // note"

    def test_carriage_return_in_key(self):
        with pytest.raises(FormatError) as e:
            parse("a\rb = 1")
        assert e.value.lineno == 1
        assert e.value.line == "a\rb = 1"

    def test_bad_section_name(self):
        with pytest.raises(FormatError) as e:
            parse("ok = 1\n^ a\rb")
        assert e.value.lineno == 2

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            parse("oops")


# ---------------------------------------------------------------------------
# YiniParser instance
# ---------------------------------------------------------------------------

class TestYiniParser:
    def test_parse_replaces_tree(self):
        p = YiniParser()
        p.parse_string("a = 1\n^ s\nx = 1")
        p.parse_string("b = 2")
        assert "a" not in p.root
        assert not p.root.has_section("s")
        assert p["b"] == Value(2)

    def test_merge(self):
        p = YiniParser()
        p.parse_string("a = 1\n^ s\nx = 1")
        p.parse_string("a = 3\n^ s\ny = 2", merge=True)
        assert p.root.to_dict() == {"a": 3, "s": {"x": 1, "y": 2}}

    def test_failed_parse_resets(self):
        p = YiniParser()
        p.parse_string("a = 1")
        with pytest.raises(FormatError):
            p.parse_string("b = 2\nbroken")
        assert p.root == Section()

    def test_root_is_kept(self):
        p = YiniParser()
        root = p.root
        assert p.parse_string("a = 1") is root

    def test_strict_depth_option(self):
        p = YiniParser(strict_depth=True)
        with pytest.raises(FormatError):
            p.parse_string("^ a\n^^^ b")

    def test_convenience_access(self):
        p = YiniParser()
        p["k"] = "v"
        p.section("config")["setting"] = "value"
        assert p["k"] == Value("v")
        assert p.root.get_section("config")["setting"] == Value("value")

    def test_readstream_into_instance(self):
        from io import StringIO
        ins = Section({"kept": True})
        YiniParser.readstream(StringIO("new = 1"), ins)
        assert ins.to_dict() == {"kept": True, "new": 1}
