"""
Tests for the line matcher.
"""

import time
import unittest

from errfmt.compiler import compile_template
from errfmt.matcher import LineMatcher, match_line, parse_digits
from errfmt.models import Diagnostic, Template


class TestLineMatcher(unittest.TestCase):
    """Test matching single lines against compiled templates."""

    def test_gcc_style_line(self):
        template = compile_template("%f:%l:%c: %m")

        result = match_line(template, "main.c:10:5: unexpected token")

        self.assertEqual(result, Diagnostic(
            file="main.c", line=10, column=5, kind=None,
            message="unexpected token"
        ))

    def test_php_style_line(self):
        template = compile_template("%k: %m in %f on line %l")

        result = match_line(template, "error: unexpected token in main.php on line 10")

        self.assertIsNotNone(result)
        self.assertEqual(result.kind, "error")
        self.assertEqual(result.message, "unexpected token")
        self.assertEqual(result.file, "main.php")
        self.assertEqual(result.line, 10)
        self.assertIsNone(result.column)

    def test_non_diagnostic_line(self):
        template = compile_template("%k: %m in %f on line %l")
        self.assertIsNone(match_line(template, "Parsing complete."))

    def test_trailing_file_on_empty_line(self):
        result = match_line(compile_template("%f"), "")

        self.assertIsNotNone(result)
        self.assertEqual(result.file, "")
        self.assertEqual(result.message, "")

    def test_trailing_message_may_be_empty(self):
        result = match_line(compile_template("%f:%l: %m"), "a.py:3: ")
        self.assertEqual(result.message, "")

    def test_no_match_cases(self):
        template = compile_template("%f:%l:%c: %k: %m")
        no_match_cases = [
            "",
            "1 error generated.",
            "main.c: In function 'main':",
            "main.c:10: error: missing column",
            "main.c:10:5 error: missing separator",
            "   10 |     y = 3;",
        ]

        for line in no_match_cases:
            with self.subTest(line=line):
                self.assertIsNone(match_line(template, line))

    def test_literals_are_case_sensitive(self):
        template = compile_template("Error: %m")
        self.assertIsNone(match_line(template, "error: boom"))
        self.assertEqual(match_line(template, "Error: boom").message, "boom")

    def test_leading_literal_must_match_at_start(self):
        template = compile_template("[lint] %f:%l: %m")
        self.assertIsNone(match_line(template, "note [lint] a.py:1: x"))
        self.assertEqual(match_line(template, "[lint] a.py:1: x").file, "a.py")

    def test_escaped_percent_in_line(self):
        template = compile_template("%f: %l%% covered")

        result = match_line(template, "core.py: 87% covered")

        self.assertEqual(result.file, "core.py")
        self.assertEqual(result.line, 87)

    def test_empty_template_matches_nothing(self):
        matcher = LineMatcher(compile_template(""))
        self.assertIsNone(matcher.match(""))
        self.assertIsNone(matcher.match("anything"))

    def test_literal_only_template(self):
        template = compile_template("All good")
        self.assertEqual(match_line(template, "All good"), Diagnostic())
        self.assertIsNone(match_line(template, "All good!"))


class TestNumericPlaceholders(unittest.TestCase):
    """Test %l and %c digit-run captures."""

    def test_digits_are_required(self):
        template = compile_template("%f:%l: %m")
        self.assertIsNone(match_line(template, "a.py:x: boom"))
        self.assertIsNone(match_line(template, "a.py:: boom"))

    def test_digit_run_is_maximal(self):
        template = compile_template("%f:%l%m")

        result = match_line(template, "a.py:1234rest")

        self.assertEqual(result.line, 1234)
        self.assertEqual(result.message, "rest")

    def test_only_ascii_digits(self):
        template = compile_template("%f:%l")
        self.assertIsNone(match_line(template, "a.py:\u0661\u0662"))

    def test_zero_and_large_values_pass_through(self):
        template = compile_template("%f:%l:%c")

        self.assertEqual(match_line(template, "a.py:0:0").line, 0)
        big = match_line(template, "a.py:123456789012345678901234567890:7")
        self.assertEqual(big.line, 123456789012345678901234567890)
        self.assertEqual(big.column, 7)

    def test_very_long_digit_runs(self):
        template = compile_template("%f:%l: %m")

        result = match_line(template, "a.py:" + "1" * 5000 + ": boom")

        self.assertIsNotNone(result)
        self.assertEqual(result.line, (10 ** 5000 - 1) // 9)
        self.assertEqual(result.message, "boom")

    def test_parse_digits_across_chunks(self):
        for digits, expected in [
            ("7", 7),
            ("0" * 1500 + "42", 42),
            ("1" + "0" * 2500, 10 ** 2500),
        ]:
            with self.subTest(length=len(digits)):
                self.assertEqual(parse_digits(digits), expected)

    def test_leading_zeros(self):
        result = match_line(compile_template("%f:%l"), "a.py:007")
        self.assertEqual(result.line, 7)

    def test_trailing_numeric_must_reach_end_of_line(self):
        template = compile_template("%f:%l")
        self.assertEqual(match_line(template, "a.py:12").line, 12)
        self.assertIsNone(match_line(template, "a.py:12 extra"))
        self.assertIsNone(match_line(template, "a.py:"))

    def test_trailing_text_after_last_literal_fails(self):
        template = compile_template("%f:%l:")
        self.assertIsNotNone(match_line(template, "a.py:10:"))
        self.assertIsNone(match_line(template, "a.py:10: extra"))


class TestLazyPlaceholders(unittest.TestCase):
    """Test shortest-match captures for %f and %k."""

    def test_file_stops_at_first_separator(self):
        template = compile_template("%f:%l: %m")

        result = match_line(template, "src/a:b.py:3: boom")

        # no backtracking: "src/a" is followed by "b.py", not digits
        self.assertIsNone(result)

    def test_file_with_spaces(self):
        template = compile_template("%f on line %l")

        result = match_line(template, "My Documents/page one.php on line 4")

        self.assertEqual(result.file, "My Documents/page one.php")
        self.assertEqual(result.line, 4)

    def test_capture_must_be_non_empty(self):
        template = compile_template("%f:%l")
        self.assertIsNone(match_line(template, ":12"))

    def test_kind_capture(self):
        template = compile_template("%k[%l]: %m")

        result = match_line(template, "warning[42]: deprecated call")

        self.assertEqual(result.kind, "warning")
        self.assertEqual(result.line, 42)
        self.assertEqual(result.message, "deprecated call")

    def test_adjacent_placeholders_take_one_character(self):
        template = compile_template("%k%f:%l")

        result = match_line(template, "Wmain.c:3")

        self.assertEqual(result.kind, "W")
        self.assertEqual(result.file, "main.c")
        self.assertEqual(result.line, 3)

    def test_one_character_rule_is_not_retried(self):
        template = compile_template("%f%l: %m")

        self.assertEqual(match_line(template, "a12: boom").file, "a")
        self.assertEqual(match_line(template, "a12: boom").line, 12)
        self.assertIsNone(match_line(template, "ab12: boom"))

    def test_adjacent_placeholder_needs_a_character(self):
        template = compile_template("x%k%m")
        self.assertIsNone(match_line(template, "x"))


class TestMessagePlaceholder(unittest.TestCase):
    """Test %m, which is always greedy."""

    def test_message_keeps_separators(self):
        template = compile_template("%f:%l: %m")

        result = match_line(template, "a.py:1: expected ':' here: got ';'")

        self.assertEqual(result.message, "expected ':' here: got ';'")

    def test_inner_message_is_greedy(self):
        template = compile_template("%m: %f")

        result = match_line(template, "a: b: c")

        self.assertEqual(result.message, "a: b")
        self.assertEqual(result.file, "c")

    def test_inner_message_gives_way_to_following_segments(self):
        template = compile_template("%k: %m in %f on line %l")

        result = match_line(
            template,
            "PHP Parse error:  syntax error, unexpected 'in' in /tmp/in.php on line 4"
        )

        self.assertEqual(result.kind, "PHP Parse error")
        self.assertEqual(result.message, " syntax error, unexpected 'in'")
        self.assertEqual(result.file, "/tmp/in.php")
        self.assertEqual(result.line, 4)

    def test_inner_message_swallows_rest_when_tail_cannot_match(self):
        template = compile_template("%m in %f")

        result = match_line(template, "something went wrong")

        self.assertEqual(result.message, "something went wrong")
        self.assertIsNone(result.file)

    def test_empty_inner_message(self):
        template = compile_template("%f:%m:%l")

        result = match_line(template, "a.py::7")

        self.assertEqual(result.file, "a.py")
        self.assertEqual(result.message, "")
        self.assertEqual(result.line, 7)

    def test_inner_message_ends_at_last_following_literal(self):
        template = compile_template("%m (%f)")

        result = match_line(template, "bad call (see docs) (lib/util.c)")

        self.assertEqual(result.message, "bad call (see docs)")
        self.assertEqual(result.file, "lib/util.c")

    def test_inner_message_on_long_unmatched_line(self):
        template = compile_template("%m:%f;")
        line = ":" * 20000

        start = time.perf_counter()
        result = match_line(template, line)
        elapsed = time.perf_counter() - start

        self.assertEqual(result.message, line)
        self.assertIsNone(result.file)
        self.assertLess(elapsed, 1.0)

    def test_lazy_file_on_long_unmatched_line(self):
        template = compile_template("%f;%l")

        start = time.perf_counter()
        result = match_line(template, "a" * 200000)
        elapsed = time.perf_counter() - start

        self.assertIsNone(result)
        self.assertLess(elapsed, 1.0)


class TestRoundTrip(unittest.TestCase):
    """Substituted values are recovered exactly."""

    def test_substituted_values_are_recovered(self):
        cases = [
            ("%f:%l:%c: %k: %m",
             {"file": "/src/pkg/mod.py", "line": 120, "column": 4,
              "kind": "warning", "message": "unused import: os"}),
            ("%k: %m in %f on line %l",
             {"kind": "Fatal error", "message": "Call to undefined function foo()",
              "file": "/var/www/app.php", "line": 33}),
            ("[%k] %f(%l,%c) %m",
             {"kind": "E501", "file": "C:\\proj\\main.cs", "line": 9,
              "column": 81, "message": "line too long (96 > 80)"}),
            ("%f|%l|%m", {"file": "x", "line": 0, "message": ""}),
        ]

        for errfmt, values in cases:
            with self.subTest(errfmt=errfmt):
                line = errfmt
                for letter, key in [("f", "file"), ("l", "line"), ("c", "column"),
                                    ("k", "kind"), ("m", "message")]:
                    if key in values:
                        line = line.replace("%" + letter, str(values[key]))

                result = match_line(compile_template(errfmt), line)

                self.assertIsNotNone(result, f"No match for: {line}")
                self.assertEqual(result, Diagnostic(**values))


class TestMatchLines(unittest.TestCase):
    """Test matching a stream of lines."""

    def test_only_matching_lines_are_yielded_in_order(self):
        matcher = LineMatcher(compile_template("%f:%l: %m"))
        lines = [
            "checking 3 files",
            "a.py:1: first",
            "",
            "b.py:20: second",
            "done",
        ]

        results = list(matcher.match_lines(lines))

        self.assertEqual([n for n, _ in results], [2, 4])
        self.assertEqual([d.message for _, d in results], ["first", "second"])

    def test_no_state_between_lines(self):
        matcher = LineMatcher(compile_template("%f:%l: %m"))

        first = matcher.match("a.py:1: first")
        second = matcher.match("b.py:2: second")

        self.assertEqual(first.file, "a.py")
        self.assertEqual(second.file, "b.py")
        self.assertIsNot(first, second)

    def test_zero_matches_is_not_an_error(self):
        matcher = LineMatcher(compile_template("%f:%l: %m"))
        self.assertEqual(list(matcher.match_lines(["nothing", "to see"])), [])

    def test_template_is_shared(self):
        template = compile_template("%f:%l: %m")
        matcher = LineMatcher(template)
        matcher.match("a.py:1: x")
        self.assertIs(matcher.template, template)
        self.assertIsInstance(matcher.template, Template)


if __name__ == '__main__':
    unittest.main()
