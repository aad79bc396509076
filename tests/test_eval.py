"""Evaluator unit tests."""

from __future__ import annotations

import math

import pytest

from tinylox.ast import Binary, Grouping, Literal, Unary
from tinylox.errors import Diagnostics, EvalError
from tinylox.eval import evaluate, interpret, stringify
from tinylox.tokens import Token, TokenType


def _op(tt: TokenType, lexeme: str) -> Token:
    return Token(tt, lexeme, None, 1)


def _num(value: float) -> Literal:
    return Literal(value)


@pytest.fixture
def run(parse_source):
    """Return a helper that parses and evaluates source."""

    def _run(source: str):
        return evaluate(parse_source(source))

    return _run


class TestLiterals:
    def test_number(self, run):
        assert run("3") == 3.0

    def test_string(self, run):
        assert run('"abc"') == "abc"

    def test_bools(self, run):
        assert run("true") is True
        assert run("false") is False

    def test_nil(self, run):
        assert run("nil") is None

    def test_grouping_passthrough(self, run):
        assert run('("x")') == "x"


class TestHandBuiltTrees:
    def test_binary_node(self):
        expr = Binary(_num(6.0), _op(TokenType.SLASH, "/"), _num(4.0))
        assert evaluate(expr) == 1.5

    def test_unary_node(self):
        expr = Unary(_op(TokenType.MINUS, "-"), Grouping(_num(2.0)))
        assert evaluate(expr) == -2.0

    def test_undefined_binary_operator(self):
        expr = Binary(_num(1.0), _op(TokenType.COMMA, ","), _num(2.0))
        with pytest.raises(EvalError, match="Undefined binary operator"):
            evaluate(expr)

    def test_undefined_unary_operator(self):
        expr = Unary(_op(TokenType.PLUS, "+"), _num(1.0))
        with pytest.raises(EvalError, match="Undefined unary operator"):
            evaluate(expr)


class TestArithmetic:
    def test_left_associative(self, run):
        assert run("1-2-3") == -4.0

    def test_precedence(self, run):
        assert run("(1+2)*3") == 9.0
        assert run("1+2*3") == 7.0

    def test_division(self, run):
        assert run("7 / 2") == 3.5

    def test_single_precision_result(self, run):
        # 0.1 + 0.2 in f32 is exactly the f32 nearest to 0.3
        assert stringify(run("0.1 + 0.2")) == "0.3"

    def test_divide_by_zero(self, run):
        assert run("1 / 0") == math.inf
        assert run("-1 / 0") == -math.inf
        assert math.isnan(run("0 / 0"))

    def test_overflow_to_infinity(self, run):
        assert run("100000000000000000000 * 100000000000000000000") == math.inf

    def test_negation(self, run):
        assert run("-(2 + 3)") == -5.0
        assert run("--4") == 4.0

    def test_arithmetic_requires_numbers(self, run):
        for src in ('"a" - 1', "1 * true", "nil / 2", '"a" * "b"'):
            with pytest.raises(EvalError, match="Operands must be numbers"):
                run(src)

    def test_negate_requires_number(self, run):
        with pytest.raises(EvalError, match="Operand must be a number"):
            run('-"a"')


class TestPlus:
    def test_numbers(self, run):
        assert run("1 + 2") == 3.0

    def test_strings(self, run):
        assert run('"a" + "b"') == "ab"

    def test_number_plus_string(self, run):
        with pytest.raises(EvalError, match="Operands must be numbers"):
            run('1 + "a"')

    def test_string_plus_number(self, run):
        with pytest.raises(EvalError, match="two strings"):
            run('"a" + 1')

    def test_bool_plus_bool(self, run):
        with pytest.raises(EvalError, match="two numbers or two strings"):
            run("true + false")


class TestComparison:
    def test_less(self, run):
        assert run("1 < 2") is True
        assert run("2 < 1") is False

    def test_all_operators(self, run):
        assert run("2 > 1") is True
        assert run("2 >= 2") is True
        assert run("2 <= 1") is False
        assert run("3 == 3") is True
        assert run("3 != 3") is False

    def test_nan_is_unequal(self, run):
        assert run("0/0 == 0/0") is False
        assert run("0/0 != 0/0") is True

    def test_strings_not_ordered(self, run):
        with pytest.raises(EvalError, match="Operands must be numbers"):
            run('"a" < "b"')

    def test_equality_only_for_numbers(self, run):
        for src in ('"a" == "a"', "true == true", "nil != nil", '1 == "1"'):
            with pytest.raises(EvalError):
                run(src)


class TestNot:
    def test_not(self, run):
        assert run("!true") is False
        assert run("!(1 > 2)") is True

    def test_not_requires_bool(self, run):
        for src in ("!nil", "!0", '!"a"'):
            with pytest.raises(EvalError, match="Operand must be a boolean"):
                run(src)


class TestEvaluationOrder:
    def test_left_error_reported_first(self, run):
        with pytest.raises(EvalError, match="boolean"):
            run("!1 + -true")

    def test_long_chain(self, run):
        assert run(" + ".join(["1"] * 5000)) == 5000.0


class TestStringify:
    def test_integral_numbers_have_no_fraction(self):
        assert stringify(3.0) == "3"
        assert stringify(-4.0) == "-4"
        assert stringify(0.0) == "0"
        assert stringify(-0.0) == "-0"

    def test_fractions(self):
        assert stringify(2.5) == "2.5"
        assert stringify(0.5) == "0.5"

    def test_shortest_single_precision_text(self, run):
        assert stringify(run("0.1")) == "0.1"
        assert stringify(run("123456789")) == "123456790"

    def test_no_exponent(self, run):
        assert stringify(run("10000000000 * 10000000000")) == "100000000000000000000"
        assert stringify(run("1 / 10000000")) == "0.0000001"

    def test_special_values(self):
        assert stringify(math.inf) == "inf"
        assert stringify(-math.inf) == "-inf"
        assert stringify(math.nan) == "NaN"

    def test_other_values(self):
        assert stringify("text") == "text"
        assert stringify(True) == "true"
        assert stringify(False) == "false"
        assert stringify(None) == "nil"


class TestInterpret:
    def test_success(self, parse_source):
        assert interpret(parse_source("1 < 2")) == "true"
        assert interpret(parse_source("2 < 1")) == "false"

    def test_runtime_error_reported(self, parse_source, capsys):
        sink = Diagnostics()
        assert interpret(parse_source('1 + "a"'), sink) is None
        assert sink.had_runtime_error
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "Runtime error: Operands must be numbers.\n"
