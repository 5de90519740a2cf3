"""Tests for constant resolution."""

import copy
from collections import Counter
from itertools import permutations

import pytest

from hexconf.errors import CyclicDependencyError, EvaluationError, UnknownConstantError
from hexconf.evaluator import Evaluator, resolve
from hexconf.parser import parse
from hexconf.values import ConstRef, Dict, Number


def _contains_ref(value):
    if isinstance(value, ConstRef):
        return True
    if isinstance(value, Dict):
        return any(_contains_ref(v) for v in value.fields.values())
    return False


class TestIdentity:
    @pytest.mark.parametrize(
        "source",
        [
            "",
            "a = 0x1",
            "a = {}",
            "a = 0x1\nb = { x: 0x2, y: { z: 0xFFFFFFFFFFFFFFFF } }",
        ],
    )
    def test_reference_free_documents_resolve_to_themselves(self, source):
        env = parse(source)
        assert resolve(env) == env


class TestResolution:
    def test_end_to_end_example(self):
        resolved = resolve(parse("name = 0x10\ncfg = { a: [name], b: 0x2 }\n"))
        assert resolved["cfg"].fields["a"].value == 16
        assert resolved["cfg"].fields["b"].value == 2
        assert resolved["name"] == Number("0x10", 16)

    @pytest.mark.parametrize(
        "order",
        list(permutations(["a = [b]", "b = [c]", "c = { v: 0x2A }"])),
    )
    def test_chain_is_inlined_regardless_of_declaration_order(self, order):
        resolved = resolve(parse("\n".join(order)))
        expected = Dict({"v": Number("0x2A", 42)})
        assert resolved["a"] == expected
        assert resolved["b"] == expected
        assert resolved["c"] == expected

    def test_dict_reference_is_inlined_into_dict(self):
        resolved = resolve(parse("inner = { v: 0x1 }\nouter = { i: [inner], j: 0x2 }"))
        assert resolved["outer"] == Dict({
            "i": Dict({"v": Number("0x1", 1)}),
            "j": Number("0x2", 2),
        })

    def test_no_references_survive(self):
        source = "top = { l: [left], r: [right] }\nleft = [base]\nright = { b: [base] }\nbase = 0x7"
        resolved = resolve(parse(source))
        assert not any(_contains_ref(v) for v in resolved.values())

    def test_diamond_dependencies_are_not_a_cycle(self):
        source = "top = { l: [left], r: [right] }\nleft = [base]\nright = [base]\nbase = 0x7"
        resolved = resolve(parse(source))
        assert resolved["top"] == Dict({"l": Number("0x7", 7), "r": Number("0x7", 7)})

    def test_environment_is_not_mutated(self):
        env = parse("name = 0x10\ncfg = { a: [name] }")
        snapshot = copy.deepcopy(env)
        resolve(env)
        assert env == snapshot
        assert env["cfg"].fields["a"] == ConstRef("name")

    def test_result_is_ordered_by_first_completed_resolution(self):
        resolved = resolve(parse("a = [b]\nb = 0x1\nc = 0x2"))
        assert list(resolved) == ["b", "a", "c"]


class TestMemoization:
    def test_shared_binding_is_resolved_once(self):
        source = (
            "shared = 0x1\n"
            "a = [shared]\n"
            "b = [shared]\n"
            "c = { x: [shared], y: [a], z: [b] }\n"
        )
        counts = Counter()
        resolve(parse(source), on_resolve=lambda name: counts.update([name]))
        assert counts == Counter({"shared": 1, "a": 1, "b": 1, "c": 1})

    def test_forward_reference_is_resolved_once(self):
        calls = []
        resolve(parse("a = [late]\nb = [late]\nlate = { v: 0x1 }"), on_resolve=calls.append)
        assert calls == ["late", "a", "b"]

    def test_cached_value_is_reused(self):
        evaluator = Evaluator(parse("base = { v: 0x1 }\na = [base]\nb = [base]"))
        resolved = evaluator.evaluate_all()
        assert resolved["a"] is resolved["base"]
        assert resolved["b"] is resolved["base"]


class TestErrors:
    def test_self_reference(self):
        with pytest.raises(CyclicDependencyError) as exc:
            resolve(parse("x = [x]"))
        assert exc.value.name == "x"

    def test_mutual_reference(self):
        with pytest.raises(CyclicDependencyError) as exc:
            resolve(parse("a = [b]\nb = [a]"))
        assert exc.value.name == "a"
        assert str(exc.value) == "Parse error at 0:0: Cyclic constant dependency detected: a"

    def test_cycle_through_dict(self):
        with pytest.raises(CyclicDependencyError) as exc:
            resolve(parse("a = { next: [b] }\nb = { next: [c] }\nc = [b]"))
        assert exc.value.name == "b"

    def test_unknown_constant(self):
        with pytest.raises(UnknownConstantError) as exc:
            resolve(parse("a = [z]"))
        assert exc.value.name == "z"
        assert (exc.value.line, exc.value.column) == (0, 0)
        assert str(exc.value) == "Parse error at 0:0: Unknown constant: z"

    def test_first_failure_in_binding_order(self):
        with pytest.raises(EvaluationError) as exc:
            resolve(parse("a = [x]\nb = [y]"))
        assert exc.value.name == "x"

    def test_in_progress_set_is_released_on_error(self):
        evaluator = Evaluator(parse("a = { p: [b] }\nb = [missing]"))
        in_progress = set()
        with pytest.raises(UnknownConstantError):
            evaluator.evaluate("a", in_progress)
        assert in_progress == set()

    def test_unknown_value_type(self):
        with pytest.raises(TypeError):
            resolve({"a": 42})


class TestLongChains:
    def test_reference_chain_beyond_recursion_limit(self):
        length = 5000
        source = "\n".join(f"a{i} = [a{i + 1}]" for i in range(length)) + f"\na{length} = 0x1"
        resolved = resolve(parse(source))
        assert len(resolved) == length + 1
        assert resolved["a0"] == Number("0x1", 1)
        assert list(resolved)[:2] == [f"a{length}", f"a{length - 1}"]

    def test_cycle_at_the_end_of_a_long_chain(self):
        length = 3000
        source = "\n".join(f"a{i} = [a{i + 1}]" for i in range(length)) + f"\na{length} = {{ back: [a0] }}"
        evaluator = Evaluator(parse(source))
        in_progress = set()
        with pytest.raises(CyclicDependencyError) as exc:
            evaluator.evaluate("a0", in_progress)
        assert exc.value.name == "a0"
        assert in_progress == set()
