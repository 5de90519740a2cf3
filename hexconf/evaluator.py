"""Constant resolution.

Every ``[name]`` reference is replaced by the resolved value of the binding
it names. Each binding is resolved at most once per ``Evaluator``; the set of
names on the current resolution chain catches cycles.

The resolvers are generators that yield the sub-resolution they need next.
``run`` drives them from an explicit stack, so long reference chains and
deep dicts do not hit the interpreter's recursion limit.
"""

import logging

from hexconf.errors import CyclicDependencyError, UnknownConstantError
from hexconf.values import ConstRef, Dict, Number

logger = logging.getLogger("hexconf.evaluator")


def run(resolver):
    """Drive a resolver generator and every resolver it yields to completion."""
    stack = [resolver]
    result, error = None, None
    while stack:
        try:
            if error is None:
                pending = stack[-1].send(result)
            else:
                pending = stack[-1].throw(error)
        except StopIteration as stop:
            stack.pop()
            result, error = stop.value, None
        except Exception as e:
            stack.pop()
            if not stack:
                raise
            result, error = None, e
        else:
            stack.append(pending)
            result, error = None, None
    return result


class Evaluator:
    def __init__(self, env, on_resolve=None):
        """
        Args:
            env: Environment returned by the parser. It is never modified.
            on_resolve: Optional callable invoked with each binding name the
                first (and only) time that binding is resolved.
        """
        self.env = env
        self.evaluated = {}
        self.on_resolve = on_resolve

    def evaluate_all(self):
        """Resolve every binding.

        The result is ordered by when each binding finished resolving, so a
        binding appears after everything it references.
        """
        for name in self.env:
            self.evaluate(name, set())
        return self.evaluated

    def evaluate(self, name, in_progress):
        return run(self.resolve_name(name, in_progress))

    def evaluate_value(self, value, in_progress):
        return run(self.resolve_value(value, in_progress))

    def resolve_name(self, name, in_progress):
        if name in self.evaluated:
            logger.debug("Cache hit for %s", name)
            return self.evaluated[name]
        if name not in self.env:
            raise UnknownConstantError(name)
        if name in in_progress:
            raise CyclicDependencyError(name)

        in_progress.add(name)
        try:
            value = yield self.resolve_value(self.env[name], in_progress)
        finally:
            in_progress.discard(name)

        self.evaluated[name] = value
        logger.debug("Resolved %s", name)
        if self.on_resolve is not None:
            self.on_resolve(name)
        return value

    def resolve_value(self, value, in_progress):
        if isinstance(value, Number):
            return value
        if isinstance(value, ConstRef):
            return (yield self.resolve_name(value.name, in_progress))
        if isinstance(value, Dict):
            fields = {}
            for key, v in value.fields.items():
                fields[key] = yield self.resolve_value(v, in_progress)
            return Dict(fields)
        raise TypeError(f"Unknown value type: {type(value).__name__}")


def resolve(env, on_resolve=None):
    return Evaluator(env, on_resolve).evaluate_all()
