"""Restricted AST interpreter for learner scripts.

Scripts are Python syntax, but they are never handed to ``eval``/``exec``.
Each statement unit is parsed with ``ast.parse``, checked against an
explicit whitelist of node types, then walked by ``ScriptEvaluator``.

The only ambient object is the command surface, bound under its object
name (``hero`` by default).  Attribute access is limited to the
surface's declared commands and properties and to ``x``/``y`` on
positions.  Imports, function and class definitions, lambdas,
comprehensions, dunder names and everything else outside the whitelist
raise ``UnsafeScriptError`` before any statement runs.
"""

from __future__ import annotations

import ast
import logging
import operator
from typing import TYPE_CHECKING, Any, Callable

from dungeon_script.core.models import Vector2
from dungeon_script.engine.errors import ScriptError, ScriptLimitError, UnsafeScriptError

if TYPE_CHECKING:
    from dungeon_script.engine.commands import HeroCommands

logger = logging.getLogger(__name__)


_ALLOWED_NODES: tuple[type[ast.AST], ...] = (
    ast.Module, ast.Expr, ast.Assign, ast.AugAssign,
    ast.If, ast.While, ast.For, ast.Pass, ast.Break, ast.Continue,
    ast.Name, ast.Load, ast.Store, ast.Constant,
    ast.BinOp, ast.UnaryOp, ast.BoolOp, ast.Compare, ast.IfExp,
    ast.Call, ast.Attribute, ast.Subscript,
    ast.Tuple, ast.List, ast.Dict,
    ast.Add, ast.Sub, ast.Mult, ast.Div, ast.FloorDiv, ast.Mod,
    ast.UAdd, ast.USub, ast.Not, ast.And, ast.Or,
    ast.Eq, ast.NotEq, ast.Lt, ast.LtE, ast.Gt, ast.GtE,
    ast.In, ast.NotIn, ast.Is, ast.IsNot,
)

_BIN_OPS: dict[type[ast.operator], Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
}

_UNARY_OPS: dict[type[ast.unaryop], Callable[[Any], Any]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
    ast.Not: operator.not_,
}

_COMPARE_OPS: dict[type[ast.cmpop], Callable[[Any, Any], bool]] = {
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
    ast.In: lambda a, b: a in b,
    ast.NotIn: lambda a, b: a not in b,
    ast.Is: operator.is_,
    ast.IsNot: operator.is_not,
}

SAFE_BUILTINS: dict[str, Callable[..., Any]] = {
    "range": range,
    "abs": abs,
    "min": min,
    "max": max,
    "len": len,
    "str": str,
    "int": int,
}

_POSITION_FIELDS = frozenset({"x", "y"})


class _Break(Exception):
    pass


class _Continue(Exception):
    pass


class _Halt(Exception):
    """The world reached a terminal flag; stop the unit at the next statement."""


def validate(tree: ast.AST, object_name: str) -> None:
    """Reject any node outside the whitelist, and any private or dunder name."""
    for node in ast.walk(tree):
        if not isinstance(node, _ALLOWED_NODES):
            raise UnsafeScriptError(f"'{type(node).__name__}' is not allowed in scripts")
        if isinstance(node, ast.Attribute) and node.attr.startswith("_"):
            raise UnsafeScriptError(f"attribute '{node.attr}' is not allowed")
        if isinstance(node, ast.Name):
            if node.id.startswith("_") and node.id != "_":
                raise UnsafeScriptError(f"name '{node.id}' is not allowed")
            if isinstance(node.ctx, ast.Store) and node.id in (object_name, *SAFE_BUILTINS):
                raise UnsafeScriptError(f"cannot assign to '{node.id}'")
        if isinstance(node, ast.Call) and node.keywords:
            raise UnsafeScriptError("keyword arguments are not supported")
        if isinstance(node, (ast.Assign, ast.AugAssign)):
            targets = node.targets if isinstance(node, ast.Assign) else [node.target]
            if not all(isinstance(t, ast.Name) for t in targets):
                raise UnsafeScriptError("only plain variable names can be assigned")
        if isinstance(node, ast.For) and not isinstance(node.target, ast.Name):
            raise UnsafeScriptError("for loops must bind a single variable")


class ScriptEvaluator:
    """Walks validated statement ASTs against one bound command surface.

    ``namespace`` holds learner variables and persists across units for
    the whole run.  ``halted`` is polled between statements so a block
    stops as soon as the world reaches a terminal flag; an individual
    command call always runs to completion.
    """

    __slots__ = ("_surface", "_object_name", "namespace", "_halted", "_max_loop", "_max_steps", "_steps")

    def __init__(
        self,
        surface: HeroCommands,
        object_name: str = "hero",
        halted: Callable[[], bool] = lambda: False,
        max_loop_iterations: int = 1000,
        max_statement_steps: int = 10000,
    ) -> None:
        self._surface = surface
        self._object_name = object_name
        self.namespace: dict[str, Any] = {}
        self._halted = halted
        self._max_loop = max_loop_iterations
        self._max_steps = max_statement_steps
        self._steps = 0

    # -- entry points --

    def parse(self, source: str) -> ast.Module:
        try:
            tree = ast.parse(source, mode="exec")
        except SyntaxError as exc:
            raise ScriptError(f"Syntax error: {exc.msg}", line=source) from exc
        validate(tree, self._object_name)
        return tree

    def execute(self, source: str) -> None:
        """Parse, validate and run one statement unit."""
        tree = self.parse(source)
        self._steps = 0
        try:
            self._run_body(tree.body)
        except _Halt:
            logger.debug("Unit halted on terminal world state")
        except (_Break, _Continue):
            raise ScriptError("'break' or 'continue' outside a loop", line=source) from None
        except ScriptError:
            raise
        except Exception as exc:
            raise ScriptError(str(exc) or type(exc).__name__, line=source) from exc

    # -- statements --

    def _run_body(self, body: list[ast.stmt]) -> None:
        for stmt in body:
            if self._halted():
                raise _Halt()
            self._steps += 1
            if self._steps > self._max_steps:
                raise ScriptLimitError(f"Statement limit of {self._max_steps} exceeded")
            self._exec(stmt)

    def _exec(self, node: ast.stmt) -> None:
        match node:
            case ast.Expr(value=value):
                self._eval(value)
            case ast.Assign(targets=targets, value=value):
                result = self._eval(value)
                for target in targets:
                    self.namespace[target.id] = result
            case ast.AugAssign(target=target, op=op, value=value):
                current = self._lookup(target.id)
                self.namespace[target.id] = self._binop(op, current, self._eval(value))
            case ast.If(test=test, body=body, orelse=orelse):
                self._run_body(body if self._eval(test) else orelse)
            case ast.While():
                self._exec_while(node)
            case ast.For():
                self._exec_for(node)
            case ast.Pass():
                pass
            case ast.Break():
                raise _Break()
            case ast.Continue():
                raise _Continue()
            case _:
                raise UnsafeScriptError(f"'{type(node).__name__}' is not allowed in scripts")

    def _exec_while(self, node: ast.While) -> None:
        iterations = 0
        while self._eval(node.test):
            iterations += 1
            if iterations > self._max_loop:
                raise ScriptLimitError(f"Loop exceeded {self._max_loop} iterations")
            try:
                self._run_body(node.body)
            except _Break:
                return
            except _Continue:
                continue
            if self._halted():
                raise _Halt()
        self._run_body(node.orelse)

    def _exec_for(self, node: ast.For) -> None:
        iterations = 0
        for item in self._eval(node.iter):
            iterations += 1
            if iterations > self._max_loop:
                raise ScriptLimitError(f"Loop exceeded {self._max_loop} iterations")
            self.namespace[node.target.id] = item
            try:
                self._run_body(node.body)
            except _Break:
                return
            except _Continue:
                continue
        self._run_body(node.orelse)

    # -- expressions --

    def _eval(self, node: ast.expr) -> Any:
        match node:
            case ast.Constant(value=value):
                return value
            case ast.Name(id=name):
                return self._lookup(name)
            case ast.BinOp(left=left, op=op, right=right):
                return self._binop(op, self._eval(left), self._eval(right))
            case ast.UnaryOp(op=op, operand=operand):
                return _UNARY_OPS[type(op)](self._eval(operand))
            case ast.BoolOp(op=ast.And(), values=values):
                result: Any = True
                for value in values:
                    result = self._eval(value)
                    if not result:
                        return result
                return result
            case ast.BoolOp(op=ast.Or(), values=values):
                result = False
                for value in values:
                    result = self._eval(value)
                    if result:
                        return result
                return result
            case ast.Compare(left=left, ops=ops, comparators=comparators):
                current = self._eval(left)
                for op, comparator in zip(ops, comparators):
                    right = self._eval(comparator)
                    if not _COMPARE_OPS[type(op)](current, right):
                        return False
                    current = right
                return True
            case ast.IfExp(test=test, body=body, orelse=orelse):
                return self._eval(body) if self._eval(test) else self._eval(orelse)
            case ast.Tuple(elts=elts):
                return tuple(self._eval(e) for e in elts)
            case ast.List(elts=elts):
                return [self._eval(e) for e in elts]
            case ast.Dict(keys=keys, values=values):
                if any(k is None for k in keys):
                    raise UnsafeScriptError("dict unpacking is not supported")
                return {self._eval(k): self._eval(v) for k, v in zip(keys, values)}
            case ast.Subscript(value=value, slice=index):
                container = self._eval(value)
                if not isinstance(container, (list, tuple, dict, str)):
                    raise ScriptError(f"'{type(container).__name__}' cannot be indexed")
                return container[self._eval(index)]
            case ast.Attribute(value=value, attr=attr):
                return self._attribute(self._eval(value), attr)
            case ast.Call(func=func, args=args):
                return self._call(func, [self._eval(a) for a in args])
        raise UnsafeScriptError(f"'{type(node).__name__}' is not allowed in scripts")

    def _lookup(self, name: str) -> Any:
        if name == self._object_name:
            return self._surface
        if name in self.namespace:
            return self.namespace[name]
        if name in SAFE_BUILTINS:
            return SAFE_BUILTINS[name]
        raise ScriptError(f"'{name}' is not defined")

    @staticmethod
    def _binop(op: ast.operator, left: Any, right: Any) -> Any:
        try:
            fn = _BIN_OPS[type(op)]
        except KeyError:
            raise UnsafeScriptError(f"operator '{type(op).__name__}' is not allowed") from None
        return fn(left, right)

    def _attribute(self, target: Any, attr: str) -> Any:
        if target is self._surface:
            if self._surface.has_property(attr):
                return self._surface.read_property(attr)
            if self._surface.has_command(attr):
                raise ScriptError(f"'{self._object_name}.{attr}' is a command; call it with ()")
            raise ScriptError(f"'{self._object_name}' has no command or property '{attr}'")
        if isinstance(target, Vector2) and attr in _POSITION_FIELDS:
            return getattr(target, attr)
        raise ScriptError(f"'{type(target).__name__}' has no readable attribute '{attr}'")

    def _call(self, func: ast.expr, args: list[Any]) -> Any:
        if isinstance(func, ast.Attribute):
            target = self._eval(func.value)
            if target is self._surface:
                return self._surface.invoke(func.attr, args)
            raise ScriptError(f"cannot call '{func.attr}' on {type(target).__name__}")
        if isinstance(func, ast.Name) and func.id in SAFE_BUILTINS and func.id not in self.namespace:
            return SAFE_BUILTINS[func.id](*args)
        name = func.id if isinstance(func, ast.Name) else type(func).__name__
        raise ScriptError(f"'{name}' is not a callable command")
