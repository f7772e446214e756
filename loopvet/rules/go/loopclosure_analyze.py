"""Go Loop Closure Analyzer - references to loop variables from escaping func literals.

Detects function literals defined in a loop body that capture a variable
the loop header reassigns, where the literal is known to run after the
iteration moves on:

1. ``go`` or ``defer`` as the last statement of the loop body
2. ``golang.org/x/sync/errgroup.Group.Go`` as the last statement
3. ``testing.T.Run`` whose body calls ``t.Parallel()`` (any position, opt-in
   through the ``parallel_subtests`` option)

Only the last statement is considered for 1 and 2: it is hard to prove that
``go`` isn't followed by a wait, or ``defer`` by a return.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from loopvet.ast_extractors.go_impl import (
    _get_node_text,
    block_statements,
    call_arguments,
    call_function,
    dispatched_call,
    expression_list_items,
    field,
    named_children,
    unparen,
)
from loopvet.go_types import TypesInfo
from loopvet.inspector import Inspector, walk
from loopvet.rules.base import (
    Confidence,
    RuleMetadata,
    Severity,
    StandardFinding,
    StandardRuleContext,
)
from loopvet.utils.logging import logger

DOC = """check references to loop variables from within nested functions

This analyzer checks for references to loop variables from within a function
literal inside the loop body. It checks for patterns where access to a loop
variable is known to escape the current loop iteration:
 1. a call to go or defer at the end of the loop body
 2. a call to golang.org/x/sync/errgroup.Group.Go at the end of the loop body
 3. a call to testing.T.Run where the subtest body invokes t.Parallel()
    (only with the parallel_subtests option enabled)

The analyzer only considers references in the last statement of the loop body
as it is not deep enough to understand the effects of subsequent statements
which might render the reference benign.

For example:

\tfor i, v := range s {
\t\tgo func() {
\t\t\tprintln(i, v) // not what you might expect
\t\t}()
\t}

See: https://golang.org/doc/go_faq.html#closures_and_goroutines"""

METADATA = RuleMetadata(
    name="loopclosure",
    category="concurrency",
    doc=DOC,
    requires=["inspect"],
    target_extensions=[".go"],
    exclude_patterns=["vendor/", "testdata/"],
)

ERRGROUP = ("golang.org/x/sync/errgroup", "Group", "Go")
TESTING_RUN = ("testing", "T", "Run")
TESTING_PARALLEL = ("testing", "T", "Parallel")


class EscapeKind(Enum):
    """How a func literal leaves its loop iteration."""

    GO = "go"
    DEFER = "defer"
    ERRGROUP = "errgroup"
    PARALLEL_SUBTEST = "parallel_subtest"


@dataclass(frozen=True)
class EscapeCandidate:
    """A func literal that may run outside the iteration that created it."""

    literal: Any
    kind: EscapeKind


def is_method_call(
    info: TypesInfo, expr: Any, pkg_path: str, type_name: str, method: str
) -> bool:
    """Report whether expr is a call of method <pkg_path>.<type_name>.<method>.

    The receiver may be <type_name> or *<type_name>.
    """
    if expr is None or expr.type != "call_expression":
        return False

    callee = info.static_callee(expr)
    if callee is None or callee.name != method:
        return False
    if callee.recv is None:
        return False

    recv = callee.recv.elem()
    if recv.name != type_name:
        return False
    if callee.pkg_path is None:
        return False
    return callee.pkg_path == pkg_path


def loop_variables(loop: Any) -> list[Any]:
    """Identifier nodes of the variables the loop header updates."""
    loop_vars = []

    def add_var(expr: Any) -> None:
        if expr is not None and expr.type == "identifier":
            loop_vars.append(expr)

    for clause in named_children(loop):
        if clause.type == "range_clause":
            # e.g. for i, v := range s
            for target in expression_list_items(field(clause, "left")):
                add_var(target)
        elif clause.type == "for_clause":
            post = field(clause, "update")
            if post is None:
                continue
            if post.type == "assignment_statement":
                # e.g. for p = head; p != nil; p = p.next
                for target in expression_list_items(field(post, "left")):
                    add_var(target)
            elif post.type in ("inc_statement", "dec_statement"):
                # e.g. for i := 0; i < n; i++
                operand = named_children(post)
                add_var(operand[0] if operand else None)

    return loop_vars


def go_invoke(info: TypesInfo, call: Any) -> Any | None:
    """Function expression run asynchronously (not awaited) as a consequence of the call.

    Only ``golang.org/x/sync/errgroup.Group.Go`` is considered:

        var g errgroup.Group
        g.Go(func() error { ... })
    """
    if not is_method_call(info, call, *ERRGROUP):
        return None
    args = call_arguments(call)
    if len(args) != 1:
        return None
    return args[0]


def parallel_subtest(info: TypesInfo, call: Any) -> Any | None:
    """Func literal run by the test runner in parallel with the loop.

        for i, test := range tests {
            t.Run("subtest", func(t *testing.T) {
                t.Parallel()
                println(i, test)
            })
        }
    """
    if not is_method_call(info, call, *TESTING_RUN):
        return None

    args = call_arguments(call)
    if len(args) < 2:
        return None
    lit = unparen(args[1])
    if lit.type != "func_literal":
        return None

    for stmt in block_statements(field(lit, "body")):
        if stmt.type != "expression_statement":
            continue
        exprs = named_children(stmt)
        if exprs and is_method_call(info, unparen(exprs[0]), *TESTING_PARALLEL):
            return lit

    return None


def escaping_literals(
    body: Any, info: TypesInfo, parallel_subtests: bool = False
) -> Iterator[EscapeCandidate]:
    """Func literals of a loop body that may run outside the current iteration.

    go, defer and errgroup.Group.Go only count as the last statement. Every
    t.Run statement counts, since there is no commonly used way to
    synchronize parallel subtests.
    """
    statements = block_statements(body)
    last = len(statements) - 1

    for i, stmt in enumerate(statements):
        fun = None
        kind = None

        if stmt.type in ("go_statement", "defer_statement"):
            if i == last:
                call = dispatched_call(stmt)
                fun = call_function(call) if call is not None else None
                kind = EscapeKind.GO if stmt.type == "go_statement" else EscapeKind.DEFER

        elif stmt.type == "expression_statement":
            exprs = named_children(stmt)
            call = unparen(exprs[0]) if exprs else None
            if call is not None and call.type == "call_expression":
                if i == last:
                    fun = go_invoke(info, call)
                    kind = EscapeKind.ERRGROUP
                if fun is None and parallel_subtests:
                    fun = parallel_subtest(info, call)
                    kind = EscapeKind.PARALLEL_SUBTEST

        fun = unparen(fun) if fun is not None else None
        if fun is None or fun.type != "func_literal":
            continue
        yield EscapeCandidate(fun, kind)


def check_captures(
    context: StandardRuleContext,
    candidate: EscapeCandidate,
    loop_vars: list[Any],
    info: TypesInfo,
) -> list[StandardFinding]:
    """Findings for every reference in the literal's body to a loop variable."""
    findings = []
    bindings = [info.object_of(v) for v in loop_vars]

    for node in walk(field(candidate.literal, "body"), frozenset(["identifier"])):
        if not info.is_variable(node):
            # Not referring to a variable (e.g. a package or struct field name)
            continue
        decl = info.object_of(node)
        for binding in bindings:
            if binding is decl:
                findings.append(_finding(context, node, candidate))

    return findings


def _finding(
    context: StandardRuleContext, ident: Any, candidate: EscapeCandidate
) -> StandardFinding:
    name = _get_node_text(ident)
    line = ident.start_point[0] + 1
    return StandardFinding(
        rule_name=METADATA.name,
        message=f"loop variable {name} captured by func literal",
        file_path=str(context.file_path),
        line=line,
        column=ident.start_point[1] + 1,
        end_line=ident.end_point[0] + 1,
        end_column=ident.end_point[1] + 1,
        severity=Severity.HIGH,
        category=METADATA.category,
        confidence=Confidence.MEDIUM,
        snippet=context.get_snippet(line, context.options.get("snippet_lines", 2)),
        references=["https://golang.org/doc/go_faq.html#closures_and_goroutines"],
        cwe_id="CWE-362",
        additional_info={
            "var_name": name,
            "escape": candidate.kind.value,
            "literal_line": candidate.literal.start_point[0] + 1,
        },
    )


def analyze(context: StandardRuleContext) -> list[StandardFinding]:
    """Detect loop variables captured by func literals that escape the iteration."""
    inspector: Inspector | None = context.results.get("inspect")
    info: TypesInfo | None = context.types_info
    if inspector is None or info is None:
        logger.debug(f"loopclosure: no inspector or type info for {context.file_path}")
        return []

    parallel_subtests = bool(context.options.get("parallel_subtests", False))
    findings = []

    for loop in inspector.nodes(["for_statement"]):
        loop_vars = loop_variables(loop)
        if not loop_vars:
            continue

        for candidate in escaping_literals(field(loop, "body"), info, parallel_subtests):
            findings.extend(check_captures(context, candidate, loop_vars, info))

    return findings
