"""
Loop closure rule tests - loop variables captured by escaping func literals.

Each test parses a small Go program, resolves it, and runs the rule the way
the orchestrator does.
"""

import pytest

from loopvet.go_types import resolve_unit
from loopvet.rules.go.loopclosure_analyze import (
    METADATA,
    EscapeKind,
    escaping_literals,
    is_method_call,
    loop_variables,
)


def names(findings):
    return [f.additional_info["var_name"] for f in findings]


class TestGoAndDefer:
    """go / defer as the last statement of the loop body."""

    def test_range_go_reports_key_and_value_in_order(self, run_loopclosure):
        code = """package main

func use(args ...int) {}

func main() {
    items := []int{1, 2, 3}
    for i, v := range items {
        go func() {
            use(i, v)
        }()
    }
}
"""
        findings = run_loopclosure(code)

        assert [f.message for f in findings] == [
            "loop variable i captured by func literal",
            "loop variable v captured by func literal",
        ]
        assert findings[0].line == 9
        assert findings[0].column == 17
        assert findings[1].column == 20
        assert all(f.additional_info["escape"] == "go" for f in findings)
        assert all(f.rule_name == "loopclosure" for f in findings)

    def test_counted_loop_defer(self, run_loopclosure):
        code = """package main

func use(args ...int) {}

func main() {
    n := 3
    for i := 0; i < n; i++ {
        defer func() {
            use(i)
        }()
    }
}
"""
        findings = run_loopclosure(code)

        assert names(findings) == ["i"]
        assert findings[0].additional_info["escape"] == "defer"
        assert findings[0].line == 9

    def test_statement_after_go_suppresses(self, run_loopclosure):
        code = """package main

func use(args ...int) {}

func main() {
    items := []int{1, 2, 3}
    for i, v := range items {
        go func() {
            use(i, v)
        }()
        use(0)
    }
}
"""
        assert run_loopclosure(code) == []

    def test_defer_not_last_suppresses(self, run_loopclosure):
        code = """package main

func use(args ...int) {}

func main() {
    for i := 0; i < 3; i++ {
        defer func() { use(i) }()
        use(i)
    }
}
"""
        assert run_loopclosure(code) == []

    def test_no_function_literal(self, run_loopclosure):
        code = """package main

func process(v int) {}

func main() {
    items := []int{1, 2, 3}
    for _, v := range items {
        process(v)
    }
}
"""
        assert run_loopclosure(code) == []

    def test_named_function_dispatch_is_not_flagged(self, run_loopclosure):
        code = """package main

func worker(v int) {}

func main() {
    items := []int{1, 2, 3}
    for _, v := range items {
        go worker(v)
    }
}
"""
        assert run_loopclosure(code) == []

    def test_literal_with_argument_copy_is_not_flagged(self, run_loopclosure):
        code = """package main

func use(args ...int) {}

func main() {
    items := []int{1, 2, 3}
    for _, v := range items {
        go func(v int) {
            use(v)
        }(v)
    }
}
"""
        assert run_loopclosure(code) == []

    def test_shadowed_copy_inside_body_is_not_flagged(self, run_loopclosure):
        code = """package main

func use(args ...int) {}

func main() {
    items := []int{1, 2, 3}
    for _, v := range items {
        go func() {
            v := 10
            use(v)
        }()
    }
}
"""
        assert run_loopclosure(code) == []

    def test_repeated_references_each_reported(self, run_loopclosure):
        code = """package main

func use(args ...int) {}

func main() {
    for i := 0; i < 3; i++ {
        go func() {
            use(i)
            use(i + i)
        }()
    }
}
"""
        findings = run_loopclosure(code)

        assert names(findings) == ["i", "i", "i"]
        assert [f.line for f in findings] == [8, 9, 9]

    def test_doubly_nested_literal_still_visited(self, run_loopclosure):
        code = """package main

func use(args ...int) {}

func main() {
    items := []int{1, 2, 3}
    for _, v := range items {
        go func() {
            f := func() {
                use(v)
            }
            f()
        }()
    }
}
"""
        assert names(run_loopclosure(code)) == ["v"]

    def test_parenthesized_literal(self, run_loopclosure):
        code = """package main

func use(args ...int) {}

func main() {
    for i := 0; i < 3; i++ {
        go (func() {
            use(i)
        })()
    }
}
"""
        assert names(run_loopclosure(code)) == ["i"]

    def test_comment_after_last_statement_is_ignored(self, run_loopclosure):
        code = """package main

func use(args ...int) {}

func main() {
    for i := 0; i < 3; i++ {
        go func() {
            use(i)
        }()
        // trailing comment
    }
}
"""
        assert names(run_loopclosure(code)) == ["i"]

    def test_blank_key_is_never_reported(self, run_loopclosure):
        code = """package main

func use(args ...int) {}

func main() {
    items := []int{1, 2, 3}
    for _, v := range items {
        go func() {
            _ = v
        }()
    }
}
"""
        assert names(run_loopclosure(code)) == ["v"]


class TestLoopVariables:
    """Loop header forms and which variables they update."""

    def test_assignment_post_statement(self, run_loopclosure):
        code = """package main

type node struct {
    next *node
}

func use(p *node) {}

func walk(head *node) {
    var p *node
    for p = head; p != nil; p = p.next {
        go func() {
            use(p)
        }()
    }
}
"""
        assert names(run_loopclosure(code)) == ["p"]

    def test_multi_assignment_post_statement(self, run_loopclosure):
        code = """package main

func use(args ...int) {}

func main() {
    for i, j := 0, 10; i < j; i, j = i+1, j-1 {
        go func() {
            use(i, j)
        }()
    }
}
"""
        assert names(run_loopclosure(code)) == ["i", "j"]

    def test_compound_assignment_post_statement(self, run_loopclosure):
        code = """package main

func use(args ...int) {}

func main() {
    for i := 0; i < 10; i += 2 {
        defer func() {
            use(i)
        }()
    }
}
"""
        assert names(run_loopclosure(code)) == ["i"]

    def test_field_post_statement_skips_loop(self, run_loopclosure):
        code = """package main

type counter struct {
    n int
}

func use(args ...int) {}

func main() {
    var c counter
    for c.n = 0; c.n < 3; c.n++ {
        go func() {
            use(c.n)
        }()
    }
}
"""
        assert run_loopclosure(code) == []

    def test_index_post_statement_skips_loop(self, run_loopclosure):
        code = """package main

func use(args ...int) {}

func main() {
    xs := []int{0}
    i := 0
    for xs[0] = 0; xs[0] < 3; xs[0]++ {
        go func() {
            use(xs[0], i)
        }()
    }
}
"""
        assert run_loopclosure(code) == []

    def test_condition_only_loop_skipped(self, run_loopclosure):
        code = """package main

func use(args ...int) {}

func main() {
    i := 0
    for i < 3 {
        go func() {
            use(i)
        }()
        i++
    }
    for {
        go func() {
            use(i)
        }()
    }
}
"""
        assert run_loopclosure(code) == []

    def test_range_with_assignment_reuses_outer_variable(self, run_loopclosure):
        code = """package main

func use(args ...int) {}

func main() {
    var k, v int
    m := map[int]int{}
    for k, v = range m {
        go func() {
            use(k, v)
        }()
    }
}
"""
        assert names(run_loopclosure(code)) == ["k", "v"]

    def test_range_without_variables_skipped(self, run_loopclosure):
        code = """package main

func use(args ...int) {}

func main() {
    ch := make(chan int)
    for range ch {
        go func() {
            use(1)
        }()
    }
}
"""
        assert run_loopclosure(code) == []

    def test_loop_variables_extractor(self, parse, find_nodes):
        tree = parse("""package main

func main() {
    for i := 0; i < 3; i-- {
    }
    for k, v := range m {
    }
    for x := range ch {
    }
    for ok := true; ok; ok = step() {
    }
    for s.i = 0; s.i < 3; s.i++ {
    }
}
""")
        loops = find_nodes(tree, "for_statement")
        extracted = [[n.text.decode() for n in loop_variables(loop)] for loop in loops]

        assert extracted == [["i"], ["k", "v"], ["x"], ["ok"], []]


class TestShadowing:
    """Bindings are compared by declaration, not by name."""

    def test_inner_loop_variable_with_same_name(self, run_loopclosure):
        code = """package main

func use(args ...int) {}

func main() {
    for i := 0; i < 3; i++ {
        for i := 0; i < 2; i++ {
            use(i)
        }
        go func() {
            use(1)
        }()
    }
}
"""
        assert run_loopclosure(code) == []

    def test_outer_loop_variable_captured_in_inner_loop(self, run_loopclosure):
        code = """package main

func use(args ...int) {}

func main() {
    for i := 0; i < 3; i++ {
        for j := 0; j < 2; j++ {
            go func() {
                use(i, j)
            }()
        }
    }
}
"""
        # Only the inner loop's last statement is a go statement.
        assert names(run_loopclosure(code)) == ["j"]

    def test_struct_field_key_is_not_a_variable(self, run_loopclosure):
        code = """package main

type item struct {
    v int
}

func use(it item) {}

func main() {
    items := []int{1, 2, 3}
    for _, v := range items {
        go func() {
            use(item{v: 1})
        }()
    }
}
"""
        assert run_loopclosure(code) == []

    def test_map_literal_key_is_a_variable(self, run_loopclosure):
        code = """package main

func use(m map[int]bool) {}

func main() {
    items := []int{1, 2, 3}
    for _, v := range items {
        go func() {
            use(map[int]bool{v: true})
        }()
    }
}
"""
        assert names(run_loopclosure(code)) == ["v"]


    def test_elided_map_literal_key_is_a_variable(self, run_loopclosure):
        code = """package main

func use(ms []map[int]int) {}

func main() {
    for k := 0; k < 3; k++ {
        go func() {
            use([]map[int]int{{k: 1}})
        }()
    }
}
"""
        assert names(run_loopclosure(code)) == ["k"]

    def test_elided_struct_literal_key_is_not_a_variable(self, run_loopclosure):
        code = """package main

type item struct {
    v int
}

func use(items map[string]item) {}

func main() {
    for _, v := range []int{1, 2} {
        go func() {
            use(map[string]item{"a": {v: 1}})
        }()
    }
}
"""
        assert run_loopclosure(code) == []

    def test_function_type_parameter_names_are_not_references(self, run_loopclosure):
        code = """package main

func main() {
    for i := 0; i < 3; i++ {
        go func() {
            var f func(i int) int
            _ = f
        }()
    }
}
"""
        assert run_loopclosure(code) == []

    def test_interface_method_parameter_names_are_not_references(self, run_loopclosure):
        code = """package main

func main() {
    for _, v := range []int{1, 2} {
        defer func() {
            var x interface {
                Visit(v int) (i int)
            }
            _ = x
        }()
    }
}
"""
        assert run_loopclosure(code) == []
    def test_selector_field_with_loop_variable_name(self, run_loopclosure):
        code = """package main

type point struct {
    i int
}

func use(args ...int) {}

func main() {
    p := point{}
    for i := 0; i < 3; i++ {
        go func() {
            use(p.i)
        }()
    }
}
"""
        assert run_loopclosure(code) == []


class TestErrgroup:
    """golang.org/x/sync/errgroup.Group.Go as the last statement."""

    def test_group_go_var(self, run_loopclosure):
        code = """package main

import "golang.org/x/sync/errgroup"

func use(args ...int) error { return nil }

func main() {
    var g errgroup.Group
    items := []int{1, 2, 3}
    for i, v := range items {
        g.Go(func() error {
            return use(i, v)
        })
    }
    g.Wait()
}
"""
        findings = run_loopclosure(code)

        assert names(findings) == ["i", "v"]
        assert all(f.additional_info["escape"] == "errgroup" for f in findings)

    def test_group_from_with_context(self, run_loopclosure):
        code = """package main

import (
    "context"

    "golang.org/x/sync/errgroup"
)

func use(ctx context.Context, v int) error { return nil }

func run(ctx context.Context, items []int) error {
    g, ctx := errgroup.WithContext(ctx)
    for _, v := range items {
        g.Go(func() error {
            return use(ctx, v)
        })
    }
    return g.Wait()
}
"""
        assert names(run_loopclosure(code)) == ["v"]

    def test_group_pointer_from_new(self, run_loopclosure):
        code = """package main

import eg "golang.org/x/sync/errgroup"

func use(v int) error { return nil }

func main() {
    g := new(eg.Group)
    for _, v := range []int{1, 2} {
        g.Go(func() error { return use(v) })
    }
}
"""
        assert names(run_loopclosure(code)) == ["v"]

    def test_group_go_not_last(self, run_loopclosure):
        code = """package main

import "golang.org/x/sync/errgroup"

func use(v int) error { return nil }

func main() {
    var g errgroup.Group
    for _, v := range []int{1, 2} {
        g.Go(func() error { return use(v) })
        g.Wait()
    }
}
"""
        assert run_loopclosure(code) == []

    def test_same_named_method_on_local_type(self, run_loopclosure):
        code = """package main

type Group struct{}

func (g *Group) Go(f func() error) {}

func use(v int) error { return nil }

func main() {
    var g Group
    for _, v := range []int{1, 2} {
        g.Go(func() error { return use(v) })
    }
}
"""
        assert run_loopclosure(code) == []

    def test_same_named_type_in_other_module(self, run_loopclosure):
        code = """package main

import "example.com/fork/errgroup"

func use(v int) error { return nil }

func main() {
    var g errgroup.Group
    for _, v := range []int{1, 2} {
        g.Go(func() error { return use(v) })
    }
}
"""
        assert run_loopclosure(code) == []

    def test_group_field_of_local_struct(self, run_loopclosure):
        code = """package main

import "golang.org/x/sync/errgroup"

type runner struct {
    group errgroup.Group
}

func use(v int) error { return nil }

func (r *runner) start(items []int) {
    for _, v := range items {
        r.group.Go(func() error { return use(v) })
    }
}
"""
        assert names(run_loopclosure(code)) == ["v"]

    @pytest.mark.parametrize("embed", ["errgroup.Group", "*errgroup.Group"])
    def test_go_promoted_from_embedded_group(self, run_loopclosure, embed):
        code = f"""package main

import "golang.org/x/sync/errgroup"

type supervisor struct {{
    {embed}
    name string
}}

func use(args ...int) {{}}

func main() {{
    var s supervisor
    for i := 0; i < 3; i++ {{
        s.Go(func() error {{
            use(i)
            return nil
        }})
    }}
}}
"""
        findings = run_loopclosure(code)

        assert names(findings) == ["i"]
        assert findings[0].additional_info["escape"] == "errgroup"

    def test_go_promoted_from_local_embedded_type(self, run_loopclosure):
        code = """package main

import "golang.org/x/sync/errgroup"

type launcher struct{}

func (launcher) Go(f func() error) {}

type supervisor struct {
    launcher
    group errgroup.Group
}

func use(v int) error { return nil }

func main() {
    var s supervisor
    for _, v := range []int{1, 2} {
        s.Go(func() error { return use(v) })
    }
}
"""
        assert run_loopclosure(code) == []


PARALLEL_SUBTEST = """package main

import "testing"

func use(args ...int) {}

func TestItems(t *testing.T) {
    items := []int{1, 2, 3}
    for i, test := range items {
        t.Run("sub", func(t *testing.T) {
            t.Parallel()
            use(i, test)
        })
        use(0)
    }
}
"""


class TestParallelSubtests:
    """testing.T.Run with t.Parallel(), behind the parallel_subtests option."""

    def test_disabled_by_default(self, run_loopclosure):
        assert run_loopclosure(PARALLEL_SUBTEST) == []

    def test_enabled_fires_at_any_position(self, run_loopclosure):
        findings = run_loopclosure(PARALLEL_SUBTEST, parallel_subtests=True)

        assert names(findings) == ["i", "test"]
        assert all(f.additional_info["escape"] == "parallel_subtest" for f in findings)

    def test_without_parallel_call(self, run_loopclosure):
        code = PARALLEL_SUBTEST.replace("t.Parallel()", "t.Helper()")
        assert run_loopclosure(code, parallel_subtests=True) == []

    def test_parallel_call_nested_in_block_does_not_count(self, run_loopclosure):
        code = PARALLEL_SUBTEST.replace("t.Parallel()", "if true { t.Parallel() }")
        assert run_loopclosure(code, parallel_subtests=True) == []

    def test_named_subtest_function(self, run_loopclosure):
        code = """package main

import "testing"

func sub(t *testing.T) {
    t.Parallel()
}

func TestItems(t *testing.T) {
    for i := 0; i < 3; i++ {
        t.Run("sub", sub)
    }
}
"""
        assert run_loopclosure(code, parallel_subtests=True) == []


class TestRuleProperties:
    """Determinism and metadata."""

    def test_idempotent(self, run_loopclosure):
        code = """package main

func use(args ...int) {}

func main() {
    for i := 0; i < 3; i++ {
        for j := 0; j < 3; j++ {
            defer func() { use(i, j) }()
        }
        go func() { use(i) }()
    }
}
"""
        first = [f.to_dict() for f in run_loopclosure(code)]
        second = [f.to_dict() for f in run_loopclosure(code)]

        assert first == second
        assert [(d["line"], d["column"]) for d in first] == [(10, 25), (8, 35)]

    def test_deeply_nested_expression(self, run_loopclosure):
        total = " + ".join(["1"] * 1500)
        code = f"""package main

func use(args ...int) {{}}

func main() {{
    for i := 0; i < 3; i++ {{
        n := {total}
        go func() {{ use(i, n) }}()
    }}
}}
"""
        assert names(run_loopclosure(code)) == ["i"]

    def test_metadata(self):
        assert METADATA.name == "loopclosure"
        assert METADATA.requires == ["inspect"]
        assert METADATA.target_extensions == [".go"]
        assert "golang.org/x/sync/errgroup.Group.Go" in METADATA.doc
        assert METADATA.summary == "check references to loop variables from within nested functions"


class TestHelpers:
    """Scanner and matcher in isolation."""

    @pytest.fixture
    def program(self, parse):
        tree = parse("""package main

import "golang.org/x/sync/errgroup"

type Group struct{}

func (g Group) Go(f func() error) {}

func main() {
    var real errgroup.Group
    var fake Group
    for i := 0; i < 3; i++ {
        defer func() {}()
        go func() {}()
    }
    for i := 0; i < 3; i++ {
        real.Go(func() error { return nil })
        fake.Go(func() error { return nil })
    }
}
""")
        return tree, resolve_unit(tree)

    def test_is_method_call(self, program, find_nodes):
        tree, info = program
        calls = [c for c in find_nodes(tree, "call_expression") if c.text.decode().endswith("return nil })")]

        assert is_method_call(info, calls[0], "golang.org/x/sync/errgroup", "Group", "Go")
        assert not is_method_call(info, calls[1], "golang.org/x/sync/errgroup", "Group", "Go")
        assert is_method_call(info, calls[1], "main", "Group", "Go")
        assert not is_method_call(info, calls[0], "golang.org/x/sync/errgroup", "Group", "Wait")
        assert not is_method_call(info, None, "testing", "T", "Run")

    def test_escaping_literals_only_last(self, program, find_nodes):
        tree, info = program
        loops = find_nodes(tree, "for_statement")

        first = list(escaping_literals(loops[0].child_by_field_name("body"), info))
        second = list(escaping_literals(loops[1].child_by_field_name("body"), info))

        assert [c.kind for c in first] == [EscapeKind.GO]
        assert second == []
