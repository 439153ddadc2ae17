"""Unit tests for execution planning."""

import pytest

from unitbuild.errors import CyclicDependencyError, UnknownUnitError
from unitbuild.orchestrator import plan_build, run_build
from unitbuild.plan import execution_order
from unitbuild.unit import Unit


def _units(*names: str) -> list[Unit]:
    return [Unit(name, lambda: None) for name in names]


class TestExecutionOrder:
    """execution_order() mirrors what Unit.run() would do."""

    def test_single(self):
        """A lone unit plans to itself."""
        (a,) = _units("a")
        assert execution_order([a]) == [a]

    def test_chain(self):
        """a -> b -> c plans c, b, a."""
        a, b, c = _units("a", "b", "c")
        a.add_dependency(b)
        b.add_dependency(c)
        assert execution_order([a]) == [c, b, a]

    def test_diamond(self):
        """Shared dependency appears once, before both dependents."""
        a, b, c, d = _units("a", "b", "c", "d")
        a.add_dependency(b)
        a.add_dependency(c)
        b.add_dependency(d)
        c.add_dependency(d)
        assert execution_order([a]) == [d, b, c, a]

    def test_multiple_roots(self):
        """Units shared between requested roots are listed once."""
        a, b, shared = _units("a", "b", "shared")
        a.add_dependency(shared)
        b.add_dependency(shared)
        assert execution_order([a, b]) == [shared, a, b]

    def test_finished_units_skipped(self):
        """Finished units are left out unless include_finished is set."""
        a, b = _units("a", "b")
        a.add_dependency(b)
        b.run()
        assert execution_order([a]) == [a]
        assert execution_order([a], include_finished=True) == [b, a]

    def test_matches_run_order(self, order_log):
        """The plan lists exactly the actions run() performs, in the same order."""
        names = "abcdef"
        units = {n: Unit(n, order_log.action(n)) for n in names}
        units["a"].add_dependency(units["c"])
        units["a"].add_dependency(units["b"])
        units["c"].add_dependency(units["e"])
        units["b"].add_dependency(units["e"])
        units["b"].add_dependency(units["d"])
        units["e"].add_dependency(units["f"])

        planned = [u.name for u in execution_order([units["a"]])]
        units["a"].run()

        assert planned == order_log.entries

    def test_cycle_detected(self):
        """A cycle built behind add_dependency's back is reported with its path."""
        a, b = _units("a", "b")
        a.add_dependency(b)
        b._dependencies.append(a)
        with pytest.raises(CyclicDependencyError, match="a -> b -> a"):
            execution_order([a])


class TestPlanBuild:
    """plan_build() against a registry."""

    def test_defaults(self, registry):
        """An empty request plans the default units."""
        b = registry.register("b", lambda: None)
        a = registry.register("a", lambda: None, True)
        a.add_dependency(b)
        assert plan_build(registry, []) == [b, a]

    def test_unknown(self, registry):
        """Unknown names raise UnknownUnitError."""
        with pytest.raises(UnknownUnitError):
            plan_build(registry, ["missing"])

    def test_after_build_nothing_left(self, registry):
        """After a build the same request plans nothing."""
        registry.register("a", lambda: None, True)
        run_build(registry, [])
        assert plan_build(registry, []) == []
