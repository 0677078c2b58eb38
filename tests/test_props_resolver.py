"""Property-based tests for value resolution using Hypothesis.

These tests validate the cycle, clamp and query invariants of stateful
fields for all reachable device states.
"""

from hypothesis import given, strategies as st
from msc.registry import ArgGrammar, DeviceField
from msc.resolver import ValueResolver
from tests.mocks import MockDevice


def _device(endpoint, key, current):
    return MockDevice({endpoint: {key: str(current)}})


class TestCycleProperties:
    """Toggling without an argument is arithmetic mod m."""

    @given(mod=st.integers(min_value=2, max_value=9), data=st.data())
    def test_toggle_is_increment_mod(self, mod, data):
        start = data.draw(st.integers(min_value=0, max_value=mod - 1))
        field = DeviceField("nowplaying", "repeat", mod=mod)
        device = _device("nowplaying", "repeat", start)

        resolution = ValueResolver(device).apply(field, ArgGrammar.TOGGLE, "")

        assert resolution.value == (start + 1) % mod
        assert 0 <= resolution.value < mod

    @given(mod=st.integers(min_value=2, max_value=9), data=st.data())
    def test_m_toggles_return_to_start(self, mod, data):
        start = data.draw(st.integers(min_value=0, max_value=mod - 1))
        field = DeviceField("nowplaying", "repeat", mod=mod)
        device = _device("nowplaying", "repeat", start)
        resolver = ValueResolver(device)

        seen = []
        for _ in range(mod):
            seen.append(resolver.apply(field, ArgGrammar.TOGGLE, "").value)

        assert seen == [(start + i) % mod for i in range(1, mod + 1)]
        assert device.resources["nowplaying"]["repeat"] == str(start)


class TestClampProperties:
    """Relative writes equal clamp(v + d, 0, M)."""

    @given(
        maximum=st.sampled_from([100, 120]),
        current=st.integers(min_value=0, max_value=120),
        delta=st.integers(min_value=-120, max_value=120),
    )
    def test_relative_write_is_clamped(self, maximum, current, delta):
        if abs(delta) > maximum:
            delta = maximum if delta > 0 else -maximum
        field = DeviceField("levels", "volume", max=maximum)
        device = _device("levels", "volume", current)
        token = f"+{delta}" if delta >= 0 else str(delta)

        resolution = ValueResolver(device).apply(field, ArgGrammar.RELATIVE_OR_ABSOLUTE, token)

        assert resolution.value == max(0, min(maximum, current + delta))
        assert device.writes == [("PUT", f"levels?volume={resolution.value}")]


class TestQueryProperties:
    @given(current=st.integers(min_value=0, max_value=100), marker=st.sampled_from(["?", "-"]))
    def test_query_never_writes_and_is_stable(self, current, marker):
        field = DeviceField("levels", "volume", max=100)
        device = _device("levels", "volume", current)
        resolver = ValueResolver(device)

        first = resolver.apply(field, ArgGrammar.RELATIVE_OR_ABSOLUTE, marker)
        second = resolver.apply(field, ArgGrammar.RELATIVE_OR_ABSOLUTE, marker)

        assert first.reading == second.reading == str(current)
        assert device.writes == []
