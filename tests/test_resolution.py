"""
tests/test_resolution.py - Tests for the solve step and failure taxonomy
"""

import pytest

from termina.constants import EnginePhase
from termina.errors import FailureCode, REMEDIATION_NOTES, UnresolvedEquation
from termina.resolution import classify_resolution, solve_prime_mover
from termina.types_event import WorldEvent
from termina.types_state import Aggregate, EngineState


def _aggregate(pain=10.0, joy=20.0, deaths=1, betrayals=1, count=5):
    return Aggregate(pain_sum=pain, joy_sum=joy, death_count=deaths,
                     betrayal_count=betrayals, event_count=count)


class TestClassifyResolution:
    """Pure classification of frozen aggregates."""

    def test_inconclusive_path(self):
        """Stable aggregate yields no failure and a defined ratio."""
        resolution = classify_resolution(_aggregate(), entropy=30.0,
                                         destruction_bias=0.0, epsilon=1e-6)
        assert resolution.code is None
        assert resolution.ratio == pytest.approx(3 / 10)

    def test_too_few_events(self):
        """Fewer than 3 events fails 01 regardless of other state."""
        resolution = classify_resolution(_aggregate(count=2), entropy=500.0,
                                         destruction_bias=1.0, epsilon=1e-6)
        assert resolution.code is FailureCode.DATA_INSUFFICIENT
        assert resolution.ratio is None

    def test_weak_signal(self):
        """|pain| + |joy| under 3 fails 01."""
        resolution = classify_resolution(_aggregate(pain=1.2, joy=1.2, count=3),
                                         entropy=0.0, destruction_bias=0.0, epsilon=1e-6)
        assert resolution.code is FailureCode.DATA_INSUFFICIENT

    def test_signal_exactly_three_passes_first_check(self):
        resolution = classify_resolution(_aggregate(pain=1.0, joy=2.0, deaths=0,
                                                    betrayals=0, count=3),
                                         entropy=0.0, destruction_bias=0.0, epsilon=1e-6)
        assert resolution.code is None

    def test_exact_cancellation(self):
        """joy == pain fails 02."""
        resolution = classify_resolution(_aggregate(pain=6.0, joy=6.0),
                                         entropy=10.0, destruction_bias=0.0, epsilon=1e-6)
        assert resolution.code is FailureCode.SELF_REFERENTIAL_LOOP
        assert resolution.ratio is None
        assert "∞" in resolution.message

    def test_near_cancellation_within_epsilon(self):
        resolution = classify_resolution(_aggregate(pain=6.0, joy=6.0 + 1e-7),
                                         entropy=10.0, destruction_bias=0.0, epsilon=1e-6)
        assert resolution.code is FailureCode.SELF_REFERENTIAL_LOOP

    def test_tighter_epsilon_lets_ratio_through(self):
        """With epsilon 1e-9 a 1e-7 gap is computed and then overflows the ratio bound."""
        resolution = classify_resolution(_aggregate(pain=10.0, joy=10.0 + 1e-7,
                                                    deaths=0, betrayals=50, count=50),
                                         entropy=80.0, destruction_bias=0.0, epsilon=1e-9)
        assert resolution.code is FailureCode.CONFLICTING_AXIOMS
        assert abs(resolution.ratio) > 42

    def test_tiny_joy_with_no_pain_is_insufficient_before_ratio(self):
        """pain 0 / joy 1e-7 is too little signal; 01 wins before any ratio is formed."""
        resolution = classify_resolution(_aggregate(pain=0.0, joy=1e-7, deaths=0,
                                                    betrayals=50, count=50),
                                         entropy=80.0, destruction_bias=0.0, epsilon=1e-9)
        assert resolution.code is FailureCode.DATA_INSUFFICIENT
        assert resolution.ratio is None

    def test_entropy_threshold(self):
        """Entropy over 66 fails 03 even with a small ratio."""
        resolution = classify_resolution(_aggregate(), entropy=66.5,
                                         destruction_bias=0.0, epsilon=1e-6)
        assert resolution.code is FailureCode.CONFLICTING_AXIOMS
        assert resolution.ratio == pytest.approx(0.3)

    def test_ratio_threshold(self):
        resolution = classify_resolution(_aggregate(pain=10.0, joy=10.05, deaths=0, betrayals=3),
                                         entropy=10.0, destruction_bias=0.0, epsilon=1e-6)
        assert resolution.code is FailureCode.CONFLICTING_AXIOMS
        assert resolution.ratio == pytest.approx(60.0)

    def test_bias_with_joy_surplus(self):
        """Bias over 0.4 with joy > pain contradicts."""
        resolution = classify_resolution(_aggregate(), entropy=10.0,
                                         destruction_bias=0.45, epsilon=1e-6)
        assert resolution.code is FailureCode.CONFLICTING_AXIOMS

    def test_bias_with_pain_surplus_is_fine(self):
        resolution = classify_resolution(_aggregate(pain=20.0, joy=10.0), entropy=10.0,
                                         destruction_bias=0.9, epsilon=1e-6)
        assert resolution.code is None
        assert resolution.ratio == pytest.approx(-0.3)

    def test_idempotent(self):
        """Same frozen inputs always classify the same way."""
        agg = _aggregate(pain=41.5, joy=13.0, deaths=4, betrayals=3, count=13)
        first = classify_resolution(agg, 74.5, 0.7, 1e-6)
        for _ in range(10):
            assert classify_resolution(agg, 74.5, 0.7, 1e-6) == first


class TestSolvePrimeMover:
    """solve_prime_mover state transitions and log output."""

    def _state_with(self, events, entropy=0.0, bias=0.0):
        state = EngineState(entropy=entropy, destruction_bias=bias)
        state.ingested_events.extend(events)
        return state

    def test_inconclusive_sets_terminal_state(self, omega_config, fixed_rng):
        events = [WorldEvent("joy", joy=1.0) for _ in range(4)]
        state = self._state_with(events, entropy=4.0)

        assert solve_prime_mover(state, omega_config, fixed_rng) == "INCONCLUSIVE"
        assert state.solved_state == "INCONCLUSIVE"
        assert state.phase is EnginePhase.RESOLVED
        assert state.failure is None
        assert state.ratio == 0.0
        assert state.log[-1].endswith("RESULT: PRIME_MOVER tentative => INCONCLUSIVE")

    def test_log_order_on_contradiction(self, omega_config, fixed_rng):
        events = [WorldEvent("grief", pain=5.0, death=True) for _ in range(3)]
        state = self._state_with(events, entropy=70.0)

        with pytest.raises(UnresolvedEquation) as exc_info:
            solve_prime_mover(state, omega_config, fixed_rng)

        assert exc_info.value.code is FailureCode.CONFLICTING_AXIOMS
        messages = [line.split("] ", 1)[1] for line in state.log]
        assert messages[0].startswith("SOLVE:")
        assert messages[1] == "    AGGREGATE: pain=15.00, joy=0.00, deaths=3, betrayals=0"
        assert messages[2].startswith("    ITERATIONS:")
        assert messages[3] == "    RATIO-COMPUTED: -0.4000"
        assert messages[4].startswith("FATAL: CONTRADICTION")

    def test_division_by_zero_skips_ratio(self, omega_config, fixed_rng):
        events = [WorldEvent("even", pain=2.0, joy=2.0) for _ in range(3)]
        state = self._state_with(events)

        with pytest.raises(UnresolvedEquation) as exc_info:
            solve_prime_mover(state, omega_config, fixed_rng)

        assert exc_info.value.code is FailureCode.SELF_REFERENTIAL_LOOP
        assert not any("RATIO-COMPUTED" in line for line in state.log)
        assert state.ratio is None
        assert state.phase is EnginePhase.FAILED
        assert state.solved_state is None

    def test_failure_receipt(self, omega_config, fixed_rng):
        state = self._state_with([WorldEvent("lonely", pain=9.0)])

        with pytest.raises(UnresolvedEquation):
            solve_prime_mover(state, omega_config, fixed_rng)

        receipt = state.receipt_ledger[-1]
        assert receipt["receipt_type"] == "resolution_failure"
        assert receipt["code"] == "01"
        assert receipt["remediation"] == REMEDIATION_NOTES[FailureCode.DATA_INSUFFICIENT]

    def test_cosmetic_iteration_count_does_not_change_outcome(self, omega_config):
        from conftest import FixedRandomSource

        events = [WorldEvent("joy", joy=1.0) for _ in range(4)]
        outcomes = set()
        for index in (0, 5, 10_000):
            state = self._state_with(list(events), entropy=4.0)
            outcomes.add(solve_prime_mover(state, omega_config, FixedRandomSource(index=index)))
        assert outcomes == {"INCONCLUSIVE"}


class TestUnresolvedEquation:

    def test_to_dict(self):
        failure = UnresolvedEquation(FailureCode.CONFLICTING_AXIOMS, "no closed form")
        data = failure.to_dict()
        assert data == {
            "code": "03",
            "name": "CONFLICTING_AXIOMS",
            "message": "no closed form",
            "remediation": REMEDIATION_NOTES[FailureCode.CONFLICTING_AXIOMS],
        }
        assert str(failure) == "[03] no closed form"
