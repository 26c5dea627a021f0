"""Tests for session lifecycle transitions."""

from __future__ import annotations

import pytest

from warden.runtime.state import SessionState, is_valid_transition


class TestTransitions:
    @pytest.mark.parametrize(
        ("current", "target"),
        [
            ("starting", "running"),
            ("starting", "stopping"),
            ("running", "paused"),
            ("running", "running"),
            ("paused", "running"),
            ("paused", "stopping"),
            ("stopping", "stopped"),
        ],
    )
    def test_allowed(self, current: str, target: str) -> None:
        assert is_valid_transition(current, target)

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            ("starting", "paused"),
            ("paused", "paused"),
            ("stopped", "running"),
            ("stopping", "running"),
        ],
    )
    def test_rejected(self, current: str, target: str) -> None:
        assert not is_valid_transition(current, target)

    def test_states_are_strings(self) -> None:
        assert SessionState.PAUSED == "paused"
