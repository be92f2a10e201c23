"""End-to-end tests of the wired core on an in-memory database."""

import pytest

from zenfocus.app import ZenFocusCore
from zenfocus.errors import ValidationError
from zenfocus.modes import AmbientSound, SessionMode
from zenfocus.settings import Settings
from zenfocus.timer.engine import TimerPhase, TimerStatus

from helpers import SignalCollector, run_seconds


@pytest.fixture
def core(qapp, clock):
    core = ZenFocusCore(
        Settings(database_url="sqlite:///:memory:", auto_start_breaks=True),
        clock=clock,
    )
    yield core
    core.shutdown()


class TestCore:

    def test_default_config_from_settings(self, core):
        config = core.default_config()
        assert config.mode == SessionMode.STUDY
        assert config.planned_duration == 25 * 60
        assert config.ambient_sound == AmbientSound.SILENCE

    def test_default_config_overrides(self, core):
        config = core.default_config("meditation", "rain")
        assert config.mode == SessionMode.ZEN
        assert config.planned_duration == 10 * 60
        assert config.ambient_sound == AmbientSound.RAIN

    def test_default_config_rejects_unknown_sound(self, core):
        with pytest.raises(ValidationError):
            core.default_config("study", "thunder")

    def test_session_flows_into_break(self, core, clock):
        completed = SignalCollector()
        core.manager.session_completed.connect(completed)

        config = core.default_config("study")
        session = core.manager.create_session(config, "user-1")
        core.manager.start_session(session.id)
        run_seconds(core.timer, clock, config.planned_duration)

        assert completed.last.completed_fully is True
        assert core.timer.phase == TimerPhase.BREAK
        assert core.timer.status == TimerStatus.RUNNING

        stats = core.manager.get_session_stats("user-1")
        assert stats.total_focus_time == 25 * 60
        assert stats.current_streak == 1
        assert stats.longest_streak == 1
