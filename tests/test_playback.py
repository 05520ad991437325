import pytest

from memories_bed.viewer.playback import (
    CONTROLS_HIDE_MS, PlaybackState, VideoTransport, format_time,
)


class FakeBackend:
    def __init__(self):
        self.calls = []

    def play(self):
        self.calls.append(("play",))

    def pause(self):
        self.calls.append(("pause",))

    def seek(self, seconds):
        self.calls.append(("seek", seconds))

    def set_volume(self, volume):
        self.calls.append(("volume", volume))

    def set_muted(self, muted):
        self.calls.append(("muted", muted))


class FakeTimer:
    def __init__(self):
        self.running = False
        self.interval = None

    def start(self, msec):
        self.running = True
        self.interval = msec

    def stop(self):
        self.running = False


class FakeFullscreenHost:
    def __init__(self, fail=False):
        self.requests = []
        self.fail = fail

    def request_fullscreen(self):
        if self.fail:
            raise RuntimeError("denied")
        self.requests.append("enter")

    def exit_fullscreen(self):
        self.requests.append("exit")


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def timer():
    return FakeTimer()


@pytest.fixture
def transport(backend, timer):
    return VideoTransport(backend, timer=timer, fullscreen=FakeFullscreenHost())


def test_toggle_play_sends_command_only(transport, backend):
    transport.toggle_play()
    assert backend.calls == [("play",)]
    assert transport.state.is_playing is False
    transport.on_play()
    transport.toggle_play()
    assert backend.calls[-1] == ("pause",)


def test_seek_ignored_without_duration(transport, backend):
    assert transport.seek_to(0.5) is None
    assert backend.calls == []


def test_seek_to_fraction(transport, backend):
    transport.on_loaded_metadata(200)
    assert transport.seek_to(0.25) == 50
    assert backend.calls == [("seek", 50)]
    assert transport.seek_to(3) == 200


def test_skip_clamps(transport, backend):
    transport.on_loaded_metadata(30)
    transport.on_time_update(25)
    assert transport.skip_forward() == 30
    transport.on_time_update(4)
    assert transport.skip_back() == 0


def test_time_update_clamped_to_duration(transport):
    transport.on_loaded_metadata(10)
    transport.on_time_update(12)
    assert transport.state.current_time == 10
    transport.on_time_update(float("nan"))
    assert transport.state.current_time == 10
    transport.on_time_update(None)
    assert transport.state.progress == 1.0


@pytest.mark.parametrize("value", [None, "abc", float("inf"), -3])
def test_bad_duration_becomes_zero(transport, value):
    transport.on_loaded_metadata(value)
    assert transport.state.duration == 0.0
    assert not transport.can_seek


def test_volume_zero_mutes_and_restore_on_unmute(transport, backend):
    transport.set_volume(0.6)
    transport.set_volume(0)
    assert transport.state.is_muted
    assert transport.last_volume == 0.6
    transport.toggle_mute()
    assert not transport.state.is_muted
    assert transport.state.volume == 0.6
    assert ("volume", 0.6) in backend.calls


def test_mute_keeps_volume(transport):
    transport.set_volume(0.4)
    transport.toggle_mute()
    assert transport.state.is_muted
    assert transport.state.volume == 0.4


def test_volume_clamped(transport):
    transport.set_volume(1.7)
    assert transport.state.volume == 1.0


def test_controls_hide_only_while_playing(transport, timer):
    transport.pointer_activity()
    assert not timer.running
    transport.on_play()
    assert timer.running
    assert timer.interval == CONTROLS_HIDE_MS
    transport.on_hide_timeout()
    assert transport.state.controls_visible is False
    transport.pointer_activity()
    assert transport.state.controls_visible is True


def test_pause_shows_controls_and_stops_timer(transport, timer):
    transport.on_play()
    transport.on_hide_timeout()
    transport.on_pause()
    assert transport.state.controls_visible
    assert not timer.running
    transport.on_hide_timeout()
    assert transport.state.controls_visible


def test_ended_behaves_like_pause(transport):
    transport.on_play()
    transport.on_ended()
    assert transport.state.is_playing is False


def test_error_state(transport, backend):
    transport.on_loaded_metadata(60)
    transport.on_play()
    transport.on_error("404")
    state = transport.state
    assert state.load_failed
    assert not state.is_playing
    assert state.duration == 0
    transport.toggle_play()
    assert ("play",) not in backend.calls


def test_fullscreen_follows_host_events():
    host = FakeFullscreenHost()
    transport = VideoTransport(FakeBackend(), fullscreen=host)
    transport.toggle_fullscreen()
    assert host.requests == ["enter"]
    assert not transport.state.is_fullscreen
    transport.on_fullscreen_changed(True)
    transport.toggle_fullscreen()
    assert host.requests == ["enter", "exit"]


def test_rejected_fullscreen_leaves_state():
    transport = VideoTransport(FakeBackend(), fullscreen=FakeFullscreenHost(fail=True))
    transport.toggle_fullscreen()
    assert not transport.state.is_fullscreen


def test_teardown_ignores_late_events(backend, timer):
    changes = []
    transport = VideoTransport(backend, timer=timer, on_change=changes.append)
    transport.on_play()
    transport.teardown()
    count = len(changes)
    transport.on_time_update(5)
    transport.on_pause()
    transport.toggle_play()
    assert len(changes) == count
    assert not timer.running
    assert backend.calls == []
    assert transport.closed


def test_uses_given_state():
    state = PlaybackState(volume=0.3)
    transport = VideoTransport(FakeBackend(), state=state)
    assert transport.state is state
    assert transport.last_volume == 0.3


@pytest.mark.parametrize("seconds,text", [
    (0, "0:00"),
    (65.9, "1:05"),
    (3605, "1:00:05"),
    (float("nan"), "0:00"),
    (-4, "0:00"),
])
def test_format_time(seconds, text):
    assert format_time(seconds) == text
