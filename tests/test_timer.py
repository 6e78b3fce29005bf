from conftest import FakeClock

from salvo.timer import Countdown


def test_countdown_tracks_elapsed_wall_clock():
    clock = FakeClock()
    timer = Countdown(20, clock)
    timer.start()
    clock.advance(3.5)
    assert timer.update() == 16.5
    assert timer.seconds_left() == 17


def test_countdown_does_not_advance_until_started():
    clock = FakeClock()
    timer = Countdown(10, clock)
    clock.advance(5)
    assert timer.update() == 10
    assert not timer.running


def test_pause_and_resume_skip_paused_time():
    clock = FakeClock()
    timer = Countdown(10, clock)
    timer.start()
    clock.advance(2)
    timer.pause()
    clock.advance(100)
    timer.update()
    assert timer.remaining == 8
    timer.resume()
    clock.advance(1)
    assert timer.update() == 7


def test_countdown_clamps_at_zero_and_will_not_resume():
    clock = FakeClock()
    timer = Countdown(1, clock)
    timer.start()
    clock.advance(5)
    timer.update()
    assert timer.remaining == 0
    assert timer.is_finished()
    timer.pause()
    timer.resume()
    assert not timer.running


def test_reset_restores_duration_without_starting():
    clock = FakeClock()
    timer = Countdown(15, clock)
    timer.start()
    clock.advance(15)
    timer.update()
    timer.pause()
    timer.reset()
    assert timer.remaining == 15
    assert not timer.running
    timer.reset(4)
    assert timer.remaining == 4
