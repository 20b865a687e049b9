from clock import SimulationClock


class Recorder:
    def __init__(self):
        self.ticks = 0
        self.renders = 0

    def tick(self):
        self.ticks += 1

    def render(self):
        self.renders += 1


def test_paused_clock_only_renders():
    rec = Recorder()
    clock = SimulationClock(10, rec.tick, rec.render)
    assert clock.frame(1000) is False
    assert (rec.ticks, rec.renders) == (0, 1)


def test_interval_gates_ticks():
    rec = Recorder()
    clock = SimulationClock(10, rec.tick, rec.render)
    clock.start(0)
    assert clock.frame(5) is False
    assert clock.frame(10) is True
    assert clock.frame(15) is False
    assert clock.frame(21) is True
    assert rec.ticks == 2
    assert rec.renders == 4


def test_zero_interval_ticks_every_frame():
    rec = Recorder()
    clock = SimulationClock(0, rec.tick, rec.render)
    clock.start(0)
    for t in range(5):
        clock.frame(t)
    assert rec.ticks == 5


def test_resume_does_not_catch_up():
    rec = Recorder()
    clock = SimulationClock(10, rec.tick, rec.render)
    clock.start(0)
    clock.pause()
    clock.start(10000)
    assert clock.frame(10001) is False
    assert rec.ticks == 0


def test_toggle_and_negative_interval():
    rec = Recorder()
    clock = SimulationClock(-5, rec.tick, rec.render)
    assert clock.interval_ms == 0
    assert clock.toggle(0) is True
    assert clock.toggle(1) is False
    clock.set_interval(-1)
    assert clock.interval_ms == 0
