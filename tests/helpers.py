"""Shared test helpers for Pomodoro."""

from pomodoro.timer.state import TimerState


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Callable epoch-ms clock that only moves when told to."""

    def __init__(self, now_ms: int):
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, seconds: float) -> None:
        self.now_ms += int(seconds * 1000)


# ── recording collaborators ─────────────────────────────────────────────


class FakeSound:
    def __init__(self):
        self.calls: list[tuple] = []

    def play(self, name):
        self.calls.append(("play", name))

    def play_loop(self, name):
        self.calls.append(("loop", name))

    def stop_loop(self):
        self.calls.append(("stop_loop",))

    def stop(self):
        self.calls.append(("stop",))

    @property
    def loops(self) -> list[str]:
        return [c[1] for c in self.calls if c[0] == "loop"]

    @property
    def one_shots(self) -> list[str]:
        return [c[1] for c in self.calls if c[0] == "play"]


class FakeNotifier:
    def __init__(self):
        self.sent: list = []

    def notify(self, request):
        self.sent.append(request)


class FakeSessionStore:
    def __init__(self):
        self.saved: list[tuple] = []

    def save(self, mode, elapsed_seconds):
        self.saved.append((mode, elapsed_seconds))


class FakeSnapshotStore:
    def __init__(self, initial: TimerState | None = None):
        self.saved: list[TimerState] = []
        self.initial = initial

    def save(self, state):
        self.saved.append(state)

    def load(self):
        return self.saved[-1] if self.saved else self.initial

    @property
    def last(self):
        return self.saved[-1] if self.saved else None


# ── collaborators that always fail ──────────────────────────────────────


class BrokenSound:
    def play(self, name):
        raise RuntimeError("audio device gone")

    def play_loop(self, name):
        raise RuntimeError("audio device gone")

    def stop_loop(self):
        raise RuntimeError("audio device gone")

    def stop(self):
        raise RuntimeError("audio device gone")


class BrokenNotifier:
    def notify(self, request):
        raise RuntimeError("notification daemon unreachable")


class BrokenStore:
    def save(self, *args):
        raise OSError("disk full")

    def load(self):
        raise OSError("disk unreadable")


def expire(engine) -> None:
    """Jump the running countdown to its last second and tick once."""
    from dataclasses import replace

    engine._state = replace(engine.state, time_left=1, is_active=True)
    engine.tick()
