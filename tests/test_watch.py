import pytest

from rough.build import BuildError, BuildResult
from rough.watch import SiteWatcher, _ChangeHandler


class DummyEvent:
    def __init__(self, path, is_directory=False):
        self.src_path = path
        self.is_directory = is_directory


def make_watcher(tmp_path, messages=None):
    src = tmp_path / "src"
    src.mkdir(exist_ok=True)
    report = messages.append if messages is not None else (lambda message: None)
    return SiteWatcher(src, src / "out", report=report, debounce_seconds=0.0)


def test_change_handler_skips_output(tmp_path):
    watcher = make_watcher(tmp_path)
    watcher.output_dir.mkdir()
    called = []
    watcher.rebuild = lambda: called.append("rebuilt")
    handler = _ChangeHandler(watcher)

    handler.on_any_event(DummyEvent(str(watcher.output_dir / "index.html")))
    assert called == []

    handler.on_any_event(DummyEvent(str(watcher.source_dir / "projects" / "a.md")))
    assert called == ["rebuilt"]


def test_change_handler_directory_event(tmp_path):
    watcher = make_watcher(tmp_path)
    called = []
    watcher.rebuild = lambda: called.append("rebuilt")
    _ChangeHandler(watcher).on_any_event(DummyEvent(str(watcher.source_dir), is_directory=True))
    assert called == []


def test_build_reports_success(monkeypatch, tmp_path):
    messages = []
    watcher = make_watcher(tmp_path, messages)
    monkeypatch.setattr(
        "rough.watch.build_site",
        lambda source, output: BuildResult(projects=[], output_dir=output),
    )
    result = watcher.build()
    assert result.output_dir == watcher.output_dir
    assert messages == [f"Built 0 projects into {watcher.output_dir}"]


def test_build_reports_failure_without_raising(monkeypatch, tmp_path):
    messages = []
    watcher = make_watcher(tmp_path, messages)

    def failing(source, output):
        raise BuildError(source / "projects" / "a.md", "boom")

    monkeypatch.setattr("rough.watch.build_site", failing)
    assert watcher.build() is None
    assert messages == [f"Build failed: {watcher.source_dir / 'projects' / 'a.md'}: boom"]


class DummyTimer:
    created = []

    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.daemon = False
        self.started = False
        self.cancelled = False
        DummyTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.callback()


@pytest.fixture
def timers(monkeypatch):
    DummyTimer.created = []
    monkeypatch.setattr("rough.watch.threading.Timer", DummyTimer)
    return DummyTimer.created


def count_builds(monkeypatch, on_build=None):
    calls = []

    def fake_build(source, output):
        calls.append("built")
        if on_build is not None:
            on_build(len(calls))
        return BuildResult([], output)

    monkeypatch.setattr("rough.watch.build_site", fake_build)
    return calls


def test_change_during_build_triggers_followup(monkeypatch, tmp_path, timers):
    watcher = make_watcher(tmp_path)

    def change_while_building(count):
        if count == 1:
            watcher.rebuild()  # arrives while the first build runs

    calls = count_builds(monkeypatch, change_while_building)
    watcher.rebuild()
    assert calls == ["built"]
    assert len(timers) == 1 and timers[0].started and timers[0].daemon

    timers[0].fire()
    assert calls == ["built", "built"]


def test_back_to_back_changes_are_coalesced(monkeypatch, tmp_path, timers):
    watcher = make_watcher(tmp_path)
    watcher._debounce_seconds = 60.0
    calls = count_builds(monkeypatch)
    handler = _ChangeHandler(watcher)

    handler.on_any_event(DummyEvent(str(watcher.source_dir / "projects" / "a.md")))
    handler.on_any_event(DummyEvent(str(watcher.source_dir / "projects" / "b.md")))
    handler.on_any_event(DummyEvent(str(watcher.source_dir / "projects" / "c.md")))
    assert calls == ["built"]
    assert len(timers) == 1
    assert 0 < timers[0].delay <= 60.0

    timers[0].fire()
    assert calls == ["built", "built"]


def test_stop_cancels_scheduled_rebuild(monkeypatch, tmp_path, timers):
    watcher = make_watcher(tmp_path)
    watcher._debounce_seconds = 60.0
    count_builds(monkeypatch)
    watcher.rebuild()
    watcher.rebuild()
    watcher.stop()
    assert timers[0].cancelled


def test_start_observer_and_stop(monkeypatch, tmp_path):
    watcher = make_watcher(tmp_path)
    scheduled = {}

    class DummyObserver:
        def schedule(self, handler, path, recursive=False):
            scheduled["path"] = path
            scheduled["recursive"] = recursive

        def start(self):
            scheduled["started"] = True

        def stop(self):
            scheduled["stopped"] = True

        def join(self):
            scheduled["joined"] = True

    monkeypatch.setattr("rough.watch.Observer", DummyObserver)
    watcher._start_observer()
    assert scheduled == {"path": str(watcher.source_dir), "recursive": True, "started": True}
    watcher.stop()
    assert scheduled["stopped"] and scheduled["joined"]
    watcher.stop()  # no observer left; no-op
