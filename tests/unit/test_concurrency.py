import io
import re
import threading
import time
from pathlib import Path

from mlog.levels import Severity
from mlog.locks import ReadWriteLock
from mlog.logger import Logger


LINE_RE = re.compile(r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] \[INFO\] worker=(\d+) seq=(\d+) (x+)$")


def test_concurrent_writers_never_interleave_lines(tmp_path: Path) -> None:
    stream = io.StringIO()
    log = Logger(stream=stream, buffer_size=64)
    log.set_output(tmp_path / "app.log")
    workers = 8
    per_worker = 100
    payload = "x" * 40

    def work(worker: int) -> None:
        for seq in range(per_worker):
            log.infof("worker=%d seq=%d %s", worker, seq, payload)

    threads = [threading.Thread(target=work, args=(n,)) for n in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    log.close()

    for text in (stream.getvalue(), (tmp_path / "app.log").read_text(encoding="utf-8")):
        lines = text.splitlines()
        assert len(lines) == workers * per_worker
        last_seq = {}
        for line in lines:
            match = LINE_RE.match(line)
            assert match, line
            worker, seq = int(match.group(1)), int(match.group(2))
            assert match.group(3) == payload
            assert seq == last_seq.get(worker, -1) + 1
            last_seq[worker] = seq


def test_level_changes_during_writes_are_safe() -> None:
    stream = io.StringIO()
    log = Logger(stream=stream, level=Severity.DEBUG)
    stop = threading.Event()

    def toggle() -> None:
        while not stop.is_set():
            log.set_level(Severity.ERROR)
            log.set_level(Severity.DEBUG)

    toggler = threading.Thread(target=toggle)
    toggler.start()
    try:
        for n in range(500):
            log.info("n=", n)
    finally:
        stop.set()
        toggler.join()
    log.flush()
    for line in stream.getvalue().splitlines():
        assert re.match(r"^\[.{19}\] \[INFO\] n=\d+$", line)


def test_readers_share_the_lock() -> None:
    lock = ReadWriteLock()
    entered = threading.Event()

    def reader() -> None:
        with lock.read_locked():
            entered.set()

    with lock.read_locked():
        thread = threading.Thread(target=reader)
        thread.start()
        assert entered.wait(timeout=2)
    thread.join()


def test_writer_waits_for_readers() -> None:
    lock = ReadWriteLock()
    acquired = threading.Event()

    def writer() -> None:
        with lock.write_locked():
            acquired.set()

    lock.acquire_read()
    thread = threading.Thread(target=writer)
    thread.start()
    assert not acquired.wait(timeout=0.2)
    lock.release_read()
    assert acquired.wait(timeout=2)
    thread.join()


def test_waiting_writer_blocks_new_readers() -> None:
    lock = ReadWriteLock()
    order = []
    writer_started = threading.Event()

    def writer() -> None:
        writer_started.set()
        with lock.write_locked():
            order.append("writer")

    def reader() -> None:
        with lock.read_locked():
            order.append("reader")

    lock.acquire_read()
    writer_thread = threading.Thread(target=writer)
    writer_thread.start()
    writer_started.wait(timeout=2)
    while not lock._writers_waiting:
        time.sleep(0.01)
    reader_thread = threading.Thread(target=reader)
    reader_thread.start()
    lock.release_read()
    writer_thread.join(timeout=2)
    reader_thread.join(timeout=2)
    assert order == ["writer", "reader"]


def test_output_switches_during_writes_keep_lines_whole(tmp_path: Path) -> None:
    stream = io.StringIO()
    log = Logger(stream=stream, buffer_size=256)
    paths = [tmp_path / f"app{n}.log" for n in range(3)]
    log.set_output(paths[0])
    workers = 6
    per_worker = 150
    payload = "x" * 30
    stop = threading.Event()
    switches = []

    def switch() -> None:
        n = 0
        while not stop.is_set():
            n += 1
            log.set_output(paths[n % len(paths)])
            switches.append(n)
            time.sleep(0.001)

    def work(worker: int) -> None:
        for seq in range(per_worker):
            log.infof("worker=%d seq=%d %s", worker, seq, payload)

    switcher = threading.Thread(target=switch)
    threads = [threading.Thread(target=work, args=(n,)) for n in range(workers)]
    switcher.start()
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    stop.set()
    switcher.join()
    log.close()

    assert switches
    console_lines = stream.getvalue().splitlines()
    file_lines = [line for path in paths for line in path.read_text(encoding="utf-8").splitlines()]
    assert len(console_lines) == workers * per_worker
    assert len(file_lines) == workers * per_worker
    for line in console_lines + file_lines:
        match = LINE_RE.match(line)
        assert match, line
        assert match.group(3) == payload
    assert sorted(console_lines) == sorted(file_lines)
