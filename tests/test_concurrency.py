from multini import IniFile
from multini.utils import ReadWriteLock
from concurrent.futures import ThreadPoolExecutor
import threading
import time
import pytest

N_THREADS = 8
N_ITEMS = 200


class TestReadWriteLock:

    def test_readers_share(self):
        lock = ReadWriteLock()
        inside = threading.Barrier(3, timeout=5)

        def reader():
            with lock.read():
                # all readers must be inside at the same time to pass
                inside.wait()

        threads = [threading.Thread(target=reader) for _ in range(3)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)
        assert not inside.broken

    def test_writer_excludes_readers(self):
        lock = ReadWriteLock()
        entered = threading.Event()

        def reader():
            with lock.read():
                entered.set()

        with lock.write():
            thread = threading.Thread(target=reader)
            thread.start()
            assert not entered.wait(timeout=0.2)
        assert entered.wait(timeout=5)
        thread.join(timeout=5)

    def test_waiting_writer_blocks_new_readers(self):
        lock = ReadWriteLock()
        order = []
        lock.acquire_read()

        def writer():
            with lock.write():
                order.append("writer")

        def reader():
            with lock.read():
                order.append("reader")

        writer_thread = threading.Thread(target=writer)
        writer_thread.start()
        # wait until the writer is queued
        for _ in range(500):
            if lock._waiting_writers:
                break
            time.sleep(0.01)
        reader_thread = threading.Thread(target=reader)
        reader_thread.start()
        time.sleep(0.1)
        assert order == []
        lock.release_read()
        writer_thread.join(timeout=5)
        reader_thread.join(timeout=5)
        assert order == ["writer", "reader"]

    def test_release_unheld(self):
        lock = ReadWriteLock()
        with pytest.raises(RuntimeError):
            lock.release_read()
        with pytest.raises(RuntimeError):
            lock.release_write()


class TestConcurrentAccess:

    def test_concurrent_add(self):
        section = IniFile().add_section("section")

        def add(thread_id: int) -> None:
            for i in range(N_ITEMS):
                section.add(f"key{i}", str(thread_id))
                section.add(f"t{thread_id}_{i}", str(i))

        with ThreadPoolExecutor(N_THREADS) as executor:
            list(executor.map(add, range(N_THREADS)))

        names = section.option_names()
        assert len(names) == len(set(names)) == N_ITEMS * (N_THREADS + 1)
        for thread_id in range(N_THREADS):
            own = [name for name in names if name.startswith(f"t{thread_id}_")]
            assert own == [f"t{thread_id}_{i}" for i in range(N_ITEMS)]

    def test_concurrent_sections(self):
        ini_file = IniFile()

        def add(thread_id: int) -> None:
            for i in range(N_ITEMS):
                ini_file.add_section(f"s{i % 10}").add("thread", str(thread_id))
                ini_file.to_string()

        with ThreadPoolExecutor(N_THREADS) as executor:
            list(executor.map(add, range(N_THREADS)))

        assert len(ini_file) == 10
        assert len(ini_file.sections()) == N_THREADS * N_ITEMS
        assert all(
            len(ini_file.sections(f"s{i}")) == N_THREADS * N_ITEMS // 10
            for i in range(10)
        )

    def test_concurrent_delete(self):
        ini_file = IniFile()
        for i in range(N_ITEMS):
            ini_file.add_section(f"db-{i}")
            ini_file.add_section(f"cache-{i}")

        with ThreadPoolExecutor(N_THREADS) as executor:
            results = list(executor.map(ini_file.delete, ["^db-"] * N_THREADS))

        # every section is deleted exactly once
        assert sum(len(deleted) for deleted in results) == N_ITEMS
        assert ini_file.find("^db-") == []
        assert len(ini_file) == N_ITEMS
