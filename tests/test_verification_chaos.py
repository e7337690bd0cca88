"""Verification Test: Chaos Monkey - Random process termination resilience.

Processes are killed while sampling passes run. A process that exits
mid-pass must be skipped, never turn the whole sample into an error.
"""

import multiprocessing
import random
import threading
import time

import pytest

from snaptop.engine import derive_rows
from snaptop.models import Snapshot, SortDirective
from snaptop.monitor import SnapshotSource


def dummy_worker(duration: float = 60.0) -> None:
    """A dummy worker process that sleeps for a given duration."""
    try:
        time.sleep(duration)
    except (KeyboardInterrupt, SystemExit):
        pass


class TestChaosMonkey:
    """Chaos Monkey verification suite tests."""

    def test_sampling_survives_process_termination(self):
        """
        Sample in a loop on another thread while processes are terminated.

        Every pass must return a snapshot, and every snapshot must derive
        rows without error.
        """
        processes = []
        num_processes = 50

        for _ in range(num_processes):
            p = multiprocessing.Process(target=dummy_worker, args=(60.0,))
            p.start()
            processes.append(p)

        source = SnapshotSource()
        snapshots: list[Snapshot] = []
        errors: list[BaseException] = []
        stop = threading.Event()

        def sample_loop() -> None:
            while not stop.is_set():
                try:
                    snapshots.append(source.sample())
                except Exception as exc:
                    errors.append(exc)
                stop.wait(0.05)

        sampler = threading.Thread(target=sample_loop, daemon=True)
        sampler.start()

        try:
            for p in random.sample(processes, 25):
                if p.is_alive():
                    p.terminate()
                time.sleep(0.05)

            time.sleep(1.0)
        finally:
            stop.set()
            sampler.join(timeout=10.0)
            for p in processes:
                if p.is_alive():
                    p.terminate()
            for p in processes:
                p.join(timeout=1.0)

        if errors:
            pytest.fail(f"Sampling raised: {errors[0]!r}")

        assert len(snapshots) >= 3, f"Expected at least 3 snapshots, got {len(snapshots)}"
        for snapshot in snapshots:
            rows = derive_rows(snapshot, SortDirective())
            assert len(rows) <= 50

    def test_terminated_processes_disappear(self):
        """A killed process is absent from the next snapshot."""
        p = multiprocessing.Process(target=dummy_worker, args=(60.0,))
        p.start()
        source = SnapshotSource()

        try:
            assert p.pid in {proc.pid for proc in source.sample().processes}
            p.terminate()
            p.join(timeout=5.0)

            assert p.pid not in {proc.pid for proc in source.sample().processes}
        finally:
            if p.is_alive():
                p.terminate()
