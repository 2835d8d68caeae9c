import threading

from poolwright.expectations import ExpectationTracker


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_unknown_key_is_satisfied():
    tracker = ExpectationTracker()
    assert tracker.satisfied_expectations("hive/pool") is True
    assert tracker.get_expectations("hive/pool") is None


def test_expect_and_observe_creation():
    tracker = ExpectationTracker()
    tracker.expect_creations("hive/pool", 1)
    assert tracker.satisfied_expectations("hive/pool") is False

    tracker.creation_observed("hive/pool")
    assert tracker.satisfied_expectations("hive/pool") is True


def test_expect_creations_overwrites_count():
    tracker = ExpectationTracker()
    tracker.expect_creations("hive/pool", 3)
    tracker.expect_creations("hive/pool", 1)

    assert tracker.get_expectations("hive/pool").add == 1


def test_delete_expectations_unblocks_key():
    tracker = ExpectationTracker()
    tracker.expect_creations("hive/pool", 1)
    tracker.delete_expectations("hive/pool")

    assert tracker.satisfied_expectations("hive/pool") is True
    # Deleting twice is harmless
    tracker.delete_expectations("hive/pool")


def test_expectations_expire_after_ttl():
    clock = FakeClock()
    tracker = ExpectationTracker(ttl_seconds=300, clock=clock)
    tracker.expect_creations("hive/pool", 1)

    clock.now += 299
    assert tracker.satisfied_expectations("hive/pool") is False

    clock.now += 2
    assert tracker.satisfied_expectations("hive/pool") is True


def test_keys_are_independent():
    tracker = ExpectationTracker()
    tracker.expect_creations("hive/a", 1)

    assert tracker.satisfied_expectations("hive/a") is False
    assert tracker.satisfied_expectations("hive/b") is True


def test_concurrent_access_from_workers():
    tracker = ExpectationTracker()
    keys = [f"hive/pool-{i}" for i in range(50)]

    def work(key):
        for _ in range(100):
            tracker.expect_creations(key, 1)
            tracker.creation_observed(key)

    threads = [threading.Thread(target=work, args=(k,)) for k in keys]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert all(tracker.satisfied_expectations(k) for k in keys)


def test_expect_if_satisfied_claims_key_once():
    tracker = ExpectationTracker()
    assert tracker.expect_creations_if_satisfied("hive/pool", 1) is True
    assert tracker.expect_creations_if_satisfied("hive/pool", 1) is False
    assert tracker.get_expectations("hive/pool").add == 1

    tracker.delete_expectations("hive/pool")
    assert tracker.expect_creations_if_satisfied("hive/pool", 1) is True


def test_expect_if_satisfied_after_ttl():
    clock = FakeClock()
    tracker = ExpectationTracker(ttl_seconds=300, clock=clock)
    assert tracker.expect_creations_if_satisfied("hive/pool", 1) is True

    clock.now += 301
    assert tracker.expect_creations_if_satisfied("hive/pool", 1) is True
    assert tracker.get_expectations("hive/pool").timestamp == clock.now


def test_expect_if_satisfied_races_to_one_winner():
    tracker = ExpectationTracker()
    barrier = threading.Barrier(8)
    wins = []

    def claim():
        barrier.wait()
        if tracker.expect_creations_if_satisfied("hive/pool", 1):
            wins.append(1)

    threads = [threading.Thread(target=claim) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(wins) == 1


def test_observed_creation_drops_entry():
    tracker = ExpectationTracker()
    tracker.expect_creations("hive/pool", 2)

    tracker.creation_observed("hive/pool")
    assert tracker.get_expectations("hive/pool").add == 1

    tracker.creation_observed("hive/pool")
    assert tracker.get_expectations("hive/pool") is None
    # Observing again for an unknown key is a no-op
    tracker.creation_observed("hive/pool")
    assert tracker.get_expectations("hive/pool") is None
