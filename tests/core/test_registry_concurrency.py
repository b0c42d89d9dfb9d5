# tests/core/test_registry_concurrency.py
"""
Testes de acesso concorrente ao Registry.

Os testes asseguram que:
- leitores concorrentes disparam um único rebuild por geração
- todos os leitores observam o mesmo conjunto materializado
"""

import threading
import time

from config_registry import Registry


class SlowProvider:
    def __init__(self, tree):
        self.tree = tree
        self.loads = 0

    def load(self, location):
        self.loads += 1
        time.sleep(0.05)
        return self.tree


def test_concurrent_readers_build_once(make_config_type):
    Item = make_config_type()
    provider = SlowProvider({"a": {"x": 1}, "b": {"x": 2}})
    registry = Registry(Item, provider=provider)
    registry.sources = ["memory"]

    barrier = threading.Barrier(8)
    results = []

    def reader():
        barrier.wait()
        results.append(registry.find("a"))

    threads = [threading.Thread(target=reader) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert registry._builds == 1
    assert provider.loads == 1
    assert len(results) == 8
    assert all(item is results[0] for item in results)


def test_reload_during_reads_yields_consistent_generations(make_config_type):
    Item = make_config_type()
    Item.configure({"a": {"x": 1}, "b": {"x": 1}})
    errors = []

    def reader():
        for _ in range(50):
            ids = Item.ids()
            objects = Item.all()
            if ids != ["a", "b"] or [obj.id for obj in objects] != ids:
                errors.append((ids, objects))

    def writer():
        for value in range(50):
            Item.configure({"a": {"x": value}})

    threads = [threading.Thread(target=reader) for _ in range(4)]
    threads.append(threading.Thread(target=writer))
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert Item.find("a").x == 49
