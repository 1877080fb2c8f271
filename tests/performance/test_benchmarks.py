"""Performance benchmarks for ipprops."""

import random
import time

import pytest

from ipprops import FlagGroupProperty, StringProperty, Table, TagProperty

NUM_RANGES = 20000


def build_source(n: int) -> str:
    lines = []
    for i in range(n):
        net = f"10.{i // 256 % 256}.{i % 256}.0/24"
        lines.append(f'{net},owner{i % 50},colo{i % 7},prod;internal,"net {i}, sample"')
    return "\n".join(lines) + "\n"


@pytest.fixture
def benchmark_table():
    """Create a loaded table for benchmarks."""
    t = Table()
    t.add_column(TagProperty("owner"))
    t.add_column(TagProperty("colo"))
    t.add_column(FlagGroupProperty("flags", ["prod", "dmz", "internal"]))
    t.add_column(StringProperty("Description"))
    t.parse(build_source(NUM_RANGES))
    return t


@pytest.mark.performance
def test_parse_performance():
    """Benchmark table construction."""
    src = build_source(NUM_RANGES)
    t = Table().add_column(TagProperty("owner")).add_column(TagProperty("colo"))
    t.add_column(FlagGroupProperty("flags", ["prod", "dmz", "internal"]))
    t.add_column(StringProperty("Description"))

    start_time = time.time()
    t.parse(src)
    duration = time.time() - start_time

    lines_per_second = NUM_RANGES / duration if duration > 0 else float("inf")
    print(f"\nParse: {lines_per_second:.0f} lines/sec")

    assert t.size() == NUM_RANGES
    assert lines_per_second > 2000


@pytest.mark.performance
def test_lookup_performance(benchmark_table):
    """Benchmark random point lookups."""
    addrs = [f"10.{random.randrange(78)}.{random.randrange(256)}.{random.randrange(256)}" for _ in range(5000)]

    start_time = time.time()
    for addr in addrs:
        assert benchmark_table.find(addr) is not None
    duration = time.time() - start_time

    lookups_per_second = len(addrs) / duration if duration > 0 else float("inf")
    print(f"\nRandom lookups: {lookups_per_second:.0f} ops/sec")

    assert lookups_per_second > 5000
