import pytest

from barstatus import memory
from barstatus.util import fmt_human

SAMPLE = """MemTotal:       16000000 kB
MemFree:         4000000 kB
MemAvailable:    8000000 kB
Buffers:         1000000 kB
Cached:          3000000 kB
SwapCached:          100 kB
Active:          5000000 kB
SwapTotal:       2000000 kB
SwapFree:        1000000 kB
HugePages_Total:       0
"""


@pytest.fixture
def meminfo(tmp_path):
    path = tmp_path / "meminfo"
    path.write_text(SAMPLE)
    return str(path)


def test_parse_meminfo_reads_fields():
    info = memory.parse_meminfo(SAMPLE)
    assert info["MemTotal"] == 16000000
    assert info["SwapCached"] == 100
    assert info["HugePages_Total"] == 0
    assert len(info) == 10


def test_parse_meminfo_empty():
    assert memory.parse_meminfo("") == {}


def test_ram_total(meminfo):
    assert memory.ram_total(meminfo) == fmt_human(16000000 * 1024, 1024)


def test_ram_free_uses_available(meminfo):
    assert memory.ram_free(meminfo) == fmt_human(8000000 * 1024, 1024)


def test_ram_used(meminfo):
    expected = fmt_human((16000000 - 4000000 - 1000000 - 3000000) * 1024, 1024)
    assert memory.ram_used(meminfo) == expected


def test_ram_perc(meminfo):
    assert memory.ram_perc(meminfo) == "50"


def test_ram_perc_zero_total(tmp_path):
    path = tmp_path / "meminfo"
    path.write_text(SAMPLE.replace("16000000", "0"))
    assert memory.ram_perc(str(path)) is None


def test_swap_total_and_free(meminfo):
    assert memory.swap_total(meminfo) == fmt_human(2000000 * 1024, 1024)
    assert memory.swap_free(meminfo) == fmt_human(1000000 * 1024, 1024)


def test_swap_used(meminfo):
    expected = fmt_human((2000000 - 1000000 - 100) * 1024, 1024)
    assert memory.swap_used(meminfo) == expected


def test_swap_perc(meminfo):
    assert memory.swap_perc(meminfo) == "49"


def test_swap_perc_zero_total(tmp_path):
    path = tmp_path / "meminfo"
    path.write_text("SwapCached: 0 kB\nSwapTotal: 0 kB\nSwapFree: 0 kB\n")
    assert memory.swap_perc(str(path)) is None


@pytest.mark.parametrize(
    "func",
    [
        memory.ram_free,
        memory.ram_perc,
        memory.ram_total,
        memory.ram_used,
        memory.swap_free,
        memory.swap_perc,
        memory.swap_total,
        memory.swap_used,
    ],
)
def test_missing_file(tmp_path, func):
    assert func(str(tmp_path / "absent")) is None


def test_missing_field(tmp_path):
    path = tmp_path / "meminfo"
    path.write_text("MemTotal: 100 kB\n")
    assert memory.ram_used(str(path)) is None
    assert memory.swap_total(str(path)) is None