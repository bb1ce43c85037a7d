from barstatus import memory, network, system
from barstatus.config import UNKNOWN_STR, Arg, default_args


def test_value_uses_unknown_when_component_has_nothing():
    entry = Arg(lambda: None, "X: %s |")
    assert entry.value("n/a") == "X: n/a |"


def test_value_passes_argument():
    entry = Arg(lambda arg: arg.upper(), "[%s]", "abc")
    assert entry.value(UNKNOWN_STR) == "[ABC]"


def test_value_without_argument_calls_with_nothing():
    calls = []

    def component(*args):
        calls.append(args)
        return "v"

    assert Arg(component, "%s").value() == "v"
    assert calls == [()]


def test_lone_percent_is_kept():
    assert Arg(lambda: "42", "MEM: %s% | ").value() == "MEM: 42% | "


def test_double_percent_collapses():
    assert Arg(lambda: "7", "%s%%").value() == "7%"


def test_default_unknown_string():
    assert Arg(lambda: None, "%s").value() == UNKNOWN_STR


def test_default_args_order_and_functions():
    entries = default_args()
    assert entries[0].func is system.uptime
    assert entries[0].argument is None
    assert entries[3].func is memory.ram_perc
    assert entries[5].func is network.ipv4
    assert entries[5].argument == "wwp0s20f0u3"
    assert entries[-1].func is system.datetime
    assert entries[-1].argument == "%B %d, %I:%M-%p"


def test_default_args_commands():
    commands = [e.argument for e in default_args() if e.func is system.run_command]
    assert commands == ["sb-cpuusage", "sb-cputemp", "sb-volume", "sb-battery"]