# barstatus

A small status monitor that assembles one line of system information
(uptime, memory, swap, IP address, date and time and more) every 150 ms
and either prints it or sets it as the name of the X root window, where
a window manager's bar can show it. It also ships a client for the
window manager's IPC socket.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running the status monitor

```
barstatus           # set the X root window name every interval
barstatus -s        # print a new status line every interval instead
barstatus -1        # print one status line and exit
barstatus -v        # write the version to standard error and exit
```

Flags may be combined, as in `-s1`. Without `-s` or `-1`, `barstatus`
needs a `DISPLAY` and the `xsetroot` program on the `PATH`; it sets the
root window name with `xsetroot -name` and clears it on exit.

Press Ctrl-C or send `SIGTERM` to stop. `SIGUSR1` makes the next update
happen at once.

## The status line

The entries of the line and their formats come from
`barstatus.config.default_args()`: uptime, the output of the commands
`sb-cpuusage`, `sb-cputemp`, `sb-volume` and `sb-battery`, memory and
swap usage in percent, the IPv4 address of interface `wwp0s20f0u3`, and
the date and time. Each item is an `Arg`; `Arg.value(unknown)` returns
its formatted text, using `unknown` when the component gives no value.
If a value cannot be read (for instance a command that is not
installed), the entry shows `n/a`.

To build a line yourself, pass entries to `barstatus.cli.render_status`.
The line is cut off so that it stays shorter than `maxlen`:

```python
from barstatus.cli import render_status
from barstatus.config import Arg, default_args
from barstatus import system

print(render_status(default_args(), "n/a", 2048))
print(render_status([Arg(system.hostname, "host: %s")]))
```

## Components

The components can also be called directly. Each one returns a string, or
`None` when the value is not available; a reason is written to standard
error where one is known.

- `barstatus.system`: `cat`, `datetime`, `disk_free`, `disk_perc`,
  `disk_total`, `disk_used`, `entropy`, `hostname`, `kernel_release`,
  `load_avg`, `num_files`, `run_command`, `uptime`, `gid`, `uid`,
  `username`, `temp`
- `barstatus.memory`: `ram_free`, `ram_perc`, `ram_total`, `ram_used`,
  `swap_free`, `swap_perc`, `swap_total`, `swap_used` (each reads
  `/proc/meminfo` or a path you pass), and `parse_meminfo`
- `barstatus.power`: `battery_perc`, `battery_state`, `battery_remaining`,
  `cpu_freq`, `cpu_perc`, and `CpuMeter`
- `barstatus.network`: `ipv4`, `ipv6`, `up`, `netspeed_rx`, `netspeed_tx`,
  `wifi_essid`, `wifi_perc`, `rssi_to_perc`, `find_attr`, and
  `NetSpeedMeter`

`cpu_perc`, `CpuMeter.perc`, `netspeed_rx`, `netspeed_tx` and
`NetSpeedMeter.read` measure change between calls, so they return `None`
the first time.

Sizes are formatted with `barstatus.util.fmt_human`, which uses base 1000
or 1024 and raises `ValueError` for any other base:

```python
>>> from barstatus.util import fmt_human
>>> fmt_human(1536, 1024)
'1.5 Ki'
```

## Talking to the window manager

`barstatus-msg` sends requests over the window manager's IPC socket at
`/tmp/dwm.sock` and prints the JSON replies.

```
barstatus-msg get_monitors
barstatus-msg get_tags
barstatus-msg get_layouts
barstatus-msg get_dwm_client 12345
barstatus-msg run_command view 2
barstatus-msg subscribe tag_change_event layout_change_event
barstatus-msg --ignore-reply run_command togglebar
barstatus-msg help
```

`run_command` sends arguments that look like integers or decimals as
numbers and everything else as strings. `subscribe` keeps listening and
prints each event as it arrives. `--ignore-reply` stops the replies to
`run_command` and `subscribe` from being printed. The exit status is 1
for a usage error or when the socket cannot be reached, and 2 when the
connection is lost.

From Python, `barstatus.ipc.IPCConnection` sends and receives framed
messages (`send`, `receive`, `close`, and use as a context manager);
`pack_message`, `unpack_header` and `build_run_command` build and read
the frames and payloads, and `IPCMessageType` lists the message kinds.

## What it does not do

- The entries of the status line are fixed in `barstatus.config`; there
  is no configuration file.
- There are no components for keyboard indicators, keyboard layout or
  sound volume.
- Wi-Fi values come from the Linux nl80211 interface only; the memory,
  battery, CPU and traffic components read Linux `/proc` and `/sys` files.
- `barstatus-msg` is only a client: the package has no window manager
  and no IPC server.