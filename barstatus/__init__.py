"""Status line monitor for window manager bars, with a client for its IPC socket."""

__version__ = "1.1.0"