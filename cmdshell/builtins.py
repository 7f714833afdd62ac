"""
Sample Commands
===============

A handful of ready-made commands for applications that embed the
Shell and for running cmdshell on its own:

    version   Print the cmdshell version
    help      List every command with its description
    echo      Print the arguments back
    quit      Ask the driving loop to stop

None of these are needed by the dispatcher. They are ordinary
handlers, written the same way an embedding application would
write its own:

    def greet(arguments, commands):
        print("Hello, " + " ".join(arguments))

    Command("greet", "Say hello", greet)

Output goes to the stream passed to default_commands() so tests
and embedding applications can capture it.
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from cmdshell.dispatcher import Command, CommandError, CommandTable


class ShellExit(CommandError):
    """Raised by the quit command. The driving loop stops on it."""

    def __init__(self, message: str = "Goodbye"):
        super().__init__(message)


def _stream(out: Optional[TextIO]) -> TextIO:
    return out if out is not None else sys.stdout


def make_version(out: Optional[TextIO] = None):
    def version(arguments: list[str], commands: CommandTable) -> None:
        from cmdshell import __version__
        print(f"v{__version__}", file=_stream(out))
    return version


def make_help(out: Optional[TextIO] = None):
    """Build a handler that lists the table it is given, in order.

    The listing comes from the commands argument rather than a table
    captured at build time, so it always matches the running shell.
    """
    def show_help(arguments: list[str], commands: CommandTable) -> None:
        stream = _stream(out)
        print("HELP", file=stream)
        for command in commands:
            print(f"{command.name}: {command.description}", file=stream)
    return show_help


def make_echo(out: Optional[TextIO] = None):
    def echo(arguments: list[str], commands: CommandTable) -> None:
        print(" ".join(arguments), file=_stream(out))
    return echo


def quit_shell(arguments: list[str], commands: CommandTable) -> None:
    raise ShellExit()


def default_commands(out: Optional[TextIO] = None) -> list[Command]:
    """The sample commands, in help-listing order."""
    return [
        Command("version", "Returns the version of the software", make_version(out)),
        Command("help", "Prints out this help", make_help(out)),
        Command("echo", "Prints its arguments back", make_echo(out)),
        Command("quit", "Leaves the shell", quit_shell),
    ]
