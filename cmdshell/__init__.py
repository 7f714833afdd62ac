"""
cmdshell
========

A minimalistic, embeddable command shell. The application supplies a
list of named commands; the Shell prompts, reads one line, picks the
command named by the first word and hands it the rest.

Architecture Overview
---------------------

    ┌─────────────────┐     ┌──────────────┐     ┌──────────────────────┐
    │  Driving loop    │────►│  Shell       │────►│  Command handler     │
    │  (demo.run or    │     │  .process()  │     │  handler(args, table)│
    │   your own)      │◄────│              │◄────│                      │
    └─────────────────┘     └──────┬───────┘     └──────────────────────┘
                                   │
                              ┌────▼────────┐
                              │ CommandTable │  fixed at construction,
                              │ (ordered)    │  passed to every handler
                              └──────────────┘

process() does one cycle and returns (or raises). It never loops,
never prints errors and never exits. Deciding what an error means
for the session is the driving loop's job.

Example
-------

    from cmdshell import Command, CommandError, Shell

    def version(arguments, commands):
        print("v0.1.0")

    def show_help(arguments, commands):
        for command in commands:
            print(f"{command.name}: {command.description}")

    shell = Shell(None, [
        Command("version", "Returns the version of the software", version),
        Command("help", "Prints out this help", show_help),
    ])

    while True:
        try:
            shell.process()
        except CommandError as e:
            print(e)

    # cmdshell> version
    # v0.1.0

Errors
------
    CommandError          base class
    ├── InputError        the input stream failed
    │   └── EndOfInput    the input stream is closed
    ├── CommandNotFound   unknown command name (.name)
    └── ExecutionError    for handlers that want a package error type

Anything a handler raises reaches the caller of process() as is.

Module Structure
----------------
    cmdshell/
    ├── __init__.py          ← This file.
    ├── dispatcher.py        ← tokenize, Command, CommandTable, Shell, errors.
    ├── builtins.py          ← Sample commands: version, help, echo, quit.
    ├── config_manager.py    ← YAML configuration, CLI parsing, logging setup.
    └── demo.py              ← The driving loop and the cmdshell entry point.

Dependencies
------------
PyYAML for configuration files. The dispatcher itself is standard
library only.
"""

__version__ = "0.1.0"

from cmdshell.dispatcher import (
    DEFAULT_PROMPT,
    Command,
    CommandError,
    CommandNotFound,
    CommandResult,
    CommandTable,
    EndOfInput,
    ExecutionError,
    InputError,
    Shell,
    tokenize,
)

__all__ = [
    'DEFAULT_PROMPT',
    'Command',
    'CommandError',
    'CommandNotFound',
    'CommandResult',
    'CommandTable',
    'EndOfInput',
    'ExecutionError',
    'InputError',
    'Shell',
    'tokenize',
]
