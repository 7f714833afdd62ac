"""
Command Dispatcher
==================

The read-match-dispatch core of cmdshell.

Role in the System
------------------
A Shell owns a prompt and a fixed table of commands. Each call to
process() performs exactly one cycle:

    Shell writes prompt "cmdshell> "
                  ↓
    Reads one line: "greet  Bob   Smith\\n"
                  ↓
    tokenize() → ["greet", "Bob", "Smith"]
                  ↓
    CommandTable.find("greet") → found!
                  ↓
    Calls greet.invoke(["Bob", "Smith"], table)
                  ↓
    Returns whatever the handler returned

    User types: "   "
                  ↓
    tokenize() → []  → process() returns None, nothing runs

The loop that calls process() over and over lives outside this
module (see demo.py). It decides what to do with each error.

Design Decisions
----------------
- Command names are case-sensitive ("Help" is not "help").
- Tokens are split on runs of whitespace. There is no quoting or
  escaping, so a single argument can never contain a space.
- If two commands share a name the first one in the table wins,
  unless the table was built with unique_names=True, in which case
  the collision is rejected up front.
- A blank line is a no-op, not an error.
- Handler exceptions are never caught, wrapped, or logged here.
  They reach the caller of process() exactly as raised.

Classes
-------
CommandError
    Base of every error raised by this package.
    Subclasses: InputError, EndOfInput, CommandNotFound, ExecutionError.

CommandResult
    Optional structured return value for handlers.

Command
    Frozen binding of name, description and handler.

CommandTable
    Immutable ordered sequence of Commands with first-match lookup.

Shell
    The dispatcher. process() for one interactive cycle,
    execute(line) for a line the caller already has.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, Optional, TextIO, Union


logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "cmdshell> "


# ─── Errors ─────────────────────────────────────────────────────────

class CommandError(Exception):
    """Base class for errors raised while processing a command."""


class InputError(CommandError):
    """The input stream could not produce a line."""


class EndOfInput(InputError):
    """The input stream is closed."""

    def __init__(self, message: str = "End of input"):
        super().__init__(message)


class CommandNotFound(CommandError):
    """No command in the table matches the requested name.

    Attributes
    ----------
    name : str
        The name the user asked for, exactly as typed.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Command not found: {name}")


class ExecutionError(CommandError):
    """Raised by a handler when its command could not be carried out.

    The dispatcher never raises this itself; it only passes it through.
    """


# ─── Results ────────────────────────────────────────────────────────

@dataclass
class CommandResult:
    """Structured output a handler may return.

    The dispatcher hands it back untouched. Driving loops can use
    summary for terminal output and details for anything richer.

    Attributes
    ----------
    command : str
        Name of the command that produced this result.
    summary : str
        Human-readable one-liner.
    details : dict
        Structured data; each command defines its own schema.
    error : str or None
        Set when the command ran but could not do what was asked.
    """
    command: str
    summary: str
    details: dict = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        """Check if this result represents an error."""
        return self.error is not None


# ─── Tokenizer ──────────────────────────────────────────────────────

def tokenize(line: str) -> list[str]:
    """Split a raw input line into whitespace-delimited tokens.

    Runs of whitespace (spaces, tabs, the trailing newline) count as a
    single separator and empty fragments are dropped, so blank input
    gives an empty list.

    >>> tokenize("greet  Bob   Smith\\n")
    ['greet', 'Bob', 'Smith']
    """
    return line.split()


# ─── Commands ───────────────────────────────────────────────────────

Handler = Callable[[list[str], "CommandTable"], Any]


@dataclass(frozen=True)
class Command:
    """One invokable action.

    Attributes
    ----------
    name : str
        What the user types. Matched exactly, case-sensitive.
    description : str
        Short text for help listings. Never read by the dispatcher.
    handler : callable
        Called as handler(arguments, commands). Returns normally on
        success (typically None or a CommandResult) and raises on
        failure.
    """
    name: str
    description: str
    handler: Handler = field(repr=False)

    def invoke(self, arguments: list[str], commands: CommandTable) -> Any:
        """Run the handler with the argument tokens and the full table."""
        return self.handler(arguments, commands)


class CommandTable(Sequence):
    """An ordered, read-only collection of Commands.

    Insertion order is kept so that a help command can list the
    commands the way they were supplied. The table is handed to
    every handler, so a command can see its siblings (and itself).

    Parameters
    ----------
    commands : iterable of Command
        The commands, in display order.
    unique_names : bool
        Reject duplicate names with ValueError instead of letting the
        first one shadow the rest.
    """

    def __init__(self, commands: Iterable[Command] = (), *, unique_names: bool = False):
        commands = tuple(commands)
        seen = set()
        for command in commands:
            if not isinstance(command, Command):
                raise TypeError(f"Expected a Command, got {type(command).__name__}")
            if unique_names and command.name in seen:
                raise ValueError(
                    f"Command name collision: '{command.name}' is already registered"
                )
            seen.add(command.name)
        self._commands = commands

    def __getitem__(self, index):
        return self._commands[index]

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(self._commands)

    def __eq__(self, other) -> bool:
        if isinstance(other, CommandTable):
            return self._commands == other._commands
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._commands)

    def __repr__(self) -> str:
        return f"CommandTable({list(self.names())!r})"

    def names(self) -> list[str]:
        """Command names in table order."""
        return [command.name for command in self._commands]

    def find(self, name: str) -> Command:
        """Return the first command called name.

        Raises
        ------
        CommandNotFound
            If no command has exactly that name.
        """
        for command in self._commands:
            if command.name == name:
                return command
        raise CommandNotFound(name)


# ─── Dispatcher ─────────────────────────────────────────────────────

class Shell:
    """Reads a command line, finds the command and runs it.

    Usage
    -----
        shell = Shell(None, [
            Command("version", "Print the version", version),
            Command("help", "Print this help", show_help),
        ])
        while True:
            try:
                shell.process()
            except CommandError as e:
                print(e, file=sys.stderr)

    Parameters
    ----------
    prompt : str or None
        Written before every read. None means DEFAULT_PROMPT.
    commands : CommandTable or iterable of Command
        The commands this shell knows. Fixed for its lifetime.
    stdin, stdout : file-like, optional
        Input needs readline(); output needs write() and flush().
        Default to sys.stdin and sys.stdout at call time.
    """

    def __init__(
        self,
        prompt: Optional[str] = None,
        commands: Union[CommandTable, Iterable[Command]] = (),
        *,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ):
        self._prompt = DEFAULT_PROMPT if prompt is None else prompt
        if not isinstance(commands, CommandTable):
            commands = CommandTable(commands)
        self._commands = commands
        self._stdin = stdin
        self._stdout = stdout

    @property
    def prompt(self) -> str:
        return self._prompt

    @property
    def commands(self) -> CommandTable:
        return self._commands

    def process(self) -> Any:
        """Run one prompt-read-dispatch cycle.

        Returns
        -------
        object
            Whatever the invoked handler returned, or None for a blank
            line.

        Raises
        ------
        EndOfInput
            The input stream is closed.
        InputError
            Reading from the input stream failed.
        CommandNotFound
            The first token names no known command.
        Exception
            Anything the handler raised, unchanged.
        """
        line = self._read_line()
        return self.execute(line)

    def execute(self, line: str) -> Any:
        """Dispatch a line that has already been read.

        Same contract as process(), minus the prompt and the read.
        """
        tokens = tokenize(line)
        if not tokens:
            logger.debug("Blank input, nothing to dispatch")
            return None

        name, arguments = tokens[0], tokens[1:]
        try:
            command = self._commands.find(name)
        except CommandNotFound:
            logger.debug(f"No command named '{name}'")
            raise

        logger.debug(f"Dispatching '{name}' with {len(arguments)} argument(s)")
        return command.invoke(arguments, self._commands)

    def _read_line(self) -> str:
        """Write the prompt and read one line from the input stream."""
        stdout = self._stdout if self._stdout is not None else sys.stdout
        stdin = self._stdin if self._stdin is not None else sys.stdin

        try:
            stdout.write(self._prompt)
            stdout.flush()
            line = stdin.readline()
        except (OSError, ValueError) as e:
            # ValueError covers closed streams and undecodable input
            raise InputError(f"Failed to read user input: {e}") from e

        if not line:
            logger.info("Input stream closed")
            raise EndOfInput()
        return line
