#!/usr/bin/env python3
"""
cmdshell Interactive Demo

The driving loop around Shell.process(). Try:

    help
    version
    echo hello   world
    nonsense
    quit

Ctrl-D (end of input) also leaves the loop.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

from cmdshell.builtins import ShellExit, default_commands
from cmdshell.config_manager import ConfigurationError, configure_logging, setup_configuration
from cmdshell.dispatcher import CommandError, CommandTable, EndOfInput, InputError, Shell


logger = logging.getLogger(__name__)


def run(shell: Shell, *, stop_on_error: bool = False, err: Optional[TextIO] = None) -> int:
    """Call shell.process() until the input ends or a command asks to quit.

    Errors are reported on err (default sys.stderr). With stop_on_error
    the first one ends the loop.

    Returns
    -------
    int
        Process exit status: 0 on a clean exit, 1 when the input stream fails or,
        with stop_on_error, after any error; 130 on Ctrl-C.
    """
    err = err if err is not None else sys.stderr

    while True:
        try:
            result = shell.process()
        except (EndOfInput, ShellExit):
            return 0
        except InputError as e:
            # The stream is unusable; retrying would only fail again
            print(e, file=err)
            return 1
        except KeyboardInterrupt:
            print(file=err)
            return 130
        except CommandError as e:
            print(e, file=err)
            if stop_on_error:
                return 1
            continue
        except Exception as e:
            # Handler bug; report it and keep the session alive
            logger.debug("Command failed", exc_info=True)
            print(f"Error while executing command: {e}", file=err)
            if stop_on_error:
                return 1
            continue

        if result is not None and getattr(result, 'is_error', False):
            print(result.error, file=err)
            if stop_on_error:
                return 1
        elif result is not None and getattr(result, 'summary', None):
            print(result.summary)


def main(argv=None) -> int:
    try:
        config, should_exit, manager = setup_configuration(argv)
    except ConfigurationError as e:
        print(e, file=sys.stderr)
        return 2

    if should_exit:
        return 0 if config is None else 2

    configure_logging(config.console)

    try:
        table = CommandTable(default_commands(), unique_names=config.shell.unique_names)
    except ValueError as e:
        print(e, file=sys.stderr)
        return 2

    shell = Shell(config.shell.prompt, table)
    logger.debug(f"Starting shell with commands: {', '.join(table.names())}")
    return run(shell, stop_on_error=config.shell.stop_on_error)


if __name__ == "__main__":
    sys.exit(main())
