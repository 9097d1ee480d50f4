"""
Command line interface for procinfra.

Includes output abstractions so commands can be tested without capturing
stdout.
"""

from procinfra.cli.output import BufferedOutput, ConsoleOutput

__all__ = [
    "ConsoleOutput",
    "BufferedOutput",
]
