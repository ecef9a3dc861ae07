"""
Command-line interface for the application worker.
"""

from appworker.cli.output import BufferedOutput, ConsoleOutput, OutputWriter

__all__ = ["BufferedOutput", "ConsoleOutput", "OutputWriter"]
