"""Switchyard CLI — Typer-based command-line interface.

Provides the ``switchyard`` command.  All output uses Rich for formatted
terminal display.
"""
