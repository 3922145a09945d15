"""Interactive prompt helpers built on InquirerPy."""

from __future__ import annotations

import sys

from InquirerPy import inquirer

from .exceptions import UserAbort, ValidationError


def _ensure_tty() -> None:
    if not sys.stdin.isatty():
        raise ValidationError("Interactive confirmation requires a TTY.")


def text_input(message: str, default: str = "") -> str:
    _ensure_tty()
    try:
        return inquirer.text(message=message, default=default).execute().strip()
    except KeyboardInterrupt as exc:
        raise UserAbort() from exc


def confirm(message: str, default: bool = False) -> bool:
    _ensure_tty()
    try:
        return bool(inquirer.confirm(message=message, default=default).execute())
    except KeyboardInterrupt as exc:
        raise UserAbort() from exc


def ask_start_port() -> str:
    return text_input("No existing port assignments found. Enter starting port number (e.g., 9000, 10000, 15000):")
