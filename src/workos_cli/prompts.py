"""Where commands get parameters the user did not pass on the command line.

Commands ask a ParameterSource for missing values instead of talking to the
terminal directly, so the same command runs interactively or from
pre-supplied answers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Iterable, Optional, Sequence

from rich.prompt import Confirm, IntPrompt, Prompt
from rich.text import Text

from .exceptions import InvalidArgumentError, WorkOSCLIError

Validator = Callable[[str], object]
Option = tuple[str, str]


class ParameterSource(ABC):
    """Supplies values for omitted positional arguments."""

    @abstractmethod
    def text(
        self,
        title: str,
        validate: Optional[Validator] = None,
        secret: bool = False,
    ) -> str:
        raise NotImplementedError

    @abstractmethod
    def select(self, title: str, options: Sequence[Option]) -> str:
        """Return the value of one of ``(label, value)`` options."""
        raise NotImplementedError

    @abstractmethod
    def confirm(self, title: str, default: bool = False) -> bool:
        raise NotImplementedError


class InteractiveParameterSource(ParameterSource):
    """Prompts on the terminal, asking again until a value validates."""

    def __init__(self, console=None):
        from .printer import console as default_console

        self.console = console or default_console

    def text(
        self,
        title: str,
        validate: Optional[Validator] = None,
        secret: bool = False,
    ) -> str:
        while True:
            value = Prompt.ask(title, console=self.console, password=secret, default="", show_default=False)
            if validate is None:
                return value
            try:
                validate(value)
            except WorkOSCLIError as e:
                self.console.print(Text(e.message, style="red"))
                continue
            return value

    def select(self, title: str, options: Sequence[Option]) -> str:
        if not options:
            raise InvalidArgumentError(f"nothing to select for: {title}")
        self.console.print(title)
        for i, (label, _) in enumerate(options, start=1):
            self.console.print(f"  {i}) {label}", markup=False)
        choices = [str(i) for i in range(1, len(options) + 1)]
        index = IntPrompt.ask("Choice", console=self.console, choices=choices, show_choices=False)
        return options[index - 1][1]

    def confirm(self, title: str, default: bool = False) -> bool:
        return Confirm.ask(title, console=self.console, default=default)


class ArgumentParameterSource(ParameterSource):
    """Answers prompts from a fixed sequence of pre-supplied values.

    ``select`` accepts either an option's value or its label.
    """

    def __init__(self, answers: Iterable[str] = ()):
        self._answers = list(answers)

    def _next(self, title: str) -> str:
        if not self._answers:
            raise InvalidArgumentError(f"missing value for: {title}")
        return self._answers.pop(0)

    def text(
        self,
        title: str,
        validate: Optional[Validator] = None,
        secret: bool = False,
    ) -> str:
        value = self._next(title)
        if validate is not None:
            validate(value)
        return value

    def select(self, title: str, options: Sequence[Option]) -> str:
        value = self._next(title)
        for label, option_value in options:
            if value in (option_value, label):
                return option_value
        raise InvalidArgumentError(f"invalid choice for {title}: {value}")

    def confirm(self, title: str, default: bool = False) -> bool:
        if not self._answers:
            return default
        return self._next(title).strip().lower() in ("y", "yes", "true", "1")


__all__ = [
    "ParameterSource",
    "InteractiveParameterSource",
    "ArgumentParameterSource",
]
