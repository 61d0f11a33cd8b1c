"""Prompt definitions and helpers for building checklist-style templates."""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field


@dataclass(frozen=True)
class PromptArgument:
    """One argument a prompt accepts."""

    name: str
    description: str
    required: bool = False


@dataclass
class PromptResult:
    """A generated prompt: a short description and one user message."""

    description: str
    text: str


PromptArgs = Mapping[str, str]


@dataclass(frozen=True)
class Prompt:
    """A named prompt template and the function that fills it in."""

    name: str
    description: str
    build: Callable[[PromptArgs], PromptResult]
    arguments: tuple[PromptArgument, ...] = field(default_factory=tuple)


def arg(args: PromptArgs | None, name: str, default: str = "") -> str:
    """Argument value, or ``default`` when it is missing or empty.

    Required arguments use the empty default, so generation never fails on
    missing input.
    """
    if not args:
        return default
    return args.get(name) or default


def checklist(items: Sequence[str]) -> str:
    return "\n".join(f"- [ ] {item}" for item in items)


def section(title: str, *items: str) -> str:
    """A ``###`` heading followed by a checklist."""
    return f"### {title}\n{checklist(items)}"


def join_blocks(*blocks: str) -> str:
    """Join non-empty text blocks with blank lines between them."""
    return "\n\n".join(b for b in blocks if b)
