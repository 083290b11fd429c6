"""Reading and writing the YAML plan file users edit."""

import json
from pathlib import Path
from typing import Any, Iterable, List, Sequence, Tuple

import yaml
from pydantic import ValidationError
from yaml.reader import Reader

from git_rescribe.exceptions import PlanValidationError
from git_rescribe.models import CommitDescriptor, RescribeFile, Signature

BLOCK_INDENT = " " * 6

# YAML reads these as line breaks even inside quoted scalars
YAML_LINE_BREAKS = "\x85\u2028\u2029"


def _unsafe(char: str) -> bool:
    return char in YAML_LINE_BREAKS or Reader.NON_PRINTABLE.match(char) is not None


def _quote(value: str) -> str:
    # JSON strings are valid YAML double-quoted scalars once every character
    # YAML cannot print verbatim is escaped
    quoted = json.dumps(value, ensure_ascii=False)
    return "".join(f"\\u{ord(c):04x}" if _unsafe(c) else c for c in quoted)


def _needs_quoting(message: str) -> bool:
    return any(c not in "\t\n" and (ord(c) < 32 or _unsafe(c)) for c in message)


def _message_lines(message: str) -> List[str]:
    if not message:
        return [f"    message: {_quote(message)}"]
    if _needs_quoting(message):
        return [f"    message: {_quote(message)}"]

    lines = message.split("\n")
    # Leading whitespace on the first line would be taken as block indentation
    explicit_indent = not lines[0].strip() or lines[0][0].isspace()
    header = "    message: |2-" if explicit_indent else "    message: |-"
    body = [f"{BLOCK_INDENT}{line}" if line else "" for line in lines]
    return [header] + body


def _signature_lines(key: str, signature: Signature) -> List[str]:
    return [
        f"    {key}:",
        f"      date: {_quote(signature.date)}",
        f"      identity: {_quote(signature.identity)}",
    ]


def format_plan(descriptors: Sequence[CommitDescriptor]) -> str:
    """Render descriptors in the plan file layout.

    Each commit is one block separated by a blank line, with the message as
    a literal block and parents as an inline list.
    """
    if not descriptors:
        return "commits: []\n"

    lines = ["commits:"]
    for i, descriptor in enumerate(descriptors):
        if i > 0:
            lines.append("")
        block = _signature_lines("author", descriptor.author)
        block[0] = "  - author:"
        lines.extend(block)
        lines.extend(_signature_lines("committer", descriptor.committer))
        lines.append(f"    content: {_quote(str(descriptor.content))}")
        lines.extend(_message_lines(descriptor.message))
        parents = ", ".join(_quote(str(p)) for p in descriptor.parents)
        lines.append(f"    parents: [{parents}]")

    return "\n".join(lines) + "\n"


def _location(loc: Tuple[Any, ...]) -> str:
    parts: List[str] = []
    rest: Iterable[Any] = loc
    if len(loc) >= 2 and loc[0] == "commits" and isinstance(loc[1], int):
        parts.append(f"commit #{loc[1] + 1}")
        rest = loc[2:]
    path = ""
    for part in rest:
        path += f"[{part}]" if isinstance(part, int) else (f".{part}" if path else str(part))
    if path:
        parts.append(path)
    return " ".join(parts) or "plan"


def parse_plan(text: str) -> List[CommitDescriptor]:
    """Parse and fully validate plan file text.

    Raises:
        PlanValidationError: YAML syntax errors or any schema violation. All
            schema errors are collected before raising.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise PlanValidationError([f"YAML syntax error: {e}"]) from e

    if not isinstance(data, dict):
        raise PlanValidationError(["plan must be a mapping with a 'commits' list"])

    try:
        plan = RescribeFile.model_validate(data)
    except ValidationError as e:
        raise PlanValidationError(
            [f"{_location(error['loc'])}: {error['msg']}" for error in e.errors()]
        ) from e
    return plan.commits


def load_plan(path: Path) -> List[CommitDescriptor]:
    """Read and validate a plan file."""
    return parse_plan(Path(path).read_text(encoding="utf-8"))


def write_plan(path: Path, descriptors: Sequence[CommitDescriptor]) -> None:
    Path(path).write_text(format_plan(descriptors), encoding="utf-8")
