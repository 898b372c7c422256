from __future__ import annotations

import re
from typing import Any, Callable, Dict, Sequence


_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def _parse_choice(answer: str) -> int:
    """Zero-based index for a 1-based answer; -1 when it does not start with a number.

    Only the leading integer counts, so ``"2abc"`` and ``"2.5"`` both pick 2.
    """
    match = _LEADING_INT_RE.match(answer or "")
    if not match:
        return -1
    return int(match.group(1)) - 1


def get_user_selection(
    message: str,
    items: Sequence[Dict[str, Any]],
    *,
    input_fn: Callable[[str], str] = input,
    print_fn: Callable[[str], None] = print,
) -> Dict[str, Any]:
    """
    Ask the operator to pick one entity from a numbered list.

    Every entity is shown as ``"<n>. <name> (ID: <id>)"``. Invalid answers
    print an error and show the list and prompt again until a valid number
    is entered.

    :param message: The prompt shown when reading the answer.
    :param items: The entities to choose from, each with ``name`` and ``_id``.
    :param input_fn: Reads one line of input given a prompt.
    :param print_fn: Writes one line of output.
    :return: The selected entity.
    :raises ValueError: if ``items`` is empty.
    """
    if not items:
        raise ValueError("Cannot select from an empty list.")

    while True:
        for index, item in enumerate(items, start=1):
            print_fn(f"{index}. {item.get('name')} (ID: {item.get('_id')})")
        choice = _parse_choice(input_fn(message))
        if 0 <= choice < len(items):
            return items[choice]
        print_fn("Invalid selection. Please try again.")
