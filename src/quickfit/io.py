"""
Input/Output operations for the Quick Fit simulation.

This module handles parsing sizes typed by the user, reading request scripts
(CSV) and allocator configuration (JSON), and rendering the category table.
"""

import csv
import json
from typing import List, Sequence, Tuple, Union

from .errors import InvalidSizeError
from .models import AllocatorConfig, CategoryStatus, DEFAULT_INITIAL_FREE_COUNT, OperationKind, Request


OPERATION_ALIASES = {
    'allocate': OperationKind.ALLOCATE,
    'alloc': OperationKind.ALLOCATE,
    'a': OperationKind.ALLOCATE,
    'deallocate': OperationKind.DEALLOCATE,
    'free': OperationKind.DEALLOCATE,
    'd': OperationKind.DEALLOCATE,
    'reset': OperationKind.RESET,
    'r': OperationKind.RESET,
}


def parse_size(text: str, what: str = "process size") -> int:
    """
    Parse a size typed by the user.

    Args:
        text: Raw text from the user
        what: Name of the value, used in the error message

    Returns:
        int: The size, always positive

    Raises:
        InvalidSizeError: If the text is not a positive integer
    """
    try:
        value = int(str(text).strip())
    except ValueError:
        raise InvalidSizeError(f"Please enter a valid {what}.")

    if value <= 0:
        raise InvalidSizeError(f"Please enter a valid {what}.")

    return value


def parse_categories(text: str) -> Tuple[int, ...]:
    """
    Parse a comma separated list of block sizes, e.g. "50,100,200".

    Positivity and uniqueness are checked by the allocator itself.

    Raises:
        ValueError: If an item is not an integer
    """
    items = [item.strip() for item in text.split(',') if item.strip()]
    try:
        return tuple(int(item) for item in items)
    except ValueError:
        raise ValueError(f"Invalid category list: {text!r}")


def parse_operation(op: str) -> OperationKind:
    try:
        return OPERATION_ALIASES[op.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown operation: {op!r}")


def read_requests_csv(path: str) -> List[Request]:
    """
    Read a request script from a CSV file.

    Expected CSV format with header: op,size
    `op` is allocate, deallocate or reset. `size` may be empty for reset.
    Rows keep their file order.

    Args:
        path: Path to the CSV file

    Returns:
        List[Request]: Requests in file order
    """
    requests = []

    try:
        with open(path, 'r', newline='', encoding='utf-8') as csvfile:
            reader = csv.DictReader(csvfile)

            for line_no, row in enumerate(reader, start=2):
                kind = parse_operation(row['op'])

                if kind is OperationKind.RESET:
                    requests.append(Request(kind))
                    continue

                raw_size = (row['size'] or '').strip()
                try:
                    size = parse_size(raw_size, what="size")
                except InvalidSizeError:
                    raise ValueError(f"line {line_no}: invalid size {raw_size!r}")
                requests.append(Request(kind, size))

    except FileNotFoundError:
        raise FileNotFoundError(f"CSV file not found: {path}")
    except KeyError as e:
        raise ValueError(f"Missing required column in CSV: {e}")
    except ValueError as e:
        raise ValueError(f"Invalid data in CSV file: {e}")

    return requests


def read_config_json(path: str) -> AllocatorConfig:
    """
    Read the allocator configuration from a JSON file.

    Expected format: {"categories": [50, 100], "initial_free_count": 5}
    `initial_free_count` is optional.
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Config file not found: {path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}")

    if not isinstance(data, dict) or 'categories' not in data:
        raise ValueError("Missing required key in config: 'categories'")

    if not isinstance(data['categories'], list):
        raise ValueError("'categories' must be a list of integers")

    return AllocatorConfig(
        categories=tuple(data['categories']),
        initial_free_count=data.get('initial_free_count', DEFAULT_INITIAL_FREE_COUNT),
    )


def pretty_print_status(
    status: Sequence[CategoryStatus],
    structured: bool = False,
    show_header: bool = True
) -> Union[str, List[dict]]:
    """
    Generate the category table shown after every operation.

    Args:
        status: Rows returned by QuickFitAllocator.status()
        structured: Return a list of dicts instead of text
        show_header: Include the column titles

    Returns:
        The formatted table, or its rows when structured is True
    """
    if structured:
        return [entry.to_row() for entry in status]

    lines = []
    if show_header:
        lines.append("Block Size (KB)  Free Blocks  Status")
        lines.append("---------------  -----------  ---------")

    for entry in status:
        status_str = "Free" if entry.is_free else "Allocated"
        lines.append(f"{entry.size:15}  {entry.free_count:11}  {status_str}")

    return "\n".join(lines)
