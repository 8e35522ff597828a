"""Environment parsing shared by the CLI adapters."""

import os


def read_int(name: str, logger) -> int | None:
    """Parse an integer environment variable.

    Args:
        name: Environment variable to read.
        logger: Logger used for warnings.

    Returns:
        int | None: Parsed value, or None when unset or invalid.
    """
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid integer '{raw}' for {name}.")
        return None


def read_int_list(name: str, logger) -> list[int] | None:
    """Parse a comma separated list of integers.

    Returns:
        list[int] | None: Parsed values, or None when unset or invalid.
    """
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    values = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            values.append(int(part))
        except ValueError:
            logger.warning(f"Invalid integer '{part}' in {name}.")
            return None
    return values


def is_set(name: str) -> bool:
    """Return True when the variable holds a non-blank value."""
    return bool(os.getenv(name, "").strip())


def read_flag(name: str) -> bool:
    """Return True for 1/true/yes/on values."""
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


__all__ = ["read_int", "read_int_list", "read_flag", "is_set"]
