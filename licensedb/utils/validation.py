"""Readable summaries of pydantic validation errors."""

from typing import Any, Iterable, Mapping


def describe_validation_errors(errors: Iterable[Mapping[str, Any]], skip_loc: int = 0) -> str:
    """Flatten pydantic error dicts into ``loc: message`` pairs.

    Args:
        errors: Output of ``ValidationError.errors()``
        skip_loc: Leading location segments to drop, e.g. 1 for FastAPI's
            ``body``/``query`` prefix
    """
    parts = []
    for item in errors:
        loc = ".".join(str(p) for p in tuple(item.get("loc", ()))[skip_loc:])
        parts.append(f"{loc}: {item['msg']}" if loc else item["msg"])
    return "; ".join(parts)
