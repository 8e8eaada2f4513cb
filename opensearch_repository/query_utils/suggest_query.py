from collections.abc import Mapping
from typing import Any


def build_suggest_query(
    prefix: str,
    field: str = "suggest",
    name: str = "suggestions",
    fuzzy: bool = True,
):
    """
    Build an OpenSearch completion-suggester body for autocomplete.

    The body targets a ``completion`` field holding ``Suggestion`` values
    (``input`` phrases ranked by ``weight``):
    - `prefix` is matched against the start of every input phrase.
    - `skip_duplicates` collapses options with the same text.
    - With `fuzzy`, one edit is tolerated after the first two characters.
    - `_source` is disabled since only the options are read.

    Args:
        prefix: The user-typed query prefix.
        field: Name of the completion field in the index mapping.
        name: Key under which the engine returns the options.
        fuzzy: Whether to tolerate typos in the prefix.

    Returns:
        A dictionary representing the OpenSearch query body.
    """
    prefix = (prefix or "").strip()

    completion: dict[str, Any] = {"field": field, "skip_duplicates": True}
    if fuzzy:
        completion["fuzzy"] = {"fuzziness": 1, "prefix_length": 2}

    return {
        "_source": False,
        "suggest": {
            name: {
                "prefix": prefix,
                "completion": completion,
            }
        },
    }


def extract_suggestions(
    result: Mapping[str, Any], name: str = "suggestions", limit: int = 10
) -> list[str]:
    """
    Return the option texts of a completion-suggester response.

    Options keep the engine's ranking, are de-duplicated case-insensitively
    and capped at `limit`. A response without the named suggestion yields
    an empty list.

    Args:
        result: Decoded response envelope returned by ``suggest``.
        name: Key used when building the query.
        limit: Maximum number of suggestions to return.

    Returns:
        A list of unique suggestion strings.
    """
    entries = (result.get("suggest") or {}).get(name) or []

    seen = set()
    out = []

    for entry in entries:
        for option in entry.get("options", []) or []:
            text = (option.get("text") or "").strip()
            key = text.lower()
            if text and key not in seen:
                seen.add(key)
                out.append(text)
                if len(out) >= limit:
                    return out

    return out
