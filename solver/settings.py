import configparser
import math
from pathlib import Path

from solver.state_graph import SearchLimits, SearchPolicy

SECTION = "search"

DEFAULT_SETTINGS = {
    "max_nodes": "2000000",
    "max_seconds": "60",
    "max_frontier": "5000000",
    "limit_empty_destinations": "true",
    "skip_lone_card_to_empty": "true",
    "collapse_cascade_permutations": "false",
}

_BOOL_KEYS = ("limit_empty_destinations", "skip_lone_card_to_empty", "collapse_cascade_permutations")
_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def _sanitize_limit(raw, default, cast):
    """Non-positive means unbounded; unparsable or non-finite falls back to the default."""
    text = str(raw).strip().lower()
    if text in ("", "none", "unlimited"):
        return "none"
    try:
        value = cast(text)
    except ValueError:
        return default
    if not math.isfinite(value):
        return default
    if value <= 0:
        return "none"
    return text


def _sanitize(settings):
    data = dict(DEFAULT_SETTINGS)
    data.update({k: v for k, v in settings.items() if k in DEFAULT_SETTINGS})

    data["max_nodes"] = _sanitize_limit(data["max_nodes"], DEFAULT_SETTINGS["max_nodes"], int)
    data["max_frontier"] = _sanitize_limit(data["max_frontier"], DEFAULT_SETTINGS["max_frontier"], int)
    data["max_seconds"] = _sanitize_limit(data["max_seconds"], DEFAULT_SETTINGS["max_seconds"], float)

    for key in _BOOL_KEYS:
        value = str(data[key]).strip().lower()
        if value in _TRUE:
            data[key] = "true"
        elif value in _FALSE:
            data[key] = "false"
        else:
            data[key] = DEFAULT_SETTINGS[key]
    return data


def load_settings(path=None):
    if path is None:
        return _sanitize({})
    path = Path(path)
    if not path.exists():
        return _sanitize({})
    parser = configparser.ConfigParser()
    parser.read(path, encoding="utf-8")
    if SECTION not in parser:
        return _sanitize({})
    return _sanitize(dict(parser[SECTION]))


def save_settings(settings, path):
    parser = configparser.ConfigParser()
    parser[SECTION] = _sanitize(settings)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        parser.write(f)


def _limit(value, cast):
    return None if value == "none" else cast(value)


def limits_from_settings(settings) -> SearchLimits:
    data = _sanitize(settings)
    return SearchLimits(
        max_nodes=_limit(data["max_nodes"], int),
        max_seconds=_limit(data["max_seconds"], float),
        max_frontier=_limit(data["max_frontier"], int),
    )


def policy_from_settings(settings) -> SearchPolicy:
    data = _sanitize(settings)
    return SearchPolicy(**{key: data[key] == "true" for key in _BOOL_KEYS})
