"""
Repair and strict parsing of client filter strings.

The web client sends the task filter as a pseudo-JSON query parameter and is
known to emit a handful of broken shapes, for example::

    ["members":[*d51f55cd-7a4f 1"]," status" ['"In progress"])

Repair is an ordered list of textual rewrite rules. Each rule is applied
unconditionally and is independently testable; the rewritten text then has to
pass a strict JSON parse. The outcome is a typed result, ``Parsed`` or
``Fallback``, never an exception.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

# A complete double-quoted JSON string literal.
_STRING_LITERAL = r'"(?:[^"\\]|\\.)*"'


@dataclass(frozen=True)
class RewriteRule:
    """A named textual rewrite applied to the raw filter before parsing."""
    name: str
    apply: Callable[[str], str]

    def __call__(self, text: str) -> str:
        return self.apply(text)


@dataclass(frozen=True)
class Parsed:
    """The filter text was repaired into a JSON object."""
    data: Dict[str, Any]


@dataclass(frozen=True)
class Fallback:
    """The filter text could not be recovered; callers use an empty predicate."""
    reason: str
    raw: str


FilterParseResult = Union[Parsed, Fallback]


def _trim(text: str) -> str:
    return text.strip()


def _strip_wrappers(text: str) -> str:
    # Clients sometimes wrap the object in array or call syntax.
    if text.startswith("["):
        text = text[1:]
    if text.endswith("]") or text.endswith(")"):
        text = text[:-1]
    return text


_STAR_LIST = re.compile(r"\[\s*\*[^\[\]]*\]")
_WHITESPACE_AND_QUOTES = re.compile(r"[\s\"']+")


def _quote_star_tokens(text: str) -> str:
    """[*a b",*c] -> ["ab", "c"]"""

    def _rewrite(match: re.Match) -> str:
        inner = match.group(0)[1:-1]
        tokens = []
        for part in inner.split(","):
            token = _WHITESPACE_AND_QUOTES.sub("", part.strip().lstrip("*"))
            tokens.append(token)
        return json.dumps(tokens)

    return _STAR_LIST.sub(_rewrite, text)


_QUOTED_LIST = re.compile(r"\[\s*'\"[^\[\]]*\]")
_QUOTED_VALUE = re.compile(r'"([^"]*)"')


def _unwrap_single_quoted_tokens(text: str) -> str:
    """['"a",'"b"] -> ["a", "b"]"""

    def _rewrite(match: re.Match) -> str:
        return json.dumps(_QUOTED_VALUE.findall(match.group(0)))

    return _QUOTED_LIST.sub(_rewrite, text)


_BARE_KEY = re.compile(r"(" + _STRING_LITERAL + r")|(?<![\w\"])([A-Za-z_]\w*)(\s*):")


def _quote_bare_keys(text: str) -> str:
    """{status:[...]} -> {"status":[...]}; string literals are left untouched."""

    def _rewrite(match: re.Match) -> str:
        if match.group(1) is not None:
            return match.group(1)
        return '"%s"%s:' % (match.group(2), match.group(3))

    return _BARE_KEY.sub(_rewrite, text)


_UNDEFINED = re.compile(r"(" + _STRING_LITERAL + r")|\bundefined\b")


def _undefined_to_null(text: str) -> str:
    return _UNDEFINED.sub(lambda m: m.group(1) if m.group(1) is not None else "null", text)


def _ensure_braces(text: str) -> str:
    if not text.startswith("{"):
        text = "{" + text
    if not text.endswith("}"):
        text = text + "}"
    return text


_QUOTED_KEY = re.compile(r"(" + _STRING_LITERAL + r")(\s*)([:\[])?")


def _normalize_quoted_keys(text: str) -> str:
    """{" status" [...]} -> {"status":[...]}"""

    def _rewrite(match: re.Match) -> str:
        literal, spacing, follower = match.group(1), match.group(2), match.group(3)
        if follower is None:
            return literal + spacing
        key = literal[1:-1].strip()
        if follower == "[":
            return '"%s":[' % key
        return '"%s":' % key

    return _QUOTED_KEY.sub(_rewrite, text)


REWRITE_RULES: List[RewriteRule] = [
    RewriteRule("trim", _trim),
    RewriteRule("strip_wrappers", _strip_wrappers),
    RewriteRule("quote_star_tokens", _quote_star_tokens),
    RewriteRule("unwrap_single_quoted_tokens", _unwrap_single_quoted_tokens),
    RewriteRule("quote_bare_keys", _quote_bare_keys),
    RewriteRule("undefined_to_null", _undefined_to_null),
    RewriteRule("ensure_braces", _ensure_braces),
    RewriteRule("normalize_quoted_keys", _normalize_quoted_keys),
]


# PUBLIC_INTERFACE
def repair(text: str, rules: Optional[List[RewriteRule]] = None) -> str:
    """Run every rewrite rule over ``text`` in order and return the result."""
    for rule in rules if rules is not None else REWRITE_RULES:
        text = rule(text)
    return text


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


# PUBLIC_INTERFACE
def parse_filter_string(raw: Optional[str]) -> FilterParseResult:
    """
    Repair ``raw`` and parse it as a strict JSON object.

    Blank or missing input is not an error and yields ``Parsed({})``.
    """
    if raw is None:
        return Parsed({})
    if not isinstance(raw, str):
        return Fallback(reason=f"expected a string, got {type(raw).__name__}", raw=repr(raw))
    if not raw.strip():
        return Parsed({})

    text = repair(raw)
    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        return Fallback(reason=f"invalid JSON after repair: {exc}", raw=raw)
    except RecursionError:
        return Fallback(reason="filter nesting too deep", raw=raw)
    if not isinstance(data, dict):
        return Fallback(reason=f"expected a JSON object, got {type(data).__name__}", raw=raw)
    return Parsed(data)
