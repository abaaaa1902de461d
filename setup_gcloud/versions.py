"""The ``version`` input and release-number matching.

The ``version`` input is one of:

* empty, meaning any version is acceptable,
* ``latest``, meaning the newest published release,
* a release number such as ``450.0.0``,
* a range such as ``> 400.0.0``, ``^450.0.0``, ``450.x`` or
  ``400.0.0 - 460.0.0``, with ``||`` separating alternatives.

``parse_version_spec`` turns the raw input into one of the variants below so
callers branch on types instead of comparing strings.

Ranges use npm semver syntax. Each ``||`` alternative is translated into a
``packaging`` ``SpecifierSet``; a version matches the range if any
alternative contains it.
"""

import re
from dataclasses import dataclass
from typing import Iterable, NamedTuple, Optional, Union

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from setup_gcloud.constants import LATEST


@dataclass(frozen=True)
class Unspecified:
  """No version was given."""


@dataclass(frozen=True)
class Latest:
  """Resolve the newest published release."""


@dataclass(frozen=True)
class Exact:
  """A single release number, passed through verbatim."""

  value: str


@dataclass(frozen=True)
class Range:
  """A version constraint, passed through verbatim."""

  value: str


VersionSpec = Union[Unspecified, Latest, Exact, Range]

_RELEASE_RE = re.compile(r"^\d+\.\d+\.\d+(?:[-+][0-9A-Za-z.+\-]*)?$")


def parse_version_spec(value: Optional[str]) -> VersionSpec:
  value = (value or "").strip()
  if not value:
    return Unspecified()
  if value == LATEST:
    return Latest()
  if _is_release_number(value):
    return Exact(value)
  return Range(value)


# ---------------------------------------------------------------------------
# Range translation
# ---------------------------------------------------------------------------

_ANY = ">=0.0.0"
_NOTHING = "<0.0.0"

_PARTIAL = (
  r"v?\s*([0-9]+|[xX*])"
  r"(?:\.([0-9]+|[xX*])"
  r"(?:\.([0-9]+|[xX*])([-+][0-9A-Za-z.+\-]*)?)?)?"
)
_COMPARATOR_RE = re.compile(
  rf"\s*(~>|~|\^|>=|<=|>|<|==|!=|=)?\s*{_PARTIAL}\s*,?\s*"
)
_HYPHEN_RE = re.compile(rf"^\s*{_PARTIAL}\s+-\s+{_PARTIAL}\s*$")


class _Partial(NamedTuple):
  """A possibly incomplete version; ``None`` marks a wildcard or omission."""

  major: Optional[int]
  minor: Optional[int]
  patch: Optional[int]
  qualifier: str

  def floor(self) -> str:
    return f"{self.major}.{self.minor or 0}.{self.patch or 0}"

  def full(self) -> str:
    return f"{self.major}.{self.minor}.{self.patch}{self.qualifier}"


def _partial(major, minor, patch, qualifier) -> _Partial:
  def number(part):
    if part is None or part in ("x", "X", "*"):
      return None
    return int(part)

  major, minor, patch = number(major), number(minor), number(patch)
  # Anything after a wildcard is a wildcard too: "1.x.3" means "1.x.x".
  if major is None:
    minor = patch = None
  elif minor is None:
    patch = None
  return _Partial(major, minor, patch, qualifier or "")


def _x_range(p: _Partial) -> list[str]:
  if p.major is None:
    return [_ANY]
  if p.minor is None:
    return [f">={p.major}.0.0", f"<{p.major + 1}.0.0"]
  if p.patch is None:
    return [f">={p.major}.{p.minor}.0", f"<{p.major}.{p.minor + 1}.0"]
  return [f"=={p.full()}"]


def _tilde(p: _Partial) -> list[str]:
  if p.major is None:
    return [_ANY]
  if p.minor is None:
    return [f">={p.major}.0.0", f"<{p.major + 1}.0.0"]
  return [f">={p.floor()}", f"<{p.major}.{p.minor + 1}.0"]


def _caret(p: _Partial) -> list[str]:
  if p.major is None:
    return [_ANY]
  if p.minor is None:
    return [f">={p.major}.0.0", f"<{p.major + 1}.0.0"]
  if p.major > 0:
    upper = f"{p.major + 1}.0.0"
  elif p.minor > 0 or p.patch is None:
    upper = f"0.{p.minor + 1}.0"
  else:
    upper = f"0.0.{p.patch + 1}"
  return [f">={p.floor()}", f"<{upper}"]


def _primitive(operator: str, p: _Partial) -> list[str]:
  if operator in ("=", "=="):
    return _x_range(p)
  if operator == "!=":
    if p.patch is None:
      raise ValueError("!= requires a full version")
    return [f"!={p.full()}"]

  if p.major is None:
    return [_NOTHING] if operator in (">", "<") else [_ANY]

  complete = p.patch is not None
  if operator == ">":
    if complete:
      return [f">{p.full()}"]
    if p.minor is None:
      return [f">={p.major + 1}.0.0"]
    return [f">={p.major}.{p.minor + 1}.0"]
  if operator == ">=":
    return [f">={p.full() if complete else p.floor()}"]
  if operator == "<":
    return [f"<{p.full() if complete else p.floor()}"]
  # "<="
  if complete:
    return [f"<={p.full()}"]
  if p.minor is None:
    return [f"<{p.major + 1}.0.0"]
  return [f"<{p.major}.{p.minor + 1}.0"]


def _hyphen(low: _Partial, high: _Partial) -> list[str]:
  clauses = _primitive(">=", low)
  if high.major is None:
    return clauses
  return clauses + _primitive("<=", high)


def _translate(alternative: str, constraint: str) -> SpecifierSet:
  text = alternative.strip()
  hyphen = _HYPHEN_RE.match(text)
  clauses = []
  if not text or text == "*":
    clauses = [_ANY]
  elif hyphen is not None:
    groups = hyphen.groups()
    clauses = _hyphen(_partial(*groups[:4]), _partial(*groups[4:]))
  else:
    pos = 0
    while pos < len(text):
      match = _COMPARATOR_RE.match(text, pos)
      if match is None or match.end() == pos:
        raise ValueError(f'invalid version constraint "{constraint}"')
      operator, *parts = match.groups()
      p = _partial(*parts)
      if operator in ("~", "~>"):
        clauses.extend(_tilde(p))
      elif operator == "^":
        clauses.extend(_caret(p))
      elif operator is None:
        clauses.extend(_x_range(p))
      else:
        clauses.extend(_primitive(operator, p))
      pos = match.end()

  try:
    return SpecifierSet(",".join(clauses))
  except InvalidSpecifier as e:
    raise ValueError(f'invalid version constraint "{constraint}"') from e


def to_specifier_sets(constraint: str) -> list[SpecifierSet]:
  """Translate an npm-style range into one ``SpecifierSet`` per alternative.

  Raises:
      ValueError: If the constraint cannot be understood.
  """
  text = (constraint or "").strip()
  if not text:
    raise ValueError("version constraint is empty")
  return [_translate(alt, constraint) for alt in text.split("||")]


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


def satisfies(version: str, constraint: str) -> bool:
  """Whether ``version`` satisfies ``constraint``.

  Unparseable versions never do.
  """
  alternatives = to_specifier_sets(constraint)
  parsed = _parse(version)
  return parsed is not None and _contains(alternatives, parsed)


def max_satisfying(versions: Iterable[str], constraint: str) -> Optional[str]:
  """Return the highest of ``versions`` that satisfies ``constraint``."""
  alternatives = to_specifier_sets(constraint)
  best = None
  best_parsed = None
  for version in versions:
    parsed = _parse(version)
    if parsed is None or not _contains(alternatives, parsed):
      continue
    if best_parsed is None or parsed > best_parsed:
      best, best_parsed = version, parsed
  return best


def _contains(alternatives: list[SpecifierSet], version: Version) -> bool:
  return any(s.contains(version, prereleases=False) for s in alternatives)


def _parse(version: str) -> Optional[Version]:
  try:
    return Version(version)
  except InvalidVersion:
    return None


def _is_release_number(value: str) -> bool:
  """Three numeric components; ``450`` or ``450.0`` are ranges."""
  return bool(_RELEASE_RE.match(value)) and _parse(value) is not None
