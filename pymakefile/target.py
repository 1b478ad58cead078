"""Target declarations and their matching functions.

A target is one of three kinds:

- LiteralTarget: an exact path such as ``"build/app"``
- GlobTarget: a glob pattern such as ``"build/*.o"`` or ``"build/<name>.o"``
- RegexTarget: a compiled regular expression such as ``re.compile(r'\\.o$')``

All of them answer ``match(name)`` with a MatchResult or None.

Glob syntax:
- <name> - Named capture (one or more non-slash characters)
- *      - Any run of non-slash characters
- **     - Anything, slashes included
- ?      - One non-slash character
- [...]  - Character class

Every wildcard is also a positional group, so ``match[1]`` is the text
matched by the first wildcard.

Example:
    target = make_target("build/<name>.o")
    m = target.match("build/main.o")
    m["name"]   # 'main'
    m[1]        # 'main'
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Optional, Tuple, Union

from .exceptions import InvalidRule


class TargetKind(Enum):
    """How a target declaration is matched against requested names."""
    LITERAL = auto()    # exact string, indexed for O(1) lookup
    GLOB = auto()       # shell-style pattern with captures
    REGEX = auto()      # regular expression, search semantics


@dataclass(frozen=True)
class MatchResult:
    """Outcome of matching a requested name against a target.

    Attributes:
        matched: The text that matched
        groups: Positional captures, in pattern order
        named: Named captures
        index: Offset in ``input`` where the match starts
        input: The requested name
    """
    matched: str
    groups: Tuple[Optional[str], ...] = ()
    named: Dict[str, Optional[str]] = field(default_factory=dict)
    index: int = 0
    input: str = ''

    @classmethod
    def literal(cls, name: str) -> 'MatchResult':
        """Trivial match used for literal targets."""
        return cls(matched=name, index=0, input=name)

    @classmethod
    def from_re(cls, m: 're.Match') -> 'MatchResult':
        return cls(
            matched=m.group(0),
            groups=m.groups(),
            named=m.groupdict(),
            index=m.start(),
            input=m.string,
        )

    def __getitem__(self, key: Union[int, str]) -> Optional[str]:
        if isinstance(key, str):
            return self.named[key]
        if key == 0:
            return self.matched
        if key < 0:
            return self.groups[key]
        return self.groups[key - 1]

    def __len__(self) -> int:
        return 1 + len(self.groups)


class Target(ABC):
    """Base class for target declarations."""

    kind: TargetKind

    @property
    @abstractmethod
    def decl(self) -> Union[str, 're.Pattern']:
        """The declaration this target was built from, used as rule key."""
        pass

    @abstractmethod
    def match(self, name: str) -> Optional[MatchResult]:
        """Return a MatchResult if ``name`` is produced by this target."""
        pass

    @property
    def is_file_path(self) -> bool:
        """True for literal targets, which name one path on disk."""
        return self.kind == TargetKind.LITERAL


@dataclass(frozen=True)
class LiteralTarget(Target):
    """Exact path target."""
    path: str
    kind = TargetKind.LITERAL

    @property
    def decl(self) -> str:
        return self.path

    def match(self, name: str) -> Optional[MatchResult]:
        if name == self.path:
            return MatchResult.literal(name)
        return None

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class GlobTarget(Target):
    """Glob pattern target with positional and named captures."""
    pattern: str
    kind = TargetKind.GLOB
    _regex: 're.Pattern' = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, '_regex', compile_glob(self.pattern))

    @property
    def decl(self) -> str:
        return self.pattern

    @property
    def regex(self) -> 're.Pattern':
        return self._regex

    def match(self, name: str) -> Optional[MatchResult]:
        m = self._regex.match(name)
        if m:
            return MatchResult.from_re(m)
        return None

    def __str__(self) -> str:
        return self.pattern


@dataclass(frozen=True)
class RegexTarget(Target):
    """Regular expression target (may match anywhere in the name)."""
    regex: 're.Pattern'
    kind = TargetKind.REGEX

    @property
    def decl(self) -> 're.Pattern':
        return self.regex

    def match(self, name: str) -> Optional[MatchResult]:
        m = self.regex.search(name)
        if m:
            return MatchResult.from_re(m)
        return None

    def __str__(self) -> str:
        return f'/{self.regex.pattern}/'


_CAPTURE_RE = re.compile(r'<(\w+)>')
_GLOB_TOKEN_RE = re.compile(r'<\w+>|\*\*|\*|\?|\[[^\]]*\]')


def has_magic(decl: str) -> bool:
    """Check whether a string declaration is a glob rather than a path."""
    return bool(_GLOB_TOKEN_RE.search(decl))


def compile_glob(pattern: str) -> 're.Pattern':
    """Compile a glob pattern into an anchored regex with capture groups."""
    regex_parts = []
    last_end = 0

    for token in _GLOB_TOKEN_RE.finditer(pattern):
        # Literal text before this token
        regex_parts.append(re.escape(pattern[last_end:token.start()]))

        text = token.group(0)
        capture = _CAPTURE_RE.fullmatch(text)
        if capture:
            regex_parts.append(f'(?P<{capture.group(1)}>[^/]+)')
        elif text == '**':
            regex_parts.append('(.*)')
        elif text == '*':
            regex_parts.append('([^/]*)')
        elif text == '?':
            regex_parts.append('([^/])')
        else:
            body = text[1:-1]
            if body.startswith('!'):
                body = '^' + body[1:]
            regex_parts.append(f'([{body}])')

        last_end = token.end()

    regex_parts.append(re.escape(pattern[last_end:]))

    try:
        return re.compile('^' + ''.join(regex_parts) + '$')
    except re.error as e:
        raise InvalidRule(f"invalid glob pattern {pattern!r}: {e}")


def make_target(decl: Union[str, 're.Pattern', Target]) -> Target:
    """Build a Target from a declaration.

    Strings with glob syntax become GlobTarget, other strings become
    LiteralTarget, compiled patterns become RegexTarget.

    Raises:
        InvalidRule: If the declaration has an unsupported type or is empty.
    """
    if isinstance(decl, Target):
        return decl
    if isinstance(decl, re.Pattern):
        return RegexTarget(decl)
    if isinstance(decl, str):
        if not decl:
            raise InvalidRule("target must not be empty")
        if has_magic(decl):
            return GlobTarget(decl)
        return LiteralTarget(decl)
    msg = "target must be a string or compiled regex. Got '%r' (%s)"
    raise InvalidRule(msg % (decl, type(decl)))
