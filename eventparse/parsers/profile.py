"""
Parsing profiles - line templates compiled into matching patterns.

A profile maps capture groups to regex fragments and holds a line template
in which `$TOKEN` placeholders stand for those groups. Compiling the profile
replaces every placeholder with a named group wrapping the fragment.

Profiles come in two flavours sharing this one class:
    - frozen: content is fixed, the pattern is compiled once at construction
    - editable: content can change, the pattern is recompiled on every read
"""

import re
import uuid
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Pattern, Union

from ..core.logging import get_logger
from .capture import NamedCaptureGroup, canonical_name, capture_group_of

logger = get_logger(__name__)

GROUP_TAG_PATTERN = re.compile(r"\$[A-Za-z0-9]{2,}")


class FailurePolicy(str, Enum):
    """What to do with a line that does not match the profile."""

    CONCAT = "CONCAT"  # append to the previous event
    IGNORE = "IGNORE"  # drop the line
    ABORT = "ABORT"    # stop parsing with an error


class MalformedProfileError(ValueError):
    """A profile cannot be compiled into a working pattern."""


class ReadOnlyProfileError(AttributeError):
    """Attempt to modify a frozen profile."""


def _normalize_groups(
    capture_groups: Mapping[Union[NamedCaptureGroup, str], str],
) -> Dict[NamedCaptureGroup, str]:
    groups: Dict[NamedCaptureGroup, str] = {}
    seen = set()
    for key, expression in capture_groups.items():
        try:
            group = capture_group_of(key) if isinstance(key, str) else key
        except ValueError as e:
            raise MalformedProfileError(str(e)) from e
        if group.group_name in seen:
            raise MalformedProfileError(f"Duplicate capture group: {group.group_name}")
        seen.add(group.group_name)
        groups[group] = expression
    return groups


def build_pattern_string(
    capture_groups: Mapping[NamedCaptureGroup, str],
    line_template: str,
) -> str:
    """
    Substitute every `$TOKEN` of a template with its named group.

    All occurrences are replaced in a single scan of the template, so a
    token can never be rewritten by the substitution of another one and the
    result does not depend on the order of `capture_groups`.

    Args:
        capture_groups: Group -> regex fragment
        line_template: Template containing `$TOKEN` placeholders

    Returns:
        Regex source text

    Raises:
        MalformedProfileError: if a token has no matching capture group
    """
    expressions = {group.group_name: expression for group, expression in capture_groups.items()}

    def substitute(match) -> str:
        name = canonical_name(match.group())
        if name not in expressions:
            raise MalformedProfileError(
                f"Template token {match.group()} at position {match.start()} "
                "does not match any capture group"
            )
        return f"(?P<{name}>{expressions[name]})"

    return GROUP_TAG_PATTERN.sub(substitute, line_template)


def compile_pattern(
    capture_groups: Mapping[NamedCaptureGroup, str],
    line_template: str,
) -> Pattern:
    """
    Compile a template and its capture groups into a pattern.

    Raises:
        MalformedProfileError: on unknown tokens or invalid regex syntax
    """
    source = build_pattern_string(capture_groups, line_template)
    try:
        return re.compile(source)
    except re.error as e:
        raise MalformedProfileError(f"Invalid pattern {source!r}: {e}") from e


class ParsingProfile:
    """
    Capture groups, line template and failure policy of one log format.

    Identity is the profile id alone: renaming or editing a profile never
    changes which profile it is.
    """

    def __init__(
        self,
        name: str,
        capture_groups: Mapping[Union[NamedCaptureGroup, str], str],
        line_template: str,
        on_failure: FailurePolicy = FailurePolicy.CONCAT,
        *,
        profile_id: Optional[str] = None,
        editable: bool = False,
        built_in: bool = False,
    ):
        """
        Create a profile.

        Args:
            name: Display name
            capture_groups: Group (or group name) -> regex fragment, in order
            line_template: Template with `$TOKEN` placeholders
            on_failure: Policy for lines that do not match
            profile_id: Stable id; a random one is generated when omitted
            editable: Allow later edits (pattern recompiled on each read)
            built_in: Marks catalog profiles; implies frozen

        Raises:
            MalformedProfileError: if a frozen profile cannot be compiled
        """
        if built_in and editable:
            raise ValueError("Built-in profiles cannot be editable")
        self._profile_id = profile_id or str(uuid.uuid4())
        self._name = name
        self._capture_groups = _normalize_groups(capture_groups)
        self._line_template = line_template
        self._on_failure = FailurePolicy(on_failure)
        self._editable = editable
        self._built_in = built_in
        self._pattern: Optional[Pattern] = None
        if not editable:
            self._pattern = self._compile()

    @classmethod
    def empty(cls) -> "ParsingProfile":
        """A blank editable profile."""
        return cls("New profile", {}, "", editable=True)

    @classmethod
    def copy_of(cls, profile: "ParsingProfile") -> "ParsingProfile":
        """An editable duplicate with a new id."""
        return cls(
            f"Copy of {profile.name}",
            profile.capture_groups,
            profile.line_template,
            profile.on_failure,
            editable=True,
        )

    @classmethod
    def editable_of(cls, profile: "ParsingProfile") -> "ParsingProfile":
        """An editable version of a profile, keeping its id."""
        return cls(
            profile.name,
            profile.capture_groups,
            profile.line_template,
            profile.on_failure,
            profile_id=profile.profile_id,
            editable=True,
        )

    def _compile(self) -> Pattern:
        pattern = compile_pattern(self._capture_groups, self._line_template)
        logger.debug(f"Pattern for profile {self._name!r}: {pattern.pattern}")
        return pattern

    def _check_editable(self) -> None:
        if not self._editable:
            raise ReadOnlyProfileError(f"Profile {self} is read-only")

    @property
    def profile_id(self) -> str:
        return self._profile_id

    @property
    def is_built_in(self) -> bool:
        return self._built_in

    @property
    def is_editable(self) -> bool:
        return self._editable

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._check_editable()
        self._name = value

    @property
    def capture_groups(self) -> Mapping[NamedCaptureGroup, str]:
        """Read-only view of the group -> fragment map, in declaration order."""
        return MappingProxyType(self._capture_groups)

    @capture_groups.setter
    def capture_groups(self, value: Mapping[Union[NamedCaptureGroup, str], str]) -> None:
        self._check_editable()
        self._capture_groups = _normalize_groups(value)

    @property
    def line_template(self) -> str:
        return self._line_template

    @line_template.setter
    def line_template(self, value: str) -> None:
        self._check_editable()
        self._line_template = value

    @property
    def on_failure(self) -> FailurePolicy:
        return self._on_failure

    @on_failure.setter
    def on_failure(self, value: FailurePolicy) -> None:
        self._check_editable()
        self._on_failure = FailurePolicy(value)

    @property
    def pattern(self) -> Pattern:
        """
        The compiled pattern.

        Raises:
            MalformedProfileError: if an edited profile no longer compiles
        """
        if self._pattern is not None:
            return self._pattern
        return self._compile()

    @property
    def pattern_string(self) -> str:
        return self.pattern.pattern

    def __eq__(self, other) -> bool:
        if not isinstance(other, ParsingProfile):
            return NotImplemented
        return self._profile_id == other._profile_id

    def __hash__(self) -> int:
        return hash(self._profile_id)

    def __repr__(self) -> str:
        return f"ParsingProfile(profile_id={self._profile_id!r}, name={self._name!r})"

    def __str__(self) -> str:
        if self._built_in:
            return f"[Built-in] {self._name}"
        return self._name
