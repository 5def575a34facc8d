"""
Profile exchange schemas.

A ProfileDefinition is the compact, serializable form of a parsing profile,
used to store profiles outside of the parsing core and to share them.
"""

import re
from typing import List, Literal

from pydantic import BaseModel, Field, field_validator

from ..parsers.capture import CaptureGroup, TemporalCaptureGroup, canonical_name
from ..parsers.profile import FailurePolicy, MalformedProfileError, ParsingProfile


class CaptureGroupDefinition(BaseModel):
    """One capture group of a profile."""
    
    name: str = Field(..., min_length=1, description="Group name, as used in `$TOKEN` placeholders")
    kind: Literal["text", "temporal"] = Field(default="text", description="'text' or 'temporal'")
    expression: str = Field(..., description="Regex fragment matched by the group")
    
    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        """Store names in canonical form."""
        name = canonical_name(v)
        if not re.match(r"^[A-Z][A-Z0-9]+$", name):
            raise ValueError("name must be a letter followed by letters or digits")
        return name


class ProfileDefinition(BaseModel):
    """Serializable parsing profile."""
    
    profile_id: str = Field(..., min_length=1, description="Stable profile id")
    name: str = Field(..., description="Display name")
    capture_groups: List[CaptureGroupDefinition] = Field(default_factory=list)
    line_template: str = Field(..., description="Template with `$TOKEN` placeholders")
    on_failure: FailurePolicy = Field(default=FailurePolicy.CONCAT, description="Unmatched line policy")
    
    @classmethod
    def from_profile(cls, profile: ParsingProfile) -> "ProfileDefinition":
        """Capture the content of a profile."""
        return cls(
            profile_id=profile.profile_id,
            name=profile.name,
            capture_groups=[
                CaptureGroupDefinition(
                    name=group.group_name,
                    kind="temporal" if group.is_temporal else "text",
                    expression=expression,
                )
                for group, expression in profile.capture_groups.items()
            ],
            line_template=profile.line_template,
            on_failure=profile.on_failure,
        )
    
    def to_profile(self, editable: bool = True) -> ParsingProfile:
        """
        Build a profile from this definition.
        
        Args:
            editable: Build an editable profile rather than a frozen one
            
        Raises:
            MalformedProfileError: unknown temporal group, duplicate group,
                or (frozen profiles) a template that does not compile
        """
        groups = {}
        for definition in self.capture_groups:
            if definition.kind == "temporal":
                try:
                    group = TemporalCaptureGroup.from_name(definition.name)
                except ValueError as e:
                    raise MalformedProfileError(str(e)) from e
            else:
                group = CaptureGroup(definition.name)
            if group in groups:
                raise MalformedProfileError(f"Duplicate capture group: {definition.name}")
            groups[group] = definition.expression
        
        return ParsingProfile(
            self.name,
            groups,
            self.line_template,
            self.on_failure,
            profile_id=self.profile_id,
            editable=editable,
        )
