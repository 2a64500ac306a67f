"""Safety levels: decide whether an operation may run in the active context."""

import logging
import os
from dataclasses import dataclass, field

from dtctl.errors import SafetyDenied
from dtctl.models import Config, Operation, Ownership, SafetyLevel

from . import config as config_lib

logger = logging.getLogger(__name__)

OVERRIDE_ENV = "DTCTL_SAFETY_OVERRIDE"

_BUCKET_SUGGESTION = "Bucket operations require 'dangerously-unrestricted' safety level"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""
    suggestions: list[str] = field(default_factory=list)


ALLOW = Decision(True)


def decide(
    level: SafetyLevel, operation: Operation, ownership: Ownership = Ownership.UNKNOWN
) -> Decision:
    """Evaluate the safety matrix. Pure: same inputs, same decision."""
    if level is SafetyLevel.DANGEROUSLY_UNRESTRICTED:
        return ALLOW

    if operation is Operation.READ:
        return ALLOW

    if level is SafetyLevel.READONLY:
        return Decision(
            False,
            f"does not allow {operation} operations",
            ["Switch to a context with write permissions"],
        )

    if operation is Operation.DELETE_BUCKET:
        return Decision(False, "does not allow bucket deletion", [_BUCKET_SUGGESTION])

    if level is SafetyLevel.READWRITE_MINE and operation in (Operation.UPDATE, Operation.DELETE):
        if ownership is Ownership.OWN:
            return ALLOW
        if ownership is Ownership.UNKNOWN:
            reason = "requires ownership verification before modifying resources"
        else:
            reason = "does not allow modifying resources owned by others"
        return Decision(False, reason, ["Switch to a 'readwrite-all' context"])

    return ALLOW


def determine_ownership(resource_owner_id: str | None, current_user_id: str | None) -> Ownership:
    if not resource_owner_id or not current_user_id:
        return Ownership.UNKNOWN
    if resource_owner_id == current_user_id:
        return Ownership.OWN
    return Ownership.SHARED


class Checker:
    """Safety checker bound to one context for one invocation.

    An override level only ever raises the effective level.
    """

    def __init__(
        self, context_name: str, level: SafetyLevel, override: SafetyLevel | None = None
    ):
        self.context_name = context_name
        self.level = level
        self.override = override

    @property
    def effective_level(self) -> SafetyLevel:
        if self.override is not None and self.override.rank > self.level.rank:
            return self.override
        return self.level

    def check(self, operation: Operation, ownership: Ownership = Ownership.UNKNOWN) -> Decision:
        return decide(self.effective_level, operation, ownership)

    def is_overridden(self, operation: Operation, ownership: Ownership = Ownership.UNKNOWN) -> bool:
        """True when only the override makes this operation pass."""
        if self.effective_level is self.level:
            return False
        allowed_now = self.check(operation, ownership).allowed
        return allowed_now and not decide(self.level, operation, ownership).allowed

    def require(self, operation: Operation, ownership: Ownership = Ownership.UNKNOWN) -> None:
        decision = self.check(operation, ownership)
        if not decision.allowed:
            # ownership is reported when the ownership gate of the effective level denied
            gated = (
                operation in (Operation.UPDATE, Operation.DELETE)
                and self.effective_level is SafetyLevel.READWRITE_MINE
            )
            raise SafetyDenied(
                operation=operation,
                context_name=self.context_name,
                safety_level=self.level,
                reason=decision.reason,
                ownership=ownership if gated else None,
                suggestions=decision.suggestions,
                override=self.effective_level if self.effective_level is not self.level else None,
            )
        if self.is_overridden(operation, ownership):
            logger.info(
                f"Safety override: {operation} allowed by {self.effective_level} "
                f"(context {self.context_name!r} is {self.level})"
            )


def resolve_override(value: str | None = None) -> SafetyLevel | None:
    """Override level from --override-safety, falling back to DTCTL_SAFETY_OVERRIDE."""
    raw = value or os.environ.get(OVERRIDE_ENV)
    return config_lib.parse_safety_level(raw)


def checker_for(cfg: Config, override: str | SafetyLevel | None = None) -> Checker:
    """Build a checker for the current context of cfg."""
    name, ctx = config_lib.current_context(cfg)
    if not isinstance(override, SafetyLevel):
        override = resolve_override(override)
    return Checker(name, ctx.effective_safety_level, override)
