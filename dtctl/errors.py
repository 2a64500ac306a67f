from dtctl.models import Operation, Ownership, SafetyLevel


class DtctlError(Exception):
    """Base exception for dtctl domain errors."""

    pass


class ConfigError(DtctlError):
    """Raised when the config file cannot be read, parsed or written."""

    pass


class ContextNotFound(ConfigError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"context {name!r} not found")


class InvalidAliasName(DtctlError):
    def __init__(self, name: str):
        self.name = name
        if not name:
            msg = "alias name cannot be empty"
        else:
            msg = (
                f"alias name {name!r} is invalid: "
                "use only letters, numbers, hyphens, and underscores"
            )
        super().__init__(msg)


class EmptyAliasExpansion(DtctlError):
    def __init__(self, name: str):
        self.name = name
        super().__init__("alias expansion cannot be empty")


class AliasNotFound(DtctlError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"alias {name!r} not found")


class AliasNameCollision(DtctlError):
    """Raised when an alias name would shadow a built-in command."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name!r} is a built-in command and cannot be used as an alias name")


class AliasArgumentShortfall(DtctlError):
    """Raised when an alias references $N but fewer than N arguments were given."""

    def __init__(self, alias: str, required: int, supplied: int):
        self.alias = alias
        self.required = required
        self.supplied = supplied
        super().__init__(
            f"alias {alias!r} requires at least {required} argument(s) "
            f"($1-${required}), got {supplied}"
        )


class SafetyDenied(DtctlError):
    """Raised when the active context's safety level does not permit an operation."""

    def __init__(
        self,
        operation: Operation,
        context_name: str,
        safety_level: SafetyLevel,
        reason: str,
        ownership: Ownership | None = None,
        suggestions: list[str] | None = None,
        override: SafetyLevel | None = None,
    ):
        self.operation = operation
        self.context_name = context_name
        self.safety_level = safety_level
        self.reason = reason
        self.ownership = ownership
        self.suggestions = list(suggestions or [])
        self.override = override
        super().__init__(self._render())

    def _render(self) -> str:
        lines = [
            "Operation not allowed:",
            f"   Context: {self.context_name} ({self.safety_level})",
        ]
        if self.override is not None:
            lines.append(f"   Overridden to: {self.override}")
        lines.append(f"   Reason: {self.reason}")
        if self.suggestions:
            lines.append("")
            lines.append("Suggestions:")
            lines.extend(f"  • {s}" for s in self.suggestions)
        return "\n".join(lines)
