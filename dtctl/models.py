from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class SafetyLevel(str, Enum):
    READONLY = "readonly"
    READWRITE_MINE = "readwrite-mine"
    READWRITE_ALL = "readwrite-all"
    DANGEROUSLY_UNRESTRICTED = "dangerously-unrestricted"

    def __str__(self) -> str:
        return self.value

    @property
    def rank(self) -> int:
        return list(SafetyLevel).index(self)


DEFAULT_SAFETY_LEVEL = SafetyLevel.READWRITE_ALL

SAFETY_LEVEL_DESCRIPTIONS = {
    SafetyLevel.READONLY: "Read operations only",
    SafetyLevel.READWRITE_MINE: "Create; update/delete only resources you own",
    SafetyLevel.READWRITE_ALL: "Create, update and delete any resource, no bucket deletion",
    SafetyLevel.DANGEROUSLY_UNRESTRICTED: "All operations, including bucket deletion",
}


class Operation(str, Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    DELETE_BUCKET = "delete-bucket"

    def __str__(self) -> str:
        return self.value


class Ownership(str, Enum):
    OWN = "own"
    SHARED = "shared"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


@dataclass
class Context:
    environment: str = ""
    token_ref: str = ""
    safety_level: SafetyLevel | None = None
    description: str = ""

    @property
    def effective_safety_level(self) -> SafetyLevel:
        return self.safety_level or DEFAULT_SAFETY_LEVEL


@dataclass
class NamedContext:
    name: str
    context: Context = field(default_factory=Context)


@dataclass
class AliasEntry:
    name: str
    expansion: str


@dataclass
class Config:
    api_version: str = "v1"
    kind: str = "Config"
    current_context: str = ""
    contexts: list[NamedContext] = field(default_factory=list)
    tokens: list[dict] = field(default_factory=list)
    preferences: dict = field(default_factory=lambda: {"output": "table", "editor": "vim"})
    aliases: dict[str, str] = field(default_factory=dict)
    extra: dict = field(default_factory=dict)
    path: Path | None = None

    def get_context(self, name: str) -> Context | None:
        for nc in self.contexts:
            if nc.name == name:
                return nc.context
        return None

    def get_alias(self, name: str) -> str | None:
        return self.aliases.get(name)
