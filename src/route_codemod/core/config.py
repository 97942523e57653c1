import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from route_codemod.models import HookRole

CONFIG_ENV_VAR = "ROUTE_CODEMOD_CONFIG"


class ConfigError(Exception):
    pass


class ExportRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    renamed_key: str | None = None
    strip_param_types: bool = False


class HookRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: HookRole
    canonical_name: str


class FlagRule(BaseModel):
    """``<owner>.<flag> = value`` assignments folded into the route object."""

    model_config = ConfigDict(frozen=True)

    owner: str
    flag: str
    key: str


def _default_exports() -> dict[str, ExportRule]:
    return {
        "links": ExportRule(),
        "HydrateFallback": ExportRule(),
        "loader": ExportRule(renamed_key="serverLoader", strip_param_types=True),
        "clientLoader": ExportRule(strip_param_types=True),
        "action": ExportRule(renamed_key="serverAction", strip_param_types=True),
        "clientAction": ExportRule(strip_param_types=True),
        "meta": ExportRule(strip_param_types=True),
        "ErrorBoundary": ExportRule(),
        "shouldRevalidate": ExportRule(strip_param_types=True),
        "headers": ExportRule(strip_param_types=True),
        "handle": ExportRule(),
    }


def _default_hooks() -> dict[str, HookRule]:
    return {
        "useLoaderData": HookRule(role=HookRole.PRIMARY_DATA, canonical_name="loaderData"),
        "useActionData": HookRule(role=HookRole.ACTION_RESULT, canonical_name="actionData"),
    }


def _default_flags() -> list[FlagRule]:
    return [FlagRule(owner="clientLoader", flag="hydrate", key="clientLoaderHydrate")]


class RewriteConfig(BaseModel):
    """Name registries driving the rewrite.

    The defaults describe Remix route modules migrating to ``defineRoute``.
    """

    model_config = ConfigDict(frozen=True)

    builder_name: str = "defineRoute"
    default_export_key: str = "Component"
    exports: dict[str, ExportRule] = Field(default_factory=_default_exports)
    hooks: dict[str, HookRule] = Field(default_factory=_default_hooks)
    flags: list[FlagRule] = Field(default_factory=_default_flags)
    bind_destructured_patterns: bool = False

    def is_recognized(self, name: str) -> bool:
        return name in self.exports

    def key_for(self, name: str) -> str:
        rule = self.exports.get(name)
        if rule is not None and rule.renamed_key:
            return rule.renamed_key
        return name

    def strips_param_types(self, name: str) -> bool:
        rule = self.exports.get(name)
        return rule is not None and rule.strip_param_types

    def flag_key(self, owner: str, flag: str) -> str | None:
        for rule in self.flags:
            if rule.owner == owner and rule.flag == flag:
                return rule.key
        return None


def load_config(path: str | Path | None = None) -> RewriteConfig:
    """Load a TOML config file, or ``$ROUTE_CODEMOD_CONFIG``, or the defaults."""
    if path is None:
        path = os.getenv(CONFIG_ENV_VAR) or None
    if path is None:
        return RewriteConfig()

    config_path = Path(path)
    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {config_path}") from None
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {config_path}: {exc}") from exc

    try:
        return RewriteConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config in {config_path}: {exc}") from exc
