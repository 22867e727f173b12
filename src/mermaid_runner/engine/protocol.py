"""Engine boundary — the single-instance parser/renderer being serialized.

The runtime never looks inside the engine. It needs five things from it:

    initialize(config)          ─ replace the site configuration
    get_config()                ─ current configuration (MermaidConfig)
    update_site_config(partial) ─ merge keys into the site configuration
    await parse(text, options)  ─ validity check → bool
    await render(id, text, el)  ─ RenderResult(svg, bind_functions)

Engines are assumed unsafe for overlapping calls; the queue and the
scanner guarantee they never see two at once.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from mermaid_runner.core.errors import ConfigError


class MermaidConfig(BaseModel):
    """Engine configuration.

    Accepts camelCase keys (``startOnLoad``, ``deterministicIds``,
    ``deterministicIDSeed``) as well as field names. Unknown keys
    (``theme``, ``flowchart`` ...) are kept and handed to the engine.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    start_on_load: bool | None = Field(default=None, alias="startOnLoad")
    deterministic_ids: bool = Field(default=False, alias="deterministicIds")
    deterministic_id_seed: str | None = Field(default=None, alias="deterministicIDSeed")

    def merged(self, partial: Mapping[str, Any]) -> MermaidConfig:
        """Return a copy with *partial* merged over this config."""
        aliases = {
            name: info.alias
            for name, info in type(self).model_fields.items()
            if info.alias
        }
        data = self.model_dump(by_alias=True)
        for key, value in partial.items():
            data[aliases.get(key, key)] = value
        return type(self).model_validate(data)

    def to_engine_dict(self) -> dict[str, Any]:
        """camelCase dict without unset optional keys."""
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass
class ParseOptions:
    """Options for ``parse``.

    suppress_errors: return ``False`` for invalid text instead of raising.
    """

    suppress_errors: bool = False


@dataclass
class RenderResult:
    """What a successful render produces."""

    svg: str
    bind_functions: Callable[[Any], Any] | None = None
    """Called with the container after its content was replaced."""


@runtime_checkable
class DiagramEngine(Protocol):
    """Parser/renderer the runtime drives."""

    def initialize(self, config: MermaidConfig | Mapping[str, Any]) -> None: ...

    def get_config(self) -> MermaidConfig: ...

    def update_site_config(self, partial: Mapping[str, Any]) -> MermaidConfig: ...

    async def parse(self, text: str, options: ParseOptions | None = None) -> bool: ...

    async def render(
        self, id: str, text: str, container: Any | None = None
    ) -> RenderResult: ...


def coerce_config(config: MermaidConfig | Mapping[str, Any] | None) -> MermaidConfig:
    """Accept a ``MermaidConfig``, a plain mapping or ``None``.

    Raises:
        ConfigError: The mapping does not validate.
    """
    if config is None:
        return MermaidConfig()
    if isinstance(config, MermaidConfig):
        return config.model_copy(deep=True)
    try:
        return MermaidConfig.model_validate(dict(config))
    except ValidationError as e:
        raise ConfigError(f"Invalid engine configuration: {e.error_count()} error(s)", cause=e) from e
