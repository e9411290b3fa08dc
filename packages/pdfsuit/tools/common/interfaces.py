"""Core interfaces and context objects shared by PDFSuit tools."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from ...core.utils import resolve_path


@dataclass
class ToolContext:
    """Holds shared execution state for a tool invocation."""

    input_path: Path | None = None
    output_path: Path | None = None
    inputs: list[Path] = field(default_factory=list)
    resources: dict[str, Any] = field(default_factory=dict)
    config: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.input_path is not None:
            self.input_path = resolve_path(self.input_path)
        if self.output_path is not None:
            self.output_path = resolve_path(self.output_path)
        self.inputs = [resolve_path(path) for path in self.inputs]

    def require_input(self) -> Path:
        if self.input_path is None:
            raise ValueError("ToolContext requires an input_path")
        return self.input_path

    def require_output(self) -> Path:
        if self.output_path is None:
            raise ValueError("ToolContext requires an output_path")
        return self.output_path

    def all_inputs(self) -> list[Path]:
        """Return ``inputs`` or, when empty, the single ``input_path``."""

        if self.inputs:
            return list(self.inputs)
        return [self.require_input()]

    def write_output(self, data: bytes, destination: Path | None = None) -> Path:
        target = destination or self.require_output()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        return target

    def with_updates(
        self,
        *,
        input_path: str | Path | None = None,
        output_path: str | Path | None = None,
        config: dict[str, Any] | None = None,
    ) -> "ToolContext":
        data = ToolContext(
            input_path=input_path or self.input_path,
            output_path=output_path or self.output_path,
            inputs=list(self.inputs),
            resources=dict(self.resources),
            config=dict(self.config),
        )
        if config:
            data.config.update(config)
        return data


class BaseTool:
    """Base class for all pluggable PDFSuit tools."""

    name: str

    def __init__(self, context: ToolContext) -> None:
        self.context = context

    def run(self) -> Any:  # pragma: no cover - to be implemented by subclasses
        raise NotImplementedError


ToolFactory = Callable[[ToolContext], BaseTool]
