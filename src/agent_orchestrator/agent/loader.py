"""
Loads agent configurations from YAML files.

Layout searched for a bare agent name:

    <agents_dir>/<name>.yaml
    <agents_dir>/teams/<team>/<name>.yaml

String values may reference environment variables as ${VAR} or ${VAR:default}.
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from ..config import AgentConfig
from ..errors import ConfigurationError

logger = structlog.get_logger()

ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")
YAML_SUFFIXES = (".yaml", ".yml")


@dataclass
class AgentInfo:
    """Summary of an agent file found on disk."""

    name: str
    id: str
    path: Path


class AgentLoader:
    """Reads, lists and writes agent YAML files."""

    def __init__(self, agents_dir: str | Path = "agents"):
        self.agents_dir = Path(agents_dir)

    def load(self, name_or_path: str | Path) -> AgentConfig:
        """Load an agent configuration by name or file path."""
        path = self.resolve_path(name_or_path)
        if not path.exists():
            raise ConfigurationError(f"Agent configuration not found: {path}")

        logger.info("Loading agent configuration", path=str(path))

        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigurationError(f"Agent configuration must be a mapping: {path}")

        return self.to_agent_config(expand_env_vars(raw))

    def list_agents(self) -> list[AgentInfo]:
        """List agents in the agents directory and its team subdirectories."""
        agents = []
        for path in self._candidate_files():
            try:
                raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning("Failed to load agent file", path=str(path), error=str(e))
                continue
            if not isinstance(raw, dict) or "name" not in raw:
                logger.warning("Skipping agent file without a name", path=str(path))
                continue
            agents.append(AgentInfo(
                name=str(raw["name"]),
                id=str(raw.get("id", path.stem)),
                path=path,
            ))
        return agents

    def save(self, config: dict[str, Any], output_path: str | Path) -> Path:
        """Write a raw agent configuration mapping to a YAML file."""
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            yaml.safe_dump(config, sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )
        logger.info("Agent configuration saved", path=str(path))
        return path

    def resolve_path(self, name_or_path: str | Path) -> Path:
        candidate = Path(name_or_path)
        if candidate.suffix in YAML_SUFFIXES:
            return candidate

        direct = self.agents_dir / f"{name_or_path}.yaml"
        if direct.exists():
            return direct

        teams_dir = self.agents_dir / "teams"
        if teams_dir.is_dir():
            for team_dir in sorted(p for p in teams_dir.iterdir() if p.is_dir()):
                team_file = team_dir / f"{name_or_path}.yaml"
                if team_file.exists():
                    return team_file

        return direct

    @staticmethod
    def to_agent_config(raw: dict[str, Any]) -> AgentConfig:
        """Map the YAML schema onto AgentConfig."""
        name = raw.get("name")
        description = raw.get("description") or ""

        system_prompt = raw.get("prompt") or f"You are {name}"
        if description:
            system_prompt = f"{description}\n\n{system_prompt}"

        delegates = (raw.get("team") or {}).get("can_delegate_to") or []
        if delegates:
            system_prompt += f"\n\nYou can delegate tasks to: {', '.join(delegates)}"

        llm = dict(raw.get("llm") or {})
        if "max_tokens" not in llm and "maxTokens" in llm:
            llm["max_tokens"] = llm.pop("maxTokens")

        fields: dict[str, Any] = {
            "name": name,
            "description": description,
            "llm": llm,
            "system_prompt": system_prompt,
            "tools": raw.get("tools") or [],
            "memory": raw.get("memory") or {},
        }
        # Left unset so Settings.max_iterations applies
        max_iterations = raw.get("max_iterations", raw.get("maxIterations"))
        if max_iterations is not None:
            fields["max_iterations"] = max_iterations

        try:
            return AgentConfig(**fields)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid agent configuration: {e}") from e

    def _candidate_files(self) -> list[Path]:
        files: list[Path] = []
        if self.agents_dir.is_dir():
            files.extend(sorted(p for p in self.agents_dir.iterdir() if p.suffix in YAML_SUFFIXES))
        teams_dir = self.agents_dir / "teams"
        if teams_dir.is_dir():
            for team_dir in sorted(p for p in teams_dir.iterdir() if p.is_dir()):
                files.extend(sorted(p for p in team_dir.iterdir() if p.suffix in YAML_SUFFIXES))
        return files


def expand_env_vars(value: Any) -> Any:
    """Recursively replace ${VAR} and ${VAR:default} in strings.

    An unset variable without a default is left as written.
    """
    if isinstance(value, str):
        def replace(match: re.Match) -> str:
            expr = match.group(1)
            if ":" in expr:
                var_name, default = expr.split(":", 1)
                return os.environ.get(var_name.strip()) or default.strip()
            return os.environ.get(expr.strip(), match.group(0))

        return ENV_VAR_PATTERN.sub(replace, value)
    if isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    if isinstance(value, dict):
        return {key: expand_env_vars(item) for key, item in value.items()}
    return value
