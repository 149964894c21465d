"""Prompt template builder.

System prompts live as Jinja2 templates under ``codeAgent/config/prompt_templates``
and are rendered in a sandboxed environment.
"""

import os
from pathlib import Path
from typing import Optional

from jinja2.sandbox import SandboxedEnvironment

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "config" / "prompt_templates"
COMPLETE_TOOL = "mark_complete"


class PromptBuilder:
    """Render role prompts from Jinja2 templates."""

    IDENTITY_TEMPLATE = "agent_identity.jinja2"
    BRANCH_NAME_TEMPLATE = "branch_name.jinja2"

    def __init__(self, template_dir: Optional[Path] = None) -> None:
        self.template_dir = Path(template_dir or TEMPLATE_DIR)
        self._env = SandboxedEnvironment(keep_trailing_newline=False)

    def _load_template(self, name: str) -> str:
        path = self.template_dir / name
        if not path.exists():
            raise FileNotFoundError(f"Prompt template not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def _render_template(self, template: str, params: dict) -> str:
        return self._env.from_string(template).render(**params).strip()

    def render(self, name: str, **params) -> str:
        """Render the template ``name`` (file name with extension)."""
        return self._render_template(self._load_template(name), params)

    def load_role_prompt(self, role: str, delegation_enabled: bool = False, **params) -> str:
        """Render the system prompt for ``role``.

        Args:
            role: Template name without extension (root, subtask, expert, ...)
            delegation_enabled: Whether delegation tools are offered to this run
            **params: Extra template parameters

        Returns:
            Rendered system prompt
        """
        params.setdefault("cwd", os.getcwd())
        params.setdefault("complete_tool", COMPLETE_TOOL)
        params.setdefault("plan_file", "plan.md")
        params["delegation_enabled"] = delegation_enabled
        params["agent_identity"] = self.render(self.IDENTITY_TEMPLATE, **params)
        return self.render(f"{role}.jinja2", **params)

    def load_branch_name_prompt(self) -> str:
        return self.render(self.BRANCH_NAME_TEMPLATE)
