"""
Configuration data models for statecraft.

These models define the structure of the .statecraft.json project file
written by ``statecraft init`` and read by ``statecraft sync``. Keys are
camelCase on disk and snake_case in Python.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from statecraft.core.constants import (
    INIT_INCLUDE_TASK_SPEC_FORMAT_DEFAULT,
    INIT_REQUIRE_SPEC_FILE_DEFAULT,
    INIT_STRICT_MODE_DEFAULT,
)


class RuleOptions(BaseModel):
    """
    Switches that change the generated AI rule text.

    Example:
        >>> RuleOptions(strict_mode=False).include_task_spec_format
        True
    """

    strict_mode: bool = Field(
        default=INIT_STRICT_MODE_DEFAULT,
        description="Tell assistants to run validate after every board edit",
    )
    require_spec_file: bool = Field(
        default=INIT_REQUIRE_SPEC_FILE_DEFAULT,
        description="Every task needs a spec file before it can move to Ready",
    )
    include_task_spec_format: bool = Field(
        default=INIT_INCLUDE_TASK_SPEC_FORMAT_DEFAULT,
        description="Append the task spec file template to the rule",
    )


class StatecraftConfig(BaseModel):
    """
    Project configuration stored in .statecraft.json.

    Every field is required and strictly typed so a hand-edited file with a
    missing or mistyped key is rejected instead of silently defaulted.

    Example:
        >>> config = StatecraftConfig.model_validate({
        ...     "boardPath": "board.yaml", "tasksDir": "tasks",
        ...     "strictMode": True, "requireSpecFile": False,
        ...     "includeTaskSpecFormat": True,
        ...     "cursor": True, "claude": False, "codex": False,
        ... })
        >>> config.board_path
        'board.yaml'
    """

    board_path: str = Field(..., description="Board file, relative to the project root")
    tasks_dir: str = Field(..., description="Task spec directory, relative to the board")
    strict_mode: bool
    require_spec_file: bool
    include_task_spec_format: bool
    cursor: bool = Field(..., description="Maintain .cursor/rules/statecraft.mdc")
    claude: bool = Field(..., description="Maintain .claude/rules/statecraft.md")
    codex: bool = Field(..., description="Maintain the Statecraft section of AGENTS.md")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        strict=True,
    )

    @property
    def rule_options(self) -> RuleOptions:
        """Rule switches as a RuleOptions."""
        return RuleOptions(
            strict_mode=self.strict_mode,
            require_spec_file=self.require_spec_file,
            include_task_spec_format=self.include_task_spec_format,
        )

    def to_json_dict(self) -> dict[str, object]:
        """Serialize with the on-disk camelCase keys."""
        return self.model_dump(by_alias=True)
