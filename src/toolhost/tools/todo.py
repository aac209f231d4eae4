"""TodoWrite tool: echo the calling agent's task list back as text."""

import json
from collections.abc import Callable
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from toolhost.catalogue import ToolName
from toolhost.policy import truncate_output
from toolhost.tools.toolset import HostToolset


class TodoItem(BaseModel):
    """One entry of the agent's task list."""

    content: str = Field(min_length=1)
    status: Literal["pending", "in_progress", "completed"]
    activeForm: str = Field(min_length=1)


_TODO_LIST = TypeAdapter(list[TodoItem])


class TodoTools(HostToolset):
    """Task tracking. Stateless: nothing is stored between calls."""

    def get_tools(self) -> dict[ToolName, Callable]:
        """Get todo tools keyed by tool name."""
        return {ToolName.TODO_WRITE: self.todo_write}

    async def todo_write(
        self,
        todos: Annotated[
            list[dict[str, Any]],
            Field(description="Task list: [{content, status, activeForm}, ...]"),
        ],
    ) -> dict:
        """Format the task list for display."""
        try:
            items = _TODO_LIST.validate_python(todos)
        except ValidationError as e:
            return self._create_error_response(
                error="invalid_arguments", message=f"Invalid todo list: {e}"
            )

        payload = json.dumps(todos, indent=2, ensure_ascii=False)
        counts = {status: 0 for status in ("pending", "in_progress", "completed")}
        for item in items:
            counts[item.status] += 1

        return self._create_success_response(
            result=truncate_output(f"TodoWrite: {payload}"),
            message=", ".join(f"{count} {status}" for status, count in counts.items()),
        )
