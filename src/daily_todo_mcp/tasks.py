"""
Daily to-do records and the text formatter behind get_daily_todo.

The list is compiled in. It is rebuilt on every call and never stored.
"""

from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

HEADER = "待办事项列表:"
DIVIDER = "---"


class Priority(str, Enum):
	"""Priority of a to-do item."""
	HIGH = "高"
	MEDIUM = "中"
	LOW = "低"


class TaskStatus(str, Enum):
	"""Status of a to-do item."""
	PENDING = "待办"
	IN_PROGRESS = "进行中"
	DONE = "已完成"


class TaskRecord(BaseModel):
	"""A single to-do item."""
	model_config = ConfigDict(frozen=True)

	title: str = Field(description="Short task title")
	description: str = Field(description="What needs to be done")
	due_date: date = Field(description="Calendar due date")
	priority: Priority
	status: TaskStatus

	def render(self) -> str:
		"""Render as a labeled paragraph terminated by the divider line."""
		return "\n".join([
			f"**{self.title}**",
			f"描述: {self.description}",
			f"截止日期: {self.due_date.isoformat()}",
			f"优先级: {self.priority.value}",
			f"状态: {self.status.value}",
			DIVIDER,
		])


def daily_tasks() -> list[TaskRecord]:
	"""Return the five daily to-do items in display order."""
	return [
		TaskRecord(
			title="完成项目需求文档",
			description="编写项目需求文档，包括功能需求、非功能需求和用户故事。",
			due_date=date(2024, 10, 5),
			priority=Priority.HIGH,
			status=TaskStatus.IN_PROGRESS,
		),
		TaskRecord(
			title="代码审查",
			description="对团队成员提交的代码进行审查，确保代码质量和规范性。",
			due_date=date(2024, 10, 6),
			priority=Priority.MEDIUM,
			status=TaskStatus.PENDING,
		),
		TaskRecord(
			title="数据库优化",
			description="优化数据库查询性能，减少响应时间。",
			due_date=date(2024, 10, 7),
			priority=Priority.LOW,
			status=TaskStatus.PENDING,
		),
		TaskRecord(
			title="客户反馈处理",
			description="处理客户反馈，解决用户遇到的问题。",
			due_date=date(2024, 10, 8),
			priority=Priority.HIGH,
			status=TaskStatus.PENDING,
		),
		TaskRecord(
			title="项目进度报告",
			description="编写项目进度报告，汇报项目进展情况。",
			due_date=date(2024, 10, 9),
			priority=Priority.MEDIUM,
			status=TaskStatus.PENDING,
		),
	]


def format_daily_todo(messages: Optional[Any] = None, model: str = "sonar-pro") -> str:
	"""
	Build the to-do list text block.

	Args:
		messages: Accepted for call compatibility, ignored
		model: Accepted for call compatibility, ignored

	Returns:
		Header line, a blank line, then one paragraph per task
	"""
	paragraphs = [task.render() for task in daily_tasks()]
	return f"{HEADER}\n\n" + "\n".join(paragraphs)
