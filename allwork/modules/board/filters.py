from typing import Dict, List, Optional

from allwork.modules.tasks.schemas import TaskResponse


def filter_tasks(tasks: List[TaskResponse], query: Optional[str]) -> List[TaskResponse]:
    """Case-insensitive substring match on the title; an empty query keeps everything."""
    needle = (query or "").lower()
    if not needle:
        return list(tasks)
    return [t for t in tasks if needle in (t.title or "").lower()]


def group_by_assignee(tasks: List[TaskResponse]) -> Dict[str, List[TaskResponse]]:
    columns: Dict[str, List[TaskResponse]] = {}
    for task in tasks:
        if task.assignee_id:
            columns.setdefault(task.assignee_id, []).append(task)
    return columns
