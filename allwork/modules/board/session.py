"""
Board session: the local copy of one team's board.

Writes are applied to the local copy first and then sent to Supabase.
Failed inserts are undone by removing the temporary row, failed deletes by
refetching, and failed status/assignee changes are left in place until the
next refetch. Any realtime notification for the team's tasks triggers a full
refetch that overwrites the local copy; concurrent refetches are not ordered,
so whichever resolves last wins.
"""

import asyncio
import concurrent.futures
import logging
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

from fastapi import HTTPException
from fastapi.concurrency import run_in_threadpool
from supabase import Client

from allwork.config import settings
from allwork.core.drag import DragOutcome, DragResolution, column_id, resolve_drop
from allwork.core.notifications import Notifier
from allwork.modules.board.filters import filter_tasks, group_by_assignee
from allwork.modules.board.schemas import BoardColumn, BoardSnapshot
from allwork.modules.members.schemas import TeamMemberResponse
from allwork.modules.members.service import MemberService
from allwork.modules.tasks.schemas import TaskCreate, TaskResponse, TaskStatus, TaskUpdate
from allwork.modules.tasks.service import TaskService
from allwork.modules.teams.service import TeamService

logger = logging.getLogger(__name__)

TEAM_LIST_PATH = "/"


class BoardSession:
    def __init__(
        self,
        team_id: int,
        user: Dict[str, Any],
        supabase: Client,
        feed=None,
        notifier: Optional[Notifier] = None,
        pulse_seconds: Optional[float] = None,
        on_change: Optional[Callable[["BoardSession"], Awaitable[None]]] = None,
    ):
        self.team_id = team_id
        self.user = user
        self.teams = TeamService(supabase)
        self.members_service = MemberService(supabase)
        self.tasks_service = TaskService(supabase)
        self.feed = feed
        self.notifier = notifier or Notifier()
        self.pulse_seconds = settings.realtime_pulse_seconds if pulse_seconds is None else pulse_seconds
        self.on_change = on_change

        self.team_name = ""
        self.members: List[TeamMemberResponse] = []
        self.tasks: List[TaskResponse] = []
        self.search = ""
        self.new_task_title = ""
        self.pulse = False
        self.redirect_to: Optional[str] = None

        self._channel = None
        self._pulse_handle: Optional[asyncio.TimerHandle] = None
        self._pulse_emit: Optional[asyncio.Future] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    # Lifecycle

    async def mount(self) -> None:
        """Initial load, then subscribe to the team's task changes"""
        self._loop = asyncio.get_running_loop()
        await self.refresh()
        if self.redirect_to or self.feed is None:
            return
        self._channel = await self.feed.subscribe(self.team_id, self._on_realtime_event)

    async def unmount(self) -> None:
        if self._pulse_handle is not None:
            self._pulse_handle.cancel()
            self._pulse_handle = None
        if self._pulse_emit is not None:
            self._pulse_emit.cancel()
            self._pulse_emit = None
        if self._channel is not None and self.feed is not None:
            channel, self._channel = self._channel, None
            await self.feed.unsubscribe(channel)

    # Reads

    async def refresh(self) -> None:
        """Refetch team name, members and tasks and overwrite the local copy"""
        try:
            team = await run_in_threadpool(self.teams.find_team, self.team_id)
            if team is None:
                logger.info(f"Team {self.team_id} not found; sending viewer back to team list")
                self.redirect_to = TEAM_LIST_PATH
                return
            members = await run_in_threadpool(
                self.members_service.ensure_members, self.team_id, self.user["id"], self.user.get("email")
            )
            tasks = await run_in_threadpool(self.tasks_service.list_tasks, self.team_id)
        except HTTPException as e:
            self.notifier.error("Could not load board", e.detail)
            return
        self.team_name = team.name
        self.members = members
        self.tasks = tasks

    def set_search(self, query: Optional[str]) -> None:
        self.search = query or ""

    @property
    def visible_tasks(self) -> List[TaskResponse]:
        return filter_tasks(self.tasks, self.search)

    def columns(self) -> List[BoardColumn]:
        by_assignee = group_by_assignee(self.visible_tasks)
        return [
            BoardColumn(id=column_id(m.user_id), member=m, tasks=by_assignee.get(m.user_id, []))
            for m in self.members
        ]

    def find_task(self, task_id: int) -> Optional[TaskResponse]:
        return next((t for t in self.tasks if t.id == task_id), None)

    def snapshot(self, drain: bool = True) -> BoardSnapshot:
        return BoardSnapshot(
            team_id=self.team_id,
            team_name=self.team_name,
            search=self.search,
            new_task_title=self.new_task_title,
            pulse=self.pulse,
            columns=self.columns(),
            notifications=self.notifier.drain() if drain else self.notifier.pending,
        )

    # Writes

    async def add_task(self, title: str) -> Optional[int]:
        """Show a temporary card at once, insert, then refetch. Returns the temporary id."""
        title = (title or "").strip()
        if not title:
            self.notifier.warning("Please type a task title first")
            return None

        temp_id = int(time.time() * 1000)
        optimistic = TaskResponse(
            id=temp_id,
            title=title,
            status=TaskStatus.TODO,
            assignee_id=self.user["id"],
            team_id=self.team_id,
            created_at=datetime.now(timezone.utc),
        )
        self.tasks = [optimistic] + self.tasks
        self.new_task_title = ""
        await self._emit()

        try:
            await run_in_threadpool(
                self.tasks_service.create_task,
                self.team_id,
                TaskCreate(title=title),
                self.user["id"],
                self.user.get("email"),
            )
        except HTTPException as e:
            self.tasks = [t for t in self.tasks if t.id != temp_id]
            self.notifier.error(f"Could not add task: {e.detail}")
            await self._emit()
            return temp_id

        self.notifier.success("Task added")
        await self.refresh()
        await self._emit()
        return temp_id

    async def change_status(self, task_id: int, status: TaskStatus) -> None:
        self._patch(task_id, status=TaskStatus(status))
        await self._emit()
        try:
            await run_in_threadpool(self.tasks_service.set_status, task_id, status)
        except HTTPException as e:
            # No rollback: the next refetch or realtime push corrects it
            self.notifier.error(f"Could not update status: {e.detail}")
            await self._emit()

    async def reassign(self, task_id: int, user_id: str) -> bool:
        task = self.find_task(task_id)
        if task is None or task.assignee_id == user_id:
            return False
        self._patch(task_id, assignee_id=user_id)
        self.notifier.info("Task reassigned", "The task moved to a new assignee")
        await self._emit()
        try:
            await run_in_threadpool(self.tasks_service.reassign, task_id, user_id)
        except HTTPException as e:
            self.notifier.error(f"Could not reassign task: {e.detail}")
            await self._emit()
        return True

    async def delete_task(self, task_id: int) -> bool:
        self.tasks = [t for t in self.tasks if t.id != task_id]
        await self._emit()
        try:
            await run_in_threadpool(self.tasks_service.delete_task, task_id)
        except HTTPException as e:
            self.notifier.error(f"Could not delete task: {e.detail}")
            await self.refresh()
            await self._emit()
            return False
        self.notifier.success("Task deleted", "The task went to the trash")
        await self._emit()
        return True

    async def save_task(self, task_id: int, changes: TaskUpdate) -> bool:
        """Detail panel save: one update, then refetch"""
        try:
            await run_in_threadpool(self.tasks_service.update_task, task_id, changes)
        except HTTPException as e:
            self.notifier.error(f"Could not save task: {e.detail}")
            await self._emit()
            return False
        self.notifier.success("Task saved")
        await self.refresh()
        await self._emit()
        return True

    async def drag_end(self, task_id: int, dx: float, dy: float, target: Optional[str]) -> DragResolution:
        """Apply a finished pointer gesture. A click leaves state alone; the caller opens the task."""
        resolution = resolve_drop(dx, dy, target)
        if resolution.outcome == DragOutcome.ASSIGN and resolution.user_id not in {m.user_id for m in self.members}:
            logger.info(f"Drop on unknown column {target} for task {task_id}; ignoring")
            return DragResolution(outcome=DragOutcome.NONE)
        if resolution.outcome == DragOutcome.DELETE:
            await self.delete_task(task_id)
        elif resolution.outcome == DragOutcome.ASSIGN:
            await self.reassign(task_id, resolution.user_id)
        return resolution

    # Realtime

    def _on_realtime_event(self, payload: Dict[str, Any]) -> Optional[concurrent.futures.Future]:
        # Realtime callbacks are plain functions; hop back onto the session's loop
        if self._loop is None:
            return None
        return asyncio.run_coroutine_threadsafe(self.handle_remote_change(payload), self._loop)

    async def handle_remote_change(self, payload: Optional[Dict[str, Any]] = None) -> None:
        logger.debug(f"Task change on team {self.team_id}; resyncing")
        self._start_pulse()
        await self.refresh()
        await self._emit()

    def _start_pulse(self) -> None:
        self.pulse = True
        if self._pulse_handle is not None:
            self._pulse_handle.cancel()
        loop = self._loop or asyncio.get_running_loop()
        self._pulse_handle = loop.call_later(self.pulse_seconds, self._end_pulse)

    def _end_pulse(self) -> None:
        self.pulse = False
        self._pulse_handle = None
        if self.on_change is not None:
            self._pulse_emit = asyncio.ensure_future(self._emit())
            self._pulse_emit.add_done_callback(self._pulse_emitted)

    def _pulse_emitted(self, future: asyncio.Future) -> None:
        if self._pulse_emit is future:
            self._pulse_emit = None
        if not future.cancelled() and future.exception() is not None:
            logger.warning(f"Pulse update for team {self.team_id} failed: {future.exception()}")

    # Helpers

    def _patch(self, task_id: int, **changes) -> None:
        self.tasks = [t.model_copy(update=changes) if t.id == task_id else t for t in self.tasks]

    async def _emit(self) -> None:
        if self.on_change is not None:
            await self.on_change(self)
