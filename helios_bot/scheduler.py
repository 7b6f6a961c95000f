# helios_bot/scheduler.py

"""
Sub-schedulers and the daily master loop.

A sub-scheduler repeats a fixed task list a fixed number of times with a
fixed pause between runs. The master loop starts every sub-scheduler at
once, waits for all of them, then sleeps until 24 hours after the session
started and goes again.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timedelta
from functools import partial
from typing import Awaitable, Callable, Sequence, Union

import pytz

from .client import ChainClient
from .config import SESSION_PERIOD_SECONDS, Settings
from .tasks import MAIN_TASKS, TOKEN_TASKS

logger = logging.getLogger(__name__)

Task = Callable[[ChainClient], Awaitable[None]]
SubScheduler = Callable[[ChainClient], Awaitable[int]]
Sleep = Callable[[float], Awaitable[None]]

SESSION_PERIOD = timedelta(seconds=SESSION_PERIOD_SECONDS)


def _task_name(task) -> str:
    if isinstance(task, partial):
        task = task.func
    return getattr(task, "__name__", repr(task))


def _short_message(exc: BaseException) -> str:
    # web3 errors carry a one-line ``message``; fall back to str().
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or exc.__class__.__name__


def _format_duration(seconds: float) -> str:
    hours, rest = divmod(int(seconds), 3600)
    return f"{hours}h {rest // 60}m"


# --- Timing helpers ---

def next_session_time(session_start: datetime) -> datetime:
    """Same wall-clock time on the following day."""
    return session_start + SESSION_PERIOD


def seconds_until(deadline: float, now: float) -> float:
    return max(0.0, deadline - now)


# --- Sub-schedulers ---

async def run_sub_scheduler(
        client: ChainClient,
        label: str,
        tasks: Union[Task, Sequence[Task]],
        *,
        runs: int,
        run_interval: float,
        task_delay: float = 0.0,
        sleep: Sleep = asyncio.sleep,
) -> int:
    """Run ``tasks`` in order ``runs`` times and return the number of runs.

    An exception raised by a task is logged and the next task starts; a run
    is never aborted or retried. ``task_delay`` is paused after every task,
    ``run_interval`` between runs (not after the last one).
    """
    if callable(tasks):
        tasks = [tasks]

    logger.info(">>> [%s]: Starting %d runs @ %s interval...", label, runs, _format_duration(run_interval))

    completed = 0
    for run in range(1, runs + 1):
        logger.info("--- [%s] Running sequence #%d of %d ---", label, run, runs)
        started = time.monotonic()

        for task in tasks:
            try:
                await task(client)
            except Exception as exc:
                logger.error("❌ A critical error occurred during %s: %s", _task_name(task), _short_message(exc))
            if task_delay > 0:
                logger.info("  ... waiting %ss ...", task_delay)
                await sleep(task_delay)

        completed += 1
        logger.info("--- [%s] Sequence #%d finished in %.1f seconds. ---", label, run, time.monotonic() - started)

        if run < runs:
            logger.info("...[%s] Waiting %s for next sequence...", label, _format_duration(run_interval))
            await sleep(run_interval)

    logger.info(">>> [%s]: ALL RUNS COMPLETE. <<<", label)
    return completed


async def run_main_tasks(client: ChainClient, settings: Settings, *, sleep: Sleep = asyncio.sleep) -> int:
    return await run_sub_scheduler(
        client,
        "SCHEDULER 1",
        MAIN_TASKS,
        runs=settings.main_runs,
        run_interval=settings.run_interval_seconds,
        task_delay=settings.task_delay_seconds,
        sleep=sleep,
    )


async def run_token_deploy(client: ChainClient, settings: Settings, *, sleep: Sleep = asyncio.sleep) -> int:
    return await run_sub_scheduler(
        client,
        "SCHEDULER 2",
        TOKEN_TASKS,
        runs=settings.token_runs,
        run_interval=settings.run_interval_seconds,
        sleep=sleep,
    )


def default_schedulers(settings: Settings) -> list[SubScheduler]:
    return [
        partial(run_main_tasks, settings=settings),
        partial(run_token_deploy, settings=settings),
    ]


# --- Master scheduler ---

async def run_session(client: ChainClient, schedulers: Sequence[SubScheduler]) -> list:
    """Run every sub-scheduler concurrently and wait for all of them.

    A sub-scheduler that raises is logged; the others keep running.
    """
    results = await asyncio.gather(
        *(scheduler(client) for scheduler in schedulers),
        return_exceptions=True,
    )
    for scheduler, result in zip(schedulers, results):
        if isinstance(result, BaseException):
            logger.error(
                "❌ Scheduler %s stopped with an unexpected error",
                _task_name(scheduler),
                exc_info=(type(result), result, result.__traceback__),
            )
    return results


async def schedule_daily_runs(
        client: ChainClient,
        settings: Settings,
        *,
        schedulers: Sequence[SubScheduler] | None = None,
        sessions: int | None = None,
        sleep: Sleep = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = lambda: datetime.now(pytz.utc),
) -> int:
    """Run one session per day, ``sessions`` times or forever when None.

    The wait is measured on ``clock`` (monotonic) from the session start, so
    a long session shortens the pause instead of pushing the next start.
    """
    if schedulers is None:
        schedulers = default_schedulers(settings)

    completed = 0
    while sessions is None or completed < sessions:
        session_start = now()
        session_start_clock = clock()
        logger.info(">>> Starting new daily session at %s <<<", session_start.strftime("%Y-%m-%d %H:%M:%S %Z"))

        await run_session(client, schedulers)
        completed += 1
        logger.info(">>> Daily session complete. All schedules finished. <<<")

        if sessions is not None and completed >= sessions:
            break

        next_start = next_session_time(session_start)
        wait = seconds_until(session_start_clock + SESSION_PERIOD_SECONDS, clock())
        logger.info("Next session scheduled to start at: %s", next_start.strftime("%Y-%m-%d %H:%M:%S %Z"))
        logger.info(
            "Waiting for approximately %d hours and %d minutes to maintain the 24-hour cycle.",
            wait // 3600,
            (wait % 3600) // 60,
        )
        await sleep(wait)

    return completed
