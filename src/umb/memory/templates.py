"""Seed content for memory-bank documents."""

from __future__ import annotations

IN_PROGRESS = "(In progress)"

STATISTICS_PLACEHOLDER = """\
- Time Spent: 0h 0m
- Estimated Cost: $0
- Files Created: 0
- Files Modified: 0
- Files Deleted: 0
- Lines of Code Added: 0
- Lines of Code Removed: 0
- Total Lines of Code: 0"""

README = """\
# Memory Bank

This directory contains the memory bank for your project.
It helps maintain context and documentation across development sessions.

## Structure

- daily/: Daily context files
- sessions/: Session tracking files
- archive/: Archived files
"""


def product_context(ts: str) -> str:
    return f"""\
# Product Context

## Project Overview
-

## Goals and Objectives
-

## Core Features
-

## Architecture Overview
-

---
Footnotes:
[{ts}] - Created product context
"""


def active_context() -> str:
    return f"""\
# Active Context

## Current Focus
-

## Recent Changes
-

## Open Questions/Issues
-

## Statistics
{STATISTICS_PLACEHOLDER}
"""


def system_patterns(ts: str) -> str:
    return f"""\
# System Patterns

## Architectural Patterns
-

## Design Patterns
-

## Technical Decisions
-

---
[{ts}] - Created system patterns
"""


def decision_log() -> str:
    return """\
# Decision Log

## Decisions
-

"""


def progress() -> str:
    return """\
# Progress

## Current Tasks
-

## Completed Tasks
-

## Upcoming Tasks
-

## Milestones
-

"""


def daily_context(date_str: str) -> str:
    return f"""\
# Active Context - {date_str}

## Current Focus
-

## Recent Changes
-

## Open Questions/Issues
-

## Statistics
{STATISTICS_PLACEHOLDER}
"""


def session(ts: str) -> str:
    return f"""\
# Development Session - {ts}

## Start Time
{ts}

## End Time
{IN_PROGRESS}

## Focus
-

## Notes
-

## Statistics
- Time Spent: 0h 0m
- Estimated Cost: $0
"""
