"""Memory bank: Markdown documents describing a project's state.

Layout:
    memory-bank/
    ├── .last_update                   # ISO-8601 time of the last successful update
    ├── productContext.md              # Overview, goals, features, architecture
    ├── activeContext.md               # Current focus, recent changes, open questions
    ├── systemPatterns.md              # Architectural/design patterns, technical decisions
    ├── decisionLog.md                 # Decisions, newest first (append-only)
    ├── progress.md                    # Tasks and milestones
    ├── daily/
    │   └── activeContext-2026-02-18.md   # One active context per day
    ├── sessions/
    │   └── session-2026-02-18T09-30-00-000Z.md
    └── archive/
        └── 2026-02/activeContext-2026-02-01.md
"""
