"""Lock model for exclusive access to a run file.

A PID-based lock file next to the run file ensures only one splitkeeper
process rewrites the run at a time.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class Lock(BaseModel):
    """Lock written to <run file>.lock.

    Attributes:
        pid: Process ID of the lock holder.
        run_file: Run file being modified.
        command: Command that acquired the lock.
        started_at: When the lock was acquired.
        last_heartbeat: Last heartbeat update (for stale detection).
    """

    pid: int = Field(description="Process ID holding the lock")
    run_file: str = Field(description="Run file being modified")
    command: str = Field(description="Command that acquired lock")
    started_at: datetime = Field(default_factory=datetime.now)
    last_heartbeat: datetime = Field(default_factory=datetime.now)
