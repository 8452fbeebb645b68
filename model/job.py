# model/job.py
from enum import Enum
from typing import Literal
from pydantic import BaseModel

JobStatus = Literal["pending", "processing", "streaming", "done", "error"]


class StreamState(str, Enum):
    idle = "idle"
    streaming = "streaming"
    done = "done"
    errored = "errored"


class Job(BaseModel):
    id: str
    status: JobStatus
    processed: int = 0
    total: int = 0
