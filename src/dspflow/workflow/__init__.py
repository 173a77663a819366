"""dspflow workflow — plot orchestration and the session store."""

from dspflow.workflow.orchestrator import PlotOrchestrator
from dspflow.workflow.serialization import SessionSnapshot
from dspflow.workflow.session import UploadReport, WorkflowSession
from dspflow.workflow.slots import PlotSlot, SlotStatus

__all__ = [
    # Slots
    "PlotSlot",
    "SlotStatus",
    # Orchestration
    "PlotOrchestrator",
    # Session
    "UploadReport",
    "WorkflowSession",
    "SessionSnapshot",
]
