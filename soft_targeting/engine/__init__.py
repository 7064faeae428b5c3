"""Engine layer: collaborator contracts, timer manager, sandbox loop."""

from soft_targeting.engine.sandbox_loop import SandboxLoop, build_sandbox
from soft_targeting.engine.scheduler import TimerHandle, TimerManager

__all__ = ["SandboxLoop", "TimerHandle", "TimerManager", "build_sandbox"]
