# Role: Process-wide service objects shared by routers. Routes read deps.orchestrator at call time,
# so tests (or an alternate bootstrap) can swap it without touching the routers.

from headcall.core.call_orchestrator import CallOrchestrator

orchestrator = CallOrchestrator()
