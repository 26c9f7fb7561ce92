from typing import Any, Callable, Protocol


class TaskRunner(Protocol):
    def submit(self, label: str, fn: Callable[..., Any], *args: Any) -> None:
        """Run fn detached from the caller. Results and failures go to the log only."""
        ...

    async def drain(self) -> None:
        """Wait for submitted work to finish. Called once on shutdown."""
        ...
