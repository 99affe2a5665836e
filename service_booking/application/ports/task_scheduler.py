from abc import ABC, abstractmethod
from typing import Any, Callable


class TaskSchedulerPort(ABC):
    @abstractmethod
    def submit(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        """Run func after the current request has been answered."""
        raise NotImplementedError
