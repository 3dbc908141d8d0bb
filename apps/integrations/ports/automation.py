# apps/integrations/ports/automation.py
from abc import ABC, abstractmethod


class IAutomationClient(ABC):
    @abstractmethod
    def dispatch(self, payload: dict) -> None:
        """Wysyła zadanie do systemu automatyzacji; błąd -> AutomationCallFailed."""
        pass
