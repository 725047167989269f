# core/interfaces.py
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class IModelInvoker(ABC):
    @abstractmethod
    def invoke(self, prompt: str, timeout_ms: Optional[int] = None) -> str:
        pass


class ITaskTracker(ABC):
    @abstractmethod
    def find_user_id_by_email(self, email: str) -> Optional[str]:
        pass

    @abstractmethod
    def create_page(self, children: List[Dict[str, Any]], properties: Dict[str, Any]) -> Dict[str, Any]:
        pass
