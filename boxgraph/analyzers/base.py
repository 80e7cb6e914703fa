"""Base classes for signature extraction backends."""

from abc import ABC, abstractmethod
from typing import List

from ..models import ClassDeclaration, FunctionSignature


class SignatureExtractor(ABC):
    """Contract for backends that pull declarations out of source text."""

    @abstractmethod
    def extract_signatures(self, text: str) -> List[FunctionSignature]:
        """Return function signatures in encounter order."""

    @abstractmethod
    def extract_classes(self, text: str) -> List[ClassDeclaration]:
        """Return class declarations in encounter order."""
