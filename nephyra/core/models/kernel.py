"""
Kernel models — catalog candidates and their scored form.

A candidate is one kernel package, installed or available. The catalog
keys candidates by ``name``; the scoring engine turns each one into a
ScoredCandidate carrying an integer score and a readable explanation.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class Variant(StrEnum):
    """Coarse kernel classification derived from name/description."""

    STANDARD = "Standard"
    LTS = "LTS"
    ZEN = "Zen"
    REALTIME = "RealTime"
    HARDENED = "Hardened"
    MAINLINE = "Mainline"


class KernelCandidate(BaseModel):
    """A kernel eligible for scoring.

    ``description`` is annotated in place during catalog enhancement, and
    ``variant`` may be overridden there too.
    """

    name: str
    version: str = ""
    description: str = ""
    variant: Variant = Variant.STANDARD
    installed: bool = False

    def haystack(self) -> str:
        """Lower-cased name + description, used for substring rules."""
        return f"{self.name} {self.description}".lower()


class ScoredCandidate(BaseModel):
    """A candidate with its score and justification."""

    candidate: KernelCandidate
    score: int = 0
    explanation: str

    @property
    def name(self) -> str:
        return self.candidate.name
