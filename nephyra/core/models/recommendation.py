"""
Recommendation — one rendered entry of the final ranked list.
"""

from __future__ import annotations

from pydantic import BaseModel

from nephyra.core.models.kernel import KernelCandidate


class Recommendation(BaseModel):
    rank: int
    candidate: KernelCandidate
    score: int
    explanation: str
    install_command: str | None = None
    preferred: bool = False

    def to_dict(self) -> dict:
        return {
            "rank": self.rank,
            "name": self.candidate.name,
            "version": self.candidate.version,
            "variant": self.candidate.variant.value,
            "installed": self.candidate.installed,
            "score": self.score,
            "explanation": self.explanation,
            "install_command": self.install_command,
            "preferred": self.preferred,
        }
