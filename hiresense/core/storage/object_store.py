"""File-based candidate store.

One JSON document per candidate plus a directory of agent traces. Writes go
through a temporary file and ``os.replace`` so a reader never sees a
half-written candidate, and the analysis and score are replaced together.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from ..models.analysis import AnalysisResult
from ..models.audit import AgentTrace
from ..models.candidate import Candidate


class CandidateNotFoundError(KeyError):
    """No candidate with the given identifier is stored."""


class CandidateStore:
    """Simple JSON-backed persistence layer for candidates."""

    def __init__(self, base_dir: str | Path | None = None):
        self.base_dir = Path(base_dir) if base_dir else Path("data/candidates")
        self.base_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Generic helpers
    # ------------------------------------------------------------------
    def _candidate_dir(self, candidate_id: str) -> Path:
        if not candidate_id or "/" in candidate_id or "\\" in candidate_id or candidate_id in (".", ".."):
            raise ValueError(f"Invalid candidate id: {candidate_id!r}")
        return self.base_dir / candidate_id

    def _candidate_path(self, candidate_id: str) -> Path:
        return self._candidate_dir(candidate_id) / "candidate.json"

    def _dump(self, path: Path, data: dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _load(self, path: Path) -> dict[str, Any] | None:
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    # ------------------------------------------------------------------
    # Candidates
    # ------------------------------------------------------------------
    def save_candidate(self, candidate: Candidate) -> None:
        self._dump(self._candidate_path(candidate.id), candidate.to_record())

    def load_candidate(self, candidate_id: str) -> Candidate | None:
        data = self._load(self._candidate_path(candidate_id))
        return Candidate.model_validate(data) if data else None

    def list_candidate_ids(self) -> list[str]:
        return sorted(p.parent.name for p in self.base_dir.glob("*/candidate.json"))

    def save_analysis(self, candidate_id: str, result: AnalysisResult) -> None:
        """Replace the candidate's analysis and score in one write.

        Raises:
            CandidateNotFoundError: If the candidate is not stored
        """
        path = self._candidate_path(candidate_id)
        data = self._load(path)
        if data is None:
            raise CandidateNotFoundError(candidate_id)

        data["ai_data"] = result.to_record()
        data["score"] = result.score
        self._dump(path, data)

    # ------------------------------------------------------------------
    # Agent traces for auditing and idempotency
    # ------------------------------------------------------------------
    def get_agent_trace(self, candidate_id: str, agent_type: str, input_hash: str) -> dict[str, Any] | None:
        path = self._candidate_dir(candidate_id) / "traces" / agent_type / f"{input_hash}.json"
        return self._load(path)

    def save_agent_trace(
        self,
        candidate_id: str,
        agent_type: str,
        input_hash: str,
        trace: AgentTrace,
    ) -> None:
        path = self._candidate_dir(candidate_id) / "traces" / agent_type / f"{input_hash}.json"
        self._dump(path, trace.model_dump(mode="json"))
