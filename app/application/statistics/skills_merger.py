"""Merge of member-entered and system-aggregated skills."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from app.domain.exceptions import DataFormatError
from app.domain.services.statistics_cleaner import decode_json_field

USER_ENTERED_SOURCE = "USER_ENTERED"


def decode_skills(record: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """Copy of ``record`` with a JSON-string ``skills`` value decoded."""
    if record is None:
        return None
    decoded = dict(record)
    skills = decode_json_field(decoded.get("skills"), "skills")
    if skills is None:
        skills = {}
    if not isinstance(skills, Mapping):
        raise DataFormatError("skills", "expected an object keyed by tag id")
    for tag_id, entry in skills.items():
        if not isinstance(entry, Mapping):
            raise DataFormatError("skills", f"entry for tag {tag_id!r} is not an object")
    decoded["skills"] = {tag_id: dict(entry) for tag_id, entry in skills.items()}
    return decoded


class SkillsMerger:
    """Builds the skill record returned for a member.

    Entered entries win over aggregated ones; aggregated entries only fill
    tags the member did not enter.
    """

    def complete(self, entered: Dict[str, Any], member: Mapping[str, Any]) -> Dict[str, Any]:
        """Attach the member identity and default entered skill attributes."""
        if "userHandle" in entered:
            entered.setdefault("handle", entered.pop("userHandle"))
        entered["userId"] = member.get("userId", entered.get("userId"))
        entered["handle"] = member.get("handle", entered.get("handle"))
        entered["handleLower"] = member.get("handleLower", entered.get("handleLower"))

        for entry in entered["skills"].values():
            entry.setdefault("sources", [USER_ENTERED_SOURCE])
            entry.setdefault("score", 0)
        return entered

    def merge(
        self,
        entered: Mapping[str, Any],
        aggregated: Optional[Mapping[str, Any]],
        member: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        record = decode_skills(entered)
        if member is not None:
            record = self.complete(record, member)

        extra = decode_skills(aggregated)
        if extra:
            for tag_id, entry in extra["skills"].items():
                if tag_id not in record["skills"]:
                    record["skills"][tag_id] = entry
        return record


__all__ = ["USER_ENTERED_SOURCE", "decode_skills", "SkillsMerger"]
