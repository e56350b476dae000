"""Solano CI trigger payload.

Solano builds branches, not Gerrit changes, so each patchset ref is
presented as a synthetic branch: ``refs/changes/02/2/2`` becomes branch
``changes/02/2/2`` with a forced refspec that fetches the change ref into
``refs/remotes/origin/changes/02/2/2``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from solanohook_core.errors import InvalidRef

REF_PREFIX = "refs/"
REMOTE_PREFIX = "refs/remotes/origin/"


@dataclass(frozen=True)
class SolanoPayload:
    branch: str
    refspec: tuple[str, ...]
    commit: str

    def to_dict(self) -> dict:
        return {"branch": self.branch, "refspec": list(self.refspec), "commit": self.commit}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


def build_payload(ref: str, commit_sha: str) -> SolanoPayload:
    """Build the Solano payload for a change ref.

    commit_sha is carried through for Solano's bookkeeping and has no effect
    on branch or refspec. Raises InvalidRef for anything outside refs/.
    """
    if not ref.startswith(REF_PREFIX) or ref == REF_PREFIX:
        raise InvalidRef(ref)
    branch = ref[len(REF_PREFIX) :]
    refspec = f"+{ref}:{REMOTE_PREFIX}{branch}"
    return SolanoPayload(branch=branch, refspec=(refspec,), commit=commit_sha)
