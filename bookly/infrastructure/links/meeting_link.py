from __future__ import annotations

import random
import string

from bookly.application.ports.meeting_link import MeetingLinkPort

# abc-defg-hij: 26**10 (~1.4e14) codes.
_GROUPS = (3, 4, 3)


class MeetLinkGenerator(MeetingLinkPort):
    def __init__(self, base_url: str = "https://meet.google.com", rng: random.Random | None = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._rng = rng or random.SystemRandom()

    def generate(self) -> str:
        code = "-".join(
            "".join(self._rng.choice(string.ascii_lowercase) for _ in range(size))
            for size in _GROUPS
        )
        return f"{self._base_url}/{code}"
