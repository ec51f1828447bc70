# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

"""Record id generation. Ids are human readable and derived from content."""

import re
import time
from typing import Callable, Container, Optional


def slugify(text: str) -> str:
    cleaned = re.sub(r"[^a-z0-9\s]", "", (text or "").lower())
    return re.sub(r"\s+", "-", cleaned.strip())


def unique_id(base_id: str, existing: Container[str]) -> str:
    """Appends -1, -2, ... to base_id until it is not in existing."""
    candidate = base_id
    counter = 1
    while candidate in existing:
        candidate = f"{base_id}-{counter}"
        counter += 1
    return candidate


def team_member_id(name: str) -> str:
    lowered = re.sub(r"\s+", "-", (name or "").lower())
    return re.sub(r"[^a-z0-9-]", "", lowered)


def event_id(title: str, date: str) -> str:
    return f"{slugify(title)}-{re.sub(r'[^0-9]', '', date or '')}"


def club_id(name: str, now_ms: Optional[Callable[[], int]] = None) -> str:
    clock = now_ms or (lambda: int(time.time() * 1000))
    suffix = str(clock())[-6:]
    return f"{slugify(name)[:50]}-{suffix}"


def magazine_id(year: str, title: str) -> str:
    return f"torque-{year}-{slugify(title)[:30]}"


def achievement_id(competition_name: str, year: str) -> str:
    return f"{slugify(competition_name)}-{year}"


def hackathon_id(name: str) -> str:
    return slugify(name)[:50]
