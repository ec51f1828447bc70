"""
Per-entity rules on top of ContentRepository: id assignment, timestamps,
defaults, and the public (display) views.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Type

from dacite import DaciteError

from cms.errors import ConflictError, NotFoundError, ValidationFailed
from cms.repository import ContentRepository
from content import ids
from content.json_utils import from_record, to_record
from content.types import Club, Event, Hackathon, InterIITAchievement, Magazine, TeamMember

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = ("id", "createdAt")


def now_iso() -> str:
    """UTC timestamp with millisecond precision, e.g. 2024-05-01T10:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def _digits(value: Optional[str]) -> Optional[int]:
    cleaned = re.sub(r"[^0-9]", "", value or "")
    return int(cleaned) if cleaned else None


def _matches(query: str, *values: Optional[str]) -> bool:
    needle = query.lower()
    return any(needle in (value or "").lower() for value in values)


class ContentService:
    entity: Type = None
    label = "Record"

    def __init__(self, repository: ContentRepository, clock: Callable[[], str] = now_iso):
        self.repository = repository
        self.clock = clock

    @property
    def kind(self) -> str:
        return self.repository.kind

    # Hooks for subclasses

    def _prepare(self, data: dict) -> dict:
        return data

    def _new_id(self, data: dict, existing: Dict[str, dict]) -> str:
        raise NotImplementedError

    def _check(self, record: dict, existing: Dict[str, dict]) -> None:
        pass

    def _after_write(self, record: dict) -> None:
        pass

    def _after_delete(self, record: dict) -> None:
        pass

    def _search_values(self, record: dict) -> Iterable[Optional[str]]:
        return ()

    # Operations

    def _normalize(self, record: dict) -> dict:
        try:
            return to_record(from_record(self.entity, record))
        except (DaciteError, ValueError, TypeError) as exc:
            raise ValidationFailed(f"Invalid {self.label.lower()} data: {exc}") from exc

    def list_all(self) -> Dict[str, dict]:
        return self.repository.all()

    def get(self, record_id: str) -> dict:
        record = self.repository.get(record_id)
        if record is None:
            raise NotFoundError(f"{self.label} not found")
        return record

    def create(self, data: dict) -> dict:
        existing = self.repository.all()
        data = self._prepare(dict(data))
        now = self.clock()
        record = self._normalize(
            {**data, "id": self._new_id(data, existing), "createdAt": now, "updatedAt": now}
        )
        self._check(record, existing)
        created = self.repository.create(record)
        logger.info("Created %s %s", self.kind, created["id"])
        self._after_write(created)
        return created

    def update(self, record_id: str, changes: dict) -> dict:
        current = self.get(record_id)
        changes = {k: v for k, v in changes.items() if k not in IMMUTABLE_FIELDS}
        merged = self._normalize({**current, **changes, "updatedAt": self.clock()})
        others = {k: v for k, v in self.repository.all().items() if k != record_id}
        self._check(merged, others)
        updated = self.repository.update(record_id, merged)
        logger.info("Updated %s %s", self.kind, record_id)
        self._after_write(updated)
        return updated

    def delete(self, record_id: str) -> dict:
        record = self.get(record_id)
        self.repository.delete(record_id)
        logger.info("Deleted %s %s", self.kind, record_id)
        self._after_delete(record)
        return record

    def for_display(self) -> List[dict]:
        return list(self.repository.all().values())

    def search(self, query: str) -> List[dict]:
        if not query:
            return self.for_display()
        return [r for r in self.for_display() if _matches(query, *self._search_values(r))]


class TeamService(ContentService):
    entity = TeamMember
    label = "Team member"

    def _new_id(self, data, existing):
        record_id = ids.team_member_id(data.get("name", ""))
        if not record_id:
            raise ValidationFailed("Team member name must contain letters or digits")
        if record_id in existing:
            raise ConflictError("Team member with this name already exists")
        return record_id

    def _check(self, record, existing):
        email = record["email"].lower()
        for other in existing.values():
            if other.get("id") != record["id"] and (other.get("email") or "").lower() == email:
                raise ConflictError("A team member with this email already exists")

    def _search_values(self, record):
        return (record.get("name"), record.get("position"), record.get("email"))

    def by_category(self, category: str) -> List[dict]:
        return [m for m in self.for_display() if m.get("category") == category]

    def leadership(self) -> List[dict]:
        return [
            m
            for m in self.for_display()
            if m.get("isSecretary") or m.get("isCoordinator") or m.get("category") == "leadership"
        ]

    def storage_info(self) -> dict:
        return self.repository.storage_info()


EVENT_DEFAULTS = {
    "location": "IITGN Campus",
    "duration": "1 day",
    "participants": "50+",
    "organizer": "Technical Council",
}


class EventService(ContentService):
    entity = Event
    label = "Event"

    def _prepare(self, data):
        for key, default in EVENT_DEFAULTS.items():
            if not (data.get(key) or "").strip():
                data[key] = default
        return data

    def _new_id(self, data, existing):
        return ids.unique_id(ids.event_id(data.get("title", ""), data.get("date", "")), existing)

    def _search_values(self, record):
        return (
            record.get("title"),
            record.get("description"),
            record.get("organizer"),
            record.get("category"),
        )

    def for_display(self):
        events = [e for e in self.repository.all().values() if not e.get("draft")]
        return sorted(events, key=lambda e: e.get("date") or "", reverse=True)

    def by_category(self, category: str) -> List[dict]:
        wanted = category.lower()
        return [e for e in self.for_display() if (e.get("category") or "").lower() == wanted]

    def recent(self, limit: int = 6) -> List[dict]:
        return self.for_display()[:limit]


CLUB_PUBLIC_FIELDS = ("id", "name", "description", "type", "category", "logoPath")


class ClubService(ContentService):
    entity = Club
    label = "Club"

    def __init__(self, repository, clock=now_iso, now_ms: Optional[Callable[[], int]] = None):
        super().__init__(repository, clock)
        self.now_ms = now_ms

    def _new_id(self, data, existing):
        return ids.unique_id(ids.club_id(data.get("name", ""), self.now_ms), existing)

    def _search_values(self, record):
        return (record.get("name"), record.get("description"), record.get("category"))

    def for_display(self):
        return [
            {key: club.get(key) for key in CLUB_PUBLIC_FIELDS}
            for club in self.repository.all().values()
        ]

    def by_type(self, club_type: str) -> List[dict]:
        return [c for c in self.for_display() if c.get("type") == club_type]


class MagazineService(ContentService):
    entity = Magazine
    label = "Magazine"

    def __init__(self, repository, clock=now_iso, uploads=None):
        super().__init__(repository, clock)
        self.uploads = uploads

    def _new_id(self, data, existing):
        return ids.unique_id(
            ids.magazine_id(data.get("year", ""), data.get("title", "")), existing
        )

    def _search_values(self, record):
        return (record.get("title"), record.get("description"), record.get("featured"))

    def _after_write(self, record):
        if record.get("isLatest"):
            self._clear_latest(keep=record["id"])

    def _clear_latest(self, keep: str) -> None:
        stale = {
            magazine_id: {**magazine, "isLatest": False}
            for magazine_id, magazine in self.repository.all().items()
            if magazine_id != keep and magazine.get("isLatest")
        }
        if stale:
            self.repository.save_many(stale)

    def _after_delete(self, record):
        if not self.uploads:
            return
        for key in ("filePath", "coverPhoto"):
            location = record.get(key)
            if location and self.uploads.path_from_url(location):
                self.uploads.delete(location)

    def set_latest(self, record_id: str) -> dict:
        self.get(record_id)
        updated = self.repository.update(
            record_id, {"isLatest": True, "updatedAt": self.clock()}
        )
        self._clear_latest(keep=record_id)
        return updated

    def latest(self) -> Optional[dict]:
        for magazine in self.repository.all().values():
            if magazine.get("isLatest"):
                return magazine
        return None

    @staticmethod
    def public_view(magazine: dict) -> dict:
        return {
            "id": magazine["id"],
            "year": magazine.get("year"),
            "title": magazine.get("title"),
            "description": magazine.get("description"),
            "pages": magazine.get("pages"),
            "articles": magazine.get("articles"),
            "featured": magazine.get("featured"),
            "coverPhoto": magazine.get("coverPhoto"),
            "downloadUrl": magazine.get("filePath"),
            "viewUrl": magazine.get("filePath"),
            "isLatest": bool(magazine.get("isLatest")),
        }

    def for_display(self):
        magazines = sorted(
            self.repository.all().values(), key=lambda m: m.get("year") or "", reverse=True
        )
        return [self.public_view(m) for m in magazines]


class AchievementService(ContentService):
    entity = InterIITAchievement
    label = "Achievement"

    def _new_id(self, data, existing):
        return ids.unique_id(
            ids.achievement_id(data.get("competitionName", ""), data.get("year", "")),
            existing,
        )

    def _search_values(self, record):
        members = record.get("teamMembers") or []
        return (
            record.get("competitionName"),
            record.get("achievementDescription"),
            record.get("competitionCategory"),
            record.get("hostIIT"),
            record.get("location"),
            *(m.get("name") for m in members),
            *(m.get("email") for m in members),
        )

    def for_display(self):
        verified = [a for a in self.repository.all().values() if a.get("status") == "verified"]
        return sorted(verified, key=lambda a: a.get("achievementDate") or "", reverse=True)

    def by_year(self, year: str) -> List[dict]:
        return [a for a in self.for_display() if a.get("year") == year]

    def by_type(self, achievement_type: str) -> List[dict]:
        return [a for a in self.for_display() if a.get("achievementType") == achievement_type]

    def by_category(self, category: str) -> List[dict]:
        return [a for a in self.for_display() if a.get("competitionCategory") == category]

    def by_edition(self, edition: str) -> List[dict]:
        return [a for a in self.for_display() if a.get("interIITEdition") == edition]

    def stats(self) -> dict:
        achievements = self.for_display()

        def count(achievement_type: str) -> int:
            return sum(1 for a in achievements if a.get("achievementType") == achievement_type)

        participants = {
            member.get("rollNumber")
            for a in achievements
            for member in a.get("teamMembers") or []
        }
        rankings = [a["ranking"] for a in achievements if a.get("ranking")]
        return {
            "totalAchievements": len(achievements),
            "goldMedals": count("gold-medal"),
            "silverMedals": count("silver-medal"),
            "bronzeMedals": count("bronze-medal"),
            "specialAwards": count("special-award"),
            "rankings": count("ranking"),
            "recognitions": count("recognition"),
            "totalParticipants": len(participants),
            "categoriesParticipated": len({a.get("competitionCategory") for a in achievements}),
            "yearsActive": len({a.get("year") for a in achievements}),
            "averageRanking": round(sum(rankings) / len(rankings), 2) if rankings else 0,
        }


class HackathonService(ContentService):
    entity = Hackathon
    label = "Hackathon"

    def _new_id(self, data, existing):
        return ids.unique_id(ids.hackathon_id(data.get("name", "")), existing)

    def _search_values(self, record):
        return (record.get("name"), record.get("description"), record.get("category"))

    def for_display(self):
        return sorted(
            self.repository.all().values(),
            key=lambda h: h.get("updatedAt") or "",
            reverse=True,
        )

    def by_status(self, status: str) -> List[dict]:
        return [h for h in self.for_display() if h.get("status") == status]

    def by_category(self, category: str) -> List[dict]:
        return [h for h in self.for_display() if h.get("category") == category]

    def stats(self) -> dict:
        hackathons = self.for_display()
        participants = 0
        prize_pool = 0
        for hackathon in hackathons:
            participants += _digits(hackathon.get("currentParticipants")) or 0
            for prize in hackathon.get("prizes") or []:
                prize_pool += _digits(prize.get("amount")) or 0
        return {
            "total": len(hackathons),
            "upcoming": sum(1 for h in hackathons if h.get("status") == "upcoming"),
            "ongoing": sum(1 for h in hackathons if h.get("status") == "ongoing"),
            "completed": sum(1 for h in hackathons if h.get("status") == "completed"),
            "totalParticipants": participants,
            "totalPrizePool": prize_pool,
        }
