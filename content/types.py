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

from enum import StrEnum
from dataclasses import dataclass, field
from typing import List, Optional


class ClubType(StrEnum):
    CLUB = "club"
    HOBBY_GROUP = "hobby-group"
    TECHNICAL_COUNCIL_GROUP = "technical-council-group"


class AchievementType(StrEnum):
    GOLD_MEDAL = "gold-medal"
    SILVER_MEDAL = "silver-medal"
    BRONZE_MEDAL = "bronze-medal"
    RANKING = "ranking"
    SPECIAL_AWARD = "special-award"
    RECOGNITION = "recognition"


class AchievementStatus(StrEnum):
    VERIFIED = "verified"
    PENDING_VERIFICATION = "pending-verification"
    ARCHIVED = "archived"


class HackathonStatus(StrEnum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SponsorTier(StrEnum):
    TITLE = "title"
    GOLD = "gold"
    SILVER = "silver"
    BRONZE = "bronze"
    PARTNER = "partner"


@dataclass
class TeamMember:
    """A member of the council team shown on the about pages."""

    id: str
    name: str
    position: str
    email: str
    initials: str
    gradient_from: str
    gradient_to: str
    category: str
    photo_path: Optional[str] = None
    is_secretary: bool = False
    is_coordinator: bool = False
    created_at: str = ""
    updated_at: str = ""


@dataclass
class GalleryItem:
    id: str
    url: str
    alt: str
    caption: Optional[str] = None


@dataclass
class Event:
    """A council event. Drafts are hidden from public pages."""

    id: str
    title: str
    description: str
    date: str
    location: str
    duration: str
    participants: str
    organizer: str
    category: str
    highlights: List[str] = field(default_factory=list)
    gallery: List[GalleryItem] = field(default_factory=list)
    draft: bool = False
    created_at: str = ""
    updated_at: str = ""


@dataclass
class ClubContact:
    name: str
    role: str
    email: str


@dataclass
class Club:
    id: str
    name: str
    description: str
    long_description: str
    type: ClubType
    category: str
    email: str
    members: Optional[str] = None
    established: Optional[str] = None
    achievements: List[str] = field(default_factory=list)
    projects: List[str] = field(default_factory=list)
    team: List[ClubContact] = field(default_factory=list)
    logo_path: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""


@dataclass
class Magazine:
    """An issue of the Torque magazine."""

    id: str
    year: str
    title: str
    description: str
    pages: int
    articles: int
    featured: str
    file_path: str
    file_name: str = ""
    file_size: int = 0
    cover_photo: Optional[str] = None
    cover_photo_file_name: Optional[str] = None
    is_latest: bool = False
    created_at: str = ""
    updated_at: str = ""


@dataclass
class AchievementMember:
    name: str
    roll_number: str
    branch: str
    year: str
    role: str
    email: str
    phone: Optional[str] = None
    achievements: List[str] = field(default_factory=list)


@dataclass
class SupportingDocument:
    name: str
    type: str
    file_path: str
    upload_date: str
    description: Optional[str] = None


@dataclass
class InterIITAchievement:
    id: str
    achievement_type: AchievementType
    competition_name: str
    inter_iit_edition: str
    year: str
    host_iit: str
    location: str
    achievement_description: str
    significance: str
    competition_category: str
    achievement_date: str
    status: AchievementStatus
    ranking: Optional[int] = None
    points: Optional[int] = None
    team_members: List[AchievementMember] = field(default_factory=list)
    supporting_documents: List[SupportingDocument] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""


@dataclass
class Prize:
    position: str
    amount: str
    description: Optional[str] = None


@dataclass
class Organizer:
    name: str
    role: str
    email: str
    phone: Optional[str] = None


@dataclass
class ScheduleItem:
    time: str
    activity: str
    description: Optional[str] = None
    location: Optional[str] = None


@dataclass
class Sponsor:
    name: str
    tier: SponsorTier
    logo_path: Optional[str] = None
    website: Optional[str] = None


@dataclass
class Winner:
    position: str
    team_name: str
    project: str
    members: List[str] = field(default_factory=list)
    description: Optional[str] = None


@dataclass
class Hackathon:
    id: str
    name: str
    description: str
    long_description: str
    date: str
    registration_deadline: str
    location: str
    duration: str
    status: HackathonStatus
    category: str
    max_participants: Optional[str] = None
    current_participants: Optional[str] = None
    registration_link: Optional[str] = None
    prizes: List[Prize] = field(default_factory=list)
    organizers: List[Organizer] = field(default_factory=list)
    requirements: List[str] = field(default_factory=list)
    schedule: List[ScheduleItem] = field(default_factory=list)
    sponsors: List[Sponsor] = field(default_factory=list)
    winners: Optional[List[Winner]] = None
    logo_path: Optional[str] = None
    banner_path: Optional[str] = None
    gallery: List[str] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""


@dataclass
class SiteSettings:
    hackathons_visible: bool
    last_modified: str
    modified_by: str
    created_at: str
    updated_at: str


@dataclass
class Address:
    street: str
    city: str
    state: str
    postal_code: str
    country: str


@dataclass
class SocialMedia:
    instagram: str
    youtube: str
    linkedin: str
    facebook: str


@dataclass
class ContactInfo:
    address: Address
    phone: str
    email: str
    social_media: SocialMedia
    last_modified: str
    modified_by: str


@dataclass
class AdminEmails:
    """Allow-list of addresses that may sign in to the admin dashboard."""

    emails: List[str]
    last_modified: str
    modified_by: str
    created_at: str
    updated_at: str


@dataclass
class ThemeSettings:
    color: str
    last_updated: str
