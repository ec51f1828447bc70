"""
Pydantic schemas for the CMS API. Field names are snake_case in Python and
camelCase on the wire.
"""

from __future__ import annotations

from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints

from content.json_utils import snake_to_camel
from content.types import AchievementStatus, AchievementType, ClubType, HackathonStatus, SponsorTier

NonEmpty = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=snake_to_camel, populate_by_name=True)

    def to_record(self) -> dict:
        """Every field, camelCase, JSON-ready."""
        return self.model_dump(by_alias=True, mode="json")

    def to_changes(self) -> dict:
        """Only the fields the client sent."""
        return self.model_dump(by_alias=True, mode="json", exclude_unset=True)


# Team


class TeamMemberCreate(CamelModel):
    name: NonEmpty
    position: NonEmpty
    email: EmailStr
    initials: NonEmpty
    gradient_from: NonEmpty
    gradient_to: NonEmpty
    category: NonEmpty
    photo_path: Optional[str] = None
    is_secretary: bool = False
    is_coordinator: bool = False


class TeamMemberUpdate(CamelModel):
    name: Optional[NonEmpty] = None
    position: Optional[NonEmpty] = None
    email: Optional[EmailStr] = None
    initials: Optional[NonEmpty] = None
    gradient_from: Optional[NonEmpty] = None
    gradient_to: Optional[NonEmpty] = None
    category: Optional[NonEmpty] = None
    photo_path: Optional[str] = None
    is_secretary: Optional[bool] = None
    is_coordinator: Optional[bool] = None


# Events


class GalleryItemModel(CamelModel):
    id: str
    url: str
    alt: str = ""
    caption: Optional[str] = None


class EventCreate(CamelModel):
    title: NonEmpty
    description: NonEmpty
    date: NonEmpty
    category: NonEmpty
    location: str = ""
    duration: str = ""
    participants: str = ""
    organizer: str = ""
    highlights: List[str] = Field(default_factory=list)
    gallery: List[GalleryItemModel] = Field(default_factory=list)
    draft: bool = False


class EventUpdate(CamelModel):
    title: Optional[NonEmpty] = None
    description: Optional[NonEmpty] = None
    date: Optional[NonEmpty] = None
    category: Optional[NonEmpty] = None
    location: Optional[str] = None
    duration: Optional[str] = None
    participants: Optional[str] = None
    organizer: Optional[str] = None
    highlights: Optional[List[str]] = None
    gallery: Optional[List[GalleryItemModel]] = None
    draft: Optional[bool] = None


# Clubs


class ClubContactModel(CamelModel):
    name: str
    role: str
    email: str


class ClubCreate(CamelModel):
    name: NonEmpty
    description: NonEmpty
    long_description: str = ""
    type: ClubType
    category: NonEmpty
    email: NonEmpty
    members: Optional[str] = None
    established: Optional[str] = None
    achievements: List[str] = Field(default_factory=list)
    projects: List[str] = Field(default_factory=list)
    team: List[ClubContactModel] = Field(default_factory=list)
    logo_path: Optional[str] = None


class ClubUpdate(CamelModel):
    name: Optional[NonEmpty] = None
    description: Optional[NonEmpty] = None
    long_description: Optional[str] = None
    type: Optional[ClubType] = None
    category: Optional[NonEmpty] = None
    email: Optional[NonEmpty] = None
    members: Optional[str] = None
    established: Optional[str] = None
    achievements: Optional[List[str]] = None
    projects: Optional[List[str]] = None
    team: Optional[List[ClubContactModel]] = None
    logo_path: Optional[str] = None


# Torque magazines


class MagazineCreate(CamelModel):
    year: Annotated[str, StringConstraints(strip_whitespace=True, min_length=4)]
    title: NonEmpty
    description: str = ""
    pages: int = Field(ge=1)
    articles: int = Field(ge=1)
    featured: str = ""
    file_path: NonEmpty
    file_name: str = ""
    file_size: int = Field(default=0, ge=0)
    cover_photo: Optional[str] = None
    cover_photo_file_name: Optional[str] = None
    is_latest: bool = False


class MagazineUpdate(CamelModel):
    year: Optional[Annotated[str, StringConstraints(strip_whitespace=True, min_length=4)]] = None
    title: Optional[NonEmpty] = None
    description: Optional[str] = None
    pages: Optional[int] = Field(default=None, ge=1)
    articles: Optional[int] = Field(default=None, ge=1)
    featured: Optional[str] = None
    file_path: Optional[NonEmpty] = None
    file_name: Optional[str] = None
    file_size: Optional[int] = Field(default=None, ge=0)
    cover_photo: Optional[str] = None
    cover_photo_file_name: Optional[str] = None
    is_latest: Optional[bool] = None


# Inter-IIT achievements


class AchievementMemberModel(CamelModel):
    name: NonEmpty
    roll_number: NonEmpty
    branch: str = ""
    year: str = ""
    role: str = ""
    email: str = ""
    phone: Optional[str] = None
    achievements: List[str] = Field(default_factory=list)


class SupportingDocumentModel(CamelModel):
    name: str
    type: str
    file_path: str
    upload_date: str
    description: Optional[str] = None


class AchievementCreate(CamelModel):
    achievement_type: AchievementType
    competition_name: NonEmpty
    inter_iit_edition: NonEmpty
    year: NonEmpty
    host_iit: NonEmpty
    location: str = ""
    ranking: Optional[int] = Field(default=None, ge=1)
    achievement_description: NonEmpty
    significance: str = ""
    competition_category: NonEmpty
    achievement_date: NonEmpty
    points: Optional[int] = None
    status: AchievementStatus = AchievementStatus.VERIFIED
    team_members: List[AchievementMemberModel] = Field(default_factory=list)
    supporting_documents: List[SupportingDocumentModel] = Field(default_factory=list)


class AchievementUpdate(CamelModel):
    achievement_type: Optional[AchievementType] = None
    competition_name: Optional[NonEmpty] = None
    inter_iit_edition: Optional[NonEmpty] = None
    year: Optional[NonEmpty] = None
    host_iit: Optional[NonEmpty] = None
    location: Optional[str] = None
    ranking: Optional[int] = Field(default=None, ge=1)
    achievement_description: Optional[NonEmpty] = None
    significance: Optional[str] = None
    competition_category: Optional[NonEmpty] = None
    achievement_date: Optional[NonEmpty] = None
    points: Optional[int] = None
    status: Optional[AchievementStatus] = None
    team_members: Optional[List[AchievementMemberModel]] = None
    supporting_documents: Optional[List[SupportingDocumentModel]] = None


# Hackathons


class PrizeModel(CamelModel):
    position: str
    amount: str
    description: Optional[str] = None


class OrganizerModel(CamelModel):
    name: str
    role: str
    email: str
    phone: Optional[str] = None


class ScheduleItemModel(CamelModel):
    time: str
    activity: str
    description: Optional[str] = None
    location: Optional[str] = None


class SponsorModel(CamelModel):
    name: str
    tier: SponsorTier
    logo_path: Optional[str] = None
    website: Optional[str] = None


class WinnerModel(CamelModel):
    position: str
    team_name: str
    project: str
    members: List[str] = Field(default_factory=list)
    description: Optional[str] = None


class HackathonCreate(CamelModel):
    name: NonEmpty
    description: NonEmpty
    long_description: str = ""
    date: NonEmpty
    registration_deadline: str = ""
    location: str = ""
    duration: str = ""
    status: HackathonStatus = HackathonStatus.UPCOMING
    category: NonEmpty
    max_participants: Optional[str] = None
    current_participants: Optional[str] = None
    registration_link: Optional[str] = None
    prizes: List[PrizeModel] = Field(default_factory=list)
    organizers: List[OrganizerModel] = Field(default_factory=list)
    requirements: List[str] = Field(default_factory=list)
    schedule: List[ScheduleItemModel] = Field(default_factory=list)
    sponsors: List[SponsorModel] = Field(default_factory=list)
    winners: Optional[List[WinnerModel]] = None
    logo_path: Optional[str] = None
    banner_path: Optional[str] = None
    gallery: List[str] = Field(default_factory=list)


class HackathonUpdate(CamelModel):
    name: Optional[NonEmpty] = None
    description: Optional[NonEmpty] = None
    long_description: Optional[str] = None
    date: Optional[NonEmpty] = None
    registration_deadline: Optional[str] = None
    location: Optional[str] = None
    duration: Optional[str] = None
    status: Optional[HackathonStatus] = None
    category: Optional[NonEmpty] = None
    max_participants: Optional[str] = None
    current_participants: Optional[str] = None
    registration_link: Optional[str] = None
    prizes: Optional[List[PrizeModel]] = None
    organizers: Optional[List[OrganizerModel]] = None
    requirements: Optional[List[str]] = None
    schedule: Optional[List[ScheduleItemModel]] = None
    sponsors: Optional[List[SponsorModel]] = None
    winners: Optional[List[WinnerModel]] = None
    logo_path: Optional[str] = None
    banner_path: Optional[str] = None
    gallery: Optional[List[str]] = None


# Site data and auth


class LoginRequest(CamelModel):
    id_token: NonEmpty


class ContactFormRequest(CamelModel):
    name: NonEmpty
    email: EmailStr
    subject: NonEmpty
    message: NonEmpty


class SettingUpdate(CamelModel):
    setting: NonEmpty
    value: bool | str | int | float | None = None


class AdminEmailRequest(CamelModel):
    email: NonEmpty


class AdminEmailsReplace(CamelModel):
    emails: List[str]


class ThemeUpdate(CamelModel):
    color: NonEmpty


class MigrateRequest(CamelModel):
    kinds: Optional[List[str]] = None
