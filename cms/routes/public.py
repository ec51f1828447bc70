"""
Public read routes used by the site pages, plus the contact form.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from cms.dependencies import (
    get_achievement_service,
    get_club_service,
    get_contact_info_store,
    get_event_service,
    get_hackathon_service,
    get_magazine_service,
    get_mailer,
    get_site_settings_store,
    get_team_service,
)
from cms.errors import NotFoundError
from cms.mailer import ContactForm, ContactMailer
from cms.schemas import ContactFormRequest
from cms.services import (
    AchievementService,
    ClubService,
    EventService,
    HackathonService,
    MagazineService,
    TeamService,
    now_iso,
)
from cms.site import ContactInfoStore, SiteSettingsStore


def no_cache(response: Response) -> None:
    response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"


router = APIRouter(dependencies=[Depends(no_cache)])


def hackathons_visible(
    site_settings: SiteSettingsStore = Depends(get_site_settings_store),
) -> None:
    if not site_settings.hackathons_visible():
        raise NotFoundError("Hackathons are not available")


# Events


@router.get("/events")
def list_events(
    category: Optional[str] = None,
    q: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1),
    service: EventService = Depends(get_event_service),
):
    events = service.search(q) if q else service.for_display()
    if category:
        events = [e for e in events if (e.get("category") or "").lower() == category.lower()]
    return events[:limit] if limit else events


@router.get("/events/{event_id}")
def get_event(event_id: str, service: EventService = Depends(get_event_service)):
    event = service.get(event_id)
    if event.get("draft"):
        raise NotFoundError("Event not found")
    return event


# Clubs


@router.get("/clubs")
def list_clubs(
    type: Optional[str] = None,
    q: Optional[str] = None,
    service: ClubService = Depends(get_club_service),
):
    clubs = service.search(q) if q else service.for_display()
    if type:
        clubs = [c for c in clubs if c.get("type") == type]
    return clubs


@router.get("/clubs/{club_id}")
def get_club(club_id: str, service: ClubService = Depends(get_club_service)):
    return service.get(club_id)


# Team


@router.get("/team")
def list_team(
    category: Optional[str] = None,
    service: TeamService = Depends(get_team_service),
):
    return service.by_category(category) if category else service.for_display()


@router.get("/team/leadership")
def list_leadership(service: TeamService = Depends(get_team_service)):
    return service.leadership()


@router.get("/team/{member_id}")
def get_team_member(member_id: str, service: TeamService = Depends(get_team_service)):
    return service.get(member_id)


# Torque magazines


@router.get("/torque")
def list_magazines(service: MagazineService = Depends(get_magazine_service)):
    return service.for_display()


@router.get("/torque/latest")
def latest_magazine(service: MagazineService = Depends(get_magazine_service)):
    latest = service.latest()
    return service.public_view(latest) if latest else None


# Inter-IIT achievements


@router.get("/inter-iit-achievements")
def list_achievements(
    year: Optional[str] = None,
    type: Optional[str] = None,
    category: Optional[str] = None,
    edition: Optional[str] = None,
    q: Optional[str] = None,
    service: AchievementService = Depends(get_achievement_service),
):
    achievements = service.search(q) if q else service.for_display()
    filters = {
        "year": year,
        "achievementType": type,
        "competitionCategory": category,
        "interIITEdition": edition,
    }
    for key, wanted in filters.items():
        if wanted:
            achievements = [a for a in achievements if a.get(key) == wanted]
    return achievements


@router.get("/inter-iit-achievements/stats")
def achievement_stats(service: AchievementService = Depends(get_achievement_service)):
    return service.stats()


@router.get("/inter-iit-achievements/{achievement_id}")
def get_achievement(
    achievement_id: str, service: AchievementService = Depends(get_achievement_service)
):
    achievement = service.get(achievement_id)
    if achievement.get("status") != "verified":
        raise NotFoundError("Achievement not found")
    return achievement


# Hackathons


@router.get("/hackathons", dependencies=[Depends(hackathons_visible)])
def list_hackathons(
    status: Optional[str] = None,
    category: Optional[str] = None,
    q: Optional[str] = None,
    service: HackathonService = Depends(get_hackathon_service),
):
    hackathons = service.search(q) if q else service.for_display()
    if status:
        hackathons = [h for h in hackathons if h.get("status") == status]
    if category:
        hackathons = [h for h in hackathons if h.get("category") == category]
    return hackathons


@router.get("/hackathons/stats", dependencies=[Depends(hackathons_visible)])
def hackathon_stats(service: HackathonService = Depends(get_hackathon_service)):
    return service.stats()


@router.get("/hackathons/{hackathon_id}", dependencies=[Depends(hackathons_visible)])
def get_hackathon(hackathon_id: str, service: HackathonService = Depends(get_hackathon_service)):
    return service.get(hackathon_id)


# Site data


@router.get("/contact-info")
def get_contact_info(store: ContactInfoStore = Depends(get_contact_info_store)):
    return store.get()


@router.post("/contact")
def submit_contact_form(
    payload: ContactFormRequest, mailer: ContactMailer = Depends(get_mailer)
):
    result = mailer.send(
        ContactForm(
            name=payload.name,
            email=str(payload.email),
            subject=payload.subject,
            message=payload.message,
        ),
        received_at=now_iso(),
    )
    return {"success": True, "delivered": result.delivered, "message": result.message}


@router.get("/site-settings")
def get_site_settings(store: SiteSettingsStore = Depends(get_site_settings_store)):
    return store.get()
