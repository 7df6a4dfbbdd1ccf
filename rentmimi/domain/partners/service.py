"""Partner service - Business logic for the partner roster"""

import logging
import uuid
from datetime import date
from typing import Optional

from fastapi import HTTPException

from ...schemas import PartnerApplication, PartnerApplicationData, PublicMimiProfile, User
from ...store import DataStore
from .availability import is_partner_available_on, search_partners
from .schemas import PartnerApplicationSubmit, PartnerListing

logger = logging.getLogger(__name__)


class PartnerService:
    """Service layer for partner applications and listings"""

    def __init__(self, store: DataStore):
        self.store = store

    def get_application(self, application_id: str) -> PartnerApplication:
        application = self.store.partner_applications.get(application_id)
        if not application:
            raise HTTPException(status_code=404, detail="Partner not found")
        return application

    def get_own_application(self, user: User) -> PartnerApplication:
        application = self.store.find_application_by_phone(user.phone)
        if not application:
            raise HTTPException(status_code=404, detail="No partner application for this account")
        return application

    def submit_application(self, data: PartnerApplicationSubmit, user: User) -> PartnerApplication:
        """Create an application and grant the partner role"""
        logger.info(f"📥 Partner application from {user.phone}")

        if self.store.find_application_by_phone(user.phone):
            raise HTTPException(status_code=409, detail="A partner application already exists for this account")

        form = PartnerApplicationData.model_validate(
            {**data.model_dump(), "available_for_booking": True, "grade": "BRONZE"}
        )
        partner_user = user.model_copy(update={"roles": [*user.roles, "partner"]}) if not user.has_role("partner") else user
        application = PartnerApplication(
            id=str(uuid.uuid4()),
            applicant=partner_user,
            form_data=form,
            is_recommended=False,
        )

        with self.store.write() as store:
            store.partner_applications.upsert(application)
            store.users.upsert(partner_user)

        logger.info(f"✅ Partner application {application.id} created, {user.phone} is now a partner")
        return application

    def update_own_profile(self, data: PartnerApplicationSubmit, user: User) -> PartnerApplication:
        """Self-service edit; grade and booking availability stay as they were"""
        application = self.get_own_application(user)
        current = application.form_data
        form = PartnerApplicationData.model_validate(
            {
                **data.model_dump(),
                "grade": current.grade,
                "available_for_booking": current.available_for_booking,
            }
        )
        return self._save(application.model_copy(update={"form_data": form}))

    def toggle_availability(self, user: User) -> PartnerApplication:
        application = self.get_own_application(user)
        form = application.form_data.model_copy(
            update={"available_for_booking": not application.is_bookable}
        )
        updated = self._save(application.model_copy(update={"form_data": form}))
        logger.info(f"🔁 Partner {application.id} bookable={updated.is_bookable}")
        return updated

    def set_available_dates(self, user: User, available_dates: list[str]) -> PartnerApplication:
        application = self.get_own_application(user)
        form = application.form_data.model_copy(update={"available_dates": available_dates})
        return self._save(application.model_copy(update={"form_data": form}))

    # Admin operations
    def set_grade(self, application_id: str, grade: str) -> PartnerApplication:
        application = self.get_application(application_id)
        form = application.form_data.model_copy(update={"grade": grade})
        logger.info(f"🏅 Partner {application_id} grade {application.form_data.grade} → {grade}")
        return self._save(application.model_copy(update={"form_data": form}))

    def toggle_recommendation(self, application_id: str) -> PartnerApplication:
        application = self.get_application(application_id)
        return self._save(application.model_copy(update={"is_recommended": not application.is_recommended}))

    def set_public_profile(self, application_id: str, profile: PublicMimiProfile) -> PartnerApplication:
        application = self.get_application(application_id)
        profile = PublicMimiProfile.model_validate(profile.model_dump())
        return self._save(application.model_copy(update={"public_profile": profile}))

    # Listings
    def bookable_applications(self) -> list[PartnerApplication]:
        """Partners an admin may assign to a booking"""
        return [a for a in self.store.partner_applications.all() if a.is_bookable]

    def list_recommended(self, today: Optional[date] = None) -> list[PartnerListing]:
        today = today or date.today()
        return [
            self.to_listing(a, today)
            for a in self.store.partner_applications.all()
            if a.is_recommended
        ]

    def search(
        self,
        search: Optional[str] = None,
        available_only: bool = False,
        styles: Optional[list[str]] = None,
        origin: Optional[tuple[float, float]] = None,
        today: Optional[date] = None,
    ) -> list[PartnerListing]:
        today = today or date.today()
        results = search_partners(
            self.store.partner_applications.all(),
            today,
            search=search,
            available_only=available_only,
            styles=styles,
            origin=origin,
        )
        return [self.to_listing(a, today, distance) for a, distance in results]

    @staticmethod
    def to_listing(
        application: PartnerApplication, today: date, distance: Optional[float] = None
    ) -> PartnerListing:
        form = application.form_data
        profile = application.public_profile
        return PartnerListing(
            id=application.id,
            name=application.display_name,
            age=profile.age if profile else form.age,
            region=application.display_region,
            intro=profile.intro if profile else form.intro,
            photo=application.display_photo,
            styles=list(form.styles),
            availableDays=list(form.available_days),
            availableDates=sorted(form.available_dates or []),
            isRecommended=application.is_recommended,
            availableToday=is_partner_available_on(application, today),
            distanceKm=round(distance, 2) if distance is not None else None,
        )

    def _save(self, application: PartnerApplication) -> PartnerApplication:
        with self.store.write() as store:
            store.partner_applications.upsert(application)
        return application
