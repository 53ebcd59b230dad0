from __future__ import annotations

import logging
from typing import Any, Mapping

from bookly.application.exceptions import InvalidAvailabilityError, InvalidPolicyError
from bookly.application.ports.profile_store import ProfileStorePort
from bookly.application.utils.legacy_availability import availability_from_legacy, policy_from_legacy_settings
from bookly.application.utils.validation import validate_availability, validate_policy
from bookly.domain.entities.availability import Availability
from bookly.domain.entities.policy import BookingPolicy


class UpdateProfileUseCase:
    """Write path for a host's availability and policy; nothing invalid is stored."""

    def __init__(self, profiles: ProfileStorePort, default_timezone: str = "UTC") -> None:
        self._profiles = profiles
        self._default_timezone = default_timezone
        self._logger = logging.getLogger(__name__)

    def set_availability(self, host_id: str, availability: Availability) -> Availability:
        try:
            validate_availability(availability)
        except InvalidAvailabilityError as e:
            self._logger.warning("Availability rejected", extra={"host_id": host_id, "reason": e.reason})
            raise
        self._profiles.write_availability(host_id, availability)
        return availability

    def set_policy(self, host_id: str, policy: BookingPolicy) -> BookingPolicy:
        try:
            validate_policy(policy)
        except InvalidPolicyError as e:
            self._logger.warning("Policy rejected", extra={"host_id": host_id, "reason": e.reason})
            raise
        self._profiles.write_policy(host_id, policy)
        return policy

    def migrate_legacy(
        self,
        host_id: str,
        availability_payload: Mapping[str, Any],
        settings_payload: Mapping[str, Any] | None = None,
    ) -> tuple[Availability, BookingPolicy]:
        """Convert and store a legacy single-interval profile."""
        try:
            availability = availability_from_legacy(availability_payload, self._default_timezone)
        except (AttributeError, TypeError, ValueError) as e:
            raise InvalidAvailabilityError(str(e)) from e
        current = self._profiles.read_policy(host_id)
        if settings_payload is not None:
            try:
                policy = policy_from_legacy_settings(settings_payload, slot_duration=current.slot_duration)
            except (TypeError, ValueError) as e:
                raise InvalidPolicyError(str(e)) from e
        else:
            policy = current

        validate_availability(availability)
        validate_policy(policy)
        self._profiles.write_availability(host_id, availability)
        self._profiles.write_policy(host_id, policy)
        self._logger.info("Legacy profile migrated", extra={"host_id": host_id})
        return availability, policy
