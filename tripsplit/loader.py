"""Read trips from the storage collaborator's JSON export."""

import json
import logging

from pydantic import TypeAdapter, ValidationError

from tripsplit.models import Trip

logger = logging.getLogger("tripsplit")

_trip_list_adapter = TypeAdapter(list[Trip])


class TripLoadError(ValueError):
    """Raised when a trip export cannot be read or does not hold the trip asked for."""


def parse_trips(raw) -> list[Trip]:
    """Accept either one trip object or the stored list of trips."""
    try:
        if isinstance(raw, list):
            return _trip_list_adapter.validate_python(raw)
        return [Trip.model_validate(raw)]
    except ValidationError as exc:
        raise TripLoadError(f"Invalid trip data: {exc}") from exc


def load_trip(path: str, trip_id: str | None = None) -> Trip:
    try:
        with open(path, encoding="utf-8") as fh:
            raw = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        raise TripLoadError(f"Cannot read {path}: {exc}") from exc

    trips = parse_trips(raw)

    if trip_id is None:
        if len(trips) != 1:
            raise TripLoadError(f"{path} holds {len(trips)} trips; pass a trip id")
        trip = trips[0]
    else:
        trip = next((t for t in trips if t.id == trip_id), None)
        if trip is None:
            raise TripLoadError(f"Trip {trip_id} not found in {path}")

    logger.debug(
        "Trip loaded",
        extra={"extra_data": {
            "trip_id": trip.id, "people": len(trip.people), "expenses": len(trip.expenses),
        }},
    )
    return trip
