from drivers.models import DriverAvailability
from services.geocoding import resolve_coordinates


def get_availability(user) -> DriverAvailability:
    availability, _ = DriverAvailability.objects.get_or_create(user=user)
    return availability


# DRIVER AVAILABILITY UPDATE
def update_availability(user, data: dict) -> DriverAvailability:
    """
    Update the driver's declared region, ACTIVE/INACTIVE flag, note and base
    location. A new location link is geocoded; when it cannot be read the
    previous coordinates are cleared rather than left pointing elsewhere.
    """
    availability = get_availability(user)
    update_fields = ["updated_at"]

    for name in ("region", "status", "note"):
        if name in data:
            setattr(availability, name, data[name])
            update_fields.append(name)

    if "location_url" in data:
        link = data["location_url"] or None
        coords = resolve_coordinates(link) if link else None
        availability.location_url = link
        availability.latitude = round(coords.lat, 6) if coords else None
        availability.longitude = round(coords.lng, 6) if coords else None
        update_fields += ["location_url", "latitude", "longitude"]

    availability.save(update_fields=update_fields)
    return availability
