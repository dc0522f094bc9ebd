from stores.models import StoreAvailability
from services.geocoding import resolve_coordinates


def get_availability(user) -> StoreAvailability:
    availability, _ = StoreAvailability.objects.get_or_create(
        user=user, defaults={"store_name": user.username}
    )
    return availability


def update_availability(user, data: dict) -> StoreAvailability:
    """Store profile fields plus its pickup location, geocoded from the link."""
    availability = get_availability(user)
    update_fields = ["updated_at"]

    for name in ("store_name", "address", "region", "status"):
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
