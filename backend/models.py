from typing import Any, Dict, List, Optional

PLACEHOLDER = "Not specified"

# Field names the model is asked to emit for every recommended place.
PLACE_FIELDS = ("name", "address", "short_description", "image", "rating", "latitude", "longitude")


def _field(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    text = text.strip()
    return text or None


class TravelQuery:
    def __init__(self, destination=None, dates=None, interests=None, style=None, start_city=None):
        self.start_city = _field(start_city)
        self.destination = _field(destination)
        self.dates = _field(dates)
        self.interests = _field(interests)
        self.style = _field(style)

    @classmethod
    def from_json(cls, body: Dict[str, Any]) -> "TravelQuery":
        """Build a query from the request body; unknown keys are ignored."""
        body = body or {}
        return cls(
            destination=body.get("destination"),
            dates=body.get("dates"),
            interests=body.get("interests"),
            style=body.get("style"),
            start_city=body.get("startCity"),
        )

    def display(self, name: str) -> str:
        return getattr(self, name) or PLACEHOLDER

    def to_json(self) -> Dict[str, Optional[str]]:
        return {
            "startCity": self.start_city,
            "destination": self.destination,
            "dates": self.dates,
            "interests": self.interests,
            "style": self.style,
        }


class Place:
    def __init__(self, name, address="", short_description="", image="", rating=None, latitude=None, longitude=None):
        self.name = name
        self.address = address
        self.short_description = short_description
        self.image = image
        self.rating = rating
        self.latitude = latitude
        self.longitude = longitude

    def to_json(self) -> Dict[str, Any]:
        return {f: getattr(self, f) for f in PLACE_FIELDS}


def fallback_result(text: str) -> Dict[str, Any]:
    """The result returned when no structured JSON could be recovered."""
    return {"itinerary": text, "places": []}


def ensure_result_shape(obj: Dict[str, Any], raw_text: str) -> Dict[str, Any]:
    """
    Give a recovered object the ItineraryResult guarantees: an itinerary is
    always present and places is always a list. Well-formed objects are
    returned untouched.
    """
    if "itinerary" in obj and isinstance(obj.get("places"), list):
        return obj
    shaped = dict(obj)
    if "itinerary" not in shaped:
        shaped["itinerary"] = raw_text
    places: List[Any] = shaped.get("places") if isinstance(shaped.get("places"), list) else []
    shaped["places"] = places
    return shaped
