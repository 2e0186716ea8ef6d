import json

from .models import Place, TravelQuery

# Shape shown to the model for a single entry of "places".
EXAMPLE_PLACE = Place(
    name="<place name>",
    address="<street address, city>",
    short_description="<one or two sentences>",
    image="<image url or empty string>",
    rating=4.5,
    latitude=35.0116,
    longitude=135.7681,
)


def build_itinerary_prompt(query: TravelQuery) -> str:
    """
    Prompt asking for a Markdown day-by-day itinerary plus a list of places,
    returned as ONE JSON object with exactly the keys "itinerary" and "places".
    """
    example = json.dumps({"itinerary": "## Day 1\n- ...", "places": [EXAMPLE_PLACE.to_json()]}, ensure_ascii=False)

    return f"""
You are an expert travel planner. Generate a personalized, day-wise travel itinerary and a list of
recommended places with addresses based on the following user preferences.

User Inputs:
Start City: {query.display("start_city")}
Destination: {query.display("destination")}
Travel Dates: {query.display("dates")}
Interests: {query.display("interests")}
Travel Style: {query.display("style")}

Your Task:
1) Create a clear day-wise itinerary as Markdown in the field "itinerary". Use the start city in
   Day 0 or Day 1 travel notes or transit suggestions where appropriate.
2) Produce a "places" array containing recommended attractions. Each place must include these fields:
   name (string), address (string), short_description (string), image (url or empty string),
   rating (number from 0 to 5 or null), latitude (number or null), longitude (number or null).

Output Requirements:
- RETURN ONLY a single valid JSON object, with exactly two keys: "itinerary" and "places".
- "itinerary" should be a Markdown string (may contain headings, lists, tips).
- "places" should be an array of objects as described above.
- Do not include any extra commentary or text outside the JSON.

Example shape:
{example}
""".strip()
