"""Event topic definitions for the real-time stream."""

TOPIC_RIDES = "rides"
TOPIC_DRIVERS = "drivers"
TOPIC_RATES = "rates"
TOPIC_SETTINGS = "settings"
TOPIC_PROMOS = "promos"
TOPIC_SURGE = "surge"
TOPIC_PARTNERS = "partners"
TOPIC_AIRPORT = "airport"

ALL_TOPICS = (
    TOPIC_RIDES,
    TOPIC_DRIVERS,
    TOPIC_RATES,
    TOPIC_SETTINGS,
    TOPIC_PROMOS,
    TOPIC_SURGE,
    TOPIC_PARTNERS,
    TOPIC_AIRPORT,
)

KNOWN_TOPICS = frozenset(ALL_TOPICS)


def parse_topics(raw: str | None) -> tuple[str, ...]:
    """Parse a comma-separated topic list.

    Unknown names are dropped and duplicates collapsed, keeping request
    order. An empty result subscribes to every topic.
    """
    requested: list[str] = []
    for name in (raw or "").split(","):
        name = name.strip()
        if name in KNOWN_TOPICS and name not in requested:
            requested.append(name)
    return tuple(requested) or ALL_TOPICS
