"""Recurring event calendars: design weeks and art fairs.

Dates are approximate (month + week of month) because the exact dates move
every year; the calendar state machine turns them into concrete windows.
"""

from __future__ import annotations

from typing import Dict, Tuple

from ..models import DailyFocus, EventDefinition

# Registry prefixes tried when an event's bare target id is not found.
CITY_PREFIXES: Dict[str, str] = {
    "Milan": "milan-",
    "London": "london-",
    "Miami": "miami-",
    "Copenhagen": "copenhagen-",
    "Stockholm": "stockholm-",
    "New York": "nyc-",
    "Los Angeles": "la-",
    "Hong Kong": "hong-kong-",
    "Paris": "paris-",
}

ART_FAIR_PREFIXES: Tuple[str, ...] = ("nyc-", "london-", "paris-", "la-", "miami-", "hong-kong-")

# ---------------------------------------------------------------------------
# Design weeks
# ---------------------------------------------------------------------------

DESIGN_WEEKS: Tuple[EventDefinition, ...] = (
    EventDefinition(
        id="salone-del-mobile",
        name="Salone del Mobile",
        short_name="Salone",
        city="Milan",
        month=4,
        approx_week=2,
        duration_days=6,
        targets=("brera", "porta-nuova", "centro-storico", "navigli"),
        vibe="Furniture, installations, palazzo parties. The world capital of design descends on Milan.",
        venue="Fiera Milano & Fuorisalone citywide",
        website="https://www.salonemilano.it",
        daily_focuses=(
            DailyFocus(1, "Fiera Milano", "rho-fiera", "The trade show. Where deals are made."),
            DailyFocus(2, "Fuorisalone Brera", "brera", "Street installations. Cocktails among the furniture."),
            DailyFocus(3, "Alcova", "porta-nuova", "Emerging designers in abandoned spaces."),
            DailyFocus(4, "Tortona District", "navigli", "Showrooms and after-parties."),
            DailyFocus(5, "Via Durini", "centro-storico", "The permanent showrooms. Where the classics live."),
            DailyFocus(6, "Closing Celebrations", "brera", "The final palazzo parties."),
        ),
    ),
    EventDefinition(
        id="london-design-festival",
        name="London Design Festival",
        short_name="LDF",
        city="London",
        month=9,
        approx_week=2,
        duration_days=9,
        targets=("shoreditch", "chelsea", "kensington", "kings-cross"),
        vibe="Creative, craft, showrooms. British design meets global innovation.",
        venue="V&A Hub & citywide",
        website="https://www.londondesignfestival.com",
        daily_focuses=(
            DailyFocus(1, "V&A Museum Hub", "kensington", "The anchor venue. Major installations and talks."),
            DailyFocus(2, "Shoreditch Design Triangle", "shoreditch", "Emerging talent and workshops."),
            DailyFocus(3, "Chelsea Harbour", "chelsea", "The luxury showrooms. Interior design trade."),
            DailyFocus(4, "Kings Cross", "kings-cross", "Coal Drops Yard and beyond."),
            DailyFocus(5, "Brompton Design District", "kensington", "Around the V&A. Galleries and pop-ups."),
        ),
    ),
    EventDefinition(
        id="design-miami",
        name="Design Miami",
        short_name="Design Miami",
        city="Miami",
        month=12,
        approx_week=1,
        duration_days=5,
        targets=("south-beach", "design-district", "wynwood", "brickell"),
        vibe="Collectible design, gallerists. Where art meets furniture.",
        venue="Miami Beach Convention Center & Design District",
        website="https://designmiami.com",
        daily_focuses=(
            DailyFocus(1, "Design Miami Fair", "south-beach", "Gallery booths and museum-quality design."),
            DailyFocus(2, "Design District", "design-district", "Flagship stores open late."),
            DailyFocus(3, "Wynwood Walls", "wynwood", "Street art meets design."),
            DailyFocus(4, "Satellite Fairs", "south-beach", "NADA, Untitled and private collections."),
            DailyFocus(5, "Closing Night", "design-district", "Final sales and collector dinners."),
        ),
    ),
    EventDefinition(
        id="3-days-of-design",
        name="3 Days of Design",
        short_name="3 Days",
        city="Copenhagen",
        month=6,
        approx_week=2,
        duration_days=3,
        targets=("norrebro", "osterbro", "frederiksberg", "vesterbro"),
        vibe="Scandi chic, open showrooms. Danish design at its source.",
        venue="Citywide showrooms",
        website="https://3daysofdesign.dk",
        daily_focuses=(
            DailyFocus(1, "Brand Showrooms", "osterbro", "The icons open their doors."),
            DailyFocus(2, "Emerging Studios", "norrebro", "Young designers and collectives."),
            DailyFocus(3, "Warehouse Events", "vesterbro", "Installations and parties."),
        ),
    ),
    EventDefinition(
        id="stockholm-design-week",
        name="Stockholm Design Week",
        short_name="SDW",
        city="Stockholm",
        month=2,
        approx_week=1,
        duration_days=5,
        targets=("ostermalm", "sodermalm", "gamla-stan"),
        vibe="Scandinavian modernism meets innovation. The February highlight.",
        venue="Stockholm Furniture Fair & citywide",
        website="https://stockholmdesignweek.com",
        daily_focuses=(
            DailyFocus(1, "Furniture Fair", "ostermalm", "The main event at Stockholmsmassan."),
            DailyFocus(2, "Sodermalm Studios", "sodermalm", "Independent designers in the creative south."),
            DailyFocus(3, "Showroom Walks", "ostermalm", "Design icons at home."),
        ),
    ),
    EventDefinition(
        id="nycxdesign",
        name="NYCxDESIGN",
        short_name="NYCxD",
        city="New York",
        month=5,
        approx_week=2,
        duration_days=10,
        targets=("soho", "chelsea", "tribeca", "williamsburg"),
        vibe="The American design moment. Studios, showrooms and installations.",
        venue="Citywide",
        website="https://nycxdesign.org",
        daily_focuses=(
            DailyFocus(1, "ICFF", "chelsea", "The main trade show at Javits Center."),
            DailyFocus(2, "SoHo Design District", "soho", "Flagship showrooms. Cast-iron design."),
            DailyFocus(3, "Brooklyn Studios", "williamsburg", "The maker movement. Artisan workshops."),
            DailyFocus(4, "WantedDesign", "tribeca", "International and local designers."),
        ),
    ),
)

# ---------------------------------------------------------------------------
# Art fairs
# ---------------------------------------------------------------------------

ART_FAIRS: Tuple[EventDefinition, ...] = (
    EventDefinition(
        id="frieze-london",
        name="Frieze London",
        short_name="Frieze",
        city="London",
        month=10,
        approx_week=2,
        duration_days=5,
        targets=(
            "london-mayfair",
            "london-marylebone",
            "london-chelsea",
            "london-notting-hill",
            "london-kensington",
            "london-hampstead",
        ),
        vibe=(
            "Regent's Park tents, heavy rain, celebrity spotting, VIP preview passes. "
            "Gallery dinners at Sketch and The Wolseley. Cork Street buzzes with satellite shows."
        ),
        venue="Regent's Park",
        website="https://www.frieze.com/fairs/frieze-london",
    ),
    EventDefinition(
        id="art-basel-miami",
        name="Art Basel Miami Beach",
        short_name="Basel Miami",
        city="Miami",
        month=12,
        approx_week=1,
        duration_days=4,
        targets=(
            "miami-south-beach",
            "miami-brickell",
            "miami-design-district",
            "miami-wynwood",
            "tribeca",
            "soho",
            "west-village",
            "chelsea",
            "upper-east-side",
        ),
        vibe=(
            "Traffic jams on the causeway, Convention Center chaos, afterparties at The W and Faena. "
            "Design District pop-ups. The annual NYC-to-Miami migration."
        ),
        venue="Miami Beach Convention Center",
        website="https://www.artbasel.com/miami-beach",
    ),
    EventDefinition(
        id="frieze-los-angeles",
        name="Frieze Los Angeles",
        short_name="Frieze LA",
        city="Los Angeles",
        month=2,
        approx_week=3,
        duration_days=4,
        targets=("la-santa-monica", "la-beverly-hills", "la-west-hollywood", "la-venice"),
        vibe=(
            "Santa Monica Airport hangar vibes. Hollywood agents vs. collectors. "
            "Gallery brunches in West Hollywood."
        ),
        venue="Santa Monica Airport",
        website="https://www.frieze.com/fairs/frieze-los-angeles",
    ),
    EventDefinition(
        id="art-basel-hong-kong",
        name="Art Basel Hong Kong",
        short_name="Basel HK",
        city="Hong Kong",
        month=3,
        approx_week=4,
        duration_days=4,
        targets=("hong-kong-central", "hong-kong-soho", "hong-kong-the-peak"),
        vibe=(
            "Convention Centre scale. The Asian blue-chip market in full force. "
            "Private museum dinners and M+ as the new cultural anchor."
        ),
        venue="Hong Kong Convention and Exhibition Centre",
        website="https://www.artbasel.com/hong-kong",
    ),
    EventDefinition(
        id="art-basel-paris",
        name="Art Basel Paris",
        short_name="Basel Paris",
        city="Paris",
        month=10,
        approx_week=3,
        duration_days=4,
        targets=("paris-7th-arr", "paris-le-marais", "paris-saint-germain", "paris-16th-arr"),
        vibe=(
            "Grand Palais splendor. Chic, intellectual, the new center of the art world. "
            "Rive Gauche gallery walks and dinners at Lipp."
        ),
        venue="Grand Palais",
        website="https://www.artbasel.com/paris",
    ),
)

__all__ = ["CITY_PREFIXES", "ART_FAIR_PREFIXES", "DESIGN_WEEKS", "ART_FAIRS"]
