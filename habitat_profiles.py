"""
habitat_profiles.py — Fixed table of vivarium (habitat) profiles.

Each profile carries the target ranges the scorer compares a plant against,
the substrate types it can host, and whether it contains a water body.
`type_tag` is the value written to a plant's `type` list when the profile
is assigned.
"""

from models import HabitatProfile, Range


OPEN_TERRARIUM = 'open-terrarium'
CLOSED_TERRARIUM = 'closed-terrarium'
PALUDARIUM = 'paludarium'
AERARIUM = 'aerarium'
DESERTERIUM = 'deserterium'
AQUARIUM = 'aquarium'
RIPARIUM = 'riparium'
INDOOR = 'indoor'

TERRARIUMS = (OPEN_TERRARIUM, CLOSED_TERRARIUM)
WATER_BODY_PROFILES = (AQUARIUM, RIPARIUM, PALUDARIUM)


HABITAT_PROFILES = (
    HabitatProfile(
        key=OPEN_TERRARIUM,
        name='Open Terrarium',
        humidity=Range(70, 100, 85),
        light=Range(20, 80, 50),
        air_circulation=Range(40, 60, 50),
        water_needs=Range(40, 100, 70),
        substrates=('moist', 'wet', 'epiphytic'),
        type_tag='terrarium',
    ),
    HabitatProfile(
        key=CLOSED_TERRARIUM,
        name='Closed Terrarium',
        humidity=Range(60, 100, 80),
        light=Range(20, 70, 40),
        air_circulation=Range(0, 30, 20),
        water_needs=Range(40, 100, 70),
        substrates=('moist', 'wet', 'epiphytic'),
        type_tag='terrarium',
    ),
    HabitatProfile(
        key=PALUDARIUM,
        name='Paludarium',
        humidity=Range(70, 100, 90),
        light=Range(20, 100, 60),
        air_circulation=Range(20, 60, 50),
        water_needs=Range(40, 100, 80),
        substrates=('wet', 'aquatic', 'moist'),
        requires_water_body=True,
        water_circulation=Range(10, 30, 20),
        type_tag='paludarium',
    ),
    HabitatProfile(
        key=AERARIUM,
        name='Aerarium',
        humidity=Range(50, 90, 70),
        light=Range(40, 100, 70),
        air_circulation=Range(60, 100, 80),
        water_needs=Range(20, 60, 40),
        substrates=('epiphytic',),
        type_tag='aerarium',
    ),
    HabitatProfile(
        key=DESERTERIUM,
        name='Deserterium',
        humidity=Range(20, 50, 30),
        light=Range(60, 100, 90),
        air_circulation=Range(60, 100, 80),
        water_needs=Range(0, 30, 15),
        substrates=('dry',),
        type_tag='desertarium',
    ),
    HabitatProfile(
        key=AQUARIUM,
        name='Aquarium',
        humidity=Range(100, 100, 100),
        light=Range(20, 70, 50),
        air_circulation=Range(0, 30, 20),
        water_needs=Range(80, 100, 90),
        substrates=('aquatic',),
        requires_water_body=True,
        water_circulation=Range(0, 100, 50),
        type_tag='aquarium',
    ),
    HabitatProfile(
        key=RIPARIUM,
        name='Riparium',
        humidity=Range(70, 100, 85),
        light=Range(20, 70, 50),
        air_circulation=Range(60, 100, 80),
        water_needs=Range(60, 100, 80),
        substrates=('wet', 'aquatic'),
        requires_water_body=True,
        water_circulation=Range(30, 80, 55),
        type_tag='riparium',
    ),
    HabitatProfile(
        key=INDOOR,
        name='Indoor',
        humidity=Range(30, 70, 50),
        light=Range(40, 100, 70),
        air_circulation=Range(60, 100, 80),
        water_needs=Range(20, 60, 40),
        substrates=('moist', 'dry'),
        type_tag='house-plant',
    ),
)

PROFILES_BY_KEY = {profile.key: profile for profile in HABITAT_PROFILES}
PROFILES_BY_NAME = {profile.name: profile for profile in HABITAT_PROFILES}
