"""Goldfish Engine - Card Names

Names of the cards the engine special-cases. Effects and land rules are
matched against these constants instead of string literals scattered
through the phase handlers.
"""

# =============================================================================
# Creatures
# =============================================================================

SPIDER_MAN = "Superior Spider-Man"
BRINGER = "Bringer of the Last Gift"
TERROR = "Terror of the Peaks"
KIORA = "Kiora, the Rising Tide"
OVERLORD = "Overlord of the Balemurk"
TOWN_GREETER = "Town Greeter"
SPEAKER = "Formidable Speaker"
ARDYN = "Ardyn, the Usurper"

# =============================================================================
# Spells
# =============================================================================

CACHE_GRAB = "Cache Grab"
DREDGERS_INSIGHT = "Dredger's Insight"
ANALYZE_THE_POLLEN = "Analyze the Pollen"
AWAKEN_THE_HONORED_DEAD = "Awaken the Honored Dead"

# =============================================================================
# Lands
# =============================================================================

FOREST = "Forest"
ISLAND = "Island"
SWAMP = "Swamp"
WATERY_GRAVE = "Watery Grave"
OVERGROWN_TOMB = "Overgrown Tomb"
BREEDING_POOL = "Breeding Pool"
UNDERCITY_SEWERS = "Undercity Sewers"
UNDERGROUND_MORTUARY = "Underground Mortuary"
HEDGE_MAZE = "Hedge Maze"
CAVERN_OF_SOULS = "Cavern of Souls"
WASTEWOOD_VERGE = "Wastewood Verge"
GLOOMLAKE_VERGE = "Gloomlake Verge"
MULTIVERSAL_PASSAGE = "Multiversal Passage"
STARTING_TOWN = "Starting Town"
DARKSLICK_SHORES = "Darkslick Shores"

# Lands that turn on the black half of each Verge
WASTEWOOD_ENABLERS = frozenset({
    SWAMP, FOREST, WATERY_GRAVE, UNDERGROUND_MORTUARY, UNDERCITY_SEWERS,
})
GLOOMLAKE_ENABLERS = frozenset({
    ISLAND, SWAMP, WATERY_GRAVE, UNDERCITY_SEWERS,
})

# =============================================================================
# Groups
# =============================================================================

# Reanimation payload that must stay out of the library
COMBO_PIECES = frozenset({BRINGER, TERROR})

# Cards that fill the graveyard on their own
MILL_ENABLERS = frozenset({
    "Stitcher's Supplier",
    "Teachings of the Kirin",
    TOWN_GREETER,
    OVERLORD,
    KIORA,
    CACHE_GRAB,
    DREDGERS_INSIGHT,
    AWAKEN_THE_HONORED_DEAD,
})

# Cheap spells cast before the land drop to dig for a land
LAND_FINDERS = (CACHE_GRAB, DREDGERS_INSIGHT, TOWN_GREETER)

BLUE_LANDS = frozenset({WATERY_GRAVE, UNDERCITY_SEWERS, GLOOMLAKE_VERGE, ISLAND})
