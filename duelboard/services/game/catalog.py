"""Demo card catalog used to seed a two-seat game."""

from duelboard.schemas.game_engine import (
    BoardSide,
    Card,
    GameSettings,
    Owner,
    PlayerSetup,
    Rarity,
)

# (name, attack, defense, level, rarity, description)
_SOUTH_DECK = [
    ("Ember Drake", 1800, 1200, 4, Rarity.COMMON, "A young drake that breathes cinders."),
    ("Granite Sentinel", 1000, 2100, 4, Rarity.COMMON, "Stands watch until the mountain falls."),
    ("Tide Caller", 1400, 1300, 3, Rarity.SUPER, "Summons the sea to the shore."),
    ("Thorn Archer", 1500, 900, 3, Rarity.COMMON, "Fires arrows grown from the forest floor."),
    ("Dusk Wraith", 1700, 800, 4, Rarity.ULTRA, "Only visible in the hour before night."),
    ("Ironclad Golem", 2200, 2000, 6, Rarity.SECRET, "Forged from a single block of iron."),
    ("Sky Lancer", 1600, 1100, 4, Rarity.COMMON, "Dives from the clouds lance first."),
    ("Mire Toad", 600, 1500, 2, Rarity.COMMON, "Hides in the marsh and waits."),
    ("Star Oracle", 1200, 1800, 5, Rarity.STARLIGHT, "Reads the future in falling stars."),
    ("Crimson Knight", 2000, 1600, 5, Rarity.GOLD, "Sworn to defend the southern gate."),
]

_NORTH_DECK = [
    ("Frost Wolf", 1600, 1000, 4, Rarity.COMMON, "Hunts in packs across the tundra."),
    ("Shadow Monk", 1300, 1700, 4, Rarity.SUPER, "Strikes from the dark without a sound."),
    ("Bog Serpent", 1500, 1200, 3, Rarity.COMMON, "Coils beneath the still water."),
    ("Storm Harpy", 1700, 900, 4, Rarity.COMMON, "Rides the leading edge of the storm."),
    ("Bone Colossus", 2300, 1800, 7, Rarity.ULTIMATE, "Assembled from a fallen army."),
    ("Cinder Imp", 900, 600, 2, Rarity.COMMON, "Small, quick and always on fire."),
    ("Glacier Titan", 1900, 2400, 6, Rarity.ULTRA, "Moves one step a century."),
    ("Ink Phantom", 1100, 1100, 3, Rarity.GHOST, "Drawn into being by a cursed quill."),
    ("Moon Priestess", 1000, 2000, 4, Rarity.SECRET, "Heals by the light of the full moon."),
    ("Obsidian Warlord", 2400, 1500, 7, Rarity.GOLD, "Rules the northern wastes."),
]


def _build_deck(entries: list[tuple], first_id: int, owner: Owner) -> list[Card]:
    return [
        Card(
            id=first_id + offset,
            name=name,
            owner=owner,
            attack=attack,
            defense=defense,
            level=level,
            rarity=rarity,
            description=description,
        )
        for offset, (name, attack, defense, level, rarity, description) in enumerate(entries)
    ]


def demo_game_settings(
    board_size: int = 11,
    initial_hand_size: int = 5,
    tile_seed: int | None = None,
) -> GameSettings:
    """Two seats facing each other, south moving first.

    Card ids are unique across both decks.
    """
    return GameSettings(
        board_size=board_size,
        initial_hand_size=initial_hand_size,
        tile_seed=tile_seed,
        players=[
            PlayerSetup(
                name="Seto",
                clan="Dragon",
                owner=Owner.PLAYER,
                board_side=BoardSide.SOUTH,
                first_move=True,
                deck=_build_deck(_SOUTH_DECK, 1, Owner.PLAYER),
            ),
            PlayerSetup(
                name="Pegasus",
                clan="Rose",
                owner=Owner.OPPONENT,
                board_side=BoardSide.NORTH,
                deck=_build_deck(_NORTH_DECK, 1 + len(_SOUTH_DECK), Owner.OPPONENT),
            ),
        ],
    )
