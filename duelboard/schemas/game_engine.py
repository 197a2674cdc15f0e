from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field


# Board coordinates
class Position(BaseModel):
    x: int
    y: int
    z: float = 0.0  # Rendering offset only, never compared by game logic

    def same_square(self, other: "Position | Cursor") -> bool:
        return self.x == other.x and self.y == other.y


class Cursor(BaseModel):
    x: int
    y: int


# Piece identity
class Owner(str, Enum):
    PLAYER = "player"
    OPPONENT = "opponent"


class PieceKind(str, Enum):
    CARD = "card"
    PLAYER = "player"


class PieceRef(BaseModel):
    """Kind-qualified piece identity. Ids are only unique within a kind."""

    kind: PieceKind
    id: int

    @property
    def key(self) -> str:
        return f"{self.kind.value}-{self.id}"


class Rarity(str, Enum):
    COMMON = "common"
    SECRET = "secret"
    GHOST = "ghost"
    SUPER = "super"
    ULTRA = "ultra"
    ULTIMATE = "ultimate"
    STARLIGHT = "starlight"
    GOLD = "gold"


class BoardSide(str, Enum):
    NORTH = "N"
    SOUTH = "S"
    EAST = "E"
    WEST = "W"


# Pieces
class Card(BaseModel):
    kind: Literal["card"] = "card"
    id: int
    name: str
    position: Position = Field(default_factory=lambda: Position(x=0, y=0))
    owner: Owner
    attack: int = 0
    defense: int = 0
    level: int = 1
    description: str = ""
    rarity: Rarity = Rarity.COMMON
    is_face_down: bool = True
    is_defense_mode: bool = False

    @property
    def ref(self) -> PieceRef:
        return PieceRef(kind=PieceKind(self.kind), id=self.id)


class Player(BaseModel):
    """The leader piece of a seat, together with its card zones."""

    kind: Literal["player"] = "player"
    id: int
    name: str
    clan: str = ""
    position: Position
    owner: Owner
    board_side: BoardSide
    first_move: bool = False
    all_cards: list[Card] = []
    deck: list[int] = []
    hand: list[int] = []
    graveyard: list[int] = []
    cards_in_play: list[int] = []

    @property
    def ref(self) -> PieceRef:
        return PieceRef(kind=PieceKind(self.kind), id=self.id)


Piece = Annotated[Card | Player, Field(discriminator="kind")]


# Terrain
class TerrainType(str, Enum):
    SOGEN = "sogen"
    YAMI = "yami"
    LABYRINTH = "labyrinth"
    NORMAL = "normal"
    UMI = "umi"
    CRUSH = "crush"
    MOUNTAIN = "mountain"
    WASTELAND = "wasteland"
    FOREST = "forest"
    TOON = "toon"


class Terrain(BaseModel):
    type: TerrainType
    name: str


class Tile(BaseModel):
    terrain: Terrain
    position: Position


# Turn tracking
class TurnState(BaseModel):
    turn_owner_index: int = 0
    acted_piece_ids: list[str] = []  # Composite keys like "card-1" / "player-1"


# Interaction machines
class SummonPhase(str, Enum):
    TARGET = "target"
    CARD = "card"
    CONFIRM = "confirm"


class IdleState(BaseModel):
    mode: Literal["idle"] = "idle"


class StagingState(BaseModel):
    """Snapshot of a piece taken when it was selected for action."""

    mode: Literal["staging"] = "staging"
    piece: PieceRef
    original_position: Position
    original_is_face_down: bool | None = None  # Cards only
    original_is_defense_mode: bool | None = None  # Cards only
    has_moved: bool = False
    has_flipped: bool = False
    has_changed_position: bool = False  # Attack/defense stance changed

    @property
    def has_changes(self) -> bool:
        return self.has_moved or self.has_flipped or self.has_changed_position


class SummoningState(BaseModel):
    mode: Literal["summoning"] = "summoning"
    phase: SummonPhase = SummonPhase.TARGET
    target_tile: Position | None = None
    selected_card_id: int | None = None
    player_index: int


Interaction = Annotated[
    IdleState | StagingState | SummoningState,
    Field(discriminator="mode"),
]


class DetailsView(str, Enum):
    CARD = "card"
    PLAYER = "player"
    HAND_CARD = "hand_card"


# Game state
class GameState(BaseModel):
    """Authoritative game state.

    Staging and summoning share the single `interaction` slot so they can
    never be live at the same time.
    """

    board_size: int = 11
    cards: list[Card] = []
    players: list[Player] = []
    tiles: list[Tile] = []
    turn_state: TurnState = Field(default_factory=TurnState)
    interaction: Interaction = Field(default_factory=IdleState)
    selected_piece: PieceRef | None = None
    selected_tile: Tile | None = None
    cursor: Cursor = Field(default_factory=lambda: Cursor(x=0, y=-5))
    show_hand: bool = False
    hand_selected_index: int = -1  # -1 when not navigating the hand
    details_view: DetailsView | None = None
    event_seq: int = 0  # Next sequence number for events

    @property
    def staging(self) -> StagingState | None:
        return self.interaction if isinstance(self.interaction, StagingState) else None

    @property
    def summoning(self) -> SummoningState | None:
        return self.interaction if isinstance(self.interaction, SummoningState) else None

    @property
    def is_idle(self) -> bool:
        return isinstance(self.interaction, IdleState)


# Seeding input
class PlayerSetup(BaseModel):
    name: str
    clan: str = ""
    owner: Owner
    board_side: BoardSide
    first_move: bool = False
    deck: list[Card]


class GameSettings(BaseModel):
    players: list[PlayerSetup]
    board_size: int = 11
    initial_hand_size: int = 5
    tile_seed: int | None = None


# Input preferences
class KeyBindings(BaseModel):
    select: str = "k"
    cancel: list[str] = ["l", "Escape"]
    play_card: str = "j"
    view_details: str = "i"
    flip_card: str = "o"
    change_position: str = "u"
    cursor_up: str = "w"
    cursor_down: str = "s"
    cursor_left: str = "a"
    cursor_right: str = "d"


# Outbound snapshot
class ReadModel(BaseModel):
    """Everything a view needs to draw one seat's screen."""

    turn_state: TurnState
    staging_state: StagingState | None = None
    summoning_state: SummoningState | None = None
    selected_tile_piece: Piece | None = None
    selected_tile: Tile | None = None
    cursor_position: Cursor
    cards: list[Card] = []
    players: list[Player] = []
    tiles: list[Tile] = []
    hand_cards: list[Card] = []
    show_hand: bool = False
    hand_selected_index: int = -1
    details_view: DetailsView | None = None
    legal_moves: list[Cursor] = []
    legal_summon_targets: list[Cursor] = []
    event_seq: int = 0
