"""
Shared data models for the BGG aggregator package.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .config import UNKNOWN_NAME

SortKey = Literal["name", "rating", "rank", "complexity", "playingTime", "owners"]
SortOrder = Literal["asc", "desc"]

# Fields shared by partials and merged games, in output order
GAME_FIELDS = (
    "id",
    "name",
    "thumbnail",
    "image",
    "year_published",
    "min_players",
    "max_players",
    "playing_time",
    "min_play_time",
    "max_play_time",
    "complexity",
    "rating",
    "rank",
    "num_owned",
)

_CAMEL_KEYS = {
    "year_published": "yearPublished",
    "min_players": "minPlayers",
    "max_players": "maxPlayers",
    "playing_time": "playingTime",
    "min_play_time": "minPlayTime",
    "max_play_time": "maxPlayTime",
    "num_owned": "numOwned",
}


@dataclass(frozen=True)
class NormalizedPartial:
    """One game as seen by a single source response, before merging."""
    id: Optional[str]
    name: str = UNKNOWN_NAME
    thumbnail: Optional[str] = None
    image: Optional[str] = None
    year_published: Optional[int] = None
    min_players: Optional[int] = None
    max_players: Optional[int] = None
    playing_time: Optional[int] = None
    min_play_time: Optional[int] = None
    max_play_time: Optional[int] = None
    complexity: Optional[float] = None
    rating: Optional[float] = None
    rank: Optional[int] = None
    num_owned: Optional[int] = None
    owners: Tuple[str, ...] = ()


@dataclass
class GameData:
    """Merged game record, one per BGG id across all requested users."""
    id: str
    name: str
    thumbnail: Optional[str] = None
    image: Optional[str] = None
    year_published: Optional[int] = None
    min_players: Optional[int] = None
    max_players: Optional[int] = None
    playing_time: Optional[int] = None
    min_play_time: Optional[int] = None
    max_play_time: Optional[int] = None
    complexity: Optional[float] = None
    rating: Optional[float] = None
    rank: Optional[int] = None
    num_owned: Optional[int] = None
    owners: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase keys used by the web front end."""
        return {_CAMEL_KEYS.get(key, key): value for key, value in asdict(self).items()}


class FilterState(BaseModel):
    """Filter and sort options chosen by the user."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    player_count: Optional[int] = Field(default=None, alias="playerCount", ge=0)
    min_play_time: Optional[int] = Field(default=None, alias="minPlayTime", ge=0)
    max_play_time: Optional[int] = Field(default=None, alias="maxPlayTime", ge=0)
    min_complexity: Optional[float] = Field(default=None, alias="minComplexity")
    max_complexity: Optional[float] = Field(default=None, alias="maxComplexity")
    min_rating: Optional[float] = Field(default=None, alias="minRating")
    search: Optional[str] = None
    sort_by: SortKey = Field(default="name", alias="sortBy")
    sort_order: SortOrder = Field(default="asc", alias="sortOrder")
