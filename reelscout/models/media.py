"""Media models combining primary catalog data with secondary enrichment."""

from typing import Generic, List, Optional, TypeVar
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MediaType(str, Enum):
    """Kind of catalog record."""

    MOVIE = "movie"
    TV = "tv"


class Genre(BaseModel):
    id: int
    name: str


class EnrichmentFields(BaseModel):
    """Secondary-provider fields; zero values until an enrichment is merged."""

    imdb_rating: str = ""
    rotten_tomatoes: str = ""
    rated: str = ""
    plot: str = ""
    director: str = ""
    writer: str = ""
    actors: str = ""
    language: str = ""
    country: str = ""
    awards: str = ""
    imdb_id: str = ""

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data):
        # Providers send null for absent values; those fall back to the field default
        if not isinstance(data, dict):
            return data
        return {
            key: value
            for key, value in data.items()
            if value is not None
            or key not in cls.model_fields
            or cls.model_fields[key].is_required()
            or cls.model_fields[key].default is None
        }


class Movie(EnrichmentFields):
    """A movie from the primary provider, possibly enriched.

    ``id`` is None only for records produced by the secondary-provider
    search fallback, which has no primary identifier.
    """

    id: Optional[int] = None
    title: str
    overview: str = ""
    release_date: Optional[str] = None
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    vote_average: float = 0.0
    vote_count: int = 0
    popularity: float = 0.0
    genre_ids: List[int] = []
    genres: List[Genre] = []
    runtime: Optional[int] = None

    @property
    def release_year(self) -> str:
        return self.release_date[:4] if self.release_date and len(self.release_date) >= 4 else ""


class TVShow(EnrichmentFields):
    """A TV show from the primary provider, possibly enriched."""

    id: int
    name: str
    overview: str = ""
    first_air_date: Optional[str] = None
    last_air_date: Optional[str] = None
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    vote_average: float = 0.0
    vote_count: int = 0
    popularity: float = 0.0
    genre_ids: List[int] = []
    genres: List[Genre] = []
    number_of_seasons: int = 0
    number_of_episodes: int = 0

    @property
    def release_year(self) -> str:
        if self.first_air_date and len(self.first_air_date) >= 4:
            return self.first_air_date[:4]
        return ""


MediaT = TypeVar("MediaT", Movie, TVShow)


class PagedResults(BaseModel, Generic[MediaT]):
    """Paginated result envelope shared by search, trending and discover."""

    page: int
    results: List[MediaT] = []
    total_pages: int = 0
    total_results: int = 0


class OMDBRating(BaseModel):
    source: str = Field(alias="Source")
    value: str = Field(alias="Value")


class OMDBTitle(BaseModel):
    """A full title record from the secondary provider."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field("", alias="Title")
    year: str = Field("", alias="Year")
    rated: str = Field("", alias="Rated")
    released: str = Field("", alias="Released")
    runtime: str = Field("", alias="Runtime")
    genre: str = Field("", alias="Genre")
    director: str = Field("", alias="Director")
    writer: str = Field("", alias="Writer")
    actors: str = Field("", alias="Actors")
    plot: str = Field("", alias="Plot")
    language: str = Field("", alias="Language")
    country: str = Field("", alias="Country")
    awards: str = Field("", alias="Awards")
    poster: str = Field("", alias="Poster")
    ratings: List[OMDBRating] = Field([], alias="Ratings")
    metascore: str = Field("", alias="Metascore")
    imdb_rating: str = Field("", alias="imdbRating")
    imdb_votes: str = Field("", alias="imdbVotes")
    imdb_id: str = Field("", alias="imdbID")
    type: str = Field("", alias="Type")
    total_seasons: str = Field("", alias="totalSeasons")

    def rotten_tomatoes(self) -> str:
        for rating in self.ratings:
            if rating.source == "Rotten Tomatoes":
                return rating.value
        return ""


class OMDBSearchHit(BaseModel):
    title: str = Field("", alias="Title")
    year: str = Field("", alias="Year")
    imdb_id: str = Field("", alias="imdbID")
    type: str = Field("", alias="Type")
    poster: str = Field("", alias="Poster")


class OMDBSearchResults(BaseModel):
    search: List[OMDBSearchHit] = Field([], alias="Search")
    total_results: str = Field("0", alias="totalResults")


class Enrichment(EnrichmentFields):
    """Overlay of secondary-provider data applied by :func:`merge_enrichment`."""

    runtime_minutes: Optional[int] = None

    @classmethod
    def from_omdb(cls, record: OMDBTitle) -> "Enrichment":
        return cls(
            imdb_rating=record.imdb_rating,
            rotten_tomatoes=record.rotten_tomatoes(),
            rated=record.rated,
            plot=record.plot,
            director=record.director,
            writer=record.writer,
            actors=record.actors,
            language=record.language,
            country=record.country,
            awards=record.awards,
            imdb_id=record.imdb_id,
            runtime_minutes=parse_runtime(record.runtime),
        )


def parse_runtime(value: str) -> Optional[int]:
    """Parse a free-text "142 min" runtime; "N/A" and garbage yield None."""
    if not value or value == "N/A":
        return None
    try:
        return int(value.replace(" min", "").strip())
    except ValueError:
        return None


def merge_enrichment(record: MediaT, enrichment: Enrichment) -> MediaT:
    """Return a copy of ``record`` with the enrichment fields applied."""
    update = enrichment.model_dump(include=set(EnrichmentFields.model_fields))
    if isinstance(record, Movie) and enrichment.runtime_minutes is not None:
        update["runtime"] = enrichment.runtime_minutes
    return record.model_copy(update=update)


class WatchProvider(BaseModel):
    provider_id: int
    provider_name: str
    logo_path: Optional[str] = None
    display_priority: int = 0


class WatchProviderRegion(BaseModel):
    link: str = ""
    flatrate: List[WatchProvider] = []
    buy: List[WatchProvider] = []
    rent: List[WatchProvider] = []


class WatchProviders(BaseModel):
    id: int
    results: dict[str, WatchProviderRegion] = {}


class YouTubeVideo(BaseModel):
    video_id: str
    title: str
    description: str = ""
    thumbnail: str = ""
    channel_title: str = ""
    published_at: str = ""
