from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Category name of a feed.
Category = str
# Tag derived from an article's title and description.
Characteristic = str


class CamelModel(BaseModel):
    """
    Base model serialized with camelCase keys.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json(self, indent: Optional[int] = None) -> str:
        """
        Serialize the model with its camelCase aliases.
        """
        return self.model_dump_json(by_alias=True, indent=indent)

    def to_dict(self) -> dict:
        """
        Dump the model as a JSON-compatible dict with its camelCase aliases.
        """
        return self.model_dump(mode="json", by_alias=True)

### Input

class FeedDescriptor(BaseModel):
    """
    A configured RSS source.
    """
    name: str # The display name of the feed, unique per run.
    url: str # The URL of the RSS feed.
    category: Category # The category every article of the feed falls into.

    model_config = ConfigDict(
        frozen=True,
    )

class RawItem(CamelModel):
    """
    Item as returned by the conversion service.
    """
    title: Optional[str] = None # The raw title, may contain markup.
    description: Optional[str] = None # The raw description, may contain markup.
    link: Optional[str] = None # The URL of the item.
    pub_date: Optional[str] = None # The publication date as sent by the service.

    model_config = ConfigDict(
        extra="ignore",
    )

class ConversionResponse(BaseModel):
    """
    Top level body of a conversion service response.
    """
    status: str # "ok" or "error".
    message: Optional[str] = None # Error message when status is "error".
    items: List[RawItem] = [] # The feed items.

    model_config = ConfigDict(
        extra="ignore",
    )

### Article

class Article(CamelModel):
    """
    Normalized article record.
    """
    title: str # The cleaned title.
    link: str # The URL of the article, the deduplication key.
    description: str # The cleaned description truncated to 200 characters.
    full_description: str # The cleaned description.
    pub_date: Optional[str] = None # The publication date as sent by the service.
    source: str # The name of the feed the article came from.
    category: Category # The category of the feed the article came from.
    reading_time: int = Field(ge=1, le=10) # Estimated reading time in minutes.
    characteristics: List[Characteristic] = [] # Tags derived from the content.
    content_length: int # Length of the cleaned description.

### Stats

class TrendingTopic(CamelModel):
    """
    A frequent word across titles and descriptions.
    """
    word: str
    count: int

class Stats(CamelModel):
    """
    Statistics derived from the article set.
    """
    category_counts: Dict[Category, int] = {} # Number of articles per category.
    trending_topics: List[TrendingTopic] = [] # Most frequent words, at most ten.
    fresh_content: int = 0 # Number of articles published less than two hours ago.

### Snapshot

class SourceSummary(CamelModel):
    """
    Article count contributed by one feed.
    """
    name: str
    category: Category
    count: int

class SnapshotSummary(Stats):
    """
    Summary of a snapshot, with the stats flattened in.
    """
    total: int # Number of articles in the snapshot.
    timestamp: str # ISO-8601 UTC time the snapshot was built.
    fetch_duration: int # Milliseconds spent fetching and processing.
    sources: List[SourceSummary] = [] # Per-feed article counts in feed order.

class Snapshot(CamelModel):
    """
    The single aggregated record written per run.
    """
    items: List[Article] = [] # Articles, newest first.
    summary: SnapshotSummary
