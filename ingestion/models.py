"""
Document Models

Records flowing through the ingestion pipeline, from the uploaded bytes
to the Document aggregate handed to the document store.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .statistics import TextStats

SUPPORTED_FORMATS = ("pdf", "txt")


@dataclass(frozen=True)
class RawDocument:
    """An uploaded file, consumed once by extraction."""
    content: bytes
    format: str  # 'pdf' or 'txt'
    filename: str

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class ExtractedText:
    """Text obtained from a file extractor."""
    text: str
    page_count: int
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Section:
    """A contiguous span of a document: a detected chapter or a size-based chunk."""
    id: int
    title: str
    content: str
    start_index: int
    end_index: int
    word_count: int
    character_count: int

    def to_dict(self) -> Dict:
        """Convert section to dictionary for storage."""
        return {
            'id': self.id,
            'title': self.title,
            'content': self.content,
            'startIndex': self.start_index,
            'endIndex': self.end_index,
            'wordCount': self.word_count,
            'characterCount': self.character_count,
        }


@dataclass(frozen=True)
class Sentiment:
    """Overall tone of a document."""
    sentiment: str = "neutral"  # 'positive', 'negative' or 'neutral'
    confidence: float = 0.5

    def to_dict(self) -> Dict:
        return {'sentiment': self.sentiment, 'confidence': self.confidence}


@dataclass
class ReadingProgress:
    """Reader position, stored as a sub-record of the document."""
    current_page: int = 1
    current_chapter: int = 0
    current_position: int = 0
    current_character_index: int = 0
    last_read_date: Optional[str] = None
    is_completed: bool = False
    completion_percentage: int = 0
    reading_time: int = 0  # minutes
    bookmarks: List[Dict] = field(default_factory=list)
    notes: List[Dict] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'currentPage': self.current_page,
            'currentChapter': self.current_chapter,
            'currentPosition': self.current_position,
            'currentCharacterIndex': self.current_character_index,
            'lastReadDate': self.last_read_date,
            'isCompleted': self.is_completed,
            'completionPercentage': self.completion_percentage,
            'readingTime': self.reading_time,
            'bookmarks': list(self.bookmarks),
            'notes': list(self.notes),
        }


@dataclass
class Document:
    """Aggregate produced by the ingestion pipeline."""
    title: str
    author: str
    description: str
    original_file_name: str
    file_type: str
    file_size: int
    extracted_text: str
    summary: str
    summary_provenance: str
    chapters: List[Section]
    keywords: List[str]
    stats: TextStats
    sentiment: Sentiment
    total_pages: int
    metadata: Dict[str, Any] = field(default_factory=dict)
    reading_progress: ReadingProgress = field(default_factory=ReadingProgress)
    status: str = "active"
    is_public: bool = False
    upload_date: str = field(default_factory=lambda: datetime.now().isoformat())
    id: Optional[str] = None

    @property
    def tags(self) -> List[str]:
        return self.keywords[:5]

    def to_dict(self) -> Dict:
        """Convert the document to the camelCase shape persisted by stores."""
        return {
            'id': self.id,
            'title': self.title,
            'author': self.author,
            'description': self.description,
            'originalFileName': self.original_file_name,
            'fileType': self.file_type,
            'fileSize': self.file_size,
            'extractedText': self.extracted_text,
            'summary': self.summary,
            'summaryProvenance': self.summary_provenance,
            'chapters': [chapter.to_dict() for chapter in self.chapters],
            'keywords': list(self.keywords),
            'tags': self.tags,
            'stats': self.stats.to_dict(),
            'totalPages': self.total_pages,
            'wordCount': self.stats.word_count,
            'characterCount': self.stats.character_count,
            'readingTimeMinutes': self.stats.reading_time_minutes,
            'metadata': dict(self.metadata),
            'sentiment': self.sentiment.to_dict(),
            'uploadDate': self.upload_date,
            'createdAt': self.upload_date,
            'updatedAt': self.upload_date,
            'readingProgress': self.reading_progress.to_dict(),
            'status': self.status,
            'isPublic': self.is_public,
        }
