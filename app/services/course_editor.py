# app/services/course_editor.py
"""
In-memory course editor used by the educator console.

An educator builds the chapter -> lecture tree through typed commands and then
submits the whole course as a single document. Nothing is persisted until
``submit`` succeeds.
"""

import logging
import uuid
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from app.schemas.course import Chapter, Lecture, LectureDetails
from app.utils.api_client import CourseApiClient, EditorContext

logger = logging.getLogger(__name__)


def new_id() -> str:
    return uuid.uuid4().hex


# ==================== Commands ====================


@dataclass(frozen=True)
class AddChapter:
    title: str


@dataclass(frozen=True)
class RemoveChapter:
    chapter_id: str


@dataclass(frozen=True)
class ToggleChapter:
    chapter_id: str


@dataclass(frozen=True)
class AddLecture:
    chapter_id: str
    details: LectureDetails


@dataclass(frozen=True)
class RemoveLecture:
    chapter_id: str
    index: int


EditorCommand = Union[AddChapter, RemoveChapter, ToggleChapter, AddLecture, RemoveLecture]


# ==================== Editor state ====================


@dataclass
class EditorChapter:
    chapter_id: str
    title: str
    order: int
    lectures: List[Lecture] = field(default_factory=list)
    collapsed: bool = False  # presentation only, never submitted

    def to_chapter(self) -> Chapter:
        return Chapter(
            chapter_id=self.chapter_id,
            title=self.title,
            order=self.order,
            lectures=list(self.lectures),
        )


@dataclass
class SubmitResult:
    success: bool
    message: str
    course: Optional[Dict[str, Any]] = None


class CourseEditor:
    def __init__(self, context: EditorContext, client: Optional[CourseApiClient] = None):
        self.context = context
        self.client = client or CourseApiClient(context)
        self.reset()

    def reset(self) -> None:
        self.title = ""
        self.description = ""
        self.price: Decimal = Decimal("0")
        self.discount = 0
        self.thumbnail = ""
        self.notes_url = ""
        self.chapters: List[EditorChapter] = []

    def find_chapter(self, chapter_id: str) -> Optional[EditorChapter]:
        return next((c for c in self.chapters if c.chapter_id == chapter_id), None)

    # ---- command dispatch ----

    def apply(self, command: EditorCommand) -> Optional[str]:
        """Apply one command; returns the id of a created chapter or lecture."""
        if isinstance(command, AddChapter):
            return self._add_chapter(command)
        if isinstance(command, RemoveChapter):
            self.chapters = [
                c for c in self.chapters if c.chapter_id != command.chapter_id
            ]
            return None
        if isinstance(command, ToggleChapter):
            chapter = self.find_chapter(command.chapter_id)
            if chapter:
                chapter.collapsed = not chapter.collapsed
            return None
        if isinstance(command, AddLecture):
            return self._add_lecture(command)
        if isinstance(command, RemoveLecture):
            chapter = self.find_chapter(command.chapter_id)
            if chapter and 0 <= command.index < len(chapter.lectures):
                chapter.lectures = [
                    lecture
                    for i, lecture in enumerate(chapter.lectures)
                    if i != command.index
                ]
            return None
        raise TypeError(f"Unknown editor command: {command!r}")

    def _add_chapter(self, command: AddChapter) -> Optional[str]:
        if not command.title.strip():
            return None

        order = max((c.order for c in self.chapters), default=0) + 1
        chapter = EditorChapter(chapter_id=new_id(), title=command.title, order=order)
        self.chapters.append(chapter)
        return chapter.chapter_id

    def _add_lecture(self, command: AddLecture) -> Optional[str]:
        chapter = self.find_chapter(command.chapter_id)
        if chapter is None:
            return None

        order = max((lecture.order for lecture in chapter.lectures), default=0) + 1
        lecture = Lecture(
            **command.details.model_dump(), lecture_id=new_id(), order=order
        )
        chapter.lectures.append(lecture)
        return lecture.lecture_id

    # ---- convenience wrappers ----

    def add_chapter(self, title: str) -> Optional[str]:
        return self.apply(AddChapter(title=title))

    def remove_chapter(self, chapter_id: str) -> None:
        self.apply(RemoveChapter(chapter_id=chapter_id))

    def toggle_chapter(self, chapter_id: str) -> None:
        self.apply(ToggleChapter(chapter_id=chapter_id))

    def add_lecture(self, chapter_id: str, details: LectureDetails) -> Optional[str]:
        return self.apply(AddLecture(chapter_id=chapter_id, details=details))

    def remove_lecture(self, chapter_id: str, index: int) -> None:
        self.apply(RemoveLecture(chapter_id=chapter_id, index=index))

    # ---- submission ----

    def build_document(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "price": str(Decimal(str(self.price)).quantize(Decimal("0.01"))),
            "discount": int(self.discount),
            "thumbnail": self.thumbnail,
            "notes_url": self.notes_url or None,
            "content": [
                c.to_chapter().model_dump(mode="json") for c in self.chapters
            ],
        }

    async def submit(self) -> SubmitResult:
        if not self.thumbnail:
            return SubmitResult(success=False, message="Thumbnail URL is required")

        try:
            document = self.build_document()
        except (ValidationError, InvalidOperation) as e:
            logger.warning(f"Course document is invalid: {e}")
            return SubmitResult(success=False, message="Course details are invalid")

        data = await self.client.create_course(document)
        if not data.get("success"):
            message = data.get("message") or "Course could not be created"
            logger.warning(f"Course submission failed: {message}")
            return SubmitResult(success=False, message=message)

        self.reset()
        return SubmitResult(
            success=True,
            message=data.get("message", "Course added successfully"),
            course=data.get("course"),
        )
