from typing import Iterable, List, Optional

MIN_COURSES = 4
MAX_COURSES = 10


class CourseListError(ValueError):
    """A course could not be added; the message is meant for the student."""


class CourseList:
    """Ordered, duplicate-free list of completed undergraduate courses (4 to 10 entries)."""

    def __init__(self, courses: Optional[Iterable[str]] = None):
        self._courses: List[str] = []
        for course in courses or []:
            self.add(course)

    def add(self, name: str) -> str:
        if len(self._courses) >= MAX_COURSES:
            raise CourseListError(f"Maximum {MAX_COURSES} courses allowed")

        name = (name or "").strip()
        if not name:
            raise CourseListError("Course name cannot be empty")

        if name in self._courses:
            raise CourseListError("This course has already been added")

        self._courses.append(name)
        return name

    def remove(self, index: int) -> str:
        if not 0 <= index < len(self._courses):
            raise IndexError(f"No course at position {index}")
        return self._courses.pop(index)

    def clear(self):
        self._courses.clear()

    @property
    def courses(self) -> List[str]:
        return list(self._courses)

    @property
    def is_full(self) -> bool:
        return len(self._courses) >= MAX_COURSES

    @property
    def is_complete(self) -> bool:
        return len(self._courses) >= MIN_COURSES

    @property
    def remaining_required(self) -> int:
        return max(0, MIN_COURSES - len(self._courses))

    def summary(self) -> str:
        """e.g. '3 courses added (minimum 1 more required)'"""
        count = len(self._courses)
        text = f"{count} course{'' if count == 1 else 's'} added"
        if self.remaining_required:
            text += f" (minimum {self.remaining_required} more required)"
        return text

    def __len__(self) -> int:
        return len(self._courses)

    def __iter__(self):
        return iter(self._courses)
