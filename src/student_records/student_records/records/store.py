from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple, TypeVar

from ..attendance.model import AttendanceRecord
from ..common.identifiers import generate_id
from ..common.observable import ObservableCollection
from ..core.constants import ATTENDANCE_KEY, CLASSES_KEY, STUDENTS_KEY
from ..core.enums import StorageMode
from ..core.exceptions import PersistenceError, ValidationError
from ..storage.repository import KeyValueStorage
from ..students.model import Student, StudentClass
from .codec import decode_collection, encode_collection

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RecordStore:
    """Authoritative CRUD over students, classes and attendance records.

    Every mutation rewrites the whole affected collection through ``storage`` and then
    pushes the new snapshot to that collection's subscribers. Not-found and integrity
    failures are reported as ``False``; nothing here raises for them.

    Mutations are serialized by a re-entrant lock held from the read of the current
    snapshot until subscribers have been notified, so the store can be shared by the
    request threads of a Flask server.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        mode: StorageMode = StorageMode.LENIENT,
        id_factory: Callable[[], str] = generate_id,
    ):
        self._storage = storage
        self._mode = StorageMode(mode)
        self._id_factory = id_factory
        self._lock = threading.RLock()

        self._students: ObservableCollection[Student] = ObservableCollection(
            self._load(STUDENTS_KEY, Student.from_dict)
        )
        self._classes: ObservableCollection[StudentClass] = ObservableCollection(
            self._load(CLASSES_KEY, StudentClass.from_dict)
        )
        self._attendance: ObservableCollection[AttendanceRecord] = ObservableCollection(
            self._load(ATTENDANCE_KEY, AttendanceRecord.from_dict)
        )

    # Change streams

    @property
    def students_changes(self) -> ObservableCollection[Student]:
        return self._students

    @property
    def classes_changes(self) -> ObservableCollection[StudentClass]:
        return self._classes

    @property
    def attendance_changes(self) -> ObservableCollection[AttendanceRecord]:
        return self._attendance

    @property
    def mode(self) -> StorageMode:
        return self._mode

    # Students

    def get_students(self) -> Tuple[Student, ...]:
        return self._students.value

    def get_student_by_id(self, student_id: str) -> Optional[Student]:
        return next((s for s in self._students.value if s.id == student_id), None)

    def get_students_by_class(self, class_id: str) -> Tuple[Student, ...]:
        return tuple(s for s in self._students.value if s.class_id == class_id)

    def add_student(self, data: Mapping[str, Any]) -> Student:
        student = Student.from_dict(self._with_new_id(data))
        with self._lock:
            self._commit(STUDENTS_KEY, self._students, self._students.value + (student,))
        return student

    def update_student(self, student_id: str, **fields: Any) -> bool:
        return self._update(STUDENTS_KEY, self._students, Student.from_dict, student_id, fields)

    def delete_student(self, student_id: str) -> bool:
        return self._delete(STUDENTS_KEY, self._students, student_id)

    # Classes

    def get_classes(self) -> Tuple[StudentClass, ...]:
        return self._classes.value

    def get_class_by_id(self, class_id: str) -> Optional[StudentClass]:
        return next((c for c in self._classes.value if c.id == class_id), None)

    def add_class(self, data: Mapping[str, Any]) -> StudentClass:
        student_class = StudentClass.from_dict(self._with_new_id(data))
        with self._lock:
            self._commit(CLASSES_KEY, self._classes, self._classes.value + (student_class,))
        return student_class

    def update_class(self, class_id: str, **fields: Any) -> bool:
        return self._update(CLASSES_KEY, self._classes, StudentClass.from_dict, class_id, fields)

    def delete_class(self, class_id: str) -> bool:
        with self._lock:
            if self.get_students_by_class(class_id):
                logger.info("Refusing to delete class %s: students still reference it", class_id)
                return False
            return self._delete(CLASSES_KEY, self._classes, class_id)

    # Attendance

    def get_attendance_records(self) -> Tuple[AttendanceRecord, ...]:
        return self._attendance.value

    def get_attendance_record_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        return next((a for a in self._attendance.value if a.id == record_id), None)

    def get_attendance_by_class(self, class_id: str) -> Tuple[AttendanceRecord, ...]:
        return tuple(a for a in self._attendance.value if a.class_id == class_id)

    def get_attendance_by_student(self, student_id: str) -> Tuple[AttendanceRecord, ...]:
        return tuple(a for a in self._attendance.value if a.student_id == student_id)

    def add_attendance_record(self, data: Mapping[str, Any]) -> AttendanceRecord:
        return self.add_attendance_records([data])[0]

    def add_attendance_records(self, items: Iterable[Mapping[str, Any]]) -> Tuple[AttendanceRecord, ...]:
        """Append several records with a single write and a single notification."""

        records = tuple(AttendanceRecord.from_dict(self._with_new_id(data)) for data in items)
        if not records:
            return records
        with self._lock:
            self._commit(ATTENDANCE_KEY, self._attendance, self._attendance.value + records)
        return records

    def update_attendance_record(self, record_id: str, **fields: Any) -> bool:
        return self._update(ATTENDANCE_KEY, self._attendance, AttendanceRecord.from_dict, record_id, fields)

    def delete_attendance_record(self, record_id: str) -> bool:
        return self._delete(ATTENDANCE_KEY, self._attendance, record_id)

    # Bulk utilities

    def clear_all_data(self) -> None:
        with self._lock:
            for key, subject in self._subjects().items():
                try:
                    self._storage.delete(key)
                except Exception as e:
                    if self._mode == StorageMode.STRICT:
                        raise PersistenceError(f"Could not clear {key}") from e
                    logger.exception("Error clearing %s from storage", key)
                subject.next(())

    def export_data(self) -> Dict[str, list]:
        return {key: [item.to_dict() for item in subject.value] for key, subject in self._subjects().items()}

    def import_data(self, payload: Mapping[str, Any]) -> None:
        """Replace every collection present in ``payload``.

        All collections are decoded before anything is written, so a bad payload changes nothing.
        """

        factories = {
            STUDENTS_KEY: Student.from_dict,
            CLASSES_KEY: StudentClass.from_dict,
            ATTENDANCE_KEY: AttendanceRecord.from_dict,
        }
        decoded = {}
        for key, factory in factories.items():
            items = payload.get(key)
            if items is None:
                continue
            if not isinstance(items, list):
                raise ValidationError(f"{key} must be a list")
            try:
                decoded[key] = tuple(factory(item) for item in items)
            except (KeyError, TypeError, ValueError) as e:
                raise ValidationError(f"Invalid {key} entry: {e}") from e

        subjects = self._subjects()
        with self._lock:
            for key, items in decoded.items():
                self._commit(key, subjects[key], items)

    # Internals

    def _subjects(self) -> Dict[str, ObservableCollection]:
        return {
            STUDENTS_KEY: self._students,
            CLASSES_KEY: self._classes,
            ATTENDANCE_KEY: self._attendance,
        }

    def _with_new_id(self, data: Mapping[str, Any]) -> dict:
        fields = dict(data)
        fields["id"] = self._id_factory()
        return fields

    def _update(
        self,
        key: str,
        subject: ObservableCollection,
        factory: Callable[[Mapping[str, Any]], Any],
        entity_id: str,
        fields: Mapping[str, Any],
    ) -> bool:
        with self._lock:
            items = subject.value
            index = next((i for i, item in enumerate(items) if item.id == entity_id), None)
            if index is None:
                return False

            merged = {**items[index].to_dict(), **fields, "id": entity_id}
            updated = items[:index] + (factory(merged),) + items[index + 1:]
            self._commit(key, subject, updated)
            return True

    def _delete(self, key: str, subject: ObservableCollection, entity_id: str) -> bool:
        with self._lock:
            items = subject.value
            remaining = tuple(item for item in items if item.id != entity_id)
            if len(remaining) == len(items):
                return False
            self._commit(key, subject, remaining)
            return True

    def _commit(self, key: str, subject: ObservableCollection, items: Tuple[Any, ...]) -> None:
        """Persist the whole collection, then publish it (write-before-notify)."""

        try:
            self._storage.save(key, encode_collection(items))
        except Exception as e:
            if self._mode == StorageMode.STRICT:
                raise PersistenceError(f"Could not save {key}") from e
            logger.exception("Error saving %s to storage", key)
        subject.next(items)

    def _load(self, key: str, factory: Callable[[Mapping[str, Any]], T]) -> Tuple[T, ...]:
        try:
            raw = self._storage.load(key)
            if raw is None:
                return ()
            return decode_collection(raw, factory)
        except Exception as e:
            if self._mode == StorageMode.STRICT:
                raise PersistenceError(f"Could not load {key}") from e
            logger.exception("Error loading %s from storage; starting empty", key)
            return ()
