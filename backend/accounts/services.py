import logging

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, DatabaseError, transaction

from examhall.errors import NotFound, StorageError
from examhall.validation import check_lengths, require
from .models import Student, Teacher

logger = logging.getLogger(__name__)


def resolve_student(name, class_name, *, using=DEFAULT_DB_ALIAS) -> int:
    """
    Return the id of the student identified by (name, class_name), creating
    the row on first use. The (name, class) uniqueness constraint makes this
    an insert-or-fetch: a racing insert that loses re-reads the winner's row.
    """
    require(student_name=name, student_class=class_name)
    check_lengths(Student, {'name': 'student_name', 'class_name': 'student_class'}, name=name, class_name=class_name)
    try:
        with transaction.atomic(using=using):
            student, created = Student.objects.using(using).get_or_create(name=name, class_name=class_name)
    except DatabaseError as exc:
        logger.exception('Could not resolve student %r in class %r', name, class_name)
        raise StorageError(str(exc)) from exc
    if created:
        logger.info('Created student %s for %r in class %r', student.id, name, class_name)
    return student.id


def lookup_teacher_by_code(code, *, using=DEFAULT_DB_ALIAS) -> Teacher:
    if not isinstance(code, str) or not code.strip():
        raise NotFound('Wrong code.')
    try:
        return Teacher.objects.using(using).get(code=code)
    except Teacher.DoesNotExist:
        raise NotFound('Wrong code.') from None
    except DatabaseError as exc:
        raise StorageError(str(exc)) from exc


def ensure_default_teacher(teacher_model=Teacher, *, using=DEFAULT_DB_ALIAS):
    """Seed the configured default teacher when no teacher exists yet."""
    manager = teacher_model._default_manager.db_manager(using)
    if manager.exists():
        return None
    teacher = manager.create(
        name=settings.EXAMHALL_DEFAULT_TEACHER_NAME,
        code=settings.EXAMHALL_DEFAULT_TEACHER_CODE,
    )
    logger.info('Seeded default teacher %r', teacher.name)
    return teacher
