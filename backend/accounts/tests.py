from unittest import mock

from django.conf import settings
from django.db import DatabaseError, IntegrityError
from django.db.models.query import QuerySet
from django.test import TestCase, TransactionTestCase, override_settings

from examhall.errors import NotFound, StorageError, ValidationError
from .models import Student, Teacher
from .services import ensure_default_teacher, lookup_teacher_by_code, resolve_student


class TeacherModelTests(TestCase):
    def test_default_teacher_seeded_by_migration(self):
        seeded = Teacher.objects.filter(code=settings.EXAMHALL_DEFAULT_TEACHER_CODE)
        self.assertEqual(seeded.count(), 1)
        self.assertEqual(seeded.get().name, settings.EXAMHALL_DEFAULT_TEACHER_NAME)

    def test_code_is_unique(self):
        Teacher.objects.create(name='Mona', code='MONA1')
        with self.assertRaises(IntegrityError):
            Teacher.objects.create(name='Other Mona', code='MONA1')

    def test_str(self):
        teacher = Teacher.objects.create(name='Mona', code='MONA1')
        self.assertEqual(str(teacher), 'Mona')


class EnsureDefaultTeacherTests(TestCase):
    def test_no_seed_when_teachers_exist(self):
        self.assertIsNone(ensure_default_teacher())
        self.assertEqual(Teacher.objects.count(), 1)

    @override_settings(EXAMHALL_DEFAULT_TEACHER_NAME='Seed', EXAMHALL_DEFAULT_TEACHER_CODE='SEED01')
    def test_seeds_exactly_one_teacher_into_empty_table(self):
        Teacher.objects.all().delete()
        teacher = ensure_default_teacher()
        self.assertEqual(teacher.code, 'SEED01')
        self.assertIsNone(ensure_default_teacher())
        self.assertEqual(Teacher.objects.count(), 1)


class LookupTeacherByCodeTests(TestCase):
    def setUp(self):
        self.teacher = Teacher.objects.create(name='Mona', code='MONA1')

    def test_found(self):
        self.assertEqual(lookup_teacher_by_code('MONA1'), self.teacher)

    def test_unknown_code(self):
        with self.assertRaises(NotFound):
            lookup_teacher_by_code('nonexistent')

    def test_blank_or_missing_code(self):
        for code in ('', '   ', None):
            with self.assertRaises(NotFound):
                lookup_teacher_by_code(code)

    def test_match_is_exact(self):
        with self.assertRaises(NotFound):
            lookup_teacher_by_code('mona1')


class ResolveStudentTests(TestCase):
    def test_creates_student_once(self):
        first = resolve_student('Sara', '5A')
        second = resolve_student('Sara', '5A')
        self.assertEqual(first, second)
        self.assertEqual(Student.objects.filter(name='Sara', class_name='5A').count(), 1)

    def test_same_name_other_class_is_another_student(self):
        self.assertNotEqual(resolve_student('Sara', '5A'), resolve_student('Sara', '5B'))

    def test_reuses_existing_row(self):
        student = Student.objects.create(name='Omar', class_name='6C')
        self.assertEqual(resolve_student('Omar', '6C'), student.id)

    def test_requires_name_and_class(self):
        with self.assertRaises(ValidationError) as ctx:
            resolve_student('', None)
        self.assertEqual(ctx.exception.fields, ['student_name', 'student_class'])
        self.assertEqual(Student.objects.count(), 0)

    def test_unique_name_class_constraint(self):
        Student.objects.create(name='Sara', class_name='5A')
        with self.assertRaises(IntegrityError):
            Student.objects.create(name='Sara', class_name='5A')

    def test_storage_failure_is_reported(self):
        with mock.patch('django.db.models.query.QuerySet.get_or_create', side_effect=DatabaseError('locked')):
            with self.assertRaises(StorageError):
                resolve_student('Sara', '5A')

    def test_over_long_name_or_class_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            resolve_student('x' * 256, '5A')
        self.assertEqual(ctx.exception.fields, ['student_name'])
        with self.assertRaises(ValidationError) as ctx:
            resolve_student('Sara', 'x' * 65)
        self.assertEqual(ctx.exception.fields, ['student_class'])
        self.assertEqual(Student.objects.count(), 0)


class ResolveStudentRaceTests(TransactionTestCase):
    serialized_rollback = True

    def test_losing_insert_returns_winner_row(self):
        original_get = QuerySet.get
        rival = {}

        def get_after_rival_insert(queryset, *args, **kwargs):
            if queryset.model is Student and not rival:
                rival['id'] = Student.objects.using(queryset.db).create(name='Sara', class_name='5A').id
                raise Student.DoesNotExist
            return original_get(queryset, *args, **kwargs)

        with mock.patch.object(QuerySet, 'get', get_after_rival_insert):
            student_id = resolve_student('Sara', '5A')

        self.assertEqual(student_id, rival['id'])
        self.assertEqual(Student.objects.filter(name='Sara', class_name='5A').count(), 1)
