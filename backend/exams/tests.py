from datetime import timedelta
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase, override_settings

from accounts.models import Student, Teacher
from accounts.services import resolve_student
from examhall.errors import NotFound, StorageError, ValidationError
from .authoring import create_exam
from .catalog import get_full_exam, list_exams_by_teacher, list_exams_for
from .models import Answer, Choice, Exam, Question
from .submissions import submit_answers


def math_questions():
    return [
        {
            'text': '2+2?',
            'score': 5,
            'choices': [
                {'text': '4', 'is_correct': True},
                {'text': '5', 'is_correct': False},
            ],
        },
    ]


class CreateExamTests(TestCase):
    def setUp(self):
        self.teacher = Teacher.objects.create(name='Mona', code='MONA1')

    def test_math_scenario_round_trip(self):
        exam_id = create_exam(self.teacher.id, 'Math', '5A', 'Jan', math_questions())
        full = get_full_exam(exam_id)

        exam = full['exam']
        self.assertEqual(exam.id, exam_id)
        self.assertEqual(exam.teacher_id, self.teacher.id)
        self.assertEqual((exam.subject, exam.class_name, exam.month), ('Math', '5A', 'Jan'))
        self.assertIsNotNone(exam.created_at)

        self.assertEqual(len(full['questions']), 1)
        entry = full['questions'][0]
        self.assertEqual(entry['question'].text, '2+2?')
        self.assertEqual(entry['question'].score, 5)
        self.assertEqual(
            [(choice.text, choice.is_correct) for choice in entry['choices']],
            [('4', True), ('5', False)],
        )

    def test_order_of_questions_and_choices_is_kept(self):
        questions = [
            {
                'text': f'Q{q}',
                'score': q,
                'choices': [{'text': f'Q{q}C{c}', 'is_correct': c == 0} for c in (3, 0, 2, 1)],
            }
            for q in (9, 1, 7, 3, 5)
        ]
        exam_id = create_exam(self.teacher.id, 'Science', '6B', 'Feb', questions)
        full = get_full_exam(exam_id)

        self.assertEqual([entry['question'].text for entry in full['questions']], ['Q9', 'Q1', 'Q7', 'Q3', 'Q5'])
        self.assertEqual([entry['question'].score for entry in full['questions']], [9, 1, 7, 3, 5])
        for entry in full['questions']:
            label = entry['question'].text
            self.assertEqual(
                [choice.text for choice in entry['choices']],
                [f'{label}C3', f'{label}C0', f'{label}C2', f'{label}C1'],
            )
            self.assertEqual([choice.is_correct for choice in entry['choices']], [False, True, False, False])

    def test_zero_questions(self):
        exam_id = create_exam(self.teacher.id, 'Art', '5A', 'Mar', [])
        self.assertEqual(get_full_exam(exam_id)['questions'], [])
        exam_id = create_exam(self.teacher.id, 'Art', '5A', 'Mar')
        self.assertEqual(get_full_exam(exam_id)['questions'], [])

    def test_missing_choices_default_to_empty(self):
        exam_id = create_exam(self.teacher.id, 'Math', '5A', 'Jan', [{'text': 'Essay', 'score': 10}])
        full = get_full_exam(exam_id)
        self.assertEqual(full['questions'][0]['choices'], [])

    def test_missing_subject_creates_nothing(self):
        with self.assertRaises(ValidationError) as ctx:
            create_exam(self.teacher.id, '', '5A', 'Jan', math_questions())
        self.assertEqual(ctx.exception.fields, ['subject'])
        self.assertEqual(Exam.objects.count(), 0)
        self.assertEqual(Question.objects.count(), 0)

    def test_reports_every_missing_field(self):
        with self.assertRaises(ValidationError) as ctx:
            create_exam(None, None, ' ', None)
        self.assertEqual(ctx.exception.fields, ['teacher_id', 'subject', 'class', 'month'])

    def test_unknown_teacher(self):
        for teacher_id in (999999, 'abc'):
            with self.assertRaises(ValidationError) as ctx:
                create_exam(teacher_id, 'Math', '5A', 'Jan')
            self.assertEqual(ctx.exception.fields, ['teacher_id'])
        self.assertEqual(Exam.objects.count(), 0)

    def test_boolean_teacher_id_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            create_exam(True, 'Math', '5A', 'Jan')
        self.assertEqual(ctx.exception.fields, ['teacher_id'])
        self.assertEqual(Exam.objects.count(), 0)

    def test_over_long_values_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            create_exam(self.teacher.id, 'x' * 300, '5A', 'Jan')
        self.assertEqual(ctx.exception.fields, ['subject'])
        with self.assertRaises(ValidationError) as ctx:
            create_exam(self.teacher.id, 'Math', 'x' * 65, 'y' * 33)
        self.assertEqual(ctx.exception.fields, ['class', 'month'])
        self.assertEqual(Exam.objects.count(), 0)

    def test_score_parsing(self):
        exam_id = create_exam(
            self.teacher.id,
            'Math',
            '5A',
            'Jan',
            [{'text': 'a', 'score': '3'}, {'text': 'b', 'score': 4.0}, {'text': 'c'}],
        )
        scores = [entry['question'].score for entry in get_full_exam(exam_id)['questions']]
        self.assertEqual(scores, [3, 4, 0])

    def test_invalid_payload_shapes(self):
        bad_payloads = [
            'not a list',
            ['not an object'],
            [{'text': 'a', 'choices': 'nope'}],
            [{'text': 'a', 'choices': ['nope']}],
            [{'text': 'a', 'score': 'many'}],
            [{'text': 'a', 'score': 1.5}],
            [{'text': 'a', 'score': '--5'}],
            [{'text': 'a', 'score': '\u00b2'}],
            [{'text': 'a', 'score': 10**20}],
            [{'text': 'a', 'score': 2**31}],
        ]
        for questions in bad_payloads:
            with self.assertRaises(ValidationError):
                create_exam(self.teacher.id, 'Math', '5A', 'Jan', questions)
        self.assertEqual(Exam.objects.count(), 0)

    def test_is_correct_coerced_to_bool(self):
        exam_id = create_exam(
            self.teacher.id,
            'Math',
            '5A',
            'Jan',
            [{'text': 'q', 'choices': [{'text': 'a', 'is_correct': 1}, {'text': 'b'}]}],
        )
        choices = get_full_exam(exam_id)['questions'][0]['choices']
        self.assertEqual([choice.is_correct for choice in choices], [True, False])

    def test_storage_failure_rolls_back_whole_exam(self):
        questions = math_questions() + math_questions()
        with mock.patch('django.db.models.query.QuerySet.bulk_create', side_effect=DatabaseError('disk full')):
            with self.assertRaises(StorageError):
                create_exam(self.teacher.id, 'Math', '5A', 'Jan', questions)
        self.assertEqual(Exam.objects.count(), 0)
        self.assertEqual(Question.objects.count(), 0)
        self.assertEqual(Choice.objects.count(), 0)


class CatalogTests(TestCase):
    def setUp(self):
        self.teacher = Teacher.objects.create(name='Mona', code='MONA1')
        self.other_teacher = Teacher.objects.create(name='Ali', code='ALI1')

    def test_list_exams_by_teacher_newest_first(self):
        first = create_exam(self.teacher.id, 'Math', '5A', 'Jan')
        second = create_exam(self.teacher.id, 'Math', '5A', 'Feb')
        third = create_exam(self.teacher.id, 'Science', '5A', 'Feb')
        create_exam(self.other_teacher.id, 'Math', '5A', 'Jan')
        Exam.objects.filter(id=first).update(created_at=Exam.objects.get(id=third).created_at + timedelta(days=1))

        exams = list_exams_by_teacher(self.teacher.id)
        self.assertEqual([exam.id for exam in exams], [first, third, second])

    def test_list_exams_by_unknown_teacher(self):
        self.assertEqual(list_exams_by_teacher(999999), [])
        self.assertEqual(list_exams_by_teacher('abc'), [])

    def test_list_exams_for_exact_match(self):
        wanted = create_exam(self.teacher.id, 'Math', '5A', 'Jan')
        also_wanted = create_exam(self.other_teacher.id, 'Math', '5A', 'Jan')
        create_exam(self.teacher.id, 'Math', '5A', 'Feb')
        create_exam(self.teacher.id, 'Mathematics', '5A', 'Jan')
        create_exam(self.teacher.id, 'Math', '5B', 'Jan')

        exams = list_exams_for('5A', 'Math', 'Jan')
        self.assertEqual([exam.id for exam in exams], [wanted, also_wanted])
        self.assertEqual(list_exams_for('5A', 'math', 'Jan'), [])
        self.assertEqual(list_exams_for(None, 'Math', 'Jan'), [])

    def test_get_full_exam_unknown(self):
        for exam_id in (999999, 'abc', None):
            with self.assertRaises(NotFound):
                get_full_exam(exam_id)

    def test_fractional_ids_do_not_match(self):
        exam_id = create_exam(self.teacher.id, 'Math', '5A', 'Jan')
        with self.assertRaises(NotFound):
            get_full_exam(exam_id + 0.5)
        self.assertEqual(get_full_exam(float(exam_id))['exam'].id, exam_id)
        self.assertEqual(list_exams_by_teacher(self.teacher.id + 0.5), [])
        self.assertEqual(list_exams_by_teacher(True), [])

    def test_question_without_choices_among_others(self):
        exam_id = create_exam(
            self.teacher.id,
            'Math',
            '5A',
            'Jan',
            [
                {'text': 'first', 'choices': [{'text': 'x', 'is_correct': True}]},
                {'text': 'second'},
                {'text': 'third', 'choices': [{'text': 'y'}, {'text': 'z'}]},
            ],
        )
        full = get_full_exam(exam_id)
        self.assertEqual([len(entry['choices']) for entry in full['questions']], [1, 0, 2])
        for entry in full['questions']:
            for choice in entry['choices']:
                self.assertEqual(choice.question_id, entry['question'].id)


class SubmitAnswersTests(TestCase):
    def setUp(self):
        self.teacher = Teacher.objects.create(name='Mona', code='MONA1')
        self.exam_id = create_exam(
            self.teacher.id,
            'Math',
            '5A',
            'Jan',
            math_questions() + [{'text': '3+3?', 'score': 5, 'choices': [{'text': '6', 'is_correct': True}]}],
        )
        full = get_full_exam(self.exam_id)
        self.question = full['questions'][0]['question']
        self.choice = full['questions'][0]['choices'][0]
        self.wrong_choice = full['questions'][0]['choices'][1]
        self.second_question = full['questions'][1]['question']
        self.second_choice = full['questions'][1]['choices'][0]

    def test_sara_scenario(self):
        recorded = submit_answers(
            'Sara', '5A', self.exam_id, [{'question_id': self.question.id, 'choice_id': self.choice.id}]
        )
        self.assertEqual(len(recorded), 1)
        answer = Answer.objects.get()
        self.assertEqual(answer.exam_id, self.exam_id)
        self.assertEqual(answer.question_id, self.question.id)
        self.assertEqual(answer.choice_id, self.choice.id)
        self.assertEqual(resolve_student('Sara', '5A'), answer.student_id)

    def test_records_every_answer(self):
        submit_answers(
            'Sara',
            '5A',
            str(self.exam_id),
            [
                {'question_id': self.question.id, 'choice_id': self.wrong_choice.id},
                {'question_id': str(self.second_question.id), 'choice_id': str(self.second_choice.id)},
            ],
        )
        self.assertEqual(
            list(Answer.objects.order_by('id').values_list('question_id', 'choice_id')),
            [(self.question.id, self.wrong_choice.id), (self.second_question.id, self.second_choice.id)],
        )

    def test_empty_answers_still_resolves_student(self):
        self.assertEqual(submit_answers('Sara', '5A', self.exam_id, []), [])
        self.assertEqual(submit_answers('Omar', '5A', self.exam_id), [])
        self.assertEqual(Answer.objects.count(), 0)
        self.assertEqual(Student.objects.count(), 2)

    def test_required_fields(self):
        with self.assertRaises(ValidationError) as ctx:
            submit_answers('', '5A', None, [])
        self.assertEqual(ctx.exception.fields, ['student_name', 'exam_id'])

    def test_unknown_exam_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            submit_answers('Sara', '5A', 999999, [{'question_id': self.question.id, 'choice_id': self.choice.id}])
        self.assertEqual(ctx.exception.fields, ['exam_id'])
        self.assertEqual(Answer.objects.count(), 0)
        self.assertEqual(Student.objects.count(), 0)

    def test_question_from_other_exam_rejected(self):
        other_exam = create_exam(self.teacher.id, 'Math', '5B', 'Jan', math_questions())
        other = get_full_exam(other_exam)['questions'][0]
        with self.assertRaises(ValidationError) as ctx:
            submit_answers(
                'Sara',
                '5A',
                self.exam_id,
                [
                    {'question_id': self.question.id, 'choice_id': self.choice.id},
                    {'question_id': other['question'].id, 'choice_id': other['choices'][0].id},
                ],
            )
        self.assertEqual(ctx.exception.fields, ['question_id'])
        self.assertEqual(Answer.objects.count(), 0)
        self.assertEqual(Student.objects.count(), 0)

    def test_choice_of_another_question_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            submit_answers(
                'Sara', '5A', self.exam_id, [{'question_id': self.question.id, 'choice_id': self.second_choice.id}]
            )
        self.assertEqual(ctx.exception.fields, ['choice_id'])
        self.assertEqual(Answer.objects.count(), 0)

    def test_malformed_answers(self):
        for answers in ('nope', ['nope'], [{'question_id': self.question.id}], [{'question_id': 'x', 'choice_id': 1}]):
            with self.assertRaises(ValidationError):
                submit_answers('Sara', '5A', self.exam_id, answers)
        self.assertEqual(Answer.objects.count(), 0)

    def test_fractional_ids_rejected(self):
        entry = [{'question_id': self.question.id, 'choice_id': self.choice.id}]
        with self.assertRaises(ValidationError) as ctx:
            submit_answers('Sara', '5A', self.exam_id + 0.7, entry)
        self.assertEqual(ctx.exception.fields, ['exam_id'])
        for answers in (
            [{'question_id': self.question.id + 0.9, 'choice_id': self.choice.id}],
            [{'question_id': self.question.id, 'choice_id': self.choice.id + 0.5}],
            [{'question_id': True, 'choice_id': self.choice.id}],
        ):
            with self.assertRaises(ValidationError):
                submit_answers('Sara', '5A', self.exam_id, answers)
        self.assertEqual(Answer.objects.count(), 0)
        self.assertEqual(Student.objects.count(), 0)

    def test_over_long_student_rejected(self):
        entry = [{'question_id': self.question.id, 'choice_id': self.choice.id}]
        with self.assertRaises(ValidationError) as ctx:
            submit_answers('Sara', 'x' * 65, self.exam_id, entry)
        self.assertEqual(ctx.exception.fields, ['student_class'])
        self.assertEqual(Answer.objects.count(), 0)

    def test_resubmission_appends_by_default(self):
        entry = [{'question_id': self.question.id, 'choice_id': self.choice.id}]
        submit_answers('Sara', '5A', self.exam_id, entry)
        submit_answers('Sara', '5A', self.exam_id, entry)
        self.assertEqual(Answer.objects.count(), 2)
        self.assertEqual(Student.objects.count(), 1)

    @override_settings(EXAMS_RESUBMISSION_POLICY='replace')
    def test_resubmission_replace(self):
        submit_answers('Sara', '5A', self.exam_id, [{'question_id': self.question.id, 'choice_id': self.choice.id}])
        submit_answers(
            'Sara', '5A', self.exam_id, [{'question_id': self.question.id, 'choice_id': self.wrong_choice.id}]
        )
        self.assertEqual(list(Answer.objects.values_list('choice_id', flat=True)), [self.wrong_choice.id])

    @override_settings(EXAMS_RESUBMISSION_POLICY='reject')
    def test_resubmission_reject(self):
        entry = [{'question_id': self.question.id, 'choice_id': self.choice.id}]
        submit_answers('Sara', '5A', self.exam_id, entry)
        with self.assertRaises(ValidationError):
            submit_answers('Sara', '5A', self.exam_id, entry)
        self.assertEqual(Answer.objects.count(), 1)
        submit_answers('Omar', '5A', self.exam_id, entry)
        self.assertEqual(Answer.objects.count(), 2)

    def test_storage_failure_leaves_no_rows(self):
        entry = [{'question_id': self.question.id, 'choice_id': self.choice.id}]
        with mock.patch('django.db.models.query.QuerySet.bulk_create', side_effect=DatabaseError('disk full')):
            with self.assertRaises(StorageError):
                submit_answers('Sara', '5A', self.exam_id, entry)
        self.assertEqual(Answer.objects.count(), 0)
        self.assertEqual(Student.objects.count(), 0)
