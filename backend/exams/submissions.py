import logging
from collections.abc import Mapping

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, DatabaseError, transaction

from accounts.services import resolve_student
from examhall.errors import StorageError, ValidationError
from examhall.validation import parse_int, require
from .models import Answer, Choice, Exam

logger = logging.getLogger(__name__)

RESUBMISSION_APPEND = 'append'
RESUBMISSION_REPLACE = 'replace'
RESUBMISSION_REJECT = 'reject'
RESUBMISSION_POLICIES = {RESUBMISSION_APPEND, RESUBMISSION_REPLACE, RESUBMISSION_REJECT}


def get_resubmission_policy():
    policy = getattr(settings, 'EXAMS_RESUBMISSION_POLICY', RESUBMISSION_APPEND)
    if policy not in RESUBMISSION_POLICIES:
        raise ValueError(f'Unknown EXAMS_RESUBMISSION_POLICY {policy!r}')
    return policy


def _get_exam(exam_id, using):
    exam_pk = parse_int(exam_id)
    exam = Exam.objects.using(using).filter(pk=exam_pk).first() if exam_pk is not None else None
    if exam is None:
        raise ValidationError(f'Unknown exam {exam_id}.', fields=['exam_id'])
    return exam


def _match_answers(exam, answers, using):
    """
    Pair every {question_id, choice_id} entry with the exam's Choice rows,
    rejecting entries whose question is not part of the exam or whose choice
    is not an option of that question.
    """
    if answers is None:
        return []
    if not isinstance(answers, (list, tuple)):
        raise ValidationError('answers must be a list.', fields=['answers'])

    wanted = []
    for index, entry in enumerate(answers):
        if not isinstance(entry, Mapping):
            raise ValidationError(f'Answer {index + 1} must be an object.', fields=['answers'])
        question_id = parse_int(entry.get('question_id'))
        choice_id = parse_int(entry.get('choice_id'))
        if question_id is None or choice_id is None:
            raise ValidationError(
                f'Answer {index + 1} needs question_id and choice_id.',
                fields=['question_id', 'choice_id'],
            )
        wanted.append((question_id, choice_id))
    if not wanted:
        return []

    choices = {
        choice.id: choice
        for choice in Choice.objects.using(using)
        .filter(question__exam=exam, id__in={choice_id for _, choice_id in wanted})
        .select_related('question')
    }
    question_ids = set(exam.questions.values_list('id', flat=True))
    matched = []
    for index, (question_id, choice_id) in enumerate(wanted):
        if question_id not in question_ids:
            raise ValidationError(
                f'Question {question_id} does not belong to exam {exam.id}.',
                fields=['question_id'],
            )
        choice = choices.get(choice_id)
        if choice is None or choice.question_id != question_id:
            raise ValidationError(
                f'Choice {choice_id} is not an option of question {question_id}.',
                fields=['choice_id'],
            )
        matched.append(choice)
    return matched


def submit_answers(student_name, student_class, exam_id, answers=None, *, using=DEFAULT_DB_ALIAS) -> list:
    """
    Record a student's answers for an exam.

    The student is resolved (or created) from name and class, and every answer
    row is written in the same transaction. A rejected or failed submission
    leaves nothing behind, not even a freshly created student.
    """
    require(student_name=student_name, student_class=student_class, exam_id=exam_id)
    policy = get_resubmission_policy()

    try:
        with transaction.atomic(using=using):
            exam = _get_exam(exam_id, using)
            matched = _match_answers(exam, answers, using)
            student_id = resolve_student(student_name, student_class, using=using)

            previous = Answer.objects.using(using).filter(student_id=student_id, exam=exam)
            if policy == RESUBMISSION_REJECT and previous.exists():
                raise ValidationError(
                    'You have already submitted this exam.',
                    fields=['student_name', 'student_class', 'exam_id'],
                )
            if policy == RESUBMISSION_REPLACE:
                previous.delete()

            recorded = Answer.objects.using(using).bulk_create(
                [
                    Answer(student_id=student_id, exam=exam, question_id=choice.question_id, choice=choice)
                    for choice in matched
                ]
            )
    except DatabaseError as exc:
        logger.exception('Recording answers of %r (%s) for exam %s failed; rolled back', student_name, student_class, exam_id)
        raise StorageError(str(exc)) from exc

    logger.info('Recorded %d answers of student %s for exam %s', len(recorded), student_id, exam.id)
    return recorded
