import logging
from collections.abc import Mapping

from django.db import DEFAULT_DB_ALIAS, DatabaseError, transaction

from accounts.models import Teacher
from examhall.errors import StorageError, ValidationError
from examhall.validation import INT32_BOUNDS, check_lengths, parse_int, require
from .models import Choice, Exam, Question

logger = logging.getLogger(__name__)


def _as_list(value, label):
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f'{label} must be a list.', fields=[label])
    return list(value)


def _clean_score(value, index):
    if value is None or value == '':
        return 0
    score = parse_int(value, INT32_BOUNDS)
    if score is None:
        raise ValidationError(f'Question {index + 1} has an invalid score.', fields=['score'])
    return score


def normalize_questions(questions):
    """
    Turn the incoming question payload into plain entries of
    {'text', 'score', 'choices': [{'text', 'is_correct'}]} in input order.
    """
    entries = []
    for index, question in enumerate(_as_list(questions, 'questions')):
        if not isinstance(question, Mapping):
            raise ValidationError(f'Question {index + 1} must be an object.', fields=['questions'])
        choices = []
        for choice_index, choice in enumerate(_as_list(question.get('choices'), 'choices')):
            if not isinstance(choice, Mapping):
                raise ValidationError(
                    f'Choice {choice_index + 1} of question {index + 1} must be an object.',
                    fields=['choices'],
                )
            choices.append({'text': choice.get('text') or '', 'is_correct': bool(choice.get('is_correct'))})
        entries.append(
            {
                'text': question.get('text') or '',
                'score': _clean_score(question.get('score'), index),
                'choices': choices,
            }
        )
    return entries


def _get_teacher(teacher_id, using):
    teacher_pk = parse_int(teacher_id)
    try:
        teacher = Teacher.objects.using(using).filter(pk=teacher_pk).first() if teacher_pk is not None else None
    except DatabaseError as exc:
        raise StorageError(str(exc)) from exc
    if teacher is None:
        raise ValidationError(f'Unknown teacher {teacher_id}.', fields=['teacher_id'])
    return teacher


def create_exam(teacher_id, subject, class_name, month, questions=None, *, using=DEFAULT_DB_ALIAS) -> int:
    """
    Create an exam together with its questions and their choices.

    Everything is written in one transaction, so either the whole tree exists
    afterwards or nothing does. Questions and choices keep the order they were
    given in through their position column.
    """
    require(teacher_id=teacher_id, subject=subject, **{'class': class_name}, month=month)
    check_lengths(Exam, {'class_name': 'class'}, subject=subject, class_name=class_name, month=month)
    entries = normalize_questions(questions)
    teacher = _get_teacher(teacher_id, using)

    try:
        with transaction.atomic(using=using):
            exam = Exam.objects.using(using).create(
                teacher=teacher,
                subject=subject,
                class_name=class_name,
                month=month,
            )
            for position, entry in enumerate(entries):
                question = Question.objects.using(using).create(
                    exam=exam,
                    text=entry['text'],
                    score=entry['score'],
                    position=position,
                )
                Choice.objects.using(using).bulk_create(
                    [
                        Choice(
                            question=question,
                            text=choice['text'],
                            is_correct=choice['is_correct'],
                            position=choice_position,
                        )
                        for choice_position, choice in enumerate(entry['choices'])
                    ]
                )
    except DatabaseError as exc:
        logger.exception('Creating %s exam for class %s failed; rolled back', subject, class_name)
        raise StorageError(str(exc)) from exc

    logger.info('Created exam %s (%s, %s, %s) with %d questions', exam.id, subject, class_name, month, len(entries))
    return exam.id
