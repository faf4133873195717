from django.db import DEFAULT_DB_ALIAS, DatabaseError

from examhall.errors import NotFound, StorageError
from examhall.validation import parse_int
from .models import Choice, Exam


def list_exams_by_teacher(teacher_id, *, using=DEFAULT_DB_ALIAS) -> list:
    teacher_pk = parse_int(teacher_id)
    if teacher_pk is None:
        return []
    try:
        return list(
            Exam.objects.using(using)
            .filter(teacher_id=teacher_pk)
            .order_by('-created_at', '-id')
        )
    except DatabaseError as exc:
        raise StorageError(str(exc)) from exc


def list_exams_for(class_name, subject, month, *, using=DEFAULT_DB_ALIAS) -> list:
    try:
        return list(
            Exam.objects.using(using)
            .filter(class_name=class_name, subject=subject, month=month)
            .order_by('id')
        )
    except DatabaseError as exc:
        raise StorageError(str(exc)) from exc


def get_full_exam(exam_id, *, using=DEFAULT_DB_ALIAS) -> dict:
    """
    Load an exam with its questions and each question's choices.

    Returns {'exam': Exam, 'questions': [{'question': Question, 'choices': [Choice, ...]}, ...]}
    with questions and choices in the order they were authored.
    """
    exam_pk = parse_int(exam_id)
    if exam_pk is None:
        raise NotFound('Exam not found.')
    try:
        exam = Exam.objects.using(using).filter(pk=exam_pk).first()
    except DatabaseError as exc:
        raise StorageError(str(exc)) from exc
    if exam is None:
        raise NotFound('Exam not found.')

    try:
        questions = list(exam.questions.order_by('position'))
        if not questions:
            return {'exam': exam, 'questions': []}
        choices = Choice.objects.using(using).filter(question__in=questions).order_by('question_id', 'position')
        by_question = {question.id: [] for question in questions}
        for choice in choices:
            by_question[choice.question_id].append(choice)
    except DatabaseError as exc:
        raise StorageError(str(exc)) from exc

    return {
        'exam': exam,
        'questions': [
            {'question': question, 'choices': by_question[question.id]}
            for question in questions
        ],
    }
