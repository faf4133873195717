from django.db import models

from accounts.models import Student, Teacher


class Exam(models.Model):
    teacher = models.ForeignKey(Teacher, on_delete=models.CASCADE, related_name='exams')
    subject = models.CharField(max_length=255)
    class_name = models.CharField(max_length=64, db_column='class')
    month = models.CharField(max_length=32)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'exams'
        indexes = [
            models.Index(fields=['class_name', 'subject', 'month'], name='exam_class_subject_month'),
        ]

    def __str__(self) -> str:
        return f"{self.subject} {self.class_name} ({self.month})"


class Question(models.Model):
    exam = models.ForeignKey(Exam, on_delete=models.CASCADE, related_name='questions')
    text = models.TextField(db_column='question_text', blank=True)
    score = models.IntegerField(default=0)
    position = models.PositiveIntegerField()

    class Meta:
        db_table = 'questions'
        ordering = ['position']
        constraints = [
            models.UniqueConstraint(fields=['exam', 'position'], name='unique_exam_question_position')
        ]

    def __str__(self) -> str:
        return f"{self.exam}: Q{self.position + 1}"


class Choice(models.Model):
    question = models.ForeignKey(Question, on_delete=models.CASCADE, related_name='choices')
    text = models.TextField(db_column='choice_text', blank=True)
    is_correct = models.BooleanField(default=False)
    position = models.PositiveIntegerField()

    class Meta:
        db_table = 'choices'
        ordering = ['position']
        constraints = [
            models.UniqueConstraint(fields=['question', 'position'], name='unique_question_choice_position')
        ]

    def __str__(self) -> str:
        return self.text


class Answer(models.Model):
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='answers')
    exam = models.ForeignKey(Exam, on_delete=models.CASCADE, related_name='answers')
    question = models.ForeignKey(Question, on_delete=models.CASCADE, related_name='answers')
    choice = models.ForeignKey(Choice, on_delete=models.CASCADE, related_name='answers')
    submitted_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'answers'

    def __str__(self) -> str:
        return f"{self.student} - {self.question}: {self.choice}"
