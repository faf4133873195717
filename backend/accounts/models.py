from django.db import models


class Teacher(models.Model):
    name = models.CharField(max_length=255)
    code = models.CharField(max_length=64, unique=True, help_text='Login code the teacher types in.')

    class Meta:
        db_table = 'teachers'

    def __str__(self) -> str:
        return self.name


class Student(models.Model):
    name = models.CharField(max_length=255)
    class_name = models.CharField(max_length=64, db_column='class')

    class Meta:
        db_table = 'students'
        constraints = [
            models.UniqueConstraint(fields=['name', 'class_name'], name='unique_student_name_class')
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.class_name})"
